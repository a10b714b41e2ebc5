#!/usr/bin/env python3
"""
CLI tool for STIG family recommendations and STIG catalog maintenance
Provides command-line access to the recommendation engine, the STIG catalog,
STIG document parsing, the local STIG library and baseline selection
"""
import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from srtm.config import get_settings
from srtm.constants.nist_baselines import get_baseline_controls
from srtm.exceptions import SrtmError
from srtm.repositories import StigCatalogRepository
from srtm.services.categorization import get_overall_impact, get_recommended_baseline, get_security_objective_impacts
from srtm.services.recommendation import StigFamilyRecommendationEngine, get_scoring_weights
from srtm.services.stig import LocalStigLibrary, import_stig_file
from srtm.services.workflow import read_project_file

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for CLI runs"""
    logging.basicConfig(level=(level or get_settings().log_level).upper(), format=LOG_FORMAT)


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date (expected YYYY-MM-DD): {value}")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid count (expected an integer): {value}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"Count must be at least 1: {value}")
    return number


def _build_engine(args) -> StigFamilyRecommendationEngine:
    profile = args.profile or get_settings().scoring_profile
    return StigFamilyRecommendationEngine(weights=get_scoring_weights(profile))


def recommend(args) -> int:
    """Recommend STIG families for a workflow or SRTM project file"""
    project = read_project_file(args.input_file)
    engine = _build_engine(args)
    recommendations = engine.get_stig_family_recommendations(project.requirements, project.design_elements)

    if args.limit is not None:
        recommendations = recommendations[: args.limit]

    if args.format == "json":
        print(json.dumps([rec.to_dict() for rec in recommendations], indent=2))
        return 0

    if not recommendations:
        print("No STIG families matched the requirements and design elements.")
        return 0

    print("\nSTIG FAMILY RECOMMENDATIONS")
    print("=" * 80)
    print(f"Profile: {engine.weights.profile}")
    print(f"{'Rank':<5} {'STIG Family':<45} {'Score':>6} {'Conf':>5}  Priority")
    print("-" * 80)
    for rank, rec in enumerate(recommendations, 1):
        confidence = "-" if rec.confidence_score is None else str(rec.confidence_score)
        print(
            f"{rank:<5} {rec.stig_family.name[:45]:<45} {rec.relevance_score:>6g} {confidence:>5}  "
            f"{rec.implementation_priority}"
        )
        if args.verbose:
            for reason in rec.reasoning:
                print(f"        - {reason}")

    return 0


def effort(args) -> int:
    """Estimate implementation effort for the recommended STIG families"""
    project = read_project_file(args.input_file)
    engine = _build_engine(args)
    recommendations = engine.get_stig_family_recommendations(project.requirements, project.design_elements)
    estimate = engine.get_implementation_effort(recommendations)

    if args.format == "json":
        print(json.dumps(estimate.to_dict(), indent=2))
        return 0

    counts = estimate.priority_counts
    print("\nIMPLEMENTATION EFFORT")
    print("=" * 40)
    print(f"STIG families:       {len(recommendations)}")
    print(f"Total requirements:  {estimate.total_requirements}")
    print(f"Estimated hours:     {estimate.estimated_hours}")
    print(f"Estimated days:      {estimate.estimated_days}")
    print(f"Critical/High/Medium/Low: {counts.critical}/{counts.high}/{counts.medium}/{counts.low}")
    return 0


def catalog_status(args) -> int:
    """Show catalog health and date-based update checks"""
    repository = StigCatalogRepository()
    today = _parse_date(args.today)
    status = repository.get_stig_database_status(today)
    checks = repository.check_for_updates(today)

    if args.format == "json":
        payload = {
            "status": status.model_dump(by_alias=True),
            "updates": [check.model_dump(by_alias=True) for check in checks],
        }
        print(json.dumps(payload, indent=2))
        return 0

    print("\nSTIG CATALOG STATUS")
    print("=" * 60)
    print(f"Health score:       {status.health_score}")
    print(f"STIG families:      {status.total_stig_families}")
    print(f"Validated:          {status.validated_families}")
    print(f"Outdated:           {status.outdated_families}")
    print(f"Last validated:     {status.last_validated}")
    print(f"Next review due:    {status.next_review_due}")

    if checks:
        print(f"\nUPDATE CHECKS ({len(checks)}):")
        print("-" * 60)
        for check in checks:
            print(f"  [{check.severity:<6}] {check.stig_id}: {check.update_notes}")
    return 0


def catalog_export(args) -> int:
    """Export the catalog to a JSON backup"""
    backup = StigCatalogRepository().export_stig_database()
    if args.output_file:
        Path(args.output_file).write_text(backup, encoding="utf-8")
        print(f"STIG catalog exported to: {args.output_file}")
    else:
        print(backup)
    return 0


def catalog_import(args) -> int:
    """Validate and import a catalog JSON backup"""
    repository = StigCatalogRepository()
    outcome = repository.import_stig_database(Path(args.input_file).read_text(encoding="utf-8"))
    print(outcome.message)
    if outcome.success and args.output_file:
        Path(args.output_file).write_text(repository.export_stig_database(), encoding="utf-8")
        print(f"Imported catalog written to: {args.output_file}")
    return 0 if outcome.success else 1


def parse_stig(args) -> int:
    """Parse a STIG document (XCCDF XML, stigviewer JSON or CSV)"""
    result = import_stig_file(args.input_file, stig_id=args.stig_id)

    if args.format == "json":
        print(result.model_dump_json(by_alias=True, indent=2))
        return 0

    print(f"\n{result.stig_name}")
    print("=" * 80)
    print(f"STIG id: {result.stig_id}  Version: {result.version}  Released: {result.release_date}")
    print(f"Requirements: {result.total_requirements}")
    print("-" * 80)
    for requirement in result.requirements[: args.max_display]:
        print(f"  {requirement.vuln_id:<12} {requirement.severity:<7} {requirement.title[:58]}")
    remaining = result.total_requirements - args.max_display
    if remaining > 0:
        print(f"  ... and {remaining} more")
    return 0


def local_stigs(args) -> int:
    """List the STIGs of the local library"""
    library = LocalStigLibrary(args.library_dir)

    if args.stats:
        print(library.get_local_stig_stats().model_dump_json(by_alias=True, indent=2))
        return 0

    stigs = library.list_local_stigs()
    if not stigs:
        print(f"No STIGs found in {library.get_stig_directory()}")
        return 0

    print(f"\nLOCAL STIG LIBRARY ({len(stigs)} STIGs)")
    print("=" * 80)
    for stig in stigs:
        print(f"  {stig.name[:45]:<45} {stig.version:<10} {stig.format or '-':<4} {stig.stig_id}")
    return 0


def baseline(args) -> int:
    """Show the FIPS 199 impact and NIST SP 800-53B baseline of a system"""
    project = read_project_file(args.input_file)
    categorizations = project.system_categorizations
    objectives = get_security_objective_impacts(categorizations)
    recommended = get_recommended_baseline(categorizations)

    print("\nSYSTEM CATEGORIZATION")
    print("=" * 40)
    print(f"Information types: {len(categorizations)}")
    for objective, level in objectives.items():
        print(f"  {objective.capitalize():<16} {level}")
    print(f"Overall impact:    {get_overall_impact(categorizations)}")
    print(f"Baseline:          {recommended}")

    if args.list_controls:
        controls = get_baseline_controls(recommended)
        print(f"\n{recommended.upper()} BASELINE CONTROLS ({len(controls)}):")
        print(", ".join(controls))
    return 0


COMMANDS = {
    "recommend": recommend,
    "effort": effort,
    "catalog-status": catalog_status,
    "catalog-export": catalog_export,
    "catalog-import": catalog_import,
    "parse-stig": parse_stig,
    "local-stigs": local_stigs,
    "baseline": baseline,
}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser"""
    parser = argparse.ArgumentParser(
        prog="srtm-stig",
        description="STIG family recommendations and STIG catalog maintenance",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Recommend STIG families for a workflow export
  srtm-stig recommend workflow.json --verbose

  # Use the legacy scoring profile and JSON output
  srtm-stig recommend project.json --profile legacy --format json

  # Check the catalog for outdated STIG releases
  srtm-stig catalog-status --today 2026-01-15

  # Parse a DISA XCCDF benchmark
  srtm-stig parse-stig U_PostgreSQL_9-x_STIG_V2R1_Manual-xccdf.xml
        """,
    )
    parser.add_argument("--log-level", help="Logging level (defaults to SRTM_LOG_LEVEL)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    for name, help_text in (
        ("recommend", "Recommend STIG families"),
        ("effort", "Estimate implementation effort"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("input_file", help="Workflow or SRTM project JSON file")
        sub.add_argument("--profile", choices=["validated", "legacy"], help="Scoring weights profile")
        sub.add_argument("--format", choices=["table", "json"], default="table", help="Output format")
        if name == "recommend":
            sub.add_argument("--limit", type=_positive_int, help="Show only the top N recommendations")
            sub.add_argument("--verbose", action="store_true", help="Show reasoning for each recommendation")

    status_parser = subparsers.add_parser("catalog-status", help="Show STIG catalog health")
    status_parser.add_argument("--today", help="Evaluate dates as of YYYY-MM-DD")
    status_parser.add_argument("--format", choices=["table", "json"], default="table", help="Output format")

    export_parser = subparsers.add_parser("catalog-export", help="Export the STIG catalog to JSON")
    export_parser.add_argument("--output-file", help="Write the backup to this file instead of stdout")

    import_parser = subparsers.add_parser("catalog-import", help="Validate and import a STIG catalog backup")
    import_parser.add_argument("input_file", help="Catalog backup JSON file")
    import_parser.add_argument("--output-file", help="Write the imported catalog to this file")

    parse_parser = subparsers.add_parser("parse-stig", help="Parse a STIG document")
    parse_parser.add_argument("input_file", help="XCCDF XML, stigviewer JSON or STIG Viewer CSV file")
    parse_parser.add_argument("--stig-id", help="STIG id for JSON and CSV documents")
    parse_parser.add_argument("--format", choices=["table", "json"], default="table", help="Output format")
    parse_parser.add_argument("--max-display", type=_positive_int, default=20, help="Maximum requirements to display")

    local_parser = subparsers.add_parser("local-stigs", help="List the local STIG library")
    local_parser.add_argument("--library-dir", help="Library directory (defaults to SRTM_STIG_LIBRARY_DIR)")
    local_parser.add_argument("--stats", action="store_true", help="Show library statistics as JSON")

    baseline_parser = subparsers.add_parser("baseline", help="Select the NIST SP 800-53B baseline")
    baseline_parser.add_argument("input_file", help="Workflow or SRTM project JSON file")
    baseline_parser.add_argument("--list-controls", action="store_true", help="List the baseline controls")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI function"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        configure_logging(args.log_level)
        return COMMANDS[args.command](args)

    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        return 1
    except (SrtmError, argparse.ArgumentTypeError, OSError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
