"""
Unit tests for the srtm-stig command-line tool.

Commands run through main() with argv lists; output is captured with capsys.
"""

import json

import pytest

from srtm.cli.stig_recommendations import build_parser, main

WINDOWS_PROJECT = {
    "requirements": [
        {
            "id": "REQ-001",
            "title": "Windows Server Security",
            "description": "Secure Windows Server 2022",
            "controlFamily": "AC",
        }
    ],
    "designElements": [
        {
            "id": "DE-001",
            "name": "Windows Server",
            "description": "Windows Server 2022 domain controller",
            "technology": "Windows",
        }
    ],
    "systemCategorizations": [
        {"category": "C.3.5.1", "name": "System Development", "confidentiality": "Moderate"},
    ],
}


@pytest.fixture
def project_file(tmp_path):
    path = tmp_path / "project.json"
    path.write_text(json.dumps(WINDOWS_PROJECT), encoding="utf-8")
    return path


@pytest.mark.unit
class TestCliParser:
    def test_no_command(self, capsys):
        assert main([]) == 1
        assert "usage: srtm-stig" in capsys.readouterr().out

    def test_profile_choices(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["recommend", "project.json", "--profile", "fast"])

    @pytest.mark.parametrize("limit", ["0", "-2", "two"])
    def test_limit_must_be_positive(self, limit, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["recommend", "project.json", "--limit", limit])
        assert "--limit" in capsys.readouterr().err

    def test_limit_parsed_as_int(self):
        args = build_parser().parse_args(["recommend", "project.json", "--limit", "3"])

        assert args.limit == 3

    def test_max_display_must_be_positive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["parse-stig", "stig.xml", "--max-display", "0"])


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------
@pytest.mark.unit
class TestRecommendCommand:
    """recommend and effort"""

    def test_table_output(self, project_file, capsys):
        assert main(["recommend", str(project_file), "--verbose"]) == 0

        out = capsys.readouterr().out
        assert "STIG FAMILY RECOMMENDATIONS" in out
        assert "Profile: validated" in out
        assert "Windows Server 2022 STIG" in out

    def test_json_output(self, project_file, capsys):
        assert main(["recommend", str(project_file), "--format", "json"]) == 0

        recommendations = {rec["stigFamily"]["id"]: rec for rec in json.loads(capsys.readouterr().out)}
        windows = recommendations["windows-server-2022"]
        assert windows["relevanceScore"] == 23
        assert windows["implementationPriority"] == "Critical"
        assert windows["matchingRequirements"] == ["REQ-001"]

    def test_limit(self, project_file, capsys):
        assert main(["recommend", str(project_file), "--format", "json", "--limit", "1"]) == 0

        assert len(json.loads(capsys.readouterr().out)) == 1

    def test_legacy_profile_omits_confidence(self, project_file, capsys):
        assert main(["recommend", str(project_file), "--profile", "legacy", "--format", "json"]) == 0

        recommendations = json.loads(capsys.readouterr().out)
        assert recommendations
        assert all(rec["confidenceScore"] is None for rec in recommendations)

    def test_no_matches(self, tmp_path, capsys):
        path = tmp_path / "empty.json"
        path.write_text("{}", encoding="utf-8")

        assert main(["recommend", str(path)]) == 0
        assert "No STIG families matched" in capsys.readouterr().out

    def test_invalid_project_file(self, tmp_path, capsys):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        assert main(["recommend", str(path)]) == 1
        assert "Error: Invalid project file" in capsys.readouterr().out

    def test_effort_json(self, project_file, capsys):
        assert main(["effort", str(project_file), "--format", "json"]) == 0

        estimate = json.loads(capsys.readouterr().out)
        assert estimate["totalRequirements"] > 0
        assert estimate["estimatedHours"] == int(estimate["totalRequirements"] * 1.5 + 0.5)
        assert sum(estimate["priorityCounts"].values()) > 0

    def test_effort_table(self, project_file, capsys):
        assert main(["effort", str(project_file)]) == 0

        assert "IMPLEMENTATION EFFORT" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# Catalog maintenance
# ---------------------------------------------------------------------------
@pytest.mark.unit
class TestCatalogCommands:
    """catalog-status, catalog-export and catalog-import"""

    def test_status_json(self, capsys):
        assert main(["catalog-status", "--today", "2025-09-30", "--format", "json"]) == 0

        payload = json.loads(capsys.readouterr().out)
        assert payload["status"]["healthScore"] == 92
        assert payload["status"]["outdatedFamilies"] == 4
        assert len(payload["updates"]) == 4

    def test_status_table(self, capsys):
        assert main(["catalog-status", "--today", "2025-09-30"]) == 0

        out = capsys.readouterr().out
        assert "Health score:       92" in out
        assert "UPDATE CHECKS (4)" in out

    def test_status_invalid_date(self, capsys):
        assert main(["catalog-status", "--today", "30/09/2025"]) == 1
        assert "Invalid date" in capsys.readouterr().out

    def test_export_and_import(self, tmp_path, capsys):
        backup = tmp_path / "catalog.json"

        assert main(["catalog-export", "--output-file", str(backup)]) == 0
        assert backup.exists()

        assert main(["catalog-import", str(backup)]) == 0
        assert "STIG catalog exported to" in capsys.readouterr().out

    def test_import_invalid_backup(self, tmp_path, capsys):
        path = tmp_path / "catalog.json"
        path.write_text("{bad", encoding="utf-8")

        assert main(["catalog-import", str(path)]) == 1


# ---------------------------------------------------------------------------
# STIG content and categorization
# ---------------------------------------------------------------------------
@pytest.mark.unit
class TestContentCommands:
    """parse-stig, local-stigs and baseline"""

    def test_parse_stig_table(self, tmp_path, sample_xccdf, capsys):
        path = tmp_path / "U_PostgreSQL_9-x_STIG_V2R1_Manual-xccdf.xml"
        path.write_text(sample_xccdf, encoding="utf-8")

        assert main(["parse-stig", str(path), "--max-display", "1"]) == 0

        out = capsys.readouterr().out
        assert "PostgreSQL 9.x Security Technical Implementation Guide" in out
        assert "Requirements: 2" in out
        assert "V-214048" in out
        assert "... and 1 more" in out

    def test_parse_stig_json(self, tmp_path, sample_csv, capsys):
        path = tmp_path / "export.csv"
        path.write_text(sample_csv, encoding="utf-8")

        assert main(["parse-stig", str(path), "--stig-id", "postgresql-9x", "--format", "json"]) == 0

        result = json.loads(capsys.readouterr().out)
        assert result["stigId"] == "postgresql-9x"
        assert result["totalRequirements"] == 2

    def test_parse_unsupported_file(self, tmp_path, capsys):
        path = tmp_path / "notes.txt"
        path.write_text("hello", encoding="utf-8")

        assert main(["parse-stig", str(path)]) == 1
        assert "Unsupported STIG file type" in capsys.readouterr().out

    def test_local_stigs_empty_library(self, tmp_path, capsys):
        assert main(["local-stigs", "--library-dir", str(tmp_path)]) == 0
        assert "No STIGs found" in capsys.readouterr().out

    def test_local_stigs_stats(self, tmp_path, sample_csv, capsys):
        entry = tmp_path / "nginx"
        entry.mkdir()
        (entry / "nginx.csv").write_text(sample_csv, encoding="utf-8")

        assert main(["local-stigs", "--library-dir", str(tmp_path), "--stats"]) == 0

        stats = json.loads(capsys.readouterr().out)
        assert stats["total"] == 1
        assert stats["byFormat"] == {"xml": 0, "csv": 1}

    def test_baseline(self, project_file, capsys):
        assert main(["baseline", str(project_file), "--list-controls"]) == 0

        out = capsys.readouterr().out
        assert "Overall impact:    Moderate" in out
        assert "Baseline:          Moderate" in out
        assert "MODERATE BASELINE CONTROLS" in out
        assert "AC-2(1)" in out
