"""
STIG Catalog and Recommendation Models

Two groups of models live here:

1. Engine models (dataclasses). ``StigFamily`` is the immutable catalog
   entry; ``StigFamilyRecommendation``, ``ScoreBreakdown`` and
   ``ImplementationEffort`` are produced by the recommendation engine and
   recomputed on every call.

2. Catalog maintenance and import models (pydantic). Update checks, update
   results, database status, auto-update configuration, local STIG library
   metadata and parsed STIG documents. These cross file boundaries (catalog
   backups, stigviewer JSON, CLI output) and therefore validate their input.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field

from .base import SrtmBaseModel
from .enums import CatalogPriority, CheckFrequency, ImplementationPriority, RuleSeverity, UpdateSeverity

# ============================================================================
# Engine Models
# ============================================================================


@dataclass(frozen=True)
class StigFamily:
    """
    A DISA STIG family known to the recommendation engine.

    Entries are seeded from the static catalog and never mutated; catalog
    maintenance replaces whole entries (see StigCatalogRepository).

    Attributes:
        id: Unique catalog key (e.g. "postgresql-9x")
        name: Display name of the STIG
        description: What the STIG covers
        applicable_system_types: Category labels matched against design elements
        trigger_keywords: Lowercase substrings matched against free text
        control_families: NIST SP 800-53 families the STIG maps to
        priority: Static authorial weight
        actual_requirements: Number of requirements in the STIG
        version: DISA version/release (e.g. "V2R1")
        release_date: Release date, YYYY-MM-DD
        stig_id: First STIG rule id, used to identify the benchmark
        validated: Whether the entry was checked against the DISA release
    """

    id: str
    name: str
    description: str
    applicable_system_types: Tuple[str, ...]
    trigger_keywords: Tuple[str, ...]
    control_families: Tuple[str, ...]
    priority: CatalogPriority
    actual_requirements: int
    version: Optional[str] = None
    release_date: Optional[str] = None
    stig_id: Optional[str] = None
    validated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the entry to the camelCase dictionary used in catalog backups.

        Returns:
            Dictionary representation of the STIG family.
        """
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "applicableSystemTypes": list(self.applicable_system_types),
            "triggerKeywords": list(self.trigger_keywords),
            "controlFamilies": list(self.control_families),
            "priority": CatalogPriority(self.priority).value,
            "actualRequirements": self.actual_requirements,
            "version": self.version,
            "releaseDate": self.release_date,
            "stigId": self.stig_id,
            "validated": self.validated,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StigFamily":
        """
        Build an entry from a catalog backup dictionary.

        Accepts camelCase or snake_case keys, and ``estimatedRequirements``
        for backups written before requirement counts were validated.

        Raises:
            KeyError: If id or name is missing
            TypeError: If a keyword, system type or control family field is
                not a list of strings
            ValueError: If priority is not High, Medium or Low
        """

        def pick(camel: str, snake: str, default: Any = None) -> Any:
            if camel in data:
                return data[camel]
            return data.get(snake, default)

        def pick_strings(camel: str, snake: str) -> Tuple[str, ...]:
            values = pick(camel, snake, [])
            if not isinstance(values, (list, tuple)):
                raise TypeError(f"{camel} must be a list of strings, got {type(values).__name__}")
            if not all(isinstance(value, str) for value in values):
                raise TypeError(f"{camel} must contain only strings")
            return tuple(values)

        requirements = pick("actualRequirements", "actual_requirements")
        if requirements is None:
            requirements = pick("estimatedRequirements", "estimated_requirements", 0)

        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            applicable_system_types=pick_strings("applicableSystemTypes", "applicable_system_types"),
            trigger_keywords=tuple(k.lower() for k in pick_strings("triggerKeywords", "trigger_keywords")),
            control_families=pick_strings("controlFamilies", "control_families"),
            priority=CatalogPriority(data.get("priority", CatalogPriority.MEDIUM.value)),
            actual_requirements=int(requirements),
            version=data.get("version"),
            release_date=pick("releaseDate", "release_date"),
            stig_id=pick("stigId", "stig_id"),
            validated=bool(data.get("validated", False)),
        )


@dataclass
class ScoreBreakdown:
    """Named sub-totals of a relevance score"""

    keyword_matches: float = 0
    control_family_matches: float = 0
    design_element_matches: float = 0
    technology_specific_bonus: float = 0
    environment_bonus: float = 0
    penalties: float = 0

    @property
    def total(self) -> float:
        """Sum of all contributions (may be negative before flooring)."""
        return (
            self.keyword_matches
            + self.control_family_matches
            + self.design_element_matches
            + self.technology_specific_bonus
            + self.environment_bonus
            + self.penalties
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "keywordMatches": self.keyword_matches,
            "controlFamilyMatches": self.control_family_matches,
            "designElementMatches": self.design_element_matches,
            "technologySpecificBonus": self.technology_specific_bonus,
            "environmentBonus": self.environment_bonus,
            "penalties": self.penalties,
        }


@dataclass
class StigFamilyRecommendation:
    """
    Recommendation of one STIG family for the analysed system.

    Ephemeral: produced by the recommendation engine and discarded when the
    requirements or design elements change.
    """

    stig_family: StigFamily
    relevance_score: float
    implementation_priority: ImplementationPriority
    confidence_score: Optional[int] = None
    matching_requirements: List[str] = field(default_factory=list)
    matching_design_elements: List[str] = field(default_factory=list)
    reasoning: List[str] = field(default_factory=list)
    score_breakdown: ScoreBreakdown = field(default_factory=ScoreBreakdown)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert recommendation to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the recommendation.
        """
        return {
            "stigFamily": self.stig_family.to_dict(),
            "relevanceScore": self.relevance_score,
            "confidenceScore": self.confidence_score,
            "matchingRequirements": list(self.matching_requirements),
            "matchingDesignElements": list(self.matching_design_elements),
            "reasoning": list(self.reasoning),
            "implementationPriority": ImplementationPriority(self.implementation_priority).value,
            "scoreBreakdown": self.score_breakdown.to_dict(),
        }


@dataclass
class PriorityCounts:
    """Number of recommendations per implementation priority"""

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"critical": self.critical, "high": self.high, "medium": self.medium, "low": self.low}


@dataclass
class ImplementationEffort:
    """Estimated effort to implement a set of recommended STIG families"""

    total_requirements: int = 0
    estimated_hours: int = 0
    estimated_days: int = 0
    priority_counts: PriorityCounts = field(default_factory=PriorityCounts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRequirements": self.total_requirements,
            "estimatedHours": self.estimated_hours,
            "estimatedDays": self.estimated_days,
            "priorityCounts": self.priority_counts.to_dict(),
        }


# ============================================================================
# Catalog Maintenance Models
# ============================================================================


class StigUpdateCheck(SrtmBaseModel):
    """
    Result of checking one catalog entry for a newer DISA release.
    """

    stig_id: str = Field(..., description="Catalog id of the STIG family")
    current_version: Optional[str] = None
    latest_version: Optional[str] = None
    current_release_date: Optional[str] = None
    latest_release_date: Optional[str] = None
    update_available: bool = False
    source: str = Field("Date Check", description="Where the update information came from")
    severity: UpdateSeverity = UpdateSeverity.MEDIUM
    last_checked: Optional[str] = None
    update_notes: Optional[str] = None


class StigUpdateResult(SrtmBaseModel):
    """Outcome of applying or rolling back a catalog update"""

    success: bool
    stig_id: str
    message: str
    old_version: Optional[str] = None
    new_version: Optional[str] = None


class StigImportOutcome(SrtmBaseModel):
    """Outcome of importing a catalog backup"""

    success: bool
    message: str
    imported_families: int = Field(0, ge=0)


class StigDatabaseMetadata(SrtmBaseModel):
    """Validation metadata of the catalog (dates are YYYY-MM-DD)"""

    last_updated: str
    last_validated: str
    next_review_due: str
    validation_source: str = "DISA Cyber Exchange"
    version: str = "1.0.0"


class StigDatabaseStatus(SrtmBaseModel):
    """Health summary of the catalog"""

    health_score: int = Field(..., ge=0, le=100, description="0-100 catalog health")
    total_stig_families: int = Field(..., ge=0)
    validated_families: int = Field(..., ge=0)
    outdated_families: int = Field(..., ge=0)
    last_updated: str
    last_validated: str
    next_review_due: str
    catalog_version: int = Field(..., ge=0, description="Snapshot version of the catalog")


class AutoUpdatePreferences(SrtmBaseModel):
    """How pending catalog updates are applied"""

    auto_apply: bool = False
    critical_only: bool = True
    require_manual_approval: bool = True
    backup_before_update: bool = True


class AutoUpdateConfig(SrtmBaseModel):
    """Catalog auto-update configuration"""

    enabled: bool = False
    check_frequency: CheckFrequency = CheckFrequency.WEEKLY
    auto_update_preferences: AutoUpdatePreferences = Field(default_factory=AutoUpdatePreferences)
    last_check: Optional[str] = None
    sources: Dict[str, bool] = Field(
        default_factory=lambda: {"local_library": True, "date_check": True},
        description="Update sources and whether they are consulted",
    )
    notifications: Dict[str, bool] = Field(
        default_factory=lambda: {"on_update_available": True, "on_update_applied": True},
    )


# ============================================================================
# STIG Content Models
# ============================================================================


class LocalStigMetadata(SrtmBaseModel):
    """Metadata of a STIG stored in the local library"""

    stig_id: str
    name: str
    version: str = "Unknown"
    release_date: str
    filename: str
    format: Optional[str] = Field(None, description="xml or csv")


class LocalStigStats(SrtmBaseModel):
    """Summary of the local STIG library"""

    total: int = 0
    by_format: Dict[str, int] = Field(default_factory=lambda: {"xml": 0, "csv": 0})
    stigs: List[Dict[str, str]] = Field(default_factory=list)


class ParsedStigRequirement(SrtmBaseModel):
    """One requirement extracted from an imported STIG document"""

    vuln_id: str
    rule_id: str
    severity: RuleSeverity = RuleSeverity.MEDIUM
    title: str
    description: str = ""
    check_text: str = ""
    fix_text: str = ""
    cci: List[str] = Field(default_factory=list)
    nist_controls: List[str] = Field(default_factory=list)


class StigImportResult(SrtmBaseModel):
    """A parsed STIG document"""

    stig_id: str
    stig_name: str
    version: str = "Unknown"
    release_date: str
    requirements: List[ParsedStigRequirement] = Field(default_factory=list)
    total_requirements: int = Field(0, ge=0)
    source: str = Field("manual", description="manual, local or stigviewer")


class StigRequirementGroup(SrtmBaseModel):
    """STIG requirements sharing a title across families"""

    title: str
    severity: str
    status: str
    count: int = Field(..., ge=1)
    stig_ids: List[str] = Field(default_factory=list)
    families: List[str] = Field(default_factory=list)
