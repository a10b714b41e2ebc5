"""
SRTM Models Module

Pydantic entity models (requirements, design elements, test cases, links,
STIG requirements, categorizations), engine dataclasses (STIG families and
recommendations) and the shared enums.
"""

from .enums import (  # noqa: F401
    Applicability,
    CatalogPriority,
    CheckFrequency,
    DesignElementType,
    ImpactLevel,
    ImplementationPriority,
    ImplementationStatus,
    LinkStatus,
    LinkType,
    NistFunction,
    RequirementCategory,
    RequirementStatus,
    RmfStep,
    RuleSeverity,
    StigRequirementStatus,
    StigSeverity,
    TestMethod,
    TestStatus,
    TestType,
    UpdateSeverity,
)
from .srtm_models import (  # noqa: F401
    DetailedStigRequirement,
    SecurityRequirement,
    StigRequirement,
    SystemCategorization,
    SystemDesignElement,
    TestCase,
    TraceabilityLink,
)
from .stig_models import (  # noqa: F401
    AutoUpdateConfig,
    AutoUpdatePreferences,
    ImplementationEffort,
    LocalStigMetadata,
    LocalStigStats,
    ParsedStigRequirement,
    PriorityCounts,
    ScoreBreakdown,
    StigDatabaseMetadata,
    StigDatabaseStatus,
    StigFamily,
    StigFamilyRecommendation,
    StigImportOutcome,
    StigImportResult,
    StigRequirementGroup,
    StigUpdateCheck,
    StigUpdateResult,
)
