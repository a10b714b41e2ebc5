"""
STIG Family Recommendation Engine

Analyzes security requirements and system design elements and recommends the
DISA STIG families that apply to the system, with a relevance score, an
optional confidence score, the contributing inputs and human-readable
reasoning for every scoring contribution.

Scoring (per catalog entry, independently):

1. Development environment bonus for application security STIGs when any
   design element looks like application development (Node.js, APIs,
   databases, web front/back ends...).
2. Requirement scan: trigger keyword matches and control family matches.
3. Design element scan: trigger keyword and system type matches, plus a
   direct technology bonus when the element is detected as the exact
   technology the STIG covers.
4. Infrastructure penalty for OS/network/virtualization STIGs in
   development environments.

The total is floored at 0 and mapped to an implementation priority using the
thresholds of the active ScoringWeights profile. Only families with a
positive relevance score are returned.

The engine is pure: it reads the catalog and its inputs and never mutates
either.

Usage:
    from srtm.services.recommendation import get_recommendation_engine

    engine = get_recommendation_engine()
    recommendations = engine.get_stig_family_recommendations(requirements, design_elements)
    effort = engine.get_implementation_effort(recommendations)
"""

import logging
import math
import re
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Set

from ...config import get_settings
from ...models.enums import CatalogPriority, ImplementationPriority
from ...models.srtm_models import SecurityRequirement, SystemDesignElement
from ...models.stig_models import (
    ImplementationEffort,
    PriorityCounts,
    ScoreBreakdown,
    StigFamily,
    StigFamilyRecommendation,
)
from .catalog import STIG_FAMILY_CATALOG
from .weights import VALIDATED_WEIGHTS, ScoringWeights, get_scoring_weights

logger = logging.getLogger(__name__)

# ============================================================================
# Classification Tables
# ============================================================================

# Substrings of design element text that indicate application development
DEVELOPMENT_INDICATORS = (
    "node",
    "javascript",
    "postgres",
    "api",
    "application",
    "web",
    "frontend",
    "backend",
    "database",
    "server",
)

# Catalog id fragments of application security STIGs
APPLICATION_SECURITY_MARKERS = ("application", "web", "nodejs", "secure-coding")

# Catalog id fragments of infrastructure STIGs
INFRASTRUCTURE_MARKERS = ("windows-server", "cisco", "vmware", "rhel", "ubuntu")

# Technology detection patterns, applied to lowercased design element text
TECHNOLOGY_PATTERNS = {
    "nodejs": re.compile(r"node\.?js|node", re.IGNORECASE),
    "postgresql": re.compile(r"postgres(ql)?", re.IGNORECASE),
    "mongodb": re.compile(r"mongo(db)?", re.IGNORECASE),
    "docker": re.compile(r"docker|container", re.IGNORECASE),
    "kubernetes": re.compile(r"k8s|kubernetes", re.IGNORECASE),
    "nginx": re.compile(r"nginx", re.IGNORECASE),
    "apache": re.compile(r"apache|httpd", re.IGNORECASE),
    "windows": re.compile(r"windows", re.IGNORECASE),
    "linux": re.compile(r"linux|ubuntu|rhel|redhat", re.IGNORECASE),
    "aws": re.compile(r"aws|amazon", re.IGNORECASE),
    "azure": re.compile(r"azure", re.IGNORECASE),
}

# STIG families that earn the direct technology bonus, and the technologies they cover
EXACT_TECHNOLOGY_MATCHES = {
    "nodejs-security": ("nodejs",),
    "postgresql-9x": ("postgresql",),
    "mongodb-enterprise": ("mongodb",),
    "docker-enterprise": ("docker",),
    "kubernetes": ("kubernetes",),
    "nginx": ("nginx",),
    "apache-server-2-4": ("apache",),
}


def _as_text(value: Any) -> str:
    """Render an optional field (plain string or enum) for matching."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def requirement_text(requirement: SecurityRequirement) -> str:
    """Lowercased searchable text of a security requirement."""
    parts = (
        requirement.title,
        requirement.description,
        requirement.category,
        requirement.control_family,
        requirement.source,
    )
    return " ".join(_as_text(part) for part in parts).lower()


def design_element_text(element: SystemDesignElement) -> str:
    """Lowercased searchable text of a design element."""
    parts = (element.name, element.description, element.type, element.technology)
    return " ".join(_as_text(part) for part in parts).lower()


def is_application_security_stig(stig_family_id: str) -> bool:
    """Check if a STIG family is application security focused."""
    return any(marker in stig_family_id for marker in APPLICATION_SECURITY_MARKERS)


def is_infrastructure_stig(stig_family_id: str) -> bool:
    """Check if a STIG family is infrastructure focused."""
    return any(marker in stig_family_id for marker in INFRASTRUCTURE_MARKERS)


def detect_development_environment(design_elements: Iterable[SystemDesignElement]) -> bool:
    """
    Detect whether the design describes an application development environment.

    Args:
        design_elements: Design elements of the system

    Returns:
        True if any element's text contains a development indicator
    """
    for element in design_elements:
        text = design_element_text(element)
        if any(indicator in text for indicator in DEVELOPMENT_INDICATORS):
            return True
    return False


def detect_technologies(element_text: str) -> Set[str]:
    """
    Detect the technologies named in a design element's text.

    Args:
        element_text: Output of design_element_text()

    Returns:
        Set of technology keys from TECHNOLOGY_PATTERNS
    """
    return {tech for tech, pattern in TECHNOLOGY_PATTERNS.items() if pattern.search(element_text)}


def has_exact_technology_match(stig_family_id: str, element_text: str) -> bool:
    """
    Check whether an element is the exact technology a STIG family covers.

    Args:
        stig_family_id: Catalog id
        element_text: Output of design_element_text()

    Returns:
        True if the family is in EXACT_TECHNOLOGY_MATCHES and the element is
        detected as one of its technologies
    """
    required = EXACT_TECHNOLOGY_MATCHES.get(stig_family_id)
    if not required:
        return False
    detected = detect_technologies(element_text)
    return any(tech in detected for tech in required)


# ============================================================================
# Recommendation Engine
# ============================================================================


class StigFamilyRecommendationEngine:
    """
    Recommends STIG families for a system from its requirements and design.

    The catalog source is either a sequence of StigFamily entries or any
    object exposing ``list_families()`` (such as StigCatalogRepository), so
    catalog maintenance is reflected in later recommendations.

    Example:
        >>> engine = StigFamilyRecommendationEngine(weights=LEGACY_WEIGHTS)
        >>> engine.get_stig_family_recommendations([], [])
        []
    """

    def __init__(self, weights: Optional[ScoringWeights] = None, catalog: Optional[Any] = None):
        self.weights = weights or VALIDATED_WEIGHTS
        self._catalog = catalog

        logger.debug(f"STIG family recommendation engine initialized (profile={self.weights.profile})")

    @property
    def catalog(self) -> Sequence[StigFamily]:
        """Catalog entries in iteration order."""
        if self._catalog is None:
            return STIG_FAMILY_CATALOG
        if hasattr(self._catalog, "list_families"):
            return self._catalog.list_families()
        return tuple(self._catalog)

    def get_stig_family_recommendations(
        self,
        requirements: Sequence[SecurityRequirement],
        design_elements: Sequence[SystemDesignElement],
    ) -> List[StigFamilyRecommendation]:
        """
        Recommend STIG families for the given requirements and design elements.

        Args:
            requirements: Security requirements of the system
            design_elements: System design elements

        Returns:
            One recommendation per catalog entry with a relevance score > 0,
            sorted by relevance (descending), then confidence (descending),
            then catalog order
        """
        is_development = detect_development_environment(design_elements)

        recommendations = []
        for stig_family in self.catalog:
            recommendation = self.analyze_stig_family(
                stig_family,
                requirements,
                design_elements,
                is_development_environment=is_development,
            )
            if recommendation.relevance_score > 0:
                recommendations.append(recommendation)

        # Stable sort keeps catalog order for full ties
        recommendations.sort(key=lambda r: (-r.relevance_score, -(r.confidence_score or 0)))

        logger.info(
            f"Recommended {len(recommendations)} STIG families from {len(requirements)} requirements "
            f"and {len(design_elements)} design elements (profile={self.weights.profile})"
        )
        return recommendations

    def analyze_stig_family(
        self,
        stig_family: StigFamily,
        requirements: Sequence[SecurityRequirement],
        design_elements: Sequence[SystemDesignElement],
        is_development_environment: Optional[bool] = None,
    ) -> StigFamilyRecommendation:
        """
        Score one STIG family against the requirements and design elements.

        Args:
            stig_family: Catalog entry to score
            requirements: Security requirements of the system
            design_elements: System design elements
            is_development_environment: Precomputed environment flag (detected
                from design_elements when omitted)

        Returns:
            The recommendation, including entries scored 0
        """
        weights = self.weights
        breakdown = ScoreBreakdown()
        matching_requirements: List[str] = []
        matching_design_elements: List[str] = []
        reasoning: List[str] = []
        exact_match_found = False

        if is_development_environment is None:
            is_development_environment = detect_development_environment(design_elements)

        app_security = is_application_security_stig(stig_family.id)

        if is_development_environment and app_security:
            breakdown.environment_bonus = weights.development_environment_bonus
            reasoning.append("Development environment detected - application security controls are essential")

        keyword_weight = weights.keyword_match_app_security if app_security else weights.keyword_match_base

        for requirement in requirements:
            text = requirement_text(requirement)
            keyword_matches = [keyword for keyword in stig_family.trigger_keywords if keyword.lower() in text]

            if keyword_matches:
                breakdown.keyword_matches += len(keyword_matches) * keyword_weight
                if requirement.id not in matching_requirements:
                    matching_requirements.append(requirement.id)
                reasoning.append(f'Requirement "{requirement.title}" matches: {", ".join(keyword_matches)}')

            if requirement.control_family and requirement.control_family in stig_family.control_families:
                breakdown.control_family_matches += weights.control_family_match
                if requirement.id not in matching_requirements:
                    matching_requirements.append(requirement.id)
                reasoning.append(f"Control family {requirement.control_family} applies to this STIG")

        for element in design_elements:
            text = design_element_text(element)
            element_type = _as_text(element.type).lower()

            keyword_matches = [keyword for keyword in stig_family.trigger_keywords if keyword.lower() in text]
            type_matches = [
                system_type
                for system_type in stig_family.applicable_system_types
                if system_type.lower() in text or system_type.lower() in element_type
            ]

            if not keyword_matches and not type_matches:
                continue

            if has_exact_technology_match(stig_family.id, text):
                exact_match_found = True
                breakdown.technology_specific_bonus += weights.design_element_exact_tech
                reasoning.append(f"Direct technology match: {element.name} requires specific {stig_family.name}")

            breakdown.design_element_matches += (
                len(keyword_matches) * weights.design_element_keyword + len(type_matches) * weights.design_element_type
            )
            if element.id not in matching_design_elements:
                matching_design_elements.append(element.id)

            if keyword_matches:
                reasoning.append(f'Design element "{element.name}" matches: {", ".join(keyword_matches)}')
            if type_matches:
                reasoning.append(f"System type match: {', '.join(type_matches)}")

        if is_development_environment and is_infrastructure_stig(stig_family.id):
            breakdown.penalties = weights.infrastructure_penalty_in_dev
            if breakdown.keyword_matches + breakdown.design_element_matches > 0:
                reasoning.append("Infrastructure STIG - lower priority for application development")

        relevance_score = max(0, breakdown.total)

        confidence_score = None
        if weights.include_confidence:
            confidence_score = self._calculate_confidence_score(
                len(matching_requirements),
                len(matching_design_elements),
                stig_family,
                exact_match_found,
            )

        return StigFamilyRecommendation(
            stig_family=stig_family,
            relevance_score=relevance_score,
            confidence_score=confidence_score,
            matching_requirements=matching_requirements,
            matching_design_elements=matching_design_elements,
            reasoning=reasoning,
            implementation_priority=self._classify_priority(relevance_score, stig_family),
            score_breakdown=breakdown,
        )

    def get_implementation_effort(self, recommendations: Sequence[StigFamilyRecommendation]) -> ImplementationEffort:
        """
        Estimate the effort to implement the recommended STIG families.

        Args:
            recommendations: Recommendations to implement

        Returns:
            Total requirement count, hours (rounded half up), days (8-hour
            days, rounded up) and the number of recommendations per priority
        """
        total_requirements = sum(rec.stig_family.actual_requirements for rec in recommendations)

        counts = PriorityCounts()
        for rec in recommendations:
            priority = ImplementationPriority(rec.implementation_priority)
            if priority == ImplementationPriority.CRITICAL:
                counts.critical += 1
            elif priority == ImplementationPriority.HIGH:
                counts.high += 1
            elif priority == ImplementationPriority.MEDIUM:
                counts.medium += 1
            else:
                counts.low += 1

        raw_hours = total_requirements * self.weights.hours_per_requirement

        return ImplementationEffort(
            total_requirements=total_requirements,
            estimated_hours=int(math.floor(raw_hours + 0.5)),
            estimated_days=int(math.ceil(raw_hours / 8)),
            priority_counts=counts,
        )

    def _classify_priority(self, relevance_score: float, stig_family: StigFamily) -> ImplementationPriority:
        """Map a relevance score and the catalog priority to an implementation priority."""
        weights = self.weights
        catalog_priority = CatalogPriority(stig_family.priority)

        if relevance_score >= weights.min_critical_score and catalog_priority == CatalogPriority.HIGH:
            return ImplementationPriority.CRITICAL
        if relevance_score >= weights.min_high_score or catalog_priority == CatalogPriority.HIGH:
            return ImplementationPriority.HIGH
        if relevance_score >= weights.min_medium_score or catalog_priority == CatalogPriority.MEDIUM:
            return ImplementationPriority.MEDIUM
        return ImplementationPriority.LOW

    @staticmethod
    def _calculate_confidence_score(
        requirement_matches: int,
        design_matches: int,
        stig_family: StigFamily,
        exact_match_found: bool,
    ) -> int:
        """
        Confidence (0-100) in a recommendation based on match quality.

        Up to 30 points from matching requirements, up to 40 from matching
        design elements, 10 for a validated catalog entry and 20 for a direct
        technology match.
        """
        score = min(requirement_matches * 10, 30)
        score += min(design_matches * 15, 40)

        if stig_family.validated:
            score += 10

        if exact_match_found:
            score += 20

        return min(score, 100)


# ============================================================================
# Default Engine
# ============================================================================

_default_engine: Optional[StigFamilyRecommendationEngine] = None


def get_recommendation_engine() -> StigFamilyRecommendationEngine:
    """
    Get or create the default engine for the configured scoring profile.

    The profile comes from ``Settings.scoring_profile`` (SRTM_SCORING_PROFILE).

    Returns:
        Singleton StigFamilyRecommendationEngine over the static catalog

    Raises:
        ScoringConfigurationError: If the configured profile is unknown
    """
    global _default_engine

    if _default_engine is None:
        weights = get_scoring_weights(get_settings().scoring_profile)
        _default_engine = StigFamilyRecommendationEngine(weights=weights)
        logger.info(f"Initialized default recommendation engine (profile={weights.profile})")

    return _default_engine


def get_stig_family_recommendations(
    requirements: Sequence[SecurityRequirement],
    design_elements: Sequence[SystemDesignElement],
) -> List[StigFamilyRecommendation]:
    """Recommend STIG families using the default engine."""
    return get_recommendation_engine().get_stig_family_recommendations(requirements, design_elements)


def get_implementation_effort(recommendations: Sequence[StigFamilyRecommendation]) -> ImplementationEffort:
    """Estimate implementation effort using the default engine."""
    return get_recommendation_engine().get_implementation_effort(recommendations)
