"""
STIG Family Recommendation Submodule

Provides the StigFamilyRecommendationEngine, the validated STIG family
catalog and the versioned scoring-weights profiles.

Usage:
    from srtm.services.recommendation import get_recommendation_engine

    engine = get_recommendation_engine()
    recommendations = engine.get_stig_family_recommendations(requirements, design_elements)
"""

import logging

from .catalog import STIG_DATABASE_METADATA, STIG_FAMILY_CATALOG, get_catalog_family
from .engine import (
    StigFamilyRecommendationEngine,
    detect_development_environment,
    detect_technologies,
    get_implementation_effort,
    get_recommendation_engine,
    get_stig_family_recommendations,
    is_application_security_stig,
    is_infrastructure_stig,
)
from .weights import LEGACY_WEIGHTS, SCORING_PROFILES, VALIDATED_WEIGHTS, ScoringWeights, get_scoring_weights

logger = logging.getLogger(__name__)

__all__ = [
    "StigFamilyRecommendationEngine",
    "get_recommendation_engine",
    "get_stig_family_recommendations",
    "get_implementation_effort",
    "detect_development_environment",
    "detect_technologies",
    "is_application_security_stig",
    "is_infrastructure_stig",
    "STIG_FAMILY_CATALOG",
    "STIG_DATABASE_METADATA",
    "get_catalog_family",
    "ScoringWeights",
    "VALIDATED_WEIGHTS",
    "LEGACY_WEIGHTS",
    "SCORING_PROFILES",
    "get_scoring_weights",
]

logger.debug("STIG family recommendation submodule initialized")
