"""
Scoring weights for the STIG family recommendation engine.

Two versioned profiles share one scoring algorithm:

- ``validated`` (default): weights tuned against the validated DISA catalog,
  with confidence scoring enabled.
- ``legacy``: the earlier, flatter weights without confidence scoring. Kept
  so that recommendations recorded with the first engine can be reproduced.
"""

from dataclasses import dataclass

from ...exceptions import ScoringConfigurationError


@dataclass(frozen=True)
class ScoringWeights:
    """
    Weights and thresholds applied by the recommendation engine.

    Attributes:
        profile: Profile name recorded with recommendations
        keyword_match_base: Per-keyword weight for requirement matches
        keyword_match_app_security: Per-keyword weight for application security STIGs
        control_family_match: Bonus when a requirement's control family maps to the STIG
        design_element_keyword: Per-keyword weight for design element matches
        design_element_type: Per-system-type weight for design element matches
        design_element_exact_tech: Bonus for a direct technology match
        development_environment_bonus: Bonus for application security STIGs in dev environments
        infrastructure_penalty_in_dev: Penalty (<= 0) for infrastructure STIGs in dev environments
        min_critical_score: Score needed (with catalog priority High) for Critical
        min_high_score: Score needed for High
        min_medium_score: Score needed for Medium
        hours_per_requirement: Average implementation hours per STIG requirement
        include_confidence: Whether recommendations carry a confidence score

    Example:
        >>> weights = ScoringWeights(design_element_exact_tech=8)
        >>> weights.min_critical_score
        12
    """

    profile: str = "validated"
    keyword_match_base: float = 2
    keyword_match_app_security: float = 3
    control_family_match: float = 3
    design_element_keyword: float = 2
    design_element_type: float = 3
    design_element_exact_tech: float = 6
    development_environment_bonus: float = 5
    infrastructure_penalty_in_dev: float = -3
    min_critical_score: float = 12
    min_high_score: float = 8
    min_medium_score: float = 4
    hours_per_requirement: float = 1.5
    include_confidence: bool = True

    def validate(self) -> None:
        """
        Validate weights for internal consistency.

        Raises:
            ScoringConfigurationError: If any weight fails validation
        """
        positive = {
            "keyword_match_base": self.keyword_match_base,
            "keyword_match_app_security": self.keyword_match_app_security,
            "control_family_match": self.control_family_match,
            "design_element_keyword": self.design_element_keyword,
            "design_element_type": self.design_element_type,
            "design_element_exact_tech": self.design_element_exact_tech,
            "hours_per_requirement": self.hours_per_requirement,
        }
        for name, value in positive.items():
            if value <= 0:
                raise ScoringConfigurationError(f"{name} ({value}) must be > 0")

        if self.development_environment_bonus < 0:
            raise ScoringConfigurationError(
                f"development_environment_bonus ({self.development_environment_bonus}) must be >= 0"
            )

        if self.infrastructure_penalty_in_dev > 0:
            raise ScoringConfigurationError(
                f"infrastructure_penalty_in_dev ({self.infrastructure_penalty_in_dev}) must be <= 0"
            )

        if not (self.min_critical_score >= self.min_high_score >= self.min_medium_score > 0):
            raise ScoringConfigurationError(
                f"Priority thresholds must satisfy critical ({self.min_critical_score}) >= "
                f"high ({self.min_high_score}) >= medium ({self.min_medium_score}) > 0"
            )

    def __post_init__(self):
        """Validate weights on initialization"""
        self.validate()


VALIDATED_WEIGHTS = ScoringWeights()
"""Default profile (validated catalog, confidence scoring enabled)"""

LEGACY_WEIGHTS = ScoringWeights(
    profile="legacy",
    design_element_keyword=1.5,
    design_element_type=2.5,
    design_element_exact_tech=4,
    min_critical_score=10,
    min_high_score=7,
    min_medium_score=4,
    hours_per_requirement=1.2,
    include_confidence=False,
)
"""First-generation profile (flatter design weights, no confidence score)"""

SCORING_PROFILES = {
    VALIDATED_WEIGHTS.profile: VALIDATED_WEIGHTS,
    LEGACY_WEIGHTS.profile: LEGACY_WEIGHTS,
}


def get_scoring_weights(profile: str = "validated") -> ScoringWeights:
    """
    Resolve a scoring profile by name.

    Args:
        profile: 'validated' or 'legacy'

    Returns:
        The profile's weights

    Raises:
        ScoringConfigurationError: If the profile is unknown
    """
    try:
        return SCORING_PROFILES[profile]
    except KeyError:
        raise ScoringConfigurationError(f"Unknown scoring profile: {profile}") from None
