"""
FIPS 199 System Categorization

Overall impact of a system from its NIST SP 800-60 information types,
using the high-water mark over confidentiality, integrity and availability,
and the NIST SP 800-53B baseline that follows from it.
"""

import logging
from typing import Dict, Iterable, List

from ..constants.nist_baselines import get_baseline_controls, get_baseline_for_impact
from ..models.enums import ImpactLevel
from ..models.srtm_models import SystemCategorization

logger = logging.getLogger(__name__)

IMPACT_ORDER: Dict[str, int] = {
    ImpactLevel.LOW.value: 0,
    ImpactLevel.MODERATE.value: 1,
    ImpactLevel.HIGH.value: 2,
}


def _high_water_mark(levels: Iterable[str]) -> str:
    return max(levels, key=lambda level: IMPACT_ORDER[ImpactLevel(level).value], default=ImpactLevel.LOW.value)


def get_security_objective_impacts(categorizations: Iterable[SystemCategorization]) -> Dict[str, str]:
    """
    High-water mark per security objective.

    Returns:
        {"confidentiality": ..., "integrity": ..., "availability": ...}
        (Low for each objective when no information types are given)
    """
    entries = list(categorizations)
    return {
        "confidentiality": _high_water_mark(c.confidentiality for c in entries),
        "integrity": _high_water_mark(c.integrity for c in entries),
        "availability": _high_water_mark(c.availability for c in entries),
    }


def get_overall_impact(categorizations: Iterable[SystemCategorization]) -> str:
    """
    Overall FIPS 199 impact level of a system.

    Args:
        categorizations: Information types processed by the system

    Returns:
        Highest impact across all objectives of all types ('Low' when empty)
    """
    return _high_water_mark(get_security_objective_impacts(categorizations).values())


def get_recommended_baseline(categorizations: Iterable[SystemCategorization]) -> str:
    """NIST SP 800-53B baseline name for the system ('Low' when empty)."""
    return get_baseline_for_impact(get_overall_impact(categorizations))


def get_recommended_controls(categorizations: Iterable[SystemCategorization]) -> List[str]:
    """Controls of the recommended baseline."""
    baseline = get_recommended_baseline(categorizations)
    controls = get_baseline_controls(baseline)
    logger.debug(f"Recommended {baseline} baseline with {len(controls)} controls")
    return controls
