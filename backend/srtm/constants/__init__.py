"""
SRTM Constants Module

NIST SP 800-53 control baselines and control family names.
"""

from .nist_baselines import (
    CONTROL_FAMILY_NAMES,
    NIST_CONTROL_BASELINES,
    get_baseline_controls,
    get_baseline_for_impact,
    get_control_family,
    get_full_family_name,
    is_control_in_baseline,
)

__all__ = [
    "NIST_CONTROL_BASELINES",
    "CONTROL_FAMILY_NAMES",
    "get_control_family",
    "get_full_family_name",
    "get_baseline_controls",
    "get_baseline_for_impact",
    "is_control_in_baseline",
]
