"""
Unit tests for FIPS 199 categorization and NIST SP 800-53B baselines.
"""

import pytest

from srtm.constants import (
    CONTROL_FAMILY_NAMES,
    get_baseline_controls,
    get_baseline_for_impact,
    get_control_family,
    get_full_family_name,
    is_control_in_baseline,
)
from srtm.models.enums import ImpactLevel
from srtm.services.categorization import (
    get_overall_impact,
    get_recommended_baseline,
    get_recommended_controls,
    get_security_objective_impacts,
)


# ---------------------------------------------------------------------------
# Baselines
# ---------------------------------------------------------------------------
@pytest.mark.unit
class TestNistBaselines:
    """NIST SP 800-53B control baselines"""

    def test_baselines_are_nested(self):
        low = set(get_baseline_controls("Low"))
        moderate = set(get_baseline_controls("Moderate"))
        high = set(get_baseline_controls("High"))

        assert len(low) < len(moderate) < len(high)
        assert "AC-1" in low and "AC-1" in moderate and "AC-1" in high

    def test_control_enhancement_membership(self):
        assert not is_control_in_baseline("AC-2(1)", "Low")
        assert is_control_in_baseline("AC-2(1)", ImpactLevel.MODERATE)
        assert is_control_in_baseline("AC-2(1)", "High")

    def test_membership_is_exact(self):
        assert is_control_in_baseline("AC-2", "Low")
        assert not is_control_in_baseline("AC-2(99)", "High")

    def test_baseline_controls_are_copies(self):
        controls = get_baseline_controls("Low")
        controls.append("XX-1")

        assert "XX-1" not in get_baseline_controls("Low")

    def test_unknown_baseline(self):
        with pytest.raises(ValueError):
            get_baseline_controls("Extreme")

    def test_baseline_for_impact(self):
        assert get_baseline_for_impact(ImpactLevel.HIGH) == "High"
        assert get_baseline_for_impact("Moderate") == "Moderate"

    def test_control_family(self):
        assert get_control_family("AU-2(1)") == "AU"
        assert get_control_family("SC-28") == "SC"

    def test_family_names(self):
        assert len(CONTROL_FAMILY_NAMES) == 20
        assert get_full_family_name("PT") == "Personally Identifiable Information Processing and Transparency"
        assert get_full_family_name("ZZ") == "ZZ"


# ---------------------------------------------------------------------------
# Categorization
# ---------------------------------------------------------------------------
@pytest.mark.unit
class TestSystemCategorization:
    """High-water mark over information types"""

    def test_empty_system_is_low(self):
        assert get_overall_impact([]) == "Low"
        assert get_recommended_baseline([]) == "Low"
        assert get_security_objective_impacts([]) == {
            "confidentiality": "Low",
            "integrity": "Low",
            "availability": "Low",
        }

    def test_high_water_mark_per_objective(self, make_categorization):
        categorizations = [
            make_categorization(confidentiality="Moderate"),
            make_categorization(category="C.2.8.12", integrity="High", availability="Moderate"),
        ]

        assert get_security_objective_impacts(categorizations) == {
            "confidentiality": "Moderate",
            "integrity": "High",
            "availability": "Moderate",
        }
        assert get_overall_impact(categorizations) == "High"

    def test_recommended_baseline(self, make_categorization):
        categorizations = [make_categorization(confidentiality="Moderate", integrity="Low")]

        assert get_recommended_baseline(categorizations) == "Moderate"
        assert get_recommended_controls(categorizations) == get_baseline_controls("Moderate")

    def test_accepts_iterators(self, make_categorization):
        categorizations = iter([make_categorization(availability="High")])

        assert get_overall_impact(categorizations) == "High"
