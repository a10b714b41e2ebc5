"""
Unit tests for traceability coverage and dashboard figures.
"""

import pytest
from pydantic import ValidationError

from srtm.models import SecurityRequirement, StigRequirement, TraceabilityLink
from srtm.models.srtm_models import TestCase
from srtm.services.traceability import (
    get_coverage_summary,
    get_dashboard_stats,
    get_linked_elements,
    is_requirement_covered,
)
from srtm.services.workflow import SrtmProject


def _requirements(count: int, **overrides):
    return [SecurityRequirement(id=f"REQ-{i:03d}", **overrides) for i in range(1, count + 1)]


def _link(link_id: str, requirement_id: str, **targets) -> TraceabilityLink:
    if not targets:
        targets = {"design_element_id": "DE-001"}
    return TraceabilityLink(id=link_id, requirement_id=requirement_id, **targets)


@pytest.mark.unit
class TestTraceabilityLink:
    def test_link_needs_a_target(self):
        with pytest.raises(ValidationError):
            TraceabilityLink(id="LNK-1", requirement_id="REQ-001")

    def test_link_to_test_case_only(self):
        link = TraceabilityLink(id="LNK-1", requirement_id="REQ-001", test_case_id="TC-001")

        assert link.status == "Active"


# ---------------------------------------------------------------------------
# Coverage
# ---------------------------------------------------------------------------
@pytest.mark.unit
class TestCoverage:
    """Requirement coverage by active links"""

    def test_empty_project(self):
        assert get_coverage_summary(SrtmProject()) == {
            "total_requirements": 0,
            "total_links": 0,
            "covered_requirements": 0,
            "coverage_percentage": 0,
        }

    def test_half_covered(self):
        project = SrtmProject(requirements=_requirements(2), traceability_links=[_link("LNK-1", "REQ-001")])

        summary = get_coverage_summary(project)

        assert summary["covered_requirements"] == 1
        assert summary["coverage_percentage"] == 50

    @pytest.mark.parametrize("covered,expected", [(1, 33), (2, 67), (3, 100)])
    def test_percentage_rounding(self, covered, expected):
        links = [_link(f"LNK-{i}", f"REQ-{i:03d}") for i in range(1, covered + 1)]
        project = SrtmProject(requirements=_requirements(3), traceability_links=links)

        assert get_coverage_summary(project)["coverage_percentage"] == expected

    def test_inactive_links_do_not_cover(self):
        project = SrtmProject(
            requirements=_requirements(1),
            traceability_links=[_link("LNK-1", "REQ-001", design_element_id="DE-001", status="Inactive")],
        )

        assert not is_requirement_covered(project, "REQ-001")
        summary = get_coverage_summary(project)
        assert summary["total_links"] == 1
        assert summary["coverage_percentage"] == 0

    def test_multiple_links_count_once(self):
        project = SrtmProject(
            requirements=_requirements(2),
            traceability_links=[_link("LNK-1", "REQ-001"), _link("LNK-2", "REQ-001", test_case_id="TC-001")],
        )

        assert get_coverage_summary(project)["coverage_percentage"] == 50


@pytest.mark.unit
class TestLinkedElements:
    """Design elements and test cases behind a requirement"""

    def test_linked_elements(self, make_design_element):
        element = make_design_element(name="Login Service")
        project = SrtmProject(
            requirements=_requirements(1),
            design_elements=[element],
            test_cases=[TestCase(id="TC-001", title="MFA prompt")],
            traceability_links=[
                _link("LNK-1", "REQ-001", design_element_id=element.id, test_case_id="TC-001"),
                _link("LNK-2", "REQ-001", design_element_id="DE-404"),
                _link("LNK-3", "REQ-002", test_case_id="TC-001"),
            ],
        )

        linked = get_linked_elements(project, "REQ-001")

        assert [e.name for e in linked["design_elements"]] == ["Login Service"]
        assert [t.id for t in linked["test_cases"]] == ["TC-001"]

    def test_unlinked_requirement(self):
        assert get_linked_elements(SrtmProject(), "REQ-001") == {"design_elements": [], "test_cases": []}


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------
@pytest.mark.unit
class TestDashboardStats:
    """Dashboard counters"""

    def test_counters(self, make_design_element):
        project = SrtmProject(
            requirements=_requirements(2, priority="High") + [SecurityRequirement(id="REQ-003", priority="Low")],
            design_elements=[make_design_element()],
            test_cases=[
                TestCase(id="TC-001", status="Passed"),
                TestCase(id="TC-002", status="Failed"),
                TestCase(id="TC-003", status="Passed"),
            ],
            traceability_links=[_link("LNK-1", "REQ-001")],
            stig_requirements=[StigRequirement(id="nginx-1", stig_id="NGINX-1", family="nginx")],
        )

        stats = get_dashboard_stats(project)

        assert stats == {
            "requirements": 3,
            "design_elements": 1,
            "test_cases": 3,
            "traceability_links": 1,
            "stig_requirements": 1,
            "high_priority_requirements": 2,
            "passed_tests": 2,
            "coverage": 33,
        }

    def test_coverage_capped(self):
        links = [_link(f"LNK-{i}", "REQ-001") for i in range(3)]
        project = SrtmProject(requirements=_requirements(1), traceability_links=links)

        assert get_dashboard_stats(project)["coverage"] == 100

    def test_no_links_no_coverage(self):
        assert get_dashboard_stats(SrtmProject(requirements=_requirements(2)))["coverage"] == 0

    def test_links_without_requirements(self):
        project = SrtmProject(traceability_links=[_link("LNK-1", "REQ-001")])

        assert get_dashboard_stats(project)["coverage"] == 0
