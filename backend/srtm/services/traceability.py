"""
Traceability Coverage

Coverage of security requirements by active traceability links and the
summary figures shown on the SRTM dashboard.
"""

import math
from typing import Any, Dict, List

from ..models.enums import CatalogPriority, LinkStatus, TestStatus
from ..models.srtm_models import SystemDesignElement, TestCase
from .workflow import SrtmProject


def _percentage(part: int, whole: int) -> int:
    """Percentage rounded half up (0 when whole is 0)."""
    if not whole:
        return 0
    return math.floor(part * 100 / whole + 0.5)


def get_linked_elements(project: SrtmProject, requirement_id: str) -> Dict[str, List[Any]]:
    """
    Design elements and test cases linked to a requirement.

    Only active links count. Links to elements or test cases that are not
    part of the project are skipped.

    Returns:
        {"design_elements": [...], "test_cases": [...]}
    """
    elements = {e.id: e for e in project.design_elements}
    tests = {t.id: t for t in project.test_cases}

    design_elements: List[SystemDesignElement] = []
    test_cases: List[TestCase] = []
    for link in project.traceability_links:
        if link.requirement_id != requirement_id or link.status != LinkStatus.ACTIVE.value:
            continue
        if link.design_element_id and link.design_element_id in elements:
            design_elements.append(elements[link.design_element_id])
        if link.test_case_id and link.test_case_id in tests:
            test_cases.append(tests[link.test_case_id])

    return {"design_elements": design_elements, "test_cases": test_cases}


def is_requirement_covered(project: SrtmProject, requirement_id: str) -> bool:
    """A requirement is covered when it has at least one active link."""
    return any(
        link.requirement_id == requirement_id and link.status == LinkStatus.ACTIVE.value
        for link in project.traceability_links
    )


def get_coverage_summary(project: SrtmProject) -> Dict[str, int]:
    """
    Requirement coverage of the matrix.

    Returns:
        total_requirements, total_links, covered_requirements and
        coverage_percentage (rounded; 0 without requirements)
    """
    total = len(project.requirements)
    covered = sum(1 for req in project.requirements if is_requirement_covered(project, req.id))
    return {
        "total_requirements": total,
        "total_links": len(project.traceability_links),
        "covered_requirements": covered,
        "coverage_percentage": _percentage(covered, total),
    }


def get_dashboard_stats(project: SrtmProject) -> Dict[str, int]:
    """
    Dashboard counters of an SRTM project.

    Coverage here is active links per requirement (capped at 100), the
    quick figure shown next to the counters.
    """
    active_links = sum(1 for link in project.traceability_links if link.status == LinkStatus.ACTIVE.value)
    requirements = len(project.requirements)

    coverage = 0
    if project.traceability_links and requirements:
        coverage = min(100, _percentage(active_links, requirements))

    return {
        "requirements": requirements,
        "design_elements": len(project.design_elements),
        "test_cases": len(project.test_cases),
        "traceability_links": len(project.traceability_links),
        "stig_requirements": len(project.stig_requirements),
        "high_priority_requirements": sum(
            1 for req in project.requirements if req.priority == CatalogPriority.HIGH.value
        ),
        "passed_tests": sum(1 for test in project.test_cases if test.status == TestStatus.PASSED.value),
        "coverage": coverage,
    }
