"""
Unit tests for the STIG family recommendation engine.

Tests cover:
- End-to-end recommendation scenarios (Windows Server, PostgreSQL, Node.js API)
- Ordering, filtering and flooring of relevance scores
- Development environment bonus and infrastructure penalty
- Priority classification against catalog priority and profile thresholds
- Confidence scoring and the legacy profile
- Implementation effort estimation
- Default engine singleton and configured profile
"""

import pytest

from srtm.models import ImplementationPriority, PriorityCounts, StigFamily, StigFamilyRecommendation
from srtm.models.enums import CatalogPriority, DesignElementType
from srtm.services.recommendation import (
    LEGACY_WEIGHTS,
    STIG_FAMILY_CATALOG,
    StigFamilyRecommendationEngine,
    detect_development_environment,
    detect_technologies,
    get_catalog_family,
    get_implementation_effort,
    get_recommendation_engine,
    get_stig_family_recommendations,
    is_application_security_stig,
    is_infrastructure_stig,
)


def _custom_family(priority: CatalogPriority, actual_requirements: int = 10, **overrides) -> StigFamily:
    data = {
        "id": "custom-guide",
        "name": "Custom Guide",
        "description": "Test entry",
        "applicable_system_types": (),
        "trigger_keywords": ("alpha", "beta", "gamma", "delta", "epsilon", "zeta"),
        "control_families": (),
        "priority": priority,
        "actual_requirements": actual_requirements,
        "validated": True,
    }
    data.update(overrides)
    return StigFamily(**data)


def _recommendation(family: StigFamily, priority: ImplementationPriority) -> StigFamilyRecommendation:
    return StigFamilyRecommendation(stig_family=family, relevance_score=1, implementation_priority=priority)


def _by_id(recommendations):
    return {rec.stig_family.id: rec for rec in recommendations}


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------
@pytest.mark.unit
class TestRecommendationScenarios:
    """End-to-end recommendation scenarios over the static catalog"""

    def setup_method(self):
        self.engine = StigFamilyRecommendationEngine()

    def test_windows_server_recommended(self, make_requirement, make_design_element):
        """Windows Server requirement and design element recommend the Windows Server STIG"""
        requirement = make_requirement(
            title="Windows Server Security",
            description="Secure Windows Server 2022",
            control_family="AC",
        )
        element = make_design_element(
            name="Windows Server",
            description="Windows Server 2022 domain controller",
            technology="Windows",
        )

        recommendations = _by_id(self.engine.get_stig_family_recommendations([requirement], [element]))

        assert "windows-server-2022" in recommendations, "Windows Server STIG should be recommended"
        windows = recommendations["windows-server-2022"]
        assert windows.relevance_score > 0
        assert windows.matching_requirements == [requirement.id]
        assert windows.matching_design_elements == [element.id]

    def test_windows_server_score_breakdown(self, make_requirement, make_design_element):
        """Contributions of the Windows Server scenario add up to the relevance score"""
        requirement = make_requirement(
            title="Windows Server Security",
            description="Secure Windows Server 2022",
            control_family="AC",
        )
        element = make_design_element(
            name="Windows Server",
            description="Windows Server 2022 domain controller",
            technology="Windows",
        )

        windows = self.engine.analyze_stig_family(
            get_catalog_family("windows-server-2022"), [requirement], [element]
        )

        breakdown = windows.score_breakdown
        # windows, server 2022, windows server
        assert breakdown.keyword_matches == 6
        assert breakdown.control_family_matches == 3
        # 4 keywords (incl. domain) and 3 system types (Windows, Server, Domain Controller)
        assert breakdown.design_element_matches == 8 + 9
        # "server" marks a development environment, so the infrastructure penalty applies
        assert breakdown.penalties == -3
        assert windows.relevance_score == 23
        assert windows.implementation_priority == ImplementationPriority.CRITICAL.value

    def test_postgresql_outranks_cisco(self, make_requirement, make_design_element):
        """Exact PostgreSQL technology ranks the PostgreSQL STIG above unrelated infrastructure"""
        requirement = make_requirement(title="Database security", description="Protect the PostgreSQL database")
        element = make_design_element(name="Primary DB", type=DesignElementType.DATABASE, technology="PostgreSQL")

        recommendations = self.engine.get_stig_family_recommendations([requirement], [element])
        ids = [rec.stig_family.id for rec in recommendations]

        assert "postgresql-9x" in ids
        for cisco_id in ("cisco-ios-xe-17", "cisco-ios-switch"):
            if cisco_id in ids:
                assert ids.index("postgresql-9x") < ids.index(cisco_id), f"PostgreSQL should outrank {cisco_id}"

    def test_postgresql_exact_technology_bonus(self, make_requirement, make_design_element):
        """PostgreSQL element earns the direct technology bonus and full confidence credit"""
        requirement = make_requirement(title="Database security", description="Protect the PostgreSQL database")
        element = make_design_element(name="Primary DB", type=DesignElementType.DATABASE, technology="PostgreSQL")

        postgres = _by_id(self.engine.get_stig_family_recommendations([requirement], [element]))["postgresql-9x"]

        assert postgres.score_breakdown.technology_specific_bonus == 6
        assert postgres.relevance_score == 30
        # 10 (one requirement) + 15 (one element) + 10 (validated) + 20 (exact match)
        assert postgres.confidence_score == 55
        assert postgres.implementation_priority == ImplementationPriority.CRITICAL.value
        assert any(reason.startswith("Direct technology match: Primary DB") for reason in postgres.reasoning)

    def test_nodejs_api_gets_environment_bonus(self, make_requirement, make_design_element):
        """Node.js API design triggers the development bonus for application security STIGs"""
        requirement = make_requirement(title="Input validation", description="Validate all API input")
        element = make_design_element(
            name="API Server",
            type=DesignElementType.API,
            description="Express REST API",
            technology="Node.js",
        )

        recommendations = _by_id(self.engine.get_stig_family_recommendations([requirement], [element]))

        nodejs = recommendations["nodejs-security"]
        assert nodejs.score_breakdown.environment_bonus == 5
        assert nodejs.score_breakdown.technology_specific_bonus == 6
        assert nodejs.reasoning[0].startswith("Development environment detected")

        app_security = recommendations["application-security-dev"]
        assert app_security.score_breakdown.environment_bonus == 5
        assert app_security.score_breakdown.technology_specific_bonus == 0

    def test_empty_input_returns_empty_list(self):
        """No requirements and no design elements produce no recommendations"""
        assert self.engine.get_stig_family_recommendations([], []) == []


# ---------------------------------------------------------------------------
# Scoring invariants
# ---------------------------------------------------------------------------
@pytest.mark.unit
class TestScoringInvariants:
    """Ordering, flooring and stability of recommendation scores"""

    def setup_method(self):
        self.engine = StigFamilyRecommendationEngine()

    def _mixed_inputs(self, make_requirement, make_design_element):
        requirements = [
            make_requirement(title="Audit logging", description="Log access to the database", control_family="AU"),
            make_requirement(title="Container hardening", description="Harden docker images and kubernetes pods"),
        ]
        elements = [
            make_design_element(name="Web frontend", description="React web app", technology="nginx"),
            make_design_element(name="Orders DB", type=DesignElementType.DATABASE, technology="PostgreSQL"),
        ]
        return requirements, elements

    def test_sorted_by_relevance_then_confidence(self, make_requirement, make_design_element):
        """Recommendations are sorted by relevance, ties broken by confidence"""
        requirements, elements = self._mixed_inputs(make_requirement, make_design_element)

        recommendations = self.engine.get_stig_family_recommendations(requirements, elements)

        assert len(recommendations) > 1
        for first, second in zip(recommendations, recommendations[1:]):
            assert first.relevance_score >= second.relevance_score
            if first.relevance_score == second.relevance_score:
                assert (first.confidence_score or 0) >= (second.confidence_score or 0)

    def test_equal_relevance_ordered_by_confidence(self, make_requirement):
        unvalidated = _custom_family(CatalogPriority.LOW, id="guide-unvalidated", validated=False)
        validated = _custom_family(CatalogPriority.LOW, id="guide-validated", validated=True)
        engine = StigFamilyRecommendationEngine(catalog=[unvalidated, validated])

        recommendations = engine.get_stig_family_recommendations([make_requirement(description="alpha")], [])

        assert [rec.stig_family.id for rec in recommendations] == ["guide-validated", "guide-unvalidated"]
        assert recommendations[0].relevance_score == recommendations[1].relevance_score == 2
        assert recommendations[0].confidence_score == 20
        assert recommendations[1].confidence_score == 10

    @pytest.mark.parametrize("reverse", [False, True])
    def test_full_tie_keeps_catalog_order(self, make_requirement, reverse):
        catalog = [_custom_family(CatalogPriority.LOW, id=f"guide-{name}") for name in ("first", "second", "third")]
        if reverse:
            catalog.reverse()
        engine = StigFamilyRecommendationEngine(catalog=catalog)

        recommendations = engine.get_stig_family_recommendations([make_requirement(description="alpha beta")], [])

        assert [rec.stig_family.id for rec in recommendations] == [family.id for family in catalog]
        assert len({(rec.relevance_score, rec.confidence_score) for rec in recommendations}) == 1

    def test_only_positive_scores_returned(self, make_requirement, make_design_element):
        requirements, elements = self._mixed_inputs(make_requirement, make_design_element)

        recommendations = self.engine.get_stig_family_recommendations(requirements, elements)

        assert all(rec.relevance_score > 0 for rec in recommendations)

    def test_penalty_floored_at_zero(self, make_design_element):
        """Infrastructure penalty never drives the relevance score below zero"""
        element = make_design_element(name="Checkout API", type=DesignElementType.API, technology="Node.js")

        cisco = self.engine.analyze_stig_family(get_catalog_family("cisco-ios-xe-17"), [], [element])

        assert cisco.score_breakdown.penalties == -3
        assert cisco.relevance_score == 0
        assert not any("Infrastructure STIG" in reason for reason in cisco.reasoning), (
            "Penalty reasoning is only added when the entry matched something"
        )

    def test_repeated_calls_are_identical(self, make_requirement, make_design_element):
        requirements, elements = self._mixed_inputs(make_requirement, make_design_element)

        first = [rec.to_dict() for rec in self.engine.get_stig_family_recommendations(requirements, elements)]
        second = [rec.to_dict() for rec in self.engine.get_stig_family_recommendations(requirements, elements)]

        assert first == second

    def test_inputs_not_mutated(self, make_requirement, make_design_element):
        requirements, elements = self._mixed_inputs(make_requirement, make_design_element)
        before = [r.model_dump() for r in requirements] + [e.model_dump() for e in elements]

        self.engine.get_stig_family_recommendations(requirements, elements)

        assert [r.model_dump() for r in requirements] + [e.model_dump() for e in elements] == before

    def test_adding_requirement_never_lowers_scores(self, make_requirement, make_design_element):
        """Requirements only add to scores (the environment comes from design elements)"""
        requirements, elements = self._mixed_inputs(make_requirement, make_design_element)
        extra = make_requirement(title="Cloud accounts", description="Restrict AWS IAM roles", control_family="AC")

        for family in STIG_FAMILY_CATALOG:
            before = self.engine.analyze_stig_family(family, requirements, elements).relevance_score
            after = self.engine.analyze_stig_family(family, requirements + [extra], elements).relevance_score
            assert after >= before, f"{family.id} dropped from {before} to {after}"

    def test_matching_ids_are_unique_inputs(self, make_requirement, make_design_element):
        requirements, elements = self._mixed_inputs(make_requirement, make_design_element)
        requirement_ids = {r.id for r in requirements}
        element_ids = {e.id for e in elements}

        for rec in self.engine.get_stig_family_recommendations(requirements, elements):
            assert len(rec.matching_requirements) == len(set(rec.matching_requirements))
            assert set(rec.matching_requirements) <= requirement_ids
            assert len(rec.matching_design_elements) == len(set(rec.matching_design_elements))
            assert set(rec.matching_design_elements) <= element_ids

    def test_confidence_within_bounds(self, make_requirement, make_design_element):
        requirements, elements = self._mixed_inputs(make_requirement, make_design_element)

        for rec in self.engine.get_stig_family_recommendations(requirements, elements):
            assert 0 <= rec.confidence_score <= 100

    def test_legacy_profile_has_no_confidence(self, make_requirement, make_design_element):
        requirements, elements = self._mixed_inputs(make_requirement, make_design_element)
        engine = StigFamilyRecommendationEngine(weights=LEGACY_WEIGHTS)

        recommendations = engine.get_stig_family_recommendations(requirements, elements)

        assert recommendations
        assert all(rec.confidence_score is None for rec in recommendations)

    def test_legacy_profile_uses_flatter_design_weights(self, make_design_element):
        element = make_design_element(name="Orders DB", type=DesignElementType.DATABASE, technology="PostgreSQL")
        family = get_catalog_family("postgresql-9x")

        validated = StigFamilyRecommendationEngine().analyze_stig_family(family, [], [element])
        legacy = StigFamilyRecommendationEngine(weights=LEGACY_WEIGHTS).analyze_stig_family(family, [], [element])

        assert legacy.score_breakdown.technology_specific_bonus == 4
        assert legacy.relevance_score < validated.relevance_score


# ---------------------------------------------------------------------------
# Priority classification
# ---------------------------------------------------------------------------
@pytest.mark.unit
class TestPriorityClassification:
    """Implementation priority from score thresholds and catalog priority"""

    def setup_method(self):
        self.engine = StigFamilyRecommendationEngine()

    def _score(self, family, keyword_count, make_requirement):
        keywords = " ".join(family.trigger_keywords[:keyword_count])
        requirement = make_requirement(title="Custom", description=keywords)
        return self.engine.analyze_stig_family(family, [requirement], [])

    @pytest.mark.parametrize(
        "keyword_count,expected",
        [
            (1, ImplementationPriority.LOW),
            (2, ImplementationPriority.MEDIUM),
            (4, ImplementationPriority.HIGH),
            (6, ImplementationPriority.HIGH),
        ],
    )
    def test_low_catalog_priority_follows_thresholds(self, make_requirement, keyword_count, expected):
        """Low catalog entries are classified by score alone and never reach Critical"""
        rec = self._score(_custom_family(CatalogPriority.LOW), keyword_count, make_requirement)

        assert rec.relevance_score == keyword_count * 2
        assert rec.implementation_priority == expected.value

    def test_high_catalog_priority_is_at_least_high(self, make_requirement):
        rec = self._score(_custom_family(CatalogPriority.HIGH), 1, make_requirement)

        assert rec.implementation_priority == ImplementationPriority.HIGH.value

    def test_high_catalog_priority_reaches_critical(self, make_requirement):
        rec = self._score(_custom_family(CatalogPriority.HIGH), 6, make_requirement)

        assert rec.relevance_score == 12
        assert rec.implementation_priority == ImplementationPriority.CRITICAL.value

    def test_medium_catalog_priority_is_at_least_medium(self, make_requirement):
        rec = self._score(_custom_family(CatalogPriority.MEDIUM), 1, make_requirement)

        assert rec.implementation_priority == ImplementationPriority.MEDIUM.value


# ---------------------------------------------------------------------------
# Classification helpers
# ---------------------------------------------------------------------------
@pytest.mark.unit
class TestClassificationHelpers:
    """Environment and technology detection"""

    def test_application_security_ids(self):
        assert is_application_security_stig("application-security-dev")
        assert is_application_security_stig("nodejs-security")
        assert is_application_security_stig("web-server-security")
        assert not is_application_security_stig("postgresql-9x")

    def test_infrastructure_ids(self):
        assert is_infrastructure_stig("windows-server-2022")
        assert is_infrastructure_stig("rhel-9")
        assert is_infrastructure_stig("vmware-vsphere-8")
        assert not is_infrastructure_stig("windows-11")

    def test_development_environment_detection(self, make_design_element):
        assert detect_development_environment([make_design_element(name="Payments API")])
        assert not detect_development_environment([make_design_element(name="Core switch", description="VLAN")])
        assert not detect_development_environment([])

    def test_technology_detection(self):
        assert detect_technologies("orders db database postgresql") == {"postgresql"}
        assert {"docker", "kubernetes"} <= detect_technologies("k8s cluster running docker images")
        assert detect_technologies("mainframe") == set()


# ---------------------------------------------------------------------------
# Catalog source
# ---------------------------------------------------------------------------
@pytest.mark.unit
class TestCatalogSource:
    """Engine over custom catalogs and the repository"""

    def test_custom_catalog_sequence(self, make_requirement):
        family = _custom_family(CatalogPriority.LOW)
        engine = StigFamilyRecommendationEngine(catalog=[family])

        recommendations = engine.get_stig_family_recommendations([make_requirement(title="alpha")], [])

        assert [rec.stig_family.id for rec in recommendations] == ["custom-guide"]

    def test_repository_updates_are_visible(self, repository, make_requirement):
        """Catalog maintenance through the repository is reflected in later calls"""
        engine = StigFamilyRecommendationEngine(catalog=repository)
        requirement = make_requirement(title="Harden RHEL", description="selinux enforcing")

        before = _by_id(engine.get_stig_family_recommendations([requirement], []))["rhel-9"]
        repository.replace(
            StigFamily.from_dict({**get_catalog_family("rhel-9").to_dict(), "version": "V2R2"})
        )
        after = _by_id(engine.get_stig_family_recommendations([requirement], []))["rhel-9"]

        assert before.stig_family.version == "V2R1"
        assert after.stig_family.version == "V2R2"


# ---------------------------------------------------------------------------
# Implementation effort
# ---------------------------------------------------------------------------
@pytest.mark.unit
class TestImplementationEffort:
    """Effort estimation over recommendations"""

    def setup_method(self):
        self.engine = StigFamilyRecommendationEngine()

    def test_empty_recommendations(self):
        effort = self.engine.get_implementation_effort([])

        assert effort.to_dict() == {
            "totalRequirements": 0,
            "estimatedHours": 0,
            "estimatedDays": 0,
            "priorityCounts": {"critical": 0, "high": 0, "medium": 0, "low": 0},
        }

    def test_hours_and_days(self):
        family = get_catalog_family("postgresql-9x")

        effort = self.engine.get_implementation_effort([_recommendation(family, ImplementationPriority.CRITICAL)])

        assert effort.total_requirements == 122
        assert effort.estimated_hours == 183
        # 183 / 8 = 22.875
        assert effort.estimated_days == 23

    def test_hours_round_half_up(self):
        family = _custom_family(CatalogPriority.LOW, actual_requirements=3)

        effort = self.engine.get_implementation_effort([_recommendation(family, ImplementationPriority.LOW)])

        # 3 * 1.5 = 4.5
        assert effort.estimated_hours == 5
        assert effort.estimated_days == 1

    def test_legacy_hours_per_requirement(self):
        family = get_catalog_family("postgresql-9x")
        engine = StigFamilyRecommendationEngine(weights=LEGACY_WEIGHTS)

        effort = engine.get_implementation_effort([_recommendation(family, ImplementationPriority.HIGH)])

        # 122 * 1.2 = 146.4
        assert effort.estimated_hours == 146
        assert effort.estimated_days == 19

    def test_priority_counts(self):
        family = _custom_family(CatalogPriority.LOW, actual_requirements=1)
        recommendations = [
            _recommendation(family, ImplementationPriority.CRITICAL),
            _recommendation(family, ImplementationPriority.HIGH),
            _recommendation(family, ImplementationPriority.HIGH),
            _recommendation(family, ImplementationPriority.LOW),
        ]

        effort = self.engine.get_implementation_effort(recommendations)

        assert effort.priority_counts == PriorityCounts(critical=1, high=2, medium=0, low=1)
        assert effort.total_requirements == 4


# ---------------------------------------------------------------------------
# Default engine
# ---------------------------------------------------------------------------
@pytest.mark.unit
class TestDefaultEngine:
    """Module-level helpers and the configured scoring profile"""

    def test_singleton(self):
        assert get_recommendation_engine() is get_recommendation_engine()

    def test_default_profile_is_validated(self):
        assert get_recommendation_engine().weights.profile == "validated"

    def test_profile_from_environment(self, monkeypatch):
        monkeypatch.setenv("SRTM_SCORING_PROFILE", "legacy")

        assert get_recommendation_engine().weights.profile == "legacy"

    def test_module_helpers(self, make_requirement, make_design_element):
        element = make_design_element(name="Orders DB", type=DesignElementType.DATABASE, technology="PostgreSQL")

        recommendations = get_stig_family_recommendations([], [element])
        effort = get_implementation_effort(recommendations)

        assert recommendations
        assert effort.total_requirements == sum(rec.stig_family.actual_requirements for rec in recommendations)
