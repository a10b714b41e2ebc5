"""
SRTM Entity Models

Pydantic models for the entities of a Security Requirements Traceability
Matrix: security requirements, system design elements, test cases,
traceability links, STIG requirements and NIST SP 800-60 system
categorizations.

The models accept and emit the camelCase field names used in SRTM project
and workflow JSON files (``controlFamily``, ``createdAt``...), while Python
code uses snake_case attributes. Enum fields are stored as their string
values.

Example:
    >>> req = SecurityRequirement(
    ...     id="REQ-001",
    ...     title="Windows Server Security",
    ...     description="Secure Windows Server 2022",
    ...     controlFamily="AC",
    ... )
    >>> req.control_family
    'AC'
    >>> req.model_dump(by_alias=True)["controlFamily"]
    'AC'
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, model_validator

from .base import SrtmBaseModel, utcnow
from .enums import (
    Applicability,
    CatalogPriority,
    DesignElementType,
    ImpactLevel,
    ImplementationStatus,
    LinkStatus,
    LinkType,
    NistFunction,
    RequirementCategory,
    RequirementStatus,
    RmfStep,
    StigRequirementStatus,
    StigSeverity,
    TestMethod,
    TestStatus,
    TestType,
)


class SecurityRequirement(SrtmBaseModel):
    """
    A security requirement in the traceability matrix.

    Owned by the SRTM editing layer; read-only to the recommendation engine.
    """

    id: str = Field(..., min_length=1, description="Requirement identifier")
    title: str = Field("", description="Short requirement title")
    description: str = Field("", description="Free-text requirement description")
    source: str = Field("", description="Origin of the requirement (e.g. NIST SP 800-53)")
    category: RequirementCategory = Field(RequirementCategory.OTHER, description="Requirement category")
    priority: CatalogPriority = Field(CatalogPriority.MEDIUM, description="Requirement priority")
    status: RequirementStatus = Field(RequirementStatus.DRAFT, description="Lifecycle status")
    nist_function: Optional[NistFunction] = Field(None, description="NIST CSF function")
    nist_subcategory: Optional[str] = Field(None, description="NIST CSF subcategory (e.g. PR.AC-1)")
    rmf_step: Optional[RmfStep] = Field(None, description="RMF step")
    control_family: Optional[str] = Field(None, description="NIST SP 800-53 control family (AC, AU...)")
    control_identifier: Optional[str] = Field(None, description="NIST SP 800-53 control (e.g. AC-2)")
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class SystemDesignElement(SrtmBaseModel):
    """
    A component of the system design (service, database, API...).

    Owned by the SRTM editing layer; read-only to the recommendation engine.
    """

    id: str = Field(..., min_length=1, description="Design element identifier")
    name: str = Field("", description="Element name")
    type: DesignElementType = Field(DesignElementType.COMPONENT, description="Element kind")
    description: str = Field("", description="Free-text element description")
    technology: Optional[str] = Field(None, description="Implementation technology (e.g. PostgreSQL)")
    owner: Optional[str] = Field(None, description="Responsible owner")
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class TestCase(SrtmBaseModel):
    """A verification test case linked to requirements or design elements."""

    __test__ = False  # not a pytest test class

    id: str = Field(..., min_length=1)
    title: str = ""
    description: str = ""
    test_type: TestType = TestType.SECURITY
    test_method: TestMethod = TestMethod.MANUAL
    expected_result: str = ""
    actual_result: Optional[str] = None
    status: TestStatus = TestStatus.DRAFT
    priority: CatalogPriority = CatalogPriority.MEDIUM
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class TraceabilityLink(SrtmBaseModel):
    """
    Link between a requirement and a design element and/or test case.

    A link must reference at least one target besides the requirement.
    """

    id: str = Field(..., min_length=1)
    requirement_id: str = Field(..., min_length=1)
    design_element_id: Optional[str] = None
    test_case_id: Optional[str] = None
    link_type: LinkType = LinkType.REQUIREMENT_DESIGN
    status: LinkStatus = LinkStatus.ACTIVE
    rationale: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="after")
    def validate_has_target(self) -> "TraceabilityLink":
        """Ensure the link points at a design element or a test case."""
        if not self.design_element_id and not self.test_case_id:
            raise ValueError("Traceability link needs a design element or a test case")
        return self


class DetailedStigRequirement(SrtmBaseModel):
    """
    Content of a single STIG requirement (rule), without matrix bookkeeping.

    Built-in requirement libraries and imported STIG content are held in this
    form until they are added to a matrix as ``StigRequirement`` entries.
    """

    stig_id: str = Field(..., description="STIG rule identifier (e.g. APSC-DV-000010)")
    vuln_id: Optional[str] = Field(None, description="Vulnerability id (e.g. V-222400)")
    group_id: Optional[str] = None
    rule_id: Optional[str] = None
    severity: StigSeverity = StigSeverity.CAT_II
    title: str = ""
    description: str = ""
    check_text: str = ""
    fix_text: str = ""
    target_key: Optional[str] = None
    stig_ref: Optional[str] = None
    cci_ref: List[str] = Field(default_factory=list)
    applicability: Applicability = Applicability.APPLICABLE
    status: StigRequirementStatus = StigRequirementStatus.NOT_STARTED
    implementation_status: ImplementationStatus = ImplementationStatus.OPEN
    findings: Optional[str] = None
    comments: Optional[str] = None
    family: Optional[str] = Field(None, description="STIG family the requirement came from")


class StigRequirement(DetailedStigRequirement):
    """A single STIG requirement (rule) tracked in the matrix."""

    id: str = Field(..., min_length=1)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class SystemCategorization(SrtmBaseModel):
    """
    NIST SP 800-60 information type with its FIPS 199 impact levels.
    """

    category: str = Field(..., description="Information type code (e.g. C.2.8.12)")
    name: str = Field("", description="Information type name")
    description: str = ""
    confidentiality: ImpactLevel = ImpactLevel.LOW
    integrity: ImpactLevel = ImpactLevel.LOW
    availability: ImpactLevel = ImpactLevel.LOW
