"""
Shared Enums

Enumeration types shared by the SRTM entities, the STIG catalog and the
recommendation engine. Values match the labels used in exported SRTM and
workflow JSON files so that those files load without translation.

Usage:
    from srtm.models.enums import CatalogPriority, ImplementationPriority
"""

from enum import Enum


class CatalogPriority(str, Enum):
    """
    Static authorial weight of a STIG family in the catalog.

    Also used as the priority of security requirements and test cases.
    """

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class ImplementationPriority(str, Enum):
    """Priority computed for a STIG family recommendation"""

    CRITICAL = "Critical"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class RequirementCategory(str, Enum):
    """Security requirement categories"""

    AUTHENTICATION = "Authentication"
    AUTHORIZATION = "Authorization"
    ENCRYPTION = "Encryption"
    AUDIT = "Audit"
    INPUT_VALIDATION = "Input Validation"
    ACCESS_CONTROL = "Access Control"
    DATA_PROTECTION = "Data Protection"
    NETWORK_SECURITY = "Network Security"
    SYSTEM_INTEGRITY = "System Integrity"
    INCIDENT_RESPONSE = "Incident Response"
    OTHER = "Other"


class RequirementStatus(str, Enum):
    """Lifecycle of a security requirement"""

    DRAFT = "Draft"
    APPROVED = "Approved"
    IMPLEMENTED = "Implemented"
    TESTED = "Tested"
    VERIFIED = "Verified"


class NistFunction(str, Enum):
    """NIST Cybersecurity Framework functions"""

    IDENTIFY = "Identify"
    PROTECT = "Protect"
    DETECT = "Detect"
    RESPOND = "Respond"
    RECOVER = "Recover"


class RmfStep(str, Enum):
    """NIST SP 800-37 Risk Management Framework steps"""

    CATEGORIZE = "Categorize"
    SELECT = "Select"
    IMPLEMENT = "Implement"
    ASSESS = "Assess"
    AUTHORIZE = "Authorize"
    MONITOR = "Monitor"


class DesignElementType(str, Enum):
    """System design element kinds"""

    COMPONENT = "Component"
    MODULE = "Module"
    INTERFACE = "Interface"
    SERVICE = "Service"
    DATABASE = "Database"
    API = "API"


class TestType(str, Enum):
    """Test case kinds"""

    UNIT = "Unit"
    INTEGRATION = "Integration"
    SECURITY = "Security"
    PERFORMANCE = "Performance"
    ACCEPTANCE = "Acceptance"


class TestMethod(str, Enum):
    """How a test case is executed"""

    AUTOMATED = "Automated"
    MANUAL = "Manual"
    SEMI_AUTOMATED = "Semi-Automated"


class TestStatus(str, Enum):
    """Test case execution status"""

    DRAFT = "Draft"
    READY = "Ready"
    IN_PROGRESS = "In Progress"
    PASSED = "Passed"
    FAILED = "Failed"
    BLOCKED = "Blocked"


class LinkType(str, Enum):
    """Traceability link kinds"""

    REQUIREMENT_DESIGN = "Requirement-Design"
    REQUIREMENT_TEST = "Requirement-Test"
    DESIGN_TEST = "Design-Test"


class LinkStatus(str, Enum):
    """Traceability link status"""

    ACTIVE = "Active"
    INACTIVE = "Inactive"


class StigSeverity(str, Enum):
    """
    DISA severity categories.

    CAT I: loss of confidentiality, availability or integrity is direct
    CAT II: potential for loss
    CAT III: degrades measures protecting against loss
    """

    CAT_I = "CAT I"
    CAT_II = "CAT II"
    CAT_III = "CAT III"


class RuleSeverity(str, Enum):
    """XCCDF rule severity as written in STIG documents"""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Applicability(str, Enum):
    """Applicability of a STIG requirement to the system"""

    APPLICABLE = "Applicable"
    NOT_APPLICABLE = "Not Applicable"
    NOT_REVIEWED = "Not Reviewed"


class StigRequirementStatus(str, Enum):
    """Work status of a STIG requirement"""

    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    EXCEPTION_REQUESTED = "Exception Requested"


class ImplementationStatus(str, Enum):
    """Checklist result of a STIG requirement"""

    OPEN = "Open"
    NOT_A_FINDING = "NotAFinding"
    NOT_APPLICABLE = "Not_Applicable"


class ImpactLevel(str, Enum):
    """FIPS 199 impact levels (also the NIST SP 800-53B baseline names)"""

    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"


class CheckFrequency(str, Enum):
    """How often the catalog is checked for STIG updates"""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class UpdateSeverity(str, Enum):
    """Importance of a pending STIG catalog update"""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
