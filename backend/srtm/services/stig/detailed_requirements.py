"""
Detailed STIG Requirements

Requirement-level content for recommended STIG families, used to populate
the STIG section of a traceability matrix.

Content is resolved per family in this order:

1. Requirements stored in a ``StigRequirementStore`` (imported from a
   STIG document or a STIG Viewer CSV export)
2. The built-in requirement libraries below
3. A single placeholder requirement naming the family

Usage:
    >>> store = StigRequirementStore()
    >>> store.store("postgresql", parse_stig_csv_rows(csv_text))
    >>> matrix_rows = convert_to_stig_requirements(["postgresql", "nodejs-security"], store)
"""

import logging
import re
import uuid
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ...models.enums import StigRequirementStatus, StigSeverity
from ...models.srtm_models import DetailedStigRequirement, StigRequirement
from ...models.stig_models import StigImportResult, StigRequirementGroup
from ...utils.logging_security import sanitize_id_for_log
from .parsers import CCI_PATTERN, DEFAULT_CCI, read_stig_csv_rows, severity_to_category

logger = logging.getLogger(__name__)

# ============================================================================
# Built-in Requirement Libraries
# ============================================================================

APPLICATION_SECURITY_REQUIREMENTS = (
    DetailedStigRequirement(
        stig_id="APSC-DV-000010",
        vuln_id="V-222400",
        group_id="SRG-APP-000001",
        rule_id="SV-222400r508029_rule",
        severity=StigSeverity.CAT_II,
        title="The application must limit the number of concurrent sessions to an organization-defined number per user.",
        description=(
            "Application management includes the ability to control the number of users and user sessions that "
            "utilize an application. Limiting the number of allowed users and sessions per user is helpful in "
            "reducing the risks related to several types of denial-of-service attacks."
        ),
        check_text=(
            "Review the application documentation and interview the application administrator to identify if the "
            "application implements session management. If the application does not implement session management, "
            "this requirement is not applicable. Review the application configuration to determine if the "
            "application limits concurrent user sessions. If the application does not limit concurrent user "
            "sessions to an organization-defined number per user, this is a finding."
        ),
        fix_text=(
            "Configure the application to limit the number of concurrent sessions to an organization-defined "
            "number per user."
        ),
        cci_ref=["CCI-000054"],
    ),
    DetailedStigRequirement(
        stig_id="APSC-DV-000020",
        vuln_id="V-222401",
        group_id="SRG-APP-000001",
        rule_id="SV-222401r508032_rule",
        severity=StigSeverity.CAT_II,
        title=(
            "The application must automatically terminate a user session after organization-defined conditions "
            "or trigger events requiring session disconnect."
        ),
        description=(
            "Automatic session termination addresses the termination of user-initiated logical sessions in "
            "contrast to the termination of network connections that are associated with communications sessions."
        ),
        check_text=(
            "Review the application documentation and interview the application administrator to identify if the "
            "application implements session management. If the application does not implement session management, "
            "this requirement is not applicable. Review the application configuration to determine if the "
            "application automatically terminates user sessions after organization-defined conditions. If the "
            "application does not automatically terminate user sessions, this is a finding."
        ),
        fix_text=(
            "Configure the application to automatically terminate user sessions after organization-defined "
            "conditions or trigger events requiring session disconnect."
        ),
        cci_ref=["CCI-002361"],
    ),
    DetailedStigRequirement(
        stig_id="APSC-DV-000030",
        vuln_id="V-222402",
        group_id="SRG-APP-000002",
        rule_id="SV-222402r508035_rule",
        severity=StigSeverity.CAT_I,
        title="The application must not display passwords/PINs as clear text.",
        description=(
            "To prevent the compromise of authentication information such as passwords and PINs during the "
            "authentication process, the feedback from the application must not provide any information that "
            "would allow an unauthorized user to compromise the authentication mechanism."
        ),
        check_text=(
            "Review the application documentation and observe the application authentication process. Verify the "
            "application does not display passwords/PINs in clear text during user authentication. If "
            "passwords/PINs are displayed in clear text, this is a finding."
        ),
        fix_text="Configure the application to not display passwords/PINs as clear text.",
        cci_ref=["CCI-000206"],
    ),
)

NODEJS_SECURITY_REQUIREMENTS = (
    DetailedStigRequirement(
        stig_id="NODEJS-00-000010",
        severity=StigSeverity.CAT_II,
        title="Node.js applications must validate all input parameters.",
        description=(
            "Input validation is critical to prevent injection attacks and ensure data integrity. All user inputs "
            "must be validated against expected formats, lengths, and character sets."
        ),
        check_text=(
            "Review the Node.js application code to verify that all input parameters are validated. Check for "
            "implementation of input validation libraries such as Joi, express-validator, or custom validation "
            "functions. If input validation is not implemented for all user inputs, this is a finding."
        ),
        fix_text=(
            "Implement comprehensive input validation for all user inputs using validation libraries like Joi or "
            "express-validator. Validate data types, formats, lengths, and character sets."
        ),
        cci_ref=["CCI-000213"],
    ),
    DetailedStigRequirement(
        stig_id="NODEJS-00-000020",
        severity=StigSeverity.CAT_I,
        title="Node.js applications must not use deprecated or vulnerable npm packages.",
        description=(
            "Using outdated or vulnerable npm packages exposes the application to known security vulnerabilities. "
            "Regular audits and updates of dependencies are essential."
        ),
        check_text=(
            'Run "npm audit" command to check for known vulnerabilities in dependencies. Review package.json and '
            "package-lock.json for deprecated packages. If vulnerable or deprecated packages are found, this is a "
            "finding."
        ),
        fix_text=(
            'Update all npm packages to their latest secure versions. Use "npm audit fix" to automatically fix '
            "vulnerabilities where possible. Replace deprecated packages with supported alternatives."
        ),
        cci_ref=["CCI-002605"],
    ),
    DetailedStigRequirement(
        stig_id="NODEJS-00-000030",
        severity=StigSeverity.CAT_II,
        title="Node.js applications must implement proper error handling without exposing sensitive information.",
        description=(
            "Error messages should not reveal sensitive information about the application structure, database "
            "schema, or system configuration that could be used by attackers."
        ),
        check_text=(
            "Review error handling implementation in the Node.js application. Check that error messages in "
            "production do not expose stack traces, database errors, or system paths. If sensitive information is "
            "exposed in error messages, this is a finding."
        ),
        fix_text=(
            "Implement proper error handling that logs detailed errors server-side but returns generic error "
            "messages to clients in production. Use environment-specific error handling."
        ),
        cci_ref=["CCI-001312"],
    ),
    DetailedStigRequirement(
        stig_id="NODEJS-00-000040",
        severity=StigSeverity.CAT_II,
        title="Node.js applications must implement secure session management.",
        description=(
            "Sessions must be properly configured with secure flags, appropriate timeouts, and protection against "
            "session fixation and hijacking attacks."
        ),
        check_text=(
            "Review session configuration in the Node.js application. Check for secure session settings including "
            "httpOnly, secure flags, proper timeout values, and session regeneration. If secure session management "
            "is not implemented, this is a finding."
        ),
        fix_text=(
            "Configure sessions with secure settings: httpOnly flag, secure flag for HTTPS, appropriate timeout "
            "values, and implement session regeneration on authentication."
        ),
        cci_ref=["CCI-000366"],
    ),
)

POSTGRESQL_REQUIREMENTS = (
    DetailedStigRequirement(
        stig_id="PGS9-00-000100",
        vuln_id="V-233516",
        group_id="SRG-APP-000001",
        rule_id="SV-233516r617333_rule",
        severity=StigSeverity.CAT_II,
        title="PostgreSQL must limit the number of connections.",
        description=(
            "Database management systems can maintain multiple simultaneous sessions. It is important to limit the "
            "number of sessions to reduce the risk of denial of service attacks and resource exhaustion."
        ),
        check_text=(
            "Review PostgreSQL configuration file (postgresql.conf) for the max_connections parameter. If "
            "max_connections is not set to an organization-defined value or is set to unlimited (-1), this is a "
            "finding."
        ),
        fix_text=(
            "Set the max_connections parameter in postgresql.conf to an organization-defined maximum number of "
            "concurrent connections."
        ),
        cci_ref=["CCI-000054"],
    ),
    DetailedStigRequirement(
        stig_id="PGS9-00-000200",
        vuln_id="V-233517",
        group_id="SRG-APP-000002",
        rule_id="SV-233517r617336_rule",
        severity=StigSeverity.CAT_I,
        title="PostgreSQL must protect against unauthorized access by configuring authentication methods.",
        description=(
            "PostgreSQL must be configured to use appropriate authentication methods and not allow unauthorized "
            "access through weak authentication mechanisms."
        ),
        check_text=(
            "Review the pg_hba.conf file to verify that appropriate authentication methods are configured. Check "
            "that trust authentication is not used for remote connections. If weak authentication methods are "
            "configured, this is a finding."
        ),
        fix_text=(
            "Configure strong authentication methods in pg_hba.conf such as md5, scram-sha-256, or "
            "certificate-based authentication. Remove trust authentication for remote connections."
        ),
        cci_ref=["CCI-000213"],
    ),
    DetailedStigRequirement(
        stig_id="PGS9-00-000300",
        vuln_id="V-233518",
        group_id="SRG-APP-000003",
        rule_id="SV-233518r617339_rule",
        severity=StigSeverity.CAT_II,
        title="PostgreSQL must enforce approved authorizations for logical access.",
        description=(
            "PostgreSQL must enforce approved authorizations for logical access to information and system "
            "resources in accordance with applicable access control policies."
        ),
        check_text=(
            "Review PostgreSQL user privileges and role assignments. Verify that users have only the minimum "
            "necessary privileges. If users have excessive privileges, this is a finding."
        ),
        fix_text=(
            "Implement principle of least privilege by granting users only the minimum necessary permissions. Use "
            "roles to group permissions and assign roles to users appropriately."
        ),
        cci_ref=["CCI-000213"],
    ),
)

WEB_APPLICATION_SECURITY_REQUIREMENTS = (
    DetailedStigRequirement(
        stig_id="WBAP-SI-000100",
        severity=StigSeverity.CAT_I,
        title="Web applications must protect against SQL injection attacks.",
        description=(
            "SQL injection vulnerabilities occur when user input is directly incorporated into SQL queries without "
            "proper sanitization or parameterization."
        ),
        check_text=(
            "Review web application code for SQL queries. Verify that all user inputs are properly sanitized and "
            "parameterized queries are used. If SQL injection vulnerabilities exist, this is a finding."
        ),
        fix_text=(
            "Use parameterized queries, prepared statements, or stored procedures. Implement input validation and "
            "sanitization for all user inputs that interact with databases."
        ),
        cci_ref=["CCI-001310"],
    ),
    DetailedStigRequirement(
        stig_id="WBAP-SI-000200",
        severity=StigSeverity.CAT_II,
        title="Web applications must protect against Cross-Site Scripting (XSS) attacks.",
        description=(
            "XSS vulnerabilities allow attackers to inject malicious scripts into web pages viewed by other users, "
            "potentially leading to session hijacking, credential theft, or other attacks."
        ),
        check_text=(
            "Review web application for XSS protection mechanisms. Check for input validation, output encoding, "
            "and Content Security Policy implementation. If XSS protections are not implemented, this is a finding."
        ),
        fix_text=(
            "Implement input validation, output encoding, and Content Security Policy (CSP) headers. Use security "
            "libraries that automatically encode outputs."
        ),
        cci_ref=["CCI-001310"],
    ),
    DetailedStigRequirement(
        stig_id="WBAP-SI-000300",
        severity=StigSeverity.CAT_II,
        title="Web applications must implement proper authentication mechanisms.",
        description=(
            "Web applications must implement strong authentication mechanisms to verify user identities and "
            "prevent unauthorized access."
        ),
        check_text=(
            "Review web application authentication mechanisms. Verify multi-factor authentication, password "
            "complexity requirements, and account lockout policies are implemented. If weak authentication is "
            "found, this is a finding."
        ),
        fix_text=(
            "Implement strong authentication mechanisms including multi-factor authentication, enforce password "
            "complexity requirements, and configure appropriate account lockout policies."
        ),
        cci_ref=["CCI-000213"],
    ),
)

SECURE_CODING_REQUIREMENTS = (
    DetailedStigRequirement(
        stig_id="SCOD-DV-000100",
        severity=StigSeverity.CAT_II,
        title="Applications must implement secure coding practices for input validation.",
        description=(
            "Secure coding practices require that all input from users be validated to prevent injection attacks "
            "and ensure data integrity."
        ),
        check_text=(
            "Review application source code to verify that input validation is implemented consistently "
            "throughout the application. If input validation is missing or inconsistent, this is a finding."
        ),
        fix_text=(
            "Implement comprehensive input validation using whitelist validation, regular expressions, and data "
            "type checking for all user inputs."
        ),
        cci_ref=["CCI-001310"],
    ),
    DetailedStigRequirement(
        stig_id="SCOD-DV-000200",
        severity=StigSeverity.CAT_II,
        title="Applications must implement secure error handling.",
        description=(
            "Error handling must be implemented to prevent the disclosure of sensitive information while providing "
            "adequate logging for security monitoring."
        ),
        check_text=(
            "Review application error handling to ensure sensitive information is not disclosed in error messages. "
            "Verify that errors are properly logged. If inadequate error handling is found, this is a finding."
        ),
        fix_text=(
            "Implement secure error handling that logs detailed information server-side while returning generic "
            "error messages to users."
        ),
        cci_ref=["CCI-001312"],
    ),
)

BUILTIN_REQUIREMENT_LIBRARY = {
    "application-security-dev": APPLICATION_SECURITY_REQUIREMENTS,
    "nodejs-security": NODEJS_SECURITY_REQUIREMENTS,
    "postgresql": POSTGRESQL_REQUIREMENTS,
    "web-application-security": WEB_APPLICATION_SECURITY_REQUIREMENTS,
    "secure-coding-practices": SECURE_CODING_REQUIREMENTS,
}

SEVERITY_ORDER = {
    StigSeverity.CAT_I.value: 0,
    StigSeverity.CAT_II.value: 1,
    StigSeverity.CAT_III.value: 2,
}

# Higher rank wins when requirements sharing a title are grouped
STATUS_RANK = {
    StigRequirementStatus.NOT_STARTED.value: 0,
    StigRequirementStatus.EXCEPTION_REQUESTED.value: 1,
    StigRequirementStatus.IN_PROGRESS.value: 2,
    StigRequirementStatus.COMPLETED.value: 3,
}


def placeholder_requirements(stig_family_id: str) -> List[DetailedStigRequirement]:
    """
    Placeholder content for a family without detailed requirements.

    Example:
        >>> placeholder_requirements("docker-enterprise")[0].stig_id
        'DOCKER-ENTERPRISE-PLACEHOLDER-001'
    """
    return [
        DetailedStigRequirement(
            stig_id=f"{stig_family_id.upper()}-PLACEHOLDER-001",
            severity=StigSeverity.CAT_II,
            title=f"{stig_family_id.replace('-', ' ').upper()} Security Requirements",
            description=(
                f"This is a placeholder for detailed {stig_family_id} STIG requirements. Full implementation pending."
            ),
            check_text=f"Review the system for {stig_family_id} compliance requirements.",
            fix_text=f"Implement {stig_family_id} security controls according to the official STIG documentation.",
        )
    ]


def get_builtin_requirements(stig_family_id: str) -> List[DetailedStigRequirement]:
    """
    Built-in requirements of a family, or its placeholder.

    Returns copies; callers may modify the result.
    """
    library = BUILTIN_REQUIREMENT_LIBRARY.get(stig_family_id)
    if library is None:
        return placeholder_requirements(stig_family_id)
    return [requirement.model_copy(deep=True) for requirement in library]


# ============================================================================
# CSV Conversion
# ============================================================================


def _pick(row: Dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = row.get(key)
        if value:
            return str(value).strip()
    return None


def normalize_requirement_status(value: Optional[str]) -> str:
    """
    Map a free-text checklist status to a StigRequirementStatus value.

    Example:
        >>> normalize_requirement_status("waiver")
        'Exception Requested'
    """
    text = (value or "").strip().lower()
    if "complete" in text:
        return StigRequirementStatus.COMPLETED.value
    if "progress" in text or "ongoing" in text:
        return StigRequirementStatus.IN_PROGRESS.value
    if "exception" in text or "waiver" in text:
        return StigRequirementStatus.EXCEPTION_REQUESTED.value
    return StigRequirementStatus.NOT_STARTED.value


def convert_csv_row(row: Dict[str, Any]) -> DetailedStigRequirement:
    """
    Convert one STIG Viewer CSV row to a detailed requirement.

    Accepts the camelCase keys of the STIG Viewer export model (``stigId``,
    ``ruleTitle``, ``checkContent``...) and the canonical keys produced by
    ``read_stig_csv_rows``.

    Args:
        row: CSV row

    Returns:
        Requirement with the severity as a DISA category, CCIs extracted
        from the ``ccis`` cell (default CCI-000366) and the status
        normalized
    """
    ccis = CCI_PATTERN.findall(_pick(row, "ccis", "cci") or "")
    stig_id = _pick(row, "stigId", "stig_id", "ruleId", "rule_id", "vulnId", "vuln_id") or "UNKNOWN"

    return DetailedStigRequirement(
        stig_id=stig_id,
        vuln_id=_pick(row, "vulnId", "vuln_id"),
        group_id=_pick(row, "groupId", "group_id"),
        rule_id=_pick(row, "ruleId", "rule_id"),
        severity=severity_to_category(_pick(row, "severity")),
        title=_pick(row, "ruleTitle", "rule_title", "title") or "",
        description=_pick(row, "discussion", "description") or "",
        check_text=_pick(row, "checkContent", "check_content") or "",
        fix_text=_pick(row, "fixText", "fix_text") or "",
        cci_ref=ccis or [DEFAULT_CCI],
        status=normalize_requirement_status(_pick(row, "status")),
    )


def parse_stig_csv_rows(text: str) -> List[DetailedStigRequirement]:
    """
    Parse a STIG Viewer CSV export into detailed requirements.

    Raises:
        StigParseError: If the CSV has no STIG columns
    """
    return [convert_csv_row(row) for row in read_stig_csv_rows(text)]


def convert_import_result(result: StigImportResult) -> List[DetailedStigRequirement]:
    """Convert a parsed STIG document to detailed requirements."""
    return [
        DetailedStigRequirement(
            stig_id=parsed.vuln_id or parsed.rule_id,
            vuln_id=parsed.vuln_id,
            rule_id=parsed.rule_id,
            severity=severity_to_category(parsed.severity),
            title=parsed.title,
            description=parsed.description,
            check_text=parsed.check_text,
            fix_text=parsed.fix_text,
            cci_ref=list(parsed.cci) or [DEFAULT_CCI],
            stig_ref=f"{result.stig_name} :: Version {result.version}",
        )
        for parsed in result.requirements
    ]


# ============================================================================
# Requirement Store
# ============================================================================


def _to_matrix_entry(stig_family_id: str, requirement: DetailedStigRequirement, index: int) -> StigRequirement:
    data = requirement.model_dump()
    data["family"] = data.get("family") or stig_family_id
    return StigRequirement(id=f"{stig_family_id}-{uuid.uuid4().hex[:12]}-{index}", **data)


class StigRequirementStore:
    """
    Detailed requirements imported per STIG family.

    Storing a family replaces whatever was stored for it before.
    """

    def __init__(self) -> None:
        self._requirements: Dict[str, List[DetailedStigRequirement]] = {}

    def store(self, stig_family_id: str, requirements: Iterable[DetailedStigRequirement]) -> None:
        """Store (replace) the requirements of a family."""
        self._requirements[stig_family_id] = [r.model_copy(deep=True) for r in requirements]
        logger.info(
            f"Stored {len(self._requirements[stig_family_id])} STIG requirements "
            f"for {sanitize_id_for_log(stig_family_id)}"
        )

    def store_import_result(self, stig_family_id: str, result: StigImportResult) -> None:
        """Store the requirements of a parsed STIG document for a family."""
        self.store(stig_family_id, convert_import_result(result))

    def get_stored(self, stig_family_id: str) -> List[DetailedStigRequirement]:
        """Stored requirements of a family ([] when nothing is stored)."""
        return [r.model_copy(deep=True) for r in self._requirements.get(stig_family_id, [])]

    def has_stored(self, stig_family_id: str) -> bool:
        return bool(self._requirements.get(stig_family_id))

    def get_all(self) -> List[StigRequirement]:
        """All stored requirements as matrix entries (with id and timestamps)."""
        entries: List[StigRequirement] = []
        for stig_family_id, requirements in self._requirements.items():
            entries.extend(_to_matrix_entry(stig_family_id, r, i) for i, r in enumerate(requirements))
        return entries

    def clear(self, stig_family_id: Optional[str] = None) -> None:
        """Clear one family, or every family when no id is given."""
        if stig_family_id is None:
            self._requirements.clear()
        else:
            self._requirements.pop(stig_family_id, None)

    def get_detailed(self, stig_family_id: str) -> List[DetailedStigRequirement]:
        """Stored requirements of a family, else its built-in requirements."""
        if self.has_stored(stig_family_id):
            return self.get_stored(stig_family_id)
        return get_builtin_requirements(stig_family_id)

    def convert_to_matrix(self, stig_family_ids: Sequence[str]) -> List[StigRequirement]:
        """Matrix entries for the given families, in family order."""
        return convert_to_stig_requirements(stig_family_ids, self)

    def get_unique_requirement_count(self, stig_family_id: str) -> int:
        """Number of distinct titles among the stored requirements of a family."""
        return len({r.title.strip() for r in self._requirements.get(stig_family_id, [])})


def convert_to_stig_requirements(
    stig_family_ids: Sequence[str], store: Optional[StigRequirementStore] = None
) -> List[StigRequirement]:
    """
    Build matrix entries for recommended STIG families.

    Args:
        stig_family_ids: Families to expand, in order
        store: Imported requirements preferred over built-in content

    Returns:
        One StigRequirement per detailed requirement, tagged with its family
    """
    entries: List[StigRequirement] = []
    for stig_family_id in stig_family_ids:
        if store is not None:
            requirements = store.get_detailed(stig_family_id)
        else:
            requirements = get_builtin_requirements(stig_family_id)
        entries.extend(_to_matrix_entry(stig_family_id, r, i) for i, r in enumerate(requirements))
    return entries


# ============================================================================
# Grouping
# ============================================================================


def _normalize_title(title: str) -> str:
    return re.sub(r"\s+", " ", title).strip()


def group_requirements_by_title(requirements: Iterable[DetailedStigRequirement]) -> List[StigRequirementGroup]:
    """
    Group requirements that share a title across STIG families.

    A group keeps the most severe category and the most advanced status of
    its members.

    Returns:
        Groups sorted by severity (CAT I first), then title
    """
    groups: Dict[str, Dict[str, Any]] = {}
    for requirement in requirements:
        title = _normalize_title(requirement.title)
        group = groups.get(title)
        if group is None:
            groups[title] = {
                "title": title,
                "severity": requirement.severity,
                "status": requirement.status,
                "count": 1,
                "stig_ids": [requirement.stig_id],
                "families": [requirement.family] if requirement.family else [],
            }
            continue

        group["count"] += 1
        if requirement.stig_id not in group["stig_ids"]:
            group["stig_ids"].append(requirement.stig_id)
        if requirement.family and requirement.family not in group["families"]:
            group["families"].append(requirement.family)
        if SEVERITY_ORDER.get(requirement.severity, 1) < SEVERITY_ORDER.get(group["severity"], 1):
            group["severity"] = requirement.severity
        if STATUS_RANK.get(requirement.status, 0) > STATUS_RANK.get(group["status"], 0):
            group["status"] = requirement.status

    ordered = sorted(groups.values(), key=lambda g: (SEVERITY_ORDER.get(g["severity"], 1), g["title"]))
    return [StigRequirementGroup(**group) for group in ordered]
