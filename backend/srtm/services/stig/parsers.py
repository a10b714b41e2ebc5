"""
STIG Document Parsers

Parsers that turn DISA STIG documents into a ``StigImportResult``:

- ``XccdfStigParser``: XCCDF benchmark XML as shipped in the DISA STIG
  zip bundles (``U_<Name>_STIG_V<v>R<r>_Manual-xccdf.xml``)
- ``parse_stigviewer_json``: the JSON export of stigviewer.com
- ``parse_stig_csv``: the CSV export of DISA STIG Viewer

Security:
- XML is parsed with lxml with entity resolution and network access
  disabled (XXE prevention) and ``huge_tree`` off (billion laughs)
- Documents larger than ``Settings.max_stig_file_size`` are rejected
  before parsing

Usage:
    >>> from srtm.services.stig.parsers import import_stig_file
    >>> result = import_stig_file("public/stigs/postgresql_9x/U_PostgreSQL_9-x_STIG_V2R1_Manual-xccdf.xml")
    >>> print(f"{result.stig_name}: {result.total_requirements} requirements")
"""

import csv
import io
import json
import logging
import re
from datetime import date
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

import lxml.etree as etree  # nosec B410 - secure parser (resolve_entities=False, no_network=True)

from ...config import get_settings
from ...exceptions import StigFileTooLargeError, StigParseError
from ...models.enums import RuleSeverity, StigSeverity
from ...models.stig_models import ParsedStigRequirement, StigImportResult
from ...utils.file_security import (
    STIG_CSV_EXTENSIONS,
    STIG_JSON_EXTENSIONS,
    STIG_XML_EXTENSIONS,
    is_within_size_limit,
    validate_file_extension,
)
from ...utils.logging_security import sanitize_error_message_for_log, sanitize_for_log, sanitize_path_for_log

logger = logging.getLogger(__name__)

# CCI identifiers are published under both systems depending on the STIG release
CCI_IDENT_SYSTEMS = ("http://cyber.mil/legacy/cci", "http://cyber.mil/cci", "http://iase.disa.mil/cci")

DEFAULT_XCCDF_CCI = "CCI-000000"
DEFAULT_XCCDF_NIST_CONTROL = "AC-1"
DEFAULT_CCI = "CCI-000366"

DESCRIPTION_MAX_LENGTH = 500
PROCEDURE_MAX_LENGTH = 1000

CCI_PATTERN = re.compile(r"CCI-\d+")
NIST_CONTROL_PATTERN = re.compile(r"\b([A-Z]{2}-\d+(?:\s*\(\d+\))?)")
_TAG_PATTERN = re.compile(r"<[^>]+>")
_WHITESPACE_PATTERN = re.compile(r"\s+")
_SEVERITY_CODE_PATTERN = re.compile(r"^(?:cat(?:egory)?\s*)?(i{1,3}|[1-3])$")

_HTML_ENTITIES = (
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&nbsp;", " "),
    ("&amp;", "&"),
)

_SEVERITY_CODES = {
    "i": RuleSeverity.HIGH,
    "1": RuleSeverity.HIGH,
    "ii": RuleSeverity.MEDIUM,
    "2": RuleSeverity.MEDIUM,
    "iii": RuleSeverity.LOW,
    "3": RuleSeverity.LOW,
}

SEVERITY_CATEGORIES = {
    RuleSeverity.HIGH.value: StigSeverity.CAT_I.value,
    RuleSeverity.MEDIUM.value: StigSeverity.CAT_II.value,
    RuleSeverity.LOW.value: StigSeverity.CAT_III.value,
}

# Normalized CSV header -> canonical column key
CSV_COLUMN_ALIASES = {
    "vulnid": "vuln_id",
    "vulnerabilityid": "vuln_id",
    "vulnnum": "vuln_id",
    "groupid": "group_id",
    "ruleid": "rule_id",
    "stigid": "stig_id",
    "ruleversion": "stig_id",
    "version": "stig_id",
    "severity": "severity",
    "cat": "severity",
    "category": "severity",
    "ruletitle": "rule_title",
    "title": "rule_title",
    "discussion": "discussion",
    "vulndiscussion": "discussion",
    "description": "discussion",
    "checkcontent": "check_content",
    "checktext": "check_content",
    "check": "check_content",
    "fixtext": "fix_text",
    "fix": "fix_text",
    "ccis": "ccis",
    "cci": "ccis",
    "ccirefs": "ccis",
    "ccireference": "ccis",
    "status": "status",
}


# ============================================================================
# Shared Helpers
# ============================================================================


def normalize_severity(value: Any) -> str:
    """
    Normalize a STIG severity label to ``high``, ``medium`` or ``low``.

    Accepts XCCDF severities, DISA categories ("CAT I".."CAT III") and the
    bare numerals stigviewer uses ("I", "2"...). Anything unrecognized is
    treated as medium.

    Args:
        value: Raw severity (string, number or None)

    Returns:
        RuleSeverity value
    """
    text = _WHITESPACE_PATTERN.sub(" ", str(value if value is not None else "")).strip().lower()
    if not text:
        return RuleSeverity.MEDIUM.value

    if "high" in text:
        return RuleSeverity.HIGH.value
    if "low" in text:
        return RuleSeverity.LOW.value
    if "medium" in text:
        return RuleSeverity.MEDIUM.value

    match = _SEVERITY_CODE_PATTERN.match(text)
    if match:
        return _SEVERITY_CODES[match.group(1)].value

    return RuleSeverity.MEDIUM.value


def severity_to_category(value: Any) -> str:
    """
    Convert a severity label to its DISA category.

    Example:
        >>> severity_to_category("high")
        'CAT I'
        >>> severity_to_category("CAT III")
        'CAT III'
    """
    return SEVERITY_CATEGORIES[normalize_severity(value)]


def strip_markup(text: Optional[str]) -> str:
    """
    Remove markup tags, decode common entities and collapse whitespace.

    DISA descriptions embed escaped pseudo-XML (``<VulnDiscussion>``), which
    arrives here as literal tags once the document is parsed.
    """
    if not text:
        return ""
    cleaned = _TAG_PATTERN.sub("", text)
    for entity, replacement in _HTML_ENTITIES:
        cleaned = cleaned.replace(entity, replacement)
    return _WHITESPACE_PATTERN.sub(" ", cleaned).strip()


def stig_id_from_filename(filename: str) -> str:
    """
    Derive a STIG id from a document file name.

    Example:
        >>> stig_id_from_filename("U_PostgreSQL 9-x_STIG.xml")
        'u_postgresql_9-x_stig'
    """
    stem = re.sub(r"\.(xml|xccdf)", "", Path(filename).name, flags=re.IGNORECASE)
    return _WHITESPACE_PATTERN.sub("_", stem.strip().lower())


def _today() -> str:
    return date.today().isoformat()


def _check_size(size: int, source: str) -> None:
    max_size = get_settings().max_stig_file_size
    if size > max_size:
        raise StigFileTooLargeError(f"{source} exceeds maximum size limit ({max_size} bytes)")


def _build_result(
    stig_id: str,
    stig_name: str,
    version: str,
    release_date: str,
    requirements: List[ParsedStigRequirement],
    source: str,
) -> StigImportResult:
    return StigImportResult(
        stig_id=stig_id,
        stig_name=stig_name,
        version=version,
        release_date=release_date,
        requirements=requirements,
        total_requirements=len(requirements),
        source=source,
    )


# ============================================================================
# XCCDF
# ============================================================================


class XccdfStigParser:
    """
    Parser for DISA XCCDF STIG benchmarks.

    Each ``Group`` holding a ``Rule`` becomes one requirement. Element
    lookups ignore namespaces so that XCCDF 1.1 and 1.2 documents, and
    documents without a namespace, are handled alike.

    Example:
        >>> parser = XccdfStigParser()
        >>> result = parser.parse_file("U_Apache_Server_2-4_UNIX_STIG_V2R5_Manual-xccdf.xml")
        >>> result.requirements[0].severity
        'medium'
    """

    def __init__(self, max_file_size: Optional[int] = None) -> None:
        self.max_file_size = max_file_size

    def _xml_parser(self) -> etree.XMLParser:
        return etree.XMLParser(
            resolve_entities=False,
            no_network=True,
            remove_comments=True,
            remove_pis=True,
            huge_tree=False,
        )

    def _enforce_size(self, size: int, source: str) -> None:
        if self.max_file_size is not None:
            if size > self.max_file_size:
                raise StigFileTooLargeError(f"{source} exceeds maximum size limit ({self.max_file_size} bytes)")
        else:
            _check_size(size, source)

    def parse_file(self, file_path: Union[str, Path]) -> StigImportResult:
        """
        Parse an XCCDF STIG file.

        Args:
            file_path: Path to the XML file

        Returns:
            Parsed STIG document

        Raises:
            StigFileTooLargeError: If the file exceeds the size limit
            StigParseError: If the file cannot be read or holds no rules
        """
        path = Path(file_path)
        try:
            size = path.stat().st_size
        except OSError as e:
            raise StigParseError(f"Cannot read STIG file {path.name}: {e}") from e

        self._enforce_size(size, path.name)
        logger.info(f"Parsing XCCDF STIG file: {sanitize_path_for_log(path)}")
        return self.parse_bytes(path.read_bytes(), path.name)

    def parse_bytes(self, content: Union[str, bytes], filename: str) -> StigImportResult:
        """
        Parse XCCDF content.

        Args:
            content: XML document
            filename: Original file name, used to derive the STIG id

        Returns:
            Parsed STIG document

        Raises:
            StigFileTooLargeError: If the content exceeds the size limit
            StigParseError: If the XML is malformed or holds no rules
        """
        if isinstance(content, str):
            content = content.encode("utf-8")
        self._enforce_size(len(content), filename)

        try:
            root = etree.fromstring(content, self._xml_parser())
        except etree.XMLSyntaxError as e:
            raise StigParseError(f"Failed to parse XCCDF XML: {e}") from e

        stig_id = stig_id_from_filename(filename)
        benchmark = self._find_benchmark(root)

        stig_name = self._child_text(benchmark, "title") or stig_id
        version = self._child_text(benchmark, "version") or "Unknown"
        release_date = self._release_date(benchmark) or _today()

        requirements: List[ParsedStigRequirement] = []
        for group in self._iter_local(benchmark, "Group"):
            requirement = self._parse_group(group)
            if requirement is not None:
                requirements.append(requirement)

        if not requirements:
            raise StigParseError(
                "Failed to parse XCCDF XML: No requirements found in XML. "
                "The file may not be a valid XCCDF STIG file."
            )

        logger.info(f"Parsed {len(requirements)} requirements from {sanitize_for_log(stig_name)}")
        return _build_result(stig_id, stig_name, version, release_date, requirements, "local")

    def _parse_group(self, group: Any) -> Optional[ParsedStigRequirement]:
        rule = next(self._iter_local(group, "Rule", direct=True), None)
        if rule is None:
            return None

        vuln_id = group.get("id", "")
        title = self._child_text(rule, "title") or f"Requirement {vuln_id}"
        description = strip_markup(self._child_text(rule, "description", raw=True))
        check = self._first_descendant(rule, "check-content")
        fix = self._first_descendant(rule, "fixtext")
        check_text = strip_markup(self._element_text(check)) if check is not None else "No check procedure provided"
        fix_text = strip_markup(self._element_text(fix)) if fix is not None else "No fix procedure provided"

        return ParsedStigRequirement(
            vuln_id=vuln_id,
            rule_id=rule.get("id", f"{vuln_id}-rule"),
            severity=normalize_severity(rule.get("severity")),
            title=title,
            description=description[:DESCRIPTION_MAX_LENGTH],
            check_text=check_text[:PROCEDURE_MAX_LENGTH],
            fix_text=fix_text[:PROCEDURE_MAX_LENGTH],
            cci=self._extract_ccis(rule) or [DEFAULT_XCCDF_CCI],
            nist_controls=self._extract_nist_controls(rule) or [DEFAULT_XCCDF_NIST_CONTROL],
        )

    def _extract_ccis(self, rule: Any) -> List[str]:
        ccis: List[str] = []
        for ident in self._iter_local(rule, "ident", direct=True):
            value = (ident.text or "").strip()
            if ident.get("system") in CCI_IDENT_SYSTEMS or CCI_PATTERN.fullmatch(value):
                if value and value not in ccis:
                    ccis.append(value)
        return ccis

    def _extract_nist_controls(self, rule: Any) -> List[str]:
        controls: List[str] = []
        for reference in self._iter_local(rule, "reference"):
            text = "".join(reference.itertext())
            if "NIST" not in text:
                continue
            for control in NIST_CONTROL_PATTERN.findall(text):
                control = control.strip()
                if control not in controls:
                    controls.append(control)
        return controls

    def _release_date(self, benchmark: Any) -> Optional[str]:
        for status in self._iter_local(benchmark, "status", direct=True):
            if status.get("date"):
                return status.get("date")
        for plain_text in self._iter_local(benchmark, "plain-text", direct=True):
            if plain_text.get("id") == "release-info":
                match = re.search(r"Benchmark Date:\s*(.+)$", plain_text.text or "")
                if match:
                    return match.group(1).strip()
        return None

    @staticmethod
    def _local_name(elem: Any) -> str:
        tag = elem.tag
        if not isinstance(tag, str):
            return ""
        return tag.split("}")[-1] if "}" in tag else tag

    def _find_benchmark(self, root: Any) -> Any:
        if self._local_name(root) == "Benchmark":
            return root
        for elem in root.iter():
            if self._local_name(elem) == "Benchmark":
                return elem
        # Some exports wrap the groups without a Benchmark element
        return root

    def _iter_local(self, parent: Any, name: str, direct: bool = False) -> Iterator[Any]:
        candidates = parent if direct else parent.iter()
        for elem in candidates:
            if elem is not parent and self._local_name(elem) == name:
                yield elem

    def _first_descendant(self, parent: Any, name: str) -> Optional[Any]:
        return next(self._iter_local(parent, name), None)

    def _child_text(self, parent: Any, name: str, raw: bool = False) -> Optional[str]:
        child = next(self._iter_local(parent, name, direct=True), None)
        if child is None:
            return None
        text = self._element_text(child)
        return text if raw else (text.strip() or None)

    @staticmethod
    def _element_text(elem: Any) -> str:
        return "".join(elem.itertext())


# ============================================================================
# stigviewer JSON
# ============================================================================


def _first_value(data: Dict[str, Any], keys: List[str], default: Any = None) -> Any:
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return default


def _as_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def parse_stigviewer_json(data: Union[str, Dict[str, Any]], stig_id: str) -> StigImportResult:
    """
    Parse a stigviewer.com JSON export.

    The document is either ``{"stig": {...}}`` or the STIG object itself,
    with requirements in a ``findings`` map keyed by vulnerability id.

    Args:
        data: Decoded JSON (or JSON text)
        stig_id: STIG id to record on the result

    Returns:
        Parsed STIG document (may hold zero requirements)

    Raises:
        StigParseError: If the text is not JSON or not a JSON object
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise StigParseError(f"Invalid stigviewer JSON: {e}") from e

    if not isinstance(data, dict):
        raise StigParseError("Invalid stigviewer JSON: expected an object")

    stig = data.get("stig") or data
    findings = stig.get("findings") or {}
    if not isinstance(findings, dict):
        raise StigParseError("Invalid stigviewer JSON: findings must be an object")

    requirements: List[ParsedStigRequirement] = []
    for vuln_id, finding in findings.items():
        if not isinstance(finding, dict):
            continue
        title = _first_value(finding, ["title", "ruleTitle", "ruletitle"], f"Requirement {vuln_id}")
        requirements.append(
            ParsedStigRequirement(
                vuln_id=vuln_id,
                rule_id=_first_value(finding, ["ruleId", "rule_id", "ruleid"], f"{vuln_id}-rule"),
                severity=normalize_severity(_first_value(finding, ["severity", "cat"], "")),
                title=title,
                description=_first_value(finding, ["discussion", "description", "title"], ""),
                check_text=_first_value(
                    finding,
                    ["checktext", "checkText", "check_text", "check"],
                    "Review system configuration per STIG guidance.",
                ),
                fix_text=_first_value(
                    finding,
                    ["fixtext", "fixText", "fix_text", "fix"],
                    "Configure system per STIG guidance.",
                ),
                cci=_as_list(_first_value(finding, ["cci", "ccis"], [DEFAULT_CCI])),
                nist_controls=_as_list(_first_value(finding, ["nistControls", "nist"], [])),
            )
        )

    return _build_result(
        stig_id=stig_id,
        stig_name=stig.get("title") or stig_id,
        version=str(stig.get("version") or "Unknown"),
        release_date=stig.get("date") or _today(),
        requirements=requirements,
        source="stigviewer",
    )


# ============================================================================
# DISA STIG Viewer CSV
# ============================================================================


def _normalize_header(header: Optional[str]) -> str:
    return re.sub(r"[^a-z0-9]", "", (header or "").lower())


def read_stig_csv_rows(text: str) -> List[Dict[str, str]]:
    """
    Read a STIG Viewer CSV export into rows keyed by canonical column names.

    Recognized columns (after lower-casing and dropping punctuation) are
    mapped through ``CSV_COLUMN_ALIASES``; unknown columns are ignored.

    Raises:
        StigParseError: If no recognizable STIG columns are present
    """
    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")))
    columns = {header: CSV_COLUMN_ALIASES.get(_normalize_header(header)) for header in reader.fieldnames or []}
    recognized = {key for key in columns.values() if key}

    if not recognized & {"vuln_id", "rule_id", "stig_id"} or "rule_title" not in recognized:
        raise StigParseError("CSV does not look like a STIG export (missing id or rule title columns)")

    rows: List[Dict[str, str]] = []
    for raw in reader:
        row: Dict[str, str] = {}
        for header, key in columns.items():
            value = (raw.get(header) or "").strip()
            if key and value and key not in row:
                row[key] = value
        if row:
            rows.append(row)
    return rows


def parse_stig_csv(text: str, stig_id: str, stig_name: Optional[str] = None) -> StigImportResult:
    """
    Parse a DISA STIG Viewer CSV export.

    Args:
        text: CSV text with a header row
        stig_id: STIG id to record on the result
        stig_name: Display name (defaults to the STIG id)

    Returns:
        Parsed STIG document

    Raises:
        StigParseError: If the CSV has no STIG columns
    """
    requirements: List[ParsedStigRequirement] = []
    for row in read_stig_csv_rows(text):
        vuln_id = row.get("vuln_id") or row.get("group_id") or row.get("stig_id") or row.get("rule_id", "")
        ccis = CCI_PATTERN.findall(row.get("ccis", ""))
        requirements.append(
            ParsedStigRequirement(
                vuln_id=vuln_id,
                rule_id=row.get("rule_id") or f"{vuln_id}-rule",
                severity=normalize_severity(row.get("severity")),
                title=row.get("rule_title") or f"Requirement {vuln_id}",
                description=row.get("discussion", ""),
                check_text=row.get("check_content", ""),
                fix_text=row.get("fix_text", ""),
                cci=ccis or [DEFAULT_CCI],
                nist_controls=[],
            )
        )

    logger.info(f"Parsed {len(requirements)} requirements from CSV for {sanitize_for_log(stig_id)}")
    return _build_result(stig_id, stig_name or stig_id, "Unknown", _today(), requirements, "local")


# ============================================================================
# Dispatch
# ============================================================================


def import_stig_file(file_path: Union[str, Path], stig_id: Optional[str] = None) -> StigImportResult:
    """
    Parse a STIG document, choosing the parser by file extension.

    Args:
        file_path: .xml/.xccdf, .json or .csv file
        stig_id: STIG id for JSON and CSV documents (defaults to the file stem)

    Returns:
        Parsed STIG document

    Raises:
        StigParseError: On unsupported extensions and malformed documents
        StigFileTooLargeError: If the file exceeds the size limit
    """
    path = Path(file_path)
    suffix = path.suffix.lower()

    if validate_file_extension(path.name, STIG_XML_EXTENSIONS):
        return XccdfStigParser().parse_file(path)

    if not validate_file_extension(path.name, STIG_JSON_EXTENSIONS + STIG_CSV_EXTENSIONS):
        raise StigParseError(f"Unsupported STIG file type: {suffix or path.name}")

    max_size = get_settings().max_stig_file_size
    try:
        if not is_within_size_limit(path, max_size):
            raise StigFileTooLargeError(f"{path.name} exceeds maximum size limit ({max_size} bytes)")
        text = path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read STIG file {sanitize_path_for_log(path)}: {sanitize_error_message_for_log(e)}")
        raise StigParseError(f"Cannot read STIG file {path.name}: {e}") from e

    resolved_id = stig_id or stig_id_from_filename(path.stem)
    if suffix in STIG_JSON_EXTENSIONS:
        return parse_stigviewer_json(text, resolved_id)
    return parse_stig_csv(text, resolved_id)
