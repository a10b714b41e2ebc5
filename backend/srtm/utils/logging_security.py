"""
Security Logging Utilities for the SRTM toolkit
Prevents log injection (CWE-117) when logging values that come from
imported STIG documents, workflow files and catalog backups.

SECURITY FEATURES:
- Input sanitization to prevent log injection
- STIG and catalog identifier normalisation
- Redaction of secrets that may appear in parser error messages
- Consistent audit line formatting
"""

import re
from typing import Any, Dict, Optional
from urllib.parse import quote

# Patterns for detecting potentially malicious content
LOG_INJECTION_PATTERNS = [
    r"[\r\n]",  # CRLF injection
    r"%0[ad]",  # URL-encoded CRLF
    r"\\[rn]",  # Escaped newlines
    r"\x00",  # Null bytes
    r"[\x01-\x08\x0b\x0c\x0e-\x1f\x7f]",  # Control characters
]

# Pattern for safe characters in logs
SAFE_LOG_PATTERN = re.compile(r"^[a-zA-Z0-9._@\-\s]+$")

# Catalog ids (application-security-dev), STIG ids (APSC-DV-003270),
# vulnerability ids (V-222400) and rule ids (SV-222400r508029_rule)
STIG_ID_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._\-]{0,99}$")


def sanitize_for_log(value: Optional[Any], max_length: int = 100, allow_special: bool = False) -> str:
    """
    Sanitize any value for safe logging.

    Args:
        value: Value to sanitize
        max_length: Maximum length of output
        allow_special: Whether to allow some special characters

    Returns:
        str: Sanitized string safe for logging
    """
    if value is None:
        return "null"

    str_value = str(value)

    if len(str_value) > max_length:
        str_value = str_value[:max_length] + "..."

    for pattern in LOG_INJECTION_PATTERNS:
        str_value = re.sub(pattern, "", str_value)

    if not allow_special and not SAFE_LOG_PATTERN.match(str_value):
        # Keep only alphanumeric, dots, underscores, @, hyphens, spaces
        str_value = re.sub(r"[^a-zA-Z0-9._@\-\s]", "", str_value)

    if not str_value.strip():
        return "[sanitized]"

    return str_value.strip()


def sanitize_id_for_log(id_value: Optional[Any]) -> str:
    """
    Sanitize STIG family, STIG, vulnerability or rule identifiers.

    Args:
        id_value: Identifier to sanitize

    Returns:
        str: Sanitized identifier
    """
    if id_value is None:
        return "[no_id]"

    str_id = str(id_value)
    if STIG_ID_PATTERN.match(str_id):
        return str_id

    return sanitize_for_log(str_id, max_length=50)


def sanitize_path_for_log(path: Optional[Any]) -> str:
    """
    Sanitize file system paths (STIG library entries, uploaded documents).

    Args:
        path: Path to sanitize (str or Path)

    Returns:
        str: Sanitized path
    """
    if not path:
        return "[no_path]"

    sanitized = quote(str(path), safe="/.:-_")
    return sanitize_for_log(sanitized, max_length=200, allow_special=True)


def sanitize_error_message_for_log(error_msg: Optional[Any]) -> str:
    """
    Sanitize error messages before logging them.

    Parser errors can echo fragments of the imported document, so secrets
    and long opaque tokens are redacted.

    Args:
        error_msg: Error message or exception

    Returns:
        str: Sanitized error message
    """
    if not error_msg:
        return "[no_error_message]"

    str_msg = str(error_msg)

    sensitive_patterns = [
        (r"password[=:\s]+[^\s]+", "password=[REDACTED]"),
        (r"token[=:\s]+[^\s]+", "token=[REDACTED]"),
        (r"secret[=:\s]+[^\s]+", "secret=[REDACTED]"),
        (r"api[_-]?key[=:\s]+[^\s]+", "apikey=[REDACTED]"),
        (r"[0-9a-fA-F]{32,}", "[HEX_REDACTED]"),
    ]

    for pattern, replacement in sensitive_patterns:
        str_msg = re.sub(pattern, replacement, str_msg, flags=re.IGNORECASE)

    return sanitize_for_log(str_msg, max_length=500, allow_special=True)


def create_audit_log_entry(
    action: str,
    resource_type: Optional[str] = None,
    resource_id: Optional[str] = None,
    success: bool = True,
    error_message: Optional[str] = None,
    additional_context: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Create a standardized audit log line for catalog mutations.

    Args:
        action: Action being performed (e.g. "stig_update", "catalog_import")
        resource_type: Type of resource being changed
        resource_id: Resource identifier
        success: Whether the action succeeded
        error_message: Error message if the action failed
        additional_context: Extra key/value pairs (old/new version, counts)

    Returns:
        str: Formatted audit log entry

    Example:
        >>> create_audit_log_entry("stig_update", "stig_family", "rhel-9")
        'action=stig_update resource=stig_family:rhel-9 success=True'
    """
    safe_type = sanitize_for_log(resource_type) if resource_type else "unknown_type"
    parts = [
        f"action={sanitize_for_log(action)}",
        f"resource={safe_type}:{sanitize_id_for_log(resource_id)}",
        f"success={success}",
    ]

    if error_message and not success:
        parts.append(f"error={sanitize_error_message_for_log(error_message)}")

    if additional_context:
        for key, value in additional_context.items():
            parts.append(f"{sanitize_for_log(key, max_length=30)}={sanitize_for_log(value, max_length=50)}")

    return " ".join(parts)
