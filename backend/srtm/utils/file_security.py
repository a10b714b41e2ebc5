"""
File Security Utilities
Path validation for the local STIG library and size checks for imported STIG
documents (XCCDF, CSV, stigviewer JSON).
"""

from pathlib import Path
from typing import Sequence, Union

# Extensions accepted by the STIG document importers
STIG_XML_EXTENSIONS = (".xml", ".xccdf")
STIG_CSV_EXTENSIONS = (".csv",)
STIG_JSON_EXTENSIONS = (".json",)


def validate_file_extension(filename: str, allowed_extensions: Sequence[str]) -> bool:
    """
    Validate that filename has an allowed extension.

    Args:
        filename: Filename to validate
        allowed_extensions: Allowed extensions (e.g. ['.xml', '.xccdf'])

    Returns:
        True if extension is allowed, False otherwise
    """
    filename_lower = filename.lower()
    return any(filename_lower.endswith(ext.lower()) for ext in allowed_extensions)


def validate_library_path(base_path: Union[str, Path], relative: Union[str, Path]) -> Path:
    """
    Resolve a path below base_path, rejecting traversal outside of it.

    Args:
        base_path: Library root directory
        relative: Path component(s) supplied by the caller (e.g. a STIG id)

    Returns:
        Resolved absolute path inside base_path

    Raises:
        ValueError: If the resolved path escapes base_path
    """
    base = Path(base_path).resolve()
    target = (base / relative).resolve()

    try:
        target.relative_to(base)
    except ValueError:
        raise ValueError(f"Path traversal detected: {relative} is outside the STIG library")

    if target == base:
        raise ValueError("Path must name an entry inside the STIG library")

    return target


def is_within_size_limit(path: Union[str, Path], max_bytes: int) -> bool:
    """
    Check a file against a size limit without reading it.

    Args:
        path: File to check
        max_bytes: Maximum allowed size in bytes

    Returns:
        True if the file size is at most max_bytes
    """
    return Path(path).stat().st_size <= max_bytes
