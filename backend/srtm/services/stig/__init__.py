"""
STIG Content Submodule

Parsers for DISA STIG documents (XCCDF XML, stigviewer JSON, STIG Viewer
CSV), the local STIG library and requirement-level STIG content for
recommended families.

Usage:
    from srtm.services.stig import LocalStigLibrary, import_stig_file

    library = LocalStigLibrary("public/stigs")
    for stig in library.list_local_stigs():
        print(stig.name, stig.version)
"""

import logging

from .detailed_requirements import (
    BUILTIN_REQUIREMENT_LIBRARY,
    StigRequirementStore,
    convert_csv_row,
    convert_to_stig_requirements,
    get_builtin_requirements,
    group_requirements_by_title,
    parse_stig_csv_rows,
)
from .local_library import LocalStigLibrary
from .parsers import (
    XccdfStigParser,
    import_stig_file,
    normalize_severity,
    parse_stig_csv,
    parse_stigviewer_json,
    severity_to_category,
)

logger = logging.getLogger(__name__)

__all__ = [
    "XccdfStigParser",
    "import_stig_file",
    "parse_stigviewer_json",
    "parse_stig_csv",
    "normalize_severity",
    "severity_to_category",
    "LocalStigLibrary",
    "StigRequirementStore",
    "BUILTIN_REQUIREMENT_LIBRARY",
    "get_builtin_requirements",
    "convert_to_stig_requirements",
    "convert_csv_row",
    "parse_stig_csv_rows",
    "group_requirements_by_title",
]

logger.debug("STIG content submodule initialized")
