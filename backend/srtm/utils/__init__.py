"""
SRTM Utility Functions
Shared logging and file-handling helpers used by the STIG services.
"""

from srtm.utils.file_security import validate_file_extension, validate_library_path  # noqa: F401
from srtm.utils.logging_security import sanitize_for_log, sanitize_id_for_log  # noqa: F401
