"""
Custom exceptions for the SRTM toolkit.

Provides specific exception types for configuration, catalog, STIG content
and workflow-file failures. The recommendation engine itself raises none of
these for well-formed input.
"""


class SrtmError(Exception):
    """
    Base exception for all SRTM toolkit errors.

    Example:
        >>> try:
        ...     result = parser.parse_file(path)
        ... except SrtmError as e:
        ...     logger.error(f"STIG import failed: {e}")
    """

    pass


class ScoringConfigurationError(SrtmError):
    """
    Raised when a scoring-weights profile is unknown or inconsistent.

    This indicates:
    - An unknown profile name (e.g. SRTM_SCORING_PROFILE=fast)
    - Priority thresholds that are not ordered (critical >= high >= medium)
    - A positive infrastructure penalty or non-positive hours per requirement

    Example:
        >>> get_scoring_weights("experimental")
        Traceback (most recent call last):
        ScoringConfigurationError: Unknown scoring profile: experimental
    """

    pass


class CatalogError(SrtmError):
    """
    Base exception for STIG catalog repository failures.
    """

    pass


class StigFamilyNotFoundError(CatalogError):
    """
    Raised when a STIG family id is not present in the current catalog.

    Example:
        >>> try:
        ...     repository.replace(family)
        ... except StigFamilyNotFoundError:
        ...     logger.warning("Unknown STIG family")
    """

    def __init__(self, stig_family_id: str):
        self.stig_family_id = stig_family_id
        super().__init__(f"STIG family {stig_family_id} not found in catalog")


class StigContentError(SrtmError):
    """
    Base exception for STIG document import failures.
    """

    pass


class StigParseError(StigContentError):
    """
    Raised when a STIG document cannot be parsed.

    This typically indicates:
    - Malformed XML or JSON
    - A document that is not an XCCDF STIG (no Group/Rule elements)
    - A CSV export without recognisable columns

    Example:
        >>> try:
        ...     XccdfStigParser().parse_file("notes.xml")
        ... except StigParseError as e:
        ...     logger.error(f"Invalid STIG: {e}")
    """

    pass


class StigFileTooLargeError(StigContentError):
    """
    Raised when a STIG document exceeds the configured size limit.
    """

    pass


class WorkflowFormatError(SrtmError):
    """
    Raised when a workflow or project JSON file cannot be loaded.

    Example:
        >>> try:
        ...     load_workflow("{not json")
        ... except WorkflowFormatError as e:
        ...     logger.error(f"Workflow import failed: {e}")
    """

    pass
