"""
Workflow and SRTM Project Files

Two JSON file formats exchange SRTM data with other tools:

- Workflow file: the categorization step of the RMF workflow
  ``{"systemCategorizations": [...], "designElements": [...],
  "exportDate": "...", "version": "1.0"}``
- SRTM project file: the full matrix (requirements, design elements, test
  cases, traceability links and STIG requirements)

Both are validated with pydantic on load. Any JSON or schema problem is
reported as ``WorkflowFormatError``.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Type, TypeVar, Union

from pydantic import Field, ValidationError

from ..exceptions import WorkflowFormatError
from ..models.base import SrtmBaseModel, utcnow
from ..models.srtm_models import (
    SecurityRequirement,
    StigRequirement,
    SystemCategorization,
    SystemDesignElement,
    TestCase,
    TraceabilityLink,
)
from ..utils.logging_security import sanitize_error_message_for_log, sanitize_path_for_log

logger = logging.getLogger(__name__)

WORKFLOW_FORMAT_VERSION = "1.0"

ModelT = TypeVar("ModelT", bound=SrtmBaseModel)


class WorkflowDocument(SrtmBaseModel):
    """Workflow export: system categorizations and design elements"""

    system_categorizations: List[SystemCategorization] = Field(default_factory=list)
    design_elements: List[SystemDesignElement] = Field(default_factory=list)
    export_date: datetime = Field(default_factory=utcnow)
    version: str = WORKFLOW_FORMAT_VERSION


class SrtmProject(SrtmBaseModel):
    """
    A complete Security Requirements Traceability Matrix.

    Example:
        >>> project = SrtmProject(requirements=[SecurityRequirement(id="REQ-001", title="MFA")])
        >>> len(project.traceability_links)
        0
    """

    requirements: List[SecurityRequirement] = Field(default_factory=list)
    design_elements: List[SystemDesignElement] = Field(default_factory=list)
    test_cases: List[TestCase] = Field(default_factory=list)
    traceability_links: List[TraceabilityLink] = Field(default_factory=list)
    stig_requirements: List[StigRequirement] = Field(default_factory=list)
    system_categorizations: List[SystemCategorization] = Field(default_factory=list)


def export_workflow(
    system_categorizations: List[SystemCategorization],
    design_elements: List[SystemDesignElement],
    export_date: Optional[datetime] = None,
) -> str:
    """
    Serialize a workflow to JSON text (camelCase keys).

    Args:
        system_categorizations: Information types of the system
        design_elements: System design elements
        export_date: Timestamp to record (defaults to now, UTC)

    Returns:
        Indented JSON document
    """
    document = WorkflowDocument(
        system_categorizations=system_categorizations,
        design_elements=design_elements,
        export_date=export_date or utcnow(),
    )
    return document.model_dump_json(by_alias=True, indent=2)


def _load(model: Type[ModelT], text: Union[str, bytes], kind: str) -> ModelT:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise WorkflowFormatError(f"Invalid {kind} file: not valid JSON ({e.msg})") from e

    if not isinstance(data, dict):
        raise WorkflowFormatError(f"Invalid {kind} file: expected a JSON object")

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise WorkflowFormatError(f"Invalid {kind} file: {e.error_count()} validation error(s)") from e


def load_workflow(text: Union[str, bytes]) -> WorkflowDocument:
    """
    Parse a workflow JSON document.

    Raises:
        WorkflowFormatError: On invalid JSON or a document that does not
            match the workflow schema
    """
    return _load(WorkflowDocument, text, "workflow")


def load_project(text: Union[str, bytes]) -> SrtmProject:
    """
    Parse an SRTM project JSON document.

    Raises:
        WorkflowFormatError: On invalid JSON or schema violations
    """
    return _load(SrtmProject, text, "project")


def export_project(project: SrtmProject) -> str:
    """Serialize an SRTM project to JSON text (camelCase keys)."""
    return project.model_dump_json(by_alias=True, indent=2)


def save_workflow(document: WorkflowDocument, path: Union[str, Path]) -> Path:
    """
    Write a workflow document to disk.

    Returns:
        The path written
    """
    target = Path(path)
    target.write_text(document.model_dump_json(by_alias=True, indent=2), encoding="utf-8")
    logger.info(f"Saved workflow to {sanitize_path_for_log(target)}")
    return target


def read_workflow_file(path: Union[str, Path]) -> WorkflowDocument:
    """
    Read a workflow document from disk.

    Raises:
        WorkflowFormatError: If the file cannot be read or parsed
    """
    return load_workflow(_read_text(path))


def read_project_file(path: Union[str, Path]) -> SrtmProject:
    """
    Read an SRTM project or workflow file.

    Workflow files are accepted as projects holding only their design
    elements and categorizations.

    Raises:
        WorkflowFormatError: If the file cannot be read or parsed
    """
    return load_project(_read_text(path))


def _read_text(path: Union[str, Path]) -> str:
    source = Path(path)
    try:
        return source.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read {sanitize_path_for_log(source)}: {sanitize_error_message_for_log(e)}")
        raise WorkflowFormatError(f"Cannot read {source.name}: {e}") from e
