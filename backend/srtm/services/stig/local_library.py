"""
Local STIG Library

Reads STIG documents stored on disk, one sub-directory per STIG:

    public/stigs/
        postgresql_9x/
            metadata.json        (optional; metadata.yaml also accepted)
            U_PostgreSQL_9-x_STIG_V2R1_Manual-xccdf.xml
        windows_server_2022_stig/
            windows_server_2022.csv

When no metadata file exists, metadata is auto-detected from the first XML
(or XCCDF) file, falling back to the first CSV file.

Lookups never raise for missing or unreadable entries: errors are logged
and reported as ``None`` or an empty list. STIG ids that would resolve
outside the library root are rejected the same way.
"""

import json
import logging
import re
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from ...config import get_settings
from ...models.stig_models import LocalStigMetadata, LocalStigStats, StigImportResult
from ...utils.file_security import STIG_CSV_EXTENSIONS, STIG_XML_EXTENSIONS, validate_library_path
from ...utils.logging_security import sanitize_error_message_for_log, sanitize_id_for_log
from .parsers import XccdfStigParser, parse_stig_csv

logger = logging.getLogger(__name__)

METADATA_FILENAMES = ("metadata.json", "metadata.yaml", "metadata.yml")


def format_stig_name(stig_id: str) -> str:
    """
    Build a display name from a STIG directory name.

    Example:
        >>> format_stig_name("windows_server_2022_stig")
        'Windows Server 2022 Stig'
    """
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), stig_id.replace("_", " "))


class LocalStigLibrary:
    """
    File-system backed library of DISA STIG documents.

    Args:
        root: Library directory (defaults to ``Settings.stig_library_dir``)
    """

    def __init__(self, root: Optional[Union[str, Path]] = None):
        self.root = Path(root) if root is not None else Path(get_settings().stig_library_dir)

    def get_stig_directory(self) -> Path:
        """Return the library root directory."""
        return self.root

    def _stig_path(self, stig_id: str) -> Optional[Path]:
        try:
            return validate_library_path(self.root, stig_id)
        except ValueError as e:
            logger.warning(f"Rejected STIG id {sanitize_id_for_log(stig_id)}: {sanitize_error_message_for_log(e)}")
            return None

    def has_local_stig(self, stig_id: str) -> bool:
        """Check whether a STIG directory exists in the library."""
        stig_dir = self._stig_path(stig_id)
        return stig_dir is not None and stig_dir.is_dir()

    def _read_metadata_file(self, path: Path) -> Dict[str, Any]:
        text = path.read_text(encoding="utf-8")
        if path.suffix == ".json":
            data = json.loads(text)
        else:
            data = yaml.safe_load(text)
        if not isinstance(data, dict):
            raise ValueError(f"{path.name} must contain a mapping")
        return data

    def get_local_stig_metadata(self, stig_id: str) -> Optional[LocalStigMetadata]:
        """
        Get metadata of a local STIG.

        Args:
            stig_id: Directory name of the STIG

        Returns:
            Metadata, or None if the STIG is missing, holds no STIG file or
            its metadata cannot be read
        """
        stig_dir = self._stig_path(stig_id)
        if stig_dir is None or not stig_dir.is_dir():
            return None

        try:
            for filename in METADATA_FILENAMES:
                metadata_path = stig_dir / filename
                if metadata_path.is_file():
                    data = self._read_metadata_file(metadata_path)
                    data.setdefault("stigId", stig_id)
                    return LocalStigMetadata.model_validate(data)

            files = sorted(entry.name for entry in stig_dir.iterdir() if entry.is_file())
            xml_file = next((f for f in files if f.lower().endswith(STIG_XML_EXTENSIONS)), None)
            csv_file = next((f for f in files if f.lower().endswith(STIG_CSV_EXTENSIONS)), None)

            if xml_file or csv_file:
                return LocalStigMetadata(
                    stig_id=stig_id,
                    name=format_stig_name(stig_id),
                    version="Unknown",
                    release_date=date.today().isoformat(),
                    filename=xml_file or csv_file,
                    format="xml" if xml_file else "csv",
                )
            return None

        except (OSError, ValueError, yaml.YAMLError, ValidationError) as e:
            logger.error(
                f"Error reading metadata for {sanitize_id_for_log(stig_id)}: {sanitize_error_message_for_log(e)}"
            )
            return None

    def _content_path(self, stig_id: str) -> Optional[Path]:
        metadata = self.get_local_stig_metadata(stig_id)
        if metadata is None:
            return None
        try:
            return validate_library_path(self.root, Path(stig_id) / metadata.filename)
        except ValueError as e:
            logger.warning(f"Rejected STIG file for {sanitize_id_for_log(stig_id)}: {sanitize_error_message_for_log(e)}")
            return None

    def get_local_stig_content(self, stig_id: str) -> Optional[str]:
        """
        Read the STIG document of a local STIG.

        Returns:
            Document text, or None if the STIG or its file is missing or
            unreadable
        """
        path = self._content_path(stig_id)
        if path is None or not path.is_file():
            return None
        try:
            return path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(
                f"Error reading STIG file for {sanitize_id_for_log(stig_id)}: {sanitize_error_message_for_log(e)}"
            )
            return None

    def import_local_stig(self, stig_id: str) -> Optional[StigImportResult]:
        """
        Parse the document of a local STIG.

        Returns:
            Parsed document (source "local"), or None if the STIG has no
            readable document

        Raises:
            StigParseError: If the document is malformed
            StigFileTooLargeError: If the document exceeds the size limit
        """
        metadata = self.get_local_stig_metadata(stig_id)
        content = self.get_local_stig_content(stig_id)
        if metadata is None or content is None:
            return None

        if metadata.format == "csv" or metadata.filename.lower().endswith(STIG_CSV_EXTENSIONS):
            result = parse_stig_csv(content, stig_id, metadata.name)
        else:
            result = XccdfStigParser().parse_bytes(content, metadata.filename)
            result = result.model_copy(update={"stig_id": stig_id})

        logger.info(f"Imported {result.total_requirements} requirements from local STIG {sanitize_id_for_log(stig_id)}")
        return result

    def list_local_stigs(self) -> List[LocalStigMetadata]:
        """
        List all STIGs in the library, sorted by name.

        Returns:
            Metadata of every directory holding a STIG document
        """
        if not self.root.is_dir():
            return []

        try:
            directories = sorted(entry.name for entry in self.root.iterdir() if entry.is_dir())
        except OSError as e:
            logger.error(f"Error listing local STIGs: {sanitize_error_message_for_log(e)}")
            return []

        stigs = []
        for stig_id in directories:
            metadata = self.get_local_stig_metadata(stig_id)
            if metadata is not None:
                stigs.append(metadata)

        return sorted(stigs, key=lambda s: s.name.lower())

    def get_local_stig_stats(self) -> LocalStigStats:
        """Summarize the library by format."""
        stigs = self.list_local_stigs()
        return LocalStigStats(
            total=len(stigs),
            by_format={
                "xml": sum(1 for s in stigs if s.format == "xml"),
                "csv": sum(1 for s in stigs if s.format == "csv"),
            },
            stigs=[{"id": s.stig_id, "name": s.name, "version": s.version} for s in stigs],
        )
