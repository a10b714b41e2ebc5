"""
STIG Catalog Repository

Owns the runtime STIG family catalog as a list of immutable, versioned
snapshots. Every mutation (update, rollback, import) commits a new snapshot;
readers always see a complete, consistent catalog.

Catalog maintenance operations:
- Apply date-checked or externally sourced STIG updates (with per-entry backups)
- Roll back the latest update of an entry
- Export/import the catalog as a JSON backup
- Report catalog health (validated and current entries)
- Check for updates and optionally auto-apply them

Update operations report failures through StigUpdateResult/StigImportOutcome
(success flag and message) rather than raising, so batch updates continue
past a bad entry.
"""

import dataclasses
import json
import logging
import math
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from ..config import get_settings
from ..exceptions import StigFamilyNotFoundError
from ..models.base import utcnow
from ..models.enums import CatalogPriority, CheckFrequency, UpdateSeverity
from ..models.stig_models import (
    AutoUpdateConfig,
    StigDatabaseMetadata,
    StigDatabaseStatus,
    StigFamily,
    StigImportOutcome,
    StigUpdateCheck,
    StigUpdateResult,
)
from ..services.recommendation.catalog import STIG_DATABASE_METADATA, STIG_FAMILY_CATALOG
from ..utils.logging_security import create_audit_log_entry, sanitize_error_message_for_log, sanitize_id_for_log

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("srtm.audit")

# Days between scheduled update checks
CHECK_INTERVAL_DAYS = {
    CheckFrequency.DAILY.value: 1,
    CheckFrequency.WEEKLY.value: 7,
    CheckFrequency.MONTHLY.value: 30,
}

EXPORT_FORMAT_VERSION = "1.0.0"


@dataclasses.dataclass(frozen=True)
class CatalogSnapshot:
    """One immutable version of the catalog"""

    version: int
    families: Tuple[StigFamily, ...]
    reason: str
    created_at: datetime = dataclasses.field(default_factory=utcnow)


class StigCatalogRepository:
    """
    Repository for the STIG family catalog.

    Example:
        >>> repo = StigCatalogRepository()
        >>> result = repo.apply_stig_update(
        ...     StigUpdateCheck(stig_id="rhel-9", latest_version="V2R2", update_available=True)
        ... )
        >>> result.success, repo.get("rhel-9").version
        (True, 'V2R2')
        >>> repo.rollback_stig_update("rhel-9").message
        'STIG family rhel-9 rolled back to V2R1'
    """

    def __init__(
        self,
        families: Optional[Sequence[StigFamily]] = None,
        metadata: Optional[StigDatabaseMetadata] = None,
        max_age_days: Optional[int] = None,
        auto_update_config: Optional[AutoUpdateConfig] = None,
    ):
        """
        Initialize the repository.

        Args:
            families: Seed catalog (defaults to the validated static catalog)
            metadata: Catalog validation metadata
            max_age_days: Release age after which an entry is outdated
                (defaults to Settings.stig_max_age_days)
            auto_update_config: Auto-update configuration (defaults from Settings)
        """
        settings = get_settings()
        seed = tuple(families) if families is not None else STIG_FAMILY_CATALOG

        self._snapshots: List[CatalogSnapshot] = [CatalogSnapshot(version=1, families=seed, reason="initial")]
        self._backups: Dict[str, List[StigFamily]] = {}
        self._pending_updates: List[StigUpdateCheck] = []

        self.metadata = metadata or STIG_DATABASE_METADATA.model_copy()
        self.max_age_days = max_age_days if max_age_days is not None else settings.stig_max_age_days
        self.auto_update_config = auto_update_config or AutoUpdateConfig(
            enabled=settings.auto_update_enabled,
            check_frequency=settings.auto_update_frequency,
        )

    # ------------------------------------------------------------------
    # Snapshot access
    # ------------------------------------------------------------------

    @property
    def current_version(self) -> int:
        """Version number of the current snapshot."""
        return self._snapshots[-1].version

    @property
    def snapshots(self) -> Tuple[CatalogSnapshot, ...]:
        """All snapshots, oldest first."""
        return tuple(self._snapshots)

    def list_families(self) -> Tuple[StigFamily, ...]:
        """Entries of the current snapshot in catalog order."""
        return self._snapshots[-1].families

    def get(self, stig_family_id: str) -> Optional[StigFamily]:
        """
        Get a catalog entry by id.

        Args:
            stig_family_id: Catalog id

        Returns:
            The entry, or None if the id is not in the current catalog
        """
        for family in self.list_families():
            if family.id == stig_family_id:
                return family
        return None

    def _commit(self, families: Sequence[StigFamily], reason: str) -> CatalogSnapshot:
        snapshot = CatalogSnapshot(version=self.current_version + 1, families=tuple(families), reason=reason)
        self._snapshots.append(snapshot)
        logger.debug(f"Committed catalog snapshot v{snapshot.version} ({reason})")
        return snapshot

    def _swap(self, family: StigFamily, reason: str) -> None:
        families = list(self.list_families())
        for index, existing in enumerate(families):
            if existing.id == family.id:
                families[index] = family
                break
        else:
            families.append(family)
        self._commit(families, reason)

    # ------------------------------------------------------------------
    # Entry replacement and backups
    # ------------------------------------------------------------------

    def replace(self, family: StigFamily) -> StigFamily:
        """
        Replace a catalog entry, backing up the previous one.

        Args:
            family: New entry (matched by id)

        Returns:
            The replaced entry

        Raises:
            StigFamilyNotFoundError: If the id is not in the catalog
        """
        previous = self.backup(family.id)
        self._swap(family, f"replace {family.id}")
        return previous

    def backup(self, stig_family_id: str) -> StigFamily:
        """
        Push the current version of an entry onto its backup stack.

        Raises:
            StigFamilyNotFoundError: If the id is not in the catalog
        """
        current = self.get(stig_family_id)
        if current is None:
            raise StigFamilyNotFoundError(stig_family_id)
        self._backups.setdefault(stig_family_id, []).append(current)
        return current

    def restore(self, stig_family_id: str) -> Optional[StigFamily]:
        """
        Restore the most recent backup of an entry.

        Returns:
            The restored entry, or None if no backup exists
        """
        stack = self._backups.get(stig_family_id)
        if not stack:
            return None

        restored = stack.pop()
        if not stack:
            del self._backups[stig_family_id]

        self._swap(restored, f"restore {stig_family_id}")
        return restored

    def get_available_backups(self) -> Dict[str, int]:
        """Number of backups per catalog id (ids without backups are omitted)."""
        return {stig_family_id: len(stack) for stig_family_id, stack in self._backups.items() if stack}

    def clear_all_backups(self) -> None:
        """Discard every backup."""
        self._backups.clear()
        logger.info("Cleared all STIG catalog backups")

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def apply_stig_update(self, update: StigUpdateCheck, backup: bool = True) -> StigUpdateResult:
        """
        Apply an update to a catalog entry.

        The entry is backed up, takes the new version and release date when
        the update carries them, and is marked validated.

        Args:
            update: Update to apply
            backup: Back up the current entry first (enables rollback)

        Returns:
            StigUpdateResult with success flag, message and versions
        """
        current = self.get(update.stig_id)
        if current is None:
            logger.warning(f"Cannot apply update: STIG family {sanitize_id_for_log(update.stig_id)} not found")
            audit_logger.info(
                create_audit_log_entry(
                    "stig_update",
                    "stig_family",
                    update.stig_id,
                    success=False,
                    error_message="not found in catalog",
                )
            )
            return StigUpdateResult(
                success=False,
                stig_id=update.stig_id,
                message=f"STIG family {update.stig_id} not found in catalog",
            )

        if backup:
            self.backup(current.id)

        updated = dataclasses.replace(
            current,
            version=update.latest_version or current.version,
            release_date=update.latest_release_date or current.release_date,
            validated=True,
        )
        self._swap(updated, f"update {current.id}")
        self.metadata = self.metadata.model_copy(update={"last_updated": date.today().isoformat()})
        self._pending_updates = [p for p in self._pending_updates if p.stig_id != current.id]

        audit_logger.info(
            create_audit_log_entry(
                "stig_update",
                "stig_family",
                current.id,
                additional_context={"old_version": current.version, "new_version": updated.version},
            )
        )

        return StigUpdateResult(
            success=True,
            stig_id=current.id,
            message=f"STIG family {current.id} updated successfully to {updated.version}",
            old_version=current.version,
            new_version=updated.version,
        )

    def apply_multiple_stig_updates(
        self, updates: Sequence[StigUpdateCheck], backup: bool = True
    ) -> List[StigUpdateResult]:
        """
        Apply several updates in order.

        Returns:
            One result per update (failures do not stop the batch)
        """
        results = [self.apply_stig_update(update, backup=backup) for update in updates]
        if results:
            succeeded = sum(1 for result in results if result.success)
            logger.info(f"Applied {succeeded}/{len(results)} STIG updates")
        return results

    def rollback_stig_update(self, stig_family_id: str) -> StigUpdateResult:
        """
        Roll an entry back to its most recent backup.

        Args:
            stig_family_id: Catalog id

        Returns:
            StigUpdateResult; fails with "No backup" when nothing can be restored
        """
        current = self.get(stig_family_id)
        restored = self.restore(stig_family_id)

        if restored is None:
            return StigUpdateResult(
                success=False,
                stig_id=stig_family_id,
                message=f"No backup available for STIG family {stig_family_id}",
            )

        audit_logger.info(
            create_audit_log_entry(
                "stig_rollback",
                "stig_family",
                stig_family_id,
                additional_context={"restored_version": restored.version},
            )
        )

        return StigUpdateResult(
            success=True,
            stig_id=stig_family_id,
            message=f"STIG family {stig_family_id} rolled back to {restored.version}",
            old_version=current.version if current else None,
            new_version=restored.version,
        )

    # ------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------

    def export_stig_database(self) -> str:
        """
        Export the current catalog as a JSON backup.

        Returns:
            JSON text with metadata, families, exportDate and version
        """
        payload = {
            "metadata": self.metadata.model_dump(by_alias=True),
            "families": [family.to_dict() for family in self.list_families()],
            "exportDate": utcnow().isoformat(),
            "version": EXPORT_FORMAT_VERSION,
            "catalogVersion": self.current_version,
        }
        return json.dumps(payload, indent=2)

    def import_stig_database(self, backup_json: str) -> StigImportOutcome:
        """
        Replace the catalog with the content of a JSON backup.

        Args:
            backup_json: Text produced by export_stig_database()

        Returns:
            StigImportOutcome; the catalog is unchanged on failure
        """
        try:
            data = json.loads(backup_json)
        except (json.JSONDecodeError, TypeError) as e:
            logger.error(f"STIG catalog import failed: {sanitize_error_message_for_log(e)}")
            return StigImportOutcome(success=False, message=f"Import failed: invalid JSON ({e})")

        families_data = data.get("families") if isinstance(data, dict) else None
        if not isinstance(families_data, list):
            return StigImportOutcome(success=False, message="Invalid backup format: missing families array")

        try:
            families = [StigFamily.from_dict(entry) for entry in families_data]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error(f"STIG catalog import failed: {sanitize_error_message_for_log(e)}")
            return StigImportOutcome(success=False, message=f"Import failed: invalid catalog entry ({e})")

        metadata = self.metadata
        if data.get("metadata") is not None:
            try:
                metadata = StigDatabaseMetadata.model_validate(data["metadata"])
            except ValidationError as e:
                logger.error(f"STIG catalog import failed: {sanitize_error_message_for_log(e)}")
                return StigImportOutcome(
                    success=False,
                    message=f"Import failed: invalid catalog metadata ({e.error_count()} validation error(s))",
                )

        ids = [family.id for family in families]
        duplicates = sorted({stig_family_id for stig_family_id in ids if ids.count(stig_family_id) > 1})
        if duplicates:
            return StigImportOutcome(
                success=False,
                message=f"Import failed: duplicate STIG family ids {', '.join(duplicates)}",
            )

        self._commit(families, "import")
        self.metadata = metadata

        audit_logger.info(
            create_audit_log_entry(
                "catalog_import",
                "stig_catalog",
                str(self.current_version),
                additional_context={"families": len(families)},
            )
        )

        return StigImportOutcome(
            success=True,
            message=f"Successfully imported {len(families)} STIG families",
            imported_families=len(families),
        )

    # ------------------------------------------------------------------
    # Status and update checks
    # ------------------------------------------------------------------

    def is_outdated(self, family: StigFamily, today: Optional[date] = None) -> bool:
        """
        Check whether an entry's release is older than max_age_days.

        Entries without a parseable release date count as outdated.
        """
        today = today or date.today()
        if not family.release_date:
            return True
        try:
            released = date.fromisoformat(family.release_date[:10])
        except ValueError:
            return True
        return (today - released).days > self.max_age_days

    def get_stig_database_status(self, today: Optional[date] = None) -> StigDatabaseStatus:
        """
        Summarize catalog health.

        The health score weighs the share of validated entries at 60% and
        the share of current (not outdated) entries at 40%.

        Args:
            today: Reference date (defaults to today)

        Returns:
            StigDatabaseStatus; an empty catalog scores 0
        """
        families = self.list_families()
        total = len(families)
        validated = sum(1 for family in families if family.validated)
        outdated = sum(1 for family in families if self.is_outdated(family, today))

        health_score = 0
        if total:
            raw = 60 * validated / total + 40 * (total - outdated) / total
            health_score = int(math.floor(raw + 0.5))

        return StigDatabaseStatus(
            health_score=health_score,
            total_stig_families=total,
            validated_families=validated,
            outdated_families=outdated,
            last_updated=self.metadata.last_updated,
            last_validated=self.metadata.last_validated,
            next_review_due=self.metadata.next_review_due,
            catalog_version=self.current_version,
        )

    def check_for_updates(self, today: Optional[date] = None) -> List[StigUpdateCheck]:
        """
        Date-based update check.

        Flags entries whose release is outdated (severity high for catalog
        priority High, otherwise medium) and entries that were never
        validated (severity low).

        Args:
            today: Reference date (defaults to today)

        Returns:
            One StigUpdateCheck per flagged entry, in catalog order
        """
        today = today or date.today()
        checks = []

        for family in self.list_families():
            outdated = self.is_outdated(family, today)
            if not outdated and family.validated:
                continue

            if outdated:
                severity = (
                    UpdateSeverity.HIGH
                    if CatalogPriority(family.priority) == CatalogPriority.HIGH
                    else UpdateSeverity.MEDIUM
                )
                notes = f"Release {family.release_date or 'unknown'} is older than {self.max_age_days} days"
            else:
                severity = UpdateSeverity.LOW
                notes = "Entry has not been validated against the DISA release"

            checks.append(
                StigUpdateCheck(
                    stig_id=family.id,
                    current_version=family.version,
                    current_release_date=family.release_date,
                    update_available=True,
                    source="Date Check",
                    severity=severity,
                    last_checked=today.isoformat(),
                    update_notes=notes,
                )
            )

        logger.info(f"STIG update check found {len(checks)} entries needing review")
        return checks

    def get_pending_updates(self) -> List[StigUpdateCheck]:
        """Updates found by the last perform_update_check() and not yet applied."""
        return list(self._pending_updates)

    def set_auto_update_enabled(self, enabled: bool) -> None:
        """Enable or disable automatic update checks."""
        self.auto_update_config = self.auto_update_config.model_copy(update={"enabled": enabled})
        audit_logger.info(
            create_audit_log_entry(
                "auto_update_toggle",
                "stig_catalog",
                "auto_update",
                additional_context={"enabled": enabled},
            )
        )

    def perform_update_check(self, today: Optional[date] = None) -> List[StigUpdateCheck]:
        """
        Run an update check, record pending updates and auto-apply when allowed.

        Updates are applied automatically only when auto-update is enabled,
        ``auto_apply`` is set and manual approval is not required; with
        ``critical_only`` only critical updates are applied.

        Args:
            today: Reference date (defaults to today)

        Returns:
            The updates found by the check
        """
        today = today or date.today()
        config = self.auto_update_config
        updates = self.check_for_updates(today)

        self._pending_updates = list(updates)
        self.auto_update_config = config.model_copy(update={"last_check": today.isoformat()})

        preferences = config.auto_update_preferences
        if config.enabled and preferences.auto_apply and not preferences.require_manual_approval:
            to_apply = [
                update
                for update in updates
                if not preferences.critical_only or update.severity == UpdateSeverity.CRITICAL.value
            ]
            results = self.apply_multiple_stig_updates(to_apply, backup=preferences.backup_before_update)
            logger.info(f"Auto-applied {sum(1 for r in results if r.success)} STIG updates")

        return updates

    def get_next_check_due(self, today: Optional[date] = None) -> Optional[date]:
        """
        Date of the next scheduled update check.

        Returns:
            None when auto-update is disabled; today when no check has run yet
        """
        config = self.auto_update_config
        if not config.enabled:
            return None
        if not config.last_check:
            return today or date.today()

        interval = CHECK_INTERVAL_DAYS.get(CheckFrequency(config.check_frequency).value, 7)
        return date.fromisoformat(config.last_check[:10]) + timedelta(days=interval)
