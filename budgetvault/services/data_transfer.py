"""
Service layer for exporting and importing a user's complete dataset.
"""

from typing import Any

from budgetvault.core.exceptions import (
    InvalidSnapshotError,
    SnapshotImportError,
    UnsupportedSnapshotVersionError,
)
from budgetvault.core.logging import LogContext, get_logger, log_error
from budgetvault.schemas.data_transfer import ImportMode, ImportResult
from budgetvault.schemas.snapshot import Snapshot, validate_snapshot
from budgetvault.services.export import SnapshotBuilder
from budgetvault.services.importer import ImportOrchestrator
from budgetvault.services.store import EntityStore

logger = get_logger(__name__)


class DataTransferService:
    """Entry point for snapshot export and import."""

    def __init__(self, store: EntityStore):
        self.store = store
        self.builder = SnapshotBuilder(store)
        self.orchestrator = ImportOrchestrator(store)

    async def export_user_data(self, user_id: str) -> Snapshot:
        """
        Export all data owned by a user.

        Raises:
            SnapshotExportError: On any failure; details are only logged
        """
        return await self.builder.build(user_id)

    async def import_user_data(
        self,
        user_id: str,
        document: Any,
        mode: ImportMode = ImportMode.REPLACE,
        dry_run: bool = False,
    ) -> ImportResult:
        """
        Validate a snapshot document and import it for a user.

        Args:
            user_id: User receiving the data
            document: Decoded snapshot document
            mode: Import strategy
            dry_run: Validate and count without writing

        Returns:
            ImportResult: Outcome, including per-record errors

        Raises:
            InvalidSnapshotError: If the document is malformed
            UnsupportedSnapshotVersionError: If the version is not supported
            SnapshotImportError: On any unexpected failure; details are only logged
        """
        with LogContext(user_id=user_id, import_mode=mode.value, dry_run=dry_run):
            try:
                snapshot = validate_snapshot(document)
            except InvalidSnapshotError as e:
                logger.warning("snapshot_rejected", validation_errors=len(e.errors))
                raise
            except UnsupportedSnapshotVersionError as e:
                logger.warning("snapshot_version_rejected", version=e.version)
                raise

            try:
                result = await self.orchestrator.run(user_id, snapshot, mode=mode, dry_run=dry_run)
            except UnsupportedSnapshotVersionError:
                raise
            except Exception as e:
                log_error(logger, e)
                raise SnapshotImportError() from e

            logger.info(
                "snapshot_imported",
                success=result.success,
                imported=result.imported.model_dump(),
                errors=len(result.errors),
                warnings=len(result.warnings),
            )
            return result
