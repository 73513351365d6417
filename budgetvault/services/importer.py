"""
Import of snapshot documents into the entity store.
"""

from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from budgetvault.core.exceptions import StoreError, UnsupportedSnapshotVersionError
from budgetvault.core.logging import get_logger
from budgetvault.schemas.data_transfer import ImportedCounts, ImportMode, ImportResult
from budgetvault.schemas.snapshot import SNAPSHOT_VERSION, Snapshot
from budgetvault.services.deletion import DeletionPlanner
from budgetvault.services.id_remapper import IdRemapper, Unmapped
from budgetvault.services.store import ENTITY_SPECS, EntityStore, EntityType

logger = get_logger(__name__)

SUCCESS_MESSAGE = "Data imported successfully"
PARTIAL_MESSAGE = "Data imported with some errors"
DRY_RUN_MESSAGE = "Dry run completed successfully. No data was imported."

# Parents before children; later types resolve references through earlier ones.
IMPORT_ORDER = (
    EntityType.SAVINGS_GOAL,
    EntityType.TEMPLATE,
    EntityType.TEMPLATE_LINE,
    EntityType.MONTHLY_BUDGET,
    EntityType.BUDGET_LINE,
    EntityType.TRANSACTION,
)

# Columns whose values are snapshot ids to translate before writing.
REMAPPED_REFERENCES: Dict[EntityType, Dict[str, EntityType]] = {
    EntityType.TEMPLATE_LINE: {"template_id": EntityType.TEMPLATE},
    EntityType.MONTHLY_BUDGET: {"template_id": EntityType.TEMPLATE},
    EntityType.BUDGET_LINE: {
        "budget_id": EntityType.MONTHLY_BUDGET,
        "template_line_id": EntityType.TEMPLATE_LINE,
        "savings_goal_id": EntityType.SAVINGS_GOAL,
    },
    EntityType.TRANSACTION: {"budget_id": EntityType.MONTHLY_BUDGET},
}

# Types whose new ids are referenced by later types.
RECORDED_TYPES = frozenset(
    {
        EntityType.SAVINGS_GOAL,
        EntityType.TEMPLATE,
        EntityType.TEMPLATE_LINE,
        EntityType.MONTHLY_BUDGET,
    }
)

DESCRIBE_RECORD: Dict[EntityType, Callable[[Dict[str, Any]], str]] = {
    EntityType.MONTHLY_BUDGET: lambda record: f"{record['year']}-{record['month']}",
}


def describe(entity: EntityType, record: Dict[str, Any]) -> str:
    """Human readable name of a snapshot record for error messages."""
    return DESCRIBE_RECORD.get(entity, lambda r: r["name"])(record)


def assign_owner(snapshot: Snapshot, owner_id: str) -> Snapshot:
    """
    Return a copy of the snapshot owned by ``owner_id``.

    Rewrites the envelope and every directly owned record, whatever user
    the document was exported for.
    """
    data = snapshot.data
    return snapshot.model_copy(
        update={
            "user_id": owner_id,
            "data": data.model_copy(
                update={
                    "templates": [
                        t.model_copy(update={"user_id": owner_id}) for t in data.templates
                    ],
                    "monthly_budgets": [
                        b.model_copy(update={"user_id": owner_id}) for b in data.monthly_budgets
                    ],
                    "savings_goals": [
                        g.model_copy(update={"user_id": owner_id}) for g in data.savings_goals
                    ],
                }
            ),
        }
    )


class ResultAccumulator:
    """Counts, errors and warnings collected during one import."""

    def __init__(self) -> None:
        self.counts: Dict[EntityType, int] = {entity: 0 for entity in EntityType}
        self.errors: List[str] = []
        self.warnings: List[str] = []

    def imported(self, entity: EntityType) -> None:
        self.counts[entity] += 1

    def error(self, message: str) -> None:
        self.errors.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    def to_result(self) -> ImportResult:
        """Freeze the accumulated outcome; success means no record failed."""
        success = not self.errors
        return ImportResult(
            success=success,
            message=SUCCESS_MESSAGE if success else PARTIAL_MESSAGE,
            imported=ImportedCounts(
                **{entity.value: count for entity, count in self.counts.items()}
            ),
            errors=list(self.errors),
            warnings=list(self.warnings),
        )

    @staticmethod
    def dry_run(snapshot: Snapshot) -> ImportResult:
        """Result reported for a dry run: what would have been imported."""
        return ImportResult(
            success=True,
            message=DRY_RUN_MESSAGE,
            imported=ImportedCounts(
                **{entity.value: len(getattr(snapshot.data, entity.value)) for entity in EntityType}
            ),
        )


class ImportOrchestrator:
    """Applies a snapshot to the store for one user."""

    def __init__(self, store: EntityStore, planner: Optional[DeletionPlanner] = None):
        self.store = store
        self.planner = planner or DeletionPlanner(store)

    async def run(
        self,
        owner_id: str,
        snapshot: Snapshot,
        mode: ImportMode = ImportMode.REPLACE,
        dry_run: bool = False,
    ) -> ImportResult:
        """
        Import a validated snapshot.

        Records are written one at a time in dependency order. A record the
        store rejects is reported in ``errors`` and skipped; it never stops
        the import.

        Args:
            owner_id: User receiving the data
            snapshot: Validated snapshot
            mode: Import strategy
            dry_run: Count without deleting or writing

        Returns:
            ImportResult: Per-type counts, errors and warnings

        Raises:
            UnsupportedSnapshotVersionError: If the snapshot version is not supported
        """
        if snapshot.version != SNAPSHOT_VERSION:
            raise UnsupportedSnapshotVersionError(snapshot.version)

        if dry_run:
            return ResultAccumulator.dry_run(snapshot)

        snapshot = assign_owner(snapshot, owner_id)
        accumulator = ResultAccumulator()
        remapper = IdRemapper()

        if mode == ImportMode.REPLACE:
            for step in await self.planner.delete_all(owner_id):
                if not step.ok:
                    accumulator.warning(step.warning)

        for entity in IMPORT_ORDER:
            for record in getattr(snapshot.data, entity.value):
                await self._import_record(
                    entity,
                    record.model_dump(),
                    owner_id=owner_id,
                    mode=mode,
                    remapper=remapper,
                    accumulator=accumulator,
                )

        return accumulator.to_result()

    async def _import_record(
        self,
        entity: EntityType,
        record: Dict[str, Any],
        *,
        owner_id: str,
        mode: ImportMode,
        remapper: IdRemapper,
        accumulator: ResultAccumulator,
    ) -> None:
        label = ENTITY_SPECS[entity].label
        values = self._prepare(entity, record, mode, remapper, accumulator)

        try:
            stored = await self.store.upsert(entity, values, owner_id=owner_id)
        except (StoreError, SQLAlchemyError) as e:
            logger.warning(
                "record_import_failed",
                entity=entity.value,
                record_id=record["id"],
                error=str(e),
            )
            accumulator.error(f"Failed to import {label}: {describe(entity, record)}")
            return

        if entity in RECORDED_TYPES:
            remapper.record(entity, record["id"], stored["id"])
        accumulator.imported(entity)

    @staticmethod
    def _prepare(
        entity: EntityType,
        record: Dict[str, Any],
        mode: ImportMode,
        remapper: IdRemapper,
        accumulator: ResultAccumulator,
    ) -> Dict[str, Any]:
        values = dict(record)

        for column, target in REMAPPED_REFERENCES.get(entity, {}).items():
            old_id = values.get(column)
            if old_id is None:
                continue
            resolution = remapper.resolve(target, old_id)
            if isinstance(resolution, Unmapped):
                accumulator.warning(
                    f"{ENTITY_SPECS[entity].label} {describe(entity, record)}: "
                    f"{column} {old_id} was not imported, keeping the original id"
                )
            values[column] = resolution.value

        if mode == ImportMode.APPEND:
            values.pop("id", None)

        # Let the store stamp rows whose snapshot carried no timestamps
        for column in ("created_at", "updated_at"):
            if values.get(column) is None:
                values.pop(column, None)

        return values
