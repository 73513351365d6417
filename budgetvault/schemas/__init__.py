"""Pydantic schemas package"""

from budgetvault.schemas.data_transfer import (
    ImportedCounts,
    ImportMode,
    ImportOptions,
    ImportRequest,
    ImportResult,
)
from budgetvault.schemas.snapshot import (
    SNAPSHOT_VERSION,
    BudgetLineRecord,
    DateRange,
    MonthlyBudgetRecord,
    SavingsGoalRecord,
    Snapshot,
    SnapshotData,
    SnapshotMetadata,
    TemplateLineRecord,
    TemplateRecord,
    TransactionRecord,
    validate_snapshot,
)

__all__ = [
    # Snapshot schemas
    "SNAPSHOT_VERSION",
    "Snapshot",
    "SnapshotData",
    "SnapshotMetadata",
    "DateRange",
    "TemplateRecord",
    "TemplateLineRecord",
    "MonthlyBudgetRecord",
    "BudgetLineRecord",
    "TransactionRecord",
    "SavingsGoalRecord",
    "validate_snapshot",
    # Import schemas
    "ImportMode",
    "ImportOptions",
    "ImportRequest",
    "ImportResult",
    "ImportedCounts",
]
