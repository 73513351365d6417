"""
Schemas for the versioned snapshot document and its validation.
"""

from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError

from budgetvault.core.exceptions import InvalidSnapshotError, UnsupportedSnapshotVersionError
from budgetvault.models.savings_goal import PriorityLevel, SavingsGoalStatus
from budgetvault.models.transaction import TransactionKind, TransactionRecurrence

SNAPSHOT_VERSION = "1.0.0"

UUIDStr = Annotated[
    str,
    StringConstraints(
        pattern=r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
    ),
]


class SnapshotRecord(BaseModel):
    """Fields shared by every exported row."""

    model_config = ConfigDict(extra="ignore")

    id: UUIDStr
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TemplateRecord(SnapshotRecord):
    """Exported template row."""

    user_id: UUIDStr
    name: str = Field(..., max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    is_default: bool = False


class TemplateLineRecord(SnapshotRecord):
    """Exported template line row."""

    template_id: UUIDStr
    name: str = Field(..., max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    amount: Decimal = Field(..., decimal_places=2)
    kind: TransactionKind
    recurrence: TransactionRecurrence


class MonthlyBudgetRecord(SnapshotRecord):
    """Exported monthly budget row."""

    user_id: Optional[UUIDStr] = None
    template_id: UUIDStr
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=1900)
    description: str = Field("", max_length=500)


class BudgetLineRecord(SnapshotRecord):
    """Exported budget line row."""

    budget_id: UUIDStr
    template_line_id: Optional[UUIDStr] = None
    savings_goal_id: Optional[UUIDStr] = None
    name: str = Field(..., max_length=100)
    amount: Decimal = Field(..., decimal_places=2)
    kind: TransactionKind
    recurrence: TransactionRecurrence
    is_manually_adjusted: bool = False


class TransactionRecord(SnapshotRecord):
    """Exported transaction row."""

    budget_id: UUIDStr
    name: str = Field(..., max_length=100)
    amount: Decimal = Field(..., decimal_places=2)
    kind: TransactionKind
    transaction_date: datetime
    category: Optional[str] = Field(None, max_length=100)
    is_out_of_budget: bool = False


class SavingsGoalRecord(SnapshotRecord):
    """Exported savings goal row."""

    user_id: UUIDStr
    name: str = Field(..., max_length=100)
    target_amount: Decimal = Field(..., decimal_places=2)
    target_date: date
    priority: PriorityLevel
    status: SavingsGoalStatus = SavingsGoalStatus.ACTIVE


class SnapshotData(BaseModel):
    """All exported rows, one list per entity type."""

    templates: List[TemplateRecord]
    template_lines: List[TemplateLineRecord]
    monthly_budgets: List[MonthlyBudgetRecord]
    budget_lines: List[BudgetLineRecord]
    transactions: List[TransactionRecord]
    savings_goals: List[SavingsGoalRecord]


class DateRange(BaseModel):
    """First and last budget month, as the first day of that month."""

    oldest_budget: Optional[date]
    newest_budget: Optional[date]


class SnapshotMetadata(BaseModel):
    """Summary counts computed at export time."""

    total_templates: int = Field(..., ge=0)
    total_budgets: int = Field(..., ge=0)
    total_transactions: int = Field(..., ge=0)
    total_savings_goals: int = Field(..., ge=0)
    date_range: DateRange


class Snapshot(BaseModel):
    """Versioned envelope holding one user's complete dataset."""

    version: Literal["1.0.0"]
    exported_at: datetime
    user_id: UUIDStr
    data: SnapshotData
    metadata: SnapshotMetadata


def validate_snapshot(document: Any) -> Snapshot:
    """
    Parse an untyped document into a validated snapshot.

    The version is checked before the rest of the shape so that a document
    written by a newer exporter is reported as such instead of as malformed.

    Args:
        document: Decoded JSON document, or an already parsed Snapshot

    Returns:
        Snapshot: The validated snapshot

    Raises:
        UnsupportedSnapshotVersionError: If the version is not supported
        InvalidSnapshotError: If the document does not match the schema
    """
    if isinstance(document, Snapshot):
        return document
    if not isinstance(document, Mapping):
        raise InvalidSnapshotError(errors=[{"msg": "Snapshot must be a JSON object"}])

    version = document.get("version")
    if isinstance(version, str) and version != SNAPSHOT_VERSION:
        raise UnsupportedSnapshotVersionError(version)

    try:
        return Snapshot.model_validate(dict(document))
    except ValidationError as e:
        raise InvalidSnapshotError(errors=e.errors(include_url=False)) from e
