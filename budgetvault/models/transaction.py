"""
Transaction model and the kind/recurrence enumerations shared by all money lines.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from budgetvault.models.base import BaseModel, utcnow


class TransactionKind(str, PyEnum):
    """Direction of a money line."""

    INCOME = "income"
    EXPENSE = "expense"
    SAVING = "saving"


class TransactionRecurrence(str, PyEnum):
    """How often a planned line repeats."""

    FIXED = "fixed"
    VARIABLE = "variable"
    ONE_OFF = "one_off"


class Transaction(BaseModel):
    """Actual spending or income recorded against a monthly budget."""

    __tablename__ = "transaction"

    budget_id: Mapped[str] = mapped_column(
        ForeignKey("monthly_budget.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    kind: Mapped[TransactionKind] = mapped_column(
        Enum(TransactionKind),
        nullable=False,
        default=TransactionKind.EXPENSE,
    )
    transaction_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
    )
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    is_out_of_budget: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
    )

    def __repr__(self) -> str:
        """String representation of the transaction."""
        return f"<Transaction(id={self.id}, amount={self.amount}, date={self.transaction_date})>"
