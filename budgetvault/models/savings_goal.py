"""
Savings goal model.
"""

from datetime import date
from decimal import Decimal
from enum import Enum as PyEnum

from sqlalchemy import Date, Enum, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from budgetvault.models.base import BaseModel


class PriorityLevel(str, PyEnum):
    """Savings goal priority."""

    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class SavingsGoalStatus(str, PyEnum):
    """Savings goal lifecycle status."""

    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    PAUSED = "PAUSED"


class SavingsGoal(BaseModel):
    """Amount the user wants to put aside by a target date."""

    __tablename__ = "savings_goal"

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    target_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    target_date: Mapped[date] = mapped_column(Date, nullable=False)
    priority: Mapped[PriorityLevel] = mapped_column(Enum(PriorityLevel), nullable=False)
    status: Mapped[SavingsGoalStatus] = mapped_column(
        Enum(SavingsGoalStatus),
        nullable=False,
        default=SavingsGoalStatus.ACTIVE,
    )

    def __repr__(self) -> str:
        """String representation of the savings goal."""
        return f"<SavingsGoal(id={self.id}, name='{self.name}', target={self.target_amount})>"
