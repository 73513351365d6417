"""
Monthly budget models.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, Enum, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from budgetvault.models.base import BaseModel
from budgetvault.models.transaction import TransactionKind, TransactionRecurrence


class MonthlyBudget(BaseModel):
    """Budget for one calendar month, instantiated from a template."""

    __tablename__ = "monthly_budget"

    user_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    template_id: Mapped[str] = mapped_column(
        ForeignKey("template.id"),
        nullable=False,
        index=True,
    )

    month: Mapped[int] = mapped_column(Integer, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")

    __table_args__ = (
        CheckConstraint("month BETWEEN 1 AND 12", name="ck_monthly_budget_month"),
    )

    def __repr__(self) -> str:
        """String representation of the budget."""
        return f"<MonthlyBudget(id={self.id}, period={self.year}-{self.month:02d})>"


class BudgetLine(BaseModel):
    """Planned amount inside a monthly budget."""

    __tablename__ = "budget_line"

    budget_id: Mapped[str] = mapped_column(
        ForeignKey("monthly_budget.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    template_line_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("template_line.id", ondelete="SET NULL"),
        nullable=True,
        comment="Template line this budget line was generated from",
    )
    savings_goal_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("savings_goal.id", ondelete="SET NULL"),
        nullable=True,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    kind: Mapped[TransactionKind] = mapped_column(Enum(TransactionKind), nullable=False)
    recurrence: Mapped[TransactionRecurrence] = mapped_column(
        Enum(TransactionRecurrence),
        nullable=False,
    )
    is_manually_adjusted: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Amount was edited after generation from the template",
    )

    def __repr__(self) -> str:
        """String representation of the budget line."""
        return f"<BudgetLine(id={self.id}, name='{self.name}', amount={self.amount})>"
