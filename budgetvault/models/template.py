"""
Budget template models: reusable blueprints for monthly budgets.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Enum, ForeignKey, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from budgetvault.models.base import BaseModel
from budgetvault.models.transaction import TransactionKind, TransactionRecurrence


class Template(BaseModel):
    """Named set of planned income, expense and saving lines."""

    __tablename__ = "template"

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    is_default: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        comment="Template used when a new month is created without an explicit choice",
    )

    def __repr__(self) -> str:
        """String representation of the template."""
        return f"<Template(id={self.id}, name='{self.name}')>"


class TemplateLine(BaseModel):
    """A planned line of a template, copied into budgets built from it."""

    __tablename__ = "template_line"

    template_id: Mapped[str] = mapped_column(
        ForeignKey("template.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    kind: Mapped[TransactionKind] = mapped_column(Enum(TransactionKind), nullable=False)
    recurrence: Mapped[TransactionRecurrence] = mapped_column(
        Enum(TransactionRecurrence),
        nullable=False,
    )

    def __repr__(self) -> str:
        """String representation of the template line."""
        return f"<TemplateLine(id={self.id}, name='{self.name}', amount={self.amount})>"
