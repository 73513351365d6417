"""Database models package"""

from budgetvault.models.base import Base, BaseModel
from budgetvault.models.budget import BudgetLine, MonthlyBudget
from budgetvault.models.savings_goal import PriorityLevel, SavingsGoal, SavingsGoalStatus
from budgetvault.models.template import Template, TemplateLine
from budgetvault.models.transaction import Transaction, TransactionKind, TransactionRecurrence
from budgetvault.models.user import User

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "Template",
    "TemplateLine",
    "MonthlyBudget",
    "BudgetLine",
    "Transaction",
    "TransactionKind",
    "TransactionRecurrence",
    "SavingsGoal",
    "PriorityLevel",
    "SavingsGoalStatus",
]
