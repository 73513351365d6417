"""BudgetVault API: snapshot export and import of personal budgeting data."""

__version__ = "0.1.0"
