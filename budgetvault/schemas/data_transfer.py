"""
Schemas for snapshot import requests and results.
"""

from enum import Enum as PyEnum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class ImportMode(str, PyEnum):
    """How an imported snapshot is combined with the user's existing data."""

    REPLACE = "replace"
    MERGE = "merge"
    APPEND = "append"


class ImportOptions(BaseModel):
    """Options accepted alongside an imported snapshot."""

    model_config = ConfigDict(populate_by_name=True)

    mode: ImportMode = Field(ImportMode.REPLACE, description="Import strategy")
    dry_run: bool = Field(
        False,
        alias="dryRun",
        description="Validate and count without writing anything",
    )


class ImportRequest(BaseModel):
    """Import request body.

    ``data`` stays untyped here; it is validated by the snapshot schema so
    that malformed documents are reported as an invalid data format.
    """

    data: Dict[str, Any]
    options: ImportOptions = Field(default_factory=ImportOptions)


class ImportedCounts(BaseModel):
    """Number of records written per entity type."""

    templates: int = 0
    template_lines: int = 0
    monthly_budgets: int = 0
    budget_lines: int = 0
    transactions: int = 0
    savings_goals: int = 0


class ImportResult(BaseModel):
    """Outcome of an import, including per-record failures."""

    success: bool
    message: str
    imported: ImportedCounts
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
