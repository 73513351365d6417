"""
Service assembling a user's full dataset into a snapshot document.
"""

import asyncio
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from budgetvault.core.exceptions import InvalidSnapshotError, SnapshotExportError
from budgetvault.core.logging import get_logger, log_error
from budgetvault.schemas.snapshot import SNAPSHOT_VERSION, Snapshot, validate_snapshot
from budgetvault.services.store import EntityStore, EntityType

logger = get_logger(__name__)

Rows = List[Dict[str, Any]]


def _first_of_month(budget: Dict[str, Any]) -> date:
    return date(budget["year"], budget["month"], 1)


class SnapshotBuilder:
    """Builds export snapshots from an entity store."""

    def __init__(self, store: EntityStore):
        self.store = store

    async def build(self, owner_id: str) -> Snapshot:
        """
        Export everything owned by a user.

        Args:
            owner_id: Owning user id

        Returns:
            Snapshot: Validated snapshot document

        Raises:
            SnapshotExportError: If any read fails or the assembled document is invalid
        """
        try:
            document = await self._assemble(owner_id)
            snapshot = validate_snapshot(document)
        except InvalidSnapshotError as e:
            log_error(logger, e, user_id=owner_id, validation_errors=e.errors)
            raise SnapshotExportError() from e
        except Exception as e:
            log_error(logger, e, user_id=owner_id)
            raise SnapshotExportError() from e

        logger.info(
            "snapshot_exported",
            user_id=owner_id,
            templates=snapshot.metadata.total_templates,
            budgets=snapshot.metadata.total_budgets,
            transactions=snapshot.metadata.total_transactions,
            savings_goals=snapshot.metadata.total_savings_goals,
        )
        return snapshot

    async def _assemble(self, owner_id: str) -> Dict[str, Any]:
        templates, monthly_budgets, savings_goals = await asyncio.gather(
            self.store.select(EntityType.TEMPLATE, owner_id=owner_id, order_by=("created_at",)),
            self.store.select(
                EntityType.MONTHLY_BUDGET,
                owner_id=owner_id,
                order_by=("year", "month"),
            ),
            self.store.select(
                EntityType.SAVINGS_GOAL,
                owner_id=owner_id,
                order_by=("created_at",),
            ),
        )

        template_ids = [template["id"] for template in templates]
        budget_ids = [budget["id"] for budget in monthly_budgets]

        template_lines, (budget_lines, transactions) = await asyncio.gather(
            self._fetch_template_lines(template_ids),
            self._fetch_budget_children(budget_ids),
        )

        return {
            "version": SNAPSHOT_VERSION,
            "exported_at": datetime.now(timezone.utc),
            "user_id": owner_id,
            "data": {
                "templates": templates,
                "template_lines": template_lines,
                "monthly_budgets": monthly_budgets,
                "budget_lines": budget_lines,
                "transactions": transactions,
                "savings_goals": savings_goals,
            },
            "metadata": {
                "total_templates": len(templates),
                "total_budgets": len(monthly_budgets),
                "total_transactions": len(transactions),
                "total_savings_goals": len(savings_goals),
                "date_range": self._date_range(monthly_budgets),
            },
        }

    async def _fetch_template_lines(self, template_ids: List[str]) -> Rows:
        if not template_ids:
            return []
        return await self.store.select(
            EntityType.TEMPLATE_LINE,
            where_in=("template_id", template_ids),
            order_by=("created_at",),
        )

    async def _fetch_budget_children(self, budget_ids: List[str]) -> tuple:
        if not budget_ids:
            return [], []
        budget_lines, transactions = await asyncio.gather(
            self.store.select(
                EntityType.BUDGET_LINE,
                where_in=("budget_id", budget_ids),
                order_by=("created_at",),
            ),
            self.store.select(
                EntityType.TRANSACTION,
                where_in=("budget_id", budget_ids),
                order_by=("transaction_date",),
            ),
        )
        return budget_lines, transactions

    @staticmethod
    def _date_range(monthly_budgets: Rows) -> Dict[str, Optional[date]]:
        """Budgets arrive sorted by year then month."""
        if not monthly_budgets:
            return {"oldest_budget": None, "newest_budget": None}
        return {
            "oldest_budget": _first_of_month(monthly_budgets[0]),
            "newest_budget": _first_of_month(monthly_budgets[-1]),
        }
