"""
Best-effort removal of everything a user owns, children before parents.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, List, Optional

from budgetvault.core.logging import get_logger
from budgetvault.services.store import ENTITY_SPECS, EntityStore, EntityType

logger = get_logger(__name__)


@dataclass(frozen=True)
class DeletionStep:
    """Outcome of deleting one collection."""

    entity: EntityType
    deleted: int = 0
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def warning(self) -> str:
        return f"Failed to delete existing {ENTITY_SPECS[self.entity].label} data"


class DeletionPlanner:
    """
    Deletes a user's data in dependency-safe order.

    A failing step is logged and reported, never raised, and the remaining
    steps still run.
    """

    def __init__(self, store: EntityStore):
        self.store = store

    async def delete_all(self, owner_id: str) -> List[DeletionStep]:
        """
        Delete all six collections for a user.

        Args:
            owner_id: Owning user id

        Returns:
            List[DeletionStep]: One outcome per attempted step
        """
        budget_ids = await self._owned_ids(EntityType.MONTHLY_BUDGET, owner_id)
        template_ids = await self._owned_ids(EntityType.TEMPLATE, owner_id)

        steps: List[DeletionStep] = []

        if budget_ids:
            steps.extend(
                await asyncio.gather(
                    self._step(
                        EntityType.TRANSACTION,
                        self.store.delete(EntityType.TRANSACTION, where_in=("budget_id", budget_ids)),
                    ),
                    self._step(
                        EntityType.BUDGET_LINE,
                        self.store.delete(EntityType.BUDGET_LINE, where_in=("budget_id", budget_ids)),
                    ),
                )
            )

        steps.append(
            await self._step(
                EntityType.MONTHLY_BUDGET,
                self.store.delete(EntityType.MONTHLY_BUDGET, owner_id=owner_id),
            )
        )

        if template_ids:
            steps.append(
                await self._step(
                    EntityType.TEMPLATE_LINE,
                    self.store.delete(EntityType.TEMPLATE_LINE, where_in=("template_id", template_ids)),
                )
            )

        steps.append(
            await self._step(
                EntityType.TEMPLATE,
                self.store.delete(EntityType.TEMPLATE, owner_id=owner_id),
            )
        )
        steps.append(
            await self._step(
                EntityType.SAVINGS_GOAL,
                self.store.delete(EntityType.SAVINGS_GOAL, owner_id=owner_id),
            )
        )

        logger.info(
            "user_data_deleted",
            user_id=owner_id,
            deleted={step.entity.value: step.deleted for step in steps if step.ok},
            failed=[step.entity.value for step in steps if not step.ok],
        )
        return steps

    async def _owned_ids(self, entity: EntityType, owner_id: str) -> List[str]:
        try:
            rows = await self.store.select(entity, owner_id=owner_id)
        except Exception as e:
            logger.warning(
                "owned_ids_lookup_failed",
                entity=entity.value,
                user_id=owner_id,
                error=str(e),
            )
            return []
        return [row["id"] for row in rows]

    @staticmethod
    async def _step(entity: EntityType, operation: Awaitable[int]) -> DeletionStep:
        try:
            deleted = await operation
        except Exception as e:
            logger.warning("deletion_step_failed", entity=entity.value, error=str(e))
            return DeletionStep(entity=entity, error=e)
        return DeletionStep(entity=entity, deleted=deleted)
