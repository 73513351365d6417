"""
Owner-scoped record store over the six budgeting collections.
"""

from dataclasses import dataclass, field
from enum import Enum as PyEnum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Type

from sqlalchemy import delete, inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from budgetvault.core.exceptions import MissingReferenceError, RecordOwnershipError
from budgetvault.models import (
    BaseModel,
    BudgetLine,
    MonthlyBudget,
    SavingsGoal,
    Template,
    TemplateLine,
    Transaction,
)

WhereIn = Tuple[str, Sequence[str]]


class EntityType(str, PyEnum):
    """The six exportable collections, valued by their snapshot key."""

    TEMPLATE = "templates"
    TEMPLATE_LINE = "template_lines"
    MONTHLY_BUDGET = "monthly_budgets"
    BUDGET_LINE = "budget_lines"
    TRANSACTION = "transactions"
    SAVINGS_GOAL = "savings_goals"


@dataclass(frozen=True)
class EntitySpec:
    """How a collection is stored and how it reaches its owning user."""

    model: Type[BaseModel]
    label: str
    owner_column: Optional[str] = None
    owner_via: Optional[str] = None
    references: Mapping[str, EntityType] = field(default_factory=dict)


ENTITY_SPECS: Dict[EntityType, EntitySpec] = {
    EntityType.TEMPLATE: EntitySpec(
        model=Template,
        label="template",
        owner_column="user_id",
    ),
    EntityType.TEMPLATE_LINE: EntitySpec(
        model=TemplateLine,
        label="template line",
        owner_via="template_id",
        references={"template_id": EntityType.TEMPLATE},
    ),
    EntityType.MONTHLY_BUDGET: EntitySpec(
        model=MonthlyBudget,
        label="budget",
        owner_column="user_id",
        references={"template_id": EntityType.TEMPLATE},
    ),
    EntityType.BUDGET_LINE: EntitySpec(
        model=BudgetLine,
        label="budget line",
        owner_via="budget_id",
        references={
            "budget_id": EntityType.MONTHLY_BUDGET,
            "template_line_id": EntityType.TEMPLATE_LINE,
            "savings_goal_id": EntityType.SAVINGS_GOAL,
        },
    ),
    EntityType.TRANSACTION: EntitySpec(
        model=Transaction,
        label="transaction",
        owner_via="budget_id",
        references={"budget_id": EntityType.MONTHLY_BUDGET},
    ),
    EntityType.SAVINGS_GOAL: EntitySpec(
        model=SavingsGoal,
        label="savings goal",
        owner_column="user_id",
    ),
}


def row_to_dict(record: BaseModel) -> Dict[str, Any]:
    """Convert a mapped instance into a plain column dict."""
    return {
        attr.key: getattr(record, attr.key)
        for attr in sa_inspect(record).mapper.column_attrs
    }


class EntityStore:
    """
    Typed select/upsert/delete over the budgeting collections.

    Every call runs in its own session and commits on its own, so calls
    without a data dependency can be awaited concurrently. Writes check
    ownership the way row-level security would: a record may only be
    written by its owner and may only reference records of that owner.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def select(
        self,
        entity: EntityType,
        *,
        owner_id: Optional[str] = None,
        where_in: Optional[WhereIn] = None,
        order_by: Sequence[str] = (),
    ) -> List[Dict[str, Any]]:
        """
        Fetch rows of one collection.

        Args:
            entity: Collection to read
            owner_id: Only rows whose direct owner column matches
            where_in: ``(column, values)`` membership filter
            order_by: Column names to sort by, id is always the last key

        Returns:
            List[Dict[str, Any]]: Matching rows as plain dicts
        """
        spec = ENTITY_SPECS[entity]
        model = spec.model
        stmt = select(model)
        for condition in self._filters(spec, owner_id, where_in):
            stmt = stmt.where(condition)
        stmt = stmt.order_by(*[getattr(model, column) for column in order_by], model.id)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [row_to_dict(record) for record in result.scalars().all()]

    async def upsert(
        self,
        entity: EntityType,
        values: Mapping[str, Any],
        *,
        owner_id: str,
    ) -> Dict[str, Any]:
        """
        Insert a row, or update it when its id already exists.

        Rows without an id get a freshly generated one.

        Returns:
            Dict[str, Any]: The stored row

        Raises:
            RecordOwnershipError: If the row or a referenced row belongs to another user
            MissingReferenceError: If a referenced row does not exist
            SQLAlchemyError: If the database rejects the write
        """
        spec = ENTITY_SPECS[entity]
        async with self._session_factory() as session:
            try:
                await self._check_ownership(session, entity, values, owner_id)
                record = await session.merge(spec.model(**values))
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            return row_to_dict(record)

    async def delete(
        self,
        entity: EntityType,
        *,
        owner_id: Optional[str] = None,
        where_in: Optional[WhereIn] = None,
    ) -> int:
        """
        Delete rows of one collection matching the filters.

        Returns:
            int: Number of rows deleted
        """
        spec = ENTITY_SPECS[entity]
        conditions = self._filters(spec, owner_id, where_in)
        if not conditions:
            raise ValueError(f"Refusing to delete all {entity.value} without a filter")

        stmt = delete(spec.model)
        for condition in conditions:
            stmt = stmt.where(condition)

        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            return result.rowcount

    @staticmethod
    def _filters(
        spec: EntitySpec,
        owner_id: Optional[str],
        where_in: Optional[WhereIn],
    ) -> list:
        model = spec.model
        conditions = []
        if owner_id is not None:
            if spec.owner_column is None:
                raise ValueError(f"{spec.label} has no owner column to filter on")
            conditions.append(getattr(model, spec.owner_column) == owner_id)
        if where_in is not None:
            column, values = where_in
            values = list(values)
            # An empty IN () is invalid on some databases and matches nothing anyway
            if not values:
                raise ValueError(f"Empty value list for {spec.label}.{column}")
            conditions.append(getattr(model, column).in_(values))
        return conditions

    async def _check_ownership(
        self,
        session: AsyncSession,
        entity: EntityType,
        values: Mapping[str, Any],
        owner_id: str,
    ) -> None:
        spec = ENTITY_SPECS[entity]

        if spec.owner_column is not None and values.get(spec.owner_column) != owner_id:
            raise RecordOwnershipError(f"{spec.label} must belong to user {owner_id}")

        record_id = values.get("id")
        if record_id is not None:
            existing = await session.get(spec.model, record_id)
            if existing is not None:
                if await self._owner_of(session, entity, existing) != owner_id:
                    raise RecordOwnershipError(
                        f"{spec.label} {record_id} belongs to another user"
                    )

        for column, target in spec.references.items():
            reference_id = values.get(column)
            if reference_id is None:
                continue
            target_spec = ENTITY_SPECS[target]
            parent = await session.get(target_spec.model, reference_id)
            if parent is None:
                raise MissingReferenceError(
                    f"{spec.label}.{column} references missing {target_spec.label} {reference_id}"
                )
            if await self._owner_of(session, target, parent) != owner_id:
                raise RecordOwnershipError(
                    f"{spec.label}.{column} references {target_spec.label} "
                    f"{reference_id} of another user"
                )

    async def _owner_of(
        self,
        session: AsyncSession,
        entity: EntityType,
        record: BaseModel,
    ) -> Optional[str]:
        spec = ENTITY_SPECS[entity]
        if spec.owner_column is not None:
            return getattr(record, spec.owner_column)

        parent_type = spec.references[spec.owner_via]
        parent = await session.get(ENTITY_SPECS[parent_type].model, getattr(record, spec.owner_via))
        if parent is None:
            return None
        return await self._owner_of(session, parent_type, parent)
