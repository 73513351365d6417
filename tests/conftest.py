"""
Global test fixtures and configuration.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-jwt-secret")
os.environ.setdefault("LOG_FORMAT", "console")

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, AsyncGenerator, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from budgetvault.api.dependencies import get_entity_store
from budgetvault.core.database import build_engine, build_session_factory, get_db
from budgetvault.core.security import create_access_token
from budgetvault.main import app
from budgetvault.models import (
    Base,
    PriorityLevel,
    SavingsGoalStatus,
    TransactionKind,
    TransactionRecurrence,
    User,
)
from budgetvault.models.base import generate_uuid as new_id
from budgetvault.services.export import SnapshotBuilder
from budgetvault.services.store import EntityStore, EntityType


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """File backed SQLite engine so concurrent sessions use separate connections."""
    test_engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_session_factory(engine)


@pytest.fixture
def store(session_factory) -> EntityStore:
    return EntityStore(session_factory)


async def _create_user(session_factory, email: str, is_active: bool = True) -> str:
    async with session_factory() as session:
        user = User(email=email, is_active=is_active)
        session.add(user)
        await session.commit()
        return user.id


@pytest_asyncio.fixture
async def owner_id(session_factory) -> str:
    """Id of the user whose data is exported and imported."""
    return await _create_user(session_factory, "owner@example.com")


@pytest_asyncio.fixture
async def other_owner_id(session_factory) -> str:
    """Id of a second, unrelated user."""
    return await _create_user(session_factory, "other@example.com")


@pytest_asyncio.fixture
async def inactive_owner_id(session_factory) -> str:
    return await _create_user(session_factory, "inactive@example.com", is_active=False)


@pytest.fixture
def seed_dataset(store: EntityStore):
    """
    Return a coroutine that stores a small but complete dataset for a user.

    Layout: 1 savings goal, 2 templates with 3 lines, 2 budgets
    (January and February 2024), 2 budget lines, 3 transactions.
    """

    async def _seed(user_id: str) -> Dict[str, Any]:
        goal = await store.upsert(
            EntityType.SAVINGS_GOAL,
            {
                "user_id": user_id,
                "name": "Emergency fund",
                "target_amount": Decimal("5000.00"),
                "target_date": date(2025, 12, 31),
                "priority": PriorityLevel.HIGH,
                "status": SavingsGoalStatus.ACTIVE,
            },
            owner_id=user_id,
        )
        main = await store.upsert(
            EntityType.TEMPLATE,
            {"user_id": user_id, "name": "Standard month", "is_default": True},
            owner_id=user_id,
        )
        lean = await store.upsert(
            EntityType.TEMPLATE,
            {"user_id": user_id, "name": "Lean month", "description": "Holidays"},
            owner_id=user_id,
        )
        salary = await store.upsert(
            EntityType.TEMPLATE_LINE,
            {
                "template_id": main["id"],
                "name": "Salary",
                "amount": Decimal("4200.00"),
                "kind": TransactionKind.INCOME,
                "recurrence": TransactionRecurrence.FIXED,
            },
            owner_id=user_id,
        )
        rent = await store.upsert(
            EntityType.TEMPLATE_LINE,
            {
                "template_id": main["id"],
                "name": "Rent",
                "amount": Decimal("1500.00"),
                "kind": TransactionKind.EXPENSE,
                "recurrence": TransactionRecurrence.FIXED,
            },
            owner_id=user_id,
        )
        await store.upsert(
            EntityType.TEMPLATE_LINE,
            {
                "template_id": lean["id"],
                "name": "Groceries",
                "amount": Decimal("300.00"),
                "kind": TransactionKind.EXPENSE,
                "recurrence": TransactionRecurrence.VARIABLE,
            },
            owner_id=user_id,
        )
        february = await store.upsert(
            EntityType.MONTHLY_BUDGET,
            {"user_id": user_id, "template_id": main["id"], "month": 2, "year": 2024},
            owner_id=user_id,
        )
        january = await store.upsert(
            EntityType.MONTHLY_BUDGET,
            {
                "user_id": user_id,
                "template_id": main["id"],
                "month": 1,
                "year": 2024,
                "description": "New year",
            },
            owner_id=user_id,
        )
        await store.upsert(
            EntityType.BUDGET_LINE,
            {
                "budget_id": january["id"],
                "template_line_id": salary["id"],
                "savings_goal_id": goal["id"],
                "name": "Salary",
                "amount": Decimal("4200.00"),
                "kind": TransactionKind.INCOME,
                "recurrence": TransactionRecurrence.FIXED,
            },
            owner_id=user_id,
        )
        await store.upsert(
            EntityType.BUDGET_LINE,
            {
                "budget_id": february["id"],
                "template_line_id": rent["id"],
                "name": "Rent",
                "amount": Decimal("1550.00"),
                "kind": TransactionKind.EXPENSE,
                "recurrence": TransactionRecurrence.FIXED,
                "is_manually_adjusted": True,
            },
            owner_id=user_id,
        )
        for budget, name, amount, day in (
            (january, "Coffee", "4.50", 3),
            (february, "Train ticket", "32.00", 2),
            (february, "Books", "18.90", 14),
        ):
            await store.upsert(
                EntityType.TRANSACTION,
                {
                    "budget_id": budget["id"],
                    "name": name,
                    "amount": Decimal(amount),
                    "kind": TransactionKind.EXPENSE,
                    "transaction_date": datetime(
                        budget["year"], budget["month"], day, tzinfo=timezone.utc
                    ),
                    "category": "daily",
                },
                owner_id=user_id,
            )
        return {
            "goal": goal,
            "templates": [main, lean],
            "template_lines": [salary, rent],
            "budgets": [january, february],
        }

    return _seed


@pytest.fixture
def count_records(store: EntityStore):
    """Return a coroutine counting a user's stored records per snapshot key."""

    async def _count(user_id: str) -> Dict[str, int]:
        snapshot = await SnapshotBuilder(store).build(user_id)
        return {key: len(rows) for key, rows in snapshot.data.model_dump().items()}

    return _count


@pytest.fixture
def make_document():
    """
    Return a builder for raw snapshot documents.

    Any list not given is empty; metadata is derived from the lists.
    """

    def _make(
        user_id: Optional[str] = None,
        version: str = "1.0.0",
        **lists: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        data = {
            key: lists.get(key, [])
            for key in (
                "templates",
                "template_lines",
                "monthly_budgets",
                "budget_lines",
                "transactions",
                "savings_goals",
            )
        }
        return {
            "version": version,
            "exported_at": "2024-03-01T10:00:00+00:00",
            "user_id": user_id or new_id(),
            "data": data,
            "metadata": {
                "total_templates": len(data["templates"]),
                "total_budgets": len(data["monthly_budgets"]),
                "total_transactions": len(data["transactions"]),
                "total_savings_goals": len(data["savings_goals"]),
                "date_range": {"oldest_budget": None, "newest_budget": None},
            },
        }

    return _make


@pytest_asyncio.fixture
async def async_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the test database."""

    async def _get_test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_entity_store] = lambda: EntityStore(session_factory)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(owner_id: str) -> dict:
    """Create authentication headers for the owner."""
    access_token = create_access_token(subject=owner_id)
    return {"Authorization": f"Bearer {access_token}"}
