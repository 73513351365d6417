"""
Tests for snapshot export.
"""

from datetime import date
from unittest.mock import AsyncMock

import pytest

from budgetvault.core.exceptions import SnapshotExportError
from budgetvault.schemas.snapshot import SNAPSHOT_VERSION
from budgetvault.services.export import SnapshotBuilder
from budgetvault.services.store import EntityStore, EntityType


class TestSnapshotBuilder:
    """Test SnapshotBuilder."""

    @pytest.mark.asyncio
    async def test_export_contains_everything_owned(
        self, store: EntityStore, owner_id: str, seed_dataset
    ):
        seeded = await seed_dataset(owner_id)

        snapshot = await SnapshotBuilder(store).build(owner_id)

        assert snapshot.version == SNAPSHOT_VERSION
        assert snapshot.user_id == owner_id
        assert len(snapshot.data.templates) == 2
        assert len(snapshot.data.template_lines) == 3
        assert len(snapshot.data.monthly_budgets) == 2
        assert len(snapshot.data.budget_lines) == 2
        assert len(snapshot.data.transactions) == 3
        assert len(snapshot.data.savings_goals) == 1
        assert snapshot.data.savings_goals[0].id == seeded["goal"]["id"]

    @pytest.mark.asyncio
    async def test_metadata(self, store: EntityStore, owner_id: str, seed_dataset):
        await seed_dataset(owner_id)

        metadata = (await SnapshotBuilder(store).build(owner_id)).metadata

        assert metadata.total_templates == 2
        assert metadata.total_budgets == 2
        assert metadata.total_transactions == 3
        assert metadata.total_savings_goals == 1
        assert metadata.date_range.oldest_budget == date(2024, 1, 1)
        assert metadata.date_range.newest_budget == date(2024, 2, 1)

    @pytest.mark.asyncio
    async def test_ordering(self, store: EntityStore, owner_id: str, seed_dataset):
        """Budgets by year and month, transactions by date, templates by creation."""
        await seed_dataset(owner_id)

        data = (await SnapshotBuilder(store).build(owner_id)).data

        assert [(b.year, b.month) for b in data.monthly_budgets] == [(2024, 1), (2024, 2)]
        assert [t.name for t in data.templates] == ["Standard month", "Lean month"]
        assert [t.name for t in data.transactions] == ["Coffee", "Train ticket", "Books"]

    @pytest.mark.asyncio
    async def test_export_excludes_other_users(
        self, store: EntityStore, owner_id: str, other_owner_id: str, seed_dataset
    ):
        await seed_dataset(other_owner_id)

        snapshot = await SnapshotBuilder(store).build(owner_id)

        assert snapshot.data.model_dump() == {
            "templates": [],
            "template_lines": [],
            "monthly_budgets": [],
            "budget_lines": [],
            "transactions": [],
            "savings_goals": [],
        }
        assert snapshot.metadata.date_range.oldest_budget is None
        assert snapshot.metadata.date_range.newest_budget is None

    @pytest.mark.asyncio
    async def test_child_queries_skipped_without_parents(self, owner_id: str):
        store = AsyncMock(spec=EntityStore)
        store.select.return_value = []

        await SnapshotBuilder(store).build(owner_id)

        queried = [call.args[0] for call in store.select.call_args_list]
        assert sorted(queried) == sorted(
            [EntityType.TEMPLATE, EntityType.MONTHLY_BUDGET, EntityType.SAVINGS_GOAL]
        )

    @pytest.mark.asyncio
    async def test_read_failure_is_opaque(self, owner_id: str):
        """Any read failure aborts the export without leaking the cause."""
        store = AsyncMock(spec=EntityStore)
        store.select.side_effect = RuntimeError("connection reset by peer")

        with pytest.raises(SnapshotExportError) as exc_info:
            await SnapshotBuilder(store).build(owner_id)

        assert str(exc_info.value) == "Failed to export user data"
        assert "connection reset" not in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_invalid_row_fails_export(self, owner_id: str):
        store = AsyncMock(spec=EntityStore)

        async def select(entity, **kwargs):
            if entity == EntityType.TEMPLATE:
                return [{"id": "not-a-uuid", "user_id": owner_id, "name": "Broken"}]
            return []

        store.select.side_effect = select

        with pytest.raises(SnapshotExportError):
            await SnapshotBuilder(store).build(owner_id)
