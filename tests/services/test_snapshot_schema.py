"""
Tests for snapshot document validation.
"""

from decimal import Decimal

import pytest

from budgetvault.core.exceptions import InvalidSnapshotError, UnsupportedSnapshotVersionError
from budgetvault.models import TransactionKind
from budgetvault.models.base import generate_uuid as new_id
from budgetvault.schemas.data_transfer import ImportMode, ImportOptions, ImportRequest
from budgetvault.schemas.snapshot import Snapshot, validate_snapshot


def _template(user_id, **overrides):
    record = {"id": new_id(), "user_id": user_id, "name": "Standard month"}
    record.update(overrides)
    return record


@pytest.mark.unit
class TestValidateSnapshot:
    """Test validate_snapshot."""

    def test_valid_document(self, make_document):
        user_id = new_id()
        template = _template(user_id)
        line = {
            "id": new_id(),
            "template_id": template["id"],
            "name": "Salary",
            "amount": "4200.00",
            "kind": "income",
            "recurrence": "fixed",
        }
        document = make_document(user_id, templates=[template], template_lines=[line])

        snapshot = validate_snapshot(document)

        assert isinstance(snapshot, Snapshot)
        assert snapshot.user_id == user_id
        assert snapshot.data.template_lines[0].amount == Decimal("4200.00")
        assert snapshot.data.template_lines[0].kind == TransactionKind.INCOME
        assert snapshot.metadata.total_templates == 1

    def test_parsed_snapshot_returned_as_is(self, make_document):
        snapshot = validate_snapshot(make_document())
        assert validate_snapshot(snapshot) is snapshot

    def test_unknown_record_fields_ignored(self, make_document):
        user_id = new_id()
        document = make_document(user_id, templates=[_template(user_id, color="blue")])

        snapshot = validate_snapshot(document)

        assert not hasattr(snapshot.data.templates[0], "color")

    def test_unsupported_version(self, make_document):
        """A newer version is reported as such, not as a malformed document."""
        document = make_document(version="2.0.0")
        del document["data"]

        with pytest.raises(UnsupportedSnapshotVersionError) as exc_info:
            validate_snapshot(document)

        assert exc_info.value.version == "2.0.0"
        assert str(exc_info.value) == "Unsupported data version: 2.0.0"

    @pytest.mark.parametrize("version", [None, 1])
    def test_missing_or_non_string_version(self, make_document, version):
        document = make_document()
        document["version"] = version

        with pytest.raises(InvalidSnapshotError):
            validate_snapshot(document)

    def test_not_an_object(self):
        with pytest.raises(InvalidSnapshotError):
            validate_snapshot(["not", "a", "snapshot"])

    def test_missing_collection(self, make_document):
        document = make_document()
        del document["data"]["savings_goals"]

        with pytest.raises(InvalidSnapshotError) as exc_info:
            validate_snapshot(document)

        assert str(exc_info.value) == "Invalid data format"
        assert exc_info.value.errors

    @pytest.mark.parametrize(
        "overrides",
        [
            {"id": "not-a-uuid"},
            {"name": None},
            {"user_id": "123"},
        ],
    )
    def test_invalid_record(self, make_document, overrides):
        user_id = new_id()
        template = _template(user_id)
        template.update(overrides)
        document = make_document(user_id, templates=[template])

        with pytest.raises(InvalidSnapshotError):
            validate_snapshot(document)

    def test_budget_month_out_of_range(self, make_document):
        user_id = new_id()
        budget = {
            "id": new_id(),
            "user_id": user_id,
            "template_id": new_id(),
            "month": 13,
            "year": 2024,
        }

        with pytest.raises(InvalidSnapshotError):
            validate_snapshot(make_document(user_id, monthly_budgets=[budget]))


@pytest.mark.unit
class TestImportRequest:
    """Test the import request envelope."""

    def test_defaults(self):
        request = ImportRequest.model_validate({"data": {}})

        assert request.options.mode == ImportMode.REPLACE
        assert request.options.dry_run is False

    def test_dry_run_alias(self):
        request = ImportRequest.model_validate(
            {"data": {}, "options": {"mode": "append", "dryRun": True}}
        )

        assert request.options.mode == ImportMode.APPEND
        assert request.options.dry_run is True

    def test_dry_run_by_field_name(self):
        assert ImportOptions(dry_run=True).dry_run is True
