"""
Unit tests for the Favorites/History Ledger.

DynamoDB is mocked; no AWS access is needed.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError

from agronomy.ledger.favorites_db import FavoritesLedger, merge_ledger_state
from agronomy.recommenders.soil import recommend_by_soil


def _client_error(operation="PutItem"):
    return ClientError({"Error": {"Code": "InternalServerError", "Message": "boom"}}, operation)


@pytest.fixture
def record():
    return recommend_by_soil(80, 20, 10, 30, 30)[0]


@pytest.fixture
def table():
    return MagicMock()


@pytest.fixture
def ledger(table):
    return FavoritesLedger(table=table)


def _stored_item(entry_id="abc123", crop="Rice", created_at="2024-10-01T10:00:00", favorite=False):
    return {
        "pk": "USER#farmer-1",
        "sk": f"REC#{entry_id}",
        "entry_id": entry_id,
        "crop": crop,
        "favorite": favorite,
        "source": "soil",
        "notes": "",
        "record": json.dumps({"crop": crop, "variety": "Jaya", "reason": "High nitrogen"}),
        "created_at": created_at,
        "updated_at": created_at,
    }


class TestFavoritesLedgerWrites:
    """Saving, editing and deleting entries."""

    @patch('agronomy.ledger.favorites_db.logger')
    def test_save_mints_new_entry_id(self, mock_logger, ledger, table, record):
        first = ledger.save("farmer-1", record, source="soil")
        second = ledger.save("farmer-1", record, source="soil")

        assert first and second and first != second
        item = table.put_item.call_args_list[0][1]["Item"]
        assert item["pk"] == "USER#farmer-1"
        assert item["sk"] == f"REC#{first}"
        assert item["crop"] == "Rice"
        assert json.loads(item["record"]) == record.to_dict()

    @patch('agronomy.ledger.favorites_db.logger')
    def test_save_accepts_dict_record(self, mock_logger, ledger, table):
        entry_id = ledger.save("farmer-1", {"crop": "Tomato"}, favorite=True)

        assert entry_id is not None
        assert table.put_item.call_args[1]["Item"]["favorite"] is True

    def test_save_requires_crop(self, ledger):
        with pytest.raises(ValueError):
            ledger.save("farmer-1", {"variety": "Jaya"})

    @patch('agronomy.ledger.favorites_db.logger')
    def test_save_client_error_returns_none(self, mock_logger, ledger, table, record):
        table.put_item.side_effect = _client_error()

        assert ledger.save("farmer-1", record) is None
        mock_logger.error.assert_called_once()

    @patch('agronomy.ledger.favorites_db.logger')
    def test_update_editable_fields(self, mock_logger, ledger, table):
        table.get_item.return_value = {"Item": _stored_item()}

        entry = ledger.update("farmer-1", "abc123", {"variety": "Uma", "favorite": True, "notes": "Try plot 2"})

        assert entry["record"]["variety"] == "Uma"
        assert entry["record"]["reason"] == "High nitrogen"
        assert entry["favorite"] is True
        assert entry["notes"] == "Try plot 2"
        values = table.update_item.call_args[1]["ExpressionAttributeValues"]
        assert json.loads(values[":record"])["variety"] == "Uma"

    def test_update_rejects_non_editable_fields(self, ledger, table):
        with pytest.raises(ValueError):
            ledger.update("farmer-1", "abc123", {"suitabilityScore": 100})

        table.update_item.assert_not_called()

    def test_update_missing_entry(self, ledger, table):
        table.get_item.return_value = {}

        assert ledger.update("farmer-1", "missing", {"notes": "x"}) is None
        table.update_item.assert_not_called()

    def test_delete(self, ledger, table):
        table.delete_item.return_value = {"Attributes": _stored_item()}

        assert ledger.delete("farmer-1", "abc123") is True
        assert table.delete_item.call_args[1]["Key"] == {"pk": "USER#farmer-1", "sk": "REC#abc123"}

    def test_delete_missing(self, ledger, table):
        table.delete_item.return_value = {}

        assert ledger.delete("farmer-1", "missing") is False

    @patch('agronomy.ledger.favorites_db.logger')
    def test_delete_client_error(self, mock_logger, ledger, table):
        table.delete_item.side_effect = _client_error("DeleteItem")

        assert ledger.delete("farmer-1", "abc123") is False


class TestFavoritesLedgerReads:
    """Listing and fetching entries."""

    def test_list_newest_first(self, ledger, table):
        table.query.return_value = {"Items": [
            _stored_item("old", "Rice", "2024-09-01T08:00:00"),
            _stored_item("new", "Wheat", "2024-10-01T08:00:00"),
        ]}

        entries = ledger.list_for_user("farmer-1")

        assert [e["entryId"] for e in entries] == ["new", "old"]
        assert entries[0]["record"]["crop"] == "Wheat"

    def test_list_follows_pagination(self, ledger, table):
        table.query.side_effect = [
            {"Items": [_stored_item("first", "Rice", "2024-09-01T08:00:00")],
             "LastEvaluatedKey": {"pk": "USER#farmer-1", "sk": "REC#first"}},
            {"Items": [_stored_item("second", "Wheat", "2024-10-01T08:00:00")]},
        ]

        entries = ledger.list_for_user("farmer-1")

        assert [e["entryId"] for e in entries] == ["second", "first"]
        assert table.query.call_count == 2
        assert "ExclusiveStartKey" not in table.query.call_args_list[0][1]
        assert table.query.call_args_list[1][1]["ExclusiveStartKey"] == {"pk": "USER#farmer-1", "sk": "REC#first"}

    @patch('agronomy.ledger.favorites_db.logger')
    def test_list_client_error_returns_empty(self, mock_logger, ledger, table):
        table.query.side_effect = _client_error("Query")

        assert ledger.list_for_user("farmer-1") == []
        mock_logger.warning.assert_called_once()

    def test_get_found(self, ledger, table):
        table.get_item.return_value = {"Item": _stored_item()}

        entry = ledger.get("farmer-1", "abc123")

        assert entry["entryId"] == "abc123"
        assert entry["crop"] == "Rice"

    def test_get_not_found(self, ledger, table):
        table.get_item.return_value = {}

        assert ledger.get("farmer-1", "missing") is None

    @patch('agronomy.ledger.favorites_db.boto3')
    def test_default_table_from_config(self, mock_boto3):
        from agronomy.config import config

        FavoritesLedger()

        mock_boto3.resource.assert_called_once_with("dynamodb", region_name=config.aws_region)
        mock_boto3.resource.return_value.Table.assert_called_once_with(config.favorites_table)


class TestMergeLedgerState:
    """Merging saved state onto fresh engine output."""

    def test_marks_saved_crops(self):
        records = recommend_by_soil(80, 20, 10, 30, 30)
        entries = [
            {"entryId": "e1", "crop": "Wheat", "favorite": True, "createdAt": "2024-10-01"},
            {"entryId": "e0", "crop": "Wheat", "favorite": False, "createdAt": "2024-09-01"},
        ]

        merged = merge_ledger_state(records, entries)

        wheat = next(m for m in merged if m["crop"] == "Wheat")
        rice = next(m for m in merged if m["crop"] == "Rice")
        assert wheat["saved"] is True and wheat["favorite"] is True and wheat["entryId"] == "e1"
        assert rice["saved"] is False and rice["entryId"] is None
        assert [m["crop"] for m in merged] == [r.crop for r in records]

    def test_inputs_untouched(self):
        records = [{"crop": "Rice"}]

        merge_ledger_state(records, [{"entryId": "e1", "crop": "Rice"}])

        assert records == [{"crop": "Rice"}]
