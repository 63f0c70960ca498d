"""
Favorites/History Ledger
========================

DynamoDB-backed record of recommendations a user saved, favorited or edited.

The engine never assigns record ids; a new opaque entry id is minted here at
save time. Saved state is merged back onto fresh engine output by the caller
through :func:`merge_ledger_state`; engine records themselves are never
modified.

DynamoDB Schema:
----------------
Table: farmer-recommendation-ledger

Primary Key:
    - pk (String): "USER#{user_id}"
    - sk (String): "REC#{entry_id}"

Attributes:
    - entry_id, crop, favorite, source, notes
    - record (String): JSON of the RecommendationRecord dict
    - created_at / updated_at (ISO timestamps)
"""

import json
import uuid
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Union

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from agronomy.config import config
from agronomy.models import RecommendationRecord
from agronomy.utils.logger import logger


# Fields a user may change after saving
EDITABLE_RECORD_FIELDS = ("variety", "reason", "plantingWindow", "harvestTime")
EDITABLE_ENTRY_FIELDS = ("notes", "favorite")


def _partition_key(user_id: str) -> str:
    return f"USER#{user_id}"


def _sort_key(entry_id: str) -> str:
    return f"REC#{entry_id}"


def _entry_from_item(item: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "entryId": item["entry_id"],
        "crop": item.get("crop"),
        "favorite": bool(item.get("favorite", False)),
        "source": item.get("source"),
        "notes": item.get("notes", ""),
        "record": json.loads(item.get("record", "{}")),
        "createdAt": item.get("created_at"),
        "updatedAt": item.get("updated_at"),
    }


class FavoritesLedger:
    """Saved/favorited recommendations per user."""

    def __init__(self, table=None):
        if table is None:
            dynamodb = boto3.resource("dynamodb", region_name=config.aws_region)
            table = dynamodb.Table(config.favorites_table)
        self.table = table

    def save(
        self,
        user_id: str,
        record: Union[RecommendationRecord, Dict[str, Any]],
        favorite: bool = False,
        source: str = "conditions",
        notes: str = "",
    ) -> Optional[str]:
        """
        Save a recommendation for a user.

        Args:
            user_id: Owner of the entry
            record: Engine record or its dict rendering
            favorite: Mark as favorite immediately
            source: Which recommender produced it ("conditions" or "soil")
            notes: Free-text user notes

        Returns:
            The new entry id, or None if the write failed
        """
        data = record.to_dict() if isinstance(record, RecommendationRecord) else dict(record)
        if not data.get("crop"):
            raise ValueError("Record must name a crop")

        entry_id = uuid.uuid4().hex
        now = datetime.now().isoformat()
        try:
            self.table.put_item(
                Item={
                    "pk": _partition_key(user_id),
                    "sk": _sort_key(entry_id),
                    "entry_id": entry_id,
                    "crop": data["crop"],
                    "favorite": favorite,
                    "source": source,
                    "notes": notes,
                    "record": json.dumps(data),
                    "created_at": now,
                    "updated_at": now,
                }
            )
            logger.info(f"Saved {data['crop']} recommendation {entry_id} for user {user_id}")
            return entry_id
        except ClientError as e:
            logger.error(f"Error saving recommendation for user {user_id}: {e}")
            return None

    def list_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        """All saved entries for a user, newest first."""
        query_kwargs = {
            "KeyConditionExpression": Key("pk").eq(_partition_key(user_id)) & Key("sk").begins_with("REC#")
        }
        items = []
        try:
            while True:
                response = self.table.query(**query_kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                query_kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            logger.warning(f"Error listing recommendations for user {user_id}: {e}")
            return []

        entries = [_entry_from_item(item) for item in items]
        entries.sort(key=lambda e: e.get("createdAt") or "", reverse=True)
        return entries

    def get(self, user_id: str, entry_id: str) -> Optional[Dict[str, Any]]:
        try:
            response = self.table.get_item(
                Key={"pk": _partition_key(user_id), "sk": _sort_key(entry_id)}
            )
        except ClientError as e:
            logger.warning(f"Error getting recommendation {entry_id}: {e}")
            return None
        item = response.get("Item")
        return _entry_from_item(item) if item else None

    def update(self, user_id: str, entry_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Apply user edits to a saved entry.

        Only ``variety``, ``reason``, ``plantingWindow``, ``harvestTime``,
        ``notes`` and ``favorite`` are editable.

        Returns:
            The updated entry, or None if it does not exist or the write failed

        Raises:
            ValueError: if ``changes`` names a field that is not editable
        """
        allowed = set(EDITABLE_RECORD_FIELDS) | set(EDITABLE_ENTRY_FIELDS)
        unknown = sorted(set(changes) - allowed)
        if unknown:
            raise ValueError(f"Fields not editable: {', '.join(unknown)}")

        entry = self.get(user_id, entry_id)
        if entry is None:
            return None

        record = dict(entry["record"])
        for field in EDITABLE_RECORD_FIELDS:
            if field in changes:
                record[field] = changes[field]

        favorite = bool(changes.get("favorite", entry["favorite"]))
        notes = changes.get("notes", entry["notes"])
        now = datetime.now().isoformat()

        try:
            self.table.update_item(
                Key={"pk": _partition_key(user_id), "sk": _sort_key(entry_id)},
                UpdateExpression="SET #record = :record, favorite = :favorite, notes = :notes, updated_at = :now",
                ExpressionAttributeNames={"#record": "record"},
                ExpressionAttributeValues={
                    ":record": json.dumps(record),
                    ":favorite": favorite,
                    ":notes": notes,
                    ":now": now,
                },
            )
        except ClientError as e:
            logger.error(f"Error updating recommendation {entry_id}: {e}")
            return None

        entry.update({"record": record, "favorite": favorite, "notes": notes, "updatedAt": now})
        logger.info(f"Updated recommendation {entry_id} for user {user_id}")
        return entry

    def delete(self, user_id: str, entry_id: str) -> bool:
        try:
            response = self.table.delete_item(
                Key={"pk": _partition_key(user_id), "sk": _sort_key(entry_id)},
                ReturnValues="ALL_OLD",
            )
        except ClientError as e:
            logger.error(f"Error deleting recommendation {entry_id}: {e}")
            return False
        return bool(response.get("Attributes"))


def merge_ledger_state(
    records: Iterable[Union[RecommendationRecord, Dict[str, Any]]],
    entries: Iterable[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Annotate fresh recommendations with the user's saved state.

    Matching is by crop name (the newest entry wins). Returns new dicts with
    ``saved``, ``favorite`` and ``entryId`` keys; the inputs are untouched.
    """
    by_crop: Dict[str, Dict[str, Any]] = {}
    for entry in sorted(entries, key=lambda e: e.get("createdAt") or ""):
        by_crop[entry.get("crop")] = entry

    merged = []
    for record in records:
        data = record.to_dict() if isinstance(record, RecommendationRecord) else dict(record)
        entry = by_crop.get(data.get("crop"))
        data["saved"] = entry is not None
        data["favorite"] = bool(entry and entry.get("favorite"))
        data["entryId"] = entry.get("entryId") if entry else None
        merged.append(data)
    return merged
