"""Firestore REST typed-value encoding.

Firestore's REST API wraps every value in a single-key object naming its
type, e.g. ``{"stringValue": "Drill"}`` or ``{"integerValue": "3"}``.
Integers travel as strings. Record timestamps are written as timestamp values
and decode to their RFC 3339 text, which pydantic parses back into datetimes.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from .storage import Document

# Record fields stored as Firestore timestamps
TIMESTAMP_FIELDS = ("createdAt", "updatedAt")


def encode_value(value: Any) -> Dict[str, Any]:
    """Wrap a JSON-compatible Python value as a Firestore value."""
    if value is None:
        return {"nullValue": None}
    if isinstance(value, bool):
        return {"booleanValue": value}
    if isinstance(value, int):
        return {"integerValue": str(value)}
    if isinstance(value, float):
        return {"doubleValue": value}
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return {"timestampValue": value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")}
    if isinstance(value, str):
        return {"stringValue": value}
    if isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(v) for v in value]}}
    if isinstance(value, dict):
        return {"mapValue": {"fields": {str(k): encode_value(v) for k, v in value.items()}}}
    raise TypeError(f"Cannot encode {type(value).__name__} as a Firestore value")


def decode_value(value: Dict[str, Any]) -> Any:
    """Unwrap a Firestore value to plain Python."""
    if "nullValue" in value:
        return None
    if "booleanValue" in value:
        return bool(value["booleanValue"])
    if "integerValue" in value:
        return int(value["integerValue"])
    if "doubleValue" in value:
        return float(value["doubleValue"])
    if "timestampValue" in value:
        return value["timestampValue"]
    if "stringValue" in value:
        return value["stringValue"]
    if "referenceValue" in value:
        return value["referenceValue"]
    if "arrayValue" in value:
        return [decode_value(v) for v in value["arrayValue"].get("values", [])]
    if "mapValue" in value:
        return decode_fields(value["mapValue"].get("fields", {}))
    # bytesValue, geoPointValue: not used by component records
    return None


def decode_fields(fields: Dict[str, Any]) -> Document:
    return {name: decode_value(v) for name, v in fields.items()}


def _as_timestamp(value: Any) -> Any:
    """Turn RFC 3339 text into a datetime; anything else passes through."""
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value


def encode_document(document: Document) -> Dict[str, Any]:
    """Build a Firestore document body, leaving out the id.

    ``createdAt`` and ``updatedAt`` are written as timestamps, the way the
    web app writes them.
    """
    fields = {}
    for name, value in document.items():
        if name == "id":
            continue
        if name in TIMESTAMP_FIELDS:
            value = _as_timestamp(value)
        fields[name] = encode_value(value)
    return {"fields": fields}


def decode_document(document: Dict[str, Any]) -> Document:
    """Flatten a Firestore document; its id is the last segment of ``name``."""
    data = decode_fields(document.get("fields", {}))
    name = document.get("name", "")
    if name:
        data["id"] = name.rsplit("/", 1)[-1]
    return data
