"""JSON-safe conversion of database rows."""

from datetime import UTC, date, datetime, time
from decimal import Decimal
from typing import Any
from uuid import UUID


def format_timestamp(value: datetime) -> str:
    """UTC ISO 8601 with millisecond precision, e.g. 2024-01-01T00:00:00.000Z.

    Naive datetimes are taken as UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_json_value(value: Any) -> Any:
    """Convert a single column value to something json.dumps accepts."""
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, dict):
        return {k: to_json_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_value(v) for v in value]
    return str(value)


def serialize_row(row: dict[str, Any] | None) -> dict[str, Any] | None:
    """Serialize a row mapping for a JSON body; None stays None."""
    if row is None:
        return None
    return {key: to_json_value(value) for key, value in row.items()}
