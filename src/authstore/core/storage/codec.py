"""Serialization of adapter records to and from backend values.

Records are stored as JSON text. Datetime values are written in a tagged,
self-describing form (``{"$date": "<ISO-8601>"}``) and plain dates as
``{"$day": "<YYYY-MM-DD>"}``, so both come back with their type without
guessing. Records written by deployments that stored plain
ISO strings can still be read in ``heuristic`` mode, which turns any
top-level string that looks like an ISO-8601 timestamp into a datetime.
"""

from __future__ import annotations

import json
import re
from collections.abc import Collection, Mapping
from datetime import date, datetime
from typing import Any, Literal

from authstore.core.errors import RecordDecodeError

DateDecoding = Literal["tagged", "heuristic"]

DATE_TAG = "$date"
DAY_TAG = "$day"

ISO_DATE_RE = re.compile(
    r"(\d{4}-[01]\d-[0-3]\dT[0-2]\d:[0-5]\d:[0-5]\d\.\d+([+-][0-2]\d:[0-5]\d|Z))"
    r"|(\d{4}-[01]\d-[0-3]\dT[0-2]\d:[0-5]\d:[0-5]\d([+-][0-2]\d:[0-5]\d|Z))"
    r"|(\d{4}-[01]\d-[0-3]\dT[0-2]\d:[0-5]\d([+-][0-2]\d:[0-5]\d|Z))"
)


def _default(value: Any) -> Any:
    if isinstance(value, datetime):
        return {DATE_TAG: value.isoformat()}
    if isinstance(value, date):
        return {DAY_TAG: value.isoformat()}
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _object_hook(obj: dict[str, Any]) -> Any:
    if len(obj) != 1:
        return obj
    for tag, parse in ((DATE_TAG, datetime.fromisoformat), (DAY_TAG, date.fromisoformat)):
        if isinstance(obj.get(tag), str):
            try:
                return parse(obj[tag])
            except ValueError as e:
                raise RecordDecodeError(f"Invalid tagged date: {obj[tag]!r}") from e
    return obj


def parse_iso_datetime(value: Any) -> datetime | None:
    """Return a datetime if ``value`` is an ISO-8601 timestamp string."""
    if not isinstance(value, str) or not ISO_DATE_RE.search(value):
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None


def hydrate_dates(
    record: Mapping[str, Any], keep: Collection[str] = ()
) -> dict[str, Any]:
    """Turn top-level ISO-8601 looking strings into datetimes.

    Keys named in ``keep`` are left as they are. Any other string that happens
    to match is converted, whatever the field means.
    """
    hydrated = {}
    for key, value in record.items():
        parsed = None if key in keep else parse_iso_datetime(value)
        hydrated[key] = parsed if parsed is not None else value
    return hydrated


def encode_record(record: Mapping[str, Any]) -> str:
    """Serialize a record to JSON text."""
    return json.dumps(dict(record), default=_default, separators=(",", ":"))


def decode_record(
    value: str | bytes, mode: DateDecoding = "tagged", keep: Collection[str] = ()
) -> dict[str, Any]:
    """Deserialize JSON text produced by :func:`encode_record`.

    In ``heuristic`` mode, keys in ``keep`` are never turned into datetimes.

    Raises:
        RecordDecodeError: If the value is not a JSON object.
    """
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="replace")

    try:
        loaded = json.loads(value, object_hook=_object_hook)
    except json.JSONDecodeError as e:
        raise RecordDecodeError(f"Stored value is not valid JSON: {e}") from e

    if not isinstance(loaded, dict):
        raise RecordDecodeError(
            f"Stored value is a JSON {type(loaded).__name__}, expected an object"
        )

    if mode == "heuristic":
        return hydrate_dates(loaded, keep)
    return loaded
