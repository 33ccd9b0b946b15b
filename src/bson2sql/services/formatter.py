"""Value formatter rendering decoded BSON values as SQL literals.

Rendering differs per dialect only for booleans and instants: SQLite has no
boolean type, and SQLite (and Cloudflare D1) tables conventionally store
``*_at`` instants as integer epoch seconds.
"""

import json
import math
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from bson import Decimal128, ObjectId, Timestamp

from bson2sql.models.enums import Dialect
from bson2sql.models.value import INSTANT_TYPES, NUMBER_TYPES, Value

NULL = "NULL"
EPOCH_SECONDS_SUFFIX = "_at"

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_SECOND = timedelta(seconds=1)


class ValueFormatter:
    """Renders values as SQL literals for a single dialect.

    Dispatch order matters: ``bool`` is checked before numbers because it
    subclasses ``int``.
    """

    def __init__(self, dialect: Dialect) -> None:
        self._dialect = Dialect(dialect)

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    def format(self, value: Value, column_name: str = "") -> str:
        """Render a value as a SQL literal.

        Args:
            value: The value to render. None renders as NULL.
            column_name: Destination column; decides the SQLite rendering of
                instants.

        Returns:
            The SQL literal text.
        """
        if value is None:
            return NULL
        if isinstance(value, bool):
            return self._format_boolean(value)
        if isinstance(value, NUMBER_TYPES):
            return format_number(value)
        if isinstance(value, INSTANT_TYPES):
            return self._format_instant(value, column_name)
        if isinstance(value, (list, Mapping)):
            return quote_text(to_json_text(value))
        return quote_text(to_text(value))

    def _format_boolean(self, value: bool) -> str:
        if self._dialect is Dialect.SQLITE:
            return "1" if value else "0"
        return "TRUE" if value else "FALSE"

    def _format_instant(self, value: datetime | Timestamp, column_name: str) -> str:
        instant = to_utc_datetime(value)
        if self._dialect is Dialect.SQLITE and column_name.endswith(EPOCH_SECONDS_SUFFIX):
            return str(epoch_seconds(instant))
        return quote_text(to_iso_text(instant))


def quote_text(text: str) -> str:
    escaped = text.replace("'", "''")
    return f"'{escaped}'"


def format_number(value: int | float | Decimal | Decimal128) -> str:
    if isinstance(value, Decimal128):
        value = value.to_decimal()
    if isinstance(value, float):
        # SQL has no literal for NaN or infinity
        if not math.isfinite(value):
            return NULL
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            return NULL
        return str(value)
    return str(int(value))


def to_utc_datetime(value: datetime | Timestamp) -> datetime:
    """Normalize an instant to an aware UTC datetime; naive values are UTC."""
    if isinstance(value, Timestamp):
        return value.as_datetime()
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def epoch_seconds(instant: datetime) -> int:
    return (instant - _EPOCH) // _ONE_SECOND


def to_iso_text(instant: datetime) -> str:
    """ISO-8601 with millisecond precision and a ``Z`` suffix."""
    return instant.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_text(value: Value) -> str:
    if isinstance(value, bytes):
        return value.hex()
    return str(value)


def to_json_text(value: Value) -> str:
    """Serialize an array or subdocument as compact JSON.

    NaN and infinite numbers become ``null``, as JSON has no token for them.
    """
    return json.dumps(
        _replace_non_finite(value),
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
        default=_json_default,
    )


def _replace_non_finite(value: Value) -> Value:
    if isinstance(value, Mapping):
        return {key: _replace_non_finite(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_replace_non_finite(item) for item in value]
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, Decimal128) and not value.to_decimal().is_finite():
        return None
    if isinstance(value, Decimal) and not value.is_finite():
        return None
    return value


def _json_default(value: object) -> str:
    if isinstance(value, INSTANT_TYPES):
        return to_iso_text(to_utc_datetime(value))
    if isinstance(value, (ObjectId, Decimal128, Decimal)):
        return str(value)
    if isinstance(value, bytes):
        return value.hex()
    return str(value)
