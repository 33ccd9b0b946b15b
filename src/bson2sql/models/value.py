"""The value union produced by decoding a BSON document.

A decoded document is a plain ``dict`` as returned by ``bson.decode``. Its
values are drawn from a closed set of Python types; BSON scalars with no
dedicated SQL rendering (ObjectId, Binary, Regex, Code, ...) are treated as
text by the formatter.
"""

from datetime import datetime
from decimal import Decimal
from typing import TypeAlias, Union

from bson import Decimal128, ObjectId, Timestamp

Scalar: TypeAlias = Union[None, bool, int, float, Decimal, Decimal128, str, datetime, Timestamp, ObjectId, bytes]
Value: TypeAlias = Union[Scalar, list["Value"], dict[str, "Value"]]
Document: TypeAlias = dict[str, Value]

NUMBER_TYPES = (int, float, Decimal, Decimal128)
INSTANT_TYPES = (datetime, Timestamp)

__all__ = ["Document", "INSTANT_TYPES", "NUMBER_TYPES", "Scalar", "Value"]
