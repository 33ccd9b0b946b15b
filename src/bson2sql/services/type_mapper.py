"""Abstract column type to dialect DDL keyword mapping."""

from collections.abc import Mapping
from types import MappingProxyType

from bson2sql.models.enums import Dialect

FALLBACK_TYPE = "TEXT"

TYPE_MAPPINGS: Mapping[Dialect, Mapping[str, str]] = MappingProxyType(
    {
        Dialect.POSTGRESQL: MappingProxyType(
            {
                "id": "SERIAL",
                "string": "TEXT",
                "int": "INTEGER",
                "bigint": "BIGINT",
                "float": "DOUBLE PRECISION",
                "decimal": "DECIMAL",
                "boolean": "BOOLEAN",
                "date": "DATE",
                "datetime": "TIMESTAMP",
                "timestamp": "TIMESTAMP",
                "json": "JSONB",
                "text": "TEXT",
            }
        ),
        Dialect.MYSQL: MappingProxyType(
            {
                "id": "INT AUTO_INCREMENT",
                "string": "VARCHAR(255)",
                "int": "INT",
                "bigint": "BIGINT",
                "float": "DOUBLE",
                "decimal": "DECIMAL",
                "boolean": "BOOLEAN",
                "date": "DATE",
                "datetime": "DATETIME",
                "timestamp": "TIMESTAMP",
                "json": "JSON",
                "text": "TEXT",
            }
        ),
        Dialect.SQLITE: MappingProxyType(
            {
                "id": "INTEGER PRIMARY KEY AUTOINCREMENT",
                "string": "TEXT",
                "int": "INTEGER",
                "bigint": "INTEGER",
                "float": "REAL",
                "decimal": "REAL",
                "boolean": "INTEGER",
                "date": "TEXT",
                "datetime": "TEXT",
                "timestamp": "TEXT",
                "json": "TEXT",
                "text": "TEXT",
            }
        ),
    }
)


def map_type(dialect: Dialect, abstract_type: str) -> str:
    """Return the DDL type for an abstract column type.

    Unrecognised abstract types fall back to the dialect's text type.
    """
    return TYPE_MAPPINGS[Dialect(dialect)].get(abstract_type, FALLBACK_TYPE)
