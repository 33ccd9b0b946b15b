from bson2sql.models.enums import Dialect
from bson2sql.models.schema import ParentLink, Schema, TableConfig
from bson2sql.models.value import Document, Value

__all__ = [
    "Dialect",
    "Document",
    "ParentLink",
    "Schema",
    "TableConfig",
    "Value",
]
