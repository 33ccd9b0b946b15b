"""Factory functions for loading schemas and wiring the conversion service."""

from pathlib import Path

import structlog
from pydantic import ValidationError

from bson2sql.errors import SchemaLoadError
from bson2sql.models.enums import Dialect
from bson2sql.models.schema import Schema
from bson2sql.services.conversion import ConversionService
from bson2sql.services.formatter import ValueFormatter
from bson2sql.services.generator import SqlGenerator
from bson2sql.services.reader import DocumentStreamReader


def load_schema(schema_path: Path) -> Schema:
    """Load and validate a schema mapping from a JSON file.

    Args:
        schema_path: Path to a UTF-8 JSON schema file.

    Returns:
        The validated Schema.

    Raises:
        SchemaLoadError: If the file cannot be read, is not JSON, or does not
            match the schema shape.
    """
    try:
        content = schema_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SchemaLoadError(f"cannot read schema file {schema_path}: {e}") from e

    try:
        return Schema.model_validate_json(content)
    except ValidationError as e:
        raise SchemaLoadError(f"invalid schema file {schema_path}: {e}") from e


def create_conversion_service(schema: Schema, dialect: Dialect = Dialect.MYSQL) -> ConversionService:
    """Create a ConversionService for a schema and target dialect.

    Args:
        schema: Validated schema mapping.
        dialect: Target SQL dialect.

    Returns:
        Configured ConversionService ready for use.
    """
    logger = structlog.get_logger(__name__)

    reader = DocumentStreamReader(logger=logger)
    generator = SqlGenerator(
        schema=schema,
        dialect=dialect,
        formatter=ValueFormatter(dialect),
        logger=logger,
    )

    return ConversionService(reader=reader, generator=generator, logger=logger)


def create_example_schema() -> Schema:
    """The schema printed by ``bson2sql example-schema``."""
    return Schema.model_validate(
        {
            "tables": {
                "users": {
                    "primary_key": "id",
                    "columns": {
                        "id": "id",
                        "username": "string",
                        "email": "string",
                        "created_at": "datetime",
                        "is_active": "boolean",
                        "profile_data": "json",
                    },
                    "not_null": ["username", "email"],
                    "field_mapping": {
                        "id": "_id",
                        "username": "username",
                        "email": "email",
                        "created_at": "createdAt",
                        "is_active": "active",
                        "profile_data": "profile",
                    },
                },
            },
        }
    )
