"""BSON to SQL conversion CLI.

Converts MongoDB BSON exports into SQL import scripts for PostgreSQL, MySQL,
or SQLite, driven by a JSON schema mapping.
"""

import sys
from pathlib import Path
from typing import Optional

import structlog
import typer

from bson2sql.errors import SchemaLoadError
from bson2sql.models.enums import Dialect
from bson2sql.services.factory import create_conversion_service, create_example_schema, load_schema

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    logger_factory=lambda name: structlog.PrintLogger(file=sys.stderr),
    wrapper_class=structlog.BoundLogger,
    context_class=dict,
    cache_logger_on_first_use=True,
)

app = typer.Typer(
    name="bson2sql",
    help="""Convert MongoDB BSON exports to SQL import scripts.

Examples:

  # Convert a mongodump collection for MySQL (the default dialect)
  uv run bson2sql convert dump/app/users.bson schema.json

  # Target SQLite and write the script to a file
  uv run bson2sql convert users.bson schema.json sqlite -o users.sql

  # Print an example schema mapping
  uv run bson2sql example-schema""",
    rich_markup_mode="markdown",
    no_args_is_help=True,
)


@app.command()
def convert(
    bson_file: Path = typer.Argument(
        ...,
        help="BSON export file (e.g. from mongodump)",
    ),
    schema_file: Path = typer.Argument(
        ...,
        help="JSON schema mapping; see 'bson2sql example-schema'",
    ),
    dialect: Dialect = typer.Argument(
        Dialect.MYSQL,
        help="Target SQL dialect",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the SQL script to this file instead of standard output",
    ),
) -> None:
    """Convert a BSON file to a SQL import script."""
    logger = structlog.get_logger(__name__)

    try:
        schema = load_schema(schema_file)
    except SchemaLoadError as e:
        logger.error("schema_load_failed", schema_file=str(schema_file), error=str(e))
        raise typer.Exit(1)

    service = create_conversion_service(schema, dialect)

    try:
        result = service.convert_file(bson_file)
    except OSError as e:
        logger.error("bson_read_failed", bson_file=str(bson_file), error=str(e))
        raise typer.Exit(1)

    if result.truncated:
        logger.warning(
            "bson_stream_truncated",
            offset=result.decode_failure_offset,
            reason=result.decode_failure_reason,
            documents_processed=result.documents_processed,
        )

    logger.info("documents_processed", count=result.documents_processed, dialect=dialect.value)

    if output is not None:
        try:
            output.write_text(result.sql + "\n", encoding="utf-8")
        except OSError as e:
            logger.error("script_write_failed", output=str(output), error=str(e))
            raise typer.Exit(1)
        logger.info("script_written", output=str(output))
    else:
        typer.echo(result.sql)


@app.command("example-schema")
def example_schema() -> None:
    """Print an example schema mapping."""
    typer.echo(create_example_schema().model_dump_json(indent=2, exclude_none=True))


@app.command()
def version() -> None:
    """Show version information."""
    from bson2sql import __version__

    typer.echo(f"bson2sql {__version__}")
