"""Conversion service that runs the BSON-to-SQL pipeline.

Reads a BSON export, decodes every document, and hands them to the SQL
generator to produce a single import script.
"""

from datetime import datetime
from pathlib import Path

import structlog
from pydantic import BaseModel, Field

from bson2sql.models.enums import Dialect
from bson2sql.services.generator import SqlGenerator
from bson2sql.services.reader import DocumentStreamReader


class ConversionResult(BaseModel):
    """Generated script and statistics of a conversion run."""

    sql: str
    dialect: Dialect
    documents_processed: int = Field(ge=0)
    decode_failure_offset: int | None = Field(default=None, ge=0)
    decode_failure_reason: str | None = None

    model_config = {"frozen": True}

    @property
    def truncated(self) -> bool:
        return self.decode_failure_offset is not None


class ConversionService:
    """Orchestrates decoding and SQL generation.

    Dependencies are injected via the constructor for testability; see
    ``bson2sql.services.factory`` for the production wiring.
    """

    def __init__(
        self,
        reader: DocumentStreamReader,
        generator: SqlGenerator,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._reader = reader
        self._generator = generator
        self._logger = logger or structlog.get_logger(__name__)

    def convert_file(self, bson_path: Path, generated_at: datetime | None = None) -> ConversionResult:
        """Convert a BSON export file.

        Args:
            bson_path: Path to the ``.bson`` file.
            generated_at: Timestamp for the script header. Defaults to now.

        Returns:
            ConversionResult with the script and statistics.

        Raises:
            OSError: If the file cannot be read.
        """
        self._logger.info(
            "conversion_started",
            bson_path=str(bson_path),
            dialect=self._generator.dialect.value,
        )
        buffer = bson_path.read_bytes()
        return self.convert_bytes(buffer, generated_at=generated_at)

    def convert_bytes(self, buffer: bytes, generated_at: datetime | None = None) -> ConversionResult:
        """Convert an in-memory BSON stream.

        A decode failure truncates the stream; the script still covers every
        document decoded before it.
        """
        documents = self._reader.read_all(buffer)
        sql = self._generator.generate_script(documents, generated_at=generated_at)

        failure = self._reader.last_failure
        result = ConversionResult(
            sql=sql,
            dialect=self._generator.dialect,
            documents_processed=len(documents),
            decode_failure_offset=failure.offset if failure else None,
            decode_failure_reason=failure.reason if failure else None,
        )

        self._logger.info(
            "conversion_completed",
            documents_processed=result.documents_processed,
            truncated=result.truncated,
        )

        return result
