"""Schema-driven SQL generation.

Projects decoded documents onto the tables of a schema: one CREATE TABLE per
table, then per document and table either a single INSERT or, for tables with
an array-expansion path, one INSERT per array element.
"""

from datetime import datetime, timezone

import structlog

from bson2sql.models.enums import Dialect
from bson2sql.models.schema import Schema, TableConfig
from bson2sql.models.value import Document, Value
from bson2sql.services.formatter import ValueFormatter, to_iso_text, to_utc_datetime
from bson2sql.services.resolver import resolve_element, resolve_field
from bson2sql.services.type_mapper import map_type

PRIMARY_KEY = "PRIMARY KEY"
NOT_NULL = "NOT NULL"
COLUMN_INDENT = "    "

Row = dict[str, Value]


class SqlGenerator:
    """Generates DDL and DML for a schema in one SQL dialect.

    Generation is a pure function of the schema and the documents; no state
    is carried from one document to the next.
    """

    def __init__(
        self,
        schema: Schema,
        dialect: Dialect,
        formatter: ValueFormatter | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._schema = schema
        self._dialect = Dialect(dialect)
        self._formatter = formatter or ValueFormatter(self._dialect)
        self._logger = logger or structlog.get_logger(__name__)

        if self._formatter.dialect is not self._dialect:
            raise ValueError(
                f"formatter dialect '{self._formatter.dialect}' does not match generator dialect '{self._dialect}'"
            )

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    def generate_script(self, documents: list[Document], generated_at: datetime | None = None) -> str:
        """Build the complete import script.

        Args:
            documents: Decoded documents, in input order.
            generated_at: Timestamp written into the header. Defaults to now.

        Returns:
            The SQL script: header, CREATE TABLE statements, then all INSERTs
            inside a single transaction.
        """
        generated_at = generated_at or datetime.now(timezone.utc)

        lines = [
            "-- Generated SQL import script",
            "-- Source: MongoDB BSON export",
            f"-- Target: {self._dialect.value.upper()}",
            f"-- Generated: {to_iso_text(to_utc_datetime(generated_at))}",
            f"-- Documents processed: {len(documents)}",
            "",
            "-- Table creation",
        ]

        for statement in self.create_table_statements():
            lines.append(statement)
            lines.append("")

        lines.extend(["-- Data insertion", "BEGIN;", ""])

        insert_count = 0
        for document in documents:
            inserts = self.insert_statements(document)
            insert_count += len(inserts)
            lines.extend(inserts)

        lines.extend(["", "COMMIT;"])

        self._logger.info(
            "script_generated",
            dialect=self._dialect.value,
            table_count=len(self._schema.tables),
            document_count=len(documents),
            insert_count=insert_count,
        )

        return "\n".join(lines)

    def create_table_statements(self) -> list[str]:
        return [self.create_table_statement(name, table) for name, table in self._schema.tables.items()]

    def create_table_statement(self, table_name: str, table: TableConfig) -> str:
        """Render ``CREATE TABLE IF NOT EXISTS`` with columns in declared order.

        The primary key column gets ``PRIMARY KEY`` unless its mapped type
        already contains the clause, as SQLite's ``id`` type does; SQLite
        rejects the clause written twice.
        """
        column_lines = []
        for column_name, abstract_type in table.columns.items():
            column_type = map_type(self._dialect, abstract_type)
            definition = f"{COLUMN_INDENT}{column_name} {column_type}"
            if column_name == table.primary_key and PRIMARY_KEY not in column_type:
                definition += f" {PRIMARY_KEY}"
            if column_name in table.not_null:
                definition += f" {NOT_NULL}"
            column_lines.append(definition)

        return "\n".join(
            [
                f"CREATE TABLE IF NOT EXISTS {table_name} (",
                ",\n".join(column_lines),
                ");",
            ]
        )

    def insert_statements(self, document: Document) -> list[str]:
        """All INSERT statements for one document, in table declaration order."""
        statements: list[str] = []
        for table_name, table in self._schema.tables.items():
            statements.extend(self.table_insert_statements(table_name, table, document))
        return statements

    def table_insert_statements(self, table_name: str, table: TableConfig, document: Document) -> list[str]:
        if table.is_array_mode:
            rows = self._expanded_rows(table, document)
        else:
            rows = [self._single_row(table, document)]

        statements = []
        for row in rows:
            if not row:
                continue
            self._check_not_null(table_name, table, row)
            statements.append(self._insert_statement(table_name, row))
        return statements

    def _single_row(self, table: TableConfig, document: Document) -> Row:
        mappings = dict(table.field_mapping)
        if table.parent_link is not None:
            mappings.setdefault(table.parent_link.column, table.parent_link.parent_field)

        row: Row = {}
        for column, path in mappings.items():
            value = resolve_field(document, path)
            if value is not None:
                row[column] = value
        return row

    def _expanded_rows(self, table: TableConfig, document: Document) -> list[Row]:
        expansion = table.expansion
        if expansion is None:
            return []
        expanded_column, expansion_path = expansion

        elements = resolve_field(document, expansion_path.array_path)
        if not isinstance(elements, list) or not elements:
            return []

        parent_link = table.parent_link
        parent_value = resolve_field(document, parent_link.parent_field) if parent_link else None

        rows: list[Row] = []
        for element in elements:
            row: Row = {}
            for column, path in table.field_mapping.items():
                if column == expanded_column:
                    value = resolve_element(element, expansion_path.element_path)
                elif parent_link is not None and column == parent_link.column:
                    value = parent_value
                else:
                    value = resolve_field(document, path)
                if value is not None:
                    row[column] = value

            if parent_link is not None and parent_value is not None:
                row.setdefault(parent_link.column, parent_value)

            rows.append(row)
        return rows

    def _insert_statement(self, table_name: str, row: Row) -> str:
        columns = ", ".join(row)
        values = ", ".join(self._formatter.format(value, column) for column, value in row.items())
        return f"INSERT INTO {table_name} ({columns}) VALUES ({values});"

    def _check_not_null(self, table_name: str, table: TableConfig, row: Row) -> None:
        # absent values are omitted even from NOT NULL columns
        for column in table.not_null:
            if column in table.field_mapping and column not in row:
                self._logger.debug(
                    "not_null_column_omitted",
                    table=table_name,
                    column=column,
                )

