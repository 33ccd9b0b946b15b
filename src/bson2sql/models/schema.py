from typing import Any

from pydantic import Field, ValidationInfo, field_validator, model_validator

from bson2sql.models.base import FrozenModel, ensure_non_empty_keys, ensure_non_empty_text
from bson2sql.models.paths import ExpansionPath, is_expansion_path, split_expansion_path


class ParentLink(FrozenModel):
    """Copies a top-level document field into every row of an expanded table."""

    column: str
    parent_field: str

    @field_validator("column", "parent_field")
    @classmethod
    def _ensure_non_empty(cls, value: str, info: ValidationInfo) -> str:
        return ensure_non_empty_text(value, info.field_name or "value")

    @field_validator("parent_field")
    @classmethod
    def _reject_expansion(cls, value: str) -> str:
        if is_expansion_path(value):
            raise ValueError("parent_field must address the top-level document, not an array element")
        return value


class TableConfig(FrozenModel):
    primary_key: str | None = None
    columns: dict[str, str]
    not_null: list[str] = Field(default_factory=list)
    field_mapping: dict[str, str]
    parent_link: ParentLink | None = None

    @field_validator("columns", "field_mapping", mode="before")
    @classmethod
    def _ensure_named_columns(cls, value: Any, info: ValidationInfo) -> Any:
        return ensure_non_empty_keys(value, info.field_name or "column")

    @field_validator("field_mapping")
    @classmethod
    def _validate_paths(cls, value: dict[str, str]) -> dict[str, str]:
        expansion_columns = []
        for column, path in value.items():
            ensure_non_empty_text(path, f"field_mapping['{column}']")
            if split_expansion_path(path) is not None:
                expansion_columns.append(column)
        if len(expansion_columns) > 1:
            raise ValueError(
                f"only one array-expansion path is supported per table, found {len(expansion_columns)}: "
                + ", ".join(expansion_columns)
            )
        return value

    @model_validator(mode="after")
    def _validate_primary_key(self) -> "TableConfig":
        if self.primary_key is not None and self.primary_key not in self.columns:
            raise ValueError(f"primary_key '{self.primary_key}' is not a declared column")
        return self

    @property
    def is_array_mode(self) -> bool:
        return any(is_expansion_path(path) for path in self.field_mapping.values())

    @property
    def expansion(self) -> tuple[str, ExpansionPath] | None:
        """The expanded column and its split path, if the table is in array mode."""
        for column, path in self.field_mapping.items():
            expansion_path = split_expansion_path(path)
            if expansion_path is not None:
                return column, expansion_path
        return None


class Schema(FrozenModel):
    tables: dict[str, TableConfig]

    @field_validator("tables", mode="before")
    @classmethod
    def _ensure_named_tables(cls, value: Any) -> Any:
        return ensure_non_empty_keys(value, "table name")


__all__ = ["ParentLink", "Schema", "TableConfig"]
