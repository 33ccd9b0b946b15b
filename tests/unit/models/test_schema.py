import pytest
from pydantic import ValidationError

from bson2sql.models.paths import ExpansionPath
from bson2sql.models.schema import ParentLink, Schema, TableConfig


def _users_table() -> dict:
    return {
        "primary_key": "id",
        "columns": {"id": "id", "username": "string"},
        "not_null": ["username"],
        "field_mapping": {"id": "_id", "username": "username"},
    }


class TestSchemaParsing:
    """Tests for parsing schema mappings."""

    def test_parses_tables_in_declared_order(self) -> None:
        schema = Schema.model_validate_json(
            '{"tables": {"zeta": '
            '{"columns": {"a": "int"}, "field_mapping": {"a": "a"}}, '
            '"alpha": {"columns": {"b": "int"}, "field_mapping": {"b": "b"}}}}'
        )

        assert list(schema.tables) == ["zeta", "alpha"]

    def test_preserves_column_order(self) -> None:
        table = TableConfig.model_validate(
            {
                "columns": {"c": "int", "a": "int", "b": "int"},
                "field_mapping": {"b": "b", "c": "c"},
            }
        )

        assert list(table.columns) == ["c", "a", "b"]
        assert list(table.field_mapping) == ["b", "c"]

    def test_optional_fields_default(self) -> None:
        table = TableConfig.model_validate({"columns": {"a": "int"}, "field_mapping": {"a": "a"}})

        assert table.primary_key is None
        assert table.not_null == []
        assert table.parent_link is None

    def test_ignores_unknown_keys(self) -> None:
        table = TableConfig.model_validate({**_users_table(), "description": "application users"})

        assert table.primary_key == "id"

    def test_schema_is_frozen(self) -> None:
        schema = Schema.model_validate({"tables": {"users": _users_table()}})

        with pytest.raises(ValidationError):
            schema.tables = {}

    def test_requires_columns_and_field_mapping(self) -> None:
        with pytest.raises(ValidationError):
            TableConfig.model_validate({"columns": {"a": "int"}})
        with pytest.raises(ValidationError):
            TableConfig.model_validate({"field_mapping": {"a": "a"}})


class TestSchemaInvariants:
    """Tests for invariants enforced at load time."""

    def test_primary_key_must_be_declared_column(self) -> None:
        with pytest.raises(ValidationError, match="primary_key 'uid' is not a declared column"):
            TableConfig.model_validate({**_users_table(), "primary_key": "uid"})

    def test_rejects_multiple_expansion_paths(self) -> None:
        with pytest.raises(ValidationError, match="only one array-expansion path"):
            TableConfig.model_validate(
                {
                    "columns": {"page_text": "text", "tag": "string"},
                    "field_mapping": {"page_text": "pages[].text", "tag": "tags[]"},
                }
            )

    def test_rejects_malformed_expansion_path(self) -> None:
        with pytest.raises(ValidationError):
            TableConfig.model_validate(
                {"columns": {"href": "string"}, "field_mapping": {"href": "pages[].links[].href"}}
            )

    def test_rejects_empty_table_name(self) -> None:
        with pytest.raises(ValidationError):
            Schema.model_validate({"tables": {" ": _users_table()}})

    def test_rejects_empty_column_name(self) -> None:
        with pytest.raises(ValidationError):
            TableConfig.model_validate({"columns": {"": "int"}, "field_mapping": {"a": "a"}})

    def test_rejects_empty_source_path(self) -> None:
        with pytest.raises(ValidationError):
            TableConfig.model_validate({"columns": {"a": "int"}, "field_mapping": {"a": ""}})

    def test_parent_field_cannot_expand(self) -> None:
        with pytest.raises(ValidationError):
            ParentLink(column="url_id", parent_field="pages[].urlId")


class TestTableExpansion:
    """Tests for array-mode detection."""

    def test_plain_table_is_not_array_mode(self) -> None:
        table = TableConfig.model_validate(_users_table())

        assert not table.is_array_mode
        assert table.expansion is None

    def test_expansion_column_and_path(self) -> None:
        table = TableConfig.model_validate(
            {
                "columns": {"url_id": "string", "page_text": "text"},
                "field_mapping": {"url_id": "urlId", "page_text": "pages[].text"},
                "parent_link": {"column": "url_id", "parent_field": "urlId"},
            }
        )

        assert table.is_array_mode
        assert table.expansion == ("page_text", ExpansionPath(array_path="pages", element_path="text"))
        assert table.parent_link == ParentLink(column="url_id", parent_field="urlId")
