"""
Unit tests for the table schema descriptor.
"""

import pytest

from dbdiff.errors import SchemaError, SchemaIncompatibleError
from dbdiff.schema import TableSchema


class TestTableSchemaConstruction:
    """Test building descriptors."""

    def test_build_sorts_primary_key(self):
        schema = TableSchema.build(["a", "b", "c"], [2, 0])

        assert schema.column_names == ("a", "b", "c")
        assert schema.primary_key_indices == (0, 2)

    def test_from_columns(self):
        schema = TableSchema.from_columns([("id", True), ("name", False), ("org", True)])

        assert schema.column_names == ("id", "name", "org")
        assert schema.primary_key_indices == (0, 2)
        assert schema.primary_key_names == ["id", "org"]

    def test_derived_indices(self):
        schema = TableSchema.build(["id", "name", "email", "org"], [3, 0])

        assert schema.field_count == 4
        assert schema.all_indices == (0, 1, 2, 3)
        assert schema.non_key_indices == (1, 2)
        assert schema.has_primary_key is True

    def test_keyless_table(self):
        schema = TableSchema.build(["a", "b"], [])

        assert schema.has_primary_key is False
        assert schema.non_key_indices == (0, 1)

    def test_duplicate_key_index_collapses(self):
        schema = TableSchema.build(["a", "b"], [1, 1])
        assert schema.primary_key_indices == (1,)

    def test_key_index_out_of_range_raises(self):
        with pytest.raises(SchemaError, match="out of range"):
            TableSchema.build(["a"], [1])

    def test_duplicate_column_raises(self):
        with pytest.raises(SchemaError, match="duplicate column"):
            TableSchema.build(["a", "a"], [0])

    def test_too_many_columns_raises(self, monkeypatch):
        monkeypatch.setattr("dbdiff.schema.descriptor.MAX_COLUMNS", 2)

        with pytest.raises(SchemaError, match="too many columns"):
            TableSchema.build(["a", "b", "c"], [0])

    def test_descriptor_is_immutable(self):
        schema = TableSchema.build(["a"], [0])
        with pytest.raises(AttributeError):
            schema.column_names = ("b",)


class TestCompatibility:
    """Test schema equality."""

    def test_equal_schemas_compatible(self):
        a = TableSchema.build(["id", "name"], [0])
        b = TableSchema.build(["id", "name"], [0])

        assert a.compatible(b)
        assert a == b

    def test_key_order_does_not_matter(self):
        a = TableSchema.build(["id", "org", "name"], [0, 1])
        b = TableSchema.build(["id", "org", "name"], [1, 0])

        assert a.compatible(b) and b.compatible(a)

    def test_column_order_matters(self):
        a = TableSchema.build(["id", "name", "email"], [0])
        b = TableSchema.build(["id", "email", "name"], [0])

        assert not a.compatible(b)
        assert not b.compatible(a)

    def test_different_key_not_compatible(self):
        a = TableSchema.build(["id", "name"], [0])
        b = TableSchema.build(["id", "name"], [0, 1])

        assert not a.compatible(b)

    def test_ensure_compatible_passes(self):
        a = TableSchema.build(["id"], [0])
        a.ensure_compatible(TableSchema.build(["id"], [0]))

    def test_ensure_compatible_reports_column_count(self):
        a = TableSchema.build(["id", "name"], [0])
        b = TableSchema.build(["id"], [0])

        with pytest.raises(SchemaIncompatibleError, match="column count 2 != 1") as exc_info:
            a.ensure_compatible(b)

        assert exc_info.value.source is a
        assert exc_info.value.target is b
        assert str(exc_info.value).startswith("table definitions differ")

    def test_ensure_compatible_reports_first_differing_column(self):
        a = TableSchema.build(["id", "name", "email"], [0])
        b = TableSchema.build(["id", "nick", "mail"], [0])

        with pytest.raises(SchemaIncompatibleError, match="column 1 is 'name' vs 'nick'"):
            a.ensure_compatible(b)

    def test_ensure_compatible_reports_key(self):
        a = TableSchema.build(["id", "name"], [0])
        b = TableSchema.build(["id", "name"], [1])

        with pytest.raises(SchemaIncompatibleError, match=r"primary key \(id\) vs \(name\)"):
            a.ensure_compatible(b)


class TestRowHelpers:
    """Test key extraction and change detection."""

    def setup_method(self):
        self.schema = TableSchema.build(["id", "org", "name"], [1, 0])

    def test_extract_key_in_index_order(self):
        assert self.schema.extract_key(("1", "acme", "x")) == ("1", "acme")

    def test_change_set_empty_for_equal_rows(self):
        assert self.schema.change_set(("1", "a", "x"), ("1", "a", "x")) == []

    def test_change_set_lists_differing_columns(self):
        assert self.schema.change_set(("1", "a", "x"), ("1", "b", "y")) == [1, 2]

    def test_null_differs_from_empty_string(self):
        assert self.schema.change_set(("1", "a", None), ("1", "a", "")) == [2]

    def test_null_equals_null(self):
        assert self.schema.change_set(("1", "a", None), ("1", "a", None)) == []

    def test_comparison_is_exact(self):
        assert self.schema.change_set(("1", "a", "X"), ("1", "a", "x")) == [2]
        assert self.schema.change_set(("1", "a", "x "), ("1", "a", "x")) == [2]

    def test_change_set_with_offset_compares_halves(self):
        joined = ("1", "a", "new", "1", "a", "old")
        assert self.schema.change_set(joined, joined, offset=3) == [2]

    def test_change_set_restricted_to_indices(self):
        joined = ("A", "b", "c", "a", "b", "x")
        assert self.schema.change_set(joined, joined, offset=3) == [0, 2]
        assert self.schema.change_set(
            joined, joined, offset=3, indices=self.schema.non_key_indices
        ) == [2]
