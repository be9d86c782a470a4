"""Unit tests for SQL statement builders."""

import pytest

from snowclient.errors import ValidationError
from snowclient.statements import (
    build_delete,
    build_insert,
    build_update,
    derive_columns,
    require_select,
)


class TestRequireSelect:
    """Tests for the SELECT keyword check."""

    @pytest.mark.parametrize("statement", [
        "SELECT * FROM loans",
        "select 1",
        "SeLeCt current_version()",
        "  \n select 1",
        "select\t1",
        "SELECT(1)",
    ])
    def test_accepts_select(self, statement):
        assert require_select(statement) == statement

    @pytest.mark.parametrize("statement", [
        "",
        None,
        "DELETE FROM loans",
        "insert into loans values (1)",
        "WITH x AS (SELECT 1) SELECT * FROM x",
        "-- comment\nSELECT 1",
        "selectivity",
        "SELECT_X FROM t",
        "selected_rows",
    ])
    def test_rejects_everything_else(self, statement):
        with pytest.raises(ValidationError, match="Expected a SELECT statement"):
            require_select(statement)


class TestDeriveColumns:
    """Tests for column derivation across a batch."""

    def test_first_seen_order(self):
        assert derive_columns([{"a": 1, "b": 2}, {"a": 3}]) == ["a", "b"]

    def test_union_of_keys(self):
        records = [{"b": 1}, {"a": 2, "c": 3}, {"c": 4, "b": 5}]
        assert derive_columns(records) == ["b", "a", "c"]

    def test_empty(self):
        assert derive_columns([]) == []


class TestBuildInsert:
    """Tests for INSERT construction."""

    def test_missing_column_binds_none(self):
        sql, rows = build_insert("loans", [{"a": 1, "b": 2}, {"a": 3}])

        assert sql == "INSERT INTO loans (a,b) VALUES (?,?)"
        assert rows == [(1, 2), (3, None)]

    def test_generator_records(self):
        """A one-shot iterable still produces a row per record."""
        records = ({"a": i} for i in range(3))

        sql, rows = build_insert("t", records)

        assert sql == "INSERT INTO t (a) VALUES (?)"
        assert rows == [(0,), (1,), (2,)]

    def test_empty_generator_rejected(self):
        with pytest.raises(ValidationError, match="No records"):
            build_insert("t", (r for r in []))

    def test_falsy_values_are_kept(self):
        _, rows = build_insert("t", [{"n": 0, "s": "", "f": False}])

        assert rows == [(0, "", False)]

    def test_qualified_table_passes_through(self):
        sql, _ = build_insert("DB.SCHEMA.LOANS", [{"ID": 1}])

        assert sql.startswith("INSERT INTO DB.SCHEMA.LOANS (ID)")

    def test_empty_records_rejected(self):
        with pytest.raises(ValidationError, match="No records"):
            build_insert("loans", [])

    def test_records_without_columns_rejected(self):
        with pytest.raises(ValidationError, match="no columns"):
            build_insert("loans", [{}, {}])


class TestBuildUpdate:
    """Tests for UPDATE construction."""

    def test_binds_in_key_order(self):
        sql, bindings = build_update("loans", {"x": 1, "y": 2}, "id=5")

        assert sql == "UPDATE loans SET x = :1,y = :2 WHERE id=5"
        assert bindings == (1, 2)

    def test_where_is_verbatim(self):
        where = "first_name = 'o''brien' AND id IN (1, 2)"
        sql, _ = build_update("loans", {"x": None}, where)

        assert sql.endswith(f"WHERE {where}")

    def test_empty_updates_rejected(self):
        with pytest.raises(ValidationError):
            build_update("loans", {}, "id=5")

    def test_empty_where_rejected(self):
        with pytest.raises(ValidationError, match="WHERE"):
            build_update("loans", {"x": 1}, "  ")


class TestBuildDelete:
    """Tests for DELETE construction."""

    def test_delete(self):
        assert build_delete("loans", "first_name='updated'") == (
            "DELETE FROM loans WHERE first_name='updated'"
        )

    def test_empty_where_rejected(self):
        with pytest.raises(ValidationError):
            build_delete("loans", "")
