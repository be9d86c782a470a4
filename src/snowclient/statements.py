"""SQL text builders for SnowflakeClient operations

Table names, column names and WHERE predicates are inserted verbatim. Values
are always passed as bindings.
"""

import re
from typing import Any, Iterable, Mapping

from snowclient.errors import ValidationError

Record = Mapping[str, Any]

_SELECT = re.compile(r"^\s*select\b", re.IGNORECASE)


def require_select(statement: str) -> str:
    """Return the statement if it is a SELECT, raise ValidationError otherwise

    SELECT must be a whole keyword (``selectivity`` is rejected). Leading
    whitespace before it is allowed.
    """
    if not statement or not _SELECT.match(statement):
        raise ValidationError("Expected a SELECT statement")
    return statement


def _require_where(where: str) -> str:
    if not where or not where.strip():
        raise ValidationError("A WHERE clause is required")
    return where


def derive_columns(records: Iterable[Record]) -> list[str]:
    """Distinct keys across all records, in first-seen order

    Example:
        >>> derive_columns([{"a": 1, "b": 2}, {"a": 3, "c": 4}])
        ['a', 'b', 'c']
    """
    columns: dict[str, None] = {}
    for record in records:
        for key in record:
            columns.setdefault(key, None)
    return list(columns)


def build_insert(table: str, records: Iterable[Record]) -> tuple[str, list[tuple[Any, ...]]]:
    """Build a single INSERT with one placeholder per derived column

    Every record becomes one row of bindings in column order, with None for
    columns the record does not carry. Falsy values that are present are kept.

    Raises:
        ValidationError: If there are no records or no columns to insert
    """
    records = list(records)
    if not records:
        raise ValidationError(f"No records to insert into {table}")

    columns = derive_columns(records)
    if not columns:
        raise ValidationError(f"Records for {table} contain no columns")

    placeholders = ",".join("?" for _ in columns)
    sql = f"INSERT INTO {table} ({','.join(columns)}) VALUES ({placeholders})"
    rows = [tuple(record.get(column) for column in columns) for record in records]
    return sql, rows


def build_update(table: str, updates: Record, where: str) -> tuple[str, tuple[Any, ...]]:
    """Build an UPDATE with numbered binds in the mapping's key order

    Example:
        >>> build_update("loans", {"x": 1, "y": 2}, "id=5")
        ('UPDATE loans SET x = :1,y = :2 WHERE id=5', (1, 2))
    """
    if not updates:
        raise ValidationError(f"No columns to update in {table}")
    _require_where(where)

    assignments = [f"{column} = :{i}" for i, column in enumerate(updates, start=1)]
    sql = f"UPDATE {table} SET {','.join(assignments)} WHERE {where}"
    return sql, tuple(updates.values())


def build_delete(table: str, where: str) -> str:
    """Build a DELETE restricted by a verbatim WHERE predicate"""
    _require_where(where)
    return f"DELETE FROM {table} WHERE {where}"
