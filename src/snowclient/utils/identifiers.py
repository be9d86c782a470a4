"""Utilities for validating and quoting Snowflake identifiers

SnowflakeClient interpolates table and column names verbatim. Callers passing
names that come from outside their own code should quote them first.
"""

import re

_UNQUOTED = re.compile(r'^[A-Za-z_][A-Za-z0-9_$]*$')


def is_valid_identifier(name: str) -> bool:
    """Check if a string is a valid Snowflake unquoted identifier"""
    if not name:
        return False
    return bool(_UNQUOTED.match(name))


def quote_identifier(name: str) -> str:
    """Wrap a single identifier in double quotes, escaping embedded quotes

    Quoted identifiers are case-sensitive in Snowflake.

    Example:
        >>> quote_identifier('order')
        '"order"'
        >>> quote_identifier('Loan Id')
        '"Loan Id"'
    """
    if not name:
        raise ValueError("Identifier cannot be empty")
    return '"' + name.replace('"', '""') + '"'


def quote_name(*parts: str) -> str:
    """Quote each part of a qualified name and join them with dots

    Example:
        >>> quote_name("ANALYTICS", "PUBLIC", "loans")
        '"ANALYTICS"."PUBLIC"."loans"'
    """
    if not parts:
        raise ValueError("At least one name part is required")
    return ".".join(quote_identifier(part) for part in parts)
