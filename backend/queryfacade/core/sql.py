"""Pure SQL statement assembly for the CRUD facade.

Nothing here talks to a driver. Values are rendered through the ``escape``
callable handed in by the caller, which is the only injection defence;
table and column names are trusted and only column names are backtick-quoted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from queryfacade.core.constants import DIALECT_MYSQL, DIALECT_SQLITE
from queryfacade.core.exceptions import InvalidArgument

Escape = Callable[[Any], str]
Pairs = list[tuple[str, Any]]
FieldMap = Union[Mapping[str, Any], Iterable[tuple[str, Any]]]

# ``$`` followed by an identifier; longest match so ``$id`` never eats ``$id2``.
_PARAM_TOKEN_RE: re.Pattern[str] = re.compile(r"\$([A-Za-z_][A-Za-z0-9_]*)")


@dataclass(frozen=True, slots=True)
class Dialect:
    """Statement forms that differ between database engines.

    Attributes:
        name: Dialect identifier (``mysql`` / ``sqlite``).
        insert_ignore: Keyword sequence starting an insert that drops
            duplicate-key conflicts.
        native_write_limit: Whether ``UPDATE``/``DELETE`` accept a trailing
            ``LIMIT``. When false the limit is applied through a ``rowid``
            sub-select.
    """

    name: str
    insert_ignore: str
    native_write_limit: bool


MYSQL = Dialect(name=DIALECT_MYSQL, insert_ignore="INSERT IGNORE INTO", native_write_limit=True)
SQLITE = Dialect(name=DIALECT_SQLITE, insert_ignore="INSERT OR IGNORE INTO", native_write_limit=False)

_DIALECTS: dict[str, Dialect] = {MYSQL.name: MYSQL, SQLITE.name: SQLITE}


def get_dialect(name: str) -> Dialect:
    try:
        return _DIALECTS[name.lower()]
    except KeyError:
        raise InvalidArgument(f"unsupported dialect: {name}") from None


# ---------------------------------------------------------------------------
# Fragments
# ---------------------------------------------------------------------------


def normalize_pairs(fields: Optional[FieldMap]) -> Pairs:
    """Return *fields* as an ordered list of ``(column, value)`` pairs."""
    if fields is None:
        return []
    if isinstance(fields, Mapping):
        return list(fields.items())
    return [(column, value) for column, value in fields]


def coerce_count(value: Any, name: str) -> int:
    """Integer form of a limit/offset argument; negatives clamp to 0."""
    try:
        number = int(value or 0)
    except (TypeError, ValueError):
        raise InvalidArgument(f"invalid {name}: {value!r}") from None
    return max(number, 0)


def quote_identifier(column: str) -> str:
    return f"`{column}`"


def _equalities(pairs: Pairs, escape: Escape) -> list[str]:
    return [f"{quote_identifier(column)} = {escape(value)}" for column, value in pairs]


def where_clause(conditions: Pairs, escape: Escape) -> str:
    """AND-joined equality predicate, ``1`` when there are no conditions."""
    return " AND ".join(_equalities(conditions, escape)) or "1"


def assignments(data: Pairs, escape: Escape) -> str:
    return ", ".join(_equalities(data, escape))


def limit_clause(limit: int, offset: Optional[int] = None) -> str:
    """``LIMIT n`` (or ``LIMIT offset, n``) when *limit* is positive, else ``""``."""
    if limit <= 0:
        return ""
    if offset is None:
        return f"LIMIT {limit}"
    return f"LIMIT {offset}, {limit}"


def _join(*parts: str) -> str:
    return " ".join(part for part in parts if part)


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


def build_select(table: str, conditions: Pairs, escape: Escape, limit: int = 0) -> str:
    return _join(
        f"SELECT * FROM {table} WHERE {where_clause(conditions, escape)}",
        limit_clause(limit),
    )


def build_insert(table: str, data: Pairs, escape: Escape, dialect: Dialect = MYSQL) -> str:
    columns = ", ".join(quote_identifier(column) for column, _ in data)
    values = ", ".join(escape(value) for _, value in data)
    return f"{dialect.insert_ignore} {table} ({columns}) VALUES ({values})"


def _limited_where(
    table: str, conditions: Pairs, escape: Escape, limit: int, dialect: Dialect
) -> str:
    predicate = where_clause(conditions, escape)
    if limit <= 0:
        return f"WHERE {predicate}"
    if dialect.native_write_limit:
        return f"WHERE {predicate} {limit_clause(limit)}"
    return (
        f"WHERE rowid IN (SELECT rowid FROM {table} "
        f"WHERE {predicate} {limit_clause(limit)})"
    )


def build_update(
    table: str,
    conditions: Pairs,
    data: Pairs,
    escape: Escape,
    limit: int = 0,
    dialect: Dialect = MYSQL,
) -> str:
    return (
        f"UPDATE {table} SET {assignments(data, escape)} "
        f"{_limited_where(table, conditions, escape, limit, dialect)}"
    )


def build_delete(
    table: str,
    conditions: Pairs,
    escape: Escape,
    limit: int = 0,
    dialect: Dialect = MYSQL,
) -> str:
    return f"DELETE FROM {table} {_limited_where(table, conditions, escape, limit, dialect)}"


def substitute_params(sql_template: str, params: Optional[FieldMap], escape: Escape) -> str:
    """Replace every ``$name`` token whose name is in *params* with its escaped value.

    Tokens without a matching param are left untouched. Substitution is a
    single pass, so escaped values are never scanned for further tokens.
    """
    values = dict(normalize_pairs(params))
    if not values:
        return sql_template

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in values:
            return match.group(0)
        return escape(values[name])

    return _PARAM_TOKEN_RE.sub(_replace, sql_template)
