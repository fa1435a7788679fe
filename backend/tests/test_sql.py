"""Unit tests for the pure statement builders in ``queryfacade.core.sql``."""

from __future__ import annotations

import pytest

from queryfacade.core.exceptions import InvalidArgument
from queryfacade.core.sql import (
    MYSQL,
    SQLITE,
    build_delete,
    build_insert,
    build_select,
    build_update,
    coerce_count,
    get_dialect,
    limit_clause,
    normalize_pairs,
    substitute_params,
    where_clause,
)
from tests.conftest import mysql_escape


class TestNormalizePairs:
    def test_none_is_empty(self) -> None:
        assert normalize_pairs(None) == []

    def test_mapping_keeps_insertion_order(self) -> None:
        assert normalize_pairs({"b": 1, "a": 2}) == [("b", 1), ("a", 2)]

    def test_sequence_of_pairs(self) -> None:
        assert normalize_pairs([("x", 1), ("y", None)]) == [("x", 1), ("y", None)]


class TestCoerceCount:
    def test_zero_and_none(self) -> None:
        assert coerce_count(0, "limit") == 0
        assert coerce_count(None, "limit") == 0

    def test_numeric_string(self) -> None:
        assert coerce_count("5", "limit") == 5

    def test_negative_clamps(self) -> None:
        assert coerce_count(-3, "limit") == 0

    def test_garbage_rejected(self) -> None:
        with pytest.raises(InvalidArgument):
            coerce_count("ten", "limit")


class TestWhereClause:
    def test_empty_matches_everything(self) -> None:
        assert where_clause([], mysql_escape) == "1"

    def test_conjunction_in_order(self) -> None:
        clause = where_clause([("id", 5), ("name", "bob")], mysql_escape)
        assert clause == "`id` = 5 AND `name` = 'bob'"

    def test_quote_in_value_is_escaped(self) -> None:
        clause = where_clause([("name", "o'brien")], mysql_escape)
        assert clause == "`name` = 'o\\'brien'"


class TestLimitClause:
    def test_zero_omitted(self) -> None:
        assert limit_clause(0) == ""

    def test_plain(self) -> None:
        assert limit_clause(3) == "LIMIT 3"

    def test_with_offset(self) -> None:
        assert limit_clause(10, 20) == "LIMIT 20, 10"


class TestStatements:
    def test_select_all(self) -> None:
        assert build_select("users", [], mysql_escape) == "SELECT * FROM users WHERE 1"

    def test_select_with_limit(self) -> None:
        sql = build_select("users", [("id", 1)], mysql_escape, 1)
        assert sql == "SELECT * FROM users WHERE `id` = 1 LIMIT 1"

    def test_insert_mysql(self) -> None:
        sql = build_insert("users", [("name", "x"), ("age", 3)], mysql_escape)
        assert sql == "INSERT IGNORE INTO users (`name`, `age`) VALUES ('x', 3)"

    def test_insert_sqlite(self) -> None:
        sql = build_insert("users", [("name", "x")], mysql_escape, SQLITE)
        assert sql == "INSERT OR IGNORE INTO users (`name`) VALUES ('x')"

    def test_update_without_limit(self) -> None:
        sql = build_update("table", [("id", 5)], [("name", "x")], mysql_escape)
        assert sql == "UPDATE table SET `name` = 'x' WHERE `id` = 5"

    def test_update_with_limit(self) -> None:
        sql = build_update("t", [("id", 5)], [("a", 1), ("b", 2)], mysql_escape, 1)
        assert sql == "UPDATE t SET `a` = 1, `b` = 2 WHERE `id` = 5 LIMIT 1"

    def test_update_sqlite_limit_uses_rowid(self) -> None:
        sql = build_update("t", [("id", 5)], [("a", 1)], mysql_escape, 2, SQLITE)
        assert sql == (
            "UPDATE t SET `a` = 1 WHERE rowid IN "
            "(SELECT rowid FROM t WHERE `id` = 5 LIMIT 2)"
        )

    def test_delete_with_limit(self) -> None:
        assert build_delete("t", [("id", 7)], mysql_escape, 1) == "DELETE FROM t WHERE `id` = 7 LIMIT 1"

    def test_delete_without_limit(self) -> None:
        assert build_delete("t", [("id", 7)], mysql_escape) == "DELETE FROM t WHERE `id` = 7"

    def test_delete_sqlite_without_limit(self) -> None:
        assert build_delete("t", [("id", 7)], mysql_escape, 0, SQLITE) == "DELETE FROM t WHERE `id` = 7"


class TestSubstituteParams:
    def test_single_token(self) -> None:
        sql = substitute_params("select * from t where id = $id", {"id": 3}, mysql_escape)
        assert sql == "select * from t where id = 3"

    def test_prefix_names_do_not_collide(self) -> None:
        sql = substitute_params(
            "select * from t where id = $id and id2 = $id2",
            {"id": 1, "id2": 2},
            mysql_escape,
        )
        assert sql == "select * from t where id = 1 and id2 = 2"

    def test_every_occurrence_replaced(self) -> None:
        sql = substitute_params("$a + $a", {"a": 4}, mysql_escape)
        assert sql == "4 + 4"

    def test_unknown_token_left_verbatim(self) -> None:
        sql = substitute_params("where a = $a and b = $b", {"a": 1}, mysql_escape)
        assert sql == "where a = 1 and b = $b"

    def test_escaped_value_not_rescanned(self) -> None:
        sql = substitute_params("x = $a and y = $b", {"a": "$b", "b": 2}, mysql_escape)
        assert sql == "x = '$b' and y = 2"

    def test_no_params(self) -> None:
        assert substitute_params("select $x", None, mysql_escape) == "select $x"


class TestDialectLookup:
    def test_known(self) -> None:
        assert get_dialect("MySQL") is MYSQL
        assert get_dialect("sqlite") is SQLITE

    def test_unknown(self) -> None:
        with pytest.raises(InvalidArgument):
            get_dialect("oracle")
