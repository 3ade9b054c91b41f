from __future__ import annotations

from club_points.database.bootstrap import DEFAULT_SCHEMA_PATH, _strip_create_db_and_use, iter_sql_statements
from club_points.database.connection import DBConfig


def test_iter_sql_statements_handles_quoted_semicolons():
    sql = "INSERT INTO t VALUES ('a;b', 'it''s');\nSELECT \"x;y\";\n\nSELECT 1"

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b', 'it''s')",
        'SELECT "x;y"',
        "SELECT 1",
    ]


def test_iter_sql_statements_drops_comments_outside_quotes():
    sql = "-- header; with a semicolon\nCREATE TABLE t (\n  a INT -- trailing\n);\nSELECT '--kept';"

    assert list(iter_sql_statements(sql)) == ["CREATE TABLE t (\n  a INT \n)", "SELECT '--kept'"]


def test_schema_file_defines_tables():
    sql = _strip_create_db_and_use(DEFAULT_SCHEMA_PATH.read_text(encoding="utf-8"))
    statements = [s.upper() for s in iter_sql_statements(sql)]

    assert len(statements) == 3
    for table in ("MEMBERS", "EVENTS", "PARTICIPANTS"):
        assert any(s.startswith(f"CREATE TABLE IF NOT EXISTS {table}") for s in statements), table


def test_db_config_from_dict_defaults():
    config = DBConfig.from_dict({"host": "db", "port": "3307", "user": "club"})

    assert (config.host, config.port, config.user, config.database) == ("db", 3307, "club", "club_points")
