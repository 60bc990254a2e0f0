import pytest

from muac.dialects import Dialect, adapt, parse_dialect
from muac.errors import UnsupportedDialectError


def test_adapt_sqlite_rewrites_uuid_primary_key():
    assert adapt('"id" UUID PRIMARY KEY', Dialect.SQLITE) == '"id" TEXT PRIMARY KEY'


@pytest.mark.parametrize("dialect", [Dialect.POSTGRES, Dialect.MYSQL])
def test_adapt_other_dialects_pass_column_through(dialect):
    assert adapt('"id" UUID PRIMARY KEY', dialect) == '"id" UUID PRIMARY KEY'


def test_adapt_sqlite_rewrites_defaults():
    script = (
        "CREATE TABLE p (id UUID PRIMARY KEY DEFAULT uuid_generate_v4(), "
        "consent_date DATE DEFAULT CURRENT_DATE);"
    )
    adapted = adapt(script, Dialect.SQLITE)
    assert "DEFAULT (lower(hex(randomblob(16))))" in adapted
    assert "DEFAULT (date('now'))" in adapted
    assert "UUID" not in adapted


def test_adapt_removes_administrative_lines():
    script = "CREATE DATABASE muac;\nuse muac;\n\\c muac\nCREATE TABLE roles (id UUID);"
    for dialect in Dialect:
        adapted = adapt(script, dialect)
        assert "CREATE DATABASE" not in adapted
        assert "use muac" not in adapted
        assert "\\c" not in adapted
        assert "CREATE TABLE roles" in adapted


def test_adapt_leaves_prose_mentioning_use_alone():
    script = "-- we use this table for roles\nCREATE TABLE roles (note TEXT DEFAULT 'use it');"
    assert adapt(script, Dialect.POSTGRES) == script


def test_adapt_drops_extension_outside_postgres():
    script = 'CREATE EXTENSION IF NOT EXISTS "uuid-ossp";\nCREATE TABLE t (id INT);'
    assert "CREATE EXTENSION" in adapt(script, Dialect.POSTGRES)
    assert "CREATE EXTENSION" not in adapt(script, Dialect.SQLITE)
    assert "CREATE EXTENSION" not in adapt(script, Dialect.MYSQL)


def test_parse_dialect_aliases():
    assert parse_dialect("PostgreSQL") is Dialect.POSTGRES
    assert parse_dialect("sqlite3") is Dialect.SQLITE
    assert parse_dialect("mariadb") is Dialect.MYSQL
    assert parse_dialect(Dialect.SQLITE) is Dialect.SQLITE


def test_parse_dialect_rejects_unknown():
    with pytest.raises(UnsupportedDialectError) as exc_info:
        parse_dialect("oracle")
    assert exc_info.value.name == "oracle"
