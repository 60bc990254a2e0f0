from __future__ import annotations

from enum import Enum
import re

from sqlalchemy import Engine

from .errors import UnsupportedDialectError


class Dialect(str, Enum):
    SQLITE = "sqlite"
    POSTGRES = "postgres"
    MYSQL = "mysql"


_ALIASES = {
    "sqlite": Dialect.SQLITE,
    "sqlite3": Dialect.SQLITE,
    "postgres": Dialect.POSTGRES,
    "postgresql": Dialect.POSTGRES,
    "mysql": Dialect.MYSQL,
    "mariadb": Dialect.MYSQL,
}

# Lines that only make sense when the script is fed to a database client.
_ADMIN_LINE_RE = re.compile(r"^\s*(CREATE\s+DATABASE\b|USE\s+\S|\\c\b|\\connect\b)", re.IGNORECASE)
_EXTENSION_LINE_RE = re.compile(r"^\s*CREATE\s+EXTENSION\b", re.IGNORECASE)
_CURRENT_DATE_RE = re.compile(r"\bCURRENT_DATE\b")
# Column type only; leaves a UUID() call alone.
_UUID_TYPE_RE = re.compile(r"\bUUID\b(?!\s*\()")


def parse_dialect(name: str | Dialect) -> Dialect:
    if isinstance(name, Dialect):
        return name
    key = (name or "").strip().lower()
    try:
        return _ALIASES[key]
    except KeyError as exc:
        raise UnsupportedDialectError(name) from exc


def dialect_for_engine(engine: Engine) -> Dialect:
    return parse_dialect(engine.dialect.name)


def _remove_lines(script: str, pattern: re.Pattern[str]) -> str:
    return "\n".join(line for line in script.split("\n") if not pattern.search(line))


def adapt(script: str, dialect: Dialect) -> str:
    """Rewrite the portable script for ``dialect``.

    The portable form is what PostgreSQL runs as-is, so only client-side
    administrative lines are dropped for it. MariaDB (10.7+, native UUID)
    also loses ``CREATE EXTENSION``. SQLite additionally gets its column
    types and date/uuid functions rewritten. Anything the rules do not match
    passes through.
    """

    script = _remove_lines(script, _ADMIN_LINE_RE)
    if dialect is Dialect.POSTGRES:
        return script

    script = _remove_lines(script, _EXTENSION_LINE_RE)
    if dialect is not Dialect.SQLITE:
        return script

    # SQLite only accepts function calls in DEFAULT clauses when parenthesised.
    script = _UUID_TYPE_RE.sub("TEXT", script)
    script = script.replace("uuid_generate_v4()", "(lower(hex(randomblob(16))))")
    return _CURRENT_DATE_RE.sub("(date('now'))", script)
