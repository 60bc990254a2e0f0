from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Optional

from sqlalchemy import inspect
from sqlalchemy.engine import Connection, Engine, RootTransaction
from sqlalchemy.exc import SQLAlchemyError

from .dialects import Dialect, adapt, parse_dialect
from .errors import ExecutionError, ScriptIOError, TransactionError
from .sql_splitter import split

logger = logging.getLogger("muac.bootstrap")

# The baseline reference table; its presence means the script already ran.
SCHEMA_MARKER_TABLE = "roles"


@dataclass(frozen=True)
class ScriptDocument:
    text: str
    dialect: Dialect
    path: Optional[str] = None

    def adapted(self) -> str:
        return adapt(self.text, self.dialect)

    def statements(self) -> list[str]:
        return split(self.adapted())


def load_script(path: str | Path, dialect: Dialect | str) -> ScriptDocument:
    script_path = Path(path)
    try:
        raw = script_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ScriptIOError(str(script_path), str(exc)) from exc
    return ScriptDocument(text=raw, dialect=parse_dialect(dialect), path=str(script_path))


def schema_present(engine: Engine) -> bool:
    return inspect(engine).has_table(SCHEMA_MARKER_TABLE)


def _begin(connection: Connection) -> Optional[RootTransaction]:
    # pysqlite does not open a transaction before DDL on its own, so SQLite
    # runs on an autocommit connection with explicit BEGIN/COMMIT/ROLLBACK.
    if connection.dialect.name == "sqlite":
        connection.exec_driver_sql("BEGIN")
        return None
    return connection.begin()


def _finish(connection: Connection, transaction: Optional[RootTransaction], commit: bool) -> None:
    if transaction is None:
        # The driver may already have rolled back after the failing statement.
        if commit or connection.connection.dbapi_connection.in_transaction:
            connection.exec_driver_sql("COMMIT" if commit else "ROLLBACK")
    elif commit:
        transaction.commit()
    else:
        transaction.rollback()


def run_script(engine: Engine, document: ScriptDocument, reporter: logging.Logger = logger) -> int:
    """Execute every statement of ``document`` in one transaction.

    Returns the number of statements executed. On the first failing statement
    the whole transaction is rolled back and ``ExecutionError`` is raised.
    """

    statements = document.statements()
    try:
        connection = engine.connect()
    except SQLAlchemyError as exc:
        raise TransactionError(f"Could not open a connection for the schema script: {exc}") from exc

    with connection:
        if connection.dialect.name == "sqlite":
            connection.execution_options(isolation_level="AUTOCOMMIT")
        try:
            transaction = _begin(connection)
        except SQLAlchemyError as exc:
            raise TransactionError(f"Could not begin the schema transaction: {exc}") from exc

        for statement in statements:
            try:
                connection.exec_driver_sql(statement)
            except SQLAlchemyError as exc:
                cause = getattr(exc, "orig", None) or exc
                reporter.error(
                    "Schema statement failed, rolling back",
                    extra={"event": "schema_statement_failed", "reason": str(cause)},
                )
                try:
                    _finish(connection, transaction, commit=False)
                except SQLAlchemyError as rollback_exc:
                    raise TransactionError(
                        f"Rollback failed after statement error ({cause}): {rollback_exc}"
                    ) from rollback_exc
                raise ExecutionError(statement, cause) from exc

        try:
            _finish(connection, transaction, commit=True)
        except SQLAlchemyError as exc:
            raise TransactionError(f"Could not commit the schema transaction: {exc}") from exc

    return len(statements)


def ensure_schema(
    engine: Engine,
    script_path: str | Path,
    dialect: Dialect | str,
    reporter: logging.Logger = logger,
) -> bool:
    """Create the schema from ``script_path`` unless it is already there.

    Returns True when the script was executed, False when the schema marker
    table already existed.
    """

    if schema_present(engine):
        reporter.info(
            "Schema already initialized",
            extra={"event": "schema_present", "table": SCHEMA_MARKER_TABLE},
        )
        return False

    document = load_script(script_path, dialect)
    executed = run_script(engine, document, reporter=reporter)
    reporter.info(
        "Schema initialized from script",
        extra={
            "event": "schema_initialized",
            "path": document.path,
            "dialect": document.dialect.value,
            "statements": executed,
        },
    )
    return True
