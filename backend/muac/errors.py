from __future__ import annotations


class BootstrapError(RuntimeError):
    """Base error for schema bootstrap and reference-data seeding."""


class ScriptIOError(BootstrapError):
    """Raised when the SQL declaration script cannot be read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot read SQL script {path}: {reason}")
        self.path = path
        self.reason = reason


class ExecutionError(BootstrapError):
    """Raised when a statement fails against the store; the transaction is already rolled back."""

    def __init__(self, statement: str, cause: BaseException) -> None:
        super().__init__(f"Statement failed: {statement!r}: {cause}")
        self.statement = statement
        self.cause = cause


class TransactionError(BootstrapError):
    """Raised when begin, commit or rollback itself fails."""


class UnsupportedDialectError(BootstrapError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unsupported database dialect: {name!r}")
        self.name = name


class SeedError(BootstrapError):
    """Raised when the fresh-seed transaction fails; nothing from the run is committed."""

    def __init__(self, stage: str, cause: BaseException) -> None:
        super().__init__(f"Seeding failed at stage '{stage}': {cause}")
        self.stage = stage
        self.cause = cause


class ValidationError(BootstrapError):
    """Raised when a required reference record is missing after seeding."""

    def __init__(self, entity: str) -> None:
        super().__init__(f"Required seed data missing: {entity}")
        self.entity = entity
