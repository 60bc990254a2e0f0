"""Baseline reference data for the MUAC store.

An empty store (no roles) gets every baseline category in one transaction;
any failure leaves it empty again. A store that already has roles is only
reconciled: each remaining category runs in its own short transaction,
filling an empty category or patching rows that predate newer attributes.
Reconcile failures are logged and skipped so one broken category never
blocks the others.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import logging
import secrets
from typing import Any, Callable, Optional
import uuid

from sqlalchemy import Table, and_, delete, func, insert, or_, select, update
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from .config import settings
from .errors import SeedError, ValidationError
from .metrics import CLEANUP_FAILURES_TOTAL, RECONCILE_FAILURES_TOTAL, SEED_RUNS_TOTAL
from .models import FAQ, Locality, Measurement, Patient, Recommendation, Role, Tag, User, utcnow
from .reference_data import (
    NUMERIC_MUAC_CODES,
    RECOMMENDATION_CODE_PATCHES,
    REQUIRED_ROLES,
    ROLE_ADMIN,
    TAG_CODE_PATCHES,
    BandThresholds,
    baseline_faqs,
    baseline_recommendations,
    baseline_roles,
    baseline_tags,
    faq_category_by_question,
)
from .security import hash_password

logger = logging.getLogger("muac.seed")

MODE_FRESH = "fresh"
MODE_RECONCILE = "reconcile"

STAGE_ROLES = "roles"
STAGE_TAGS = "tags"
STAGE_RECOMMENDATIONS = "recommendations"
STAGE_ADMIN = "admin_account"
STAGE_FAQS = "faqs"

# Children before parents so foreign keys never block a delete.
CLEANUP_ORDER: tuple[Table, ...] = (
    Measurement.__table__,
    Patient.__table__,
    User.__table__,
    Locality.__table__,
    FAQ.__table__,
    Recommendation.__table__,
    Tag.__table__,
    Role.__table__,
)

ADMIN_NAME = "ADMINISTRADOR"
ADMIN_LASTNAME = "Sistema MUAC"
ADMIN_DNI = "00000000"
ADMIN_PHONE = "999000000"


@dataclass(frozen=True)
class SeedOptions:
    admin_username: str
    admin_email: str
    admin_password: str = ""
    thresholds: BandThresholds = field(default_factory=BandThresholds.from_settings)

    @classmethod
    def from_settings(cls) -> "SeedOptions":
        return cls(
            admin_username=settings.admin_username,
            admin_email=settings.admin_email,
            admin_password=settings.admin_password,
            thresholds=BandThresholds.from_settings(),
        )


@dataclass
class CategoryOutcome:
    category: str
    inserted: int = 0
    patched: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SeedReport:
    mode: str
    categories: list[CategoryOutcome] = field(default_factory=list)
    # Only set when the admin password was generated; shown once, never logged.
    generated_password: Optional[str] = None

    def outcome(self, category: str) -> Optional[CategoryOutcome]:
        for item in self.categories:
            if item.category == category:
                return item
        return None

    @property
    def failed_categories(self) -> list[str]:
        return [item.category for item in self.categories if not item.ok]

    def public_dict(self) -> dict[str, Any]:
        return {
            "mode": self.mode,
            "categories": [asdict(item) for item in self.categories],
            "password_generated": self.generated_password is not None,
        }


@dataclass(frozen=True)
class SeedingStatus:
    is_seeded: bool
    users: int
    roles: int
    tags: int
    recommendations: int
    faqs: int
    muac_ready: bool
    has_admin: bool


def _new_id() -> str:
    return str(uuid.uuid4())


def _with_ids(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    now = utcnow()
    return [{"id": _new_id(), "created_at": now, **row} for row in rows]


def _count(connection: Connection, table: Table) -> int:
    return int(connection.execute(select(func.count()).select_from(table)).scalar_one())


def _admin_exists(connection: Connection) -> bool:
    statement = (
        select(func.count())
        .select_from(User.__table__.join(Role.__table__, User.role_id == Role.id))
        .where(Role.name == ROLE_ADMIN)
    )
    return int(connection.execute(statement).scalar_one()) > 0


def _missing(column) -> Any:
    return or_(column.is_(None), column == "")


class SeedOrchestrator:
    def __init__(
        self,
        engine: Engine,
        options: Optional[SeedOptions] = None,
        reporter: logging.Logger = logger,
    ) -> None:
        self.engine = engine
        self.options = options or SeedOptions.from_settings()
        self.reporter = reporter

    def run(self) -> SeedReport:
        with self.engine.connect() as connection:
            role_count = _count(connection, Role.__table__)

        if role_count == 0:
            report = self._fresh_seed()
        else:
            self.reporter.info(
                "Roles present, reconciling reference data",
                extra={"event": "seed_reconcile_start", "mode": MODE_RECONCILE},
            )
            report = self._reconcile()

        outcome = "partial" if report.failed_categories else "ok"
        SEED_RUNS_TOTAL.labels(mode=report.mode, outcome=outcome).inc()
        self._log_summary(report)
        return report

    # Fresh seed

    def _fresh_seed(self) -> SeedReport:
        report = SeedReport(mode=MODE_FRESH)
        thresholds = self.options.thresholds
        stage = STAGE_ROLES
        try:
            with self.engine.begin() as connection:
                role_ids = self._insert_rows(connection, Role.__table__, baseline_roles(), report, STAGE_ROLES)

                stage = STAGE_TAGS
                self._insert_rows(connection, Tag.__table__, baseline_tags(thresholds), report, STAGE_TAGS)

                stage = STAGE_RECOMMENDATIONS
                self._insert_rows(
                    connection,
                    Recommendation.__table__,
                    baseline_recommendations(thresholds),
                    report,
                    STAGE_RECOMMENDATIONS,
                )

                stage = STAGE_ADMIN
                report.generated_password = self._insert_admin(connection, role_ids[ROLE_ADMIN], report)

                stage = STAGE_FAQS
                self._insert_rows(connection, FAQ.__table__, baseline_faqs(), report, STAGE_FAQS)
        except Exception as exc:
            SEED_RUNS_TOTAL.labels(mode=MODE_FRESH, outcome="failed").inc()
            self.reporter.error(
                "Fresh seed failed, transaction rolled back",
                extra={"event": "seed_failed", "stage": stage, "mode": MODE_FRESH, "reason": str(exc)},
            )
            raise SeedError(stage, exc) from exc

        return report

    def _insert_rows(
        self,
        connection: Connection,
        table: Table,
        rows: list[dict[str, Any]],
        report: SeedReport,
        category: str,
    ) -> dict[str, str]:
        prepared = _with_ids(rows)
        connection.execute(insert(table), prepared)
        report.categories.append(CategoryOutcome(category=category, inserted=len(prepared)))
        return {row["name"]: row["id"] for row in prepared if "name" in row}

    def _insert_admin(self, connection: Connection, admin_role_id: str, report: SeedReport) -> Optional[str]:
        generated = None
        password = self.options.admin_password
        if not password:
            generated = secrets.token_urlsafe(16)
            password = generated

        connection.execute(
            insert(User.__table__).values(
                id=_new_id(),
                name=ADMIN_NAME,
                lastname=ADMIN_LASTNAME,
                username=self.options.admin_username,
                email=self.options.admin_email,
                dni=ADMIN_DNI,
                phone=ADMIN_PHONE,
                password_hash=hash_password(password),
                active=True,
                role_id=admin_role_id,
                created_at=utcnow(),
            )
        )
        report.categories.append(CategoryOutcome(category=STAGE_ADMIN, inserted=1))
        return generated

    # Reconcile

    def _reconcile(self) -> SeedReport:
        report = SeedReport(mode=MODE_RECONCILE)
        thresholds = self.options.thresholds
        self._reconcile_category(
            report,
            STAGE_TAGS,
            Tag.__table__,
            lambda: baseline_tags(thresholds),
            self._patch_tags,
        )
        self._reconcile_category(
            report,
            STAGE_RECOMMENDATIONS,
            Recommendation.__table__,
            lambda: baseline_recommendations(thresholds),
            self._patch_recommendations,
        )
        self._reconcile_category(report, STAGE_FAQS, FAQ.__table__, baseline_faqs, self._patch_faqs)
        return report

    def _reconcile_category(
        self,
        report: SeedReport,
        category: str,
        table: Table,
        fresh_rows: Callable[[], list[dict[str, Any]]],
        patch: Callable[[Connection], int],
    ) -> None:
        outcome = CategoryOutcome(category=category)
        try:
            with self.engine.begin() as connection:
                if _count(connection, table) == 0:
                    rows = _with_ids(fresh_rows())
                    connection.execute(insert(table), rows)
                    outcome.inserted = len(rows)
                else:
                    outcome.patched = patch(connection)
        except SQLAlchemyError as exc:
            outcome = CategoryOutcome(category=category, error=str(exc))
            RECONCILE_FAILURES_TOTAL.labels(category=category).inc()
            self.reporter.warning(
                "Reference category could not be reconciled",
                extra={"event": "seed_reconcile_failed", "category": category, "reason": str(exc)},
            )
        report.categories.append(outcome)

    def _patch_by_name(self, connection: Connection, table: Table, patches: dict[str, dict[str, Any]]) -> int:
        patched = 0
        now = utcnow()
        for name, values in patches.items():
            result = connection.execute(
                update(table)
                .where(and_(table.c.name == name, _missing(table.c.muac_code)))
                .values(updated_at=now, **values)
            )
            patched += result.rowcount or 0

        activated = connection.execute(
            update(table).where(table.c.active.is_(None)).values(active=True, updated_at=now)
        )
        return patched + (activated.rowcount or 0)

    def _patch_tags(self, connection: Connection) -> int:
        return self._patch_by_name(connection, Tag.__table__, TAG_CODE_PATCHES)

    def _patch_recommendations(self, connection: Connection) -> int:
        return self._patch_by_name(connection, Recommendation.__table__, RECOMMENDATION_CODE_PATCHES)

    def _patch_faqs(self, connection: Connection) -> int:
        table = FAQ.__table__
        patched = 0
        now = utcnow()
        for question, category in faq_category_by_question().items():
            result = connection.execute(
                update(table)
                .where(and_(table.c.question == question, _missing(table.c.category)))
                .values(category=category, updated_at=now)
            )
            patched += result.rowcount or 0
        return patched

    def _log_summary(self, report: SeedReport) -> None:
        status = get_seeding_status(self.engine)
        self.reporter.info(
            "Reference data seeding finished",
            extra={
                "event": "seed_complete",
                "mode": report.mode,
                "counts": {
                    "users": status.users,
                    "roles": status.roles,
                    "tags": status.tags,
                    "recommendations": status.recommendations,
                    "faqs": status.faqs,
                    "muac_ready": status.muac_ready,
                    "failed": report.failed_categories,
                },
            },
        )


def seed_database(
    engine: Engine,
    options: Optional[SeedOptions] = None,
    reporter: logging.Logger = logger,
) -> SeedReport:
    return SeedOrchestrator(engine, options=options, reporter=reporter).run()


def get_seeding_status(engine: Engine) -> SeedingStatus:
    with engine.connect() as connection:
        roles = _count(connection, Role.__table__)
        tags = _count(connection, Tag.__table__)
        recommendations = _count(connection, Recommendation.__table__)
        return SeedingStatus(
            is_seeded=roles > 0,
            users=_count(connection, User.__table__),
            roles=roles,
            tags=tags,
            recommendations=recommendations,
            faqs=_count(connection, FAQ.__table__),
            muac_ready=tags >= 3 and recommendations >= 3,
            has_admin=_admin_exists(connection),
        )


def validate_seed_data(engine: Engine) -> None:
    """Raise ``ValidationError`` naming the first required record that is missing.

    Checked in order: the three roles, a tag per numeric MUAC code, a
    recommendation per numeric MUAC code, then an administrator account.
    """

    with engine.connect() as connection:
        for role_name in REQUIRED_ROLES:
            found = connection.execute(select(Role.id).where(Role.name == role_name)).first()
            if found is None:
                raise ValidationError(f"role {role_name}")

        for code in NUMERIC_MUAC_CODES:
            found = connection.execute(select(Tag.id).where(Tag.muac_code == code)).first()
            if found is None:
                raise ValidationError(f"tag {code}")

        for code in NUMERIC_MUAC_CODES:
            found = connection.execute(
                select(Recommendation.id).where(Recommendation.muac_code == code)
            ).first()
            if found is None:
                raise ValidationError(f"recommendation {code}")

        if not _admin_exists(connection):
            raise ValidationError("administrator account")


def clean_seed_data(engine: Engine, reporter: logging.Logger = logger) -> list[str]:
    """Delete every row of the seeded and dependent tables.

    Each table is cleared in its own transaction; a failing table is logged
    and skipped. Returns the names of the tables that could not be cleared.
    """

    failed: list[str] = []
    for table in CLEANUP_ORDER:
        try:
            with engine.begin() as connection:
                connection.execute(delete(table))
        except SQLAlchemyError as exc:
            failed.append(table.name)
            CLEANUP_FAILURES_TOTAL.labels(table=table.name).inc()
            reporter.warning(
                "Could not clear table",
                extra={"event": "seed_cleanup_failed", "table": table.name, "reason": str(exc)},
            )
            continue
        reporter.info("Table cleared", extra={"event": "seed_cleanup_table", "table": table.name})
    return failed
