from pathlib import Path

import pytest
from sqlalchemy import select, text
from sqlalchemy.exc import OperationalError

from muac.config import settings
from muac.db import get_db, get_engine, init_db, reset_database_engine
from muac.errors import SeedError, ValidationError
from muac.models import FAQ, Recommendation, Role, Tag, User
from muac.reference_data import BandThresholds, baseline_faqs, baseline_recommendations
from muac.security import verify_password
from muac.seeding import (
    CLEANUP_ORDER,
    MODE_FRESH,
    MODE_RECONCILE,
    SeedOptions,
    SeedOrchestrator,
    clean_seed_data,
    get_seeding_status,
    seed_database,
    validate_seed_data,
)

THRESHOLDS = BandThresholds(severe=11.5, moderate=12.4, normal=12.5)
OPTIONS = SeedOptions(
    admin_username="admin",
    admin_email="admin@muac.org",
    admin_password="seed-test-password",
    thresholds=THRESHOLDS,
)


@pytest.fixture(autouse=True)
def isolated_db(tmp_path: Path):
    original_db_url = settings.database_url
    test_db = tmp_path / "muac-seed-test.db"
    test_url = f"sqlite:///{test_db}"

    object.__setattr__(settings, "database_url", test_url)
    reset_database_engine(test_url)
    init_db()

    try:
        yield
    finally:
        object.__setattr__(settings, "database_url", original_db_url)
        reset_database_engine(original_db_url)


def _count(table_name: str) -> int:
    with get_db() as session:
        return int(session.execute(text(f"SELECT COUNT(*) FROM {table_name}")).scalar_one())


def test_status_on_empty_store():
    status = get_seeding_status(get_engine())

    assert status.is_seeded is False
    assert status.muac_ready is False
    assert status.has_admin is False
    assert status.roles == 0
    assert status.users == 0


def test_fresh_seed_creates_baseline_and_validates():
    report = seed_database(get_engine(), OPTIONS)

    assert report.mode == MODE_FRESH
    assert report.generated_password is None
    assert report.failed_categories == []
    assert [item.category for item in report.categories] == [
        "roles",
        "tags",
        "recommendations",
        "admin_account",
        "faqs",
    ]

    status = get_seeding_status(get_engine())
    assert status.roles == 3
    assert status.tags == 4
    assert status.recommendations == 4
    assert status.users == 1
    assert status.faqs == len(baseline_faqs())
    assert status.is_seeded is True
    assert status.muac_ready is True
    assert status.has_admin is True

    validate_seed_data(get_engine())


def test_admin_account_is_hashed_and_linked_to_admin_role():
    seed_database(get_engine(), OPTIONS)

    with get_db() as session:
        row = session.execute(
            select(User.username, User.email, User.password_hash, Role.name).join(Role, User.role_id == Role.id)
        ).one()

    assert row.username == "admin"
    assert row.email == "admin@muac.org"
    assert row.name == "ADMINISTRADOR"
    assert row.password_hash != "seed-test-password"
    assert verify_password("seed-test-password", row.password_hash)


def test_missing_admin_password_is_generated_once():
    options = SeedOptions(admin_username="root", admin_email="root@muac.org", thresholds=THRESHOLDS)
    report = seed_database(get_engine(), options)

    assert report.generated_password
    assert report.public_dict()["password_generated"] is True
    assert "generated_password" not in report.public_dict()

    with get_db() as session:
        password_hash = session.execute(select(User.password_hash)).scalar_one()
    assert verify_password(report.generated_password, password_hash)

    second = seed_database(get_engine(), options)
    assert second.generated_password is None


def test_second_run_reconciles_without_duplicates():
    seed_database(get_engine(), OPTIONS)
    before = {table: _count(table) for table in ("roles", "tags", "recommendations", "faqs", "users")}

    report = seed_database(get_engine(), OPTIONS)

    assert report.mode == MODE_RECONCILE
    assert report.failed_categories == []
    after = {table: _count(table) for table in ("roles", "tags", "recommendations", "faqs", "users")}
    assert after == before


def test_recommendation_failure_rolls_back_fresh_seed(monkeypatch):
    def broken_recommendations(thresholds):
        rows = baseline_recommendations(thresholds)
        rows[1]["name"] = None
        return rows

    monkeypatch.setattr("muac.seeding.baseline_recommendations", broken_recommendations)

    with pytest.raises(SeedError) as exc_info:
        seed_database(get_engine(), OPTIONS)

    assert exc_info.value.stage == "recommendations"
    assert exc_info.value.__cause__ is not None
    assert _count("roles") == 0
    assert _count("tags") == 0
    assert _count("recommendations") == 0
    assert _count("users") == 0


def test_reconcile_patches_cleared_codes_and_activates_rows():
    seed_database(get_engine(), OPTIONS)
    with get_db() as session:
        session.execute(text("UPDATE tags SET muac_code = NULL, color = NULL WHERE name = 'MUAC-R1'"))
        session.execute(text("UPDATE recommendations SET active = NULL"))

    report = seed_database(get_engine(), OPTIONS)

    assert report.outcome("tags").patched == 1
    assert report.outcome("recommendations").patched == 4
    with get_db() as session:
        tag = session.execute(select(Tag).where(Tag.name == "MUAC-R1")).scalar_one()
        inactive = session.execute(
            select(Recommendation).where(Recommendation.active.is_(None))
        ).scalars().all()
    assert tag.muac_code == "MUAC-R1"
    assert tag.color == "#dc3545"
    assert inactive == []


def test_reconcile_patches_faq_category_by_question():
    seed_database(get_engine(), OPTIONS)
    question = baseline_faqs()[0]["question"]
    with get_db() as session:
        session.execute(text("UPDATE faqs SET category = '' WHERE question = :question"), {"question": question})

    report = seed_database(get_engine(), OPTIONS)

    assert report.outcome("faqs").patched == 1
    with get_db() as session:
        category = session.execute(select(FAQ.category).where(FAQ.question == question)).scalar_one()
    assert category == baseline_faqs()[0]["category"]


def test_reconcile_refills_an_emptied_category():
    seed_database(get_engine(), OPTIONS)
    with get_db() as session:
        session.execute(text("DELETE FROM faqs"))

    report = seed_database(get_engine(), OPTIONS)

    assert report.outcome("faqs").inserted == len(baseline_faqs())
    assert _count("faqs") == len(baseline_faqs())


def test_reconcile_failure_is_isolated_to_its_category(monkeypatch):
    seed_database(get_engine(), OPTIONS)

    def failing_patch(self, connection):
        raise OperationalError("UPDATE tags", {}, Exception("database is locked"))

    monkeypatch.setattr(SeedOrchestrator, "_patch_tags", failing_patch)
    report = seed_database(get_engine(), OPTIONS)

    assert report.failed_categories == ["tags"]
    assert report.outcome("recommendations").ok
    assert report.outcome("faqs").ok


def test_validation_on_empty_store_names_first_role():
    with pytest.raises(ValidationError) as exc_info:
        validate_seed_data(get_engine())
    assert exc_info.value.entity == "role ADMINISTRADOR"


def test_validation_names_missing_tag_code():
    seed_database(get_engine(), OPTIONS)
    with get_db() as session:
        session.execute(text("UPDATE tags SET muac_code = 'OLD' WHERE muac_code = 'MUAC-Y1'"))

    with pytest.raises(ValidationError) as exc_info:
        validate_seed_data(get_engine())
    assert exc_info.value.entity == "tag MUAC-Y1"


def test_validation_checks_roles_before_tags():
    seed_database(get_engine(), OPTIONS)
    with get_db() as session:
        session.execute(text("UPDATE roles SET name = 'SUPERVISORA' WHERE name = 'SUPERVISOR'"))
        session.execute(text("UPDATE tags SET muac_code = NULL"))

    with pytest.raises(ValidationError) as exc_info:
        validate_seed_data(get_engine())
    assert exc_info.value.entity == "role SUPERVISOR"


def test_validation_requires_admin_account():
    seed_database(get_engine(), OPTIONS)
    with get_db() as session:
        session.execute(text("DELETE FROM users"))

    with pytest.raises(ValidationError) as exc_info:
        validate_seed_data(get_engine())
    assert exc_info.value.entity == "administrator account"


def test_clean_seed_data_empties_every_table():
    seed_database(get_engine(), OPTIONS)

    failed = clean_seed_data(get_engine())

    assert failed == []
    for table in CLEANUP_ORDER:
        assert _count(table.name) == 0
    assert get_seeding_status(get_engine()).is_seeded is False


def test_clean_seed_data_continues_past_failing_table(monkeypatch):
    seed_database(get_engine(), OPTIONS)
    # Roles go first while users still reference them, so that delete fails.
    role_table = Role.__table__
    monkeypatch.setattr(
        "muac.seeding.CLEANUP_ORDER",
        (role_table,) + tuple(table for table in CLEANUP_ORDER if table is not role_table),
    )

    failed = clean_seed_data(get_engine())

    assert failed == ["roles"]
    assert _count("users") == 0
    assert _count("tags") == 0
    assert _count("recommendations") == 0
    assert _count("faqs") == 0
    assert _count("roles") == 3
