from __future__ import annotations

from dotenv import load_dotenv

load_dotenv()

from muac.db import check_db_connection, get_engine, init_db  # noqa: E402
from muac.logging_utils import configure_logging  # noqa: E402
from muac.seeding import seed_database, validate_seed_data  # noqa: E402


def run_bootstrap() -> None:
    configure_logging()
    check_db_connection()
    created = init_db()
    report = seed_database(get_engine())
    validate_seed_data(get_engine())

    print(f"Schema {'created' if created else 'already present'}. Seed mode: {report.mode}")
    for item in report.categories:
        state = "ok" if item.ok else f"failed ({item.error})"
        print(f"  {item.category}: inserted={item.inserted} patched={item.patched} {state}")
    if report.generated_password is not None:
        print(f"Generated administrator password (shown once): {report.generated_password}")


if __name__ == "__main__":
    run_bootstrap()
