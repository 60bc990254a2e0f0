from __future__ import annotations

import argparse
from dataclasses import asdict
import json
from pathlib import Path
import sys

from dotenv import load_dotenv

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.append(str(BACKEND_DIR))

load_dotenv()

from muac.db import get_engine, init_db  # noqa: E402
from muac.errors import BootstrapError, ValidationError  # noqa: E402
from muac.logging_utils import configure_logging  # noqa: E402
from muac.seeding import clean_seed_data, get_seeding_status, seed_database, validate_seed_data  # noqa: E402


def cmd_status(_args: argparse.Namespace) -> int:
    status = get_seeding_status(get_engine())
    print(json.dumps(asdict(status), indent=2))
    return 0


def cmd_seed(_args: argparse.Namespace) -> int:
    init_db()
    report = seed_database(get_engine())
    print(json.dumps(report.public_dict(), indent=2, ensure_ascii=False))
    if report.generated_password is not None:
        print(f"Generated administrator password (shown once): {report.generated_password}")
    return 1 if report.failed_categories else 0


def cmd_validate(_args: argparse.Namespace) -> int:
    try:
        validate_seed_data(get_engine())
    except ValidationError as exc:
        print(f"Missing: {exc.entity}")
        return 1
    print("Seed data is valid")
    return 0


def cmd_clean(args: argparse.Namespace) -> int:
    if not args.yes:
        print("Refusing to delete seed data without --yes")
        return 2
    failed = clean_seed_data(get_engine())
    if failed:
        print(f"Tables that could not be cleared: {', '.join(failed)}")
        return 1
    print("All seeded tables cleared")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Inspect and maintain MUAC reference data")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("status", help="Show row counts and readiness").set_defaults(handler=cmd_status)
    subparsers.add_parser("seed", help="Bootstrap the schema and seed or reconcile").set_defaults(handler=cmd_seed)
    subparsers.add_parser("validate", help="Check required reference records").set_defaults(handler=cmd_validate)
    clean = subparsers.add_parser("clean", help="Delete seeded and dependent rows")
    clean.add_argument("--yes", action="store_true", help="Confirm deletion")
    clean.set_defaults(handler=cmd_clean)

    args = parser.parse_args()
    configure_logging()
    try:
        return args.handler(args)
    except BootstrapError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
