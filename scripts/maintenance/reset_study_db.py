"""
Drop and recreate every study table.

DANGEROUS: schedules and review history are gone afterwards.
The target database (password masked) is printed before confirmation.

Usage:
    python -m scripts.maintenance.reset_study_db [--yes]
"""

from __future__ import annotations

import argparse

from sqlalchemy.engine import make_url

from review_core import config, sm2
from review_core.logging import configure_logging


def describe_target() -> str:
    """DATABASE_URL as it will be used, with the password hidden."""
    return make_url(config.get_database_url()).render_as_string(hide_password=True)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Reset the study database")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = parser.parse_args(argv)

    configure_logging()
    target = describe_target()
    print(f"Target database: {target}")
    if config.is_test_mode():
        print("(TEST_MODE is on)")
    print("Tables to drop: text_items, spaced_repetition_schedule, review_events")

    if not args.yes:
        response = input("Type 'yes' to drop all study data: ")
        if response.strip().lower() != "yes":
            print("Cancelled. No changes made.")
            return 1

    sm2.reset_db()
    print(f"Reset complete: {target}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
