"""
Enroll phrases from a text file into a learner's study plan.

One phrase per line; blank lines and lines starting with '#' are skipped.
New schedules are due the day after enrollment.

Usage:
    python -m scripts.enroll_phrases phrases.txt [--user-id ID] [--document-id ID] [--dry-run]
"""

from __future__ import annotations

import argparse
from datetime import date
from pathlib import Path

from review_core import config, sm2
from review_core.logging import configure_logging


def read_phrases(path: Path) -> list[str]:
    """Read non-empty, non-comment lines from a UTF-8 text file."""
    phrases = []
    for line in path.read_text(encoding="utf-8").splitlines():
        text = line.strip()
        if text and not text.startswith("#"):
            phrases.append(text)
    return phrases


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Enroll phrases into the study plan")
    parser.add_argument("path", type=Path, help="Text file with one phrase per line")
    parser.add_argument("--user-id", default=None, help="Learner id (default: DEFAULT_USER_ID)")
    parser.add_argument("--document-id", default=None, help="Source document id")
    parser.add_argument("--dry-run", action="store_true", help="Only print what would be enrolled")
    args = parser.parse_args(argv)

    configure_logging()
    user_id = args.user_id or config.get_default_user_id()
    phrases = read_phrases(args.path)
    print(f"Found {len(phrases)} phrases in {args.path}")

    if args.dry_run:
        for phrase in phrases:
            print(f"  - {phrase}")
        return 0

    sm2.init_db()
    inserted = sm2.enroll_items(user_id, phrases, date.today(), document_id=args.document_id)
    print(f"Enrolled {inserted} new phrases for {user_id} "
          f"({len(phrases) - inserted} already scheduled or duplicates)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
