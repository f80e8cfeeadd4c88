from datetime import datetime, timezone

import pytest

from review_core.sm2 import database


@pytest.fixture
def db(tmp_path, monkeypatch):
    """Fresh file-backed SQLite study database per test."""
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'study.db'}")
    monkeypatch.delenv("TEST_MODE", raising=False)
    database.init_db()
    yield database
    database.dispose_engine()


@pytest.fixture
def now():
    return datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc)

