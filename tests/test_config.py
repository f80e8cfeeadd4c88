from datetime import date

import pytest

from review_core import config
from review_core.sm2.review_state import get_default_ease_factor, initialize_new_state


def test_database_url_required(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)

    with pytest.raises(ValueError, match="DATABASE_URL"):
        config.get_database_url()


def test_test_mode_swaps_database_name(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@localhost:5432/study_db")
    monkeypatch.setenv("TEST_MODE", "true")

    assert config.get_database_url() == "postgresql://u:p@localhost:5432/test_study_db"


def test_production_url_is_unchanged(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@localhost:5432/study_db")
    monkeypatch.setenv("TEST_MODE", "false")

    assert config.get_database_url().endswith("/study_db")


def test_default_ease_from_environment(monkeypatch):
    monkeypatch.setenv("DEFAULT_EASE_FACTOR", "2.2")

    assert get_default_ease_factor() == 2.2
    assert initialize_new_state(date(2024, 1, 1)).ease_factor == 2.2


def test_default_ease_below_floor_is_rejected(monkeypatch):
    monkeypatch.setenv("DEFAULT_EASE_FACTOR", "1.1")

    with pytest.raises(ValueError):
        get_default_ease_factor()


def test_non_numeric_setting_is_rejected(monkeypatch):
    monkeypatch.setenv("MASTERY_MIN_REPETITIONS", "three")

    with pytest.raises(ValueError, match="MASTERY_MIN_REPETITIONS"):
        config.env_int("MASTERY_MIN_REPETITIONS", 3)


def test_new_state_is_due_tomorrow(monkeypatch):
    monkeypatch.delenv("DEFAULT_EASE_FACTOR", raising=False)

    state = initialize_new_state(date(2024, 1, 31), user_id="u1", item_id=4)

    assert state.repetition_number == 0
    assert state.ease_factor == 2.5
    assert state.interval_days == 1
    assert state.next_review_date == date(2024, 2, 1)
    assert state.is_active
