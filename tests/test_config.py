"""Tests for settings loading."""

import pytest
from pydantic import ValidationError

from app.core.config import Settings


def test_missing_jwt_secret_fails(monkeypatch):
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_short_jwt_secret_fails(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "short")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_defaults(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "a-long-enough-secret-value")
    settings = Settings(_env_file=None)
    assert settings.jwt_expire_days == 7
    assert settings.free_plan_note_limit == 3
    assert settings.jwt_algorithm == "HS256"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "a-long-enough-secret-value")
    monkeypatch.setenv("FREE_PLAN_NOTE_LIMIT", "10")
    monkeypatch.setenv("SEED_DEMO_DATA", "false")
    settings = Settings(_env_file=None)
    assert settings.free_plan_note_limit == 10
    assert settings.seed_demo_data is False
