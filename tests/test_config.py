"""
Configuration and CORS tests.
"""

import pytest
from pydantic import ValidationError

from taskhub.config import Environment, Settings, settings


def test_cors_no_wildcard_with_credentials():
    """allow_origins=["*"] together with credentials would let any site call the API."""
    assert settings.cors_allow_credentials is True
    assert settings.cors_allowed_origins != ["*"]
    assert len(settings.cors_allowed_origins) > 0


def test_cors_explicit_methods_and_headers():
    assert settings.cors_allowed_methods != ["*"]
    assert settings.cors_allowed_headers != ["*"]
    assert "PATCH" in settings.cors_allowed_methods
    assert "Content-Type" in settings.cors_allowed_headers


def test_defaults():
    fresh = Settings(_env_file=None, database_url="sqlite+aiosqlite:///:memory:")

    assert fresh.env == Environment.DEVELOPMENT
    assert fresh.realtime_path == "/taskManagerHub"
    assert fresh.default_activity_count == 20
    assert fresh.max_activity_count == 100
    assert fresh.dashboard_activity_count == 10


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("TASKHUB_PORT", "9090")
    monkeypatch.setenv("TASKHUB_ENV", "production")

    fresh = Settings(_env_file=None)

    assert fresh.port == 9090
    assert fresh.env == Environment.PRODUCTION
    assert fresh.is_development is False


@pytest.mark.parametrize(
    "field,value",
    [
        ("database_url", "mysql://localhost/taskhub"),
        ("database_url", "postgresql://localhost/taskhub"),
        ("port", 0),
        ("port", 70000),
        ("realtime_path", "taskManagerHub"),
        ("broadcast_queue_size", 0),
        ("max_activity_count", -1),
    ],
)
def test_invalid_values_rejected(field, value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: value})
