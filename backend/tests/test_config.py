import pytest

from todoapp.core.config import Settings
from todoapp.core.errors import STATUS_BY_KIND, AppError, ErrorKind


def test_defaults(monkeypatch):
    monkeypatch.delenv("JWT_SECRET", raising=False)
    settings = Settings(_env_file=None)

    assert settings.JWT_EXPIRY_HOURS == 24
    assert settings.JWT_ALGORITHM == "HS256"
    assert settings.API_PREFIX == "/api/v1"
    assert settings.DATABASE_URL.startswith("sqlite")


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "from-env")
    monkeypatch.setenv("JWT_EXPIRY_HOURS", "2")

    settings = Settings(_env_file=None)

    assert settings.JWT_SECRET == "from-env"
    assert settings.JWT_EXPIRY_HOURS == 2


@pytest.mark.parametrize(
    "origins,expected",
    [
        ("http://a.com, http://b.com,", ["http://a.com", "http://b.com"]),
        (["http://a.com"], ["http://a.com"]),
        ("", []),
    ],
)
def test_cors_origins(origins, expected):
    assert Settings(_env_file=None, CORS_ORIGINS=origins).get_cors_origins() == expected


@pytest.mark.parametrize(
    "raw,expected",
    [
        ('["http://a.com", "http://b.com"]', ["http://a.com", "http://b.com"]),
        ("http://a.com,http://b.com", ["http://a.com", "http://b.com"]),
    ],
)
def test_cors_origins_from_environment(monkeypatch, raw, expected):
    monkeypatch.setenv("CORS_ORIGINS", raw)
    assert Settings(_env_file=None).get_cors_origins() == expected


def test_every_error_kind_has_a_status():
    assert set(STATUS_BY_KIND) == set(ErrorKind)


def test_app_error_status():
    error = AppError(ErrorKind.ALREADY_EXISTS, "User already exists")
    assert error.status_code == 409
    assert str(error) == "User already exists"
    assert error.fields == {}
