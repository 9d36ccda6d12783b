import pytest

from app.togglehub.config import load_config, load_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for k in (
        "SECRET_KEY",
        "ENV",
        "DATABASE_URL",
        "JWT_SECRET_KEY",
        "JWT_EXPIRE_SECONDS",
        "DB_FETCH_TIMEOUT_SECONDS",
        "DEFAULT_PAGE_SIZE",
        "MAX_PAGE_SIZE",
        "LOG_LEVEL",
        "PORT",
        "WEB_CONCURRENCY",
        "GUNICORN_TIMEOUT",
        "RUN_MIGRATIONS_ON_START",
    ):
        monkeypatch.delenv(k, raising=False)


def test_defaults():
    s = load_settings()
    assert s.env == "development"
    assert s.database_url == "sqlite:///togglehub.db"
    assert s.jwt_secret_key == s.secret_key == "change-me"
    assert s.jwt_expire_seconds == 86400
    assert s.db_fetch_timeout_seconds == 5
    assert (s.default_page_size, s.max_page_size) == (10, 100)
    assert s.log_level == "INFO"


def test_jwt_secret_falls_back_to_secret_key(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "abc")
    assert load_settings().jwt_secret_key == "abc"
    monkeypatch.setenv("JWT_SECRET_KEY", "xyz")
    assert load_settings().jwt_secret_key == "xyz"


def test_postgres_scheme_is_normalized(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgres://u:p@db:5432/flags")
    assert load_settings().database_url == "postgresql://u:p@db:5432/flags"


def test_non_integer_setting_fails_fast(monkeypatch):
    monkeypatch.setenv("JWT_EXPIRE_SECONDS", "one day")
    with pytest.raises(RuntimeError, match="JWT_EXPIRE_SECONDS"):
        load_settings()


def test_load_config_mapping(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    cfg = load_config()
    assert cfg["LOG_LEVEL"] == "DEBUG"
    assert cfg["MAX_CONTENT_LENGTH"] == 1024 * 1024


def test_server_settings(monkeypatch):
    s = load_settings()
    assert (s.port, s.web_concurrency, s.web_timeout_seconds) == (8080, 2, 60)
    assert s.run_migrations_on_start is True
    monkeypatch.setenv("RUN_MIGRATIONS_ON_START", "false")
    assert load_settings().run_migrations_on_start is False
