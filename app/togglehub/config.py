import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str

    jwt_secret_key: str
    jwt_expire_seconds: int
    db_fetch_timeout_seconds: int

    default_page_size: int
    max_page_size: int

    log_level: str

    port: int
    web_concurrency: int
    web_timeout_seconds: int
    run_migrations_on_start: bool


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getenv_int(name: str, default: int) -> int:
    raw = _getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer (got {raw!r}).") from None


def _normalize_database_url(url: str) -> str:
    # Hosted Postgres providers hand out postgres://, which SQLAlchemy 2 rejects.
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


def load_settings() -> Settings:
    secret_key = _getenv("SECRET_KEY", "change-me")
    return Settings(
        secret_key=secret_key,
        env=_getenv("ENV", "development"),
        database_url=_normalize_database_url(_getenv("DATABASE_URL", "sqlite:///togglehub.db")),
        jwt_secret_key=_getenv("JWT_SECRET_KEY", secret_key),
        jwt_expire_seconds=_getenv_int("JWT_EXPIRE_SECONDS", 24 * 60 * 60),
        db_fetch_timeout_seconds=_getenv_int("DB_FETCH_TIMEOUT_SECONDS", 5),
        default_page_size=_getenv_int("DEFAULT_PAGE_SIZE", 10),
        max_page_size=_getenv_int("MAX_PAGE_SIZE", 100),
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
        port=_getenv_int("PORT", 8080),
        web_concurrency=_getenv_int("WEB_CONCURRENCY", 2),
        web_timeout_seconds=_getenv_int("GUNICORN_TIMEOUT", 60),
        run_migrations_on_start=_getenv("RUN_MIGRATIONS_ON_START", "1").lower() not in ("0", "false", "no"),
    )


def load_config(s: Settings | None = None) -> dict:
    s = s or load_settings()
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "JWT_SECRET_KEY": s.jwt_secret_key,
        "JWT_EXPIRE_SECONDS": s.jwt_expire_seconds,
        "DB_FETCH_TIMEOUT_SECONDS": s.db_fetch_timeout_seconds,
        "LOG_LEVEL": s.log_level,
        # JSON API: keep key order as serialized by the handlers
        "JSON_SORT_KEYS": False,
        # request bodies are small JSON documents (1MB)
        "MAX_CONTENT_LENGTH": 1024 * 1024,
    }
