from __future__ import annotations

from contextlib import contextmanager
from collections.abc import Generator

from flask import Flask, current_app, g
from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker


def _engine_options(db_url: str) -> dict[str, object]:
    options: dict[str, object] = {"pool_pre_ping": True}
    if db_url.startswith("postgresql"):
        options.update(pool_recycle=1800, pool_size=5, max_overflow=10, pool_timeout=30)
    return options


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    # Off by default in SQLite; revisions and members rely on their FKs.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):  # type: ignore[no-redef]
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_db(app: Flask) -> None:
    """Build the engine and session factory and park them in ``app.extensions``."""
    db_url = app.config["DATABASE_URL"]
    engine = create_engine(db_url, **_engine_options(db_url))
    if engine.dialect.name == "sqlite":
        _enable_sqlite_foreign_keys(engine)

    app.extensions["sqlalchemy_engine"] = engine
    app.extensions["sqlalchemy_sessionmaker"] = sessionmaker(
        bind=engine,
        autoflush=False,
        expire_on_commit=False,
    )
    app.logger.debug("Database engine ready (dialect=%s)", engine.dialect.name)


def db_session() -> Session:
    """
    Session bound to the current request. Opened on first use and closed by
    ``teardown_db_session``; handlers commit explicitly.
    """
    s: Session | None = g.get("db_session")
    if s is None:
        s = current_app.extensions["sqlalchemy_sessionmaker"]()
        g.db_session = s
    return s


def teardown_db_session(_exc: BaseException | None) -> None:
    s: Session | None = g.pop("db_session", None)
    if s is not None:
        s.close()


@contextmanager
def session_scope(app: Flask) -> Generator[Session, None, None]:
    """
    Unit of work outside a request (scripts, test seeding): commit on success,
    roll back on error.
    """
    with app.extensions["sqlalchemy_sessionmaker"]() as s:
        try:
            yield s
            s.commit()
        except Exception:
            s.rollback()
            raise


def apply_statement_timeout(s: Session, seconds: int) -> None:
    """Bound statements in the current transaction (PostgreSQL only)."""
    if seconds <= 0:
        return
    if s.get_bind().dialect.name != "postgresql":
        return
    s.execute(text(f"SET LOCAL statement_timeout = {int(seconds) * 1000}"))
