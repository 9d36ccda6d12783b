import os
import sys
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

# Ensure repo root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.togglehub.models import Base


@contextmanager
def _session_scope(database_url: str):
    engine = create_engine(database_url, future=True)
    sm = sessionmaker(bind=engine, class_=Session, autoflush=False, autocommit=False, expire_on_commit=False, future=True)
    s: Session = sm()
    try:
        yield s
        s.commit()
    except Exception:
        s.rollback()
        raise
    finally:
        s.close()
        engine.dispose()


def create_schema(*, database_url: str | None = None) -> None:
    """
    Create any missing tables (idempotent). Existing tables are left untouched;
    use `alembic upgrade head` for schema changes on a live database.
    """
    db_url = (database_url or os.environ.get("DATABASE_URL") or "sqlite:///togglehub.db").strip()

    # Direct engine so this can run in release without building the Flask app.
    with _session_scope(db_url) as s:
        Base.metadata.create_all(bind=s.get_bind())

    print("Initialized database (create_schema).")


def main() -> None:
    create_schema(database_url=None)


if __name__ == "__main__":
    main()
