#!/usr/bin/env python3
"""
Container entrypoint: migrate, then hand the process over to gunicorn.

Settings come from the environment (see app.togglehub.config):
  PORT                     bind port (default 8080)
  WEB_CONCURRENCY          gunicorn workers (default 2)
  GUNICORN_TIMEOUT         worker timeout in seconds (default 60)
  RUN_MIGRATIONS_ON_START  set to 0 to skip `alembic upgrade head`

Usage:
    python scripts/start.py
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.togglehub.config import Settings, load_settings

logger = logging.getLogger("togglehub.start")


def validate(settings: Settings) -> None:
    if not 1 <= settings.port <= 65535:
        raise RuntimeError(f"PORT must be 1-65535 (got {settings.port}).")
    if settings.web_concurrency < 1:
        raise RuntimeError(f"WEB_CONCURRENCY must be at least 1 (got {settings.web_concurrency}).")
    if settings.web_timeout_seconds < 1:
        raise RuntimeError(f"GUNICORN_TIMEOUT must be at least 1 (got {settings.web_timeout_seconds}).")


def gunicorn_argv(settings: Settings) -> list[str]:
    return [
        "gunicorn",
        "app.wsgi:app",
        "--bind", f"0.0.0.0:{settings.port}",
        "--workers", str(settings.web_concurrency),
        "--timeout", str(settings.web_timeout_seconds),
        # create_app() runs once in the master and disposes the engine in each forked worker
        "--preload",
        "--access-logfile", "-",
        "--error-logfile", "-",
        "--log-level", settings.log_level.lower(),
    ]


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")
    try:
        settings = load_settings()
        validate(settings)
    except RuntimeError as e:
        logger.error("Invalid configuration: %s", e)
        return 1

    if settings.run_migrations_on_start:
        from scripts.release import run_release

        try:
            run_release()
        except Exception:
            logger.exception("Release failed; not starting gunicorn")
            return 1
    else:
        logger.info("RUN_MIGRATIONS_ON_START disabled; skipping migrations")

    argv = gunicorn_argv(settings)
    logger.info("Starting %s", " ".join(argv))
    os.execvp(argv[0], argv)
    return 0  # unreachable once exec succeeds


if __name__ == "__main__":
    raise SystemExit(main())
