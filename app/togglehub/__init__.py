import logging

from dotenv import load_dotenv
from flask import Flask, g, request

from app.togglehub.config import load_config, load_settings
from app.togglehub.db import init_db, teardown_db_session
from app.togglehub.errors import register_error_handlers
from app.togglehub.routes import bp as routes_bp
from app.togglehub.auth import bp as auth_bp, load_current_user
from app.togglehub.modules.feature_flags.api import bp as feature_flags_bp


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__)
    settings = load_settings()
    app.config.from_mapping(load_config(settings))
    app.extensions["settings"] = settings
    app.json.sort_keys = False
    app.logger.setLevel(settings.log_level)

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if not app.config.get("DATABASE_URL") or str(app.config["DATABASE_URL"]).strip() == "":
            raise RuntimeError("DATABASE_URL is required in production.")
        if str(app.config["DATABASE_URL"]).startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must be Postgres in production (not sqlite).")
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")
        if settings.jwt_secret_key in ("", "change-me"):
            raise RuntimeError("JWT_SECRET_KEY must be set to a strong value in production (not default).")

    init_db(app)

    def _dispose_engine_on_fork() -> None:
        import os

        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get("sqlalchemy_engine")
                if engine:
                    engine.dispose()
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    register_error_handlers(app)

    app.register_blueprint(routes_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(feature_flags_bp, url_prefix="/organizations")

    def _load_user_wrapper():
        if request.path.startswith(("/health", "/healthz")):
            g.current_user_id = None
            return None
        return load_current_user()

    app.before_request(_load_user_wrapper)
    app.teardown_appcontext(teardown_db_session)

    # Startup logging
    logging.getLogger(__name__).info("create_app() complete; app ready to serve (env=%s)", settings.env)

    return app
