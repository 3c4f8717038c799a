import os
from pathlib import Path
import logging
from logging.handlers import RotatingFileHandler
from datetime import timedelta
from flask import Flask, session
from .extensions import db, migrate, login_manager
from .config import Config
from .errors import Unauthenticated
from .services import session_service
from .services.annotation_service import init_annotator

# Blueprints
from .blueprints.errors import errors_bp
from .blueprints.auth import auth_bp
from .blueprints.tasks import tasks_bp
from .blueprints.admin import admin_bp


# Optional: Sentry
def _init_sentry(app):
    dsn = app.config.get("SENTRY_DSN")
    if not dsn:
        return
    try:
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration
        from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

        sentry_sdk.init(
            dsn=dsn,
            integrations=[FlaskIntegration(), SqlalchemyIntegration()],
            traces_sample_rate=app.config.get("SENTRY_TRACES_SAMPLE_RATE", 0.0),
            environment=os.getenv("ENV", "development"),
            release=os.getenv("GIT_COMMIT", None),
            send_default_pii=False,
        )
        app.logger.info("Sentry initialized.")
    except Exception as e:
        app.logger.warning(f"Sentry init failed: {e}")

def _init_logging(app):
    # Base level
    level_name = app.config.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    app.logger.setLevel(level)

    # Formatter: text or JSON
    if app.config.get("LOG_JSON", False):
        import json_log_formatter
        formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter("[%(asctime)s] %(levelname)s in %(module)s: %(message)s")

    handlers = []
    if app.config.get("LOG_DIR"):
        log_dir = Path(app.config["LOG_DIR"])
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / app.config.get("LOG_FILENAME", "taskcoach.log")
        # Rotating file handler (5MB x 5)
        handlers.append(RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=5, encoding="utf-8"))

    # Stream to stdout as well (useful on dev/heroku/docker)
    handlers.append(logging.StreamHandler())

    # app.logger is the "taskcoach" logger, so service module loggers propagate here.
    # Drop handlers from an earlier create_app in the same process.
    for old in [h for h in app.logger.handlers if getattr(h, "_taskcoach", False)]:
        app.logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler._taskcoach = True
        app.logger.addHandler(handler)

    app.logger.info("Logging initialized.")

def create_app(config_object=None, annotator=None):
    app = Flask(__name__, instance_relative_config=True)

    if config_object is None:
        app.config.from_object(Config)
    else:
        app.config.from_object(config_object)

    # --- base config defaults ---
    app.config.setdefault("SECRET_KEY", "change-me")
    app.config.setdefault(
        "SQLALCHEMY_DATABASE_URI",
        "sqlite:///" + os.path.join(app.instance_path, "taskcoach.db"),
    )
    app.config.setdefault("SQLALCHEMY_TRACK_MODIFICATIONS", False)
    app.config.setdefault("SESSION_LIFETIME_HOURS", 24)
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(hours=app.config["SESSION_LIFETIME_HOURS"])

    if not app.config.get("TESTING"):
        app.config.from_pyfile("config.py", silent=True)
        Path(app.instance_path).mkdir(parents=True, exist_ok=True)

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    init_annotator(app, annotator)

    # Sessions: the cookie carries an opaque token, the sessions table decides
    @login_manager.request_loader
    def load_user_from_session(req):
        token = session.get(session_service.SESSION_KEY)
        if not token:
            return None
        try:
            user = session_service.current_user(token)
        except Unauthenticated:
            session.pop(session_service.SESSION_KEY, None)
            return None
        user.session_token = token
        return user

    @login_manager.unauthorized_handler
    def unauthorized():
        raise Unauthenticated()

    # Logging must come before blueprints so errors during register are captured
    _init_logging(app)
    _init_sentry(app)

    # Blueprints
    app.register_blueprint(errors_bp)  # error handlers
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(tasks_bp, url_prefix="/api")
    app.register_blueprint(admin_bp, url_prefix="/api")

    from .commands import register_commands
    register_commands(app)

    return app
