# taskcoach/config.py
import os
from dotenv import load_dotenv

load_dotenv()

def _as_bool(val: str | None, default=False) -> bool:
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}

class Config:
    # --- Core ---
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
    # wsgi.py trusts X-Forwarded-* only when set
    BEHIND_PROXY = _as_bool(os.getenv("BEHIND_PROXY", "0"))

    # DB
    SQLALCHEMY_DATABASE_URI = (
        os.getenv("SQLALCHEMY_DATABASE_URI")
        or os.getenv("DATABASE_URL")
        or "sqlite:///taskcoach.db"
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # --- Sessions ---
    # Fixed lifetime counted from login, no sliding renewal
    SESSION_LIFETIME_HOURS = int(os.getenv("SESSION_LIFETIME_HOURS", "24"))
    SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "sid")
    SESSION_COOKIE_SECURE = _as_bool(os.getenv("SESSION_COOKIE_SECURE", "1"))
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "Lax")

    # --- Annotation service (OpenAI-compatible chat completions) ---
    ANNOTATION_API_KEY = os.getenv("ANNOTATION_API_KEY") or os.getenv("OPENAI_API_KEY")
    ANNOTATION_BASE_URL = os.getenv("ANNOTATION_BASE_URL", "https://api.openai.com/v1")
    ANNOTATION_MODEL = os.getenv("ANNOTATION_MODEL", "gpt-4o")
    ANNOTATION_TIMEOUT = float(os.getenv("ANNOTATION_TIMEOUT", "30"))
    ANALYZE_MAX_WORKERS = int(os.getenv("ANALYZE_MAX_WORKERS", "4"))

    # --- Logging ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR = os.getenv("LOG_DIR", "logs")
    LOG_FILENAME = os.getenv("LOG_FILENAME", "taskcoach.log")
    LOG_JSON = _as_bool(os.getenv("LOG_JSON", "0"))

    # --- Sentry ---
    SENTRY_DSN = os.getenv("SENTRY_DSN", "")
    SENTRY_TRACES_SAMPLE_RATE = float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.0"))
