import os

from dotenv import load_dotenv


BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def _env_bool(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def load_config():
    """Read app settings from the environment (and a local .env file)."""
    load_dotenv()
    return {
        "DATABASE_URL": os.getenv("DATABASE_URL"),
        "SQLITE_PATH": os.getenv(
            "SQLITE_PATH", os.path.join(BASE_DIR, "data", "focusboard.db")
        ),
        "AUTH_JWT_SECRET": os.getenv("AUTH_JWT_SECRET", "dev-jwt-secret"),
        "AUTH_SESSION_COOKIE_NAME": os.getenv(
            "AUTH_SESSION_COOKIE_NAME", "focusboard_session"
        ),
        "AUTH_SESSION_TTL_MINUTES": int(os.getenv("AUTH_SESSION_TTL_MINUTES", "10080")),
        "AUTH_COOKIE_SECURE": _env_bool("AUTH_COOKIE_SECURE", False),
        "AUTH_COOKIE_SAMESITE": os.getenv("AUTH_COOKIE_SAMESITE", "Lax"),
        "AUTH_COOKIE_DOMAIN": os.getenv("AUTH_COOKIE_DOMAIN"),
        "LOG_LEVEL": os.getenv("LOG_LEVEL", "INFO").upper(),
    }
