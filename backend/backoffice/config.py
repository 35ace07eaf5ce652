import os


def _normalize_database_url(url: str) -> str:
    # Render/Heroku sometimes provide postgres:// which SQLAlchemy expects as postgresql://
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


class Config:
    # Base directory of the backend (one level above this `backoffice` package)
    BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    INSTANCE_DIR = os.path.join(BACKEND_DIR, "instance")

    ENV_NAME = (os.getenv("BACKOFFICE_ENV", "dev") or "dev").strip().lower()
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")

    _default_sqlite_path = os.path.join(INSTANCE_DIR, "backoffice.db").replace("\\", "/")
    _db_url = os.getenv("SQLALCHEMY_DATABASE_URI") or os.getenv("DATABASE_URL") or f"sqlite:///{_default_sqlite_path}"
    SQLALCHEMY_DATABASE_URI = _normalize_database_url(_db_url)
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # CORS: comma-separated origins for the admin panel (e.g. https://admin.example.com)
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Upstream integrations. Credentials live in module settings or the
    # environment (see backoffice.utils.credentials), never here.
    UPSTREAM_TIMEOUT_SECONDS = float(os.getenv("UPSTREAM_TIMEOUT_SECONDS", "10"))
    FRAUD_CHECK_BASE_URL = os.getenv("FRAUD_CHECK_BASE_URL", "https://bdcourier.com/api/courier-check")
    STEADFAST_BASE_URL = os.getenv("STEADFAST_BASE_URL", "https://portal.packzy.com/api/v1")


def is_production(env_name: str) -> bool:
    return env_name in ("prod", "production")
