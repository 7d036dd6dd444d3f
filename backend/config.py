import logging
import os
from datetime import timedelta

# -------------------------------------------------------------------
# Every setting can be overridden from the environment (or a .env file
# loaded by the process manager). Defaults are for local development.
# -------------------------------------------------------------------
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///health_registry.db")

JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "super-secret-key-change-in-production")
JWT_ACCESS_TOKEN_EXPIRES_HOURS = int(os.environ.get("JWT_ACCESS_TOKEN_EXPIRES_HOURS", "0"))

CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
AUDIT_LOG_LIMIT = int(os.environ.get("AUDIT_LOG_LIMIT", "50"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "5000"))


def jwt_expiry():
    """Token lifetime for flask-jwt-extended; 0 hours means never expire."""
    if JWT_ACCESS_TOKEN_EXPIRES_HOURS <= 0:
        return False
    return timedelta(hours=JWT_ACCESS_TOKEN_EXPIRES_HOURS)


def flask_settings():
    return {
        "DATABASE_URL": DATABASE_URL,
        "JWT_SECRET_KEY": JWT_SECRET_KEY,
        "JWT_ACCESS_TOKEN_EXPIRES": jwt_expiry(),
        "CORS_ORIGINS": CORS_ORIGINS,
        "AUDIT_LOG_LIMIT": AUDIT_LOG_LIMIT,
    }


def configure_logging(level=None):
    logging.basicConfig(
        level=level or LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
