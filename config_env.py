# Configuration from environment variables (.env or deployment variables).

import os

from dotenv import load_dotenv

load_dotenv()


def _env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _env_int(key: str, default: int) -> int:
    try:
        return int(_env(key, str(default)))
    except ValueError:
        return default


def _env_float(key: str, default: float) -> float:
    try:
        return float(_env(key, str(default)))
    except ValueError:
        return default


def _env_bool(key: str, default: bool = False) -> bool:
    return _env(key, "true" if default else "false").lower() in ("1", "true", "yes")


# ============================================================================
# Database
# ============================================================================
DATABASE_URL = _env("DATABASE_URL")
DATABASE_URL_FALLBACK = _env("DATABASE_URL_FALLBACK", "sqlite+aiosqlite:///./startuplink.db")

# ============================================================================
# Auth
# ============================================================================
JWT_SECRET = _env("JWT_SECRET", "startuplink-dev-secret-change-me-in-production")
JWT_ALGORITHM = "HS256"
JWT_EXPIRES_DAYS = _env_int("JWT_EXPIRES_DAYS", 30)
MIN_USER_AGE = 18

# ============================================================================
# Payments
# ============================================================================
STRIPE_SECRET_KEY = _env("STRIPE_SECRET_KEY")
RAZORPAY_KEY_ID = _env("RAZORPAY_KEY_ID")
RAZORPAY_KEY_SECRET = _env("RAZORPAY_KEY_SECRET")

# ============================================================================
# KYC documents
# ============================================================================
UPLOAD_DIR = _env("UPLOAD_DIR", "uploads/documents")
MAX_UPLOAD_MB = _env_float("MAX_UPLOAD_MB", 10)

# ============================================================================
# API behaviour
# ============================================================================
# Append exception text to 500 responses (local development only)
EXPOSE_ERRORS = _env_bool("EXPOSE_ERRORS", False)
LOG_LEVEL = _env("LOG_LEVEL", "INFO").upper()
RECOMMENDATION_LIMIT = _env_int("RECOMMENDATION_LIMIT", 10)

# Backend API URL (for client -> FastAPI communication)
BACKEND_URL = _env("BACKEND_URL", "http://localhost:8000")
