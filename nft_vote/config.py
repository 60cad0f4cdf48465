import json
import os
from datetime import timedelta
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent  # project root (where wsgi.py is)
load_dotenv(BASE_DIR / ".env")

DEFAULT_JWT_SECRET = "jwt-dev-secret"

# Demo ballot; baselines are seeded vote counts added to recorded votes
DEFAULT_VOTING_OPTIONS = [
    {"id": "1", "title": "Option A", "description": "Host a community event", "baseline": 45},
    {"id": "2", "title": "Option B", "description": "Expand the NFT collection", "baseline": 32},
    {"id": "3", "title": "Option C", "description": "Update the roadmap", "baseline": 28},
]


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def _csv(name: str, default: str = "") -> list[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Storage: "memory" (single process) or "sql" (Flask-SQLAlchemy)
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory").lower()
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Falls back to a hardcoded secret when unset; create_app warns about it.
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", DEFAULT_JWT_SECRET)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(
        hours=int(os.getenv("JWT_ACCESS_TOKEN_EXPIRES_HOURS", "24"))
    )
    JWT_TOKEN_LOCATION = ["headers"]

    # One-time codes
    OTP_LENGTH = int(os.getenv("OTP_LENGTH", "6"))
    OTP_TTL_SECONDS = int(os.getenv("OTP_TTL_SECONDS", "600"))  # 10 minutes
    OTP_MAX_ATTEMPTS = int(os.getenv("OTP_MAX_ATTEMPTS", "5"))  # 0 disables the cap

    # Mail (SMTP). When disabled the code is only written to the log.
    MAIL_ENABLED = _flag("MAIL_ENABLED")
    MAIL_SERVER = os.getenv("MAIL_SERVER", "smtp.gmail.com")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "587"))
    MAIL_USE_TLS = os.getenv("MAIL_USE_TLS", "true").lower() == "true"
    MAIL_USE_SSL = os.getenv("MAIL_USE_SSL", "false").lower() == "true"
    MAIL_USERNAME = os.getenv("MAIL_USERNAME")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", MAIL_USERNAME)

    # Eligibility oracles
    TARGET_POLICY_ID = os.getenv("TARGET_POLICY_ID")
    BLOCKFROST_API_KEY = os.getenv("BLOCKFROST_API_KEY")
    BLOCKFROST_BASE_URL = os.getenv("BLOCKFROST_BASE_URL")
    KOIOS_BASE_URL = os.getenv("KOIOS_BASE_URL", "https://api.koios.rest/api/v1")
    NMKR_API_KEY = os.getenv("NMKR_API_KEY")
    NMKR_API_BASE_URL = os.getenv("NMKR_API_BASE_URL")
    ORACLE_TIMEOUT_SECONDS = float(os.getenv("ORACLE_TIMEOUT_SECONDS", "8"))

    # Test fixture only: never enable in production.
    ELIGIBILITY_DEMO_MODE = _flag("ELIGIBILITY_DEMO_MODE")
    ELIGIBILITY_DEMO_PATTERNS = _csv("ELIGIBILITY_DEMO_PATTERNS", "demo,test")

    # Roles
    ADMIN_EMAILS = [e.lower() for e in _csv("ADMIN_EMAILS")]
    ADMIN_WALLETS = _csv("ADMIN_WALLETS")

    # Used when a wallet client connects without sending an address (demo wallets)
    WALLET_DEMO_ADDRESS = os.getenv("WALLET_DEMO_ADDRESS")

    VOTING_OPTIONS = json.loads(os.getenv("VOTING_OPTIONS_JSON", "null") or "null") or DEFAULT_VOTING_OPTIONS

    SWAGGER = {"title": "NFT Voting API", "uiversion": 3}


class TestingConfig(Config):
    TESTING = True
    LOG_LEVEL = "DEBUG"
    STORAGE_BACKEND = "memory"
    JWT_SECRET_KEY = "test-jwt-secret-key-for-testing-only"
    MAIL_ENABLED = False
    MAIL_SUPPRESS_SEND = True
    TARGET_POLICY_ID = "policy123"
    BLOCKFROST_API_KEY = "bf-test-key"
    BLOCKFROST_BASE_URL = "https://blockfrost.test/api/v0"
    KOIOS_BASE_URL = "https://koios.test/api/v1"
    NMKR_API_KEY = "nmkr-test-key"
    NMKR_API_BASE_URL = "https://nmkr.test/v2"
    ORACLE_TIMEOUT_SECONDS = 1.0
    ELIGIBILITY_DEMO_MODE = False
    ADMIN_EMAILS = ["admin@example.com"]
    ADMIN_WALLETS = []
    WALLET_DEMO_ADDRESS = None
    VOTING_OPTIONS = [{**option, "baseline": 0} for option in DEFAULT_VOTING_OPTIONS]


class SQLTestingConfig(TestingConfig):
    STORAGE_BACKEND = "sql"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
