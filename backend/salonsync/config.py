# backend/salonsync/config.py
from __future__ import annotations
import os


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Also keys the HMAC signature printed on the terminal QR code
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL",
        "sqlite:///salonsync.sqlite3",
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Terminal tokens
    CLOCK_TOKEN_TTL_MINUTES = int(os.environ.get("CLOCK_TOKEN_TTL_MINUTES", "20"))
    CLOCK_TOKEN_REQUIRE_SIGNATURE = _env_flag("CLOCK_TOKEN_REQUIRE_SIGNATURE", True)

    # bcrypt cost for PIN hashes
    PIN_HASH_ROUNDS = int(os.environ.get("PIN_HASH_ROUNDS", "12"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Front-end dev servers allowed to call the API from the browser
    CORS_ORIGINS = tuple(
        o.strip()
        for o in os.environ.get(
            "CORS_ORIGINS",
            "http://localhost:5173,http://127.0.0.1:5173,http://localhost:4173,http://127.0.0.1:4173",
        ).split(",")
        if o.strip()
    )


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    PIN_HASH_ROUNDS = 4
    LOG_LEVEL = "DEBUG"
