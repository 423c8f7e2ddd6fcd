"""Application configuration module."""

import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


def _first_env(*names: str, default: str | None = None) -> str | None:
    for name in names:
        value = os.getenv(name)
        if value:
            return value
    return default


class Config:
    """Base configuration for the Flask application."""

    # Core
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
    JWT_SECRET_KEY = _first_env("JWT_SECRET_KEY", "JWT_SECRET", default=SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(
        seconds=int(os.getenv("JWT_ACCESS_TOKEN_EXPIRES", "3600"))
    )
    JWT_TOKEN_LOCATION = ["headers"]
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    PORT = int(os.getenv("PORT", "3000"))

    # Account store
    SUPABASE_URL = _first_env("SUPABASE_URL", "VITE_SUPABASE_URL")
    SUPABASE_KEY = _first_env("SUPABASE_KEY", "VITE_SUPABASE_ANON_KEY")
    SUPABASE_TABLE = os.getenv("SUPABASE_TABLE", "users")
    STORE_TIMEOUT = float(os.getenv("STORE_TIMEOUT", "10"))
    ACCOUNT_STORE = os.getenv("ACCOUNT_STORE") or ("rest" if SUPABASE_URL else "sql")
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///app.db")
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Credentials
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")
    WALLET_SIGNATURE_SCHEME = os.getenv("WALLET_SIGNATURE_SCHEME", "none")

    # CORS
    _raw_origins = os.getenv("ORIGINS", "*")
    if _raw_origins.strip() == "*":
        CORS_ORIGINS = "*"
    else:
        CORS_ORIGINS = [o.strip() for o in _raw_origins.split(",") if o.strip()]
