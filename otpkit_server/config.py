"""
config.py - settings for the otpkit HTTP API.

Values come from environment variables (a local .env file is loaded first).
"""

import os

from dotenv import load_dotenv

load_dotenv()

_BOOL_TRUE = {"1", "true", "yes", "on"}


def _env_bool(key: str, default: bool) -> bool:
    raw = os.environ.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in _BOOL_TRUE


def _env_int(key: str, default: int) -> int:
    raw = os.environ.get(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(key: str, default: str) -> list:
    raw = os.environ.get(key, default)
    return [segment.strip() for segment in raw.split(",") if segment.strip()]


class Config:
    HOST = os.environ.get("OTPKIT_HOST", "127.0.0.1")
    PORT = _env_int("OTPKIT_PORT", 5000)
    DEBUG = _env_bool("OTPKIT_DEBUG", False)
    LOG_LEVEL = os.environ.get("OTPKIT_LOG_LEVEL", "INFO").upper()

    # Cross-Origin Resource Sharing, "*" allows any frontend
    CORS_ORIGINS = _env_list("OTPKIT_CORS_ORIGINS", "*")

    # Default verification windows when a request does not send one
    TOTP_WINDOW = _env_int("OTPKIT_TOTP_WINDOW", 1)
    HOTP_WINDOW = _env_int("OTPKIT_HOTP_WINDOW", 1)

    # Upper bounds on client-supplied work per request
    MAX_WINDOW = _env_int("OTPKIT_MAX_WINDOW", 10)
    MAX_SECRET_BITS = _env_int("OTPKIT_MAX_SECRET_BITS", 1024)

    # Zero-argument callable returning unix seconds; None means time.time
    OTP_CLOCK = None


class TestConfig(Config):
    __test__ = False  # not a pytest class

    TESTING = True
    DEBUG = False
    LOG_LEVEL = "DEBUG"
