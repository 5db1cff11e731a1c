"""
Environment-aware configuration.
Values come from the process environment, with .env loaded if present.
JWT_SECRET has no default: starting without one is a configuration error.
"""
import os
from dotenv import load_dotenv
from datetime import timedelta

from utils.tokens import ACCESS_TOKEN_LIFETIME, REFRESH_TOKEN_LIFETIME

load_dotenv()  # Read .env if present


class ConfigurationError(RuntimeError):
    """Raised at startup when required settings are missing or invalid."""


class BaseConfig:
    DEBUG = False
    TESTING = False
    APP_ENV = os.getenv("APP_ENV", "dev")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    # CORS: comma-separated list of origins, or '*'
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    JWT_SECRET = os.getenv("JWT_SECRET")
    ACCESS_TOKEN_EXPIRES = ACCESS_TOKEN_LIFETIME
    REFRESH_TOKEN_EXPIRES = REFRESH_TOKEN_LIFETIME
    REFRESH_COOKIE_NAME = "refresh-tok"
    REFRESH_COOKIE_PATH = "/api/tokens/refresh"

    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///gba-files.db")
    BLOB_STORAGE_ROOT = os.getenv("BLOB_STORAGE_ROOT", "storage")
    ROM_EXTENSIONS = (".gba", ".gbc", ".gb", ".zip", ".7z")
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_UPLOAD_BYTES", str(64 * 1024 * 1024)))


class DevelopmentConfig(BaseConfig):
    DEBUG = True


class ProductionConfig(BaseConfig):
    DEBUG = False


class TestingConfig(BaseConfig):
    TESTING = True
    DATABASE_URL = "sqlite://"
    LOG_LEVEL = "DEBUG"


def get_config(name: str | None):
    """
    Select config class.
    - If name is provided, choose by name.
    - Else choose based on APP_ENV (dev/prod/test).
    """
    env = (name or os.getenv("APP_ENV", "dev")).lower()
    if env in ["prod", "production"]:
        return ProductionConfig
    if env in ["test", "testing"]:
        return TestingConfig
    return DevelopmentConfig


def validate_config(config) -> None:
    """Fail fast on settings the app cannot run without."""
    secret = config.get("JWT_SECRET")
    if not secret or not str(secret).strip():
        raise ConfigurationError("JWT_SECRET must be set to a non-empty value")
    if not isinstance(config.get("ACCESS_TOKEN_EXPIRES"), timedelta):
        raise ConfigurationError("ACCESS_TOKEN_EXPIRES must be a timedelta")
    if not isinstance(config.get("REFRESH_TOKEN_EXPIRES"), timedelta):
        raise ConfigurationError("REFRESH_TOKEN_EXPIRES must be a timedelta")
    if not config.get("DATABASE_URL"):
        raise ConfigurationError("DATABASE_URL must be set")
