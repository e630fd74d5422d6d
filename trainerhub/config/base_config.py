"""
Base configuration module with common settings.
"""
import os


class BaseConfig:
    """Base configuration class with common settings."""

    # Flask settings
    SECRET_KEY = os.getenv("SECRET_KEY", "default-dev-key-not-for-production")
    DEBUG = False
    TESTING = False
    # Lets flask-jwt-extended's error handlers answer 401/422 behind flask-restx
    PROPAGATE_EXCEPTIONS = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Database settings
    DB_ENGINE = os.getenv("DB_ENGINE", "mysql")
    DB_USER = os.getenv("DB_USER", "user")
    DB_PASSWORD = os.getenv("DB_PASSWORD", "password")
    DB_HOST = os.getenv("DB_HOST", "localhost")
    DB_PORT = os.getenv("DB_PORT", "3306")
    DB_NAME = os.getenv("DB_NAME", "trainerhub_db")

    if DB_ENGINE == "mysql":
        SQLALCHEMY_DATABASE_URI = f"mysql+pymysql://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    else:
        SQLALCHEMY_DATABASE_URI = f"{DB_ENGINE}://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT settings
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "default-jwt-key-not-for-production")
    JWT_ACCESS_TOKEN_EXPIRES = int(os.getenv("JWT_ACCESS_TOKEN_EXPIRES", 3600))  # 1 hour
    JWT_ERROR_MESSAGE_KEY = "message"

    # Subscription settings
    SUBSCRIPTION_WRITE_RETRIES = int(os.getenv("SUBSCRIPTION_WRITE_RETRIES", 3))
    EXPIRING_WINDOW_DAYS = int(os.getenv("EXPIRING_WINDOW_DAYS", 7))

    # API settings
    API_TITLE = "TrainerHub Subscriptions API"
    API_VERSION = "1.0"
    API_DESCRIPTION = "Plan catalog and trainer subscription management for platform administrators"
    API_PREFIX = "/api"
