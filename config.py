import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def normalize_database_url(url):
    # Heroku-style URLs still use the legacy scheme SQLAlchemy dropped
    if url and url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


def split_origins(value):
    return [origin.strip() for origin in (value or "").split(",") if origin.strip()]


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")

    # Shopify API credentials
    SHOPIFY_API_KEY = os.getenv("SHOPIFY_API_KEY")
    SHOPIFY_API_SECRET = os.getenv("SHOPIFY_API_SECRET")

    SQLALCHEMY_DATABASE_URI = normalize_database_url(
        os.getenv("DATABASE_URL", "sqlite:///onboarding.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    CORS_ORIGINS = split_origins(os.getenv("CORS_ORIGINS"))

    DISPLAY_TIMEZONE = os.getenv("DISPLAY_TIMEZONE", "UTC")

    LOG_FILE = os.getenv("LOG_FILE", "onboarding.log")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def configure_logging(log_file, level="INFO"):
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
    )
