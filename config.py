"""
Application settings

Values come from the environment (a local .env file is loaded first).
DATABASE_URL and JWT_SECRET are mandatory; the process exits without them.
"""

import logging
import os
import re
import sys
from datetime import timedelta
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

REQUIRED_ENV_VARS = ("DATABASE_URL", "JWT_SECRET")

_DURATION_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([a-z]*)\s*$", re.IGNORECASE)
_DURATION_UNITS = {
    "ms": 0.001, "msec": 0.001, "msecs": 0.001, "millisecond": 0.001, "milliseconds": 0.001,
    "": 1, "s": 1, "sec": 1, "secs": 1, "second": 1, "seconds": 1,
    "m": 60, "min": 60, "mins": 60, "minute": 60, "minutes": 60,
    "h": 3600, "hr": 3600, "hrs": 3600, "hour": 3600, "hours": 3600,
    "d": 86400, "day": 86400, "days": 86400,
    "w": 604800, "week": 604800, "weeks": 604800,
    "y": 31557600, "yr": 31557600, "yrs": 31557600, "year": 31557600, "years": 31557600,
}


class Settings(BaseModel):
    database_url: str
    database_name: str = "sayad_alsamak"
    jwt_secret: str
    jwt_expires_in: str = "7d"
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    cors_origin: str = "*"
    port: int = 5000
    max_file_size: int = Field(10 * 1024 * 1024, ge=1)
    environment: str = "development"
    log_level: str = "INFO"
    mongo_transactions: bool = True
    strict_order_transitions: bool = False

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origin.split(",") if origin.strip()]

    @property
    def token_lifetime(self) -> timedelta:
        return parse_duration(self.jwt_expires_in)


def parse_duration(value: str) -> timedelta:
    """Parse jsonwebtoken-style lifetimes such as "7d", "2 days", "1.5h", "1w" or "3600"."""
    match = _DURATION_RE.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    seconds = _DURATION_UNITS.get(unit.lower())
    if seconds is None:
        raise ValueError(f"Invalid duration unit: {value!r}")
    return timedelta(seconds=float(amount) * seconds)


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    load_dotenv()

    missing = [name for name in REQUIRED_ENV_VARS if not os.getenv(name)]
    if missing:
        for name in missing:
            logger.critical("Missing required environment variable: %s", name)
        sys.exit(1)

    expires_in = os.getenv("JWT_EXPIRES_IN") or "7d"
    try:
        parse_duration(expires_in)
    except ValueError:
        logger.critical("Invalid JWT_EXPIRES_IN value: %r", expires_in)
        sys.exit(1)

    return Settings(
        database_url=os.environ["DATABASE_URL"],
        database_name=os.getenv("DATABASE_NAME") or "sayad_alsamak",
        jwt_secret=os.environ["JWT_SECRET"],
        jwt_expires_in=expires_in,
        cloudinary_cloud_name=os.getenv("CLOUDINARY_CLOUD_NAME", ""),
        cloudinary_api_key=os.getenv("CLOUDINARY_API_KEY", ""),
        cloudinary_api_secret=os.getenv("CLOUDINARY_API_SECRET", ""),
        cors_origin=os.getenv("CORS_ORIGIN") or "*",
        port=int(os.getenv("PORT", 5000)),
        max_file_size=int(os.getenv("MAX_FILE_SIZE", 10 * 1024 * 1024)),
        environment=os.getenv("ENVIRONMENT") or "development",
        log_level=os.getenv("LOG_LEVEL") or "INFO",
        mongo_transactions=_env_bool("MONGO_TRANSACTIONS", True),
        strict_order_transitions=_env_bool("STRICT_ORDER_TRANSITIONS", False),
    )
