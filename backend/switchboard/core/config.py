# switchboard/core/config.py

import os
from typing import List, Optional

from switchboard.core.errors import ConfigurationError


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Runtime configuration, read from the environment once at import."""

    def __init__(self) -> None:
        # =========================
        # DATABASE
        # =========================
        self.db_user = os.getenv("DB_USER", "switchboard_user")
        self.db_pass = os.getenv("DB_PASS", "switchboard")
        self.db_host = os.getenv("DB_HOST", "localhost")
        self.db_port = os.getenv("DB_PORT", "5432")
        self.db_name = os.getenv("DB_NAME", "switchboard")
        self._database_url = os.getenv("DATABASE_URL")

        # =========================
        # AUTH
        # =========================
        self.jwt_secret: Optional[str] = os.getenv("JWT_SECRET") or None
        self.jwt_algorithm = os.getenv("JWT_ALGORITHM", "HS256")
        self.auth_cookie_name = os.getenv("AUTH_COOKIE_NAME", "jwt")

        # =========================
        # TRANSPORT
        # =========================
        self.allowed_origins: List[str] = [
            origin.strip()
            for origin in os.getenv("ALLOWED_ORIGINS", "http://localhost:3000").split(",")
            if origin.strip()
        ]
        self.send_rate_limit = os.getenv("SEND_RATE_LIMIT", "30/minute")
        self.rate_limit_enabled = _as_bool(os.getenv("RATE_LIMIT_ENABLED", "true"))
        # Upper bound on a single real-time push before the connection is dropped
        self.fanout_timeout = float(os.getenv("FANOUT_TIMEOUT_SECONDS", "5"))

        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def database_url(self) -> str:
        if self._database_url:
            return self._database_url
        return (
            f"postgresql://{self.db_user}:{self.db_pass}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    def require_jwt_secret(self) -> str:
        """Return the token signing secret or fail hard if it is not configured."""
        if not self.jwt_secret:
            raise ConfigurationError("JWT_SECRET not defined in the environment")
        return self.jwt_secret

    def is_origin_allowed(self, origin: Optional[str]) -> bool:
        # Non-browser clients send no Origin header at all
        if origin is None:
            return True
        return "*" in self.allowed_origins or origin in self.allowed_origins


settings = Settings()
