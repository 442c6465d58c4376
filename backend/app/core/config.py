# backend/app/core/config.py

from __future__ import annotations

from typing import Optional
from urllib.parse import urlsplit, urlunsplit, parse_qsl, urlencode

from pydantic_settings import BaseSettings, SettingsConfigDict

_PLACEHOLDER_SECRETS = {"dev-secret-change-me", "dev-assertion-secret-change-me"}


def _strip_asyncpg_unsupported_params(url: str) -> str:
    """
    asyncpg rejects sslmode / channel_binding as connect kwargs, so drop them
    from the query string before SQLAlchemy forwards them to asyncpg.connect().
    """
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = parse_qsl(parts.query, keep_blank_values=True)
    kept = [(k, v) for (k, v) in params if k not in {"sslmode", "channel_binding"}]
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(kept, doseq=True), parts.fragment))


def _check_secret(name: str, value: str) -> None:
    v = (value or "").strip()
    if not v or v in _PLACEHOLDER_SECRETS:
        raise ValueError(f"{name} must be set to a strong value in staging/production.")
    if len(v) < 32:
        raise ValueError(f"{name} is too short; use at least 32 characters in staging/production.")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # -----------------------------
    # Environment
    # -----------------------------
    # Use: development | staging | production
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    SERVICE_NAME: str = "sitehub"

    # -----------------------------
    # DB
    # -----------------------------
    DATABASE_URL_ASYNC: str
    DATABASE_URL_SYNC: str = ""

    # -----------------------------
    # Session tokens
    # -----------------------------
    JWT_SECRET: str = "dev-secret-change-me"
    JWT_ALGORITHM: str = "HS256"
    SESSION_MAX_AGE_HOURS: int = 48

    # -----------------------------
    # OAuth gateway assertions
    # -----------------------------
    OAUTH_ASSERTION_SECRET: str = "dev-assertion-secret-change-me"
    OAUTH_ASSERTION_AUDIENCE: str = "sitehub"

    # -----------------------------
    # Invites
    # -----------------------------
    INVITE_EXPIRY_DAYS: int = 30

    # -----------------------------
    # Upstream APIs
    # -----------------------------
    YOUTUBE_API_KEY: Optional[str] = None
    YOUTUBE_API_BASE_URL: str = "https://www.googleapis.com/youtube/v3"
    UPSTREAM_TIMEOUT_SECONDS: float = 10.0
    STAT_TTL_MINUTES: int = 10

    # -----------------------------
    # Media object storage (uploads happen elsewhere; the API only deletes)
    # -----------------------------
    MEDIA_STORAGE_URL: Optional[str] = None
    MEDIA_STORAGE_TOKEN: Optional[str] = None

    # -----------------------------
    # CORS (authenticated API; /api/public is always open)
    # -----------------------------
    CORS_ALLOWED_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    @property
    def DATABASE_URL_ASYNC_CLEAN(self) -> str:
        return _strip_asyncpg_unsupported_params(self.DATABASE_URL_ASYNC)

    def model_post_init(self, __context) -> None:  # pydantic v2 hook
        env = (self.ENVIRONMENT or "").strip().lower()

        if env in {"staging", "production"}:
            _check_secret("JWT_SECRET", self.JWT_SECRET)
            _check_secret("OAUTH_ASSERTION_SECRET", self.OAUTH_ASSERTION_SECRET)

        if self.JWT_ALGORITHM not in {"HS256"}:
            raise ValueError(f"Unsupported JWT_ALGORITHM={self.JWT_ALGORITHM!r}. Allowed: HS256")
        if self.SESSION_MAX_AGE_HOURS <= 0:
            raise ValueError("SESSION_MAX_AGE_HOURS must be positive.")


settings = Settings()
