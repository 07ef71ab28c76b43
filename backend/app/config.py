from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

from dotenv import load_dotenv

# purpose: collect environment-driven runtime settings in one place
# status: active

load_dotenv()

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:3000",
)


class ConfigError(RuntimeError):
    """Raised when required settings are missing at startup."""


def _env(key: str, default: str = "") -> str:
    value = os.getenv(key, "").strip()
    return value or default


def _database_url() -> str:
    explicit = _env("DATABASE_URL")
    if explicit:
        return explicit
    host = _env("DB_HOST")
    if not host:
        return "sqlite:///./archive.db"
    user = _env("DB_USER", "postgres")
    password = _env("DB_PASSWORD")
    credentials = f"{user}:{password}" if password else user
    return (
        f"postgresql+psycopg2://{credentials}@{host}:{_env('DB_PORT', '5432')}"
        f"/{_env('DB_NAME', 'eurofines_db')}?sslmode={_env('DB_SSLMODE', 'disable')}"
    )


@dataclass(frozen=True)
class Settings:
    database_url: str
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    token_expire_minutes: int = 60 * 24
    cors_origins: tuple[str, ...] = field(default=DEFAULT_CORS_ORIGINS)
    log_level: str = "INFO"
    sentry_dsn: str | None = None
    testing: bool = False

    def validate(self) -> "Settings":
        if not self.database_url:
            raise ConfigError("DATABASE_URL (or DB_HOST) must be set")
        if not self.jwt_secret:
            raise ConfigError("JWT_SECRET must be set")
        if self.token_expire_minutes <= 0:
            raise ConfigError("TOKEN_EXPIRE_MINUTES must be positive")
        return self


def load_settings() -> Settings:
    origins = _env("CORS_ORIGINS")
    try:
        expire = int(_env("TOKEN_EXPIRE_MINUTES", "1440"))
    except ValueError as exc:
        raise ConfigError("TOKEN_EXPIRE_MINUTES must be an integer") from exc
    return Settings(
        database_url=_database_url(),
        jwt_secret=_env("JWT_SECRET") or _env("SECRET_KEY"),
        token_expire_minutes=expire,
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()) if origins else DEFAULT_CORS_ORIGINS,
        log_level=_env("LOG_LEVEL", "INFO").upper(),
        sentry_dsn=_env("SENTRY_DSN") or None,
        testing=_env("TESTING") == "1",
    )


@lru_cache
def get_settings() -> Settings:
    return load_settings()
