from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    analysis_cache_enabled: bool
    analysis_cache_ttl_s: int
    resume_store_dir: str


def load_settings() -> Settings:
    return Settings(
        api_key=_get_env("API_KEY"),
        rate_limit=_get_env("RATE_LIMIT", "30/minute") or "30/minute",
        rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
        log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
        sentry_dsn=_get_env("SENTRY_DSN"),
        cors_allowed_origins=_get_env_list(
            "CORS_ALLOWED_ORIGINS",
            [
                "http://localhost:3000",
                "http://127.0.0.1:3000",
            ],
        ),
        cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
        cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
        analysis_cache_enabled=_get_env_bool("ANALYSIS_CACHE_ENABLED", True),
        analysis_cache_ttl_s=max(1, _get_env_int("ANALYSIS_CACHE_TTL_S", 600)),
        resume_store_dir=_get_env("RESUME_STORE_DIR", "data/resumes") or "data/resumes",
    )


settings = load_settings()
