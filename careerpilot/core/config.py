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


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


def _get_env_mapping(name: str) -> dict[str, str]:
    """Parse ``key=value,key=value`` pairs, e.g. ``simulation=gemini,roadmap=openai``."""
    mapping: dict[str, str] = {}
    for item in _get_env_list(name, []):
        key, sep, value = item.partition("=")
        if not sep:
            continue
        key = key.strip().lower()
        value = value.strip().lower()
        if key and value:
            mapping[key] = value
    return mapping


@dataclass(frozen=True)
class Settings:
    api_key: str | None
    rate_limit: str
    evaluation_rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None
    cors_allow_credentials: bool
    ai_provider: str
    ai_mode_providers: dict[str, str]
    ai_timeout_s: float
    ai_max_retries: int
    ai_temperature: float
    openai_api_key: str | None
    openai_model: str
    openai_base_url: str
    groq_api_key: str | None
    groq_model: str
    gemini_api_key: str | None
    gemini_model: str
    anthropic_api_key: str | None
    claude_model: str
    github_api_url: str
    github_token: str | None
    github_timeout_s: float
    result_cache_capacity: int
    analytics_enabled: bool
    analytics_db_path: str
    analytics_retention_days: int


settings = Settings(
    api_key=_get_env("API_KEY"),
    rate_limit=_get_env("RATE_LIMIT", "30/minute") or "30/minute",
    evaluation_rate_limit=_get_env("EVALUATION_RATE_LIMIT", "10/minute") or "10/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
        ],
    ),
    cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
    cors_allow_credentials=_get_env_bool("CORS_ALLOW_CREDENTIALS", False),
    ai_provider=(_get_env("AI_PROVIDER", "groq") or "groq").strip().lower(),
    ai_mode_providers=_get_env_mapping("AI_MODE_PROVIDERS"),
    ai_timeout_s=_get_env_float("AI_TIMEOUT_S", 30.0),
    ai_max_retries=max(0, _get_env_int("AI_MAX_RETRIES", 1)),
    ai_temperature=_get_env_float("AI_TEMPERATURE", 0.2),
    openai_api_key=_get_env("OPENAI_API_KEY"),
    openai_model=_get_env("OPENAI_MODEL", "gpt-4o-mini") or "gpt-4o-mini",
    openai_base_url=(_get_env("OPENAI_BASE_URL", "https://api.openai.com/v1") or "").rstrip("/"),
    groq_api_key=_get_env("GROQ_API_KEY"),
    groq_model=_get_env("GROQ_MODEL", "llama-3.3-70b-versatile") or "llama-3.3-70b-versatile",
    gemini_api_key=_get_env("GEMINI_API_KEY"),
    gemini_model=_get_env("GEMINI_MODEL", "gemini-2.0-flash") or "gemini-2.0-flash",
    anthropic_api_key=_get_env("ANTHROPIC_API_KEY"),
    claude_model=_get_env("CLAUDE_MODEL", "claude-3-5-haiku-latest") or "claude-3-5-haiku-latest",
    github_api_url=(_get_env("GITHUB_API_URL", "https://api.github.com") or "").rstrip("/"),
    github_token=_get_env("GITHUB_TOKEN"),
    github_timeout_s=_get_env_float("GITHUB_TIMEOUT_S", 10.0),
    result_cache_capacity=max(1, _get_env_int("RESULT_CACHE_CAPACITY", 100)),
    analytics_enabled=_get_env_bool("ANALYTICS_ENABLED", True),
    analytics_db_path=_get_env("ANALYTICS_DB_PATH", "data/analytics.db") or "data/analytics.db",
    analytics_retention_days=_get_env_int("ANALYTICS_RETENTION_DAYS", 90),
)
