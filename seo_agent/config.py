"""Settings for API keys, model defaults and runtime options.

Settings are read once from environment variables (``.env`` is loaded by the
application entry point) and then passed explicitly into the provider
adapters. Business logic never looks up the environment on its own.

SECURITY:
- ``Settings.snapshot()`` reports whether a service is configured, never the key
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


# Environment variable mapping (first match wins)
ENV_VAR_MAP: dict[str, tuple[str, ...]] = {
    "openai": ("OPENAI_API_KEY",),
    "gemini": ("GEMINI_API_KEY", "GOOGLE_AI_API_KEY"),
    "anthropic": ("ANTHROPIC_API_KEY",),
}

# Default model environment variables
DEFAULT_MODEL_ENV_MAP = {
    "openai": "OPENAI_DEFAULT_MODEL",
    "gemini": "GEMINI_DEFAULT_MODEL",
    "anthropic": "ANTHROPIC_DEFAULT_MODEL",
}

DEFAULT_DATAFORSEO_BASE_URL = "https://api.dataforseo.com/v3"
DEFAULT_REQUEST_TIMEOUT = 60.0


@dataclass
class ServiceSettings:
    """Settings for a single external service."""

    service: str
    api_key: str | None = None
    default_model: str | None = None
    source: str = "none"  # "env", "override", "none"

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


@dataclass
class DataForSEOSettings:
    """Credentials for the DataForSEO research provider."""

    login: str | None = None
    password: str | None = None
    base_url: str = DEFAULT_DATAFORSEO_BASE_URL

    @property
    def is_configured(self) -> bool:
        return bool(self.login and self.password)


@dataclass
class Settings:
    """Application settings."""

    llm: dict[str, ServiceSettings] = field(default_factory=dict)
    dataforseo: DataForSEOSettings = field(default_factory=DataForSEOSettings)
    default_provider: str = "openai"
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    log_level: str = "INFO"
    log_format: str = "text"
    cors_origins: list[str] = field(default_factory=lambda: ["*"])

    def llm_settings(self, provider: str) -> ServiceSettings:
        """Return settings for an LLM provider (unconfigured if unknown)."""
        provider = provider.lower()
        return self.llm.get(provider) or ServiceSettings(service=provider)

    def snapshot(self) -> dict[str, Any]:
        """Return a serialisable view of which services are configured."""
        return {
            "dataforseo": self.dataforseo.is_configured,
            **{name: service.is_configured for name, service in self.llm.items()},
        }


def _first_env(env: Mapping[str, str], names: tuple[str, ...]) -> str | None:
    for name in names:
        value = env.get(name)
        if value:
            return value
    return None


def _parse_float(value: str | None, default: float) -> float:
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Unrecognised float value '%s', falling back to default %s", value, default)
        return default


def _parse_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    items = [item.strip() for item in value.split(",") if item.strip()]
    return items or default


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Load settings from environment variables.

    Args:
        env: Mapping to read from (defaults to ``os.environ``)

    Returns:
        Settings instance
    """
    env = os.environ if env is None else env

    llm: dict[str, ServiceSettings] = {}
    for service, env_vars in ENV_VAR_MAP.items():
        api_key = _first_env(env, env_vars)
        llm[service] = ServiceSettings(
            service=service,
            api_key=api_key,
            default_model=env.get(DEFAULT_MODEL_ENV_MAP[service]) or None,
            source="env" if api_key else "none",
        )

    dataforseo = DataForSEOSettings(
        login=env.get("DATAFORSEO_LOGIN") or None,
        password=env.get("DATAFORSEO_PASSWORD") or None,
        base_url=env.get("DATAFORSEO_BASE_URL") or DEFAULT_DATAFORSEO_BASE_URL,
    )

    settings = Settings(
        llm=llm,
        dataforseo=dataforseo,
        default_provider=(env.get("DEFAULT_LLM_PROVIDER") or "openai").lower(),
        request_timeout=_parse_float(env.get("REQUEST_TIMEOUT"), DEFAULT_REQUEST_TIMEOUT),
        log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        log_format=(env.get("LOG_FORMAT") or "text").lower(),
        cors_origins=_parse_list(env.get("CORS_ORIGINS"), ["*"]),
    )

    logger.debug("Loaded settings: %s", settings.snapshot())
    return settings


__all__ = [
    "DataForSEOSettings",
    "ServiceSettings",
    "Settings",
    "load_settings",
]
