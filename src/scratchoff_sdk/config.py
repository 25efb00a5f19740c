from __future__ import annotations

import os
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

ENV_PREFIX = "SCRATCHOFF_"
DEFAULT_TIMEOUT_SECONDS = 15.0
MAX_CONNECT_TIMEOUT_SECONDS = 5.0

# ClientConfig field -> environment variable it is read from
ENV_VARS: dict[str, str] = {
    "api_base_url": f"{ENV_PREFIX}API_BASE_URL",
    "connect_timeout_seconds": f"{ENV_PREFIX}CONNECT_TIMEOUT_SECONDS",
    "read_timeout_seconds": f"{ENV_PREFIX}READ_TIMEOUT_SECONDS",
    "retries": f"{ENV_PREFIX}RETRIES",
    "retry_backoff_seconds": f"{ENV_PREFIX}RETRY_BACKOFF_SECONDS",
    "max_connections": f"{ENV_PREFIX}MAX_CONNECTIONS",
    "verify_ssl": f"{ENV_PREFIX}VERIFY_SSL",
}

_OVERALL_TIMEOUT = TypeAdapter(float)


class ConfigError(ValueError):
    pass


class ClientConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    env_name: str = "dev"
    api_base_url: str = Field(min_length=1)
    connect_timeout_seconds: float = Field(default=MAX_CONNECT_TIMEOUT_SECONDS, gt=0)
    read_timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    retries: int = Field(default=2, ge=0)
    retry_backoff_seconds: float = Field(default=1.0, ge=0)
    max_connections: int = Field(default=10, ge=1)
    verify_ssl: bool = True

    @field_validator("api_base_url", mode="before")
    @classmethod
    def _trim_base_url(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().rstrip("/")
        return value


def _invalid(env_var: str, message: str, value: Any) -> ConfigError:
    return ConfigError(f"Invalid {env_var}: {message}, got {value!r}")


def _overall_timeout() -> float:
    env_var = f"{ENV_PREFIX}TIMEOUT_SECONDS"
    raw = os.getenv(env_var)
    if not raw:
        return DEFAULT_TIMEOUT_SECONDS
    try:
        value = _OVERALL_TIMEOUT.validate_python(raw)
    except PydanticValidationError as exc:
        raise _invalid(env_var, exc.errors()[0]["msg"], raw) from exc
    if value <= 0:
        raise _invalid(env_var, "expected > 0", raw)
    return value


def _base_url(env_name: str) -> str:
    profile_var = f"{ENV_VARS['api_base_url']}_{env_name.upper()}"
    return (os.getenv(profile_var) or "").strip() or (os.getenv(ENV_VARS["api_base_url"]) or "").strip()


def load_config(env_file: str | None = None) -> ClientConfig:
    """Build a :class:`ClientConfig` from ``SCRATCHOFF_*`` variables.

    ``env_file`` is loaded first without overriding variables already set.
    A per-environment ``SCRATCHOFF_API_BASE_URL_<ENV>`` wins over the plain
    base URL. ``SCRATCHOFF_TIMEOUT_SECONDS`` seeds the connect timeout
    (capped at 5s) and the read timeout unless those are set explicitly.
    """
    load_dotenv(env_file)

    env_name = (os.getenv(f"{ENV_PREFIX}ENV") or "dev").strip()
    overall = _overall_timeout()

    values: dict[str, Any] = {
        field_name: os.environ[env_var] for field_name, env_var in ENV_VARS.items() if os.getenv(env_var)
    }
    values["env_name"] = env_name
    values["api_base_url"] = _base_url(env_name)
    values.setdefault("connect_timeout_seconds", min(overall, MAX_CONNECT_TIMEOUT_SECONDS))
    values.setdefault("read_timeout_seconds", overall)

    try:
        return ClientConfig.model_validate(values)
    except PydanticValidationError as exc:
        error = exc.errors()[0]
        field_name = str(error["loc"][0]) if error["loc"] else ""
        raise _invalid(ENV_VARS.get(field_name, field_name), error["msg"], error.get("input")) from exc
