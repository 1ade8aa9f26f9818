"""
Configuration loading for the gateway.

Settings come from environment variables, optionally layered over a YAML
file named by ``GATEWAY_CONFIG_FILE``. Environment values win.
"""

import os
import logging
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional
from dataclasses import dataclass
from pathlib import Path

import yaml

from .errors import GatewayConfigurationError

logger = logging.getLogger(__name__)


class ApiFormat(str, Enum):
    """Wire formats the gateway can speak upstream."""
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


DEFAULT_ENDPOINTS = {
    ApiFormat.OPENAI: "https://api.openai.com/v1/chat/completions",
    ApiFormat.ANTHROPIC: "https://api.anthropic.com/v1/messages",
}

DEFAULT_ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_REQUEST_TIMEOUT = 60.0

# Environment variable -> config field
ENV_FIELDS = {
    "API_FORMAT": "api_format",
    "API_KEY": "api_key",
    "API_ENDPOINT": "api_endpoint",
    "ANTHROPIC_VERSION": "anthropic_version",
    "OPENAI_ORGANIZATION": "openai_organization",
    "DEFAULT_MODEL": "default_model",
    "DEFAULT_TEMPERATURE": "default_temperature",
    "DEFAULT_MAX_TOKENS": "default_max_tokens",
    "DESCRIPTION": "description",
    "REQUEST_TIMEOUT": "request_timeout",
}

PROXY_ENV_VARS = ("PROXY_URL", "HTTPS_PROXY", "HTTP_PROXY")


@dataclass(frozen=True)
class GatewayConfig:
    """Process-wide gateway configuration. Built once, never mutated."""
    api_key: str
    api_format: ApiFormat = ApiFormat.OPENAI
    api_endpoint: str = DEFAULT_ENDPOINTS[ApiFormat.OPENAI]
    anthropic_version: Optional[str] = DEFAULT_ANTHROPIC_VERSION
    openai_organization: Optional[str] = None
    default_model: Optional[str] = None
    default_temperature: Optional[float] = None
    default_max_tokens: Optional[int] = None
    description: Optional[str] = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    proxy_url: Optional[str] = None

    def __post_init__(self):
        if not self.api_key:
            raise GatewayConfigurationError("API_KEY environment variable is required")

    def __repr__(self) -> str:
        return (
            f"GatewayConfig(api_format={self.api_format.value!r}, "
            f"api_endpoint={self.api_endpoint!r}, api_key='***')"
        )


def load_config(
    environ: Optional[Mapping[str, str]] = None,
    config_path: Optional[str] = None,
) -> GatewayConfig:
    """
    Load gateway configuration.

    Args:
        environ: Environment mapping. Defaults to ``os.environ``.
        config_path: Optional YAML file. Defaults to ``GATEWAY_CONFIG_FILE``.

    Returns:
        Loaded configuration

    Raises:
        GatewayConfigurationError: If a setting is missing or malformed
    """
    if environ is None:
        environ = os.environ

    if config_path is None:
        config_path = environ.get("GATEWAY_CONFIG_FILE") or None

    data: Dict[str, Any] = {}
    if config_path:
        data.update(_load_file(config_path, environ))

    for env_var, field_name in ENV_FIELDS.items():
        value = environ.get(env_var)
        if value:
            data[field_name] = value

    for env_var in PROXY_ENV_VARS:
        value = environ.get(env_var)
        if value:
            data["proxy_url"] = value
            break

    return _parse_config(data)


def _load_file(config_path: str, environ: Mapping[str, str]) -> Dict[str, Any]:
    """Read a YAML config file."""
    path = Path(config_path)
    if not path.exists():
        raise GatewayConfigurationError(f"Config file not found: {config_path}")

    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise GatewayConfigurationError(f"Failed to parse config file {config_path}: {e}")

    if not isinstance(data, dict):
        raise GatewayConfigurationError(f"Config file {config_path} must contain a mapping")

    unknown = set(data) - set(ENV_FIELDS.values()) - {"proxy_url"}
    if unknown:
        logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")
        data = {k: v for k, v in data.items() if k not in unknown}

    # Expand environment variables in api_key
    api_key = data.get("api_key")
    if isinstance(api_key, str) and api_key.startswith("${") and api_key.endswith("}"):
        data["api_key"] = environ.get(api_key[2:-1], "")

    logger.info(f"Loaded gateway config file {config_path}")
    return {k: v for k, v in data.items() if v is not None and v != ""}


def _parse_config(data: Dict[str, Any]) -> GatewayConfig:
    """Parse a merged settings dictionary."""
    raw_format = str(data.get("api_format", ApiFormat.OPENAI.value)).lower()
    try:
        api_format = ApiFormat(raw_format)
    except ValueError:
        raise GatewayConfigurationError(
            f"Unsupported API_FORMAT {raw_format!r}, expected one of: "
            f"{', '.join(f.value for f in ApiFormat)}"
        )

    return GatewayConfig(
        api_format=api_format,
        api_key=_optional(data, "api_key", str) or "",
        api_endpoint=_optional(data, "api_endpoint", str) or DEFAULT_ENDPOINTS[api_format],
        anthropic_version=_optional(data, "anthropic_version", str) or DEFAULT_ANTHROPIC_VERSION,
        openai_organization=_optional(data, "openai_organization", str),
        default_model=_optional(data, "default_model", str),
        default_temperature=_optional(data, "default_temperature", float),
        default_max_tokens=_optional(data, "default_max_tokens", int),
        description=_optional(data, "description", str),
        request_timeout=_timeout(data),
        proxy_url=_optional(data, "proxy_url", str),
    )


def _timeout(data: Dict[str, Any]) -> float:
    """Request timeout in seconds; must be positive."""
    timeout = _optional(data, "request_timeout", float)
    if timeout is None:
        return DEFAULT_REQUEST_TIMEOUT
    if timeout <= 0:
        raise GatewayConfigurationError(f"Invalid value for request_timeout: {timeout!r}")
    return timeout


def _optional(data: Dict[str, Any], key: str, cast: Callable[[Any], Any]) -> Any:
    """Fetch and convert an optional setting."""
    value = data.get(key)
    if value is None:
        return None
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise GatewayConfigurationError(f"Invalid value for {key}: {value!r}")
