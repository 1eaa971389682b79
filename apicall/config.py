"""
Configuration loader for apicall.

Loads client settings from a YAML file with environment variable substitution,
and builds the httpx client that ApiCall sends requests through.

Example apicall.yaml:
    client:
      base_url: ${API_BASE_URL:https://api.example.com}
      timeout: 10
      headers:
        Authorization: Bearer ${API_TOKEN}
    logging:
      level: DEBUG
"""

import logging
import os
import re
import sys
from pathlib import Path

import httpx
import yaml

from .errors import ConfigurationError
from .request import strip_nulls

logger = logging.getLogger(__name__)

# ${VAR} or ${VAR:default}; the default may itself contain colons (URLs)
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::([^}]*))?\}")

# Handler installed by configure_logging, replaced on repeated calls
_log_handler: logging.Handler | None = None


def load_config(config_path: str = None) -> dict:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config file. Defaults to $APICALL_CONFIG,
            then apicall.yaml in current dir.

    Returns:
        Configuration dict with env vars substituted, merged over defaults.

    Raises:
        ConfigurationError: The client section has an unusable value.
    """
    if config_path is None:
        config_path = os.environ.get("APICALL_CONFIG", "apicall.yaml")

    path = Path(config_path)
    if not path.exists():
        logger.debug("No config file at %s, using defaults", path)
        return _default_config()

    with open(path) as f:
        content = _substitute_env_vars(f.read())

    config = yaml.safe_load(content) or {}
    if not isinstance(config, dict):
        raise ConfigurationError(f"{path} must contain a mapping, got {type(config).__name__}")

    return _merge_with_defaults(config)


def _substitute_env_vars(content: str) -> str:
    """Replace ${VAR} and ${VAR:default} with environment values.

    Unset variables without a default become empty strings, which is usually
    a missing token or URL, so they are logged.
    """

    def replace(match):
        var_name, default = match.group(1), match.group(2)
        value = os.environ.get(var_name)
        if value is not None:
            return value
        if default is None:
            logger.warning("Environment variable %s is not set", var_name)
            return ""
        return default

    return _ENV_VAR_PATTERN.sub(replace, content)


def _default_config() -> dict:
    """Return minimal default configuration."""
    return {
        "client": {
            "base_url": os.environ.get("APICALL_BASE_URL", ""),
            "timeout": 30.0,
            "headers": {},
            # Redirects resolve to the final response
            "follow_redirects": True,
        },
        "logging": {
            "level": os.environ.get("APICALL_LOG_LEVEL", "INFO"),
        },
    }


def _deep_merge(base: dict, override: dict) -> dict:
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _merge_with_defaults(config: dict) -> dict:
    """Merge user config over defaults and normalize the client section."""
    merged = _deep_merge(_default_config(), config)
    merged["client"] = _normalize_client_config(merged.get("client") or {})
    return merged


def _normalize_client_config(client_config: dict) -> dict:
    """Coerce values that env substitution may have left as strings.

    Raises:
        ConfigurationError: base_url is not http(s), or timeout is not a number.
    """
    normalized = dict(client_config)

    base_url = normalized.get("base_url") or ""
    if base_url and not base_url.startswith(("http://", "https://")):
        raise ConfigurationError(f"client.base_url must start with http:// or https://, got {base_url!r}")
    normalized["base_url"] = base_url

    timeout = normalized.get("timeout")
    if timeout is not None:
        try:
            normalized["timeout"] = float(timeout)
        except (TypeError, ValueError):
            raise ConfigurationError(f"client.timeout must be a number, got {timeout!r}") from None

    normalized["headers"] = normalized.get("headers") or {}
    return normalized


def get_client_config(config: dict) -> dict:
    """Get the httpx client section, or empty dict if not found."""
    return config.get("client", {})


def create_client(config: dict = None, transport: httpx.AsyncBaseTransport = None) -> httpx.AsyncClient:
    """Build an httpx.AsyncClient from the client section of config.

    Args:
        config: Full configuration dict. Loaded with load_config() if omitted.
        transport: Optional httpx transport (e.g. httpx.MockTransport in tests)

    Returns:
        A new client. The caller owns it and must close it (aclose / async with).
    """
    if config is None:
        config = load_config()

    client_config = get_client_config(config)
    headers = {key: str(value) for key, value in strip_nulls(client_config.get("headers")).items()}

    return httpx.AsyncClient(
        base_url=client_config.get("base_url") or "",
        timeout=client_config.get("timeout", 30.0),
        headers=headers,
        follow_redirects=client_config.get("follow_redirects", True),
        transport=transport,
    )


def configure_logging(level: str | int = None) -> logging.Handler:
    """Send log records to stderr.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Log level name or number. Defaults to $APICALL_LOG_LEVEL or INFO.

    Returns:
        The handler added to the root logger.

    Raises:
        ConfigurationError: level is not a known level name.
    """
    global _log_handler

    if level is None:
        level = os.environ.get("APICALL_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        name = level
        level = logging.getLevelName(name.upper())
        if not isinstance(level, int):
            raise ConfigurationError(f"Unknown log level: {name!r}")

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))

    if _log_handler is not None:
        logging.root.removeHandler(_log_handler)
    _log_handler = handler

    # Suppress noisy library loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.root.addHandler(handler)
    logging.root.setLevel(level)
    return handler
