"""
Process-wide configuration for the caption service.

Settings are read from the environment (and a local .env file) once at
process start, then passed by reference into the app factory and the
OpenRouter client.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from backend.caption_service.errors import ConfigurationError

DEFAULT_API_URL = "https://openrouter.ai/api/v1/chat/completions"
DEFAULT_MODEL = "openrouter/auto"
DEFAULT_PORT = 8080

TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class CaptionSettings:
    """
    Immutable settings shared by every request.

    Attributes:
        api_key (str): OpenRouter bearer credential. May be empty; the client
            refuses to call upstream until it is set.
        port (int): Port the HTTP listener binds to.
        api_url (str): Chat-completions endpoint.
        model (str): Model identifier sent with every request.
        timeout (float, optional): Upstream timeout in seconds. None keeps the
            transport default (no explicit timeout).
        site_url (str, optional): Sent as the HTTP-Referer attribution header.
        app_title (str, optional): Sent as the X-Title attribution header.
        expose_error_detail (bool): Return raw upstream error text to clients.
        cors_origins (tuple): Allowed CORS origins.
        log_level (str): Root logging level name.
    """
    api_key: str = ""
    port: int = DEFAULT_PORT
    api_url: str = DEFAULT_API_URL
    model: str = DEFAULT_MODEL
    timeout: Optional[float] = None
    site_url: Optional[str] = None
    app_title: Optional[str] = None
    expose_error_detail: bool = True
    cors_origins: Tuple[str, ...] = ("*",)
    log_level: str = "INFO"

    @property
    def api_key_configured(self) -> bool:
        return bool(self.api_key)


def _parse_bool(name: str, raw: Optional[str], default: bool) -> bool:
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in TRUTHY:
        return True
    if value in FALSY:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")


def _parse_port(raw: Optional[str]) -> int:
    if raw is None or raw.strip() == "":
        return DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError:
        raise ConfigurationError(f"PORT must be an integer, got {raw!r}")
    if not 0 < port < 65536:
        raise ConfigurationError(f"PORT out of range: {port}")
    return port


def _parse_timeout(raw: Optional[str]) -> Optional[float]:
    if raw is None or raw.strip() == "":
        return None
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigurationError(f"OPENROUTER_TIMEOUT_SEC must be a number, got {raw!r}")
    if timeout <= 0:
        raise ConfigurationError("OPENROUTER_TIMEOUT_SEC must be positive")
    return timeout


def _parse_log_level(raw: Optional[str]) -> str:
    level = (raw or "INFO").strip().upper() or "INFO"
    # getLevelName maps known names to their numeric level
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(f"LOG_LEVEL must be a logging level name, got {raw!r}")
    return level


def _optional(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    raw = raw.strip()
    return raw or None


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> CaptionSettings:
    """
    Build CaptionSettings from an environment mapping.

    Args:
        environ (Mapping, optional): Defaults to os.environ.

    Returns:
        CaptionSettings: The parsed settings.

    Raises:
        ConfigurationError: If a value is present but malformed.
    """
    env = os.environ if environ is None else environ

    origins = tuple(
        o.strip() for o in env.get("CORS_ORIGINS", "*").split(",") if o.strip()
    ) or ("*",)

    return CaptionSettings(
        api_key=(env.get("OPENROUTER_API_KEY") or "").strip(),
        port=_parse_port(env.get("PORT")),
        api_url=_optional(env.get("OPENROUTER_API_URL")) or DEFAULT_API_URL,
        model=_optional(env.get("OPENROUTER_MODEL")) or DEFAULT_MODEL,
        timeout=_parse_timeout(env.get("OPENROUTER_TIMEOUT_SEC")),
        site_url=_optional(env.get("OPENROUTER_SITE_URL")),
        app_title=_optional(env.get("OPENROUTER_APP_TITLE")),
        expose_error_detail=_parse_bool("EXPOSE_ERROR_DETAIL", env.get("EXPOSE_ERROR_DETAIL"), True),
        cors_origins=origins,
        log_level=_parse_log_level(env.get("LOG_LEVEL")),
    )


def load_settings() -> CaptionSettings:
    """Load .env into the process environment, then read settings from it."""
    load_dotenv()
    return settings_from_env()
