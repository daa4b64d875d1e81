"""
Process configuration for the Kiwi MCP server.

Settings are read once from the environment when the server starts and
passed by value to everything that needs them.
"""

import os
from dataclasses import dataclass

from .errors import ConfigurationError

DEFAULT_API_URL = "https://api.tequila.kiwi.com"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class KiwiSettings:
    api_key: str
    base_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    @property
    def masked_key(self) -> str:
        if len(self.api_key) <= 8:
            return "***"
        return f"{self.api_key[:8]}..."


def load_settings() -> KiwiSettings:
    """
    Build settings from environment variables.

    Raises:
        ConfigurationError: If KIWI_API_KEY is unset or KIWI_TIMEOUT is invalid
    """
    api_key = os.getenv("KIWI_API_KEY", "").strip()
    if not api_key:
        raise ConfigurationError("KIWI_API_KEY environment variable is required")

    base_url = os.getenv("KIWI_API_URL", DEFAULT_API_URL).strip().rstrip("/")

    raw_timeout = os.getenv("KIWI_TIMEOUT", str(DEFAULT_TIMEOUT))
    try:
        timeout = float(raw_timeout)
    except ValueError:
        raise ConfigurationError(f"KIWI_TIMEOUT must be a number, got {raw_timeout!r}")
    if timeout <= 0:
        raise ConfigurationError(f"KIWI_TIMEOUT must be positive, got {raw_timeout!r}")

    return KiwiSettings(
        api_key=api_key,
        base_url=base_url or DEFAULT_API_URL,
        timeout=timeout,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
