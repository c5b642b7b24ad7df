import logging
import os
import platform
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from harvest_mcp import __version__
from harvest_mcp.errors import ConfigError

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

DEFAULT_BASE_URL = "https://api.harvestapp.com/v2"

LOG_LEVELS = {
    "error": logging.ERROR,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

TRANSPORTS = {
    "stdio": "stdio",
    "sse": "sse",
    "http": "sse",
}


@dataclass
class Config:
    """Centralized configuration for the application."""
    access_token: Optional[str] = None
    account_id: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 30.0
    max_retries: int = 3
    log_level: str = "info"
    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 8080

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Build a configuration from environment variables.

        When no mapping is given, a ``.env`` file in the working directory is
        loaded first and ``os.environ`` is used.

        Raises:
            ConfigError: If any variable holds a value that cannot be parsed
        """
        if environ is None:
            load_dotenv()
            environ = os.environ

        problems = []

        def _int(name: str, default: int, low: int, high: Optional[int] = None) -> int:
            raw = environ.get(name)
            if raw is None or raw == "":
                return default
            try:
                value = int(raw)
            except ValueError:
                problems.append(f"{name}: expected an integer, got {raw!r}")
                return default
            if value < low or (high is not None and value > high):
                bounds = f"between {low} and {high}" if high is not None else f"at least {low}"
                problems.append(f"{name}: must be {bounds}, got {value}")
            return value

        log_level = environ.get("LOG_LEVEL", "info").lower()
        if log_level not in LOG_LEVELS:
            problems.append(f"LOG_LEVEL: must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")

        transport = environ.get("MCP_TRANSPORT", "stdio").lower()
        if transport not in TRANSPORTS:
            problems.append(f"MCP_TRANSPORT: must be one of {', '.join(TRANSPORTS)}, got {transport!r}")

        timeout_ms = _int("REQUEST_TIMEOUT_MS", 30000, 1)
        max_retries = _int("MAX_RETRIES", 3, 0, 10)
        port = _int("MCP_PORT", 8080, 1, 65535)

        if problems:
            raise ConfigError("Environment validation failed:\n" + "\n".join(problems))

        return cls(
            access_token=environ.get("HARVEST_ACCESS_TOKEN") or environ.get("HARVEST_TOKEN"),
            account_id=environ.get("HARVEST_ACCOUNT_ID"),
            base_url=environ.get("HARVEST_API_BASE_URL") or DEFAULT_BASE_URL,
            timeout=timeout_ms / 1000,
            max_retries=max_retries,
            log_level=log_level,
            transport=TRANSPORTS[transport],
            host=environ.get("MCP_HOST") or "127.0.0.1",
            port=port,
        )

    def validate(self) -> None:
        """Ensure the Harvest credentials are present.

        Raises:
            ConfigError: Naming every missing credential
        """
        missing = []
        if not self.access_token:
            missing.append("HARVEST_ACCESS_TOKEN")
        if not self.account_id:
            missing.append("HARVEST_ACCOUNT_ID")
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    @property
    def user_agent(self) -> str:
        return f"harvest-mcp/{__version__} (Python {platform.python_version()})"


def configure_logging(level: str = "info") -> None:
    """Send all log output to stderr; stdout is reserved for the stdio transport."""
    logging.basicConfig(
        level=LOG_LEVELS.get(level.lower(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
