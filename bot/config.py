"""
Configuration management for the interaction bot.
Loads environment variables and provides configuration settings.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, Union

from dotenv import load_dotenv

# Default .env location: repository root
DEFAULT_ENV_PATH = Path(__file__).parent.parent / ".env"

REQUIRED_VARIABLES = ("DISCORD_TOKEN", "CLIENT_ID")


class ConfigError(Exception):
    """Raised when required configuration values are missing."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(
            "Missing required environment variables: " + ", ".join(self.missing)
        )


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Config:
    """Bot configuration settings."""

    # Discord
    DISCORD_TOKEN: str
    CLIENT_ID: str
    GUILD_ID: str = ""

    # Logging
    LOG_LEVEL: str = "info"
    LOG_DIR: str = "logs"
    LOG_TO_CONSOLE: bool = True
    LOG_TO_FILE: bool = True

    # Lifecycle timing (seconds)
    SHUTDOWN_GRACE_SECONDS: float = 1.5
    CRASH_FLUSH_SECONDS: float = 1.0

    # Web Server (keep-alive / health checks)
    KEEP_ALIVE: bool = False
    PORT: int = 11186
    HOST: str = "0.0.0.0"

    @classmethod
    def from_env(
        cls,
        env_file: Union[str, Path, None] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "Config":
        """
        Load configuration from environment variables.

        Args:
            env_file: Optional .env file, loaded without overriding the process environment
            environ: Mapping to read from instead of os.environ

        Returns:
            Config instance (not yet validated)
        """
        if environ is None:
            load_dotenv(dotenv_path=env_file or DEFAULT_ENV_PATH)
            environ = os.environ

        # DEBUG only changes the default log level
        debug = _flag(environ.get("DEBUG"), False)

        return cls(
            DISCORD_TOKEN=environ.get("DISCORD_TOKEN", "").strip(),
            CLIENT_ID=environ.get("CLIENT_ID", "").strip(),
            GUILD_ID=environ.get("GUILD_ID", "").strip(),
            LOG_LEVEL=environ.get("LOG_LEVEL", "debug" if debug else "info"),
            LOG_DIR=environ.get("LOG_DIR", "logs"),
            LOG_TO_CONSOLE=_flag(environ.get("LOG_TO_CONSOLE"), True),
            LOG_TO_FILE=_flag(environ.get("LOG_TO_FILE"), True),
            SHUTDOWN_GRACE_SECONDS=float(environ.get("SHUTDOWN_GRACE_SECONDS", "1.5")),
            CRASH_FLUSH_SECONDS=float(environ.get("CRASH_FLUSH_SECONDS", "1.0")),
            KEEP_ALIVE=_flag(environ.get("KEEP_ALIVE"), False),
            PORT=int(environ.get("PORT", "11186")),
            HOST=environ.get("HOST", "0.0.0.0"),
        )

    def missing_required(self) -> List[str]:
        """Return every required variable that is empty, in declaration order."""
        return [name for name in REQUIRED_VARIABLES if not getattr(self, name)]

    def validate(self) -> None:
        """Validate required configuration."""
        missing = self.missing_required()
        if missing:
            raise ConfigError(missing)
