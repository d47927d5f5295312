"""
Configuration management for Readwise → Notion sync.

Loads settings from environment variables and provides
structured configuration for all sync components.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .errors import ConfigError

DEFAULT_DELAY_MS = 150
DEFAULT_REQUEST_TIMEOUT = 30.0

REQUIRED_VARIABLES = {
    "READWISE_TOKEN": "Get an access token at https://readwise.io/access_token",
    "NOTION_TOKEN": "Create a Notion integration at https://www.notion.so/my-integrations",
    "NOTION_DATABASE_ID": "The ID of the Notion database that receives the URLs.",
}


@dataclass(frozen=True)
class Config:
    """
    Central configuration for the sync system.

    Built once before any component runs and never mutated afterwards;
    CLI overrides produce a new instance via dataclasses.replace.
    """

    # Credentials
    readwise_token: str
    notion_token: str
    notion_database_id: str

    # Readwise export
    updated_after: Optional[str] = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    # Sync behavior
    delay_ms: int = DEFAULT_DELAY_MS
    debug: bool = False
    dry_run: bool = False

    @property
    def delay_seconds(self) -> float:
        """Pause between two highlights, in seconds."""
        return self.delay_ms / 1000

    @classmethod
    def from_env(cls, env_file: Optional[Path] = None) -> "Config":
        """
        Load configuration from environment variables.

        Args:
            env_file: Optional path to .env file. If not provided,
                     looks for .env in current directory.

        Returns:
            Configured Config instance.

        Raises:
            ConfigError: If required environment variables are missing
                or an optional one cannot be parsed.
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        missing = [name for name in REQUIRED_VARIABLES if not os.getenv(name)]
        if missing:
            hints = "\n".join(f"  {name}: {REQUIRED_VARIABLES[name]}" for name in missing)
            raise ConfigError(
                f"Missing required environment variables: {', '.join(missing)}\n{hints}"
            )

        return cls(
            readwise_token=os.environ["READWISE_TOKEN"],
            notion_token=os.environ["NOTION_TOKEN"],
            notion_database_id=os.environ["NOTION_DATABASE_ID"].strip(),
            updated_after=os.getenv("READWISE_UPDATED_AFTER") or None,
            request_timeout=_parse_number(
                "REQUEST_TIMEOUT", float, DEFAULT_REQUEST_TIMEOUT, minimum_exclusive=True
            ),
            delay_ms=_parse_number("SYNC_DELAY_MS", int, DEFAULT_DELAY_MS),
            debug=os.getenv("DEBUG", "false").lower() == "true",
            dry_run=os.getenv("DRY_RUN", "false").lower() == "true",
        )


def _parse_number(name: str, kind: type, default, minimum_exclusive: bool = False):
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = kind(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if minimum_exclusive and value <= 0:
        raise ConfigError(f"{name} must be greater than zero, got {raw!r}")
    if value < 0:
        raise ConfigError(f"{name} must not be negative, got {raw!r}")
    return value
