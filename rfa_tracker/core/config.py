"""Configuration management for data sources and refresh settings.

Loads configuration from environment variables or .env file.
"""

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CSV_PATH = "data/rfa_allocations.csv"
DEFAULT_BERACHAIN_API_URL = "https://api.berachain.com/"
DEFAULT_AVATAR_BASE_URL = "https://unavatar.io/twitter"
DEFAULT_REFRESH_SECONDS = 60
DEFAULT_REQUEST_TIMEOUT = 30.0


def _env_number(name: str, default: float, minimum: float = 0.0) -> float:
    """Read a positive number (at least ``minimum``) from the environment."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Invalid value for {name}={raw!r}, using {default}")
        return default
    if not math.isfinite(value) or value <= 0:
        logger.warning(f"{name} must be positive, using {default}")
        return default
    if value < minimum:
        logger.warning(f"{name} must be at least {minimum:g}, using {default}")
        return default
    return value


@dataclass
class AppConfig:
    """Settings for the CSV source, external APIs and refresh timers."""

    # Static allocation data
    csv_path: Path = Path(DEFAULT_CSV_PATH)

    # Berachain GraphQL API (current and historical token prices)
    berachain_api_url: str = DEFAULT_BERACHAIN_API_URL

    # Avatar lookup by social handle
    avatar_base_url: str = DEFAULT_AVATAR_BASE_URL

    # Optional YAML override for the token registry
    tokens_config_path: Optional[Path] = None

    refresh_seconds: int = DEFAULT_REFRESH_SECONDS
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load configuration from environment variables."""
        tokens_config = os.getenv("RFA_TOKENS_CONFIG")
        return cls(
            csv_path=Path(os.getenv("RFA_CSV_PATH") or DEFAULT_CSV_PATH),
            berachain_api_url=os.getenv("BERACHAIN_API_URL") or DEFAULT_BERACHAIN_API_URL,
            avatar_base_url=(os.getenv("AVATAR_BASE_URL") or DEFAULT_AVATAR_BASE_URL).rstrip("/"),
            tokens_config_path=Path(tokens_config) if tokens_config else None,
            refresh_seconds=int(
                _env_number("RFA_REFRESH_SECONDS", DEFAULT_REFRESH_SECONDS, minimum=1)
            ),
            request_timeout=_env_number("RFA_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
        )

    @classmethod
    def load(cls, env_file: Optional[Path] = None) -> "AppConfig":
        """
        Load configuration from .env file and environment variables.

        Args:
            env_file: Optional path to .env file. If not provided,
                      looks for .env in the project root.

        Returns:
            AppConfig instance with loaded values
        """
        if env_file:
            load_dotenv(env_file)
        else:
            project_root = Path(__file__).parent.parent.parent
            env_path = project_root / ".env"
            if env_path.exists():
                load_dotenv(env_path)

        return cls.from_env()

    def has_csv(self) -> bool:
        """Check if the allocation CSV exists on disk."""
        return self.csv_path.exists()


# Global config instance (lazy loaded)
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig.load()
    return _config


def reload_config(env_file: Optional[Path] = None) -> AppConfig:
    """Reload configuration from environment."""
    global _config
    _config = AppConfig.load(env_file)
    return _config
