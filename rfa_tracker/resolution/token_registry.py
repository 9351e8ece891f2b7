"""Token registry - the BERA baseline and the BGT wrappers priced against it.

Defaults are built in; a YAML file can replace them:

    baseline: bera
    tokens:
      bera:
        address: "0x0000000000000000000000000000000000000000"
        name: BERA
        symbol: BERA
      ibgt:
        address: "0xac03..."
        name: iBGT
        symbol: iBGT
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from ..core.exceptions import ConfigurationError
from ..core.models import TokenInfo

logger = logging.getLogger(__name__)

DEFAULT_BASELINE = "bera"

# Default token set (used if no config file provided)
DEFAULT_TOKENS: dict[str, dict[str, Any]] = {
    "bera": {
        "address": "0x0000000000000000000000000000000000000000",
        "name": "BERA",
        "symbol": "BERA",
        "decimals": 18,
        "website_url": "https://hub.berachain.com/vaults/",
    },
    "ibgt": {
        "address": "0xac03CABA51e17c86c921E1f6CBFBdC91F8BB2E6b",
        "name": "iBGT",
        "symbol": "iBGT",
        "decimals": 18,
        "website_url": "https://infrared.finance/vaults",
    },
    "lbgt": {
        "address": "0xBaadCC2962417C01Af99fb2B7C75706B9bd6Babe",
        "name": "LBGT",
        "symbol": "LBGT",
        "decimals": 18,
        "website_url": "https://www.berapaw.com/vaults",
    },
    "stbgt": {
        "address": "0x2CeC7f1ac87F5345ced3D6c74BBB61bfAE231Ffb",
        "name": "stBGT",
        "symbol": "stBGT",
        "decimals": 18,
        "website_url": "https://bera.stride.zone/",
    },
}


class TokenRegistry:
    """Looks up configured tokens by key or address."""

    def __init__(self, config_path: Path | str | None = None):
        """
        Initialize token registry.

        Args:
            config_path: Path to YAML file with a ``tokens`` mapping and an
                optional ``baseline`` key. If None, uses default tokens.
        """
        self.baseline_key = DEFAULT_BASELINE
        raw_tokens: dict[str, dict[str, Any]] = DEFAULT_TOKENS

        if config_path:
            raw_tokens = self._load_config(Path(config_path))

        self.tokens: dict[str, TokenInfo] = {
            key: TokenInfo(key=key, **values) for key, values in raw_tokens.items()
        }

        if self.baseline_key not in self.tokens:
            raise ConfigurationError(
                "baseline", f"Baseline token '{self.baseline_key}' is not configured"
            )

    def _load_config(self, config_path: Path) -> dict[str, dict[str, Any]]:
        """Load tokens from YAML config, falling back to defaults."""
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning(f"Token config not found: {config_path}, using defaults")
            return DEFAULT_TOKENS
        except yaml.YAMLError as e:
            logger.error(f"Invalid YAML in {config_path}: {e}")
            return DEFAULT_TOKENS

        tokens = config.get("tokens")
        if not isinstance(tokens, dict) or not tokens:
            logger.warning(f"No 'tokens' in {config_path}, using defaults")
            return DEFAULT_TOKENS

        self.baseline_key = config.get("baseline", DEFAULT_BASELINE)
        logger.info(f"Loaded {len(tokens)} tokens from {config_path}")
        return tokens

    @property
    def baseline(self) -> TokenInfo:
        """The token all premiums are measured against."""
        return self.tokens[self.baseline_key]

    @property
    def wrappers(self) -> list[TokenInfo]:
        """All non-baseline tokens, in configuration order."""
        return [t for key, t in self.tokens.items() if key != self.baseline_key]

    def all(self) -> list[TokenInfo]:
        return list(self.tokens.values())

    def get(self, key: str) -> TokenInfo | None:
        return self.tokens.get(key.lower())

    def by_address(self, address: str) -> TokenInfo | None:
        """Find a token by contract address (case-insensitive)."""
        address_lower = address.lower()
        for token in self.tokens.values():
            if token.address.lower() == address_lower:
                return token
        return None
