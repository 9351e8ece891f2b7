"""Price data providers."""

from .berachain_price import BerachainPriceProvider

__all__ = ["BerachainPriceProvider"]
