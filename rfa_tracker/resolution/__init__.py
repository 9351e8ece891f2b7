"""Token registry module."""

from .token_registry import TokenRegistry

__all__ = ["TokenRegistry"]
