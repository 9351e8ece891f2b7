"""Data providers for the allocation tracker.

This module contains providers for:
- Allocation data (CSV)
- Price data (Berachain API)
- Avatars (unavatar)
"""

from .base import BaseProvider, CachedProvider

__all__ = ["BaseProvider", "CachedProvider"]
