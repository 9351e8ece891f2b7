"""Social profile providers."""

from .avatar import AvatarProvider

__all__ = ["AvatarProvider"]
