"""Avatar provider for project profile images.

Resolves a social handle to an image URL. Resolved URLs are cached for
the lifetime of the process and never re-fetched; misses are not cached
and fall back to initials on display.
"""

import logging
import time

import httpx

from ...core.config import DEFAULT_AVATAR_BASE_URL
from ...core.types import DataSource
from ..base import CachedProvider

logger = logging.getLogger(__name__)


class AvatarProvider(CachedProvider):
    """Looks up avatar image URLs by Twitter handle."""

    SOURCE = DataSource.UNAVATAR

    def __init__(
        self,
        base_url: str = DEFAULT_AVATAR_BASE_URL,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize avatar provider.

        Args:
            base_url: Avatar endpoint; the handle is appended as a path segment
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        super().__init__(cache_ttl_seconds=None)
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def is_available(self) -> bool:
        return bool(self.base_url)

    def image_url(self, handle: str) -> str:
        """Image URL for a handle (not checked)."""
        return f"{self.base_url}/{handle}"

    def get_avatar_url(self, handle: str) -> str | None:
        """
        Resolve the avatar image URL for a handle.

        Args:
            handle: Social handle without '@'

        Returns:
            Image URL, or None when no usable avatar was found
        """
        handle = handle.strip().lstrip("@")
        if not handle:
            return None

        cached = self._get_from_cache(handle)
        if cached is not None:
            return cached

        url = self.image_url(handle)
        start_time = time.time()

        try:
            with httpx.Client(
                timeout=self.timeout,
                transport=self.transport,
                follow_redirects=True,
            ) as client:
                response = client.get(url, params={"fallback": "false"})
        except httpx.RequestError as e:
            logger.warning(f"Avatar lookup failed for {handle}: {e}")
            self._record_audit(
                action="fetch",
                endpoint=url,
                success=False,
                error_message=str(e),
            )
            return None

        duration_ms = self._elapsed_ms(start_time)

        if response.status_code != 200:
            logger.debug(f"No avatar for {handle} (HTTP {response.status_code})")
            self._record_audit(
                action="fetch",
                endpoint=url,
                success=False,
                error_message=f"HTTP {response.status_code}",
                duration_ms=duration_ms,
            )
            return None

        self._record_audit(action="fetch", endpoint=url, success=True, duration_ms=duration_ms)
        self._set_cache(handle, url)
        return url

    def get_avatar_urls(self, handles: list[str]) -> dict[str, str | None]:
        """Resolve several handles; each is looked up at most once."""
        return {handle: self.get_avatar_url(handle) for handle in dict.fromkeys(handles)}
