"""Shared plumbing for the CSV, price and avatar providers.

Every provider keeps an audit trail of the loads/fetches it performed.
HTTP providers also keep an in-memory response cache; a ``None`` TTL
keeps entries until the process exits.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any

from ..core.models import AuditEntry
from ..core.types import DataSource

logger = logging.getLogger(__name__)


class BaseProvider(ABC):
    """Abstract base class for all data providers."""

    SOURCE: DataSource = DataSource.UNKNOWN

    def __init__(self) -> None:
        self._audit_entries: list[AuditEntry] = []

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.time() - start_time) * 1000)

    def _record_audit(self, action: str, endpoint: str | None = None, **fields: Any) -> AuditEntry:
        """
        Append an audit entry for a load or fetch.

        Args:
            action: "load" or "fetch"
            endpoint: File path, query name or URL
            **fields: success, error_message, duration_ms, notes

        Returns:
            The recorded entry
        """
        entry = AuditEntry(source=self.SOURCE, action=action, endpoint=endpoint, **fields)
        if not entry.success:
            logger.debug(f"[{self.SOURCE.value}] {action} failed: {entry.error_message}")
        self._audit_entries.append(entry)
        return entry

    def get_audit_trail(self) -> list[AuditEntry]:
        """Audit entries recorded so far, oldest first."""
        return list(self._audit_entries)

    def clear_audit_trail(self) -> None:
        self._audit_entries = []

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the backing file or service can be used."""


class CachedProvider(BaseProvider):
    """Provider with a per-instance response cache."""

    def __init__(self, cache_ttl_seconds: int | None = 3600):
        """
        Args:
            cache_ttl_seconds: Entry lifetime in seconds; None never expires
        """
        super().__init__()
        self.cache_ttl_seconds = cache_ttl_seconds
        self._cache: dict[str, tuple[Any, float]] = {}

    def _is_fresh(self, stored_at: float) -> bool:
        if self.cache_ttl_seconds is None:
            return True
        return time.time() - stored_at < self.cache_ttl_seconds

    def _get_from_cache(self, key: str) -> Any | None:
        """Cached value for key, or None when absent or expired."""
        hit = self._cache.get(key)
        if hit is None:
            return None

        value, stored_at = hit
        if not self._is_fresh(stored_at):
            self._cache.pop(key, None)
            return None

        logger.debug(f"[{self.SOURCE.value}] Cache hit: {key}")
        return value

    def _set_cache(self, key: str, value: Any) -> None:
        self._cache[key] = (value, time.time())

    def clear_cache(self) -> None:
        """Drop every cached response."""
        self._cache = {}
