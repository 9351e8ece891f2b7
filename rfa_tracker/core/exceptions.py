"""Exceptions raised by the allocation tracker.

Provider failures (``DataSourceError`` and subclasses) are caught inside
the providers and turned into default values; they only escape from the
low-level request helpers. ``ConfigurationError`` is fatal for the CLI.
"""


class RFATrackerError(Exception):
    """Base exception for all allocation tracker errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class DataSourceError(RFATrackerError):
    """An external source (CSV, price API, avatar service) failed."""

    def __init__(
        self,
        source: str,
        message: str,
        endpoint: str | None = None,
        status_code: int | None = None,
    ):
        self.source = source
        self.endpoint = endpoint
        self.status_code = status_code
        super().__init__(
            f"[{source}] {message}",
            {"source": source, "endpoint": endpoint, "status_code": status_code},
        )


class RateLimitError(DataSourceError):
    """The price API answered HTTP 429."""

    def __init__(self, source: str, retry_after_seconds: int | None = None, endpoint: str | None = None):
        self.retry_after_seconds = retry_after_seconds
        suffix = f", retry after {retry_after_seconds}s" if retry_after_seconds else ""
        super().__init__(source, f"Rate limit exceeded{suffix}", endpoint=endpoint, status_code=429)


class ConfigurationError(RFATrackerError):
    """A setting or the token registry is unusable."""

    def __init__(self, config_key: str, message: str):
        self.config_key = config_key
        super().__init__(f"Configuration error [{config_key}]: {message}", {"config_key": config_key})
