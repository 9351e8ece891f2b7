"""Core module - data models, types, and exceptions."""

from .models import (
    RawRecord,
    Project,
    TableRow,
    PricePoint,
    PriceSeries,
    TokenInfo,
    WrapperInfo,
    ChartRow,
    TierCounts,
    ProjectShare,
    OthersSummary,
    AllocationStats,
    AuditEntry,
    AllocationSnapshot,
    WrapperReport,
)
from .types import (
    DataSource,
    SortField,
    SortDirection,
    TimeRange,
    Denomination,
    AllocationTier,
)
from .exceptions import (
    RFATrackerError,
    DataSourceError,
    RateLimitError,
    ConfigurationError,
)

__all__ = [
    # Models
    "RawRecord",
    "Project",
    "TableRow",
    "PricePoint",
    "PriceSeries",
    "TokenInfo",
    "WrapperInfo",
    "ChartRow",
    "TierCounts",
    "ProjectShare",
    "OthersSummary",
    "AllocationStats",
    "AuditEntry",
    "AllocationSnapshot",
    "WrapperReport",
    # Types
    "DataSource",
    "SortField",
    "SortDirection",
    "TimeRange",
    "Denomination",
    "AllocationTier",
    # Exceptions
    "RFATrackerError",
    "DataSourceError",
    "RateLimitError",
    "ConfigurationError",
]
