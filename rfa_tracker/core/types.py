"""Type definitions and enums for the allocation tracker."""

from enum import Enum


class DataSource(str, Enum):
    """Data source identifiers."""

    CSV = "csv"
    BERACHAIN_API = "berachain_api"
    UNAVATAR = "unavatar"
    UNKNOWN = "unknown"


class SortField(str, Enum):
    """Columns the project table can be sorted by."""

    NAME = "name"
    AMOUNT = "amount"


class SortDirection(str, Enum):
    """Sort direction for the project table."""

    ASC = "asc"
    DESC = "desc"

    @property
    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


class TimeRange(str, Enum):
    """Trailing windows for historical price charts."""

    SEVEN_DAYS = "7d"
    THIRTY_DAYS = "30d"

    @property
    def days(self) -> int:
        """Number of days covered by the window."""
        return 7 if self is TimeRange.SEVEN_DAYS else 30


class Denomination(str, Enum):
    """Unit used for chart values."""

    USD = "usd"
    BERA = "bera"  # Price divided by the baseline (BERA) price


class AllocationTier(str, Enum):
    """Size tier of a known allocation."""

    LARGE = "large"      # >= 100,000 BERA
    MEDIUM = "medium"    # [50,000, 100,000)
    SMALL = "small"      # (0, 50,000)

    @property
    def display_name(self) -> str:
        """Human-readable display name."""
        names = {
            AllocationTier.LARGE: "Large (>=100k)",
            AllocationTier.MEDIUM: "Medium (50k-100k)",
            AllocationTier.SMALL: "Small (<50k)",
        }
        return names.get(self, self.value)


# Type aliases for common patterns
Percentage = float   # 0-100 scale
BeraAmount = float   # Number of BERA tokens
USDAmount = float    # USD value
Timestamp = int      # Unix timestamp in seconds


# Amount used for "allocation not yet confirmed"
UNKNOWN_AMOUNT: BeraAmount = 0.0
