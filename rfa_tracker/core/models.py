"""Pydantic data models for the allocation tracker.

All data structures are immutable (frozen) after creation; every value is
recomputed from the external sources on each load.
"""

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .types import (
    BeraAmount,
    DataSource,
    Denomination,
    Percentage,
    TimeRange,
    Timestamp,
    UNKNOWN_AMOUNT,
    USDAmount,
)


class RawRecord(BaseModel):
    """One CSV row as read from the source, before any parsing."""

    project_name: str = ""
    bera_amount: str = ""

    model_config = {"frozen": True}

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "RawRecord":
        """Build from a parsed CSV mapping, treating missing cells as empty."""
        return cls(
            project_name=str(row.get("project_name") or "").strip(),
            bera_amount=str(row.get("bera_amount") or "").strip(),
        )


class Project(BaseModel):
    """Canonical project entity.

    ``bera_amount == 0`` is the sentinel for "allocation not yet confirmed".
    """

    project_name: str
    bera_amount: BeraAmount = UNKNOWN_AMOUNT

    model_config = {"frozen": True}

    @field_validator("bera_amount")
    @classmethod
    def validate_amount(cls, v: BeraAmount) -> BeraAmount:
        if v < 0:
            raise ValueError(f"bera_amount must be non-negative, got {v}")
        return v

    @property
    def twitter_handle(self) -> str:
        """Project name with the first ``@`` removed."""
        return self.project_name.replace("@", "", 1)

    @property
    def is_known(self) -> bool:
        """Whether the allocation amount has been confirmed."""
        return self.bera_amount > 0

    @property
    def profile_url(self) -> str:
        return f"https://twitter.com/{self.twitter_handle}"

    @property
    def initials(self) -> str:
        """Two-letter placeholder shown when no avatar is available."""
        return self.twitter_handle[:2].upper()

    def usd_value(self, bera_price: float) -> USDAmount | None:
        """Dollar value of the allocation, or None when unknown."""
        if not self.is_known:
            return None
        return self.bera_amount * bera_price


class TableRow(BaseModel):
    """A project row ready for display in the allocation table."""

    rank: int | None = None
    project: Project
    usd_value: USDAmount | None = None
    avatar_url: str | None = None

    model_config = {"frozen": True}

    @property
    def initials(self) -> str:
        return self.project.initials


class PricePoint(BaseModel):
    """A single historical price observation."""

    timestamp: Timestamp
    price: float
    updated_at: int | None = None

    model_config = {"frozen": True}


class PriceSeries(BaseModel):
    """Historical prices for one token, in source order unless sorted."""

    symbol: str
    address: str
    points: list[PricePoint] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def latest(self) -> PricePoint | None:
        """Most recent point by timestamp."""
        if not self.points:
            return None
        return max(self.points, key=lambda p: p.timestamp)


class TokenInfo(BaseModel):
    """Static token configuration."""

    key: str  # Short identifier used in chart rows ("bera", "ibgt", ...)
    address: str
    name: str
    symbol: str
    decimals: int = 18
    website_url: str | None = None

    model_config = {"frozen": True}


class WrapperInfo(BaseModel):
    """Derived price/premium view of one BGT wrapper (or the baseline)."""

    key: str
    name: str
    symbol: str
    address: str
    latest_price: float = 0.0
    premium_percent: Percentage = 0.0
    series: list[PricePoint] = Field(default_factory=list)
    website_url: str | None = None

    model_config = {"frozen": True}


class ChartRow(BaseModel):
    """One timestamp of a joined multi-token chart; missing values are 0."""

    timestamp: Timestamp
    values: dict[str, float] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @property
    def label(self) -> str:
        """Short date label for chart axes."""
        return datetime.fromtimestamp(self.timestamp, tz=timezone.utc).strftime("%b %d, %H:%M")


class TierCounts(BaseModel):
    """Number of known projects per allocation tier."""

    large: int = 0
    medium: int = 0
    small: int = 0

    model_config = {"frozen": True}


class ProjectShare(BaseModel):
    """A project's amount and share of the total allocation."""

    name: str
    amount: BeraAmount
    percentage: Percentage

    model_config = {"frozen": True}

    @property
    def twitter_handle(self) -> str:
        return self.name.replace("@", "", 1)


class OthersSummary(BaseModel):
    """Known projects outside the top list, grouped for chart tooltips."""

    count: int = 0
    total_amount: BeraAmount = 0.0
    top: list[ProjectShare] = Field(default_factory=list)
    remaining_count: int = 0

    model_config = {"frozen": True}


class AllocationStats(BaseModel):
    """Summary statistics over the full (unfiltered) project set."""

    total_allocation: BeraAmount = 0.0
    average_allocation: BeraAmount = 0.0
    known_count: int = 0
    unknown_count: int = 0
    tiers: TierCounts = Field(default_factory=TierCounts)
    pie_data: list[ProjectShare] = Field(default_factory=list)
    top_projects: list[ProjectShare] = Field(default_factory=list)
    others: OthersSummary = Field(default_factory=OthersSummary)

    model_config = {"frozen": True}

    def share_of(self, project_name: str) -> Percentage:
        """Percentage share of a project, 0 when unknown or absent."""
        for share in self.pie_data:
            if share.name == project_name:
                return share.percentage
        return 0.0


class AuditEntry(BaseModel):
    """Audit trail entry for a data fetch."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source: DataSource
    action: str  # "load", "fetch"
    endpoint: str | None = None
    success: bool = True
    error_message: str | None = None
    duration_ms: int | None = None
    notes: str | None = None

    model_config = {"frozen": True}


class AllocationSnapshot(BaseModel):
    """Projects and their ranks as of one load of the CSV."""

    projects: list[Project] = Field(default_factory=list)
    ranks: dict[str, int] = Field(default_factory=dict)
    loaded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = {"frozen": True}

    def rank_of(self, project: Project) -> int | None:
        """Rank of a project, or None when its allocation is unknown."""
        return self.ranks.get(project.project_name)


class WrapperReport(BaseModel):
    """Everything the wrapper premium view renders."""

    wrappers: list[WrapperInfo] = Field(default_factory=list)
    price_rows: list[ChartRow] = Field(default_factory=list)
    premium_rows: list[ChartRow] = Field(default_factory=list)
    time_range: TimeRange = TimeRange.SEVEN_DAYS
    denomination: Denomination = Denomination.USD

    model_config = {"frozen": True}
