"""Main orchestrator for the allocation reporting pipeline.

Data flows one way: CSV → normalize → rank → (filter, sort, aggregate,
price) → view models. Every public method returns a usable, possibly
degraded result; provider failures are logged and replaced by defaults.
"""

import logging
from pathlib import Path

from .allocation_mapper.normalizer import AllocationNormalizer
from .calculator.aggregator import AllocationAggregator
from .calculator.premium import build_chart_rows, build_premium_rows, build_wrappers
from .core.config import AppConfig, get_config
from .core.models import (
    AllocationSnapshot,
    AllocationStats,
    AuditEntry,
    Project,
    TableRow,
    WrapperReport,
)
from .core.types import Denomination, SortDirection, SortField, TimeRange
from .providers.allocations.csv_alloc import CSVAllocationProvider
from .providers.price.berachain_price import BerachainPriceProvider
from .providers.social.avatar import AvatarProvider
from .ranking.ranker import build_rank_map, sort_projects
from .ranking.search import filter_projects
from .resolution.token_registry import TokenRegistry

logger = logging.getLogger(__name__)


class AllocationTracker:
    """Coordinates providers and calculators for the table and analytics views."""

    def __init__(
        self,
        config: AppConfig | None = None,
        csv_provider: CSVAllocationProvider | None = None,
        price_provider: BerachainPriceProvider | None = None,
        avatar_provider: AvatarProvider | None = None,
        token_registry: TokenRegistry | None = None,
    ):
        """
        Initialize the tracker with all providers.

        Args:
            config: Settings (uses the global config from the environment if not provided)
            csv_provider: Allocation CSV source
            price_provider: Current/historical price source
            avatar_provider: Avatar lookup
            token_registry: BERA baseline and wrapper tokens
        """
        self.config = config or get_config()

        self.csv_provider = csv_provider or CSVAllocationProvider(self.config.csv_path)
        self.price_provider = price_provider or BerachainPriceProvider(
            api_url=self.config.berachain_api_url,
            timeout=self.config.request_timeout,
            cache_ttl_seconds=max(self.config.refresh_seconds // 2, 1),
        )
        self.avatar_provider = avatar_provider or AvatarProvider(
            base_url=self.config.avatar_base_url,
            timeout=self.config.request_timeout,
        )
        self.token_registry = token_registry or TokenRegistry(self.config.tokens_config_path)

        self.normalizer = AllocationNormalizer()
        self.aggregator = AllocationAggregator()

    # Allocation table

    def load_snapshot(self, csv_path: Path | str | None = None) -> AllocationSnapshot:
        """
        Read the CSV and compute ranks over the full project set.

        Args:
            csv_path: Optional path overriding the configured CSV

        Returns:
            Snapshot with projects (source order) and dense ranks
        """
        raw_records = self.csv_provider.get_raw_records(csv_path)
        projects = self.normalizer.normalize_all(raw_records)
        ranks = build_rank_map(projects)
        logger.debug(f"Ranked {len(ranks)} of {len(projects)} projects")
        return AllocationSnapshot(projects=projects, ranks=ranks)

    def load_projects(self, csv_path: Path | str | None = None) -> list[Project]:
        """Projects ordered by amount descending, unknown allocations last."""
        snapshot = self.load_snapshot(csv_path)
        return sort_projects(snapshot.projects, SortField.AMOUNT, SortDirection.DESC)

    def get_bera_price(self) -> float:
        """Current BERA price in USD (0 when unavailable)."""
        return self.price_provider.get_price(self.token_registry.baseline)

    def build_table(
        self,
        snapshot: AllocationSnapshot,
        query: str | None = None,
        sort_field: SortField = SortField.AMOUNT,
        sort_direction: SortDirection = SortDirection.DESC,
        bera_price: float = 0.0,
        with_avatars: bool = False,
    ) -> list[TableRow]:
        """
        Build the rows of the allocation table.

        Filtering and sorting apply to the displayed rows only; ranks are
        looked up from the snapshot, so hidden projects do not shift them.

        Args:
            snapshot: Loaded projects and ranks
            query: Case-insensitive name search
            sort_field: Column to sort by
            sort_direction: Sort direction
            bera_price: BERA price for the USD column
            with_avatars: Resolve avatar URLs for displayed rows

        Returns:
            Table rows in display order
        """
        shown = sort_projects(filter_projects(snapshot.projects, query), sort_field, sort_direction)

        rows = []
        for project in shown:
            avatar_url = None
            if with_avatars:
                avatar_url = self.avatar_provider.get_avatar_url(project.twitter_handle)
            rows.append(
                TableRow(
                    rank=snapshot.rank_of(project),
                    project=project,
                    usd_value=project.usd_value(bera_price),
                    avatar_url=avatar_url,
                )
            )
        return rows

    # Analytics

    def get_stats(self, snapshot: AllocationSnapshot) -> AllocationStats:
        """Summary statistics over the full project set."""
        return self.aggregator.summarize(snapshot.projects)

    def get_wrapper_report(
        self,
        time_range: TimeRange = TimeRange.SEVEN_DAYS,
        denomination: Denomination = Denomination.USD,
        now: float | None = None,
    ) -> WrapperReport:
        """
        Latest prices, premiums and chart series for the BGT wrappers.

        Args:
            time_range: Trailing window for charts
            denomination: Chart unit (USD or BERA)
            now: Reference time in epoch seconds (defaults to the current time)

        Returns:
            WrapperReport; prices default to 0 when the API is unavailable
        """
        registry = self.token_registry
        tokens = registry.all()

        current = self.price_provider.get_current_prices(tokens)
        history = self.price_provider.get_historical_prices(tokens)

        baseline_key = registry.baseline.key
        return WrapperReport(
            wrappers=build_wrappers(registry.baseline, registry.wrappers, current, history),
            price_rows=build_chart_rows(
                history,
                time_range=time_range,
                now=now,
                denomination=denomination,
                baseline_key=baseline_key,
            ),
            premium_rows=build_premium_rows(
                history, baseline_key=baseline_key, time_range=time_range, now=now
            ),
            time_range=time_range,
            denomination=denomination,
        )

    def get_audit_trail(self) -> list[AuditEntry]:
        """Audit entries from all providers, oldest first."""
        entries: list[AuditEntry] = []
        for provider in (self.csv_provider, self.price_provider, self.avatar_provider):
            entries.extend(provider.get_audit_trail())
        return sorted(entries, key=lambda e: e.timestamp)
