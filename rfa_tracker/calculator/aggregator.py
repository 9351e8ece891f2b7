"""Allocation aggregator for summary cards and chart data.

All statistics are computed over the full (unfiltered) project set:
- Total = sum of all amounts (unknown allocations contribute 0)
- Average = total / number of known allocations (0 when none are known)
- Share = amount / total × 100, for known allocations only
- Tiers: large >= 100,000; medium in [50,000, 100,000); small in (0, 50,000)
"""

import logging

from ..core.models import (
    AllocationStats,
    OthersSummary,
    Project,
    ProjectShare,
    TierCounts,
)
from ..core.types import AllocationTier, BeraAmount, Percentage
from ..ranking.ranker import name_sort_key

logger = logging.getLogger(__name__)

LARGE_THRESHOLD: BeraAmount = 100_000
MEDIUM_THRESHOLD: BeraAmount = 50_000
TOP_N = 10
OTHERS_LABEL = "Others"


def classify_tier(amount: BeraAmount) -> AllocationTier | None:
    """
    Classify an allocation amount.

    Returns:
        The tier, or None for unknown (zero) allocations
    """
    if amount >= LARGE_THRESHOLD:
        return AllocationTier.LARGE
    if amount >= MEDIUM_THRESHOLD:
        return AllocationTier.MEDIUM
    if amount > 0:
        return AllocationTier.SMALL
    return None


def percentage_share(amount: BeraAmount, total: BeraAmount) -> Percentage:
    """
    Calculate a share of the total allocation.

    Formula: share = amount / total × 100

    Returns:
        Percentage (0-100), or 0 when the total is not positive
    """
    if total <= 0:
        return 0.0
    return amount / total * 100


def average_allocation(total: BeraAmount, known_count: int) -> BeraAmount:
    """Average per known project, 0 when no allocation is known."""
    if known_count <= 0:
        return 0.0
    return total / known_count


class AllocationAggregator:
    """Computes summary statistics from a project set."""

    def __init__(self, top_n: int = TOP_N):
        """
        Initialize aggregator.

        Args:
            top_n: Size of the top list and of the "Others" detail list
        """
        self.top_n = top_n

    def summarize(self, projects: list[Project]) -> AllocationStats:
        """
        Calculate summary statistics.

        Args:
            projects: Full project set

        Returns:
            AllocationStats with totals, tiers, shares and top lists
        """
        total = sum(p.bera_amount for p in projects)
        known = sorted(
            (p for p in projects if p.is_known),
            key=lambda p: (-p.bera_amount, name_sort_key(p.project_name)),
        )
        unknown_count = len(projects) - len(known)

        if not known:
            logger.debug("No known allocations, averages default to 0")

        tiers = {tier: 0 for tier in AllocationTier}
        for project in known:
            tier = classify_tier(project.bera_amount)
            if tier is not None:
                tiers[tier] += 1

        pie_data = [
            ProjectShare(
                name=p.project_name,
                amount=p.bera_amount,
                percentage=percentage_share(p.bera_amount, total),
            )
            for p in known
        ]

        return AllocationStats(
            total_allocation=total,
            average_allocation=average_allocation(total, len(known)),
            known_count=len(known),
            unknown_count=unknown_count,
            tiers=TierCounts(
                large=tiers[AllocationTier.LARGE],
                medium=tiers[AllocationTier.MEDIUM],
                small=tiers[AllocationTier.SMALL],
            ),
            pie_data=pie_data,
            top_projects=pie_data[: self.top_n],
            others=self.others_summary(pie_data),
        )

    def others_summary(self, pie_data: list[ProjectShare]) -> OthersSummary:
        """
        Group the known projects beyond the top list.

        Args:
            pie_data: Known project shares, largest first

        Returns:
            OthersSummary with a sub-top list for detail display, the count
            beyond that list and the summed amount of all others
        """
        others = pie_data[self.top_n:]
        return OthersSummary(
            count=len(others),
            total_amount=sum(s.amount for s in others),
            top=others[: self.top_n],
            remaining_count=max(len(others) - self.top_n, 0),
        )

    def pie_slices(self, stats: AllocationStats) -> list[ProjectShare]:
        """
        Chart-ready slices: the top projects plus one "Others" slice.

        The "Others" slice is omitted when every known project is in the top list.
        """
        slices = list(stats.top_projects)
        if stats.others.count > 0:
            slices.append(
                ProjectShare(
                    name=OTHERS_LABEL,
                    amount=stats.others.total_amount,
                    percentage=percentage_share(
                        stats.others.total_amount, stats.total_allocation
                    ),
                )
            )
        return slices
