"""Tests for the allocation aggregator."""

import pytest

from rfa_tracker.calculator.aggregator import (
    OTHERS_LABEL,
    AllocationAggregator,
    average_allocation,
    classify_tier,
    percentage_share,
)
from rfa_tracker.core.models import Project
from rfa_tracker.core.types import AllocationTier


class TestFormulas:
    """Tests for standalone aggregation formulas."""

    @pytest.mark.parametrize(
        "amount,expected",
        [
            (250_000, AllocationTier.LARGE),
            (100_000, AllocationTier.LARGE),
            (99_999.99, AllocationTier.MEDIUM),
            (50_000, AllocationTier.MEDIUM),
            (49_999, AllocationTier.SMALL),
            (0.01, AllocationTier.SMALL),
            (0, None),
        ],
    )
    def test_classify_tier(self, amount, expected):
        assert classify_tier(amount) == expected

    def test_percentage_share(self):
        assert percentage_share(25, 100) == 25.0
        assert percentage_share(10, 0) == 0.0

    def test_average_allocation(self):
        assert average_allocation(300, 3) == 100.0
        assert average_allocation(0, 0) == 0.0


class TestAllocationAggregator:
    """Tests for summary statistics."""

    def test_summary(self, projects):
        stats = AllocationAggregator().summarize(projects)

        assert stats.total_allocation == 225_000
        assert stats.known_count == 4
        assert stats.unknown_count == 1
        assert stats.average_allocation == 56_250
        assert stats.tiers.large == 1
        assert stats.tiers.medium == 2
        assert stats.tiers.small == 1

    def test_shares_of_known_projects_only(self, projects):
        stats = AllocationAggregator().summarize(projects)

        assert [s.name for s in stats.pie_data] == ["@alpha", "@Bravo", "@charlie", "@echo"]
        assert stats.share_of("@alpha") == pytest.approx(100_000 / 225_000 * 100)
        assert stats.share_of("@delta") == 0.0
        assert sum(s.percentage for s in stats.pie_data) == pytest.approx(100.0)

    def test_tier_counts_match_known(self, projects):
        stats = AllocationAggregator().summarize(projects)
        tiers = stats.tiers
        assert tiers.large + tiers.medium + tiers.small == stats.known_count

    def test_empty_set(self):
        stats = AllocationAggregator().summarize([])

        assert stats.total_allocation == 0
        assert stats.average_allocation == 0
        assert stats.pie_data == []
        assert stats.others.count == 0

    def test_all_unknown(self):
        stats = AllocationAggregator().summarize([Project(project_name="@a")])

        assert stats.unknown_count == 1
        assert stats.average_allocation == 0
        assert AllocationAggregator().pie_slices(stats) == []

    def test_no_others_when_all_fit(self, projects):
        aggregator = AllocationAggregator()
        stats = aggregator.summarize(projects)

        assert len(stats.top_projects) == 4
        assert stats.others.count == 0
        assert OTHERS_LABEL not in [s.name for s in aggregator.pie_slices(stats)]


class TestOthers:
    """Tests for grouping projects beyond the top list."""

    @pytest.fixture
    def many_projects(self):
        # 25 known projects: @p01 = 1,000 ... @p25 = 25,000
        return [
            Project(project_name=f"@p{i:02d}", bera_amount=i * 1000)
            for i in range(1, 26)
        ]

    def test_top_ten(self, many_projects):
        stats = AllocationAggregator().summarize(many_projects)

        assert len(stats.top_projects) == 10
        assert stats.top_projects[0].name == "@p25"
        assert stats.top_projects[-1].name == "@p16"

    def test_others_summary(self, many_projects):
        others = AllocationAggregator().summarize(many_projects).others

        assert others.count == 15
        assert others.total_amount == 120_000  # 1k + ... + 15k
        assert len(others.top) == 10
        assert others.top[0].name == "@p15"
        assert others.remaining_count == 5

    def test_pie_slices_append_others(self, many_projects):
        aggregator = AllocationAggregator()
        stats = aggregator.summarize(many_projects)
        slices = aggregator.pie_slices(stats)

        assert len(slices) == 11
        assert slices[-1].name == OTHERS_LABEL
        assert slices[-1].amount == 120_000
        assert sum(s.amount for s in slices) == stats.total_allocation

    def test_custom_top_n(self, many_projects):
        stats = AllocationAggregator(top_n=5).summarize(many_projects)

        assert len(stats.top_projects) == 5
        assert stats.others.count == 20
        assert stats.others.remaining_count == 15

    def test_single_known_project(self):
        stats = AllocationAggregator().summarize([
            Project(project_name="A", bera_amount=100),
            Project(project_name="B", bera_amount=0),
        ])

        assert stats.total_allocation == 100
        assert stats.average_allocation == 100
        assert stats.known_count == 1
        assert stats.share_of("A") == 100.0
