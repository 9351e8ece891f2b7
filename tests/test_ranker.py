"""Tests for ranking, display sorting and search."""

import pytest

from rfa_tracker.core.models import Project
from rfa_tracker.core.types import SortDirection, SortField
from rfa_tracker.ranking.ranker import (
    build_rank_map,
    format_rank,
    next_sort_state,
    sort_projects,
)
from rfa_tracker.ranking.search import filter_projects, matches_query


def names(projects: list[Project]) -> list[str]:
    return [p.project_name for p in projects]


class TestBuildRankMap:
    """Tests for dense ranking."""

    def test_dense_ranks_with_ties(self, projects):
        ranks = build_rank_map(projects)

        assert ranks == {"@alpha": 1, "@Bravo": 2, "@charlie": 2, "@echo": 3}

    def test_ties_do_not_skip_ranks(self):
        """[100, 100, 50] ranks 1, 1, 2 (not 1, 1, 3)."""
        ranks = build_rank_map([
            Project(project_name="a", bera_amount=100),
            Project(project_name="b", bera_amount=100),
            Project(project_name="c", bera_amount=50),
        ])
        assert ranks == {"a": 1, "b": 1, "c": 2}

    def test_unknown_allocations_unranked(self, projects):
        ranks = build_rank_map(projects)
        assert "@delta" not in ranks

    def test_all_unknown(self):
        assert build_rank_map([Project(project_name="a", bera_amount=0)]) == {}

    def test_ranks_independent_of_input_order(self, projects):
        assert build_rank_map(list(reversed(projects))) == build_rank_map(projects)

    def test_format_rank(self):
        assert format_rank(3) == "3"
        assert format_rank(None) == "-"


class TestSortProjects:
    """Tests for display sorting."""

    def test_amount_desc(self, projects):
        result = sort_projects(projects, SortField.AMOUNT, SortDirection.DESC)
        assert names(result) == ["@alpha", "@Bravo", "@charlie", "@echo", "@delta"]

    def test_amount_asc_keeps_unknown_last(self, projects):
        result = sort_projects(projects, SortField.AMOUNT, SortDirection.ASC)
        assert names(result) == ["@echo", "@Bravo", "@charlie", "@alpha", "@delta"]

    @pytest.mark.parametrize("direction", [SortDirection.ASC, SortDirection.DESC])
    def test_unknown_always_last_and_by_name(self, direction):
        projects = [
            Project(project_name="@zed", bera_amount=0),
            Project(project_name="@mid", bera_amount=10),
            Project(project_name="@Ann", bera_amount=0),
            Project(project_name="@top", bera_amount=20),
        ]
        result = sort_projects(projects, SortField.AMOUNT, direction)

        assert names(result)[2:] == ["@Ann", "@zed"]

    def test_name_asc_is_case_insensitive(self, projects):
        result = sort_projects(projects, SortField.NAME, SortDirection.ASC)
        assert names(result) == ["@alpha", "@Bravo", "@charlie", "@delta", "@echo"]

    def test_name_desc(self, projects):
        result = sort_projects(projects, SortField.NAME, SortDirection.DESC)
        assert names(result) == ["@echo", "@delta", "@charlie", "@Bravo", "@alpha"]

    def test_input_not_modified(self, projects):
        before = names(projects)
        sort_projects(projects, SortField.NAME, SortDirection.DESC)
        assert names(projects) == before

    def test_empty(self):
        assert sort_projects([]) == []

    def test_zero_amount_last_even_ascending(self):
        projects = [Project(project_name="X", bera_amount=0), Project(project_name="Y", bera_amount=50)]
        result = sort_projects(projects, SortField.AMOUNT, SortDirection.ASC)
        assert names(result) == ["Y", "X"]


class TestNextSortState:
    """Tests for column header toggling."""

    def test_same_column_flips(self):
        assert next_sort_state(SortField.AMOUNT, SortDirection.DESC, SortField.AMOUNT) == (
            SortField.AMOUNT,
            SortDirection.ASC,
        )
        assert next_sort_state(SortField.NAME, SortDirection.ASC, SortField.NAME) == (
            SortField.NAME,
            SortDirection.DESC,
        )

    def test_other_column_starts_descending(self):
        assert next_sort_state(SortField.AMOUNT, SortDirection.ASC, SortField.NAME) == (
            SortField.NAME,
            SortDirection.DESC,
        )


class TestSearch:
    """Tests for case-insensitive name search."""

    @pytest.mark.parametrize("query", ["abc", "ABC", "@abc", "@ABC", "Abc", " b "])
    def test_matches_regardless_of_case_and_at(self, query):
        assert matches_query(Project(project_name="@abc"), query)

    def test_no_match(self):
        assert not matches_query(Project(project_name="@abc"), "xyz")

    def test_empty_query_returns_all(self, projects):
        assert filter_projects(projects, "") == projects
        assert filter_projects(projects, None) == projects
        assert filter_projects(projects, "   ") == projects

    def test_filter_keeps_order(self, projects):
        result = filter_projects(projects, "a")
        assert names(result) == ["@alpha", "@Bravo", "@charlie", "@delta"]

    def test_filter_does_not_change_ranks(self, projects):
        """Ranks come from the full set; a filtered view keeps them."""
        ranks = build_rank_map(projects)
        shown = filter_projects(projects, "echo")

        assert names(shown) == ["@echo"]
        assert ranks[shown[0].project_name] == 3
        assert build_rank_map(shown) != {"@echo": 3}

    def test_query_matches_substring_case_insensitively(self):
        projects = [Project(project_name=n) for n in ["@abc", "@xABC", "@zzz"]]
        assert names(filter_projects(projects, "abc")) == ["@abc", "@xABC"]
