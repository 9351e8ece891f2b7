"""Ranking, sorting and search module."""

from .ranker import (
    UNRANKED_PLACEHOLDER,
    build_rank_map,
    format_rank,
    lookup_rank,
    next_sort_state,
    sort_projects,
)
from .search import filter_projects, matches_query

__all__ = [
    "UNRANKED_PLACEHOLDER",
    "build_rank_map",
    "format_rank",
    "lookup_rank",
    "next_sort_state",
    "sort_projects",
    "filter_projects",
    "matches_query",
]
