"""Ranking and display sorting of projects.

Two concerns are kept apart:

1. Dense ranks are assigned once over the full project set (known
   allocations only, largest first). Ties share a rank and only a strictly
   smaller amount advances the counter, so [100, 100, 50] ranks 1, 1, 2.
   Unknown (zero) allocations get no rank.
2. Display sorting orders whatever subset is currently shown. When
   sorting by amount, unknown allocations always go last regardless of
   direction, ordered by name among themselves.
"""

from ..core.models import Project
from ..core.types import SortDirection, SortField

UNRANKED_PLACEHOLDER = "-"


def name_sort_key(name: str) -> tuple[str, str]:
    """Case-insensitive ordering key with a deterministic tie-break."""
    return (name.casefold(), name)


def build_rank_map(projects: list[Project]) -> dict[str, int]:
    """
    Assign dense ranks by amount, descending.

    Args:
        projects: Full (unfiltered) project set

    Returns:
        Mapping of project name to rank (>= 1). Projects with an unknown
        allocation are absent from the mapping.
    """
    known = sorted(
        (p for p in projects if p.is_known),
        key=lambda p: (-p.bera_amount, name_sort_key(p.project_name)),
    )

    ranks: dict[str, int] = {}
    rank = 0
    previous_amount: float | None = None

    for project in known:
        if previous_amount is None or project.bera_amount < previous_amount:
            rank += 1
            previous_amount = project.bera_amount
        ranks[project.project_name] = rank

    return ranks


def lookup_rank(rank_map: dict[str, int], project: Project) -> int | None:
    """Rank of a project, or None when unranked."""
    return rank_map.get(project.project_name)


def format_rank(rank: int | None) -> str:
    """Display text for a rank cell."""
    return str(rank) if rank is not None else UNRANKED_PLACEHOLDER


def sort_projects(
    projects: list[Project],
    field: SortField = SortField.AMOUNT,
    direction: SortDirection = SortDirection.DESC,
) -> list[Project]:
    """
    Sort projects for display.

    Args:
        projects: Projects currently shown (typically already filtered)
        field: Column to sort by
        direction: Sort direction. For amount sorting it only affects the
            order among known allocations.

    Returns:
        New sorted list; the input is not modified
    """
    reverse = direction is SortDirection.DESC

    if field is SortField.NAME:
        return sorted(projects, key=lambda p: name_sort_key(p.project_name), reverse=reverse)

    by_name = sorted(projects, key=lambda p: name_sort_key(p.project_name))
    known = [p for p in by_name if p.is_known]
    unknown = [p for p in by_name if not p.is_known]

    # Stable sort keeps the name order among equal amounts in both directions
    known.sort(key=lambda p: p.bera_amount, reverse=reverse)
    return known + unknown


def next_sort_state(
    current_field: SortField,
    current_direction: SortDirection,
    clicked_field: SortField,
) -> tuple[SortField, SortDirection]:
    """
    Sort state after a column header is toggled.

    Toggling the active column flips its direction; switching to another
    column starts it descending.
    """
    if clicked_field is current_field:
        return current_field, current_direction.flipped
    return clicked_field, SortDirection.DESC
