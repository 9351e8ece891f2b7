"""Case-insensitive project search.

Both the query and the project name have every '@' removed and are
case-folded before a substring match, so "abc", "@ABC" and "Abc" all
find "@abc". Filtering never changes ranks, which are computed over the
full set beforehand.
"""

from ..core.models import Project


def _fold(text: str) -> str:
    return text.replace("@", "").casefold()


def matches_query(project: Project, query: str) -> bool:
    """Whether a project's name contains the query."""
    return _fold(query.strip()) in _fold(project.project_name)


def filter_projects(projects: list[Project], query: str | None) -> list[Project]:
    """
    Return the projects whose name matches the query.

    An empty query returns the full set unchanged.
    """
    if not query or not query.strip():
        return list(projects)
    return [p for p in projects if matches_query(p, query)]
