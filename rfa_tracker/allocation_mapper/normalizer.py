"""Allocation normalizer - turns raw CSV records into Project entities.

Defaulting rules per field:
- ``bera_amount``: parsed as a decimal number; empty, non-numeric,
  non-finite or negative text becomes 0 ("allocation not yet confirmed").
- ``project_name``: kept as-is (trimmed); the Twitter handle is derived
  from it on demand by removing the first ``@``.
"""

import logging
import math
import re

from ..core.models import Project, RawRecord
from ..core.types import BeraAmount, UNKNOWN_AMOUNT

logger = logging.getLogger(__name__)

DECIMAL_PATTERN = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def parse_amount(text: str | None) -> BeraAmount:
    """
    Parse an allocation amount, defaulting to 0 on any failure.

    Only plain decimal text is accepted; "1,500" or "1_500" count as
    unparseable.

    Args:
        text: Raw amount text from the CSV

    Returns:
        Non-negative finite amount, or 0
    """
    if text is None:
        return UNKNOWN_AMOUNT

    cleaned = text.strip()
    if not cleaned:
        return UNKNOWN_AMOUNT

    if not DECIMAL_PATTERN.match(cleaned):
        logger.debug(f"Unparseable bera_amount {text!r}, treating as unknown")
        return UNKNOWN_AMOUNT

    value = float(cleaned)
    if not math.isfinite(value) or value < 0:
        logger.debug(f"Out-of-range bera_amount {text!r}, treating as unknown")
        return UNKNOWN_AMOUNT

    return value


def derive_handle(project_name: str) -> str:
    """Social handle for a project: the name without its first '@'."""
    return project_name.replace("@", "", 1)


def normalize_record(raw: RawRecord) -> Project:
    """Convert one raw record into a Project. Pure function."""
    return Project(
        project_name=raw.project_name.strip(),
        bera_amount=parse_amount(raw.bera_amount),
    )


class AllocationNormalizer:
    """Normalizes a full dataset of raw records."""

    def normalize_all(self, raw_records: list[RawRecord]) -> list[Project]:
        """
        Normalize records into a set of projects keyed by name.

        The first occurrence of a project name wins; later duplicates are
        dropped. Records with an empty name are skipped.

        Args:
            raw_records: Records as read from the CSV

        Returns:
            Projects in source order
        """
        projects: list[Project] = []
        seen: set[str] = set()
        unknown = 0

        for raw in raw_records:
            project = normalize_record(raw)

            if not project.project_name:
                logger.debug("Skipping record with empty project_name")
                continue

            if project.project_name in seen:
                logger.warning(f"Duplicate project {project.project_name!r}, keeping first entry")
                continue

            seen.add(project.project_name)
            if not project.is_known:
                unknown += 1
            projects.append(project)

        logger.info(
            f"Normalized {len(projects)} projects ({unknown} with unknown allocation)"
        )
        return projects
