"""Audit trail formatter.

Summarizes which data sources were consulted during a run and how each
call went, so a degraded view (zero prices, initials instead of avatars)
can be traced back to its cause.
"""

from datetime import datetime, timezone
from typing import Any

from ..core.models import AuditEntry


class AuditTrailFormatter:
    """Formats provider audit entries as plain text."""

    def __init__(self, max_endpoints: int = 3):
        self.max_endpoints = max_endpoints

    def format_summary(self, entries: list[AuditEntry], generated_at: datetime | None = None) -> str:
        """
        Format a summary of the audit trail.

        Args:
            entries: Audit entries from the providers
            generated_at: Report time (defaults to now)

        Returns:
            Formatted string summary
        """
        generated_at = generated_at or datetime.now(timezone.utc)

        lines = []
        lines.append("=" * 70)
        lines.append("AUDIT TRAIL SUMMARY")
        lines.append("=" * 70)
        lines.append("")
        lines.append(f"Generated: {generated_at.isoformat()}")
        lines.append("")

        lines.append("DATA SOURCES CONSULTED")
        lines.append("-" * 40)
        summary = self.summarize_sources(entries)
        if not summary:
            lines.append("  (none)")
        for source, info in summary.items():
            status = "OK" if info["success_count"] > 0 else "FAILED"
            lines.append(f"  {source}: {status}")
            lines.append(f"    - Calls: {info['total_count']} ({info['success_count']} successful)")
            for endpoint in info["endpoints"][: self.max_endpoints]:
                lines.append(f"    - Endpoint: {endpoint}")
        lines.append("")

        lines.append("DETAILED CALLS")
        lines.append("-" * 40)
        for entry in entries:
            status = "OK" if entry.success else "FAILED"
            duration = f"{entry.duration_ms}ms" if entry.duration_ms is not None else "N/A"
            lines.append(f"  [{entry.timestamp.strftime('%H:%M:%S')}] {entry.source.value} {entry.action}")
            lines.append(f"    Endpoint: {entry.endpoint or 'N/A'}")
            lines.append(f"    Status: {status}, Duration: {duration}")
            if entry.error_message:
                lines.append(f"    Error: {entry.error_message}")
            if entry.notes:
                lines.append(f"    Notes: {entry.notes}")
        lines.append("")

        lines.append("=" * 70)
        lines.append("END OF AUDIT TRAIL")
        lines.append("=" * 70)

        return "\n".join(lines)

    def summarize_sources(self, entries: list[AuditEntry]) -> dict[str, dict[str, Any]]:
        """Call counts and endpoints per source, in first-seen order."""
        summary: dict[str, dict[str, Any]] = {}

        for entry in entries:
            info = summary.setdefault(
                entry.source.value,
                {"total_count": 0, "success_count": 0, "endpoints": []},
            )
            info["total_count"] += 1
            if entry.success:
                info["success_count"] += 1
            if entry.endpoint and entry.endpoint not in info["endpoints"]:
                info["endpoints"].append(entry.endpoint)

        return summary
