"""Output formatters for allocation tables, analytics and audit trails."""

from .formatters import (
    OutputFormatter,
    JSONFormatter,
    CSVFormatter,
    TableFormatter,
    format_bera,
    get_formatter,
)
from .audit_trail import AuditTrailFormatter

__all__ = [
    "OutputFormatter",
    "JSONFormatter",
    "CSVFormatter",
    "TableFormatter",
    "format_bera",
    "get_formatter",
    "AuditTrailFormatter",
]
