"""Allocation data providers."""

from .csv_alloc import CSVAllocationProvider

__all__ = ["CSVAllocationProvider"]
