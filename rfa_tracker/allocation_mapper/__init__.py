"""Allocation normalization module."""

from .normalizer import AllocationNormalizer, derive_handle, normalize_record, parse_amount

__all__ = ["AllocationNormalizer", "derive_handle", "normalize_record", "parse_amount"]
