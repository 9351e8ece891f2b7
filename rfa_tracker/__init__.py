"""RFA Allocation Tracker.

Ranks and summarizes BERA allocations from a static CSV, enriched with live
BERA / BGT wrapper prices and cached social avatars.
"""

__version__ = "0.1.0"
