"""
Analytics module for the trade importer.

Provides duplicate detection between parsed and already stored trades.
"""

from trade_import.analytics.duplicates import (
    DEFAULT_TOLERANCE,
    DuplicateTolerance,
    find_duplicates,
    import_trades,
    is_duplicate,
    partition_trades,
)

__all__ = [
    "DEFAULT_TOLERANCE",
    "DuplicateTolerance",
    "find_duplicates",
    "import_trades",
    "is_duplicate",
    "partition_trades",
]
