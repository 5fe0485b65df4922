"""
Decision logging for the trade importer.

Provides an append-only JSONL record of each import step for audit.
"""

from trade_import.logging.decision_log import (
    DecimalEncoder,
    DecisionLogger,
    log_action,
    get_logger,
)

__all__ = [
    "DecimalEncoder",
    "DecisionLogger",
    "log_action",
    "get_logger",
]
