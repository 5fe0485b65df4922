"""
Fuzzy duplicate detection between newly parsed and existing trades.

Re-exported CSVs may carry slightly different rounding or timestamp
granularity for the same execution, so trades are compared with small
tolerances rather than exactly. Fee and source are never compared.
"""

import logging
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal

from trade_import.models import ImportResult, Trade


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DuplicateTolerance:
    """
    Thresholds for treating two trades as the same execution.

    All comparisons are strict: a difference equal to the threshold is not
    a match.

    Attributes:
        quantity: Maximum absolute quantity difference
        price: Maximum absolute price difference
        time_window: Maximum timestamp difference
    """
    quantity: Decimal = Decimal("0.0001")
    price: Decimal = Decimal("0.01")
    time_window: timedelta = timedelta(seconds=60)


DEFAULT_TOLERANCE = DuplicateTolerance()


def is_duplicate(
    a: Trade,
    b: Trade,
    tolerance: DuplicateTolerance = DEFAULT_TOLERANCE,
) -> bool:
    """
    Check whether two trades describe the same economic event.

    Symbol and side must match exactly; quantity, price and timestamp must
    each differ by less than the tolerance. The rule is symmetric.
    """
    return (
        a.symbol == b.symbol
        and a.side == b.side
        and abs(a.quantity - b.quantity) < tolerance.quantity
        and abs(a.price - b.price) < tolerance.price
        and abs(a.date - b.date) < tolerance.time_window
    )


def find_duplicates(
    new_trades: list[Trade],
    existing_trades: list[Trade],
    tolerance: DuplicateTolerance = DEFAULT_TOLERANCE,
) -> list[Trade]:
    """
    Find new trades that already exist.

    Each new trade is compared against the existing set only, never against
    other trades in the same batch, so two genuine fills seconds apart in one
    file are both kept.

    Args:
        new_trades: Freshly parsed trades
        existing_trades: Trades already stored
        tolerance: Matching thresholds

    Returns:
        The subset of new_trades that has a match in existing_trades
    """
    # Bucket existing trades so each new trade only scans same symbol/side
    buckets: dict[tuple, list[Trade]] = {}
    for existing in existing_trades:
        buckets.setdefault((existing.symbol, existing.side), []).append(existing)

    duplicates = []
    for trade in new_trades:
        candidates = buckets.get((trade.symbol, trade.side), [])
        if any(is_duplicate(existing, trade, tolerance) for existing in candidates):
            duplicates.append(trade)
    return duplicates


def partition_trades(
    new_trades: list[Trade],
    existing_trades: list[Trade],
    tolerance: DuplicateTolerance = DEFAULT_TOLERANCE,
) -> tuple[list[Trade], list[Trade]]:
    """
    Split new trades into (unique, duplicates), preserving input order.
    """
    duplicate_ids = {id(t) for t in find_duplicates(new_trades, existing_trades, tolerance)}
    unique = [t for t in new_trades if id(t) not in duplicate_ids]
    duplicates = [t for t in new_trades if id(t) in duplicate_ids]
    return unique, duplicates


def import_trades(
    new_trades: list[Trade],
    existing_trades: list[Trade],
    tolerance: DuplicateTolerance = DEFAULT_TOLERANCE,
) -> ImportResult:
    """
    Import trades with duplicate detection.

    Args:
        new_trades: Freshly parsed trades
        existing_trades: Trades already stored
        tolerance: Matching thresholds

    Returns:
        ImportResult whose unique_trades are the ones to persist
    """
    unique, duplicates = partition_trades(new_trades, existing_trades, tolerance)

    logger.info(
        "Duplicate check: %d new, %d already present",
        len(unique),
        len(duplicates),
    )

    return ImportResult(
        trades_added=len(unique),
        trades_skipped=len(duplicates),
        errors=[],
        unique_trades=unique,
        duplicate_trades=duplicates,
    )
