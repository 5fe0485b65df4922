"""
Per-import diagnostics accumulation.
"""

from decimal import Decimal

from trade_import.models import ImportDiagnostics, Trade, TradeSide


class DiagnosticsCollector:
    """
    Collects skip reasons and warnings during a single import run.

    A fresh collector is created for every import; nothing is shared
    between runs.
    """

    def __init__(self):
        self.skip_reasons: dict[str, int] = {}
        self.warnings: list[str] = []

    def skip(self, reason: str) -> None:
        """Tally one skipped row under ``reason``."""
        self.skip_reasons[reason] = self.skip_reasons.get(reason, 0) + 1

    def warn(self, message: str) -> None:
        if message not in self.warnings:
            self.warnings.append(message)

    def build(self, trades: list[Trade], total_rows: int) -> ImportDiagnostics:
        """
        Produce the final diagnostics record.

        Args:
            trades: Trades emitted by the import
            total_rows: Number of data rows processed

        Returns:
            ImportDiagnostics with totals derived from ``trades``
        """
        if not trades and total_rows > 0:
            self.warn(
                f"0 trades detected from {total_rows} rows. "
                "Check if the CSV format is supported."
            )

        return ImportDiagnostics(
            total_rows=total_rows,
            trades_imported=len(trades),
            rows_skipped=total_rows - len(trades),
            skip_reasons=dict(self.skip_reasons),
            warnings=list(self.warnings),
            total_invested=calculate_total_invested(trades),
            unique_symbols=unique_symbols(trades),
        )


def calculate_total_invested(trades: list[Trade]) -> Decimal:
    """Sum of quantity * price over buy trades."""
    return sum(
        (t.total_value for t in trades if t.side == TradeSide.BUY),
        Decimal("0"),
    )


def unique_symbols(trades: list[Trade]) -> list[str]:
    """Distinct symbols in first-seen order."""
    return list(dict.fromkeys(t.symbol for t in trades))


def empty_diagnostics(total_rows: int = 0, rows_skipped: int = 0) -> ImportDiagnostics:
    """Diagnostics for an import that aborted before reading any row."""
    return ImportDiagnostics(total_rows=total_rows, rows_skipped=rows_skipped)
