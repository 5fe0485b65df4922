"""
Flexible broker CSV trade import.

Parses trade history exports whose column names vary between brokers
(Trading212, IBKR and similar formats). Columns are found through aliases
rather than exact names, buy/sell is read from free-form action text or the
sign of the quantity, and every row that cannot be turned into a complete
trade is skipped with a tallied reason instead of being guessed at.

Typical Trading212 CSV header:
Action,Time,ISIN,Ticker,Name,No. of shares,Price / share,Currency (Price / share),...,Total
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Optional, Union

from trade_import.data.actions import ActionKind, classify_action
from trade_import.data.columns import detect_columns
from trade_import.data.diagnostics import DiagnosticsCollector, empty_diagnostics
from trade_import.data.symbols import (
    detect_asset_type,
    is_recognized_symbol,
    normalize_to_ticker,
)
from trade_import.data.tables import DEFAULT_TABLES, ParserTables
from trade_import.data.values import (
    clean_symbol,
    parse_csv_line,
    parse_date,
    parse_number,
    split_lines,
)
from trade_import.models import ColumnMap, ParseResult, Trade, TradeSide, TradeSource


logger = logging.getLogger(__name__)

# Action text is truncated to this length in skip reason labels
REASON_ACTION_LENGTH = 20

EMPTY_FILE_ERROR = "CSV file is empty or has no data rows"
MISSING_QUANTITY_WARNING = "Could not detect quantity column - will try to infer from data"


@dataclass(frozen=True)
class RowSkip:
    """A data row that produced no trade, with the reason label."""
    reason: str


class TradeCsvParser:
    """
    Column-detecting CSV trade parser.

    One parser instance can be reused for any number of files; all
    per-import state lives in local variables of parse().

    Args:
        source: Provenance tag stamped on every trade
        tables: Alias, action and symbol tables
        warn_unrecognized: Add a warning for symbols that are neither
            ticker-shaped nor in the company table
    """

    def __init__(
        self,
        source: Union[TradeSource, str] = TradeSource.CSV,
        tables: ParserTables = DEFAULT_TABLES,
        warn_unrecognized: bool = True,
    ):
        self.source = TradeSource.coerce(source)
        self.tables = tables
        self.warn_unrecognized = warn_unrecognized

    def parse(self, content: str) -> ParseResult:
        """
        Parse raw CSV text.

        Args:
            content: Entire file content; the first non-blank line is the header

        Returns:
            ParseResult with trades, fatal errors and diagnostics
        """
        try:
            return self._parse(content)
        except Exception as e:
            logger.exception("CSV import failed")
            return ParseResult(
                trades=[],
                errors=[f"Failed to parse CSV: {e}"],
                diagnostics=empty_diagnostics(),
            )

    def _parse(self, content: str) -> ParseResult:
        lines = split_lines(content)

        if len(lines) < 2:
            logger.warning(EMPTY_FILE_ERROR)
            return ParseResult(trades=[], errors=[EMPTY_FILE_ERROR], diagnostics=empty_diagnostics())

        headers = parse_csv_line(lines[0])
        columns = detect_columns(headers, self.tables)
        data_rows = len(lines) - 1

        if not columns.has_symbol_column:
            message = "Could not detect symbol/ticker column. Headers: " + ", ".join(headers)
            logger.warning(message)
            return ParseResult(
                trades=[],
                errors=[message],
                diagnostics=empty_diagnostics(total_rows=data_rows, rows_skipped=data_rows),
            )

        collector = DiagnosticsCollector()
        if columns.quantity is None:
            collector.warn(MISSING_QUANTITY_WARNING)

        trades: list[Trade] = []
        errors: list[str] = []
        now = datetime.now()

        for row_number, line in enumerate(lines[1:], start=2):
            try:
                outcome = self.parse_row(parse_csv_line(line), columns, collector, now)
            except Exception:
                logger.debug("Row %d could not be parsed: %r", row_number, line, exc_info=True)
                errors.append(f"Row {row_number}: Parse error")
                collector.skip("Parse error")
                continue

            if isinstance(outcome, RowSkip):
                collector.skip(outcome.reason)
            else:
                trades.append(outcome)

        diagnostics = collector.build(trades, data_rows)
        _log_summary(diagnostics, trades)

        return ParseResult(trades=trades, errors=errors, diagnostics=diagnostics)

    def parse_row(
        self,
        values: list[str],
        columns: ColumnMap,
        collector: Optional[DiagnosticsCollector] = None,
        now: Optional[datetime] = None,
    ) -> Union[Trade, RowSkip]:
        """
        Turn one tokenized data row into a Trade or a RowSkip.

        Args:
            values: Fields from parse_csv_line()
            columns: Column map detected from the header
            collector: Receives unrecognized-symbol warnings, if given
            now: Timestamp used when the row has no readable date

        Returns:
            A Trade satisfying quantity > 0, price > 0 and a non-empty
            symbol, or a RowSkip naming why the row was dropped
        """
        action = _cell(values, columns.action)
        side: Optional[TradeSide] = None

        if action:
            classification = classify_action(action, self.tables)
            if classification.kind == ActionKind.IGNORED:
                return RowSkip(f"Ignored: {action[:REASON_ACTION_LENGTH]}")
            if classification.kind == ActionKind.UNKNOWN:
                return RowSkip(f"Unknown action: {action[:REASON_ACTION_LENGTH]}")
            side = classification.side

        raw_quantity = (
            parse_number(_cell(values, columns.quantity))
            if columns.quantity is not None else None
        )

        # No side from the action text: a negative quantity means a sale
        if side is None and raw_quantity is not None:
            side = TradeSide.SELL if raw_quantity < 0 else TradeSide.BUY

        if side is None:
            return RowSkip("Could not determine buy/sell")

        # Symbol priority: ticker > instrument name > ISIN
        raw_ticker = clean_symbol(_cell(values, columns.ticker))
        raw_instrument = clean_symbol(_cell(values, columns.instrument))
        isin = _cell(values, columns.isin).upper()
        raw_symbol = raw_ticker or raw_instrument or isin

        if not raw_symbol:
            return RowSkip("Missing symbol")

        symbol = normalize_to_ticker(raw_symbol, self.tables)

        quantity = abs(raw_quantity) if raw_quantity is not None else Decimal("0")
        if quantity <= 0:
            return RowSkip("Invalid quantity")

        price = parse_number(_cell(values, columns.price)) if columns.price is not None else None

        # Derive the price from the total value when there is no usable price
        if (price is None or price <= 0) and columns.total is not None:
            total = parse_number(_cell(values, columns.total))
            if total is not None:
                price = abs(total) / quantity

        if price is None or price <= 0:
            return RowSkip("Invalid price")

        date = parse_date(_cell(values, columns.date) or None, now=now)

        currency = _cell(values, columns.currency).upper() or None

        fee = Decimal("0")
        if columns.fee is not None:
            fee = abs(parse_number(_cell(values, columns.fee)) or Decimal("0"))

        if (
            collector is not None
            and self.warn_unrecognized
            and not is_recognized_symbol(raw_symbol, self.tables, explicit_ticker=bool(raw_ticker))
        ):
            collector.warn(f"Unrecognized symbol kept as-is: {symbol}")

        return Trade.create(
            symbol=symbol,
            asset_type=detect_asset_type(symbol, self.tables),
            side=side,
            quantity=quantity,
            price=price,
            date=date,
            source=self.source,
            fee=fee,
            currency=currency,
        )


def _cell(values: list[str], index: Optional[int]) -> str:
    """Trimmed cell at ``index``; empty for a missing column or short row."""
    if index is None or index >= len(values):
        return ""
    return values[index].strip()


def _log_summary(diagnostics, trades: list[Trade]) -> None:
    logger.info(
        "Import summary: %d rows, %d trades imported, %d skipped",
        diagnostics.total_rows,
        diagnostics.trades_imported,
        diagnostics.rows_skipped,
    )
    logger.info("Unique symbols: %s", ", ".join(diagnostics.unique_symbols))
    logger.info("Total invested: %.2f", diagnostics.total_invested)
    if diagnostics.skip_reasons:
        logger.info("Skip reasons: %s", diagnostics.skip_reasons)

    for i, t in enumerate(trades[:5], start=1):
        logger.debug(
            "  %d. %s %s %s @ %s = %.2f",
            i, t.symbol, t.side.value.upper(), t.quantity, t.price, t.total_value,
        )


def parse_flexible_csv(
    content: str,
    source: Union[TradeSource, str] = TradeSource.CSV,
    tables: ParserTables = DEFAULT_TABLES,
    warn_unrecognized: bool = True,
) -> ParseResult:
    """
    Parse a CSV file with flexible column detection.

    Args:
        content: Raw CSV text
        source: Provenance tag for the produced trades
        tables: Lookup tables (aliases, actions, company names)
        warn_unrecognized: Warn about symbols that could not be resolved

    Returns:
        ParseResult

    Example:
        >>> result = parse_flexible_csv(
        ...     "Action,Ticker,No. of Shares,Price / share,Time\\n"
        ...     "Market buy,AAPL,5,150.25,2024-01-15\\n"
        ... )
        >>> result.trades[0].symbol
        'AAPL'
    """
    parser = TradeCsvParser(source=source, tables=tables, warn_unrecognized=warn_unrecognized)
    return parser.parse(content)


def parse_trading212_csv(
    content: str,
    tables: ParserTables = DEFAULT_TABLES,
    warn_unrecognized: bool = True,
) -> ParseResult:
    """Parse a Trading212 history export."""
    return parse_flexible_csv(
        content,
        source=TradeSource.TRADING212,
        tables=tables,
        warn_unrecognized=warn_unrecognized,
    )


def read_csv_text(file_path: Union[str, Path]) -> str:
    """Read a CSV export, tolerating a UTF-8 byte order mark."""
    with open(Path(file_path), "r", encoding="utf-8-sig", newline="") as f:
        return f.read()
