"""
Source/format dispatch for CSV imports.

Maps a trade source tag to the parser that understands its export format,
and sniffs the format of an unlabelled file.
"""

from pathlib import Path
from typing import Callable, Union

from trade_import.data.csv_import import parse_flexible_csv, read_csv_text
from trade_import.data.ibkr import TRADES_HEADER, parse_ibkr_csv
from trade_import.data.tables import DEFAULT_TABLES, ParserTables
from trade_import.models import ParseResult, TradeSource


FORMAT_AUTO = "auto"
FORMAT_GENERIC = "generic"
FORMAT_IBKR = "ibkr"
FORMATS = (FORMAT_AUTO, FORMAT_GENERIC, FORMAT_IBKR)


def detect_format(content: str) -> str:
    """Return 'ibkr' for sectioned IBKR statements, otherwise 'generic'."""
    for line in content.splitlines():
        if line.startswith(TRADES_HEADER):
            return FORMAT_IBKR
    return FORMAT_GENERIC


def _generic_parser(source: TradeSource) -> Callable[..., ParseResult]:
    def parse(content: str, tables: ParserTables, warn_unrecognized: bool) -> ParseResult:
        return parse_flexible_csv(
            content,
            source=source,
            tables=tables,
            warn_unrecognized=warn_unrecognized,
        )
    return parse


def _ibkr_parser(content: str, tables: ParserTables, warn_unrecognized: bool) -> ParseResult:
    return parse_ibkr_csv(content, tables=tables, warn_unrecognized=warn_unrecognized)


# Exchange sources arrive through API sync, but a CSV export from them
# still goes through the generic parser.
SOURCE_PARSERS: dict[TradeSource, Callable[..., ParseResult]] = {
    TradeSource.CSV: _generic_parser(TradeSource.CSV),
    TradeSource.TRADING212: _generic_parser(TradeSource.TRADING212),
    TradeSource.MANUAL: _generic_parser(TradeSource.MANUAL),
    TradeSource.BINANCE: _generic_parser(TradeSource.BINANCE),
    TradeSource.GATEIO: _generic_parser(TradeSource.GATEIO),
    TradeSource.IBKR: _ibkr_parser,
}


def parse_for_source(
    content: str,
    source: Union[TradeSource, str] = TradeSource.CSV,
    fmt: str = FORMAT_AUTO,
    tables: ParserTables = DEFAULT_TABLES,
    warn_unrecognized: bool = True,
) -> ParseResult:
    """
    Parse CSV text with the parser registered for ``source``.

    Args:
        content: Raw CSV text
        source: Trade source tag
        fmt: 'auto' uses the source's parser, except that a sectioned IBKR
            statement is always routed to the IBKR parser; 'generic' and
            'ibkr' force a parser
        tables: Lookup tables
        warn_unrecognized: Warn about unresolved symbols

    Returns:
        ParseResult

    Raises:
        ValueError: If the source or format is unknown
    """
    source = TradeSource.coerce(source)
    if fmt not in FORMATS:
        raise ValueError(f"Unknown import format: {fmt!r} (expected one of {', '.join(FORMATS)})")

    if fmt == FORMAT_IBKR or (fmt == FORMAT_AUTO and detect_format(content) == FORMAT_IBKR):
        return _ibkr_parser(content, tables, warn_unrecognized)

    if fmt == FORMAT_GENERIC:
        return _generic_parser(source)(content, tables, warn_unrecognized)

    return SOURCE_PARSERS[source](content, tables, warn_unrecognized)


def parse_csv_file(
    file_path: Union[str, Path],
    source: Union[TradeSource, str] = TradeSource.CSV,
    fmt: str = FORMAT_AUTO,
    tables: ParserTables = DEFAULT_TABLES,
    warn_unrecognized: bool = True,
) -> ParseResult:
    """Read a CSV export from disk and parse it with parse_for_source()."""
    content = read_csv_text(file_path)
    return parse_for_source(
        content,
        source=source,
        fmt=fmt,
        tables=tables,
        warn_unrecognized=warn_unrecognized,
    )
