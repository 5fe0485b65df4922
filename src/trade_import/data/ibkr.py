"""
Interactive Brokers activity statement import.

IBKR exports one CSV file holding many sections. Every line starts with the
section name and a record kind, e.g.:

    Trades,Header,DataDiscriminator,Asset Category,Currency,Symbol,Date/Time,Quantity,T. Price,...
    Trades,Data,Order,Stocks,USD,AAPL,"2024-01-15, 10:30:00",10,150.25,...
    Trades,SubTotal,,Stocks,USD,AAPL,,10,,...
    Dividends,Header,Currency,Date,Description,Amount

Only the Trades section is relevant; it is cut out and handed to the
generic flexible parser.
"""

import logging
from typing import Optional

from trade_import.data.csv_import import parse_flexible_csv
from trade_import.data.tables import DEFAULT_TABLES, ParserTables
from trade_import.models import ParseResult, TradeSource


logger = logging.getLogger(__name__)

TRADES_HEADER = "Trades,Header"
TRADES_DATA = "Trades,Data"
TRADES_TOTAL_MARKERS = ("Trades,Total", "Trades,SubTotal")


def extract_ibkr_trades_section(content: str) -> Optional[str]:
    """
    Cut the Trades section out of an IBKR statement.

    The first line starting with "Trades,Header" provides the header (its
    prefix removed); following "Trades,Data" lines provide the rows (prefix
    removed). Collection stops at a blank line or a line starting with a
    bare comma. Trades total/subtotal rows and lines of any other section
    are never collected.

    Args:
        content: Full statement text

    Returns:
        Plain CSV text (header + data rows), or None when the file has no
        Trades section
    """
    collected: list[str] = []
    in_section = False

    for line in content.splitlines():
        if not in_section:
            if line.startswith(TRADES_HEADER):
                in_section = True
                collected.append(_strip_prefix(line, TRADES_HEADER))
            continue

        if not line.strip() or line.startswith(","):
            break
        if line.startswith(TRADES_HEADER):
            # A second header starts a block with a different column layout
            logger.warning(
                "Ignoring additional IBKR Trades block after %d data rows; only the first "
                "block is imported. Ignored header: %s",
                len(collected) - 1,
                _strip_prefix(line, TRADES_HEADER),
            )
            break
        if line.startswith(TRADES_TOTAL_MARKERS):
            # Per-symbol subtotals sit between data rows
            continue
        if line.startswith(TRADES_DATA):
            collected.append(_strip_prefix(line, TRADES_DATA))

    if not collected:
        return None

    logger.debug("Extracted IBKR trades section with %d data rows", len(collected) - 1)
    return "\n".join(collected) + "\n"


def _strip_prefix(line: str, prefix: str) -> str:
    rest = line[len(prefix):]
    return rest[1:] if rest.startswith(",") else rest


def parse_ibkr_csv(
    content: str,
    tables: ParserTables = DEFAULT_TABLES,
    warn_unrecognized: bool = True,
) -> ParseResult:
    """
    Parse an IBKR activity statement export.

    Falls back to treating the whole file as a plain CSV when no Trades
    section is present.
    """
    section = extract_ibkr_trades_section(content)
    if section is None:
        logger.info("No IBKR Trades section found, parsing file as plain CSV")
        section = content

    return parse_flexible_csv(
        section,
        source=TradeSource.IBKR,
        tables=tables,
        warn_unrecognized=warn_unrecognized,
    )
