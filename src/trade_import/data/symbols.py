"""
Symbol normalization and asset-type classification.
"""

import re

from trade_import.data.tables import DEFAULT_TABLES, ParserTables
from trade_import.models import AssetType


# 1-5 letters, optionally a single-letter share class after a dash (BRK-B)
TICKER_PATTERN = re.compile(r"^[A-Z]{1,5}(-[A-Z])?$")
# Exchange listing codes as they appear in ticker columns
LISTING_CODE_PATTERN = re.compile(r"^[A-Z0-9]{1,6}([.\-][A-Z0-9]{1,3})?$")


def normalize_to_ticker(symbol: str, tables: ParserTables = DEFAULT_TABLES) -> str:
    """
    Map a resolved symbol or company name to its ticker.

    Values that already look like tickers are still checked against the
    company table ("AMD", "SOFI", "UBER" are both names and tickers).
    Anything the table does not know passes through uppercased.

    Example:
        >>> normalize_to_ticker("Apple")
        'AAPL'
        >>> normalize_to_ticker("msft")
        'MSFT'
    """
    upper = symbol.strip().upper()
    return tables.company_to_ticker.get(upper, upper)


def is_ticker_shaped(symbol: str) -> bool:
    return bool(TICKER_PATTERN.match(symbol.strip().upper()))


def is_recognized_symbol(
    symbol: str,
    tables: ParserTables = DEFAULT_TABLES,
    explicit_ticker: bool = False,
) -> bool:
    """
    Whether a raw symbol resolves with any confidence.

    True when it has ticker shape or appears in the company table, either
    as a name or as a ticker value. Values read from an explicit ticker
    column may also carry digits or a listing suffix ("BRK.B", "VOD.L").
    """
    upper = symbol.strip().upper()
    if is_ticker_shaped(upper):
        return True
    if explicit_ticker and LISTING_CODE_PATTERN.match(upper):
        return True
    if upper in tables.company_to_ticker:
        return True
    return upper in set(tables.company_to_ticker.values())


def detect_asset_type(symbol: str, tables: ParserTables = DEFAULT_TABLES) -> AssetType:
    """
    Classify a symbol as crypto or stock.

    Known crypto tickers and trading pairs quoted in USDT/USD/BTC/ETH are
    crypto; everything else is treated as a stock. This is a heuristic.
    """
    upper = symbol.strip().upper()

    if upper in tables.crypto_symbols:
        return AssetType.CRYPTO

    if upper.endswith(tables.crypto_quote_suffixes):
        return AssetType.CRYPTO

    return AssetType.STOCK
