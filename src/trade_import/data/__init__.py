"""
Data ingestion module for the trade importer.

Provides the flexible CSV trade parser, the IBKR statement extractor,
format dispatch, and loading/saving of canonical trade files.
"""

from trade_import.data.csv_import import (
    TradeCsvParser,
    parse_flexible_csv,
    parse_trading212_csv,
)
from trade_import.data.ibkr import (
    extract_ibkr_trades_section,
    parse_ibkr_csv,
)
from trade_import.data.formats import (
    detect_format,
    parse_csv_file,
    parse_for_source,
)
from trade_import.data.loaders import (
    DataLoadError,
    load_trades,
    save_trades,
    trades_to_dataframe,
)
from trade_import.data.tables import (
    DEFAULT_TABLES,
    ParserTables,
)

__all__ = [
    "TradeCsvParser",
    "parse_flexible_csv",
    "parse_trading212_csv",
    "extract_ibkr_trades_section",
    "parse_ibkr_csv",
    "detect_format",
    "parse_csv_file",
    "parse_for_source",
    "DataLoadError",
    "load_trades",
    "save_trades",
    "trades_to_dataframe",
    "DEFAULT_TABLES",
    "ParserTables",
]
