"""
Loading and saving of canonical trade files.

The persistence layer proper lives outside this library; these helpers
read and write the flat CSV form used by the command line tool and by
callers that keep an existing trade set on disk.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

import pandas as pd

from trade_import.data.schemas import FileSchema, TRADES_SCHEMA
from trade_import.data.symbols import detect_asset_type
from trade_import.models import AssetType, Trade, TradeSide, TradeSource


class DataLoadError(Exception):
    """Raised when data cannot be loaded or is invalid."""
    pass


def trades_to_dataframe(trades: list[Trade]) -> pd.DataFrame:
    """
    Convert trades to a DataFrame.

    Decimal fields are kept as strings; use pd.to_numeric() on a copy for
    arithmetic.
    """
    records = []
    for t in trades:
        records.append({
            "trade_id": t.trade_id,
            "symbol": t.symbol,
            "asset_type": t.asset_type.value,
            "side": t.side.value,
            "quantity": str(t.quantity),
            "price": str(t.price),
            "fee": str(t.fee),
            "date": t.date.isoformat(),
            "source": t.source.value,
            "currency": t.currency or "",
        })
    return pd.DataFrame(records, columns=TRADES_SCHEMA.all_columns)


def save_trades(
    trades: list[Trade],
    output_path: str | Path,
) -> Path:
    """
    Save trades to CSV file.

    Args:
        trades: List of Trade objects to save
        output_path: Path for output CSV file

    Returns:
        Path to the saved file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    df = trades_to_dataframe(trades)
    df.to_csv(output_path, index=False)

    return output_path


def load_trades(file_path: str | Path) -> list[Trade]:
    """
    Load trades from a CSV file written by save_trades().

    Args:
        file_path: Path to the trades CSV file

    Returns:
        List of Trade objects

    Raises:
        DataLoadError: If the file cannot be loaded, is missing columns, or
            holds a row that is not a valid trade
    """
    file_path = Path(file_path)
    df = _load_csv(file_path, TRADES_SCHEMA)

    trades = []
    for position, (_, row) in enumerate(df.iterrows(), start=2):
        try:
            trades.append(_row_to_trade(row))
        except (ValueError, InvalidOperation) as e:
            raise DataLoadError(f"Invalid trade on line {position} of {file_path}: {e}")

    return trades


def _row_to_trade(row: pd.Series) -> Trade:
    trade_id = _optional(row, "trade_id")
    symbol = _optional(row, "symbol").upper()
    quantity = Decimal(str(row["quantity"]).strip())
    price = Decimal(str(row["price"]).strip())
    fee = Decimal(_optional(row, "fee") or "0")

    if not trade_id:
        raise ValueError("trade_id is empty")
    if not symbol:
        raise ValueError("symbol is empty")
    if quantity <= 0:
        raise ValueError(f"quantity must be positive, got {quantity}")
    if price <= 0:
        raise ValueError(f"price must be positive, got {price}")

    asset_type = _optional(row, "asset_type")
    source = _optional(row, "source")

    return Trade(
        trade_id=trade_id,
        symbol=symbol,
        asset_type=AssetType(asset_type) if asset_type else detect_asset_type(symbol),
        side=TradeSide(str(row["side"]).strip().lower()),
        quantity=quantity,
        price=price,
        date=datetime.fromisoformat(str(row["date"]).strip()),
        source=TradeSource.coerce(source) if source else TradeSource.MANUAL,
        fee=abs(fee),
        currency=_optional(row, "currency") or None,
    )


def _optional(row: pd.Series, column: str) -> str:
    """Column value as stripped text, empty when absent or NaN."""
    if column not in row.index:
        return ""
    value = row[column]
    if pd.isna(value):
        return ""
    return str(value).strip()


def _load_csv(file_path: Path, schema: FileSchema) -> pd.DataFrame:
    """
    Load a CSV file as text columns and validate against schema.

    Args:
        file_path: Path to CSV file
        schema: Expected file schema

    Returns:
        Loaded DataFrame

    Raises:
        DataLoadError: If file cannot be loaded or has missing columns
    """
    if not file_path.exists():
        raise DataLoadError(f"File not found: {file_path}")

    try:
        df = pd.read_csv(file_path, dtype=str, keep_default_na=False, na_values=[""])
    except pd.errors.EmptyDataError:
        return pd.DataFrame(columns=schema.all_columns)
    except Exception as e:
        raise DataLoadError(f"Failed to load CSV file {file_path}: {e}")

    # Validate columns
    is_valid, missing = schema.validate_columns(df.columns.tolist())
    if not is_valid:
        raise DataLoadError(
            f"File {file_path} is missing required columns: {missing}"
        )

    return df
