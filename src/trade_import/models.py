"""
Core data models for the trade import library.

This module defines the records produced by the CSV import pipeline:
canonical trades, the detected column map, import diagnostics and the
results handed to the persistence layer. All monetary and share quantities
use Decimal for precision.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
import uuid


class TradeSide(Enum):
    """Trade direction indicator."""
    BUY = "buy"
    SELL = "sell"


class AssetType(Enum):
    """Broad asset class of a traded symbol."""
    STOCK = "stock"
    CRYPTO = "crypto"


class TradeSource(Enum):
    """Provenance tag for an imported trade."""
    CSV = "csv"
    TRADING212 = "trading212"
    IBKR = "ibkr"
    MANUAL = "manual"
    BINANCE = "binance"
    GATEIO = "gateio"

    @classmethod
    def coerce(cls, value: "TradeSource | str") -> "TradeSource":
        """Accept either an enum member or its lowercase tag."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown trade source: {value!r} (expected one of {valid})")


class ActionType(Enum):
    """Types of logged actions for the decision log."""
    CONFIG_LOADED = "CONFIG_LOADED"
    CSV_PARSED = "CSV_PARSED"
    DUPLICATES_FILTERED = "DUPLICATES_FILTERED"
    TRADES_SAVED = "TRADES_SAVED"


@dataclass
class Trade:
    """
    A single buy or sell execution.

    Attributes:
        trade_id: Unique identifier for this trade
        symbol: Resolved ticker, uppercase
        asset_type: Stock or crypto
        side: BUY or SELL
        quantity: Number of units (positive, full precision)
        price: Price per unit (positive)
        date: Execution timestamp (naive)
        source: Where the trade came from
        fee: Fee paid (non-negative)
        currency: Price currency if the export carried one
    """
    trade_id: str
    symbol: str
    asset_type: AssetType
    side: TradeSide
    quantity: Decimal
    price: Decimal
    date: datetime
    source: TradeSource
    fee: Decimal = Decimal("0")
    currency: Optional[str] = None

    @classmethod
    def create(
        cls,
        symbol: str,
        asset_type: AssetType,
        side: TradeSide,
        quantity: Decimal,
        price: Decimal,
        date: datetime,
        source: TradeSource,
        fee: Decimal = Decimal("0"),
        currency: Optional[str] = None,
    ) -> "Trade":
        """Factory method to create a new Trade with auto-generated ID."""
        return cls(
            trade_id=str(uuid.uuid4()),
            symbol=symbol,
            asset_type=asset_type,
            side=side,
            quantity=quantity,
            price=price,
            date=date,
            source=source,
            fee=fee,
            currency=currency,
        )

    @property
    def total_value(self) -> Decimal:
        """Gross value of the trade (quantity * price)."""
        return self.quantity * self.price


@dataclass
class ColumnMap:
    """
    Detected mapping from canonical field name to CSV column index.

    A value of None means the column was not found. Field declaration order
    is the detection priority order.
    """
    action: Optional[int] = None
    ticker: Optional[int] = None
    instrument: Optional[int] = None
    isin: Optional[int] = None
    quantity: Optional[int] = None
    price: Optional[int] = None
    total: Optional[int] = None
    date: Optional[int] = None
    currency: Optional[int] = None
    fee: Optional[int] = None

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    @property
    def has_symbol_column(self) -> bool:
        return (
            self.ticker is not None
            or self.instrument is not None
            or self.isin is not None
        )

    def claimed_indices(self) -> set[int]:
        """Column indices already assigned to some field."""
        return {
            getattr(self, name)
            for name in self.field_names()
            if getattr(self, name) is not None
        }

    def describe(self, headers: list[str]) -> dict[str, str]:
        """Human-readable mapping, e.g. {'ticker': '[1] "Ticker"'}."""
        result = {}
        for name in self.field_names():
            index = getattr(self, name)
            if index is None or index >= len(headers):
                result[name] = "NOT FOUND"
            else:
                result[name] = f'[{index}] "{headers[index]}"'
        return result


@dataclass
class ImportDiagnostics:
    """
    Aggregate summary of one import run.

    Attributes:
        total_rows: Data rows seen (header excluded)
        trades_imported: Trades emitted
        rows_skipped: Rows that produced no trade
        skip_reasons: Skip reason label -> count
        warnings: Non-fatal messages
        total_invested: Sum of quantity * price over buy trades
        unique_symbols: Distinct symbols in first-seen order
    """
    total_rows: int = 0
    trades_imported: int = 0
    rows_skipped: int = 0
    skip_reasons: dict[str, int] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    total_invested: Decimal = Decimal("0")
    unique_symbols: list[str] = field(default_factory=list)

    def skip_summary(self) -> str:
        """Summary such as 'Skipped 12 rows: Ignored: Dividend (8), Invalid price (4)'."""
        if not self.rows_skipped:
            return "Skipped 0 rows"
        ordered = sorted(self.skip_reasons.items(), key=lambda item: (-item[1], item[0]))
        reasons = ", ".join(f"{reason} ({count})" for reason, count in ordered)
        noun = "row" if self.rows_skipped == 1 else "rows"
        if not reasons:
            return f"Skipped {self.rows_skipped} {noun}"
        return f"Skipped {self.rows_skipped} {noun}: {reasons}"


@dataclass
class ParseResult:
    """Output of a CSV parse: trades, fatal errors and diagnostics."""
    trades: list[Trade]
    errors: list[str]
    diagnostics: ImportDiagnostics

    @property
    def ok(self) -> bool:
        return not self.errors or bool(self.trades)


@dataclass
class ImportResult:
    """
    Result of importing parsed trades against an existing trade set.

    Attributes:
        trades_added: Number of trades with no duplicate in the existing set
        trades_skipped: Number of trades recognised as duplicates
        errors: Error messages (empty for a plain duplicate filter)
        unique_trades: The trades to persist
        duplicate_trades: The trades that were dropped
    """
    trades_added: int
    trades_skipped: int
    errors: list[str] = field(default_factory=list)
    unique_trades: list[Trade] = field(default_factory=list)
    duplicate_trades: list[Trade] = field(default_factory=list)


@dataclass
class DecisionLogEntry:
    """
    Entry for the append-only decision log.

    Attributes:
        timestamp: When the action occurred
        action_type: Type of action
        source: Trade source involved (if applicable)
        details: JSON-serializable details dictionary
    """
    timestamp: datetime
    action_type: ActionType
    source: Optional[str]
    details: dict

    @classmethod
    def create(
        cls,
        action_type: ActionType,
        source: Optional[str],
        details: dict,
    ) -> "DecisionLogEntry":
        """Factory method with auto-generated timestamp."""
        return cls(
            timestamp=datetime.now(),
            action_type=action_type,
            source=source,
            details=details,
        )
