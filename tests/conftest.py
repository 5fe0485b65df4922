"""
Pytest fixtures for the trade import tests.

Provides sample broker exports and trade records used across test modules.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from trade_import.models import AssetType, Trade, TradeSide, TradeSource


@pytest.fixture
def fixed_now() -> datetime:
    """Timestamp handed to parsers as the date fallback."""
    return datetime(2025, 6, 30, 12, 0, 0)


@pytest.fixture
def trading212_csv() -> str:
    """A Trading212 history export with trades, cash movements and a dividend."""
    return (
        "Action,Time,ISIN,Ticker,Name,Notes,ID,No. of shares,Price / share,"
        "Currency (Price / share),Exchange rate,Result,Currency (Result),Total,"
        "Currency (Total),Currency conversion fee,Currency (Currency conversion fee)\n"
        "Deposit,2024-01-02 09:00:00,,,,,D1,,,,,,,1000.00,EUR,,\n"
        "Market buy,2024-01-15 14:30:05,US0378331005,AAPL,Apple Inc,,EOF1,5,150.25,"
        "USD,1.09,,EUR,689.22,EUR,1.03,EUR\n"
        "Market buy,2024-01-16 10:00:00,US5949181045,MSFT,Microsoft,,EOF2,0.123456789,"
        "375.00,USD,1.09,,EUR,42.47,EUR,0.06,EUR\n"
        "Dividend (Ordinary),2024-02-15 12:00:00,US0378331005,AAPL,Apple Inc,,,4.99,0.24,"
        "USD,,,,1.10,EUR,,\n"
        "Market sell,2024-03-01 16:45:00,US0378331005,AAPL,Apple Inc,,EOF3,2,175.50,"
        "USD,1.08,45.00,EUR,325.00,EUR,0.49,EUR\n"
    )


@pytest.fixture
def ibkr_statement() -> str:
    """An IBKR activity statement with Dividends sections around the Trades section."""
    return (
        "Statement,Header,Field Name,Field Value\n"
        "Statement,Data,Title,Activity Statement\n"
        "Dividends,Header,Currency,Date,Description,Amount\n"
        "Dividends,Data,USD,2024-01-10,MSFT Cash Dividend USD 0.75 per Share,7.50\n"
        "Dividends,Total,,,,7.50\n"
        "Trades,Header,DataDiscriminator,Asset Category,Currency,Symbol,Date/Time,"
        "Quantity,T. Price,C. Price,Proceeds,Comm/Fee,Basis,Realized P/L,MTM P/L,Code\n"
        'Trades,Data,Order,Stocks,USD,AAPL,"2024-01-15, 10:30:00",10,150.25,152.00,'
        "-1502.5,-1,1503.5,0,17.5,O\n"
        "Trades,SubTotal,,Stocks,USD,AAPL,,10,,,-1502.5,-1,1503.5,0,17.5,\n"
        'Trades,Data,Order,Stocks,USD,MSFT,"2024-02-20, 15:59:59",-4,410.10,409.00,'
        "1640.4,-1.2,-1500,139.2,4.4,C\n"
        "Trades,SubTotal,,Stocks,USD,MSFT,,-4,,,1640.4,-1.2,-1500,139.2,4.4,\n"
        "Trades,Total,,Stocks,USD,,,,,,137.9,-2.2,3.5,139.2,21.9,\n"
        "Dividends,Header,Currency,Date,Description,Amount\n"
        "Dividends,Data,USD,2024-03-10,AAPL Cash Dividend USD 0.24 per Share,2.40\n"
    )


@pytest.fixture
def sample_trade() -> Trade:
    """A single AAPL buy."""
    return Trade(
        trade_id="trade-001",
        symbol="AAPL",
        asset_type=AssetType.STOCK,
        side=TradeSide.BUY,
        quantity=Decimal("10"),
        price=Decimal("150.00"),
        date=datetime(2024, 1, 15, 10, 30, 0),
        source=TradeSource.CSV,
    )


@pytest.fixture
def sample_trades() -> list[Trade]:
    """A small mixed set of stock and crypto trades."""
    return [
        Trade(
            trade_id="trade-001",
            symbol="AAPL",
            asset_type=AssetType.STOCK,
            side=TradeSide.BUY,
            quantity=Decimal("10"),
            price=Decimal("150.00"),
            date=datetime(2024, 1, 15, 10, 30, 0),
            source=TradeSource.TRADING212,
            fee=Decimal("1.03"),
            currency="USD",
        ),
        Trade(
            trade_id="trade-002",
            symbol="BTC",
            asset_type=AssetType.CRYPTO,
            side=TradeSide.BUY,
            quantity=Decimal("0.00012345"),
            price=Decimal("42000.50"),
            date=datetime(2024, 1, 20, 8, 0, 0),
            source=TradeSource.BINANCE,
        ),
        Trade(
            trade_id="trade-003",
            symbol="AAPL",
            asset_type=AssetType.STOCK,
            side=TradeSide.SELL,
            quantity=Decimal("4"),
            price=Decimal("175.50"),
            date=datetime(2024, 3, 1, 16, 45, 0),
            source=TradeSource.TRADING212,
        ),
    ]
