"""
Static lookup tables for the CSV trade importer.

Column aliases, action word lists, the company-name to ticker map and the
known crypto symbols. Everything here is immutable; a parser receives a
ParserTables instance and never mutates it, so one instance can be shared
by any number of concurrent imports.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping


# Company names (uppercase) to Yahoo Finance style tickers
COMPANY_TO_TICKER: Mapping[str, str] = MappingProxyType({
    # Mega-caps
    "APPLE": "AAPL",
    "APPLE INC": "AAPL",
    "MICROSOFT": "MSFT",
    "MICROSOFT CORPORATION": "MSFT",
    "AMAZON": "AMZN",
    "AMAZON.COM": "AMZN",
    "AMAZON.COM INC": "AMZN",
    "ALPHABET (CLASS A)": "GOOGL",
    "ALPHABET (CLASS C)": "GOOG",
    "ALPHABET": "GOOGL",
    "GOOGLE": "GOOGL",
    "META PLATFORMS": "META",
    "FACEBOOK": "META",
    "TESLA": "TSLA",
    "TESLA INC": "TSLA",
    "NVIDIA": "NVDA",
    "NVIDIA CORPORATION": "NVDA",
    "BROADCOM": "AVGO",
    "BERKSHIRE HATHAWAY": "BRK-B",
    "NETFLIX": "NFLX",

    # Financials
    "VISA": "V",
    "MASTERCARD": "MA",
    "JPMORGAN": "JPM",
    "JPMORGAN CHASE": "JPM",
    "BANK OF AMERICA": "BAC",
    "GOLDMAN SACHS": "GS",
    "PAYPAL": "PYPL",
    "COINBASE": "COIN",
    "SQUARE": "SQ",
    "BLOCK": "SQ",
    "SOFI": "SOFI",
    "SOFI TECHNOLOGIES": "SOFI",
    "ROBINHOOD": "HOOD",
    "ROBINHOOD MARKETS": "HOOD",

    # Semiconductors / hardware
    "AMD": "AMD",
    "ADVANCED MICRO DEVICES": "AMD",
    "INTEL": "INTC",
    "CISCO": "CSCO",

    # Software
    "PALANTIR": "PLTR",
    "PALANTIR TECHNOLOGIES": "PLTR",
    "SNOWFLAKE": "SNOW",
    "SALESFORCE": "CRM",
    "ADOBE": "ADBE",
    "ORACLE": "ORCL",
    "SHOPIFY": "SHOP",
    "SPOTIFY": "SPOT",
    "ZOOM": "ZM",
    "ZOOM VIDEO": "ZM",
    "DOCUSIGN": "DOCU",
    "CROWDSTRIKE": "CRWD",
    "DATADOG": "DDOG",
    "TWILIO": "TWLO",
    "OKTA": "OKTA",
    "ATLASSIAN": "TEAM",
    "SERVICENOW": "NOW",
    "WORKDAY": "WDAY",
    "SPLUNK": "SPLK",
    "PALO ALTO NETWORKS": "PANW",
    "FORTINET": "FTNT",
    "ZSCALER": "ZS",
    "CLOUDFLARE": "NET",
    "MONGODB": "MDB",
    "ELASTIC": "ESTC",
    "CONFLUENT": "CFLT",

    # Consumer / healthcare
    "DISNEY": "DIS",
    "WALT DISNEY": "DIS",
    "JOHNSON & JOHNSON": "JNJ",
    "UNITEDHEALTH": "UNH",
    "WALMART": "WMT",
    "HOME DEPOT": "HD",
    "COSTCO": "COST",
    "UBER": "UBER",
    "AIRBNB": "ABNB",
})

CRYPTO_SYMBOLS: frozenset[str] = frozenset({
    "BTC", "ETH", "SOL", "XRP", "ADA", "DOGE", "DOT", "LINK", "AVAX", "MATIC",
    "ATOM", "UNI", "LTC", "BCH", "ALGO", "FTM", "NEAR", "APE", "SAND", "MANA",
    "CRO", "SHIB", "TRX", "ETC", "XLM", "VET", "FIL", "HBAR", "ICP", "AAVE",
    "XMR", "OP", "ARB", "INJ", "SUI", "APT", "PEPE", "WIF", "BONK",
})

# Quote currencies that mark a trading pair such as BTCUSDT
CRYPTO_QUOTE_SUFFIXES: tuple[str, ...] = ("USDT", "USD", "BTC", "ETH")

# Canonical field -> header aliases. Declaration order is detection priority;
# ticker comes before instrument so an explicit symbol column wins over a name.
COLUMN_ALIASES: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "action": (
        "action", "type", "transaction", "operation",
        "trade type", "order type", "side", "direction",
    ),
    "ticker": (
        "ticker", "symbol", "ticker symbol", "stock symbol",
    ),
    "instrument": (
        "instrument", "name", "security", "asset", "stock",
        "security name", "description", "company",
    ),
    "isin": (
        "isin", "instrument id", "security id", "identifier",
        "cusip", "sedol", "figi",
    ),
    "quantity": (
        "no. of shares", "quantity", "shares", "units",
        "qty", "size", "volume", "no of shares", "num shares",
        "share quantity", "filled qty", "executed qty",
    ),
    "price": (
        "price / share", "price", "execution price", "unit price",
        "share price", "avg price", "fill price", "price per share",
        "executed price", "average price", "cost basis",
    ),
    "total": (
        "total", "value", "total value", "net amount",
        "gross amount", "total cost", "proceeds", "cost",
    ),
    "date": (
        "time", "date", "execution time", "timestamp", "trade date",
        "date/time", "datetime", "executed at", "trade time",
        "settlement date", "order date",
    ),
    "currency": (
        "currency (price / share)", "currency", "base currency", "ccy",
        "currency code", "trade currency", "settlement currency",
        "currency (result)",
    ),
    "fee": (
        "fee", "commission", "currency conversion fee", "charges",
        "costs", "comm/fee", "fees", "transaction fee", "total fees",
    ),
})

BUY_ACTIONS: tuple[str, ...] = (
    "buy", "market buy", "limit buy", "purchase", "bought",
    "long", "open", "add", "acquire",
)

SELL_ACTIONS: tuple[str, ...] = (
    "sell", "market sell", "limit sell", "sold", "short",
    "sale", "close", "reduce", "dispose",
)

# Non-trade activity: cash movements, income, corporate actions
IGNORED_ACTIONS: tuple[str, ...] = (
    "deposit", "withdrawal", "withdraw",
    "dividend", "dividends", "div", "distribution",
    "interest", "lending interest", "interest payment",
    "fx", "fx conversion", "currency conversion", "forex",
    "fee", "fees", "commission", "service fee",
    "tax", "taxes", "withholding tax", "tax withheld",
    "transfer", "internal transfer", "account transfer",
    "split", "stock split", "reverse split",
    "merger", "spinoff", "spin-off", "corporate action",
    "cash", "cash in", "cash out", "cash deposit",
    "adjustment", "correction", "rebalance",
    "journal", "journaling",
)


@dataclass(frozen=True)
class ParserTables:
    """
    Immutable bundle of every lookup table the importer consults.

    The defaults are the module-level constants above. Use with_tickers()
    to derive a copy with additional company-name mappings.
    """
    column_aliases: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: COLUMN_ALIASES)
    buy_actions: tuple[str, ...] = BUY_ACTIONS
    sell_actions: tuple[str, ...] = SELL_ACTIONS
    ignored_actions: tuple[str, ...] = IGNORED_ACTIONS
    company_to_ticker: Mapping[str, str] = field(default_factory=lambda: COMPANY_TO_TICKER)
    crypto_symbols: frozenset[str] = CRYPTO_SYMBOLS
    crypto_quote_suffixes: tuple[str, ...] = CRYPTO_QUOTE_SUFFIXES

    def with_tickers(self, extra: Mapping[str, str]) -> "ParserTables":
        """Return a copy whose company map also contains ``extra``."""
        if not extra:
            return self
        merged = dict(self.company_to_ticker)
        for name, ticker in extra.items():
            merged[str(name).strip().upper()] = str(ticker).strip().upper()
        return replace(self, company_to_ticker=MappingProxyType(merged))


DEFAULT_TABLES = ParserTables()
