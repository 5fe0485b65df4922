"""
Broker CSV trade import (trade-import)

Turns brokerage trade-history CSV exports (Trading212, IBKR activity
statements and similar formats) into canonical trade records, reports what
was imported or skipped and why, and filters out trades that are already
present in an existing trade set.

The library is pure: it reads text and returns records. Storage, prices
and presentation belong to the caller.
"""

__version__ = "0.1.0"
__author__ = "Trade Import Team"
