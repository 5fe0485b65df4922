"""
Classification of broker action text into buy, sell or non-trade activity.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from trade_import.data.tables import DEFAULT_TABLES, ParserTables
from trade_import.data.values import normalize_text
from trade_import.models import TradeSide


class ActionKind(Enum):
    """Outcome of classifying an action cell."""
    TRADE = "TRADE"
    IGNORED = "IGNORED"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class ActionClassification:
    """
    Classified action.

    Attributes:
        kind: TRADE, IGNORED or UNKNOWN
        side: BUY/SELL when the side could be read from the text. A TRADE
            with side None is a recognised but ambiguous abbreviation
            ("market"), so the caller must infer the side from other data.
    """
    kind: ActionKind
    side: Optional[TradeSide] = None


def is_ignored_action(action: str, tables: ParserTables = DEFAULT_TABLES) -> bool:
    """True for deposits, dividends, fees and other non-trade activity."""
    normalized = normalize_text(action)
    return any(ignored in normalized for ignored in tables.ignored_actions)


def get_trade_side(action: str, tables: ParserTables = DEFAULT_TABLES) -> Optional[TradeSide]:
    """
    Read the trade side from action text.

    The action containing a known verb wins ("Market buy" -> BUY). Failing
    that, an abbreviation contained in exactly one side's verbs is accepted
    ("purch" -> BUY); an abbreviation shared by both sides returns None.
    """
    normalized = normalize_text(action)
    if not normalized:
        return None

    if any(verb in normalized for verb in tables.buy_actions):
        return TradeSide.BUY
    if any(verb in normalized for verb in tables.sell_actions):
        return TradeSide.SELL

    in_buy = any(normalized in verb for verb in tables.buy_actions)
    in_sell = any(normalized in verb for verb in tables.sell_actions)
    if in_buy and not in_sell:
        return TradeSide.BUY
    if in_sell and not in_buy:
        return TradeSide.SELL
    return None


def is_trade_action(action: str, tables: ParserTables = DEFAULT_TABLES) -> bool:
    """True when the text contains, or abbreviates, any buy or sell verb."""
    normalized = normalize_text(action)
    if not normalized:
        return False
    verbs = tables.buy_actions + tables.sell_actions
    return any(verb in normalized or normalized in verb for verb in verbs)


def classify_action(action: str, tables: ParserTables = DEFAULT_TABLES) -> ActionClassification:
    """
    Classify an action cell.

    Ignored activity is checked first so "Dividend reinvestment buy" is not
    mistaken for a purchase.
    """
    if is_ignored_action(action, tables):
        return ActionClassification(ActionKind.IGNORED)

    side = get_trade_side(action, tables)
    if side is not None:
        return ActionClassification(ActionKind.TRADE, side)

    if is_trade_action(action, tables):
        return ActionClassification(ActionKind.TRADE)

    return ActionClassification(ActionKind.UNKNOWN)
