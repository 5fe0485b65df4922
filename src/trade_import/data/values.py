"""
Tolerant value parsers for broker CSV exports.

Brokers disagree on line endings, quoting, number locale and date layout.
The helpers here turn raw cell text into Decimal, datetime and symbol
values without ever raising on bad input: numbers come back as None when
they cannot be read, dates fall back to the current time.
"""

import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional


_CURRENCY_SYMBOLS = re.compile(r"[$€£¥₹₿]")
_WHITESPACE = re.compile(r"\s+")
# European decimal comma: "1.234,56" or "12,5"
_COMMA_DECIMAL = re.compile(r"\d,\d{1,2}$")

_TIME_PART = r"(?:[,\sT]+(\d{1,2}):(\d{2})(?::(\d{2}))?)?"
_DMY = re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})" + _TIME_PART)
_YMD = re.compile(r"^(\d{4})[/\-.](\d{1,2})[/\-.](\d{1,2})" + _TIME_PART)

# Textual month layouts, e.g. Fidelity's "Sep 3, 2025"
_TEXT_DATE_FORMATS = (
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d %Y",
)

_LEGAL_SUFFIX = re.compile(
    r"[\s,]+(?:INC|CORP|LTD|PLC|CO)\.?$|\s+CLASS [A-Z]$",
    re.IGNORECASE,
)
_EXCHANGE_PREFIX = re.compile(r"^(?:NYSE|NASDAQ|LSE|TSE|ASX):", re.IGNORECASE)


def normalize_text(value: str) -> str:
    """Lowercase, trim and collapse internal whitespace."""
    return _WHITESPACE.sub(" ", value.strip().lower())


def split_lines(content: str) -> list[str]:
    """
    Split raw CSV text into non-blank lines.

    Accepts \\r\\n, \\n and bare \\r line endings and drops a leading
    UTF-8 byte order mark.
    """
    if content.startswith("\ufeff"):
        content = content[1:]
    return [line for line in re.split(r"\r\n|\n|\r", content) if line.strip()]


def parse_csv_line(line: str) -> list[str]:
    """
    Split one CSV line into trimmed fields.

    Double quotes wrap a field, two consecutive double quotes inside a
    quoted field stand for one literal quote, and commas inside quotes are
    not separators.
    """
    result = []
    current = []
    in_quotes = False
    i = 0
    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            result.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    result.append("".join(current).strip())
    return result


def parse_number(value: Optional[str]) -> Optional[Decimal]:
    """
    Parse a numeric cell.

    Handles currency symbols, thousands separators, European decimal commas
    and accounting-style parentheses for negatives.

    Args:
        value: Raw cell text

    Returns:
        Decimal value, or None when the cell is empty or not a number.
        Zero is returned as Decimal("0"), never as None.

    Example:
        >>> parse_number("1.234,56")
        Decimal('1234.56')
        >>> parse_number("(100.00)")
        Decimal('-100.00')
    """
    if value is None:
        return None

    cleaned = _WHITESPACE.sub("", _CURRENCY_SYMBOLS.sub("", value))
    if cleaned in ("", "-"):
        return None

    # Accounting format for negatives
    negative = cleaned.startswith("(") and cleaned.endswith(")")
    if negative:
        cleaned = cleaned[1:-1]

    if _COMMA_DECIMAL.search(cleaned):
        cleaned = cleaned.replace(".", "").replace(",", ".", 1)
    else:
        cleaned = cleaned.replace(",", "")

    try:
        number = Decimal(cleaned)
    except InvalidOperation:
        return None

    if not number.is_finite():
        return None
    return -number if negative else number


def parse_date(value: Optional[str], now: Optional[datetime] = None) -> datetime:
    """
    Parse a date/time cell, falling back to the current time.

    Tries ISO 8601 first, then day-month-year and year-month-day layouts
    with '/', '-' or '.' separators (each optionally followed by a time of
    day), then textual month names. A day-first value whose month is above
    12 is read as US month/day instead. Timezone-aware values are converted to
    naive UTC so that all parsed timestamps compare with each other.

    Args:
        value: Raw cell text
        now: Value to return when nothing parses (defaults to datetime.now())

    Returns:
        A naive datetime; never raises
    """
    fallback = now if now is not None else datetime.now()
    if not value or not value.strip():
        return fallback

    text = value.strip()

    iso_text = text[:-1] + "+00:00" if text.endswith(("Z", "z")) else text
    try:
        return _to_naive(datetime.fromisoformat(iso_text))
    except ValueError:
        pass

    match = _DMY.match(text)
    if match:
        day, month, year = (int(g) for g in match.groups()[:3])
        parsed = _build_datetime(year, month, day, match.groups()[3:])
        if parsed is None and month > 12:
            # Only a US month/day reading fits, e.g. 01/15/2024
            parsed = _build_datetime(year, day, month, match.groups()[3:])
        if parsed is not None:
            return parsed

    match = _YMD.match(text)
    if match:
        year, month, day = (int(g) for g in match.groups()[:3])
        parsed = _build_datetime(year, month, day, match.groups()[3:])
        if parsed is not None:
            return parsed

    for fmt in _TEXT_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    return fallback


def _build_datetime(year: int, month: int, day: int, time_groups) -> Optional[datetime]:
    hour, minute, second = (int(g) if g else 0 for g in time_groups)
    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError:
        return None


def _to_naive(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def clean_symbol(value: Optional[str]) -> str:
    """
    Clean a ticker or instrument name cell.

    Uppercases, strips trailing legal-entity suffixes ("Inc.", "Corp",
    "Class A", ...) and leading exchange prefixes ("NYSE:").
    """
    if not value:
        return ""

    cleaned = value.strip().upper()

    previous = None
    while previous != cleaned:
        previous = cleaned
        cleaned = _LEGAL_SUFFIX.sub("", cleaned).strip()

    cleaned = _EXCHANGE_PREFIX.sub("", cleaned)
    return cleaned.strip()
