"""
Header-to-field column detection.

Maps free-form broker headers ("No. of shares", "T. Price", "Comm/Fee")
to the canonical trade fields using the alias table in ParserTables.
"""

import logging
from typing import Optional

from trade_import.data.tables import DEFAULT_TABLES, ParserTables
from trade_import.data.values import normalize_text
from trade_import.models import ColumnMap


logger = logging.getLogger(__name__)


def detect_columns(
    headers: list[str],
    tables: ParserTables = DEFAULT_TABLES,
) -> ColumnMap:
    """
    Detect column indices from a header row.

    Fields are resolved in alias-table order. For each field an exact alias
    match anywhere in the row wins; otherwise the first header that contains
    an alias (or is contained in one) is taken. A column claimed by an
    earlier field is never reassigned.

    Args:
        headers: Raw header cells
        tables: Lookup tables providing the alias lists

    Returns:
        ColumnMap with None for every field that was not found
    """
    column_map = ColumnMap()
    normalized = [normalize_text(h) for h in headers]
    valid_fields = set(ColumnMap.field_names())

    for field_name, aliases in tables.column_aliases.items():
        if field_name not in valid_fields:
            logger.debug("Ignoring aliases for unknown field %r", field_name)
            continue

        index = _match_field(normalized, aliases, column_map.claimed_indices())
        setattr(column_map, field_name, index)

    logger.debug("Headers: %s", headers)
    logger.debug("Detected columns: %s", column_map.describe(headers))
    return column_map


def _match_field(
    headers: list[str],
    aliases: tuple[str, ...],
    claimed: set[int],
) -> Optional[int]:
    candidates = [
        (i, header) for i, header in enumerate(headers)
        if i not in claimed and header
    ]

    for i, header in candidates:
        if header in aliases:
            return i

    for i, header in candidates:
        if any(alias in header or header in alias for alias in aliases):
            return i

    return None

