"""
Append-only decision logging for the trade importer.

Every import step (config load, parse, duplicate filter, save) is written
as one JSON object per line so that an import can be audited afterwards.
"""

import json
from datetime import datetime, date
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

from trade_import.config import ImportConfig
from trade_import.models import (
    ActionType,
    DecisionLogEntry,
    ImportResult,
    ParseResult,
    TradeSource,
)


class DecisionLogger:
    """
    Append-only decision logger.

    Writes all decisions to a JSONL file for audit purposes.
    Each line is a complete JSON object representing one action.
    """

    def __init__(self, log_path: str | Path):
        """
        Initialize the decision logger.

        Args:
            log_path: Path to the log file (will be created if not exists)
        """
        self.log_path = Path(log_path)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)

    def log(self, entry: DecisionLogEntry) -> None:
        """
        Write a decision log entry.

        Args:
            entry: DecisionLogEntry to write
        """
        record = {
            "timestamp": entry.timestamp.isoformat(),
            "action_type": entry.action_type.value,
            "source": entry.source,
            "details": entry.details,
        }

        with open(self.log_path, "a") as f:
            f.write(json.dumps(record, cls=DecimalEncoder) + "\n")

    def log_config_loaded(
        self,
        config: ImportConfig,
        config_path: Optional[str],
    ) -> None:
        """
        Log configuration loading.

        Args:
            config: Loaded configuration
            config_path: Path to configuration file, None for defaults
        """
        details = {
            "config_path": config_path,
            "default_source": config.default_source.value,
            "quantity_tolerance": str(config.quantity_tolerance),
            "price_tolerance": str(config.price_tolerance),
            "time_window_seconds": str(config.time_window_seconds),
            "extra_company_tickers": len(config.extra_company_tickers),
        }

        entry = DecisionLogEntry.create(
            action_type=ActionType.CONFIG_LOADED,
            source=config.default_source.value,
            details=details,
        )
        self.log(entry)

    def log_csv_parsed(
        self,
        source: TradeSource,
        file_path: str,
        result: ParseResult,
    ) -> None:
        """
        Log the outcome of parsing one CSV export.

        Args:
            source: Source tag the file was parsed as
            file_path: Path of the parsed file
            result: Parser output
        """
        diagnostics = result.diagnostics
        details = {
            "file": file_path,
            "total_rows": diagnostics.total_rows,
            "trades_imported": diagnostics.trades_imported,
            "rows_skipped": diagnostics.rows_skipped,
            "skip_reasons": dict(diagnostics.skip_reasons),
            "warnings": list(diagnostics.warnings),
            "errors": list(result.errors),
            "total_invested": diagnostics.total_invested,
            "unique_symbols": diagnostics.unique_symbols[:20],
        }

        entry = DecisionLogEntry.create(
            action_type=ActionType.CSV_PARSED,
            source=source.value,
            details=details,
        )
        self.log(entry)

    def log_duplicates_filtered(
        self,
        source: TradeSource,
        result: ImportResult,
    ) -> None:
        """
        Log a duplicate filter against an existing trade set.

        Args:
            source: Source tag of the new trades
            result: Duplicate filter result
        """
        details = {
            "trades_added": result.trades_added,
            "trades_skipped": result.trades_skipped,
            "duplicate_trade_ids": [t.trade_id for t in result.duplicate_trades[:20]],
        }

        entry = DecisionLogEntry.create(
            action_type=ActionType.DUPLICATES_FILTERED,
            source=source.value,
            details=details,
        )
        self.log(entry)

    def log_trades_saved(
        self,
        output_path: str,
        count: int,
        source: Optional[TradeSource] = None,
    ) -> None:
        details = {
            "output_path": output_path,
            "trade_count": count,
        }

        entry = DecisionLogEntry.create(
            action_type=ActionType.TRADES_SAVED,
            source=source.value if source else None,
            details=details,
        )
        self.log(entry)

    def read_log(self) -> list[DecisionLogEntry]:
        """
        Read all entries from the log file.

        Returns:
            List of DecisionLogEntry objects
        """
        if not self.log_path.exists():
            return []

        entries = []
        with open(self.log_path, "r") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                record = json.loads(line)
                entries.append(
                    DecisionLogEntry(
                        timestamp=datetime.fromisoformat(record["timestamp"]),
                        action_type=ActionType(record["action_type"]),
                        source=record.get("source"),
                        details=record.get("details", {}),
                    )
                )

        return entries

    def filter_by_action_type(
        self,
        action_type: ActionType,
    ) -> list[DecisionLogEntry]:
        """Get log entries of a specific action type."""
        return [e for e in self.read_log() if e.action_type == action_type]


class DecimalEncoder(json.JSONEncoder):
    """JSON encoder that handles Decimal and date types."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, (datetime, date)):
            return obj.isoformat()
        return super().default(obj)


# Global logger instance (initialized on first use)
_global_logger: Optional[DecisionLogger] = None


def get_logger(log_path: Optional[str | Path] = None) -> DecisionLogger:
    """
    Get or create the global decision logger.

    Args:
        log_path: Optional path; replaces the current logger when given

    Returns:
        DecisionLogger instance
    """
    global _global_logger

    if _global_logger is None:
        if log_path is None:
            log_path = "output/decision_log.jsonl"
        _global_logger = DecisionLogger(log_path)
    elif log_path is not None:
        _global_logger = DecisionLogger(log_path)

    return _global_logger


def log_action(
    action_type: ActionType,
    source: Optional[str],
    details: dict,
    log_path: Optional[str | Path] = None,
) -> None:
    """
    Convenience function to log an action.

    Args:
        action_type: Type of action
        source: Trade source tag (optional)
        details: Action details dictionary
        log_path: Optional path to log file
    """
    logger = get_logger(log_path)
    entry = DecisionLogEntry.create(
        action_type=action_type,
        source=source,
        details=details,
    )
    logger.log(entry)
