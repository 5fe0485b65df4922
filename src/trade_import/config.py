"""
Configuration loading and management for the trade importer.

This module handles loading import settings from YAML files, .env files and
environment variables, and validation of configuration parameters.
"""

import os
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import dotenv_values

from trade_import.analytics.duplicates import DuplicateTolerance
from trade_import.data.tables import DEFAULT_TABLES, ParserTables
from trade_import.models import TradeSource


# Environment variable -> config key
ENV_OVERRIDES = {
    "TRADE_IMPORT_DEFAULT_SOURCE": "default_source",
    "TRADE_IMPORT_QTY_TOLERANCE": "quantity_tolerance",
    "TRADE_IMPORT_PRICE_TOLERANCE": "price_tolerance",
    "TRADE_IMPORT_TIME_WINDOW": "time_window_seconds",
    "TRADE_IMPORT_OUTPUT_DIR": "output_dir",
}


class ConfigurationError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


@dataclass
class ImportConfig:
    """
    Import configuration.

    Attributes:
        default_source: Source tag used when the caller does not pass one
        quantity_tolerance: Duplicate match threshold for quantity
        price_tolerance: Duplicate match threshold for price
        time_window_seconds: Duplicate match threshold for timestamps
        warn_unrecognized_symbols: Warn about unresolved symbols
        extra_company_tickers: Company name -> ticker additions
        output_dir: Directory for output files and the decision log
    """
    default_source: TradeSource = TradeSource.CSV
    quantity_tolerance: Decimal = Decimal("0.0001")
    price_tolerance: Decimal = Decimal("0.01")
    time_window_seconds: Decimal = Decimal("60")
    warn_unrecognized_symbols: bool = True
    extra_company_tickers: dict[str, str] = field(default_factory=dict)
    output_dir: str = "output"

    def tolerance(self) -> DuplicateTolerance:
        """Duplicate thresholds as a DuplicateTolerance."""
        return DuplicateTolerance(
            quantity=self.quantity_tolerance,
            price=self.price_tolerance,
            time_window=timedelta(seconds=float(self.time_window_seconds)),
        )

    def tables(self, base: ParserTables = DEFAULT_TABLES) -> ParserTables:
        """Lookup tables including the configured extra tickers."""
        return base.with_tickers(self.extra_company_tickers)


def load_import_config(
    config_path: str | Path | None = None,
    env_file: str | Path | None = None,
) -> ImportConfig:
    """
    Load import configuration from multiple sources with priority.

    Sources are applied in this order (later sources override earlier):
    1. YAML configuration file (if given)
    2. .env file (if given and present)
    3. Environment variables

    Args:
        config_path: Path to the YAML configuration file
        env_file: Path to a .env file

    Returns:
        ImportConfig with validated settings

    Raises:
        ConfigurationError: If the file cannot be loaded or is invalid

    Example:
        >>> config = load_import_config("config/import.yaml")
        >>> config.tolerance().price
        Decimal('0.01')
    """
    raw: dict[str, Any] = {}

    if config_path is not None:
        raw.update(_read_yaml(Path(config_path)))

    if env_file is not None and Path(env_file).exists():
        raw.update(_env_overrides(dotenv_values(env_file)))

    raw.update(_env_overrides(os.environ))

    return _parse_import_config(raw)


def _read_yaml(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            raw_config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in configuration file: {e}")

    if raw_config is None:
        return {}
    if not isinstance(raw_config, dict):
        raise ConfigurationError(
            f"Configuration file must contain a mapping, got {type(raw_config).__name__}"
        )
    return raw_config


def _env_overrides(values: Any) -> dict[str, Any]:
    """Pick the recognised TRADE_IMPORT_* variables out of an environment mapping."""
    result = {}
    for env_name, key in ENV_OVERRIDES.items():
        value = values.get(env_name)
        if value not in (None, ""):
            result[key] = value
    return result


def _parse_import_config(raw: dict[str, Any]) -> ImportConfig:
    """
    Parse and validate raw configuration dictionary into ImportConfig.

    Args:
        raw: Dictionary loaded from YAML and environment

    Returns:
        Validated ImportConfig

    Raises:
        ConfigurationError: If a field is invalid
    """
    try:
        default_source = TradeSource.coerce(raw.get("default_source", "csv"))
    except ValueError as e:
        raise ConfigurationError(str(e))

    quantity_tolerance = _parse_decimal(
        raw.get("quantity_tolerance", "0.0001"),
        "quantity_tolerance",
        min_val=Decimal("0"),
    )

    price_tolerance = _parse_decimal(
        raw.get("price_tolerance", "0.01"),
        "price_tolerance",
        min_val=Decimal("0"),
    )

    time_window_seconds = _parse_decimal(
        raw.get("time_window_seconds", "60"),
        "time_window_seconds",
        min_val=Decimal("0"),
        max_val=Decimal("86400"),
    )

    warn_unrecognized = _parse_bool(
        raw.get("warn_unrecognized_symbols", True),
        "warn_unrecognized_symbols",
    )

    extra_tickers = raw.get("extra_company_tickers") or {}
    if not isinstance(extra_tickers, dict):
        raise ConfigurationError("extra_company_tickers must be a mapping of name -> ticker")
    extra_tickers = {
        str(name).strip().upper(): str(ticker).strip().upper()
        for name, ticker in extra_tickers.items()
    }

    output_dir = str(raw.get("output_dir", "output"))

    return ImportConfig(
        default_source=default_source,
        quantity_tolerance=quantity_tolerance,
        price_tolerance=price_tolerance,
        time_window_seconds=time_window_seconds,
        warn_unrecognized_symbols=warn_unrecognized,
        extra_company_tickers=extra_tickers,
        output_dir=output_dir,
    )


def _parse_decimal(
    value: Any,
    field_name: str,
    min_val: Optional[Decimal] = None,
    max_val: Optional[Decimal] = None,
) -> Decimal:
    """
    Parse a decimal value with optional range validation.

    Args:
        value: The value to parse
        field_name: Name of the field for error messages
        min_val: Minimum allowed value (inclusive)
        max_val: Maximum allowed value (inclusive)

    Returns:
        Parsed Decimal

    Raises:
        ConfigurationError: If the value is invalid or out of range
    """
    try:
        decimal_value = Decimal(str(value).strip())
    except Exception:
        raise ConfigurationError(f"Invalid decimal value for {field_name}: {value}")

    if not decimal_value.is_finite():
        raise ConfigurationError(f"Invalid decimal value for {field_name}: {value}")

    if min_val is not None and decimal_value < min_val:
        raise ConfigurationError(
            f"{field_name} must be >= {min_val}, got {decimal_value}"
        )

    if max_val is not None and decimal_value > max_val:
        raise ConfigurationError(
            f"{field_name} must be <= {max_val}, got {decimal_value}"
        )

    return decimal_value


def _parse_bool(value: Any, field_name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off"):
        return False
    raise ConfigurationError(f"Invalid boolean value for {field_name}: {value}")


def write_config(config: ImportConfig, output_path: str | Path) -> None:
    """
    Write an ImportConfig to a YAML file.

    Args:
        config: The configuration to write
        output_path: Path to write the YAML file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = {
        "default_source": config.default_source.value,
        "quantity_tolerance": str(config.quantity_tolerance),
        "price_tolerance": str(config.price_tolerance),
        "time_window_seconds": str(config.time_window_seconds),
        "warn_unrecognized_symbols": config.warn_unrecognized_symbols,
        "extra_company_tickers": dict(config.extra_company_tickers),
        "output_dir": config.output_dir,
    }

    with open(output_path, "w") as f:
        yaml.dump(config_dict, f, default_flow_style=False, sort_keys=False)
