"""
Command-line interface for the trade importer.

Provides commands for:
- parse: Parse a broker CSV export into canonical trades
- dedupe: Drop trades that already exist in another trade file
- init-config: Write a configuration file with the default settings
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from trade_import import __version__
from trade_import.analytics import import_trades
from trade_import.config import (
    ConfigurationError,
    ImportConfig,
    load_import_config,
    write_config,
)
from trade_import.data import load_trades, parse_csv_file, save_trades
from trade_import.data.formats import FORMATS, FORMAT_AUTO
from trade_import.data.loaders import DataLoadError
from trade_import.logging import get_logger
from trade_import.models import ParseResult, TradeSource


SOURCE_CHOICES = [s.value for s in TradeSource]


@click.group()
@click.version_option(version=__version__, prog_name="trade-import")
def main():
    """
    Broker CSV trade importer.

    Turns Trading212, IBKR and generic broker exports into canonical
    buy/sell trades, with per-row skip diagnostics.
    """
    pass


def _load_config(config: Optional[str]) -> ImportConfig:
    env_file = Path(".env")
    try:
        return load_import_config(config, env_file=env_file if env_file.exists() else None)
    except ConfigurationError as e:
        click.echo(f"Error loading config: {e}", err=True)
        sys.exit(1)


def _print_diagnostics(result: ParseResult) -> None:
    diagnostics = result.diagnostics
    click.echo()
    click.echo("Import summary:")
    click.echo(f"  Rows: {diagnostics.total_rows}")
    click.echo(f"  Trades: {diagnostics.trades_imported}")
    click.echo(f"  {diagnostics.skip_summary()}")
    click.echo(f"  Symbols: {len(diagnostics.unique_symbols)}")
    click.echo(f"  Total invested: {diagnostics.total_invested:,.2f}")

    for warning in diagnostics.warnings:
        click.echo(f"  Warning: {warning}")
    for error in result.errors:
        click.echo(f"  Error: {error}", err=True)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--source", "-s",
    type=click.Choice(SOURCE_CHOICES),
    default=None,
    help="Trade source tag. Defaults to config default_source.",
)
@click.option(
    "--format", "-f", "fmt",
    type=click.Choice(FORMATS),
    default=FORMAT_AUTO,
    help="File layout. 'auto' detects IBKR activity statements.",
)
@click.option(
    "--existing", "-e",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Saved trades CSV; trades already in it are dropped.",
)
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the imported trades to this CSV file.",
)
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to import configuration YAML file",
)
@click.option(
    "--log-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Decision log directory. Defaults to config output_dir.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def parse(
    file: str,
    source: Optional[str],
    fmt: str,
    existing: Optional[str],
    output: Optional[str],
    config: Optional[str],
    log_dir: Optional[str],
    verbose: bool,
):
    """
    Parse a broker CSV export.

    Prints an import summary with the reasons rows were skipped. Exits with
    status 1 when the file cannot be imported at all.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    import_config = _load_config(config)
    trade_source = TradeSource.coerce(source) if source else import_config.default_source

    out_dir = Path(log_dir or import_config.output_dir)
    decision_log = get_logger(out_dir / "decision_log.jsonl")
    decision_log.log_config_loaded(import_config, config)

    click.echo(f"Parsing {file} as {trade_source.value}...")
    result = parse_csv_file(
        file,
        source=trade_source,
        fmt=fmt,
        tables=import_config.tables(),
        warn_unrecognized=import_config.warn_unrecognized_symbols,
    )
    decision_log.log_csv_parsed(trade_source, file, result)
    _print_diagnostics(result)

    if not result.ok:
        sys.exit(1)

    trades = result.trades
    if existing:
        try:
            existing_trades = load_trades(existing)
        except DataLoadError as e:
            click.echo(f"Error loading existing trades: {e}", err=True)
            sys.exit(1)

        import_result = import_trades(trades, existing_trades, import_config.tolerance())
        decision_log.log_duplicates_filtered(trade_source, import_result)
        trades = import_result.unique_trades
        click.echo(
            f"  Duplicates: {import_result.trades_skipped} already present, "
            f"{import_result.trades_added} new"
        )

    if output:
        saved = save_trades(trades, output)
        decision_log.log_trades_saved(str(saved), len(trades), trade_source)
        click.echo(f"  Trades saved: {saved}")


@main.command()
@click.argument("new", type=click.Path(exists=True, dir_okay=False))
@click.argument("existing", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the trades not present in EXISTING to this CSV file.",
)
@click.option(
    "--config", "-c",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to import configuration YAML file",
)
def dedupe(new: str, existing: str, output: Optional[str], config: Optional[str]):
    """
    Compare two saved trade files.

    Reports which trades in NEW already exist in EXISTING within the
    configured quantity, price and time tolerances.
    """
    import_config = _load_config(config)

    try:
        new_trades = load_trades(new)
        existing_trades = load_trades(existing)
    except DataLoadError as e:
        click.echo(f"Error loading trades: {e}", err=True)
        sys.exit(1)

    result = import_trades(new_trades, existing_trades, import_config.tolerance())

    click.echo(f"New trades: {result.trades_added}")
    click.echo(f"Duplicates: {result.trades_skipped}")
    for trade in result.duplicate_trades:
        click.echo(
            f"  {trade.date.isoformat()} {trade.side.value.upper()} "
            f"{trade.quantity} {trade.symbol} @ {trade.price}"
        )

    if output:
        saved = save_trades(result.unique_trades, output)
        click.echo(f"Trades saved: {saved}")


@main.command("init-config")
@click.argument("path", type=click.Path(dir_okay=False))
def init_config(path: str):
    """Write a configuration file holding the default settings."""
    write_config(ImportConfig(), path)
    click.echo(f"Configuration written: {path}")


if __name__ == "__main__":
    main()
