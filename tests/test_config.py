"""
Tests for import configuration loading.
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from trade_import.config import (
    ENV_OVERRIDES,
    ConfigurationError,
    ImportConfig,
    load_import_config,
    write_config,
)
from trade_import.data.symbols import normalize_to_ticker
from trade_import.models import TradeSource


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep TRADE_IMPORT_* variables from the host out of the tests."""
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)


class TestLoadImportConfig:
    """Tests for load_import_config."""

    def test_defaults(self):
        config = load_import_config()

        assert config.default_source == TradeSource.CSV
        assert config.quantity_tolerance == Decimal("0.0001")
        assert config.price_tolerance == Decimal("0.01")
        assert config.time_window_seconds == Decimal("60")
        assert config.warn_unrecognized_symbols is True
        assert config.extra_company_tickers == {}

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "import.yaml"
        path.write_text(
            "default_source: trading212\n"
            "price_tolerance: '0.05'\n"
            "time_window_seconds: 120\n"
            "warn_unrecognized_symbols: false\n"
            "extra_company_tickers:\n"
            "  Vanguard S&P 500: vusa\n"
        )

        config = load_import_config(path)

        assert config.default_source == TradeSource.TRADING212
        assert config.price_tolerance == Decimal("0.05")
        assert config.time_window_seconds == Decimal("120")
        assert config.warn_unrecognized_symbols is False
        assert config.extra_company_tickers == {"VANGUARD S&P 500": "VUSA"}

    def test_env_file_then_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "import.yaml"
        path.write_text("price_tolerance: '0.05'\nquantity_tolerance: '0.001'\n")
        env_file = tmp_path / ".env"
        env_file.write_text("TRADE_IMPORT_PRICE_TOLERANCE=0.02\nTRADE_IMPORT_TIME_WINDOW=30\n")
        monkeypatch.setenv("TRADE_IMPORT_TIME_WINDOW", "90")

        config = load_import_config(path, env_file=env_file)

        assert config.quantity_tolerance == Decimal("0.001")
        assert config.price_tolerance == Decimal("0.02")
        assert config.time_window_seconds == Decimal("90")

    def test_missing_env_file_ignored(self, tmp_path):
        config = load_import_config(env_file=tmp_path / "absent.env")

        assert config.price_tolerance == Decimal("0.01")

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_import_config(path) == ImportConfig()


class TestConfigErrors:
    """Tests for invalid configuration."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_import_config(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("price_tolerance: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_import_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_import_config(path)

    def test_negative_tolerance(self, monkeypatch):
        monkeypatch.setenv("TRADE_IMPORT_PRICE_TOLERANCE", "-1")

        with pytest.raises(ConfigurationError, match="price_tolerance must be >= 0"):
            load_import_config()

    def test_non_numeric_tolerance(self, monkeypatch):
        monkeypatch.setenv("TRADE_IMPORT_QTY_TOLERANCE", "small")

        with pytest.raises(ConfigurationError, match="Invalid decimal value"):
            load_import_config()

    def test_unknown_source(self, monkeypatch):
        monkeypatch.setenv("TRADE_IMPORT_DEFAULT_SOURCE", "robinhood")

        with pytest.raises(ConfigurationError, match="Unknown trade source"):
            load_import_config()

    def test_invalid_bool(self, tmp_path):
        path = tmp_path / "import.yaml"
        path.write_text("warn_unrecognized_symbols: sometimes\n")

        with pytest.raises(ConfigurationError, match="Invalid boolean"):
            load_import_config(path)


class TestImportConfig:
    """Tests for ImportConfig helpers."""

    def test_tolerance(self):
        config = ImportConfig(time_window_seconds=Decimal("90"))

        tolerance = config.tolerance()

        assert tolerance.time_window == timedelta(seconds=90)
        assert tolerance.price == Decimal("0.01")

    def test_tables(self):
        config = ImportConfig(extra_company_tickers={"ACME WIDGETS": "ACMW"})

        assert normalize_to_ticker("Acme Widgets", config.tables()) == "ACMW"

    def test_write_and_reload(self, tmp_path):
        config = ImportConfig(
            default_source=TradeSource.IBKR,
            price_tolerance=Decimal("0.005"),
            extra_company_tickers={"ACME WIDGETS": "ACMW"},
        )
        path = tmp_path / "conf" / "import.yaml"

        write_config(config, path)

        assert load_import_config(path) == config
