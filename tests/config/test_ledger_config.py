"""
Tests for ledger configuration loading (inventory_config).

Tests cover:
- Defaults when no file is given
- YAML parsing, relative seed paths and value validation
- Unknown keys rejected
- INVENTORY_CONFIG_TRACE emitted with a stable checksum
"""

import logging
from pathlib import Path

import pytest
import yaml

from inventory_config import LedgerConfig, get_active_config, load_config
from inventory_config.loader import compute_checksum, parse_config
from inventory_engines.valuation import WeightedExitOrder
from inventory_kernel.exceptions import ConfigurationError


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "ledger.yaml"
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:

    def test_defaults(self):
        config = LedgerConfig()

        assert config.database_url is None
        assert not config.uses_database
        assert config.enforce_category_reference is True
        assert config.enforce_product_reference is True
        assert config.reject_non_positive_quantity is True
        assert config.weighted_exit_order is WeightedExitOrder.CHRONOLOGICAL
        assert config.log_level_number == logging.INFO

    def test_get_active_config_without_path(self):
        assert get_active_config() == LedgerConfig()

    def test_log_level_normalized(self):
        assert LedgerConfig(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ConfigurationError) as exc_info:
            LedgerConfig(log_level="LOUD")

        assert exc_info.value.key == "log_level"


class TestLoadConfig:

    def test_full_file(self, tmp_path):
        path = _write(tmp_path, (
            "database_url: sqlite:///ledger.db\n"
            "seed_path: data/seed.json\n"
            "enforce_category_reference: false\n"
            "enforce_product_reference: false\n"
            "reject_non_positive_quantity: true\n"
            "weighted_exit_order: ledger\n"
            "log_level: warning\n"
        ))

        config = load_config(path)

        assert config.database_url == "sqlite:///ledger.db"
        assert config.uses_database
        assert config.seed_path == tmp_path / "data" / "seed.json"
        assert config.enforce_category_reference is False
        assert config.enforce_product_reference is False
        assert config.weighted_exit_order is WeightedExitOrder.LEDGER
        assert config.log_level == "WARNING"

    def test_empty_file_gives_defaults(self, tmp_path):
        assert load_config(_write(tmp_path, "")) == LedgerConfig()

    def test_absolute_seed_path_kept(self, tmp_path):
        seed = tmp_path / "elsewhere" / "seed.json"

        config = parse_config({"seed_path": str(seed)}, base_dir=Path("/ignored"))

        assert config.seed_path == seed

    def test_unknown_key_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(_write(tmp_path, "databse_url: sqlite://\n"))

        assert exc_info.value.key == "databse_url"

    def test_string_boolean_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(_write(tmp_path, "enforce_category_reference: 'no'\n"))

        assert exc_info.value.key == "enforce_category_reference"

    def test_bad_exit_order_rejected(self):
        with pytest.raises(ConfigurationError, match="weighted_exit_order"):
            parse_config({"weighted_exit_order": "random"})

    def test_non_mapping_document_rejected(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config(_write(tmp_path, "- one\n- two\n"))

    def test_malformed_yaml_propagates(self, tmp_path):
        with pytest.raises(yaml.YAMLError):
            load_config(_write(tmp_path, "log_level: [unclosed\n"))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            get_active_config(tmp_path / "absent.yaml")


class TestConfigTrace:

    def test_trace_emitted(self, tmp_path, captured_logs):
        path = _write(tmp_path, "weighted_exit_order: ledger\n")

        config = get_active_config(path)

        traces = [r for r in captured_logs() if r["message"] == "INVENTORY_CONFIG_TRACE"]
        assert len(traces) == 1
        assert traces[0]["source"] == str(path)
        assert traces[0]["checksum"] == compute_checksum(config)
        assert traces[0]["weighted_exit_order"] == "ledger"

    def test_checksum_tracks_values(self):
        assert compute_checksum(LedgerConfig()) == compute_checksum(LedgerConfig())
        assert compute_checksum(LedgerConfig()) != compute_checksum(
            LedgerConfig(reject_non_positive_quantity=False)
        )
        assert compute_checksum(LedgerConfig()) != compute_checksum(
            LedgerConfig(enforce_product_reference=False)
        )
