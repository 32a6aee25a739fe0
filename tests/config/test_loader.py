"""
Tests for configuration loading.

Covers:
- Packaged defaults
- YAML overrides and validation
- Environment override of the database URL
- Checksum determinism
- Active config caching
"""

import pytest
import yaml

from cashflow_config import get_active_config, reset_active_config
from cashflow_config.loader import (
    DATABASE_URL_ENV,
    compute_checksum,
    load_config,
    load_yaml_file,
    parse_config,
)
from cashflow_config.schema import CashflowConfig


def _write(tmp_path, data, name="cashflow.yaml"):
    path = tmp_path / name
    path.write_text(yaml.safe_dump(data))
    return path


class TestDefaults:
    """Tests for the packaged defaults."""

    def test_defaults_match_schema(self):
        config = load_config(environ={})

        assert config == CashflowConfig()
        assert config.default_horizon_days == 90
        assert config.kpi_forecast_days == 30
        assert config.reporting_forecast_days == 60
        assert config.burn_rate_months == 3


class TestOverrides:
    """Tests for YAML override files."""

    def test_partial_override_keeps_other_values(self, tmp_path):
        path = _write(tmp_path, {"forecast": {"default_horizon_days": 45}})

        config = load_config(path, environ={})

        assert config.default_horizon_days == 45
        assert config.max_horizon_days == 730

    def test_env_overrides_database_url(self, tmp_path):
        path = _write(tmp_path, {"database_url": "sqlite:///from-file.db"})

        config = load_config(path, environ={DATABASE_URL_ENV: "sqlite:///from-env.db"})

        assert config.database_url == "sqlite:///from-env.db"

    def test_unknown_key_rejected(self):
        with pytest.raises(ValueError, match="Unknown config key"):
            parse_config({"forecast": {"horizon": 10}})

    def test_unknown_section_rejected(self):
        with pytest.raises(ValueError, match="Unknown config key"):
            parse_config({"alerts": {"email": "x"}})

    def test_wrong_type_rejected(self):
        with pytest.raises(ValueError, match="must be an integer"):
            parse_config({"forecast": {"default_horizon_days": "ninety"}})

    def test_horizon_above_maximum_rejected(self):
        with pytest.raises(ValueError):
            parse_config({"forecast": {"default_horizon_days": 1000}})

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValueError, match="log_level"):
            parse_config({"log_level": "CHATTY"})

    def test_non_mapping_document_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ValueError):
            load_yaml_file(path)

    def test_empty_document(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_yaml_file(path) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml", environ={})


class TestChecksum:
    """Tests for configuration identity."""

    def test_deterministic(self):
        assert compute_checksum(CashflowConfig()) == compute_checksum(CashflowConfig())

    def test_changes_with_values(self):
        assert compute_checksum(CashflowConfig()) != compute_checksum(
            CashflowConfig(default_horizon_days=30)
        )


class TestActiveConfig:
    """Tests for the cached process config."""

    def test_cached_until_reset(self, tmp_path, monkeypatch):
        monkeypatch.delenv(DATABASE_URL_ENV, raising=False)
        first = get_active_config()

        assert get_active_config() is first

        reset_active_config()
        path = _write(tmp_path, {"dashboard": {"burn_rate_months": 6}})
        assert get_active_config(path).burn_rate_months == 6

    def test_trace_emitted(self, captured_logs, monkeypatch):
        monkeypatch.delenv(DATABASE_URL_ENV, raising=False)

        get_active_config()

        traces = [r for r in captured_logs() if r["message"] == "CASHFLOW_CONFIG_TRACE"]
        assert len(traces) == 1
        assert len(traces[0]["checksum"]) == 64
