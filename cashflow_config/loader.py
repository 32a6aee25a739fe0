"""
Configuration Loader (``cashflow_config.loader``).

Responsibility
--------------
Loads YAML documents and parses them into the ``CashflowConfig`` frozen
dataclass.  The packaged ``defaults.yaml`` is always read first; an
optional override file is merged over it section by section, and the
``CASHFLOW_DATABASE_URL`` environment variable wins over both for the
database URL.

Invariants enforced
-------------------
* Every parse error raises ``ValueError`` with a descriptive message;
  unknown keys are rejected rather than silently ignored.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown section or key, or a value of the wrong type  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from cashflow_config.schema import CashflowConfig

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"
DATABASE_URL_ENV = "CASHFLOW_DATABASE_URL"

# (section, key) in YAML -> CashflowConfig field
_FIELD_MAP: dict[tuple[str | None, str], str] = {
    (None, "database_url"): "database_url",
    (None, "log_level"): "log_level",
    ("forecast", "default_horizon_days"): "default_horizon_days",
    ("forecast", "max_horizon_days"): "max_horizon_days",
    ("dashboard", "kpi_forecast_days"): "kpi_forecast_days",
    ("dashboard", "burn_rate_months"): "burn_rate_months",
    ("reporting", "forecast_days"): "reporting_forecast_days",
}
_SECTIONS = frozenset(section for section, _ in _FIELD_MAP if section is not None)
_INT_FIELDS = frozenset({
    "default_horizon_days",
    "max_horizon_days",
    "kpi_forecast_days",
    "burn_rate_months",
    "reporting_forecast_days",
})


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Postconditions:
        - Returns a ``dict`` (empty if the YAML is empty).
    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top-level YAML must be a mapping")
    return data


def _flatten(data: Mapping[str, Any]) -> dict[str, Any]:
    """Map the sectioned YAML layout onto flat ``CashflowConfig`` field names."""
    flat: dict[str, Any] = {}
    for key, value in data.items():
        if key in _SECTIONS:
            if value is None:
                continue
            if not isinstance(value, Mapping):
                raise ValueError(f"Section {key!r} must be a mapping")
            for sub_key, sub_value in value.items():
                field_name = _FIELD_MAP.get((key, sub_key))
                if field_name is None:
                    raise ValueError(f"Unknown config key: {key}.{sub_key}")
                flat[field_name] = sub_value
            continue
        field_name = _FIELD_MAP.get((None, key))
        if field_name is None:
            raise ValueError(f"Unknown config key: {key}")
        flat[field_name] = value
    return flat


def _check_types(values: Mapping[str, Any]) -> None:
    for name, value in values.items():
        if name in _INT_FIELDS:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}")
        elif not isinstance(value, str):
            raise ValueError(f"{name} must be a string, got {value!r}")


def parse_config(data: Mapping[str, Any], base: CashflowConfig | None = None) -> CashflowConfig:
    """
    Parse a YAML document into a ``CashflowConfig``.

    Keys absent from ``data`` keep the value from ``base`` (or the
    dataclass defaults when ``base`` is None).

    Raises:
        ValueError: on unknown keys, wrong types or failed validation.
    """
    values = (base or CashflowConfig()).to_dict()
    overrides = _flatten(data)
    _check_types(overrides)
    values.update(overrides)
    return CashflowConfig(**values)


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> CashflowConfig:
    """
    Packaged defaults, overlaid by ``path`` and then by the environment.

    Args:
        path: Optional YAML override file.
        environ: Environment mapping; defaults to ``os.environ``.
    """
    environ = os.environ if environ is None else environ

    config = parse_config(load_yaml_file(DEFAULTS_PATH))
    if path is not None:
        config = parse_config(load_yaml_file(path), base=config)

    database_url = environ.get(DATABASE_URL_ENV)
    if database_url:
        config = parse_config({"database_url": database_url}, base=config)
    return config


def compute_checksum(config: CashflowConfig) -> str:
    """
    SHA-256 checksum of the canonical JSON serialization.

    Identical configurations always produce identical checksums.
    """
    canonical = json.dumps(config.to_dict(), sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
