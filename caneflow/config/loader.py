from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.conversion import OUTPUT_SHEET_NAME
from ..models.export_options import DEFAULT_UNIT, PriceMode

"""Config loader.

Responsibilities:
- Load a YAML config file (e.g. caneflow.yml)
- Validate it against the bundled JSON schema (config_schema.json)
- Apply defaults for every missing section/key

Every section is optional; an empty file yields :func:`default_config`.
"""

__all__ = [
    "SCHEMA_PATH",
    "CONFIG_ENV_VAR",
    "SOFFICE_ENV_VAR",
    "ConfigError",
    "PricingConfig",
    "LegacyConfig",
    "CaneflowConfig",
    "default_config",
    "load_config",
]

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")

CONFIG_ENV_VAR = "CANEFLOW_CONFIG"
SOFFICE_ENV_VAR = "CANEFLOW_SOFFICE"

DEFAULT_SOFFICE = "soffice"
DEFAULT_LEGACY_TIMEOUT = 120.0


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class PricingConfig:
    mode: PriceMode = PriceMode.PER_GROUP
    default_unit: str = DEFAULT_UNIT
    default_unit_price: Any = ""
    default_tva: Any = ""
    unit_prices: list[Any] = field(default_factory=list)
    unit_prices_by_type: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class LegacyConfig:
    """External office suite used to turn .xls files into .xlsx."""
    soffice_binary: str = DEFAULT_SOFFICE
    timeout_seconds: float = DEFAULT_LEGACY_TIMEOUT


@dataclass(frozen=True)
class CaneflowConfig:
    input_sheet_name: str | None = None  # None -> first worksheet
    output_sheet_name: str = OUTPUT_SHEET_NAME
    include_headers: bool = True
    pricing: PricingConfig = field(default_factory=PricingConfig)
    legacy: LegacyConfig = field(default_factory=LegacyConfig)


def default_config() -> CaneflowConfig:
    """All-defaults configuration, honoring CANEFLOW_SOFFICE."""
    return _build_config({})


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against the JSON schema.

    Raises:
        ConfigError: schema file missing or not JSON, or data violating it
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        location = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise ConfigError(f"config validation failed at {location}: {e.message}") from e


def _build_config(data: dict[str, Any]) -> CaneflowConfig:
    input_raw = data.get("input") or {}
    output_raw = data.get("output") or {}
    pricing_raw = data.get("pricing") or {}
    legacy_raw = data.get("legacy") or {}

    pricing = PricingConfig(
        mode=PriceMode(pricing_raw.get("mode", PriceMode.PER_GROUP.value)),
        default_unit=pricing_raw.get("default_unit", DEFAULT_UNIT),
        default_unit_price=pricing_raw.get("default_unit_price", ""),
        default_tva=pricing_raw.get("default_tva", ""),
        unit_prices=list(pricing_raw.get("unit_prices") or []),
        # YAML keys may come back as numbers; group keys are always text
        unit_prices_by_type={
            str(k): v for k, v in (pricing_raw.get("unit_prices_by_type") or {}).items()
        },
    )
    # Environment wins over the file for the office binary (per-machine setting)
    soffice = os.getenv(SOFFICE_ENV_VAR) or legacy_raw.get("soffice_binary", DEFAULT_SOFFICE)
    legacy = LegacyConfig(
        soffice_binary=soffice,
        timeout_seconds=float(legacy_raw.get("timeout_seconds", DEFAULT_LEGACY_TIMEOUT)),
    )
    return CaneflowConfig(
        input_sheet_name=input_raw.get("sheet_name"),
        output_sheet_name=output_raw.get("sheet_name", OUTPUT_SHEET_NAME),
        include_headers=output_raw.get("include_headers", True),
        pricing=pricing,
        legacy=legacy,
    )


def load_config(path: Path) -> CaneflowConfig:
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping, got {type(data).__name__}")

    _validate_config_schema(data)
    return _build_config(data)
