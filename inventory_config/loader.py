"""
Configuration Loader (``inventory_config.loader``).

Responsibility
--------------
Load a YAML ledger configuration file and parse it into a frozen
``LedgerConfig``.  Runtime callers go through
``inventory_config.get_active_config()``.

Invariants enforced
-------------------
* Unknown keys are rejected; a typo never silently falls back to a default.
* Boolean switches must be YAML booleans, not strings.
* A relative ``seed_path`` resolves against the YAML file's directory.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown key or bad value  -> ``ConfigurationError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from inventory_config.schema import LedgerConfig
from inventory_engines.valuation.cost_layer import WeightedExitOrder
from inventory_kernel.exceptions import ConfigurationError

_KNOWN_KEYS = frozenset({
    "database_url",
    "seed_path",
    "enforce_category_reference",
    "enforce_product_reference",
    "reject_non_positive_quantity",
    "weighted_exit_order",
    "log_level",
})

_BOOL_KEYS = (
    "enforce_category_reference",
    "enforce_product_reference",
    "reject_non_positive_quantity",
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML file and return its top-level mapping.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ConfigurationError: if the document is not a mapping.
    """
    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError("<root>", f"expected a mapping, got {type(data).__name__}")
    return data


def parse_config(data: dict[str, Any], base_dir: Path | None = None) -> LedgerConfig:
    """Build a LedgerConfig from a parsed mapping."""
    unknown = sorted(set(data) - _KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(unknown[0], "unknown configuration key")

    kwargs: dict[str, Any] = {}

    for key in _BOOL_KEYS:
        if key in data:
            if not isinstance(data[key], bool):
                raise ConfigurationError(key, f"expected true/false, got {data[key]!r}")
            kwargs[key] = data[key]

    if data.get("database_url") is not None:
        kwargs["database_url"] = str(data["database_url"])

    if data.get("seed_path") is not None:
        seed_path = Path(str(data["seed_path"]))
        if not seed_path.is_absolute() and base_dir is not None:
            seed_path = base_dir / seed_path
        kwargs["seed_path"] = seed_path

    if "weighted_exit_order" in data:
        try:
            kwargs["weighted_exit_order"] = WeightedExitOrder(str(data["weighted_exit_order"]).lower())
        except ValueError:
            raise ConfigurationError(
                "weighted_exit_order",
                f"must be one of {[o.value for o in WeightedExitOrder]}, "
                f"got {data['weighted_exit_order']!r}",
            ) from None

    if "log_level" in data:
        kwargs["log_level"] = str(data["log_level"])

    return LedgerConfig(**kwargs)


def load_config(path: Path | str) -> LedgerConfig:
    """Load and parse a YAML configuration file."""
    path = Path(path)
    return parse_config(load_yaml_file(path), base_dir=path.parent)


def compute_checksum(config: LedgerConfig) -> str:
    """Deterministic SHA-256 checksum of a configuration's values."""
    canonical = json.dumps({
        "database_url": config.database_url,
        "seed_path": str(config.seed_path) if config.seed_path else None,
        "enforce_category_reference": config.enforce_category_reference,
        "enforce_product_reference": config.enforce_product_reference,
        "reject_non_positive_quantity": config.reject_non_positive_quantity,
        "weighted_exit_order": config.weighted_exit_order.value,
        "log_level": config.log_level,
    }, sort_keys=True)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
