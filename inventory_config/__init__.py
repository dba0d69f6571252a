"""
inventory_config -- single public entrypoint for ledger configuration.

Responsibility:
    ``get_active_config()`` is the one way to obtain a ``LedgerConfig`` at
    runtime.  YAML parsing lives in ``inventory_config.loader``.

Architecture position:
    Configuration -- sits above ``inventory_kernel`` and below
    ``inventory_services``.  The kernel never imports from this package;
    services translate config values into kernel constructor flags.

Audit relevance:
    Every call emits an ``INVENTORY_CONFIG_TRACE`` log entry with the
    source path and a checksum of the effective values.
"""

from __future__ import annotations

import logging
from pathlib import Path

from inventory_config.loader import compute_checksum, load_config
from inventory_config.schema import LedgerConfig

_logger = logging.getLogger("inventory_kernel.config")


def get_active_config(config_path: Path | str | None = None) -> LedgerConfig:
    """
    Return the effective ledger configuration.

    Args:
        config_path: YAML file to load.  None returns the defaults
            (in-memory collections, no seed, all guards on).

    Raises:
        FileNotFoundError: If ``config_path`` does not exist.
        ConfigurationError: On unknown keys or invalid values.
    """
    config = load_config(config_path) if config_path is not None else LedgerConfig()

    _logger.info(
        "INVENTORY_CONFIG_TRACE",
        extra={
            "trace_type": "INVENTORY_CONFIG_TRACE",
            "source": str(config_path) if config_path is not None else "defaults",
            "checksum": compute_checksum(config),
            "uses_database": config.uses_database,
            "weighted_exit_order": config.weighted_exit_order.value,
        },
    )
    return config


__all__ = [
    "LedgerConfig",
    "get_active_config",
    "load_config",
]
