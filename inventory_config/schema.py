"""
Configuration schema (``inventory_config.schema``).

Frozen dataclass describing one ledger deployment.  Field defaults are the
recommended production settings; a YAML file overrides any subset of them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from inventory_engines.valuation.cost_layer import WeightedExitOrder
from inventory_kernel.exceptions import ConfigurationError

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class LedgerConfig:
    """
    Ledger deployment settings.

    Attributes:
        database_url: SQLAlchemy URL for the collection store.  None keeps
            the collections in memory for the life of the process.
        seed_path: JSON ledger document loaded when the store is empty.
        enforce_category_reference: Reject products whose category_id does
            not name an existing category.
        enforce_product_reference: Reject transactions whose product_id
            does not name an existing product.
        reject_non_positive_quantity: Reject transactions with quantity <= 0
            or a negative unit cost.
        weighted_exit_order: Order in which weighted-average valuation
            applies exits.
        log_level: Level for the inventory_kernel logger hierarchy.
    """

    database_url: str | None = None
    seed_path: Path | None = None
    enforce_category_reference: bool = True
    enforce_product_reference: bool = True
    reject_non_positive_quantity: bool = True
    weighted_exit_order: WeightedExitOrder = WeightedExitOrder.CHRONOLOGICAL
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.log_level.upper() not in _VALID_LOG_LEVELS:
            raise ConfigurationError(
                "log_level", f"must be one of {sorted(_VALID_LOG_LEVELS)}, got {self.log_level!r}"
            )
        object.__setattr__(self, "log_level", self.log_level.upper())

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)

    @property
    def uses_database(self) -> bool:
        return self.database_url is not None
