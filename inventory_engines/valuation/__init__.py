"""
Valuation - Pure FIFO/LIFO/weighted-average inventory costing.

Pure functions and value objects only.  The ValuationService that binds
them to the ledger lives in inventory_services.valuation_service.
"""

from inventory_engines.valuation.cost_layer import (
    CostLayer,
    CostMethod,
    LayerConsumption,
    WeightedExitOrder,
    consume_from_front,
)
from inventory_engines.valuation.kardex import build_fifo_kardex
from inventory_engines.valuation.methods import (
    calculate_inventory_cost,
    filter_product_transactions,
    value_fifo,
    value_lifo,
    value_weighted,
)
from inventory_engines.valuation.report import (
    FifoValuationReport,
    KardexCell,
    KardexRow,
    ValuationReport,
)

__all__ = [
    "CostLayer",
    "CostMethod",
    "LayerConsumption",
    "WeightedExitOrder",
    "consume_from_front",
    "build_fifo_kardex",
    "calculate_inventory_cost",
    "filter_product_transactions",
    "value_fifo",
    "value_lifo",
    "value_weighted",
    "FifoValuationReport",
    "KardexCell",
    "KardexRow",
    "ValuationReport",
]
