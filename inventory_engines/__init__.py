"""
Module: inventory_engines
Responsibility:
    Pure calculation engines for inventory valuation.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel.domain and inventory_kernel.logging_config.
    MUST NOT import inventory_services or inventory_config.

Invariants enforced:
    - Purity: engines never read the clock; dates arrive as parameters.
    - Decimal-only arithmetic for every monetary amount.
    - Determinism: identical inputs always produce identical outputs.

Usage:
    from inventory_engines.valuation import CostMethod, calculate_inventory_cost
"""
