"""
Inventory Kernel

An append-only inventory ledger with:
- Referential guards on categories and products
- Stock non-negativity enforced before every exit
- Collection-at-a-time persistence after each mutation
- Structured JSON logging and typed exceptions
"""

__version__ = "0.1.0"
