"""Pure domain types for the inventory ledger."""

from inventory_kernel.domain.ledger import (
    Category,
    Product,
    ProductStock,
    Transaction,
    TransactionType,
    to_instant,
)

__all__ = [
    "Category",
    "Product",
    "ProductStock",
    "Transaction",
    "TransactionType",
    "to_instant",
]
