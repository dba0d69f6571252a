"""
Typed Exception Hierarchy for the Inventory Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the ledger must be able to tell a referential conflict from a
stock shortfall without parsing message strings.  Every error therefore:
  1. Has its own exception class (catch by type, not message)
  2. Carries a CODE class attribute (machine-readable, API-safe)
  3. Stores its context as attributes (not just a message string)

Example:
    try:
        ledger.add_transaction(data)
    except InsufficientStockError as e:
        notify(f"Only {e.available} units of {e.product_id} on hand")
        api_response(code=e.code, requested=e.requested)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    InventoryKernelError (base)
    |
    +-- LedgerError
    |   +-- ReferentialConflictError
    |   |   +-- CategoryInUseError
    |   |   +-- ProductHasTransactionsError
    |   +-- InsufficientStockError
    |   +-- InvalidTransactionError
    |   +-- CategoryNotFoundError
    |   +-- ProductNotFoundError
    |
    +-- SnapshotError
    |   +-- SnapshotFormatError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category   | Code                      | When Raised
-----------|---------------------------|-------------------------------------------
Ledger     | REFERENTIAL_CONFLICT      | Deleting an entity still referenced
           | CATEGORY_IN_USE           | Category referenced by >= 1 product
           | PRODUCT_HAS_TRANSACTIONS  | Product referenced by >= 1 transaction
           | INSUFFICIENT_STOCK        | Exit quantity exceeds current stock
           | INVALID_TRANSACTION       | Quantity <= 0 or negative unit cost
           | CATEGORY_NOT_FOUND        | Unknown category id on add/update
           | PRODUCT_NOT_FOUND         | Unknown product id on update
-----------|---------------------------|-------------------------------------------
Snapshot   | SNAPSHOT_FORMAT_ERROR     | Malformed record in a ledger document
-----------|---------------------------|-------------------------------------------
Config     | CONFIGURATION_ERROR       | Unknown key or invalid value in config

The valuation engine raises none of these: it degrades to empty/zero
reports on missing or empty input.

===============================================================================
"""


class InventoryKernelError(Exception):
    """
    Base exception for all inventory kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "INVENTORY_KERNEL_ERROR"


# Ledger exceptions


class LedgerError(InventoryKernelError):
    """Base exception for ledger mutation errors."""

    code: str = "LEDGER_ERROR"


class ReferentialConflictError(LedgerError):
    """An entity cannot be deleted while other entities reference it."""

    code: str = "REFERENTIAL_CONFLICT"

    def __init__(self, entity: str, entity_id: str, referenced_by: str, reference_count: int):
        self.entity = entity
        self.entity_id = entity_id
        self.referenced_by = referenced_by
        self.reference_count = reference_count
        super().__init__(
            f"Cannot delete {entity} {entity_id}: "
            f"referenced by {reference_count} {referenced_by}"
        )


class CategoryInUseError(ReferentialConflictError):
    """Category is still referenced by one or more products."""

    code: str = "CATEGORY_IN_USE"

    def __init__(self, category_id: str, product_count: int):
        self.category_id = category_id
        super().__init__("category", category_id, "products", product_count)


class ProductHasTransactionsError(ReferentialConflictError):
    """Product is still referenced by one or more ledger transactions."""

    code: str = "PRODUCT_HAS_TRANSACTIONS"

    def __init__(self, product_id: str, transaction_count: int):
        self.product_id = product_id
        super().__init__("product", product_id, "transactions", transaction_count)


class InsufficientStockError(LedgerError):
    """Exit transaction would take the product's stock below zero."""

    code: str = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: str, requested: int, available: int):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Not enough stock for product {product_id}: "
            f"requested {requested}, available {available}"
        )


class InvalidTransactionError(LedgerError):
    """Transaction values are rejected at append time."""

    code: str = "INVALID_TRANSACTION"

    def __init__(self, product_id: str, field: str, value: object, reason: str):
        self.product_id = product_id
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(
            f"Invalid transaction for product {product_id}: "
            f"{field}={value!r} ({reason})"
        )


class CategoryNotFoundError(LedgerError):
    """Category with given ID was not found."""

    code: str = "CATEGORY_NOT_FOUND"

    def __init__(self, category_id: str):
        self.category_id = category_id
        super().__init__(f"Category not found: {category_id}")


class ProductNotFoundError(LedgerError):
    """Product with given ID was not found."""

    code: str = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


# Snapshot exceptions


class SnapshotError(InventoryKernelError):
    """Base exception for ledger document errors."""

    code: str = "SNAPSHOT_ERROR"


class SnapshotFormatError(SnapshotError):
    """A record in a ledger document could not be parsed."""

    code: str = "SNAPSHOT_FORMAT_ERROR"

    def __init__(self, collection: str, index: int, reason: str):
        self.collection = collection
        self.index = index
        self.reason = reason
        super().__init__(f"Malformed {collection}[{index}]: {reason}")


# Configuration exceptions


class ConfigurationError(InventoryKernelError):
    """Configuration file contains an unknown key or an invalid value."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid configuration '{key}': {reason}")
