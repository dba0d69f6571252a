"""
inventory_kernel.services.ledger_store -- Authoritative holder of the inventory ledger.

Responsibility:
    Own the category, product and transaction collections; enforce the
    referential and stock non-negativity invariants before any mutation;
    answer stock queries; write the mutated collection through the
    injected CollectionStore after every successful mutation.

Architecture position:
    Kernel > Services.  Constructed once per process from a LedgerSnapshot
    and injected into callers (ValuationService, CLI).  The kernel does not
    import configuration; behaviour switches arrive as constructor flags.

Invariants enforced:
    - Append-only transactions: no update or delete operation exists and
      storage order is never changed.
    - Stock non-negativity: an exit with quantity > current stock raises
      InsufficientStockError and leaves the ledger untouched.
    - Referential guards: a category referenced by a product, or a product
      referenced by a transaction, cannot be deleted.
    - Ids are assigned here and never change.

Failure modes:
    - CategoryInUseError / ProductHasTransactionsError on guarded deletes.
    - InsufficientStockError on an over-drawing exit.
    - InvalidTransactionError on quantity <= 0 or negative unit cost
      (when reject_non_positive_quantity is on), a non-integer quantity,
      an unknown type, or an unparseable unit cost or date.
    - CategoryNotFoundError on a dangling category id (when
      enforce_category_reference is on) or an unknown id on update.
    - ProductNotFoundError on update of an unknown product, or on a
      transaction for an unknown product (when enforce_product_reference
      is on).
    - Persistence errors propagate after the in-memory change.

Non-goals:
    - No locking: a single logical actor mutates and queries sequentially.
    - Stock is never cached; every query re-sums the transaction log.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from uuid import uuid4

from inventory_kernel.domain.ledger import (
    Category,
    Product,
    ProductStock,
    Transaction,
    TransactionType,
    to_instant,
)
from inventory_kernel.exceptions import (
    CategoryInUseError,
    CategoryNotFoundError,
    InsufficientStockError,
    InvalidTransactionError,
    ProductHasTransactionsError,
    ProductNotFoundError,
)
from inventory_kernel.logging_config import get_logger
from inventory_kernel.services.collection_store import (
    CollectionStore,
    InMemoryCollectionStore,
)
from inventory_kernel.snapshot import (
    CATEGORIES,
    COLLECTION_NAMES,
    PRODUCTS,
    TRANSACTIONS,
    LedgerSnapshot,
    encode_collection,
)

logger = get_logger("services.ledger_store")


def _new_id() -> str:
    return str(uuid4())


class LedgerStore:
    """
    Service object owning the three ledger collections.

    Contract:
        Receives the initial snapshot and a CollectionStore via constructor
        injection.
    Guarantees:
        - Every add_* returns the created entity with a fresh unique id.
        - Validation happens before mutation; a rejected call changes
          neither memory nor storage.
        - After a successful mutation exactly the mutated collection is
          written to the CollectionStore.
    """

    def __init__(
        self,
        snapshot: LedgerSnapshot | None = None,
        store: CollectionStore | None = None,
        *,
        enforce_category_reference: bool = True,
        enforce_product_reference: bool = True,
        reject_non_positive_quantity: bool = True,
        id_factory: Callable[[], str] = _new_id,
    ):
        snapshot = snapshot or LedgerSnapshot()
        self._categories: list[Category] = list(snapshot.categories)
        self._products: list[Product] = list(snapshot.products)
        self._transactions: list[Transaction] = list(snapshot.transactions)

        self.store: CollectionStore = store if store is not None else InMemoryCollectionStore()
        self.enforce_category_reference = enforce_category_reference
        self.enforce_product_reference = enforce_product_reference
        self.reject_non_positive_quantity = reject_non_positive_quantity
        self._id_factory = id_factory

        logger.info("ledger_store_initialized", extra={
            "categories": len(self._categories),
            "products": len(self._products),
            "transactions": len(self._transactions),
            "enforce_category_reference": enforce_category_reference,
            "enforce_product_reference": enforce_product_reference,
            "reject_non_positive_quantity": reject_non_positive_quantity,
        })

    # =========================================================================
    # Read-only views
    # =========================================================================

    @property
    def categories(self) -> tuple[Category, ...]:
        return tuple(self._categories)

    @property
    def products(self) -> tuple[Product, ...]:
        return tuple(self._products)

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """All transactions in storage (append) order."""
        return tuple(self._transactions)

    def get_category(self, category_id: str) -> Category | None:
        for category in self._categories:
            if category.id == category_id:
                return category
        return None

    def get_product(self, product_id: str) -> Product | None:
        for product in self._products:
            if product.id == product_id:
                return product
        return None

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            categories=self.categories,
            products=self.products,
            transactions=self.transactions,
        )

    # =========================================================================
    # Categories
    # =========================================================================

    def add_category(self, name: str, description: str = "") -> Category:
        category = Category(id=self._id_factory(), name=name, description=description)
        self._categories.append(category)
        logger.info("category_added", extra={
            "category_id": category.id,
            "category_name": name,
        })
        self.write_collection(CATEGORIES)
        return category

    def update_category(self, category: Category) -> Category:
        """
        Replace the category carrying ``category.id``.

        Raises:
            CategoryNotFoundError: If no category has that id.
        """
        index = self._index_of(self._categories, category.id)
        if index is None:
            logger.warning("category_update_rejected", extra={"category_id": category.id})
            raise CategoryNotFoundError(category.id)

        self._categories[index] = category
        logger.info("category_updated", extra={"category_id": category.id})
        self.write_collection(CATEGORIES)
        return category

    def delete_category(self, category_id: str) -> None:
        """
        Remove a category no product references.

        Raises:
            CategoryInUseError: If any product has this category_id.
        """
        product_count = sum(1 for p in self._products if p.category_id == category_id)
        if product_count:
            logger.warning("category_delete_rejected", extra={
                "category_id": category_id,
                "product_count": product_count,
            })
            raise CategoryInUseError(category_id, product_count)

        self._categories = [c for c in self._categories if c.id != category_id]
        logger.info("category_deleted", extra={"category_id": category_id})
        self.write_collection(CATEGORIES)

    # =========================================================================
    # Products
    # =========================================================================

    def add_product(
        self,
        name: str,
        category_id: str,
        sku: str,
        min_stock: int = 0,
        description: str = "",
        image: str = "",
        price: Decimal | int | str = Decimal("0"),
        barcode: str | None = None,
    ) -> Product:
        """
        Create a product.

        Raises:
            CategoryNotFoundError: If category references are enforced and
                ``category_id`` is unknown.
        """
        self._check_category_reference(category_id)

        product = Product(
            id=self._id_factory(),
            name=name,
            category_id=category_id,
            sku=sku,
            min_stock=min_stock,
            description=description,
            image=image,
            price=Decimal(str(price)),
            barcode=barcode,
        )
        self._products.append(product)
        logger.info("product_added", extra={
            "product_id": product.id,
            "category_id": category_id,
            "sku": sku,
        })
        self.write_collection(PRODUCTS)
        return product

    def update_product(self, product: Product) -> Product:
        """
        Replace the product carrying ``product.id``.

        Raises:
            ProductNotFoundError: If no product has that id.
            CategoryNotFoundError: If category references are enforced and
                the new ``category_id`` is unknown.
        """
        index = self._index_of(self._products, product.id)
        if index is None:
            logger.warning("product_update_rejected", extra={"product_id": product.id})
            raise ProductNotFoundError(product.id)
        self._check_category_reference(product.category_id)

        self._products[index] = product
        logger.info("product_updated", extra={"product_id": product.id})
        self.write_collection(PRODUCTS)
        return product

    def delete_product(self, product_id: str) -> None:
        """
        Remove a product with no ledger history.

        Raises:
            ProductHasTransactionsError: If any transaction references it.
        """
        transaction_count = sum(1 for t in self._transactions if t.product_id == product_id)
        if transaction_count:
            logger.warning("product_delete_rejected", extra={
                "product_id": product_id,
                "transaction_count": transaction_count,
            })
            raise ProductHasTransactionsError(product_id, transaction_count)

        self._products = [p for p in self._products if p.id != product_id]
        logger.info("product_deleted", extra={"product_id": product_id})
        self.write_collection(PRODUCTS)

    # =========================================================================
    # Transactions
    # =========================================================================

    def add_transaction(
        self,
        product_id: str,
        type: TransactionType | str,
        quantity: int,
        date: datetime | date | str,
        unit_cost: Decimal | int | str = Decimal("0"),
        notes: str = "",
    ) -> Transaction:
        """
        Append a transaction to the ledger.

        Exits are checked against the product's current stock (sum of the
        whole ledger, not the stock as of ``date``).

        Raises:
            InvalidTransactionError: On an unknown type, a non-integer
                quantity, an unparseable unit cost or date, or when
                non-positive quantities / negative costs are rejected.
            ProductNotFoundError: If product_id names no product.
            InsufficientStockError: If an exit exceeds current stock.
        """
        try:
            transaction_type = TransactionType.parse(type)
        except ValueError:
            raise self._invalid(product_id, "type", type, "must be 'entry' or 'exit'") from None

        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise self._invalid(product_id, "quantity", quantity, "must be a whole number")
        try:
            cost = unit_cost if isinstance(unit_cost, Decimal) else Decimal(str(unit_cost))
        except InvalidOperation:
            raise self._invalid(product_id, "unit_cost", unit_cost, "not a number") from None
        try:
            instant = to_instant(date)
        except (TypeError, ValueError):
            raise self._invalid(product_id, "date", date, "not a date") from None

        if self.reject_non_positive_quantity:
            if quantity <= 0:
                raise self._invalid(product_id, "quantity", quantity, "must be positive")
            if cost < 0:
                raise self._invalid(product_id, "unit_cost", cost, "must not be negative")

        self._check_product_reference(product_id)

        if transaction_type is TransactionType.EXIT:
            current_stock = self.get_product_stock(product_id)
            if quantity > current_stock:
                logger.warning("transaction_rejected_insufficient_stock", extra={
                    "product_id": product_id,
                    "requested": quantity,
                    "available": current_stock,
                })
                raise InsufficientStockError(product_id, quantity, current_stock)

        transaction = Transaction(
            id=self._id_factory(),
            product_id=product_id,
            type=transaction_type,
            quantity=quantity,
            date=instant,
            unit_cost=cost,
            notes=notes,
        )
        self._transactions.append(transaction)
        logger.info("transaction_appended", extra={
            "transaction_id": transaction.id,
            "product_id": product_id,
            "type": transaction_type.value,
            "quantity": quantity,
            "unit_cost": str(cost),
            "date": transaction.date.isoformat(),
        })
        self.write_collection(TRANSACTIONS)
        return transaction

    # =========================================================================
    # Stock queries
    # =========================================================================

    def get_product_stock(self, product_id: str) -> int:
        """Entries minus exits over the whole ledger. Order independent."""
        return sum(
            t.signed_quantity for t in self._transactions if t.product_id == product_id
        )

    def get_category_stock(self, category_id: str) -> list[ProductStock]:
        return [
            ProductStock(product_id=p.id, stock=self.get_product_stock(p.id))
            for p in self._products
            if p.category_id == category_id
        ]

    def get_low_stock_products(self) -> list[Product]:
        """Products whose stock is at or below their min_stock threshold."""
        return [
            p for p in self._products
            if self.get_product_stock(p.id) <= p.min_stock
        ]

    # =========================================================================
    # Persistence
    # =========================================================================

    def flush(self) -> None:
        """Write all three collections."""
        for name in COLLECTION_NAMES:
            self.write_collection(name)

    def write_collection(self, name: str) -> None:
        """Write one collection through the CollectionStore."""
        entities = {
            CATEGORIES: self._categories,
            PRODUCTS: self._products,
            TRANSACTIONS: self._transactions,
        }[name]
        try:
            self.store.write(name, encode_collection(name, entities))
        except Exception:
            logger.error("collection_persist_failed", extra={
                "collection": name,
                "row_count": len(entities),
            }, exc_info=True)
            raise

    # =========================================================================
    # Helpers
    # =========================================================================

    def _check_category_reference(self, category_id: str) -> None:
        if self.enforce_category_reference and self.get_category(category_id) is None:
            logger.warning("product_category_missing", extra={"category_id": category_id})
            raise CategoryNotFoundError(category_id)

    def _check_product_reference(self, product_id: str) -> None:
        if self.enforce_product_reference and self.get_product(product_id) is None:
            logger.warning("transaction_product_missing", extra={"product_id": product_id})
            raise ProductNotFoundError(product_id)

    @staticmethod
    def _invalid(product_id: str, field: str, value: object, reason: str) -> InvalidTransactionError:
        logger.warning("transaction_rejected_invalid", extra={
            "product_id": product_id,
            "field": field,
            "value": str(value),
            "reason": reason,
        })
        return InvalidTransactionError(product_id, field, value, reason)

    @staticmethod
    def _index_of(items: list, entity_id: str) -> int | None:
        for index, item in enumerate(items):
            if item.id == entity_id:
                return index
        return None
