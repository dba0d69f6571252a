"""
inventory_services.bootstrap -- Ledger session lifecycle.

Responsibility:
    Construct the LedgerStore and ValuationService once per process from
    the active configuration, and tear them down with a final flush.

Start-up order:
    1. configure_logging() at the configured level.
    2. Pick the collection store: SQL when ``database_url`` is set,
       in-memory otherwise.
    3. For each collection, stored rows win; a collection never written
       falls back to the seed document (or empty), and is written through
       so the next start reads it from the store.

Failure modes:
    - SnapshotFormatError for malformed stored rows or seed records.
    - SQLAlchemy errors from engine start-up (the engine is released
      again) or the first write.
"""

from __future__ import annotations

from types import TracebackType

from sqlalchemy.exc import SQLAlchemyError

from inventory_config import LedgerConfig, get_active_config
from inventory_kernel.db.engine import create_tables, init_engine_from_url, reset_engine
from inventory_kernel.logging_config import configure_logging, get_logger
from inventory_kernel.services.collection_store import (
    CollectionStore,
    InMemoryCollectionStore,
    SqlCollectionStore,
)
from inventory_kernel.services.ledger_store import LedgerStore
from inventory_kernel.snapshot import (
    COLLECTION_NAMES,
    LedgerSnapshot,
    decode_collection,
    load_snapshot,
)
from inventory_services.valuation_service import ValuationService

logger = get_logger("services.bootstrap")


class LedgerSession:
    """
    The ledger, its valuation service and its collection store for one process.

    Use as a context manager, or call ``close()`` at process exit.
    """

    def __init__(
        self,
        config: LedgerConfig,
        store: CollectionStore,
        ledger: LedgerStore,
        valuation: ValuationService,
    ):
        self.config = config
        self.store = store
        self.ledger = ledger
        self.valuation = valuation
        self.closed = False

    def close(self) -> None:
        """Flush every collection once and release the database engine."""
        if self.closed:
            return
        self.ledger.flush()
        if self.config.uses_database:
            reset_engine()
        self.closed = True
        logger.info("ledger_session_closed")

    def __enter__(self) -> LedgerSession:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def _open_store(config: LedgerConfig) -> CollectionStore:
    if not config.uses_database:
        return InMemoryCollectionStore()
    init_engine_from_url(config.database_url)
    try:
        create_tables()
    except SQLAlchemyError:
        logger.error("database_unavailable", extra={"database_url": config.database_url}, exc_info=True)
        reset_engine()
        raise
    return SqlCollectionStore()


def _load_seed(config: LedgerConfig) -> LedgerSnapshot:
    if config.seed_path is None:
        return LedgerSnapshot()
    if not config.seed_path.exists():
        logger.warning("seed_missing", extra={"seed_path": str(config.seed_path)})
        return LedgerSnapshot()
    return load_snapshot(config.seed_path)


def open_ledger(
    config: LedgerConfig | None = None,
    store: CollectionStore | None = None,
) -> LedgerSession:
    """
    Build a LedgerSession.

    Args:
        config: Effective configuration; defaults to get_active_config().
        store: Collection store override (tests); by default chosen from
            ``config.database_url``.
    """
    config = config or get_active_config()
    configure_logging(level=config.log_level_number)
    store = store if store is not None else _open_store(config)

    stored = {name: store.read(name) for name in COLLECTION_NAMES}
    seeded = [name for name, rows in stored.items() if rows is None]
    seed = _load_seed(config) if seeded else LedgerSnapshot()

    collections = {
        name: getattr(seed, name) if rows is None else decode_collection(name, rows)
        for name, rows in stored.items()
    }
    snapshot = LedgerSnapshot(**collections)

    ledger = LedgerStore(
        snapshot,
        store,
        enforce_category_reference=config.enforce_category_reference,
        enforce_product_reference=config.enforce_product_reference,
        reject_non_positive_quantity=config.reject_non_positive_quantity,
    )
    for name in seeded:
        ledger.write_collection(name)

    logger.info("ledger_session_opened", extra={
        "backend": "sql" if config.uses_database else "memory",
        "seeded_collections": seeded,
        "categories": len(snapshot.categories),
        "products": len(snapshot.products),
        "transactions": len(snapshot.transactions),
    })

    return LedgerSession(
        config=config,
        store=store,
        ledger=ledger,
        valuation=ValuationService(ledger, config.weighted_exit_order),
    )
