"""Services layer: valuation reports and ledger session lifecycle."""

from inventory_services.bootstrap import LedgerSession, open_ledger
from inventory_services.valuation_service import ValuationService

__all__ = [
    "LedgerSession",
    "open_ledger",
    "ValuationService",
]
