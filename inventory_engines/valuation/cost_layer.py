"""
inventory_engines.valuation.cost_layer -- Cost layer value objects and layer consumption.

Responsibility:
    Define the costing methods, the (quantity, unit cost) layers that
    FIFO/LIFO valuation builds from entry transactions, and the single
    consumption routine that draws an exit's quantity from the front of a
    layer queue.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import inventory_kernel.domain and inventory_kernel.logging_config.

Invariants enforced:
    - CostLayer is frozen; a partially consumed layer is replaced by a new
      layer carrying the reduced quantity, never edited.
    - consume_from_front never takes more than the layers hold; any excess
      is reported as shortfall, not raised.
    - Division-by-zero safe: unit_cost of an empty consumption is zero.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from inventory_kernel.domain.ledger import Transaction
from inventory_kernel.logging_config import get_logger

logger = get_logger("engines.valuation.cost_layer")

ZERO = Decimal("0")


class CostMethod(str, Enum):
    """Inventory costing methods."""

    FIFO = "fifo"          # First-in, first-out
    LIFO = "lifo"          # Last-in, first-out
    WEIGHTED = "weighted"  # Weighted average

    @classmethod
    def parse(cls, value: CostMethod | str) -> CostMethod:
        """
        Accept a CostMethod or its name.

        The Spanish accounting labels PEPS (FIFO) and UEPS (LIFO) and the
        ``weighted_avg`` spelling are accepted as aliases.
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        try:
            return _METHOD_ALIASES[key]
        except KeyError:
            raise ValueError(
                f"Unknown cost method {value!r}; expected one of "
                f"{sorted(_METHOD_ALIASES)}"
            ) from None


_METHOD_ALIASES: dict[str, CostMethod] = {
    "fifo": CostMethod.FIFO,
    "peps": CostMethod.FIFO,
    "lifo": CostMethod.LIFO,
    "ueps": CostMethod.LIFO,
    "weighted": CostMethod.WEIGHTED,
    "weighted_avg": CostMethod.WEIGHTED,
    "average": CostMethod.WEIGHTED,
}


class WeightedExitOrder(str, Enum):
    """Order in which weighted-average valuation applies exits."""

    CHRONOLOGICAL = "chronological"  # stable sort by date
    LEDGER = "ledger"                # filter (storage) order


@dataclass(frozen=True, slots=True)
class CostLayer:
    """
    A surviving chunk of one entry transaction.

    ``source_id`` is the id of the entry that created the layer; the layer
    keeps the entry's unit cost for its whole life.
    """

    source_id: str
    layer_date: datetime
    quantity: int
    unit_cost: Decimal

    @property
    def total_cost(self) -> Decimal:
        return self.unit_cost * self.quantity

    def reduced_by(self, quantity: int) -> CostLayer:
        """Return the layer left after ``quantity`` units are taken."""
        return CostLayer(
            source_id=self.source_id,
            layer_date=self.layer_date,
            quantity=self.quantity - quantity,
            unit_cost=self.unit_cost,
        )

    @classmethod
    def from_entry(cls, entry: Transaction) -> CostLayer:
        return cls(
            source_id=entry.id,
            layer_date=entry.date,
            quantity=entry.quantity,
            unit_cost=entry.unit_cost,
        )


@dataclass(frozen=True, slots=True)
class LayerConsumption:
    """
    Result of drawing one exit's quantity from a layer queue.

    ``taken`` holds one CostLayer per layer touched, with the quantity taken
    from it.  ``shortfall`` is the part of the request no layer could cover.
    """

    taken: tuple[CostLayer, ...]
    shortfall: int

    @property
    def quantity(self) -> int:
        return sum(layer.quantity for layer in self.taken)

    @property
    def total_cost(self) -> Decimal:
        return sum((layer.total_cost for layer in self.taken), ZERO)

    @property
    def unit_cost(self) -> Decimal:
        """Weighted unit cost of the layers consumed."""
        quantity = self.quantity
        if quantity == 0:
            return ZERO
        return self.total_cost / quantity


def consume_from_front(layers: deque[CostLayer], quantity: int) -> LayerConsumption:
    """
    Draw ``quantity`` units from the front of ``layers``, in place.

    A front layer no larger than the remaining request is consumed whole
    and removed; otherwise it is split: its reduced remainder replaces it
    at the front and consumption stops.

    Postconditions:
        - sum(taken) + shortfall == quantity (for quantity >= 0).
        - ``layers`` holds exactly the surviving layers, order preserved.
    """
    remaining = quantity
    taken: list[CostLayer] = []

    while remaining > 0 and layers:
        front = layers[0]
        if front.quantity <= remaining:
            remaining -= front.quantity
            taken.append(layers.popleft())
        else:
            layers[0] = front.reduced_by(remaining)
            taken.append(front.reduced_by(front.quantity - remaining))
            remaining = 0

    if remaining > 0:
        logger.debug("layer_consumption_short", extra={
            "requested": quantity,
            "shortfall": remaining,
        })

    return LayerConsumption(taken=tuple(taken), shortfall=max(remaining, 0))


def remaining_totals(layers: deque[CostLayer] | list[CostLayer]) -> tuple[int, Decimal]:
    """Total quantity and total cost held by ``layers``."""
    quantity = sum(layer.quantity for layer in layers)
    cost = sum((layer.total_cost for layer in layers), ZERO)
    return quantity, cost
