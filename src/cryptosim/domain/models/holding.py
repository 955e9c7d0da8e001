"""Holding domain model."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass
class Holding:
    """
    Accumulated ownership of one asset.

    average_cost is the weighted-average unit cost in the base currency and
    is only meaningful while quantity > 0. A holding with zero quantity is
    never kept in the holdings set.
    """

    asset_id: str
    quantity: Decimal
    average_cost: Decimal

    @property
    def cost_basis(self) -> Decimal:
        """Total amount paid for the units still held."""
        return self.quantity * self.average_cost
