"""
Stock Records Module

The normalized inventory record produced by a sheet parse, plus the
aggregation rules for depot and grand totals.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .layout import LOCATIONS


def compute_totals(location_quantities, factory: int = 0, dam: int = 0,
                   explicit_total: Optional[int] = None) -> Tuple[int, int]:
    """
    Compute (depot total, grand total) for one product.

    The grand total is the larger of the computed figure and any total
    printed in the source row. Both describe the same stock, so they are
    never added together.
    """
    location_total = sum(location_quantities)
    grand_total = location_total + factory + dam
    if explicit_total is not None:
        grand_total = max(grand_total, explicit_total)
    return location_total, grand_total


@dataclass(frozen=True)
class StockRecord:
    """One product line of a stock report."""

    name: str
    pack_size: str = ""
    portfolio: str = ""
    dhaka: int = 0
    jhenaidah: int = 0
    bogra: int = 0
    rangpur: int = 0
    chattagram: int = 0
    factory: int = 0
    dam: int = 0
    explicit_total: Optional[int] = None
    source_row_index: int = -1
    raw: Tuple = field(default=(), compare=False, repr=False)

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("StockRecord requires a non-empty name")
        for quantity_field in LOCATIONS + ("factory", "dam"):
            if getattr(self, quantity_field) < 0:
                raise ValueError(f"{quantity_field} must be non-negative")
        if self.explicit_total is not None and self.explicit_total < 0:
            raise ValueError("explicit_total must be non-negative")

    def quantity(self, location: str) -> int:
        """Stock held at one of the five canonical locations."""
        if location not in LOCATIONS:
            raise KeyError(location)
        return getattr(self, location)

    @property
    def location_quantities(self) -> Dict[str, int]:
        return {location: getattr(self, location) for location in LOCATIONS}

    @property
    def location_total(self) -> int:
        return compute_totals(self.location_quantities.values())[0]

    @property
    def grand_total(self) -> int:
        return compute_totals(
            self.location_quantities.values(), self.factory, self.dam, self.explicit_total
        )[1]

    def to_dict(self) -> Dict:
        """Flat dict view, used for tables and exports."""
        return {
            "name": self.name,
            "pack_size": self.pack_size,
            "portfolio": self.portfolio,
            **self.location_quantities,
            "factory": self.factory,
            "dam": self.dam,
            "location_total": self.location_total,
            "grand_total": self.grand_total,
            "source_row_index": self.source_row_index,
        }
