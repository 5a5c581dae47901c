"""
Row Extractor Module

Maps one report row to a StockRecord. Column positions shift between
report versions, so the product name is looked up across several
candidate columns and a few figures have an alternate column.
"""

import logging
from numbers import Number
from typing import Callable, List, Optional, Sequence, Tuple

from .cell_values import resolve_stock_value, round_quantity
from .layout import (
    LOCATIONS,
    LOCATION_LABELS,
    SHEET_LAYOUT,
    RAW_PAYLOAD_COLUMNS,
    ColumnLayout,
    is_denylisted,
)
from .records import StockRecord


logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════
# NAME DISCOVERY
# ═══════════════════════════════════════════════════════════════

# Every check must pass for a cell to be accepted as a product name
NAME_CHECKS: List[Callable[[str], bool]] = [
    lambda name: len(name) > 1,
    lambda name: not is_denylisted(name),
]


def cell_at(row: Sequence, column: Optional[int]):
    if column is None or column < 0 or column >= len(row):
        return None
    return row[column]


def accept_name(cell) -> Optional[str]:
    """Return the trimmed product name held by a cell, or None."""
    if not isinstance(cell, str):
        return None
    name = cell.strip()
    if not name:
        return None
    if all(check(name) for check in NAME_CHECKS):
        return name
    return None


def find_product_name(row: Sequence, layout: ColumnLayout = SHEET_LAYOUT) -> Tuple[Optional[str], int]:
    """
    Probe the candidate name columns in priority order.

    Returns:
        Tuple of (name, column) for the first accepted cell, or (None, -1).
    """
    for column in layout.name_columns:
        name = accept_name(cell_at(row, column))
        if name:
            return name, column
    return None, -1


# ═══════════════════════════════════════════════════════════════
# FIELD MAPPING
# ═══════════════════════════════════════════════════════════════

def text_at(row: Sequence, column: Optional[int]) -> str:
    cell = cell_at(row, column)
    if cell is None or cell == "":
        return ""
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell).strip()


def quantity_at(row: Sequence, column: Optional[int], location: str,
                row_index: int, product_name: str) -> int:
    value = resolve_stock_value(cell_at(row, column), location, row_index, product_name)
    return round_quantity(value)


def looks_numeric(cell) -> bool:
    """True for numbers and for text containing at least one digit."""
    if isinstance(cell, bool):
        return False
    if isinstance(cell, Number):
        return True
    return isinstance(cell, str) and any(ch.isdigit() for ch in cell)


def extract_product_info(row: Sequence, row_index: int,
                         layout: ColumnLayout = SHEET_LAYOUT) -> Optional[StockRecord]:
    """
    Build a StockRecord from one row.

    Args:
        row: Row cells.
        row_index: Position of the row in the sheet, kept for diagnostics.
        layout: Column layout of the sheet.

    Returns:
        StockRecord, or None when no product name could be found.
    """
    product_name, _ = find_product_name(row, layout)
    if not product_name:
        return None

    quantities = {
        location: quantity_at(row, column, LOCATION_LABELS[location], row_index, product_name)
        for location, column in zip(LOCATIONS, layout.location_columns)
    }

    factory = quantity_at(row, layout.factory_column, "Factory", row_index, product_name)
    dam = quantity_at(row, layout.dam_column, "Dam", row_index, product_name)

    # Older report versions carry the factory figure one column over
    if (factory == 0 and layout.factory_alt_column is not None
            and len(row) >= layout.alt_factory_min_columns):
        factory = quantity_at(row, layout.factory_alt_column, "Factory Alt", row_index, product_name)

    explicit_total = None
    total_cell = cell_at(row, layout.explicit_total_column)
    if looks_numeric(total_cell):
        explicit_total = quantity_at(row, layout.explicit_total_column, "Report Total",
                                     row_index, product_name)

    return StockRecord(
        name=product_name,
        pack_size=text_at(row, layout.pack_size_column),
        portfolio=text_at(row, layout.portfolio_column),
        factory=factory,
        dam=dam,
        explicit_total=explicit_total,
        source_row_index=row_index,
        raw=tuple(row[:RAW_PAYLOAD_COLUMNS]),
        **quantities,
    )
