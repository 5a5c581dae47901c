"""
Header Locator Module

Finds the header row of a stock report so parsing can start right below it.
Reports carry a company banner and a few title lines above the table, and
their number varies between versions.
"""

import logging
from typing import List, Optional, Sequence

from .layout import (
    LOCATIONS,
    SHEET_LAYOUT,
    HEADER_SCAN_LIMIT,
    HEADER_MIN_CELLS,
    PRODUCT_LABEL_KEYWORDS,
    PACK_SIZE_KEYWORDS,
    ColumnLayout,
)


logger = logging.getLogger(__name__)


def cell_text(cell) -> str:
    """Lowercased text of a cell; empty cells give an empty string."""
    if cell is None:
        return ""
    return str(cell).lower()


def row_text(row: Sequence) -> str:
    return " ".join(cell_text(cell) for cell in row)


def names_all_locations(text: str) -> bool:
    return all(location in text for location in LOCATIONS)


def names_product_and_pack(text: str) -> bool:
    return (all(keyword in text for keyword in PRODUCT_LABEL_KEYWORDS)
            and all(keyword in text for keyword in PACK_SIZE_KEYWORDS))


def names_locations_in_place(row: Sequence, layout: ColumnLayout = SHEET_LAYOUT) -> bool:
    """Check the first two location columns hold the first two location names."""
    first_col, second_col = layout.location_columns[0], layout.location_columns[1]
    if len(row) <= second_col:
        return False
    return (LOCATIONS[0] in cell_text(row[first_col])
            and LOCATIONS[1] in cell_text(row[second_col]))


def is_header_row(row: Sequence, layout: ColumnLayout = SHEET_LAYOUT) -> bool:
    if not row or len(row) < HEADER_MIN_CELLS:
        return False
    text = row_text(row)
    return (names_all_locations(text)
            or names_product_and_pack(text)
            or names_locations_in_place(row, layout))


def find_data_start_row(rows: List[Sequence], layout: ColumnLayout = SHEET_LAYOUT) -> Optional[int]:
    """
    Scan the top of a sheet for the header row.

    Args:
        rows: Sheet as a list of rows.
        layout: Column layout, used for the positional location check.

    Returns:
        Index of the first data row (the row after the header), or None
        if no header was found in the first HEADER_SCAN_LIMIT rows.
    """
    for index, row in enumerate(rows[:HEADER_SCAN_LIMIT]):
        if is_header_row(row, layout):
            logger.debug("Found header at row %d: %.50s", index, row_text(row))
            return index + 1
    return None
