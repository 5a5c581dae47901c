"""
Extraction Strategies Module

Two independent ways of turning sheet rows into stock records:

- primary: locate the header, then read every row with the fixed layout
- fallback: scan every cell for something that looks like a product name
  followed by a run of quantities

They are tried in order and the first one that yields records wins.
"""

import logging
import re
from typing import Callable, List, Optional, Sequence, Tuple

from .cell_values import EXPRESSION_MARKER, resolve_stock_value, round_quantity
from .header_locator import find_data_start_row
from .layout import (
    LOCATIONS,
    SHEET_LAYOUT,
    DEFAULT_DATA_START_ROW,
    FALLBACK_MIN_CELLS,
    FALLBACK_LOOKAHEAD,
    FALLBACK_MIN_QUANTITIES,
    FALLBACK_NAME_MIN_LENGTH,
    FALLBACK_NAME_MAX_LENGTH,
    ColumnLayout,
    is_denylisted,
)
from .records import StockRecord
from .row_extractor import extract_product_info


logger = logging.getLogger(__name__)

_NUMBER_OR_EXPRESSION = re.compile(r"^[0-9.\-+=]+$")


# ═══════════════════════════════════════════════════════════════
# PARSE RESULT
# ═══════════════════════════════════════════════════════════════

class SheetParseResult:
    """Records produced by a parse, tagged with the strategy that produced them."""

    def __init__(self, records: List[StockRecord], strategy: Optional[str] = None,
                 data_start_row: Optional[int] = None):
        self.records = records
        self.strategy = strategy  # "primary", "fallback" or None when nothing matched
        self.data_start_row = data_start_row

    def __bool__(self):
        return bool(self.records)

    def __len__(self):
        return len(self.records)


# ═══════════════════════════════════════════════════════════════
# PRIMARY STRATEGY
# ═══════════════════════════════════════════════════════════════

def primary_strategy(rows: List[Sequence], layout: ColumnLayout = SHEET_LAYOUT) -> SheetParseResult:
    """Header-anchored, fixed-layout extraction."""
    data_start_row = find_data_start_row(rows, layout)
    if data_start_row is None:
        data_start_row = DEFAULT_DATA_START_ROW
        logger.debug("No header found, using default start row %d", data_start_row)

    records = []
    for index in range(data_start_row, len(rows)):
        row = rows[index]
        if not row or len(row) < layout.min_columns:
            continue
        record = extract_product_info(row, index, layout)
        if record:
            records.append(record)

    logger.info("Primary strategy parsed %d products", len(records))
    return SheetParseResult(records, "primary", data_start_row)


# ═══════════════════════════════════════════════════════════════
# FALLBACK STRATEGY
# ═══════════════════════════════════════════════════════════════

def looks_like_product_name(cell) -> bool:
    if not isinstance(cell, str):
        return False
    text = cell.strip()
    if not FALLBACK_NAME_MIN_LENGTH <= len(text) <= FALLBACK_NAME_MAX_LENGTH:
        return False
    if _NUMBER_OR_EXPRESSION.match(text):
        return False
    return not is_denylisted(text)


def collect_quantities(row: Sequence, name_column: int, row_index: int, name: str) -> List[int]:
    """
    Read up to FALLBACK_LOOKAHEAD cells after the name column.

    Zero values are kept only when the cell held an expression, so blank
    cells do not count as quantities but a formula that nets to 0 does.
    """
    quantities = []
    end = min(name_column + 1 + FALLBACK_LOOKAHEAD, len(row))
    for column in range(name_column + 1, end):
        cell = row[column]
        value = resolve_stock_value(cell, f"Col{column}", row_index, name)
        if value > 0 or (isinstance(cell, str) and EXPRESSION_MARKER in cell):
            quantities.append(round_quantity(value))
    return quantities


def record_from_quantities(name: str, quantities: List[int], row_index: int) -> StockRecord:
    """
    Map collected quantities onto the locations in order.

    There is no factory or dam figure in this mode; the sum of every
    collected quantity is carried as the record's total.
    """
    mapped = dict(zip(LOCATIONS, quantities))
    return StockRecord(
        name=name,
        explicit_total=sum(quantities),
        source_row_index=row_index,
        **mapped,
    )


def scan_row(row: Sequence, row_index: int) -> Optional[StockRecord]:
    for column, cell in enumerate(row):
        if not looks_like_product_name(cell):
            continue
        name = cell.strip()
        quantities = collect_quantities(row, column, row_index, name)
        if len(quantities) >= FALLBACK_MIN_QUANTITIES:
            logger.debug("Fallback accepted %r at row %d col %d", name, row_index, column)
            return record_from_quantities(name, quantities, row_index)
    return None


def fallback_strategy(rows: List[Sequence]) -> SheetParseResult:
    """Cell-scanning extraction for sheets the primary strategy cannot read."""
    records = []
    for index, row in enumerate(rows):
        if not row or len(row) < FALLBACK_MIN_CELLS:
            continue
        record = scan_row(row, index)
        if record:
            records.append(record)

    logger.info("Fallback strategy parsed %d products", len(records))
    return SheetParseResult(records, "fallback")


# ═══════════════════════════════════════════════════════════════
# MAIN PARSE FUNCTION
# ═══════════════════════════════════════════════════════════════

STRATEGIES: Tuple[Callable[[List[Sequence]], SheetParseResult], ...] = (
    primary_strategy,
    fallback_strategy,
)


def parse_stock_rows(rows: List[Sequence], strategies=STRATEGIES) -> SheetParseResult:
    """
    Main entry point of the engine: raw sheet rows in, stock records out.

    Strategies are tried in order; the first non-empty result is returned.
    An empty result means the sheet holds no recognizable stock data.
    """
    if not rows:
        return SheetParseResult([])

    for strategy in strategies:
        result = strategy(rows)
        if result:
            return result
        logger.info("%s found no products", strategy.__name__)

    return SheetParseResult([])
