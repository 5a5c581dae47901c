"""
Sheet Layout Module

Canonical depot locations, column offsets, and the label denylist used by
the extraction heuristics. Source reports drift between versions, so every
offset the engine relies on lives here.
"""

from typing import NamedTuple, Optional, Tuple


# ═══════════════════════════════════════════════════════════════
# LOCATIONS
# ═══════════════════════════════════════════════════════════════

LOCATIONS = ("dhaka", "jhenaidah", "bogra", "rangpur", "chattagram")

LOCATION_LABELS = {
    "dhaka": "Dhaka",
    "jhenaidah": "Jhenaidah",
    "bogra": "Bogra",
    "rangpur": "Rangpur",
    "chattagram": "Chattagram",
}

COMPANY_NAME = "Surovi Agro Industries Ltd."


# ═══════════════════════════════════════════════════════════════
# COLUMN LAYOUTS
# ═══════════════════════════════════════════════════════════════

class ColumnLayout(NamedTuple):
    """Where each field of a stock row sits, by zero-based column index."""

    name_columns: Tuple[int, ...]
    pack_size_column: int
    portfolio_column: int
    location_columns: Tuple[int, int, int, int, int]
    factory_column: int
    factory_alt_column: Optional[int]
    dam_column: int
    explicit_total_column: Optional[int]
    min_columns: int = 10
    alt_factory_min_columns: int = 13


# E=Dhaka .. I=Chattagram, J=Factory FG, K=Dam/Ex Factory FG, L=Total
SHEET_LAYOUT = ColumnLayout(
    name_columns=(1, 0, 2, 3),
    pack_size_column=2,
    portfolio_column=0,
    location_columns=(4, 5, 6, 7, 8),
    factory_column=9,
    factory_alt_column=11,
    dam_column=10,
    explicit_total_column=11,
)

# Column order written by depot.export
EXPORT_LAYOUT = ColumnLayout(
    name_columns=(0,),
    pack_size_column=1,
    portfolio_column=2,
    location_columns=(3, 4, 5, 6, 7),
    factory_column=8,
    factory_alt_column=None,
    dam_column=9,
    explicit_total_column=11,
)


# ═══════════════════════════════════════════════════════════════
# NON-PRODUCT LABELS
# ═══════════════════════════════════════════════════════════════

# Case-sensitive, matched anywhere in the cell text
DENYLIST_SUBSTRINGS = (
    "Portfolio",
    "Product Name",
    "Depot",
    "Factory",
    "Total",
    "Sub",
    "Surovi",
)

DENYLIST_PREFIXES = (
    "National Stock",
)


# ═══════════════════════════════════════════════════════════════
# HEURISTIC LIMITS
# ═══════════════════════════════════════════════════════════════

HEADER_SCAN_LIMIT = 15
HEADER_MIN_CELLS = 6
DEFAULT_DATA_START_ROW = 6

PRODUCT_LABEL_KEYWORDS = ("product", "name")
PACK_SIZE_KEYWORDS = ("pack", "size")

FALLBACK_MIN_CELLS = 5
FALLBACK_LOOKAHEAD = 9
FALLBACK_MIN_QUANTITIES = 2
FALLBACK_NAME_MIN_LENGTH = 3
FALLBACK_NAME_MAX_LENGTH = 49

RAW_PAYLOAD_COLUMNS = 15

DEFAULT_LOW_STOCK_THRESHOLD = 50


def is_denylisted(text: str) -> bool:
    """Check if a cell text is a known non-product label."""
    if text == COMPANY_NAME:
        return True
    for fragment in DENYLIST_SUBSTRINGS:
        if fragment in text:
            return True
    return any(text.startswith(prefix) for prefix in DENYLIST_PREFIXES)
