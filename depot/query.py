"""
Stock Query Module

Filtering, sorting and summary statistics over parsed stock records.
Every function returns a new list; the parsed record set is never modified.
"""

import unicodedata
from typing import Dict, List, Optional, Tuple

from .layout import LOCATIONS, DEFAULT_LOW_STOCK_THRESHOLD
from .records import StockRecord


ALL_LOCATIONS = "all"

SORT_FIELDS = ("product",) + LOCATIONS + ("total",)
ASCENDING = "asc"
DESCENDING = "desc"

LOW_STOCK = "Low Stock"
NORMAL = "Normal"


def parse_threshold(value, default: int = DEFAULT_LOW_STOCK_THRESHOLD) -> int:
    """Read a user-entered threshold, falling back to the default when invalid."""
    try:
        threshold = int(value)
    except (TypeError, ValueError):
        return default
    return threshold if threshold >= 0 else default


def normalize_location(location: Optional[str]) -> Optional[str]:
    """Map a location selection to a canonical key; None means all locations."""
    if location is None:
        return None
    key = str(location).strip().lower()
    if key in LOCATIONS:
        return key
    return None


# ═══════════════════════════════════════════════════════════════
# FILTERING
# ═══════════════════════════════════════════════════════════════

def matches_search(record: StockRecord, search_text: str) -> bool:
    term = (search_text or "").lower()
    if not term:
        return True
    return (term in record.name.lower()
            or term in record.pack_size.lower()
            or term in record.portfolio.lower())


def has_stock_at(record: StockRecord, location: Optional[str]) -> bool:
    key = normalize_location(location)
    if key is None:
        return True
    return record.quantity(key) > 0


def apply_filters(records: List[StockRecord], search_text: str = "",
                  location: Optional[str] = ALL_LOCATIONS, sort_field: str = "product",
                  sort_direction: str = ASCENDING) -> List[StockRecord]:
    """
    Build the working view shown to the user.

    Args:
        records: Parsed records.
        search_text: Case-insensitive substring matched against name,
            pack size and portfolio. Empty matches everything.
        location: "all" or one of the five location names; a location keeps
            only records with positive stock there.
        sort_field: "product", a location name, or "total".
        sort_direction: "asc" or "desc".
    """
    filtered = [
        record for record in records
        if matches_search(record, search_text) and has_stock_at(record, location)
    ]
    return sort_records(filtered, sort_field, sort_direction)


# ═══════════════════════════════════════════════════════════════
# SORTING
# ═══════════════════════════════════════════════════════════════

def collation_key(text: str) -> Tuple[str, str]:
    """
    Case- and accent-insensitive ordering key: "Éclair" sorts with "eclair",
    between "alpha" and "Zeta". Accents only break ties.
    """
    folded = text.casefold()
    decomposed = unicodedata.normalize("NFKD", folded)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base, folded


def sort_key(field: str):
    field = (field or "").lower()
    if field in LOCATIONS:
        return lambda record: record.quantity(field)
    if field == "total":
        return lambda record: record.grand_total
    return lambda record: collation_key(record.name)


def sort_records(records: List[StockRecord], field: str = "product",
                 direction: str = ASCENDING) -> List[StockRecord]:
    """Stable sort; ties keep their current order."""
    return sorted(records, key=sort_key(field), reverse=(direction == DESCENDING))


def toggle_sort(current_field: str, current_direction: str, clicked_field: str) -> Tuple[str, str]:
    """
    Column-click behaviour: the same column flips direction, a new
    column starts ascending.
    """
    if clicked_field == current_field:
        return current_field, DESCENDING if current_direction == ASCENDING else ASCENDING
    return clicked_field, ASCENDING


# ═══════════════════════════════════════════════════════════════
# LOW STOCK & STATISTICS
# ═══════════════════════════════════════════════════════════════

def is_low_stock(record: StockRecord, threshold: int, location: Optional[str] = None) -> bool:
    """
    Low stock at the selected location, or at any location when none is selected.
    """
    key = normalize_location(location)
    if key is not None:
        return record.quantity(key) < threshold
    return any(record.quantity(loc) < threshold for loc in LOCATIONS)


def stock_status(record: StockRecord, threshold: int, location: Optional[str] = None) -> str:
    return LOW_STOCK if is_low_stock(record, threshold, location) else NORMAL


def active_locations(records: List[StockRecord]) -> List[str]:
    """Locations where at least one record holds positive stock."""
    return [
        location for location in LOCATIONS
        if any(record.quantity(location) > 0 for record in records)
    ]


def summarize(records: List[StockRecord], threshold: int) -> Dict:
    """
    Summary statistics for a record set.

    Returns:
        Dict with count, total_units, low_stock_count and active_location_count.
    """
    return {
        "count": len(records),
        "total_units": sum(record.grand_total for record in records),
        "low_stock_count": sum(1 for record in records if is_low_stock(record, threshold)),
        "active_location_count": len(active_locations(records)),
    }
