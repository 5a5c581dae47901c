"""
Stock Export Module

Serializes a record set into the "Stock Summary" workbook handed to users,
and reads such an export back into records.
"""

import io
import logging
from datetime import datetime
from typing import List, Optional, Sequence

import pandas as pd
from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from .layout import COMPANY_NAME, EXPORT_LAYOUT, LOCATIONS, LOCATION_LABELS
from .query import stock_status
from .records import StockRecord
from .strategies import primary_strategy


logger = logging.getLogger(__name__)


EXPORT_SHEET_NAME = "Stock Summary"

EXPORT_HEADER = (
    ["Product Name", "Pack Size", "Portfolio"]
    + [LOCATION_LABELS[location] for location in LOCATIONS]
    + ["Factory FG", "Dam FG", "Total Depot", "Grand Total", "Status"]
)

COLUMN_WIDTHS = [30, 10, 15, 10, 12, 10, 10, 12, 12, 10, 12, 12, 12]


def export_filename(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"Stock_Export_{now.strftime('%Y%m%d')}.xlsx"


def export_row(record: StockRecord, threshold: int, location: Optional[str] = None) -> list:
    return (
        [record.name, record.pack_size, record.portfolio]
        + [record.quantity(loc) for loc in LOCATIONS]
        + [record.factory, record.dam, record.location_total, record.grand_total,
           stock_status(record, threshold, location)]
    )


def build_export_rows(records: List[StockRecord], threshold: int, source_label: Optional[str] = None,
                      exported_at: Optional[datetime] = None) -> List[list]:
    """
    Lay out the export document as rows: title block, header, one row per
    record, then a summary block.

    Raises:
        ValueError: if there are no records to export.
    """
    if not records:
        raise ValueError("No data to export")

    exported_at = exported_at or datetime.now()

    rows = [
        [f"{COMPANY_NAME} - Stock Export"],
        [f"Exported: {exported_at.strftime('%Y-%m-%d %H:%M:%S')}"],
        [f"Source File: {source_label or 'Unknown'}"],
        [f"Low Stock Threshold: {threshold}"],
        [],
        list(EXPORT_HEADER),
    ]
    rows.extend(export_row(record, threshold) for record in records)

    low_stock_count = sum(1 for row in rows[6:] if row[-1] == "Low Stock")
    rows.extend([
        [],
        ["Summary"],
        ["Total Products", len(records)],
        ["Total Units", sum(record.grand_total for record in records)],
        ["Low Stock Items", low_stock_count],
        ["Export Date", exported_at.strftime("%Y-%m-%d")],
    ])
    return rows


def write_export_workbook(rows: List[list], target=None):
    """
    Write export rows to an .xlsx workbook.

    Args:
        rows: Output of build_export_rows.
        target: Path or binary file object. When omitted, the workbook
            bytes are returned.
    """
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = EXPORT_SHEET_NAME

    for row in rows:
        worksheet.append(row)

    for index, width in enumerate(COLUMN_WIDTHS, start=1):
        worksheet.column_dimensions[get_column_letter(index)].width = width

    if target is None:
        buffer = io.BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

    workbook.save(target)
    return target


def export_to_excel(records: List[StockRecord], threshold: int, source_label: Optional[str] = None,
                    target=None):
    """Build and write the export in one step."""
    rows = build_export_rows(records, threshold, source_label)
    logger.info("Exporting %d products", len(records))
    return write_export_workbook(rows, target)


def records_from_export_rows(rows: List[Sequence]) -> List[StockRecord]:
    """Read the record rows of an export back with the export column layout."""
    return primary_strategy(rows, EXPORT_LAYOUT).records


def records_to_frame(records: List[StockRecord], threshold: int,
                     location: Optional[str] = None) -> pd.DataFrame:
    """Tabular view of records for display, with a status column."""
    data = [export_row(record, threshold, location) for record in records]
    return pd.DataFrame(data, columns=EXPORT_HEADER)
