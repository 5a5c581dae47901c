"""
Depot Stock Module

Heuristic extraction engine for depot stock reports.
"""

from .cell_values import resolve_stock_value, evaluate_expression
from .records import StockRecord, compute_totals
from .header_locator import find_data_start_row
from .row_extractor import extract_product_info, find_product_name
from .strategies import (
    parse_stock_rows,
    primary_strategy,
    fallback_strategy,
    SheetParseResult
)
from .sheet_reader import (
    read_sheet_rows,
    read_uploaded_sheet,
    SheetReadError
)
from .data_ingestion import (
    ingest_excel,
    ingest_uploaded_file,
    ingest_rows,
    detect_report_date,
    get_ingestion_summary,
    IngestionResult
)
from .query import (
    apply_filters,
    sort_records,
    toggle_sort,
    is_low_stock,
    stock_status,
    summarize
)
from .export import (
    build_export_rows,
    write_export_workbook,
    export_to_excel,
    export_filename,
    records_from_export_rows,
    records_to_frame
)

__all__ = [
    "resolve_stock_value",
    "evaluate_expression",
    "StockRecord",
    "compute_totals",
    "find_data_start_row",
    "extract_product_info",
    "find_product_name",
    "parse_stock_rows",
    "primary_strategy",
    "fallback_strategy",
    "SheetParseResult",
    "read_sheet_rows",
    "read_uploaded_sheet",
    "SheetReadError",
    "ingest_excel",
    "ingest_uploaded_file",
    "ingest_rows",
    "detect_report_date",
    "get_ingestion_summary",
    "IngestionResult",
    "apply_filters",
    "sort_records",
    "toggle_sort",
    "is_low_stock",
    "stock_status",
    "summarize",
    "build_export_rows",
    "write_export_workbook",
    "export_to_excel",
    "export_filename",
    "records_from_export_rows",
    "records_to_frame"
]
