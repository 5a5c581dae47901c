"""
Data Ingestion Module

Loads a depot stock report and runs it through the extraction engine.
The only hard failure is an unreadable document; a readable sheet with no
recognizable products is a valid, empty result.
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Union

from .records import StockRecord
from .sheet_reader import SheetReadError, read_sheet_rows, read_uploaded_sheet
from .strategies import parse_stock_rows


logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════
# REPORT DATE PATTERNS
# ═══════════════════════════════════════════════════════════════

MONTH_YEAR_PATTERN = re.compile(
    r"(Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[.\s-]*(\d{4})", re.IGNORECASE
)

DATE_PATTERNS = [
    re.compile(r"\d{2}[.\-/]\d{2}[.\-/]\d{4}"),
    re.compile(r"\d{4}[.\-/]\d{2}[.\-/]\d{2}"),
]

REPORT_DATE_NOT_DETECTED = "Not detected"


# ═══════════════════════════════════════════════════════════════
# INGESTION RESULT CLASS
# ═══════════════════════════════════════════════════════════════

class IngestionResult:
    """Encapsulates the outcome of loading one stock report."""

    def __init__(self, valid: bool, message: str, records: Optional[List[StockRecord]] = None,
                 strategy: Optional[str] = None, data_start_row: Optional[int] = None,
                 source_name: str = "", report_date: str = REPORT_DATE_NOT_DETECTED,
                 error: Optional[str] = None):
        self.valid = valid
        self.message = message
        self.records = records or []
        self.strategy = strategy  # "primary", "fallback", or None
        self.data_start_row = data_start_row
        self.source_name = source_name
        self.report_date = report_date
        self.error = error  # "unreadable" when the document could not be decoded

    def __bool__(self):
        return self.valid

    @property
    def has_data(self) -> bool:
        return self.valid and bool(self.records)


def detect_report_date(file_name: str) -> str:
    """
    Guess the report period from a file name.

    "Stock Jan-2026.xlsx" gives "Jan 2026"; otherwise the first
    dd.mm.yyyy / yyyy-mm-dd style date is returned verbatim.
    """
    match = MONTH_YEAR_PATTERN.search(file_name)
    if match:
        return f"{match.group(1)} {match.group(2)}"

    for pattern in DATE_PATTERNS:
        match = pattern.search(file_name)
        if match:
            return match.group(0)

    return REPORT_DATE_NOT_DETECTED


def build_result(rows: List[list], source_name: str) -> IngestionResult:
    parsed = parse_stock_rows(rows)
    report_date = detect_report_date(source_name)

    if not parsed:
        logger.info("No stock records found in %s", source_name or "sheet")
        return IngestionResult(
            valid=True,
            message="No stock records found. Please make sure the file follows the depot stock format.",
            source_name=source_name,
            report_date=report_date,
        )

    logger.info("Loaded %d products from %s (%s strategy)",
                len(parsed.records), source_name or "sheet", parsed.strategy)
    return IngestionResult(
        valid=True,
        message=f"Successfully loaded {len(parsed.records)} products.",
        records=parsed.records,
        strategy=parsed.strategy,
        data_start_row=parsed.data_start_row,
        source_name=source_name,
        report_date=report_date,
    )


# ═══════════════════════════════════════════════════════════════
# MAIN INGESTION FUNCTIONS
# ═══════════════════════════════════════════════════════════════

def ingest_rows(rows: List[list], source_name: str = "") -> IngestionResult:
    """Run already-decoded sheet rows through the engine."""
    return build_result(rows, source_name)


def ingest_excel(file_path: Union[str, Path], sheet_name: Optional[str] = None) -> IngestionResult:
    """
    Main entry point for stock report ingestion from disk.

    Args:
        file_path: Path to the .xlsx / .xlsm / .csv report
        sheet_name: Worksheet to read; the first one by default

    Returns:
        IngestionResult with status, message, and parsed records
    """
    source_name = Path(file_path).name
    try:
        rows = read_sheet_rows(file_path, sheet_name)
    except SheetReadError as e:
        return IngestionResult(False, str(e), source_name=source_name, error="unreadable")

    return build_result(rows, source_name)


def ingest_uploaded_file(uploaded_file, sheet_name: Optional[str] = None) -> IngestionResult:
    """
    Ingest a stock report from a Streamlit uploaded file object.

    Args:
        uploaded_file: Streamlit UploadedFile object

    Returns:
        IngestionResult with status, message, and parsed records
    """
    source_name = getattr(uploaded_file, "name", "") or ""
    try:
        rows = read_uploaded_sheet(uploaded_file, sheet_name)
    except SheetReadError as e:
        return IngestionResult(False, str(e), source_name=source_name, error="unreadable")

    return build_result(rows, source_name)


def get_ingestion_summary(result: IngestionResult) -> Dict:
    """
    Generate a human-readable summary of what was ingested.
    """
    if not result.valid:
        return {
            "success": False,
            "message": result.message,
            "details": None
        }

    return {
        "success": True,
        "message": result.message,
        "records": len(result.records),
        "strategy": result.strategy,
        "data_start_row": result.data_start_row,
        "source_name": result.source_name,
        "report_date": result.report_date,
    }
