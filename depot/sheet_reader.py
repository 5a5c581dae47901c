"""
Sheet Reader Module

Reads the first worksheet of a stock report into a plain list of rows.
Formulas are kept as text ("=400-240") so the cell resolver can evaluate
them itself; cached results are not trusted.
"""

import csv
import io
import logging
import math
from datetime import date, datetime, time
from pathlib import Path
from typing import List, Optional, Union

import pandas as pd
from openpyxl import load_workbook


logger = logging.getLogger(__name__)


SUPPORTED_EXTENSIONS = {".xlsx", ".xlsm", ".csv"}


class SheetReadError(Exception):
    """The document could not be opened or decoded as a spreadsheet."""


def normalize_cell(value):
    """Reduce a cell to None, str, int/float, or a date/time value."""
    if value is None:
        return None
    if isinstance(value, str):
        return value if value != "" else None
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, (bool, int, float, datetime, date, time)):
        return value
    # Array / data-table formulas carry their source text
    text = getattr(value, "text", None)
    if isinstance(text, str):
        return text
    return str(value)


def trim_row(row) -> list:
    """Normalize cells and drop trailing empty ones."""
    cells = [normalize_cell(value) for value in row]
    while cells and cells[-1] is None:
        cells.pop()
    return cells


def check_extension(file_name: Union[str, Path]) -> str:
    ext = Path(str(file_name)).suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise SheetReadError(
            "Unsupported file format. Please upload an Excel (.xlsx) or CSV file."
        )
    return ext


def read_workbook_rows(source, sheet_name: Optional[str] = None) -> List[list]:
    """
    Read one worksheet with openpyxl.

    Args:
        source: Path or binary file object.
        sheet_name: Worksheet to read; defaults to the first one.
    """
    try:
        workbook = load_workbook(source, read_only=True, data_only=False)
    except Exception as e:
        logger.warning("Failed to open workbook: %s", e)
        raise SheetReadError(
            "Unable to read the Excel file. Please ensure it is not corrupted or password-protected."
        ) from e

    try:
        if not workbook.sheetnames:
            raise SheetReadError("The workbook contains no sheets.")
        if sheet_name is not None:
            if sheet_name not in workbook.sheetnames:
                raise SheetReadError(f"Sheet '{sheet_name}' not found in the workbook.")
            worksheet = workbook[sheet_name]
        else:
            worksheet = workbook.worksheets[0]

        rows = [trim_row(row) for row in worksheet.iter_rows(values_only=True)]
    finally:
        workbook.close()

    logger.debug("Loaded %d rows from sheet %s", len(rows), worksheet.title)
    return rows


def csv_width(text: str) -> int:
    """Number of fields in the widest CSV record."""
    return max((len(record) for record in csv.reader(io.StringIO(text))), default=1) or 1


def read_csv_rows(source) -> List[list]:
    """
    Read a CSV export as text cells.

    Records may be ragged, so the column count is taken from the widest
    record before pandas parses the text.
    """
    try:
        raw = source.read_bytes() if isinstance(source, Path) else source.read()
        text = raw.decode("utf-8-sig") if isinstance(raw, bytes) else raw
        df = pd.read_csv(
            io.StringIO(text),
            header=None,
            names=range(csv_width(text)),
            index_col=False,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=False,
            engine="python",
        )
    except Exception as e:
        logger.warning("Failed to read CSV: %s", e)
        raise SheetReadError("Unable to read the CSV file.") from e

    return [trim_row(row) for row in df.itertuples(index=False, name=None)]


def read_sheet_rows(file_path: Union[str, Path], sheet_name: Optional[str] = None) -> List[list]:
    """
    Read a stock report from disk.

    Raises:
        SheetReadError: missing file, unsupported format, or undecodable content.
    """
    path = Path(file_path)
    if not path.exists():
        raise SheetReadError("File not found. Please select a valid file.")

    ext = check_extension(path)
    if ext == ".csv":
        return read_csv_rows(path)
    return read_workbook_rows(path, sheet_name)


def read_uploaded_sheet(uploaded_file, sheet_name: Optional[str] = None) -> List[list]:
    """
    Read a stock report from an uploaded file object (e.g. Streamlit's UploadedFile).
    """
    if uploaded_file is None:
        raise SheetReadError("No file uploaded.")

    ext = check_extension(uploaded_file.name)
    buffer = io.BytesIO(uploaded_file.read())
    uploaded_file.seek(0)

    if ext == ".csv":
        return read_csv_rows(buffer)
    return read_workbook_rows(buffer, sheet_name)
