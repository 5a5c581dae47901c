"""
Tests for Stock Report Ingestion

Run with: python3 -m pytest test_ingestion.py -v
"""

import io

import pytest
from openpyxl import Workbook

from conftest import REPORT_HEADER, SCENARIO_ROW
from depot.data_ingestion import (
    detect_report_date,
    get_ingestion_summary,
    ingest_excel,
    ingest_rows,
    ingest_uploaded_file,
)
from depot.sheet_reader import read_sheet_rows


class NamedBytesIO(io.BytesIO):
    """Stands in for Streamlit's UploadedFile."""

    def __init__(self, data, name):
        super().__init__(data)
        self.name = name
        self.size = len(data)


def save_workbook(path, rows):
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = "Stock"
    for row in rows:
        worksheet.append(row)
    workbook.save(path)
    return path


@pytest.fixture
def report_path(tmp_path, report_rows):
    rows = list(report_rows)
    rows.insert(6, ["Fungicides", "Astrum 60 WDG", "100gm", None,
                    "=400-240-40+200", 195, 380, 0, 225, 120, 60, None])
    return save_workbook(tmp_path / "Stock Jan-2026.xlsx", rows)


class TestIngestExcel:
    """Loading reports from disk."""

    def test_workbook_with_formulas(self, report_path):
        result = ingest_excel(report_path)

        assert result.valid
        assert result.has_data
        assert result.strategy == "primary"
        assert result.report_date == "Jan 2026"
        assert result.source_name == "Stock Jan-2026.xlsx"
        assert result.message == "Successfully loaded 4 products."

        names = [record.name for record in result.records]
        assert names == ["Prosper 10gm", "Moto 20ml", "Astrum 60 WDG", "Bactrol 20 WP"]

        astrum = result.records[2]
        assert astrum.dhaka == 320
        assert astrum.rangpur == 0
        assert result.records[3].dhaka == 280

    def test_named_sheet(self, tmp_path, report_rows):
        workbook = Workbook()
        workbook.active.title = "Cover"
        workbook.active.append(["Nothing to see"])
        stock = workbook.create_sheet("Stock")
        for row in report_rows:
            stock.append(row)
        path = tmp_path / "report.xlsx"
        workbook.save(path)

        assert not ingest_excel(path).has_data
        assert len(ingest_excel(path, sheet_name="Stock").records) == 3

    def test_missing_sheet(self, report_path):
        result = ingest_excel(report_path, sheet_name="Nope")
        assert not result.valid
        assert result.error == "unreadable"

    def test_fallback_layout(self, tmp_path):
        path = save_workbook(tmp_path / "loose.xlsx", [
            ["Stock list"],
            ["Prosper 10gm", 120, 85, None, 7],
        ])
        result = ingest_excel(path)

        assert result.strategy == "fallback"
        assert result.records[0].grand_total == 212

    def test_empty_workbook(self, tmp_path):
        path = save_workbook(tmp_path / "empty.xlsx", [])
        result = ingest_excel(path)

        assert result.valid
        assert result.records == []
        assert not result.has_data
        assert result.message.startswith("No stock records found")

    def test_corrupt_workbook(self, tmp_path):
        path = tmp_path / "broken.xlsx"
        path.write_bytes(b"not a workbook")
        result = ingest_excel(path)

        assert not result
        assert result.error == "unreadable"
        assert result.records == []

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "report.pdf"
        path.write_bytes(b"%PDF-1.4")
        result = ingest_excel(path)

        assert not result.valid
        assert "Unsupported file format" in result.message

    def test_missing_file(self, tmp_path):
        result = ingest_excel(tmp_path / "nowhere.xlsx")
        assert not result.valid
        assert result.error == "unreadable"

    def test_csv_report(self, tmp_path):
        lines = [
            "Surovi Agro Industries Ltd.",
            ",".join(cell or "" for cell in REPORT_HEADER),
            ",".join(cell or "" for cell in SCENARIO_ROW),
            "Fungicides,Bactrol 20 WP,250gm,,=300-20,150,350,120,200,100,50,1250",
        ]
        path = tmp_path / "stock_15.03.2026.csv"
        path.write_text("\n".join(lines) + "\n")
        result = ingest_excel(path)

        assert result.has_data
        assert result.report_date == "15.03.2026"
        assert [record.grand_total for record in result.records] == [660, 1250]
        assert result.records[1].dhaka == 280

    def test_wide_csv_keeps_every_cell(self, tmp_path):
        path = tmp_path / "wide.csv"
        path.write_text(",".join(f"c{i}" for i in range(300)) + "\nProsper 10gm,1,2,3,4\n")
        rows = read_sheet_rows(path)

        assert len(rows[0]) == 300
        assert rows[0][-1] == "c299"
        assert rows[1] == ["Prosper 10gm", "1", "2", "3", "4"]

    def test_ragged_csv(self, tmp_path):
        path = tmp_path / "ragged.csv"
        path.write_text("Title\nA,B\n\nx,y,z,w\n")
        rows = read_sheet_rows(path)

        assert rows == [["Title"], ["A", "B"], [], ["x", "y", "z", "w"]]


class TestIngestUploadedFile:
    """Loading reports from an upload widget."""

    def test_uploaded_workbook(self, report_path):
        upload = NamedBytesIO(report_path.read_bytes(), "Stock Jan-2026.xlsx")
        result = ingest_uploaded_file(upload)

        assert result.has_data
        assert len(result.records) == 4
        assert upload.tell() == 0

    def test_uploaded_csv(self):
        text = "\n".join([
            ",".join(cell or "" for cell in REPORT_HEADER),
            ",".join(cell or "" for cell in SCENARIO_ROW),
        ])
        result = ingest_uploaded_file(NamedBytesIO(text.encode("utf-8-sig"), "stock.csv"))

        assert result.has_data
        assert result.records[0].portfolio == "Insecticides"
        assert result.records[0].grand_total == 660

    def test_uploaded_garbage(self):
        result = ingest_uploaded_file(NamedBytesIO(b"\x00\x01garbage", "stock.xlsx"))
        assert not result.valid
        assert result.error == "unreadable"

    def test_nothing_uploaded(self):
        result = ingest_uploaded_file(None)
        assert not result.valid


class TestIngestRows:
    """Decoded rows straight into the engine."""

    def test_rows(self, report_rows):
        result = ingest_rows(report_rows, "stock 2026-01-31.xlsx")
        assert len(result.records) == 3
        assert result.data_start_row == 4
        assert result.report_date == "2026-01-31"


class TestReportDate:
    """Report period from the file name."""

    @pytest.mark.parametrize("file_name,expected", [
        ("Stock Jan-2026.xlsx", "Jan 2026"),
        ("depot stock sep 2025.xlsx", "sep 2025"),
        ("stock_15.03.2026.xlsx", "15.03.2026"),
        ("stock 2026-01-31.xlsx", "2026-01-31"),
        ("stock.xlsx", "Not detected"),
    ])
    def test_detect_report_date(self, file_name, expected):
        assert detect_report_date(file_name) == expected


class TestIngestionSummary:
    """Summary dictionaries for display."""

    def test_success(self, report_rows):
        summary = get_ingestion_summary(ingest_rows(report_rows, "report.xlsx"))

        assert summary["success"] is True
        assert summary["records"] == 3
        assert summary["strategy"] == "primary"
        assert summary["source_name"] == "report.xlsx"

    def test_failure(self, tmp_path):
        summary = get_ingestion_summary(ingest_excel(tmp_path / "missing.xlsx"))

        assert summary["success"] is False
        assert summary["details"] is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
