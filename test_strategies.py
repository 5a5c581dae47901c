"""
Tests for the Primary and Fallback Extraction Strategies

Run with: python3 -m pytest test_strategies.py -v
"""

import pytest

from depot.strategies import (
    fallback_strategy,
    looks_like_product_name,
    parse_stock_rows,
    primary_strategy,
)


class TestPrimaryStrategy:
    """Header-anchored extraction."""

    def test_report_rows(self, report_rows):
        result = primary_strategy(report_rows)

        assert result.strategy == "primary"
        assert result.data_start_row == 4
        assert [record.name for record in result.records] == ["Prosper 10gm", "Moto 20ml", "Bactrol 20 WP"]

    def test_expression_and_explicit_total(self, report_rows):
        bactrol = primary_strategy(report_rows).records[2]
        assert bactrol.dhaka == 280
        assert bactrol.location_total == 1100
        assert bactrol.grand_total == 1250

    def test_duplicates_are_kept(self, report_rows, scenario_row):
        rows = report_rows + [list(scenario_row)]
        names = [record.name for record in primary_strategy(rows).records]
        assert names.count("Prosper 10gm") == 2

    def test_default_start_row_without_header(self, scenario_row):
        rows = [["title"]] * 6 + [list(scenario_row)]
        rows[2] = list(scenario_row)  # above the default start row, ignored
        result = primary_strategy(rows)

        assert result.data_start_row == 6
        assert len(result.records) == 1
        assert result.records[0].source_row_index == 6

    def test_short_rows_skipped(self, report_rows):
        report_rows.append(["Insecticides", "Short Row", "1kg", None, 5, 5, 5, 5, 5])
        names = [record.name for record in primary_strategy(report_rows).records]
        assert "Short Row" not in names


class TestProductNameHeuristic:
    """Cell-level checks used by the fallback scan."""

    @pytest.mark.parametrize("cell", ["Prosper 10gm", "abc", "x" * 49])
    def test_accepted(self, cell):
        assert looks_like_product_name(cell)

    @pytest.mark.parametrize("cell", [
        "ab", "x" * 50, "12345", "=100+20", "1.5-2", "Depot Stock", "Grand Total",
        "Surovi Agro", "National Stock 2026", 42, None,
    ])
    def test_rejected(self, cell):
        assert not looks_like_product_name(cell)


class TestFallbackStrategy:
    """Cell-scanning extraction."""

    def test_collects_quantities(self):
        rows = [["Stock list"], ["Prosper 10gm", 120, 85, "=10-10", None, 5]]
        result = fallback_strategy(rows)

        assert result.strategy == "fallback"
        assert len(result.records) == 1
        record = result.records[0]
        assert record.name == "Prosper 10gm"
        assert record.location_quantities == {
            "dhaka": 120, "jhenaidah": 85, "bogra": 0, "rangpur": 5, "chattagram": 0
        }
        assert record.factory == 0
        assert record.dam == 0
        assert record.location_total == 210
        assert record.grand_total == 210
        assert record.source_row_index == 1

    def test_more_than_five_quantities(self):
        rows = [["Widget X", 1, 2, 3, 4, 5, 6, 7]]
        record = fallback_strategy(rows).records[0]
        assert record.location_total == 15
        assert record.grand_total == 28

    def test_lookahead_limited_to_nine_cells(self):
        rows = [["Widget X"] + [1] * 12]
        record = fallback_strategy(rows).records[0]
        assert record.grand_total == 9

    def test_needs_two_quantities(self):
        rows = [["Lonely Item", 10, None, None, None]]
        assert fallback_strategy(rows).records == []

    def test_small_fractions_count_as_quantities(self):
        rows = [["Widget X", 0.4, 0.3, None, None]]
        records = fallback_strategy(rows).records

        assert len(records) == 1
        assert records[0].dhaka == 0
        assert records[0].jhenaidah == 0
        assert records[0].grand_total == 0

    def test_later_cell_in_row(self):
        rows = [["ab", "Fungicide X", 5, 7, None]]
        record = fallback_strategy(rows).records[0]
        assert record.name == "Fungicide X"
        assert record.dhaka == 5
        assert record.jhenaidah == 7

    def test_one_record_per_row(self):
        rows = [["Alpha Item", 5, 6, "Beta Item", 7, 8]]
        records = fallback_strategy(rows).records
        assert [record.name for record in records] == ["Alpha Item"]

    def test_short_rows_skipped(self):
        rows = [["Prosper", 1, 2, 3]]
        assert fallback_strategy(rows).records == []


class TestParseStockRows:
    """Strategy chaining."""

    def test_primary_result_used(self, report_rows):
        result = parse_stock_rows(report_rows)
        assert result.strategy == "primary"
        assert len(result) == 3

    def test_fallback_when_primary_finds_nothing(self):
        rows = [["Stock list"], ["Prosper 10gm", 120, 85, None, None]]
        result = parse_stock_rows(rows)

        assert result.strategy == "fallback"
        assert len(result) >= 1

    def test_nothing_found(self):
        rows = [["Just a title"], ["Some notes here", "more notes", "", "", ""]]
        result = parse_stock_rows(rows)

        assert not result
        assert result.records == []
        assert result.strategy is None

    def test_empty_sheet(self):
        result = parse_stock_rows([])
        assert result.records == []

    def test_custom_strategy_order(self, report_rows):
        result = parse_stock_rows(report_rows, strategies=(fallback_strategy,))
        assert result.strategy == "fallback"

    def test_grand_total_never_below_location_total(self, report_rows):
        rows = report_rows + [["Widget X", 1, 2, 3, 4, 5, 6, 7]]
        for strategy in (primary_strategy, fallback_strategy):
            for record in strategy(rows).records:
                assert record.grand_total >= record.location_total


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
