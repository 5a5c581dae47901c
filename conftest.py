"""Shared fixtures for the depot stock tests."""

import pytest

from depot.records import StockRecord


SCENARIO_ROW = [
    "Insecticides", "Prosper 10gm", "10gm", None,
    "120", "85", "200", "65", "110", "50", "30", "580"
]

REPORT_HEADER = [
    "Portfolio", "Product Name", "Pack Size", None,
    "Dhaka", "Jhenaidah", "Bogra", "Rangpur", "Chattagram",
    "Factory FG", "Dam FG", "Total"
]


@pytest.fixture
def scenario_row():
    return list(SCENARIO_ROW)


@pytest.fixture
def report_rows():
    """A small report laid out like the depot stock sheet."""
    return [
        ["Surovi Agro Industries Ltd."],
        ["National Stock Position"],
        [],
        list(REPORT_HEADER),
        list(SCENARIO_ROW),
        ["Insecticides", "Moto 20ml", "20ml", None, 45, 30, 60, 25, 40, 20, 10, None],
        ["Fungicides", "Bactrol 20 WP", "250gm", None, "=300-20", 150, 350, 120, 200, 100, 50, "1250"],
        ["Sub Total", None, None, None, 465, 265, 610, 210, 350, 170, 90, 2160],
    ]


@pytest.fixture
def sample_records():
    return [
        StockRecord(name="Prosper 10gm", pack_size="10gm", portfolio="Insecticides",
                    dhaka=120, jhenaidah=85, bogra=200, rangpur=65, chattagram=110,
                    factory=50, dam=30, source_row_index=1),
        StockRecord(name="Ratol 500gm", pack_size="500gm", portfolio="Rodenticides",
                    dhaka=15, jhenaidah=8, bogra=22, rangpur=5, chattagram=10,
                    source_row_index=2),
        StockRecord(name="bactrol 20 WP", pack_size="250gm", portfolio="Fungicides",
                    dhaka=280, jhenaidah=150, bogra=350, rangpur=120, chattagram=200,
                    factory=100, dam=50, source_row_index=3),
        StockRecord(name="Astrum 60 WDG", pack_size="100gm", portfolio="Insecticides",
                    dhaka=0, jhenaidah=195, bogra=380, rangpur=0, chattagram=225,
                    factory=120, dam=60, source_row_index=4),
    ]
