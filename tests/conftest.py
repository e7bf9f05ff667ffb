"""Shared test fixtures."""

from decimal import Decimal

import pytest

from stock_profit_engine.simulator import PriceBar


def make_series(bars):
    """{date: (open, close)} -> {date: PriceBar}; None stays None."""
    out = {}
    for date, (o, c) in bars.items():
        out[date] = PriceBar(
            date=date,
            open=None if o is None else Decimal(str(o)),
            close=None if c is None else Decimal(str(c)),
        )
    return out


def make_payload(bars, symbol="TEST"):
    """TIME_SERIES_DAILY-shaped body for {date: (open, close)}."""
    series = {}
    for date, (o, c) in bars.items():
        series[date] = {
            "1. open": f"{o:.4f}",
            "2. high": f"{max(o, c):.4f}",
            "3. low": f"{min(o, c):.4f}",
            "4. close": f"{c:.4f}",
            "5. volume": "1000",
        }
    return {
        "Meta Data": {"1. Information": "Daily Prices", "2. Symbol": symbol},
        "Time Series (Daily)": series,
    }


@pytest.fixture
def two_day_series():
    return make_series({"2024-01-02": (10, 12), "2024-01-03": (12, 11)})


@pytest.fixture
def month_series():
    """Unsorted keys, some outside January, a gap on 2024-01-05."""
    return make_series(
        {
            "2024-01-09": (101.25, 99.80),
            "2023-12-29": (95.00, 96.10),
            "2024-01-02": (100.00, 101.50),
            "2024-01-04": (102.10, 101.90),
            "2024-01-03": (101.40, 102.30),
            "2024-01-08": (99.95, 101.00),
            "2024-02-01": (110.00, 111.00),
        }
    )
