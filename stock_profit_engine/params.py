from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

from .errors import InvalidParameters

_TICKER_RE = re.compile(r"^[A-Z0-9.\-^=:]{1,20}$")
MAX_AMOUNT = Decimal("1000000000000000")  # 1e15

@dataclass(frozen=True)
class SimulationParams:
    ticker: str
    start_date: str  # YYYY-MM-DD
    end_date: str  # YYYY-MM-DD, inclusive
    initial_amount: Decimal

def _blank(value: Any) -> bool:
    return value is None or str(value).strip() == ""

def parse_iso_date(value: Any, name: str) -> str:
    """Return the canonical YYYY-MM-DD form of ``value`` or raise InvalidParameters."""
    text = str(value).strip()
    try:
        parsed = date.fromisoformat(text)
    except ValueError:
        raise InvalidParameters(f"{name} must be an ISO date (YYYY-MM-DD), got {text!r}") from None
    # fromisoformat accepts e.g. 20240102 on newer interpreters; keep the fixed-width form
    return parsed.isoformat()

def parse_amount(value: Any, name: str = "initialAmount") -> Decimal:
    text = str(value).strip()
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise InvalidParameters(f"{name} must be a number, got {text!r}") from None
    if not amount.is_finite() or amount <= 0:
        raise InvalidParameters(f"{name} must be a positive number, got {text!r}")
    if amount > MAX_AMOUNT:
        raise InvalidParameters(f"{name} must not exceed {MAX_AMOUNT:,}, got {text!r}")
    return amount

def parse_params(
    ticker: Optional[str],
    start_date: Optional[str],
    end_date: Optional[str],
    initial_amount: Optional[str],
) -> SimulationParams:
    """Validate raw request values (query-string or CLI strings)."""
    raw = {
        "ticker": ticker,
        "startDate": start_date,
        "endDate": end_date,
        "initialAmount": initial_amount,
    }
    missing: List[str] = [k for k, v in raw.items() if _blank(v)]
    if missing:
        raise InvalidParameters("Missing required parameters", details=", ".join(missing))

    start = parse_iso_date(start_date, "startDate")
    end = parse_iso_date(end_date, "endDate")
    if start > end:
        raise InvalidParameters(f"startDate {start} is after endDate {end}")

    symbol = str(ticker).strip().upper()
    if not _TICKER_RE.match(symbol):
        raise InvalidParameters(f"ticker {symbol!r} is not a valid symbol")

    return SimulationParams(
        ticker=symbol,
        start_date=start,
        end_date=end,
        initial_amount=parse_amount(initial_amount),
    )
