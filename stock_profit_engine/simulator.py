from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, Inexact, InvalidOperation, localcontext
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

from .config import INVALID_BAR_POLICIES
from .errors import InvalidParameters, PriceDataError

CENT = Decimal("0.01")
# Working precision for the simulation; anything that would round raises instead
DECIMAL_PREC = 60

@dataclass(frozen=True)
class PriceBar:
    date: str
    open: Optional[Decimal]
    close: Optional[Decimal]

@dataclass(frozen=True)
class DailyResult:
    date: str
    open_price: Decimal
    close_price: Decimal
    shares: int
    investment: Decimal
    end_value: Decimal
    daily_profit: Decimal
    available_funds: Decimal
    total_value: Decimal
    cumulative_profit: Decimal

    def to_record(self) -> Dict[str, Any]:
        """Display form: money fields as fixed 2-digit strings, keys in export order."""
        return {
            "date": self.date,
            "openPrice": fmt_money(self.open_price),
            "closePrice": fmt_money(self.close_price),
            "shares": int(self.shares),
            "investment": fmt_money(self.investment),
            "endValue": fmt_money(self.end_value),
            "dailyProfit": fmt_money(self.daily_profit),
            "availableFunds": fmt_money(self.available_funds),
            "totalValue": fmt_money(self.total_value),
            "cumulativeProfit": fmt_money(self.cumulative_profit),
        }

class _Position(NamedTuple):
    available_funds: Decimal
    shares: int
    cumulative_profit: Decimal

def fmt_money(value: Decimal) -> str:
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PREC
        return str(Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP))

def _bar_problem(bar: PriceBar) -> Optional[str]:
    if bar.open is None:
        return "missing open price"
    if bar.close is None:
        return "missing close price"
    if bar.open <= 0:
        return f"non-positive open price {bar.open}"
    if bar.close <= 0:
        return f"non-positive close price {bar.close}"
    return None

def _step(pos: _Position, bar: PriceBar) -> Tuple[_Position, DailyResult]:
    """One trading day: sell everything at open, rebuy whole shares at open, mark to close."""
    open_px = bar.open
    close_px = bar.close

    funds = pos.available_funds + pos.shares * open_px
    shares = int(funds // open_px)
    investment = shares * open_px
    funds -= investment

    end_value = shares * close_px
    daily_profit = end_value - investment
    cumulative = pos.cumulative_profit + daily_profit

    result = DailyResult(
        date=bar.date,
        open_price=open_px,
        close_price=close_px,
        shares=shares,
        investment=investment,
        end_value=end_value,
        daily_profit=daily_profit,
        available_funds=funds,
        total_value=end_value + funds,
        cumulative_profit=cumulative,
    )
    return _Position(funds, shares, cumulative), result

def bars_in_range(time_series: Mapping[str, PriceBar], start_date: str, end_date: str) -> List[PriceBar]:
    """Bars with start_date <= date <= end_date, ascending.

    Dates are compared as strings, so keys must already be fixed-width YYYY-MM-DD.
    """
    keys = sorted(d for d in time_series if start_date <= d <= end_date)
    return [time_series[d] for d in keys]

def simulate(
    time_series: Mapping[str, PriceBar],
    initial_amount: Decimal,
    start_date: str,
    end_date: str,
    *,
    invalid_bar_policy: str = "error",
) -> List[DailyResult]:
    """Replay the daily sell-at-open / buy-at-open churn over ``time_series``.

    Day 1 starts with ``initial_amount`` in cash and no shares. Every later day
    first liquidates the previous day's shares at the current open, then buys
    ``floor(cash / open)`` shares again; the remainder stays in cash.

    invalid_bar_policy:
      - "error" (default): a bar in range with a missing or non-positive price
        raises PriceDataError.
      - "skip": such bars are logged and left out; the position carries over
        untouched to the next valid day.

    Arithmetic is exact: an amount so large that a step would need rounding
    raises InvalidParameters rather than drifting.

    Returns an empty list when no bars fall in range. The input mapping is not
    modified and no state survives between calls.
    """
    initial = Decimal(initial_amount)
    if not initial.is_finite() or initial <= 0:
        raise InvalidParameters(f"initialAmount must be positive, got {initial_amount}")
    if start_date > end_date:
        raise InvalidParameters(f"startDate {start_date} is after endDate {end_date}")
    if invalid_bar_policy not in INVALID_BAR_POLICIES:
        raise InvalidParameters(
            f"invalid_bar_policy must be one of {', '.join(INVALID_BAR_POLICIES)}, got {invalid_bar_policy!r}"
        )

    pos = _Position(available_funds=initial, shares=0, cumulative_profit=Decimal(0))
    out: List[DailyResult] = []
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PREC
        ctx.traps[Inexact] = True
        for bar in bars_in_range(time_series, start_date, end_date):
            problem = _bar_problem(bar)
            if problem is not None:
                if invalid_bar_policy == "skip":
                    logging.warning("skipping bar %s: %s", bar.date, problem)
                    continue
                raise PriceDataError(f"Invalid price data on {bar.date}: {problem}")
            try:
                pos, result = _step(pos, bar)
            except (Inexact, InvalidOperation) as exc:
                raise InvalidParameters(
                    f"initialAmount {initial_amount} cannot be simulated exactly at open {bar.open} on {bar.date}",
                    details=type(exc).__name__,
                ) from None
            out.append(result)
    return out
