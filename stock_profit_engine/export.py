from __future__ import annotations

from pathlib import Path
from typing import Iterable, Union

import pandas as pd

from .simulator import DailyResult

CSV_COLUMNS = [
    "date",
    "openPrice",
    "closePrice",
    "shares",
    "investment",
    "endValue",
    "dailyProfit",
    "availableFunds",
    "totalValue",
    "cumulativeProfit",
]

def results_to_frame(results: Iterable[DailyResult]) -> pd.DataFrame:
    """One row per day, display-formatted values, columns in CSV_COLUMNS order."""
    rows = [r.to_record() for r in results]
    return pd.DataFrame.from_records(rows, columns=CSV_COLUMNS)

def to_csv(results: Iterable[DailyResult]) -> str:
    return results_to_frame(results).to_csv(index=False, lineterminator="\n")

def write_csv(results: Iterable[DailyResult], path: Union[str, Path]) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(to_csv(results), encoding="utf-8")
    return path
