from __future__ import annotations

import os
from dataclasses import dataclass

INVALID_BAR_POLICIES = ("error", "skip")

def _env_float(key: str, default: float) -> float:
    v = os.getenv(key)
    if v is None or v == "":
        return default
    try:
        return float(v)
    except ValueError:
        return default

def _env_int(key: str, default: int) -> int:
    v = os.getenv(key)
    if v is None or v == "":
        return default
    try:
        return int(v)
    except ValueError:
        return default

def _env_str(key: str, default: str) -> str:
    v = os.getenv(key)
    return v if v not in (None, "") else default

@dataclass(frozen=True)
class EngineConfig:
    # Provider (Alpha Vantage TIME_SERIES_DAILY)
    api_key: str = _env_str("SPE_API_KEY", _env_str("ALPHAVANTAGE_API_KEY", "demo"))
    base_url: str = _env_str("SPE_BASE_URL", "https://www.alphavantage.co/query")
    output_size: str = _env_str("SPE_OUTPUT_SIZE", "full")  # compact | full
    timeout_sec: float = _env_float("SPE_TIMEOUT_SEC", 10.0)

    # Provider payload field names, adapted at the boundary
    series_key: str = _env_str("SPE_SERIES_KEY", "Time Series (Daily)")
    open_field: str = _env_str("SPE_OPEN_FIELD", "1. open")
    close_field: str = _env_str("SPE_CLOSE_FIELD", "4. close")

    # What to do with a bar whose open/close is missing or <= 0:
    # - "error": fail the whole run with PriceDataError
    # - "skip": drop the bar and keep going
    invalid_bar_policy: str = _env_str("SPE_INVALID_BAR_POLICY", "error")  # error | skip

    # Relay
    host: str = _env_str("SPE_HOST", "0.0.0.0")
    port: int = _env_int("SPE_PORT", 3001)

    def __post_init__(self) -> None:
        # Operator setting, checked once at construction
        if self.invalid_bar_policy not in INVALID_BAR_POLICIES:
            raise ValueError(
                f"SPE_INVALID_BAR_POLICY must be one of {', '.join(INVALID_BAR_POLICIES)}, got {self.invalid_bar_policy!r}"
            )
