from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

import requests

from .config import EngineConfig
from .errors import NoDataFound, ProviderFailure
from .simulator import PriceBar

# Keys the provider uses instead of a series when it refuses or can't answer
_PROVIDER_NOTICE_KEYS = ("Error Message", "Note", "Information")

def _to_decimal(val: Any) -> Optional[Decimal]:
    if val is None:
        return None
    text = str(val).strip()
    if not text:
        return None
    try:
        out = Decimal(text)
    except InvalidOperation:
        return None
    return out if out.is_finite() else None

def _provider_notice(payload: Dict[str, Any]) -> Optional[str]:
    for key in _PROVIDER_NOTICE_KEYS:
        if payload.get(key):
            return str(payload[key])
    return None

def series_from_payload(
    payload: Any,
    ticker: str = "",
    cfg: Optional[EngineConfig] = None,
) -> Dict[str, PriceBar]:
    """Adapt a TIME_SERIES_DAILY body into {date: PriceBar}.

    Raises NoDataFound when the body carries no daily series.
    """
    cfg = cfg or EngineConfig()
    if not isinstance(payload, dict):
        raise ProviderFailure("Unexpected provider response", details=f"type={type(payload).__name__}")

    raw = payload.get(cfg.series_key)
    if not raw or not isinstance(raw, dict):
        notice = _provider_notice(payload)
        if notice:
            logging.warning("provider returned no series for %s: %s", ticker or "?", notice)
        raise NoDataFound("No data found for the given ticker", details=notice)

    out: Dict[str, PriceBar] = {}
    for date, fields in raw.items():
        fields = fields if isinstance(fields, dict) else {}
        out[str(date)] = PriceBar(
            date=str(date),
            open=_to_decimal(fields.get(cfg.open_field)),
            close=_to_decimal(fields.get(cfg.close_field)),
        )
    return out

class AlphaVantageClient:
    """Daily time-series client (TIME_SERIES_DAILY).

    - one GET per call, no retry
    - timeout from config; failures surface as ProviderFailure
    """

    def __init__(self, cfg: Optional[EngineConfig] = None, session: Optional[requests.Session] = None):
        self.cfg = cfg or EngineConfig()
        self.session = session or requests.Session()

    def _params(self, ticker: str) -> Dict[str, str]:
        return {
            "function": "TIME_SERIES_DAILY",
            "symbol": ticker,
            "outputsize": self.cfg.output_size,
            "apikey": self.cfg.api_key,
        }

    def fetch_payload(self, ticker: str) -> Dict[str, Any]:
        try:
            resp = self.session.get(self.cfg.base_url, params=self._params(ticker), timeout=self.cfg.timeout_sec)
        except requests.RequestException as exc:
            logging.warning("provider request failed for %s: %s", ticker, exc)
            raise ProviderFailure("Failed to fetch stock data", details=str(exc)) from exc

        if not resp.ok:
            logging.warning("provider HTTP %s for %s: %s", resp.status_code, ticker, resp.text[:200])
            raise ProviderFailure("Failed to fetch stock data", details=f"HTTP {resp.status_code}")

        try:
            return resp.json()
        except ValueError as exc:
            raise ProviderFailure("Failed to fetch stock data", details=f"invalid JSON: {exc}") from exc

    def get_daily_series(self, ticker: str) -> Dict[str, PriceBar]:
        payload = self.fetch_payload(ticker)
        return series_from_payload(payload, ticker=ticker, cfg=self.cfg)
