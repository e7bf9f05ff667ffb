from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping

from .config import EngineConfig
from .errors import InvalidParameters, SimulationError
from .export import write_csv
from .params import SimulationParams, parse_params
from .provider import AlphaVantageClient, series_from_payload
from .simulator import PriceBar, simulate

def _p(obj: Any) -> None:
    print(json.dumps(obj, ensure_ascii=False, indent=2, default=str))

def _run(series: Mapping[str, PriceBar], params: SimulationParams, cfg: EngineConfig, csv_path: str | None) -> Dict[str, Any]:
    results = simulate(
        series,
        params.initial_amount,
        params.start_date,
        params.end_date,
        invalid_bar_policy=cfg.invalid_bar_policy,
    )
    out: Dict[str, Any] = {
        "ok": True,
        "ticker": params.ticker,
        "start_date": params.start_date,
        "end_date": params.end_date,
        "initial_amount": str(params.initial_amount),
        "n_days": len(results),
    }
    if csv_path:
        out["csv"] = str(write_csv(results, csv_path))
    else:
        out["rows"] = [r.to_record() for r in results]
    return out

def cmd_simulate(args: argparse.Namespace) -> Dict[str, Any]:
    cfg = EngineConfig(invalid_bar_policy=args.invalid_bars)
    params = parse_params(args.ticker, args.start, args.end, args.amount)
    series = AlphaVantageClient(cfg).get_daily_series(params.ticker)
    return _run(series, params, cfg, args.csv)

def cmd_replay(args: argparse.Namespace) -> Dict[str, Any]:
    cfg = EngineConfig(invalid_bar_policy=args.invalid_bars)
    path = Path(args.file)
    if not path.exists():
        raise InvalidParameters(f"payload file not found: {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise InvalidParameters(f"payload file is not JSON: {path}", details=str(exc)) from None

    meta = payload.get("Meta Data") if isinstance(payload, dict) else None
    ticker = args.ticker or str((meta or {}).get("2. Symbol", "")) or path.stem
    params = parse_params(ticker, args.start, args.end, args.amount)
    series = series_from_payload(payload, ticker=params.ticker, cfg=cfg)
    return _run(series, params, cfg, args.csv)

def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--start", required=True, help="Start date YYYY-MM-DD (inclusive)")
    p.add_argument("--end", required=True, help="End date YYYY-MM-DD (inclusive)")
    p.add_argument("--amount", required=True, help="Initial cash amount")
    p.add_argument("--csv", default=None, help="Write rows to this CSV file instead of printing them")
    p.add_argument(
        "--invalid-bars",
        choices=["error", "skip"],
        default=EngineConfig().invalid_bar_policy,
        help="Bars with missing/non-positive prices: fail or skip (default: config)",
    )

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="stock_profit_engine", description="Daily buy-at-open / sell-at-open profit simulator.")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_sim = sub.add_parser("simulate", help="Fetch daily bars for a ticker and simulate")
    p_sim.add_argument("--ticker", required=True)
    _add_common(p_sim)
    p_sim.set_defaults(func=cmd_simulate)

    p_rep = sub.add_parser("replay", help="Simulate on a saved TIME_SERIES_DAILY JSON response")
    p_rep.add_argument("--file", required=True, help="Saved provider response (JSON)")
    p_rep.add_argument("--ticker", default=None, help="Ticker label (default: from payload meta data)")
    _add_common(p_rep)
    p_rep.set_defaults(func=cmd_replay)

    return p

def main(argv: List[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    p = build_parser()
    args = p.parse_args(argv)
    try:
        out = args.func(args)
    except SimulationError as exc:
        _p({"ok": False, **exc.to_dict()})
        return 1
    _p(out)
    return 0

if __name__ == "__main__":
    sys.exit(main())
