from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, Response, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from stock_profit_engine.config import EngineConfig
from stock_profit_engine.errors import ProviderFailure, SimulationError
from stock_profit_engine.export import to_csv
from stock_profit_engine.params import SimulationParams, parse_params
from stock_profit_engine.provider import AlphaVantageClient
from stock_profit_engine.simulator import DailyResult, simulate

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

CONFIG = EngineConfig()
_provider: Optional[AlphaVantageClient] = None
_provider_lock = threading.Lock()


def _get_provider() -> AlphaVantageClient:
    global _provider
    with _provider_lock:
        if _provider is None:
            _provider = AlphaVantageClient(CONFIG)
        return _provider


def _request_params() -> SimulationParams:
    raw = {
        "ticker": request.args.get("ticker"),
        "startDate": request.args.get("startDate"),
        "endDate": request.args.get("endDate"),
        "initialAmount": request.args.get("initialAmount"),
    }
    logging.info("Received parameters: %s", raw)
    return parse_params(raw["ticker"], raw["startDate"], raw["endDate"], raw["initialAmount"])


def _run_simulation() -> Tuple[SimulationParams, List[DailyResult]]:
    params = _request_params()
    series = _get_provider().get_daily_series(params.ticker)
    results = simulate(
        series,
        params.initial_amount,
        params.start_date,
        params.end_date,
        invalid_bar_policy=CONFIG.invalid_bar_policy,
    )
    logging.info("simulated %s %s..%s days=%d", params.ticker, params.start_date, params.end_date, len(results))
    return params, results


app = Flask(__name__)
app.json.sort_keys = False
CORS(app, resources={r"/*": {"origins": "*"}})


@app.errorhandler(SimulationError)
def handle_simulation_error(exc: SimulationError):
    if exc.http_status >= 500:
        logging.error("Error fetching stock data: %s (%s)", exc.message, exc.details)
    return jsonify(exc.to_dict()), exc.http_status


@app.errorhandler(404)
def not_found(_exc: Any):
    return "404 Not Found", 404


@app.errorhandler(Exception)
def handle_unexpected_error(exc: Exception):
    if isinstance(exc, HTTPException):
        return exc
    logging.exception("Error fetching stock data: %s", exc)
    return jsonify(ProviderFailure("Failed to fetch stock data", details=str(exc)).to_dict()), 500


@app.route("/")
def index():
    return "Stock Profit API is running"


@app.get("/api/stock-data")
def stock_data():
    _params, results = _run_simulation()
    payload: List[Dict[str, Any]] = [r.to_record() for r in results]
    return jsonify(payload)


@app.get("/api/stock-data.csv")
def stock_data_csv():
    params, results = _run_simulation()
    return Response(
        to_csv(results),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={params.ticker}_stock_analysis.csv"},
    )


if __name__ == "__main__":
    app.run(host=CONFIG.host, port=CONFIG.port)
