"""Daily buy-at-open / sell-at-open profit simulator.

Core idea (daily bars, one ticker):
- Each morning sell whatever is held at the day's open
- Buy as many whole shares as the cash allows at that same open
- Mark the position to the day's close
- Leftover cash is carried forward, fractional shares never bought

Bars come from an external daily time-series API; results are served as
JSON by the relay (server.py) or exported as CSV.
"""

__all__ = [
    "config",
    "errors",
    "params",
    "provider",
    "simulator",
    "export",
    "cli",
]
