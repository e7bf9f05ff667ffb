from __future__ import annotations

from typing import Any, Dict, Optional

class SimulationError(Exception):
    """Base for every error reported back to the caller as a structured result."""

    kind = "simulation_error"
    http_status = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"error": self.kind, "message": self.message}
        if self.details:
            out["details"] = self.details
        return out

class InvalidParameters(SimulationError):
    kind = "invalid_parameters"
    http_status = 400

class NoDataFound(SimulationError):
    kind = "no_data_found"
    http_status = 404

class ProviderFailure(SimulationError):
    kind = "provider_failure"
    http_status = 500

class PriceDataError(SimulationError):
    """A bar in range has a missing or non-positive open/close price."""

    kind = "price_data_error"
    http_status = 422
