"""Canonical provenance payload and its content hash.

The hash covers everything a result depends on: engine version, raw
input, market parameters, merged prices, external quote provenance and
the run timestamp.  It is for audit and reproducibility, not security.
"""

from __future__ import annotations

import hashlib
import json
from decimal import Decimal
from typing import Any

from src.data.interfaces import MarketParams
from src.simulation.params import SimulationInput


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def canonical_json(payload: Any) -> str:
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), default=_json_default)


def hash_provenance(payload: Any) -> str:
    """SHA-256 hex digest of the canonical JSON form."""
    return hashlib.sha256(canonical_json(payload).encode("utf-8")).hexdigest()


def build_provenance(
    version: str,
    sim_input: SimulationInput,
    market: MarketParams,
    prices: dict[str, float],
    external_quotes: list[Any],
    timestamp: int,
) -> dict[str, Any]:
    return {
        "version": version,
        "input": sim_input.to_dict(),
        "protocol_params_used": market.to_dict(),
        "prices": dict(prices),
        "external_quotes": list(external_quotes),
        "timestamp": timestamp,
    }
