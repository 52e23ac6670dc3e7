"""Oracle heartbeat model.

A lagged oracle holds its last reported price until ``lag_seconds`` have
elapsed since the last update, then refreshes to the live spot price.
Callers thread the returned state into the next call.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class OracleLagConfig:
    """Staleness window of the price feed."""

    lag_seconds: int


@dataclass(frozen=True)
class OracleState:
    """Last price reported by the feed and when it was reported."""

    price: Decimal
    last_update: int  # seconds


def resolve_oracle_price(
    spot_price: Decimal,
    timestamp: int,
    state: OracleState,
    config: OracleLagConfig | None = None,
) -> tuple[Decimal, OracleState]:
    """Return the price the oracle reports at ``timestamp`` and the next state.

    Without a config the live spot price is always returned.
    """
    if config is None:
        return spot_price, OracleState(price=spot_price, last_update=timestamp)

    if timestamp - state.last_update < config.lag_seconds:
        return state.price, state

    return spot_price, OracleState(price=spot_price, last_update=timestamp)
