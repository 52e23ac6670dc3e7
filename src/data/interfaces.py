"""Market snapshot dataclasses and the abstract snapshot resolver."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class TokenSpec:
    """A token leg of the market."""

    symbol: str
    decimals: int
    address: str | None = None  # Disambiguation only; not used in the math

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"symbol": self.symbol, "decimals": self.decimals}
        if self.address is not None:
            payload["address"] = self.address
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "TokenSpec":
        return cls(
            symbol=str(payload["symbol"]),
            decimals=int(payload["decimals"]),
            address=payload.get("address"),
        )


@dataclass(frozen=True)
class MarketParams:
    """Lending market parameters echoed back as ``protocol_params_used``."""

    lltv: float  # Liquidation loan-to-value, 0 < lltv < 1
    liquidation_incentive: float
    close_factor: float
    irm: str
    oracle_type: str
    version: str | None = None
    oracle_address: str | None = None
    irm_address: str | None = None
    market_id: str | None = None
    data_source: str = "fixture"
    fetched_at: int | None = None  # Unix milliseconds

    def to_dict(self) -> dict[str, Any]:
        return {key: value for key, value in asdict(self).items() if value is not None}


@dataclass(frozen=True)
class MarketRates:
    """Annualised supply/borrow rates as decimal fractions."""

    supply_apr: float
    borrow_apr: float
    source: str = "fixture"
    utilization: float | None = None


@dataclass(frozen=True)
class MarketSnapshot:
    """Resolved market state consumed read-only by the engine."""

    market: MarketParams
    rates: MarketRates
    default_prices: dict[str, float] = field(default_factory=dict)
    collateral: TokenSpec | None = None
    debt: TokenSpec | None = None
    source: str = "fixture"
    fetched_at: int | None = None


class MarketSnapshotProvider(ABC):
    """Abstract interface for resolving a lending market."""

    @abstractmethod
    def get_snapshot(
        self,
        protocol: str,
        chain: str,
        collateral: TokenSpec,
        debt: TokenSpec,
    ) -> MarketSnapshot:
        """Resolve the market for a collateral/debt pair.

        Raises ``MarketNotFoundError`` when the market cannot be resolved.
        """
