"""Static snapshot provider with hardcoded Morpho Blue market parameters."""

from __future__ import annotations

import logging
import time
from dataclasses import replace

from src.data.constants import (
    CHAIN_BASE,
    PROTOCOL_MORPHO_BLUE,
    USDC,
    USDC_BASE_ADDRESS,
    USDC_DECIMALS,
    WETH,
    WETH_BASE_ADDRESS,
    WETH_DECIMALS,
)
from src.data.interfaces import (
    MarketParams,
    MarketRates,
    MarketSnapshot,
    MarketSnapshotProvider,
    TokenSpec,
)
from src.errors import MarketNotFoundError

logger = logging.getLogger(__name__)

# --- WETH/USDC market on Base (representative snapshot) ---

_WETH_USDC_MARKET = MarketParams(
    lltv=0.86,
    liquidation_incentive=0.05,
    close_factor=0.5,
    irm="adaptive-curve-irm-v1",
    oracle_type="chainlink",
    version="2024-11-01",
    oracle_address="0x0A8C46EcFa05B08F279498F98B0613AcD77FCF94",
    irm_address="0x46415998764C29aB2a25CbeA6254146D50D22687",
    data_source="fixture",
)

_WETH_USDC_RATES = MarketRates(
    supply_apr=0.0325,
    borrow_apr=0.059,
    source="fixture",
    utilization=0.25,
)

# USD unit prices
_DEFAULT_PRICES: dict[str, float] = {
    "WETHUSD": 3200.0,
    "USDCUSD": 1.0,
}

_TOKENS: dict[str, TokenSpec] = {
    WETH: TokenSpec(symbol=WETH, decimals=WETH_DECIMALS, address=WETH_BASE_ADDRESS),
    USDC: TokenSpec(symbol=USDC, decimals=USDC_DECIMALS, address=USDC_BASE_ADDRESS),
}


def _now_ms() -> int:
    return int(time.time() * 1000)


class StaticSnapshotProvider(MarketSnapshotProvider):
    """Snapshot provider backed by a fixed WETH/USDC fixture."""

    def get_snapshot(
        self,
        protocol: str,
        chain: str,
        collateral: TokenSpec,
        debt: TokenSpec,
    ) -> MarketSnapshot:
        if protocol.strip().lower() != PROTOCOL_MORPHO_BLUE or chain.strip().lower() != CHAIN_BASE:
            raise MarketNotFoundError(
                "Unsupported protocol or chain; only Morpho Blue on Base is supported"
            )

        collateral_symbol = collateral.symbol.strip().upper()
        debt_symbol = debt.symbol.strip().upper()
        if collateral_symbol != WETH or debt_symbol != USDC:
            raise MarketNotFoundError(
                f"Unable to resolve market for {collateral.symbol}/{debt.symbol} on Base"
            )

        fixture_collateral = _TOKENS[WETH]
        fixture_debt = _TOKENS[USDC]
        logger.debug("Resolved %s/%s from static fixture", collateral_symbol, debt_symbol)

        return MarketSnapshot(
            market=_WETH_USDC_MARKET,
            rates=_WETH_USDC_RATES,
            default_prices=dict(_DEFAULT_PRICES),
            collateral=replace(
                fixture_collateral,
                address=collateral.address or fixture_collateral.address,
            ),
            debt=replace(fixture_debt, address=debt.address or fixture_debt.address),
            source="fixture",
            fetched_at=_now_ms(),
        )
