"""Factory for creating the swap provider of a simulation run."""

from __future__ import annotations

import logging
from decimal import Decimal

from src.errors import InvalidInputError
from src.position.swap_providers import (
    ConstantProductSwapProvider,
    ExternalQuoteSwapProvider,
    QuoteFetcher,
    SwapProvider,
)
from src.protocol.decimal_math import to_decimal
from src.simulation.params import SwapModelSpec

logger = logging.getLogger(__name__)


def create_swap_provider(
    collateral_price_usd: Decimal,
    debt_price_usd: Decimal,
    collateral_decimals: int,
    debt_decimals: int,
    swap_model: SwapModelSpec | None = None,
    quote_fetcher: QuoteFetcher | None = None,
) -> SwapProvider:
    """Create a fresh swap provider, selecting simulated pool or external quotes.

    Parameters
    ----------
    collateral_price_usd, debt_price_usd : Decimal
        USD unit prices of the two legs.
    collateral_decimals, debt_decimals : int
        Token precisions, used by the external-quote variant.
    swap_model : SwapModelSpec | None
        When given, a ``ConstantProductSwapProvider`` seeded from its pool.
    quote_fetcher : QuoteFetcher | None
        Aggregator quote coroutine, used when no ``swap_model`` is given.

    Returns
    -------
    SwapProvider
        A provider owned by one run; never share it between runs.
    """
    if swap_model is not None:
        logger.debug(
            "Using constant-product pool (fee=%s bps, base=%s, quote=%s)",
            swap_model.fee_bps,
            swap_model.base_reserve,
            swap_model.quote_reserve,
        )
        return ConstantProductSwapProvider(
            fee_bps=swap_model.fee_bps,
            reserve_collateral=to_decimal(swap_model.base_reserve, "base_reserve"),
            reserve_debt=to_decimal(swap_model.quote_reserve, "quote_reserve"),
            debt_price_usd=debt_price_usd,
        )

    if quote_fetcher is None:
        raise InvalidInputError("no swap_model given and no external quote source configured")

    logger.debug("Using external quote provider")
    return ExternalQuoteSwapProvider(
        get_quote=quote_fetcher,
        collateral_price_usd=collateral_price_usd,
        debt_price_usd=debt_price_usd,
        collateral_decimals=collateral_decimals,
        debt_decimals=debt_decimals,
    )
