"""Swap providers converting borrowed debt into collateral.

The looping engine calls ``SwapProvider.quote`` exactly once per
iteration and awaits it before starting the next one.  Two variants:

1. ``ConstantProductSwapProvider``: deterministic x * y = k pool whose
   reserves are consumed across iterations of one run.
2. ``ExternalQuoteSwapProvider``: wraps an injected aggregator quote
   coroutine working in smallest token units.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import ROUND_FLOOR, Decimal
from typing import Any, Awaitable, Callable

from src.errors import InvalidPoolStateError, SwapQuoteError
from src.protocol.amm import get_constant_product_quote
from src.protocol.decimal_math import ZERO, non_negative, to_decimal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwapQuoteRequest:
    """One iteration's swap of borrowed debt into collateral."""

    amount_in_debt: Decimal  # human units of the debt token
    ideal_amount_out_collateral: Decimal  # zero-slippage output at oracle prices
    borrow_value_usd: Decimal


@dataclass(frozen=True)
class SwapQuoteResult:
    """Realised swap output for one iteration."""

    amount_out_collateral: Decimal
    fees_usd: Decimal = ZERO
    route: Any = None
    provenance: Any = None


class SwapProvider(ABC):
    """Abstract swap source injected into a single simulation run."""

    @abstractmethod
    async def quote(self, request: SwapQuoteRequest) -> SwapQuoteResult:
        """Quote (and, for simulated pools, execute) one swap."""


class ConstantProductSwapProvider(SwapProvider):
    """Simulated constant-product pool with reserves mutated per swap.

    Attributes:
        fee_bps: Swap fee in basis points.
        reserve_collateral: Collateral-side reserve (pool ``base_reserve``).
        reserve_debt: Debt-side reserve (pool ``quote_reserve``).
    """

    def __init__(
        self,
        fee_bps: float,
        reserve_collateral: Decimal,
        reserve_debt: Decimal,
        debt_price_usd: Decimal,
    ) -> None:
        if reserve_collateral <= 0 or reserve_debt <= 0:
            raise InvalidPoolStateError("pool reserves must be positive")
        self.fee_bps = fee_bps
        self.reserve_collateral = reserve_collateral
        self.reserve_debt = reserve_debt
        self._debt_price_usd = debt_price_usd

    async def quote(self, request: SwapQuoteRequest) -> SwapQuoteResult:
        result = get_constant_product_quote(
            amount_in=request.amount_in_debt,
            reserve_in=self.reserve_debt,
            reserve_out=self.reserve_collateral,
            fee_bps=self.fee_bps,
        )

        # Consume pool liquidity so the next iteration sees the moved price
        self.reserve_debt += request.amount_in_debt
        self.reserve_collateral -= result.amount_out

        return SwapQuoteResult(
            amount_out_collateral=result.amount_out,
            fees_usd=result.fee_paid * self._debt_price_usd,
            route={
                "model": "amm_xyk",
                "fee_bps": self.fee_bps,
                "price_impact_pct": result.price_impact_pct,
            },
        )


@dataclass(frozen=True)
class ExternalQuote:
    """Raw aggregator answer, amounts in smallest token units."""

    amount_out: int
    route: Any = None
    raw: Any = None


QuoteFetcher = Callable[[int], Awaitable[ExternalQuote]]


class ExternalQuoteSwapProvider(SwapProvider):
    """Swap provider backed by an external aggregator quote.

    Parameters
    ----------
    get_quote : QuoteFetcher
        Coroutine taking the input amount in smallest debt units and
        returning an ``ExternalQuote`` in smallest collateral units.
    collateral_price_usd, debt_price_usd : Decimal
        USD unit prices used to estimate implied fees.
    collateral_decimals, debt_decimals : int
        Token precisions used to scale between human and raw units.
    """

    def __init__(
        self,
        get_quote: QuoteFetcher,
        collateral_price_usd: Decimal,
        debt_price_usd: Decimal,
        collateral_decimals: int,
        debt_decimals: int,
    ) -> None:
        self._get_quote = get_quote
        self._collateral_price_usd = collateral_price_usd
        self._debt_price_usd = debt_price_usd
        self._collateral_scale = Decimal(10) ** collateral_decimals
        self._debt_scale = Decimal(10) ** debt_decimals

    async def quote(self, request: SwapQuoteRequest) -> SwapQuoteResult:
        amount_in_raw = int(
            (request.amount_in_debt * self._debt_scale).to_integral_value(rounding=ROUND_FLOOR)
        )

        try:
            external = await self._get_quote(amount_in_raw)
        except SwapQuoteError:
            raise
        except Exception as exc:
            logger.warning("External quote failed for amount_in=%d", amount_in_raw, exc_info=True)
            raise SwapQuoteError(f"external quote failed for amount_in={amount_in_raw}: {exc}") from exc

        try:
            amount_out_raw = to_decimal(external.amount_out, "amount_out")
        except (AttributeError, ValueError) as exc:
            raise SwapQuoteError(f"malformed external quote: {external!r}") from exc
        if amount_out_raw < 0:
            raise SwapQuoteError(f"external quote returned negative amount_out {amount_out_raw}")

        amount_out = amount_out_raw / self._collateral_scale
        amount_in_usd = request.amount_in_debt * self._debt_price_usd
        amount_out_usd = amount_out * self._collateral_price_usd

        return SwapQuoteResult(
            amount_out_collateral=amount_out,
            fees_usd=non_negative(amount_in_usd - amount_out_usd),
            route=external.route,
            provenance=external.raw,
        )
