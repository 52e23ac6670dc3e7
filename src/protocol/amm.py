"""Constant-product (x * y = k) swap model.

Pure quote function for selling ``amount_in`` of the input token into a
two-sided pool.  The fee is taken from the input before the invariant is
applied, as on Uniswap V2-style pools.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from src.data.constants import BPS_DENOMINATOR
from src.errors import InvalidPoolStateError
from src.protocol.decimal_math import ONE, ZERO, to_decimal


@dataclass(frozen=True)
class ConstantProductQuote:
    """Result of a constant-product swap quote.

    Attributes:
        amount_out: Output token received.
        fee_paid: Input token retained by the pool as fee.
        price_impact_pct: Spot price move caused by the trade, in percent.
    """

    amount_out: Decimal
    fee_paid: Decimal
    price_impact_pct: float


def get_constant_product_quote(
    amount_in: Decimal,
    reserve_in: Decimal,
    reserve_out: Decimal,
    fee_bps: float | Decimal,
) -> ConstantProductQuote:
    """Quote a swap against a constant-product pool.

    Args:
        amount_in: Input token amount (>= 0).
        reserve_in: Pool reserve of the input token (> 0).
        reserve_out: Pool reserve of the output token (> 0).
        fee_bps: Swap fee in basis points, in [0, 10000].

    Returns:
        ConstantProductQuote with output, fee and price impact.

    Raises:
        InvalidPoolStateError: on a negative trade, non-positive reserves or
            a fee outside [0, 10000] bps.
    """
    if amount_in < 0:
        raise InvalidPoolStateError("amount_in must be non-negative")
    if reserve_in <= 0 or reserve_out <= 0:
        raise InvalidPoolStateError("reserves must be positive")

    fee = to_decimal(fee_bps, "fee_bps")
    if fee < 0 or fee > BPS_DENOMINATOR:
        raise InvalidPoolStateError(f"fee_bps must be within [0, {BPS_DENOMINATOR}], got {fee_bps}")

    fee_fraction = fee / BPS_DENOMINATOR
    amount_in_after_fee = amount_in * (ONE - fee_fraction)

    if amount_in_after_fee == 0:
        return ConstantProductQuote(amount_out=ZERO, fee_paid=amount_in, price_impact_pct=0.0)

    new_reserve_in = reserve_in + amount_in_after_fee
    amount_out = amount_in_after_fee * reserve_out / new_reserve_in

    # Spot price = reserve_out / reserve_in
    spot_before = reserve_out / reserve_in
    spot_after = (reserve_out - amount_out) / new_reserve_in

    if spot_before == 0:
        price_impact_pct = 0.0
    else:
        price_impact_pct = float((spot_before - spot_after) / spot_before * 100)

    return ConstantProductQuote(
        amount_out=amount_out,
        fee_paid=amount_in - amount_in_after_fee,
        price_impact_pct=price_impact_pct,
    )
