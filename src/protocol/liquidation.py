"""Liquidation mechanics: health factor, leverage, liquidation price."""

from __future__ import annotations

from decimal import Decimal

import numpy as np
import pandas as pd

from src.protocol.decimal_math import ZERO, ratio, to_decimal


class LiquidationModel:
    """Health-factor calculations against a market's liquidation LTV."""

    def __init__(self, lltv: float | Decimal) -> None:
        self.lltv = to_decimal(lltv, "lltv")

    def health_factor(self, collateral_value: Decimal, debt_value: Decimal) -> float:
        """Compute health factor.

        HF = (collateral_value * lltv) / debt_value
        """
        if debt_value <= 0:
            return float("inf")
        return float(collateral_value * self.lltv / debt_value)

    def gross_leverage(self, collateral_value: Decimal, debt_value: Decimal) -> float:
        """Collateral value over equity; unbounded once equity is gone."""
        equity = collateral_value - debt_value
        if equity <= 0:
            return float("inf")
        return float(collateral_value / equity)

    def liquidation_price(self, collateral_amount: Decimal, debt_value: Decimal) -> float:
        """Collateral unit price at which HF reaches exactly 1.0.

        Returns inf if there is no collateral or the market has a zero LLTV.
        """
        return ratio(debt_value, collateral_amount * self.lltv)

    def shortfall(self, collateral_value: Decimal, debt_value: Decimal) -> Decimal | None:
        """Debt not covered by liquidation-weighted collateral, when positive."""
        gap = debt_value - collateral_value * self.lltv
        return gap if gap > ZERO else None

    def price_sensitivity(
        self,
        collateral_amount: Decimal,
        debt_value: Decimal,
        price_range: tuple[float, float],
        n_points: int = 100,
    ) -> pd.DataFrame:
        """Health factor across a range of collateral USD prices.

        Returns:
            DataFrame with columns: collateral_price, health_factor
        """
        prices = np.linspace(price_range[0], price_range[1], n_points)
        hfs = []
        for price in prices:
            collateral_value = collateral_amount * to_decimal(float(price), "price")
            hfs.append(self.health_factor(collateral_value, debt_value))

        return pd.DataFrame({"collateral_price": prices, "health_factor": hfs})
