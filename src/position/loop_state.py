"""Running collateral/debt totals of a position being built by looping."""

from dataclasses import dataclass
from decimal import Decimal

from src.errors import ComputationError
from src.protocol.decimal_math import ZERO


@dataclass
class LoopState:
    """Mutable loop totals, scoped to a single simulation run.

    The loop only ever adds collateral and debt; it never repays or
    withdraws, so both totals are non-decreasing.
    """

    collateral_amount: Decimal  # collateral token units
    debt_amount: Decimal = ZERO  # debt token units

    def collateral_value(self, price_usd: Decimal) -> Decimal:
        """Collateral value in USD."""
        return self.collateral_amount * price_usd

    def debt_value(self, price_usd: Decimal) -> Decimal:
        """Debt value in USD."""
        return self.debt_amount * price_usd

    def apply_loop(self, collateral_added: Decimal, debt_added: Decimal) -> None:
        """Record one borrow/swap/supply iteration."""
        if collateral_added < 0 or debt_added < 0:
            raise ComputationError(
                f"loop iteration must not reduce the position "
                f"(collateral {collateral_added}, debt {debt_added})"
            )
        self.collateral_amount += collateral_added
        self.debt_amount += debt_added
