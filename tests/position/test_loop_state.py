"""Tests for the loop state."""

from decimal import Decimal

import pytest

from src.errors import ComputationError
from src.position.loop_state import LoopState


class TestLoopState:
    def test_starts_without_debt(self) -> None:
        state = LoopState(collateral_amount=Decimal(1))
        assert state.debt_amount == 0
        assert state.debt_value(Decimal(1)) == 0

    def test_values(self) -> None:
        state = LoopState(collateral_amount=Decimal(2), debt_amount=Decimal(1_000))
        assert state.collateral_value(Decimal(3_000)) == Decimal(6_000)
        assert state.debt_value(Decimal("0.999")) == Decimal("999.000")

    def test_apply_loop_accumulates(self) -> None:
        state = LoopState(collateral_amount=Decimal(1))
        state.apply_loop(Decimal("0.5"), Decimal(1_000))
        state.apply_loop(Decimal("0.25"), Decimal(500))
        assert state.collateral_amount == Decimal("1.75")
        assert state.debt_amount == Decimal(1_500)

    def test_apply_loop_rejects_reduction(self) -> None:
        state = LoopState(collateral_amount=Decimal(1))
        with pytest.raises(ComputationError):
            state.apply_loop(Decimal("-0.1"), Decimal(10))
