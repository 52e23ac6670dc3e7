"""Tests for the oracle heartbeat model."""

from decimal import Decimal

from src.protocol.oracle import OracleLagConfig, OracleState, resolve_oracle_price

STATE = OracleState(price=Decimal(100), last_update=0)


class TestResolveOraclePrice:
    def test_no_config_returns_spot(self) -> None:
        price, state = resolve_oracle_price(Decimal(120), 1_800, STATE)
        assert price == Decimal(120)
        assert state == OracleState(price=Decimal(120), last_update=1_800)

    def test_stale_within_lag(self) -> None:
        config = OracleLagConfig(lag_seconds=3_600)
        price, state = resolve_oracle_price(Decimal(120), 1_800, STATE, config)
        assert price == Decimal(100)
        assert state is STATE

    def test_refreshes_at_lag_boundary(self) -> None:
        config = OracleLagConfig(lag_seconds=3_600)
        price, state = resolve_oracle_price(Decimal(120), 3_600, STATE, config)
        assert price == Decimal(120)
        assert state.last_update == 3_600

    def test_lag_longer_than_a_day_holds_across_days(self) -> None:
        config = OracleLagConfig(lag_seconds=2 * 86_400)
        state = STATE
        observed = []
        for day in range(4):
            price, state = resolve_oracle_price(Decimal(100 + day), day * 86_400, state, config)
            observed.append(price)
        assert observed == [Decimal(100), Decimal(100), Decimal(102), Decimal(102)]
