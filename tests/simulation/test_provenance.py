"""Tests for provenance hashing."""

from decimal import Decimal

import pytest

from src.data.interfaces import MarketParams, TokenSpec
from src.simulation.params import SimulationInput
from src.simulation.provenance import build_provenance, canonical_json, hash_provenance

MARKET = MarketParams(
    lltv=0.86,
    liquidation_incentive=0.05,
    close_factor=0.5,
    irm="adaptive-curve-irm-v1",
    oracle_type="chainlink",
)

INPUT = SimulationInput(
    collateral=TokenSpec(symbol="WETH", decimals=18),
    debt=TokenSpec(symbol="USDC", decimals=6),
    start_capital="1",
    target_ltv=0.6,
    loop_count=2,
)


def _payload(**overrides):
    values = dict(
        version="0.2.0",
        sim_input=INPUT,
        market=MARKET,
        prices={"WETHUSD": 2000.0, "USDCUSD": 1.0},
        external_quotes=[],
        timestamp=1_700_000_000_000,
    )
    values.update(overrides)
    return build_provenance(**values)


class TestCanonicalJson:
    def test_key_order_independent(self) -> None:
        assert canonical_json({"b": 1, "a": 2}) == canonical_json({"a": 2, "b": 1}) == '{"a":2,"b":1}'

    def test_decimal_as_string(self) -> None:
        assert canonical_json({"x": Decimal("1.10")}) == '{"x":"1.10"}'

    def test_rejects_unknown_types(self) -> None:
        with pytest.raises(TypeError):
            canonical_json({"x": object()})


class TestHashProvenance:
    def test_stable(self) -> None:
        assert hash_provenance(_payload()) == hash_provenance(_payload())

    def test_sha256_hex(self) -> None:
        digest = hash_provenance(_payload())
        assert len(digest) == 64
        int(digest, 16)

    def test_payload_fields(self) -> None:
        payload = _payload()
        assert set(payload) == {
            "version",
            "input",
            "protocol_params_used",
            "prices",
            "external_quotes",
            "timestamp",
        }
        assert payload["input"]["loops"] == 2

    @pytest.mark.parametrize(
        "change",
        [
            {"version": "0.2.1"},
            {"sim_input": SimulationInput(
                collateral=TokenSpec(symbol="WETH", decimals=18),
                debt=TokenSpec(symbol="USDC", decimals=6),
                start_capital="1",
                target_ltv=0.6,
                loop_count=3,
            )},
            {"prices": {"WETHUSD": 2001.0, "USDCUSD": 1.0}},
            {"external_quotes": [{"route": "x"}]},
            {"timestamp": 1_700_000_000_001},
        ],
    )
    def test_any_field_change_changes_hash(self, change) -> None:
        assert hash_provenance(_payload(**change)) != hash_provenance(_payload())

    def test_market_change_changes_hash(self) -> None:
        other = MarketParams(
            lltv=0.915,
            liquidation_incentive=0.05,
            close_factor=0.5,
            irm="adaptive-curve-irm-v1",
            oracle_type="chainlink",
        )
        assert hash_provenance(_payload(market=other)) != hash_provenance(_payload())
