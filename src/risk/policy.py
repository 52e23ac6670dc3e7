"""Risk policy limits, optionally read from the process environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from src.data.constants import DEFAULT_MAX_LOOPS, MAX_HORIZON_DAYS

logger = logging.getLogger(__name__)

ENV_MAX_LOOPS = "LOOPSIM_MAX_LOOPS"
ENV_MAX_HORIZON_DAYS = "LOOPSIM_MAX_HORIZON_DAYS"


def _positive_int_from_env(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer; using %d", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive; using %d", name, raw, default)
        return default
    return value


@dataclass(frozen=True)
class RiskPolicy:
    """Caller-injectable request limits enforced by the pre-simulation check."""

    max_loops: int = DEFAULT_MAX_LOOPS
    max_horizon_days: int = MAX_HORIZON_DAYS

    @classmethod
    def from_env(cls) -> "RiskPolicy":
        """Build a policy from ``LOOPSIM_MAX_LOOPS`` / ``LOOPSIM_MAX_HORIZON_DAYS``.

        Returns
        -------
        RiskPolicy
            Defaults are used for unset variables; unparsable or
            non-positive values are logged and also fall back to defaults.
        """
        return cls(
            max_loops=_positive_int_from_env(ENV_MAX_LOOPS, DEFAULT_MAX_LOOPS),
            max_horizon_days=_positive_int_from_env(ENV_MAX_HORIZON_DAYS, MAX_HORIZON_DAYS),
        )
