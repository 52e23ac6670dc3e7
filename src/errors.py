"""Exception hierarchy for the looping simulator."""


class LoopSimError(Exception):
    """Base class for all simulator errors."""


class ComputationError(LoopSimError, ArithmeticError):
    """Arithmetic failure such as a division by a zero reserve or price."""


class InvalidInputError(LoopSimError, ValueError):
    """The request is semantically invalid and no loop iteration was run."""


class InvalidPoolStateError(InvalidInputError):
    """Constant-product pool with non-positive reserves or a negative trade."""


class SwapQuoteError(LoopSimError):
    """A swap provider could not produce a usable quote."""


class MarketNotFoundError(LoopSimError, LookupError):
    """The market snapshot resolver could not resolve the requested market."""


class PolicyViolationError(LoopSimError):
    """The request is disallowed by risk policy (pre-simulation check)."""

    def __init__(self, reasons: list[str]) -> None:
        self.reasons = list(reasons)
        super().__init__("; ".join(self.reasons) or "policy violation")
