"""Exception types raised by the refraction engine."""

from typing import List, Optional


class RefractionError(Exception):
    """Base exception for refraction-specific errors."""
    pass


class InvalidParameterError(RefractionError, ValueError):
    """Raised when observing conditions are rejected before integration.

    Attributes:
        problems: Individual validation messages
    """

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        message = "Invalid refraction parameters: " + "; ".join(self.problems)
        super().__init__(message)


class ConvergenceError(RefractionError, RuntimeError):
    """Raised when an iterative stage does not settle within its cap.

    Attributes:
        stage: Which loop failed ("quadrature" or "inverse")
        iterations: Number of iterations performed
        last_change: Last change between successive estimates (degrees)
    """

    def __init__(self, stage: str, iterations: int, last_change: Optional[float] = None):
        self.stage = stage
        self.iterations = iterations
        self.last_change = last_change
        message = f"{stage} did not converge after {iterations} iterations"
        if last_change is not None:
            message += f" (last change {last_change:.3g} deg)"
        message += "; consider relaxing the tolerance"
        super().__init__(message)


class NumericalError(RefractionError, ArithmeticError):
    """Raised when the refraction integrand becomes singular."""
    pass
