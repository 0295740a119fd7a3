"""
Composite Simpson's rule with automatic interval doubling.

Each refinement halves the step and evaluates only the new midpoints; the
odd and even sums of the previous estimate are merged into the new even
sum, so no integrand value is computed twice.
"""

import logging
from typing import Callable, NamedTuple, Optional

import numpy as np

from atmo_refract.errors import ConvergenceError

logger = logging.getLogger(__name__)


class QuadratureResult(NamedTuple):
    """Outcome of one adaptive Simpson integration.

    Attributes:
        value: Integral estimate
        intervals: Number of sub-intervals of the accepted estimate
        evaluations: Number of interior integrand evaluations
        refinements: Number of interval doublings performed
    """
    value: float
    intervals: int
    evaluations: int
    refinements: int


def simpson_estimate(
    step: float,
    f_start: float,
    f_end: float,
    odd_sum: float,
    even_sum: float,
) -> float:
    """Composite Simpson sum h/3 (f0 + 4 sum_odd + 2 sum_even + fN)."""
    return step * (f_start + 4.0 * odd_sum + 2.0 * even_sum + f_end) / 3.0


def adaptive_simpson(
    func: Callable[[np.ndarray], np.ndarray],
    start: float,
    end: float,
    f_start: float,
    f_end: float,
    tolerance: float,
    initial_intervals: int = 16,
    max_refinements: int = 12,
) -> QuadratureResult:
    """
    Integrate func from start to end, doubling the interval count until stable.

    Parameters
    ----------
    func : callable
        Integrand; receives an array of abscissae (in order of increasing
        index, i.e. walking from start towards end) and returns the
        integrand values at those points
    start, end : float
        Integration limits; end may be smaller than start
    f_start, f_end : float
        Integrand values at the limits
    tolerance : float
        Accept once successive estimates differ by at most 0.5 * tolerance
    initial_intervals : int
        Sub-intervals of the first estimate (even)
    max_refinements : int
        Maximum number of interval doublings

    Returns
    -------
    result : QuadratureResult

    Raises
    ------
    ValueError
        If initial_intervals is not an even number >= 2
    ConvergenceError
        If the estimate is still changing after max_refinements doublings

    Notes
    -----
    The first estimate is always refined at least once, since there is no
    earlier estimate to compare it with.
    """
    if initial_intervals < 2 or initial_intervals % 2:
        raise ValueError(f"initial_intervals must be even and >= 2, got {initial_intervals}")

    intervals = initial_intervals
    step = (end - start) / intervals

    values = np.asarray(func(start + step * np.arange(1, intervals)), dtype=float)
    evaluations = values.size

    # Interior node i has weight 4 when i is odd, i.e. array positions 0, 2, 4, ...
    odd_sum = float(np.sum(values[0::2]))
    even_sum = float(np.sum(values[1::2]))
    estimate = simpson_estimate(step, f_start, f_end, odd_sum, even_sum)

    previous: Optional[float] = None
    refinements = 0

    while previous is None or abs(estimate - previous) > 0.5 * tolerance:
        if refinements >= max_refinements:
            last_change = None if previous is None else abs(estimate - previous)
            raise ConvergenceError("quadrature", refinements, last_change)

        previous = estimate
        even_sum += odd_sum
        step /= 2.0

        midpoints = start + step * (2.0 * np.arange(intervals) + 1.0)
        values = np.asarray(func(midpoints), dtype=float)
        evaluations += values.size

        odd_sum = float(np.sum(values))
        intervals *= 2
        refinements += 1
        estimate = simpson_estimate(step, f_start, f_end, odd_sum, even_sum)

    logger.debug(
        f"Simpson converged: {intervals} intervals, {evaluations} evaluations, "
        f"change {abs(estimate - previous):.3g}"
    )

    return QuadratureResult(
        value=estimate,
        intervals=intervals,
        evaluations=evaluations,
        refinements=refinements,
    )
