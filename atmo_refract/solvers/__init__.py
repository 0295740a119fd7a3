"""
Numerical solvers used by the refraction integral.

Functions
---------
solve_layer_radius
    Newton-Raphson recovery of the ray radius at a given zenith angle
adaptive_simpson
    Composite Simpson's rule with automatic interval doubling
"""

from atmo_refract.solvers.newton import (
    RadiusSolution,
    solve_layer_radius,
    DEFAULT_NEWTON_ITERATIONS,
)
from atmo_refract.solvers.simpson import (
    QuadratureResult,
    adaptive_simpson,
    simpson_estimate,
)

__all__ = [
    "RadiusSolution",
    "solve_layer_radius",
    "DEFAULT_NEWTON_ITERATIONS",
    "QuadratureResult",
    "adaptive_simpson",
    "simpson_estimate",
]
