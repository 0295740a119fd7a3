"""
Newton-Raphson recovery of the ray radius inside one atmospheric layer.

Along a ray in a spherically symmetric atmosphere n r sin(z) is conserved
(Bouguer's invariant). Given a zenith angle z the radius r at which the ray
has that zenith angle solves

    r n(r) - sk0 / sin(z) = 0

whose derivative with respect to r is n + r dn/dr.
"""

import logging
import math
from typing import NamedTuple

from atmo_refract.atmosphere.model import RefractiveLayer
from atmo_refract.utils.constants import DEG_TO_RAD

logger = logging.getLogger(__name__)

# Empirically sufficient when seeded from the neighbouring abscissa
DEFAULT_NEWTON_ITERATIONS = 4


class RadiusSolution(NamedTuple):
    """Radius found by the Newton solver.

    Attributes:
        radius: Distance from the centre of the Earth (m)
        iterations: Newton steps taken
        correction: Size of the last Newton step (m)
    """
    radius: float
    iterations: int
    correction: float


def solve_layer_radius(
    layer: RefractiveLayer,
    zenith_deg: float,
    sk0: float,
    radius_guess: float,
    max_iterations: int = DEFAULT_NEWTON_ITERATIONS,
    tolerance_m: float = 1e-6,
) -> RadiusSolution:
    """
    Find the radius at which the ray has a given zenith angle.

    Parameters
    ----------
    layer : RefractiveLayer
        Layer whose profile n(r) is used
    zenith_deg : float
        Zenith angle of the ray in degrees
    sk0 : float
        Bouguer's invariant n0 r0 sin(z0) fixed at the observer (m)
    radius_guess : float
        Starting radius (m), usually the solution at the previous abscissa
    max_iterations : int
        Upper bound on the number of Newton steps
    tolerance_m : float
        Stop as soon as a step is smaller than this (m)

    Returns
    -------
    solution : RadiusSolution

    Notes
    -----
    The step count is bounded rather than driven to convergence: with a
    seed from the neighbouring abscissa four steps are ample, and an
    unconverged solve only perturbs one quadrature node.
    """
    target = sk0 / math.sin(zenith_deg * DEG_TO_RAD)

    r = radius_guess
    correction = math.inf
    iterations = 0

    while iterations < max_iterations:
        s = layer.state(r)
        correction = (r * s.refractive_index - target) / (s.refractive_index + r * s.dn_dr)
        r -= correction
        iterations += 1
        if abs(correction) <= tolerance_m:
            break
    else:
        logger.debug(
            f"Newton cap reached in {layer.name} at z={zenith_deg:.6f} deg: "
            f"last step {correction:.3g} m"
        )

    return RadiusSolution(radius=r, iterations=iterations, correction=abs(correction))
