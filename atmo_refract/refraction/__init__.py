"""
Astronomical refraction calculators.

Functions
---------
apparent_refraction
    Integrated refraction for an apparent altitude
true_refraction
    Integrated refraction for a true altitude (fixed-point inverse)
fast_refraction
    Saemundsson's closed form for a true altitude
fast_apparent_refraction
    Bennett's closed form for an apparent altitude

Classes
-------
RefractionEngine
    Calculator bound to one set of observing conditions
RefractionResult
    Refraction with integration bookkeeping
"""

from atmo_refract.refraction.engine import (
    RefractionEngine,
    RefractionResult,
    apparent_refraction,
    apparent_refraction_zenith,
    compute_apparent_refraction,
    compute_true_refraction,
    true_refraction,
)
from atmo_refract.refraction.formulae import (
    fast_refraction,
    fast_apparent_refraction,
    weather_scale,
)

__all__ = [
    "RefractionEngine",
    "RefractionResult",
    "apparent_refraction",
    "apparent_refraction_zenith",
    "compute_apparent_refraction",
    "compute_true_refraction",
    "true_refraction",
    "fast_refraction",
    "fast_apparent_refraction",
    "weather_scale",
]
