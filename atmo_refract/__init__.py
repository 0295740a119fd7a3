"""
atmo_refract: Astronomical refraction through a model atmosphere.

Computes the bending of starlight by the Earth's atmosphere for an observer
at a given height, latitude, temperature, pressure, humidity and
wavelength, by numerical integration through a two-layer (troposphere /
stratosphere) refractive-index model. Closed-form formulae are provided
for quick, lower-accuracy work.

Modules
-------
atmosphere
    Two-layer refractive-index model (Hohenkerk & Sinclair 1985)
solvers
    Newton-Raphson radius solver and adaptive Simpson quadrature
refraction
    Forward/inverse integrated refraction, Saemundsson and Bennett formulae
config
    Observing conditions, JSON/YAML loading and validation
validation
    Benchmarks against published values and closed-form fits
utils
    Physical constants and unit conversions
"""

__version__ = "0.1.0"
__author__ = "atmo_refract Contributors"

from atmo_refract.errors import (
    RefractionError,
    InvalidParameterError,
    ConvergenceError,
    NumericalError,
)
from atmo_refract.config import (
    RefractionConfig,
    ObserverSite,
    WeatherConditions,
    OpticalParameters,
    SolverSettings,
    ConfigurationManager,
)
from atmo_refract.atmosphere import TwoLayerAtmosphere
from atmo_refract.refraction import (
    RefractionEngine,
    RefractionResult,
    apparent_refraction,
    true_refraction,
    fast_refraction,
    fast_apparent_refraction,
    compute_apparent_refraction,
    compute_true_refraction,
)

__all__ = [
    "__version__",
    "apparent_refraction",
    "true_refraction",
    "fast_refraction",
    "fast_apparent_refraction",
    "compute_apparent_refraction",
    "compute_true_refraction",
    "RefractionEngine",
    "RefractionResult",
    "RefractionConfig",
    "ObserverSite",
    "WeatherConditions",
    "OpticalParameters",
    "SolverSettings",
    "ConfigurationManager",
    "TwoLayerAtmosphere",
    "RefractionError",
    "InvalidParameterError",
    "ConvergenceError",
    "NumericalError",
]
