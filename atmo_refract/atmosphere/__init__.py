"""
Refractive-index models of the atmosphere.

Classes
-------
AtmosphereConstants
    Coefficients of the troposphere model defined at the observer
LayerState
    Temperature, refractive index and index gradient at a radius
RefractiveLayer
    Base class for one spherical shell of the atmosphere
TroposphereLayer
    Constant lapse rate troposphere (observer to 11 km)
StratosphereLayer
    Isothermal stratosphere (11 km to 80 km)
TwoLayerAtmosphere
    Both layers built for one set of observing conditions
"""

from atmo_refract.atmosphere.model import (
    AtmosphereConstants,
    LayerState,
    RefractiveLayer,
    TroposphereLayer,
    StratosphereLayer,
    TwoLayerAtmosphere,
    atmosphere_constants,
    refraction_integrand,
)

__all__ = [
    "AtmosphereConstants",
    "LayerState",
    "RefractiveLayer",
    "TroposphereLayer",
    "StratosphereLayer",
    "TwoLayerAtmosphere",
    "atmosphere_constants",
    "refraction_integrand",
]
