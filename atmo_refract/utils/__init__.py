"""
Utility functions and physical constants.

Constants
---------
EARTH_RADIUS : float
    Equatorial Earth radius (m)
GAS_CONSTANT_KMOL : float
    Universal gas constant (J/kmol/K)
DRY_AIR_MOLAR_MASS : float
    Mean molar mass of dry air (kg/kmol)
WATER_VAPOUR_MOLAR_MASS : float
    Molar mass of water vapour (kg/kmol)
TROPOPAUSE_HEIGHT : float
    Height of the troposphere/stratosphere boundary (m)
STRATOSPHERE_TOP_HEIGHT : float
    Upper limit of the refracting atmosphere (m)

Functions
---------
dry_air_refractivity
    Wavelength-dependent refractivity of dry air
local_gravity
    Mean gravity of the air column above an observer
"""

from atmo_refract.utils.constants import (
    DEG_TO_RAD,
    RAD_TO_DEG,
    EARTH_RADIUS,
    GAS_CONSTANT_KMOL,
    DRY_AIR_MOLAR_MASS,
    WATER_VAPOUR_MOLAR_MASS,
    TROPOPAUSE_HEIGHT,
    STRATOSPHERE_TOP_HEIGHT,
    dry_air_refractivity,
    local_gravity,
)

__all__ = [
    "DEG_TO_RAD",
    "RAD_TO_DEG",
    "EARTH_RADIUS",
    "GAS_CONSTANT_KMOL",
    "DRY_AIR_MOLAR_MASS",
    "WATER_VAPOUR_MOLAR_MASS",
    "TROPOPAUSE_HEIGHT",
    "STRATOSPHERE_TOP_HEIGHT",
    "dry_air_refractivity",
    "local_gravity",
]
