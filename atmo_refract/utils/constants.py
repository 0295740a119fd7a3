"""
Physical constants for atmospheric refraction calculations.

All constants are in SI units unless otherwise specified. The gas constant
and molar masses follow the kilomole convention of Hohenkerk & Sinclair
(HMNAO Technical Note 63, 1985), so that g*M/R comes out in K/m.
"""

import math

# Angle conversions
DEG_TO_RAD = math.pi / 180.0
RAD_TO_DEG = 180.0 / math.pi
ARCSEC_PER_DEG = 3600.0
ARCMIN_PER_DEG = 60.0
HALF_PI = math.pi / 2.0

# Earth
EARTH_RADIUS = 6378136.6  # m, equatorial (IERS 2003)

# Gas constants
GAS_CONSTANT_KMOL = 8314.36  # J/(kmol·K)
DRY_AIR_MOLAR_MASS = 28.966  # kg/kmol
WATER_VAPOUR_MOLAR_MASS = 18.016  # kg/kmol
WATER_VAPOUR_EXPONENT = 18.36  # exponent of the saturation vapour pressure law

# Refractivity of water vapour per mbar/K (Hohenkerk & Sinclair)
WATER_VAPOUR_REFRACTIVITY = 11.2684e-6

# Celsius offset
ZERO_CELSIUS = 273.15  # K

# Two-layer atmosphere geometry
TROPOPAUSE_HEIGHT = 11.0e3  # m
MIN_OBSERVER_HEIGHT = -500.0  # m, about the Dead Sea shore
STRATOSPHERE_TOP_HEIGHT = 80.0e3  # m

# Default observing conditions
DEFAULT_TEMPERATURE_C = 10.0
DEFAULT_PRESSURE_MBAR = 1010.0
DEFAULT_RELATIVE_HUMIDITY = 0.5
DEFAULT_WAVELENGTH_UM = 0.55
DEFAULT_LAPSE_RATE = 6.5e-3  # K/m
DEFAULT_TOLERANCE_RAD = 1e-4
MIN_TOLERANCE_RAD = 1e-8  # below this the integration breaks down numerically

# Horizon floors
MAX_REFRACTION_ALTITUDE_DEG = -1.102  # max refraction on Earth (T=-90 C, P=1085 mbar)
INVERSE_FLOOR_DEG = -0.9
MAX_REFRACTION_DEG = 0.663455  # refraction at -1.102 deg for 1010 mbar and 10 C

# Saemundsson (1986) coefficients, converted to radians
SAEMUNDSSON_K = 2.9670597e-4
SAEMUNDSSON_C1 = 3.137559e-3
SAEMUNDSSON_C2 = 8.91863e-2

# Bennett (1982) coefficients, degrees in, arcminutes out
BENNETT_C1 = 7.31
BENNETT_C2 = 4.4

# Reference conditions of the closed-form formulae
REFERENCE_PRESSURE_MBAR = 1010.0
REFERENCE_TEMPERATURE_K = 283.0
FORMULA_ZERO_CELSIUS = 273.0  # K, Celsius offset used by the closed-form fits


def dry_air_refractivity(wavelength_um: float) -> float:
    """
    Refractivity of dry air per unit pressure over temperature.

    Parameters
    ----------
    wavelength_um : float
        Wavelength in micrometres

    Returns
    -------
    float
        (n - 1) * T / P for dry air, in K/mbar
    """
    lam2 = wavelength_um**2
    return (287.604 + 1.6288 / lam2 + 0.0136 / lam2**2) * (ZERO_CELSIUS / 1013.25) * 1e-6


def local_gravity(latitude_rad: float, height_m: float) -> float:
    """Mean gravitational acceleration of the air column above the observer (m/s^2)."""
    return 9.784 * (1.0 - 0.0026 * math.cos(2.0 * latitude_rad) - 0.00000028 * height_m)
