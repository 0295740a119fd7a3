"""
Closed-form refraction formulae for everyday accuracy.

These evaluate in microseconds and agree with the integrated model to a few
arcseconds above ~15 deg altitude; near the horizon the integrated model in
``atmo_refract.refraction.engine`` should be preferred.

References
----------
- Saemundsson, T. (1986). Atmospheric refraction. Sky & Telescope 72, 70.
- Bennett, G.G. (1982). The calculation of astronomical refraction in
  marine navigation. Journal of Navigation 35, 255-259.
- Meeus, J. (1998). Astronomical Algorithms, 2nd ed., ch. 16.
"""

from typing import Optional

import numpy as np

from atmo_refract.errors import InvalidParameterError
from atmo_refract.utils.constants import (
    DEG_TO_RAD,
    RAD_TO_DEG,
    HALF_PI,
    ARCMIN_PER_DEG,
    FORMULA_ZERO_CELSIUS,
    MAX_REFRACTION_ALTITUDE_DEG,
    MAX_REFRACTION_DEG,
    SAEMUNDSSON_K,
    SAEMUNDSSON_C1,
    SAEMUNDSSON_C2,
    BENNETT_C1,
    BENNETT_C2,
    REFERENCE_PRESSURE_MBAR,
    REFERENCE_TEMPERATURE_K,
)

_FLOOR_RAD = MAX_REFRACTION_ALTITUDE_DEG * DEG_TO_RAD


def weather_scale(
    pressure_mbar: Optional[float] = None,
    temp_c: Optional[float] = None,
) -> float:
    """
    Scale factor of the closed-form formulae for non-standard weather.

    Parameters
    ----------
    pressure_mbar : float, optional
        Air pressure in mbar; reference 1010 mbar when omitted
    temp_c : float, optional
        Air temperature in degrees Celsius; reference 10 C when omitted

    Returns
    -------
    float
        (P / 1010) * (283 / (273 + T)) for the supplied quantities

    Raises
    ------
    InvalidParameterError
        For negative pressure or a temperature at or below -273 C, where the
        temperature factor of the formulae changes sign
    """
    problems = []
    if pressure_mbar is not None and not pressure_mbar >= 0:
        problems.append(f"pressure cannot be negative, got {pressure_mbar} mbar")
    if temp_c is not None and not temp_c > -FORMULA_ZERO_CELSIUS:
        problems.append(
            f"temperature must be above {-FORMULA_ZERO_CELSIUS:g} C "
            f"for the closed-form formulae, got {temp_c} C"
        )
    if problems:
        raise InvalidParameterError(problems)

    scale = 1.0
    if pressure_mbar is not None:
        scale *= pressure_mbar / REFERENCE_PRESSURE_MBAR
    if temp_c is not None:
        scale *= REFERENCE_TEMPERATURE_K / (FORMULA_ZERO_CELSIUS + temp_c)
    return scale


def _as_output(refraction: np.ndarray):
    """Return a float for scalar input, an array otherwise."""
    return float(refraction) if refraction.ndim == 0 else refraction


def fast_refraction(
    alt_true_rad,
    pressure_mbar: Optional[float] = None,
    temp_c: Optional[float] = None,
):
    """
    Refraction for a true altitude using Saemundsson's formula.

    Parameters
    ----------
    alt_true_rad : float or array_like
        True (geometric) altitude in radians
    pressure_mbar : float, optional
        Air pressure in mbar (default: 1010)
    temp_c : float, optional
        Air temperature in degrees Celsius (default: 10)

    Returns
    -------
    refraction : float or ndarray
        Refraction in radians, to be added to the true altitude

    Notes
    -----
    R = 1.02' / tan(h + 10.3/(h + 5.11)) with h in degrees, written here in
    radians. Below -1.102 deg the value is held at 0.663455 deg, the
    refraction at that altitude, instead of following the formula through
    its turning point. |h| >= 90 deg gives exactly 0, and the slightly
    negative values the fit produces within ~0.1 deg of the zenith are
    clipped to 0.
    """
    alt = np.asarray(alt_true_rad, dtype=float)
    scale = weather_scale(pressure_mbar, temp_c)

    with np.errstate(divide='ignore', invalid='ignore'):
        refraction = SAEMUNDSSON_K / np.tan(alt + SAEMUNDSSON_C1 / (alt + SAEMUNDSSON_C2))

    refraction = np.where(alt < _FLOOR_RAD, MAX_REFRACTION_DEG * DEG_TO_RAD, refraction)
    refraction = np.maximum(refraction, 0.0) * scale
    refraction = np.where(np.abs(alt) >= HALF_PI, 0.0, refraction)

    return _as_output(refraction)


def fast_apparent_refraction(
    alt_apparent_rad,
    pressure_mbar: Optional[float] = None,
    temp_c: Optional[float] = None,
):
    """
    Refraction for an apparent (observed) altitude using Bennett's formula.

    Parameters
    ----------
    alt_apparent_rad : float or array_like
        Apparent altitude in radians
    pressure_mbar : float, optional
        Air pressure in mbar (default: 1010)
    temp_c : float, optional
        Air temperature in degrees Celsius (default: 10)

    Returns
    -------
    refraction : float or ndarray
        Refraction in radians, to be subtracted from the apparent altitude

    Notes
    -----
    R' = cot(h + 7.31/(h + 4.4)) with h in degrees and R' in arcminutes.
    An object observed below -1.102 deg cannot be there, so 0 is returned,
    as for |h| >= 90 deg.
    """
    alt = np.asarray(alt_apparent_rad, dtype=float)
    scale = weather_scale(pressure_mbar, temp_c)

    h = alt * RAD_TO_DEG
    with np.errstate(divide='ignore', invalid='ignore'):
        arcmin = 1.0 / np.tan((h + BENNETT_C1 / (h + BENNETT_C2)) * DEG_TO_RAD)

    refraction = np.maximum(arcmin, 0.0) / ARCMIN_PER_DEG * DEG_TO_RAD * scale
    refraction = np.where((alt < _FLOOR_RAD) | (np.abs(alt) >= HALF_PI), 0.0, refraction)

    return _as_output(refraction)
