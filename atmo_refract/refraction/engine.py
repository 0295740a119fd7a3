"""
Integrated refraction model.

The refraction of a ray observed at zenith angle z0 is

    R = integral from z0 to z_top of  r (dn/dr) / (n + r dn/dr)  dz

evaluated separately over the troposphere and the stratosphere, where the
radius at each abscissa follows from Bouguer's invariant n r sin(z) = sk0.
Zenith angles are handled in degrees inside the integral; every public
function takes and returns radians.

The inverse problem (true altitude in, refraction out) is solved by
fixed-point iteration on the forward model.
"""

import logging
import math
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any, Union

import numpy as np

from atmo_refract.atmosphere.model import RefractiveLayer, TwoLayerAtmosphere
from atmo_refract.config.settings import RefractionConfig, SolverSettings
from atmo_refract.errors import ConvergenceError, InvalidParameterError
from atmo_refract.refraction.formulae import fast_refraction, fast_apparent_refraction
from atmo_refract.solvers.newton import solve_layer_radius
from atmo_refract.solvers.simpson import adaptive_simpson, QuadratureResult
from atmo_refract.utils.constants import (
    DEG_TO_RAD,
    RAD_TO_DEG,
    HALF_PI,
    ARCSEC_PER_DEG,
    DEFAULT_TEMPERATURE_C,
    DEFAULT_PRESSURE_MBAR,
    DEFAULT_RELATIVE_HUMIDITY,
    DEFAULT_WAVELENGTH_UM,
    DEFAULT_LAPSE_RATE,
    DEFAULT_TOLERANCE_RAD,
    MAX_REFRACTION_ALTITUDE_DEG,
    INVERSE_FLOOR_DEG,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefractionResult:
    """
    Refraction with the bookkeeping of the computation that produced it.

    Attributes
    ----------
    refraction_rad : float
        Total refraction in radians
    troposphere_deg : float
        Troposphere contribution in degrees (last forward evaluation)
    stratosphere_deg : float
        Stratosphere contribution in degrees (last forward evaluation)
    evaluations : int
        Total interior integrand evaluations
    intervals : int
        Simpson sub-intervals summed over both layers (last forward evaluation)
    iterations : int
        Fixed-point iterations (0 for the forward model)
    """

    refraction_rad: float
    troposphere_deg: float = 0.0
    stratosphere_deg: float = 0.0
    evaluations: int = 0
    intervals: int = 0
    iterations: int = 0

    @property
    def degrees(self) -> float:
        """Total refraction in degrees."""
        return self.refraction_rad * RAD_TO_DEG

    @property
    def arcsec(self) -> float:
        """Total refraction in arcseconds."""
        return self.degrees * ARCSEC_PER_DEG

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary."""
        result = asdict(self)
        result["refraction_arcsec"] = self.arcsec
        return result


def _validated(config: Optional[RefractionConfig]) -> RefractionConfig:
    """Return the configuration, or the defaults, after checking it."""
    if config is None:
        config = RefractionConfig()
    errors = config.validate()
    if errors:
        raise InvalidParameterError(errors)
    return config


def _check_altitude(alt_rad: float) -> float:
    alt = float(alt_rad)
    if not math.isfinite(alt):
        raise InvalidParameterError([f"altitude must be finite, got {alt_rad!r}"])
    return alt


def _layer_integrand(
    layer: RefractiveLayer,
    sk0: float,
    solver: SolverSettings,
):
    """
    Build the integrand of one layer as a function of zenith angle (deg).

    Abscissae are visited in order and each Newton solve is seeded with the
    radius found at the previous one, starting from the bottom of the layer.
    """
    def evaluate(zenith_deg: np.ndarray) -> np.ndarray:
        values = np.empty(len(zenith_deg))
        radius = layer.lower_radius
        for i, z in enumerate(zenith_deg):
            radius = solve_layer_radius(
                layer, z, sk0, radius,
                max_iterations=solver.newton_iterations,
                tolerance_m=solver.newton_tolerance_m,
            ).radius
            values[i] = layer.integrand(radius)
        return values

    return evaluate


def _integrate_layer(
    layer: RefractiveLayer,
    sk0: float,
    z_bottom: float,
    z_top: float,
    config: RefractionConfig,
) -> QuadratureResult:
    """Refraction contributed by one layer, in degrees."""
    tolerance_deg = config.optics.tolerance_rad * RAD_TO_DEG

    result = adaptive_simpson(
        _layer_integrand(layer, sk0, config.solver),
        z_bottom,
        z_top,
        layer.integrand(layer.lower_radius),
        layer.integrand(layer.upper_radius),
        tolerance_deg,
        initial_intervals=config.solver.initial_intervals,
        max_refinements=config.solver.max_refinements,
    )

    logger.debug(
        f"{layer.name}: z {z_bottom:.6f} -> {z_top:.6f} deg, "
        f"R = {result.value * ARCSEC_PER_DEG:.4f} arcsec "
        f"({result.intervals} intervals)"
    )
    return result


def _forward_model(
    z0_deg: float,
    config: RefractionConfig,
    atmosphere: Optional[TwoLayerAtmosphere] = None,
) -> RefractionResult:
    """Integrate both layers for an observed zenith angle in degrees."""
    if atmosphere is None:
        atmosphere = TwoLayerAtmosphere.from_conditions(
            config.site, config.weather, config.optics
        )
    troposphere = atmosphere.troposphere
    stratosphere = atmosphere.stratosphere

    r0 = troposphere.lower_radius
    n0 = troposphere.state(r0).refractive_index
    sk0 = n0 * r0 * math.sin(z0_deg * DEG_TO_RAD)

    # Zenith angles where the ray leaves the troposphere, enters the
    # stratosphere and leaves the atmosphere
    zt = troposphere.zenith_angle(troposphere.upper_radius, sk0)
    zts = stratosphere.zenith_angle(stratosphere.lower_radius, sk0)
    zs = stratosphere.zenith_angle(stratosphere.upper_radius, sk0)

    lower = _integrate_layer(troposphere, sk0, z0_deg, zt, config)
    upper = _integrate_layer(stratosphere, sk0, zts, zs, config)

    return RefractionResult(
        refraction_rad=(lower.value + upper.value) * DEG_TO_RAD,
        troposphere_deg=lower.value,
        stratosphere_deg=upper.value,
        evaluations=lower.evaluations + upper.evaluations,
        intervals=lower.intervals + upper.intervals,
    )


def apparent_refraction_zenith(
    z_deg: float,
    config: RefractionConfig,
    atmosphere: Optional[TwoLayerAtmosphere] = None,
) -> float:
    """
    Forward refraction in degree units.

    Parameters
    ----------
    z_deg : float
        Observed (apparent) zenith angle in degrees
    config : RefractionConfig
        Observing conditions; assumed already validated
    atmosphere : TwoLayerAtmosphere, optional
        Prebuilt layers for config, rebuilt when omitted

    Returns
    -------
    float
        Refraction in degrees

    Notes
    -----
    No altitude floors are applied here; callers working in radians should
    use ``compute_apparent_refraction``.
    """
    return _forward_model(z_deg, config, atmosphere).degrees


def compute_apparent_refraction(
    alt_rad: float,
    config: Optional[RefractionConfig] = None,
    atmosphere: Optional[TwoLayerAtmosphere] = None,
) -> RefractionResult:
    """
    Refraction of a ray observed at an apparent altitude.

    Parameters
    ----------
    alt_rad : float
        Apparent altitude in radians
    config : RefractionConfig, optional
        Observing conditions (default: sea level, 10 C, 1010 mbar)
    atmosphere : TwoLayerAtmosphere, optional
        Prebuilt layers matching config

    Returns
    -------
    result : RefractionResult
        Zero refraction when alt < -1.102 deg or |alt| >= 90 deg

    Raises
    ------
    InvalidParameterError
        If the configuration or altitude is rejected
    ConvergenceError
        If the quadrature does not settle
    """
    config = _validated(config)
    alt = _check_altitude(alt_rad)

    if abs(alt) >= HALF_PI or alt < MAX_REFRACTION_ALTITUDE_DEG * DEG_TO_RAD:
        return RefractionResult(refraction_rad=0.0)

    return _forward_model((HALF_PI - alt) * RAD_TO_DEG, config, atmosphere)


def compute_true_refraction(
    alt_rad: float,
    config: Optional[RefractionConfig] = None,
    atmosphere: Optional[TwoLayerAtmosphere] = None,
) -> RefractionResult:
    """
    Refraction of an object at a true (geometric) altitude.

    Solves z_apparent = z_true - R(z_apparent) by fixed-point iteration
    on the forward model, starting from z_apparent = z_true.

    Parameters
    ----------
    alt_rad : float
        True altitude in radians
    config : RefractionConfig, optional
        Observing conditions (default: sea level, 10 C, 1010 mbar)
    atmosphere : TwoLayerAtmosphere, optional
        Prebuilt layers matching config

    Returns
    -------
    result : RefractionResult
        Zero refraction when alt < -0.9 deg or |alt| >= 90 deg

    Raises
    ------
    InvalidParameterError
        If the configuration or altitude is rejected
    ConvergenceError
        If the iteration has not settled after solver.max_iterations
    """
    config = _validated(config)
    alt = _check_altitude(alt_rad)

    if abs(alt) >= HALF_PI or alt < INVERSE_FLOOR_DEG * DEG_TO_RAD:
        return RefractionResult(refraction_rad=0.0)

    if atmosphere is None:
        atmosphere = TwoLayerAtmosphere.from_conditions(
            config.site, config.weather, config.optics
        )

    z_true = (HALF_PI - alt) * RAD_TO_DEG
    tolerance_deg = config.optics.tolerance_rad * RAD_TO_DEG
    max_iterations = config.solver.max_iterations

    z_apparent = z_true
    evaluations = 0
    change = math.inf

    for iteration in range(1, max_iterations + 1):
        forward = _forward_model(z_apparent, config, atmosphere)
        evaluations += forward.evaluations

        z_next = z_true - forward.degrees
        change = abs(z_next - z_apparent)
        z_apparent = z_next

        logger.debug(
            f"Inverse iteration {iteration}: z_apparent = {z_apparent:.8f} deg, "
            f"change {change:.3g} deg"
        )

        if change <= tolerance_deg:
            return RefractionResult(
                refraction_rad=forward.refraction_rad,
                troposphere_deg=forward.troposphere_deg,
                stratosphere_deg=forward.stratosphere_deg,
                evaluations=evaluations,
                intervals=forward.intervals,
                iterations=iteration,
            )

    raise ConvergenceError("inverse", max_iterations, change)


def apparent_refraction(
    alt_apparent_rad: float,
    height_m: float = 0.0,
    lat_rad: float = 0.0,
    temp_c: float = DEFAULT_TEMPERATURE_C,
    pressure_mbar: float = DEFAULT_PRESSURE_MBAR,
    rel_humidity: float = DEFAULT_RELATIVE_HUMIDITY,
    wavelength_um: float = DEFAULT_WAVELENGTH_UM,
    lapse_rate_k_per_m: float = DEFAULT_LAPSE_RATE,
    tol_rad: float = DEFAULT_TOLERANCE_RAD,
) -> float:
    """
    Refraction in radians for an apparent altitude.

    Subtract the result from the apparent altitude to get the true altitude.

    Parameters
    ----------
    alt_apparent_rad : float
        Apparent altitude in radians
    height_m : float
        Observer height above sea level (m)
    lat_rad : float
        Observer latitude in radians
    temp_c : float
        Air temperature at the observer (C)
    pressure_mbar : float
        Air pressure at the observer (mbar)
    rel_humidity : float
        Relative humidity (0-1)
    wavelength_um : float
        Wavelength of the light (micrometres)
    lapse_rate_k_per_m : float
        Tropospheric temperature lapse rate (K/m)
    tol_rad : float
        Requested precision in radians

    Returns
    -------
    float
        Refraction in radians
    """
    config = RefractionConfig.from_parameters(
        height_m, lat_rad, temp_c, pressure_mbar, rel_humidity,
        wavelength_um, lapse_rate_k_per_m, tol_rad,
    )
    return compute_apparent_refraction(alt_apparent_rad, config).refraction_rad


def true_refraction(
    alt_true_rad: float,
    height_m: float = 0.0,
    lat_rad: float = 0.0,
    temp_c: float = DEFAULT_TEMPERATURE_C,
    pressure_mbar: float = DEFAULT_PRESSURE_MBAR,
    rel_humidity: float = DEFAULT_RELATIVE_HUMIDITY,
    wavelength_um: float = DEFAULT_WAVELENGTH_UM,
    lapse_rate_k_per_m: float = DEFAULT_LAPSE_RATE,
    tol_rad: float = DEFAULT_TOLERANCE_RAD,
) -> float:
    """
    Refraction in radians for a true altitude.

    Add the result to the true altitude to get the apparent altitude.
    Parameters are those of ``apparent_refraction``.
    """
    config = RefractionConfig.from_parameters(
        height_m, lat_rad, temp_c, pressure_mbar, rel_humidity,
        wavelength_um, lapse_rate_k_per_m, tol_rad,
    )
    return compute_true_refraction(alt_true_rad, config).refraction_rad


class RefractionEngine:
    """
    Refraction calculator bound to one set of observing conditions.

    The configuration is validated and the atmosphere layers are built
    once, then reused by every call.

    Examples
    --------
    >>> engine = RefractionEngine(RefractionConfig.from_parameters(pressure_mbar=770))
    >>> r = engine.apparent(np.radians(10.0))
    """

    TABLE_MODES = ("apparent", "true", "fast", "bennett")

    def __init__(self, config: Optional[RefractionConfig] = None):
        self.config = _validated(config)
        self.atmosphere = TwoLayerAtmosphere.from_conditions(
            self.config.site, self.config.weather, self.config.optics
        )
        logger.info(
            f"RefractionEngine ready: h={self.config.site.height_m:.0f} m, "
            f"T={self.config.weather.temperature_c:.1f} C, "
            f"P={self.config.weather.pressure_mbar:.1f} mbar, "
            f"lambda={self.config.optics.wavelength_um:.3f} um"
        )

    def apparent(self, alt_apparent_rad: float) -> float:
        """Refraction in radians for an apparent altitude."""
        result = compute_apparent_refraction(alt_apparent_rad, self.config, self.atmosphere)
        logger.debug(f"apparent({alt_apparent_rad:.6f} rad) = {result.arcsec:.3f} arcsec")
        return result.refraction_rad

    def true(self, alt_true_rad: float) -> float:
        """Refraction in radians for a true altitude."""
        result = compute_true_refraction(alt_true_rad, self.config, self.atmosphere)
        logger.debug(
            f"true({alt_true_rad:.6f} rad) = {result.arcsec:.3f} arcsec "
            f"after {result.iterations} iterations"
        )
        return result.refraction_rad

    def fast(self, alt_true_rad: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
        """Saemundsson refraction in radians under this engine's weather."""
        return fast_refraction(
            alt_true_rad,
            pressure_mbar=self.config.weather.pressure_mbar,
            temp_c=self.config.weather.temperature_c,
        )

    def apparent_altitude(self, alt_true_rad: float) -> float:
        """Altitude at which an object at a true altitude is observed (rad)."""
        return alt_true_rad + self.true(alt_true_rad)

    def true_altitude(self, alt_apparent_rad: float) -> float:
        """Geometric altitude of an object observed at an apparent altitude (rad)."""
        return alt_apparent_rad - self.apparent(alt_apparent_rad)

    def refraction_table(self, altitudes: np.ndarray, mode: str = "apparent") -> np.ndarray:
        """
        Refraction over a grid of altitudes.

        Parameters
        ----------
        altitudes : array_like
            Altitudes in radians (apparent for "apparent"/"bennett",
            true for "true"/"fast")
        mode : str
            One of "apparent", "true", "fast", "bennett"

        Returns
        -------
        refraction : ndarray
            Refraction in radians, same shape as altitudes
        """
        if mode not in self.TABLE_MODES:
            raise ValueError(f"Unknown mode '{mode}'. Available: {self.TABLE_MODES}")

        alts = np.asarray(altitudes, dtype=float)

        if mode == "fast":
            return np.asarray(self.fast(alts), dtype=float)
        if mode == "bennett":
            return np.asarray(
                fast_apparent_refraction(
                    alts,
                    pressure_mbar=self.config.weather.pressure_mbar,
                    temp_c=self.config.weather.temperature_c,
                ),
                dtype=float,
            )

        func = self.apparent if mode == "apparent" else self.true
        table = np.array([func(a) for a in alts.ravel()], dtype=float)
        return table.reshape(alts.shape)

    def __repr__(self) -> str:
        return f"RefractionEngine(config={self.config!r})"
