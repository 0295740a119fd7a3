"""
Two-layer refractive-index model of the atmosphere.

Implements the troposphere (polytropic, constant lapse rate) and
stratosphere (isothermal, exponential decay) profiles used for astronomical
refraction, following Hohenkerk & Sinclair (1985).

References
----------
- Hohenkerk, C.Y. & Sinclair, A.T. (1985). The computation of angular
  atmospheric refraction at large zenith angles. HMNAO Technical Note 63.
- Auer, L.H. & Standish, E.M. (2000). Astronomical refraction: computational
  method for all zenith angles. AJ 119, 2472.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache

from atmo_refract.config.settings import (
    ObserverSite,
    WeatherConditions,
    OpticalParameters,
)
from atmo_refract.errors import NumericalError
from atmo_refract.utils.constants import (
    RAD_TO_DEG,
    EARTH_RADIUS,
    GAS_CONSTANT_KMOL,
    DRY_AIR_MOLAR_MASS,
    WATER_VAPOUR_MOLAR_MASS,
    WATER_VAPOUR_EXPONENT,
    WATER_VAPOUR_REFRACTIVITY,
    TROPOPAUSE_HEIGHT,
    STRATOSPHERE_TOP_HEIGHT,
    dry_air_refractivity,
    local_gravity,
)


@dataclass(frozen=True)
class AtmosphereConstants:
    """
    Coefficients of the troposphere model defined at the observer.

    Attributes
    ----------
    a1 : float
        Magnitude of the temperature lapse rate (K/m)
    a2 : float
        g * M_dry / R (K/m), the hydrostatic constant
    a3 : float
        Dry-air exponent a2 / a1
    a4 : float
        Water-vapour pressure exponent
    a5 : float
        Water-vapour pressure correction term (mbar)
    a6 : float
        Corrected total pressure (mbar)
    a7, a8 : float
        Refractivity coefficients of the dry and wet terms
    a9, a10 : float
        Gradient coefficients of the dry and wet terms
    observer_radius : float
        Distance of the observer from the centre of the Earth (m)
    observer_temperature : float
        Temperature at the observer (K)
    """

    a1: float
    a2: float
    a3: float
    a4: float
    a5: float
    a6: float
    a7: float
    a8: float
    a9: float
    a10: float
    observer_radius: float
    observer_temperature: float


@lru_cache(maxsize=128)
def atmosphere_constants(
    site: ObserverSite,
    weather: WeatherConditions,
    optics: OpticalParameters,
) -> AtmosphereConstants:
    """
    Derive the atmosphere coefficients for one set of observing conditions.

    Results are cached on the (frozen, value-equal) input records, so repeated
    altitude queries under the same conditions reuse the same instance.

    Parameters
    ----------
    site : ObserverSite
        Observer height and latitude
    weather : WeatherConditions
        Temperature, pressure and humidity at the observer
    optics : OpticalParameters
        Wavelength and lapse rate

    Returns
    -------
    constants : AtmosphereConstants
    """
    t0 = weather.temperature_k

    a1 = abs(optics.lapse_rate_k_per_m)
    a2 = local_gravity(site.latitude_rad, site.height_m) * DRY_AIR_MOLAR_MASS / GAS_CONSTANT_KMOL
    a3 = a2 / a1
    a4 = WATER_VAPOUR_EXPONENT

    # Partial pressure of water vapour at the observer
    pw0 = weather.relative_humidity * (t0 / 247.1) ** a4

    z1 = dry_air_refractivity(optics.wavelength_um)
    a5 = pw0 * (1.0 - WATER_VAPOUR_MOLAR_MASS / DRY_AIR_MOLAR_MASS) * a3 / (a4 - a3)
    a6 = weather.pressure_mbar + a5
    a7 = z1 * a6 / t0
    a8 = (z1 * a5 + WATER_VAPOUR_REFRACTIVITY * pw0) / t0
    a9 = (a3 - 1.0) * a1 * a7 / t0
    a10 = (a4 - 1.0) * a1 * a8 / t0

    return AtmosphereConstants(
        a1=a1, a2=a2, a3=a3, a4=a4, a5=a5,
        a6=a6, a7=a7, a8=a8, a9=a9, a10=a10,
        observer_radius=EARTH_RADIUS + site.height_m,
        observer_temperature=t0,
    )


@dataclass(frozen=True)
class LayerState:
    """
    Local state of the atmosphere at one radius.

    Attributes
    ----------
    temperature_k : float
        Temperature in Kelvin
    refractive_index : float
        Refractive index n
    dn_dr : float
        Radial gradient of the refractive index (1/m)
    """

    temperature_k: float
    refractive_index: float
    dn_dr: float


def refraction_integrand(radius: float, refractive_index: float, dn_dr: float) -> float:
    """
    Integrand of the refraction integral in zenith angle.

    Parameters
    ----------
    radius : float
        Distance from the centre of the Earth (m)
    refractive_index : float
        Refractive index at radius
    dn_dr : float
        Refractive index gradient at radius (1/m)

    Returns
    -------
    float
        r (dn/dr) / (n + r dn/dr), dimensionless

    Raises
    ------
    NumericalError
        If n + r dn/dr vanishes, which no physical atmosphere produces
    """
    r_dndr = radius * dn_dr
    denominator = refractive_index + r_dndr
    if denominator == 0.0:
        raise NumericalError(
            f"Singular refraction integrand at r={radius:.1f} m "
            f"(n={refractive_index!r}, dn/dr={dn_dr!r})"
        )
    return r_dndr / denominator


class RefractiveLayer(ABC):
    """
    Abstract base class for one spherical shell of the atmosphere.

    Subclasses provide the closed-form profile through ``state``; the
    band of validity is [lower_radius, upper_radius].
    """

    name = "layer"

    def __init__(self, lower_radius: float, upper_radius: float):
        self.lower_radius = lower_radius
        self.upper_radius = upper_radius

    @abstractmethod
    def state(self, radius: float) -> LayerState:
        """
        Get the atmospheric state at a radius.

        Parameters
        ----------
        radius : float
            Distance from the centre of the Earth (m)

        Returns
        -------
        state : LayerState
        """
        pass

    def integrand(self, radius: float) -> float:
        """Refraction integrand evaluated with this layer's profile."""
        s = self.state(radius)
        return refraction_integrand(radius, s.refractive_index, s.dn_dr)

    def zenith_angle(self, radius: float, sk0: float) -> float:
        """
        Zenith angle of the ray where it crosses radius, in degrees.

        Follows from Bouguer's invariant n r sin(z) = sk0.
        """
        n = self.state(radius).refractive_index
        return math.asin(sk0 / (radius * n)) * RAD_TO_DEG

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(lower_radius={self.lower_radius:.1f}, "
            f"upper_radius={self.upper_radius:.1f})"
        )


class TroposphereLayer(RefractiveLayer):
    """
    Polytropic troposphere from the observer up to the tropopause.

    T = T0 - a1 (r - r0), with the refractive index following from the
    hydrostatic equation for a constant lapse rate.
    """

    name = "troposphere"

    def __init__(self, constants: AtmosphereConstants):
        super().__init__(
            lower_radius=constants.observer_radius,
            upper_radius=EARTH_RADIUS + TROPOPAUSE_HEIGHT,
        )
        self.constants = constants

    def state(self, radius: float) -> LayerState:
        c = self.constants
        t0 = c.observer_temperature

        t = t0 - c.a1 * (radius - c.observer_radius)
        ratio = t / t0
        dry = ratio ** (c.a3 - 2.0)
        wet = ratio ** (c.a4 - 2.0)

        n = 1.0 + (c.a7 * dry - c.a8 * wet) * ratio
        dn_dr = -c.a9 * dry + c.a10 * wet

        return LayerState(temperature_k=t, refractive_index=n, dn_dr=dn_dr)


class StratosphereLayer(RefractiveLayer):
    """
    Isothermal stratosphere from the tropopause up to 80 km.

    (n - 1) decays exponentially from its tropopause value with the
    constant b = a2 / T_tropopause.
    """

    name = "stratosphere"

    def __init__(
        self,
        tropopause_radius: float,
        tropopause_temperature: float,
        tropopause_index: float,
        hydrostatic_constant: float,
    ):
        super().__init__(
            lower_radius=tropopause_radius,
            upper_radius=EARTH_RADIUS + STRATOSPHERE_TOP_HEIGHT,
        )
        self.tropopause_temperature = tropopause_temperature
        self.tropopause_index = tropopause_index
        self.decay = hydrostatic_constant / tropopause_temperature

    @classmethod
    def from_troposphere(cls, troposphere: TroposphereLayer) -> "StratosphereLayer":
        """
        Seed the stratosphere with the troposphere evaluated at the tropopause.

        This keeps T and n continuous across the boundary.
        """
        rt = troposphere.upper_radius
        top = troposphere.state(rt)
        return cls(
            tropopause_radius=rt,
            tropopause_temperature=top.temperature_k,
            tropopause_index=top.refractive_index,
            hydrostatic_constant=troposphere.constants.a2,
        )

    def state(self, radius: float) -> LayerState:
        excess = (self.tropopause_index - 1.0) * math.exp(
            -self.decay * (radius - self.lower_radius)
        )
        return LayerState(
            temperature_k=self.tropopause_temperature,
            refractive_index=1.0 + excess,
            dn_dr=-self.decay * excess,
        )


@dataclass(frozen=True)
class TwoLayerAtmosphere:
    """
    Troposphere and stratosphere built for one set of observing conditions.

    Attributes
    ----------
    constants : AtmosphereConstants
    troposphere : TroposphereLayer
    stratosphere : StratosphereLayer
    """

    constants: AtmosphereConstants
    troposphere: TroposphereLayer
    stratosphere: StratosphereLayer

    @classmethod
    def from_conditions(
        cls,
        site: ObserverSite,
        weather: WeatherConditions,
        optics: OpticalParameters,
    ) -> "TwoLayerAtmosphere":
        """Build both layers from the observer's conditions."""
        constants = atmosphere_constants(site, weather, optics)
        troposphere = TroposphereLayer(constants)
        stratosphere = StratosphereLayer.from_troposphere(troposphere)
        return cls(constants=constants, troposphere=troposphere, stratosphere=stratosphere)

    @property
    def layers(self) -> tuple:
        """Layers from the observer upwards."""
        return (self.troposphere, self.stratosphere)
