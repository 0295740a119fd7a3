"""
Refraction configuration data structures.

Defines the observer, weather, optical and solver settings that are
threaded explicitly through every refraction call. All records are frozen,
so they can be used as cache keys and shared between callers.
"""

from dataclasses import dataclass, field
from typing import Dict, Any
import json
import math

import yaml

from atmo_refract.utils.constants import (
    DEG_TO_RAD,
    RAD_TO_DEG,
    HALF_PI,
    ZERO_CELSIUS,
    TROPOPAUSE_HEIGHT,
    MIN_OBSERVER_HEIGHT,
    DEFAULT_TEMPERATURE_C,
    DEFAULT_PRESSURE_MBAR,
    DEFAULT_RELATIVE_HUMIDITY,
    DEFAULT_WAVELENGTH_UM,
    DEFAULT_LAPSE_RATE,
    DEFAULT_TOLERANCE_RAD,
    MIN_TOLERANCE_RAD,
)


@dataclass(frozen=True)
class ObserverSite:
    """Location of the observer.

    Attributes:
        height_m: Height above sea level in metres
        latitude_rad: Geographic latitude in radians
    """
    height_m: float = 0.0
    latitude_rad: float = 0.0


@dataclass(frozen=True)
class WeatherConditions:
    """Ambient conditions at the observer.

    Attributes:
        temperature_c: Air temperature in degrees Celsius
        pressure_mbar: Air pressure in millibar (hPa)
        relative_humidity: Relative humidity as a fraction (0-1)
    """
    temperature_c: float = DEFAULT_TEMPERATURE_C
    pressure_mbar: float = DEFAULT_PRESSURE_MBAR
    relative_humidity: float = DEFAULT_RELATIVE_HUMIDITY

    @property
    def temperature_k(self) -> float:
        """Air temperature in Kelvin."""
        return self.temperature_c + ZERO_CELSIUS


@dataclass(frozen=True)
class OpticalParameters:
    """Wavelength, troposphere lapse rate and requested precision.

    Attributes:
        wavelength_um: Wavelength of the light in micrometres
        lapse_rate_k_per_m: Tropospheric temperature gradient dT/dh; only
            the magnitude is used
        tolerance_rad: Desired precision of the refraction in radians
    """
    wavelength_um: float = DEFAULT_WAVELENGTH_UM
    lapse_rate_k_per_m: float = DEFAULT_LAPSE_RATE
    tolerance_rad: float = DEFAULT_TOLERANCE_RAD


@dataclass(frozen=True)
class SolverSettings:
    """Iteration limits of the numerical core.

    Attributes:
        initial_intervals: Simpson sub-intervals of the first estimate
        max_refinements: Maximum number of interval doublings per layer
        newton_iterations: Newton steps per radius solve
        newton_tolerance_m: Stop Newton early once a step is this small (m)
        max_iterations: Maximum fixed-point iterations of the inverse model
    """
    initial_intervals: int = 16
    max_refinements: int = 12
    newton_iterations: int = 4
    newton_tolerance_m: float = 1e-6
    max_iterations: int = 50


@dataclass(frozen=True)
class RefractionConfig:
    """Complete refraction configuration.

    Example YAML input:
        site: {height_m: 2400, latitude_deg: 28.76}
        weather: {temperature_c: 5, pressure_mbar: 770, relative_humidity: 0.3}
        optics: {wavelength_um: 0.65, tolerance_rad: 1.0e-6}
    """
    site: ObserverSite = field(default_factory=ObserverSite)
    weather: WeatherConditions = field(default_factory=WeatherConditions)
    optics: OpticalParameters = field(default_factory=OpticalParameters)
    solver: SolverSettings = field(default_factory=SolverSettings)

    @classmethod
    def from_parameters(
        cls,
        height_m: float = 0.0,
        lat_rad: float = 0.0,
        temp_c: float = DEFAULT_TEMPERATURE_C,
        pressure_mbar: float = DEFAULT_PRESSURE_MBAR,
        rel_humidity: float = DEFAULT_RELATIVE_HUMIDITY,
        wavelength_um: float = DEFAULT_WAVELENGTH_UM,
        lapse_rate_k_per_m: float = DEFAULT_LAPSE_RATE,
        tol_rad: float = DEFAULT_TOLERANCE_RAD,
    ) -> "RefractionConfig":
        """Build a configuration from the flat keyword interface."""
        return cls(
            site=ObserverSite(height_m=height_m, latitude_rad=lat_rad),
            weather=WeatherConditions(
                temperature_c=temp_c,
                pressure_mbar=pressure_mbar,
                relative_humidity=rel_humidity,
            ),
            optics=OpticalParameters(
                wavelength_um=wavelength_um,
                lapse_rate_k_per_m=lapse_rate_k_per_m,
                tolerance_rad=tol_rad,
            ),
        )

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "RefractionConfig":
        """Create RefractionConfig from a dictionary.

        Missing sections and keys fall back to the defaults. The site
        latitude may be given either as ``latitude_deg`` or ``latitude_rad``.

        Args:
            config_dict: Configuration dictionary

        Returns:
            RefractionConfig instance
        """
        site_dict = config_dict.get("site") or {}
        if "latitude_deg" in site_dict:
            latitude_rad = float(site_dict["latitude_deg"]) * DEG_TO_RAD
        else:
            latitude_rad = float(site_dict.get("latitude_rad", 0.0))

        site = ObserverSite(
            height_m=float(site_dict.get("height_m", 0.0)),
            latitude_rad=latitude_rad,
        )

        weather_dict = config_dict.get("weather") or {}
        weather = WeatherConditions(
            temperature_c=float(weather_dict.get("temperature_c", DEFAULT_TEMPERATURE_C)),
            pressure_mbar=float(weather_dict.get("pressure_mbar", DEFAULT_PRESSURE_MBAR)),
            relative_humidity=float(
                weather_dict.get("relative_humidity", DEFAULT_RELATIVE_HUMIDITY)
            ),
        )

        optics_dict = config_dict.get("optics") or {}
        optics = OpticalParameters(
            wavelength_um=float(optics_dict.get("wavelength_um", DEFAULT_WAVELENGTH_UM)),
            lapse_rate_k_per_m=float(
                optics_dict.get("lapse_rate_k_per_m", DEFAULT_LAPSE_RATE)
            ),
            tolerance_rad=float(optics_dict.get("tolerance_rad", DEFAULT_TOLERANCE_RAD)),
        )

        solver_dict = config_dict.get("solver") or {}
        solver = SolverSettings(
            initial_intervals=int(solver_dict.get("initial_intervals", 16)),
            max_refinements=int(solver_dict.get("max_refinements", 12)),
            newton_iterations=int(solver_dict.get("newton_iterations", 4)),
            newton_tolerance_m=float(solver_dict.get("newton_tolerance_m", 1e-6)),
            max_iterations=int(solver_dict.get("max_iterations", 50)),
        )

        return cls(site=site, weather=weather, optics=optics, solver=solver)

    @classmethod
    def from_json(cls, json_path: str) -> "RefractionConfig":
        """Load configuration from a JSON file.

        Args:
            json_path: Path to JSON configuration file

        Returns:
            RefractionConfig instance
        """
        with open(json_path, 'r') as f:
            config_dict = json.load(f)
        return cls.from_dict(config_dict)

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "RefractionConfig":
        """Load configuration from a YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            RefractionConfig instance
        """
        with open(yaml_path, 'r') as f:
            config_dict = yaml.safe_load(f)
        return cls.from_dict(config_dict or {})

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Configuration as nested dictionary
        """
        return {
            "site": {
                "height_m": self.site.height_m,
                "latitude_deg": self.site.latitude_rad * RAD_TO_DEG,
            },
            "weather": {
                "temperature_c": self.weather.temperature_c,
                "pressure_mbar": self.weather.pressure_mbar,
                "relative_humidity": self.weather.relative_humidity,
            },
            "optics": {
                "wavelength_um": self.optics.wavelength_um,
                "lapse_rate_k_per_m": self.optics.lapse_rate_k_per_m,
                "tolerance_rad": self.optics.tolerance_rad,
            },
            "solver": {
                "initial_intervals": self.solver.initial_intervals,
                "max_refinements": self.solver.max_refinements,
                "newton_iterations": self.solver.newton_iterations,
                "newton_tolerance_m": self.solver.newton_tolerance_m,
                "max_iterations": self.solver.max_iterations,
            },
        }

    def to_json(self, json_path: str, indent: int = 2) -> None:
        """Save configuration to JSON file.

        Args:
            json_path: Output file path
            indent: JSON indentation level
        """
        with open(json_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=indent)

    def validate(self) -> list:
        """Validate configuration parameters.

        Returns:
            List of validation error messages (empty if valid)
        """
        errors = []

        # Site
        if not math.isfinite(self.site.height_m):
            errors.append("observer height must be finite")
        elif self.site.height_m < MIN_OBSERVER_HEIGHT:
            errors.append(
                f"observer height must be at least {MIN_OBSERVER_HEIGHT:.0f} m, "
                f"got {self.site.height_m} m"
            )
        elif self.site.height_m >= TROPOPAUSE_HEIGHT:
            errors.append(
                f"observer height must be below the tropopause "
                f"({TROPOPAUSE_HEIGHT:.0f} m), got {self.site.height_m} m"
            )

        if not abs(self.site.latitude_rad) <= HALF_PI:
            errors.append(
                f"latitude must be between -90 and 90 degrees, "
                f"got {self.site.latitude_rad * RAD_TO_DEG:.3f} deg"
            )

        # Weather
        if not self.weather.temperature_c > -ZERO_CELSIUS:
            errors.append(
                f"temperature must be above absolute zero, got {self.weather.temperature_c} C"
            )

        if not self.weather.pressure_mbar >= 0:
            errors.append(f"pressure cannot be negative, got {self.weather.pressure_mbar} mbar")

        if not 0.0 <= self.weather.relative_humidity <= 1.0:
            errors.append(
                f"relative humidity must be a fraction between 0 and 1, "
                f"got {self.weather.relative_humidity}"
            )

        # Optics
        if not self.optics.wavelength_um > 0:
            errors.append(f"wavelength must be positive, got {self.optics.wavelength_um} um")

        if not abs(self.optics.lapse_rate_k_per_m) > 0:
            errors.append("temperature lapse rate must be non-zero")

        if not self.optics.tolerance_rad >= MIN_TOLERANCE_RAD:
            errors.append(
                f"tolerance must be at least {MIN_TOLERANCE_RAD:g} rad, "
                f"got {self.optics.tolerance_rad:g}"
            )

        # Solver
        if self.solver.initial_intervals < 2 or self.solver.initial_intervals % 2:
            errors.append("initial_intervals must be an even number >= 2")

        if self.solver.max_refinements < 1:
            errors.append("max_refinements must be at least 1")

        if self.solver.newton_iterations < 1:
            errors.append("newton_iterations must be at least 1")

        if self.solver.newton_tolerance_m < 0:
            errors.append("newton_tolerance_m cannot be negative")

        if self.solver.max_iterations < 1:
            errors.append("max_iterations must be at least 1")

        return errors
