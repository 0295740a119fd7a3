"""
Configuration management for refraction calculations.

This module provides:
- RefractionConfig: Observer, weather, optical and solver settings
- ConfigurationManager: Loading and validation of configurations
"""

from atmo_refract.config.settings import (
    RefractionConfig,
    ObserverSite,
    WeatherConditions,
    OpticalParameters,
    SolverSettings,
)
from atmo_refract.config.manager import ConfigurationManager, LoadedConfiguration

__all__ = [
    "RefractionConfig",
    "ObserverSite",
    "WeatherConditions",
    "OpticalParameters",
    "SolverSettings",
    "ConfigurationManager",
    "LoadedConfiguration",
]
