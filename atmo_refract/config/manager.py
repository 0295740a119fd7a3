"""
Configuration Manager for refraction calculations.

Handles loading and validation of observing conditions, and derives the
atmosphere coefficients for configurations that pass validation.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass

from atmo_refract.config.settings import RefractionConfig

logger = logging.getLogger(__name__)


@dataclass
class LoadedConfiguration:
    """Container for a loaded and validated configuration.

    Attributes:
        config: The refraction configuration
        constants: Atmosphere coefficients (None when validation failed)
        is_valid: Whether the configuration passed validation
        validation_errors: List of validation error messages
    """
    config: RefractionConfig
    constants: Optional[Any]
    is_valid: bool
    validation_errors: list


class ConfigurationManager:
    """Loads refraction configurations from dicts, JSON or YAML files.

    Example:
        >>> manager = ConfigurationManager()
        >>> loaded = manager.load_config({
        ...     "site": {"height_m": 2400, "latitude_deg": 28.76},
        ...     "weather": {"temperature_c": 5, "pressure_mbar": 770},
        ... })
        >>> if loaded.is_valid:
        ...     print(f"n0 - 1 = {loaded.constants.a7 - loaded.constants.a8:.3e}")
    """

    def __init__(self, base_path: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            base_path: Base path for relative file references.
                      Defaults to current working directory.
        """
        self.base_path = Path(base_path) if base_path else Path.cwd()

    def load_config(
        self,
        config_source: Union[Dict[str, Any], str, Path],
    ) -> LoadedConfiguration:
        """Load and validate a configuration.

        Args:
            config_source: Configuration dictionary, JSON path, or YAML path

        Returns:
            LoadedConfiguration with parsed config and atmosphere coefficients

        Raises:
            ValueError: If the file extension is not .json, .yaml or .yml
            TypeError: If config_source is neither a dict nor a path
        """
        if isinstance(config_source, dict):
            config = RefractionConfig.from_dict(config_source)
        elif isinstance(config_source, (str, Path)):
            path = self.resolve_path(str(config_source))
            if path.suffix.lower() == '.json':
                config = RefractionConfig.from_json(str(path))
            elif path.suffix.lower() in ('.yaml', '.yml'):
                config = RefractionConfig.from_yaml(str(path))
            else:
                raise ValueError(f"Unsupported config file format: {path.suffix}")
            logger.info(f"Loaded refraction configuration from {path}")
        else:
            raise TypeError(f"Invalid config source type: {type(config_source)}")

        validation_errors = config.validate()
        is_valid = len(validation_errors) == 0

        if is_valid:
            # Deferred: the atmosphere model itself depends on config.settings
            from atmo_refract.atmosphere.model import atmosphere_constants
            constants = atmosphere_constants(config.site, config.weather, config.optics)
        else:
            constants = None
            for error in validation_errors:
                logger.warning(f"Configuration validation error: {error}")

        return LoadedConfiguration(
            config=config,
            constants=constants,
            is_valid=is_valid,
            validation_errors=validation_errors,
        )

    def resolve_path(self, path: str) -> Path:
        """Resolve a path relative to base_path.

        Args:
            path: Relative or absolute path string

        Returns:
            Resolved absolute Path
        """
        p = Path(path)
        if p.is_absolute():
            return p
        return (self.base_path / p).resolve()

    @staticmethod
    def create_example_config() -> Dict[str, Any]:
        """Create an example configuration dictionary.

        Returns:
            Configuration for a high-altitude observatory in red light
        """
        return {
            "site": {
                "height_m": 2400.0,
                "latitude_deg": 28.76,
            },
            "weather": {
                "temperature_c": 5.0,
                "pressure_mbar": 770.0,
                "relative_humidity": 0.3,
            },
            "optics": {
                "wavelength_um": 0.65,
                "lapse_rate_k_per_m": 0.0065,
                "tolerance_rad": 1.0e-6,
            },
            "solver": {
                "initial_intervals": 16,
                "max_refinements": 12,
                "newton_iterations": 4,
                "newton_tolerance_m": 1.0e-6,
                "max_iterations": 50,
            },
        }

    def save_example_config(self, output_path: str) -> None:
        """Save an example configuration file.

        Args:
            output_path: Path to save the example JSON
        """
        example = self.create_example_config()
        with open(self.resolve_path(output_path), 'w') as f:
            json.dump(example, f, indent=2)
        logger.info(f"Saved example configuration to {output_path}")
