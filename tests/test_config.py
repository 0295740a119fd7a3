"""
Tests for refraction configuration loading and validation.
"""

import json
import logging
import math

import pytest
import yaml

from atmo_refract.atmosphere.model import AtmosphereConstants
from atmo_refract.config import (
    ConfigurationManager,
    LoadedConfiguration,
    ObserverSite,
    OpticalParameters,
    RefractionConfig,
    SolverSettings,
    WeatherConditions,
)


class TestRefractionConfig:
    """Tests for RefractionConfig."""

    def test_defaults(self):
        """Standard conditions by default."""
        config = RefractionConfig()
        assert config.site == ObserverSite(height_m=0.0, latitude_rad=0.0)
        assert config.weather == WeatherConditions(10.0, 1010.0, 0.5)
        assert config.optics == OpticalParameters(0.55, 6.5e-3, 1e-4)
        assert config.solver == SolverSettings()
        assert config.validate() == []

    def test_temperature_kelvin(self):
        """Celsius converts to Kelvin."""
        assert WeatherConditions(temperature_c=0.0).temperature_k == pytest.approx(273.15)

    def test_from_parameters(self):
        """The flat keyword form fills every section."""
        config = RefractionConfig.from_parameters(
            height_m=100.0, lat_rad=0.5, temp_c=20.0, pressure_mbar=990.0,
            rel_humidity=0.2, wavelength_um=0.7, lapse_rate_k_per_m=0.006, tol_rad=1e-6,
        )
        assert config.site.height_m == 100.0
        assert config.site.latitude_rad == 0.5
        assert config.weather.pressure_mbar == 990.0
        assert config.optics.wavelength_um == 0.7
        assert config.optics.tolerance_rad == 1e-6

    def test_from_dict_latitude_deg(self):
        """Latitude may be given in degrees."""
        config = RefractionConfig.from_dict({"site": {"latitude_deg": 45.0}})
        assert config.site.latitude_rad == pytest.approx(math.pi / 4)

    def test_from_dict_latitude_rad(self):
        """Latitude may be given in radians."""
        config = RefractionConfig.from_dict({"site": {"latitude_rad": 0.3}})
        assert config.site.latitude_rad == 0.3

    def test_from_dict_partial(self):
        """Missing sections fall back to defaults."""
        config = RefractionConfig.from_dict({"weather": {"pressure_mbar": 800}})
        assert config.weather.pressure_mbar == 800.0
        assert config.weather.temperature_c == 10.0
        assert config.optics == OpticalParameters()

    def test_dict_round_trip(self):
        """to_dict and from_dict are inverse."""
        config = RefractionConfig.from_dict(ConfigurationManager.create_example_config())
        again = RefractionConfig.from_dict(config.to_dict())
        assert again.site.latitude_rad == pytest.approx(config.site.latitude_rad)
        assert again.weather == config.weather
        assert again.optics == config.optics
        assert again.solver == config.solver

    def test_json_round_trip(self, tmp_path):
        """Configuration survives a JSON file."""
        config = RefractionConfig.from_parameters(height_m=500.0, temp_c=-5.0)
        path = tmp_path / "config.json"
        config.to_json(str(path))

        loaded = RefractionConfig.from_json(str(path))
        assert loaded.site.height_m == 500.0
        assert loaded.weather.temperature_c == -5.0
        assert json.loads(path.read_text())["site"]["height_m"] == 500.0

    def test_from_yaml(self, tmp_path):
        """Configuration loads from YAML."""
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({
            "site": {"height_m": 2400, "latitude_deg": 28.76},
            "weather": {"temperature_c": 5, "pressure_mbar": 770},
            "optics": {"wavelength_um": 0.65},
        }))

        config = RefractionConfig.from_yaml(str(path))
        assert config.site.height_m == 2400.0
        assert config.weather.pressure_mbar == 770.0
        assert config.optics.wavelength_um == 0.65

    def test_empty_yaml(self, tmp_path):
        """An empty YAML file gives the defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert RefractionConfig.from_yaml(str(path)) == RefractionConfig()

    def test_hashable(self):
        """Configurations can be used as cache keys."""
        assert hash(RefractionConfig()) == hash(RefractionConfig())


class TestValidation:
    """Tests for RefractionConfig.validate."""

    @pytest.mark.parametrize("kwargs, fragment", [
        ({"pressure_mbar": -1.0}, "pressure"),
        ({"rel_humidity": 1.01}, "humidity"),
        ({"wavelength_um": -0.5}, "wavelength"),
        ({"temp_c": -273.15}, "absolute zero"),
        ({"lat_rad": -1.6}, "latitude"),
        ({"height_m": 11000.0}, "tropopause"),
        ({"height_m": -7.0e6}, "at least"),
        ({"lapse_rate_k_per_m": 0.0}, "lapse rate"),
        ({"tol_rad": 0.0}, "tolerance"),
    ])
    def test_single_problem(self, kwargs, fragment):
        """Each bad parameter is reported with its name."""
        errors = RefractionConfig.from_parameters(**kwargs).validate()
        assert len(errors) == 1
        assert fragment in errors[0]

    def test_solver_counts(self):
        """Non-positive solver counts are rejected."""
        config = RefractionConfig(solver=SolverSettings(
            initial_intervals=3, max_refinements=0, newton_iterations=0, max_iterations=0,
        ))
        assert len(config.validate()) == 4

    def test_boundaries_accepted(self):
        """Limits of the accepted ranges are valid."""
        config = RefractionConfig.from_parameters(
            height_m=-500.0, pressure_mbar=0.0, rel_humidity=1.0, lat_rad=math.pi / 2,
            tol_rad=1e-8,
        )
        assert config.validate() == []


class TestConfigurationManager:
    """Tests for ConfigurationManager."""

    def test_load_dict(self):
        """Dictionaries load and derive atmosphere coefficients."""
        loaded = ConfigurationManager().load_config({"weather": {"pressure_mbar": 900}})

        assert isinstance(loaded, LoadedConfiguration)
        assert loaded.is_valid
        assert loaded.validation_errors == []
        assert isinstance(loaded.constants, AtmosphereConstants)

    def test_load_relative_path(self, tmp_path):
        """Relative paths resolve against base_path."""
        manager = ConfigurationManager(base_path=str(tmp_path))
        manager.save_example_config("example.json")

        loaded = manager.load_config("example.json")
        assert loaded.is_valid
        assert loaded.config.site.height_m == 2400.0

    def test_load_yaml_path(self, tmp_path):
        """YAML files load through the manager."""
        path = tmp_path / "site.yml"
        path.write_text(yaml.safe_dump({"site": {"height_m": 100}}))

        loaded = ConfigurationManager().load_config(str(path))
        assert loaded.config.site.height_m == 100.0

    def test_invalid_config(self, caplog):
        """Invalid configurations are flagged and logged, not raised."""
        with caplog.at_level(logging.WARNING, logger="atmo_refract"):
            loaded = ConfigurationManager().load_config(
                {"weather": {"pressure_mbar": -10, "relative_humidity": 3}}
            )

        assert not loaded.is_valid
        assert loaded.constants is None
        assert len(loaded.validation_errors) == 2
        assert "Configuration validation error" in caplog.text

    def test_unsupported_format(self, tmp_path):
        """Unknown file extensions are rejected."""
        with pytest.raises(ValueError, match="Unsupported"):
            ConfigurationManager(base_path=str(tmp_path)).load_config("config.toml")

    def test_invalid_source_type(self):
        """Only dicts and paths are accepted."""
        with pytest.raises(TypeError):
            ConfigurationManager().load_config(42)

    def test_resolve_path(self, tmp_path):
        """Absolute paths pass through, relative ones are joined."""
        manager = ConfigurationManager(base_path=str(tmp_path))
        assert manager.resolve_path("a/b.json") == (tmp_path / "a" / "b.json").resolve()
        assert manager.resolve_path(str(tmp_path / "c.json")) == tmp_path / "c.json"

    def test_example_config_valid(self):
        """The example configuration passes validation."""
        example = ConfigurationManager.create_example_config()
        assert RefractionConfig.from_dict(example).validate() == []
