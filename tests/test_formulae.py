"""
Tests for the closed-form Saemundsson and Bennett formulae.
"""

import math

import pytest
import numpy as np

from atmo_refract import (
    fast_refraction,
    fast_apparent_refraction,
    apparent_refraction,
    InvalidParameterError,
)
from atmo_refract.refraction.formulae import weather_scale
from atmo_refract.utils.constants import MAX_REFRACTION_DEG


def arcsec(rad):
    return np.degrees(rad) * 3600.0


class TestFastRefraction:
    """Tests for Saemundsson's formula."""

    def test_forty_five_degrees(self):
        """About 1 arcmin at 45 deg."""
        assert 59.0 < arcsec(fast_refraction(math.radians(45.0))) < 62.0

    def test_true_horizon(self):
        """About 29 arcmin on the true horizon."""
        assert 28.5 < arcsec(fast_refraction(0.0)) / 60.0 < 29.5

    def test_formula(self):
        """Matches 1.02' cot(h + 10.3/(h + 5.11)) with h in degrees."""
        h = 20.0
        expected = 1.02 / math.tan(math.radians(h + 10.3 / (h + 5.11))) / 60.0
        assert fast_refraction(math.radians(h)) == pytest.approx(math.radians(expected), rel=1e-6)

    def test_clamp_below_floor(self):
        """Held at 0.663455 deg below -1.102 deg."""
        clamped = math.radians(MAX_REFRACTION_DEG)
        assert fast_refraction(math.radians(-2.0)) == pytest.approx(clamped)
        assert fast_refraction(math.radians(-5.11)) == pytest.approx(clamped)
        assert fast_refraction(math.radians(-45.0)) == pytest.approx(clamped)

    def test_clamp_continuous(self):
        """The clamp value matches the formula at the floor."""
        above = fast_refraction(math.radians(-1.101))
        assert math.degrees(above) == pytest.approx(MAX_REFRACTION_DEG, rel=1e-3)

    def test_zenith_is_zero(self):
        """Exactly zero at and beyond +-90 deg."""
        assert fast_refraction(math.pi / 2) == 0.0
        assert fast_refraction(-math.pi / 2) == 0.0
        assert fast_refraction(2.0) == 0.0

    def test_never_negative(self):
        """The fit's small negative values near the zenith are clipped."""
        alts = np.radians(np.linspace(89.0, 89.999, 50))
        assert np.all(fast_refraction(alts) >= 0.0)

    def test_scalar_returns_float(self):
        """Scalar input gives a Python float."""
        assert isinstance(fast_refraction(0.3), float)

    def test_array_input(self):
        """Array input keeps its shape."""
        alts = np.radians([[0.0, 10.0], [45.0, 90.0]])
        r = fast_refraction(alts)
        assert isinstance(r, np.ndarray)
        assert r.shape == (2, 2)
        assert r[1, 1] == 0.0
        assert r[0, 0] > r[0, 1] > r[1, 0] > 0

    def test_pressure_scaling(self):
        """Refraction scales with P / 1010."""
        alt = math.radians(30.0)
        assert fast_refraction(alt, pressure_mbar=505.0) == pytest.approx(0.5 * fast_refraction(alt))

    def test_temperature_scaling(self):
        """Refraction scales with 283 / (273 + T)."""
        alt = math.radians(30.0)
        assert fast_refraction(alt, temp_c=10.0) == pytest.approx(fast_refraction(alt))
        assert fast_refraction(alt, temp_c=-10.0) == pytest.approx(
            fast_refraction(alt) * 283.0 / 263.0
        )

    def test_monotone(self):
        """Non-increasing from the floor to the zenith."""
        alts = np.radians(np.linspace(-1.0, 89.0, 200))
        assert np.all(np.diff(fast_refraction(alts)) <= 0)


class TestFastApparentRefraction:
    """Tests for Bennett's formula."""

    def test_horizon(self):
        """About 34.5 arcmin at the apparent horizon."""
        assert 34.0 < arcsec(fast_apparent_refraction(0.0)) / 60.0 < 35.0

    def test_formula(self):
        """Matches cot(h + 7.31/(h + 4.4)) arcmin with h in degrees."""
        h = 10.0
        expected = 1.0 / math.tan(math.radians(h + 7.31 / (h + 4.4))) / 60.0
        assert fast_apparent_refraction(math.radians(h)) == pytest.approx(
            math.radians(expected), rel=1e-9
        )

    def test_zero_policy(self):
        """Zero below -1.102 deg and at +-90 deg."""
        assert fast_apparent_refraction(math.radians(-1.2)) == 0.0
        assert fast_apparent_refraction(math.radians(-4.4)) == 0.0
        assert fast_apparent_refraction(math.pi / 2) == 0.0
        assert fast_apparent_refraction(math.radians(-1.0)) > 0.0

    def test_never_negative(self):
        """Values near the zenith are clipped at zero."""
        alts = np.radians(np.linspace(89.0, 89.999, 50))
        assert np.all(fast_apparent_refraction(alts) >= 0.0)

    def test_agrees_with_integrated_model(self):
        """Bennett tracks the integrated forward model above 15 deg."""
        for h in (15.0, 30.0, 60.0):
            alt = math.radians(h)
            assert abs(arcsec(fast_apparent_refraction(alt)) - arcsec(apparent_refraction(alt))) < 10.0

    def test_weather_scaling(self):
        """Same pressure and temperature scaling as Saemundsson."""
        alt = math.radians(20.0)
        assert fast_apparent_refraction(alt, pressure_mbar=808.0) == pytest.approx(
            0.8 * fast_apparent_refraction(alt)
        )


class TestWeatherScale:
    """Tests for the weather correction factor."""

    def test_reference_conditions(self):
        """No correction without weather data."""
        assert weather_scale() == 1.0

    def test_combined(self):
        """Pressure and temperature factors multiply."""
        assert weather_scale(1010.0, 10.0) == pytest.approx(1.0)
        assert weather_scale(2020.0, -10.0) == pytest.approx(2.0 * 283.0 / 263.0)

    def test_invalid(self):
        """Unphysical weather is rejected."""
        with pytest.raises(InvalidParameterError):
            weather_scale(pressure_mbar=-1.0)
        with pytest.raises(InvalidParameterError):
            fast_refraction(0.5, temp_c=-300.0)

    @pytest.mark.parametrize("temp_c", [-273.0, -273.1])
    def test_formula_zero_point(self, temp_c):
        """The 273 + T factor must stay positive, even above absolute zero."""
        with pytest.raises(InvalidParameterError, match="closed-form"):
            weather_scale(temp_c=temp_c)
        with pytest.raises(InvalidParameterError):
            fast_refraction(math.radians(10.0), temp_c=temp_c)
        with pytest.raises(InvalidParameterError):
            fast_apparent_refraction(math.radians(10.0), temp_c=temp_c)

    def test_extreme_cold_positive(self):
        """Just above the zero point refraction is large but positive."""
        alt = math.radians(10.0)
        assert fast_refraction(alt, temp_c=-272.9) > 0.0
        assert fast_apparent_refraction(alt, temp_c=-272.9) > 0.0
