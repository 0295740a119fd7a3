"""
Tests for the validation suite.
"""

import json
import logging

import pytest
import numpy as np

import atmo_refract
from atmo_refract.validation import (
    BENCHMARKS,
    ValidationResult,
    ValidationSuite,
    compute_errors,
    get_benchmark,
    list_validations,
    register_validation,
    run_all_validations,
    run_validation,
)


class TestBenchmarks:
    """Tests for benchmark lookup and error metrics."""

    def test_get_benchmark(self):
        """Known benchmarks carry a source and tolerance."""
        bench = get_benchmark("horizon_refraction")
        assert "source" in bench
        assert bench["tolerance"] > 0

    def test_unknown_benchmark(self):
        """Unknown names raise KeyError listing the available ones."""
        with pytest.raises(KeyError, match="Available"):
            get_benchmark("nonexistent")

    def test_units(self):
        """Every benchmark names the units of its errors."""
        for name, bench in BENCHMARKS.items():
            assert bench["units"], name

    def test_compute_errors(self):
        """Error metrics of a simple difference."""
        errors = compute_errors(np.array([1.0, 2.0, 4.0]), np.array([1.0, 2.0, 3.0]))
        assert errors["max_error"] == pytest.approx(1.0)
        assert errors["mean_error"] == pytest.approx(1.0 / 3.0)
        assert errors["rms_error"] == pytest.approx(np.sqrt(1.0 / 3.0))

    def test_compute_errors_shape_mismatch(self):
        """Computed and reference values must line up."""
        with pytest.raises(ValueError, match="Shape mismatch"):
            compute_errors([1.0, 2.0], [1.0])


class TestValidationRegistry:
    """Tests for the registered validations."""

    def test_registered(self):
        """Every benchmark has a validation."""
        names = list_validations()
        for name in BENCHMARKS:
            assert name in names

    def test_register_needs_benchmark(self):
        """Validations can only be registered against a known benchmark."""
        with pytest.raises(KeyError):
            register_validation("no_such_benchmark")

    def test_result_units(self):
        """Results carry the units of their benchmark."""
        result = run_validation("horizon_refraction")
        assert result.units == "arcmin"
        assert result.margin == pytest.approx(result.tolerance - result.max_error)
        assert "arcmin" in str(result)

    def test_unknown_validation(self):
        """Unknown validations raise KeyError."""
        with pytest.raises(KeyError):
            run_validation("nonexistent")

    @pytest.mark.parametrize("name", [
        "horizon_refraction",
        "saemundsson_agreement",
        "tropopause_continuity",
        "inverse_round_trip",
    ])
    def test_validation_passes(self, name):
        """Each validation passes against its benchmark."""
        result = run_validation(name)
        assert isinstance(result, ValidationResult)
        assert result.passed, str(result)


class TestValidationSuite:
    """Tests for ValidationSuite."""

    @pytest.fixture
    def suite(self):
        suite = ValidationSuite()
        suite.add_result(ValidationResult(
            name="a", passed=True, max_error=0.1, mean_error=0.05, rms_error=0.06,
            tolerance=0.2, units="arcsec", source="x",
            details={"computed_arcsec": [1.0, 2.0]},
        ))
        suite.add_result(ValidationResult(
            name="b", passed=False, max_error=3.0, mean_error=2.0, rms_error=2.1,
            tolerance=1.0, units="arcmin", source="y",
        ))
        return suite

    def test_counts(self, suite):
        """Pass/fail bookkeeping."""
        assert suite.n_tests == 2
        assert suite.n_passed == 1
        assert suite.n_failed == 1
        assert not suite.all_passed

    def test_version(self, suite):
        """The suite records the package version."""
        assert suite.package_version == atmo_refract.__version__

    def test_save(self, suite, tmp_path):
        """Units and details survive the JSON export."""
        path = tmp_path / "results.json"
        suite.save(str(path))

        data = json.loads(path.read_text())
        assert data["n_tests"] == 2
        assert data["results"][0]["units"] == "arcsec"
        assert data["results"][0]["details"] == {"computed_arcsec": [1.0, 2.0]}
        assert data["results"][1]["name"] == "b"
        assert data["results"][1]["units"] == "arcmin"

    def test_load(self, suite, tmp_path):
        """A saved suite reads back unchanged."""
        path = tmp_path / "results.json"
        suite.save(str(path))

        loaded = ValidationSuite.load(str(path))
        assert loaded.results == suite.results
        assert loaded.timestamp == suite.timestamp

    def test_print_summary(self, suite, capsys):
        """The summary reports units and failures."""
        suite.print_summary()
        out = capsys.readouterr().out
        assert "3 arcmin" in out
        assert "tol 0.2 arcsec" in out
        assert "1 validation(s) FAILED" in out

    def test_run_all(self):
        """The full suite passes, with every result in its benchmark's units."""
        suite = run_all_validations(verbose=False)
        assert suite.n_tests == len(BENCHMARKS)
        assert suite.all_passed
        for result in suite.results:
            assert result.units == BENCHMARKS[result.name]["units"]

    def test_run_all_records_errors(self, monkeypatch, caplog):
        """A validation that raises is logged and recorded as failed."""
        from atmo_refract.errors import ConvergenceError
        from atmo_refract.validation import benchmarks

        def broken():
            raise ConvergenceError("inverse", 50, 1e-3)

        monkeypatch.setitem(benchmarks._VALIDATIONS, "inverse_round_trip", broken)
        with caplog.at_level(logging.WARNING, logger="atmo_refract"):
            suite = run_all_validations(verbose=False)

        failed = [r for r in suite.results if not r.passed]
        assert [r.name for r in failed] == ["inverse_round_trip"]
        assert failed[0].units == "arcsec"
        assert "did not converge" in failed[0].details["error"]
        assert "ConvergenceError" in caplog.text
