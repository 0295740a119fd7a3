"""
Validation Benchmarks
=====================

Reference values for the refraction model, the error metrics used to
compare against them, and the records the validation suite reports.

Benchmarks mix quantities (arcminutes at the horizon, arcseconds for the
formula comparisons, kelvin and refractive index at the tropopause), so
every benchmark names its ``units`` and every result carries them into
the printed summary and the JSON export.
"""

import json
import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Callable, Dict, List

import numpy as np

from atmo_refract import __version__
from atmo_refract.errors import RefractionError

logger = logging.getLogger(__name__)


# =============================================================================
# Benchmark Data
# =============================================================================

BENCHMARKS: Dict[str, Dict[str, Any]] = {
    "horizon_refraction": {
        "source": "Explanatory Supplement to the Astronomical Almanac (1992), 3.28",
        # Apparent altitude 0 deg, sea level, 10 C, 1010 mbar
        "altitude_deg": 0.0,
        "refraction_arcmin": 34.5,
        "tolerance": 1.5,
        "units": "arcmin",
    },
    "saemundsson_agreement": {
        "source": "Saemundsson (1986), Sky & Telescope 72, 70",
        "altitudes_deg": [20, 30, 45, 60, 75, 85],
        "tolerance_rad": 1e-6,  # requested precision of the integration
        "tolerance": 10.0,
        "units": "arcsec",
    },
    "tropopause_continuity": {
        "source": "Hohenkerk & Sinclair (1985), HMNAO Technical Note 63",
        "tolerance": 1e-9,
        "units": "K / refractive index",
    },
    "inverse_round_trip": {
        "source": "Model self-consistency",
        "altitudes_deg": [0, 2, 5, 10, 30, 60, 85],
        "tolerance_rad": 1e-6,
        "tolerance": 2.0,
        "units": "arcsec",
    },
}


def get_benchmark(name: str) -> Dict[str, Any]:
    """
    Get benchmark data by name.

    Raises
    ------
    KeyError
        If no benchmark of that name exists
    """
    try:
        return BENCHMARKS[name]
    except KeyError:
        raise KeyError(
            f"Unknown benchmark: {name}. Available: {list(BENCHMARKS)}"
        ) from None


def compute_errors(computed, reference) -> Dict[str, float]:
    """
    Absolute error metrics between computed and reference values.

    Parameters
    ----------
    computed : array_like
        Values from the model
    reference : array_like
        Benchmark values, same shape and units as ``computed``

    Returns
    -------
    errors : dict
        ``max_error``, ``mean_error`` and ``rms_error``

    Raises
    ------
    ValueError
        If the two inputs differ in shape
    """
    computed = np.asarray(computed, dtype=float)
    reference = np.asarray(reference, dtype=float)
    if computed.shape != reference.shape:
        raise ValueError(
            f"Shape mismatch: computed {computed.shape}, reference {reference.shape}"
        )

    diff = np.abs(computed - reference)
    return {
        "max_error": float(diff.max()),
        "mean_error": float(diff.mean()),
        "rms_error": float(np.sqrt(np.mean(diff**2))),
    }


# =============================================================================
# Results
# =============================================================================

@dataclass
class ValidationResult:
    """
    Outcome of one validation against its benchmark.

    Attributes
    ----------
    name : str
        Benchmark name
    passed : bool
        Whether ``max_error`` is within ``tolerance``
    max_error, mean_error, rms_error : float
        Absolute error metrics, in ``units``
    tolerance : float
        Pass/fail threshold, in ``units``
    units : str
        Units of the errors and tolerance
    source : str
        Where the reference values come from
    details : dict
        Computed and reference values behind the metrics
    """
    name: str
    passed: bool
    max_error: float
    mean_error: float
    rms_error: float
    tolerance: float
    units: str
    source: str
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_errors(
        cls,
        name: str,
        errors: Dict[str, float],
        details: Dict[str, Any],
    ) -> "ValidationResult":
        """Judge error metrics against the named benchmark."""
        benchmark = get_benchmark(name)
        return cls(
            name=name,
            passed=errors["max_error"] <= benchmark["tolerance"],
            max_error=errors["max_error"],
            mean_error=errors["mean_error"],
            rms_error=errors["rms_error"],
            tolerance=benchmark["tolerance"],
            units=benchmark["units"],
            source=benchmark["source"],
            details=details,
        )

    @property
    def margin(self) -> float:
        """Tolerance left over after the largest error."""
        return self.tolerance - self.max_error

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ("max_error", "mean_error", "rms_error", "tolerance"):
            data[key] = float(data[key])
        return data

    def __str__(self) -> str:
        status = "PASSED" if self.passed else "FAILED"
        return (
            f"{self.name}: {status}\n"
            f"  Max error: {self.max_error:.4g} {self.units} "
            f"(tolerance {self.tolerance:.4g} {self.units})\n"
            f"  Mean / RMS: {self.mean_error:.4g} / {self.rms_error:.4g} {self.units}\n"
            f"  Benchmark: {self.source}"
        )


@dataclass
class ValidationSuite:
    """Results of a validation run, tagged with the package version."""
    results: List[ValidationResult] = field(default_factory=list)
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
    package_version: str = __version__

    @property
    def n_tests(self) -> int:
        return len(self.results)

    @property
    def n_passed(self) -> int:
        return sum(r.passed for r in self.results)

    @property
    def n_failed(self) -> int:
        return self.n_tests - self.n_passed

    @property
    def all_passed(self) -> bool:
        return self.n_failed == 0

    def add_result(self, result: ValidationResult) -> None:
        self.results.append(result)

    def print_summary(self) -> None:
        """Print one line per validation with errors in their own units."""
        print("\n" + "=" * 60)
        print(f"atmo_refract {self.package_version} validation ({self.timestamp})")
        print(f"{self.n_passed}/{self.n_tests} passed")
        print("-" * 60)
        for r in self.results:
            status = "[PASS]" if r.passed else "[FAIL]"
            print(
                f"{status} {r.name}: max error {r.max_error:.4g} {r.units} "
                f"(tol {r.tolerance:.4g} {r.units})"
            )
        print("=" * 60)
        if not self.all_passed:
            print(f"WARNING: {self.n_failed} validation(s) FAILED")
        print()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "package_version": self.package_version,
            "timestamp": self.timestamp,
            "n_tests": self.n_tests,
            "n_passed": self.n_passed,
            "all_passed": self.all_passed,
            "results": [r.to_dict() for r in self.results],
        }

    def save(self, filepath: str) -> None:
        """Write the suite to a JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> "ValidationSuite":
        """Read a suite written by ``save``."""
        with open(filepath, 'r') as f:
            data = json.load(f)
        return cls(
            results=[ValidationResult(**r) for r in data["results"]],
            timestamp=data["timestamp"],
            package_version=data["package_version"],
        )


# =============================================================================
# Registry and Runner
# =============================================================================

_VALIDATIONS: Dict[str, Callable[[], ValidationResult]] = {}


def register_validation(name: str):
    """Register a validation function for the benchmark ``name``."""
    get_benchmark(name)

    def decorator(func: Callable[[], ValidationResult]):
        _VALIDATIONS[name] = func
        return func
    return decorator


def list_validations() -> List[str]:
    return list(_VALIDATIONS)


def run_validation(name: str) -> ValidationResult:
    """Run the validation registered for ``name``."""
    if name not in _VALIDATIONS:
        raise KeyError(f"Unknown validation: {name}. Available: {list_validations()}")
    return _VALIDATIONS[name]()


def run_all_validations(verbose: bool = True) -> ValidationSuite:
    """
    Run every registered validation.

    A validation whose model call raises is recorded as failed with the
    error message in its details; the remaining validations still run.

    Parameters
    ----------
    verbose : bool
        Print the summary when done

    Returns
    -------
    suite : ValidationSuite
    """
    from atmo_refract.validation import tests  # noqa: F401  (registers validations)

    suite = ValidationSuite()
    for name in list_validations():
        try:
            result = run_validation(name)
        except (RefractionError, ArithmeticError, ValueError) as e:
            logger.warning(f"Validation {name} raised {type(e).__name__}: {e}")
            benchmark = get_benchmark(name)
            result = ValidationResult(
                name=name,
                passed=False,
                max_error=np.inf,
                mean_error=np.inf,
                rms_error=np.inf,
                tolerance=benchmark["tolerance"],
                units=benchmark["units"],
                source=benchmark["source"],
                details={"error": str(e)},
            )
        logger.debug(f"Validation {name}: {'passed' if result.passed else 'failed'}")
        suite.add_result(result)

    if verbose:
        suite.print_summary()
    return suite
