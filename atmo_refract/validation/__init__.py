"""
Validation Suite for atmo_refract
=================================

Automated checks of the refraction model against:

1. Published horizon refraction under standard conditions
2. Saemundsson's closed-form formula at moderate altitudes
3. Internal consistency (tropopause continuity, forward/inverse round trip)

All validations run offline.

Usage
-----
>>> from atmo_refract.validation import run_all_validations
>>> results = run_all_validations()
>>> results.print_summary()
"""

from atmo_refract.validation.benchmarks import (
    BENCHMARKS,
    ValidationResult,
    ValidationSuite,
    compute_errors,
    get_benchmark,
    register_validation,
    run_all_validations,
    run_validation,
    list_validations,
)

from atmo_refract.validation.tests import (
    validate_horizon_refraction,
    validate_saemundsson_agreement,
    validate_tropopause_continuity,
    validate_inverse_round_trip,
)

__all__ = [
    # Main validation interface
    "BENCHMARKS",
    "ValidationResult",
    "ValidationSuite",
    "compute_errors",
    "get_benchmark",
    "register_validation",
    "run_all_validations",
    "run_validation",
    "list_validations",
    # Individual validation tests
    "validate_horizon_refraction",
    "validate_saemundsson_agreement",
    "validate_tropopause_continuity",
    "validate_inverse_round_trip",
]
