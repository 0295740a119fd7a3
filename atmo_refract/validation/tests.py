"""
Validation Tests
================

Individual validation tests comparing refraction outputs to benchmarks.
"""

import numpy as np

from atmo_refract.validation.benchmarks import (
    ValidationResult,
    get_benchmark,
    compute_errors,
    register_validation,
)


@register_validation("horizon_refraction")
def validate_horizon_refraction() -> ValidationResult:
    """
    Validate refraction at the apparent horizon under standard conditions.

    Benchmark: Explanatory Supplement (1992), about 34.5 arcmin
    """
    from atmo_refract.refraction.engine import apparent_refraction

    benchmark = get_benchmark("horizon_refraction")

    computed = np.degrees(apparent_refraction(np.radians(benchmark["altitude_deg"]))) * 60.0
    reference = benchmark["refraction_arcmin"]

    errors = compute_errors([computed], [reference])

    return ValidationResult.from_errors("horizon_refraction", errors, {
        "computed_arcmin": float(computed),
        "reference_arcmin": reference,
    })


@register_validation("saemundsson_agreement")
def validate_saemundsson_agreement() -> ValidationResult:
    """
    Validate the integrated inverse model against Saemundsson's formula.

    Benchmark: Saemundsson (1986), good to ~0.1 arcmin above 15 deg
    """
    from atmo_refract.refraction.engine import true_refraction
    from atmo_refract.refraction.formulae import fast_refraction

    benchmark = get_benchmark("saemundsson_agreement")

    altitudes = np.radians(benchmark["altitudes_deg"])
    computed = np.degrees([
        true_refraction(a, tol_rad=benchmark["tolerance_rad"]) for a in altitudes
    ]) * 3600.0
    reference = np.degrees(fast_refraction(altitudes)) * 3600.0

    errors = compute_errors(computed, reference)

    return ValidationResult.from_errors("saemundsson_agreement", errors, {
        "altitudes_deg": benchmark["altitudes_deg"],
        "computed_arcsec": computed.tolist(),
        "reference_arcsec": reference.tolist(),
    })


@register_validation("tropopause_continuity")
def validate_tropopause_continuity() -> ValidationResult:
    """
    Validate that temperature and refractive index are continuous at 11 km.

    Benchmark: both layers of the two-layer model must agree at the boundary
    """
    from atmo_refract.atmosphere.model import TwoLayerAtmosphere
    from atmo_refract.config.settings import RefractionConfig

    benchmark = get_benchmark("tropopause_continuity")

    config = RefractionConfig()
    atm = TwoLayerAtmosphere.from_conditions(config.site, config.weather, config.optics)

    rt = atm.troposphere.upper_radius
    below = atm.troposphere.state(rt)
    above = atm.stratosphere.state(rt)

    computed = np.array([above.temperature_k, above.refractive_index])
    reference = np.array([below.temperature_k, below.refractive_index])

    errors = compute_errors(computed, reference)

    return ValidationResult.from_errors("tropopause_continuity", errors, {
        "tropopause_temperature_k": below.temperature_k,
        "tropopause_refractivity": below.refractive_index - 1.0,
    })


@register_validation("inverse_round_trip")
def validate_inverse_round_trip() -> ValidationResult:
    """
    Validate that forward and inverse models are mutually consistent.

    Benchmark: apparent_refraction(h + true_refraction(h)) == true_refraction(h)
    """
    from atmo_refract.refraction.engine import apparent_refraction, true_refraction

    benchmark = get_benchmark("inverse_round_trip")
    tol_rad = benchmark["tolerance_rad"]

    altitudes = np.radians(benchmark["altitudes_deg"])
    reference = np.array([true_refraction(a, tol_rad=tol_rad) for a in altitudes])
    computed = np.array([
        apparent_refraction(a + r, tol_rad=tol_rad) for a, r in zip(altitudes, reference)
    ])

    errors = compute_errors(np.degrees(computed) * 3600.0, np.degrees(reference) * 3600.0)

    return ValidationResult.from_errors("inverse_round_trip", errors, {
        "altitudes_deg": benchmark["altitudes_deg"],
        "true_refraction_arcsec": (np.degrees(reference) * 3600.0).tolist(),
        "apparent_refraction_arcsec": (np.degrees(computed) * 3600.0).tolist(),
    })
