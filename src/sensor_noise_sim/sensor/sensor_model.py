"""
sensor_model.py — CCD/CMOS noise pipeline: normalized irradiance → digitized signal.

WHAT THIS MODULE DOES
---------------------
Simulates the physical signal chain of an image sensor on a normalized
irradiance image, one element-wise stage after another:
  0) Validation: 2-D input, normalization policy, values in [0, 1]
  1) Irradiance → expected photon count (direct or total-power referenced)
  2) Shot noise: Poisson(photons * QE) electrons per pixel
  3) Dark signal: Poisson(dark_current * t), irradiance independent
  4) Read noise: additive zero-mean Gaussian with RMS read_noise
  5) Full-well clipping to [0, full_well_capacity]
  6) ADC: V = round(E * gain), clamp to adc_max, S = V / adc_max

PHOTON MAPPING
--------------
• DIRECT (default): photon_flux = I * FWC / QE;  P = photon_flux * t.
  An irradiance of 1.0 therefore yields FWC electrons on average after an
  exposure of one second.
• TOTAL_POWER: a target photon total is derived from a reference "total power"
  (default: the image's own sum) and redistributed over the image's spatial
  profile. Two images with the same reference power receive the same photon
  total regardless of their peak intensities.

LEARNING NOTES
--------------
• Shot and dark noise are Poisson ⇒ var = mean; read noise adds σ_r² on top:
      var(E) ≈ QE·P + dark_current·t + read_noise²   (before clipping)
• Rounding happens before the ADC clamp, so a voltage that rounds to exactly
  adc_max reads as 1.0.

REFERENCES (short list)
-----------------------
• Janesick, J. R. (2007). Photon Transfer: DN → λ. SPIE Press.
• Holst, G. C. (2011). CMOS/CCD Sensors and Camera Systems (2e). SPIE Press.
• EMVA Standard 1288 (2021). Characterization of Image Sensors and Cameras.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Mapping, Tuple
import numpy as np

from .diagnostics import Diagnostic, DiagnosticCode, report
from .errors import ParameterError, ShapeError, ZeroPowerError
from .irradiance import NormalizationMode, validate_irradiance
from .random_source import NoiseSource, make_noise_source
from .sensor_params import SensorParams, resolve_params

logger = logging.getLogger(__name__)


class PhotonMapping(str, Enum):
    DIRECT = "direct"
    TOTAL_POWER = "total_power"


@dataclass
class SensorNoiseResult:
    """
    Everything one pipeline run produced.

    photons : expected photon count per pixel (float64)
    electrons : electrons after all noise and full-well clipping (float64)
    dn : integer ADC codes in [0, adc_max] (int64)
    signal : dn / adc_max, values in [0, 1] (float64)
    params : the resolved SensorParams actually used
    diagnostics : recoverable warnings raised during the run
    """
    photons: np.ndarray
    electrons: np.ndarray
    dn: np.ndarray
    signal: np.ndarray
    params: SensorParams
    diagnostics: List[Diagnostic] = field(default_factory=list)


# -----------------------------------------------------------------------------
# Irradiance → Photons
# -----------------------------------------------------------------------------
def irradiance_to_photons(irradiance: np.ndarray, p: SensorParams) -> np.ndarray:
    """
    Direct per-pixel mapping of normalized irradiance to expected photons:
        photon_flux = I * (full_well_capacity / quantum_efficiency)
        photons     = photon_flux * exposure_time
    Deterministic; no noise is introduced here.
    """
    photon_flux = irradiance * (p.full_well_capacity / p.quantum_efficiency)
    return photon_flux * p.exposure_time


def check_photon_budget(
    photons: np.ndarray,
    target: float,
    diagnostics: List[Diagnostic],
    tolerance: float = 0.01,
) -> Diagnostic | None:
    """
    Report a PHOTON_BUDGET diagnostic if sum(photons) misses `target` by more
    than `tolerance` (relative). A zero target is never flagged.
    """
    if target == 0:
        return None
    actual = float(np.sum(photons))
    rel_err = abs(actual - target) / abs(target)
    if rel_err <= tolerance:
        return None
    return report(diagnostics, Diagnostic(
        DiagnosticCode.PHOTON_BUDGET,
        f"Photon count error: expected {target:.1f}, got {actual:.1f} ({100 * rel_err:.1f}% error)",
        rel_err,
    ))


def irradiance_to_photons_total_power(
    irradiance: np.ndarray,
    p: SensorParams,
    diagnostics: List[Diagnostic],
    reference_total_power: float | None = None,
) -> np.ndarray:
    """
    Total-power-referenced photon mapping.

        photons_per_unit_power = (FWC / QE) * t
        target                 = reference_total_power * photons_per_unit_power
        photons                = (I / sum(I)) * target

    Parameters
    ----------
    irradiance : (H, W) validated irradiance in [0, 1]
    p : SensorParams
    diagnostics : per-call list; receives PHOTON_BUDGET if the redistributed
        total drifts more than 1% from the target
    reference_total_power : float | None
        Power the target is referenced to. None uses this image's own sum.

    Raises
    ------
    ZeroPowerError
        The image sums to zero, so it has no spatial distribution.
    ParameterError
        reference_total_power is negative or not finite.
    """
    total_power = float(np.sum(irradiance))
    if total_power == 0:
        raise ZeroPowerError("Image has zero total power - cannot process")
    if reference_total_power is None:
        reference_total_power = total_power
    elif not (np.isfinite(reference_total_power) and reference_total_power >= 0):
        raise ParameterError(
            f"reference_total_power must be finite and >= 0, got {reference_total_power!r}"
        )

    photons_per_unit_power = (p.full_well_capacity / p.quantum_efficiency) * p.exposure_time
    target = float(reference_total_power) * photons_per_unit_power

    photons = (irradiance / total_power) * target
    check_photon_budget(photons, target, diagnostics)
    return photons


# -----------------------------------------------------------------------------
# Photons → Electrons (shot, dark, read noise) and full-well clipping
# -----------------------------------------------------------------------------
def add_electron_noise(photons: np.ndarray, p: SensorParams, rng: NoiseSource) -> np.ndarray:
    """
    Convert photons to electrons and add the three noise sources, in order:

    1) Shot noise: Poisson with mean photons * QE, independent per pixel
    2) Dark signal: Poisson with constant mean dark_current * exposure_time
    3) Read noise: zero-mean Gaussian with σ = read_noise

    Returns the unclipped electron count (float64, same shape as `photons`).
    Negative values are possible here when read noise beats a small mean.
    Dark and read noise arrays are drawn at p.image_shape when the resolver
    stamped one, else at the shape of `photons`.
    """
    shape = p.image_shape if p.image_shape is not None else photons.shape
    if tuple(shape) != photons.shape:
        raise ShapeError(f"Photon array shape {photons.shape} does not match image shape {tuple(shape)}")

    # 1) Shot noise
    electrons = np.asarray(rng.poisson(photons * p.quantum_efficiency), dtype=np.float64)

    # 2) Dark signal
    dark_mean = p.dark_current * p.exposure_time
    electrons = electrons + np.asarray(rng.poisson(dark_mean, size=shape), dtype=np.float64)

    # 3) Read noise
    electrons = electrons + np.asarray(rng.normal(0.0, p.read_noise, size=shape), dtype=np.float64)

    return electrons


def clip_to_full_well(electrons: np.ndarray, p: SensorParams) -> np.ndarray:
    """Clamp electron counts to [0, full_well_capacity] (no negative charge, saturation)."""
    return np.clip(electrons, 0.0, p.full_well_capacity)


# -----------------------------------------------------------------------------
# Electrons → ADC codes → normalized signal
# -----------------------------------------------------------------------------
def quantize(electrons: np.ndarray, p: SensorParams) -> Tuple[np.ndarray, np.ndarray]:
    """
    ADC stage.

        V = round(E * gain)      (round half up; E >= 0)
        V = min(V, adc_max)
        S = V / adc_max

    Rounding precedes the clamp. No zero floor is re-applied since E is
    already non-negative and gain > 0.

    Returns
    -------
    dn : int64 ADC codes
    signal : float64 in [0, 1]
    """
    voltage = np.floor(electrons * p.gain + 0.5)
    voltage = np.minimum(voltage, p.adc_max)
    dn = voltage.astype(np.int64)
    signal = dn / p.adc_max
    return dn, signal


# -----------------------------------------------------------------------------
# Full sensor pipeline
# -----------------------------------------------------------------------------
def run_sensor_pipeline(
    image_irrad,
    params: SensorParams | Mapping[str, Any] | None = None,
    *,
    noise_source: NoiseSource | int | None = None,
    normalization: NormalizationMode | str = NormalizationMode.CLIP,
    photon_mapping: PhotonMapping | str = PhotonMapping.DIRECT,
    reference_total_power: float | None = None,
) -> SensorNoiseResult:
    """
    Full noise pipeline, keeping every intermediate.

    Steps
    -----
    0) Validate the irradiance (shape, normalization policy, [0, 1])
    1) Resolve parameters against the defaults and check their ranges
    2) Irradiance → photons (DIRECT or TOTAL_POWER mapping)
    3) Shot noise, dark signal, read noise
    4) Full-well clipping
    5) ADC quantization and normalization

    Parameters
    ----------
    image_irrad : (H, W) array-like in [0, 1]
    params : partial mapping, SensorParams, or None
        Missing fields take the documented physical defaults.
    noise_source : NoiseSource | int | None
        Random source for the noise draws. An int seeds a fresh
        numpy Generator; None seeds one from params.seed (or the OS when that
        is None as well).
    normalization : 'clip' | 'rescale'
    photon_mapping : 'direct' | 'total_power'
    reference_total_power : float | None
        Only valid with the TOTAL_POWER mapping; passing it with DIRECT
        raises ParameterError.

    Returns
    -------
    SensorNoiseResult

    Raises
    ------
    ShapeError, NormalizationError, ZeroPowerError, ParameterError
    """
    photon_mapping = PhotonMapping(photon_mapping)
    if reference_total_power is not None and photon_mapping is not PhotonMapping.TOTAL_POWER:
        raise ParameterError("reference_total_power requires photon_mapping='total_power'")
    diagnostics: List[Diagnostic] = []

    # 0) Validated
    irradiance = validate_irradiance(image_irrad, diagnostics, normalization)

    # 1) Parameters
    p = resolve_params(params, image_shape=irradiance.shape).validate()
    rng = make_noise_source(noise_source, p.seed)
    logger.debug("Sensor pipeline on %s image, mapping=%s", p.image_shape, photon_mapping.value)

    # 2) Photons
    if photon_mapping is PhotonMapping.TOTAL_POWER:
        photons = irradiance_to_photons_total_power(irradiance, p, diagnostics, reference_total_power)
    else:
        photons = irradiance_to_photons(irradiance, p)

    # 3) Electrons (+dark, +read)
    electrons = add_electron_noise(photons, p, rng)

    # 4) Clipped
    electrons = clip_to_full_well(electrons, p)

    # 5) Voltage → Signal
    dn, signal = quantize(electrons, p)
    if dn.size:
        logger.debug("Sensor pipeline done: DN range [%d .. %d]", int(dn.min()), int(dn.max()))

    return SensorNoiseResult(
        photons=photons,
        electrons=electrons,
        dn=dn,
        signal=signal,
        params=p,
        diagnostics=diagnostics,
    )


def simulate_sensor_noise(
    image_irrad,
    params: SensorParams | Mapping[str, Any] | None = None,
    **kwargs,
) -> np.ndarray:
    """
    Entry point: normalized irradiance → noisy, ADC-normalized sensor signal.

    Accepts the same keyword options as run_sensor_pipeline and returns only
    the final signal (same shape as the input, values in [0, 1]).
    """
    return run_sensor_pipeline(image_irrad, params, **kwargs).signal
