"""
metrics_module.py — noise analysis helpers for the sensor pipeline

WHAT THIS MODULE PROVIDES
-------------------------
• estimate_snr_patch(electrons, patch_slice)
    Mean, standard deviation and SNR on a uniform patch.

• compute_snr(img_noisy, img_ref)
    Frame-level SNR in dB against a noise-free reference (for instance the
    pipeline run with NoiselessSource).

• predicted_electron_variance(irradiance, params)
    Expected per-pixel electron variance before clipping:
        QE·P + dark_current·t + read_noise²

• frame_stack_variance(frames)
    Per-pixel variance over repeated captures of the same scene.

• fit_photon_transfer(means, variances)
    Straight-line photon-transfer fit, variance = slope·mean + intercept.
    In electrons the slope is ≈ 1 (Poisson) and sqrt(intercept) estimates the
    read noise.

LEARNING NOTES
--------------
• A photon-transfer curve (PTC) plots variance against mean signal over a
  series of flat fields. The shot-noise region is linear with unit slope in
  electrons; the intercept is the signal-independent floor.
• Fits are only valid below saturation: full-well clipping collapses the
  variance near FWC.

REFERENCES (short list)
-----------------------
• Janesick, J. R. (2007). Photon Transfer: DN → λ. SPIE Press.
• EMVA Standard 1288 (2021). Characterization of Image Sensors and Cameras.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence, Tuple
import numpy as np
from scipy import stats

from ..sensor.sensor_model import irradiance_to_photons
from ..sensor.sensor_params import SensorParams


# -----------------------------------------------------------------------------
# Patch & frame SNR
# -----------------------------------------------------------------------------
def estimate_snr_patch(electrons: np.ndarray, patch_slice) -> Tuple[float, float, float]:
    """
    Estimate (mean, std, SNR) on a uniform patch of the electrons image.

    For a shot-noise-limited region:
      std ≈ sqrt(mean)  and  SNR ≈ sqrt(mean).
    """
    patch = electrons[patch_slice].astype(np.float64)
    mu = float(np.mean(patch))
    sigma = float(np.std(patch, ddof=1))
    snr = mu / sigma if sigma > 0 else np.inf
    return mu, sigma, snr


def compute_snr(img_noisy: np.ndarray, img_ref: np.ndarray) -> float:
    """
    Frame-level SNR in dB:  20 * log10( ||ref||_2 / ||ref - noisy||_2 ).

    Both images should share the same scale (e.g. both pipeline signals).
    """
    ref = np.asarray(img_ref, dtype=np.float64)
    y = np.asarray(img_noisy, dtype=np.float64)

    num = np.linalg.norm(ref.ravel())
    den = np.linalg.norm((ref - y).ravel()) + 1e-12  # avoid divide-by-zero

    return float(20.0 * np.log10(num / den))


# -----------------------------------------------------------------------------
# Noise variance: model vs measurement
# -----------------------------------------------------------------------------
def predicted_electron_variance(irradiance: np.ndarray, p: SensorParams) -> np.ndarray:
    """Shot + dark + read variance per pixel (electrons², pre-clipping, DIRECT mapping)."""
    photons = irradiance_to_photons(np.asarray(irradiance, dtype=np.float64), p)
    return p.quantum_efficiency * photons + p.dark_current * p.exposure_time + p.read_noise ** 2


def frame_stack_variance(frames: Sequence[np.ndarray]) -> np.ndarray:
    """
    Per-pixel sample variance (ddof=1) across repeated frames.

    frames : sequence of equally shaped 2-D arrays, at least two of them
    """
    stack = np.stack([np.asarray(f, dtype=np.float64) for f in frames], axis=0)
    if stack.shape[0] < 2:
        raise ValueError("frame_stack_variance needs at least two frames.")
    return np.var(stack, axis=0, ddof=1)


# -----------------------------------------------------------------------------
# Photon transfer
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class PhotonTransferFit:
    slope: float
    intercept: float
    read_noise_e: float
    r_value: float


def fit_photon_transfer(means: Sequence[float], variances: Sequence[float]) -> PhotonTransferFit:
    """
    Least-squares line through (mean, variance) points of a photon-transfer series.

    read_noise_e is sqrt(max(intercept, 0)); it is in the units of `means`
    (electrons when the series was measured in electrons).
    """
    means = np.asarray(means, dtype=np.float64)
    variances = np.asarray(variances, dtype=np.float64)
    if means.shape != variances.shape or means.size < 2:
        raise ValueError("fit_photon_transfer needs matching mean/variance series of length >= 2.")

    fit = stats.linregress(means, variances)
    return PhotonTransferFit(
        slope=float(fit.slope),
        intercept=float(fit.intercept),
        read_noise_e=float(np.sqrt(max(fit.intercept, 0.0))),
        r_value=float(fit.rvalue),
    )
