"""
sensor_noise_sim.sensor
-----------------------
Physics-based sensor noise pipeline:
    irradiance → photons → electrons (shot, dark, read noise) → DN → signal,
with full-well clipping, ADC clamping, and two photon-mapping strategies.
"""

from .diagnostics import Diagnostic, DiagnosticCode
from .errors import NormalizationError, ParameterError, SensorNoiseError, ShapeError, ZeroPowerError
from .irradiance import NormalizationMode
from .random_source import NoiselessSource, NoiseSource
from .sensor_model import PhotonMapping

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "NoiseSource",
    "NoiselessSource",
    "NormalizationError",
    "NormalizationMode",
    "ParameterError",
    "PhotonMapping",
    "SensorNoiseError",
    "ShapeError",
    "ZeroPowerError",
]
