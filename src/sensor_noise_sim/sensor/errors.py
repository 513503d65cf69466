"""
errors.py — exception taxonomy for the sensor noise pipeline.

Every error is fatal for the call that raised it: the pipeline is a single
synchronous pass, so there is nothing to retry. All classes also derive from
ValueError because each one describes bad input (image or parameters).
"""

from __future__ import annotations


class SensorNoiseError(Exception):
    """Base class for all pipeline errors."""


class ShapeError(SensorNoiseError, ValueError):
    """Irradiance input is not a 2-D (grayscale) array."""


class NormalizationError(SensorNoiseError, ValueError):
    """Irradiance values lie outside [0, 1] after the normalization policy ran."""


class ZeroPowerError(SensorNoiseError, ValueError):
    """Total image power is zero, so no spatial photon distribution exists."""


class ParameterError(SensorNoiseError, ValueError):
    """Unknown parameter name, or a resolved value violating a physical range."""
