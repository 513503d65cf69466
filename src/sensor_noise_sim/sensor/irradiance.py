"""
irradiance.py — validation and normalization of the input irradiance image.

The pipeline expects a 2-D grayscale array whose values are normalized to
[0, 1]. Two normalization policies are available:

  • CLIP    (default) negative values are reported once and clipped to 0;
            the image is otherwise left untouched.
  • RESCALE the image is shifted by its minimum and divided by its new
            maximum, so the darkest pixel maps to 0 and the brightest to 1.

Either way the result must lie in [0, 1] or NormalizationError is raised.
Colour-to-grayscale reduction belongs to whoever loads the image.
"""

from __future__ import annotations
from enum import Enum
from typing import List
import numpy as np

from .diagnostics import Diagnostic, DiagnosticCode, report
from .errors import NormalizationError, ShapeError


class NormalizationMode(str, Enum):
    CLIP = "clip"
    RESCALE = "rescale"


def validate_irradiance(
    image_irrad,
    diagnostics: List[Diagnostic],
    mode: NormalizationMode | str = NormalizationMode.CLIP,
) -> np.ndarray:
    """
    Check shape, apply the normalization policy, and assert membership in [0, 1].

    Parameters
    ----------
    image_irrad : array-like
        Raw irradiance, expected 2-D and normalized to [0, 1].
    diagnostics : list
        Per-call diagnostics list; a NEGATIVE_INPUT entry is appended (once)
        when any value is negative.
    mode : NormalizationMode | str
        'clip' or 'rescale'.

    Returns
    -------
    irradiance : float64 ndarray, same shape, values in [0, 1]
        Always a fresh array; the caller's input is never modified.

    Raises
    ------
    ShapeError
        Input is not exactly 2-dimensional, or its rows are ragged.
    NormalizationError
        Values remain outside [0, 1] (NaN included) after normalization.
    """
    mode = NormalizationMode(mode)
    try:
        img = np.array(image_irrad, dtype=np.float64)
    except ValueError as exc:
        raise ShapeError("Image rows must all have the same length") from exc

    if img.ndim != 2:
        raise ShapeError(f"Image should be grayscale (2-D), got {img.ndim} dimension(s)")

    if img.size and np.nanmin(img) < 0:
        min_value = float(np.nanmin(img))
        report(diagnostics, Diagnostic(
            DiagnosticCode.NEGATIVE_INPUT,
            f"Image contains negative values (min={min_value:.4f}). "
            "This may indicate improper normalization.",
            min_value,
        ))
        if mode is NormalizationMode.CLIP:
            img = np.maximum(img, 0.0)

    if mode is NormalizationMode.RESCALE and img.size:
        img = img - np.nanmin(img)
        peak = np.nanmax(img)
        # Constant image: everything sits at the minimum, i.e. 0.
        if peak > 0:
            img = img / peak

    if not np.all((img >= 0.0) & (img <= 1.0)):
        raise NormalizationError(
            f"Irradiance must lie in [0, 1] after '{mode.value}' normalization "
            f"(range [{np.nanmin(img):.4f}, {np.nanmax(img):.4f}])"
        )
    return img
