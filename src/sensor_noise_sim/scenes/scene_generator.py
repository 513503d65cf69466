"""
scene_generator.py — synthetic irradiance targets for the noise pipeline (float32 [0..1])

WHAT THIS MODULE PROVIDES
-------------------------
Small generators for the targets a sensor characterization needs:
  • Flat field    — uniform level; per-pixel noise statistics, photon transfer
  • Gradient      — monotonic ramp; tone response, quantization, saturation onset
  • Checkerboard  — two levels side by side; contrast and clipping checks

RETURNS
-------
All functions return a 2-D NumPy array, dtype float32, normalized to [0, 1],
which is exactly what simulate_sensor_noise() expects as irradiance.

REFERENCES (short list)
-----------------------
• EMVA Standard 1288 (2021) — flat-field series for photon transfer.
• Janesick, J. R. (2007). Photon Transfer: DN → λ. SPIE Press.
"""

from __future__ import annotations
import numpy as np


# -----------------------------------------------------------------------------
# Utilities
# -----------------------------------------------------------------------------
def _normalize(img: np.ndarray) -> np.ndarray:
    """Convert to float32 and clamp to [0, 1]."""
    img = img.astype(np.float32, copy=False)
    return np.clip(img, 0.0, 1.0)


# -----------------------------------------------------------------------------
# Scene generators
# -----------------------------------------------------------------------------
def generate_flat_field(
    width: int = 256,
    height: int = 256,
    level: float = 0.5,
) -> np.ndarray:
    """
    Uniform irradiance at `level` (clamped to [0, 1]).

    Returns
    -------
    flat_img : (height, width) float32 array in [0, 1]
    """
    return _normalize(np.full((int(height), int(width)), float(level)))


def generate_gradient_scene(
    width: int = 512,
    height: int = 512,
    horizontal: bool = True,
) -> np.ndarray:
    """
    Unit gradient from 0 to 1.

    Parameters
    ----------
    width, height : int
        Output size.
    horizontal : bool
        If True, gradient increases along +x; else along +y.

    Returns
    -------
    grad_img : (height, width) float32 array in [0, 1]
    """
    if horizontal:
        grad = np.tile(np.linspace(0, 1, int(width), dtype=np.float32), (int(height), 1))
    else:
        grad = np.tile(np.linspace(0, 1, int(height), dtype=np.float32)[:, None], (1, int(width)))
    return _normalize(grad)


def generate_checker(
    size: int = 512,
    square_px: int = 16,
    low: float = 0.0,
    high: float = 1.0,
) -> np.ndarray:
    """
    Checkerboard alternating between `low` and `high` irradiance.

    Returns
    -------
    checker_img : (size, size) float32 array in [0, 1]
    """
    h = w = int(size)
    y, x = np.indices((h, w))
    tiles = ((x // max(int(square_px), 1)) + (y // max(int(square_px), 1))) % 2
    img = np.where(tiles == 1, float(high), float(low))
    return _normalize(img)


# -----------------------------------------------------------------------------
# Dispatcher (public API)
# -----------------------------------------------------------------------------
def generate_scene(kind: str, size: int, **kwargs) -> np.ndarray:
    """
    Dispatch target generation by name.

    kind : 'flat' | 'gradient' | 'checker'  (aliases: 'flat_field', 'checkerboard')
    size : square canvas size (pixels)

    Raises ValueError on an unknown kind.
    """
    k = (kind or "").lower().strip()

    if k in ("flat", "flat_field"):
        return generate_flat_field(
            width=int(size),
            height=int(size),
            level=float(kwargs.get("level", 0.5)),
        )

    if k == "gradient":
        return generate_gradient_scene(
            width=int(size),
            height=int(size),
            horizontal=bool(kwargs.get("horizontal", True)),
        )

    if k in ("checker", "checkerboard"):
        return generate_checker(
            size=int(size),
            square_px=int(kwargs.get("square_px", 16)),
            low=float(kwargs.get("low", 0.0)),
            high=float(kwargs.get("high", 1.0)),
        )

    raise ValueError(f"Unknown scene kind: {kind!r}. Use 'flat', 'gradient' or 'checker'.")
