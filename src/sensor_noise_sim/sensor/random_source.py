"""
random_source.py — injectable random-number capability for the noise stages.

The noise stages never touch a process-wide generator. They draw from a
NoiseSource handed in by the caller, which makes a fixed seed reproduce a run
bit for bit and keeps separate calls independent of each other.

numpy.random.Generator already provides the two methods the stages need
(poisson, normal), so the usual source is simply np.random.default_rng(seed).
"""

from __future__ import annotations
from typing import Protocol, Tuple, runtime_checkable
import numpy as np


@runtime_checkable
class NoiseSource(Protocol):
    """Poisson and Gaussian samplers with numpy.random.Generator signatures."""

    def poisson(self, lam=1.0, size=None): ...

    def normal(self, loc=0.0, scale=1.0, size=None): ...


class NoiselessSource:
    """
    Zero-variance source: every draw returns the distribution mean.

    Poisson(λ) → λ and Normal(μ, σ) → μ. Running the pipeline with this source
    renders the expected (noise-free) sensor response, which is useful as a
    reference image and for exact checks of the deterministic stages.
    """

    def poisson(self, lam=1.0, size: Tuple[int, ...] | None = None) -> np.ndarray:
        lam = np.asarray(lam, dtype=np.float64)
        return np.broadcast_to(lam, size if size is not None else lam.shape).copy()

    def normal(self, loc=0.0, scale=1.0, size: Tuple[int, ...] | None = None) -> np.ndarray:
        loc = np.asarray(loc, dtype=np.float64)
        return np.broadcast_to(loc, size if size is not None else loc.shape).copy()


def make_noise_source(source=None, seed: int | None = None) -> NoiseSource:
    """
    Turn the caller's `source` argument into something the stages can draw from.

    None     → np.random.default_rng(seed)
    int      → np.random.default_rng(source)
    otherwise the object is used as-is (it must provide poisson and normal)
    """
    if source is None:
        return np.random.default_rng(seed)
    if isinstance(source, (bool, np.bool_)):
        raise TypeError("noise_source must be a seed, a generator or None, not a bool")
    if isinstance(source, (int, np.integer)):
        return np.random.default_rng(int(source))
    if not isinstance(source, NoiseSource):
        raise TypeError(
            f"noise_source must provide poisson() and normal(), got {type(source).__name__}"
        )
    return source
