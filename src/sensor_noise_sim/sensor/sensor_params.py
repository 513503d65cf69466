"""
sensor_params.py — sensor parameter record, physical defaults, and resolver.

WHAT THIS MODULE DOES
---------------------
Holds the flat record of scalar constants that drive the noise pipeline and
merges a caller's partial parameter set with documented physical defaults:

    field                 default          units
    pixel_size            10               μm
    exposure_time         0.1              s
    quantum_efficiency    0.7              -
    full_well_capacity    30000            e⁻
    gain                  2                ADU/e⁻
    read_noise            5                e⁻ RMS
    dark_current          0.1              e⁻/s
    adc_max               2**14 - 1        ADU
    h                     6.62607015e-34   J·s
    c                     299792458        m/s
    wavelength            550e-9           m

Resolution is a pure defaulting merge: fields supplied by the caller are never
overwritten and no range checks happen there. Range checks live in
SensorParams.validate(), which the pipeline calls once per run.

REFERENCES (short list)
-----------------------
• Janesick, J. R. (2007). Photon Transfer: DN → λ. SPIE Press.
  (Full well, conversion gain, read noise, dark current conventions)
• Holst, G. C. (2011). CMOS/CCD Sensors and Camera Systems (2e). SPIE Press.
"""

from __future__ import annotations
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Tuple

from .errors import ParameterError

# Physical constants
H = 6.626_070_15e-34      # Planck [J·s]
C = 2.997_924_58e8        # Speed of light [m/s]


# -----------------------------------------------------------------------------
# Parameters
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class SensorParams:
    """
    Grouped sensor parameters (monochrome, single effective wavelength).

    Geometry & exposure
    -------------------
    pixel_size : pixel pitch in micrometers (square pixel assumed)
    exposure_time : integration time (seconds)

    Photo-electron conversion
    -------------------------
    quantum_efficiency : probability an incident photon yields an electron (0..1]
    full_well_capacity : saturation capacity (electrons)

    Readout & ADC
    -------------
    gain : ADU per electron
    read_noise : read noise RMS (electrons)
    dark_current : mean dark electrons per second
    adc_max : largest ADC code

    Photon energy
    -------------
    h, c, wavelength : Planck's constant, speed of light, effective wavelength (m)

    Reproducibility & bookkeeping
    -----------------------------
    seed : RNG seed used when the caller injects no random source (int or None)
    image_shape : (rows, cols) of the image being processed; set by the resolver
    """
    # Geometry & exposure
    pixel_size: float = 10.0
    exposure_time: float = 0.1

    # Conversion & well
    quantum_efficiency: float = 0.7
    full_well_capacity: float = 30000.0

    # Readout, ADC
    gain: float = 2.0
    read_noise: float = 5.0
    dark_current: float = 0.1
    adc_max: float = float(2 ** 14 - 1)

    # Photon energy
    h: float = H
    c: float = C
    wavelength: float = 550e-9

    # Reproducibility & bookkeeping
    seed: int | None = None
    image_shape: Tuple[int, int] | None = None

    @property
    def pixel_area(self) -> float:
        """Pixel area in m² (pixel_size is in μm)."""
        return (self.pixel_size * 1e-6) ** 2

    @property
    def photon_energy(self) -> float:
        """Energy of one photon at the effective wavelength, hc/λ [J]."""
        return self.h * self.c / self.wavelength

    def validate(self) -> "SensorParams":
        """
        Check the physical ranges the pipeline relies on.

        Raises ParameterError on the first violation; returns self otherwise so
        the call can be chained after resolve_params().
        """
        if not (0.0 < self.quantum_efficiency <= 1.0):
            raise ParameterError(
                f"quantum_efficiency must lie in (0, 1], got {self.quantum_efficiency!r}"
            )
        for name in ("full_well_capacity", "gain", "adc_max"):
            value = getattr(self, name)
            if not value > 0:
                raise ParameterError(f"{name} must be > 0, got {value!r}")
        if not float(self.adc_max).is_integer():
            raise ParameterError(f"adc_max is an ADC code and must be whole, got {self.adc_max!r}")
        for name in ("exposure_time", "read_noise", "dark_current"):
            value = getattr(self, name)
            if not value >= 0:
                raise ParameterError(f"{name} must be >= 0, got {value!r}")
        return self


# Field-name -> default value, in declaration order (the public defaults table).
DEFAULT_PARAMS: Dict[str, Any] = {
    f.name: f.default for f in fields(SensorParams) if f.name not in ("seed", "image_shape")
}

_FIELD_NAMES = frozenset(f.name for f in fields(SensorParams))


# -----------------------------------------------------------------------------
# Resolver
# -----------------------------------------------------------------------------
def resolve_params(
    partial: SensorParams | Mapping[str, Any] | None = None,
    image_shape: Tuple[int, ...] | None = None,
) -> SensorParams:
    """
    Merge a partial parameter set with the physical defaults.

    Parameters
    ----------
    partial : SensorParams | mapping | None
        Any subset of the SensorParams field names. None (or an empty mapping)
        yields the full default record. A SensorParams is taken as complete.
    image_shape : tuple | None
        Dimensions of the image about to be processed. Stamped on the record so
        downstream stages can draw noise arrays of matching shape.

    Returns
    -------
    params : SensorParams
        Every unset field at its default, every supplied field unchanged.

    Raises
    ------
    ParameterError
        If the mapping names a field SensorParams does not have.
    """
    if partial is None:
        params = SensorParams()
    elif isinstance(partial, SensorParams):
        params = partial
    else:
        unknown = sorted(set(partial) - _FIELD_NAMES)
        if unknown:
            raise ParameterError(f"Unknown sensor parameter(s): {', '.join(unknown)}")
        params = SensorParams(**dict(partial))

    if image_shape is not None:
        params = replace(params, image_shape=tuple(int(n) for n in image_shape))
    return params
