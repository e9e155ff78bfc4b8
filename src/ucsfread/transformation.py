"""Conversions between point indices along an axis and physical frequency units.

Each axis header carries its calibration: the spectrometer frequency for the nucleus (MHz), the spectral width (Hz) and the center of the axis (ppm).
Index 0 lies at the high frequency edge of the spectrum, the center is reached at index `npoints / 2`:

$$ \\nu = SW \\left(\\frac{1}{2} - \\frac{i}{N}\\right), \\qquad \\delta = \\delta_c + \\frac{\\nu}{SF} $$

These conversions are per axis and independent of how the data is tiled.
"""

import math
from typing import NamedTuple

import numpy as np

from .data_models import AxisHeader
from .errors import OutOfRange


class AxisValue(NamedTuple):
    """Position of a point along an axis, in Hz relative to the center and in ppm."""

    hz: float
    ppm: float


def index_to_hz(axis: AxisHeader, index):
    """Frequency offset from the axis center (Hz) of point `index`. Accepts scalars and arrays."""
    return axis.spectral_width * (0.5 - index / axis.npoints)


def hz_to_ppm(axis: AxisHeader, hz):
    if axis.spectrometer_frequency == 0:
        raise ValueError(f"Axis {axis.nucleus} has no spectrometer frequency, cannot convert to ppm")
    return axis.center + hz / axis.spectrometer_frequency


def index_to_ppm(axis: AxisHeader, index):
    """Chemical shift (ppm) of point `index`. Accepts scalars and arrays."""
    return hz_to_ppm(axis, index_to_hz(axis, index))


def axis_value(axis: AxisHeader, index: int) -> AxisValue:
    hz = float(index_to_hz(axis, index))
    return AxisValue(hz=hz, ppm=float(hz_to_ppm(axis, hz)))


def _resolve_index(axis: AxisHeader, position: float, strict: bool) -> int:
    if math.isnan(position):
        raise OutOfRange(f"Position on axis {axis.nucleus} is not a number")
    if math.isinf(position):
        if strict:
            raise OutOfRange(f"Position is infinite, outside axis {axis.nucleus} with {axis.npoints} points")
        return 0 if position < 0 else axis.npoints - 1
    index = math.floor(position + 0.5)
    if 0 <= index < axis.npoints:
        return index
    if strict:
        raise OutOfRange(f"Position resolves to index {index}, outside axis {axis.nucleus} with {axis.npoints} points")
    return min(max(index, 0), axis.npoints - 1)


def hz_to_index(axis: AxisHeader, hz: float, strict: bool = False) -> int:
    """Index of the point nearest to frequency offset `hz`.

    Args:
        axis (AxisHeader):          The axis to resolve the position on.
        hz (float):                 Frequency offset from the axis center, in Hz.
        strict (bool, optional):    Raise `OutOfRange` for positions outside the axis instead of clamping to the nearest edge, default=False.
    """
    if axis.spectral_width == 0:
        raise ValueError(f"Axis {axis.nucleus} has a spectral width of 0, cannot resolve a position")
    return _resolve_index(axis, axis.npoints * (0.5 - hz / axis.spectral_width), strict)


def ppm_to_index(axis: AxisHeader, ppm: float, strict: bool = False) -> int:
    """Index of the point nearest to chemical shift `ppm`, see [`hz_to_index`][ucsfread.transformation.hz_to_index]."""
    if axis.spectrometer_frequency == 0:
        raise ValueError(f"Axis {axis.nucleus} has no spectrometer frequency, cannot convert from ppm")
    return hz_to_index(axis, (ppm - axis.center) * axis.spectrometer_frequency, strict=strict)


def axis_scale(axis: AxisHeader, unit: str = "ppm") -> np.ndarray:
    """Position of every point along `axis`, either in `"ppm"` or in `"hz"`."""
    index = np.arange(axis.npoints)
    if unit == "ppm":
        return index_to_ppm(axis, index)
    if unit == "hz":
        return index_to_hz(axis, index)
    raise ValueError(f"Unknown unit {unit!r}, expected 'ppm' or 'hz'")
