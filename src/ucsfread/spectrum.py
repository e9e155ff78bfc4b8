"""Open a UCSF spectrum and access its data points.

[`open_spectrum`][ucsfread.spectrum.open_spectrum] decodes the headers and computes the tile geometry once, and returns a [`Spectrum`][ucsfread.spectrum.Spectrum] handle.
The handle reads data lazily from its byte source: single points with one small read, or all points one tile at a time.

A `Spectrum` holds no mutable state, so it can be shared between threads as long as its byte source supports concurrent reads.
"""

import logging
from pathlib import Path
from typing import Sequence

import numpy as np
import xarray as xr

from . import geometry as _geometry
from .addressing import coordinate_to_offset
from .data_models import AxisHeader, FileHeader, Real, RealImaginary, TileGeometry
from .errors import OutOfRange, TruncatedInput
from .parsing import parse_ucsf_header
from .source import ByteSource, as_byte_source, read_checked
from .structdef import SAMPLE_DTYPE
from .tiles import PointSequence, TileSequence
from .transformation import AxisValue, axis_scale, axis_value, hz_to_index, ppm_to_index

logger = logging.getLogger(__name__)


class Spectrum:
    """Handle on an opened UCSF spectrum.

    Use [`open_spectrum`][ucsfread.spectrum.open_spectrum] (or `Spectrum.open`) rather than constructing it directly.
    """

    def __init__(self, source: ByteSource, header: FileHeader, axes: Sequence[AxisHeader], geometry: TileGeometry):
        self._source = source
        self._header = header
        self._axes = tuple(axes)
        self._geometry = geometry

    @classmethod
    def open(cls, source, *, check_size: bool = True) -> "Spectrum":
        """Decode the headers of `source` and compute its tile geometry.

        Args:
            source:                         A path, bytes-like object, seekable binary file or [`ByteSource`][ucsfread.source.ByteSource].
            check_size (bool, optional):    Verify that the source holds the full tiled data section, default=True.

        Raises:
            MalformedHeader, UnsupportedVersion, TruncatedInput, InvalidGeometry, IoFailure
        """
        source = as_byte_source(source)
        header, axes = parse_ucsf_header(source)
        geometry = _geometry.compute(header, axes)
        if check_size:
            available = source.total_length() - geometry.data_start_offset
            if geometry.data_byte_size > available:
                raise TruncatedInput(
                    f"Data section needs {geometry.data_byte_size} bytes for {geometry.tile_grid_size} tiles, "
                    f"only {available} available"
                )
        logger.debug(
            "Opened %s: npoints=%s, tilesize=%s, %d tiles of %d bytes",
            source,
            geometry.npoints,
            geometry.tilesize,
            geometry.tile_grid_size,
            geometry.tile_byte_size,
        )
        return cls(source, header, axes, geometry)

    @property
    def header(self) -> FileHeader:
        return self._header

    @property
    def axes(self) -> tuple[AxisHeader, ...]:
        return self._axes

    @property
    def geometry(self) -> TileGeometry:
        return self._geometry

    def dimension_count(self) -> int:
        return self._header.dimensions

    def axis(self, d: int) -> AxisHeader:
        if not 0 <= d < len(self._axes):
            raise OutOfRange(f"Spectrum has {len(self._axes)} axes, got axis {d}")
        return self._axes[d]

    def axis_sizes(self) -> list[int]:
        """Number of data points along every axis, usable as the shape of a dense array."""
        return list(self._geometry.npoints)

    def num_tiles(self, d: int) -> int:
        self.axis(d)
        return self._geometry.tile_count[d]

    def tile_is_padded(self, d: int, tile: int) -> bool:
        self.axis(d)
        return _geometry.tile_is_padded(self._geometry, d, tile)

    def tile_padding(self, d: int, tile: int) -> int:
        """Number of padding cells along axis `d` in the `tile`-th tile of that axis."""
        self.axis(d)
        return _geometry.tile_padding(self._geometry, d, tile)

    def point_at(self, coord: Sequence[int]) -> Real | RealImaginary:
        """Value of the data point at `coord`, read with a single read of one sample.

        Raises:
            OutOfRange: When `coord` does not address a real data point.
        """
        offset = coordinate_to_offset(self._geometry, coord)
        raw = read_checked(self._source, offset, self._geometry.sample_byte_size)
        return self._geometry.components.sample_type(*np.frombuffer(raw, dtype=SAMPLE_DTYPE).tolist())

    def iter_points(self) -> PointSequence:
        """All real data points as `(coordinate, sample)` pairs, in storage order."""
        return PointSequence(self._source, self._geometry)

    def tiles(self) -> TileSequence:
        """All tiles in storage order, with their padding removed."""
        return TileSequence(self._source, self._geometry)

    def axis_value_at(self, d: int, index: int) -> AxisValue:
        """Position of point `index` along axis `d`, in Hz and ppm."""
        axis = self.axis(d)
        if not 0 <= index < axis.npoints:
            raise OutOfRange(f"Axis {d} has {axis.npoints} points, got index {index}")
        return axis_value(axis, index)

    def index_for_ppm(self, d: int, ppm: float, strict: bool = False) -> int:
        return ppm_to_index(self.axis(d), ppm, strict=strict)

    def index_for_hz(self, d: int, hz: float, strict: bool = False) -> int:
        return hz_to_index(self.axis(d), hz, strict=strict)

    def axis_scale(self, d: int, unit: str = "ppm") -> np.ndarray:
        return axis_scale(self.axis(d), unit)

    def to_numpy(self) -> np.ndarray:
        """Read the full spectrum into a dense array of shape `axis_sizes()`.

        Real spectra give a float32 array, spectra with real and imaginary components a complex64 array.
        """
        dtype = np.float32 if self._geometry.components == 1 else np.complex64
        data = np.zeros(self._geometry.npoints, dtype=dtype)
        for tile in self.tiles():
            block = tuple(slice(start, start + n) for start, n in zip(tile.axis_starts, tile.axis_lengths))
            data[block] = tile.values()
        return data

    def bounds(self) -> tuple[float, float]:
        """Lowest and highest value among the real data points, using the real part of complex data."""
        low, high = np.inf, -np.inf
        for tile in self.tiles():
            values = tile.data[..., 0]
            low = min(low, float(values.min()))
            high = max(high, float(values.max()))
        return low, high

    def to_xarray(self, name: str | None = None) -> xr.DataArray:
        """Read the full spectrum into a `DataArray` with a ppm coordinate per axis.

        Axes are named `w1`, `w2`, ... in file order, as Sparky does.
        """
        dims = tuple(f"w{d + 1}" for d in range(self.dimension_count()))
        return xr.DataArray(
            self.to_numpy(),
            dims=dims,
            coords={
                dim: (dim, self.axis_scale(d, "ppm"), {"units": "ppm", **axis.model_dump(exclude={"remainder"})})
                for d, (dim, axis) in enumerate(zip(dims, self._axes))
            },
            attrs={
                "format_version": self._header.format_version,
                "components": int(self._header.components),
                "nuclei": [axis.nucleus for axis in self._axes],
            },
            name=name,
        )

    def __repr__(self):
        nuclei = ", ".join(f"{a.nucleus}[{a.npoints}]" for a in self._axes)
        return f"Spectrum({nuclei}, {self._header.components.name})"


def open_spectrum(source, *, check_size: bool = True) -> Spectrum:
    """Open a UCSF spectrum, see [`Spectrum.open`][ucsfread.spectrum.Spectrum.open]."""
    return Spectrum.open(source, check_size=check_size)


def read_ucsf_file(file: Path | str, as_dataarray: bool = True) -> xr.DataArray | Spectrum:
    """Read a UCSF file.

    Returns the full spectrum as an `xarray.DataArray` with ppm coordinates, or the lazy [`Spectrum`][ucsfread.spectrum.Spectrum] handle when `as_dataarray=False`.
    """
    spectrum = open_spectrum(Path(file))
    if not as_dataarray:
        return spectrum
    return spectrum.to_xarray(name=Path(file).stem)
