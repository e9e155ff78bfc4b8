"""Data models describing the decoded header of a UCSF file.

The models are backed by [pydantic](https://docs.pydantic.dev) for validation and serialization, and are frozen: a spectrum is read-only, so its header never changes once decoded.

* [`FileHeader`][ucsfread.data_models.FileHeader]: the 180 byte file header
* [`AxisHeader`][ucsfread.data_models.AxisHeader]: one 128 byte header per dimension
* [`TileGeometry`][ucsfread.data_models.TileGeometry]: tiling derived from the headers, see [`ucsfread.geometry`][ucsfread.geometry]
* [`Real`][ucsfread.data_models.Real] / [`RealImaginary`][ucsfread.data_models.RealImaginary]: the value of a single data point
"""

from enum import IntEnum
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, PositiveInt

from .structdef import UCSFAxisHeader, UCSFFileHeader


class Real(NamedTuple):
    """A data point of a spectrum with a single component per point."""

    real: float


class RealImaginary(NamedTuple):
    """A data point of a spectrum storing real and imaginary components interleaved."""

    real: float
    imag: float


class SampleKind(IntEnum):
    """Number of components stored per data point, as declared in the file header."""

    REAL = 1
    REAL_IMAGINARY = 2

    @property
    def sample_type(self) -> type:
        return Real if self is SampleKind.REAL else RealImaginary


class FileHeader(BaseModel):
    """Top-level header of a UCSF file."""

    model_config = ConfigDict(frozen=True)

    ident: bytes = Field(description="Format identifier, `UCSF NMR`")
    dimensions: PositiveInt = Field(description="Number of axes in the spectrum")
    components: SampleKind = Field(description="Number of float components per data point")
    format_version: int
    remainder: bytes = Field(b"", repr=False, description="Unspecified bytes 14-179, kept verbatim")

    @classmethod
    def from_struct(cls, header: UCSFFileHeader) -> "FileHeader":
        return cls(
            ident=header.ident,
            dimensions=header.ndim,
            components=header.ncomponents,
            format_version=header.version,
            remainder=bytes(header.remainder),
        )


class AxisHeader(BaseModel):
    """Header of a single axis, describing its size, tiling and frequency calibration."""

    model_config = ConfigDict(frozen=True)

    nucleus: str = Field(description="Nucleus name, e.g. `1H`, `13C`, `15N`")
    npoints: NonNegativeInt = Field(description="Number of data points along this axis")
    tilesize: NonNegativeInt = Field(description="Number of data points in a tile along this axis")
    spectrometer_frequency: float = Field(description="Spectrometer frequency for this nucleus (MHz)")
    spectral_width: float = Field(description="Spectral width (Hz)")
    center: float = Field(description="Center of the axis (ppm)")
    remainder: bytes = Field(b"", repr=False, description="Unspecified bytes 32-127, kept verbatim")

    @classmethod
    def from_struct(cls, header: UCSFAxisHeader) -> "AxisHeader":
        nucleus = header.nucleus.split(b"\0", 1)[0].decode("ascii", errors="replace").rstrip()
        return cls(
            nucleus=nucleus,
            npoints=header.npoints,
            tilesize=header.tilesize,
            spectrometer_frequency=header.spectrometer_freq,
            spectral_width=header.spectral_width,
            center=header.center,
            remainder=bytes(header.remainder),
        )


class TileGeometry(BaseModel):
    """Tile layout of the data section, computed once from the headers.

    All per-axis tuples are ordered like the axis headers, first axis slowest varying.
    """

    model_config = ConfigDict(frozen=True)

    npoints: tuple[PositiveInt, ...]
    tilesize: tuple[PositiveInt, ...]
    tile_count: tuple[PositiveInt, ...]
    components: SampleKind
    tile_grid_size: PositiveInt
    tile_cell_count: PositiveInt
    tile_byte_size: PositiveInt
    sample_byte_size: PositiveInt
    data_start_offset: NonNegativeInt

    @property
    def ndim(self) -> int:
        return len(self.npoints)

    @property
    def data_byte_size(self) -> int:
        """Number of bytes the tile data occupies, padding included."""
        return self.tile_grid_size * self.tile_byte_size

    @property
    def point_count(self) -> int:
        """Number of real (non-padding) data points."""
        count = 1
        for n in self.npoints:
            count *= n
        return count

    @property
    def padded_size(self) -> tuple[int, ...]:
        """Size of every axis including the padding of its last tile."""
        return tuple(t * s for t, s in zip(self.tile_count, self.tilesize))
