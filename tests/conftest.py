"""
Test configuration for `ucsfread`

Spectra are synthesised in memory: a dense array of values is cut into zero padded tiles and written after headers built from the `ctypes` structures.
"""

import pytest
import numpy as np
from ucsfread.structdef import MAGIC, PADDING_FILL, SAMPLE_DTYPE, UCSFAxisHeader, UCSFFileHeader
from ucsfread.errors import IoFailure


def file_header(ndim: int, components: int = 1, version: int = 2) -> UCSFFileHeader:
    header = UCSFFileHeader()
    header.ident = MAGIC
    header.ndim = ndim
    header.ncomponents = components
    header.version = version
    header.remainder[0] = 7  # marker to check the reserved bytes survive decoding
    return header


def axis_header(
    npoints: int,
    tilesize: int,
    nucleus: bytes = b"1H",
    frequency: float = 600.0,
    spectral_width: float = 6000.0,
    center: float = 4.75,
) -> UCSFAxisHeader:
    header = UCSFAxisHeader()
    header.nucleus = nucleus
    header.npoints = npoints
    header.tilesize = tilesize
    header.spectrometer_freq = frequency
    header.spectral_width = spectral_width
    header.center = center
    return header


def dense_values(npoints, components: int = 1) -> np.ndarray:
    """Distinct values for every point, shape `(*npoints, components)`; imaginary parts are negated."""
    real = np.arange(1, int(np.prod(npoints)) + 1, dtype=np.float32).reshape(npoints)
    if components == 1:
        return real[..., np.newaxis]
    return np.stack([real, -real], axis=-1)


def tile_bytes(values: np.ndarray, tilesize) -> bytes:
    """Cut `values` of shape `(*npoints, components)` into row-major tiles, zero padding the boundary tiles."""
    npoints = values.shape[:-1]
    ndim = len(npoints)
    tile_count = [-(-n // s) for n, s in zip(npoints, tilesize)]
    padded = np.full([t * s for t, s in zip(tile_count, tilesize)] + [values.shape[-1]], PADDING_FILL, dtype=SAMPLE_DTYPE)
    padded[tuple(slice(0, n) for n in npoints)] = values
    blocks = padded.reshape([x for t, s in zip(tile_count, tilesize) for x in (t, s)] + [values.shape[-1]])
    order = list(range(0, 2 * ndim, 2)) + list(range(1, 2 * ndim, 2)) + [2 * ndim]
    return blocks.transpose(order).tobytes()


def make_ucsf(npoints, tilesize, components: int = 1, axes=None, values=None) -> bytes:
    values = dense_values(npoints, components) if values is None else values
    axes = axes or [axis_header(n, s) for n, s in zip(npoints, tilesize)]
    raw = bytes(file_header(len(npoints), components))
    raw += b"".join(bytes(axis) for axis in axes)
    return raw + tile_bytes(values, tilesize)


class RecordingSource:
    """In-memory byte source that records every read, and optionally fails after a number of reads."""

    def __init__(self, data: bytes, fail_after: int | None = None):
        self.data = data
        self.reads = []
        self.fail_after = fail_after

    def read_exact(self, offset: int, length: int) -> bytes:
        if self.fail_after is not None and len(self.reads) >= self.fail_after:
            raise IoFailure(offset, length, "simulated failure")
        self.reads.append((offset, length))
        if offset + length > len(self.data):
            raise IoFailure(offset, length, "read past end")
        return self.data[offset : offset + length]

    def total_length(self) -> int:
        return len(self.data)


@pytest.fixture(scope="session")
def ucsf_factory():
    return make_ucsf


@pytest.fixture(scope="session")
def padded_2d():
    """2D spectrum of 4x4 points in 3x3 tiles: 4 tiles, 36 cells, 20 of them padding."""
    return make_ucsf((4, 4), (3, 3))


@pytest.fixture(scope="session")
def hsqc():
    """2D 15N-1H spectrum shaped like a small HSQC, with padding along the direct dimension."""
    axes = [
        axis_header(8, 4, b"15N", 60.833, 1824.818, 117.043),
        axis_header(11, 4, b"1H", 600.283, 3305.2886, 8.2446),
    ]
    return make_ucsf((8, 11), (4, 4), axes=axes)


class FlakySource(RecordingSource):
    """Source that behaves like a remote stream: it fails with its own exception type, or returns short reads, past `data_start`."""

    def __init__(self, data: bytes, data_start: int, error: Exception | None = None, short_by: int = 0):
        super().__init__(data)
        self.data_start = data_start
        self.error = error
        self.short_by = short_by

    def read_exact(self, offset: int, length: int) -> bytes:
        data = super().read_exact(offset, length)
        if offset < self.data_start:
            return data
        if self.error is not None:
            raise self.error
        return data[: len(data) - self.short_by]
