"""Tiles of the data section and sequential iteration over all data points.

The data section is read one tile at a time, so a spectrum never needs to fit in memory:

* [`TileSequence`][ucsfread.tiles.TileSequence] iterates over the tiles in storage order, i.e. row-major over the tile grid.
* [`PointSequence`][ucsfread.tiles.PointSequence] iterates over every real data point, tile after tile and row-major within each tile, as `(coordinate, sample)` pairs.

Both sequences are restartable: every call to `iter()` returns a fresh cursor that starts at the first tile and shares no state with other cursors.
A cursor holds at most one tile in memory. When a read fails, the error is raised from `next()` and the cursor is exhausted afterwards.
"""

import logging
from typing import Iterator, Sequence

import numpy as np

from .addressing import tile_offset, unravel_row_major
from .data_models import Real, RealImaginary, SampleKind, TileGeometry
from .geometry import valid_extent
from .source import ByteSource, read_checked
from .structdef import SAMPLE_DTYPE

logger = logging.getLogger(__name__)


class Tile:
    """A single tile, restricted to the data points that are not padding.

    Attributes:
        index (tuple[int, ...]):            Position of the tile in the tile grid.
        axis_starts (tuple[int, ...]):      Coordinate of the first data point of the tile along each axis.
        axis_lengths (tuple[int, ...]):     Number of real data points along each axis, smaller than the tile size for padded tiles.
        data (np.ndarray):                  Sample components, shape `(*axis_lengths, components)`.
    """

    def __init__(self, index: Sequence[int], axis_starts: Sequence[int], data: np.ndarray, kind: SampleKind):
        self.index = tuple(index)
        self.axis_starts = tuple(axis_starts)
        self.axis_lengths = data.shape[:-1]
        self.data = data
        self.kind = kind

    def values(self) -> np.ndarray:
        """The data points as a float32 array, or complex64 for spectra with real and imaginary components."""
        if self.kind is SampleKind.REAL:
            return self.data[..., 0]
        values = np.empty(self.axis_lengths, dtype=np.complex64)
        values.real = self.data[..., 0]
        values.imag = self.data[..., 1]
        return values

    def point(self, local_index: Sequence[int]) -> tuple[tuple[int, ...], Real | RealImaginary]:
        coord = tuple(start + i for start, i in zip(self.axis_starts, local_index))
        return coord, self.kind.sample_type(*self.data[tuple(local_index)].tolist())

    def iter_with_absolute_pos(self) -> Iterator[tuple[tuple[int, ...], Real | RealImaginary]]:
        """Iterate over the data points of this tile with their coordinate in the full spectrum."""
        for local_index in np.ndindex(*self.axis_lengths):
            yield self.point(local_index)

    def __repr__(self):
        return f"Tile(index={self.index}, axis_starts={self.axis_starts}, axis_lengths={self.axis_lengths})"


def read_tile(source: ByteSource, geometry: TileGeometry, tile_index: Sequence[int]) -> Tile:
    """Read the tile at `tile_index` with a single read of `tile_byte_size` bytes."""
    offset = tile_offset(geometry, tile_index)
    logger.debug("Reading tile %s (%d bytes at offset %d)", tuple(tile_index), geometry.tile_byte_size, offset)
    raw = read_checked(source, offset, geometry.tile_byte_size)
    cells = np.frombuffer(raw, dtype=SAMPLE_DTYPE).reshape(*geometry.tilesize, int(geometry.components))
    # padding cells lie beyond the valid extent and are cut off here
    valid = tuple(slice(0, n) for n in valid_extent(geometry, tile_index))
    axis_starts = [t * size for t, size in zip(tile_index, geometry.tilesize)]
    return Tile(tile_index, axis_starts, cells[valid].astype(np.float32), geometry.components)


class TileCursor:
    """Cursor over the tiles of a spectrum, in storage order."""

    def __init__(self, source: ByteSource, geometry: TileGeometry):
        self._source = source
        self._geometry = geometry
        self._next_tile = 0
        self._exhausted = False

    def __iter__(self):
        return self

    def __next__(self) -> Tile:
        if self._exhausted or self._next_tile >= self._geometry.tile_grid_size:
            self._exhausted = True
            raise StopIteration
        tile_index = unravel_row_major(self._next_tile, self._geometry.tile_count)
        try:
            tile = read_tile(self._source, self._geometry, tile_index)
        except Exception:
            self._exhausted = True
            raise
        self._next_tile += 1
        return tile


class PointCursor:
    """Cursor over the real data points of a spectrum.

    Keeps the tile currently being walked resident, together with the iterator over its local indices.
    """

    def __init__(self, source: ByteSource, geometry: TileGeometry):
        self._tiles = TileCursor(source, geometry)
        self._tile: Tile | None = None
        self._local: Iterator[tuple[int, ...]] | None = None

    @property
    def resident_tile(self) -> Tile | None:
        return self._tile

    def __iter__(self):
        return self

    def __next__(self) -> tuple[tuple[int, ...], Real | RealImaginary]:
        while True:
            if self._local is not None:
                local_index = next(self._local, None)
                if local_index is not None:
                    return self._tile.point(local_index)
            self._tile = self._local = None
            # StopIteration and read errors both leave the cursor without a resident tile
            self._tile = next(self._tiles)
            self._local = np.ndindex(*self._tile.axis_lengths)


class TileSequence:
    """Restartable sequence of all tiles of a spectrum."""

    def __init__(self, source: ByteSource, geometry: TileGeometry):
        self._source = source
        self._geometry = geometry

    def __iter__(self) -> TileCursor:
        return TileCursor(self._source, self._geometry)

    def __len__(self):
        return self._geometry.tile_grid_size


class PointSequence:
    """Restartable sequence of `(coordinate, sample)` pairs for every real data point of a spectrum."""

    def __init__(self, source: ByteSource, geometry: TileGeometry):
        self._source = source
        self._geometry = geometry

    def __iter__(self) -> PointCursor:
        return PointCursor(self._source, self._geometry)

    def __len__(self):
        return self._geometry.point_count
