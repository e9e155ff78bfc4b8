"""Derive the tile layout of the data section from the decoded headers.

The data of a UCSF file is stored as equally sized hyper-rectangular tiles.
When the tile size along an axis does not evenly divide the number of points, the last tile along that axis is padded, so the stored size of an axis is always a multiple of its tile size.

Everything here is pure computation on header values, no bytes are read.
"""

from typing import Sequence

from .data_models import AxisHeader, FileHeader, TileGeometry
from .errors import InvalidGeometry, OutOfRange
from .structdef import AXISHEADERSIZE, FLOAT_SIZE, HEADERSIZE

MAX_ADDRESSABLE = 2**63 - 1
"""Largest byte offset that can be addressed in a file."""


def num_tiles(npoints: int, tilesize: int) -> int:
    """Number of tiles along an axis, rounding up for a padded last tile."""
    return -(-npoints // tilesize)


def compute(header: FileHeader, axes: Sequence[AxisHeader]) -> TileGeometry:
    """Compute the [`TileGeometry`][ucsfread.data_models.TileGeometry] for a spectrum.

    Args:
        header (FileHeader):            The decoded file header.
        axes (Sequence[AxisHeader]):    The decoded axis headers, in file order.

    Raises:
        InvalidGeometry: When an axis has no points or a zero tile size, or when the data section would exceed the addressable range.
    """
    if len(axes) != header.dimensions:
        raise InvalidGeometry(f"Header declares {header.dimensions} axes, got {len(axes)} axis headers")
    for d, axis in enumerate(axes):
        if axis.tilesize == 0:
            raise InvalidGeometry(f"Axis {d} ({axis.nucleus}) has a tile size of 0")
        if axis.npoints == 0:
            raise InvalidGeometry(f"Axis {d} ({axis.nucleus}) has no data points")

    npoints = tuple(axis.npoints for axis in axes)
    tilesize = tuple(axis.tilesize for axis in axes)
    tile_count = tuple(num_tiles(n, s) for n, s in zip(npoints, tilesize))

    tile_grid_size = 1
    for count in tile_count:
        tile_grid_size *= count
    tile_cell_count = 1
    for size in tilesize:
        tile_cell_count *= size
    sample_byte_size = int(header.components) * FLOAT_SIZE
    tile_byte_size = tile_cell_count * sample_byte_size
    data_start_offset = HEADERSIZE + header.dimensions * AXISHEADERSIZE

    if data_start_offset + tile_grid_size * tile_byte_size > MAX_ADDRESSABLE:
        raise InvalidGeometry(
            f"Tile grid of {tile_grid_size} tiles of {tile_byte_size} bytes exceeds the addressable range"
        )

    return TileGeometry(
        npoints=npoints,
        tilesize=tilesize,
        tile_count=tile_count,
        components=header.components,
        tile_grid_size=tile_grid_size,
        tile_cell_count=tile_cell_count,
        tile_byte_size=tile_byte_size,
        sample_byte_size=sample_byte_size,
        data_start_offset=data_start_offset,
    )


def tile_padding(geometry: TileGeometry, axis: int, tile: int) -> int:
    """Number of padding cells along `axis` in the `tile`-th tile of that axis.

    Only the last tile along an axis can carry padding.
    """
    if not 0 <= tile < geometry.tile_count[axis]:
        raise OutOfRange(f"Axis {axis} has {geometry.tile_count[axis]} tiles, got tile index {tile}")
    return max(0, (tile + 1) * geometry.tilesize[axis] - geometry.npoints[axis])


def tile_is_padded(geometry: TileGeometry, axis: int, tile: int) -> bool:
    """Whether the `tile`-th tile along `axis` contains padding cells."""
    return tile_padding(geometry, axis, tile) > 0


def valid_extent(geometry: TileGeometry, tile_index: Sequence[int]) -> tuple[int, ...]:
    """Number of real (non-padding) cells along each axis of the tile at `tile_index`."""
    return tuple(
        min(size, n - t * size) for t, size, n in zip(tile_index, geometry.tilesize, geometry.npoints)
    )
