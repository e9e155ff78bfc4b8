"""Map coordinates of data points to byte offsets in the file and back.

A coordinate is split per axis into the index of the tile it falls in and its local index within that tile.
Both the tile grid and the cells within a tile are laid out row-major, with the first axis varying slowest:

    linear = ((idx[0] * extent[1] + idx[1]) * extent[2] + idx[2]) ...

so the byte offset of a data point is

    data_start_offset + tile_linear * tile_byte_size + local_linear * sample_byte_size

Padding cells are physically present in the file, but are not part of the coordinate space: addressing them raises [`OutOfRange`][ucsfread.errors.OutOfRange].
"""

import operator
from typing import Sequence

from .data_models import TileGeometry
from .errors import OutOfRange


def row_major_index(index: Sequence[int], extent: Sequence[int]) -> int:
    """Linear position of a multi-dimensional `index` in a row-major block of shape `extent`."""
    linear = 0
    for i, n in zip(index, extent):
        linear = linear * n + i
    return linear


def unravel_row_major(linear: int, extent: Sequence[int]) -> tuple[int, ...]:
    """Inverse of [`row_major_index`][ucsfread.addressing.row_major_index]."""
    index = []
    for n in reversed(extent):
        linear, i = divmod(linear, n)
        index.append(i)
    return tuple(reversed(index))


def check_coordinate(geometry: TileGeometry, coord: Sequence[int]) -> tuple[int, ...]:
    """Validate that `coord` addresses a real data point, returning it as a tuple of ints."""
    try:
        coord = tuple(operator.index(c) for c in coord)
    except TypeError as err:
        raise OutOfRange(f"Coordinate {coord!r} must hold integer point indices") from err
    if len(coord) != geometry.ndim:
        raise OutOfRange(f"Expected a coordinate with {geometry.ndim} axes, got {len(coord)}")
    for d, (c, n) in enumerate(zip(coord, geometry.npoints)):
        if not 0 <= c < n:
            raise OutOfRange(f"Coordinate {coord} is outside axis {d}, which has {n} points")
    return coord


def split_coordinate(geometry: TileGeometry, coord: Sequence[int]) -> tuple[tuple[int, ...], tuple[int, ...]]:
    """Decompose a coordinate into its `(tile_index, local_index)` per axis."""
    pairs = [divmod(c, size) for c, size in zip(coord, geometry.tilesize)]
    return tuple(t for t, _ in pairs), tuple(i for _, i in pairs)


def tile_offset(geometry: TileGeometry, tile_index: Sequence[int]) -> int:
    """Byte offset of the first cell of the tile at `tile_index`."""
    return geometry.data_start_offset + row_major_index(tile_index, geometry.tile_count) * geometry.tile_byte_size


def coordinate_to_offset(geometry: TileGeometry, coord: Sequence[int]) -> int:
    """Byte offset of the first component of the data point at `coord`.

    Raises:
        OutOfRange: When `coord` has the wrong number of axes or lies outside `[0, npoints)` on any axis.
    """
    coord = check_coordinate(geometry, coord)
    tile_index, local_index = split_coordinate(geometry, coord)
    local_linear = row_major_index(local_index, geometry.tilesize)
    return tile_offset(geometry, tile_index) + local_linear * geometry.sample_byte_size


def offset_to_coordinate(geometry: TileGeometry, offset: int) -> tuple[int, ...]:
    """Coordinate of the data point whose first component starts at byte `offset`.

    Raises:
        OutOfRange: When the offset lies outside the data section, is not aligned to a data point, or points into a padding cell.
    """
    relative = offset - geometry.data_start_offset
    if not 0 <= relative < geometry.data_byte_size:
        raise OutOfRange(f"Offset {offset} is outside the data section")
    tile_linear, within = divmod(relative, geometry.tile_byte_size)
    local_linear, misalignment = divmod(within, geometry.sample_byte_size)
    if misalignment:
        raise OutOfRange(f"Offset {offset} does not point at the start of a data point")
    tile_index = unravel_row_major(tile_linear, geometry.tile_count)
    local_index = unravel_row_major(local_linear, geometry.tilesize)
    coord = tuple(t * size + i for t, size, i in zip(tile_index, geometry.tilesize, local_index))
    if any(c >= n for c, n in zip(coord, geometry.npoints)):
        raise OutOfRange(f"Offset {offset} points into padding at {coord}")
    return coord
