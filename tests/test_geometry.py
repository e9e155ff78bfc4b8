import pytest
from ucsfread.data_models import AxisHeader, FileHeader
from ucsfread.errors import InvalidGeometry, OutOfRange
from ucsfread.geometry import compute, num_tiles, tile_is_padded, tile_padding, valid_extent


def headers(npoints, tilesize, components=1):
    header = FileHeader(ident=b"UCSF NMR", dimensions=len(npoints), components=components, format_version=2)
    axes = [
        AxisHeader(nucleus="1H", npoints=n, tilesize=s, spectrometer_frequency=600.0, spectral_width=6000.0, center=4.7)
        for n, s in zip(npoints, tilesize)
    ]
    return header, axes


def test_padded_example():
    geometry = compute(*headers((4, 4), (3, 3)))
    assert geometry.tile_count == (2, 2)
    assert geometry.tile_grid_size == 4
    assert geometry.tile_cell_count == 9
    assert geometry.tile_byte_size == 36
    assert geometry.sample_byte_size == 4
    assert geometry.data_start_offset == 180 + 2 * 128
    assert geometry.point_count == 16
    assert geometry.padded_size == (6, 6)
    assert geometry.tile_grid_size * geometry.tile_cell_count - geometry.point_count == 20


def test_complex_components():
    geometry = compute(*headers((4, 4), (3, 3), components=2))
    assert geometry.sample_byte_size == 8
    assert geometry.tile_byte_size == 72


def test_tiles_and_padding_per_axis():
    geometry = compute(*headers((512, 257), (128, 64)))
    assert geometry.tile_count == (4, 5)
    assert [tile_padding(geometry, 0, t) for t in range(4)] == [0, 0, 0, 0]
    assert [tile_padding(geometry, 1, t) for t in range(5)] == [0, 0, 0, 0, 63]
    assert not tile_is_padded(geometry, 1, 3)
    assert tile_is_padded(geometry, 1, 4)
    assert valid_extent(geometry, (3, 4)) == (128, 1)
    with pytest.raises(OutOfRange):
        tile_padding(geometry, 1, 5)


def test_tile_larger_than_axis():
    geometry = compute(*headers((5,), (8,)))
    assert geometry.tile_count == (1,)
    assert tile_padding(geometry, 0, 0) == 3
    assert valid_extent(geometry, (0,)) == (5,)


@pytest.mark.parametrize("npoints, tilesize", [((4, 4), (3, 0)), ((0, 4), (3, 3))])
def test_invalid_geometry(npoints, tilesize):
    with pytest.raises(InvalidGeometry):
        compute(*headers(npoints, tilesize))


def test_geometry_overflow():
    with pytest.raises(InvalidGeometry):
        compute(*headers((2**32 - 1,) * 3, (1,) * 3))


def test_num_tiles():
    assert num_tiles(256, 128) == 2
    assert num_tiles(257, 128) == 3
    assert num_tiles(1, 128) == 1
