import itertools
import numpy as np
import pytest
from hypothesis import given, settings, strategies as st
from conftest import RecordingSource, dense_values, make_ucsf
from ucsfread import open_spectrum
from ucsfread.data_models import Real, RealImaginary
from ucsfread.errors import IoFailure
from ucsfread.tiles import PointSequence, TileSequence


def test_padding_cells_are_skipped(padded_2d):
    spectrum = open_spectrum(padded_2d)
    points = list(spectrum.iter_points())
    assert len(points) == 16
    assert len(spectrum.iter_points()) == 16
    assert sorted(coord for coord, _ in points) == list(itertools.product(range(4), range(4)))
    # padding is zero filled, real values start at 1
    assert all(sample.real > 0 for _, sample in points)


def test_storage_order(padded_2d):
    coords = [coord for coord, _ in open_spectrum(padded_2d).iter_points()]
    assert coords[:9] == list(itertools.product(range(3), range(3)))
    assert coords[9:12] == [(0, 3), (1, 3), (2, 3)]
    assert coords[12:15] == [(3, 0), (3, 1), (3, 2)]
    assert coords[15] == (3, 3)


def test_tile_positions():
    spectrum = open_spectrum(make_ucsf((5, 7), (2, 3)))
    tiles = list(spectrum.tiles())
    assert len(tiles) == len(spectrum.tiles()) == 9
    assert [tile.index for tile in tiles] == list(itertools.product(range(3), range(3)))
    assert [tile.axis_starts for tile in tiles[:4]] == [(0, 0), (0, 3), (0, 6), (2, 0)]
    assert [tile.axis_lengths for tile in tiles] == [
        (2, 3), (2, 3), (2, 1),
        (2, 3), (2, 3), (2, 1),
        (1, 3), (1, 3), (1, 1),
    ]  # fmt: skip
    for tile in tiles:
        for coord, _ in tile.iter_with_absolute_pos():
            for c, start, n in zip(coord, tile.axis_starts, tile.axis_lengths):
                assert start <= c < start + n


def test_sequence_is_restartable(hsqc):
    points = open_spectrum(hsqc).iter_points()
    assert isinstance(points, PointSequence)
    assert list(points) == list(points)


def test_one_tile_resident():
    source = RecordingSource(make_ucsf((6, 6), (3, 3)))
    spectrum = open_spectrum(source)
    header_reads = len(source.reads)
    cursor = iter(spectrum.iter_points())
    next(cursor)
    next(cursor)
    assert source.reads[header_reads:] == [(spectrum.geometry.data_start_offset, spectrum.geometry.tile_byte_size)]
    assert cursor.resident_tile.axis_lengths == (3, 3)
    for _ in range(8):
        next(cursor)
    assert len(source.reads) == header_reads + 2
    assert cursor.resident_tile.index == (0, 1)


def test_read_failure_ends_sequence():
    source = RecordingSource(make_ucsf((6, 6), (3, 3)), fail_after=4)
    spectrum = open_spectrum(source)  # header and axis headers take two reads
    cursor = iter(spectrum.iter_points())
    points = []
    with pytest.raises(IoFailure):
        for point in cursor:
            points.append(point)
    assert len(points) == 18
    assert cursor.resident_tile is None
    with pytest.raises(StopIteration):
        next(cursor)


def test_tile_cursor_failure():
    raw = make_ucsf((6, 6), (3, 3))
    tiles = iter(TileSequence(RecordingSource(raw, fail_after=0), open_spectrum(raw).geometry))
    with pytest.raises(IoFailure):
        next(tiles)
    with pytest.raises(StopIteration):
        next(tiles)


def test_complex_samples():
    spectrum = open_spectrum(make_ucsf((3, 5), (2, 2), components=2))
    points = dict(spectrum.iter_points())
    assert points[(0, 0)] == RealImaginary(1.0, -1.0)
    assert points[(2, 4)] == RealImaginary(15.0, -15.0)
    tile = next(iter(spectrum.tiles()))
    assert tile.values().dtype == np.complex64
    assert tile.values()[1, 1] == 7 - 7j


@settings(deadline=None)
@given(
    shape=st.lists(st.tuples(st.integers(1, 7), st.integers(1, 8)), min_size=1, max_size=3),
    components=st.sampled_from([1, 2]),
)
def test_all_points_yielded_once(shape, components):
    npoints, tilesize = zip(*shape)
    values = dense_values(npoints, components)
    spectrum = open_spectrum(make_ucsf(npoints, tilesize, components, values=values))
    seen = set()
    for coord, sample in spectrum.iter_points():
        assert coord not in seen
        assert all(0 <= c < n for c, n in zip(coord, npoints))
        assert tuple(sample) == tuple(values[coord].tolist())
        assert isinstance(sample, Real if components == 1 else RealImaginary)
        seen.add(coord)
    assert len(seen) == int(np.prod(npoints))
