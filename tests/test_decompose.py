"""Tests for grid decomposition."""

import itertools
import math

import pytest

from shatterfx.core import (
    Rect,
    TriangleVariant,
    InvalidGeometry,
    InvalidGrid,
    decompose,
    max_piece_distance,
)


class TestDecompose:
    @pytest.mark.parametrize("grid", [(1, 1), (2, 2), (3, 5), (8, 16), (24, 24)])
    def test_fragment_count(self, grid):
        result = decompose((320, 200), grid)
        assert len(result) == 2 * grid[0] * grid[1]
        assert result.grid == grid

    def test_row_major_order(self):
        result = decompose((90, 60), (3, 2))
        expected = [
            ((x, y), variant)
            for y in range(2)
            for x in range(3)
            for variant in (TriangleVariant.UPPER_LEFT, TriangleVariant.LOWER_RIGHT)
        ]
        assert [(f.cell, f.variant) for f in result] == expected
        assert [f.index for f in result] == list(range(12))

    def test_fragment_at(self):
        result = decompose((90, 60), (3, 2))
        frag = result.fragment_at(2, 1, TriangleVariant.LOWER_RIGHT)
        assert frag.cell == (2, 1)
        assert frag.variant is TriangleVariant.LOWER_RIGHT
        with pytest.raises(IndexError):
            result.fragment_at(3, 0, TriangleVariant.UPPER_LEFT)

    def test_quadrant_rest_positions(self):
        result = decompose((100, 100), (2, 2))
        cells = [result.fragment_at(x, y, TriangleVariant.UPPER_LEFT) for y in range(2) for x in range(2)]
        assert [f.rest_position for f in cells] == [(-25, -25), (25, -25), (-25, 25), (25, 25)]

    def test_cell_pair_shares_region_and_rest(self):
        result = decompose((100, 80), (4, 4))
        for a, b in zip(result.fragments[::2], result.fragments[1::2]):
            assert a.source_region == b.source_region
            assert a.rest_position == b.rest_position
            assert a.variant is TriangleVariant.UPPER_LEFT
            assert b.variant is TriangleVariant.LOWER_RIGHT

    def test_reassembles_bounding_box(self):
        w, h = 300, 120
        result = decompose((w, h), (7, 3))
        cw, ch = result.cell_size
        xs = [f.rest_position[0] for f in result]
        ys = [f.rest_position[1] for f in result]
        assert min(xs) - cw / 2 == pytest.approx(-w / 2)
        assert max(xs) + cw / 2 == pytest.approx(w / 2)
        assert min(ys) - ch / 2 == pytest.approx(-h / 2)
        assert max(ys) + ch / 2 == pytest.approx(h / 2)

    def test_no_motion_until_trajectories(self):
        result = decompose((100, 100), (2, 2))
        assert all(f.motion is None for f in result)
        with pytest.raises(ValueError):
            result.profiles()


class TestSourceRegions:
    @pytest.mark.parametrize("texture_rect", [None, Rect(0.25, 0.5, 0.5, 0.25)])
    def test_regions_tile_texture_rect(self, texture_rect):
        cols, rows = 5, 3
        result = decompose((200, 90), (cols, rows), texture_rect)
        tr = texture_rect or Rect(0.0, 0.0, 1.0, 1.0)
        cells = [result.fragment_at(x, y, TriangleVariant.UPPER_LEFT).source_region
                 for y in range(rows) for x in range(cols)]

        assert sum(r.area for r in cells) == pytest.approx(tr.area)
        assert min(r.x for r in cells) == pytest.approx(tr.x)
        assert min(r.y for r in cells) == pytest.approx(tr.y)
        assert max(r.max_x for r in cells) == pytest.approx(tr.max_x)
        assert max(r.max_y for r in cells) == pytest.approx(tr.max_y)

        for y, x in itertools.product(range(rows), range(cols - 1)):
            left = result.fragment_at(x, y, TriangleVariant.UPPER_LEFT).source_region
            right = result.fragment_at(x + 1, y, TriangleVariant.UPPER_LEFT).source_region
            assert right.x == pytest.approx(left.max_x)
            assert right.y == left.y
        for y, x in itertools.product(range(rows - 1), range(cols)):
            below = result.fragment_at(x, y, TriangleVariant.UPPER_LEFT).source_region
            above = result.fragment_at(x, y + 1, TriangleVariant.UPPER_LEFT).source_region
            assert above.y == pytest.approx(below.max_y)
            assert above.x == below.x

    def test_bottom_left_region_first(self):
        result = decompose((100, 100), (4, 4))
        assert result[0].source_region == Rect(0.0, 0.0, 0.25, 0.25)
        assert result.texture_rect == Rect(0.0, 0.0, 1.0, 1.0)


class TestBlastIntensity:
    def test_corner_intensity_zero(self):
        result = decompose((120, 80), (6, 4))
        assert result.fragment_at(0, 0, TriangleVariant.UPPER_LEFT).blast_intensity == 0.0
        for x, y in [(5, 0), (0, 3), (5, 3)]:
            assert result.fragment_at(x, y, TriangleVariant.LOWER_RIGHT).blast_intensity == pytest.approx(0.0, abs=1e-12)

    def test_center_strongest(self):
        result = decompose((120, 80), (6, 4))
        nearest = min(result, key=lambda f: math.hypot(*f.rest_position))
        corner = result.fragment_at(0, 0, TriangleVariant.UPPER_LEFT)
        assert nearest.blast_intensity > corner.blast_intensity
        assert all(0.0 <= f.blast_intensity <= 1.0 for f in result)

    def test_odd_grid_center_is_one(self):
        result = decompose((90, 90), (3, 3))
        assert result.fragment_at(1, 1, TriangleVariant.UPPER_LEFT).blast_intensity == 1.0

    def test_single_cell(self):
        result = decompose((50, 50), (1, 1))
        assert result.max_distance == 0.0
        assert all(f.blast_intensity == 1.0 for f in result)

    def test_max_distance_from_corner_cell(self):
        result = decompose((100, 60), (5, 3))
        assert result.max_distance == max_piece_distance((100, 60), (20, 20))
        assert result.max_distance == pytest.approx(math.hypot(40, 20))


class TestErrors:
    @pytest.mark.parametrize("grid", [(0, 5), (5, 0), (-1, 2)])
    def test_invalid_grid(self, grid):
        with pytest.raises(InvalidGrid):
            decompose((100, 50), grid)

    @pytest.mark.parametrize("size", [(0, 50), (50, 0), (-10, 10)])
    def test_invalid_geometry(self, size):
        with pytest.raises(InvalidGeometry):
            decompose(size, (4, 4))

    @pytest.mark.parametrize("size", [(float("nan"), 50), (50, float("nan")), (float("inf"), 50)])
    def test_non_finite_geometry(self, size):
        with pytest.raises(InvalidGeometry):
            decompose(size, (2, 2))

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            decompose((0, 50), (0, 5))


class TestTriangleVariant:
    def test_vertices(self):
        assert TriangleVariant.UPPER_LEFT.vertices(10, 4) == [(-5, -2), (-5, 2), (5, 2)]
        assert TriangleVariant.LOWER_RIGHT.vertices(10, 4) == [(5, 2), (5, -2), (-5, -2)]

    def test_spin_sign(self):
        assert TriangleVariant.LOWER_RIGHT.spin_sign == 1.0
        assert TriangleVariant.UPPER_LEFT.spin_sign == -1.0
