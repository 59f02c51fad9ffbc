"""Tests for the Wu line traversal."""

import numpy as np
import pytest

from stringtrace.core.line import rasterize_line, traverse


def collect(a, b):
    visits = []
    traverse(a, b, lambda pixel, coverage: visits.append((pixel, coverage)))
    return visits


class TestWuFixtures:
    """Exact visit sequences for known lines."""

    def test_shallow_line(self):
        assert collect((0.0, 0.0), (6.0, 3.0)) == [
            ((0, 0), 1.0),
            ((1, 0), 0.5),
            ((1, 1), 0.5),
            ((2, 1), 1.0),
            ((3, 1), 0.5),
            ((3, 2), 0.5),
            ((4, 2), 1.0),
            ((5, 2), 0.5),
            ((5, 3), 0.5),
            ((6, 3), 1.0),
        ]

    def test_vertical_line(self):
        assert collect((4.0, 2.0), (4.0, 6.0)) == [
            ((4, 2), 1.0),
            ((4, 3), 1.0),
            ((4, 4), 1.0),
            ((4, 5), 1.0),
            ((4, 6), 1.0),
        ]

    def test_horizontal_line(self):
        assert collect((2.0, 4.0), (6.0, 4.0)) == [
            ((2, 4), 1.0),
            ((3, 4), 1.0),
            ((4, 4), 1.0),
            ((5, 4), 1.0),
            ((6, 4), 1.0),
        ]

    def test_single_point(self):
        assert collect((3.0, 3.0), (3.0, 3.0)) == [((3, 3), 1.0)]


class TestWuProperties:
    """Symmetry and coverage properties."""

    @pytest.mark.parametrize("a, b", [
        ((340.5, 290.77), (110.0, 170.0)),
        ((0.0, 0.0), (6.0, 3.0)),
        ((12.25, 3.5), (14.75, 40.125)),
        ((99.0, 1.0), (1.0, 99.0)),
    ])
    def test_reversed_endpoints_give_same_sequence(self, a, b):
        assert collect(a, b) == collect(b, a)

    def test_steep_line_walks_along_y(self):
        visits = collect((1.0, 0.0), (3.0, 8.0))
        rows = sorted({pixel[1] for pixel, _ in visits})
        assert rows == list(range(0, 9))

    def test_coverage_in_unit_interval(self):
        rng = np.random.default_rng(7)
        for _ in range(20):
            a = tuple(rng.uniform(0, 200, size=2))
            b = tuple(rng.uniform(0, 200, size=2))
            _, _, coverage = rasterize_line(a, b)
            assert np.all(coverage > 0.0)
            assert np.all(coverage <= 1.0)

    def test_pair_coverage_sums_to_one(self):
        """Each step splits a full unit of coverage between its pixels."""
        visits = collect((0.0, 0.3), (9.0, 5.1))
        per_column = {}
        for (x, _), coverage in visits:
            per_column[x] = per_column.get(x, 0.0) + coverage
        for total in per_column.values():
            assert total == pytest.approx(1.0)

    def test_rasterize_matches_traverse(self):
        xs, ys, coverage = rasterize_line((2.5, 1.25), (17.0, 9.5))
        expected = [((int(x), int(y)), float(c)) for x, y, c in zip(xs, ys, coverage)]
        assert collect((2.5, 1.25), (17.0, 9.5)) == expected


class TestLayoutChords:
    """Chords between real node positions stay on the canvas."""

    @pytest.mark.parametrize("diameter", [10, 64, 101, 500])
    @pytest.mark.parametrize("node_count", [8, 36, 90])
    @pytest.mark.parametrize("node_offset", [0.0, 1.0])
    def test_every_chord_inside_canvas(self, diameter, node_count, node_offset):
        from stringtrace.core.geometry import node_positions
        from stringtrace.models import Settings

        settings = Settings(diameter=diameter, node_count=node_count, node_offset=node_offset)
        positions = node_positions(settings)

        for a in range(node_count):
            for b in range(a + 1, node_count):
                xs, ys, _ = rasterize_line(positions[a], positions[b])
                assert xs.min() >= 0 and ys.min() >= 0, (a, b)
                assert xs.max() < diameter and ys.max() < diameter, (a, b)

    def test_edge_node_never_goes_negative(self):
        """Node 4 of an octagon sits on x = 0."""
        from stringtrace.core.geometry import node_position
        from stringtrace.models import Settings

        settings = Settings(diameter=10, node_count=8, node_offset=0.0)
        visits = collect(node_position(4, settings), node_position(5, settings))

        assert visits
        assert all(x >= 0 and y >= 0 for (x, y), _ in visits)
