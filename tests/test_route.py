"""Tests for route reconstruction, line of sight, straightening and waypoints."""

import pytest

from conftest import assert_straight_runs, cells, rows_to_map

from gridroute.core.backtrack import find_route
from gridroute.core.grid import Grid
from gridroute.core.route import (
    line_of_sight, reconstruct, straighten, to_waypoints,
)
from gridroute.core.types import Coordinate


class TestReconstruct:

    def test_follows_the_step_gradient(self, open5):
        grid = Grid(open5)
        find_route(grid, (0, 0), (4, 4))
        assert cells(reconstruct(grid, (0, 0), (4, 4))) == [(0, 0), (1, 1), (2, 2), (3, 3), (4, 4)]

    def test_skips_abandoned_branches(self, pocket_map):
        grid = Grid(pocket_map)
        chain = find_route(grid, (0, 1), (4, 1))
        raw = cells(reconstruct(grid, (0, 1), (4, 1)))
        # (1,1) touches (2,2) directly, which sits lower on the gradient than (2,1)
        assert raw == [(0, 1), (1, 1), (2, 2), (3, 3), (4, 2), (4, 1)]
        assert set(raw) <= {c.cell for c in chain}

    def test_unreached_start_is_failure(self):
        grid = Grid(rows_to_map("..X.."))
        find_route(grid, (0, 0), (4, 0))
        assert reconstruct(grid, (0, 0), (4, 0)) is None


class TestLineOfSight:

    def test_open_diagonal(self, open5):
        grid = Grid(open5)
        assert cells(line_of_sight(grid, (0, 0), (4, 4))) == [(0, 0), (1, 1), (2, 2), (3, 3)]

    def test_adjacent_target(self, open5):
        assert cells(line_of_sight(Grid(open5), (0, 0), (1, 0))) == [(0, 0)]

    def test_wall_stalls_the_walk(self):
        grid = Grid(rows_to_map(
            "..X..",
            "..X..",
            "..X..",
        ))
        assert line_of_sight(grid, (0, 1), (4, 1)) is None

    def test_walks_round_a_single_block(self):
        grid = Grid(rows_to_map(
            "...",
            ".X.",
            "...",
        ))
        assert cells(line_of_sight(grid, (0, 1), (2, 1))) == [(0, 1), (1, 0)]


class TestStraighten:

    def test_cuts_a_corner(self):
        grid = Grid([[True] * 3 for _ in range(3)])
        route = [(0, 0), (0, 1), (0, 2), (1, 2), (2, 2)]
        assert cells(straighten(grid, route)) == [(0, 0), (1, 1), (2, 2)]

    def test_leaves_a_blocked_detour_alone(self, pocket_map):
        grid = Grid(pocket_map)
        raw = [(0, 1), (1, 1), (2, 2), (3, 3), (4, 2), (4, 1)]
        assert cells(straighten(grid, raw)) == raw

    def test_shortens_a_wandering_route(self):
        grid = Grid(rows_to_map(
            ".....",
            ".....",
            ".....",
        ))
        wander = [(0, 1), (0, 2), (1, 2), (2, 1), (2, 0), (3, 0), (4, 1)]
        out = cells(straighten(grid, wander))
        assert out == [(0, 1), (1, 1), (2, 1), (3, 1), (4, 1)]

    def test_never_longer_and_keeps_endpoints(self, l_corridor):
        grid = Grid(l_corridor)
        raw = [(0, 0), (0, 1), (0, 2), (0, 3), (0, 4), (1, 4), (2, 4), (3, 4), (4, 4)]
        out = cells(straighten(grid, raw))
        assert len(out) <= len(raw)
        assert out[0] == (0, 0) and out[-1] == (4, 4)
        assert out == [(0, 0), (0, 1), (0, 2), (0, 3), (1, 4), (2, 4), (3, 4), (4, 4)]

    @pytest.mark.parametrize("route", [
        [(0, 0), (0, 1), (0, 2), (1, 2), (2, 2)],
        [(0, 2), (1, 2), (2, 2), (2, 1), (2, 0), (1, 0), (0, 0)],
        [(0, 0), (1, 0)],
        [(1, 1)],
    ])
    def test_idempotent(self, route):
        grid = Grid([[True] * 3 for _ in range(3)])
        once = straighten(grid, route)
        assert straighten(grid, once) == once

    def test_returns_coordinates(self):
        grid = Grid([[True] * 2 for _ in range(2)])
        assert straighten(grid, [Coordinate(0, 0), Coordinate(1, 1)]) == [
            Coordinate(0, 0), Coordinate(1, 1),
        ]

    def test_long_corridor_is_left_alone(self):
        """A straight run has no shortcut; every pair is ruled out by distance."""
        n = 400
        grid = Grid([[True] for _ in range(n)])
        raw = [(x, 0) for x in range(n)]
        out = straighten(grid, raw)
        assert cells(out) == raw
        assert cells(to_waypoints(out)) == [(0, 0), (n - 1, 0)]


class TestWaypoints:

    def test_straight_run_collapses_to_ends(self):
        assert cells(to_waypoints([(0, 0), (1, 1), (2, 2), (3, 3)])) == [(0, 0), (3, 3)]

    def test_each_turn_is_kept(self):
        route = [(0, 0), (0, 1), (0, 2), (0, 3), (1, 4), (2, 4), (3, 4), (4, 4)]
        assert cells(to_waypoints(route)) == [(0, 0), (0, 3), (1, 4), (4, 4)]

    def test_short_routes_pass_through(self):
        assert cells(to_waypoints([(2, 2)])) == [(2, 2)]
        assert cells(to_waypoints([(2, 2), (3, 2)])) == [(2, 2), (3, 2)]
        assert to_waypoints([]) == []

    def test_waypoints_of_waypoints_are_unchanged(self, pocket_map):
        grid = Grid(pocket_map)
        raw = [(0, 1), (1, 1), (2, 2), (3, 3), (4, 2), (4, 1)]
        once = to_waypoints(straighten(grid, raw))
        assert to_waypoints(once) == once
        assert_straight_runs(grid, once)
