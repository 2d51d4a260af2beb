"""Shared grid builders for the test suite."""

from pathlib import Path

import pytest

from gridroute.core.grid import Grid

MAP_DIR = Path(__file__).resolve().parents[1] / "maps"


def rows_to_map(*rows: str):
    """
    Build an [x][y] viability map from text rows (top row = y 0).
    'X' is blocked, anything else is viable.
    """
    height = len(rows)
    width = len(rows[0])
    return [[rows[y][x] != "X" for y in range(height)] for x in range(width)]


def cells(route):
    return [c.cell for c in route] if route is not None else None


def assert_straight_runs(grid: Grid, route):
    """Every consecutive waypoint pair is joined by a straight run of viable cells."""
    pts = cells(route)
    for (ax, ay), (bx, by) in zip(pts, pts[1:]):
        dx, dy = bx - ax, by - ay
        assert dx == 0 or dy == 0 or abs(dx) == abs(dy), f"{(ax, ay)} -> {(bx, by)} is not straight"
        sx, sy = (dx > 0) - (dx < 0), (dy > 0) - (dy < 0)
        x, y = ax, ay
        while (x, y) != (bx, by):
            assert grid.is_viable((x, y)), f"{(x, y)} is blocked"
            x, y = x + sx, y + sy
        assert grid.is_viable((bx, by))


@pytest.fixture
def open5():
    return [[True] * 5 for _ in range(5)]


@pytest.fixture
def pocket_map():
    # Greedy ordering walks into the top-left pocket before finding the way round.
    return rows_to_map(
        "...X.",
        "S..XG",
        "XX.X.",
        "XX...",
    )


@pytest.fixture
def l_corridor():
    return rows_to_map(
        ".XXXX",
        ".XXXX",
        ".XXXX",
        ".XXXX",
        ".....",
    )
