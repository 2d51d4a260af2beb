"""Tests for map loading and diagnostic dumps."""

import json

import pytest

from conftest import MAP_DIR

from gridroute.core.grid import Grid
from gridroute.core.maps import dump_state, load_map, render_state
from gridroute.core.types import InvalidArgument


def write_map(tmp_path, **overrides):
    data = {
        "width": 3,
        "height": 2,
        "start": [0, 0],
        "goal": [2, 1],
        "cells": [[0, 1, 0], [0, 3, 0]],
    }
    data.update(overrides)
    path = tmp_path / "map.json"
    path.write_text(json.dumps(data))
    return path


class TestLoadMap:

    def test_sample_l_corridor(self):
        spec = load_map(MAP_DIR / "02_l_corridor.json")
        assert (spec.width, spec.height) == (8, 8)
        assert spec.start == (0, 0) and spec.goal == (7, 7)
        vmap = spec.viability_map()
        assert vmap[0][3] and not vmap[1][3] and vmap[5][7]

    def test_rows_become_x_major(self, tmp_path):
        spec = load_map(write_map(tmp_path))
        grid = spec.to_grid()
        assert (grid.width, grid.height) == (3, 2)
        assert not grid.is_viable((1, 0))
        assert grid.is_viable((1, 1))

    def test_block_weights(self, tmp_path):
        spec = load_map(write_map(tmp_path, weights={"3": "BLOCK"}))
        assert spec.is_block((1, 1))
        assert not spec.to_grid().is_viable((1, 1))

    @pytest.mark.parametrize("overrides", [
        {"cells": [[0, 0, 0]]},
        {"cells": [[0, 0], [0, 0]]},
        {"start": [3, 0]},
        {"goal": [0, 2]},
        {"start": "nowhere"},
        {"width": 0},
    ])
    def test_malformed_maps(self, tmp_path, overrides):
        with pytest.raises(InvalidArgument):
            load_map(write_map(tmp_path, **overrides))

    def test_missing_key(self, tmp_path):
        path = tmp_path / "map.json"
        path.write_text(json.dumps({"width": 1}))
        with pytest.raises(InvalidArgument):
            load_map(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidArgument):
            load_map(tmp_path / "nope.json")


class TestDump:

    def test_render_marks_route_and_walls(self):
        grid = Grid([[True, True], [False, True], [True, True]])
        assert render_state(grid, [(0, 0), (1, 1), (2, 0)]) == "#X#\nO#O\n"

    def test_render_without_route(self):
        assert render_state(Grid([[True], [False]])) == "OX\n"

    def test_dump_files_are_numbered(self, tmp_path):
        grid = Grid([[True]])
        a = dump_state(grid, None, tmp_path)
        b = dump_state(grid, None, tmp_path / "nested")
        assert a.parent == tmp_path and b.parent == tmp_path / "nested"
        assert a.suffix == b.suffix == ".log"
        assert a.name != b.name
        assert b.read_text() == "O\n"
