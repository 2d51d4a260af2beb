# gridroute/core/maps.py
#!/usr/bin/env python3
"""
Map files and diagnostic dumps.

Map JSON (same layout as the workshop maps):
    {"width": W, "height": H, "start": [x, y], "goal": [x, y],
     "cells": [[...W values...], ...H rows...],
     "weights": {"3": "BLOCK"}}          # optional
A cell is blocked when its value is 1 or its weight is "BLOCK".
"""

from dataclasses import dataclass, field
from datetime import datetime
from itertools import count
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Any
import json
import logging

from gridroute.core.grid import Grid, as_cell
from gridroute.core.types import Cell, InvalidArgument

logger = logging.getLogger(__name__)

START_TIME = datetime.now()
_dump_seq = count(1)


@dataclass
class MapSpec:
    width: int
    height: int
    cells: List[List[int]]             # [row][col]
    start: Cell
    goal: Cell
    weights: Dict[str, Any] = field(default_factory=dict)

    def is_block(self, c: Cell) -> bool:
        x, y = c
        v = self.cells[y][x]
        return v == 1 or self.weights.get(str(v)) == "BLOCK"

    def viability_map(self) -> List[List[bool]]:
        """[x][y] map as Grid expects it."""
        return [[not self.is_block((x, y)) for y in range(self.height)]
                for x in range(self.width)]

    def to_grid(self) -> Grid:
        return Grid(self.viability_map())


def load_map(path) -> MapSpec:
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = json.load(f)
        width = int(data["width"])
        height = int(data["height"])
        cells = data["cells"]
        start = as_cell(data["start"])
        goal = as_cell(data["goal"])
        weights = data.get("weights", {})
    except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as ex:
        raise InvalidArgument(f"Cannot read map {path}: {ex}") from ex

    if width <= 0 or height <= 0:
        raise InvalidArgument(f"{path}: map has no cells")
    if len(cells) != height or any(len(r) != width for r in cells):
        raise InvalidArgument(f"{path}: cells size mismatch")
    for name, (x, y) in (("start", start), ("goal", goal)):
        if not (0 <= x < width and 0 <= y < height):
            raise InvalidArgument(f"{path}: {name} out of bounds")
    return MapSpec(width, height, cells, start, goal, weights)


# -------------------- diagnostics --------------------

def render_state(grid: Grid, route: Optional[Sequence] = None) -> str:
    """Text picture of the grid: O viable, X blocked, # on route. One line per y."""
    on_route = {as_cell(c) for c in route} if route else set()
    lines = []
    for y in range(grid.height):
        row = []
        for x in range(grid.width):
            if (x, y) in on_route:
                row.append("#")
            else:
                row.append("O" if grid.viability[x][y] else "X")
        lines.append("".join(row))
    return "\n".join(lines) + "\n"


def dump_state(grid: Grid, route: Optional[Sequence] = None, directory=None) -> Path:
    """Write render_state() to <directory>/<run timestamp>_<n>.log and return the path."""
    directory = Path(directory) if directory is not None else Path.cwd()
    directory.mkdir(parents=True, exist_ok=True)
    out = directory / f"{START_TIME:%Y%m%d_%H%M%S}_{next(_dump_seq)}.log"
    out.write_text(render_state(grid, route))
    logger.debug("Dumped grid state to %s", out)
    return out
