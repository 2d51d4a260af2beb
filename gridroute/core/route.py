# gridroute/core/route.py
#!/usr/bin/env python3
"""
Route reconstruction and straightening.

- reconstruct(): walk the steps_to_goal gradient left by a finished search
  from start to goal, one cell per hop (the raw route).
- line_of_sight(): greedy "always step closer" walk between two cells over
  viable cells only.
- straighten(): splice line-of-sight shortcuts into a raw route wherever
  they replace more cells than they add. Repeats until nothing changes.
- to_waypoints(): drop the interior cells of straight runs.
"""

from typing import List, Optional, Sequence
import logging
import math

from gridroute.core.grid import Grid, as_cell
from gridroute.core.types import Cell, Coordinate

logger = logging.getLogger(__name__)


def _dist(a: Cell, b: Cell) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)


# -------------------- reconstruction --------------------

def reconstruct(grid: Grid, start, goal) -> Optional[List[Coordinate]]:
    """Raw route from the search state in grid.cells, or None if start was never reached."""
    cur = grid.cell_at(as_cell(start))
    goal_cell = grid.cell_at(as_cell(goal))
    if cur.steps_to_goal == 0:
        return None

    route = [cur.position]
    while cur.steps_to_goal != 0:
        on_chain = [n for n in grid.neighbors_of(cur)
                    if n.visited and (n.steps_to_goal > 0 or n is goal_cell)]
        if not on_chain:
            # Only possible if cells were edited outside a search.
            logger.warning("Broken step gradient at %s", cur.position)
            return None
        # min() keeps the first of equal values: enumeration order breaks ties.
        cur = min(on_chain, key=lambda n: n.steps_to_goal)
        route.append(cur.position)
    return route


# -------------------- line of sight --------------------

def _closest_step(grid: Grid, c: Cell, target: Cell) -> Optional[Cell]:
    here = _dist(c, target)
    for n in sorted(grid.neighbor_cells(c), key=lambda n: _dist(n, target)):
        if grid.is_viable(n) and _dist(n, target) < here:
            return n
    return None


def _line_of_sight(grid: Grid, a: Cell, b: Cell) -> Optional[List[Cell]]:
    cells = [a]
    nxt = _closest_step(grid, a, b)
    while nxt is not None:
        if nxt == b:
            return cells
        cells.append(nxt)
        nxt = _closest_step(grid, nxt, b)
    return None


def line_of_sight(grid: Grid, a, b) -> Optional[List[Coordinate]]:
    """
    Cells from a toward b (a included, b excluded), each the viable neighbor
    nearest to b and strictly nearer than the previous cell. None if the
    walk stalls before reaching b.
    """
    cells = _line_of_sight(grid, as_cell(a), as_cell(b))
    return None if cells is None else [Coordinate(x, y) for x, y in cells]


# -------------------- straightening --------------------

def straighten(grid: Grid, route: Sequence) -> List[Coordinate]:
    cells = [as_cell(c) for c in route]
    before = len(cells)

    changed = True
    while changed:
        changed = False
        i = 0
        while i < len(cells) - 2:
            ax, ay = cells[i]
            j = len(cells) - 1
            while j > i + 1:
                bx, by = cells[j]
                # Each walk step covers at most one Chebyshev unit.
                if max(abs(bx - ax), abs(by - ay)) >= j - i:
                    j -= 1
                    continue
                skip = _line_of_sight(grid, cells[i], cells[j])
                if skip is not None and len(skip) < j - i:
                    cells = cells[:i] + skip + cells[j:]
                    changed = True
                    j = len(cells) - 1
                    continue
                j -= 1
            i += 1

    if len(cells) < before:
        logger.debug("Straightened route from %d to %d cells", before, len(cells))
    return [Coordinate(x, y) for x, y in cells]


def to_waypoints(route: Sequence) -> List[Coordinate]:
    """Keep the endpoints and every cell where the step direction changes."""
    cells = [as_cell(c) for c in route]
    if len(cells) <= 2:
        return [Coordinate(x, y) for x, y in cells]

    def heading(a: Cell, b: Cell):
        return _sign(b[0] - a[0]), _sign(b[1] - a[1])

    out = [cells[0]]
    prev = heading(cells[0], cells[1])
    for k in range(1, len(cells) - 1):
        cur = heading(cells[k], cells[k + 1])
        if cur != prev:
            out.append(cells[k])
        prev = cur
    out.append(cells[-1])
    return [Coordinate(x, y) for x, y in out]
