# gridroute/core/pathfinder.py
#!/usr/bin/env python3
"""
Public entry point: build a PathFinder from a boolean map, ask for paths.

    pf = PathFinder([[True] * 5 for _ in range(5)])
    pf.find_path((0, 0), (4, 4))        # -> [(0, 0), (4, 4)]

find_path() returns None when no route exists (a normal outcome, not an
error). Malformed maps and out-of-bounds endpoints raise InvalidArgument.

Endpoint policy:
- start == end on a viable cell -> [start]
- start or end not viable      -> None

One PathFinder holds mutable per-search state: do not share one instance
between threads. Give each thread its own PathFinder over the same map.
"""

from typing import List, Optional, Sequence
import logging

from gridroute.core.backtrack import BacktrackSearch
from gridroute.core.grid import Grid, as_cell
from gridroute.core.maps import dump_state
from gridroute.core.route import reconstruct, straighten, to_waypoints
from gridroute.core.types import Coordinate, InvalidArgument, StepResult

logger = logging.getLogger(__name__)


class PathFinder:
    def __init__(self, viability_map: Sequence[Sequence[bool]], *,
                 max_steps: Optional[int] = None, dump_dir=None):
        self.grid = viability_map if isinstance(viability_map, Grid) else Grid(viability_map)
        self.max_steps = max_steps
        self.dump_dir = dump_dir

    @classmethod
    def from_cells(cls, valid_cells, **kwargs) -> "PathFinder":
        return cls(Grid.from_cells(valid_cells), **kwargs)

    def _check(self, c, name: str):
        cell = as_cell(c)
        if not self.grid.in_bounds(cell):
            raise InvalidArgument(f"{name} {cell} outside {self.grid.width}x{self.grid.height} grid")
        return cell

    def search(self, start, end, straighten_route: bool = True) -> StepResult:
        """Run one full search; the final StepResult carries the route and metrics."""
        s = self._check(start, "start")
        e = self._check(end, "end")

        algo = BacktrackSearch(max_steps=self.max_steps)
        algo.init(self.grid, s, e)
        res = algo.run()

        raw = route = None
        if res.status == "done":
            raw = [Coordinate(*s)] if s == e else reconstruct(self.grid, s, e)
        if raw is None:
            res.status = "no_path"
            res.path = None
        else:
            route = straighten(self.grid, raw) if straighten_route else raw
            res.path = to_waypoints(route) if straighten_route else route
            res.metrics["raw_len"] = len(raw)
            res.metrics["waypoints"] = len(res.path)
        logger.debug("search %s -> %s: %s %s", s, e, res.status, res.metrics)

        if self.dump_dir is not None:
            # Cell-by-cell, so the dump shows every cell walked.
            dump_state(self.grid, route, self.dump_dir)
        return res

    def find_path(self, start, end, straighten: bool = True) -> Optional[List[Coordinate]]:
        """Waypoints from start to end, first element = start; None if unreachable."""
        return self.search(start, end, straighten_route=straighten).path
