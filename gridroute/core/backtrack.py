# gridroute/core/backtrack.py
#!/usr/bin/env python3
"""
Heuristic-ordered backtracking search: one frame operation per step().

Implements the same algorithm API as the viewer expects:
- init(grid, start, goal) - reset() - step() -> StepResult

Each frame on the stack holds a cell and its remaining candidates, ordered
by straight-line distance to the goal (stable sort, so ties keep the
8-neighborhood order). A step either:
- finishes, when the top frame has the goal as an immediate option,
- descends into the top frame's next unvisited candidate, or
- pops the top frame when it has no candidates left (dead end).

Cells are marked visited when they are pushed and never unmarked, so the
search does not revisit a cell after its branch fails. It finds *a* route,
not the shortest one.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import logging

from gridroute.core.grid import Grid, as_cell
from gridroute.core.types import Cell, SearchCell, StepResult

logger = logging.getLogger(__name__)


@dataclass
class Frame:
    cell: SearchCell
    options: List[SearchCell]
    reaches_goal: bool = False
    index: int = 0

    def next_candidate(self) -> Optional[SearchCell]:
        while self.index < len(self.options):
            cand = self.options[self.index]
            self.index += 1
            # A sibling's branch may have claimed it since this frame opened.
            if not cand.visited:
                return cand
        return None


@dataclass
class BacktrackSearch:
    name: str = "Backtracking"
    max_steps: Optional[int] = None   # cap on descents; None = unbounded

    # Internal state
    grid: Optional[Grid] = None
    start: Optional[Cell] = None
    goal: Optional[Cell] = None
    start_cell: Optional[SearchCell] = None
    goal_cell: Optional[SearchCell] = None
    stack: List[Frame] = field(default_factory=list)
    chain: Optional[List[SearchCell]] = None
    expanded: int = 0
    dead_ends: int = 0
    max_depth: int = 0
    done: bool = False
    no_path: bool = False

    # -------------------- lifecycle --------------------

    def init(self, grid: Grid, start, goal) -> None:
        """Bind to a grid and endpoints, then reset."""
        self.grid = grid
        self.start = as_cell(start)
        self.goal = as_cell(goal)
        self.reset()

    def reset(self) -> None:
        """Rebuild the grid's search state and seed the stack with start."""
        if self.grid is None:
            return
        cells = self.grid.rebuild(self.goal)
        self.start_cell = cells[self.start[0]][self.start[1]]
        self.goal_cell = cells[self.goal[0]][self.goal[1]]
        self.stack.clear()
        self.chain = None
        self.expanded = 0
        self.dead_ends = 0
        self.max_depth = 0
        self.done = False
        self.no_path = False

        if not self.start_cell.viable or self.start_cell is self.goal_cell:
            # Resolved on the first step(); nothing to explore.
            return
        self.start_cell.visited = True
        self._push(self.start_cell)

    # -------------------- helpers --------------------

    def _options(self, cell: SearchCell) -> List[SearchCell]:
        return [n for n in self.grid.neighbors_of(cell) if n.viable and not n.visited]

    def _push(self, cell: SearchCell) -> None:
        options = self._options(cell)
        if any(o is self.goal_cell for o in options):
            self.stack.append(Frame(cell, [], reaches_goal=True))
        else:
            ordered = sorted(options, key=lambda c: c.heuristic_distance)
            self.stack.append(Frame(cell, ordered))
        self.max_depth = max(self.max_depth, len(self.stack))

    def _finish(self) -> List[SearchCell]:
        """Stamp steps_to_goal down the stack and return the chain."""
        self.goal_cell.visited = True
        steps = 0
        for frame in reversed(self.stack):
            steps += 1
            frame.cell.steps_to_goal = steps
        return [f.cell for f in self.stack] + [self.goal_cell]

    # -------------------- main stepping logic --------------------

    def step(self) -> StepResult:
        if self.grid is None:
            return StepResult(status="idle", metrics={"algo": self.name})

        if self.done:
            return StepResult(status="done", path=self._chain_coords(),
                              metrics=self._metrics())

        if self.no_path:
            return StepResult(status="no_path", metrics=self._metrics())

        if self.start_cell is self.goal_cell and self.start_cell.viable:
            self.done = True
            self.chain = [self.start_cell]
            return StepResult(status="done", current=self.start, path=self._chain_coords(),
                              metrics=self._metrics())

        if not self.stack:
            return self._give_up()

        frame = self.stack[-1]
        if frame.reaches_goal:
            self.done = True
            self.chain = self._finish()
            logger.debug("%s: reached %s from %s after %d descents",
                         self.name, self.goal, self.start, self.expanded)
            return StepResult(status="done", closed=[self.goal], current=self.goal,
                              path=self._chain_coords(), metrics=self._metrics())

        cand = frame.next_candidate()
        if cand is None:
            self.stack.pop()
            self.dead_ends += 1
            if not self.stack:
                return self._give_up(closed=[frame.cell.cell])
            return StepResult(status="running", closed=[frame.cell.cell],
                              current=self.stack[-1].cell.cell, metrics=self._metrics())

        if self.max_steps is not None and self.expanded >= self.max_steps:
            logger.debug("%s: step budget of %d exhausted", self.name, self.max_steps)
            self.stack.clear()
            return self._give_up()

        cand.visited = True
        self.expanded += 1
        self._push(cand)
        return StepResult(status="running", opened=[cand.cell], current=cand.cell,
                          metrics=self._metrics())

    def run(self) -> StepResult:
        """Step until the search finishes."""
        res = self.step()
        while res.status == "running":
            res = self.step()
        return res

    def find_route(self) -> Optional[List[SearchCell]]:
        """Run to completion; the successful chain start..goal, or None."""
        res = self.run()
        return self.chain if res.status == "done" else None

    def _give_up(self, closed: Optional[List[Cell]] = None) -> StepResult:
        self.no_path = True
        logger.debug("%s: no route from %s to %s", self.name, self.start, self.goal)
        return StepResult(status="no_path", closed=closed or [], metrics=self._metrics())

    def _chain_coords(self):
        return [c.position for c in self.chain] if self.chain else None

    # -------------------- metrics --------------------

    def _metrics(self) -> dict:
        return {
            "algo": self.name,
            "expanded": self.expanded,
            "dead_ends": self.dead_ends,
            "depth": len(self.stack),
            "max_depth": self.max_depth,
            "path_len": len(self.chain) if self.chain else 0,
        }


def find_route(grid: Grid, start, goal, max_steps: Optional[int] = None) -> Optional[List[SearchCell]]:
    """Search grid from start to goal; the chain of cells, or None."""
    search = BacktrackSearch(max_steps=max_steps)
    search.init(grid, start, goal)
    return search.find_route()
