# gridroute/core/grid.py
#!/usr/bin/env python3
"""
Static traversability map + per-search cell state.

The viability map is indexed [x][y] and never changes after construction,
so one map can back several Grid instances. `cells` is rebuilt from scratch
by rebuild() at the start of every search.

Neighbors are computed from coordinates (8-connected, x-major order); no
edge list is stored.
"""

from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

from gridroute.core.types import Cell, Coordinate, InvalidArgument, SearchCell


def as_cell(c) -> Cell:
    """Accept a Coordinate or an (x, y) pair, return integer (x, y)."""
    if isinstance(c, Coordinate):
        x, y = c.x, c.y
    else:
        try:
            x, y = c
        except (TypeError, ValueError):
            raise InvalidArgument(f"Not a coordinate: {c!r}") from None
    try:
        ix, iy = int(x), int(y)
    except (TypeError, ValueError, OverflowError):
        raise InvalidArgument(f"Not a coordinate: {c!r}") from None
    if x != ix or y != iy:
        raise InvalidArgument(f"Coordinate {c!r} is not on a cell")
    return ix, iy


class Grid:
    def __init__(self, viability_map: Sequence[Sequence[bool]]):
        try:
            if viability_map is None or len(viability_map) == 0:
                raise InvalidArgument("Viability map is empty")
            height = len(viability_map[0])
            if height == 0:
                raise InvalidArgument("Viability map has empty columns")
            if any(len(col) != height for col in viability_map):
                raise InvalidArgument("Viability map is not rectangular")
        except TypeError:
            raise InvalidArgument("Viability map must be a sequence of columns") from None

        self.width = len(viability_map)
        self.height = height
        # Immutable copy; callers may keep mutating their own list.
        self.viability: Tuple[Tuple[bool, ...], ...] = tuple(
            tuple(bool(v) for v in col) for col in viability_map
        )
        self.cells: Optional[List[List[SearchCell]]] = None

    @classmethod
    def from_cells(cls, valid_cells: Iterable) -> "Grid":
        """Build a map just large enough to hold every listed cell."""
        cells = [as_cell(c) for c in valid_cells] if valid_cells is not None else []
        if not cells:
            raise InvalidArgument("No valid cells given")
        if any(x < 0 or y < 0 for x, y in cells):
            raise InvalidArgument("Valid cells must have non-negative coordinates")

        width = max(x for x, _ in cells) + 1
        height = max(y for _, y in cells) + 1
        vmap = [[False] * height for _ in range(width)]
        for x, y in cells:
            vmap[x][y] = True
        return cls(vmap)

    # -------------------- static queries --------------------

    def in_bounds(self, c: Cell) -> bool:
        x, y = c
        return 0 <= x < self.width and 0 <= y < self.height

    def is_viable(self, c: Cell) -> bool:
        x, y = c
        return self.in_bounds(c) and self.viability[x][y]

    def neighbor_cells(self, c: Cell) -> Iterator[Cell]:
        """Up to 8 in-bounds neighbors of c, x-major then y."""
        x, y = c
        for nx in range(x - 1, x + 2):
            if nx < 0 or nx >= self.width:
                continue
            for ny in range(y - 1, y + 2):
                if ny < 0 or ny >= self.height:
                    continue
                if nx == x and ny == y:
                    continue
                yield nx, ny

    # -------------------- per-search state --------------------

    def rebuild(self, goal) -> List[List[SearchCell]]:
        """Discard any previous search state and seed a fresh cell array."""
        gx, gy = as_cell(goal)
        target = Coordinate(gx, gy)
        cells: List[List[SearchCell]] = []
        for x in range(self.width):
            column = []
            for y in range(self.height):
                pos = Coordinate(x, y)
                column.append(SearchCell(
                    position=pos,
                    viable=self.viability[x][y],
                    heuristic_distance=pos.distance_to(target),
                ))
            cells.append(column)
        self.cells = cells
        return cells

    def cell_at(self, c: Cell) -> SearchCell:
        if self.cells is None:
            raise RuntimeError("rebuild() must run before per-search queries")
        x, y = c
        return self.cells[x][y]

    def neighbors_of(self, cell: SearchCell) -> List[SearchCell]:
        return [self.cell_at(n) for n in self.neighbor_cells(cell.cell)]
