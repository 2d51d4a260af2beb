# gridroute/core/types.py
#!/usr/bin/env python3
from dataclasses import dataclass, field
from typing import List, Tuple, Optional, Dict, Any
import math

Cell = Tuple[int, int]  # (x, y)


class InvalidArgument(ValueError):
    """Malformed input: bad map, bad coordinates, out-of-bounds endpoints."""


@dataclass(frozen=True)
class Coordinate:
    x: float
    y: float

    @property
    def cell(self) -> Cell:
        return int(self.x), int(self.y)

    def distance_to(self, other: "Coordinate") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def __repr__(self) -> str:
        return f"({self.x:g}, {self.y:g})"


@dataclass(eq=False)
class SearchCell:
    position: Coordinate
    viable: bool
    visited: bool = False
    heuristic_distance: float = 0.0
    steps_to_goal: int = 0            # 0 = goal or unset

    @property
    def cell(self) -> Cell:
        return self.position.cell


@dataclass
class StepResult:
    status: str                   # "idle" | "running" | "done" | "no_path"
    opened: List[Cell] = field(default_factory=list)
    closed: List[Cell] = field(default_factory=list)
    current: Optional[Cell] = None
    path: Optional[List[Coordinate]] = None
    metrics: Dict[str, Any] = field(default_factory=dict)
