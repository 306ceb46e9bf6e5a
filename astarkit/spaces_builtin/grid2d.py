from __future__ import annotations

import math
from typing import Any, Iterable, List, Optional, Sequence, Set, Tuple

from astarkit.core.space_api import API_VERSION, ProblemSpace, SpaceMeta

Point = Tuple[int, int]

# Offsets tried in order: west, east, south, north
STEPS: Tuple[Point, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


class Grid2DSpace(ProblemSpace):
    """Bounded 2D grid with four-directional, unit-cost movement.

    Coordinates run from 1 to ``width``/``height`` inclusive. Blocked cells
    are never offered as neighbors. ``iteration_budget`` installs a run-limit
    rule that ends a cycle after that many expansion steps.
    """

    def __init__(
        self,
        width: int = 20,
        height: int = 10,
        blocked: Optional[Iterable[Sequence[int]]] = None,
        iteration_budget: Optional[int] = None,
    ) -> None:
        if width < 1 or height < 1:
            raise ValueError(f"Grid must be at least 1x1, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self.blocked: Set[Point] = {(int(p[0]), int(p[1])) for p in blocked or []}
        self.iteration_budget = iteration_budget

    def meta(self) -> SpaceMeta:
        return SpaceMeta(
            name="grid2d",
            api_version=API_VERSION,
            space_version="1.0.0",
            capabilities={
                "movement": "four-directional",
                "heuristic": "euclidean",
                "size": [self.width, self.height],
                "blocked": len(self.blocked),
            },
        )

    def install(self, engine) -> None:
        engine.rules.configure(
            neighbors=self.neighbors,
            distance=self.distance,
            node=self.normalize,
            node_key=self.node_key,
        )
        if self.iteration_budget:
            engine.set_rule("run_limit", self.over_budget)

    def in_bounds(self, point: Point) -> bool:
        return 1 <= point[0] <= self.width and 1 <= point[1] <= self.height

    def passable(self, point: Point) -> bool:
        return self.in_bounds(point) and point not in self.blocked

    def neighbors(self, session) -> List[Tuple[Point, Point, int]]:
        x, y = session.active_node
        out = []
        for dx, dy in STEPS:
            point = (x + dx, y + dy)
            if self.passable(point):
                out.append((point, (dx, dy), 1))
        return out

    def distance(self, session) -> float:
        ax, ay = session.active_node
        bx, by = session.to_node
        return math.hypot(ax - bx, ay - by)

    def over_budget(self, session) -> bool:
        return session.cycle_iterations > self.iteration_budget

    @staticmethod
    def normalize(node: Any) -> Point:
        if isinstance(node, str):
            return Grid2DSpace.parse_point(node)
        return (int(node[0]), int(node[1]))

    @staticmethod
    def node_key(node: Point) -> int:
        return (node[0] << 16) | node[1]

    @staticmethod
    def parse_point(text: str) -> Point:
        parts = [part.strip() for part in text.split(",")]
        if len(parts) != 2:
            raise ValueError(f"Invalid grid point: {text!r} (expected X,Y)")
        return (int(parts[0]), int(parts[1]))

    def parse_node(self, text: str) -> Point:
        return self.parse_point(text)

    def format_node(self, node: Point) -> str:
        return f"{node[0]},{node[1]}"

    def random_endpoints(self, rng) -> Optional[Tuple[Point, Point]]:
        open_cells = [
            (x, y)
            for x in range(1, self.width + 1)
            for y in range(1, self.height + 1)
            if (x, y) not in self.blocked
        ]
        if not open_cells:
            return None
        return rng.choice(open_cells), rng.choice(open_cells)
