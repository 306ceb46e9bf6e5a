from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from .results import NO_EDGE


@dataclass(frozen=True)
class SearchPath:
    nodes: Tuple[Any, ...]
    edges: Tuple[Any, ...]
    distance: float
    cost: float
    # Summed edge costs, kept apart from cost so comparisons between routes are exact
    accumulated: float = 0.0

    @classmethod
    def start(cls, node: Any, distance: float) -> "SearchPath":
        return cls(nodes=(node,), edges=(), distance=distance, cost=distance)

    def extend(self, node: Any, edge: Any, distance: float, edge_cost: float) -> "SearchPath":
        accumulated = self.accumulated + edge_cost
        return SearchPath(
            nodes=self.nodes + (node,),
            edges=self.edges + (edge,),
            distance=distance,
            cost=accumulated + distance,
            accumulated=accumulated,
        )

    @property
    def accumulated_cost(self) -> float:
        return self.accumulated

    @property
    def first_node(self) -> Any:
        return self.nodes[0]

    @property
    def last_node(self) -> Any:
        return self.nodes[-1]

    @property
    def last_edge(self) -> Any:
        return self.edges[-1] if self.edges else NO_EDGE

    def __len__(self) -> int:
        return len(self.edges)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [_plain(node) for node in self.nodes],
            "edges": [_plain(edge) for edge in self.edges],
            "distance": self.distance,
            "cost": self.cost,
        }


def _plain(value: Any) -> Any:
    if isinstance(value, tuple):
        return [_plain(item) for item in value]
    return value
