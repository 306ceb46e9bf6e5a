from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from astarkit.core.space_api import API_VERSION, ProblemSpace, SpaceMeta


class AdjacencySpace(ProblemSpace):
    """Weighted directed graph given as adjacency lists.

    ``edges`` maps a node name to ``[target, cost]`` pairs (or
    ``{"to": ..., "cost": ..., "label": ...}`` mappings). ``estimates``
    optionally maps ``(node, goal)`` pairs, written ``"node->goal"``, to a
    heuristic estimate; pairs without one estimate 0, which keeps the
    search admissible (plain uniform-cost search when no table is given).
    """

    def __init__(
        self,
        edges: Optional[Mapping[str, Iterable[Any]]] = None,
        estimates: Optional[Mapping[str, float]] = None,
        undirected: bool = False,
    ) -> None:
        self.graph: Dict[str, List[Tuple[str, str, float]]] = {}
        for source, targets in (edges or {}).items():
            for item in targets:
                target, cost, label = _parse_edge(source, item)
                self.add_edge(source, target, cost, label)
                if undirected:
                    self.add_edge(target, source, cost, f"{target}->{source}")
        self.estimates: Dict[Tuple[str, str], float] = {}
        for pair, value in (estimates or {}).items():
            node, _, goal = pair.partition("->")
            self.estimates[(node.strip(), goal.strip())] = float(value)

    def add_edge(self, source: str, target: str, cost: float, label: Optional[str] = None) -> None:
        self.graph.setdefault(source, []).append((target, label or f"{source}->{target}", float(cost)))
        self.graph.setdefault(target, [])

    def meta(self) -> SpaceMeta:
        return SpaceMeta(
            name="adjacency",
            api_version=API_VERSION,
            space_version="1.0.0",
            capabilities={
                "nodes": len(self.graph),
                "edges": sum(len(targets) for targets in self.graph.values()),
                "heuristic": "table" if self.estimates else "none",
            },
        )

    def install(self, engine) -> None:
        engine.rules.configure(neighbors=self.neighbors, distance=self.distance, node=str)

    def neighbors(self, session) -> List[Tuple[str, str, float]]:
        return [(target, label, cost) for target, label, cost in self.graph.get(session.active_node, [])]

    def distance(self, session) -> float:
        return self.estimates.get((session.active_node, session.to_node), 0.0)

    def random_endpoints(self, rng) -> Optional[Tuple[str, str]]:
        nodes = sorted(self.graph)
        if not nodes:
            return None
        return rng.choice(nodes), rng.choice(nodes)


def _parse_edge(source: str, item: Any) -> Tuple[str, float, Optional[str]]:
    if isinstance(item, Mapping):
        return str(item["to"]), float(item.get("cost", 1)), item.get("label")
    if isinstance(item, Sequence) and not isinstance(item, str):
        if len(item) == 2:
            return str(item[0]), float(item[1]), None
        if len(item) == 3:
            return str(item[0]), float(item[1]), str(item[2])
    if isinstance(item, str):
        return item, 1.0, None
    raise ValueError(f"Invalid edge from {source!r}: {item!r}")
