from __future__ import annotations

from typing import Callable, Iterable, List, Optional

from .path import SearchPath


class Frontier:
    """Live partial paths of one search, ordered by cost on demand.

    Paths that have been superseded (a cheaper route to the same node was
    found, or the node was already expanded) are dropped lazily the next time
    the frontier is ordered, through the ``is_live`` predicate.
    """

    def __init__(self, paths: Optional[Iterable[SearchPath]] = None) -> None:
        self.paths: List[SearchPath] = list(paths or [])

    def add(self, path: SearchPath) -> None:
        self.paths.append(path)

    def extend(self, paths: Iterable[SearchPath]) -> None:
        self.paths.extend(paths)

    def replace(self, paths: Iterable[SearchPath]) -> None:
        self.paths = list(paths)

    def order(self, is_live: Optional[Callable[[SearchPath], bool]] = None) -> List[SearchPath]:
        if is_live is not None:
            self.paths = [path for path in self.paths if is_live(path)]
        # Stable: equal costs keep insertion order
        self.paths.sort(key=lambda path: path.cost)
        return self.paths

    def best_cost(self, is_live: Optional[Callable[[SearchPath], bool]] = None) -> Optional[float]:
        ordered = self.order(is_live)
        return ordered[0].cost if ordered else None

    def take_cheapest(self, is_live: Optional[Callable[[SearchPath], bool]] = None) -> List[SearchPath]:
        """Remove and return every path sharing the lowest cost."""
        ordered = self.order(is_live)
        if not ordered:
            return []
        best = ordered[0].cost
        split = 0
        while split < len(ordered) and ordered[split].cost <= best:
            split += 1
        selected = ordered[:split]
        self.paths = ordered[split:]
        return selected

    def __len__(self) -> int:
        return len(self.paths)

    def __bool__(self) -> bool:
        return bool(self.paths)

    def __iter__(self):
        return iter(self.paths)
