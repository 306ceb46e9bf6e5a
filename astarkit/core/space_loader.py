from __future__ import annotations

import inspect
from importlib import metadata
from typing import Any, Dict, List, Optional

from .space_api import API_VERSION, ProblemSpace, SpaceMeta


SPACE_GROUP = "astarkit.spaces"


def _major(version: str) -> str:
    return version.split(".")[0]


def _iter_entry_points(group: str):
    eps = metadata.entry_points()
    if hasattr(eps, "select"):
        return list(eps.select(group=group))
    return list(eps.get(group, []))


class SpaceRegistry:
    def __init__(self) -> None:
        self._registry: Dict[str, Any] = {}

    def register(self, name: str, provider: Any) -> None:
        self._registry[name] = provider

    def discover(self) -> None:
        for ep in _iter_entry_points(SPACE_GROUP):
            self.register(ep.name, ep.load)

        # Source checkouts have no installed entry points.
        self._register_builtins()

    def names(self) -> List[str]:
        return sorted(self._registry)

    def get(self, name: str, options: Optional[Dict[str, Any]] = None) -> ProblemSpace:
        if name not in self._registry:
            raise KeyError(f"Problem space not found: {name}")
        space = _instantiate_space(self._registry[name], options or {})
        _check_compatibility(space.meta())
        return space

    def _register_builtins(self) -> None:
        from astarkit.spaces_builtin.adjacency import AdjacencySpace
        from astarkit.spaces_builtin.grid2d import Grid2DSpace

        if "grid2d" not in self._registry:
            self.register("grid2d", Grid2DSpace)
        if "adjacency" not in self._registry:
            self.register("adjacency", AdjacencySpace)


def _check_compatibility(meta: SpaceMeta) -> None:
    if _major(meta.api_version) != _major(API_VERSION):
        raise RuntimeError(
            f"Space API version mismatch: host {API_VERSION} vs space {meta.api_version}"
        )


def _instantiate_space(provider: Any, options: Dict[str, Any]) -> ProblemSpace:
    obj = provider
    # Entry points register their loader; calling it yields the class
    if callable(obj) and not inspect.isclass(obj):
        obj = obj()
    if inspect.isclass(obj):
        obj = obj(**options)
    if not hasattr(obj, "meta") or not hasattr(obj, "install"):
        raise RuntimeError(f"Loaded space does not implement meta()/install(): {type(obj)}")
    return obj
