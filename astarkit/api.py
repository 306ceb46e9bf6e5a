from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

from .core.config import collect_space_options, normalize_engine_config, settings_from_config
from .core.engine import AstarEngine
from .core.results import ControlFlag
from .core.session import PathfindSession
from .core.space_api import ProblemSpace
from .core.space_loader import SpaceRegistry


@dataclass(frozen=True)
class EngineBundle:
    engine: AstarEngine
    space: ProblemSpace


def create_engine(
    config: Optional[Dict[str, Any]] = None,
    *,
    registry: Optional[SpaceRegistry] = None,
    space: Optional[ProblemSpace] = None,
    clock: Optional[Callable[[], float]] = None,
) -> EngineBundle:
    cfg = normalize_engine_config(config)
    settings = settings_from_config(cfg)
    if space is None:
        if registry is None:
            registry = SpaceRegistry()
            registry.discover()
        name, options = collect_space_options(cfg)
        space = registry.get(name, options)
    engine = AstarEngine(settings, clock=clock or time.time)
    space.install(engine)
    return EngineBundle(engine=engine, space=space)


def grid_engine(
    width: int = 20,
    height: int = 10,
    *,
    blocked=None,
    caching: bool = False,
    iteration_budget: Optional[int] = None,
) -> AstarEngine:
    options: Dict[str, Any] = {"width": width, "height": height, "blocked": blocked or []}
    if iteration_budget:
        options["iteration_budget"] = iteration_budget
    config = {"engine": {"caching": caching}, "space": {"type": "grid2d", "options": options}}
    return create_engine(config).engine


def solve(
    engine: AstarEngine,
    from_node: Any,
    to_node: Any,
    *,
    validate: Optional[Callable[[PathfindSession], Any]] = None,
    control_flags: Union[ControlFlag, int] = ControlFlag.NONE,
    extra: Any = None,
    max_cycles: Optional[int] = None,
) -> PathfindSession:
    """Run a search to a terminal state, pumping the engine's call-out queue.

    A no-op callback is attached so that run-limit suspensions continue
    instead of cutting off; ``max_cycles`` bounds the number of resumptions.
    """
    session = engine.find_path(
        from_node,
        to_node,
        validate=validate,
        callback=_ignore,
        control_flags=control_flags,
        extra=extra,
    )
    resumed = 0
    while not session.done and len(engine.call_out):
        if max_cycles is not None and resumed >= max_cycles:
            session.terminate()
        engine.call_out.drain(limit=1)
        resumed += 1
    return session


def _ignore(session: PathfindSession) -> None:
    return None
