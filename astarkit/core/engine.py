from __future__ import annotations

import time
from typing import Any, Callable, Hashable, Optional, Union

from .cache import CacheKey, ResultCache
from .config import AstarConfig
from .diagnostics import CachingDisabledError, RuleContractError
from .identity import NodeIdentity
from .logging import get_event_logger, get_logger
from .path import SearchPath
from .results import NO_EDGE, PROCESSING, ControlFlag, ResultCode, is_unknown_distance
from .rules import Rule, RuleRegistry
from .scheduler import CallOutScheduler
from .session import STATE_FOR_CODE, PathfindSession, SessionState

Outcome = Union[SearchPath, ResultCode]


class AstarEngine:
    """A* search over a problem space described entirely by rules.

    Each engine owns its rules, its optional result cache and a default
    in-process call-out queue used to resume suspended sessions. Searches
    run synchronously inside :meth:`find_path` until they finish or
    suspend; suspended sessions continue when the scheduler calls
    :meth:`resume`.

    With an admissible distance rule the returned path is optimal. If the
    rule is admissible but not consistent, a node may be expanded again
    after a cheaper route to it turns up; ``visited`` keeps each key once.
    """

    def __init__(
        self,
        settings: Optional[AstarConfig] = None,
        *,
        rules: Optional[RuleRegistry] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.settings = settings or AstarConfig()
        self.rules = rules or RuleRegistry()
        self.identity = NodeIdentity(self.rules)
        self.clock = clock
        self.call_out = CallOutScheduler()
        engine_cfg = self.settings.engine
        self.resume_delay = engine_cfg.resume_delay_seconds
        self.logger = get_logger("engine", engine_cfg.logs_dir, engine_cfg.log_level)
        self.events = get_event_logger(engine_cfg.logs_dir)
        self.cache: Optional[ResultCache] = None
        self.set_caching(engine_cfg.caching)

    # Rules

    def set_rule(self, name: str, rule: Optional[Rule]) -> None:
        self.rules.set(name, rule)

    def get_rule(self, name: str) -> Optional[Rule]:
        return self.rules.get(name)

    # Cache

    @property
    def caching(self) -> bool:
        return self.cache is not None

    def set_caching(self, enabled: bool) -> None:
        if not enabled:
            self.cache = None
            return
        if self.cache is None:
            self.cache = ResultCache(
                hit_factor=self.settings.cache.hit_factor,
                default_threshold=self.settings.cache.prune_threshold_seconds,
                clock=self.clock,
            )

    def clear_cache(self) -> None:
        if self.cache is None:
            raise CachingDisabledError.for_operation("clear_cache")
        self.cache.clear()
        self.logger.info("cache cleared")

    def prune_cache(self, threshold: Optional[float] = None) -> int:
        if self.cache is None:
            raise CachingDisabledError.for_operation("prune_cache")
        removed = self.cache.prune(threshold)
        self.logger.info("cache pruned: %d removed, %d kept", removed, len(self.cache))
        return removed

    # Searching

    def find_path(
        self,
        from_node: Any,
        to_node: Any,
        validate: Optional[Callable[[PathfindSession], Any]] = None,
        callback: Optional[Callable[[PathfindSession], Any]] = None,
        control_flags: Union[ControlFlag, int] = ControlFlag.NONE,
        extra: Any = None,
    ) -> PathfindSession:
        """Start a search and run its first cycle.

        The returned session is terminal unless it suspended, which only
        happens when a ``callback`` is given and ``NO_CONTINUE`` is not set.
        A suspended session resumes through the ``scheduler`` rule. Without
        one it waits on :attr:`call_out`, which never fires by itself: the
        host must pump it with ``run_due()`` or ``drain()``, or use
        :func:`astarkit.api.solve`.
        """
        self.rules.require_neighbors()
        node_rule = self.rules.node
        if node_rule is not None:
            from_node = node_rule(from_node)
            to_node = node_rule(to_node)
        session = PathfindSession(
            from_node=from_node,
            to_node=to_node,
            validate=validate,
            callback=callback,
            extra=extra,
            control_flags=ControlFlag(control_flags),
            start_time=self.clock(),
        )
        session.to_key = self.identity.key(to_node)
        session.active_node = from_node
        self.logger.debug("find_path %r -> %r", from_node, to_node)
        self._run_cycle(session)
        return session

    def resume(self, session: PathfindSession) -> None:
        if session.done:
            return
        self._run_cycle(session)

    def cache_key(self, session: PathfindSession) -> Optional[CacheKey]:
        validate_key: Optional[Hashable] = None
        if session.validate is not None:
            rule = self.rules.validate_key
            validate_key = rule(session) if rule is not None else None
            # Validation that cannot be represented as a key is never cached
            if validate_key is None:
                return None
        return CacheKey(
            validate_key,
            self.identity.key(session.from_node),
            self.identity.key(session.to_node),
        )

    def _run_cycle(self, session: PathfindSession) -> None:
        if self.rules.cycle is not None:
            self.rules.cycle(session)
        if session.has_flag(ControlFlag.TERMINATE):
            self._finish(session, ResultCode.TERMINATED)
            return
        if session.cycle_index == 0 and not self._begin(session):
            return
        session.cycle_start = self.clock()
        session.cycle_index += 1
        session.cycle_iterations = 0
        session.state = SessionState.SEARCHING
        run_limit = self.rules.run_limit
        while True:
            session.cycle_iterations += 1
            # Every cycle gets at least one step before the limit applies
            if session.cycle_iterations > 1 and run_limit is not None and run_limit(session):
                self._suspend(session, ResultCode.CUT_OFF)
                return
            if not session.pending:
                session.pending = session.frontier.take_cheapest(self._live_check(session))
            if not self._expand_pending(session):
                return
            outcome = self._settle(session)
            if outcome is not None:
                self._finish(session, outcome)
                return
            if session.has_flag(ControlFlag.TERMINATE):
                self._finish(session, ResultCode.TERMINATED)
                return

    def _begin(self, session: PathfindSession) -> bool:
        if self.cache is not None and not session.has_flag(ControlFlag.UNCACHE):
            key = self.cache_key(session)
            entry = self.cache.get(key) if key is not None else None
            if entry is not None:
                self.logger.debug("cache hit %r (hits=%d)", key, entry.hits)
                outcome = entry.path if entry.path is not None else ResultCode.IMPOSSIBLE
                self._finish(session, outcome, from_cache=True)
                return False
        session.active_node = session.from_node
        session.active_edge = NO_EDGE
        session.active_path = None
        start = SearchPath.start(session.from_node, self._distance(session, None))
        session.active_path = start
        from_key = self.identity.key(session.from_node)
        session.reached[from_key] = start
        if self._is_complete(session, from_key):
            self._finish(session, start)
            return False
        session.frontier.replace([start])
        return True

    def _expand_pending(self, session: PathfindSession) -> bool:
        neighbors_rule = self.rules.require_neighbors()
        is_live = self._live_check(session)
        while session.pending:
            path = session.pending[0]
            if not is_live(path):
                session.pending.pop(0)
                continue
            session.active_path = path
            session.active_node = path.last_node
            session.active_edge = path.last_edge
            neighbors = neighbors_rule(session)
            if neighbors is PROCESSING:
                # Resumes at this same path
                self._suspend(session, ResultCode.CANNOT_CONTINUE)
                return False
            if not isinstance(neighbors, (list, tuple)):
                raise RuleContractError.for_rule(
                    "neighbors",
                    "E-RULE-NEIGHBORS",
                    f"Invalid return value from neighbors rule: {type(neighbors).__name__}",
                )
            key = self.identity.key(path.last_node)
            session.visited.add(key)
            session.expanded[key] = path
            for neighbor in neighbors:
                self._consider(session, path, neighbor)
            session.pending.pop(0)
        return True

    def _consider(self, session: PathfindSession, parent: SearchPath, neighbor: Any) -> None:
        try:
            node, edge, edge_cost = neighbor
        except (TypeError, ValueError):
            raise RuleContractError.for_rule(
                "neighbors",
                "E-RULE-NEIGHBORS",
                f"Neighbors must be (node, edge, cost) triples, got {neighbor!r}",
            ) from None
        key = self.identity.key(node)
        # Expanded keys reopen when reached strictly cheaper
        known = session.reached.get(key)
        if known is not None and known.accumulated_cost <= parent.accumulated_cost + edge_cost:
            return
        session.active_node = node
        session.active_edge = edge
        if session.validate is not None and not session.validate(session):
            return
        extended = parent.extend(node, edge, self._distance(session, parent), edge_cost)
        session.reached[key] = extended
        if self._is_complete(session, key):
            best = session.best_candidate
            # Strictly cheaper only: the first goal found at a given cost wins
            if best is None or extended.cost < best.cost:
                session.best_candidate = extended
        else:
            session.frontier.add(extended)

    def _settle(self, session: PathfindSession) -> Optional[Outcome]:
        best_cost = session.frontier.best_cost(self._live_check(session))
        candidate = session.best_candidate
        if candidate is not None and (best_cost is None or candidate.cost <= best_cost):
            return candidate
        if best_cost is None:
            return ResultCode.IMPOSSIBLE
        return None

    def _live_check(self, session: PathfindSession) -> Callable[[SearchPath], bool]:
        def is_live(path: SearchPath) -> bool:
            key = self.identity.key(path.last_node)
            return session.reached.get(key) is path and session.expanded.get(key) is not path

        return is_live

    def _distance(self, session: PathfindSession, parent: Optional[SearchPath]) -> float:
        rule = self.rules.distance
        value = rule(session) if rule is not None else None
        if is_unknown_distance(value):
            return parent.distance + 1.0 if parent is not None else 0.0
        return float(value)

    def _is_complete(self, session: PathfindSession, key: Hashable) -> bool:
        rule = self.rules.completion
        if rule is not None:
            return bool(rule(session))
        return key == session.to_key

    def _suspend(self, session: PathfindSession, fallback: ResultCode) -> None:
        if session.callback is None or session.has_flag(ControlFlag.NO_CONTINUE):
            self._finish(session, fallback)
            return
        session.result = ResultCode.PROCESSING
        session.state = SessionState.SUSPENDED
        scheduler = self.rules.scheduler or self.call_out
        self.logger.debug(
            "suspending %r -> %r after cycle %d", session.from_node, session.to_node, session.cycle_index
        )
        scheduler(self.resume, self.resume_delay, session)

    def _finish(self, session: PathfindSession, outcome: Outcome, *, from_cache: bool = False) -> None:
        session.result = outcome
        session.pending = []
        if isinstance(outcome, SearchPath):
            session.state = SessionState.COMPLETED
        else:
            session.state = STATE_FOR_CODE[outcome]
        cacheable = isinstance(outcome, SearchPath) or outcome is ResultCode.IMPOSSIBLE
        if (
            cacheable
            and not from_cache
            and self.cache is not None
            and not session.has_flag(ControlFlag.UNCACHE)
        ):
            # Key first: the callback may disturb whatever the validate key is derived from
            key = self.cache_key(session)
            if key is not None:
                self.cache.put(key, outcome if isinstance(outcome, SearchPath) else None)
        self.logger.info(
            "pathfind %r -> %r finished: %s (cycles=%d, visited=%d%s)",
            session.from_node,
            session.to_node,
            session.state.value,
            session.cycle_index,
            len(session.visited),
            ", cached" if from_cache else "",
        )
        self.events.record(
            {
                "event": "session.finished",
                "from": repr(session.from_node),
                "to": repr(session.to_node),
                "state": session.state.value,
                "cycles": session.cycle_index,
                "visited": len(session.visited),
                "from_cache": from_cache,
                "cost": outcome.cost if isinstance(outcome, SearchPath) else None,
            }
        )
        if session.callback is not None and not session.has_flag(ControlFlag.SILENT):
            session.callback(session)
