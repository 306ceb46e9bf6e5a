from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, Optional

from .diagnostics import RuleContractError

Rule = Callable[..., Any]

RULE_NAMES = (
    "neighbors",
    "distance",
    "node",
    "node_key",
    "completion",
    "run_limit",
    "cycle",
    "validate_key",
    "scheduler",
)


@dataclass
class RuleRegistry:
    """Callbacks configuring one engine instance.

    Every rule except ``neighbors`` is optional. Rules that inspect a search
    receive the :class:`~astarkit.core.session.PathfindSession` as their only
    argument; ``node`` and ``node_key`` receive a node, and ``scheduler``
    receives ``(resume_fn, delay_seconds, session)``.
    """

    neighbors: Optional[Rule] = None
    distance: Optional[Rule] = None
    node: Optional[Rule] = None
    node_key: Optional[Rule] = None
    completion: Optional[Rule] = None
    run_limit: Optional[Rule] = None
    cycle: Optional[Rule] = None
    validate_key: Optional[Rule] = None
    scheduler: Optional[Rule] = None

    def set(self, name: str, rule: Optional[Rule]) -> None:
        _check_name(name)
        if rule is not None and not callable(rule):
            raise RuleContractError.for_rule(
                name,
                "E-RULE-CALLABLE",
                f"Rule '{name}' must be callable, got {type(rule).__name__}",
            )
        setattr(self, name, rule)

    def get(self, name: str) -> Optional[Rule]:
        _check_name(name)
        return getattr(self, name)

    def configure(self, **rules: Optional[Rule]) -> None:
        for name, rule in rules.items():
            self.set(name, rule)

    def require_neighbors(self) -> Rule:
        if self.neighbors is None:
            raise RuleContractError.for_rule(
                "neighbors",
                "E-RULE-MISSING",
                "A neighbors rule must be set before pathfinding",
            )
        return self.neighbors

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            item.name: _describe(getattr(self, item.name)) for item in fields(self)
        }


def _check_name(name: str) -> None:
    if name not in RULE_NAMES:
        raise RuleContractError.for_rule(
            name,
            "E-RULE-UNKNOWN",
            f"Unknown rule '{name}'",
            known=list(RULE_NAMES),
        )


def _describe(rule: Optional[Rule]) -> Optional[str]:
    if rule is None:
        return None
    return getattr(rule, "__qualname__", None) or type(rule).__name__
