from __future__ import annotations

from typing import Any, Hashable

from .rules import RuleRegistry


class NodeIdentity:
    """Canonical keys for nodes, through the registry's node-key rule.

    The same node must always produce the same key; two logically distinct
    nodes must never share one, or the second is silently treated as visited.
    """

    def __init__(self, rules: RuleRegistry) -> None:
        self.rules = rules

    def key(self, node: Any) -> Hashable:
        rule = self.rules.node_key
        return rule(node) if rule is not None else node

    def same(self, a: Any, b: Any) -> bool:
        return self.key(a) == self.key(b)
