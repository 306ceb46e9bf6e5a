from __future__ import annotations

import pytest

from astarkit.core.diagnostics import RuleContractError
from astarkit.core.engine import AstarEngine
from astarkit.core.identity import NodeIdentity
from astarkit.core.rules import RULE_NAMES, RuleRegistry
from astarkit.core.space_api import rules_installed
from astarkit.spaces_builtin.grid2d import Grid2DSpace


def test_unknown_rule_name_is_rejected():
    rules = RuleRegistry()
    with pytest.raises(RuleContractError) as excinfo:
        rules.set("heuristic", lambda s: 0)
    assert excinfo.value.code == "E-RULE-UNKNOWN"
    with pytest.raises(RuleContractError):
        rules.get("heuristic")


def test_rule_must_be_callable():
    rules = RuleRegistry()
    with pytest.raises(RuleContractError) as excinfo:
        rules.set("distance", 3)
    assert excinfo.value.code == "E-RULE-CALLABLE"


def test_rules_can_be_cleared():
    engine = AstarEngine()
    engine.set_rule("distance", abs)
    assert engine.get_rule("distance") is abs
    engine.set_rule("distance", None)
    assert engine.get_rule("distance") is None


def test_to_dict_names_every_rule():
    rules = RuleRegistry()
    rules.configure(neighbors=len)
    described = rules.to_dict()
    assert set(described) == set(RULE_NAMES)
    assert described["neighbors"] == "len"
    assert described["distance"] is None


def test_installed_rules_for_grid():
    engine = AstarEngine()
    Grid2DSpace(iteration_budget=5).install(engine)
    assert rules_installed(engine) == ["neighbors", "distance", "node", "node_key", "run_limit"]


def test_identity_uses_node_key_rule():
    rules = RuleRegistry()
    identity = NodeIdentity(rules)
    assert identity.key("a") == "a"
    rules.set("node_key", str.lower)
    assert identity.same("Room", "ROOM")
    assert not identity.same("room", "hall")
