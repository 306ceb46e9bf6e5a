from __future__ import annotations

import pytest

from astarkit.core.diagnostics import (
    CachingDisabledError,
    ConfigError,
    Diagnostic,
    Diagnostics,
    RuleContractError,
)


def test_rule_contract_error_carries_rule_and_data():
    error = RuleContractError.for_rule("heuristic", "E-RULE-UNKNOWN", "Unknown rule", known=["distance"])
    assert error.code == "E-RULE-UNKNOWN"
    assert error.diagnostic.location == "heuristic"
    assert error.diagnostic.data == {"known": ["distance"]}
    assert str(error) == "[E-RULE-UNKNOWN] Unknown rule"


def test_caching_disabled_error_has_hint():
    error = CachingDisabledError.for_operation("prune_cache")
    assert error.code == "E-CACHE-DISABLED"
    assert error.diagnostic.format() == (
        "ERROR E-CACHE-DISABLED at prune_cache: prune_cache() called with caching off\n"
        "  hint: enable caching with set_caching(True) or engine.caching in config"
    )


def test_warnings_do_not_raise():
    diagnostics = Diagnostics([Diagnostic(code="W-STYLE", message="odd", severity="WARNING")])
    diagnostics.raise_for_errors()
    assert not diagnostics.has_errors()
    assert diagnostics.format() == ["WARNING W-STYLE at <root>: odd"]


def test_first_error_is_raised():
    diagnostics = Diagnostics()
    diagnostics.extend(
        [
            Diagnostic(code="W-STYLE", message="odd", severity="WARNING"),
            Diagnostic(code="E-ONE", message="first", location="engine"),
            Diagnostic(code="E-TWO", message="second"),
        ]
    )
    assert len(diagnostics) == 3
    assert [d.code for d in diagnostics.errors()] == ["E-ONE", "E-TWO"]
    with pytest.raises(ConfigError) as excinfo:
        diagnostics.raise_for_errors()
    assert excinfo.value.code == "E-ONE"
    assert diagnostics.to_list()[1] == {
        "code": "E-ONE",
        "message": "first",
        "severity": "ERROR",
        "location": "engine",
        "hints": [],
        "data": None,
    }
