from __future__ import annotations

import json
from pathlib import Path

import pytest

from astarkit.cli import main


def test_find_prints_route(capsys):
    main(["find", "--from", "1,1", "--to", "20,10"])
    payload = json.loads(capsys.readouterr().out)
    assert payload["state"] == "completed"
    assert payload["from"] == "1,1"
    assert len(payload["route"]) == 29
    assert payload["route"][-1] == "20,10"


def test_find_impossible_exits_with_two(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["find", "--from", "1,1", "--to", "5,5", "--block", "2,1", "--block", "1,2"])
    assert excinfo.value.code == 2
    payload = json.loads(capsys.readouterr().out)
    assert payload["result"] == "IMPOSSIBLE"


def test_find_with_config_and_adjacency(tmp_path: Path, capsys):
    config = tmp_path / "graph.yaml"
    config.write_text(
        "space:\n  type: adjacency\n  options:\n    edges:\n      a: [[b, 1], [c, 4]]\n      b: [[c, 1]]\n",
        encoding="utf-8",
    )
    main(["find", "-c", str(config), "--from", "a", "--to", "c", "--no-cache"])
    payload = json.loads(capsys.readouterr().out)
    assert payload["route"] == ["a", "b", "c"]


def test_validate_ok(tmp_path: Path, capsys):
    config = tmp_path / "engine.json"
    config.write_text(json.dumps({"engine": {"caching": True}}), encoding="utf-8")
    main(["validate", "-c", str(config)])
    assert json.loads(capsys.readouterr().out) == {"status": "ok"}


def test_validate_reports_errors(tmp_path: Path, capsys):
    config = tmp_path / "engine.json"
    config.write_text(json.dumps({"cache": {"prune_threshold_seconds": 0}}), encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        main(["validate", "-c", str(config)])
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    errors = json.loads(captured.out)
    assert errors[0]["code"] == "E-CONFIG-SCHEMA"
    assert "ERROR E-CONFIG-SCHEMA at cache/prune_threshold_seconds" in captured.err


def test_bad_config_on_find_exits_with_one(tmp_path: Path, capsys):
    config = tmp_path / "engine.json"
    config.write_text(json.dumps({"engine": {"log_level": "LOUD"}}), encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        main(["find", "-c", str(config), "--from", "1,1", "--to", "2,2"])
    assert excinfo.value.code == 1
    assert "E-CONFIG-SCHEMA at engine/log_level" in capsys.readouterr().err


def test_random_is_reproducible(capsys):
    main(["random", "--seed", "7"])
    first = capsys.readouterr().out
    main(["random", "--seed", "7"])
    assert capsys.readouterr().out == first
    assert json.loads(first)["state"] == "completed"


def test_spaces_lists_builtins(capsys):
    main(["spaces"])
    names = {item["name"] for item in json.loads(capsys.readouterr().out)}
    assert {"grid2d", "adjacency"} <= names
