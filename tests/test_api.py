from __future__ import annotations

import json
from pathlib import Path

from astarkit import ControlFlag, ResultCode, SessionState, create_engine, grid_engine, solve
from astarkit.spaces_builtin.adjacency import AdjacencySpace


def test_create_engine_defaults_to_grid():
    bundle = create_engine()
    assert bundle.space.meta().name == "grid2d"
    assert not bundle.engine.caching
    session = bundle.engine.find_path((1, 1), (20, 10))
    assert len(session.path) == 28


def test_create_engine_with_explicit_space():
    space = AdjacencySpace({"a": [["b", 1]]})
    bundle = create_engine({"engine": {"caching": True}}, space=space)
    assert bundle.space is space
    assert bundle.engine.caching
    assert solve(bundle.engine, "a", "b").succeeded


def test_solve_pumps_suspended_search():
    engine = grid_engine(iteration_budget=3)
    session = solve(engine, (1, 1), (20, 10))
    assert session.state == SessionState.COMPLETED
    assert session.cycle_index > 1
    assert len(session.path) == 28


def test_solve_stops_after_max_cycles():
    engine = grid_engine(iteration_budget=1)
    session = solve(engine, (1, 1), (20, 10), max_cycles=3)
    assert session.result is ResultCode.TERMINATED
    assert len(engine.call_out) == 0


def test_solve_respects_no_continue():
    engine = grid_engine(iteration_budget=2)
    session = solve(engine, (1, 1), (20, 10), control_flags=ControlFlag.NO_CONTINUE)
    assert session.result is ResultCode.CUT_OFF


def test_grid_engine_caching_and_walls():
    engine = grid_engine(5, 5, blocked=[(2, 1), (2, 2), (2, 3), (2, 4)], caching=True)
    session = solve(engine, (1, 1), (3, 1))
    assert (1, 5) in session.path.nodes
    assert len(engine.cache) == 1


def test_events_are_written_to_logs_dir(tmp_path: Path):
    bundle = create_engine({"engine": {"logs_dir": str(tmp_path)}})
    bundle.engine.find_path((1, 1), (3, 3))
    lines = (tmp_path / "events.jsonl").read_text(encoding="utf-8").splitlines()
    event = json.loads(lines[-1])
    assert event["event"] == "session.finished"
    assert event["state"] == "completed"
    assert event["cost"] == 4.0
