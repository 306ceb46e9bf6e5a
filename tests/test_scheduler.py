from __future__ import annotations

import asyncio

from astarkit.core.config import AstarConfig, EngineSettings
from astarkit.core.engine import AstarEngine
from astarkit.core.scheduler import DEFAULT_RESUME_DELAY, AsyncioScheduler, CallOutScheduler
from astarkit.core.session import SessionState
from astarkit.spaces_builtin.grid2d import Grid2DSpace


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_run_due_respects_delays():
    clock = FakeClock()
    call_out = CallOutScheduler(clock=clock)
    ran = []
    call_out(ran.append, 5, "late")
    call_out(ran.append, 1, "early")
    assert call_out.next_due() == 1
    assert call_out.run_due() == 0
    clock.now = 2
    assert call_out.run_due() == 1
    assert ran == ["early"]
    assert call_out.run_due(now=10) == 1
    assert ran == ["early", "late"]
    assert call_out.next_due() is None


def test_drain_and_cancel():
    call_out = CallOutScheduler(clock=FakeClock())
    ran = []
    keep, drop = object(), object()
    call_out(ran.append, 1, keep)
    call_out(ran.append, 1, drop)
    call_out(ran.append, 2, keep)
    assert call_out.cancel(drop) == 1
    assert call_out.drain(limit=1) == 1
    assert len(call_out) == 1
    assert call_out.drain() == 1
    assert ran == [keep, keep]


def test_custom_scheduler_receives_resume_call():
    engine = AstarEngine()
    Grid2DSpace(10, 10).install(engine)
    scheduled = []
    engine.set_rule("scheduler", lambda resume, delay, session: scheduled.append((resume, delay, session)))
    engine.set_rule("run_limit", lambda s: True)
    session = engine.find_path((1, 1), (10, 10), callback=lambda s: None)
    assert len(scheduled) == 1
    resume, delay, scheduled_session = scheduled[0]
    assert delay == DEFAULT_RESUME_DELAY
    assert scheduled_session is session
    assert len(engine.call_out) == 0
    while not session.done:
        resume, _, target = scheduled.pop()
        resume(target)
    assert session.state == SessionState.COMPLETED
    assert len(session.path) == 18


def test_resume_of_finished_session_is_ignored():
    engine = AstarEngine()
    Grid2DSpace(5, 5).install(engine)
    finished = []
    session = engine.find_path((1, 1), (5, 5), callback=finished.append)
    engine.resume(session)
    assert finished == [session]


def test_asyncio_scheduler_completes_search():
    async def run():
        settings = AstarConfig(engine=EngineSettings(resume_delay_seconds=0))
        engine = AstarEngine(settings)
        Grid2DSpace(8, 8).install(engine)
        engine.set_rule("scheduler", AsyncioScheduler())
        engine.set_rule("run_limit", lambda s: s.cycle_iterations > 2)
        done = asyncio.get_running_loop().create_future()
        session = engine.find_path((1, 1), (8, 8), callback=done.set_result)
        assert session.state == SessionState.SUSPENDED
        return await asyncio.wait_for(done, timeout=5)

    session = asyncio.run(run())
    assert session.state == SessionState.COMPLETED
    assert session.cycle_index > 1
    assert len(session.path) == 14


def test_asyncio_scheduler_releases_fired_handles():
    async def run():
        settings = AstarConfig(engine=EngineSettings(resume_delay_seconds=0))
        engine = AstarEngine(settings)
        Grid2DSpace(20, 10).install(engine)
        scheduler = AsyncioScheduler()
        engine.set_rule("scheduler", scheduler)
        engine.set_rule("run_limit", lambda s: True)
        loop = asyncio.get_running_loop()
        waiting = []
        for goal in ((20, 10), (10, 5), (1, 10)):
            done = loop.create_future()
            engine.find_path((1, 1), goal, callback=done.set_result)
            waiting.append(done)
        sessions = await asyncio.wait_for(asyncio.gather(*waiting), timeout=10)
        return scheduler, sessions

    scheduler, sessions = asyncio.run(run())
    assert all(session.state == SessionState.COMPLETED for session in sessions)
    assert scheduler.handles == []


def test_asyncio_cancel_all_leaves_session_suspended():
    async def run():
        engine = AstarEngine()
        Grid2DSpace(8, 8).install(engine)
        scheduler = AsyncioScheduler()
        engine.set_rule("scheduler", scheduler)
        engine.set_rule("run_limit", lambda s: True)
        finished = []
        session = engine.find_path((1, 1), (8, 8), callback=finished.append)
        assert len(scheduler.handles) == 1
        scheduler.cancel_all()
        await asyncio.sleep(0)
        return scheduler, session, finished

    scheduler, session, finished = asyncio.run(run())
    assert scheduler.handles == []
    assert session.state == SessionState.SUSPENDED
    assert finished == []
