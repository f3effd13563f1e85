"""Tests for the analysis engine — ordering, skipping, crash isolation."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from agent_readiness.engine import SKIPPED_MESSAGE, AnalysisEngine
from agent_readiness.types import (
    Criterion,
    CriterionResult,
    EvaluationResult,
    Pillar,
    ProjectInfo,
)


def _check(cid: str, passed: bool = True, delay: float = 0.0, calls: list | None = None):
    async def check(repo_path, project_info, evaluator=None):
        if calls is not None:
            calls.append(cid)
        if delay:
            await asyncio.sleep(delay)
        return CriterionResult(cid, passed, f"{cid} ran")
    return check


def _crit(cid, check, level=1, requires_llm=False, pillar_id="p"):
    return Criterion(
        id=cid,
        name=cid,
        description=cid,
        pillar_id=pillar_id,
        level=level,
        check=check,
        requires_llm=requires_llm,
    )


def _pillar(pid, *criteria):
    return Pillar(id=pid, name=pid.upper(), description="", icon="•", criteria=tuple(criteria))


def _engine(pillars, evaluator=None, **kwargs):
    return AnalysisEngine(pillars, "/tmp/repo", ProjectInfo(), evaluator=evaluator, **kwargs)


# ─── Ordering ────────────────────────────────────────────────────────


class TestOrdering:
    @pytest.mark.asyncio
    async def test_results_keep_catalog_order(self):
        # The slowest check comes first; gather still returns catalog order
        pillar = _pillar(
            "p",
            _crit("slow", _check("slow", delay=0.05)),
            _crit("fast", _check("fast")),
            _crit("mid", _check("mid", delay=0.01)),
        )
        results = await _engine([pillar]).run()
        assert [r.criterion_id for r in results["p"]] == ["slow", "fast", "mid"]

    @pytest.mark.asyncio
    async def test_pillars_keyed_in_order(self):
        pillars = [
            _pillar("b", _crit("b1", _check("b1"), pillar_id="b")),
            _pillar("a", _crit("a1", _check("a1"), pillar_id="a")),
        ]
        results = await _engine(pillars).run()
        assert list(results.keys()) == ["b", "a"]

    @pytest.mark.asyncio
    async def test_criteria_in_pillar_run_concurrently(self):
        pillar = _pillar("p", *[_crit(f"c{i}", _check(f"c{i}", delay=0.1)) for i in range(5)])
        loop = asyncio.get_running_loop()
        start = loop.time()
        await _engine([pillar]).run()
        assert loop.time() - start < 0.4

    @pytest.mark.asyncio
    async def test_pillars_run_sequentially(self):
        calls: list[str] = []
        pillars = [
            _pillar("a", _crit("a1", _check("a1", delay=0.02, calls=calls), pillar_id="a")),
            _pillar("b", _crit("b1", _check("b1", calls=calls), pillar_id="b")),
        ]
        await _engine(pillars).run()
        assert calls == ["a1", "b1"]

    @pytest.mark.asyncio
    async def test_empty_pillar(self):
        results = await _engine([_pillar("empty")]).run()
        assert results["empty"] == []


# ─── Skipping ────────────────────────────────────────────────────────


class TestSkipping:
    @pytest.mark.asyncio
    async def test_llm_criterion_skipped_without_evaluator(self):
        calls: list[str] = []
        pillar = _pillar("p", _crit("ai", _check("ai", calls=calls), level=5, requires_llm=True))

        results = await _engine([pillar]).run()
        r = results["p"][0]
        assert r.skipped is True
        assert r.passed is False
        assert r.message == SKIPPED_MESSAGE
        assert calls == []

    @pytest.mark.asyncio
    async def test_llm_criterion_runs_with_evaluator(self):
        evaluator = AsyncMock()
        evaluator.evaluate.return_value = EvaluationResult(True, "looks good")

        async def ai_check(repo_path, project_info, ev=None):
            verdict = await ev.evaluate("prompt", "context")
            return verdict.for_criterion("ai")

        pillar = _pillar("p", _crit("ai", ai_check, level=5, requires_llm=True))
        results = await _engine([pillar], evaluator=evaluator).run()

        r = results["p"][0]
        assert r.passed is True
        assert r.skipped is False
        assert r.message == "looks good"
        evaluator.evaluate.assert_awaited_once_with("prompt", "context")

    @pytest.mark.asyncio
    async def test_non_llm_criterion_ignores_missing_evaluator(self):
        pillar = _pillar("p", _crit("plain", _check("plain")))
        results = await _engine([pillar]).run()
        assert results["p"][0].passed is True


# ─── Crash Isolation ─────────────────────────────────────────────────


class TestCrashIsolation:
    @pytest.mark.asyncio
    async def test_crash_becomes_failed_result(self):
        async def boom(repo_path, project_info, evaluator=None):
            raise RuntimeError("disk on fire")

        pillar = _pillar(
            "p",
            _crit("ok", _check("ok")),
            _crit("boom", boom),
            _crit("after", _check("after")),
        )
        results = await _engine([pillar]).run()
        ok, crashed, after = results["p"]

        assert ok.passed and after.passed
        assert crashed.criterion_id == "boom"
        assert crashed.passed is False
        assert crashed.skipped is False
        assert "Check failed" in crashed.message
        assert "disk on fire" in crashed.message


# ─── Callbacks ───────────────────────────────────────────────────────


class TestCallbacks:
    @pytest.mark.asyncio
    async def test_start_and_complete_fire_per_pillar(self):
        events: list[tuple] = []
        pillars = [
            _pillar("a", _crit("a1", _check("a1"), pillar_id="a")),
            _pillar("b", _crit("b1", _check("b1", passed=False), pillar_id="b")),
        ]

        await _engine(
            pillars,
            on_pillar_start=lambda p: events.append(("start", p.id)),
            on_pillar_complete=lambda p, rs: events.append(("done", p.id, len(rs))),
        ).run()

        assert events == [
            ("start", "a"), ("done", "a", 1),
            ("start", "b"), ("done", "b", 1),
        ]


def test_run_sync():
    pillar = _pillar("p", _crit("c", _check("c")))
    results = _engine([pillar]).run_sync()
    assert results["p"][0].criterion_id == "c"
