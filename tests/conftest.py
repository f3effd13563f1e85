import os

import pytest

from agent_readiness import config
from agent_readiness.types import Criterion, CriterionResult, Pillar

_ENV_VARS = (
    "AGENT_READINESS_LLM_PROVIDER",
    "AGENT_READINESS_LLM_MODEL",
    "AGENT_READINESS_LLM_BASE_URL",
    "AGENT_READINESS_API_KEY",
    "AGENT_READINESS_LLM_TIMEOUT",
    "OPENAI_API_KEY",
    "ANTHROPIC_API_KEY",
    "CI",
)


@pytest.fixture(autouse=True)
def reset_agent_readiness_env(monkeypatch):
    """Clear provider env vars and reload config between every test."""
    for var in _ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    config.reload()

    yield

    config.reload()


@pytest.fixture
def make_repo(tmp_path):
    """Write ``{relative_path: content}`` into a fresh repo directory."""

    def _make(files: dict[str, str] | None = None):
        root = tmp_path / "repo"
        root.mkdir(exist_ok=True)
        for rel, content in (files or {}).items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return root

    return _make


def age_file(path, days: float) -> None:
    """Push a file's mtime ``days`` into the past."""
    import time

    stamp = time.time() - days * 24 * 60 * 60
    os.utime(path, (stamp, stamp))


# ─── Synthetic catalogs ──────────────────────────────────────────────


async def _noop_check(repo_path, project_info, evaluator=None):
    raise AssertionError("synthetic criteria are never executed")


def make_criterion(cid: str, level: int, pillar_id: str = "p", requires_llm: bool = False):
    return Criterion(
        id=cid,
        name=f"Criterion {cid}",
        description=f"Synthetic criterion {cid}",
        pillar_id=pillar_id,
        level=level,
        check=_noop_check,
        requires_llm=requires_llm,
    )


def make_pillar(pillar_id: str, criteria) -> Pillar:
    return Pillar(
        id=pillar_id,
        name=pillar_id.title(),
        description=f"Synthetic pillar {pillar_id}",
        icon="•",
        criteria=tuple(criteria),
    )


def result(cid: str, passed: bool, skipped: bool = False, message: str = "") -> CriterionResult:
    return CriterionResult(
        criterion_id=cid,
        passed=passed,
        message=message or ("ok" if passed else "failing"),
        skipped=skipped,
    )


@pytest.fixture
def sample_report():
    """Small finished report: one passing, one failing, one skipped result."""
    from collections import OrderedDict

    from agent_readiness.recommender import generate_recommendations
    from agent_readiness.scorer import calculate_level, calculate_pillar_scores
    from agent_readiness.types import ProjectInfo, ReportData

    pillars = [
        make_pillar("docs", [
            make_criterion("readme", 1, "docs"),
            make_criterion("readme-quality", 5, "docs", requires_llm=True),
        ]),
        make_pillar("security", [make_criterion("license", 2, "security")]),
    ]
    results = OrderedDict([
        ("docs", [
            CriterionResult("readme", True, "README.md found with 900 characters"),
            CriterionResult("readme-quality", False, "Requires external evaluator", skipped=True),
        ]),
        ("security", [
            CriterionResult(
                "license", False, "No LICENSE file found.", details="Add a LICENSE file.",
            ),
        ]),
    ])
    scores = calculate_pillar_scores(pillars, results)
    level = calculate_level(pillars, results)
    return ReportData(
        repo_name="demo",
        repo_path="/work/demo",
        project_info=ProjectInfo(detected_types=["python"], is_monorepo=False, packages=[]),
        pillars=pillars,
        results=results,
        level_result=level,
        pillar_scores=scores,
        recommendations=generate_recommendations(pillars, results, scores, level),
    )
