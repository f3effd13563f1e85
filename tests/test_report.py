"""End-to-end scans of small on-disk repositories."""

import pytest

from agent_readiness.pillars import ALL_PILLARS
from agent_readiness.report import build_report
from agent_readiness.types import MAX_RECOMMENDATIONS

README = "# Demo\n\n" + "Setup, usage and architecture notes. " * 20


@pytest.mark.asyncio
async def test_empty_repo(make_repo):
    repo = make_repo({})
    report = await build_report(repo, ALL_PILLARS)

    assert report.repo_name == "repo"
    assert report.repo_path == str(repo.resolve())
    assert report.project_info.detected_types == []
    assert report.level_result.level == 1
    assert len(report.recommendations) == MAX_RECOMMENDATIONS
    assert list(report.results) == [p.id for p in ALL_PILLARS]


@pytest.mark.asyncio
async def test_llm_criteria_skipped_without_evaluator(make_repo):
    report = await build_report(make_repo({"README.md": README}), ALL_PILLARS)

    skipped = {r.criterion_id for rs in report.results.values() for r in rs if r.skipped}
    assert {"naming-conventions", "test-quality", "readme-quality",
            "docs-agent-friendliness"} <= skipped
    assert not any(rec.criterion_id in skipped for rec in report.recommendations)


@pytest.mark.asyncio
async def test_well_equipped_python_repo(make_repo):
    repo = make_repo({
        "README.md": README,
        "LICENSE": "MIT License\n",
        ".env.example": "DATABASE_URL=\n",
        "pyproject.toml": "[tool.ruff]\n\n[tool.mypy]\nstrict = true\n\n[tool.pytest.ini_options]\n",
        "uv.lock": "",
        ".pre-commit-config.yaml": "repos: []\n",
        ".editorconfig": "root = true\n",
        "tests/test_app.py": "def test_ok():\n    assert True\n",
        "Makefile": "test:\n\tpytest\n",
        "CONTRIBUTING.md": "# Contributing\n",
        ".python-version": "3.12\n",
        ".github/workflows/ci.yml": "steps:\n  - run: ruff check .\n  - run: pytest\n",
    })
    report = await build_report(repo, ALL_PILLARS)

    assert report.project_info.detected_types == ["python"]
    assert report.level_result.level >= 2
    by_id = {r.criterion_id: r for rs in report.results.values() for r in rs}
    for cid in ("readme", "linter", "formatter", "type-checker", "test-framework",
                "test-files-exist", "test-script", "lock-file", "ci-config",
                "ci-runs-tests", "ci-runs-linters", "no-outdated-deps"):
        assert by_id[cid].passed, cid


@pytest.mark.asyncio
async def test_callbacks_and_threshold(make_repo):
    started: list[str] = []
    report = await build_report(
        make_repo({}),
        ALL_PILLARS[:2],
        threshold=1.0,
        on_pillar_start=lambda p: started.append(p.id),
    )
    assert started == ["style-linting", "testing"]
    assert [s.pillar_id for s in report.pillar_scores] == ["style-linting", "testing"]


@pytest.mark.asyncio
async def test_undecodable_workspace_file_does_not_abort_scan(make_repo):
    repo = make_repo({"README.md": README, "package.json": "{}"})
    (repo / "pnpm-workspace.yaml").write_bytes(b"\xff\xfe\x00bad")
    report = await build_report(repo, ALL_PILLARS)

    assert report.project_info.is_monorepo is True
    assert report.project_info.packages == []
    assert list(report.results) == [p.id for p in ALL_PILLARS]
    assert report.level_result.level >= 1
