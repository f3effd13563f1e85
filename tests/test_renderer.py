"""Tests for the terminal report (rich and CI layouts)."""

import io
from dataclasses import replace

import pytest
from rich.console import Console

from agent_readiness.renderer import progress_bar, render_report
from agent_readiness.types import LevelResult, NextLevelProgress


def _render(report, ci: bool) -> str:
    buf = io.StringIO()
    console = Console(file=buf, width=120, no_color=True, highlight=False)
    render_report(report, console, ci=ci)
    return buf.getvalue()


class TestProgressBar:
    @pytest.mark.parametrize("pct,filled", [(0, 0), (50, 10), (100, 20), (67, 13)])
    def test_plain(self, pct, filled):
        bar = progress_bar(pct, plain=True)
        assert len(bar) == 20
        assert bar.count("#") == filled

    def test_rich_bar_colored(self):
        assert progress_bar(90).startswith("[green]")
        assert progress_bar(60).startswith("[yellow]")
        assert progress_bar(10).startswith("[red]")


# ─── CI Layout ───────────────────────────────────────────────────────


class TestCiLayout:
    def test_sections(self, sample_report):
        out = _render(sample_report, ci=True)
        assert out.startswith("=== AGENT READINESS ===")
        assert "Repository: demo" in out
        assert "Project types: python" in out
        assert "Level: 1 - Foundational" in out
        assert "Progress: 1 more criteria to reach Level 2" in out
        assert "Overall: " in out and "50%" in out
        assert "--- Pillar Summary ---" in out
        assert "--- Detailed Breakdown ---" in out
        assert "Generated by agent-readiness" in out

    def test_result_marks(self, sample_report):
        out = _render(sample_report, ci=True)
        assert "[+] README.md found with 900 characters" in out
        assert "[o] Requires external evaluator (requires --ai)" in out
        assert "[-] No LICENSE file found." in out
        assert "Add a LICENSE file." in out

    def test_recommendations_listed(self, sample_report):
        out = _render(sample_report, ci=True)
        assert "--- Top Recommendations ---" in out
        assert "1. Criterion license [low] [Security]" in out

    def test_all_passing(self, sample_report):
        done = replace(
            sample_report,
            recommendations=[],
            level_result=LevelResult(5, NextLevelProgress(0, 0, 0, None)),
        )
        out = _render(done, ci=True)
        assert "Level: 5 - Autonomous" in out
        assert "All checks passing! Your repo is agent-ready." in out
        assert "Progress:" not in out


# ─── Rich Layout ─────────────────────────────────────────────────────


class TestRichLayout:
    def test_sections(self, sample_report):
        out = _render(sample_report, ci=False)
        assert "AGENT READINESS" in out
        assert "LEVEL 1" in out
        assert "Foundational" in out
        assert "PILLAR SUMMARY" in out
        assert "DETAILED BREAKDOWN" in out
        assert "TOP RECOMMENDATIONS" in out

    def test_skipped_hint_in_footer(self, sample_report):
        out = _render(sample_report, ci=False)
        assert "(requires --ai)" in out
        assert "--ai" in out.split("TOP RECOMMENDATIONS")[-1]

    def test_markup_in_messages_is_escaped(self, sample_report):
        from agent_readiness.types import CriterionResult

        results = dict(sample_report.results)
        results["security"] = [CriterionResult("license", False, "Missing [bold]LICENSE[/bold]")]
        out = _render(replace(sample_report, results=results), ci=False)
        assert "Missing [bold]LICENSE[/bold]" in out

    def test_max_level(self, sample_report):
        top = replace(
            sample_report,
            recommendations=[],
            level_result=LevelResult(5, NextLevelProgress(0, 0, 0, None)),
        )
        out = _render(top, ci=False)
        assert "Maximum level achieved!" in out
        assert "All checks passing!" in out

    def test_monorepo_packages(self, sample_report):
        from agent_readiness.types import ProjectInfo

        info = ProjectInfo(
            detected_types=["node"],
            is_monorepo=True,
            packages=[f"packages/p{i}" for i in range(7)],
        )
        out = _render(replace(sample_report, project_info=info), ci=False)
        assert "[monorepo]" in out
        assert "+2 more" in out
