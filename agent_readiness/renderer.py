# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""Terminal report.

Two looks for the same sections: rich panels and tables for people, and
a plain line-based layout for CI logs.
"""

from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from agent_readiness.scorer import overall_percentage
from agent_readiness.types import LEVEL_LABELS, Pillar, ReportData

LEVEL_COLORS = {1: "red", 2: "yellow", 3: "green", 4: "blue", 5: "magenta"}

EFFORT_BADGES = {
    "low": "[bold black on green] LOW [/]",
    "medium": "[bold black on yellow] MED [/]",
    "high": "[bold white on red] HIGH [/]",
}

MAX_LISTED_PACKAGES = 5


def _score_color(percentage: int) -> str:
    if percentage >= 80:
        return "green"
    if percentage >= 50:
        return "yellow"
    return "red"


def progress_bar(percentage: int, width: int = 20, plain: bool = False) -> str:
    filled = int(percentage / 100 * width + 0.5)
    if plain:
        return "#" * filled + "-" * (width - filled)
    color = _score_color(percentage)
    return f"[{color}]{'█' * filled}{'░' * (width - filled)}[/]"


def _find_pillar(pillars: list[Pillar], pillar_id: str) -> Optional[Pillar]:
    return next((p for p in pillars if p.id == pillar_id), None)


def _has_skipped(report: ReportData) -> bool:
    return any(r.skipped for results in report.results.values() for r in results)


class ReportRenderer:
    """Prints a ``ReportData`` to a rich console."""

    def __init__(self, console: Console, ci: bool = False):
        self.console = console
        self.ci = ci

    def render(self, report: ReportData) -> None:
        self.header(report)
        self.level_badge(report)
        self.pillar_summary(report)
        self.detailed_breakdown(report)
        self.recommendations(report)
        self.footer(report)

    def _line(self, text: str = "") -> None:
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)

    # ─── Sections ────────────────────────────────────────────────────

    def header(self, report: ReportData) -> None:
        info = report.project_info
        types = ", ".join(info.detected_types) if info.detected_types else "unknown"

        if self.ci:
            self._line("=== AGENT READINESS ===")
            self._line(f"Repository: {report.repo_name}")
            self._line(f"Path: {report.repo_path}")
            self._line(f"Project types: {types}{' [monorepo]' if info.is_monorepo else ''}")
            self._line()
            return

        body = (
            "[bold white]AGENT READINESS[/]\n"
            f"[grey62]{escape(report.repo_name)}[/]  [dim]{escape(report.repo_path)}[/]\n\n"
            f"Project: [bold cyan]{escape(types)}[/]"
        )
        if info.is_monorepo:
            body += " [cyan]\\[monorepo][/]"
            if info.packages:
                shown = ", ".join(info.packages[:MAX_LISTED_PACKAGES])
                more = len(info.packages) - MAX_LISTED_PACKAGES
                body += f"\nPackages: [dim]{escape(shown)}[/]"
                if more > 0:
                    body += f"[dim] +{more} more[/]"

        self.console.print()
        self.console.print(
            Panel(
                Text.from_markup(body, justify="center"),
                box=box.DOUBLE,
                border_style="cyan",
                padding=(1, 3),
            )
        )

    def level_badge(self, report: ReportData) -> None:
        level = report.level_result.level
        progress = report.level_result.next_level_progress
        label = LEVEL_LABELS[level]
        overall = overall_percentage(report.pillar_scores)

        if self.ci:
            self._line(f"Level: {level} - {label}")
            if progress.next_level is not None:
                self._line(
                    f"Progress: {progress.remaining} more criteria to reach "
                    f"Level {progress.next_level}"
                )
            self._line(f"Overall: {progress_bar(overall, plain=True)} {overall}%")
            self._line()
            return

        color = LEVEL_COLORS[level]
        lines = [f"[bold {color}]LEVEL {level}  [dim]—[/dim]  {label}[/]"]
        if progress.next_level is not None:
            lines.append(
                f"[dim]{progress.remaining} more criteria to reach Level {progress.next_level}[/]"
            )
        else:
            lines.append("[bold green]Maximum level achieved![/]")
        lines.append("")
        lines.append(f"Overall Score  {progress_bar(overall)}  [bold white]{overall}%[/]")

        self.console.print()
        self.console.print(
            Panel(
                Text.from_markup("\n".join(lines), justify="center"),
                box=box.ROUNDED,
                border_style=color,
                padding=(1, 2),
            )
        )

    def pillar_summary(self, report: ReportData) -> None:
        if self.ci:
            self._line("--- Pillar Summary ---")
            for score in report.pillar_scores:
                pillar = _find_pillar(report.pillars, score.pillar_id)
                name = pillar.name if pillar else score.pillar_id
                self._line(
                    f"  {name}: {progress_bar(score.percentage, 15, plain=True)} "
                    f"{score.percentage}% ({score.passed}/{score.total})"
                )
            self._line()
            return

        table = Table(title="PILLAR SUMMARY", title_style="bold cyan", box=box.SQUARE)
        table.add_column("Pillar", style="bold", width=30)
        table.add_column("Score", width=20)
        table.add_column("%", width=6, justify="right")
        table.add_column("Pass/Total", width=10, justify="right")
        for score in report.pillar_scores:
            pillar = _find_pillar(report.pillars, score.pillar_id)
            icon = pillar.icon if pillar else "•"
            name = pillar.name if pillar else score.pillar_id
            color = _score_color(score.percentage)
            table.add_row(
                f"{icon}  {escape(name)}",
                progress_bar(score.percentage, 18),
                f"[bold {color}]{score.percentage}%[/]",
                f"{score.passed}/{score.total}",
            )
        self.console.print()
        self.console.print(table)

    def detailed_breakdown(self, report: ReportData) -> None:
        if self.ci:
            self._line("--- Detailed Breakdown ---")
        else:
            self.console.print()
            self.console.rule("[bold cyan]DETAILED BREAKDOWN[/]", align="left")

        for pillar in report.pillars:
            results = report.results.get(pillar.id, [])
            passing = sum(1 for r in results if r.passed and not r.skipped)

            if self.ci:
                self._line()
                self._line(f"  {pillar.name} ({passing}/{len(results)} passing)")
                for r in results:
                    mark = "o" if r.skipped else "+" if r.passed else "-"
                    suffix = " (requires --ai)" if r.skipped else ""
                    self._line(f"    [{mark}] {r.message}{suffix}")
                    if not r.passed and not r.skipped and r.details:
                        self._line(f"        {r.details}")
                continue

            self.console.print()
            self.console.print(
                f"  {pillar.icon}  [bold white]{escape(pillar.name)}[/]  [dim]───  "
                f"{passing}/{len(results)} passing[/]"
            )
            self.console.print()
            for r in results:
                message = escape(r.message)
                if r.skipped:
                    self.console.print(
                        f"    [cyan]○[/]  [dim]{message}[/]  [dim cyan](requires --ai)[/]"
                    )
                elif r.passed:
                    self.console.print(f"    [bold green]✓[/]  {message}")
                else:
                    self.console.print(f"    [bold red]✗[/]  {message}")
                    for detail in (r.details or "").splitlines():
                        self.console.print(f"       [dim]{escape(detail)}[/]")

        if self.ci:
            self._line()

    def recommendations(self, report: ReportData) -> None:
        recs = report.recommendations

        if self.ci:
            self._line()
            if not recs:
                self._line("--- Recommendations ---")
                self._line("  All checks passing! Your repo is agent-ready.")
                self._line()
                return
            self._line("--- Top Recommendations ---")
            for i, rec in enumerate(recs, 1):
                pillar = _find_pillar(report.pillars, rec.pillar_id)
                pillar_name = pillar.name if pillar else rec.pillar_id
                self._line(f"  {i}. {rec.title} [{rec.effort}] [{pillar_name}]")
                self._line(f"     {rec.description}")
                if rec.reason:
                    self._line(f"     Reason: {rec.reason}")
            self._line()
            return

        self.console.print()
        if not recs:
            self.console.print(
                Panel(
                    Text.from_markup(
                        "[bold green]✨  All checks passing![/]\n\n"
                        "Your repository is fully agent-ready. Congratulations!",
                        justify="center",
                    ),
                    box=box.ROUNDED,
                    border_style="green",
                    padding=(1, 3),
                )
            )
            return

        self.console.rule("[bold cyan]TOP RECOMMENDATIONS[/]", align="left")
        self.console.print()
        for i, rec in enumerate(recs, 1):
            pillar = _find_pillar(report.pillars, rec.pillar_id)
            pillar_name = pillar.name if pillar else rec.pillar_id
            self.console.print(
                f"[bold cyan]  {i}.[/] [bold white]{escape(rec.title)}[/]  "
                f"{EFFORT_BADGES[rec.effort]}  [dim]\\[{escape(pillar_name)}][/]"
            )
            self.console.print(f"     {escape(rec.description)}")
            if rec.reason:
                self.console.print(f"     [dim]{escape(rec.reason)}[/]")
            self.console.print()

    def footer(self, report: ReportData) -> None:
        if self.ci:
            self._line("---")
            self._line("Generated by agent-readiness")
            self._line()
            return

        self.console.print()
        if _has_skipped(report):
            self.console.print(
                "[yellow]⚡[/][dim]  Run with [/][bold yellow]--ai[/][dim] for deeper "
                "analysis with LLM-powered checks[/]"
            )
        self.console.print()


def render_report(report: ReportData, console: Console, ci: bool = False) -> None:
    """Print the full report to ``console``."""
    ReportRenderer(console, ci=ci).render(report)
