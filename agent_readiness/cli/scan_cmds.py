"""CLI commands: scan, init."""

from __future__ import annotations

import contextlib
import logging
import os
import sys
from pathlib import Path

import click
from rich.console import Console

from agent_readiness import config
from agent_readiness.cli import _run_async, cli, console, setup_logging
from agent_readiness.config import (
    RepoConfig,
    filter_pillars,
    level_threshold,
    load_repo_config,
    write_default_config,
)
from agent_readiness.exceptions import ConfigError, EvaluatorError
from agent_readiness.llm import LLMEvaluator, LLMProvider, build_evaluator
from agent_readiness.pillars import ALL_PILLARS
from agent_readiness.report import build_report
from agent_readiness.types import Pillar, ReportData

logger = logging.getLogger("agent_readiness.cli")


def _ci_from_env() -> bool:
    return os.environ.get("CI", "").lower() == "true"


def _make_evaluator(
    ai: bool,
    api_key: str | None,
    provider: str | None,
    model: str | None,
    repo_cfg: RepoConfig,
) -> LLMEvaluator | None:
    if not (ai or repo_cfg.ai_enabled):
        return None
    try:
        return build_evaluator(
            api_key=api_key, provider=provider, model=model, repo_config=repo_cfg
        )
    except EvaluatorError as e:
        click.secho(f"Warning: AI evaluation disabled. {e}", fg="yellow", err=True)
        return None


async def _scan(
    repo_path: str,
    pillars: list[Pillar],
    evaluator: LLMEvaluator | None,
    threshold: float,
    status,
) -> ReportData:
    def on_pillar_start(pillar: Pillar) -> None:
        if status is not None:
            status.update(f"[bold blue]Analyzing {pillar.name}...[/]")

    try:
        return await build_report(
            repo_path,
            pillars,
            evaluator=evaluator,
            threshold=threshold,
            on_pillar_start=on_pillar_start,
        )
    finally:
        if evaluator is not None:
            await evaluator.close()


def _emit(text: str, output: str | None) -> None:
    if output:
        Path(output).write_text(text, encoding="utf-8")
        click.echo(f"Report written to {output}", err=True)
    else:
        click.echo(text)


@cli.command()
@click.argument(
    "path", default=".", type=click.Path(exists=True, file_okay=False, resolve_path=True)
)
@click.option("--ai", is_flag=True, help="Enable AI-powered criteria evaluation")
@click.option("--api-key", default=None, help="API key for AI evaluations")
@click.option(
    "--provider",
    type=click.Choice(LLMProvider.list_providers()),
    default=None,
    help="LLM provider preset (default: AGENT_READINESS_LLM_PROVIDER or openai)",
)
@click.option("--model", default=None, help="Override the provider's default model")
@click.option("--ci", "ci_mode", is_flag=True, help="Plain, non-interactive output")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json", "html"]),
    default="text",
    help="Output format",
)
@click.option("-o", "--output", type=click.Path(dir_okay=False), default=None,
              help="Write json/html output to a file instead of stdout")
@click.option("--min-level", type=click.IntRange(1, 5), default=None,
              help="Exit with code 1 if the level reached is below N")
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--web", is_flag=True, help="Serve the interactive dashboard after the scan")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def scan(path, ai, api_key, provider, model, ci_mode, output_format, output,
         min_level, no_color, web, verbose):
    """Evaluate the agent readiness of the repository at PATH."""
    setup_logging(verbose)
    ci_mode = ci_mode or _ci_from_env()
    out = Console(no_color=True, highlight=False) if no_color else console

    repo_cfg = load_repo_config(path)
    pillars = filter_pillars(ALL_PILLARS, repo_cfg)
    evaluator = _make_evaluator(ai, api_key, provider, model, repo_cfg)
    threshold = level_threshold(repo_cfg)

    interactive = output_format == "text" and not ci_mode
    status_cm = (
        out.status("[bold blue]Detecting project type...[/]")
        if interactive
        else contextlib.nullcontext()
    )
    with status_cm as status:
        report = _run_async(_scan(path, pillars, evaluator, threshold, status))

    if output_format == "json":
        from agent_readiness.serializer import report_to_json
        _emit(report_to_json(report), output)
    elif output_format == "html":
        from agent_readiness.dashboard import render_dashboard
        _emit(render_dashboard(report), output)
    else:
        from agent_readiness.renderer import render_report
        render_report(report, out, ci=ci_mode)

    if web:
        from agent_readiness.server import serve_report
        out.print("[bold cyan]  Dashboard:[/] starting local server (Ctrl+C to stop)")
        try:
            serve_report(report)
        except KeyboardInterrupt:
            pass

    if min_level is not None and report.level_result.level < min_level:
        logger.info("Level %d below required %d", report.level_result.level, min_level)
        sys.exit(1)


@cli.command()
@click.argument(
    "path", default=".", type=click.Path(exists=True, file_okay=False, resolve_path=True)
)
def init(path):
    """Write a default .agent-readiness.yml to PATH."""
    setup_logging()
    try:
        target = write_default_config(path)
    except ConfigError as e:
        console.print(f"[yellow]{e}[/]")
        sys.exit(1)
    console.print(f"[green]✓[/] Created config file: [bold]{target}[/]")
    console.print(
        f"  [dim]Provider defaults to {config.LLM_PROVIDER}; "
        "set aiEnabled: true to enable AI checks.[/]"
    )
