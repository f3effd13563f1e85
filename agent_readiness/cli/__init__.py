"""
agent-readiness CLI.

The click group, the shared rich console and logging setup.
Commands live in sibling modules and register themselves on import.
"""

from __future__ import annotations

import asyncio
import logging

import click
from rich.console import Console

from agent_readiness import __version__, config

console = Console()


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, config.LOG_LEVEL.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(levelname)s — %(message)s",
        datefmt="%H:%M:%S",
    )


def _run_async(coro):
    """Helper to run async coroutines from sync CLI."""
    return asyncio.run(coro)


# ─── Main Group ──────────────────────────────────────────────────

@click.group()
@click.version_option(__version__, prog_name="agent-readiness")
def cli() -> None:
    """agent-readiness — Score how ready a repository is for AI coding agents."""
    pass


# ─── Register all sub-modules ───────────────────────────────────
from agent_readiness.cli import scan_cmds  # noqa: E402, F401


if __name__ == "__main__":
    cli()
