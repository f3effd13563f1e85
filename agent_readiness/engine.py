# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""agent-readiness — Analysis Engine.

Runs every criterion of every pillar against a repository.

Pillars run one after another so progress can be reported per pillar;
the criteria inside a pillar run concurrently with ``asyncio.gather``.
A check that raises is reported as a failing result and never aborts
the run.
"""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from typing import Callable, Optional, Sequence

from agent_readiness.types import (
    Criterion,
    CriterionResult,
    Evaluator,
    Pillar,
    ProjectInfo,
    ResultsByPillar,
)

logger = logging.getLogger("agent_readiness.engine")

OnPillarStart = Callable[[Pillar], None]
OnPillarComplete = Callable[[Pillar, list[CriterionResult]], None]

SKIPPED_MESSAGE = "Requires external evaluator"


class AnalysisEngine:
    """Executes a criterion catalog against one repository.

    Usage::

        engine = AnalysisEngine(ALL_PILLARS, "/path/to/repo", project_info)
        results = await engine.run()
    """

    def __init__(
        self,
        pillars: Sequence[Pillar],
        repo_path: str,
        project_info: ProjectInfo,
        evaluator: Optional[Evaluator] = None,
        on_pillar_start: Optional[OnPillarStart] = None,
        on_pillar_complete: Optional[OnPillarComplete] = None,
    ):
        self.pillars = list(pillars)
        self.repo_path = repo_path
        self.project_info = project_info
        self.evaluator = evaluator
        self.on_pillar_start = on_pillar_start
        self.on_pillar_complete = on_pillar_complete

    async def run(self) -> ResultsByPillar:
        """Run all pillars in order. Returns results keyed by pillar id."""
        all_results: ResultsByPillar = OrderedDict()

        for pillar in self.pillars:
            if self.on_pillar_start:
                self.on_pillar_start(pillar)

            # gather() keeps input order regardless of completion order
            pillar_results = list(
                await asyncio.gather(*[self._run_criterion(c) for c in pillar.criteria])
            )
            all_results[pillar.id] = pillar_results

            passed = sum(1 for r in pillar_results if r.passed and not r.skipped)
            logger.debug(
                "Pillar %s done: %d/%d passing", pillar.id, passed, len(pillar_results)
            )
            if self.on_pillar_complete:
                self.on_pillar_complete(pillar, pillar_results)

        return all_results

    def run_sync(self) -> ResultsByPillar:
        """Helper to run the analysis from synchronous code."""
        return asyncio.run(self.run())

    async def _run_criterion(self, criterion: Criterion) -> CriterionResult:
        if criterion.requires_llm and self.evaluator is None:
            return CriterionResult(
                criterion_id=criterion.id,
                passed=False,
                message=SKIPPED_MESSAGE,
                skipped=True,
            )

        try:
            return await criterion.check(self.repo_path, self.project_info, self.evaluator)
        except Exception as e:
            logger.warning("Criterion %s crashed: %s", criterion.id, e)
            return CriterionResult(
                criterion_id=criterion.id,
                passed=False,
                message=f"Check failed: {e}",
            )
