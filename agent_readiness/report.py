# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""One full scan: detect, run checks, score, rank."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

from agent_readiness.detector import detect_project
from agent_readiness.engine import AnalysisEngine, OnPillarComplete, OnPillarStart
from agent_readiness.recommender import generate_recommendations
from agent_readiness.scorer import calculate_level, calculate_pillar_scores
from agent_readiness.types import LEVEL_THRESHOLD, Evaluator, Pillar, ReportData

logger = logging.getLogger("agent_readiness.report")


async def build_report(
    repo_path: str | Path,
    pillars: Sequence[Pillar],
    evaluator: Optional[Evaluator] = None,
    threshold: float = LEVEL_THRESHOLD,
    on_pillar_start: Optional[OnPillarStart] = None,
    on_pillar_complete: Optional[OnPillarComplete] = None,
) -> ReportData:
    root = Path(repo_path).resolve()
    project_info = detect_project(root)

    engine = AnalysisEngine(
        pillars,
        str(root),
        project_info,
        evaluator=evaluator,
        on_pillar_start=on_pillar_start,
        on_pillar_complete=on_pillar_complete,
    )
    results = await engine.run()

    pillar_scores = calculate_pillar_scores(pillars, results)
    level_result = calculate_level(pillars, results, threshold=threshold)
    recommendations = generate_recommendations(pillars, results, pillar_scores, level_result)
    logger.info(
        "Scan of %s: level %d, %d recommendations",
        root.name, level_result.level, len(recommendations),
    )

    return ReportData(
        repo_name=root.name,
        repo_path=str(root),
        project_info=project_info,
        pillars=list(pillars),
        results=results,
        level_result=level_result,
        pillar_scores=pillar_scores,
        recommendations=recommendations,
    )
