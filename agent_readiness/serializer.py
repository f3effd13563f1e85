# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""JSON wire format for a readiness report.

Keys are camelCase. Check callables are dropped and the per-pillar
results mapping becomes a plain object in pillar order.
"""

from __future__ import annotations

import json
from typing import Any

from agent_readiness.types import (
    CriterionResult,
    LevelResult,
    Pillar,
    PillarScore,
    ProjectInfo,
    Recommendation,
    ReportData,
)


def serialize_result(result: CriterionResult) -> dict[str, Any]:
    out: dict[str, Any] = {
        "criterionId": result.criterion_id,
        "pass": result.passed,
        "message": result.message,
    }
    if result.details is not None:
        out["details"] = result.details
    if result.skipped:
        out["skipped"] = True
    return out


def serialize_pillar(pillar: Pillar) -> dict[str, Any]:
    return {
        "id": pillar.id,
        "name": pillar.name,
        "description": pillar.description,
        "icon": pillar.icon,
        "criteria": [
            {
                "id": c.id,
                "name": c.name,
                "description": c.description,
                "pillarId": c.pillar_id,
                "level": c.level,
                "requiresLLM": c.requires_llm,
            }
            for c in pillar.criteria
        ],
    }


def serialize_project_info(info: ProjectInfo) -> dict[str, Any]:
    return {
        "detectedTypes": list(info.detected_types),
        "isMonorepo": info.is_monorepo,
        "packages": list(info.packages),
    }


def serialize_level(level_result: LevelResult) -> dict[str, Any]:
    progress = level_result.next_level_progress
    return {
        "level": level_result.level,
        "nextLevelProgress": {
            "current": progress.current,
            "needed": progress.needed,
            "remaining": progress.remaining,
            "nextLevel": progress.next_level,
        },
    }


def serialize_score(score: PillarScore) -> dict[str, Any]:
    return {
        "pillarId": score.pillar_id,
        "passed": score.passed,
        "total": score.total,
        "percentage": score.percentage,
    }


def serialize_recommendation(rec: Recommendation) -> dict[str, Any]:
    return {
        "title": rec.title,
        "description": rec.description,
        "reason": rec.reason,
        "effort": rec.effort,
        "impact": rec.impact,
        "pillarId": rec.pillar_id,
        "criterionId": rec.criterion_id,
    }


def serialize_report(report: ReportData) -> dict[str, Any]:
    """Plain, JSON-safe dict for ``report``."""
    return {
        "repoName": report.repo_name,
        "repoPath": report.repo_path,
        "projectInfo": serialize_project_info(report.project_info),
        "pillars": [serialize_pillar(p) for p in report.pillars],
        "results": {
            pillar_id: [serialize_result(r) for r in results]
            for pillar_id, results in report.results.items()
        },
        "levelResult": serialize_level(report.level_result),
        "pillarScores": [serialize_score(s) for s in report.pillar_scores],
        "recommendations": [serialize_recommendation(r) for r in report.recommendations],
    }


def report_to_json(report: ReportData, indent: int | None = 2) -> str:
    return json.dumps(serialize_report(report), indent=indent, ensure_ascii=False)
