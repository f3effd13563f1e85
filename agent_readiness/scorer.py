# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""agent-readiness — Score Aggregator.

Per-pillar pass rates and the overall maturity level.

Levels are sequential: level N+1 is only credited when level N reaches
the pass threshold. A level with no counted criteria passes vacuously.
"""

from __future__ import annotations

import math
from typing import Mapping, Sequence

from agent_readiness.types import (
    LEVEL_THRESHOLD,
    LEVELS,
    MAX_LEVEL,
    CriterionResult,
    LevelResult,
    NextLevelProgress,
    Pillar,
    PillarScore,
)


def _round_half_up(value: float) -> int:
    # round() is banker's rounding; percentages round .5 up
    return int(math.floor(value + 0.5))


def calculate_pillar_scores(
    pillars: Sequence[Pillar],
    results: Mapping[str, list[CriterionResult]],
) -> list[PillarScore]:
    """Pass/total/percentage per pillar, skipped results excluded."""
    scores: list[PillarScore] = []
    for pillar in pillars:
        counted = [r for r in results.get(pillar.id, []) if not r.skipped]
        passed = sum(1 for r in counted if r.passed)
        total = len(counted)
        percentage = _round_half_up(passed / total * 100) if total > 0 else 0
        scores.append(PillarScore(
            pillar_id=pillar.id,
            passed=passed,
            total=total,
            percentage=percentage,
        ))
    return scores


def _bucket_by_level(
    pillars: Sequence[Pillar],
    results: Mapping[str, list[CriterionResult]],
) -> dict[int, list[bool]]:
    buckets: dict[int, list[bool]] = {lvl: [] for lvl in LEVELS}
    for pillar in pillars:
        by_id = {}
        for r in results.get(pillar.id, []):
            by_id.setdefault(r.criterion_id, r)

        for criterion in pillar.criteria:
            result = by_id.get(criterion.id)
            if result is not None and result.skipped:
                continue
            if criterion.level not in buckets:
                continue
            buckets[criterion.level].append(result.passed if result is not None else False)
    return buckets


def calculate_level(
    pillars: Sequence[Pillar],
    results: Mapping[str, list[CriterionResult]],
    threshold: float = LEVEL_THRESHOLD,
) -> LevelResult:
    """Highest level reached plus progress toward the next one.

    A criterion without a result counts as failed; skipped results are
    dropped before bucketing.
    """
    buckets = _bucket_by_level(pillars, results)

    highest_passed = 1
    for lvl in LEVELS:
        at_level = buckets[lvl]
        if not at_level:
            highest_passed = lvl
            continue

        pass_rate = sum(at_level) / len(at_level)
        if pass_rate >= threshold:
            highest_passed = lvl
        else:
            break

    next_level = highest_passed + 1 if highest_passed < MAX_LEVEL else None

    current = needed = remaining = 0
    if next_level is not None:
        at_next = buckets[next_level]
        current = sum(at_next)
        needed = math.ceil(len(at_next) * threshold)
        remaining = max(0, needed - current)

    return LevelResult(
        level=highest_passed,
        next_level_progress=NextLevelProgress(
            current=current,
            needed=needed,
            remaining=remaining,
            next_level=next_level,
        ),
    )


def overall_percentage(pillar_scores: Sequence[PillarScore]) -> int:
    """Share of counted criteria passing across all pillars (0-100)."""
    total = sum(s.total for s in pillar_scores)
    if total == 0:
        return 0
    passed = sum(s.passed for s in pillar_scores)
    return _round_half_up(passed / total * 100)
