# This file is part of agent-readiness.
# Licensed under the Business Source License 1.1 (BSL 1.1).
# See top-level LICENSE file for details.
# Change Date: 2030-01-01 (Transitions to Apache 2.0)

"""Data types for the readiness engine."""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Literal, Optional, Protocol

LEVEL_LABELS = {
    1: "Foundational",
    2: "Guided",
    3: "Structured",
    4: "Optimized",
    5: "Autonomous",
}

LEVELS = (1, 2, 3, 4, 5)
MAX_LEVEL = 5
LEVEL_THRESHOLD = 0.8  # Share of a level's criteria that must pass
MAX_RECOMMENDATIONS = 10

Effort = Literal["low", "medium", "high"]
Impact = Literal["high", "medium", "low"]


@dataclass(frozen=True)
class ProjectInfo:
    """What kind of repository is being scanned."""
    detected_types: list[str] = field(default_factory=list)
    is_monorepo: bool = False
    packages: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class CriterionResult:
    """Outcome of one criterion check.

    ``skipped`` results carry no pass/fail meaning and are excluded from
    every score.
    """
    criterion_id: str
    passed: bool
    message: str
    details: Optional[str] = None
    skipped: bool = False


@dataclass(frozen=True)
class EvaluationResult:
    """Verdict returned by an external evaluator."""
    passed: bool
    message: str
    details: Optional[str] = None

    def for_criterion(self, criterion_id: str) -> CriterionResult:
        return CriterionResult(
            criterion_id=criterion_id,
            passed=self.passed,
            message=self.message,
            details=self.details,
        )


class Evaluator(Protocol):
    """Qualitative judge used by criteria flagged ``requires_llm``."""

    async def evaluate(self, prompt: str, context: str) -> EvaluationResult:
        ...


CheckFn = Callable[[str, ProjectInfo, Optional[Evaluator]], Awaitable[CriterionResult]]


@dataclass(frozen=True)
class Criterion:
    id: str
    name: str
    description: str
    pillar_id: str
    level: int          # 1-5
    check: CheckFn = field(repr=False, compare=False)
    requires_llm: bool = False


@dataclass(frozen=True)
class Pillar:
    id: str
    name: str
    description: str
    icon: str
    criteria: tuple[Criterion, ...] = ()


@dataclass(frozen=True)
class PillarScore:
    pillar_id: str
    passed: int
    total: int
    percentage: int     # 0-100


@dataclass(frozen=True)
class NextLevelProgress:
    current: int
    needed: int
    remaining: int
    next_level: Optional[int]   # None at the ceiling


@dataclass(frozen=True)
class LevelResult:
    level: int
    next_level_progress: NextLevelProgress


@dataclass(frozen=True)
class Recommendation:
    title: str
    description: str
    reason: str
    effort: Effort
    impact: Impact
    pillar_id: str
    criterion_id: str


# Results per pillar id, in pillar order
ResultsByPillar = OrderedDict[str, list[CriterionResult]]


@dataclass
class ReportData:
    """Everything a presentation adapter needs for one run."""
    repo_name: str
    repo_path: str
    project_info: ProjectInfo
    pillars: list[Pillar]
    results: ResultsByPillar
    level_result: LevelResult
    pillar_scores: list[PillarScore]
    recommendations: list[Recommendation]
