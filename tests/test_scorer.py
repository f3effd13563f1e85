"""Tests for the score aggregator — pillar percentages and level gating."""

from collections import OrderedDict

import pytest

from agent_readiness.scorer import (
    _round_half_up,
    calculate_level,
    calculate_pillar_scores,
    overall_percentage,
)
from agent_readiness.types import PillarScore

from conftest import make_criterion, make_pillar, result


def _pillars_with_levels(level_counts: dict[int, int], pillar_id: str = "p"):
    """One pillar holding ``count`` criteria at each level."""
    criteria = []
    for level, count in level_counts.items():
        for i in range(count):
            criteria.append(make_criterion(f"l{level}-{i}", level, pillar_id))
    return [make_pillar(pillar_id, criteria)]


# ─── Pillar Scores ───────────────────────────────────────────────────


class TestPillarScores:
    def test_counts_and_percentage(self):
        pillars = [make_pillar("a", [make_criterion(f"c{i}", 1, "a") for i in range(3)])]
        results = {"a": [result("c0", True), result("c1", True), result("c2", False)]}

        scores = calculate_pillar_scores(pillars, results)
        assert scores == [PillarScore(pillar_id="a", passed=2, total=3, percentage=67)]

    def test_skipped_results_do_not_change_score(self):
        pillars = [make_pillar("a", [make_criterion(f"c{i}", 1, "a") for i in range(4)])]
        base = {"a": [result("c0", True), result("c1", False)]}
        with_skips = {"a": base["a"] + [result("c2", False, skipped=True),
                                        result("c3", True, skipped=True)]}

        assert calculate_pillar_scores(pillars, base) == calculate_pillar_scores(pillars, with_skips)

    def test_all_skipped_pillar_is_zero(self):
        pillars = [make_pillar("a", [make_criterion("c0", 5, "a", requires_llm=True)])]
        results = {"a": [result("c0", False, skipped=True)]}

        score = calculate_pillar_scores(pillars, results)[0]
        assert (score.passed, score.total, score.percentage) == (0, 0, 0)

    def test_pillar_without_results(self):
        pillars = [make_pillar("a", [make_criterion("c0", 1, "a")])]
        score = calculate_pillar_scores(pillars, {})[0]
        assert score.total == 0
        assert score.percentage == 0

    def test_scores_follow_pillar_order(self):
        pillars = [make_pillar("b", []), make_pillar("a", [])]
        scores = calculate_pillar_scores(pillars, {})
        assert [s.pillar_id for s in scores] == ["b", "a"]

    @pytest.mark.parametrize("value,expected", [(0.5, 1), (1.5, 2), (2.5, 3), (66.4, 66), (83.5, 84)])
    def test_half_rounds_up(self, value, expected):
        assert _round_half_up(value) == expected

    def test_overall_percentage(self):
        scores = [
            PillarScore("a", passed=1, total=2, percentage=50),
            PillarScore("b", passed=2, total=2, percentage=100),
        ]
        assert overall_percentage(scores) == 75
        assert overall_percentage([]) == 0


# ─── Level Calculation ───────────────────────────────────────────────


class TestLevelCalculation:
    def test_five_pillars_level_one_only(self):
        pillars, results = [], OrderedDict()
        for n in range(5):
            pid = f"p{n}"
            pillars.append(make_pillar(pid, [
                make_criterion(f"{pid}-l1", 1, pid),
                make_criterion(f"{pid}-l2", 2, pid),
            ]))
            results[pid] = [result(f"{pid}-l1", True), result(f"{pid}-l2", False)]

        level = calculate_level(pillars, results)
        assert level.level == 1
        progress = level.next_level_progress
        assert progress.next_level == 2
        assert progress.current == 0
        assert progress.needed == 4
        assert progress.remaining == 4

    def test_threshold_is_inclusive(self):
        pillars = _pillars_with_levels({2: 10})
        results = {"p": [result(f"l2-{i}", i < 8) for i in range(10)]}

        level = calculate_level(pillars, results)
        # Levels 1, 3, 4 and 5 are empty and pass vacuously
        assert level.level == 5
        assert level.next_level_progress.next_level is None

    def test_just_below_threshold_blocks(self):
        pillars = _pillars_with_levels({1: 2, 2: 10, 3: 1})
        results = {"p": (
            [result("l1-0", True), result("l1-1", True)]
            + [result(f"l2-{i}", i < 7) for i in range(10)]
            + [result("l3-0", True)]
        )}

        level = calculate_level(pillars, results)
        assert level.level == 1
        progress = level.next_level_progress
        assert progress.next_level == 2
        assert (progress.current, progress.needed, progress.remaining) == (7, 8, 1)

    def test_sequential_gating_ignores_higher_passes(self):
        pillars = _pillars_with_levels({1: 1, 2: 1, 3: 1, 4: 1})
        results = {"p": [
            result("l1-0", True),
            result("l2-0", True),
            result("l3-0", False),
            result("l4-0", True),
        ]}

        level = calculate_level(pillars, results)
        assert level.level == 2
        assert level.next_level_progress.next_level == 3
        assert level.next_level_progress.remaining == 1

    def test_failing_level_one_stays_at_floor(self):
        pillars = _pillars_with_levels({1: 2, 2: 1})
        results = {"p": [result("l1-0", False), result("l1-1", False), result("l2-0", True)]}

        level = calculate_level(pillars, results)
        assert level.level == 1
        assert level.next_level_progress.next_level == 2
        assert level.next_level_progress.current == 1

    def test_empty_bucket_never_blocks(self):
        pillars = _pillars_with_levels({1: 1, 3: 1})
        results = {"p": [result("l1-0", True), result("l3-0", True)]}

        assert calculate_level(pillars, results).level == 5

    def test_skipped_criterion_leaves_empty_buckets(self):
        pillars = [make_pillar("p", [make_criterion("ai", 3, "p", requires_llm=True)])]
        results = {"p": [result("ai", False, skipped=True)]}

        level = calculate_level(pillars, results)
        assert level.level == 5
        progress = level.next_level_progress
        assert progress.next_level is None
        assert (progress.current, progress.needed, progress.remaining) == (0, 0, 0)

    def test_missing_result_counts_as_failure(self):
        pillars = _pillars_with_levels({1: 2})
        results = {"p": [result("l1-0", True)]}

        level = calculate_level(pillars, results)
        assert level.level == 1
        assert level.next_level_progress.next_level == 2

    def test_skips_do_not_shift_level(self):
        pillars = _pillars_with_levels({1: 2, 2: 2})
        base = {"p": [result("l1-0", True), result("l1-1", True),
                      result("l2-0", True), result("l2-1", False)]}
        pillars_with_ai = [make_pillar("p", list(pillars[0].criteria) + [
            make_criterion("ai", 2, "p", requires_llm=True),
        ])]
        skipped = {"p": base["p"] + [result("ai", False, skipped=True)]}

        assert calculate_level(pillars, base) == calculate_level(pillars_with_ai, skipped)

    def test_custom_threshold(self):
        pillars = _pillars_with_levels({1: 2, 2: 2})
        results = {"p": [result("l1-0", True), result("l1-1", False),
                         result("l2-0", True), result("l2-1", False)]}

        assert calculate_level(pillars, results).level == 1
        assert calculate_level(pillars, results, threshold=0.5).level == 5

    def test_empty_input(self):
        level = calculate_level([], {})
        assert level.level == 5
        assert level.next_level_progress.next_level is None
        assert calculate_pillar_scores([], {}) == []

    def test_idempotent(self):
        pillars = _pillars_with_levels({1: 3, 2: 3, 3: 3})
        results = {"p": [result(c.id, i % 2 == 0) for i, c in enumerate(pillars[0].criteria)]}

        first = (calculate_pillar_scores(pillars, results), calculate_level(pillars, results))
        second = (calculate_pillar_scores(pillars, results), calculate_level(pillars, results))
        assert first == second
