"""Overall 0-100 visibility score across every judged check in a scan.

Each judged check (one answer, one judge pass) earns points:

    mentioned                      +10
    mentioned and ranked 1..3      +6
    industry match                 +2
    location match                 +2

The total is normalised by the points possible for the number of checks, so
scans with more models or more repeated passes stay comparable.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

from visibility.judging.models import JudgeEvaluation
from visibility.rollup.models import VisibilityScore


@dataclass(frozen=True)
class ScoreWeights:
    """Points awarded per judged check."""

    mention: int = 10
    top_rank: int = 6
    top_rank_cutoff: int = 3
    industry: int = 2
    location: int = 2

    @property
    def max_per_check(self) -> int:
        return self.mention + self.top_rank + self.industry + self.location


def score_check(evaluation: JudgeEvaluation, weights: ScoreWeights) -> int:
    """Points earned by one judged check."""
    points = 0
    if evaluation.is_mentioned:
        points += weights.mention
        rank = evaluation.rank_position
        if rank is not None and 1 <= rank <= weights.top_rank_cutoff:
            points += weights.top_rank
    if evaluation.industry_match:
        points += weights.industry
    if evaluation.location_match:
        points += weights.location
    return points


def compute_visibility_score(
    evaluations: Sequence[JudgeEvaluation],
    weights: ScoreWeights | None = None,
) -> VisibilityScore:
    """
    Score a scan from all of its judged checks.

    Args:
        evaluations: Every judge pass in the scan, across prompts and models
        weights: Point weights (defaults to 10/6/2/2 with top-3 cutoff)

    Returns:
        VisibilityScore; a scan with no checks scores 0
    """
    weights = weights or ScoreWeights()
    total_checks = len(evaluations)
    points_possible = total_checks * weights.max_per_check
    points_earned = sum(score_check(e, weights) for e in evaluations)

    score = 0
    if points_possible > 0:
        # Half-up rounding, so 62.5 -> 63
        score = math.floor(points_earned / points_possible * 100 + 0.5)

    return VisibilityScore(
        score=score,
        mentioned_checks=sum(1 for e in evaluations if e.is_mentioned),
        total_checks=total_checks,
        points_earned=points_earned,
        points_possible=points_possible,
    )
