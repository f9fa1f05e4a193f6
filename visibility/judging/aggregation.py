"""Aggregation of repeated judge passes into one qualified visibility result.

A single prompt is usually judged only a handful of times, so the mention
rate carries a Wilson score interval rather than a normal-approximation one.
The Wilson interval stays inside [0, 1] and keeps a sensible width when the
rate is 0 or 1.

Usage:
    from visibility.judging.aggregation import aggregate_judge_results

    result = aggregate_judge_results(evaluations)
    print(result.mention_rate, result.confidence_interval.lower)
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import structlog

from geoscore.config import DEFAULT_CONFIDENCE_Z
from geoscore.exceptions import EmptyResultSetError
from visibility.judging.models import (
    AggregatedVisibilityResult,
    ConfidenceInterval,
    JudgeEvaluation,
    Sentiment,
)

logger = structlog.get_logger(__name__)


def wilson_interval(
    successes: int,
    total: int,
    z: float = DEFAULT_CONFIDENCE_Z,
) -> ConfidenceInterval:
    """
    Wilson score interval for a binomial proportion.

    Args:
        successes: Number of positive outcomes
        total: Number of trials
        z: Standard normal quantile (1.96 for 95%)

    Returns:
        ConfidenceInterval clamped to [0, 1] that always contains
        successes / total. Zero trials give [0, 0].
    """
    if total <= 0:
        return ConfidenceInterval(lower=0.0, upper=0.0)

    n = total
    p = successes / n
    z2 = z * z

    denominator = 1 + z2 / n
    center = (p + z2 / (2 * n)) / denominator
    margin = (z / denominator) * math.sqrt(p * (1 - p) / n + z2 / (4 * n * n))

    # Rounding can leave p just outside center +/- margin at k=0 and k=n
    return ConfidenceInterval(
        lower=max(0.0, min(p, center - margin)),
        upper=min(1.0, max(p, center + margin)),
    )


def aggregate_judge_results(
    evaluations: Sequence[JudgeEvaluation],
    z: float = DEFAULT_CONFIDENCE_Z,
) -> AggregatedVisibilityResult:
    """
    Collapse repeated judge evaluations of one prompt into one result.

    Args:
        evaluations: Judge passes over the same prompt (must not be empty)
        z: Standard normal quantile for the mention-rate interval

    Returns:
        AggregatedVisibilityResult

    Raises:
        EmptyResultSetError: If no evaluations were supplied
    """
    if not evaluations:
        raise EmptyResultSetError()

    total_runs = len(evaluations)
    mentioned_count = sum(1 for e in evaluations if e.is_mentioned)
    mention_rate = mentioned_count / total_runs

    # Rank only counts where the brand was mentioned and a rank was given
    ranks = [
        e.rank_position for e in evaluations if e.is_mentioned and e.rank_position is not None
    ]
    average_rank = sum(ranks) / len(ranks) if ranks else None

    # Unmentioned runs still carry an industry/location judgement
    industry_match_rate = sum(1 for e in evaluations if e.industry_match) / total_runs
    location_match_rate = sum(1 for e in evaluations if e.location_match) / total_runs

    sentiment_counts = {s.value: 0 for s in Sentiment}
    for e in evaluations:
        bucket = e.sentiment or Sentiment.NEUTRAL
        sentiment_counts[bucket.value] += 1

    result = AggregatedVisibilityResult(
        mention_rate=mention_rate,
        average_rank_position=average_rank,
        industry_match_rate=industry_match_rate,
        location_match_rate=location_match_rate,
        sentiment_distribution={k: v / total_runs for k, v in sentiment_counts.items()},
        confidence_interval=wilson_interval(mentioned_count, total_runs, z=z),
        run_count=total_runs,
    )

    logger.debug(
        "judge_results_aggregated",
        run_count=total_runs,
        mention_rate=round(mention_rate, 3),
        ci_lower=round(result.confidence_interval.lower, 3),
        ci_upper=round(result.confidence_interval.upper, 3),
    )
    return result


class JudgeResultAggregator:
    """Stateless wrapper around aggregate_judge_results with a fixed z-score."""

    def __init__(self, z: float = DEFAULT_CONFIDENCE_Z) -> None:
        self.z = z

    def aggregate(self, evaluations: Sequence[JudgeEvaluation]) -> AggregatedVisibilityResult:
        """Aggregate judge passes for one prompt."""
        return aggregate_judge_results(evaluations, z=self.z)
