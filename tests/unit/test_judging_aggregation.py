"""Tests for judge result aggregation."""

import math

import pytest

from geoscore.exceptions import EmptyResultSetError
from visibility.judging.aggregation import (
    JudgeResultAggregator,
    aggregate_judge_results,
    wilson_interval,
)
from visibility.judging.models import (
    AggregatedVisibilityResult,
    ConfidenceInterval,
    JudgeEvaluation,
    MentionType,
    Sentiment,
)


def make_evaluation(
    is_mentioned: bool = True,
    rank_position: int | None = None,
    industry_match: bool = False,
    location_match: bool = False,
    sentiment: Sentiment | None = None,
) -> JudgeEvaluation:
    """Create a test JudgeEvaluation."""
    return JudgeEvaluation(
        is_mentioned=is_mentioned,
        mention_type=MentionType.DIRECT if is_mentioned else MentionType.NONE,
        rank_position=rank_position,
        industry_match=industry_match,
        location_match=location_match,
        sentiment=sentiment,
    )


def make_mixed_runs(mentioned: int, total: int) -> list[JudgeEvaluation]:
    """Create total runs of which the first `mentioned` mention the brand."""
    return [make_evaluation(is_mentioned=i < mentioned) for i in range(total)]


class TestWilsonInterval:
    """Tests for the Wilson score interval."""

    def test_matches_formula(self) -> None:
        """7 of 10 gives roughly [0.397, 0.892]."""
        ci = wilson_interval(7, 10)

        assert ci.lower == pytest.approx(0.3968, abs=1e-3)
        assert ci.upper == pytest.approx(0.8922, abs=1e-3)

    def test_zero_successes_starts_at_zero(self) -> None:
        """No successes gives a lower bound of 0 and a positive upper bound."""
        ci = wilson_interval(0, 5)

        assert ci.lower == 0.0
        assert 0.0 < ci.upper < 1.0

    def test_all_successes_ends_at_one(self) -> None:
        """All successes gives an upper bound of 1 and a lower bound below it."""
        ci = wilson_interval(5, 5)

        assert ci.upper == 1.0
        assert 0.0 < ci.lower < 1.0

    def test_zero_trials(self) -> None:
        """No trials gives a degenerate [0, 0] interval."""
        ci = wilson_interval(0, 0)

        assert ci == ConfidenceInterval(lower=0.0, upper=0.0)

    def test_interval_narrows_with_more_runs(self) -> None:
        """Same rate with more runs gives a narrower interval."""
        small = wilson_interval(3, 5)
        large = wilson_interval(60, 100)

        assert large.width < small.width

    def test_wider_z_gives_wider_interval(self) -> None:
        """A 99% z-score widens the interval."""
        ci_95 = wilson_interval(7, 10)
        ci_99 = wilson_interval(7, 10, z=2.576)

        assert ci_99.lower < ci_95.lower
        assert ci_99.upper > ci_95.upper


class TestAggregateJudgeResults:
    """Tests for aggregate_judge_results."""

    def test_ten_runs_seven_mentioned(self) -> None:
        """7 of 10 mentioned with known ranks."""
        ranks = [1, 2, 1, 3, 2, 1, 2]
        evaluations = [make_evaluation(rank_position=r) for r in ranks]
        evaluations += [make_evaluation(is_mentioned=False) for _ in range(3)]

        result = aggregate_judge_results(evaluations)

        assert result.run_count == 10
        assert result.mention_rate == pytest.approx(0.7)
        assert result.average_rank_position == pytest.approx(12 / 7)
        assert result.average_rank_position == pytest.approx(1.714, abs=1e-3)
        assert result.confidence_interval.lower == pytest.approx(0.3968, abs=1e-3)
        assert result.confidence_interval.upper == pytest.approx(0.8922, abs=1e-3)

    def test_empty_input_raises(self) -> None:
        """Empty input fails instead of returning a zeroed result."""
        with pytest.raises(EmptyResultSetError) as exc_info:
            aggregate_judge_results([])

        assert exc_info.value.code == "empty_result_set"

    def test_rank_ignores_unmentioned_runs(self) -> None:
        """Ranks from runs that did not mention the brand are ignored."""
        evaluations = [
            make_evaluation(rank_position=2),
            make_evaluation(is_mentioned=False, rank_position=9),
        ]

        result = aggregate_judge_results(evaluations)

        assert result.average_rank_position == pytest.approx(2.0)

    def test_rank_ignores_mentions_without_rank(self) -> None:
        """A mention without a rank does not drag the average."""
        evaluations = [
            make_evaluation(rank_position=1),
            make_evaluation(rank_position=None),
            make_evaluation(rank_position=3),
        ]

        result = aggregate_judge_results(evaluations)

        assert result.average_rank_position == pytest.approx(2.0)

    def test_no_ranks_gives_none(self) -> None:
        """No ranked mention means no average rank."""
        evaluations = [make_evaluation(rank_position=None), make_evaluation(is_mentioned=False)]

        result = aggregate_judge_results(evaluations)

        assert result.average_rank_position is None

    def test_match_rates_use_all_runs(self) -> None:
        """Industry and location rates count unmentioned runs too."""
        evaluations = [
            make_evaluation(industry_match=True, location_match=True),
            make_evaluation(is_mentioned=False, industry_match=True),
            make_evaluation(is_mentioned=False),
            make_evaluation(is_mentioned=False, location_match=True),
        ]

        result = aggregate_judge_results(evaluations)

        assert result.industry_match_rate == pytest.approx(0.5)
        assert result.location_match_rate == pytest.approx(0.5)

    def test_missing_sentiment_counts_as_neutral(self) -> None:
        """Unset sentiment lands in the neutral bucket."""
        evaluations = [
            make_evaluation(sentiment=Sentiment.POSITIVE),
            make_evaluation(sentiment=None),
            make_evaluation(sentiment=Sentiment.NEGATIVE),
            make_evaluation(sentiment=Sentiment.NEUTRAL),
        ]

        result = aggregate_judge_results(evaluations)

        assert result.sentiment_distribution == {
            "positive": pytest.approx(0.25),
            "neutral": pytest.approx(0.5),
            "negative": pytest.approx(0.25),
        }

    def test_sentiment_distribution_sums_to_one(self) -> None:
        """Sentiment fractions always sum to 1."""
        sentiments = [Sentiment.POSITIVE, None, Sentiment.NEGATIVE]
        for n in range(1, 8):
            evaluations = [make_evaluation(sentiment=sentiments[i % 3]) for i in range(n)]

            result = aggregate_judge_results(evaluations)

            assert set(result.sentiment_distribution) == {"positive", "neutral", "negative"}
            assert math.fsum(result.sentiment_distribution.values()) == pytest.approx(1.0)

    def test_rates_and_interval_stay_in_range(self) -> None:
        """Rates in [0, 1] and the interval brackets the mention rate."""
        for total in range(1, 13):
            for mentioned in range(total + 1):
                result = aggregate_judge_results(make_mixed_runs(mentioned, total))
                ci = result.confidence_interval

                assert 0.0 <= result.mention_rate <= 1.0
                assert 0.0 <= result.industry_match_rate <= 1.0
                assert 0.0 <= result.location_match_rate <= 1.0
                assert ci.lower >= 0.0
                assert ci.upper <= 1.0
                assert ci.lower <= result.mention_rate
                assert result.mention_rate <= ci.upper

    def test_unanimous_runs_keep_rate_inside_interval(self) -> None:
        """All or none mentioned keeps the rate inside the interval for any n."""
        for total in range(1, 201):
            for mentioned in (0, total):
                result = aggregate_judge_results(make_mixed_runs(mentioned, total))
                ci = result.confidence_interval

                assert ci.lower <= result.mention_rate <= ci.upper, (total, mentioned)

    def test_same_input_same_output(self) -> None:
        """Aggregating twice gives identical results."""
        evaluations = [
            make_evaluation(rank_position=2, sentiment=Sentiment.POSITIVE),
            make_evaluation(is_mentioned=False, industry_match=True),
            make_evaluation(rank_position=4, location_match=True),
        ]

        assert aggregate_judge_results(evaluations) == aggregate_judge_results(evaluations)

    def test_order_does_not_matter(self) -> None:
        """Shuffling the runs does not change the result."""
        evaluations = [
            make_evaluation(rank_position=1, sentiment=Sentiment.POSITIVE),
            make_evaluation(is_mentioned=False, industry_match=True),
            make_evaluation(rank_position=3, location_match=True),
            make_evaluation(rank_position=2, sentiment=Sentiment.NEGATIVE),
        ]

        forward = aggregate_judge_results(evaluations)
        backward = aggregate_judge_results(list(reversed(evaluations)))

        assert forward == backward

    def test_accepts_tuple(self) -> None:
        """Any sequence of evaluations is accepted."""
        result = aggregate_judge_results((make_evaluation(),))

        assert isinstance(result, AggregatedVisibilityResult)
        assert result.run_count == 1


class TestJudgeResultAggregator:
    """Tests for the JudgeResultAggregator wrapper."""

    def test_uses_configured_z(self) -> None:
        """The aggregator passes its z-score to the interval."""
        evaluations = make_mixed_runs(7, 10)

        default = JudgeResultAggregator().aggregate(evaluations)
        wide = JudgeResultAggregator(z=2.576).aggregate(evaluations)

        assert wide.confidence_interval.width > default.confidence_interval.width
        assert wide.mention_rate == default.mention_rate

    def test_empty_input_raises(self) -> None:
        """The wrapper surfaces the empty-input failure."""
        with pytest.raises(EmptyResultSetError):
            JudgeResultAggregator().aggregate([])
