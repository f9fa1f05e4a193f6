"""Scan scoring pipeline: judge aggregation, competitor detection, rollup.

For each tested prompt the judged answers (several models and/or repeated
passes) are reduced to one PromptOutcome. Prompts are independent of each
other, so callers may evaluate them concurrently and only join before the
rollup. The rollup is a single synchronous reduction over the outcomes.

Usage:
    from visibility.pipeline import PromptRun, ScanScorer

    scorer = ScanScorer()
    report = scorer.score_scan(
        brand_name="Acme",
        competitors=["Widget Inc", "Gadget LLC"],
        runs=[PromptRun(prompt_text=..., answer_text=..., evaluation=...)],
    )
    print(report.share_of_voice.brand_share)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from geoscore.config import Settings, get_settings
from visibility.competitors.detection import (
    CompetitorDetection,
    CompetitorMentionDetector,
    MatchStrategy,
)
from visibility.judging.aggregation import JudgeResultAggregator, wilson_interval
from visibility.judging.models import ConfidenceInterval, JudgeEvaluation
from visibility.rollup.models import (
    AggregatedEvidence,
    PromptEvidence,
    PromptOutcome,
    ShareOfVoice,
    SingleRunEvidence,
    VisibilityScore,
)
from visibility.rollup.score import ScoreWeights, compute_visibility_score
from visibility.rollup.share_of_voice import compute_share_of_voice, count_brand_mentions

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class PromptRun:
    """One judged answer to a tested prompt."""

    prompt_text: str
    answer_text: str
    evaluation: JudgeEvaluation
    model: str = ""


@dataclass(frozen=True)
class ScanReport:
    """Everything computed for one scan, ready for storage or presentation."""

    brand_name: str
    competitors: list[str] = field(default_factory=list)
    models: list[str] = field(default_factory=list)
    outcomes: list[PromptOutcome] = field(default_factory=list)
    share_of_voice: ShareOfVoice = field(default_factory=ShareOfVoice)
    visibility_score: VisibilityScore = field(default_factory=VisibilityScore)
    brand_mention_interval: ConfidenceInterval = field(
        default_factory=lambda: ConfidenceInterval(lower=0.0, upper=0.0)
    )

    @property
    def prompts_tested(self) -> int:
        return len(self.outcomes)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "brand_name": self.brand_name,
            "competitors": self.competitors,
            "models": self.models,
            "prompts_tested": self.prompts_tested,
            "visibility_score": self.visibility_score.to_dict(),
            "share_of_voice": self.share_of_voice.to_dict(),
            "brand_mention_interval": self.brand_mention_interval.to_dict(),
            "outcomes": [o.to_dict() for o in self.outcomes],
        }


def group_prompt_runs(runs: Sequence[PromptRun]) -> dict[str, list[PromptRun]]:
    """Group judged answers by prompt text, keeping first-seen prompt order."""
    groups: dict[str, list[PromptRun]] = {}
    for run in runs:
        groups.setdefault(run.prompt_text, []).append(run)
    return groups


def merge_detections(
    competitor: str,
    per_answer: Sequence[CompetitorDetection],
    majority_threshold: float,
) -> CompetitorDetection:
    """
    Merge one competitor's detections over several answers to the same prompt.

    The competitor counts as mentioned when it appears in at least
    majority_threshold of the answers; its rank is the best one seen.
    """
    if not per_answer:
        return CompetitorDetection(competitor_name=competitor)

    hits = [d for d in per_answer if d.mentioned]
    mentioned = bool(hits) and len(hits) / len(per_answer) >= majority_threshold
    if not mentioned:
        return CompetitorDetection(competitor_name=competitor)

    ranks = [d.rank_position for d in hits if d.rank_position is not None]
    seen = {s for d in hits for s in d.matched_strategies}
    return CompetitorDetection(
        competitor_name=competitor,
        mentioned=True,
        rank_position=min(ranks) if ranks else None,
        matched_strategies=tuple(s for s in MatchStrategy if s in seen),
    )


class ScanScorer:
    """Scores scans with parameters taken from Settings."""

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or get_settings()
        self.majority_threshold = settings.brand_majority_threshold
        self.top_n = settings.top_competitors_limit
        self.z = settings.confidence_z
        self.weights = ScoreWeights(
            mention=settings.score_mention_points,
            top_rank=settings.score_top_rank_points,
            top_rank_cutoff=settings.score_top_rank_cutoff,
            industry=settings.score_industry_points,
            location=settings.score_location_points,
        )
        self._aggregator = JudgeResultAggregator(z=self.z)
        self._detector = CompetitorMentionDetector()

    def evaluate_prompt(
        self,
        prompt_text: str,
        runs: Sequence[PromptRun],
        competitors: Sequence[str],
        brand_name: str,
    ) -> PromptOutcome:
        """
        Reduce every judged answer for one prompt to a PromptOutcome.

        Raises:
            EmptyResultSetError: If runs is empty
        """
        evidence: PromptEvidence
        if len(runs) == 1:
            evidence = SingleRunEvidence(evaluation=runs[0].evaluation)
        else:
            evidence = AggregatedEvidence(
                result=self._aggregator.aggregate([r.evaluation for r in runs])
            )

        per_answer = [self._detector.detect(r.answer_text, competitors, brand_name) for r in runs]
        detections = tuple(
            merge_detections(
                competitor,
                [answer[i] for answer in per_answer],
                self.majority_threshold,
            )
            for i, competitor in enumerate(competitors)
        )

        return PromptOutcome(prompt_text=prompt_text, evidence=evidence, detections=detections)

    def score_scan(
        self,
        brand_name: str,
        competitors: Sequence[str],
        runs: Sequence[PromptRun],
    ) -> ScanReport:
        """
        Score a whole scan.

        Args:
            brand_name: Brand under test
            competitors: Competitor names, in report order
            runs: Every judged answer in the scan

        Returns:
            ScanReport; a scan without runs yields a zeroed report
        """
        log = logger.bind(brand=brand_name)
        # Every group holds at least one run
        outcomes = [
            self.evaluate_prompt(prompt_text, prompt_runs, competitors, brand_name)
            for prompt_text, prompt_runs in group_prompt_runs(runs).items()
        ]

        share = compute_share_of_voice(
            outcomes,
            competitors,
            top_n=self.top_n,
            majority_threshold=self.majority_threshold,
        )
        brand_mentions = count_brand_mentions(outcomes, self.majority_threshold)
        models = list(dict.fromkeys(r.model for r in runs if r.model))

        report = ScanReport(
            brand_name=brand_name,
            competitors=list(competitors),
            models=models,
            outcomes=outcomes,
            share_of_voice=share,
            visibility_score=compute_visibility_score(
                [r.evaluation for r in runs], self.weights
            ),
            brand_mention_interval=wilson_interval(brand_mentions, len(outcomes), z=self.z),
        )

        log.info(
            "scan_scored",
            prompts=len(outcomes),
            checks=len(runs),
            brand_mentions=brand_mentions,
            brand_share=round(share.brand_share, 1),
            score=report.visibility_score.score,
        )
        return report
