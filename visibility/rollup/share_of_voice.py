"""Share-of-voice rollup across every prompt tested in a scan."""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from geoscore.config import DEFAULT_MAJORITY_THRESHOLD
from visibility.rollup.models import (
    CompetitorMentionSummary,
    PromptOutcome,
    ShareOfVoice,
)

logger = structlog.get_logger(__name__)


def count_brand_mentions(
    outcomes: Sequence[PromptOutcome],
    majority_threshold: float = DEFAULT_MAJORITY_THRESHOLD,
) -> int:
    """
    Count prompts in which the brand counts as mentioned.

    Aggregated prompts use the majority rule over their judge passes;
    single-run prompts use that run's verdict.
    """
    return sum(1 for o in outcomes if o.evidence.is_brand_mentioned(majority_threshold))


def summarize_competitors(
    outcomes: Sequence[PromptOutcome],
    competitors: Sequence[str],
) -> list[CompetitorMentionSummary]:
    """
    Roll up each competitor's detections across the scan.

    Args:
        outcomes: One PromptOutcome per tested prompt
        competitors: Competitor names, in report order

    Returns:
        One CompetitorMentionSummary per competitor, same order as input
    """
    total_prompts = len(outcomes)
    summaries = []

    for competitor in competitors:
        mention_count = 0
        ranks: list[int] = []

        for outcome in outcomes:
            detection = outcome.detection_for(competitor)
            if detection is None or not detection.mentioned:
                continue
            mention_count += 1
            if detection.rank_position is not None:
                ranks.append(detection.rank_position)

        summaries.append(
            CompetitorMentionSummary(
                competitor_name=competitor,
                is_mentioned=mention_count > 0,
                mention_count=mention_count,
                average_rank_position=sum(ranks) / len(ranks) if ranks else None,
                mention_rate=mention_count / total_prompts if total_prompts else 0.0,
            )
        )

    return summaries


def top_competitors(
    summaries: Sequence[CompetitorMentionSummary],
    limit: int,
) -> list[CompetitorMentionSummary]:
    """Most-mentioned competitors first; ties keep input order."""
    # sorted() is stable, so equal counts stay in input order
    ranked = sorted(summaries, key=lambda s: s.mention_count, reverse=True)
    return ranked[: max(0, limit)]


def compute_share_of_voice(
    outcomes: Sequence[PromptOutcome],
    competitors: Sequence[str],
    top_n: int = 5,
    majority_threshold: float = DEFAULT_MAJORITY_THRESHOLD,
) -> ShareOfVoice:
    """
    Compute the brand's share of voice against named competitors.

    Args:
        outcomes: One PromptOutcome per tested prompt
        competitors: Competitor names, in report order
        top_n: How many competitors to keep in top_competitors
        majority_threshold: Mention rate at which an aggregated prompt
            counts as a brand mention

    Returns:
        ShareOfVoice with brand_share in [0, 100]
    """
    total_prompts = len(outcomes)
    brand_mentions = count_brand_mentions(outcomes, majority_threshold)
    summaries = summarize_competitors(outcomes, competitors)

    total_mentions = brand_mentions + sum(s.mention_count for s in summaries)
    brand_share = brand_mentions * 100 / total_mentions if total_mentions > 0 else 0.0

    result = ShareOfVoice(
        brand_mention_rate=brand_mentions / total_prompts if total_prompts else 0.0,
        total_mentions=total_mentions,
        brand_share=brand_share,
        competitor_mentions=summaries,
        top_competitors=top_competitors(summaries, top_n),
    )

    logger.debug(
        "share_of_voice_computed",
        prompts=total_prompts,
        brand_mentions=brand_mentions,
        total_mentions=total_mentions,
        brand_share=round(brand_share, 1),
    )
    return result
