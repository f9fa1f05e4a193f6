"""Data models for judge evaluations and their aggregate."""

from dataclasses import dataclass, field
from enum import StrEnum


class MentionType(StrEnum):
    """How the judge saw the brand referenced in an answer."""

    DIRECT = "direct"  # Brand named outright
    ALIAS = "alias"  # Known alias or abbreviation
    IMPLIED = "implied"  # Described without being named
    NONE = "none"


class Sentiment(StrEnum):
    """Sentiment of the answer towards the brand."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


@dataclass(frozen=True)
class JudgeEvaluation:
    """One judge pass over one AI answer."""

    is_mentioned: bool
    mention_type: MentionType = MentionType.NONE
    rank_position: int | None = None  # 1-based, only meaningful when mentioned
    industry_match: bool = False
    location_match: bool = False
    sentiment: Sentiment | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "is_mentioned": self.is_mentioned,
            "mention_type": self.mention_type.value,
            "rank_position": self.rank_position,
            "industry_match": self.industry_match,
            "location_match": self.location_match,
            "sentiment": self.sentiment.value if self.sentiment else None,
        }


@dataclass(frozen=True)
class ConfidenceInterval:
    """Two-sided confidence interval for a proportion."""

    lower: float
    upper: float

    def contains(self, value: float) -> bool:
        """Check whether value falls inside the interval."""
        return self.lower <= value <= self.upper

    @property
    def width(self) -> float:
        return self.upper - self.lower

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "lower": round(self.lower, 4),
            "upper": round(self.upper, 4),
        }


@dataclass(frozen=True)
class AggregatedVisibilityResult:
    """Repeated judge passes for one prompt collapsed into one result."""

    mention_rate: float
    average_rank_position: float | None
    industry_match_rate: float
    location_match_rate: float
    sentiment_distribution: dict[str, float] = field(default_factory=dict)
    confidence_interval: ConfidenceInterval = field(
        default_factory=lambda: ConfidenceInterval(lower=0.0, upper=0.0)
    )
    run_count: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "mention_rate": round(self.mention_rate, 3),
            "average_rank_position": (
                round(self.average_rank_position, 2)
                if self.average_rank_position is not None
                else None
            ),
            "industry_match_rate": round(self.industry_match_rate, 3),
            "location_match_rate": round(self.location_match_rate, 3),
            "sentiment_distribution": {
                k: round(v, 3) for k, v in self.sentiment_distribution.items()
            },
            "confidence_interval": self.confidence_interval.to_dict(),
            "run_count": self.run_count,
        }
