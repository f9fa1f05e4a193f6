"""Data models for scan-level rollup."""

from dataclasses import dataclass, field
from enum import StrEnum

from geoscore.config import DEFAULT_MAJORITY_THRESHOLD
from visibility.competitors.detection import CompetitorDetection
from visibility.judging.models import AggregatedVisibilityResult, JudgeEvaluation


class EvidenceKind(StrEnum):
    """Which brand-mention rule applies to a prompt."""

    AGGREGATED = "aggregated"  # Majority rule over repeated judge passes
    SINGLE_RUN = "single_run"  # One judge pass, taken at face value


@dataclass(frozen=True)
class AggregatedEvidence:
    """Brand evidence for a prompt judged more than once."""

    result: AggregatedVisibilityResult
    kind: EvidenceKind = field(default=EvidenceKind.AGGREGATED, init=False)

    def is_brand_mentioned(self, majority_threshold: float = DEFAULT_MAJORITY_THRESHOLD) -> bool:
        """Mentioned when at least majority_threshold of passes say so."""
        return self.result.mention_rate >= majority_threshold

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"kind": self.kind.value, "result": self.result.to_dict()}


@dataclass(frozen=True)
class SingleRunEvidence:
    """Brand evidence for a prompt judged exactly once."""

    evaluation: JudgeEvaluation
    kind: EvidenceKind = field(default=EvidenceKind.SINGLE_RUN, init=False)

    def is_brand_mentioned(self, majority_threshold: float = DEFAULT_MAJORITY_THRESHOLD) -> bool:
        """Mentioned when the single judge pass says so; threshold does not apply."""
        return self.evaluation.is_mentioned

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"kind": self.kind.value, "evaluation": self.evaluation.to_dict()}


PromptEvidence = AggregatedEvidence | SingleRunEvidence


@dataclass(frozen=True)
class PromptOutcome:
    """Everything the rollup needs to know about one tested prompt."""

    prompt_text: str
    evidence: PromptEvidence
    detections: tuple[CompetitorDetection, ...] = ()

    def detection_for(self, competitor_name: str) -> CompetitorDetection | None:
        """Find the detection for a competitor, if this prompt recorded one."""
        for detection in self.detections:
            if detection.competitor_name == competitor_name:
                return detection
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "prompt_text": self.prompt_text,
            "evidence": self.evidence.to_dict(),
            "detections": [d.to_dict() for d in self.detections],
        }


@dataclass(frozen=True)
class CompetitorMentionSummary:
    """One competitor's mentions across every prompt in a scan."""

    competitor_name: str
    is_mentioned: bool = False
    mention_count: int = 0
    average_rank_position: float | None = None
    mention_rate: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "competitor_name": self.competitor_name,
            "is_mentioned": self.is_mentioned,
            "mention_count": self.mention_count,
            "average_rank_position": (
                round(self.average_rank_position, 2)
                if self.average_rank_position is not None
                else None
            ),
            "mention_rate": round(self.mention_rate, 3),
        }


@dataclass(frozen=True)
class ShareOfVoice:
    """Brand mentions as a share of all brand + competitor mentions."""

    brand_mention_rate: float = 0.0
    total_mentions: int = 0
    brand_share: float = 0.0  # 0-100
    competitor_mentions: list[CompetitorMentionSummary] = field(default_factory=list)
    top_competitors: list[CompetitorMentionSummary] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "brand_mention_rate": round(self.brand_mention_rate, 3),
            "total_mentions": self.total_mentions,
            "brand_share": round(self.brand_share, 1),
            "competitor_mentions": [c.to_dict() for c in self.competitor_mentions],
            "top_competitors": [c.to_dict() for c in self.top_competitors],
        }


@dataclass(frozen=True)
class VisibilityScore:
    """Overall 0-100 visibility score across every judged check in a scan."""

    score: int = 0
    mentioned_checks: int = 0
    total_checks: int = 0
    points_earned: int = 0
    points_possible: int = 0

    @property
    def coverage_fraction(self) -> str:
        """Mentioned checks over total checks, e.g. "4/10"."""
        return f"{self.mentioned_checks}/{self.total_checks}"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "score": self.score,
            "coverage_fraction": self.coverage_fraction,
            "mentioned_checks": self.mentioned_checks,
            "total_checks": self.total_checks,
            "points_earned": self.points_earned,
            "points_possible": self.points_possible,
        }
