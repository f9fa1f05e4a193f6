"""Schemas for judge and scan payloads handed to the scoring core.

The judge collaborator speaks camelCase JSON; these models validate it and
turn it into the core's dataclasses. Field names also accept snake_case.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from geoscore.exceptions import ValidationError
from visibility.judging.models import JudgeEvaluation, MentionType, Sentiment
from visibility.pipeline import PromptRun


class JudgeEvaluationPayload(BaseModel):
    """One judge verdict as returned by the judge model."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    is_mentioned: bool = Field(..., alias="isMentioned")
    mention_type: MentionType = Field(default=MentionType.NONE, alias="mentionType")
    rank_position: int | None = Field(default=None, alias="rankPosition")
    industry_match: bool = Field(default=False, alias="industryMatch")
    location_match: bool = Field(default=False, alias="locationMatch")
    sentiment: Sentiment | None = None

    @field_validator("rank_position")
    @classmethod
    def normalize_rank(cls, v: int | None) -> int | None:
        """Treat a rank of 0 as "no rank found"; reject negatives."""
        if v is None or v == 0:
            return None
        if v < 0:
            raise ValueError("rankPosition must be a positive integer")
        return v

    def to_evaluation(self) -> JudgeEvaluation:
        """Convert to the core JudgeEvaluation."""
        return JudgeEvaluation(
            is_mentioned=self.is_mentioned,
            mention_type=self.mention_type,
            rank_position=self.rank_position,
            industry_match=self.industry_match,
            location_match=self.location_match,
            sentiment=self.sentiment,
        )


class PromptRunPayload(BaseModel):
    """One judged answer: the prompt, the model's answer and the verdict."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", protected_namespaces=())

    model: str = ""
    prompt_text: str = Field(..., min_length=1, alias="promptText")
    responder_answer: str = Field(default="", alias="responderAnswer")
    judge_result: JudgeEvaluationPayload = Field(..., alias="judgeResult")

    def to_prompt_run(self) -> PromptRun:
        """Convert to the pipeline's PromptRun."""
        return PromptRun(
            prompt_text=self.prompt_text,
            answer_text=self.responder_answer,
            evaluation=self.judge_result.to_evaluation(),
            model=self.model,
        )


class ScanPayload(BaseModel):
    """A complete scan: brand, competitors and every judged answer."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    brand_name: str = Field(..., min_length=1, alias="brandName")
    competitors: list[str] = Field(default_factory=list)
    results: list[PromptRunPayload] = Field(default_factory=list)

    @field_validator("competitors")
    @classmethod
    def drop_blank_competitors(cls, v: list[str]) -> list[str]:
        """Strip names and drop blanks and duplicates, keeping order."""
        cleaned = [name.strip() for name in v if name.strip()]
        return list(dict.fromkeys(cleaned))

    def to_runs(self) -> list[PromptRun]:
        """Convert every result to a PromptRun."""
        return [r.to_prompt_run() for r in self.results]


def load_scan_payload(data: dict[str, Any]) -> ScanPayload:
    """
    Validate a raw scan payload.

    Raises:
        ValidationError: With the first failing field's location and message
    """
    try:
        return ScanPayload.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ValidationError(first["msg"], field=location or None) from e
