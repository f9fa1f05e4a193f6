"""Competitor mention detection in raw AI answer text.

Matching is lexical and favours recall: a competitor counts as mentioned when
any one of three strategies fires (raw substring, normalized substring, or
word-boundary match). Rank is taken only from explicit list structure in the
answer, never from where a name happens to appear in prose.

Usage:
    from visibility.competitors.detection import detect_competitor_mentions

    detections = detect_competitor_mentions(
        answer_text="Top picks:\\n1. Acme Corp\\n2. Widget Inc",
        competitors=["Widget Inc", "Other Co"],
        brand_name="Acme",
    )
    print(detections[0].mentioned, detections[0].rank_position)  # True 2
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum

import structlog

logger = structlog.get_logger(__name__)

# One trailing legal-form suffix, e.g. "Acme Inc." -> "acme"
COMPANY_SUFFIX_PATTERN = re.compile(
    r"\s+(inc|llc|ltd|ab|corp|corporation|company|co)\.?$",
    re.IGNORECASE,
)

# "1. item", "- item", "* item", "• item" at the start of a line
LIST_ITEM_PATTERN = re.compile(r"^\s*(?:\d+\.|-|\*|•)\s*(.+)$")

# Numbered marker inside a line: "... 1. Acme 2. Widget"
INLINE_MARKER_PATTERN = re.compile(r"(?:^|(?<=\s))(\d+)\.\s+")


class MatchStrategy(StrEnum):
    """Lexical strategy that found a competitor in the answer."""

    EXACT = "exact"  # Case-insensitive substring of the raw name
    NORMALIZED = "normalized"  # Substring of the suffix-stripped name
    WORD_BOUNDARY = "word_boundary"  # Raw name bounded by \b on both sides


@dataclass(frozen=True)
class CompetitorDetection:
    """Whether one competitor appears in one answer, and where it ranks."""

    competitor_name: str
    mentioned: bool = False
    rank_position: int | None = None  # 1-based, only from extracted list items
    matched_strategies: tuple[MatchStrategy, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "competitor_name": self.competitor_name,
            "mentioned": self.mentioned,
            "rank_position": self.rank_position,
            "matched_strategies": [s.value for s in self.matched_strategies],
        }


def normalize_competitor_name(name: str) -> str:
    """Lowercase a company name and drop one trailing legal-form suffix."""
    return COMPANY_SUFFIX_PATTERN.sub("", name.strip().lower()).strip()


def _split_inline_enumeration(line: str) -> list[str]:
    """Split "1. A 2. B 3. C" on one line into items; [] if not such a line."""
    markers = list(INLINE_MARKER_PATTERN.finditer(line))
    if len(markers) < 2:
        return []

    numbers = [int(m.group(1)) for m in markers]
    if numbers != list(range(1, len(markers) + 1)):
        return []

    items = []
    for i, marker in enumerate(markers):
        end = markers[i + 1].start() if i + 1 < len(markers) else len(line)
        item = line[marker.end() : end].strip()
        if item:
            items.append(item)
    return items


def extract_list_items(answer_text: str) -> list[str]:
    """
    Extract numbered and bulleted list items in document order.

    Args:
        answer_text: Raw AI answer

    Returns:
        Item texts, stripped, without their markers
    """
    items: list[str] = []
    for line in answer_text.splitlines():
        match = LIST_ITEM_PATTERN.match(line)
        if match:
            # A list line is one item, whatever numbers its text contains
            item = match.group(1).strip()
            if item:
                items.append(item)
            continue

        items.extend(_split_inline_enumeration(line))
    return items


def _matching_strategies(
    competitor: str,
    normalized: str,
    answer_text: str,
    answer_lower: str,
) -> tuple[MatchStrategy, ...]:
    """Run every strategy and return the ones that matched."""
    matched = []
    if competitor.lower() in answer_lower:
        matched.append(MatchStrategy.EXACT)
    if normalized and normalized in answer_lower:
        matched.append(MatchStrategy.NORMALIZED)
    if re.search(rf"\b{re.escape(competitor)}\b", answer_text, re.IGNORECASE):
        matched.append(MatchStrategy.WORD_BOUNDARY)
    return tuple(matched)


def _find_rank(competitor_lower: str, normalized: str, list_items: Sequence[str]) -> int | None:
    """1-based index of the first list item naming the competitor."""
    for index, item in enumerate(list_items, start=1):
        item_lower = item.lower()
        if competitor_lower in item_lower or (normalized and normalized in item_lower):
            return index
    return None


def detect_competitor_mentions(
    answer_text: str,
    competitors: Sequence[str],
    brand_name: str,
    min_agreeing_strategies: int = 1,
) -> list[CompetitorDetection]:
    """
    Detect which competitors an answer mentions and at what list rank.

    Args:
        answer_text: Raw AI answer text
        competitors: Competitor names, in the order results should follow
        brand_name: The brand under test. Its position in the text is not
            used to infer competitor rank.
        min_agreeing_strategies: Strategies that must agree before a name
            counts as mentioned. 1 is plain OR over all strategies.

    Returns:
        One CompetitorDetection per competitor, same order as input
    """
    answer_lower = answer_text.lower()
    list_items = extract_list_items(answer_text)
    results: list[CompetitorDetection] = []

    for competitor in competitors:
        # Blank names would match every answer as a substring
        if not competitor.strip():
            results.append(CompetitorDetection(competitor_name=competitor))
            continue

        normalized = normalize_competitor_name(competitor)
        strategies = _matching_strategies(competitor, normalized, answer_text, answer_lower)
        mentioned = len(strategies) >= max(1, min_agreeing_strategies)

        rank = _find_rank(competitor.lower(), normalized, list_items) if mentioned else None

        results.append(
            CompetitorDetection(
                competitor_name=competitor,
                mentioned=mentioned,
                rank_position=rank,
                matched_strategies=strategies,
            )
        )

    logger.debug(
        "competitor_mentions_detected",
        brand=brand_name,
        competitors=len(results),
        mentioned=sum(1 for r in results if r.mentioned),
        list_items=len(list_items),
    )
    return results


class CompetitorMentionDetector:
    """Stateless detector bound to a strategy-agreement policy."""

    def __init__(self, min_agreeing_strategies: int = 1) -> None:
        self.min_agreeing_strategies = min_agreeing_strategies

    def detect(
        self,
        answer_text: str,
        competitors: Sequence[str],
        brand_name: str,
    ) -> list[CompetitorDetection]:
        """Detect competitor mentions in one answer."""
        return detect_competitor_mentions(
            answer_text,
            competitors,
            brand_name,
            min_agreeing_strategies=self.min_agreeing_strategies,
        )
