import re
from typing import List, Optional, Tuple
from a11yscan.analyzers.base import Analyzer
from a11yscan.core.rounding import round_half_up
from a11yscan.models.schemas import AnalyzerResult, PageMetrics

UNKNOWN = "Unknown"

# (lower bound, label, recommendation)
READING_BANDS: Tuple[Tuple[float, str, Optional[str]], ...] = (
    (90, "Very Easy (5th grade)", None),
    (80, "Easy (6th grade)", None),
    (70, "Fairly Easy (7th grade)", None),
    (60, "Standard (8th-9th grade)", None),
    (50, "Fairly Difficult (10th-12th grade)", "Simplify sentence structure and vocabulary"),
    (30, "Difficult (College level)", "Text may be too complex for general audiences"),
)
HARDEST_BAND = ("Very Difficult (Graduate level)", "Provide plain language alternatives")

# reported scores below this produce an issue
DIFFICULT_BELOW = 60

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_SUFFIX = re.compile(r"(?:[^laeiouy]es|ed|[^laeiouy]e)$")
_LEADING_Y = re.compile(r"^y")
_VOWEL_GROUP = re.compile(r"[aeiouy]{1,2}")


def count_syllables(word: str) -> int:
    word = word.lower()
    if len(word) <= 3:
        return 1
    word = _SUFFIX.sub("", word)
    word = _LEADING_Y.sub("", word)
    groups = _VOWEL_GROUP.findall(word)
    return len(groups) if groups else 1


def split_sentences(text: str) -> List[str]:
    return [s for s in _SENTENCE_SPLIT.split(text) if s.strip()]


def flesch_reading_ease(text: str) -> Optional[float]:
    """Flesch Reading Ease of ``text``; None when there is nothing to measure."""
    sentences = split_sentences(text)
    words = text.split()
    if not sentences or not words:
        return None
    syllables = sum(count_syllables(w) for w in words)
    return 206.835 - 1.015 * (len(words) / len(sentences)) - 84.6 * (syllables / len(words))


def reading_band(score: float) -> Tuple[str, Optional[str]]:
    for lower, label, recommendation in READING_BANDS:
        if score >= lower:
            return label, recommendation
    return HARDEST_BAND


def too_difficult(label: str) -> str:
    return f"Content reading level ({label}) may be too difficult for general audiences"


class ReadingLevelAnalyzer(Analyzer):
    key = "reading_level"
    title = "Reading Level (Flesch Reading Ease)"
    neutral = AnalyzerResult(score=100, label="N/A")

    def _unknown(self, reason: str) -> AnalyzerResult:
        return AnalyzerResult(score=0, label=UNKNOWN, issues=[too_difficult(UNKNOWN)], recommendations=[reason])

    def analyze(self, metrics: PageMetrics) -> AnalyzerResult:
        text = (metrics.body_text or "").strip()
        if not text:
            return self._unknown("No readable content found")

        flesch = flesch_reading_ease(text)
        if flesch is None:
            return self._unknown("No readable sentences found")

        # banding uses the raw value, the reported score is clamped
        label, recommendation = reading_band(flesch)
        score = min(100, max(0, round_half_up(flesch)))
        issues = []
        if score < DIFFICULT_BELOW:
            issues.append(too_difficult(label))
        return AnalyzerResult(
            score=score,
            label=label,
            issues=issues,
            recommendations=[recommendation] if recommendation else [],
            details={"flesch": round(flesch, 2)},
        )
