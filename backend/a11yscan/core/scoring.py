"""
Score aggregation and compliance-level resolution.

The overall score blends the severity-derived base score with the heuristic
sub-scores. Only analyzers that actually ran carry weight; whatever weight the
optional analyzers leave unused is absorbed by the base score, so the weights
always sum to 1.
"""
from dataclasses import dataclass
from typing import Dict, Iterable
from a11yscan.core.plan import AnalyzerPlan
from a11yscan.core.rounding import round_half_up

SEVERITY_PENALTIES = {"critical": 10, "major": 5, "minor": 2}

BASE_WEIGHT = 0.4
ANALYZER_WEIGHT = 0.15


@dataclass(frozen=True)
class SeverityCounts:
    critical: int = 0
    major: int = 0
    minor: int = 0

    @property
    def total(self) -> int:
        return self.critical + self.major + self.minor

    @classmethod
    def from_severities(cls, severities: Iterable[str]) -> "SeverityCounts":
        counts = {"critical": 0, "major": 0, "minor": 0}
        for severity in severities:
            counts[severity] += 1
        return cls(**counts)


@dataclass(frozen=True)
class SubScores:
    # neutral 100 for anything that did not run
    reading: int = 100
    cognitive: int = 100
    multimedia: int = 100
    navigation: int = 100


def base_score(counts: SeverityCounts) -> int:
    penalty = (
        counts.critical * SEVERITY_PENALTIES["critical"]
        + counts.major * SEVERITY_PENALTIES["major"]
        + counts.minor * SEVERITY_PENALTIES["minor"]
    )
    return max(0, round_half_up(100 - penalty))


def score_weights(plan: AnalyzerPlan) -> Dict[str, float]:
    weights = {"base": BASE_WEIGHT, "reading": 0.0, "cognitive": 0.0, "multimedia": 0.0, "navigation": 0.0}
    if plan.cognitive:
        weights["reading"] = ANALYZER_WEIGHT
        weights["cognitive"] = ANALYZER_WEIGHT
    if plan.multimedia:
        weights["multimedia"] = ANALYZER_WEIGHT
    if plan.navigation:
        weights["navigation"] = ANALYZER_WEIGHT

    total = sum(weights.values())
    if total < 1:
        weights["base"] += 1 - total
    return weights


def overall_score(base: int, sub_scores: SubScores, weights: Dict[str, float]) -> int:
    weighted = (
        base * weights["base"]
        + sub_scores.reading * weights["reading"]
        + sub_scores.cognitive * weights["cognitive"]
        + sub_scores.multimedia * weights["multimedia"]
        + sub_scores.navigation * weights["navigation"]
    )
    return round_half_up(weighted)


def resolve_compliance_level(levels: Iterable[str], counts: SeverityCounts, overall: int,
                             sub_scores: SubScores) -> str:
    """Pick the single compliance label for a completed scan.

    A label is only ever returned when its level was requested. When a tier's
    thresholds pass but the tier was not requested, the next, looser tier is
    tried, so the same scores with different requested levels can resolve to
    different labels.
    """
    levels = set(levels)
    critical, major = counts.critical, counts.major
    clean = critical == 0 and major == 0

    if "COGNITIVE" in levels and clean and overall >= 80 and sub_scores.cognitive >= 80 and sub_scores.reading >= 80:
        return "COGNITIVE"
    if "MULTIMEDIA" in levels and clean and overall >= 80 and sub_scores.multimedia >= 80:
        return "MULTIMEDIA"

    # strictest first
    tiers = (
        ("AODA", clean and overall >= 80),
        ("AAA", critical == 0 and major <= 1 and overall >= 75),
        ("AA", critical == 0 and overall >= 60),
        ("A", critical <= 2 and overall >= 50),
    )
    for level, passed in tiers:
        if passed and level in levels:
            return level

    # partial passes for the specialised levels
    if "COGNITIVE" in levels and sub_scores.cognitive >= 70 and sub_scores.reading >= 60:
        return "COGNITIVE"
    if "MULTIMEDIA" in levels and sub_scores.multimedia >= 80:
        return "MULTIMEDIA"
    return "none"
