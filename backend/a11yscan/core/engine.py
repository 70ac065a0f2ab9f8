import asyncio
import datetime
import logging
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional
from a11yscan.analyzers.base import Analyzer
from a11yscan.analyzers.cognitive import CognitiveLoadAnalyzer
from a11yscan.analyzers.multimedia import MultimediaAnalyzer
from a11yscan.analyzers.navigation import NavigationAnalyzer
from a11yscan.analyzers.reading_level import ReadingLevelAnalyzer
from a11yscan.core.classifier import FindingClassifier
from a11yscan.core.errors import ScanFailedError
from a11yscan.core.plan import AnalyzerPlan
from a11yscan.core.rules import AAA_NAVIGATION, AODA_COGNITIVE, AODA_MULTIMEDIA, rule_tags_for
from a11yscan.core.scoring import (
    SeverityCounts,
    SubScores,
    base_score,
    overall_score,
    resolve_compliance_level,
    score_weights,
)
from a11yscan.models.schemas import (
    AnalyzerResult,
    ClassifiedIssue,
    PageMetrics,
    ScanOutcome,
    ScanReport,
    ScanRequest,
)
from a11yscan.sources.base import FindingSource, MetricsSource

logger = logging.getLogger(__name__)

ANALYZERS: Dict[str, Analyzer] = {
    "reading": ReadingLevelAnalyzer(),
    "cognitive": CognitiveLoadAnalyzer(),
    "multimedia": MultimediaAnalyzer(),
    "navigation": NavigationAnalyzer(),
}


@dataclass(frozen=True)
class HeuristicFamily:
    gate: int                 # analyzer scores below this become issues
    criterion: str
    category: str
    sub_category: str
    title: str
    element: str
    help_url: str
    remediation: str


HEURISTIC_FAMILIES: Dict[str, HeuristicFamily] = {
    "reading": HeuristicFamily(
        60, AODA_COGNITIVE, "Cognitive & Reading", "Reading Level",
        "Content reading level too high", "<body>",
        "https://www.w3.org/WAI/WCAG21/Understanding/reading-level.html",
        "Use plain language, shorter sentences and common vocabulary for the main content.",
    ),
    "cognitive": HeuristicFamily(
        70, AODA_COGNITIVE, "Cognitive & Reading", "Cognitive Load",
        "High cognitive load detected", "<body>",
        "https://www.w3.org/WAI/WCAG21/Understanding/consistent-navigation.html",
        "Reduce page complexity and provide contextual help.",
    ),
    "multimedia": HeuristicFamily(
        80, AODA_MULTIMEDIA, "Multimedia", "Audio/Video Content",
        "Multimedia accessibility issue", "<video>, <audio>",
        "https://www.w3.org/WAI/WCAG21/Understanding/captions-prerecorded.html",
        "Provide comprehensive multimedia alternatives including captions, transcripts, "
        "audio descriptions, and sign language interpretation",
    ),
    "navigation": HeuristicFamily(
        80, AAA_NAVIGATION, "Enhanced Navigation", "Keyboard Support",
        "Navigation accessibility issue", "<nav>, <main>",
        "https://www.w3.org/WAI/WCAG21/Understanding/bypass-blocks.html",
        "Implement comprehensive keyboard navigation support with skip links, "
        "consistent navigation patterns, and custom shortcuts",
    ),
}


def heuristic_issues(scan_id: str, key: str, result: AnalyzerResult) -> List[ClassifiedIssue]:
    """Issues synthesized from one analyzer's findings (none when it scored at or above its gate)."""
    family = HEURISTIC_FAMILIES[key]
    if result.score >= family.gate:
        return []

    remediation = family.remediation
    if key in ("reading", "cognitive") and result.recommendations:
        remediation = ". ".join(result.recommendations)

    tags = {}
    if key == "reading":
        tags = {"reading_level": result.label, "cognitive_load": "high"}
    elif key == "cognitive":
        tags = {"cognitive_load": "high"}
    elif key == "multimedia":
        tags = {"multimedia_type": "video" if result.details.get("has_video") else "audio"}

    return [
        ClassifiedIssue(
            scan_id=scan_id,
            criterion=family.criterion,
            severity="major",
            category=family.category,
            sub_category=family.sub_category,
            title=family.title,
            description=text,
            element=family.element,
            remediation=remediation,
            impact="serious",
            help_url=family.help_url,
            origin="heuristic",
            **tags,
        )
        for text in result.issues
    ]


async def run_analyzers(plan: AnalyzerPlan, metrics: Optional[PageMetrics]) -> Dict[str, AnalyzerResult]:
    """Run the planned analyzers concurrently; unplanned ones get their neutral result."""
    keys = plan.keys()
    results = {k: a.neutral for k, a in ANALYZERS.items()}
    if keys:
        ran = await asyncio.gather(*[ANALYZERS[k].run(metrics) for k in keys])
        results.update(zip(keys, ran))
    return results


async def run_scan(request: ScanRequest, finding_source: FindingSource, metrics_source: MetricsSource,
                   scan_id: Optional[str] = None, classifier: Optional[FindingClassifier] = None) -> ScanReport:
    scan_id = scan_id or str(uuid.uuid4())
    classifier = classifier or FindingClassifier()
    url = str(request.url)
    levels = list(request.levels)
    plan = AnalyzerPlan.from_levels(levels)
    logger.info("scan %s: %s levels=%s analyzers=%s", scan_id, url, levels, plan.keys() or "none")

    fetches = [asyncio.ensure_future(finding_source.fetch_findings(url, rule_tags_for(levels)))]
    if plan.keys():
        fetches.append(asyncio.ensure_future(metrics_source.fetch_metrics(url)))
    try:
        fetched = await asyncio.gather(*fetches)
    except Exception as e:
        # cancel and drain the sibling fetch before failing
        for fetch in fetches:
            fetch.cancel()
        await asyncio.gather(*fetches, return_exceptions=True)
        raise ScanFailedError(scan_id, str(e) or repr(e)) from e
    findings = fetched[0]
    metrics = fetched[1] if len(fetched) > 1 else None

    issues = classifier.classify_all(findings, scan_id)
    results = await run_analyzers(plan, metrics)
    for key in plan.keys():
        logger.debug("scan %s: %s score=%s issues=%d", scan_id, key, results[key].score, len(results[key].issues))
        issues.extend(heuristic_issues(scan_id, key, results[key]))

    counts = SeverityCounts.from_severities(i.severity for i in issues)
    sub_scores = SubScores(
        reading=results["reading"].score,
        cognitive=results["cognitive"].score,
        multimedia=results["multimedia"].score,
        navigation=results["navigation"].score,
    )
    base = base_score(counts)
    overall = overall_score(base, sub_scores, score_weights(plan))
    compliance = resolve_compliance_level(levels, counts, overall, sub_scores)
    logger.info(
        "scan %s: %d issues (critical=%d major=%d minor=%d) base=%d overall=%d compliance=%s",
        scan_id, counts.total, counts.critical, counts.major, counts.minor, base, overall, compliance,
    )

    outcome = ScanOutcome(
        scan_id=scan_id,
        url=url,
        levels=levels,
        status="completed",
        overall_score=overall,
        compliance_level=compliance,
        total_issues=len(issues),
        critical_count=counts.critical,
        major_count=counts.major,
        minor_count=counts.minor,
        reading_level=results["reading"].label if plan.reading else None,
        reading_score=results["reading"].score if plan.reading else None,
        cognitive_score=results["cognitive"].score if plan.cognitive else None,
        multimedia_score=results["multimedia"].score if plan.multimedia else None,
        navigation_score=results["navigation"].score if plan.navigation else None,
        completed_at=datetime.datetime.now(datetime.timezone.utc),
    )
    return ScanReport(outcome=outcome, issues=issues)
