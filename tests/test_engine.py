import asyncio

import pytest

from a11yscan.core.engine import HEURISTIC_FAMILIES, heuristic_issues, run_analyzers, run_scan
from a11yscan.core.errors import ScanFailedError, SourceError
from a11yscan.core.plan import AnalyzerPlan
from a11yscan.models.schemas import AnalyzerResult, PageMetrics, ScanRequest
from a11yscan.sources.base import StaticFindingSource, StaticMetricsSource

from conftest import make_finding


class FailingMetricsSource:
    def __init__(self):
        self.calls = 0

    async def fetch_metrics(self, url):
        self.calls += 1
        raise SourceError("browser crashed")


class FailingFindingSource:
    async def fetch_findings(self, url, tags):
        raise SourceError("finding-fetch failed")


class SlowFailingMetricsSource:
    def __init__(self):
        self.started = False
        self.finished = False
        self.cancelled = False

    async def fetch_metrics(self, url):
        self.started = True
        try:
            await asyncio.sleep(0.05)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        self.finished = True
        raise SourceError("metrics timed out")


def mixed_findings():
    return [
        make_finding("image-alt", "critical", ["wcag2a", "wcag111", "cat.text-alternatives"], nodes=2),
        make_finding("color-contrast", "serious", ["wcag2aa", "wcag143"], nodes=1),
        make_finding("region", "moderate", ["best-practice"], nodes=1),
    ]


def assert_counts_consistent(report):
    outcome = report.outcome
    assert outcome.total_issues == outcome.critical_count + outcome.major_count + outcome.minor_count
    assert outcome.total_issues == len(report.issues)


@pytest.mark.asyncio
async def test_basic_levels_classify_findings_only():
    metrics = FailingMetricsSource()
    request = ScanRequest(url="https://example.com", levels=["A", "AA"])
    report = await run_scan(request, StaticFindingSource(mixed_findings()), metrics, scan_id="s1")
    outcome = report.outcome

    # no analyzer planned, so the metrics collaborator is never asked
    assert metrics.calls == 0
    assert outcome.status == "completed"
    assert (outcome.critical_count, outcome.major_count, outcome.minor_count) == (2, 1, 1)
    # base 100 - (20 + 5 + 2) with the full weight on base
    assert outcome.overall_score == 73
    assert outcome.compliance_level == "A"
    assert outcome.reading_level is None
    assert outcome.reading_score is None
    assert outcome.cognitive_score is None
    assert outcome.multimedia_score is None
    assert outcome.navigation_score is None
    assert all(i.origin == "automated" and i.scan_id == "s1" for i in report.issues)
    assert_counts_consistent(report)


@pytest.mark.asyncio
async def test_finding_source_receives_rule_tags():
    source = StaticFindingSource([])
    request = ScanRequest(url="https://example.com", levels=["A", "AA", "COGNITIVE"])
    await run_scan(request, source, StaticMetricsSource(PageMetrics(heading_tags=["H1"])))
    assert source.requested_tags == ["wcag2a", "wcag2aa", "wcag2aaa", "cat.language", "best-practice"]


@pytest.mark.asyncio
async def test_aoda_scan_of_clean_page(good_metrics):
    request = ScanRequest(url="https://example.com", levels=["AODA"])
    report = await run_scan(request, StaticFindingSource([]), StaticMetricsSource(good_metrics))
    outcome = report.outcome

    assert report.issues == []
    assert outcome.overall_score == 100
    assert outcome.compliance_level == "AODA"
    assert outcome.reading_level == "Very Easy (5th grade)"
    assert outcome.reading_score == 100
    assert outcome.cognitive_score == 100
    assert outcome.multimedia_score == 100
    assert outcome.navigation_score == 100


@pytest.mark.asyncio
async def test_aoda_scan_of_bare_page(empty_metrics):
    request = ScanRequest(url="https://example.com", levels=["AODA"])
    report = await run_scan(request, StaticFindingSource([]), StaticMetricsSource(empty_metrics), scan_id="bare")
    outcome = report.outcome

    # reading (Unknown, 0) gives one issue, cognitive 75 stays above its gate,
    # navigation 40 gives three
    assert outcome.reading_level == "Unknown"
    assert outcome.reading_score == 0
    assert outcome.cognitive_score == 75
    assert outcome.multimedia_score == 100
    assert outcome.navigation_score == 40
    assert outcome.major_count == 4
    assert outcome.overall_score == 64
    assert outcome.compliance_level == "none"

    reading, *navigation = report.issues
    assert reading.origin == "heuristic"
    assert reading.severity == "major"
    assert reading.sub_category == "Reading Level"
    assert reading.criterion == "AODA - Cognitive & Reading Support"
    assert reading.description == "Content reading level (Unknown) may be too difficult for general audiences"
    assert reading.remediation == "No readable content found"
    assert reading.reading_level == "Unknown"
    assert [i.description for i in navigation] == [
        "No skip links for keyboard navigation",
        "Page lacks proper landmark structure",
        "No consistent navigation structure",
    ]
    assert {i.criterion for i in navigation} == {"WCAG 2.1 AAA - Enhanced Navigation"}
    assert_counts_consistent(report)


@pytest.mark.asyncio
async def test_multimedia_scan():
    metrics = PageMetrics(video_elements=1)
    request = ScanRequest(url="https://example.com/media", levels=["MULTIMEDIA"])
    report = await run_scan(request, StaticFindingSource([]), StaticMetricsSource(metrics))
    outcome = report.outcome

    assert outcome.multimedia_score == 65
    assert outcome.major_count == 3
    # base 85 at .85, multimedia 65 at .15
    assert outcome.overall_score == 82
    assert outcome.compliance_level == "none"
    assert outcome.reading_level is None
    assert outcome.cognitive_score is None
    assert outcome.navigation_score is None
    assert {i.multimedia_type for i in report.issues} == {"video"}
    assert {i.element for i in report.issues} == {"<video>, <audio>"}


@pytest.mark.asyncio
async def test_automated_issues_precede_heuristic_ones(empty_metrics):
    request = ScanRequest(url="https://example.com", levels=["AAA"])
    report = await run_scan(
        request,
        StaticFindingSource([make_finding("tabindex", "minor", ["wcag2a"], nodes=2)]),
        StaticMetricsSource(empty_metrics),
    )
    assert [i.origin for i in report.issues] == ["automated"] * 2 + ["heuristic"] * 3
    assert_counts_consistent(report)


@pytest.mark.asyncio
async def test_finding_source_failure_fails_the_scan(good_metrics):
    request = ScanRequest(url="https://example.com", levels=["A"])
    with pytest.raises(ScanFailedError) as excinfo:
        await run_scan(request, FailingFindingSource(), StaticMetricsSource(good_metrics), scan_id="boom")
    assert excinfo.value.scan_id == "boom"
    assert "finding-fetch failed" in excinfo.value.reason
    assert isinstance(excinfo.value.__cause__, SourceError)


@pytest.mark.asyncio
async def test_metrics_source_failure_fails_the_scan():
    request = ScanRequest(url="https://example.com", levels=["COGNITIVE"])
    with pytest.raises(ScanFailedError):
        await run_scan(request, StaticFindingSource([]), FailingMetricsSource())


@pytest.mark.asyncio
async def test_failed_finding_fetch_cancels_metrics_fetch():
    slow = SlowFailingMetricsSource()
    request = ScanRequest(url="https://example.com", levels=["AODA"])
    with pytest.raises(ScanFailedError, match="finding-fetch failed"):
        await run_scan(request, FailingFindingSource(), slow)

    await asyncio.sleep(0.1)
    assert slow.started
    assert slow.cancelled
    assert not slow.finished



@pytest.mark.asyncio
async def test_unplanned_analyzers_keep_neutral_results(empty_metrics):
    results = await run_analyzers(AnalyzerPlan(navigation=True), empty_metrics)
    assert results["navigation"].score == 40
    assert results["reading"].label == "N/A"
    assert all(results[k].score == 100 for k in ("reading", "cognitive", "multimedia"))


@pytest.mark.asyncio
async def test_concurrent_scans_do_not_interfere(good_metrics, empty_metrics):
    good = run_scan(ScanRequest(url="https://good.example", levels=["AODA"]),
                    StaticFindingSource([]), StaticMetricsSource(good_metrics), scan_id="good")
    bare = run_scan(ScanRequest(url="https://bare.example", levels=["AODA"]),
                    StaticFindingSource([]), StaticMetricsSource(empty_metrics), scan_id="bare")
    good_report, bare_report = await asyncio.gather(good, bare)

    assert good_report.outcome.compliance_level == "AODA"
    assert bare_report.outcome.compliance_level == "none"
    assert all(i.scan_id == "bare" for i in bare_report.issues)


def test_heuristic_issues_respect_gates():
    at_gate = AnalyzerResult(score=HEURISTIC_FAMILIES["cognitive"].gate, issues=["x"])
    below = AnalyzerResult(score=69, issues=["a", "b"], recommendations=["Do this", "Do that"])

    assert heuristic_issues("s", "cognitive", at_gate) == []
    issues = heuristic_issues("s", "cognitive", below)
    assert [i.description for i in issues] == ["a", "b"]
    assert issues[0].remediation == "Do this. Do that"
    assert issues[0].cognitive_load == "high"
    assert issues[0].impact == "serious"


def test_heuristic_issue_without_recommendations_uses_family_fix():
    result = AnalyzerResult(score=10, label="Very Difficult (Graduate level)", issues=["too hard"])
    (issue,) = heuristic_issues("s", "reading", result)
    assert issue.remediation == HEURISTIC_FAMILIES["reading"].remediation


def test_audio_only_multimedia_issue_type():
    result = AnalyzerResult(score=70, issues=["No sign language interpretation available", "x"],
                            details={"has_video": False, "has_audio": True})
    assert {i.multimedia_type for i in heuristic_issues("s", "multimedia", result)} == {"audio"}
