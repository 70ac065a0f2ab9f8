from typing import List, Optional, Protocol, Sequence
from a11yscan.models.schemas import PageMetrics, RawFinding


class FindingSource(Protocol):
    async def fetch_findings(self, url: str, tags: Sequence[str]) -> List[RawFinding]:
        ...


class MetricsSource(Protocol):
    async def fetch_metrics(self, url: str) -> PageMetrics:
        ...


class StaticFindingSource:
    """Findings already collected by the caller, e.g. from a stored checker run."""

    def __init__(self, findings: Sequence[RawFinding]):
        self.findings = list(findings)
        self.requested_tags: Optional[List[str]] = None

    async def fetch_findings(self, url: str, tags: Sequence[str]) -> List[RawFinding]:
        self.requested_tags = list(tags)
        return list(self.findings)


class StaticMetricsSource:
    def __init__(self, metrics: PageMetrics):
        self.metrics = metrics

    async def fetch_metrics(self, url: str) -> PageMetrics:
        return self.metrics
