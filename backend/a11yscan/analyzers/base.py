from a11yscan.models.schemas import AnalyzerResult, PageMetrics


class Analyzer:
    """A heuristic content check over page metrics.

    Subclasses implement ``analyze`` as a pure function; ``run`` lets the
    orchestrator gather several analyzers concurrently.
    """
    key = ""
    title = ""
    neutral = AnalyzerResult(score=100)

    def analyze(self, metrics: PageMetrics) -> AnalyzerResult:
        raise NotImplementedError

    async def run(self, metrics: PageMetrics) -> AnalyzerResult:
        return self.analyze(metrics)
