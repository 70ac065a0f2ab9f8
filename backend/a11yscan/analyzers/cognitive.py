import math
from a11yscan.analyzers.base import Analyzer
from a11yscan.models.schemas import AnalyzerResult, PageMetrics

SCREEN_SIZE = 50
MAX_ELEMENTS_PER_SCREEN = 30
MAX_LINKS = 10
MAX_UNASSISTED_FORM_FIELDS = 3

RECOMMENDATIONS = [
    "Use clear, consistent navigation patterns",
    "Provide contextual help and explanations",
    "Implement error prevention and clear error messages",
    "Use progressive disclosure for complex information",
    "Provide multiple ways to access the same information",
]


class CognitiveLoadAnalyzer(Analyzer):
    key = "cognitive"
    title = "Cognitive Load"

    def analyze(self, metrics: PageMetrics) -> AnalyzerResult:
        issues = []
        score = 100

        screens = max(1, math.ceil(metrics.total_elements / SCREEN_SIZE))
        if metrics.total_elements / screens > MAX_ELEMENTS_PER_SCREEN:
            issues.append("High element density may cause cognitive overload")
            score -= 10

        if metrics.links > MAX_LINKS:
            issues.append("Many links may lack sufficient context")
            score -= 10

        if not metrics.has_help_text and metrics.form_elements > MAX_UNASSISTED_FORM_FIELDS:
            issues.append("Complex forms lack contextual help")
            score -= 10

        if metrics.has_autoplay:
            issues.append("Autoplay content may disrupt focus and concentration")
            score -= 10

        if not metrics.heading_tags:
            issues.append("No heading structure for content navigation")
            score -= 25

        return AnalyzerResult(
            score=max(0, score),
            issues=issues,
            recommendations=list(RECOMMENDATIONS),
            details={
                "interactive_elements": metrics.interactive_elements,
                "headings": len(metrics.heading_tags),
            },
        )
