from a11yscan.analyzers.base import Analyzer
from a11yscan.models.schemas import AnalyzerResult, PageMetrics

MAX_FOCUSABLE_WITHOUT_SHORTCUTS = 20


class NavigationAnalyzer(Analyzer):
    key = "navigation"
    title = "Keyboard & Landmark Navigation"

    def analyze(self, metrics: PageMetrics) -> AnalyzerResult:
        issues = []
        score = 100
        has_nav = metrics.nav_elements > 0

        if not metrics.has_skip_links:
            issues.append("No skip links for keyboard navigation")
            score -= 20

        if not metrics.has_landmarks:
            issues.append("Page lacks proper landmark structure")
            score -= 25

        if not has_nav:
            issues.append("No consistent navigation structure")
            score -= 15

        if metrics.focusable_elements > MAX_FOCUSABLE_WITHOUT_SHORTCUTS and not metrics.has_custom_shortcuts:
            issues.append("Complex interface lacks keyboard shortcuts")
            score -= 10

        return AnalyzerResult(
            score=max(0, score),
            issues=issues,
            details={
                "keyboard_support": metrics.focusable_elements > 0,
                "skip_links": metrics.has_skip_links,
                "landmark_structure": metrics.has_landmarks,
                "consistent_navigation": has_nav,
            },
        )
