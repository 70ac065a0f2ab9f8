from a11yscan.analyzers.base import Analyzer
from a11yscan.models.schemas import AnalyzerResult, PageMetrics

ALT_PENALTY_PER_IMAGE = 5
ALT_PENALTY_CAP = 40


class MultimediaAnalyzer(Analyzer):
    key = "multimedia"
    title = "Multimedia Alternatives"

    def analyze(self, metrics: PageMetrics) -> AnalyzerResult:
        issues = []
        score = 100

        has_video = metrics.video_elements > 0
        has_audio = metrics.audio_elements > 0

        if has_video:
            if metrics.videos_with_captions == 0:
                issues.append("Videos lack captions or subtitles")
                score -= 15
            if metrics.videos_with_descriptions == 0:
                issues.append("Videos lack audio descriptions")
                score -= 10

        if metrics.images_without_alt > 0:
            issues.append(f"{metrics.images_without_alt} images lack alternative text")
            score -= min(ALT_PENALTY_CAP, metrics.images_without_alt * ALT_PENALTY_PER_IMAGE)

        if not metrics.has_sign_language and (has_video or has_audio):
            issues.append("No sign language interpretation available")
            score -= 10

        return AnalyzerResult(
            score=max(0, score),
            issues=issues,
            details={
                "has_video": has_video,
                "has_audio": has_audio,
                "has_captions": metrics.videos_with_captions > 0,
                "has_sign_language": metrics.has_sign_language,
                "has_audio_description": metrics.has_audio_description,
            },
        )
