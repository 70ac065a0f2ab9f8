import datetime
from typing import Literal, List, Dict, Any, Optional
from pydantic import BaseModel, ConfigDict, HttpUrl, Field, field_validator

Level = Literal["A", "AA", "AAA", "AODA", "COGNITIVE", "MULTIMEDIA"]
ComplianceLevel = Literal["A", "AA", "AAA", "AODA", "COGNITIVE", "MULTIMEDIA", "none"]
Severity = Literal["critical", "major", "minor"]
Origin = Literal["automated", "heuristic"]
ScanStatus = Literal["pending", "scanning", "completed", "failed"]

LEVELS: tuple = ("A", "AA", "AAA", "AODA", "COGNITIVE", "MULTIMEDIA")


class ScanRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: HttpUrl
    levels: List[Level] = Field(default_factory=lambda: ["A", "AA"])

    @field_validator("levels")
    @classmethod
    def _unique_levels(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("at least one level must be requested")
        seen: List[str] = []
        for level in value:
            if level not in seen:
                seen.append(level)
        return seen


class AffectedNode(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    html: str = ""
    target: List[Any] = Field(default_factory=list)
    failure_summary: Optional[str] = Field(default=None, alias="failureSummary")


class RawFinding(BaseModel):
    """One rule violation as reported by the external rule checker (axe-core shaped)."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    impact: Optional[str] = None      # critical / serious / moderate / minor, anything else tolerated
    description: str = ""
    help: str = ""
    help_url: str = Field(default="", alias="helpUrl")
    tags: List[str] = Field(default_factory=list)
    nodes: List[AffectedNode] = Field(default_factory=list)

    @field_validator("impact", mode="before")
    @classmethod
    def _impact_as_text(cls, value: Any) -> Optional[str]:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @field_validator("description", "help", "help_url", mode="before")
    @classmethod
    def _null_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("tags", "nodes", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        return [] if value is None else value



class PageMetrics(BaseModel):
    """Counts and flags extracted from the rendered page by the metrics collaborator."""
    model_config = ConfigDict(extra="ignore")

    body_text: str = ""
    # cognitive load
    total_elements: int = 0
    interactive_elements: int = 0
    form_elements: int = 0
    links: int = 0
    heading_tags: List[str] = Field(default_factory=list)
    has_help_text: bool = False
    has_autoplay: bool = False
    # multimedia
    images_with_alt: int = 0
    images_without_alt: int = 0
    video_elements: int = 0
    audio_elements: int = 0
    videos_with_captions: int = 0
    videos_with_descriptions: int = 0
    has_sign_language: bool = False
    has_audio_description: bool = False
    # navigation
    has_skip_links: bool = False
    has_landmarks: bool = False
    nav_elements: int = 0
    focusable_elements: int = 0
    has_custom_shortcuts: bool = False


class ClassifiedIssue(BaseModel):
    model_config = ConfigDict(frozen=True)

    scan_id: str
    criterion: str
    severity: Severity
    category: str
    sub_category: Optional[str] = None
    title: str
    description: str
    element: str
    remediation: str
    impact: Optional[str] = None
    help_url: str = ""
    origin: Origin = "automated"
    reading_level: Optional[str] = None
    cognitive_load: Optional[str] = None
    multimedia_type: Optional[str] = None


class AnalyzerResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0, le=100)
    issues: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    label: Optional[str] = None
    details: Dict[str, Any] = {}


class ScanOutcome(BaseModel):
    scan_id: str
    url: str
    levels: List[Level]
    status: ScanStatus = "pending"
    overall_score: Optional[int] = None
    compliance_level: Optional[ComplianceLevel] = None
    total_issues: int = 0
    critical_count: int = 0
    major_count: int = 0
    minor_count: int = 0
    reading_level: Optional[str] = None
    reading_score: Optional[int] = None
    cognitive_score: Optional[int] = None
    multimedia_score: Optional[int] = None
    navigation_score: Optional[int] = None
    error: Optional[str] = None
    created_at: datetime.datetime = Field(default_factory=lambda: datetime.datetime.now(datetime.timezone.utc))
    completed_at: Optional[datetime.datetime] = None


class ScanReport(BaseModel):
    outcome: ScanOutcome
    issues: List[ClassifiedIssue] = Field(default_factory=list)
