# hiring_models.py

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, Generic, List, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field


class RoleContext(str, Enum):
    EARLY_STARTUP_EXECUTION = "Early_Startup_Execution"
    HIGH_OWNERSHIP_CRITICAL = "High_Ownership_Critical"
    STABLE_LONG_TERM = "Stable_Long_Term"
    HIGH_PRESSURE_DELIVERY = "High_Pressure_Delivery"
    EXPLORATORY_RND = "Exploratory_RnD"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


OwnershipLevel = Literal["Low", "Medium", "High", "Very High"]
AmbiguityLevel = Literal["Low", "Medium", "High"]
PressureLevel = Literal["Low", "Medium", "High", "Very High"]
RoleDuration = Literal["Short-term", "Medium-term", "Long-term"]
SkillConfidence = Literal["Low", "Medium", "High"]
FeedbackStage = Literal["resume", "assignment"]
Recommendation = Literal["Strong Yes", "Yes", "Maybe", "Not Now"]

UnitFloat = Annotated[float, Field(ge=0.0, le=1.0)]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Job description
# ---------------------------------------------------------------------------
class Assignment(BaseModel):
    title: str = "Technical Assessment"
    objective: str = ""
    context: str = ""
    requirements: List[str] = Field(default_factory=list)
    evaluation_criteria: List[str] = Field(default_factory=list)
    optional_parts: List[str] = Field(default_factory=list)
    timebox_hours: float = Field(default=4, ge=2, le=6)
    deliverables: List[str] = Field(default_factory=list)


class JDSpec(BaseModel):
    core_work: str = ""
    non_negotiable_skills: List[str] = Field(default_factory=list)
    ownership_level: OwnershipLevel = "Medium"
    ambiguity_level: AmbiguityLevel = "Medium"
    pressure_level: PressureLevel = "Medium"
    expected_role_duration: RoleDuration = "Medium-term"
    role_context: RoleContext = RoleContext.STABLE_LONG_TERM
    criticality_factor: float = Field(default=0.8, ge=0.6, le=1.0)
    standard_assignment: Optional[Assignment] = None
    raw_text: str = ""
    text_hash: str = ""


# ---------------------------------------------------------------------------
# Candidate profile
# ---------------------------------------------------------------------------
class ExtractedSkill(BaseModel):
    name: str
    confidence: SkillConfidence = "Low"
    years_of_experience: Optional[float] = None
    last_used: Optional[str] = None


class WorkExperience(BaseModel):
    company: str = ""
    title: str = ""
    duration: str = ""
    responsibilities: List[str] = Field(default_factory=list)
    achievements: List[str] = Field(default_factory=list)
    technologies: List[str] = Field(default_factory=list)


class Project(BaseModel):
    name: str = ""
    description: str = ""
    technologies: List[str] = Field(default_factory=list)
    impact: Optional[str] = None
    url: Optional[str] = None


class CandidateProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = "Unknown"
    email: Optional[str] = None
    phone: Optional[str] = None
    work_experience: List[WorkExperience] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)
    skills: List[ExtractedSkill] = Field(default_factory=list)
    education: List[str] = Field(default_factory=list)
    resume_file_link: str = ""
    resume_hash: str = ""
    raw_text: str = ""
    extracted_at: datetime = Field(default_factory=_utcnow)


# ---------------------------------------------------------------------------
# Scores
# ---------------------------------------------------------------------------
class TechnicalJustifications(BaseModel):
    skill_relevance: str = ""
    depth_evidence: str = ""
    work_similarity: str = ""
    risk_penalty: str = ""


class TechnicalMetrics(BaseModel):
    S: UnitFloat
    D: UnitFloat
    W: UnitFloat
    R: UnitFloat
    justifications: TechnicalJustifications = Field(default_factory=TechnicalJustifications)


class FounderJustifications(BaseModel):
    ownership: str = ""
    longevity: str = ""
    pressure_handling: str = ""
    growth_trajectory: str = ""


class FounderMetrics(BaseModel):
    O: UnitFloat
    L: UnitFloat
    P: UnitFloat
    G: UnitFloat
    justifications: FounderJustifications = Field(default_factory=FounderJustifications)


class FounderWeights(BaseModel):
    wO: float
    wL: float
    wP: float
    wG: float


class ExecutionFitScore(BaseModel):
    score: float = Field(ge=0.0, le=100.0)
    metrics: TechnicalMetrics
    explanation: str = ""


class FounderConfidenceScore(BaseModel):
    score: float = Field(ge=0.0, le=100.0)
    metrics: FounderMetrics
    weights: FounderWeights
    role_context: RoleContext
    explanation: str = ""


class RelevanceScore(BaseModel):
    score: float = Field(ge=0.0, le=100.0)
    execution_fit: float
    founder_confidence: float
    criticality_factor: float
    alpha: float
    beta: float
    passed_threshold: bool
    explanation: str = ""


# ---------------------------------------------------------------------------
# Feedback and verdicts
# ---------------------------------------------------------------------------
class AssignmentEvaluation(BaseModel):
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)


class CandidateFeedback(BaseModel):
    stage: FeedbackStage = "resume"
    strengths: List[str] = Field(default_factory=list)
    gaps: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
    growth_trajectory_note: Optional[str] = None


class InternalVerdict(BaseModel):
    candidate_name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    resume_file_link: str = ""
    execution_fit: ExecutionFitScore
    founder_confidence: FounderConfidenceScore
    relevance: RelevanceScore
    role_context: RoleContext
    interview_focus_areas: List[str] = Field(default_factory=list)
    risk_notes: List[str] = Field(default_factory=list)
    assignment: Optional[Assignment] = None
    recommendation: Recommendation
    timestamp: datetime = Field(default_factory=_utcnow)


class ExternalVerdict(BaseModel):
    # Candidate-facing: no numeric field may ever be added here.
    feedback: CandidateFeedback
    next_steps: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Pipeline plumbing
# ---------------------------------------------------------------------------
T = TypeVar("T")


class AgentResult(BaseModel, Generic[T]):
    data: T
    explanation: str = ""
    confidence: float = Field(ge=0.0, le=1.0)
    used_fallback: bool = False


class CandidateAssessmentInput(BaseModel):
    candidate: CandidateProfile
    jd_spec: JDSpec


class ResumeDocument(BaseModel):
    id: str
    name: str
    text: str
    content_hash: str
    file_link: str = ""
    mime_type: Optional[str] = None


class ProcessingResult(BaseModel):
    candidate_profile: CandidateProfile
    jd_spec: JDSpec
    execution_fit: ExecutionFitScore
    founder_confidence: FounderConfidenceScore
    relevance: RelevanceScore
    resume_feedback: CandidateFeedback
    assignment: Optional[Assignment] = None
    internal_verdict: InternalVerdict
    external_verdict: ExternalVerdict


class CandidateOutcome(BaseModel):
    candidate_name: str
    resume_id: str
    relevance_score: Optional[float] = None
    recommendation: Optional[str] = None
    passed_threshold: Optional[bool] = None
    resume_link: Optional[str] = None


class CampaignBatchError(BaseModel):
    campaign_id: Optional[str] = None
    resume_id: Optional[str] = None
    resume_name: Optional[str] = None
    error_code: str
    error_message: str
    technical_detail: Optional[str] = None


class CampaignBatchSummary(BaseModel):
    run_id: str = ""
    campaigns_polled: int = 0
    total_seen: int = 0
    processed: int = 0
    skipped_duplicates: int = 0
    failed: int = 0
    passed_threshold: int = 0
    started_at: datetime = Field(default_factory=_utcnow)
    finished_at: Optional[datetime] = None
    errors: List[CampaignBatchError] = Field(default_factory=list)
    candidates: List[CandidateOutcome] = Field(default_factory=list)

    def to_logging_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    @property
    def error_count(self) -> int:
        return len(self.errors)
