# verdict_synthesizer.py

import re
from datetime import date
from typing import List, Optional, Tuple

from hiring_models import (
    Assignment,
    CandidateFeedback,
    CandidateProfile,
    ExecutionFitScore,
    ExternalVerdict,
    FounderConfidenceScore,
    InternalVerdict,
    JDSpec,
    RelevanceScore,
)
from scoring_policy import MAX_FOCUS_AREAS, MAX_RISK_NOTES, recommendation_for

SHORT_STINT_MONTHS = 12
JOB_HOPPING_MIN_STINTS = 2

_MONTHS = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4, "may": 5, "jun": 6,
    "jul": 7, "aug": 8, "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}
_SPAN_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(years?|yrs?|months?|mos?)\b", re.IGNORECASE)
_DATE_RE = re.compile(
    r"(?P<present>\b(?:present|current|now|today)\b)"
    r"|(?:(?P<month>[A-Za-z]{3,9})\.?\s+|(?P<num_month>\d{1,2})[/-])?(?P<year>(?:19|20)\d{2})",
    re.IGNORECASE,
)

NEXT_STEPS = {
    ("resume", True): [
        "You will receive an assignment to complete at your convenience.",
        "The assignment is designed to simulate real work and is time-boxed.",
        "Feel free to reach out if you have any questions about the assignment.",
    ],
    ("resume", False): [
        "We encourage you to continue building your experience in the areas mentioned.",
        "Consider taking on projects that demonstrate the skills discussed.",
        "Feel free to reapply in the future as your experience grows.",
        "Connect with us on LinkedIn to stay updated on future opportunities.",
    ],
    ("assignment", True): [
        "Your submission has been reviewed and you will hear from us regarding next steps.",
        "If you have any questions about the process, feel free to reach out.",
    ],
    ("assignment", False): [
        "Thank you for completing the assignment and investing your time.",
        "We encourage you to continue developing in the areas mentioned.",
        "Your effort is appreciated and we hope this feedback is helpful.",
        "Feel free to reapply in the future as your skills evolve.",
    ],
}


def _date_points(duration: str, today: date) -> List[Tuple[int, Optional[int]]]:
    points: List[Tuple[int, Optional[int]]] = []
    for match in _DATE_RE.finditer(duration):
        if match.group("present"):
            points.append((today.year, today.month))
            continue
        month: Optional[int] = None
        if match.group("month"):
            month = _MONTHS.get(match.group("month")[:3].lower())
        elif match.group("num_month"):
            candidate = int(match.group("num_month"))
            month = candidate if 1 <= candidate <= 12 else None
        points.append((int(match.group("year")), month))
    return points


def tenure_months(duration: str, today: Optional[date] = None) -> Optional[float]:
    """Estimate the length of a role from its free-text duration, or None if unknown.

    Understands explicit spans ("8 months", "1 year 3 months") and date ranges
    ("Jan 2022 - Present", "03/2020 - 11/2020", "2019 - 2021").
    """
    if not duration:
        return None
    today = today or date.today()

    spans = _SPAN_RE.findall(duration)
    if spans:
        return sum(
            float(amount) * (12 if unit.lower().startswith("y") else 1)
            for amount, unit in spans
        )

    points = _date_points(duration, today)
    if len(points) < 2:
        return None

    (start_year, start_month), (end_year, end_month) = points[0], points[1]
    both_months = start_month is not None and end_month is not None
    start_month = start_month or 1
    end_month = end_month or start_month
    months = (end_year - start_year) * 12 + (end_month - start_month)
    if both_months:
        months += 1
    return float(months) if months >= 0 else None


def count_short_stints(candidate: CandidateProfile, today: Optional[date] = None) -> int:
    count = 0
    for experience in candidate.work_experience:
        months = tenure_months(experience.duration, today)
        if months is not None and months < SHORT_STINT_MONTHS:
            count += 1
    return count


def next_steps_for(stage: str, passed: bool) -> List[str]:
    return list(NEXT_STEPS[(stage, passed)])


class VerdictSynthesizer:
    def __init__(self, today: Optional[date] = None) -> None:
        self.today = today

    def generate_internal_verdict(
        self,
        candidate: CandidateProfile,
        jd_spec: JDSpec,
        execution_fit: ExecutionFitScore,
        founder_confidence: FounderConfidenceScore,
        relevance: RelevanceScore,
        assignment: Optional[Assignment] = None,
    ) -> InternalVerdict:
        return InternalVerdict(
            candidate_name=candidate.name,
            email=candidate.email,
            phone=candidate.phone,
            resume_file_link=candidate.resume_file_link,
            execution_fit=execution_fit,
            founder_confidence=founder_confidence,
            relevance=relevance,
            role_context=jd_spec.role_context,
            interview_focus_areas=self.interview_focus_areas(execution_fit, founder_confidence, jd_spec),
            risk_notes=self.risk_notes(execution_fit, founder_confidence, candidate),
            assignment=assignment,
            recommendation=recommendation_for(relevance.score),
        )

    def generate_external_verdict(
        self,
        feedback: CandidateFeedback,
        relevance: RelevanceScore,
    ) -> ExternalVerdict:
        return ExternalVerdict(
            feedback=feedback,
            next_steps=next_steps_for(feedback.stage, relevance.passed_threshold),
        )

    def interview_focus_areas(
        self,
        execution_fit: ExecutionFitScore,
        founder_confidence: FounderConfidenceScore,
        jd_spec: JDSpec,
    ) -> List[str]:
        technical = execution_fit.metrics
        founder = founder_confidence.metrics
        areas = []

        if technical.S < 0.7:
            skills = ", ".join(jd_spec.non_negotiable_skills[:3]) or "the core role skills"
            areas.append(f"Verify depth in: {skills}")
        if technical.D < 0.6:
            areas.append("Probe technical depth with real-world scenarios")
        if technical.W < 0.6:
            areas.append("Explore transferable experience from different domains")
        if founder.O < 0.6:
            areas.append("Assess ownership mindset with past examples of initiative")
        if founder.P < 0.6 and jd_spec.pressure_level != "Low":
            areas.append("Explore how they handled high-pressure situations")
        if founder.L < 0.6:
            areas.append("Discuss career goals and commitment expectations")
        if founder.G < 0.6:
            areas.append("Understand their learning approach and growth mindset")
        if jd_spec.ambiguity_level == "High":
            areas.append("Test comfort with ambiguity and unstructured problems")
        if jd_spec.ownership_level == "Very High":
            areas.append("Discuss experience driving projects end-to-end")

        return [area for area in areas if area][:MAX_FOCUS_AREAS]

    def risk_notes(
        self,
        execution_fit: ExecutionFitScore,
        founder_confidence: FounderConfidenceScore,
        candidate: CandidateProfile,
    ) -> List[str]:
        risks = []

        if execution_fit.metrics.R >= 0.4:
            risks.append(execution_fit.metrics.justifications.risk_penalty)
        if not candidate.work_experience:
            risks.append("No prior work experience listed")

        short_stints = count_short_stints(candidate, self.today)
        if short_stints >= JOB_HOPPING_MIN_STINTS:
            risks.append(f"Multiple short-term roles ({short_stints} positions < 1 year)")

        if founder_confidence.metrics.L < 0.4:
            risks.append(founder_confidence.metrics.justifications.longevity)
        if not candidate.email:
            risks.append("No email address found in resume")

        return [risk for risk in risks if risk and risk.strip()][:MAX_RISK_NOTES]
