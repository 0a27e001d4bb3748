# technical_checking_agent.py

from typing import Any, Dict

from hiring_models import (
    CandidateAssessmentInput,
    CandidateProfile,
    ExecutionFitScore,
    JDSpec,
    TechnicalJustifications,
    TechnicalMetrics,
)
from scoring_policy import clamp_unit, execution_fit_score

from .agent_prompts import TECHNICAL_CHECKING_PROMPT
from .agent_runner import BaseTransform
from .parsing_helpers import justification

MIN_JUSTIFICATION_LENGTH = 20


def describe_candidate_work(candidate: CandidateProfile) -> str:
    lines = [
        f"- {exp.title} at {exp.company} ({exp.duration}): {', '.join(exp.responsibilities[:3])}"
        for exp in candidate.work_experience
    ]
    return "\n".join(lines) or "None listed"


def describe_candidate_projects(candidate: CandidateProfile) -> str:
    lines = [
        f"- {proj.name}: {proj.description} [{', '.join(proj.technologies)}]"
        for proj in candidate.projects
    ]
    return "\n".join(lines) or "None listed"


def describe_candidate_skills(candidate: CandidateProfile) -> str:
    parts = []
    for skill in candidate.skills:
        detail = f"{skill.confidence} confidence"
        if skill.years_of_experience:
            detail += f", {skill.years_of_experience:g}y"
        parts.append(f"{skill.name} ({detail})")
    return ", ".join(parts) or "None listed"


def explain_execution_fit(metrics: TechnicalMetrics, score: float) -> str:
    parts = []
    if metrics.S >= 0.7:
        parts.append("Strong skill alignment with requirements.")
    elif metrics.S >= 0.4:
        parts.append("Partial skill match with some gaps.")
    else:
        parts.append("Limited relevant skills for this role.")

    if metrics.D >= 0.7:
        parts.append("Deep technical expertise demonstrated.")
    elif metrics.D >= 0.4:
        parts.append("Moderate depth in relevant areas.")

    if metrics.R >= 0.4:
        parts.append(f"Risk factors identified: {metrics.justifications.risk_penalty}")

    parts.append(f"Execution Fit Score: {score:.1f}/100")
    return " ".join(parts)


class TechnicalCheckingAgent(BaseTransform):
    name = "technical_checking_agent"
    system_prompt = TECHNICAL_CHECKING_PROMPT

    def build_prompt(self, payload: CandidateAssessmentInput) -> str:
        candidate: CandidateProfile = payload.candidate
        jd: JDSpec = payload.jd_spec
        return (
            "Evaluate this candidate against the job requirements:\n\n"
            "---JOB REQUIREMENTS---\n"
            f"Core Work: {jd.core_work}\n"
            f"Non-Negotiable Skills: {', '.join(jd.non_negotiable_skills)}\n"
            f"Ownership Level: {jd.ownership_level}\n"
            f"Role Context: {jd.role_context.value}\n\n"
            "---CANDIDATE PROFILE---\n"
            f"Name: {candidate.name}\n\n"
            f"Work Experience:\n{describe_candidate_work(candidate)}\n\n"
            f"Projects:\n{describe_candidate_projects(candidate)}\n\n"
            f"Skills: {describe_candidate_skills(candidate)}\n\n"
            f"Education: {', '.join(candidate.education) or 'Not specified'}\n\n"
            "---TASK---\n"
            "Compute S, D, W, R metrics (all 0.0-1.0) with justifications.\n"
            "Respond with valid JSON only."
        )

    def parse(self, data: Dict[str, Any], payload: CandidateAssessmentInput) -> ExecutionFitScore:
        notes = data.get("justifications")
        metrics = TechnicalMetrics(
            S=clamp_unit(data.get("S")),
            D=clamp_unit(data.get("D")),
            W=clamp_unit(data.get("W")),
            R=clamp_unit(data.get("R")),
            justifications=TechnicalJustifications(
                skill_relevance=justification(notes, "skill_relevance"),
                depth_evidence=justification(notes, "depth_evidence"),
                work_similarity=justification(notes, "work_similarity"),
                risk_penalty=justification(notes, "risk_penalty"),
            ),
        )
        score = execution_fit_score(metrics.S, metrics.D, metrics.W, metrics.R)
        return ExecutionFitScore(
            score=score,
            metrics=metrics,
            explanation=explain_execution_fit(metrics, score),
        )

    def confidence(self, result: ExecutionFitScore) -> float:
        notes = result.metrics.justifications.model_dump().values()
        if all(len(note) > MIN_JUSTIFICATION_LENGTH for note in notes):
            return 0.85
        return 0.65
