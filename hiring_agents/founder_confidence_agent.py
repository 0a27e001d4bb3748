# founder_confidence_agent.py

from typing import Any, Dict

from hiring_models import (
    CandidateAssessmentInput,
    FounderConfidenceScore,
    FounderJustifications,
    FounderMetrics,
    FounderWeights,
    RoleContext,
)
from scoring_policy import FOUNDER_CONFIDENCE_WEIGHTS, clamp_unit, founder_confidence_score

from .agent_prompts import FOUNDER_CONFIDENCE_PROMPT
from .agent_runner import BaseTransform
from .parsing_helpers import justification

MIN_JUSTIFICATION_LENGTH = 20


def explain_founder_confidence(
    metrics: FounderMetrics,
    weights: FounderWeights,
    role_context: RoleContext,
    score: float,
) -> str:
    weighted = sorted(
        [
            ("Ownership", metrics.O, weights.wO),
            ("Longevity", metrics.L, weights.wL),
            ("Pressure Handling", metrics.P, weights.wP),
            ("Growth", metrics.G, weights.wG),
        ],
        key=lambda item: item[2],
        reverse=True,
    )
    name, value, weight = weighted[0]

    parts = [f"For {role_context.label}, {name} is weighted highest ({weight * 100:.0f}%)."]
    if value >= 0.7:
        parts.append(f"Candidate scores well ({value * 100:.0f}%) on this key dimension.")
    elif value < 0.4:
        parts.append(f"Concern: Candidate scores low ({value * 100:.0f}%) on this critical dimension.")
    parts.append(f"Founder Confidence Score: {score:.1f}/100")
    return " ".join(parts)


class FounderConfidenceAgent(BaseTransform):
    name = "founder_confidence_agent"
    system_prompt = FOUNDER_CONFIDENCE_PROMPT

    def build_prompt(self, payload: CandidateAssessmentInput) -> str:
        candidate = payload.candidate
        jd = payload.jd_spec

        history = []
        for exp in candidate.work_experience:
            entry = (
                f"- {exp.title} at {exp.company} ({exp.duration})\n"
                f"    Responsibilities: {'; '.join(exp.responsibilities[:4])}"
            )
            if exp.achievements:
                entry += f"\n    Achievements: {'; '.join(exp.achievements)}"
            history.append(entry)

        history_text = "\n".join(history) or "None listed"
        projects = "\n".join(
            f"- {proj.name}: {proj.description[:100]}" for proj in candidate.projects
        )

        return (
            "Evaluate this candidate's behavioral signals for founder confidence:\n\n"
            "---ROLE CONTEXT---\n"
            f"Role Type: {jd.role_context.value}\n"
            f"Ownership Expected: {jd.ownership_level}\n"
            f"Pressure Level: {jd.pressure_level}\n"
            f"Ambiguity Level: {jd.ambiguity_level}\n"
            f"Expected Duration: {jd.expected_role_duration}\n\n"
            "---CANDIDATE HISTORY---\n"
            f"Name: {candidate.name}\n\n"
            f"Work Experience:\n{history_text}\n\n"
            f"Projects: {len(candidate.projects)} projects listed\n{projects}\n\n"
            "---TASK---\n"
            "Compute O, L, P, G metrics (all 0.0-1.0) with justifications.\n"
            "Respond with valid JSON only."
        )

    def parse(self, data: Dict[str, Any], payload: CandidateAssessmentInput) -> FounderConfidenceScore:
        notes = data.get("justifications")
        metrics = FounderMetrics(
            O=clamp_unit(data.get("O")),
            L=clamp_unit(data.get("L")),
            P=clamp_unit(data.get("P")),
            G=clamp_unit(data.get("G")),
            justifications=FounderJustifications(
                ownership=justification(notes, "ownership"),
                longevity=justification(notes, "longevity"),
                pressure_handling=justification(notes, "pressure_handling"),
                growth_trajectory=justification(notes, "growth_trajectory"),
            ),
        )
        role_context = payload.jd_spec.role_context
        weights = FOUNDER_CONFIDENCE_WEIGHTS[role_context]
        score = founder_confidence_score(weights, metrics.O, metrics.L, metrics.P, metrics.G)
        return FounderConfidenceScore(
            score=score,
            metrics=metrics,
            weights=weights,
            role_context=role_context,
            explanation=explain_founder_confidence(metrics, weights, role_context, score),
        )

    def confidence(self, result: FounderConfidenceScore) -> float:
        notes = result.metrics.justifications.model_dump().values()
        if all(len(note) > MIN_JUSTIFICATION_LENGTH for note in notes):
            return 0.8
        return 0.6
