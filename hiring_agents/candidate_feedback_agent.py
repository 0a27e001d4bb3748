# candidate_feedback_agent.py

import logging
import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from hiring_models import (
    AssignmentEvaluation,
    CandidateFeedback,
    CandidateProfile,
    ExecutionFitScore,
    FeedbackStage,
    FounderConfidenceScore,
    JDSpec,
)

from .agent_prompts import CANDIDATE_FEEDBACK_PROMPT
from .agent_runner import BaseTransform
from .parsing_helpers import string_list, text_field

logger = logging.getLogger(__name__)

# Anything that leaks a number-like grade, rejection or comparison is dropped.
BANNED_FEEDBACK_PATTERNS = [
    re.compile(r"\d+%"),
    re.compile(r"\d+/\d+"),
    re.compile(r"score", re.IGNORECASE),
    re.compile(r"reject", re.IGNORECASE),
    re.compile(r"fail", re.IGNORECASE),
    re.compile(r"not selected", re.IGNORECASE),
    re.compile(r"other candidates", re.IGNORECASE),
]


class FeedbackInput(BaseModel):
    candidate: CandidateProfile
    jd_spec: JDSpec
    execution_fit: ExecutionFitScore
    founder_confidence: FounderConfidenceScore
    stage: FeedbackStage = "resume"
    passed_threshold: bool
    assignment_evaluation: Optional[AssignmentEvaluation] = None


def score_to_qualitative(value: float) -> str:
    if value >= 0.8:
        return "Strong"
    if value >= 0.6:
        return "Good"
    if value >= 0.4:
        return "Moderate"
    if value >= 0.2:
        return "Limited"
    return "Minimal"


def is_candidate_safe(text: str) -> bool:
    return not any(pattern.search(text) for pattern in BANNED_FEEDBACK_PATTERNS)


def clean_feedback_items(items: List[str]) -> List[str]:
    cleaned = []
    for item in items:
        if not is_candidate_safe(item):
            logger.info("feedback_item_filtered", extra={"item_preview": item[:80]})
            continue
        item = item.strip()
        if item:
            cleaned.append(item)
    return cleaned


class CandidateFeedbackAgent(BaseTransform):
    name = "candidate_feedback_agent"
    system_prompt = CANDIDATE_FEEDBACK_PROMPT

    def _stage_context(self, payload: FeedbackInput) -> str:
        if payload.stage == "resume":
            technical = payload.execution_fit.metrics
            founder = payload.founder_confidence.metrics
            return (
                "---RESUME ANALYSIS SUMMARY---\n"
                f"Skill Match: {score_to_qualitative(technical.S)}\n"
                f"Experience Depth: {score_to_qualitative(technical.D)}\n"
                f"Work Relevance: {score_to_qualitative(technical.W)}\n"
                f"Ownership Evidence: {score_to_qualitative(founder.O)}\n"
                f"Growth Trajectory: {score_to_qualitative(founder.G)}\n\n"
                "Key observations:\n"
                f"- {technical.justifications.skill_relevance}\n"
                f"- {technical.justifications.depth_evidence}\n"
                f"- {founder.justifications.ownership}"
            )
        if payload.assignment_evaluation is not None:
            evaluation = payload.assignment_evaluation
            return (
                "---ASSIGNMENT EVALUATION SUMMARY---\n"
                f"Demonstrated strengths: {', '.join(evaluation.strengths)}\n"
                f"Areas needing work: {', '.join(evaluation.weaknesses)}"
            )
        return ""

    def build_prompt(self, payload: FeedbackInput) -> str:
        candidate = payload.candidate
        jd = payload.jd_spec
        outcome = (
            "Candidate is moving forward in the process."
            if payload.passed_threshold
            else "Candidate did not meet the bar for this role, but feedback should be constructive."
        )
        stage_label = "Resume Review" if payload.stage == "resume" else "Assignment Review"
        return (
            f"Generate candidate feedback for {candidate.name}:\n\n"
            "---ROLE---\n"
            f"{jd.core_work}\n"
            f"Required Skills: {', '.join(jd.non_negotiable_skills)}\n\n"
            "---CANDIDATE---\n"
            f"Experience: {len(candidate.work_experience)} roles\n"
            f"Projects: {len(candidate.projects)} projects\n"
            f"Skills listed: {len(candidate.skills)}\n\n"
            f"{self._stage_context(payload)}\n\n"
            "---CONTEXT---\n"
            f"Stage: {stage_label}\n"
            f"{outcome}\n\n"
            "---TASK---\n"
            "Generate respectful, specific, actionable feedback.\n"
            "Remember: NO scores, NO rejection language, NO comparisons.\n"
            "Respond with valid JSON only."
        )

    def parse(self, data: Dict[str, Any], payload: FeedbackInput) -> CandidateFeedback:
        note = text_field(data.get("growth_trajectory_note"))
        if note and not is_candidate_safe(note):
            logger.info("feedback_growth_note_filtered")
            note = ""
        return CandidateFeedback(
            stage=payload.stage,
            strengths=clean_feedback_items(string_list(data.get("strengths"))),
            gaps=clean_feedback_items(string_list(data.get("gaps"))),
            recommendations=clean_feedback_items(string_list(data.get("recommendations"))),
            growth_trajectory_note=note or None,
        )

    def confidence(self, feedback: CandidateFeedback) -> float:
        confidence = 0.6
        if len(feedback.strengths) >= 2:
            confidence += 0.1
        if len(feedback.gaps) >= 1:
            confidence += 0.1
        if len(feedback.recommendations) >= 2:
            confidence += 0.1
        if feedback.growth_trajectory_note:
            confidence += 0.1
        return min(1.0, confidence)
