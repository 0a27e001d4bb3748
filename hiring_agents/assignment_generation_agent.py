# assignment_generation_agent.py

from typing import Any, Dict

from hiring_models import Assignment, JDSpec
from scoring_policy import (
    TIMEBOX_DEFAULT_HOURS,
    TIMEBOX_MAX_HOURS,
    TIMEBOX_MIN_HOURS,
    clamp,
    coerce_number,
)

from .agent_prompts import ASSIGNMENT_GENERATION_PROMPT
from .agent_runner import BaseTransform
from .parsing_helpers import string_list, text_field

DEFAULT_ASSIGNMENT_TITLE = "Technical Assessment"


class AssignmentGenerationAgent(BaseTransform):
    """Builds the one standard assignment shared by every candidate of a JD."""

    name = "assignment_generation_agent"
    system_prompt = ASSIGNMENT_GENERATION_PROMPT

    def build_prompt(self, jd: JDSpec) -> str:
        context_label = jd.role_context.label
        return (
            "Design a job-realistic, role-specific assignment for this position:\n\n"
            "---ROLE DETAILS---\n"
            f"Role Context: {context_label}\n"
            f"Core Work: {jd.core_work}\n"
            f"Required Skills: {', '.join(jd.non_negotiable_skills)}\n"
            f"Ownership Level: {jd.ownership_level}\n"
            f"Pressure Level: {jd.pressure_level}\n"
            f"Ambiguity Level: {jd.ambiguity_level}\n\n"
            "---ASSIGNMENT REQUIREMENTS---\n"
            "Create a practical, time-boxed assignment that:\n"
            f"1. Tests the core skills required for this role: {', '.join(jd.non_negotiable_skills[:3])}\n"
            f"2. Simulates real work for {context_label} context\n"
            "3. Is completable in 3-6 hours\n"
            "4. Has clear deliverables and evaluation criteria\n"
            "5. Is challenging but fair for candidates at this level\n\n"
            "The assignment should be ROLE-SPECIFIC, NOT GENERIC. "
            f'Make it directly relevant to "{jd.core_work}".\n\n'
            "Respond with valid JSON only."
        )

    def parse(self, data: Dict[str, Any], jd: JDSpec) -> Assignment:
        hours = data.get("timebox_hours")
        return Assignment(
            title=text_field(data.get("title"), DEFAULT_ASSIGNMENT_TITLE),
            objective=text_field(data.get("objective")),
            context=text_field(data.get("context")),
            requirements=string_list(data.get("requirements")),
            evaluation_criteria=string_list(data.get("evaluation_criteria")),
            optional_parts=string_list(data.get("optional_parts")),
            timebox_hours=clamp(
                coerce_number(hours, TIMEBOX_DEFAULT_HOURS) or TIMEBOX_DEFAULT_HOURS,
                TIMEBOX_MIN_HOURS,
                TIMEBOX_MAX_HOURS,
            ),
            deliverables=string_list(data.get("deliverables")),
        )

    def confidence(self, assignment: Assignment) -> float:
        confidence = 0.5
        if len(assignment.objective) > 50:
            confidence += 0.1
        if len(assignment.requirements) >= 2:
            confidence += 0.15
        if len(assignment.evaluation_criteria) >= 3:
            confidence += 0.15
        if len(assignment.optional_parts) >= 1:
            confidence += 0.1
        return min(1.0, confidence)
