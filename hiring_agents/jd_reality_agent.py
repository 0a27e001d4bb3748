# jd_reality_agent.py

import logging
from typing import Any, Dict

from hiring_models import JDSpec, RoleContext
from scoring_policy import CRITICALITY_MAX, CRITICALITY_MIN, clamp, coerce_number

from .agent_prompts import JD_REALITY_PROMPT
from .agent_runner import BaseTransform
from .parsing_helpers import choice, string_list, text_field

logger = logging.getLogger(__name__)

OWNERSHIP_LEVELS = ("Low", "Medium", "High", "Very High")
AMBIGUITY_LEVELS = ("Low", "Medium", "High")
PRESSURE_LEVELS = ("Low", "Medium", "High", "Very High")
ROLE_DURATIONS = ("Short-term", "Medium-term", "Long-term")
DEFAULT_CRITICALITY = 0.8


def parse_role_context(value: Any) -> RoleContext:
    try:
        return RoleContext(text_field(value))
    except ValueError:
        logger.warning("jd_role_context_invalid", extra={"role_context": str(value)})
        return RoleContext.STABLE_LONG_TERM


class JDRealityAgent(BaseTransform):
    name = "jd_reality_agent"
    system_prompt = JD_REALITY_PROMPT

    def build_prompt(self, jd_text: str) -> str:
        return (
            "Analyze this job description and extract the real role requirements:\n\n"
            "---JOB DESCRIPTION START---\n"
            f"{jd_text}\n"
            "---JOB DESCRIPTION END---\n\n"
            "Remember to respond with valid JSON only."
        )

    def parse(self, data: Dict[str, Any], jd_text: str) -> JDSpec:
        return JDSpec(
            core_work=text_field(data.get("core_work")),
            non_negotiable_skills=string_list(data.get("non_negotiable_skills")),
            ownership_level=choice(data.get("ownership_level"), OWNERSHIP_LEVELS, "Medium"),
            ambiguity_level=choice(data.get("ambiguity_level"), AMBIGUITY_LEVELS, "Medium"),
            pressure_level=choice(data.get("pressure_level"), PRESSURE_LEVELS, "Medium"),
            expected_role_duration=choice(
                data.get("expected_role_duration"), ROLE_DURATIONS, "Medium-term"
            ),
            role_context=parse_role_context(data.get("role_context")),
            criticality_factor=clamp(
                coerce_number(data.get("criticality_factor"), DEFAULT_CRITICALITY),
                CRITICALITY_MIN,
                CRITICALITY_MAX,
            ),
            raw_text=jd_text,
        )

    def confidence(self, spec: JDSpec) -> float:
        confidence = 0.5
        if len(spec.core_work) > 50:
            confidence += 0.1
        if len(spec.non_negotiable_skills) >= 3:
            confidence += 0.15
        if len(spec.non_negotiable_skills) >= 5:
            confidence += 0.1
        if isinstance(spec.role_context, RoleContext):
            confidence += 0.15
        return min(1.0, confidence)
