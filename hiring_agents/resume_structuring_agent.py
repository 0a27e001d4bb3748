# resume_structuring_agent.py

import re
from typing import Any, Dict, Optional, Tuple

from hiring_models import CandidateProfile, ExtractedSkill, Project, ResumeDocument, WorkExperience
from scoring_policy import coerce_number

from .agent_prompts import RESUME_STRUCTURING_PROMPT
from .agent_runner import BaseTransform
from .parsing_helpers import choice, dict_list, optional_text, string_list, text_field

EMAIL_RE = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_RE = re.compile(r"(?:\+?\d{1,3}[-.\s]?)?\(?\d{2,4}\)?[-.\s]?\d{3,4}[-.\s]?\d{3,4}")

UNPARSEABLE_NAME = "Unable to Parse"
UNKNOWN_NAME = "Unknown"
SKILL_CONFIDENCE_LEVELS = ("Low", "Medium", "High")


def extract_contact_info(text: str) -> Tuple[Optional[str], Optional[str]]:
    """Pull the first email and phone number out of raw resume text."""
    text = text or ""
    email_match = EMAIL_RE.search(text)
    phone_match = PHONE_RE.search(text)
    email = email_match.group(0) if email_match else None
    phone = re.sub(r"\s+", "", phone_match.group(0)) if phone_match else None
    return email, phone or None


def _parse_skill(entry: Dict[str, Any]) -> Optional[ExtractedSkill]:
    name = text_field(entry.get("name"))
    if not name:
        return None
    years = entry.get("years_of_experience")
    years_value = coerce_number(years, -1.0) if years is not None else -1.0
    return ExtractedSkill(
        name=name,
        confidence=choice(entry.get("confidence"), SKILL_CONFIDENCE_LEVELS, "Low"),
        years_of_experience=years_value if years_value >= 0 else None,
        last_used=optional_text(entry.get("last_used")),
    )


class ResumeStructuringAgent(BaseTransform):
    """Structures resume text; contact details always come from regex, never the model."""

    name = "resume_structuring_agent"
    system_prompt = RESUME_STRUCTURING_PROMPT

    def build_prompt(self, document: ResumeDocument) -> str:
        return (
            "Parse this resume and extract structured information:\n\n"
            "---RESUME START---\n"
            f"{document.text}\n"
            "---RESUME END---\n\n"
            "Remember:\n"
            "- Only extract what is explicitly stated\n"
            "- Mark skill confidence honestly\n"
            "- Include all work experience and projects\n"
            "- Respond with valid JSON only"
        )

    def _profile(self, document: ResumeDocument, **fields) -> CandidateProfile:
        email, phone = extract_contact_info(document.text)
        return CandidateProfile(
            email=email,
            phone=phone,
            resume_file_link=document.file_link,
            resume_hash=document.content_hash,
            raw_text=document.text,
            **fields,
        )

    def parse(self, data: Dict[str, Any], document: ResumeDocument) -> CandidateProfile:
        work_experience = [
            WorkExperience(
                company=text_field(entry.get("company")),
                title=text_field(entry.get("title")),
                duration=text_field(entry.get("duration")),
                responsibilities=string_list(entry.get("responsibilities")),
                achievements=string_list(entry.get("achievements")),
                technologies=string_list(entry.get("technologies")),
            )
            for entry in dict_list(data.get("work_experience"))
        ]
        projects = [
            Project(
                name=text_field(entry.get("name")),
                description=text_field(entry.get("description")),
                technologies=string_list(entry.get("technologies")),
                impact=optional_text(entry.get("impact")),
                url=optional_text(entry.get("url")),
            )
            for entry in dict_list(data.get("projects"))
        ]
        skills = [
            skill
            for skill in (_parse_skill(entry) for entry in dict_list(data.get("skills")))
            if skill is not None
        ]
        return self._profile(
            document,
            name=text_field(data.get("name"), UNKNOWN_NAME),
            work_experience=work_experience,
            projects=projects,
            skills=skills,
            education=string_list(data.get("education")),
        )

    def fallback(self, raw: str, document: ResumeDocument) -> CandidateProfile:
        return self._profile(document, name=UNPARSEABLE_NAME)

    def confidence(self, profile: CandidateProfile) -> float:
        confidence = 0.4
        if profile.name and profile.name not in (UNKNOWN_NAME, UNPARSEABLE_NAME):
            confidence += 0.1
        if profile.email:
            confidence += 0.1
        if profile.work_experience:
            confidence += 0.15
        if profile.projects:
            confidence += 0.1
        if len(profile.skills) >= 5:
            confidence += 0.15
        return min(1.0, confidence)
