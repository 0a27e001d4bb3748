# campaigns.py

# Source-of-truth for hiring campaigns and their Drive folders.
#
# A campaign pairs one JD folder (newest file wins) with one resume intake
# folder. Campaigns come from CAMPAIGNS_JSON (inline), CAMPAIGNS_FILE (path),
# or the single-campaign GOOGLE_DRIVE_JD_FOLDER_ID /
# GOOGLE_DRIVE_RESUMES_FOLDER_ID pair.

import json
import logging
import os
import re
from typing import List, Optional

from pydantic import BaseModel, field_validator

logger = logging.getLogger(__name__)

DEFAULT_CAMPAIGN_NAME = "Default Campaign"


class Campaign(BaseModel):
    id: str
    name: str
    jd_folder_id: str
    resumes_folder_id: str

    @field_validator("id", "name", "jd_folder_id", "resumes_folder_id")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = (value or "").strip()
        if not value:
            raise ValueError("campaign fields must not be blank")
        return value


def slugify_campaign_name(name: str) -> str:
    cleaned = re.sub(r"[^0-9A-Za-z]+", "-", name or "").strip("-").lower()
    return cleaned or "campaign"


def _parse_campaigns(payload: str, source: str) -> List[Campaign]:
    try:
        entries = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ValueError(f"{source} is not valid JSON: {exc}") from exc

    if isinstance(entries, dict):
        entries = [entries]

    campaigns: List[Campaign] = []
    for entry in entries:
        entry = dict(entry)
        entry.setdefault("id", slugify_campaign_name(entry.get("name", "")))
        campaigns.append(Campaign(**entry))

    ids = [c.id for c in campaigns]
    if len(ids) != len(set(ids)):
        raise ValueError(f"{source} contains duplicate campaign ids: {ids}")
    return campaigns


def load_campaigns() -> List[Campaign]:
    """Resolve configured campaigns using inline JSON, file, then single-folder env."""
    inline = os.getenv("CAMPAIGNS_JSON")
    if inline:
        return _parse_campaigns(inline, "CAMPAIGNS_JSON")

    path = os.getenv("CAMPAIGNS_FILE")
    if path:
        if not os.path.exists(path):
            raise ValueError(f"CAMPAIGNS_FILE path {path} does not exist")
        with open(path, "r", encoding="utf-8") as handle:
            return _parse_campaigns(handle.read(), "CAMPAIGNS_FILE")

    jd_folder = os.getenv("GOOGLE_DRIVE_JD_FOLDER_ID")
    resumes_folder = os.getenv("GOOGLE_DRIVE_RESUMES_FOLDER_ID")
    if jd_folder and resumes_folder:
        name = os.getenv("CAMPAIGN_NAME", DEFAULT_CAMPAIGN_NAME)
        return [
            Campaign(
                id=slugify_campaign_name(name),
                name=name,
                jd_folder_id=jd_folder,
                resumes_folder_id=resumes_folder,
            )
        ]

    logger.warning("campaigns_not_configured")
    return []


def find_campaign(campaigns: List[Campaign], campaign_id: str) -> Optional[Campaign]:
    for campaign in campaigns:
        if campaign.id == campaign_id:
            return campaign
    return None
