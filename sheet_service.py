# sheet_service.py

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

from google.oauth2 import service_account
from googleapiclient.discovery import build

from app_config import GOOGLE_SHEETS_OUTPUT_ID
from campaigns import Campaign
from google_auth_utils import load_service_account_credentials
from hiring_models import CandidateFeedback, InternalVerdict

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
DEFAULT_SHEET_TITLE = "Candidates"
DISPLAY_TIMEZONE = ZoneInfo("Asia/Kolkata")

HEADERS: List[str] = [
    "Date",
    "Candidate Name",
    "Email",
    "Phone",
    "Resume File Link",
    "Execution Fit Score",
    "Founder Confidence Score",
    "Relevance Score",
    "Role Context",
    "Interview Focus Areas",
    "Risk Notes",
    "Assignment Brief",
    "Recommendation",
    "Resume Feedback",
    "Assignment Feedback",
]
LAST_COLUMN = "O"

DRIVE_FILE_ID_RE = re.compile(r"/d/([A-Za-z0-9_-]+)")

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)


def _load_service_account_credentials() -> Optional[
    Tuple[service_account.Credentials, Optional[str]]
]:
    return load_service_account_credentials(SCOPES)


def get_sheets_service():
    creds_tuple = _load_service_account_credentials()
    if not creds_tuple:
        logger.error("sheets_service_account_missing")
        raise RuntimeError("Service account credentials not configured for Sheets")

    creds, project_id = creds_tuple
    logger.info(
        "sheets_service_created",
        extra={"correlation_id": "sheets-service", "project_id": project_id},
    )
    return build("sheets", "v4", credentials=creds)


def format_readable_date(moment: datetime) -> str:
    """e.g. '17 Oct 2026, 02:30 PM' in India Standard Time."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(DISPLAY_TIMEZONE).strftime("%d %b %Y, %I:%M %p")


def format_feedback(feedback: Optional[CandidateFeedback]) -> str:
    if feedback is None:
        return ""

    sections = []
    for title, items in (
        ("STRENGTHS", feedback.strengths),
        ("GAPS", feedback.gaps),
        ("RECOMMENDATIONS", feedback.recommendations),
    ):
        if items:
            bullets = "\n".join(f"• {item}" for item in items)
            sections.append(f"{title}:\n{bullets}")

    if feedback.growth_trajectory_note:
        sections.append(f"GROWTH NOTE: {feedback.growth_trajectory_note}")
    return "\n\n".join(sections)


def verdict_row(
    verdict: InternalVerdict,
    feedback: CandidateFeedback,
    assignment_feedback: Optional[CandidateFeedback] = None,
) -> List[str]:
    return [
        format_readable_date(verdict.timestamp),
        verdict.candidate_name,
        verdict.email or "",
        verdict.phone or "",
        verdict.resume_file_link,
        f"{verdict.execution_fit.score:.1f}",
        f"{verdict.founder_confidence.score:.1f}",
        f"{verdict.relevance.score:.1f}",
        verdict.role_context.value,
        "; ".join(verdict.interview_focus_areas),
        "; ".join(verdict.risk_notes),
        verdict.assignment.title if verdict.assignment else "",
        verdict.recommendation,
        format_feedback(feedback),
        format_feedback(assignment_feedback),
    ]


def header_key(header: str) -> str:
    return header.strip().replace(" ", "_").lower()


def extract_drive_file_id(link: str) -> Optional[str]:
    match = DRIVE_FILE_ID_RE.search(link or "")
    return match.group(1) if match else None


def sheet_title_for(campaign: Optional[Campaign]) -> str:
    if campaign is None or not campaign.name.strip():
        return DEFAULT_SHEET_TITLE
    # Sheets rejects a few characters in tab titles.
    cleaned = re.sub(r"[\[\]\*\?/\\:]", " ", campaign.name).strip()
    return cleaned[:90] or DEFAULT_SHEET_TITLE


def ensure_sheet_exists(service, spreadsheet_id: str, sheet_title: str) -> None:
    """Ensure the campaign tab exists and carries the header row."""
    sheet_api = service.spreadsheets()
    spreadsheet = sheet_api.get(spreadsheetId=spreadsheet_id).execute()
    titles = {s["properties"]["title"] for s in spreadsheet.get("sheets", [])}

    if sheet_title not in titles:
        sheet_api.batchUpdate(
            spreadsheetId=spreadsheet_id,
            body={
                "requests": [
                    {
                        "addSheet": {
                            "properties": {
                                "title": sheet_title,
                                "gridProperties": {
                                    "rowCount": 1000,
                                    "columnCount": len(HEADERS),
                                    "frozenRowCount": 1,
                                },
                            }
                        }
                    }
                ]
            },
        ).execute()
        logger.info(
            "sheet_tab_created",
            extra={"spreadsheet_id": spreadsheet_id, "sheet_title": sheet_title},
        )
    else:
        existing = (
            sheet_api.values()
            .get(spreadsheetId=spreadsheet_id, range=f"'{sheet_title}'!A1:{LAST_COLUMN}1")
            .execute()
            .get("values", [])
        )
        if existing and existing[0]:
            return

    sheet_api.values().update(
        spreadsheetId=spreadsheet_id,
        range=f"'{sheet_title}'!A1:{LAST_COLUMN}1",
        valueInputOption="RAW",
        body={"values": [HEADERS]},
    ).execute()


class SheetManager:
    """Campaign result sink backed by one spreadsheet, one tab per campaign."""

    def __init__(
        self,
        spreadsheet_id: Optional[str] = None,
        correlation_id: Optional[str] = None,
        service=None,
    ):
        self.spreadsheet_id = spreadsheet_id or GOOGLE_SHEETS_OUTPUT_ID
        if not self.spreadsheet_id:
            raise RuntimeError("GOOGLE_SHEETS_OUTPUT_ID is not configured")
        self.correlation_id = correlation_id or "no-correlation-id"
        self.service = service or get_sheets_service()
        self._initialized: set = set()

    def _ensure(self, sheet_title: str) -> None:
        if sheet_title in self._initialized:
            return
        ensure_sheet_exists(self.service, self.spreadsheet_id, sheet_title)
        self._initialized.add(sheet_title)

    # ------------------------------------------------------------------
    # Append one verdict row to the campaign tab
    # ------------------------------------------------------------------
    def append_verdict(
        self,
        campaign: Campaign,
        verdict: InternalVerdict,
        feedback: CandidateFeedback,
        assignment_feedback: Optional[CandidateFeedback] = None,
    ) -> None:
        sheet_title = sheet_title_for(campaign)
        self._ensure(sheet_title)

        response = (
            self.service.spreadsheets()
            .values()
            .append(
                spreadsheetId=self.spreadsheet_id,
                range=f"'{sheet_title}'!A:{LAST_COLUMN}",
                valueInputOption="RAW",
                insertDataOption="INSERT_ROWS",
                body={"values": [verdict_row(verdict, feedback, assignment_feedback)]},
            )
            .execute()
        )
        logger.info(
            "sheet_row_appended",
            extra={
                "correlation_id": self.correlation_id,
                "sheet_name": sheet_title,
                "candidate_name": verdict.candidate_name,
                "range": response.get("updates", {}).get("updatedRange"),
            },
        )

    # ------------------------------------------------------------------
    # Dashboard reads
    # ------------------------------------------------------------------
    def get_all_candidates(self, campaign: Campaign) -> List[Dict[str, Any]]:
        sheet_title = sheet_title_for(campaign)
        self._ensure(sheet_title)

        rows = (
            self.service.spreadsheets()
            .values()
            .get(spreadsheetId=self.spreadsheet_id, range=f"'{sheet_title}'!A:{LAST_COLUMN}")
            .execute()
            .get("values", [])
        )
        if len(rows) <= 1:
            return []

        headers = [header_key(h) for h in rows[0]]
        candidates = []
        for index, row in enumerate(rows[1:], start=1):
            record: Dict[str, Any] = {"id": index}
            for col, key in enumerate(headers):
                record[key] = row[col] if col < len(row) else ""
            record["drive_file_id"] = extract_drive_file_id(record.get("resume_file_link", ""))
            candidates.append(record)
        return candidates
