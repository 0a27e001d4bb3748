# drive_service.py

import hashlib
import io
import logging
from typing import Dict, List, Optional, Tuple

from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseDownload
from google.oauth2 import service_account

from campaigns import Campaign
from collaborators import IdempotencyStore
from docx_reader import extract_docx_text
from google_auth_utils import load_service_account_credentials
from hiring_models import ResumeDocument
from pdf_reader import extract_pdf_text

# Read-only is enough: the pipeline never writes back to Drive.
SCOPES = ["https://www.googleapis.com/auth/drive.readonly"]

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
GOOGLE_DOC_MIME = "application/vnd.google-apps.document"
TEXT_MIME = "text/plain"
SUPPORTED_MIME_TYPES = (PDF_MIME, DOCX_MIME, GOOGLE_DOC_MIME, TEXT_MIME)

# Configure logger
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
    """Load credentials via shared helper; returns (creds, project_id)."""
    return load_service_account_credentials(SCOPES)


def content_hash(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def file_view_link(item: Dict) -> str:
    return item.get("webViewLink") or f"https://drive.google.com/file/d/{item['id']}/view"


class DriveManager:
    def __init__(self, correlation_id: Optional[str] = None, service=None):
        """
        Google Drive manager using a service account.

        Args:
            correlation_id: Optional correlation ID for tracing requests
            service: Pre-built Drive v3 service (tests); built from credentials otherwise
        """
        self.correlation_id = correlation_id or "no-correlation-id"

        if service is not None:
            self.service = service
            return

        creds_tuple = _load_service_account_credentials()
        if not creds_tuple:
            raise RuntimeError("Service account credentials not configured")

        creds, project_id = creds_tuple
        logger.info(
            "Using service account credentials (project: %s)",
            project_id,
            extra={"correlation_id": self.correlation_id},
        )
        self.service = build("drive", "v3", credentials=creds)

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------
    def list_files(self, folder_id: str, mime_types=SUPPORTED_MIME_TYPES) -> List[Dict]:
        """
        List supported document files directly under folder_id, newest first.

        Returns: list of dicts with keys: id, name, mimeType, modifiedTime, webViewLink
        """
        mime_clause = " or ".join(f"mimeType='{mime}'" for mime in mime_types)
        files: List[Dict] = []
        page_token = None
        while True:
            response = (
                self.service.files()
                .list(
                    q=f"'{folder_id}' in parents and trashed=false and ({mime_clause})",
                    fields="nextPageToken, files(id,name,mimeType,modifiedTime,webViewLink)",
                    orderBy="modifiedTime desc",
                    includeItemsFromAllDrives=True,
                    supportsAllDrives=True,
                    pageToken=page_token,
                )
                .execute()
            )
            files.extend(response.get("files", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                break

        logger.info(
            "listed_files",
            extra={"folder_id": folder_id, "count": len(files), "correlation_id": self.correlation_id},
        )
        return files

    # ------------------------------------------------------------------
    # Download / export
    # ------------------------------------------------------------------
    def _read_request(self, request) -> bytes:
        fh = io.BytesIO()
        downloader = MediaIoBaseDownload(fh, request)
        done = False
        while not done:
            _, done = downloader.next_chunk()
        fh.seek(0)
        return fh.read()

    def download_file_bytes(self, file_id: str) -> bytes:
        """Download a binary file and return its bytes payload."""
        data = self._read_request(self.service.files().get_media(fileId=file_id))
        logger.info(
            "downloaded_file_bytes",
            extra={"correlation_id": self.correlation_id, "file_id": file_id, "size": len(data)},
        )
        return data

    def export_google_doc_bytes(self, file_id: str) -> bytes:
        """Export a Google Doc as UTF-8 plain text bytes."""
        request = self.service.files().export_media(fileId=file_id, mimeType=TEXT_MIME)
        return self._read_request(request)

    def fetch_document(self, item: Dict) -> Tuple[bytes, str]:
        """Return (raw bytes, extracted text) for a listed file item."""
        mime = item.get("mimeType", "")
        if mime == GOOGLE_DOC_MIME:
            data = self.export_google_doc_bytes(item["id"])
        else:
            data = self.download_file_bytes(item["id"])
        return data, extract_document_text(data, mime, item.get("name", ""))


def extract_document_text(data: bytes, mime_type: str, name: str = "") -> str:
    lowered = (name or "").lower()
    if mime_type == PDF_MIME or lowered.endswith(".pdf"):
        return extract_pdf_text(data)
    if mime_type == DOCX_MIME or lowered.endswith(".docx"):
        return extract_docx_text(data)
    if mime_type in (GOOGLE_DOC_MIME, TEXT_MIME) or lowered.endswith(".txt"):
        return data.decode("utf-8", errors="ignore").strip()
    logger.warning("unsupported_document_type", extra={"mime_type": mime_type, "file_name": name})
    return ""


class DriveDocumentSource:
    """Reads a campaign's newest JD and its not-yet-processed resumes from Drive."""

    def __init__(self, drive: DriveManager, idempotency: IdempotencyStore) -> None:
        self.drive = drive
        self.idempotency = idempotency

    def get_job_description_text(self, campaign: Campaign) -> Optional[str]:
        files = self.drive.list_files(campaign.jd_folder_id)
        if not files:
            return None
        latest = files[0]
        _, text = self.drive.fetch_document(latest)
        logger.info(
            "jd_document_loaded",
            extra={
                "correlation_id": self.drive.correlation_id,
                "campaign_id": campaign.id,
                "file_name": latest.get("name"),
                "length": len(text),
            },
        )
        return text or None

    def list_unprocessed_resumes(self, campaign: Campaign) -> List[ResumeDocument]:
        documents: List[ResumeDocument] = []
        for item in self.drive.list_files(campaign.resumes_folder_id):
            try:
                data, text = self.drive.fetch_document(item)
            except Exception as exc:
                logger.error(
                    "resume_download_failed",
                    exc_info=True,
                    extra={
                        "correlation_id": self.drive.correlation_id,
                        "campaign_id": campaign.id,
                        "file_id": item.get("id"),
                        "error": str(exc),
                    },
                )
                continue

            digest = content_hash(data)
            if self.idempotency.is_processed(digest):
                continue

            documents.append(
                ResumeDocument(
                    id=item["id"],
                    name=item.get("name", item["id"]),
                    text=text,
                    content_hash=digest,
                    file_link=file_view_link(item),
                    mime_type=item.get("mimeType"),
                )
            )

        # Drive lists newest first; process in arrival order.
        documents.reverse()
        logger.info(
            "unprocessed_resumes_listed",
            extra={
                "correlation_id": self.drive.correlation_id,
                "campaign_id": campaign.id,
                "count": len(documents),
            },
        )
        return documents
