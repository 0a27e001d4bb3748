from __future__ import annotations

import logging
import uuid
from threading import Lock
from typing import Callable, List, Optional

from app_config import is_email_configured
from campaigns import Campaign, load_campaigns
from completion_client import CompletionClient
from drive_service import DriveDocumentSource, DriveManager
from email_notifier import EmailNotifier
from hiring_models import CampaignBatchSummary
from processed_store import ProcessedStore
from sheet_service import SheetManager
from slack_service import SlackNotifier
from summary_store import SummaryStore
from workflow_orchestrator import JDSpecCache, WorkflowOrchestrator

logger = logging.getLogger(__name__)

# Shared across ticks: JD analysis is reused while the JD text is unchanged.
_jd_cache = JDSpecCache()
_processed_store: Optional[ProcessedStore] = None
# APScheduler runs ticks with max_instances=1; this also covers manual /run-poll calls.
_poll_lock = Lock()


def get_processed_store() -> ProcessedStore:
    global _processed_store
    if _processed_store is None:
        _processed_store = ProcessedStore()
    return _processed_store


def build_orchestrator(correlation_id: Optional[str] = None) -> WorkflowOrchestrator:
    """Wire the production adapters around a fresh orchestrator."""
    corr_id = correlation_id or f"poll-{uuid.uuid4()}"
    store = get_processed_store()
    return WorkflowOrchestrator(
        completion_client=CompletionClient(correlation_id=corr_id),
        idempotency=store,
        sink=SheetManager(correlation_id=corr_id),
        source=DriveDocumentSource(DriveManager(correlation_id=corr_id), store),
        notifier=EmailNotifier() if is_email_configured() else None,
        jd_cache=_jd_cache,
        correlation_id=corr_id,
    )


def run_campaign_poll(
    notifier: Optional[SlackNotifier] = None,
    *,
    campaigns: Optional[List[Campaign]] = None,
    orchestrator_factory: Callable[[], WorkflowOrchestrator] = build_orchestrator,
) -> CampaignBatchSummary:
    """Run one poll tick over every campaign, persist the summary, and notify Slack."""
    campaigns = load_campaigns() if campaigns is None else campaigns
    with _poll_lock:
        summary = orchestrator_factory().run(campaigns)
    SummaryStore.set_summary(summary)

    if notifier:
        try:
            notifier.notify_poll_summary(summary)
        except Exception as exc:  # pragma: no cover - logging path
            logger.error("poll_slack_notification_failed", exc_info=True, extra={"error": str(exc)})

    return summary
