# main.py

from dotenv import load_dotenv
load_dotenv()

import logging
import time
import uuid
from datetime import datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI, HTTPException, Request
from starlette.middleware.base import BaseHTTPMiddleware

from app_config import DRIVE_POLL_INTERVAL_SECONDS, ENABLE_POLL_SCHEDULER
from batch_jobs import run_campaign_poll
from campaigns import find_campaign, load_campaigns
from sheet_service import SheetManager
from slack_service import SlackNotifier, build_reviewer_client
from summary_store import SummaryStore


# Request Logging Middleware
request_logger = logging.getLogger("request_logging")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())
        start_time = time.time()

        response = await call_next(request)

        latency_ms = (time.time() - start_time) * 1000
        request_logger.info(
            "request_completed",
            extra={
                "request_id": request_id,
                "endpoint": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "latency_ms": round(latency_ms, 2),
            },
        )
        return response


app = FastAPI()
app.add_middleware(RequestLoggingMiddleware)

slack_notifier = SlackNotifier(client=build_reviewer_client())

# ------------------------------------------------------------------
# Scheduler setup
# ------------------------------------------------------------------
scheduler_logger = logging.getLogger("poll_scheduler")
scheduler_timezone = datetime.now().astimezone().tzinfo
scheduler = AsyncIOScheduler(timezone=scheduler_timezone)


def execute_campaign_poll():
    return run_campaign_poll(slack_notifier)


def campaign_poll_job():
    job_corr = "campaign_poll_job"
    try:
        summary = execute_campaign_poll()
        scheduler_logger.info(
            "campaign_poll_job_complete",
            extra={"correlation_id": job_corr, **summary.to_logging_dict()},
        )
    except Exception as exc:  # pragma: no cover - logging path
        scheduler_logger.exception(
            "campaign_poll_job_failed",
            extra={"correlation_id": job_corr, "error": str(exc)},
        )


def _register_scheduler_jobs() -> None:
    scheduler.add_job(
        campaign_poll_job,
        IntervalTrigger(seconds=DRIVE_POLL_INTERVAL_SECONDS, timezone=scheduler_timezone),
        id="campaign_poll_job",
        name="campaign_poll_job",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )


@app.on_event("startup")
async def start_scheduler() -> None:  # pragma: no cover - FastAPI lifecycle
    if not ENABLE_POLL_SCHEDULER:
        scheduler_logger.info("[Scheduler] ENABLE_POLL_SCHEDULER is false; skipping startup.")
        return

    _register_scheduler_jobs()
    if not scheduler.running:
        scheduler.start()
        scheduler_logger.info(
            "poll_scheduler_started",
            extra={"correlation_id": "scheduler", "interval_seconds": DRIVE_POLL_INTERVAL_SECONDS},
        )


@app.on_event("shutdown")
async def stop_scheduler() -> None:  # pragma: no cover - FastAPI lifecycle
    # A tick already running finishes; no new ticks start.
    if scheduler.running:
        scheduler.shutdown(wait=False)


# ------------------------------------------------------------------
# Health check
# ------------------------------------------------------------------
def _healthy_response():
    return {"status": "ok"}


@app.get("/health")
def health():
    return _healthy_response()


@app.get("/healthz")
def healthz():
    return _healthy_response()


# ------------------------------------------------------------------
# Polling
# ------------------------------------------------------------------
@app.post("/run-poll")
def run_poll():
    return execute_campaign_poll()


@app.get("/last-summary")
def last_summary():
    summary = SummaryStore.get_summary()
    if summary is None:
        raise HTTPException(status_code=404, detail="No poll has completed yet")
    return summary


# ------------------------------------------------------------------
# Dashboard reads
# ------------------------------------------------------------------
@app.get("/campaigns")
def list_campaigns():
    return [campaign.model_dump() for campaign in load_campaigns()]


@app.get("/campaigns/{campaign_id}/candidates")
def campaign_candidates(campaign_id: str):
    campaign = find_campaign(load_campaigns(), campaign_id)
    if campaign is None:
        raise HTTPException(status_code=404, detail=f"Unknown campaign: {campaign_id}")
    return SheetManager().get_all_candidates(campaign)
