"""Reviewer-channel Slack delivery for poll summaries."""

import logging
from typing import Any, Dict, List, Optional

import requests

from app_config import SLACK_REVIEWER_BOT_TOKEN, SLACK_REVIEWER_CHANNEL_ID
from hiring_models import CampaignBatchSummary
from slack_blocks import build_poll_summary_blocks

SLACK_API_URL = "https://slack.com/api"

slack_logger = logging.getLogger("slack")


class SlackClient:
    """Minimal Web API client; every call returns the decoded body or ``None``."""

    def __init__(
        self,
        *,
        name: str,
        bot_token: Optional[str],
        default_channel: Optional[str],
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ) -> None:
        self.name = name
        self.bot_token = bot_token
        self.default_channel = default_channel
        self.session = session or requests.Session()
        self.timeout = timeout

    def has_token(self) -> bool:
        return bool(self.bot_token)

    def call(self, method: str, payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if not self.bot_token:
            slack_logger.error("slack_token_unavailable", extra={"bot": self.name})
            return None

        try:
            response = self.session.post(
                f"{SLACK_API_URL}/{method}",
                json=payload,
                headers={"Authorization": f"Bearer {self.bot_token}"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            slack_logger.error(
                "slack_request_failed",
                extra={"bot": self.name, "method": method, "error": str(exc)},
            )
            return None

        if not data.get("ok"):
            slack_logger.error(
                "slack_api_error",
                extra={"bot": self.name, "method": method, "error": data.get("error")},
            )
            return None
        return data

    def post_message(
        self,
        text: str,
        *,
        channel: Optional[str] = None,
        blocks: Optional[List[Dict[str, Any]]] = None,
    ) -> Optional[str]:
        """Post to ``channel`` (or the default one) and return the message ts."""
        target = channel or self.default_channel
        if not target:
            slack_logger.warning("slack_channel_missing", extra={"bot": self.name})
            return None

        payload: Dict[str, Any] = {"channel": target, "text": text}
        if blocks:
            payload["blocks"] = blocks
        data = self.call("chat.postMessage", payload)
        return data.get("ts") if data else None


def build_reviewer_client() -> Optional[SlackClient]:
    if not SLACK_REVIEWER_BOT_TOKEN:
        slack_logger.info("slack_reviewer_disabled")
        return None
    return SlackClient(
        name="reviewer",
        bot_token=SLACK_REVIEWER_BOT_TOKEN,
        default_channel=SLACK_REVIEWER_CHANNEL_ID,
    )


def poll_summary_text(summary: CampaignBatchSummary) -> str:
    return (
        f"Resume poll complete: {summary.processed} processed, "
        f"{summary.passed_threshold} passed threshold, {summary.failed} failed"
    )


class SlackNotifier:
    def __init__(self, *, client: Optional[SlackClient] = None) -> None:
        self.client = client

    def notify_poll_summary(self, summary: CampaignBatchSummary) -> bool:
        if self.client is None:
            slack_logger.warning("slack_reviewer_client_missing")
            return False
        ts = self.client.post_message(
            poll_summary_text(summary), blocks=build_poll_summary_blocks(summary)
        )
        return ts is not None
