from __future__ import annotations

from threading import Lock
from typing import Optional

from hiring_models import CampaignBatchSummary


class SummaryStore:
    """In-memory keeper for the latest campaign poll summary."""

    _summary: Optional[CampaignBatchSummary] = None
    _lock: Lock = Lock()

    @classmethod
    def set_summary(cls, summary: CampaignBatchSummary) -> None:
        if summary is None:
            return
        with cls._lock:
            cls._summary = summary.model_copy(deep=True)

    @classmethod
    def get_summary(cls) -> Optional[CampaignBatchSummary]:
        with cls._lock:
            return cls._summary.model_copy(deep=True) if cls._summary else None

    @classmethod
    def reset(cls) -> None:
        """Utility method for tests to clear the cached summary."""
        with cls._lock:
            cls._summary = None
