"""Interfaces the workflow orchestrator needs from the outside world.

Concrete adapters live in drive_service.py (document source),
processed_store.py (idempotency), sheet_service.py (result sink) and
email_notifier.py (notifier). Tests substitute simple fakes.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from campaigns import Campaign
from hiring_models import CandidateFeedback, InternalVerdict, ResumeDocument


class DocumentSource(Protocol):
    def get_job_description_text(self, campaign: Campaign) -> Optional[str]: ...

    def list_unprocessed_resumes(self, campaign: Campaign) -> List[ResumeDocument]: ...


class IdempotencyStore(Protocol):
    def is_processed(self, identity: str) -> bool: ...

    def mark_processed(self, identity: str, **metadata) -> None: ...


class ResultSink(Protocol):
    def append_verdict(
        self,
        campaign: Campaign,
        verdict: InternalVerdict,
        feedback: CandidateFeedback,
        assignment_feedback: Optional[CandidateFeedback] = None,
    ) -> None: ...


class Notifier(Protocol):
    def notify_reviewer(self, verdict: InternalVerdict, campaign: Optional[Campaign] = None) -> None: ...

    def notify_candidate(
        self,
        email: str,
        name: str,
        feedback: CandidateFeedback,
        next_steps: List[str],
    ) -> None: ...
