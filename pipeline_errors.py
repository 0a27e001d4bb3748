"""Error taxonomy for the hiring pipeline.

Only these types cross module boundaries. Adapters may raise their own
library errors internally, but the orchestrator reasons in terms of the
classes below when deciding whether a resume is abandoned, skipped or
retried on the next poll tick.
"""

from __future__ import annotations

from typing import Optional


class PipelineError(Exception):
    """Base class for every failure the pipeline reports on purpose."""

    error_code = "pipeline_error"

    def __init__(self, message: str, *, detail: Optional[str] = None) -> None:
        super().__init__(message)
        self.detail = detail


class ModelError(PipelineError):
    """The completion provider rejected the request (bad request, auth, policy)."""

    error_code = "model_error"


class ModelUnavailable(ModelError):
    """Transient provider failures persisted past the retry budget."""

    error_code = "model_unavailable"

    def __init__(self, message: str, *, attempts: int, detail: Optional[str] = None) -> None:
        super().__init__(message, detail=detail)
        self.attempts = attempts


class UnparseableResponse(PipelineError):
    """Model output could not be decoded even after the repair pass."""

    error_code = "unparseable_response"

    def __init__(self, message: str, *, raw: str = "", detail: Optional[str] = None) -> None:
        super().__init__(message, detail=detail)
        self.raw = raw


class DocumentUnreadable(PipelineError):
    """A JD or resume yielded no usable text."""

    error_code = "document_unreadable"


class PersistenceError(PipelineError):
    """The result sink or idempotency store could not record a verdict."""

    error_code = "persistence_error"
