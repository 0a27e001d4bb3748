"""Per-campaign workflow: one JD analysis, then every new resume against it.

    JD text ──► JDRealityAgent ──► JDSpec ──► AssignmentGenerationAgent (once)
                                    │
    resume ──► ResumeStructuringAgent ──► CandidateProfile
                                    │
               ┌────────────────────┴───────────────────┐
        TechnicalCheckingAgent               FounderConfidenceAgent
               └──────────► RelevanceSynthesizer ◄──────┘
                                    │
                       CandidateFeedbackAgent
                                    │
                         VerdictSynthesizer
                                    │
                   ResultSink ─► IdempotencyStore ─► Notifier

Resumes are processed sequentially, in discovery order. A failure abandons
that resume for the current tick only; nothing is marked processed, so the
next poll retries it.
"""

from __future__ import annotations

import hashlib
import logging
import traceback
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

from campaigns import Campaign
from collaborators import DocumentSource, IdempotencyStore, Notifier, ResultSink
from hiring_agents.agent_runner import AgentRunner
from hiring_agents.assignment_generation_agent import AssignmentGenerationAgent
from hiring_agents.candidate_feedback_agent import CandidateFeedbackAgent, FeedbackInput
from hiring_agents.founder_confidence_agent import FounderConfidenceAgent
from hiring_agents.jd_reality_agent import JDRealityAgent
from hiring_agents.resume_structuring_agent import ResumeStructuringAgent
from hiring_agents.technical_checking_agent import TechnicalCheckingAgent
from hiring_models import (
    CampaignBatchError,
    CampaignBatchSummary,
    CandidateAssessmentInput,
    CandidateOutcome,
    InternalVerdict,
    JDSpec,
    ProcessingResult,
    ResumeDocument,
)
from hiring_synthesis.relevance_synthesizer import RelevanceSynthesizer
from hiring_synthesis.verdict_synthesizer import VerdictSynthesizer
from pipeline_errors import DocumentUnreadable, PersistenceError, PipelineError

logger = logging.getLogger(__name__)
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)

T = TypeVar("T")


def text_hash(text: str) -> str:
    return hashlib.sha256((text or "").encode("utf-8")).hexdigest()


class JDSpecCache:
    """One (text hash, JDSpec) slot per campaign id."""

    def __init__(self) -> None:
        self._entries: Dict[str, Tuple[str, JDSpec]] = {}

    def lookup(self, campaign_id: str, jd_hash: str) -> Optional[JDSpec]:
        entry = self._entries.get(campaign_id)
        if entry is None or entry[0] != jd_hash:
            return None
        return entry[1]

    def store(self, campaign_id: str, jd_hash: str, spec: JDSpec) -> None:
        self._entries[campaign_id] = (jd_hash, spec)

    def get(self, campaign_id: str) -> Optional[JDSpec]:
        entry = self._entries.get(campaign_id)
        return entry[1] if entry else None

    def __len__(self) -> int:
        return len(self._entries)


class WorkflowOrchestrator:
    def __init__(
        self,
        *,
        completion_client,
        idempotency: IdempotencyStore,
        sink: ResultSink,
        source: Optional[DocumentSource] = None,
        notifier: Optional[Notifier] = None,
        jd_cache: Optional[JDSpecCache] = None,
        relevance: Optional[RelevanceSynthesizer] = None,
        verdicts: Optional[VerdictSynthesizer] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self.source = source
        self.idempotency = idempotency
        self.sink = sink
        self.notifier = notifier
        self.jd_cache = jd_cache or JDSpecCache()
        self.relevance = relevance or RelevanceSynthesizer()
        self.verdicts = verdicts or VerdictSynthesizer()

        def runner(transform) -> AgentRunner:
            return AgentRunner(transform, completion_client, correlation_id=self.correlation_id)

        self.jd_agent = runner(JDRealityAgent())
        self.resume_agent = runner(ResumeStructuringAgent())
        self.technical_agent = runner(TechnicalCheckingAgent())
        self.founder_agent = runner(FounderConfidenceAgent())
        self.assignment_agent = runner(AssignmentGenerationAgent())
        self.feedback_agent = runner(CandidateFeedbackAgent())

    # -------------------------------------------------------
    # JD
    # -------------------------------------------------------
    def ensure_jd_spec(self, campaign: Campaign, jd_text: str) -> JDSpec:
        """Return the cached JDSpec for unchanged JD text, else analyze and cache it."""
        if not (jd_text or "").strip():
            raise DocumentUnreadable(f"Job description for campaign {campaign.id} has no text")

        jd_hash = text_hash(jd_text)
        cached = self.jd_cache.lookup(campaign.id, jd_hash)
        if cached is not None:
            return cached

        logger.info(
            "jd_analysis_started",
            extra={"correlation_id": self.correlation_id, "campaign_id": campaign.id},
        )
        spec = self.jd_agent.execute(jd_text).data
        spec = spec.model_copy(update={"raw_text": jd_text, "text_hash": jd_hash})

        try:
            assignment = self.assignment_agent.execute(spec).data
            spec = spec.model_copy(update={"standard_assignment": assignment})
        except Exception as exc:  # pragma: no cover - logging path
            logger.warning(
                "standard_assignment_generation_failed",
                exc_info=True,
                extra={
                    "correlation_id": self.correlation_id,
                    "campaign_id": campaign.id,
                    "error": str(exc),
                },
            )

        self.jd_cache.store(campaign.id, jd_hash, spec)
        logger.info(
            "jd_analysis_cached",
            extra={
                "correlation_id": self.correlation_id,
                "campaign_id": campaign.id,
                "role_context": spec.role_context.value,
                "criticality_factor": spec.criticality_factor,
                "has_standard_assignment": spec.standard_assignment is not None,
            },
        )
        return spec

    # -------------------------------------------------------
    # RESUME
    # -------------------------------------------------------
    def _step(self, name: str, corr_id: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except Exception as exc:
            logger.error(
                "resume_step_failed",
                extra={"correlation_id": corr_id, "step": name, "error": str(exc)},
            )
            raise

    def process_resume(
        self,
        campaign: Campaign,
        document: ResumeDocument,
        jd_spec: JDSpec,
    ) -> Optional[ProcessingResult]:
        """Run the full pipeline for one resume; ``None`` means it was already processed."""
        corr_id = f"{self.correlation_id}::{document.name}"

        if self.idempotency.is_processed(document.content_hash):
            logger.info(
                "resume_already_processed",
                extra={"correlation_id": corr_id, "campaign_id": campaign.id, "resume_id": document.id},
            )
            return None

        if not document.text.strip():
            raise DocumentUnreadable(f"Resume {document.name} has no extractable text")

        candidate = self._step("structure", corr_id, lambda: self.resume_agent.execute(document).data)
        assessment = CandidateAssessmentInput(candidate=candidate, jd_spec=jd_spec)

        execution_fit = self._step(
            "technical", corr_id, lambda: self.technical_agent.execute(assessment).data
        )
        founder_confidence = self._step(
            "founder", corr_id, lambda: self.founder_agent.execute(assessment).data
        )
        relevance = self.relevance.synthesize(
            execution_fit,
            founder_confidence,
            jd_spec.criticality_factor,
            jd_spec.role_context,
        )

        feedback_input = FeedbackInput(
            candidate=candidate,
            jd_spec=jd_spec,
            execution_fit=execution_fit,
            founder_confidence=founder_confidence,
            stage="resume",
            passed_threshold=relevance.passed_threshold,
        )
        feedback = self._step("feedback", corr_id, lambda: self.feedback_agent.execute(feedback_input).data)

        assignment = jd_spec.standard_assignment
        internal = self.verdicts.generate_internal_verdict(
            candidate, jd_spec, execution_fit, founder_confidence, relevance, assignment
        )
        external = self.verdicts.generate_external_verdict(feedback, relevance)

        try:
            self.sink.append_verdict(campaign, internal, feedback)
        except Exception as exc:
            logger.error(
                "verdict_persist_failed",
                exc_info=True,
                extra={"correlation_id": corr_id, "campaign_id": campaign.id, "error": str(exc)},
            )
            raise PersistenceError(
                f"Could not persist verdict for {candidate.name}", detail=str(exc)
            ) from exc

        try:
            self.idempotency.mark_processed(
                document.content_hash,
                resume_id=document.id,
                campaign_id=campaign.id,
                file_link=document.file_link,
            )
        except Exception as exc:
            logger.error(
                "mark_processed_failed",
                exc_info=True,
                extra={"correlation_id": corr_id, "resume_id": document.id, "error": str(exc)},
            )
            raise PersistenceError(
                f"Verdict saved but {document.name} could not be marked processed",
                detail=str(exc),
            ) from exc

        self._notify(campaign, internal, candidate.email, candidate.name, feedback, external.next_steps, corr_id)

        logger.info(
            "resume_processed",
            extra={
                "correlation_id": corr_id,
                "campaign_id": campaign.id,
                "candidate_name": candidate.name,
                "relevance_score": relevance.score,
                "recommendation": internal.recommendation,
            },
        )
        return ProcessingResult(
            candidate_profile=candidate,
            jd_spec=jd_spec,
            execution_fit=execution_fit,
            founder_confidence=founder_confidence,
            relevance=relevance,
            resume_feedback=feedback,
            assignment=assignment,
            internal_verdict=internal,
            external_verdict=external,
        )

    def _notify(self, campaign, internal: InternalVerdict, email, name, feedback, next_steps, corr_id: str) -> None:
        if self.notifier is None:
            return
        try:
            self.notifier.notify_reviewer(internal, campaign)
            if email:
                self.notifier.notify_candidate(email, name, feedback, next_steps)
        except Exception as exc:  # pragma: no cover - logging path
            logger.error(
                "notification_failed",
                exc_info=True,
                extra={"correlation_id": corr_id, "campaign_id": campaign.id, "error": str(exc)},
            )

    # -------------------------------------------------------
    # POLLING
    # -------------------------------------------------------
    def poll_campaign(self, campaign: Campaign, summary: CampaignBatchSummary) -> CampaignBatchSummary:
        if self.source is None:
            raise RuntimeError("WorkflowOrchestrator has no document source configured")

        summary.campaigns_polled += 1
        try:
            jd_text = self.source.get_job_description_text(campaign)
            if not jd_text:
                logger.warning(
                    "campaign_jd_missing",
                    extra={"correlation_id": self.correlation_id, "campaign_id": campaign.id},
                )
                summary.errors.append(
                    CampaignBatchError(
                        campaign_id=campaign.id,
                        error_code="jd_missing",
                        error_message="No job description found in the campaign JD folder.",
                    )
                )
                return summary
            jd_spec = self.ensure_jd_spec(campaign, jd_text)
            documents = self.source.list_unprocessed_resumes(campaign)
        except Exception as exc:
            logger.error(
                "campaign_poll_failed",
                exc_info=True,
                extra={"correlation_id": self.correlation_id, "campaign_id": campaign.id, "error": str(exc)},
            )
            summary.errors.append(self._batch_error(campaign, None, exc))
            return summary

        summary.total_seen += len(documents)
        for document in documents:
            try:
                result = self.process_resume(campaign, document, jd_spec)
            except Exception as exc:
                summary.failed += 1
                summary.errors.append(self._batch_error(campaign, document, exc))
                continue

            if result is None:
                summary.skipped_duplicates += 1
                continue

            summary.processed += 1
            if result.relevance.passed_threshold:
                summary.passed_threshold += 1
            summary.candidates.append(
                CandidateOutcome(
                    candidate_name=result.candidate_profile.name,
                    resume_id=document.id,
                    relevance_score=result.relevance.score,
                    recommendation=result.internal_verdict.recommendation,
                    passed_threshold=result.relevance.passed_threshold,
                    resume_link=document.file_link or None,
                )
            )
        return summary

    def run(self, campaigns: List[Campaign]) -> CampaignBatchSummary:
        summary = CampaignBatchSummary(run_id=self.correlation_id)
        logger.info(
            "poll_run_started",
            extra={"correlation_id": self.correlation_id, "campaign_count": len(campaigns)},
        )
        for campaign in campaigns:
            self.poll_campaign(campaign, summary)
        summary.finished_at = datetime.now(timezone.utc)
        logger.info(
            "poll_run_completed",
            extra={
                "correlation_id": self.correlation_id,
                "processed": summary.processed,
                "skipped_duplicates": summary.skipped_duplicates,
                "failed": summary.failed,
                "errors": summary.error_count,
            },
        )
        return summary

    def _batch_error(
        self,
        campaign: Campaign,
        document: Optional[ResumeDocument],
        exc: Exception,
    ) -> CampaignBatchError:
        code = exc.error_code if isinstance(exc, PipelineError) else "unexpected_error"
        detail = getattr(exc, "detail", None) or "".join(
            traceback.format_exception_only(type(exc), exc)
        ).strip()
        return CampaignBatchError(
            campaign_id=campaign.id,
            resume_id=document.id if document else None,
            resume_name=document.name if document else None,
            error_code=code,
            error_message=str(exc),
            technical_detail=detail,
        )
