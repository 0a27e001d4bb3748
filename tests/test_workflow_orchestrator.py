from unittest.mock import MagicMock

import pytest

from fakes import (
    JD_TEXT,
    FakeSink,
    FakeStore,
    calls_for,
    make_responder,
)
from hiring_agents.agent_prompts import (
    ASSIGNMENT_GENERATION_PROMPT,
    JD_REALITY_PROMPT,
    RESUME_STRUCTURING_PROMPT,
)
from hiring_models import CampaignBatchSummary, ResumeDocument, RoleContext
from hiring_synthesis.relevance_synthesizer import RelevanceSynthesizer
from pipeline_errors import DocumentUnreadable, ModelUnavailable, PersistenceError
from workflow_orchestrator import JDSpecCache, WorkflowOrchestrator, text_hash


def _orchestrator(client, store=None, sink=None, notifier=None, source=None):
    return WorkflowOrchestrator(
        completion_client=client,
        idempotency=store or FakeStore(),
        sink=sink or FakeSink(),
        source=source,
        notifier=notifier,
        relevance=RelevanceSynthesizer(threshold=60),
        correlation_id="test-run",
    )


def test_end_to_end_stable_long_term(completion_client, campaign, resume_document):
    store, sink, notifier = FakeStore(), FakeSink(), MagicMock()
    orchestrator = _orchestrator(completion_client, store, sink, notifier)

    jd_spec = orchestrator.ensure_jd_spec(campaign, JD_TEXT)
    result = orchestrator.process_resume(campaign, resume_document, jd_spec)

    assert jd_spec.role_context is RoleContext.STABLE_LONG_TERM
    assert jd_spec.criticality_factor == 0.85
    assert result.execution_fit.score == 63.0
    assert result.founder_confidence.score == 67.0
    assert result.relevance.score == 54.91
    assert result.relevance.passed_threshold is False
    assert result.internal_verdict.recommendation == "Maybe"
    assert result.assignment.title == "Nightly Sales Pipeline"
    assert result.external_verdict.next_steps[0].startswith("We encourage you")

    assert store.is_processed("hash-asha")
    assert store.entries["hash-asha"]["campaign_id"] == "data-eng"
    assert len(sink.rows) == 1
    notifier.notify_reviewer.assert_called_once_with(result.internal_verdict, campaign)
    notifier.notify_candidate.assert_called_once()
    assert notifier.notify_candidate.call_args.args[0] == "asha.rao@example.com"


def test_same_resume_twice_is_persisted_once(completion_client, campaign, resume_document):
    store, sink, notifier = FakeStore(), FakeSink(), MagicMock()
    orchestrator = _orchestrator(completion_client, store, sink, notifier)
    jd_spec = orchestrator.ensure_jd_spec(campaign, JD_TEXT)

    first = orchestrator.process_resume(campaign, resume_document, jd_spec)
    second = orchestrator.process_resume(campaign, resume_document, jd_spec)

    assert first is not None
    assert second is None
    assert len(sink.rows) == 1
    assert notifier.notify_reviewer.call_count == 1
    assert len(calls_for(completion_client, RESUME_STRUCTURING_PROMPT)) == 1


def test_jd_analysis_is_cached_per_text(completion_client, campaign):
    cache = JDSpecCache()
    orchestrator = WorkflowOrchestrator(
        completion_client=completion_client,
        idempotency=FakeStore(),
        sink=FakeSink(),
        jd_cache=cache,
    )

    first = orchestrator.ensure_jd_spec(campaign, JD_TEXT)
    second = orchestrator.ensure_jd_spec(campaign, JD_TEXT)

    assert first is second
    assert len(calls_for(completion_client, JD_REALITY_PROMPT)) == 1
    assert len(calls_for(completion_client, ASSIGNMENT_GENERATION_PROMPT)) == 1
    assert cache.lookup(campaign.id, text_hash(JD_TEXT)) is first

    orchestrator.ensure_jd_spec(campaign, JD_TEXT + " Remote friendly.")
    assert len(calls_for(completion_client, JD_REALITY_PROMPT)) == 2
    assert len(cache) == 1


def test_empty_jd_is_unreadable(completion_client, campaign):
    with pytest.raises(DocumentUnreadable):
        _orchestrator(completion_client).ensure_jd_spec(campaign, "   ")
    completion_client.complete.assert_not_called()


def test_assignment_failure_still_caches_jd(campaign):
    client = MagicMock()
    client.complete.side_effect = make_responder(
        {ASSIGNMENT_GENERATION_PROMPT: ModelUnavailable("provider down", attempts=8)}
    )
    orchestrator = _orchestrator(client)

    spec = orchestrator.ensure_jd_spec(campaign, JD_TEXT)

    assert spec.standard_assignment is None
    assert orchestrator.jd_cache.get(campaign.id) is spec


def test_notification_failure_is_not_fatal(completion_client, campaign, resume_document):
    store, notifier = FakeStore(), MagicMock()
    notifier.notify_reviewer.side_effect = RuntimeError("smtp down")
    orchestrator = _orchestrator(completion_client, store=store, notifier=notifier)
    jd_spec = orchestrator.ensure_jd_spec(campaign, JD_TEXT)

    result = orchestrator.process_resume(campaign, resume_document, jd_spec)

    assert result is not None
    assert store.is_processed("hash-asha")


def test_sink_failure_leaves_resume_unmarked(completion_client, campaign, resume_document):
    store, sink, notifier = FakeStore(), MagicMock(), MagicMock()
    sink.append_verdict.side_effect = RuntimeError("quota exceeded")
    orchestrator = _orchestrator(completion_client, store=store, sink=sink, notifier=notifier)
    jd_spec = orchestrator.ensure_jd_spec(campaign, JD_TEXT)

    with pytest.raises(PersistenceError):
        orchestrator.process_resume(campaign, resume_document, jd_spec)

    assert not store.is_processed("hash-asha")
    notifier.notify_reviewer.assert_not_called()


def test_mark_failure_raises_persistence_error(completion_client, campaign, resume_document):
    notifier = MagicMock()
    orchestrator = _orchestrator(
        completion_client, store=FakeStore(fail_on_mark=True), notifier=notifier
    )
    jd_spec = orchestrator.ensure_jd_spec(campaign, JD_TEXT)

    with pytest.raises(PersistenceError):
        orchestrator.process_resume(campaign, resume_document, jd_spec)
    notifier.notify_reviewer.assert_not_called()


def test_empty_resume_text_is_unreadable(completion_client, campaign, resume_document):
    orchestrator = _orchestrator(completion_client)
    jd_spec = orchestrator.ensure_jd_spec(campaign, JD_TEXT)
    blank = resume_document.model_copy(update={"text": "  \n"})

    with pytest.raises(DocumentUnreadable):
        orchestrator.process_resume(campaign, blank, jd_spec)


def _source(jd_text, documents):
    source = MagicMock()
    source.get_job_description_text.return_value = jd_text
    source.list_unprocessed_resumes.return_value = documents
    return source


def test_run_collects_outcomes_and_per_resume_errors(completion_client, campaign, resume_document):
    blank = ResumeDocument(id="file-2", name="scan.pdf", text="", content_hash="hash-scan")
    store, sink = FakeStore(), FakeSink()
    source = _source(JD_TEXT, [resume_document, blank])
    orchestrator = _orchestrator(completion_client, store=store, sink=sink, source=source)

    summary = orchestrator.run([campaign])

    assert summary.run_id == "test-run"
    assert summary.campaigns_polled == 1
    assert summary.total_seen == 2
    assert summary.processed == 1
    assert summary.failed == 1
    assert summary.passed_threshold == 0
    assert summary.finished_at is not None
    assert summary.errors[0].error_code == "document_unreadable"
    assert summary.errors[0].resume_name == "scan.pdf"
    assert summary.candidates[0].candidate_name == "Asha Rao"
    assert summary.candidates[0].recommendation == "Maybe"


def test_run_counts_duplicates(completion_client, campaign, resume_document):
    store = FakeStore()
    store.entries["hash-asha"] = {}
    orchestrator = _orchestrator(
        completion_client, store=store, source=_source(JD_TEXT, [resume_document])
    )

    summary = orchestrator.run([campaign])

    assert summary.skipped_duplicates == 1
    assert summary.processed == 0


def test_missing_jd_is_reported(completion_client, campaign):
    source = _source(None, [])
    summary = _orchestrator(completion_client, source=source).run([campaign])

    assert summary.errors[0].error_code == "jd_missing"
    source.list_unprocessed_resumes.assert_not_called()


def test_campaign_level_failure_does_not_stop_other_campaigns(completion_client, campaign, resume_document):
    other = campaign.model_copy(update={"id": "design", "name": "Design"})
    source = MagicMock()
    source.get_job_description_text.side_effect = [RuntimeError("drive 500"), JD_TEXT]
    source.list_unprocessed_resumes.return_value = [resume_document]

    summary = _orchestrator(completion_client, source=source).poll_campaign(
        campaign, CampaignBatchSummary()
    )
    summary = _orchestrator(completion_client, source=source).poll_campaign(other, summary)

    assert summary.campaigns_polled == 2
    assert summary.errors[0].error_code == "unexpected_error"
    assert summary.errors[0].campaign_id == "data-eng"
    assert summary.processed == 1
