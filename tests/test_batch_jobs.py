from unittest.mock import MagicMock

import pytest

import batch_jobs
from hiring_models import CampaignBatchSummary
from processed_store import ProcessedStore
from summary_store import SummaryStore


@pytest.fixture(autouse=True)
def reset_summary_store():
    SummaryStore.reset()
    yield
    SummaryStore.reset()


def _factory(summary):
    orchestrator = MagicMock()
    orchestrator.run.return_value = summary
    return MagicMock(return_value=orchestrator), orchestrator


def test_run_campaign_poll_updates_summary_and_notifies(campaign):
    fake_summary = CampaignBatchSummary(run_id="poll-1", processed=3)
    factory, orchestrator = _factory(fake_summary)
    notifier = MagicMock()

    result = batch_jobs.run_campaign_poll(
        notifier, campaigns=[campaign], orchestrator_factory=factory
    )

    assert result is fake_summary
    orchestrator.run.assert_called_once_with([campaign])
    saved = SummaryStore.get_summary()
    assert saved.processed == 3
    assert saved is not fake_summary
    notifier.notify_poll_summary.assert_called_once_with(fake_summary)


def test_run_campaign_poll_loads_configured_campaigns(monkeypatch, campaign):
    monkeypatch.setattr(batch_jobs, "load_campaigns", lambda: [campaign])
    factory, orchestrator = _factory(CampaignBatchSummary())

    batch_jobs.run_campaign_poll(orchestrator_factory=factory)

    orchestrator.run.assert_called_once_with([campaign])


def test_slack_failure_does_not_lose_summary(campaign):
    factory, _ = _factory(CampaignBatchSummary(run_id="poll-2"))
    notifier = MagicMock()
    notifier.notify_poll_summary.side_effect = RuntimeError("slack down")

    result = batch_jobs.run_campaign_poll(
        notifier, campaigns=[campaign], orchestrator_factory=factory
    )

    assert result.run_id == "poll-2"
    assert SummaryStore.get_summary().run_id == "poll-2"


def test_build_orchestrator_shares_jd_cache_and_store(monkeypatch, tmp_path):
    monkeypatch.setattr(batch_jobs, "_processed_store", None)
    monkeypatch.setattr(
        batch_jobs, "ProcessedStore", lambda: ProcessedStore(str(tmp_path / "processed.json"))
    )
    monkeypatch.setattr(batch_jobs, "CompletionClient", MagicMock())
    monkeypatch.setattr(batch_jobs, "SheetManager", MagicMock())
    monkeypatch.setattr(batch_jobs, "DriveManager", MagicMock())
    monkeypatch.setattr(batch_jobs, "is_email_configured", lambda: False)

    first = batch_jobs.build_orchestrator("poll-a")
    second = batch_jobs.build_orchestrator()

    assert first.jd_cache is second.jd_cache is batch_jobs._jd_cache
    assert first.idempotency is second.idempotency
    assert first.notifier is None
    assert first.correlation_id == "poll-a"
    assert second.correlation_id.startswith("poll-")
