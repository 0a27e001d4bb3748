from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

import main
from hiring_models import CampaignBatchSummary
from summary_store import SummaryStore


@pytest.fixture
def client():
    SummaryStore.reset()
    yield TestClient(main.app)
    SummaryStore.reset()


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
    assert client.get("/healthz").json() == {"status": "ok"}


def test_last_summary_before_any_poll(client):
    assert client.get("/last-summary").status_code == 404


def test_run_poll_returns_summary(client, monkeypatch):
    summary = CampaignBatchSummary(run_id="poll-9", processed=2)

    def fake_poll(notifier):
        SummaryStore.set_summary(summary)
        return summary

    monkeypatch.setattr(main, "run_campaign_poll", fake_poll)

    body = client.post("/run-poll").json()

    assert body["run_id"] == "poll-9"
    assert body["processed"] == 2
    assert client.get("/last-summary").json()["run_id"] == "poll-9"


def test_campaign_candidates(client, monkeypatch, campaign):
    monkeypatch.setattr(main, "load_campaigns", lambda: [campaign])
    manager = MagicMock()
    manager.get_all_candidates.return_value = [{"id": 1, "candidate_name": "Asha Rao"}]
    monkeypatch.setattr(main, "SheetManager", lambda: manager)

    assert client.get("/campaigns").json()[0]["id"] == "data-eng"
    assert client.get("/campaigns/data-eng/candidates").json()[0]["candidate_name"] == "Asha Rao"
    assert client.get("/campaigns/unknown/candidates").status_code == 404
    manager.get_all_candidates.assert_called_once_with(campaign)


def test_poll_job_is_registered_once(monkeypatch):
    scheduler = MagicMock()
    monkeypatch.setattr(main, "scheduler", scheduler)

    main._register_scheduler_jobs()

    kwargs = scheduler.add_job.call_args.kwargs
    assert kwargs["max_instances"] == 1
    assert kwargs["coalesce"] is True
    assert scheduler.add_job.call_args.args[0] is main.campaign_poll_job
