from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from completion_client import CompletionClient, is_retriable, resolve_model
from pipeline_errors import ModelError, ModelUnavailable


class RateLimited(Exception):
    status_code = 429


class BadRequest(Exception):
    status_code = 400


def _response(content, usage=None):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=usage,
    )


def _client(fake, sleeps, max_attempts=3):
    return CompletionClient(
        provider="openai",
        model="gpt-4o",
        max_attempts=max_attempts,
        retry_base_seconds=30,
        retry_step_seconds=15,
        retry_jitter_seconds=0,
        client=fake,
        sleep=sleeps.append,
        correlation_id="test",
    )


def test_returns_message_content():
    fake = MagicMock()
    fake.chat.completions.create.return_value = _response('{"ok": true}')
    client = _client(fake, [])

    assert client.complete("system", "user", json_mode=True) == '{"ok": true}'

    kwargs = fake.chat.completions.create.call_args.kwargs
    assert kwargs["messages"] == [
        {"role": "system", "content": "system"},
        {"role": "user", "content": "user"},
    ]
    assert kwargs["response_format"] == {"type": "json_object"}


def test_omits_response_format_without_json_mode():
    fake = MagicMock()
    fake.chat.completions.create.return_value = _response("hello")
    client = _client(fake, [])

    client.complete(None, "user")

    kwargs = fake.chat.completions.create.call_args.kwargs
    assert "response_format" not in kwargs
    assert kwargs["messages"] == [{"role": "user", "content": "user"}]


def test_retries_rate_limits_with_linear_backoff():
    fake = MagicMock()
    fake.chat.completions.create.side_effect = [RateLimited(), RateLimited(), _response("done")]
    sleeps = []
    client = _client(fake, sleeps)

    assert client.complete("s", "u") == "done"
    assert sleeps == [30, 45]
    assert fake.chat.completions.create.call_count == 3


def test_exhausted_retries_raise_model_unavailable():
    fake = MagicMock()
    fake.chat.completions.create.side_effect = RateLimited("slow down")
    sleeps = []
    client = _client(fake, sleeps, max_attempts=3)

    with pytest.raises(ModelUnavailable) as exc_info:
        client.complete("s", "u")

    assert exc_info.value.attempts == 3
    assert fake.chat.completions.create.call_count == 3
    # No sleep after the final attempt.
    assert sleeps == [30, 45]


def test_non_retriable_error_fails_immediately():
    fake = MagicMock()
    fake.chat.completions.create.side_effect = BadRequest("invalid model")
    sleeps = []
    client = _client(fake, sleeps)

    with pytest.raises(ModelError) as exc_info:
        client.complete("s", "u")

    assert not isinstance(exc_info.value, ModelUnavailable)
    assert fake.chat.completions.create.call_count == 1
    assert sleeps == []


def test_empty_choices_return_empty_text():
    fake = MagicMock()
    fake.chat.completions.create.return_value = SimpleNamespace(choices=[], usage=None)
    assert _client(fake, []).complete("s", "u") == ""


def test_backoff_includes_bounded_jitter():
    client = CompletionClient(
        provider="openai",
        retry_base_seconds=30,
        retry_step_seconds=15,
        retry_jitter_seconds=5,
        client=MagicMock(),
    )
    for attempt in range(4):
        wait = client.backoff_seconds(attempt)
        assert 30 + attempt * 15 <= wait <= 30 + attempt * 15 + 5


def test_is_retriable_by_status_code():
    assert is_retriable(RateLimited())
    assert not is_retriable(BadRequest())
    assert not is_retriable(ValueError("boom"))


def test_model_aliases_resolve_per_provider():
    assert resolve_model("claude", "claude-3-haiku") == "claude-3-haiku-20240307"
    assert resolve_model("openai", "custom-model") == "custom-model"


def test_unknown_provider_is_rejected():
    with pytest.raises(ValueError):
        CompletionClient(provider="bard", client=MagicMock())
