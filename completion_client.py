# completion_client.py

import logging
import random
import time
import uuid
from typing import Callable, Dict, List, Optional

import openai
from openai import OpenAI

import app_config
from pipeline_errors import ModelError, ModelUnavailable

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 4096

PROVIDER_BASE_URLS: Dict[str, Optional[str]] = {
    "openai": None,
    "gemini": "https://generativelanguage.googleapis.com/v1beta/openai/",
    "claude": "https://api.anthropic.com/v1/",
    "ollama": None,  # resolved from OLLAMA_BASE_URL
}

MODEL_ALIASES: Dict[str, Dict[str, str]] = {
    "openai": {
        "gpt-4o": "gpt-4o",
        "gpt-4": "gpt-4-turbo",
        "gpt-3.5": "gpt-3.5-turbo",
    },
    "gemini": {
        "gemini-pro": "gemini-pro",
        "gemini-1.5-pro": "gemini-1.5-pro",
        "gemini-1.5-flash": "gemini-1.5-flash",
    },
    "claude": {
        "claude-3-opus": "claude-3-opus-20240229",
        "claude-3-sonnet": "claude-3-sonnet-20240229",
        "claude-3-haiku": "claude-3-haiku-20240307",
    },
    "ollama": {
        "llama3": "llama3.2",
        "mistral": "mistral",
        "codellama": "codellama",
    },
}

RETRIABLE_STATUS_CODES = {408, 429}


def resolve_model(provider: str, model: str) -> str:
    return MODEL_ALIASES.get(provider, {}).get(model, model)


def is_retriable(exc: Exception) -> bool:
    """Rate limits and timeouts are transient; everything else is final."""
    if isinstance(exc, (openai.RateLimitError, openai.APITimeoutError)):
        return True
    status = getattr(exc, "status_code", None)
    return status in RETRIABLE_STATUS_CODES


class CompletionClient:
    """Provider-agnostic chat completion client over the OpenAI SDK.

    Gemini, Claude and Ollama are reached through their OpenAI-compatible
    endpoints, so one SDK covers all four providers. Retries are owned here:
    the SDK's own retry loop is disabled so attempt counts stay predictable.
    """

    def __init__(
        self,
        *,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        max_attempts: Optional[int] = None,
        retry_base_seconds: Optional[float] = None,
        retry_step_seconds: Optional[float] = None,
        retry_jitter_seconds: Optional[float] = None,
        client: Optional[OpenAI] = None,
        sleep: Callable[[float], None] = time.sleep,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.provider = (provider or app_config.LLM_PROVIDER).lower()
        if self.provider not in PROVIDER_BASE_URLS:
            raise ValueError(f"Unsupported completion provider: {self.provider}")

        self.model = resolve_model(self.provider, model or app_config.LLM_MODEL)
        self.max_attempts = max_attempts or app_config.LLM_MAX_ATTEMPTS
        self.retry_base_seconds = (
            app_config.LLM_RETRY_BASE_SECONDS if retry_base_seconds is None else retry_base_seconds
        )
        self.retry_step_seconds = (
            app_config.LLM_RETRY_STEP_SECONDS if retry_step_seconds is None else retry_step_seconds
        )
        self.retry_jitter_seconds = (
            app_config.LLM_RETRY_JITTER_SECONDS if retry_jitter_seconds is None else retry_jitter_seconds
        )
        self.correlation_id = correlation_id or str(uuid.uuid4())
        self._sleep = sleep

        if client is not None:
            self.client = client
        else:
            if self.provider == "ollama":
                key = "ollama"
                url = base_url or app_config.OLLAMA_BASE_URL
            else:
                key = api_key or app_config.LLM_API_KEY or ""
                url = base_url or PROVIDER_BASE_URLS[self.provider]
            self.client = OpenAI(
                api_key=key,
                base_url=url,
                timeout=timeout or app_config.LLM_TIMEOUT_SECONDS,
                max_retries=0,
            )

    def provider_info(self) -> Dict[str, str]:
        return {"provider": self.provider, "model": self.model}

    def backoff_seconds(self, attempt: int) -> float:
        """Linear backoff with jitter for the zero-based ``attempt`` that just failed."""
        return (
            self.retry_base_seconds
            + attempt * self.retry_step_seconds
            + random.uniform(0, self.retry_jitter_seconds)
        )

    def chat(
        self,
        messages: List[Dict[str, str]],
        *,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        json_mode: bool = False,
    ) -> str:
        request = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if json_mode:
            request["response_format"] = {"type": "json_object"}

        last_error: Optional[Exception] = None
        for attempt in range(self.max_attempts):
            try:
                response = self.client.chat.completions.create(**request)
            except Exception as exc:
                if not is_retriable(exc):
                    logger.error(
                        "completion_request_failed",
                        exc_info=True,
                        extra={
                            "correlation_id": self.correlation_id,
                            "provider": self.provider,
                            "model": self.model,
                            "error": str(exc),
                        },
                    )
                    raise ModelError(
                        f"Completion request rejected by {self.provider}/{self.model}",
                        detail=str(exc),
                    ) from exc

                last_error = exc
                if attempt + 1 >= self.max_attempts:
                    break
                wait = self.backoff_seconds(attempt)
                logger.warning(
                    "completion_retry_scheduled",
                    extra={
                        "correlation_id": self.correlation_id,
                        "provider": self.provider,
                        "attempt": attempt + 1,
                        "max_attempts": self.max_attempts,
                        "wait_seconds": round(wait, 1),
                        "error": str(exc),
                    },
                )
                self._sleep(wait)
                continue

            usage = getattr(response, "usage", None)
            if usage is not None:
                logger.info(
                    "completion_usage",
                    extra={
                        "correlation_id": self.correlation_id,
                        "provider": self.provider,
                        "model": self.model,
                        "prompt_tokens": getattr(usage, "prompt_tokens", None),
                        "completion_tokens": getattr(usage, "completion_tokens", None),
                        "total_tokens": getattr(usage, "total_tokens", None),
                    },
                )

            if not response.choices:
                return ""
            return response.choices[0].message.content or ""

        logger.error(
            "completion_retries_exhausted",
            extra={
                "correlation_id": self.correlation_id,
                "provider": self.provider,
                "model": self.model,
                "attempts": self.max_attempts,
                "error": str(last_error),
            },
        )
        raise ModelUnavailable(
            f"{self.provider}/{self.model} unavailable after {self.max_attempts} attempts",
            attempts=self.max_attempts,
            detail=str(last_error),
        ) from last_error

    def complete(
        self,
        system_prompt: Optional[str],
        user_prompt: str,
        *,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        json_mode: bool = False,
    ) -> str:
        messages: List[Dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})
        return self.chat(
            messages,
            temperature=temperature,
            max_tokens=max_tokens,
            json_mode=json_mode,
        )
