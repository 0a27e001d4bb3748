"""Generic executor that turns a completion call into a typed, validated result.

Every agent is a *transform*: an object that knows how to build its prompt,
map decoded JSON onto a pydantic model, clamp that model into range and score
its own confidence. ``AgentRunner`` owns the shared lifecycle:

    Idle -> PromptBuilt -> Completed -> Parsed -> Validated -> Done
                   \\            \\          \\           \\
                    +------------+----------+-----------+--> Failed

Transient completion failures are retried inside ``CompletionClient``; the
runner itself never retries. Malformed output gets one repair pass, then the
transform's ``fallback`` (if it declares one), otherwise ``UnparseableResponse``.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Generic, Optional, Protocol, TypeVar

from pydantic import ValidationError

from hiring_models import AgentResult
from json_repair import parse_model_json
from pipeline_errors import PipelineError, UnparseableResponse

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT", contravariant=True)
OutputT = TypeVar("OutputT")

AGENT_TEMPERATURE = 0.3
AGENT_MAX_TOKENS = 4096


class AgentState(str, Enum):
    IDLE = "idle"
    PROMPT_BUILT = "prompt_built"
    COMPLETED = "completed"
    PARSED = "parsed"
    VALIDATED = "validated"
    DONE = "done"
    FAILED = "failed"


class Transform(Protocol[InputT, OutputT]):
    name: str
    system_prompt: str
    temperature: float
    max_tokens: int

    def build_prompt(self, payload: InputT) -> str: ...

    def parse(self, data: Dict[str, Any], payload: InputT) -> OutputT: ...

    def validate(self, output: OutputT, payload: InputT) -> OutputT: ...

    def confidence(self, output: OutputT) -> float: ...


class BaseTransform:
    """Defaults shared by the concrete agents."""

    name = "agent"
    system_prompt = ""
    temperature = AGENT_TEMPERATURE
    max_tokens = AGENT_MAX_TOKENS

    def validate(self, output, payload):
        return output


class AgentRunner(Generic[OutputT]):
    def __init__(self, transform: Transform, client, *, correlation_id: Optional[str] = None) -> None:
        self.transform = transform
        self.client = client
        self.correlation_id = correlation_id or "no-correlation-id"
        self.state = AgentState.IDLE

    @property
    def name(self) -> str:
        return self.transform.name

    def _advance(self, state: AgentState) -> None:
        self.state = state
        logger.debug(
            "agent_state_changed",
            extra={"correlation_id": self.correlation_id, "agent": self.name, "state": state.value},
        )

    def execute(self, payload) -> AgentResult:
        self.state = AgentState.IDLE
        try:
            return self._execute(payload)
        except PipelineError:
            self._advance(AgentState.FAILED)
            raise

    def _execute(self, payload) -> AgentResult:
        transform = self.transform
        prompt = transform.build_prompt(payload)
        self._advance(AgentState.PROMPT_BUILT)

        raw = self.client.complete(
            transform.system_prompt,
            prompt,
            temperature=transform.temperature,
            max_tokens=transform.max_tokens,
            json_mode=True,
        )
        self._advance(AgentState.COMPLETED)

        try:
            decoded = parse_model_json(raw)
            output = self._parse(decoded, payload, raw)
        except UnparseableResponse as exc:
            fallback = getattr(transform, "fallback", None)
            if fallback is None:
                logger.error(
                    "agent_response_unparseable",
                    extra={
                        "correlation_id": self.correlation_id,
                        "agent": self.name,
                        "error": str(exc),
                        "raw_preview": (raw or "")[:200],
                    },
                )
                raise
            logger.warning(
                "agent_fallback_used",
                extra={"correlation_id": self.correlation_id, "agent": self.name, "error": str(exc)},
            )
            output = fallback(raw, payload)
            self._advance(AgentState.VALIDATED)
            self._advance(AgentState.DONE)
            return AgentResult(
                data=output,
                explanation="Model response could not be parsed; fallback value used.",
                confidence=transform.confidence(output),
                used_fallback=True,
            )
        self._advance(AgentState.PARSED)

        output = transform.validate(output, payload)
        self._advance(AgentState.VALIDATED)

        confidence = min(1.0, max(0.0, transform.confidence(output)))
        explanation = (
            decoded.get("explanation")
            or decoded.get("reasoning")
            or getattr(output, "explanation", "")
            or ""
        )
        self._advance(AgentState.DONE)

        logger.info(
            "agent_completed",
            extra={
                "correlation_id": self.correlation_id,
                "agent": self.name,
                "confidence": round(confidence, 2),
            },
        )
        return AgentResult(data=output, explanation=str(explanation), confidence=confidence)

    def _parse(self, decoded: Dict[str, Any], payload, raw: str):
        try:
            return self.transform.parse(decoded, payload)
        except (ValidationError, ValueError, TypeError, AttributeError) as exc:
            raise UnparseableResponse(
                f"{self.name} response did not match the expected shape",
                raw=raw or "",
                detail=str(exc),
            ) from exc
