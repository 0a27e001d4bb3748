"""Best-effort repair of JSON objects returned by completion models.

Models routinely wrap JSON in markdown fences or stop mid-object when they hit
the token limit. ``repair_json`` handles exactly these cases:

* strips ```json fences and any prose around the outermost object;
* if the object is truncated, closes an unterminated string, drops a dangling
  comma or a key that never received a value, and appends the missing ``]``
  and ``}`` in reverse nesting order.

It does not fix invalid literals, single quotes, comments or trailing commas
inside complete containers. Anything it cannot fix surfaces as
``UnparseableResponse`` from ``parse_model_json``.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional

from pipeline_errors import UnparseableResponse

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*")
_CLOSERS = {"{": "}", "[": "]"}


def _strip_code_fences(raw: str) -> str:
    return _FENCE_RE.sub("", raw or "")


def _drop_dangling_tail(body: str, stack: List[str], last_string_start: Optional[int]) -> str:
    body = body.rstrip()

    if body.endswith(","):
        return body[:-1].rstrip()

    if body.endswith(":"):
        body = body[:-1].rstrip()
        if body.endswith('"') and last_string_start is not None:
            body = body[:last_string_start].rstrip()
        if body.endswith(","):
            body = body[:-1].rstrip()
        return body

    # A string directly after "{" or "," inside an object is a key with no value.
    if stack and stack[-1] == "}" and body.endswith('"') and last_string_start is not None:
        before = body[:last_string_start].rstrip()
        if before.endswith("{") or before.endswith(","):
            body = before[:-1].rstrip() if before.endswith(",") else before

    return body


def repair_json(raw: str) -> str:
    """Return a best-effort repaired JSON object string extracted from ``raw``."""
    text = _strip_code_fences(raw).strip()
    start = text.find("{")
    if start == -1:
        return text

    body = text[start:]
    stack: List[str] = []
    in_string = False
    escaped = False
    last_string_start: Optional[int] = None

    for index, char in enumerate(body):
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
            last_string_start = index
        elif char in _CLOSERS:
            stack.append(_CLOSERS[char])
        elif char in ("}", "]"):
            if stack and stack[-1] == char:
                stack.pop()
            if not stack:
                return body[: index + 1]

    if in_string:
        if escaped:
            body = body[:-1]
        body += '"'

    body = _drop_dangling_tail(body, stack, last_string_start)
    return body + "".join(reversed(stack))


def parse_model_json(raw: str) -> Dict[str, Any]:
    """Decode a model response into a dict, repairing it once if needed."""
    try:
        decoded = json.loads(raw)
    except (TypeError, json.JSONDecodeError):
        repaired = repair_json(raw or "")
        try:
            decoded = json.loads(repaired)
        except json.JSONDecodeError as exc:
            raise UnparseableResponse(
                "Model response is not valid JSON after repair",
                raw=raw or "",
                detail=str(exc),
            ) from exc

    if not isinstance(decoded, dict):
        raise UnparseableResponse(
            f"Expected a JSON object, got {type(decoded).__name__}",
            raw=raw or "",
        )
    return decoded
