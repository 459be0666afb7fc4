from __future__ import annotations

import json
import re
from typing import Any

from services.clarifier.app.errors import EmptyResponseError, MalformedResponseError

# Opening fence may carry a language tag and may share its line with the payload.
_LEADING_FENCE_RE = re.compile(r"^\s*```[A-Za-z0-9_+.-]*[ \t]*(?:\r?\n)?")
_TRAILING_FENCE_RE = re.compile(r"(?:\r?\n)?[ \t]*```\s*$")


def strip_code_fences(raw: str) -> str:
    text = raw.strip()
    while True:
        stripped = _LEADING_FENCE_RE.sub("", text, count=1)
        stripped = _TRAILING_FENCE_RE.sub("", stripped, count=1).strip()
        if stripped == text:
            return text
        text = stripped


def parse_structured(raw: str | None) -> Any:
    """Decode the JSON payload of a generated response.

    Raises EmptyResponseError for blank input and MalformedResponseError when
    the fence-stripped text is not JSON.
    """
    if raw is None or not raw.strip():
        raise EmptyResponseError("generated response is empty")
    payload = strip_code_fences(raw)
    try:
        return json.loads(payload)
    except json.JSONDecodeError as exc:
        raise MalformedResponseError(f"generated response is not valid JSON: {exc.msg}") from exc
    except (ValueError, RecursionError) as exc:
        # oversized integer literals and pathological nesting
        raise MalformedResponseError(f"generated response could not be decoded: {exc}") from exc
