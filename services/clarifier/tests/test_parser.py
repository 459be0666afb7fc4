from __future__ import annotations

import json

import pytest

from services.clarifier.app.errors import EmptyResponseError, MalformedResponseError
from services.clarifier.app.parser import parse_structured, strip_code_fences

DOCUMENT = {"detectedIntent": "trip planning", "items": [1, 2, {"nested": True}]}


@pytest.mark.parametrize(
    "raw",
    [
        json.dumps(DOCUMENT),
        f"```json\n{json.dumps(DOCUMENT)}\n```",
        f"```\n{json.dumps(DOCUMENT)}\n```",
        f"  \n```JSON\n{json.dumps(DOCUMENT, indent=2)}\n```\n  ",
        f"```json{json.dumps(DOCUMENT)}```",
        f"```json\n```json\n{json.dumps(DOCUMENT)}\n```\n```",
    ],
)
def test_parse_structured_is_fence_invariant(raw: str) -> None:
    assert parse_structured(raw) == DOCUMENT


@pytest.mark.parametrize("raw", ["", "   ", "\n\t\n", None])
def test_parse_structured_rejects_blank_input(raw) -> None:
    with pytest.raises(EmptyResponseError):
        parse_structured(raw)


@pytest.mark.parametrize(
    "raw",
    [
        "Here are your questions: {}",
        "```json\n{\"a\": 1,}\n```",
        "```\n```",
    ],
)
def test_parse_structured_rejects_non_json(raw: str) -> None:
    with pytest.raises(MalformedResponseError):
        parse_structured(raw)


def test_strip_code_fences_keeps_inner_backticks() -> None:
    raw = '```json\n{"code": "use ``` to fence"}\n```'
    assert strip_code_fences(raw) == '{"code": "use ``` to fence"}'


def test_parse_structured_accepts_non_object_json() -> None:
    assert parse_structured("```\n[1, 2, 3]\n```") == [1, 2, 3]


@pytest.mark.parametrize(
    "raw",
    [
        "1" * 5000,
        '{"count": ' + "9" * 5000 + "}",
        "[" * 200000,
    ],
)
def test_parse_structured_rejects_undecodable_json(raw: str) -> None:
    with pytest.raises(MalformedResponseError):
        parse_structured(raw)
