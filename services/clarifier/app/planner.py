from __future__ import annotations

import logging

from pydantic import ValidationError as SchemaValidationError

from shared.schemas.domain import PromptAnalysis

from services.clarifier.app.capability import Generator, invoke
from services.clarifier.app.errors import MalformedResponseError
from services.clarifier.app.parser import parse_structured
from services.clarifier.app.prompts import PROMPT_VERSION, build_plan_prompt

logger = logging.getLogger(__name__)


def _describe(exc: SchemaValidationError) -> str:
    first = exc.errors()[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "plan"
    return f"{location}: {first.get('msg', 'invalid value')}"


def validate_plan(payload: object) -> PromptAnalysis:
    """Check a decoded payload against the clarification plan invariants."""
    try:
        return PromptAnalysis.model_validate(payload)
    except SchemaValidationError as exc:
        raise MalformedResponseError(f"clarification plan rejected ({_describe(exc)})") from exc


class QuestionPlanBuilder:
    def __init__(self, generate: Generator) -> None:
        self.generate = generate

    def analyze(self, user_prompt: str) -> PromptAnalysis:
        prompt = build_plan_prompt(user_prompt)
        logger.info("requesting clarification plan version=%s prompt_chars=%d", PROMPT_VERSION, len(user_prompt))
        raw = invoke(self.generate, prompt, stage="analysis")
        try:
            analysis = validate_plan(parse_structured(raw))
        except MalformedResponseError as exc:
            logger.warning("clarification plan rejected: %s", exc)
            raise
        logger.info(
            "clarification plan accepted complexity=%s intent_chars=%d",
            analysis.complexity.value,
            len(analysis.detected_intent),
        )
        return analysis
