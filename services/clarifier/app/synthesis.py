from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from uuid import uuid4

from shared.schemas.domain import Answer, AppliedTechnique, ImprovedPrompt, Question

from services.clarifier.app.aggregator import answered, build_context
from services.clarifier.app.capability import Generator, invoke
from services.clarifier.app.errors import EmptyResponseError
from services.clarifier.app.prompts import SYNTHESIS_DIRECTIVES

logger = logging.getLogger(__name__)

BASE_IMPROVEMENTS = (
    "Stated the original request explicitly",
    "Structured the clarifying questions and answers into the request",
    "Added directives for thorough, deliberate reasoning",
    "Generated a detailed response with the generative model",
)

BASE_TECHNIQUES = (
    AppliedTechnique.CONCRETE_REQUIREMENTS,
    AppliedTechnique.LOGICAL_STRUCTURING,
)


def make_result_id() -> str:
    return f"imp_{uuid4().hex}"


def build_synthesis_prompt(original_prompt: str, questions: Sequence[Question], answers: Sequence[Answer]) -> str:
    return build_context(original_prompt, questions, answers) + SYNTHESIS_DIRECTIVES


def describe_improvements(answered_count: int) -> tuple[list[str], list[AppliedTechnique]]:
    improvements = list(BASE_IMPROVEMENTS)
    techniques = list(BASE_TECHNIQUES)
    if answered_count > 0:
        noun = "answer" if answered_count == 1 else "answers"
        improvements.append(f"{answered_count} additional {noun} provided")
        techniques.append(AppliedTechnique.CONTEXT_INTEGRATION)
    return improvements, techniques


class SynthesisGenerator:
    def __init__(self, generate: Generator) -> None:
        self.generate = generate

    def synthesize(
        self, original_prompt: str, questions: Sequence[Question], answers: Sequence[Answer]
    ) -> ImprovedPrompt:
        answered_count = len(answered(answers))
        prompt = build_synthesis_prompt(original_prompt, questions, answers)
        logger.info("requesting synthesis answered=%d request_chars=%d", answered_count, len(prompt))
        text = invoke(self.generate, prompt, stage="synthesis")
        if not text.strip():
            raise EmptyResponseError("synthesis response is empty")

        improvements, techniques = describe_improvements(answered_count)
        return ImprovedPrompt(
            id=make_result_id(),
            original_prompt=original_prompt,
            improved_prompt=text.strip(),
            improvements=improvements,
            applied_techniques=techniques,
            timestamp=datetime.now(timezone.utc),
        )
