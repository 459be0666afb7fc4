from __future__ import annotations

import logging
from typing import Callable, Optional

from services.clarifier.app.errors import EmptyResponseError, GenerationFailedError
from services.clarifier.app.providers import GenerationResult, generate_text
from services.clarifier.app.providers.clients import EMPTY_CONTENT

logger = logging.getLogger(__name__)

Generator = Callable[[str], Optional[GenerationResult]]


def bind_provider(provider: str, max_tokens: int | None = None, timeout_s: float | None = None) -> Generator:
    def generate(prompt: str) -> GenerationResult:
        return generate_text(provider, prompt, max_tokens=max_tokens, timeout_s=timeout_s)

    return generate


def invoke(generate: Generator, prompt: str, *, stage: str) -> str:
    """Run one capability call and return its raw text.

    Provider failures become GenerationFailedError; a provider that reports
    empty content becomes EmptyResponseError. Blank text from a successful
    result is returned as-is for the caller to judge.
    """
    try:
        result = generate(prompt)
    except Exception as exc:  # noqa: BLE001
        logger.warning("%s call raised: %s", stage, exc)
        raise GenerationFailedError(f"{stage} call failed: {exc}") from exc
    if result is None:
        raise GenerationFailedError(f"{stage} call returned nothing")
    if not result.success:
        if result.error == EMPTY_CONTENT:
            raise EmptyResponseError(f"{stage} response is empty")
        logger.warning("%s call failed on %s: %s", stage, result.provider, result.error)
        raise GenerationFailedError(f"{stage} call failed: {result.error or 'unknown error'}")
    logger.info(
        "%s call ok provider=%s model=%s latency_s=%.2f tokens_in=%d tokens_out=%d",
        stage,
        result.provider,
        result.model,
        result.latency_s,
        result.tokens_input,
        result.tokens_output,
    )
    return result.text or ""
