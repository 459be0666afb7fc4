from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from threading import Lock

from shared.schemas.domain import Answer, ImprovedPrompt, Phase, PromptAnalysis, SessionState

from services.clarifier.app.capability import bind_provider
from services.clarifier.app.config import ClarifierConfig
from services.clarifier.app.errors import (
    GenerationFailedError,
    InvalidTransitionError,
    RefinementError,
    SessionBusyError,
    ValidationError,
)
from services.clarifier.app.planner import QuestionPlanBuilder
from services.clarifier.app.store import (
    InMemoryStore,
    KeyValueStore,
    deserialize_result,
    result_key,
    serialize_result,
)
from services.clarifier.app.synthesis import SynthesisGenerator

logger = logging.getLogger(__name__)


class RefinementOrchestrator:
    """Drives one refinement session: input -> analyzing -> questioning -> generating -> result.

    Every event returns a snapshot of the session state. Refinement errors are
    recovered here and surfaced on ``SessionState.error``; they never escape.
    At most one capability call runs per session at a time.
    """

    def __init__(
        self,
        planner: QuestionPlanBuilder,
        synthesizer: SynthesisGenerator,
        store: KeyValueStore | None = None,
        store_key: str | None = None,
    ) -> None:
        self.planner = planner
        self.synthesizer = synthesizer
        self.store = store if store is not None else InMemoryStore()
        self.store_key = store_key or result_key()
        self._state = SessionState()
        self._lock = Lock()
        self._epoch = 0
        self._in_flight = False

    @classmethod
    def from_config(
        cls,
        config: ClarifierConfig | None = None,
        store: KeyValueStore | None = None,
        session_id: str | None = None,
    ) -> "RefinementOrchestrator":
        config = config or ClarifierConfig.from_env()
        planner = QuestionPlanBuilder(
            bind_provider(config.provider, max_tokens=config.plan_max_tokens, timeout_s=config.timeout_s)
        )
        synthesizer = SynthesisGenerator(
            bind_provider(config.provider, max_tokens=config.synthesis_max_tokens, timeout_s=config.timeout_s)
        )
        return cls(planner, synthesizer, store=store, store_key=result_key(session_id))

    def snapshot(self) -> SessionState:
        with self._lock:
            return self._state.model_copy(deep=True)

    @property
    def phase(self) -> Phase:
        with self._lock:
            return self._state.phase

    def submit_prompt(self, text: str) -> SessionState:
        try:
            with self._lock:
                self._require(Phase.INPUT, "submit a prompt")
                self._state.prompt_text = text
                if not text.strip():
                    raise ValidationError("prompt is empty")
                epoch = self._begin(Phase.ANALYZING)
        except RefinementError as exc:
            return self._surface(exc)

        try:
            analysis = self.planner.analyze(text.strip())
        except RefinementError as exc:
            return self._complete(epoch, error=exc, revert_to=Phase.INPUT)
        except Exception as exc:  # noqa: BLE001
            logger.exception("analysis raised unexpectedly")
            return self._complete(epoch, error=_unexpected(exc), revert_to=Phase.INPUT)
        return self._complete(epoch, apply=lambda: self._enter_questioning(analysis))

    def submit_answers(self, answers: Sequence[Answer]) -> SessionState:
        supplied = [
            Answer(question_id=answer.question_id, content=answer.content.strip())
            for answer in answers
            if answer.is_answered()
        ]
        try:
            with self._lock:
                self._require(Phase.QUESTIONING, "submit answers")
                if not supplied:
                    raise ValidationError("answer at least one question")
                self._state.answers = supplied
                analysis = self._state.analysis
                prompt = self._state.prompt_text.strip()
                epoch = self._begin(Phase.GENERATING)
        except RefinementError as exc:
            return self._surface(exc)

        try:
            result = self.synthesizer.synthesize(prompt, analysis.suggested_questions, supplied)
        except RefinementError as exc:
            return self._complete(epoch, error=exc, revert_to=Phase.QUESTIONING)
        except Exception as exc:  # noqa: BLE001
            logger.exception("synthesis raised unexpectedly")
            return self._complete(epoch, error=_unexpected(exc), revert_to=Phase.QUESTIONING)
        return self._complete(epoch, apply=lambda: self._enter_result(result))

    def go_back(self) -> SessionState:
        try:
            with self._lock:
                self._require(Phase.QUESTIONING, "go back")
                self._state.analysis = None
                self._state.answers = []
                self._state.error = None
                self._transition(Phase.INPUT)
                return self._state.model_copy(deep=True)
        except RefinementError as exc:
            return self._surface(exc)

    def start_over(self) -> SessionState:
        try:
            with self._lock:
                self._require(Phase.RESULT, "start over")
                try:
                    self.store.remove(self.store_key)
                except Exception as exc:  # noqa: BLE001
                    logger.warning("could not remove persisted result %s: %s", self.store_key, exc)
                self._state = SessionState()
                logger.info("session reset")
                return self._state.model_copy(deep=True)
        except RefinementError as exc:
            return self._surface(exc)

    def cancel(self) -> SessionState:
        """Drop interest in the in-flight call; its result is discarded on arrival."""
        try:
            with self._lock:
                if not self._in_flight or self._state.phase not in {Phase.ANALYZING, Phase.GENERATING}:
                    raise InvalidTransitionError("nothing to cancel")
                self._epoch += 1
                self._transition(Phase.INPUT if self._state.phase == Phase.ANALYZING else Phase.QUESTIONING)
                return self._state.model_copy(deep=True)
        except RefinementError as exc:
            return self._surface(exc)

    def load_result(self) -> ImprovedPrompt | None:
        try:
            payload = self.store.get(self.store_key)
            if payload is None:
                return None
            return deserialize_result(payload)
        except Exception as exc:  # noqa: BLE001
            logger.warning("could not load persisted result %s: %s", self.store_key, exc)
            return None

    def _require(self, phase: Phase, action: str) -> None:
        if self._in_flight:
            raise SessionBusyError("a generation call is already in progress")
        if self._state.phase != phase:
            raise InvalidTransitionError(f"cannot {action} while {self._state.phase.value}")

    def _begin(self, phase: Phase) -> int:
        self._in_flight = True
        self._state.pending = True
        self._state.error = None
        self._transition(phase)
        return self._epoch

    def _complete(
        self,
        epoch: int,
        apply: Callable[[], None] | None = None,
        error: RefinementError | None = None,
        revert_to: Phase | None = None,
    ) -> SessionState:
        with self._lock:
            self._in_flight = False
            self._state.pending = False
            if epoch != self._epoch:
                logger.info("discarding result of cancelled call")
            elif error is not None:
                logger.warning("%s failed (%s): %s", self._state.phase.value, error.code, error)
                self._state.error = error.to_info()
                self._transition(revert_to)
            elif apply is not None:
                self._state.error = None
                apply()
            return self._state.model_copy(deep=True)

    def _enter_questioning(self, analysis: PromptAnalysis) -> None:
        self._state.analysis = analysis
        self._state.answers = []
        self._transition(Phase.QUESTIONING)

    def _enter_result(self, result: ImprovedPrompt) -> None:
        self._state.result = result
        try:
            self.store.set(self.store_key, serialize_result(result))
        except Exception as exc:  # noqa: BLE001
            logger.warning("could not persist result %s: %s", result.id, exc)
        self._transition(Phase.RESULT)

    def _transition(self, phase: Phase) -> None:
        logger.info("phase %s -> %s", self._state.phase.value, phase.value)
        self._state.phase = phase

    def _surface(self, exc: RefinementError) -> SessionState:
        logger.warning("rejected (%s): %s", exc.code, exc)
        with self._lock:
            self._state.error = exc.to_info()
            return self._state.model_copy(deep=True)


def _unexpected(exc: Exception) -> GenerationFailedError:
    return GenerationFailedError(f"{type(exc).__name__}: {exc}")
