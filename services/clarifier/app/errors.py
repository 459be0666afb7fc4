from __future__ import annotations

from shared.schemas.domain import ErrorInfo


class RefinementError(RuntimeError):
    code = "refinement_error"

    def to_info(self) -> ErrorInfo:
        return ErrorInfo(code=self.code, message=str(self) or self.code)


class EmptyResponseError(RefinementError):
    code = "empty_response"


class MalformedResponseError(RefinementError):
    code = "malformed_response"


class GenerationFailedError(RefinementError):
    code = "generation_failed"


class ValidationError(RefinementError):
    code = "validation_error"


class SessionBusyError(RefinementError):
    code = "session_busy"


class InvalidTransitionError(RefinementError):
    code = "invalid_transition"
