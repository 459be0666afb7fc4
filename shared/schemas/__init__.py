from .api import AnswersRequest, PromptRequest, SessionResponse, StarterCategory, StartersResponse
from .domain import (
    Answer,
    AppliedTechnique,
    Category,
    Complexity,
    ErrorInfo,
    ImprovedPrompt,
    Phase,
    PromptAnalysis,
    Question,
    SessionState,
)

__all__ = [
    "AnswersRequest",
    "PromptRequest",
    "SessionResponse",
    "StarterCategory",
    "StartersResponse",
    "Answer",
    "AppliedTechnique",
    "Category",
    "Complexity",
    "ErrorInfo",
    "ImprovedPrompt",
    "Phase",
    "PromptAnalysis",
    "Question",
    "SessionState",
]
