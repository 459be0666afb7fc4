from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

QUESTION_COUNT = 5
EXAMPLE_COUNT = 6


class Category(str, Enum):
    CONTEXT = "context"
    PURPOSE = "purpose"
    AUDIENCE = "audience"
    FORMAT = "format"
    CONSTRAINTS = "constraints"


class Complexity(str, Enum):
    SIMPLE = "simple"
    MEDIUM = "medium"
    COMPLEX = "complex"


class AppliedTechnique(str, Enum):
    CONTEXT_INTEGRATION = "context-integration"
    CONCRETE_REQUIREMENTS = "concrete-requirements"
    LOGICAL_STRUCTURING = "logical-structuring"
    ACTIONABLE_INSTRUCTIONS = "actionable-instructions"


class Phase(str, Enum):
    INPUT = "input"
    ANALYZING = "analyzing"
    QUESTIONING = "questioning"
    GENERATING = "generating"
    RESULT = "result"


class WireModel(BaseModel):
    """Base for models whose serialized form uses camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Question(WireModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = Field(min_length=1)
    question: str = Field(min_length=1)
    examples: list[str] = Field(min_length=EXAMPLE_COUNT, max_length=EXAMPLE_COUNT)
    category: Category


class PromptAnalysis(WireModel):
    ambiguous_areas: list[str] = Field(default_factory=list)
    suggested_questions: list[Question] = Field(min_length=QUESTION_COUNT, max_length=QUESTION_COUNT)
    detected_intent: str
    complexity: Complexity

    @field_validator("ambiguous_areas")
    @classmethod
    def dedupe_areas(cls, value: list[str]) -> list[str]:
        seen: list[str] = []
        for area in value:
            if area not in seen:
                seen.append(area)
        return seen

    @model_validator(mode="after")
    def validate_plan(self) -> "PromptAnalysis":
        ids = [question.id for question in self.suggested_questions]
        if len(set(ids)) != len(ids):
            raise ValueError("question ids must be unique within a plan")
        covered = {question.category for question in self.suggested_questions}
        missing = [category.value for category in Category if category not in covered]
        if missing:
            raise ValueError(f"categories not covered: {', '.join(missing)}")
        return self


class Answer(WireModel):
    question_id: str
    content: str = ""

    def is_answered(self) -> bool:
        return bool(self.content.strip())


class ImprovedPrompt(WireModel):
    id: str
    original_prompt: str
    improved_prompt: str
    improvements: list[str] = Field(default_factory=list)
    applied_techniques: list[AppliedTechnique] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ErrorInfo(BaseModel):
    code: str
    message: str


class SessionState(BaseModel):
    phase: Phase = Phase.INPUT
    prompt_text: str = ""
    analysis: PromptAnalysis | None = None
    answers: list[Answer] = Field(default_factory=list)
    result: ImprovedPrompt | None = None
    error: ErrorInfo | None = None
    pending: bool = False
