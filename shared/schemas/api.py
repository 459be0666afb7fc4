from __future__ import annotations

from pydantic import BaseModel, Field

from .domain import Answer, SessionState


class PromptRequest(BaseModel):
    text: str


class AnswersRequest(BaseModel):
    answers: list[Answer] = Field(default_factory=list)


class SessionResponse(BaseModel):
    session_id: str
    state: SessionState


class StarterCategory(BaseModel):
    label: str
    prompts: list[str]


class StartersResponse(BaseModel):
    categories: list[StarterCategory]
