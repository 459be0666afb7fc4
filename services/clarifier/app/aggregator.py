from __future__ import annotations

from collections.abc import Sequence

from shared.schemas.domain import Answer, Question


def answered(answers: Sequence[Answer]) -> list[Answer]:
    return [answer for answer in answers if answer.is_answered()]


def build_context(original_prompt: str, questions: Sequence[Question], answers: Sequence[Answer]) -> str:
    """Merge the request with the answered questions, in answer order.

    Answers whose question id is not in ``questions`` are skipped.
    """
    by_id = {question.id: question for question in questions}
    context = f'User request: "{original_prompt}"\n\n'
    supplied = answered(answers)
    if not supplied:
        return context

    context += "Additional information provided by the user:\n\n"
    for answer in supplied:
        question = by_id.get(answer.question_id)
        if question is None:
            continue
        context += f"Q: {question.question}\nA: {answer.content.strip()}\n\n"
    return context
