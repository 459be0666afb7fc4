#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import TextIO

from shared.schemas.domain import Answer, Phase, Question, SessionState

from services.clarifier.app.config import ClarifierConfig, configure_logging
from services.clarifier.app.orchestrator import RefinementOrchestrator
from services.clarifier.app.prompts import STARTER_PROMPTS
from services.clarifier.app.store import build_store


def _print_starters() -> None:
    for label, prompts in STARTER_PROMPTS.items():
        print(f"\n[{label}]")
        for prompt in prompts:
            print(f"  - {prompt}")


def _read_answer(index: int, question: Question, stream: TextIO) -> Answer:
    print(f"\n{index}. ({question.category.value}) {question.question}")
    for number, example in enumerate(question.examples, start=1):
        print(f"   {number}) {example}")
    print("   answer, example number, or blank to skip:", end=" ", flush=True)
    raw = stream.readline().strip()
    if raw.isdigit() and 1 <= int(raw) <= len(question.examples):
        raw = question.examples[int(raw) - 1]
    return Answer(question_id=question.id, content=raw)


def _report_error(state: SessionState) -> None:
    if state.error is not None:
        print(f"\n! {state.error.code}: {state.error.message}", file=sys.stderr)


def main() -> None:
    parser = argparse.ArgumentParser(description="Clarify a vague request, then generate a detailed answer")
    parser.add_argument("prompt", nargs="?", default="")
    parser.add_argument("--provider", default="")
    parser.add_argument("--starters", action="store_true", help="list starter prompts and exit")
    parser.add_argument("--save-result", default="")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    if args.starters:
        _print_starters()
        return

    configure_logging(args.log_level)
    config = ClarifierConfig.from_env()
    if args.provider:
        config = replace(config, provider=args.provider.strip().lower())
    orchestrator = RefinementOrchestrator.from_config(config, store=build_store(config.database_url))

    prompt = args.prompt
    while orchestrator.phase == Phase.INPUT:
        if not prompt:
            print("What would you like help with?", end=" ", flush=True)
            prompt = sys.stdin.readline().strip()
            if not prompt:
                return
        state = orchestrator.submit_prompt(prompt)
        _report_error(state)
        prompt = ""

    while orchestrator.phase == Phase.QUESTIONING:
        state = orchestrator.snapshot()
        questions = state.analysis.suggested_questions
        print(f"\nDetected intent: {state.analysis.detected_intent} ({state.analysis.complexity.value})")
        answers = state.answers
        if answers and state.error is not None:
            print("Retry with your previous answers? [Y/n]", end=" ", flush=True)
            if sys.stdin.readline().strip().lower() in {"n", "no"}:
                answers = []
        if not answers:
            answers = [_read_answer(index, question, sys.stdin) for index, question in enumerate(questions, start=1)]
        state = orchestrator.submit_answers(answers)
        _report_error(state)
        if not any(answer.is_answered() for answer in answers):
            return

    result = orchestrator.load_result()
    if result is None:
        return
    print("\n" + result.improved_prompt)
    print("\nImprovements:")
    for item in result.improvements:
        print(f"  - {item}")
    print("Techniques: " + ", ".join(technique.value for technique in result.applied_techniques))

    if args.save_result:
        destination = Path(args.save_result)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2))
    orchestrator.start_over()


if __name__ == "__main__":
    main()
