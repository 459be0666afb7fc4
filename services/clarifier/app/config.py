from __future__ import annotations

import logging
import os
from dataclasses import dataclass


def _env_int(name: str, default: int | None, minimum: int = 1) -> int | None:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return max(int(raw), minimum)
    except ValueError:
        return default


def _env_float(name: str, default: float, minimum: float = 0.0) -> float:
    raw = os.getenv(name)
    if not raw:
        return max(default, minimum)
    try:
        return max(float(raw), minimum)
    except ValueError:
        return max(default, minimum)


@dataclass(frozen=True)
class ClarifierConfig:
    provider: str = "gemini"
    plan_max_tokens: int | None = 2048
    synthesis_max_tokens: int | None = None
    timeout_s: float = 60.0
    log_level: str = "INFO"
    database_url: str | None = None
    max_sessions: int = 1000

    @classmethod
    def from_env(cls) -> "ClarifierConfig":
        return cls(
            provider=(os.getenv("CLARIFIER_PROVIDER", "gemini") or "gemini").strip().lower(),
            plan_max_tokens=_env_int("CLARIFIER_PLAN_MAX_TOKENS", 2048),
            synthesis_max_tokens=_env_int("CLARIFIER_SYNTH_MAX_TOKENS", None),
            timeout_s=_env_float("CLARIFIER_PROVIDER_TIMEOUT_S", 60.0, minimum=1.0),
            log_level=(os.getenv("CLARIFIER_LOG_LEVEL", "INFO") or "INFO").strip().upper(),
            database_url=os.getenv("DATABASE_URL") or None,
            max_sessions=_env_int("CLARIFIER_MAX_SESSIONS", 1000),
        )


def configure_logging(level: str | None = None) -> None:
    resolved = (level or ClarifierConfig.from_env().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, resolved, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
