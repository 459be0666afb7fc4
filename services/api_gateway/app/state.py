from __future__ import annotations

import logging
from collections import OrderedDict
from collections.abc import Callable
from threading import Lock
from uuid import uuid4

from services.clarifier.app.config import ClarifierConfig
from services.clarifier.app.orchestrator import RefinementOrchestrator
from services.clarifier.app.store import KeyValueStore, build_store

logger = logging.getLogger(__name__)

OrchestratorFactory = Callable[[str, KeyValueStore], RefinementOrchestrator]


def make_session_id() -> str:
    return f"ses_{uuid4().hex}"


def _default_factory(config: ClarifierConfig) -> OrchestratorFactory:
    def factory(session_id: str, store: KeyValueStore) -> RefinementOrchestrator:
        return RefinementOrchestrator.from_config(config, store=store, session_id=session_id)

    return factory


class SessionRegistry:
    """In-process map of session id to orchestrator; sessions share only the handoff store.

    At most ``max_sessions`` are kept. Creating one more evicts the session
    created earliest, along with its persisted result.
    """

    def __init__(self, factory: OrchestratorFactory, store: KeyValueStore, max_sessions: int = 1000) -> None:
        self.factory = factory
        self.store = store
        self.max_sessions = max(1, max_sessions)
        self._sessions: OrderedDict[str, RefinementOrchestrator] = OrderedDict()
        self._lock = Lock()

    def create(self) -> tuple[str, RefinementOrchestrator]:
        session_id = make_session_id()
        orchestrator = self.factory(session_id, self.store)
        evicted: list[tuple[str, RefinementOrchestrator]] = []
        with self._lock:
            self._sessions[session_id] = orchestrator
            while len(self._sessions) > self.max_sessions:
                evicted.append(self._sessions.popitem(last=False))
        logger.info("session %s created", session_id)
        for old_id, old in evicted:
            logger.info("session %s evicted", old_id)
            self._discard(old)
        return session_id, orchestrator

    def get(self, session_id: str) -> RefinementOrchestrator | None:
        with self._lock:
            return self._sessions.get(session_id)

    def close(self, session_id: str) -> bool:
        with self._lock:
            orchestrator = self._sessions.pop(session_id, None)
        if orchestrator is None:
            return False
        self._discard(orchestrator)
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _discard(self, orchestrator: RefinementOrchestrator) -> None:
        try:
            self.store.remove(orchestrator.store_key)
        except Exception as exc:  # noqa: BLE001
            logger.warning("could not remove persisted result %s: %s", orchestrator.store_key, exc)


def build_registry(config: ClarifierConfig | None = None) -> SessionRegistry:
    config = config or ClarifierConfig.from_env()
    return SessionRegistry(_default_factory(config), build_store(config.database_url), config.max_sessions)


session_registry = build_registry()
