from fastapi import Depends, FastAPI, HTTPException

from shared.schemas.api import AnswersRequest, PromptRequest, SessionResponse, StarterCategory, StartersResponse
from shared.schemas.domain import ImprovedPrompt

from services.clarifier.app.config import ClarifierConfig, configure_logging
from services.clarifier.app.orchestrator import RefinementOrchestrator
from services.clarifier.app.prompts import STARTER_PROMPTS
from services.clarifier.app.providers import ProviderStatus, build_default_registry

from .state import SessionRegistry, session_registry

configure_logging()

app = FastAPI(title="Prompt Clarifier API Gateway", version="0.1.0")


def get_registry() -> SessionRegistry:
    return session_registry


def _session(session_id: str, registry: SessionRegistry) -> RefinementOrchestrator:
    orchestrator = registry.get(session_id)
    if orchestrator is None:
        raise HTTPException(status_code=404, detail="session not found")
    return orchestrator


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok", "service": "api_gateway"}


@app.get("/v1/providers", response_model=list[ProviderStatus])
def providers() -> list[ProviderStatus]:
    registry = build_default_registry()
    active = ClarifierConfig.from_env().provider
    return registry.resolve([active, *[name for name in registry.known() if name != active]])


@app.get("/v1/starters", response_model=StartersResponse)
def starters() -> StartersResponse:
    return StartersResponse(
        categories=[StarterCategory(label=label, prompts=prompts) for label, prompts in STARTER_PROMPTS.items()]
    )


@app.post("/v1/sessions", response_model=SessionResponse, status_code=201)
def create_session(registry: SessionRegistry = Depends(get_registry)) -> SessionResponse:
    session_id, orchestrator = registry.create()
    return SessionResponse(session_id=session_id, state=orchestrator.snapshot())


@app.get("/v1/sessions/{session_id}", response_model=SessionResponse)
def get_session(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> SessionResponse:
    orchestrator = _session(session_id, registry)
    return SessionResponse(session_id=session_id, state=orchestrator.snapshot())


@app.delete("/v1/sessions/{session_id}", status_code=204)
def delete_session(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> None:
    if not registry.close(session_id):
        raise HTTPException(status_code=404, detail="session not found")


@app.post("/v1/sessions/{session_id}/prompt", response_model=SessionResponse)
def submit_prompt(
    session_id: str, request: PromptRequest, registry: SessionRegistry = Depends(get_registry)
) -> SessionResponse:
    orchestrator = _session(session_id, registry)
    return SessionResponse(session_id=session_id, state=orchestrator.submit_prompt(request.text))


@app.post("/v1/sessions/{session_id}/answers", response_model=SessionResponse)
def submit_answers(
    session_id: str, request: AnswersRequest, registry: SessionRegistry = Depends(get_registry)
) -> SessionResponse:
    orchestrator = _session(session_id, registry)
    return SessionResponse(session_id=session_id, state=orchestrator.submit_answers(request.answers))


@app.post("/v1/sessions/{session_id}/back", response_model=SessionResponse)
def go_back(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> SessionResponse:
    orchestrator = _session(session_id, registry)
    return SessionResponse(session_id=session_id, state=orchestrator.go_back())


@app.post("/v1/sessions/{session_id}/start-over", response_model=SessionResponse)
def start_over(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> SessionResponse:
    orchestrator = _session(session_id, registry)
    return SessionResponse(session_id=session_id, state=orchestrator.start_over())


@app.post("/v1/sessions/{session_id}/cancel", response_model=SessionResponse)
def cancel(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> SessionResponse:
    orchestrator = _session(session_id, registry)
    return SessionResponse(session_id=session_id, state=orchestrator.cancel())


@app.get("/v1/sessions/{session_id}/result", response_model=ImprovedPrompt)
def get_result(session_id: str, registry: SessionRegistry = Depends(get_registry)) -> ImprovedPrompt:
    orchestrator = _session(session_id, registry)
    result = orchestrator.load_result()
    if result is None:
        raise HTTPException(status_code=404, detail="no result for session")
    return result
