from __future__ import annotations

from fastapi.testclient import TestClient

from services.api_gateway.app.main import app, get_registry
from services.api_gateway.app.state import SessionRegistry
from services.clarifier.app.orchestrator import RefinementOrchestrator
from services.clarifier.app.planner import QuestionPlanBuilder
from services.clarifier.app.store import InMemoryStore, result_key
from services.clarifier.app.synthesis import SynthesisGenerator
from services.clarifier.tests.fakes import ScriptedGenerator, fenced, ok, plan_payload


def _client(responses) -> tuple[TestClient, SessionRegistry, ScriptedGenerator]:
    generator = ScriptedGenerator(responses)

    def factory(session_id, store):
        return RefinementOrchestrator(
            QuestionPlanBuilder(generator),
            SynthesisGenerator(generator),
            store=store,
            store_key=result_key(session_id),
        )

    registry = SessionRegistry(factory, InMemoryStore())
    app.dependency_overrides[get_registry] = lambda: registry
    return TestClient(app), registry, generator


def teardown_function() -> None:
    app.dependency_overrides.clear()


def test_full_session_over_http() -> None:
    client, registry, generator = _client([ok(fenced(plan_payload())), ok("# Plan\n\n- go")])

    created = client.post("/v1/sessions")
    assert created.status_code == 201
    session_id = created.json()["session_id"]
    assert created.json()["state"]["phase"] == "input"

    analyzed = client.post(f"/v1/sessions/{session_id}/prompt", json={"text": "plan a trip"})
    state = analyzed.json()["state"]
    assert state["phase"] == "questioning"
    assert len(state["analysis"]["suggestedQuestions"]) == 5

    answered = client.post(
        f"/v1/sessions/{session_id}/answers",
        json={"answers": [{"questionId": "q1", "content": "family"}, {"questionId": "q2", "content": "rest"}]},
    )
    state = answered.json()["state"]
    assert state["phase"] == "result"
    assert "context-integration" in state["result"]["appliedTechniques"]

    result = client.get(f"/v1/sessions/{session_id}/result")
    assert result.status_code == 200
    assert result.json()["improvedPrompt"] == "# Plan\n\n- go"
    assert "2 additional answers provided" in result.json()["improvements"]

    reset = client.post(f"/v1/sessions/{session_id}/start-over")
    assert reset.json()["state"]["phase"] == "input"
    assert client.get(f"/v1/sessions/{session_id}/result").status_code == 404
    assert generator.calls == 2


def test_recovered_errors_are_reported_in_state() -> None:
    client, _, generator = _client([ok("")])
    session_id = client.post("/v1/sessions").json()["session_id"]

    blank = client.post(f"/v1/sessions/{session_id}/prompt", json={"text": "  "})
    assert blank.status_code == 200
    assert blank.json()["state"]["error"]["code"] == "validation_error"
    assert generator.calls == 0

    empty = client.post(f"/v1/sessions/{session_id}/prompt", json={"text": "plan a trip"})
    state = empty.json()["state"]
    assert state["phase"] == "input"
    assert state["error"]["code"] == "empty_response"
    assert state["prompt_text"] == "plan a trip"


def test_go_back_and_unknown_session() -> None:
    client, _, _ = _client([ok(fenced(plan_payload()))])
    session_id = client.post("/v1/sessions").json()["session_id"]
    client.post(f"/v1/sessions/{session_id}/prompt", json={"text": "plan a trip"})

    back = client.post(f"/v1/sessions/{session_id}/back")
    assert back.json()["state"]["phase"] == "input"
    assert back.json()["state"]["analysis"] is None

    assert client.get("/v1/sessions/ses_missing").status_code == 404
    assert client.post("/v1/sessions/ses_missing/prompt", json={"text": "x"}).status_code == 404
    assert client.delete(f"/v1/sessions/{session_id}").status_code == 204
    assert client.get(f"/v1/sessions/{session_id}").status_code == 404


def test_starters_and_health() -> None:
    client, _, _ = _client([])
    assert client.get("/health").json() == {"status": "ok", "service": "api_gateway"}
    categories = client.get("/v1/starters").json()["categories"]
    assert categories
    assert all(len(category["prompts"]) == 4 for category in categories)


def test_provider_status_lists_active_provider_first(monkeypatch) -> None:
    monkeypatch.setenv("CLARIFIER_PROVIDER", "anthropic")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "fake")
    client, _, _ = _client([])
    statuses = client.get("/v1/providers").json()
    assert statuses[0] == {"provider": "anthropic", "configured": True, "env_var": "ANTHROPIC_API_KEY"}


def test_registry_evicts_oldest_session_beyond_cap() -> None:
    store = InMemoryStore()

    def factory(session_id, store):
        generator = ScriptedGenerator([])
        return RefinementOrchestrator(
            QuestionPlanBuilder(generator),
            SynthesisGenerator(generator),
            store=store,
            store_key=result_key(session_id),
        )

    registry = SessionRegistry(factory, store, max_sessions=2)
    first, _ = registry.create()
    store.set(result_key(first), "{}")
    second, _ = registry.create()
    third, _ = registry.create()

    assert len(registry) == 2
    assert registry.get(first) is None
    assert store.get(result_key(first)) is None
    assert registry.get(second) is not None
    assert registry.get(third) is not None
