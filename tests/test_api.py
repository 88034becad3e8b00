import pytest
from fastapi.testclient import TestClient

import llm_analyzer
import main
from tests.fakes import SAMPLE_ARGUMENTS, FakeResponse, tool_call_completion


@pytest.fixture
def client():
    main.app.dependency_overrides[main.get_llm_client] = lambda: llm_analyzer.LLMClient(
        api_key="server-key", base_url="http://llm.test/v1", model="test-model", timeout=5
    )
    yield TestClient(main.app, raise_server_exceptions=False)
    main.app.dependency_overrides.clear()


def test_health_check():
    resp = TestClient(main.app).get("/")
    assert resp.status_code == 200
    assert resp.json()["status"]


def test_contract_analysis_returns_normalized_results(client, monkeypatch):
    monkeypatch.setattr(
        llm_analyzer.requests, "post", lambda *args, **kwargs: FakeResponse(tool_call_completion(SAMPLE_ARGUMENTS))
    )

    resp = client.post("/api/contract-analysis", json={"contract": "contract Voting {}"})
    assert resp.status_code == 200
    results = resp.json()["results"]

    assert set(results) == {"auditReport", "metricScores", "suggestions"}
    assert results["auditReport"] == SAMPLE_ARGUMENTS["auditReport"]
    assert [m["metric"] for m in results["metricScores"]] == [
        "Security", "Performance", "Gas Efficiency", "Code Quality", "Documentation", "Other Key Areas",
    ]
    assert results["metricScores"][2] == {
        "metric": "Gas Efficiency",
        "score": 0,
        "explanation": "No explanation provided",
    }
    assert results["suggestions"] == SAMPLE_ARGUMENTS["suggestionForImprovement"]


def test_missing_tool_call_returns_error(client, monkeypatch):
    completion = {"choices": [{"message": {"role": "assistant", "content": "no tools today"}}]}
    monkeypatch.setattr(llm_analyzer.requests, "post", lambda *args, **kwargs: FakeResponse(completion))

    resp = client.post("/api/contract-analysis", json={"contract": "contract A {}"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Expected function call in response but received none"}


def test_provider_failure_returns_error(client, monkeypatch):
    monkeypatch.setattr(
        llm_analyzer.requests,
        "post",
        lambda *args, **kwargs: FakeResponse({"error": {"message": "rate limited"}}, status_code=429),
    )

    resp = client.post("/api/contract-analysis", json={"contract": "contract A {}"})
    assert resp.status_code == 500
    assert "rate limited" in resp.json()["error"]


def test_missing_server_api_key_returns_error(monkeypatch):
    monkeypatch.setattr(main.settings, "LLM_PROVIDER", "groq")
    monkeypatch.setattr(main.settings, "GROQ_API_KEY", None)

    def fail_post(*args, **kwargs):
        raise AssertionError("no request should be sent without an API key")

    monkeypatch.setattr(llm_analyzer.requests, "post", fail_post)

    resp = TestClient(main.app, raise_server_exceptions=False).post(
        "/api/contract-analysis", json={"contract": "contract A {}"}
    )
    assert resp.status_code == 500
    assert resp.json() == {"error": "API key is not configured"}


def test_unexpected_error_returns_generic_message(client, monkeypatch):
    def broken_post(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(llm_analyzer.requests, "post", broken_post)

    resp = client.post("/api/contract-analysis", json={"contract": "contract A {}"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to analyze the contract"}
