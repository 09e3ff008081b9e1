from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient

from app.coach.envelope import UPSTREAM_ERROR_MESSAGE
from app.coach.service import EMPTY_REPLY_FALLBACK, STUB_REPLY
from app.core.llm.deps import get_openai_client
from app.main import create_app
from tests.coach._helpers import FailingLLMClient, RecordingLLMClient, all_message_text

CORS_HEADERS = {
    "access-control-allow-origin": "*",
    "access-control-allow-headers": "Content-Type",
    "access-control-allow-methods": "GET,POST,OPTIONS",
}


def _client_with(llm) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_openai_client] = lambda: llm
    return TestClient(app)


def _assert_cors(res) -> None:
    for name, value in CORS_HEADERS.items():
        assert res.headers[name] == value


def test_coach_health(client: TestClient) -> None:
    res = client.get("/coach")
    assert res.status_code == 200
    assert res.json() == {"ok": True, "message": "Coach API is alive"}
    _assert_cors(res)


def test_coach_preflight_returns_204_with_cors_headers(client: TestClient) -> None:
    res = client.options("/coach")
    assert res.status_code == 204
    assert res.content == b""
    _assert_cors(res)


def test_stub_scenario_without_credential(client: TestClient) -> None:
    res = client.post(
        "/coach",
        json={
            "prompt": "How should I approach week one?",
            "profile": {"day90_outcomes": "ship a working pilot"},
        },
    )
    assert res.status_code == 200, res.text
    assert res.json() == {"ok": True, "mode": "stub", "reply": STUB_REPLY}
    assert "X-Request-ID" in res.headers
    _assert_cors(res)


def test_empty_prompt_returns_400_and_skips_upstream() -> None:
    llm = RecordingLLMClient()
    with _client_with(llm) as client:
        res = client.post("/coach", json={"prompt": "", "profile": {}})

    assert res.status_code == 400
    assert res.json() == {"ok": False, "mode": "error", "error": "Missing or invalid 'prompt' field"}
    assert llm.calls == []
    _assert_cors(res)


def test_whitespace_prompt_returns_400(client: TestClient) -> None:
    res = client.post("/coach", json={"prompt": "   "})
    assert res.status_code == 400
    assert "prompt" in res.json()["error"]


def test_malformed_body_returns_400(client: TestClient) -> None:
    res = client.post(
        "/coach", content=b"{prompt: nope", headers={"Content-Type": "application/json"}
    )
    assert res.status_code == 400
    assert res.json() == {"ok": False, "mode": "error", "error": "Invalid JSON body"}


def test_non_object_body_returns_400(client: TestClient) -> None:
    res = client.post("/coach", json=["prompt", "hi"])
    assert res.status_code == 400
    assert res.json()["error"] == "Invalid JSON body"


def test_live_reply() -> None:
    llm = RecordingLLMClient(reply="  - Secure one early win.  ")
    with _client_with(llm) as client:
        res = client.post(
            "/coach",
            json={
                "prompt": "  How do I build alliances?  ",
                "profile": {
                    "name": "Ada",
                    "linkedin": "UNCONSENTED-LINKEDIN",
                    "job_description_text": "Lead platform.",
                    "consents": {"store_job_description": True},
                },
                "meta": {"exerciseId": "w2", "riskIndex": 2},
            },
        )

    assert res.status_code == 200, res.text
    assert res.json() == {"ok": True, "mode": "openai", "reply": "- Secure one early win."}

    assert len(llm.calls) == 1
    messages = llm.calls[0]["messages"]
    assert [m["role"] for m in messages] == ["system", "system", "system", "user"]
    assert messages[2]["content"] == 'Exercise context: {"exerciseId": "w2", "riskIndex": 2}'
    assert messages[3]["content"] == "How do I build alliances?"
    sent = all_message_text(messages)
    assert "Lead platform." in sent
    assert "UNCONSENTED-LINKEDIN" not in sent


def test_empty_meta_object_adds_no_metadata_message() -> None:
    llm = RecordingLLMClient()
    with _client_with(llm) as client:
        res = client.post("/coach", json={"prompt": "hi", "meta": {}})
    assert res.status_code == 200
    assert [m["role"] for m in llm.calls[0]["messages"]] == ["system", "system", "user"]


def test_blank_model_output_uses_fallback_reply() -> None:
    with _client_with(RecordingLLMClient(reply="   ")) as client:
        res = client.post("/coach", json={"prompt": "hi"})
    assert res.status_code == 200
    assert res.json()["reply"] == EMPTY_REPLY_FALLBACK


def test_upstream_failure_returns_generic_500(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="app.coach")
    llm = FailingLLMClient()
    with _client_with(llm) as client:
        res = client.post("/coach", json={"prompt": "hi"}, headers={"X-Request-ID": "req_up_1"})

    assert res.status_code == 500
    body = res.json()
    assert body == {"ok": False, "mode": "error", "error": UPSTREAM_ERROR_MESSAGE}
    assert "sk-secret" not in res.text
    assert llm.calls == 1
    _assert_cors(res)

    coach_records = [r for r in caplog.records if r.name == "app.coach"]
    assert any(r.levelno == logging.WARNING and r.exc_info for r in coach_records)
    assert all(r.__dict__.get("request_id") == "req_up_1" for r in coach_records)


def test_settings_without_key_give_stub_mode_and_no_client() -> None:
    assert get_openai_client() is None


def test_deeply_nested_body_returns_invalid_payload_envelope() -> None:
    depth = 100_000
    body = b'{"prompt": "hi", "meta": ' + b"[" * depth + b"]" * depth + b"}"
    llm = RecordingLLMClient()
    with _client_with(llm) as client:
        res = client.post("/coach", content=body, headers={"Content-Type": "application/json"})

    assert res.status_code == 400
    assert res.json() == {"ok": False, "mode": "error", "error": "Invalid JSON body"}
    assert llm.calls == []
    _assert_cors(res)


def test_unexpected_exception_still_returns_envelope_with_cors(
    caplog: pytest.LogCaptureFixture,
) -> None:
    caplog.set_level(logging.INFO, logger="app.http")

    def _broken_client():
        raise RuntimeError("settings exploded: sk-secret")

    app = create_app()
    app.dependency_overrides[get_openai_client] = _broken_client
    with TestClient(app, raise_server_exceptions=False) as client:
        res = client.post("/coach", json={"prompt": "hi"}, headers={"X-Request-ID": "req_boom_1"})

    assert res.status_code == 500
    assert res.json() == {"ok": False, "mode": "error", "error": UPSTREAM_ERROR_MESSAGE}
    assert "sk-secret" not in res.text
    _assert_cors(res)

    errors = [r for r in caplog.records if r.name == "app.http" and r.levelno == logging.ERROR]
    assert len(errors) == 1
    assert errors[0].exc_info
