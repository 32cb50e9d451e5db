# ===============================================
# tests/test_endpoints.py
# HTTP surface with the assistant swapped for a scripted client
# ===============================================
import base64
import json

import pytest
from fastapi.testclient import TestClient

import recruitai.app as service
from recruitai.app import CHAT_FAILURE_TEXT, SESSIONS, ChatSessionStore, app, get_assistant
from recruitai.errors import ConfigurationError, GatewayError
from recruitai.gateway import GatewayResponse, GroundingMetadata, WebSource
from recruitai.generate import EchoDevClient, RecruitmentAssistant
from recruitai.settings import settings

from conftest import ScriptedClient

client = TestClient(app)


@pytest.fixture
def gateway():
    scripted = ScriptedClient()
    assistant = RecruitmentAssistant(scripted, video_poll_seconds=0.01, max_video_bytes=1024)
    app.dependency_overrides[get_assistant] = lambda: assistant
    yield scripted
    app.dependency_overrides.clear()
    SESSIONS.clear()


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def test_root_ok():
    r = client.get("/")
    assert r.status_code == 200
    assert "message" in r.json()


def test_health_ok():
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_materials(gateway):
    gateway.queue_generate(json.dumps({"jobDescription": "## JD", "interviewQuestions": ["Q1", "Q2"]}))
    r = client.post("/materials", json={"notes": "data engineer, spark"})
    assert r.status_code == 200
    assert r.json() == {"job_description": "## JD", "interview_questions": ["Q1", "Q2"]}


def test_materials_malformed_is_502(gateway):
    gateway.queue_generate(json.dumps({"jobDescription": "## JD"}))
    r = client.post("/materials", json={"notes": "data engineer"})
    assert r.status_code == 502


def test_materials_empty_notes_is_400(gateway):
    r = client.post("/materials", json={"notes": " "})
    assert r.status_code == 400
    assert gateway.calls == []


def test_chat_creates_session_and_splits_reasoning(gateway):
    gateway.queue_generate("COMPLEX").queue_chat("> **Thinking Process:** weigh options\n\nHire both.")

    r = client.post("/chat", json={"message": "Who should we hire?"})

    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    assert body["route_label"] == "Gemini 3 Pro (Thinking)"
    assert body["reasoning"] == "weigh options"
    assert body["answer"] == "Hire both."

    history = client.get(f"/chat/{body['session_id']}").json()["turns"]
    assert [t["role"] for t in history] == ["assistant", "user", "assistant"]
    assert history[0]["route_label"] == "Auto-Detect"


def test_chat_reuses_session_and_passes_location(gateway):
    gateway.queue_generate("SIMPLE").queue_chat("hi!")
    sid = client.post("/chat", json={"message": "hello"}).json()["session_id"]

    meta = GroundingMetadata(chunks=(WebSource(uri="https://maps/x", title="Cafe"),))
    gateway.queue_generate("MAPS").queue_chat(GatewayResponse(text="Cafe X", grounding=meta))
    r = client.post("/chat", json={
        "session_id": sid,
        "message": "coffee near me",
        "location": {"latitude": 23.81, "longitude": 90.41},
    })

    body = r.json()
    assert body["session_id"] == sid
    assert body["citations"] == [{"uri": "https://maps/x", "title": "Cafe", "kind": "web"}]
    request, history = gateway.calls_to("chat")[-1]
    assert request.lat_lng.latitude == 23.81
    assert [t.text for t in history][-2:] == ["hello", "hi!"]


def test_chat_gateway_failure_degrades_to_apology(gateway):
    gateway.queue_generate(GatewayError("timeout"))
    r = client.post("/chat", json={"message": "anything"})

    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is False
    assert body["text"] == CHAT_FAILURE_TEXT
    turns = client.get(f"/chat/{body['session_id']}").json()["turns"]
    assert [t["text"] for t in turns][-2:] == ["anything", CHAT_FAILURE_TEXT]


def test_chat_unknown_session_is_404(gateway):
    r = client.post("/chat", json={"session_id": "nope", "message": "hi"})
    assert r.status_code == 404


def test_chat_reset(gateway):
    gateway.queue_generate("SIMPLE").queue_chat("hi")
    sid = client.post("/chat", json={"message": "hello"}).json()["session_id"]
    assert client.delete(f"/chat/{sid}").status_code == 200
    assert client.get(f"/chat/{sid}").status_code == 404


def test_job_search(gateway):
    meta = GroundingMetadata(chunks=(WebSource(uri="https://j/1", title="Board"),), search_queries=("q",))
    gateway.queue_generate(GatewayResponse(text="- Acme", grounding=meta))

    r = client.post("/jobs/search", json={"role": "QA", "location": "Remote"})

    assert r.status_code == 200
    assert r.json() == {
        "text": "- Acme",
        "citations": [{"uri": "https://j/1", "title": "Board", "kind": "web"}],
        "search_queries": ["q"],
    }


def test_image_analyze_accepts_data_url(gateway):
    gateway.queue_generate("A whiteboard interview.")
    r = client.post("/media/image/analyze", json={
        "data": "data:image/png;base64," + _b64(b"\x89PNG"),
        "mime_type": "image/png",
    })
    assert r.status_code == 200
    assert r.json()["text"] == "A whiteboard interview."
    assert gateway.calls_to("generate")[0].media.data == b"\x89PNG"


def test_bad_base64_is_400(gateway):
    r = client.post("/media/image/analyze", json={"data": "***", "mime_type": "image/png"})
    assert r.status_code == 400


def test_oversized_video_is_400_without_gateway_call(gateway):
    big = _b64(b"\0" * 2048)
    r = client.post("/media/video/analyze", json={"data": big, "mime_type": "video/mp4"})
    assert r.status_code == 400
    assert gateway.calls == []


def test_video_generation_streams_bytes(gateway, make_op):
    gateway.video_states.extend([make_op(False), make_op(True, uri="https://files/v?alt=media")])
    r = client.post("/media/video", json={"prompt": "Day in the life", "aspect_ratio": "9:16"})
    assert r.status_code == 200
    assert r.headers["content-type"] == "video/mp4"
    assert r.content == b"MP4DATA"


def test_video_generation_missing_uri_is_502(gateway, make_op):
    gateway.video_states.append(make_op(True))
    r = client.post("/media/video", json={"prompt": "x"})
    assert r.status_code == 502


def test_empty_chat_message_is_400_and_stores_no_session(gateway):
    r = client.post("/chat", json={"message": "   "})
    assert r.status_code == 400
    assert len(SESSIONS) == 0
    assert gateway.calls == []


class _Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def small_store(monkeypatch):
    clock = _Clock()
    store = ChatSessionStore(max_sessions=3, ttl_seconds=60, clock=clock)
    monkeypatch.setattr(service, "SESSIONS", store)
    return store, clock


def test_session_map_is_capped_least_recently_used_first(gateway, small_store):
    store, clock = small_store
    ids = []
    for i in range(4):
        gateway.queue_generate("SIMPLE").queue_chat(f"hi {i}")
        ids.append(client.post("/chat", json={"message": "hi"}).json()["session_id"])
        if i == 2:
            # touching the first session moves it behind the second
            clock.now += 1
            assert client.get(f"/chat/{ids[0]}").status_code == 200

    assert len(store) == 3
    assert client.get(f"/chat/{ids[1]}").status_code == 404
    for sid in (ids[0], ids[2], ids[3]):
        assert client.get(f"/chat/{sid}").status_code == 200


def test_idle_sessions_expire(gateway, small_store):
    store, clock = small_store
    gateway.queue_generate("SIMPLE").queue_chat("hi")
    sid = client.post("/chat", json={"message": "hello"}).json()["session_id"]

    clock.now += 30
    assert client.get(f"/chat/{sid}").status_code == 200
    clock.now += 59
    assert client.get(f"/chat/{sid}").status_code == 200
    clock.now += 61

    assert client.get(f"/chat/{sid}").status_code == 404
    assert client.post("/chat", json={"session_id": sid, "message": "still there?"}).status_code == 404
    assert len(store) == 0


def test_echo_client_end_to_end(monkeypatch):
    monkeypatch.setattr(settings, "USE_ECHO", True)
    get_assistant.cache_clear()
    try:
        with TestClient(app) as c:
            r = c.post("/materials", json={"notes": "barista"})
            assert r.status_code == 200
            assert isinstance(get_assistant().model_client, EchoDevClient)
            assert c.post("/media/video", json={"prompt": "x"}).content == b"ECHO-VIDEO"
    finally:
        get_assistant.cache_clear()
        SESSIONS.clear()


def test_missing_api_key_fails_at_startup(monkeypatch):
    monkeypatch.setattr(settings, "USE_ECHO", False)
    monkeypatch.setattr(settings, "GEMINI_API_KEY", None)
    get_assistant.cache_clear()
    try:
        with pytest.raises(ConfigurationError):
            with TestClient(app):
                pass
    finally:
        get_assistant.cache_clear()
