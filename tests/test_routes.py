import pytest
from fastapi.testclient import TestClient

from whoami.main import app
from whoami.routers import dependencies
from whoami.routers.dependencies import (
    chat_service_provider,
    get_session_store,
    storyteller_service_provider,
)
from whoami.services.chat import ChatService
from whoami.services.conversation import SessionStore
from whoami.services.engine import AnswerEngine
from whoami.services.errors import ConfigurationError
from whoami.services.speech import SpeechResult
from whoami.services.storyteller import StorytellerService

CORPUS = "Name: Alice. Born in Lyon."


class StubLLM:
    def __init__(self, reply="Lyon") -> None:
        self.reply = reply
        self.calls = []

    def complete(self, messages):
        self.calls.append(list(messages))
        return self.reply


class StubSynthesizer:
    extension = "wav"

    def __init__(self) -> None:
        self.texts = []

    def synthesize(self, text):
        self.texts.append(text)
        return SpeechResult(ok=False, error="voice service down")


@pytest.fixture
def llm():
    return StubLLM()


@pytest.fixture
def synthesizer():
    return StubSynthesizer()


@pytest.fixture
def client(llm, synthesizer, tmp_path):
    store = SessionStore()
    engine = AnswerEngine(llm)
    chat_service = ChatService(store=store, engine=engine, context=CORPUS)
    story_service = StorytellerService(
        engine=engine,
        context=CORPUS,
        synthesizer=synthesizer,
        audio_dir=tmp_path,
    )
    app.dependency_overrides[get_session_store] = lambda: store
    app.dependency_overrides[chat_service_provider] = lambda: lambda: chat_service
    app.dependency_overrides[storyteller_service_provider] = lambda: lambda: story_service
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_chat_answers_from_corpus(client, llm):
    response = client.post("/chat", json={"message": "Where was Alice born?"})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["response"] == "Lyon"
    assert body["sessionId"]
    messages = llm.calls[0]
    assert CORPUS in messages[0]["content"]
    assert messages[-1] == {"role": "user", "content": "Where was Alice born?"}
    assert len(messages) == 2


def test_chat_continues_existing_session(client, llm):
    first = client.post("/chat", json={"message": "Where was Alice born?"}).json()
    client.post("/chat", json={"message": "When?", "sessionId": first["sessionId"]})

    second_call = llm.calls[1]
    assert [m["content"] for m in second_call[1:]] == ["Where was Alice born?", "Lyon", "When?"]

    history = client.get(f"/chat/{first['sessionId']}/history").json()
    assert [turn["role"] for turn in history["history"]] == ["human", "assistant"] * 2


@pytest.mark.parametrize("body", [{}, {"message": 42}, {"message": ""}])
def test_chat_rejects_invalid_message(client, llm, body):
    response = client.post("/chat", json=body)

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert llm.calls == []


def test_delete_session_twice(client):
    session_id = client.post("/chat", json={"message": "hi"}).json()["sessionId"]

    assert client.delete(f"/chat/{session_id}").json()["deleted"] is True
    assert client.delete(f"/chat/{session_id}").json()["deleted"] is False


def test_story_rejects_short_length(client, llm, synthesizer):
    response = client.post("/story", json={"length": 50})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["details"]
    assert llm.calls == []
    assert synthesizer.texts == []


def test_story_synthesis_failure_returns_narrative(client, llm):
    llm.reply = "Alice grew up in Lyon."

    response = client.post("/story", json={"length": 500})

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "voice service down"
    assert body["stage"] == "synthesis"
    assert body["narrative"] == "Alice grew up in Lyon."


def test_missing_credential_is_reported_as_configuration_error():
    def _unconfigured():
        raise ConfigurationError("OPENAI_API_KEY is not configured.")

    app.dependency_overrides[chat_service_provider] = lambda: _unconfigured
    try:
        response = TestClient(app).post("/chat", json={"message": "hi"})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "OPENAI_API_KEY is not configured."}


@pytest.fixture
def unconfigured(monkeypatch):
    factories = (
        dependencies.get_corpus_context,
        dependencies.get_answer_engine,
        dependencies.get_chat_service,
        dependencies.get_storyteller_service,
    )
    for factory in factories:
        factory.cache_clear()
    monkeypatch.setattr(dependencies.settings, "openai_api_key", None)
    monkeypatch.setattr(dependencies.settings, "tts_api_key", None)
    yield TestClient(app)
    for factory in factories:
        factory.cache_clear()


def test_invalid_bodies_are_rejected_before_services_are_built(unconfigured):
    story = unconfigured.post("/story", json={"length": 50})
    chat = unconfigured.post("/chat", json={})

    assert story.status_code == 400
    assert story.json()["error"] == "Invalid request body"
    assert chat.status_code == 400
    assert dependencies.get_answer_engine.cache_info().currsize == 0


def test_valid_chat_without_credential_is_a_configuration_error(unconfigured):
    response = unconfigured.post("/chat", json={"message": "hi"})

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert "OPENAI_API_KEY" in response.json()["error"]


def test_story_length_must_be_a_number(client, llm):
    response = client.post("/story", json={"length": "150"})

    assert response.status_code == 400
    assert llm.calls == []


def test_story_audio_write_failure_returns_json_error(llm, tmp_path):
    class _WorkingSynthesizer:
        extension = "wav"

        def synthesize(self, text):
            return SpeechResult(ok=True, audio=b"RIFF")

    blocker = tmp_path / "not-a-directory"
    blocker.write_text("x", encoding="utf-8")
    llm.reply = "Alice grew up in Lyon."
    service = StorytellerService(
        engine=AnswerEngine(llm),
        context=CORPUS,
        synthesizer=_WorkingSynthesizer(),
        audio_dir=blocker,
    )
    app.dependency_overrides[storyteller_service_provider] = lambda: lambda: service
    try:
        response = TestClient(app).post("/story", json={"length": 200})
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["stage"] == "write"
    assert body["narrative"] == "Alice grew up in Lyon."


def test_healthcheck():
    assert TestClient(app).get("/health").json() == {"status": "ok"}
