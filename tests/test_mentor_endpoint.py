import json

import httpx
import pytest
from fastapi.testclient import TestClient

from mentor_proxy.config import Settings
from mentor_proxy.dependencies import get_gemini_service
from mentor_proxy.main import create_app
from mentor_proxy.models import FALLBACK_CONTENT
from mentor_proxy.services.gemini_service import GeminiService

from conftest import gemini_reply

CORS_ORIGIN = "access-control-allow-origin"
CORS_HEADERS = "access-control-allow-headers"


class RecordingProvider:
    """MockTransport handler that records every outbound provider call."""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response


def get_test_client(app, provider: RecordingProvider, settings: Settings) -> TestClient:
    client = httpx.AsyncClient(transport=httpx.MockTransport(provider))
    service = GeminiService(client, settings)
    app.dependency_overrides[get_gemini_service] = lambda: service
    return TestClient(app)


def assert_cors(response) -> None:
    assert response.headers[CORS_ORIGIN] == "*"
    assert response.headers[CORS_HEADERS] == "authorization, x-client-info, apikey, content-type"


def test_invocation_happy_path(app, settings: Settings) -> None:
    provider = RecordingProvider(httpx.Response(200, json=gemini_reply("Build a to-do list app.")))
    client = get_test_client(app, provider, settings)

    response = client.post(
        "/ai-mentor", json={"prompt": "Suggest a beginner web development task"}
    )

    assert response.status_code == 200
    assert response.json() == {"content": "Build a to-do list app.", "context": None}
    assert_cors(response)
    assert len(provider.requests) == 1
    sent = json.loads(provider.requests[0].content)
    assert sent["contents"][0]["parts"][0]["text"] == "Suggest a beginner web development task"


def test_invocation_echoes_context(app, settings: Settings) -> None:
    provider = RecordingProvider(httpx.Response(200, json=gemini_reply("Keep going!")))
    client = get_test_client(app, provider, settings)
    context = {"type": "chat", "history": [{"id": "1", "content": "hi"}], "timestamp": "now"}

    response = client.post("/ai-mentor", json={"prompt": "hello", "context": context})

    assert response.status_code == 200
    assert response.json() == {"content": "Keep going!", "context": context}


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"prompt": ""},
        {"prompt": "   "},
        {"prompt": None, "context": {"type": "chat"}},
    ],
)
def test_invocation_requires_prompt(app, settings: Settings, body) -> None:
    provider = RecordingProvider(httpx.Response(200, json=gemini_reply("unused")))
    client = get_test_client(app, provider, settings)

    response = client.post("/ai-mentor", json=body)

    assert response.status_code == 500
    assert response.json() == {"error": "Prompt is required", "content": FALLBACK_CONTENT}
    assert_cors(response)
    assert provider.requests == []


@pytest.mark.parametrize("content", [b"not-json", b"", b"[1, 2]", b'{"prompt": 42}'])
def test_invocation_rejects_invalid_body(app, settings: Settings, content: bytes) -> None:
    provider = RecordingProvider(httpx.Response(200, json=gemini_reply("unused")))
    client = get_test_client(app, provider, settings)

    response = client.post(
        "/ai-mentor", content=content, headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 500
    assert response.json()["content"] == FALLBACK_CONTENT
    assert provider.requests == []


def test_invocation_forwards_long_prompt(app, settings: Settings) -> None:
    provider = RecordingProvider(httpx.Response(200, json=gemini_reply("Done.")))
    client = get_test_client(app, provider, settings)
    prompt = "a" * 20001

    response = client.post("/ai-mentor", json={"prompt": prompt})

    assert response.status_code == 200
    assert response.json() == {"content": "Done.", "context": None}
    sent = json.loads(provider.requests[0].content)
    assert sent["contents"][0]["parts"][0]["text"] == prompt


@pytest.mark.parametrize(
    "content",
    [
        b'{"prompt": "hi", "context": NaN}',
        b'{"prompt": "hi", "context": {"score": Infinity}}',
        b'{"prompt": "hi", "context": [1, -Infinity]}',
    ],
)
def test_invocation_rejects_non_finite_context(app, settings: Settings, content: bytes) -> None:
    provider = RecordingProvider(httpx.Response(200, json=gemini_reply("unused")))
    client = get_test_client(app, provider, settings)

    response = client.post(
        "/ai-mentor", content=content, headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 500
    assert response.json()["content"] == FALLBACK_CONTENT
    assert_cors(response)
    assert provider.requests == []


def test_invocation_rejects_nan_context_before_provider_call(app, settings: Settings) -> None:
    provider = RecordingProvider(httpx.Response(200, json=gemini_reply("unused")))
    client = get_test_client(app, provider, settings)

    response = client.post(
        "/ai-mentor",
        content=b'{"prompt": "hi", "context": NaN}',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 500
    assert response.json() == {
        "error": "Context must not contain NaN or Infinity",
        "content": FALLBACK_CONTENT,
    }
    assert provider.requests == []


class ExplodingService:
    async def generate(self, prompt: str) -> str:
        raise RuntimeError("unexpected failure")


def test_unexpected_error_returns_fallback_envelope(app) -> None:
    app.dependency_overrides[get_gemini_service] = lambda: ExplodingService()
    client = TestClient(app, raise_server_exceptions=False)

    response = client.post("/ai-mentor", json={"prompt": "hello"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error", "content": FALLBACK_CONTENT}
    assert_cors(response)


def test_invocation_provider_error_status(app, settings: Settings) -> None:
    provider = RecordingProvider(httpx.Response(429, json={"error": {"status": "RESOURCE_EXHAUSTED"}}))
    client = get_test_client(app, provider, settings)

    response = client.post("/ai-mentor", json={"prompt": "hello"})

    assert response.status_code == 500
    assert response.json() == {"error": "Gemini API error: 429", "content": FALLBACK_CONTENT}
    assert_cors(response)


def test_invocation_malformed_provider_response(app, settings: Settings) -> None:
    provider = RecordingProvider(httpx.Response(200, json={"candidates": [{"content": {}}]}))
    client = get_test_client(app, provider, settings)

    response = client.post("/ai-mentor", json={"prompt": "hello"})

    assert response.status_code == 500
    assert response.json() == {
        "error": "Invalid response from Gemini API",
        "content": FALLBACK_CONTENT,
    }


def test_preflight_returns_empty_body(app, settings: Settings) -> None:
    provider = RecordingProvider(httpx.Response(200, json=gemini_reply("unused")))
    client = get_test_client(app, provider, settings)

    response = client.options("/ai-mentor")

    assert response.status_code == 200
    assert response.content == b""
    assert_cors(response)
    assert provider.requests == []


def test_missing_credential_fails_invocations_but_serves_preflight() -> None:
    app = create_app(Settings(GOOGLE_AI_API_KEY=None))

    with TestClient(app) as client:
        preflight = client.options("/ai-mentor")
        response = client.post("/ai-mentor", json={"prompt": "hello"})

    assert preflight.status_code == 200
    assert preflight.content == b""
    assert_cors(preflight)

    assert response.status_code == 500
    assert response.json() == {
        "error": "Google AI API key not configured",
        "content": FALLBACK_CONTENT,
    }
    assert_cors(response)


def test_configured_app_builds_provider_on_startup(app) -> None:
    with TestClient(app) as client:
        assert isinstance(app.state.gemini_service, GeminiService)
        assert app.state.configuration_error is None
        response = client.get("/healthz")

    assert response.json() == {"status": "ok"}


def test_version_reports_environment(app) -> None:
    client = TestClient(app)

    response = client.get("/version")

    assert response.status_code == 200
    assert response.json()["environment"] == "test"
