import os

# Must be set before brand_review.db.session builds its engine
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient

AGENT_ENV = (
    "FOUNDRY_ENDPOINT",
    "FOUNDRY_AGENT_ID",
    "AZURE_OPENAI_ENDPOINT",
    "AZURE_OPENAI_DEPLOYMENT",
    "AZURE_OPENAI_API_KEY",
    "USE_MOCK_API",
    "BRAND_DATA_DIR",
    "DEFAULT_BRAND_ID",
    "MAX_UPLOAD_BYTES",
)


@pytest.fixture(autouse=True)
def _clean_agent_env(monkeypatch):
    """Every test starts from an unconfigured agent."""
    for name in AGENT_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def azure_env(monkeypatch):
    monkeypatch.setenv("FOUNDRY_ENDPOINT", "https://foundry.example.com")
    monkeypatch.setenv("FOUNDRY_AGENT_ID", "asst_test")
    monkeypatch.setenv("AZURE_OPENAI_ENDPOINT", "https://example.openai.azure.com/")
    monkeypatch.setenv("AZURE_OPENAI_DEPLOYMENT", "gpt-4o")
    monkeypatch.setenv("AZURE_OPENAI_API_KEY", "test-key")


@pytest.fixture
def mock_agent(monkeypatch):
    monkeypatch.setenv("USE_MOCK_API", "true")


@pytest.fixture
def client():
    from brand_review.main import app

    with TestClient(app) as c:
        yield c


class FakeResponse:
    """Just enough of requests.Response for the Azure client."""

    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else ""

    def json(self):
        if self._body is None:
            raise ValueError("no JSON body")
        return self._body

    def raise_for_status(self):
        import requests

        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


def completion(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture
def fake_post(monkeypatch):
    """
    Replace requests.post inside the Azure client.
    Set `.response` (a FakeResponse or an exception) before calling;
    each call is appended to `.calls`.
    """
    from brand_review.inference import azure_openai_client

    class Recorder:
        response = FakeResponse(body=completion("{}"))
        calls = []

        def __call__(self, url, json=None, headers=None, timeout=None):
            self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
            if isinstance(self.response, Exception):
                raise self.response
            return self.response

    recorder = Recorder()
    recorder.calls = []
    monkeypatch.setattr(azure_openai_client.requests, "post", recorder)
    return recorder
