import pytest
from fastapi.testclient import TestClient
from requests import HTTPError

from slopchat.config import Settings, get_settings
from slopchat.main import app

NO_CHANNELS = {
    "slack_webhook_url": None,
    "workflow_webhook_url": None,
    "lead_webhook_url": None,
    "resend_api_key": None,
    "smtp_host": None,
}


def make_settings(**overrides) -> Settings:
    base = Settings(_env_file=None)
    # Pinned: exported env vars must not change what the suite asserts on.
    values = {
        "llm_provider": "anthropic",
        "anthropic_api_key": "test-key",
        "anthropic_base_url": "https://api.anthropic.com",
        "anthropic_version": "2023-06-01",
        "chat_model": "claude-sonnet-4-20250514",
        "chat_max_tokens": 500,
        "chat_temperature": None,
        "ollama_base_url": "http://ollama:11434",
        "ollama_chat_model": "llama3",
        "resend_api_url": "https://api.resend.com/emails",
        "lead_notification_from": "SlopGPT <noreply@slopgpt.com>",
        "lead_source": "slopgpt-chat",
        "contact_email": "hello@slopgpt.com",
        "smtp_port": 587,
        "smtp_use_ssl": False,
        "smtp_use_tls": True,
        "smtp_username": None,
        "smtp_password": None,
        "llm_http_retries": 2,
        "llm_retry_backoff": 0.0,
        "lead_email": "hello@slopgpt.com",
        "lead_require_delivery": False,
        **NO_CHANNELS,
    }
    values.update(overrides)
    return base.model_copy(update=values)


@pytest.fixture
def test_settings():
    return make_settings()


@pytest.fixture
def client(test_settings):
    app.dependency_overrides[get_settings] = lambda: test_settings
    yield TestClient(app)
    app.dependency_overrides.clear()


class DummyResponse:
    def __init__(self, payload=None, status_code=200, text=None):
        self._payload = payload
        self.status_code = status_code
        self.text = text if text is not None else str(payload)

    @property
    def ok(self):
        return self.status_code < 400

    def raise_for_status(self):
        if self.status_code >= 400:
            raise HTTPError(f"HTTP {self.status_code}", response=self)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload
