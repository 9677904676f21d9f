from unittest.mock import patch

import pytest
from requests import ConnectionError as RequestsConnectionError

from conftest import DummyResponse, make_settings
from slopchat.llm.client import (
    LLMRequestError,
    _resolve_model_response_text,
    build_payload,
    generate_reply,
    get_llm_health,
)

TURNS = [{"role": "user", "content": "plan a dinosaur party"}]


def test_resolves_first_text_block():
    data = {
        "content": [
            {"type": "tool_use", "id": "x"},
            {"type": "text", "text": "  Rawr, love it!  "},
            {"type": "text", "text": "second"},
        ]
    }
    assert _resolve_model_response_text(data) == "Rawr, love it!"


def test_resolves_ollama_message_content():
    data = {"message": {"content": "  Hola mundo  "}}
    assert _resolve_model_response_text(data) == "Hola mundo"


def test_anthropic_payload_carries_persona_and_cap():
    config = make_settings(chat_max_tokens=321)
    endpoint, payload = build_payload("persona", TURNS, config)
    assert endpoint == "/v1/messages"
    assert payload["system"] == "persona"
    assert payload["max_tokens"] == 321
    assert payload["messages"] == TURNS


def test_ollama_payload_prepends_system_message():
    config = make_settings(llm_provider="ollama", chat_max_tokens=200)
    endpoint, payload = build_payload("persona", TURNS, config)
    assert endpoint == "/api/chat"
    assert payload["messages"][0] == {"role": "system", "content": "persona"}
    assert payload["messages"][1:] == TURNS
    assert payload["options"]["num_predict"] == 200
    assert payload["stream"] is False


@patch("slopchat.llm.client.time.sleep")
@patch("slopchat.llm.client.requests.post")
def test_generate_reply_retries_server_errors(mock_post, _sleep):
    mock_post.side_effect = [
        DummyResponse({"error": "overloaded"}, status_code=529),
        DummyResponse({"content": [{"type": "text", "text": "When is the party?"}]}),
    ]
    reply = generate_reply("persona", TURNS, make_settings())
    assert reply == "When is the party?"
    assert mock_post.call_count == 2
    headers = mock_post.call_args.kwargs["headers"]
    assert headers["x-api-key"] == "test-key"
    assert mock_post.call_args.args[0] == "https://api.anthropic.com/v1/messages"


@patch("slopchat.llm.client.time.sleep")
@patch("slopchat.llm.client.requests.post")
def test_generate_reply_does_not_retry_client_errors(mock_post, _sleep):
    mock_post.return_value = DummyResponse({"error": "bad key"}, status_code=401, text="bad key")
    with pytest.raises(LLMRequestError) as excinfo:
        generate_reply("persona", TURNS, make_settings(llm_http_retries=3))
    assert excinfo.value.status_code == 401
    assert mock_post.call_count == 1


@patch("slopchat.llm.client.time.sleep")
@patch("slopchat.llm.client.requests.post")
def test_generate_reply_raises_after_network_failures(mock_post, _sleep):
    mock_post.side_effect = RequestsConnectionError("down")
    with pytest.raises(LLMRequestError):
        generate_reply("persona", TURNS, make_settings(llm_http_retries=2))
    assert mock_post.call_count == 2


@patch("slopchat.llm.client.requests.post")
def test_generate_reply_without_text_is_an_error(mock_post):
    mock_post.return_value = DummyResponse({"content": []})
    with pytest.raises(LLMRequestError):
        generate_reply("persona", TURNS, make_settings())


def test_hosted_health_reports_configuration_only():
    config = make_settings(anthropic_api_key=None)
    health = get_llm_health(config)
    assert health == {"provider": "anthropic", "configured": False, "model": config.chat_model}


@patch("slopchat.llm.client.requests.post")
def test_make_settings_ignores_exported_model_endpoint(mock_post, monkeypatch):
    monkeypatch.setenv("ANTHROPIC_BASE_URL", "http://127.0.0.1:48271")
    monkeypatch.setenv("CHAT_MODEL", "some-other-model")
    mock_post.return_value = DummyResponse({"content": [{"type": "text", "text": "Hi!"}]})
    generate_reply("persona", TURNS, make_settings())
    assert mock_post.call_args.args[0] == "https://api.anthropic.com/v1/messages"
    assert mock_post.call_args.kwargs["json"]["model"] == "claude-sonnet-4-20250514"
