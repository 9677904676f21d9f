import json
import time
from typing import Any, Sequence

import requests
from requests import HTTPError, RequestException

from slopchat.config import Settings
from slopchat.utils.logger import get_logger

logger = get_logger(__name__)

ANTHROPIC_MESSAGES = "/v1/messages"
OLLAMA_CHAT = "/api/chat"


class LLMRequestError(RuntimeError):
    """Represents a failed HTTP call against the text-generation API."""

    def __init__(self, endpoint: str, status_code: int | None = None, detail: str | None = None):
        detail = detail or "Model request failed without details."
        super().__init__(detail)
        self.endpoint = endpoint
        self.status_code = status_code
        self.detail = detail


def _base_url(config: Settings) -> str:
    if config.llm_provider == "ollama":
        return config.ollama_base_url.rstrip("/")
    return config.anthropic_base_url.rstrip("/")


def _headers(config: Settings) -> dict[str, str]:
    if config.llm_provider == "ollama":
        return {"content-type": "application/json"}
    return {
        "x-api-key": config.anthropic_api_key or "",
        "anthropic-version": config.anthropic_version,
        "content-type": "application/json",
    }


def _should_retry(status_code: int | None) -> bool:
    if status_code is None:
        return True
    return status_code == 429 or status_code >= 500


def _post_to_model(
    endpoint: str, payload: dict, config: Settings, timeout: float | None = None
) -> dict[str, Any]:
    url = f"{_base_url(config)}{endpoint}"
    attempts = max(1, config.llm_http_retries)
    last_error: LLMRequestError | None = None
    for attempt in range(attempts):
        try:
            response = requests.post(
                url,
                json=payload,
                headers=_headers(config),
                timeout=(config.llm_connect_timeout, timeout or config.llm_timeout),
            )
            response.raise_for_status()
            return response.json()
        except HTTPError as exc:
            status_code = exc.response.status_code if exc.response is not None else None
            detail = exc.response.text if exc.response is not None else str(exc)
            last_error = LLMRequestError(endpoint, status_code, detail)
            logger.warning(
                "Model %s returned %s; detail=%s",
                endpoint,
                status_code,
                detail.strip(),
            )
            if not _should_retry(status_code):
                break
        except (RequestException, ValueError) as exc:
            detail = str(exc)
            last_error = LLMRequestError(endpoint, None, detail)
            logger.warning("Network failure when calling model %s: %s", endpoint, detail)
        if attempt < attempts - 1:
            backoff = config.llm_retry_backoff * (attempt + 1)
            logger.debug(
                "Retrying model %s (attempt %d/%d) after %.1fs",
                endpoint,
                attempt + 1,
                attempts,
                backoff,
            )
            time.sleep(backoff)
    if last_error:
        logger.error(
            "Model %s failed after %d attempts: %s",
            endpoint,
            attempts,
            last_error.detail,
        )
        raise last_error
    raise LLMRequestError(endpoint, detail="Failed to connect to the model API.")


def _extract_first_text_block(data: dict[str, Any]) -> str:
    content = data.get("content")
    if not isinstance(content, list):
        return ""
    for block in content:
        if not isinstance(block, dict) or block.get("type") != "text":
            continue
        text = block.get("text")
        if isinstance(text, str) and text.strip():
            return text.strip()
    return ""


def _extract_message_content(data: dict[str, Any]) -> str:
    message = data.get("message")
    if not isinstance(message, dict):
        return ""
    content = message.get("content")
    if isinstance(content, str) and content.strip():
        return content.strip()
    return ""


def _resolve_model_response_text(data: dict[str, Any]) -> str:
    text = _extract_first_text_block(data)
    if text:
        return text
    return _extract_message_content(data)


def _payload_brief(data: dict[str, Any]) -> str:
    try:
        return json.dumps(data, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return str(data)


def build_payload(
    system_prompt: str, turns: Sequence[dict[str, str]], config: Settings
) -> tuple[str, dict[str, Any]]:
    """Return the endpoint and request body for the configured provider."""
    messages = [{"role": turn["role"], "content": turn["content"]} for turn in turns]
    if config.llm_provider == "ollama":
        options: dict[str, Any] = {"num_predict": config.chat_max_tokens}
        if config.chat_temperature is not None:
            options["temperature"] = config.chat_temperature
        return OLLAMA_CHAT, {
            "model": config.ollama_chat_model,
            "messages": [{"role": "system", "content": system_prompt}, *messages],
            "stream": False,
            "options": options,
        }

    payload: dict[str, Any] = {
        "model": config.chat_model,
        "max_tokens": config.chat_max_tokens,
        "system": system_prompt,
        "messages": messages,
    }
    if config.chat_temperature is not None:
        payload["temperature"] = config.chat_temperature
    return ANTHROPIC_MESSAGES, payload


def generate_reply(
    system_prompt: str, turns: Sequence[dict[str, str]], config: Settings
) -> str:
    endpoint, payload = build_payload(system_prompt, turns, config)
    data = _post_to_model(endpoint, payload, config)
    if "error" in data:
        error_value = data["error"]
        detail = (
            error_value.get("message")
            if isinstance(error_value, dict)
            else str(error_value)
        )
        raise LLMRequestError(
            endpoint,
            detail=detail or f"Model error payload: {_payload_brief(data)}",
        )
    text = _resolve_model_response_text(data)
    if not text:
        payload_brief = _payload_brief(data)
        logger.warning("Model response missing text payload: %s", payload_brief)
        raise LLMRequestError(endpoint, detail=f"Model replied without text: {payload_brief}")
    return text


def _ping_base_url(config: Settings) -> tuple[bool, str]:
    url = _base_url(config)
    try:
        response = requests.get(url, timeout=config.llm_health_timeout)
        response.raise_for_status()
        return True, "Model base URL reachable"
    except RequestException as exc:
        detail = str(exc)
        logger.warning("Failed to reach model base URL: %s", detail)
        return False, detail


def get_llm_health(config: Settings) -> dict[str, Any]:
    health: dict[str, Any] = {"provider": config.llm_provider}
    if config.llm_provider == "ollama":
        reachable, detail = _ping_base_url(config)
        health.update({"reachable": reachable, "detail": detail, "model": config.ollama_chat_model})
        return health
    # Hosted provider: report configuration only, never ping.
    health.update({"configured": bool(config.anthropic_api_key), "model": config.chat_model})
    return health
