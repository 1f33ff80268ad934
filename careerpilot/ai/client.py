from __future__ import annotations

import json
import logging
import time
from typing import Any, Callable

import httpx

from careerpilot.ai.config import ProviderConfig
from careerpilot.ai.types import ChatMessage, PromptSpec, ProviderCallResult, ProviderFailure, ProviderSuccess

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 30.0


def _chat_messages_body(spec: PromptSpec, provider: ProviderConfig) -> dict[str, Any]:
    body: dict[str, Any] = {
        "model": provider.model,
        "messages": [{"role": m.role, "content": m.content} for m in spec.messages()],
        "temperature": provider.temperature,
        "max_tokens": provider.max_output_tokens,
    }
    if spec.response_shape_hint == "json_object":
        body["response_format"] = {"type": "json_object"}
    return body


def _content_parts_body(spec: PromptSpec, provider: ProviderConfig) -> dict[str, Any]:
    messages = spec.messages()
    system = next((m.content for m in messages if m.role == "system"), "")
    contents = [
        {"role": "model" if m.role == "assistant" else "user", "parts": [{"text": m.content}]}
        for m in messages
        if m.role != "system"
    ]
    generation_config: dict[str, Any] = {
        "temperature": provider.temperature,
        "maxOutputTokens": provider.max_output_tokens,
    }
    if spec.response_shape_hint == "json_object":
        generation_config["responseMimeType"] = "application/json"
    body: dict[str, Any] = {"contents": contents, "generationConfig": generation_config}
    if system:
        body["systemInstruction"] = {"parts": [{"text": system}]}
    return body


def _anthropic_messages_body(spec: PromptSpec, provider: ProviderConfig) -> dict[str, Any]:
    messages: list[ChatMessage] = spec.messages()
    return {
        "model": provider.model,
        "system": "\n\n".join(m.content for m in messages if m.role == "system"),
        "messages": [{"role": m.role, "content": m.content} for m in messages if m.role != "system"],
        "temperature": provider.temperature,
        "max_tokens": provider.max_output_tokens,
    }


_BODY_BUILDERS: dict[str, Callable[[PromptSpec, ProviderConfig], dict[str, Any]]] = {
    "chat_messages": _chat_messages_body,
    "content_parts": _content_parts_body,
    "anthropic_messages": _anthropic_messages_body,
}


def _auth(provider: ProviderConfig) -> tuple[dict[str, str], dict[str, str]]:
    key = (provider.api_key or "").strip()
    headers = {"Content-Type": "application/json", **provider.extra_headers}
    params: dict[str, str] = {}
    if provider.auth_style == "bearer":
        headers["Authorization"] = f"Bearer {key}"
    elif provider.auth_style == "query_key":
        params[provider.auth_param or "key"] = key
    else:
        headers[provider.auth_param or "x-api-key"] = key
    return headers, params


def extract_path(payload: Any, path: tuple[str | int, ...]) -> Any:
    current = payload
    for step in path:
        if isinstance(step, int):
            if not isinstance(current, list) or len(current) <= step:
                return None
        elif not isinstance(current, dict) or step not in current:
            return None
        current = current[step]
    return current


def _status_failure(status_code: int, body: str) -> ProviderFailure:
    snippet = body[:300]
    if status_code in {401, 403}:
        return ProviderFailure(error_kind="auth_failure", detail=f"HTTP {status_code}: {snippet}")
    if status_code == 429:
        return ProviderFailure(error_kind="rate_limited", detail=f"HTTP {status_code}: {snippet}")
    return ProviderFailure(error_kind="server_error", detail=f"HTTP {status_code}: {snippet}")


class ProviderClient:
    """Single round trip to any configured provider. Never retries, never raises."""

    def __init__(self, http_client: httpx.AsyncClient | None = None, *, timeout_s: float = DEFAULT_TIMEOUT_S):
        self._http = http_client
        self._timeout = httpx.Timeout(timeout_s)

    async def call(self, spec: PromptSpec, provider: ProviderConfig) -> ProviderCallResult:
        builder = _BODY_BUILDERS.get(provider.body_style)
        if builder is None:
            return ProviderFailure(error_kind="server_error", detail=f"unsupported body style '{provider.body_style}'")

        headers, params = _auth(provider)
        body = builder(spec, provider)
        started = time.perf_counter()
        try:
            response = await self._post(provider.url, headers=headers, params=params, body=body)
        except httpx.TimeoutException as exc:
            return ProviderFailure(error_kind="timeout", detail=f"{provider.name} timed out: {exc}")
        except httpx.HTTPError as exc:
            return ProviderFailure(error_kind="network_error", detail=f"{provider.name} unreachable: {exc}")
        latency_ms = int((time.perf_counter() - started) * 1000)

        if not response.is_success:
            failure = _status_failure(response.status_code, response.text)
            logger.warning(
                json.dumps(
                    {
                        "event": "provider_http_error",
                        "provider": provider.name,
                        "status": response.status_code,
                        "error_kind": failure.error_kind,
                        "latency_ms": latency_ms,
                    }
                )
            )
            return failure

        try:
            payload = response.json()
        except ValueError:
            return ProviderFailure(error_kind="server_error", detail=f"{provider.name} returned a non-JSON body")

        text = extract_path(payload, provider.extraction_path)
        if not isinstance(text, str):
            path = ".".join(str(step) for step in provider.extraction_path)
            return ProviderFailure(error_kind="server_error", detail=f"{provider.name} response missing {path}")

        return ProviderSuccess(raw_text=text, http_status=response.status_code, provider_latency_ms=latency_ms)

    async def _post(
        self,
        url: str,
        *,
        headers: dict[str, str],
        params: dict[str, str],
        body: dict[str, Any],
    ) -> httpx.Response:
        if self._http is not None:
            return await self._http.post(url, headers=headers, params=params, json=body, timeout=self._timeout)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.post(url, headers=headers, params=params, json=body)
