from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Mapping

from careerpilot.core.config import Settings

AuthStyle = Literal["bearer", "query_key", "header_key"]
BodyStyle = Literal["chat_messages", "content_parts", "anthropic_messages"]

CHAT_COMPLETIONS_PATH: tuple[str | int, ...] = ("choices", 0, "message", "content")
GENERATE_CONTENT_PATH: tuple[str | int, ...] = ("candidates", 0, "content", "parts", 0, "text")
ANTHROPIC_MESSAGES_PATH: tuple[str | int, ...] = ("content", 0, "text")


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


@dataclass(frozen=True)
class ProviderConfig:
    """Everything needed to talk to one LLM HTTP API.

    Adding a provider means adding one of these; the client has no
    per-provider branches.
    """

    name: str
    endpoint: str
    model: str
    api_key: str | None
    auth_style: AuthStyle
    body_style: BodyStyle
    extraction_path: tuple[str | int, ...]
    auth_param: str = ""
    extra_headers: Mapping[str, str] = field(default_factory=dict)
    temperature: float = 0.2
    max_output_tokens: int = 4096

    @property
    def available(self) -> bool:
        key = (self.api_key or "").strip()
        return bool(key) and not _looks_like_placeholder(key)

    @property
    def url(self) -> str:
        return self.endpoint.format(model=self.model)


def load_provider_configs(settings: Settings) -> dict[str, ProviderConfig]:
    temperature = settings.ai_temperature
    configs = [
        ProviderConfig(
            name="openai",
            endpoint=f"{settings.openai_base_url}/chat/completions",
            model=settings.openai_model,
            api_key=settings.openai_api_key,
            auth_style="bearer",
            body_style="chat_messages",
            extraction_path=CHAT_COMPLETIONS_PATH,
            temperature=temperature,
        ),
        ProviderConfig(
            name="groq",
            endpoint="https://api.groq.com/openai/v1/chat/completions",
            model=settings.groq_model,
            api_key=settings.groq_api_key,
            auth_style="bearer",
            body_style="chat_messages",
            extraction_path=CHAT_COMPLETIONS_PATH,
            temperature=temperature,
            max_output_tokens=8192,
        ),
        ProviderConfig(
            name="gemini",
            endpoint="https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent",
            model=settings.gemini_model,
            api_key=settings.gemini_api_key,
            auth_style="query_key",
            auth_param="key",
            body_style="content_parts",
            extraction_path=GENERATE_CONTENT_PATH,
            temperature=temperature,
            max_output_tokens=8192,
        ),
        ProviderConfig(
            name="claude",
            endpoint="https://api.anthropic.com/v1/messages",
            model=settings.claude_model,
            api_key=settings.anthropic_api_key,
            auth_style="header_key",
            auth_param="x-api-key",
            extra_headers={"anthropic-version": "2023-06-01"},
            body_style="anthropic_messages",
            extraction_path=ANTHROPIC_MESSAGES_PATH,
            temperature=temperature,
        ),
    ]
    return {config.name: config for config in configs}
