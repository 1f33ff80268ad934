from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Literal, Mapping, Union

Role = Literal["system", "user", "assistant"]

GenerationMode = Literal[
    "technical",
    "behavioral",
    "dsa",
    "mixed",
    "roadmap",
    "evaluation",
    "simulation",
    "career",
    "resume",
    "comparison",
    "failure",
]
QUESTION_MODES: frozenset[str] = frozenset({"technical", "behavioral", "dsa", "mixed"})
GENERATION_MODES: tuple[str, ...] = (
    "technical",
    "behavioral",
    "dsa",
    "mixed",
    "roadmap",
    "evaluation",
    "simulation",
    "career",
    "resume",
    "comparison",
    "failure",
)

ResponseShapeHint = Literal["freeform", "json_object"]
ProviderErrorKind = Literal["timeout", "auth_failure", "rate_limited", "server_error", "network_error"]


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    content: str


@dataclass(frozen=True)
class GenerationRequest:
    """One inbound generation call. Immutable once constructed."""

    subject_role: str
    mode: GenerationMode
    company: str | None = None
    auxiliary_context: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        context = {str(key): str(value) for key, value in dict(self.auxiliary_context).items()}
        object.__setattr__(self, "auxiliary_context", MappingProxyType(context))

    @property
    def has_company(self) -> bool:
        return bool((self.company or "").strip())

    def context(self, key: str, default: str = "") -> str:
        return self.auxiliary_context.get(key, default)

    def with_context(self, **extra: str) -> "GenerationRequest":
        merged = dict(self.auxiliary_context)
        merged.update(extra)
        return replace(self, auxiliary_context=merged)


@dataclass(frozen=True)
class PromptSpec:
    system_instruction: str
    user_instruction: str
    formatting_rules: tuple[str, ...]
    response_shape_hint: ResponseShapeHint

    def messages(self) -> list[ChatMessage]:
        rules = "\n".join(f"- {rule}" for rule in self.formatting_rules)
        user = self.user_instruction
        if rules:
            user = f"{user}\n\nFORMATTING RULES:\n{rules}"
        return [
            ChatMessage(role="system", content=self.system_instruction),
            ChatMessage(role="user", content=user),
        ]


@dataclass(frozen=True)
class ProviderSuccess:
    raw_text: str
    http_status: int
    provider_latency_ms: int

    ok: Literal[True] = True


@dataclass(frozen=True)
class ProviderFailure:
    error_kind: ProviderErrorKind
    detail: str

    ok: Literal[False] = False


ProviderCallResult = Union[ProviderSuccess, ProviderFailure]
