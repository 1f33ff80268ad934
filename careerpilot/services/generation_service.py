"""Request orchestration: cache, prompt, provider, normalize, fallback.

Evaluation requests run as two stages. The deterministic scorer always
produces the baseline; a provider may then contribute narrative text, which
``merge_narrative`` copies onto the baseline without touching any score.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass
from typing import Literal, Mapping

from pydantic import BaseModel

from careerpilot.ai.cache import ResultCache, cache_key
from careerpilot.ai.client import ProviderClient
from careerpilot.ai.errors import ConfigurationError, NormalizationFailure
from careerpilot.ai.factory import ProviderRegistry
from careerpilot.ai.fallback import DeterministicFallback
from careerpilot.ai.normalizer import normalize, schema_for
from careerpilot.ai.prompts import build_prompt
from careerpilot.ai.types import GenerationRequest, ProviderErrorKind
from careerpilot.analytics.db import log_generation_run
from careerpilot.features.skill_scoring import RepositorySignal
from careerpilot.integrations.github import GitHubClient
from careerpilot.schemas import EvaluationNarrative, SkillEvaluation

logger = logging.getLogger(__name__)

ResultSource = Literal["llm", "fallback", "cache"]

RETRYABLE_ERRORS: frozenset[str] = frozenset({"timeout", "server_error", "network_error"})


@dataclass(frozen=True)
class GenerationOutcome:
    result: BaseModel
    source: ResultSource
    provider: str | None = None
    attempts: int = 0
    error_kind: str | None = None
    latency_ms: int = 0


@dataclass(frozen=True)
class _ProviderAttempt:
    result: BaseModel | None
    provider: str | None
    model: str | None
    attempts: int
    error_kind: str | None
    latency_ms: int


def merge_narrative(baseline: SkillEvaluation, narrative: EvaluationNarrative | None) -> SkillEvaluation:
    """Copy provider-written text onto the deterministic evaluation.

    Scores, level and emoji always come from ``baseline``; a narrative
    ``skill_level`` is ignored.
    """
    if narrative is None:
        return baseline
    update: dict[str, object] = {
        "justification": narrative.justification,
        "motivation": narrative.motivation,
    }
    if narrative.improvement_suggestions:
        update["improvement_suggestions"] = list(narrative.improvement_suggestions)
    return baseline.model_copy(update=update)


def _log_run(
    *,
    run_id: str,
    mode: str,
    outcome: GenerationOutcome,
    model: str | None = None,
) -> None:
    try:
        log_generation_run(
            run_id=run_id,
            mode=mode,
            provider=outcome.provider,
            model=model,
            source=outcome.source,
            status="success" if outcome.error_kind is None else "degraded",
            error_kind=outcome.error_kind,
            attempts=outcome.attempts,
            latency_ms=outcome.latency_ms,
        )
    except Exception:  # pragma: no cover - analytics must not break responses
        logger.debug("generation_run_logging_failed", exc_info=True)


class GuidanceEngine:
    def __init__(
        self,
        client: ProviderClient,
        registry: ProviderRegistry,
        cache: ResultCache,
        *,
        fallback: DeterministicFallback | None = None,
        max_retries: int = 1,
    ):
        self._client = client
        self._registry = registry
        self._cache = cache
        self._fallback = fallback or DeterministicFallback()
        self._max_retries = max(0, max_retries)

    def lookup(self, request: GenerationRequest) -> BaseModel | None:
        return self._cache.get(cache_key(request))

    async def generate(
        self,
        request: GenerationRequest,
        signals: Mapping[str, RepositorySignal] | None = None,
    ) -> GenerationOutcome:
        return await self._run(request, signals, cache_key(request))

    async def _run(
        self,
        request: GenerationRequest,
        signals: Mapping[str, RepositorySignal] | None,
        key: str,
    ) -> GenerationOutcome:
        run_id = uuid.uuid4().hex
        logger.info(json.dumps({"event": "generation_request", "run_id": run_id, "mode": request.mode}))

        cached = self._cache.get(key)
        if cached is not None:
            outcome = GenerationOutcome(result=cached, source="cache")
            logger.info(json.dumps({"event": "generation_complete", "run_id": run_id, "mode": request.mode, "source": "cache"}))
            _log_run(run_id=run_id, mode=request.mode, outcome=outcome)
            return outcome

        if request.mode == "evaluation":
            outcome, model = await self._evaluate(request, signals or {}, run_id)
            self._cache.put(key, outcome.result)
        else:
            attempt = await self._attempt(request, run_id)
            model = attempt.model
            if attempt.result is not None:
                outcome = GenerationOutcome(
                    result=attempt.result,
                    source="llm",
                    provider=attempt.provider,
                    attempts=attempt.attempts,
                    latency_ms=attempt.latency_ms,
                )
                self._cache.put(key, attempt.result)
            else:
                logger.info(
                    json.dumps(
                        {
                            "event": "fallback_used",
                            "run_id": run_id,
                            "mode": request.mode,
                            "error_kind": attempt.error_kind,
                        }
                    )
                )
                outcome = GenerationOutcome(
                    result=self._fallback.evaluate(request, signals),
                    source="fallback",
                    provider=attempt.provider,
                    attempts=attempt.attempts,
                    error_kind=attempt.error_kind,
                    latency_ms=attempt.latency_ms,
                )

        logger.info(
            json.dumps(
                {
                    "event": "generation_complete",
                    "run_id": run_id,
                    "mode": request.mode,
                    "source": outcome.source,
                    "provider": outcome.provider,
                    "attempts": outcome.attempts,
                    "latency_ms": outcome.latency_ms,
                }
            )
        )
        _log_run(run_id=run_id, mode=request.mode, outcome=outcome, model=model)
        return outcome

    async def evaluate_skills(self, request: GenerationRequest, github: GitHubClient) -> GenerationOutcome:
        """Score a GitHub profile. A cached evaluation skips the GitHub lookup entirely."""
        cached = self.lookup(request)
        if cached is not None:
            return await self.generate(request)

        username = request.context("github_username", request.subject_role)
        profile = await github.fetch_profile(username)
        signals = {repo.name: repo for repo in profile.frontend_repositories}
        projects = profile.project_names()
        enriched = request.with_context(
            projects="\n".join(projects),
            total_repos=str(len(profile.repositories)),
        )
        # keyed on the caller's fields so the next identical call never reaches GitHub
        return await self._run(enriched, signals, cache_key(request))

    async def compare_projects(self, request: GenerationRequest, github: GitHubClient) -> GenerationOutcome:
        """Compare two repositories of one owner. A cached comparison skips GitHub entirely."""
        cached = self.lookup(request)
        if cached is not None:
            return await self.generate(request)

        owner = request.context("github_username", request.subject_role)
        first, second = await asyncio.gather(
            github.fetch_repository(owner, request.context("project1")),
            github.fetch_repository(owner, request.context("project2")),
        )
        enriched = request.with_context(
            project1_data=json.dumps(first.describe(), sort_keys=True, ensure_ascii=False),
            project2_data=json.dumps(second.describe(), sort_keys=True, ensure_ascii=False),
        )
        return await self._run(enriched, None, cache_key(request))

    async def _evaluate(
        self,
        request: GenerationRequest,
        signals: Mapping[str, RepositorySignal],
        run_id: str,
    ) -> tuple[GenerationOutcome, str | None]:
        baseline = self._fallback.evaluate(request, signals)
        if not isinstance(baseline, SkillEvaluation):
            raise TypeError("evaluation fallback must produce a SkillEvaluation")
        prompt_request = request.with_context(
            total_score=str(baseline.total_score),
            skill_level=baseline.skill_level,
            score_breakdown=json.dumps(baseline.score_breakdown, sort_keys=True),
        )
        attempt = await self._attempt(prompt_request, run_id)
        narrative = attempt.result if isinstance(attempt.result, EvaluationNarrative) else None
        if narrative is None:
            logger.info(
                json.dumps(
                    {"event": "fallback_used", "run_id": run_id, "mode": request.mode, "error_kind": attempt.error_kind}
                )
            )
        outcome = GenerationOutcome(
            result=merge_narrative(baseline, narrative),
            source="llm" if narrative is not None else "fallback",
            provider=attempt.provider,
            attempts=attempt.attempts,
            error_kind=attempt.error_kind,
            latency_ms=attempt.latency_ms,
        )
        return outcome, attempt.model

    async def _attempt(self, request: GenerationRequest, run_id: str) -> _ProviderAttempt:
        try:
            provider = self._registry.for_mode(request.mode)
        except ConfigurationError as exc:
            logger.warning(
                json.dumps(
                    {"event": "provider_unavailable", "run_id": run_id, "mode": request.mode, "code": exc.code, "detail": str(exc)}
                )
            )
            return _ProviderAttempt(None, None, None, 0, exc.code, 0)

        spec = build_prompt(request)
        schema = schema_for(request.mode)
        attempts = 0
        latency_ms = 0
        error_kind: ProviderErrorKind | str | None = None
        started = time.perf_counter()

        while attempts <= self._max_retries:
            attempts += 1
            call = await self._client.call(spec, provider)
            latency_ms = int((time.perf_counter() - started) * 1000)
            if not call.ok:
                error_kind = call.error_kind
                logger.warning(
                    json.dumps(
                        {
                            "event": "provider_call_failed",
                            "run_id": run_id,
                            "provider": provider.name,
                            "attempt": attempts,
                            "error_kind": call.error_kind,
                            "detail": call.detail[:300],
                        }
                    )
                )
                if call.error_kind in RETRYABLE_ERRORS:
                    continue
                break

            normalized = normalize(call.raw_text, spec.response_shape_hint, schema)
            if isinstance(normalized, NormalizationFailure):
                logger.warning(
                    json.dumps(
                        {
                            "event": "normalization_failed",
                            "run_id": run_id,
                            "provider": provider.name,
                            "mode": request.mode,
                            "strategies": list(normalized.strategies),
                            "detail": str(normalized),
                        }
                    )
                )
                return _ProviderAttempt(None, provider.name, provider.model, attempts, normalized.code, latency_ms)
            return _ProviderAttempt(normalized, provider.name, provider.model, attempts, None, latency_ms)

        return _ProviderAttempt(None, provider.name, provider.model, attempts, error_kind, latency_ms)
