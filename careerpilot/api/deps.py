from __future__ import annotations

from fastapi import Request

from careerpilot.ai.factory import ProviderRegistry
from careerpilot.integrations.github import GitHubClient
from careerpilot.services.generation_service import GuidanceEngine


def get_engine(request: Request) -> GuidanceEngine:
    return request.app.state.engine


def get_registry(request: Request) -> ProviderRegistry:
    return request.app.state.registry


def get_github_client(request: Request) -> GitHubClient:
    return request.app.state.github
