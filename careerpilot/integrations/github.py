from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from careerpilot.core.config import settings
from careerpilot.features.skill_scoring import RepositorySignal

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "GitHub API rate limit exceeded. Please try again later."

_USERNAME_RE = re.compile(r"^[A-Za-z0-9-]{1,39}$")
_REPOSITORY_RE = re.compile(r"^[A-Za-z0-9._-]{1,100}$")


def is_valid_username(username: str) -> bool:
    return bool(_USERNAME_RE.match(username))


def is_valid_repository_name(name: str) -> bool:
    return bool(_REPOSITORY_RE.match(name)) and name not in {".", ".."}


class GitHubError(RuntimeError):
    def __init__(self, message: str, *, status_code: int = 502, code: str = "github_error"):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class GitHubUserNotFound(GitHubError):
    def __init__(self, username: str):
        super().__init__("GitHub user not found", status_code=404, code="github_user_not_found")
        self.username = username


class GitHubRepositoryNotFound(GitHubError):
    def __init__(self, owner: str, name: str):
        super().__init__("One or both projects not found", status_code=404, code="github_repository_not_found")
        self.owner = owner
        self.name = name


class GitHubRateLimited(GitHubError):
    def __init__(self) -> None:
        super().__init__(RATE_LIMIT_MESSAGE, status_code=429, code="github_rate_limited")


@dataclass(frozen=True)
class GitHubProfile:
    username: str
    repositories: tuple[RepositorySignal, ...]
    blog: str | None = None

    @property
    def frontend_repositories(self) -> tuple[RepositorySignal, ...]:
        return tuple(repo for repo in self.repositories if repo.is_frontend)

    def project_names(self, extra_limit: int = 10) -> list[str]:
        """Frontend repos first, then up to ``extra_limit`` other substantial repos."""
        frontend = sorted(repo.name for repo in self.frontend_repositories)
        others = [
            repo.name
            for repo in sorted(self.repositories, key=lambda item: item.name)
            if repo.name not in frontend
            and ".github.io" not in repo.name
            and repo.size_kb > 50
            and repo.name != self.username
        ]
        return frontend + others[:extra_limit]


@dataclass(frozen=True)
class RepositorySnapshot:
    """One repository plus its language breakdown, largest language first."""

    owner: str
    signal: RepositorySignal
    languages: tuple[str, ...] = ()
    created_at: str | None = None
    updated_at: str | None = None

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.signal.name,
            "description": self.signal.description,
            "language": self.signal.language,
            "languages": list(self.languages),
            "topics": list(self.signal.topics),
            "homepage": self.signal.homepage,
            "size_kb": self.signal.size_kb,
            "stars": self.signal.stars,
            "forks": self.signal.forks,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


def _is_rate_limited(response: httpx.Response) -> bool:
    if response.status_code == 429:
        return True
    return response.status_code == 403 and response.headers.get("x-ratelimit-remaining") == "0"


def _decode(response: httpx.Response, what: str, expected: type) -> Any:
    try:
        payload = response.json()
    except ValueError as exc:
        raise GitHubError(f"GitHub returned an invalid {what} response") from exc
    if not isinstance(payload, expected):
        raise GitHubError(f"GitHub returned an invalid {what} response")
    return payload


def _segment(value: str) -> str:
    return quote(value, safe="")


class GitHubClient:
    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        *,
        base_url: str | None = None,
        token: str | None = None,
        timeout_s: float | None = None,
    ):
        self._http = http_client
        self._base_url = (base_url or settings.github_api_url).rstrip("/")
        self._token = token if token is not None else settings.github_token
        self._timeout = httpx.Timeout(timeout_s if timeout_s is not None else settings.github_timeout_s)

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/vnd.github+json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        url = f"{self._base_url}{path}"
        try:
            if self._http is not None:
                return await self._http.get(url, headers=self._headers(), params=params, timeout=self._timeout)
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                return await client.get(url, headers=self._headers(), params=params)
        except httpx.HTTPError as exc:
            logger.warning(json.dumps({"event": "github_request_failed", "path": path, "error": str(exc)}))
            raise GitHubError(f"GitHub request failed: {exc}") from exc

    async def fetch_profile(self, username: str) -> GitHubProfile:
        user_path = f"/users/{_segment(username)}"
        user_response = await self._get(user_path)
        if _is_rate_limited(user_response):
            raise GitHubRateLimited()
        if user_response.status_code == 404:
            raise GitHubUserNotFound(username)
        if not user_response.is_success:
            raise GitHubError(f"GitHub user lookup failed with HTTP {user_response.status_code}")
        user = _decode(user_response, "user", dict)

        repos_response = await self._get(
            f"{user_path}/repos",
            params={"per_page": 100, "sort": "updated", "type": "owner"},
        )
        if _is_rate_limited(repos_response):
            raise GitHubRateLimited()
        if not repos_response.is_success:
            raise GitHubError("Failed to fetch repositories", status_code=500)

        payload = _decode(repos_response, "repository list", list)
        repositories = tuple(RepositorySignal.from_github(item) for item in payload if isinstance(item, dict))
        logger.info(
            json.dumps(
                {
                    "event": "github_profile_fetched",
                    "username": username,
                    "repositories": len(repositories),
                }
            )
        )
        return GitHubProfile(
            username=str(user.get("login") or username),
            repositories=repositories,
            blog=(user.get("blog") or None),
        )

    async def fetch_repository(self, owner: str, name: str) -> RepositorySnapshot:
        repo_path = f"/repos/{_segment(owner)}/{_segment(name)}"
        repo_response = await self._get(repo_path)
        if _is_rate_limited(repo_response):
            raise GitHubRateLimited()
        if repo_response.status_code == 404:
            raise GitHubRepositoryNotFound(owner, name)
        if not repo_response.is_success:
            raise GitHubError(f"GitHub repository lookup failed with HTTP {repo_response.status_code}")
        repo = _decode(repo_response, "repository", dict)

        # the language breakdown is optional detail; a failed lookup leaves it empty
        languages: tuple[str, ...] = ()
        languages_response = await self._get(f"{repo_path}/languages")
        if _is_rate_limited(languages_response):
            raise GitHubRateLimited()
        if languages_response.is_success:
            try:
                breakdown = languages_response.json()
            except ValueError:
                breakdown = None
            if isinstance(breakdown, dict):
                sizes = {str(key): value if isinstance(value, int) else 0 for key, value in breakdown.items()}
                languages = tuple(sorted(sizes, key=lambda language: (-sizes[language], language)))

        logger.info(json.dumps({"event": "github_repository_fetched", "owner": owner, "repository": name}))
        return RepositorySnapshot(
            owner=owner,
            signal=RepositorySignal.from_github(repo),
            languages=languages,
            created_at=repo.get("created_at") or None,
            updated_at=repo.get("updated_at") or None,
        )
