import unittest

import httpx

from careerpilot.integrations.github import (
    RATE_LIMIT_MESSAGE,
    GitHubClient,
    GitHubError,
    GitHubRateLimited,
    GitHubRepositoryNotFound,
    GitHubUserNotFound,
    is_valid_repository_name,
    is_valid_username,
)

REPOS = [
    {
        "name": "shop-frontend",
        "description": "React storefront with Redux",
        "language": "TypeScript",
        "topics": ["react", "redux"],
        "homepage": "https://shop.example.com",
        "size": 900,
        "stargazers_count": 3,
        "forks_count": 0,
    },
    {"name": "octocat.github.io", "description": None, "language": "HTML", "size": 10, "forks_count": 0},
    {"name": "data-tools", "description": "ETL scripts", "language": "Python", "size": 300, "forks_count": 0},
    {"name": "octocat", "description": "profile readme", "language": None, "size": 60, "forks_count": 0},
]


def github_api(routes: dict[str, httpx.Response]):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        response = routes.get(request.url.path)
        if response is None:
            return httpx.Response(404, json={"message": "Not Found"})
        return response

    return handler, seen


class GitHubClientTests(unittest.IsolatedAsyncioTestCase):
    async def _fetch(self, routes: dict[str, httpx.Response], username: str = "octocat", token: str | None = ""):
        handler, seen = github_api(routes)
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
            client = GitHubClient(http_client, base_url="https://github.test", token=token, timeout_s=5)
            return await client.fetch_profile(username), seen

    async def test_profile_is_fetched_and_repositories_classified(self):
        profile, seen = await self._fetch(
            {
                "/users/octocat": httpx.Response(200, json={"login": "octocat", "blog": "https://octo.dev"}),
                "/users/octocat/repos": httpx.Response(200, json=REPOS),
            },
            token="gh-token",
        )

        self.assertEqual(profile.username, "octocat")
        self.assertEqual(profile.blog, "https://octo.dev")
        self.assertEqual(len(profile.repositories), 4)
        self.assertEqual([repo.name for repo in profile.frontend_repositories], ["shop-frontend"])
        self.assertEqual(profile.project_names(), ["shop-frontend", "data-tools"])

        repos_request = seen[1]
        self.assertEqual(repos_request.url.params["per_page"], "100")
        self.assertEqual(repos_request.url.params["sort"], "updated")
        self.assertEqual(repos_request.url.params["type"], "owner")
        self.assertEqual(repos_request.headers["authorization"], "Bearer gh-token")

    async def test_token_is_optional(self):
        _, seen = await self._fetch(
            {
                "/users/octocat": httpx.Response(200, json={"login": "octocat"}),
                "/users/octocat/repos": httpx.Response(200, json=[]),
            }
        )
        self.assertNotIn("authorization", seen[0].headers)

    async def test_unknown_user(self):
        with self.assertRaises(GitHubUserNotFound) as ctx:
            await self._fetch({}, username="ghost")
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(str(ctx.exception), "GitHub user not found")

    async def test_rate_limit_on_user_lookup(self):
        for response in (
            httpx.Response(429),
            httpx.Response(403, headers={"x-ratelimit-remaining": "0"}),
        ):
            with self.subTest(status=response.status_code):
                with self.assertRaises(GitHubRateLimited) as ctx:
                    await self._fetch({"/users/octocat": response})
                self.assertEqual(ctx.exception.status_code, 429)
                self.assertEqual(str(ctx.exception), RATE_LIMIT_MESSAGE)

    async def test_forbidden_without_exhausted_quota_is_upstream_error(self):
        with self.assertRaises(GitHubError) as ctx:
            await self._fetch({"/users/octocat": httpx.Response(403, headers={"x-ratelimit-remaining": "12"})})
        self.assertNotIsInstance(ctx.exception, GitHubRateLimited)
        self.assertEqual(ctx.exception.status_code, 502)

    async def test_rate_limit_on_repository_listing(self):
        with self.assertRaises(GitHubRateLimited):
            await self._fetch(
                {
                    "/users/octocat": httpx.Response(200, json={"login": "octocat"}),
                    "/users/octocat/repos": httpx.Response(429),
                }
            )

    async def test_repository_listing_failure(self):
        with self.assertRaises(GitHubError) as ctx:
            await self._fetch(
                {
                    "/users/octocat": httpx.Response(200, json={"login": "octocat"}),
                    "/users/octocat/repos": httpx.Response(500),
                }
            )
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(str(ctx.exception), "Failed to fetch repositories")

    async def test_network_failure_is_wrapped(self):
        def unreachable(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(unreachable)) as http_client:
            client = GitHubClient(http_client, base_url="https://github.test", token="")
            with self.assertRaises(GitHubError) as ctx:
                await client.fetch_profile("octocat")
        self.assertEqual(ctx.exception.status_code, 502)

    async def test_non_json_user_body_is_upstream_error(self):
        for response in (
            httpx.Response(200, text="<html>maintenance</html>"),
            httpx.Response(200, json=[{"login": "octocat"}]),
        ):
            with self.subTest(body=response.text[:10]):
                with self.assertRaises(GitHubError) as ctx:
                    await self._fetch({"/users/octocat": response})
                self.assertEqual(ctx.exception.status_code, 502)
                self.assertEqual(str(ctx.exception), "GitHub returned an invalid user response")

    async def test_username_is_sent_as_a_single_path_segment(self):
        handler, seen = github_api({})
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
            client = GitHubClient(http_client, base_url="https://github.test", token="")
            with self.assertRaises(GitHubUserNotFound):
                await client.fetch_profile("octocat/repos")
        self.assertEqual(seen[0].url.raw_path, b"/users/octocat%2Frepos")


class RepositoryFetchTests(unittest.IsolatedAsyncioTestCase):
    async def _fetch(self, routes: dict[str, httpx.Response], name: str = "shop-frontend"):
        handler, seen = github_api(routes)
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
            client = GitHubClient(http_client, base_url="https://github.test", token="")
            return await client.fetch_repository("octocat", name), seen

    async def test_repository_and_languages_are_combined(self):
        snapshot, seen = await self._fetch(
            {
                "/repos/octocat/shop-frontend": httpx.Response(
                    200, json={**REPOS[0], "created_at": "2024-01-02T00:00:00Z", "updated_at": "2024-06-01T00:00:00Z"}
                ),
                "/repos/octocat/shop-frontend/languages": httpx.Response(
                    200, json={"CSS": 1200, "TypeScript": 48000, "HTML": 1200}
                ),
            }
        )

        self.assertEqual(snapshot.signal.name, "shop-frontend")
        self.assertEqual(snapshot.languages, ("TypeScript", "CSS", "HTML"))
        described = snapshot.describe()
        self.assertEqual(described["homepage"], "https://shop.example.com")
        self.assertEqual(described["size_kb"], 900)
        self.assertEqual(described["created_at"], "2024-01-02T00:00:00Z")
        self.assertEqual([request.url.path for request in seen], ["/repos/octocat/shop-frontend", "/repos/octocat/shop-frontend/languages"])

    async def test_missing_language_breakdown_is_tolerated(self):
        snapshot, _ = await self._fetch(
            {
                "/repos/octocat/shop-frontend": httpx.Response(200, json=REPOS[0]),
                "/repos/octocat/shop-frontend/languages": httpx.Response(500, text="oops"),
            }
        )
        self.assertEqual(snapshot.languages, ())

    async def test_unknown_repository(self):
        with self.assertRaises(GitHubRepositoryNotFound) as ctx:
            await self._fetch({}, name="missing")
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(str(ctx.exception), "One or both projects not found")

    async def test_rate_limit_on_repository_lookup(self):
        with self.assertRaises(GitHubRateLimited):
            await self._fetch({"/repos/octocat/shop-frontend": httpx.Response(429)})


class GitHubNameValidationTests(unittest.TestCase):
    def test_usernames(self):
        for valid in ("octocat", "Octo-Cat", "a", "x" * 39):
            with self.subTest(valid=valid):
                self.assertTrue(is_valid_username(valid))
        for invalid in ("", "octocat/repos", "octo cat", "../admin", "x" * 40, "octo_cat"):
            with self.subTest(invalid=invalid):
                self.assertFalse(is_valid_username(invalid))

    def test_repository_names(self):
        for valid in ("shop-frontend", "octocat.github.io", "my_repo", "v2.0"):
            with self.subTest(valid=valid):
                self.assertTrue(is_valid_repository_name(valid))
        for invalid in ("", ".", "..", "a/b", "has space"):
            with self.subTest(invalid=invalid):
                self.assertFalse(is_valid_repository_name(invalid))


if __name__ == "__main__":
    unittest.main()
