"""GitHub GraphQL client with rate limiting, retry logic, and App auth support.

Uses httpx.AsyncClient under trio. Review threads and their resolution
state are only exposed through GraphQL.
"""

import logging
import time
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import httpx
import jwt
import trio

from .config import (
    GITHUB_API_URL,
    GITHUB_APP_ID,
    GITHUB_APP_INSTALLATION_ID,
    GITHUB_APP_PRIVATE_KEY_PATH,
    GITHUB_TOKEN,
    PER_PAGE,
    REACTIONS_PER_COMMENT,
)
from .models import PullRequestTarget

logger = logging.getLogger(__name__)


REVIEW_THREADS_QUERY = """
query($owner: String!, $repo: String!, $number: Int!, $first: Int!, $reactions: Int!, $cursor: String) {
  repository(owner: $owner, name: $repo) {
    pullRequest(number: $number) {
      reviewThreads(first: $first, after: $cursor) {
        pageInfo { hasNextPage endCursor }
        nodes {
          id
          isResolved
          isOutdated
          path
          comments(first: 1) {
            nodes {
              id
              body
              url
              author { login }
              reactions(first: $reactions) {
                nodes {
                  content
                  user { login }
                }
              }
            }
          }
        }
      }
    }
  }
}
"""


class GraphQLError(Exception):
    """GraphQL response carried an `errors` payload."""

    def __init__(self, errors: list[dict], context: str = ""):
        self.errors = errors
        message = errors[0].get("message", str(errors)) if errors else "unknown error"
        super().__init__(f"GraphQL error{f' in {context}' if context else ''}: {message}")


class GitHubAppAuth:
    """Installation token for a GitHub App, exchanged again shortly before it expires.

    Report runs are sequential, so one token is shared without locking.
    """

    REFRESH_MARGIN = timedelta(minutes=5)

    def __init__(self, app_id: str, private_key: str, installation_id: str, api_url: str = GITHUB_API_URL):
        self.app_id = app_id
        self.private_key = private_key
        self.installation_id = installation_id
        self.api_url = api_url.rstrip("/")
        self._token: str | None = None
        self._expires_at: datetime | None = None

    @classmethod
    def from_key_file(cls, app_id: str, private_key_path: str, installation_id: str) -> "GitHubAppAuth":
        return cls(app_id, Path(private_key_path).read_text(), installation_id)

    def app_jwt(self) -> str:
        """Short-lived JWT identifying the App itself."""
        now = int(time.time())
        payload = {"iat": now - 60, "exp": now + 600, "iss": self.app_id}
        return jwt.encode(payload, self.private_key, algorithm="RS256")

    async def get_token(self, client: httpx.AsyncClient) -> str:
        """Current installation token, exchanged through `client` when missing or near expiry."""
        if self._token and self._expires_at and self._expires_at - datetime.now(UTC) > self.REFRESH_MARGIN:
            return self._token

        response = await client.post(
            f"{self.api_url}/app/installations/{self.installation_id}/access_tokens",
            headers={"Authorization": f"Bearer {self.app_jwt()}"},
        )
        response.raise_for_status()

        data = response.json()
        self._token = data["token"]
        self._expires_at = datetime.fromisoformat(data["expires_at"].replace("Z", "+00:00"))
        logger.debug(f"Installation token for app {self.app_id} valid until {self._expires_at.isoformat()}")
        return self._token


def rate_limit_wait(response: httpx.Response) -> float | None:
    """Seconds to wait before retrying a rate-limited response, None if it was not limited.

    GraphQL reports an exhausted primary limit either as a 403 or as a 200
    whose errors carry type RATE_LIMITED; both wait for X-RateLimit-Reset.
    """
    status = response.status_code
    if status in (403, 429) and "Retry-After" in response.headers:
        return float(response.headers["Retry-After"])

    exhausted = response.headers.get("X-RateLimit-Remaining") == "0"
    if status == 200:
        errors = response.json().get("errors") or []
        exhausted = any(error.get("type") == "RATE_LIMITED" for error in errors)

    if status in (200, 403) and exhausted:
        reset_time = int(response.headers.get("X-RateLimit-Reset", 0))
        return max(reset_time - time.time(), 60) + 1

    if status == 429:
        return 60.0

    return None


class GitHubClient:
    """Async GitHub GraphQL client with automatic rate limit handling.

    Supports both PAT and GitHub App authentication.
    """

    def __init__(
        self,
        token: str | None = None,
        app_auth: GitHubAppAuth | None = None,
        base_url: str = GITHUB_API_URL,
    ):
        """Initialize the client.

        Args:
            token: Personal access token (PAT) for authentication
            app_auth: GitHubAppAuth instance for App authentication
            base_url: REST/GraphQL API root

        If neither credential is provided, falls back to GITHUB_APP_* env vars
        (preferred) and then GITHUB_TOKEN.
        """
        self.app_auth = app_auth
        self.pat_token = token
        self.base_url = base_url

        if self.app_auth is None and self.pat_token is None:
            if GITHUB_APP_ID and GITHUB_APP_PRIVATE_KEY_PATH and GITHUB_APP_INSTALLATION_ID:
                self.app_auth = GitHubAppAuth.from_key_file(
                    GITHUB_APP_ID,
                    GITHUB_APP_PRIVATE_KEY_PATH,
                    GITHUB_APP_INSTALLATION_ID,
                )
            elif GITHUB_TOKEN:
                self.pat_token = GITHUB_TOKEN
            else:
                raise ValueError(
                    "GitHub auth required. Set GITHUB_TOKEN or "
                    "GITHUB_APP_ID + GITHUB_APP_PRIVATE_KEY_PATH + GITHUB_APP_INSTALLATION_ID"
                )

        self._auth_type = "app" if self.app_auth else "pat"
        self.client: httpx.AsyncClient | None = None
        self._request_count = 0

    async def __aenter__(self):
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=30.0,
        )
        return self

    async def __aexit__(self, *args):
        if self.client:
            await self.client.aclose()

    @property
    def auth_type(self) -> str:
        return self._auth_type

    @property
    def request_count(self) -> int:
        return self._request_count

    async def _get_auth_header(self) -> str:
        if self.app_auth:
            return f"Bearer {await self.app_auth.get_token(self.client)}"
        return f"Bearer {self.pat_token}"

    async def _request(
        self,
        method: str,
        path: str,
        json: dict | None = None,
        context: str = "",
        max_retries: int = 3,
    ) -> httpx.Response:
        """Make request with automatic rate limit handling and token refresh."""
        if not self.client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        for attempt in range(max_retries):
            # Re-read each attempt; an App token can lapse during a rate-limit wait
            headers = {"Authorization": await self._get_auth_header()}
            response = await self.client.request(method, path, json=json, headers=headers)
            self._request_count += 1

            wait = rate_limit_wait(response)
            if wait is not None:
                logger.warning(f"{context or path}: rate limited ({response.status_code}). Waiting {wait:.0f}s...")
                await trio.sleep(wait)
                continue

            if response.status_code >= 500:
                wait = 2**attempt
                logger.warning(f"Server error {response.status_code}. Retrying in {wait}s...")
                await trio.sleep(wait)
                continue

            response.raise_for_status()
            return response

        raise RuntimeError(f"Max retries exceeded for {path}")

    async def graphql(self, query: str, variables: dict | None = None, context: str = "") -> dict[str, Any]:
        """Run a GraphQL query and return its `data` payload."""
        response = await self._request(
            "POST", "/graphql", json={"query": query, "variables": variables or {}}, context=context
        )
        result = response.json()

        errors = result.get("errors")
        if errors:
            raise GraphQLError(errors, context)

        return result.get("data") or {}

    async def get_review_threads(self, target: PullRequestTarget) -> list[dict]:
        """Get every review thread of a pull request, in GitHub's order."""
        threads: list[dict] = []
        cursor: str | None = None

        while True:
            data = await self.graphql(
                REVIEW_THREADS_QUERY,
                {
                    "owner": target.owner,
                    "repo": target.repo,
                    "number": target.pr_number,
                    "first": PER_PAGE,
                    "reactions": REACTIONS_PER_COMMENT,
                    "cursor": cursor,
                },
                context=target.label,
            )

            pull_request = (data.get("repository") or {}).get("pullRequest")
            if pull_request is None:
                raise LookupError(f"Pull request {target.label} not found")

            connection = pull_request.get("reviewThreads", {})
            threads.extend(connection.get("nodes", []))

            page_info = connection.get("pageInfo", {})
            if page_info.get("hasNextPage") and page_info.get("endCursor"):
                cursor = page_info["endCursor"]
            else:
                break

        logger.debug(f"{target.label}: fetched {len(threads)} review threads")
        return threads

    async def get_rate_limit(self) -> dict:
        """Get current GraphQL rate limit status."""
        data = await self.graphql("query { rateLimit { limit remaining resetAt } }")
        return data.get("rateLimit", {})
