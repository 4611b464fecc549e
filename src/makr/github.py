"""GitHub REST API client used to fork templates before cloning."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

import httpx
from tenacity import RetryError, Retrying, retry_if_exception, stop_after_attempt, wait_fixed

from makr.constants import ForkPolling
from makr.exceptions import AuthenticationError, ForkNotReadyError, GitHubError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"


def _is_transient(exc: BaseException) -> bool:
    # A rejected token will not start working on the next poll.
    return isinstance(exc, GitHubError) and not isinstance(exc, AuthenticationError)


@dataclass
class ForkResult:
    """Where the new fork lives."""

    owner: str
    repo: str
    clone_url: str


class GitHubClient:
    """Minimal GitHub API client (fork + repository lookup).

    Args:
        token: Personal access token with repo scope.
        base_url: API root, overridable for GitHub Enterprise.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests use MockTransport).
        sleep: Function used between readiness polls.
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
        sleep: Callable[[float], None] = time.sleep,
        max_attempts: int = ForkPolling.MAX_ATTEMPTS,
        poll_delay: float = ForkPolling.DELAY_SECONDS,
    ):
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": "2022-11-28",
            },
        )
        self._sleep = sleep
        self.max_attempts = max_attempts
        self.poll_delay = poll_delay

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, path: str, **kwargs) -> dict[str, Any]:
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise GitHubError(f"GitHub request failed: {method} {path}", details=str(e)) from e

        if response.status_code in (401, 403):
            raise AuthenticationError(
                "GitHub rejected the token. Run \"makr init\" to set a valid one.",
                details=response.text,
            )
        if response.is_error:
            raise GitHubError(
                f"GitHub returned {response.status_code} for {method} {path}",
                details=response.text,
            )
        try:
            payload = response.json()
        except ValueError as e:
            raise GitHubError(
                f"Unexpected response from GitHub for {method} {path}",
                details=response.text[:200] or str(e),
            ) from e
        if not isinstance(payload, dict):
            raise GitHubError(
                f"Unexpected response from GitHub for {method} {path}",
                details=response.text[:200],
            )
        return payload

    def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        """Fetch repository metadata; raises GitHubError if it is not reachable."""
        return self._request("GET", f"/repos/{owner}/{repo}")

    def wait_for_repository(self, owner: str, repo: str) -> None:
        """Poll until the repository answers, at a fixed delay.

        GitHub creates forks asynchronously, so a fresh fork can 404 for a
        few seconds.

        Raises:
            ForkNotReadyError: If every attempt failed.
        """
        retrying = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_fixed(self.poll_delay),
            retry=retry_if_exception(_is_transient),
            sleep=self._sleep,
        )
        try:
            for attempt in retrying:
                with attempt:
                    logger.debug(
                        "Checking fork %s/%s (attempt %d)",
                        owner,
                        repo,
                        attempt.retry_state.attempt_number,
                    )
                    self.get_repository(owner, repo)
        except RetryError as e:
            raise ForkNotReadyError(
                "Fork created but not yet available. Try again shortly.",
                details=str(e.last_attempt.exception()),
            ) from e

    def fork_repository(self, owner: str, repo: str) -> ForkResult:
        """Fork ``owner/repo`` into the token's account and wait for it.

        Raises:
            AuthenticationError: If the token is rejected.
            GitHubError: If the fork request fails.
            ForkNotReadyError: If the fork never became reachable.
        """
        logger.info("Forking %s/%s", owner, repo)
        data = self._request("POST", f"/repos/{owner}/{repo}/forks", json={"private": True})

        fork_owner = (data.get("owner") or {}).get("login")
        fork_repo = data.get("name")
        clone_url = data.get("clone_url")
        if not fork_owner or not fork_repo or not clone_url:
            raise GitHubError("Failed to resolve fork repository details")

        self.wait_for_repository(fork_owner, fork_repo)
        logger.info("Fork ready: %s/%s", fork_owner, fork_repo)
        return ForkResult(owner=fork_owner, repo=fork_repo, clone_url=clone_url)
