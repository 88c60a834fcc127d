"""
GitHub REST API client with retry and error handling.

Provides a thin async interface over the endpoints the issue import needs.
"""

import logging
from typing import Any, Optional, Sequence

import httpx
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from task_sync.config import get_settings
from task_sync.exceptions import (
    GitHubAuthError,
    GitHubError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubServerError,
)

logger = logging.getLogger(__name__)

MAX_PAGES = 10
PER_PAGE = 100


def _is_retryable_error(exception: BaseException) -> bool:
    """Check if an exception should trigger a retry."""
    return isinstance(exception, GitHubError) and exception.retryable


def _raise_for_status(response: httpx.Response) -> None:
    """Convert an error response to the appropriate GitHubError."""
    status = response.status_code
    if status < 400:
        return

    message = response.text
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and "message" in body:
        message = body["message"]

    if status == 401:
        raise GitHubAuthError("Authentication failed - token may be invalid or revoked")
    elif status == 403:
        if response.headers.get("x-ratelimit-remaining") == "0":
            raise GitHubRateLimitError("API rate limit exhausted")
        raise GitHubAuthError(f"Access denied: {message}")
    elif status == 404:
        raise GitHubNotFoundError(f"Not found: {response.request.url.path}")
    elif status == 429:
        raise GitHubRateLimitError("Rate limit exceeded - too many requests")
    elif status >= 500:
        raise GitHubServerError(f"GitHub server error ({status})")
    else:
        raise GitHubError(f"GitHub API error ({status}): {message}")


class GitHubClient:
    """
    Async wrapper around the GitHub REST API.

    Provides:
    - Automatic retry with exponential backoff on rate limits and 5xx
    - Consistent error handling
    - Link-header pagination for list endpoints
    """

    def __init__(
        self,
        token: str = "",
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"

        self._client = httpx.AsyncClient(
            base_url=base_url or settings.github_api_url,
            headers=headers,
            timeout=timeout or settings.http_timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "GitHubClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception(_is_retryable_error),
        reraise=True,
    )
    async def get(self, url: str, params: Optional[dict[str, Any]] = None) -> httpx.Response:
        """
        GET a path or absolute URL.

        Raises:
            GitHubError: On transport failure or error status
        """
        try:
            response = await self._client.get(url, params=params)
        except httpx.TimeoutException as e:
            raise GitHubServerError("Request timed out", original_error=e) from e
        except httpx.HTTPError as e:
            raise GitHubError(f"Request failed: {e}", original_error=e) from e

        _raise_for_status(response)
        return response

    async def get_paginated(
        self,
        path: str,
        params: Optional[dict[str, Any]] = None,
        max_pages: int = MAX_PAGES,
    ) -> list[Any]:
        """GET every page of a list endpoint, following ``Link: rel="next"``."""
        items: list[Any] = []
        url: Optional[str] = path
        page_params = {"per_page": PER_PAGE, **(params or {})}

        for _ in range(max_pages):
            if url is None:
                break
            response = await self.get(url, params=page_params)
            page = response.json()
            if not isinstance(page, list):
                raise GitHubError(f"Expected a list from {path}, got {type(page).__name__}")
            items.extend(page)

            url = response.links.get("next", {}).get("url")
            # The next URL already carries the query string
            page_params = None
        else:
            if url is not None:
                logger.warning(f"Stopped paginating {path} after {max_pages} pages")

        return items

    async def list_issues(
        self,
        repository: str,
        state: str = "open",
        assignee: str = "",
        labels: Sequence[str] = (),
    ) -> list[dict[str, Any]]:
        """
        List issues (and pull requests) of ``owner/repo``.

        Raises:
            ValueError: If repository is not in owner/repo form
            GitHubError: On API failure
        """
        if repository.count("/") != 1:
            raise ValueError(f"Repository must be 'owner/repo', got '{repository}'")

        params: dict[str, Any] = {"state": state}
        if assignee:
            params["assignee"] = assignee
        if labels:
            params["labels"] = ",".join(labels)

        return await self.get_paginated(f"/repos/{repository}/issues", params=params)
