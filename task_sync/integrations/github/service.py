"""
GitHub integration service.

Fetches repository issues for import as tasks, validated and cached per
repository and filter combination.
"""

import logging
from typing import Callable, Optional

from task_sync.cache import PluginDataStore
from task_sync.integrations.base import BaseIntegrationService
from task_sync.integrations.github.client import GitHubClient
from task_sync.models.github import GitHubIssue
from task_sync.models.settings import GitHubIntegrationSettings
from task_sync.models.validation import validate_records

logger = logging.getLogger(__name__)


class GitHubService(BaseIntegrationService[GitHubIntegrationSettings]):
    """Fetches issues according to the integration settings."""

    service_name = "github"
    settings_model = GitHubIntegrationSettings

    def __init__(
        self,
        settings: GitHubIntegrationSettings,
        store: Optional[PluginDataStore] = None,
        client_factory: Optional[Callable[[GitHubIntegrationSettings], GitHubClient]] = None,
    ):
        super().__init__(settings, store)
        self.client_factory = client_factory or (
            lambda s: GitHubClient(token=s.personal_access_token)
        )

    async def fetch_issues(
        self,
        repository: Optional[str] = None,
        force_refresh: bool = False,
    ) -> list[GitHubIssue]:
        """
        Get issues of a repository.

        Args:
            repository: ``owner/repo``; defaults to the configured default repository
            force_refresh: Bypass the cache

        Returns:
            Issues matching the configured filters, or an empty list if disabled

        Raises:
            ValueError: If no repository is given or configured
            GitHubError: On API failure
            RecordValidationError: If GitHub returned malformed issues
        """
        if not self.is_available():
            return []

        repository = repository or self.settings.default_repository
        if not repository:
            raise ValueError("No repository given and no default repository configured")

        cache = self._cache("issues", list[GitHubIssue])
        key = self.issues_cache_key(repository)
        if not force_refresh:
            cached = cache.get(key)
            if cached is not None:
                logger.debug(f"Using cached issues for {key}")
                return cached

        filters = self.settings.issue_filters
        async with self.client_factory(self.settings) as client:
            raw = await client.list_issues(
                repository,
                state=filters.state,
                assignee=filters.assignee,
                labels=filters.labels,
            )

        issues = validate_records(GitHubIssue, raw)
        if not self.settings.include_pull_requests:
            issues = [issue for issue in issues if not issue.is_pull_request]

        logger.info(f"Fetched {len(issues)} issues from {repository}")
        return cache.set(key, issues)

    async def fetch_all_issues(self, force_refresh: bool = False) -> dict[str, list[GitHubIssue]]:
        """Get issues for every configured repository, keyed by repository."""
        return {
            repository: await self.fetch_issues(repository, force_refresh=force_refresh)
            for repository in self.settings.repositories
        }

    def issues_cache_key(self, repository: str) -> str:
        filters = self.settings.issue_filters
        labels = ",".join(sorted(filters.labels))
        pulls = "prs" if self.settings.include_pull_requests else "issues"
        return f"{repository}:{filters.state}:{filters.assignee}:{labels}:{pulls}"
