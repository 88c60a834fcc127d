"""
GitHub integration for Task Sync.
"""

from task_sync.integrations.github.client import GitHubClient
from task_sync.integrations.github.service import GitHubService

__all__ = ["GitHubClient", "GitHubService"]
