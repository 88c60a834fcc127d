"""
GitHub REST API record models.

Only the fields the issue import uses are declared; the rest of the API
response is ignored.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from task_sync.models.base import SnakeRecord, StrictInt, StrictStr


class GitHubUser(SnakeRecord):
    login: StrictStr


class GitHubLabel(SnakeRecord):
    name: StrictStr
    color: Optional[StrictStr] = None


class GitHubPullRequestRef(SnakeRecord):
    url: StrictStr
    html_url: StrictStr
    diff_url: StrictStr
    patch_url: StrictStr


class GitHubIssue(SnakeRecord):
    """
    An issue from /repos/{owner}/{repo}/issues.

    GitHub returns pull requests from the same endpoint; those carry a
    pull_request object.
    """

    id: StrictInt
    number: StrictInt
    title: StrictStr
    body: Optional[StrictStr]
    state: Literal["open", "closed"]
    assignee: Optional[GitHubUser]
    labels: list[GitHubLabel] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    html_url: StrictStr
    pull_request: Optional[GitHubPullRequestRef] = None

    @property
    def is_pull_request(self) -> bool:
        return self.pull_request is not None

    @property
    def label_names(self) -> list[str]:
        return [label.name for label in self.labels]
