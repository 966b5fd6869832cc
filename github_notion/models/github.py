"""GitHub pull request webhook payload models."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel


PullRequestAction = Literal[
    "opened",
    "closed",
    "edited",
    "reopened",
    "synchronize",
    "ready_for_review",
    "converted_to_draft",
    "assigned",
    "unassigned",
    "review_requested",
    "review_request_removed",
    "labeled",
    "unlabeled",
]


class GitHubUser(BaseModel):
    """User or bot account (sender, author, assignees)."""

    login: str
    id: int
    node_id: str
    avatar_url: str
    gravatar_id: Optional[str] = None
    url: str
    html_url: str
    type: str
    site_admin: bool


class GitHubRepository(BaseModel):
    """Repository the pull request belongs to."""

    id: int
    node_id: str
    name: str
    full_name: str
    private: bool
    html_url: str
    description: Optional[str] = None
    fork: bool
    url: str
    default_branch: str
    owner: GitHubUser


class GitHubPullRequestRef(BaseModel):
    """Head or base side of a pull request."""

    label: str
    ref: str  # branch name
    sha: str
    user: GitHubUser
    repo: Optional[GitHubRepository] = None


class GitHubLabel(BaseModel):
    """Issue/pull request label."""

    id: int
    node_id: str
    url: str
    name: str
    color: str
    default: bool
    description: Optional[str] = None


class GitHubPullRequest(BaseModel):
    """
    Pull request snapshot carried by the webhook.

    Only title, head.ref, draft, merged and html_url drive task updates; the
    remaining fields are validated and used for logging.
    """

    id: int
    node_id: str
    number: int
    state: Literal["open", "closed"]
    locked: bool
    title: str
    body: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    closed_at: Optional[datetime] = None
    merged_at: Optional[datetime] = None
    merge_commit_sha: Optional[str] = None
    draft: bool
    html_url: str
    url: str
    user: GitHubUser
    assignee: Optional[GitHubUser] = None
    assignees: List[GitHubUser]
    labels: List[GitHubLabel]
    head: GitHubPullRequestRef
    base: GitHubPullRequestRef
    merged: bool
    mergeable: Optional[bool] = None
    rebaseable: Optional[bool] = None
    mergeable_state: str
    comments: int
    review_comments: int
    maintainer_can_modify: bool
    commits: int
    additions: int
    deletions: int
    changed_files: int


class GitHubInstallation(BaseModel):
    """GitHub App installation reference."""

    id: int
    node_id: str


class GitHubPullRequestWebhook(BaseModel):
    """GitHub `pull_request` webhook payload."""

    action: PullRequestAction
    number: int
    pull_request: GitHubPullRequest
    repository: GitHubRepository
    sender: GitHubUser
    label: Optional[GitHubLabel] = None
    assignee: Optional[GitHubUser] = None
    requested_reviewer: Optional[GitHubUser] = None
    installation: Optional[GitHubInstallation] = None
