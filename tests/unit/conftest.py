"""
Shared fixtures and payload builders for unit tests.
"""

import copy
import hashlib
import hmac
import json
import os
from typing import Any, Dict, List, Optional, Sequence
from unittest.mock import patch

import pytest

from github_notion.errors import NotionRequestFailureError
from github_notion.models.api_response import LinksUpdateResult, StatusUpdateResult


TEST_WEBHOOK_SECRET = "github-webhook-secret-test"
MOCK_NOTION_PAGE_ID = "mock-notion-page-id"
MOCK_DATA_SOURCE_ID = "mock-data-source-id"

TEST_ENV = {
    "GITHUB_WEBHOOK_SECRET": TEST_WEBHOOK_SECRET,
    "NOTION_TOKEN": "notion-token-test",
    "NOTION_DATABASE_ID": "notion-database-id-test",
    "NOTION_TASK_ID_PROPERTY": "Task ID",
    "NOTION_TASK_ID_PREFIX": "GEN",
    "NOTION_DRY_RUN": "false",
    "ENVIRONMENT": "production",
    "API_VERSION": "1.2.3",
}


def make_user(login: str = "testuser", user_id: int = 1) -> Dict[str, Any]:
    return {
        "login": login,
        "id": user_id,
        "node_id": f"user_node{user_id}",
        "avatar_url": f"https://github.com/images/error/{login}_happy.gif",
        "gravatar_id": None,
        "url": f"https://api.github.com/users/{login}",
        "html_url": f"https://github.com/{login}",
        "type": "User",
        "site_admin": False,
    }


def make_repository() -> Dict[str, Any]:
    return {
        "id": 1296269,
        "node_id": "repo_node1",
        "name": "test-repo",
        "full_name": "testuser/test-repo",
        "private": False,
        "html_url": "https://github.com/testuser/test-repo",
        "description": "Test repository for webhooks",
        "fork": False,
        "url": "https://api.github.com/repos/testuser/test-repo",
        "default_branch": "main",
        "owner": make_user(),
    }


def make_pull_request_payload(
    title: str = "[GEN-9999] fix",
    branch: str = "GEN-9999",
    draft: bool = False,
    merged: bool = False,
    action: str = "opened",
    number: int = 123,
) -> Dict[str, Any]:
    """Build a complete `pull_request` webhook payload."""
    repository = make_repository()
    user = make_user()
    return {
        "action": action,
        "number": number,
        "pull_request": {
            "id": 279147437,
            "node_id": "PR_node123",
            "number": number,
            "state": "closed" if merged else "open",
            "locked": False,
            "title": title,
            "body": "This PR fixes a critical issue with webhook processing",
            "created_at": "2024-01-01T00:00:00Z",
            "updated_at": "2024-01-02T10:00:00Z",
            "closed_at": "2024-01-03T15:00:00Z" if merged else None,
            "merged_at": "2024-01-03T15:00:00Z" if merged else None,
            "merge_commit_sha": "abc123def456" if merged else None,
            "draft": draft,
            "html_url": f"https://github.com/testuser/test-repo/pull/{number}",
            "url": f"https://api.github.com/repos/testuser/test-repo/pulls/{number}",
            "user": user,
            "assignee": None,
            "assignees": [],
            "labels": [
                {
                    "id": 208045946,
                    "node_id": "label_node1",
                    "url": "https://api.github.com/repos/testuser/test-repo/labels/bug",
                    "name": "bug",
                    "color": "d73a4a",
                    "default": True,
                    "description": "Something isn't working",
                }
            ],
            "head": {
                "label": f"testuser:{branch}",
                "ref": branch,
                "sha": "abc123def456",
                "user": user,
                "repo": copy.deepcopy(repository),
            },
            "base": {
                "label": "testuser:main",
                "ref": "main",
                "sha": "def456abc123",
                "user": user,
                "repo": copy.deepcopy(repository),
            },
            "merged": merged,
            "mergeable": True,
            "rebaseable": True,
            "mergeable_state": "clean",
            "comments": 0,
            "review_comments": 0,
            "maintainer_can_modify": False,
            "commits": 1,
            "additions": 10,
            "deletions": 2,
            "changed_files": 1,
        },
        "repository": repository,
        "sender": user,
    }


def encode_payload(payload: Dict[str, Any]) -> bytes:
    return json.dumps(payload).encode("utf-8")


def generate_signature(body: bytes, secret: str = TEST_WEBHOOK_SECRET) -> str:
    """Generate a GitHub `X-Hub-Signature-256` value."""
    return "sha256=" + hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()


class FakeTaskStore:
    """In-memory task store recording every call."""

    def __init__(self, page_ids: Optional[Dict[str, str]] = None, missing: Sequence[str] = ()):
        self.page_ids = page_ids or {}
        self.missing = set(missing)
        self.calls: List[tuple] = []

    async def lookup(self, task_id: str) -> str:
        self.calls.append(("lookup", task_id))
        if task_id in self.missing:
            raise NotionRequestFailureError(f"No Notion task found for {task_id}")
        return self.page_ids.get(task_id, MOCK_NOTION_PAGE_ID)

    async def set_status(self, page_id, status) -> StatusUpdateResult:
        self.calls.append(("set_status", page_id, status))
        return StatusUpdateResult(page_id=page_id, new_status=status)

    async def set_links(self, page_id, urls) -> LinksUpdateResult:
        self.calls.append(("set_links", page_id, list(urls)))
        return LinksUpdateResult(page_id=page_id, links=list(dict.fromkeys(urls)))


class StaticSystemInfo:
    """Deterministic diagnostics."""

    def get_uptime(self) -> float:
        return 0.0

    def get_memory_usage(self) -> Dict[str, int]:
        return {"maxRss": 1_000_000}

    def get_python_version(self) -> str:
        return "0.0.0"


@pytest.fixture
def test_env():
    """Patch the environment with a complete, production-like configuration."""
    with patch.dict(os.environ, TEST_ENV):
        yield TEST_ENV


@pytest.fixture
def fake_store():
    return FakeTaskStore()
