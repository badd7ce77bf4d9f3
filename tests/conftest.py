"""Shared test fixtures for gitlab-client tests."""

import os
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import patch

import httpx
import pytest

from gitlab_client import GitLabClient

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def mock_env_vars() -> Generator[dict[str, str], None, None]:
    """Set up test environment variables."""
    env = {
        "GITLAB_TOKEN": "test-token-12345",
        "GITLAB_URL": "https://gitlab.example.com",
        "GITLAB_BASE_URL": "",
    }
    with patch.dict(os.environ, env, clear=False):
        yield env


@pytest.fixture
def make_client(mock_env_vars: dict[str, str]) -> Generator[Callable[..., GitLabClient], None, None]:
    """Factory for clients whose requests are answered by an httpx.MockTransport handler."""
    clients: list[GitLabClient] = []

    def factory(handler: Handler, **kwargs: Any) -> GitLabClient:
        client = GitLabClient(transport=httpx.MockTransport(handler), **kwargs)
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()


@pytest.fixture
def recorded() -> list[httpx.Request]:
    """Requests seen by a handler built with ``responder``."""
    return []


@pytest.fixture
def responder(recorded: list[httpx.Request]) -> Callable[..., Handler]:
    """Build a handler that records each request and answers with a fixed response."""

    def build(status_code: int = 200, json: Any = None, content: bytes | None = None, **kwargs: Any) -> Handler:
        def handler(request: httpx.Request) -> httpx.Response:
            request.read()
            recorded.append(request)
            if content is not None:
                return httpx.Response(status_code, content=content, **kwargs)
            if json is not None:
                return httpx.Response(status_code, json=json, **kwargs)
            return httpx.Response(status_code, **kwargs)

        return handler

    return build


@pytest.fixture
def sample_merge_request() -> dict:
    """Sample GitLab merge request response."""
    return {
        "id": 456,
        "iid": 1,
        "project_id": 123,
        "title": "Add new feature",
        "description": "This MR adds a new feature",
        "state": "opened",
        "source_branch": "feature-branch",
        "target_branch": "main",
        "author": {"id": 1, "username": "testuser", "name": "Test User"},
        "web_url": "https://gitlab.example.com/group/test-project/-/merge_requests/1",
        "draft": False,
        "detailed_merge_status": "mergeable",
        "has_conflicts": False,
        "labels": ["feature"],
        "milestone": None,
        "diff_refs": {"base_sha": "aaa", "head_sha": "bbb", "start_sha": "ccc"},
    }


@pytest.fixture
def sample_pipeline() -> dict:
    """Sample GitLab pipeline response."""
    return {
        "id": 789,
        "iid": 10,
        "project_id": 123,
        "status": "success",
        "source": "push",
        "ref": "main",
        "sha": "abc123def456",
        "web_url": "https://gitlab.example.com/group/test-project/-/pipelines/789",
        "created_at": "2024-01-15T10:00:00Z",
        "updated_at": "2024-01-15T10:15:00Z",
    }


@pytest.fixture
def sample_job() -> dict:
    """Sample GitLab job response."""
    return {
        "id": 1001,
        "name": "test",
        "status": "success",
        "stage": "test",
        "ref": "main",
        "web_url": "https://gitlab.example.com/group/test-project/-/jobs/1001",
        "duration": 120.5,
        "started_at": "2024-01-15T10:00:00Z",
        "finished_at": "2024-01-15T10:02:00Z",
        "pipeline": {"id": 789, "project_id": 123, "ref": "main", "sha": "abc123def456", "status": "success"},
    }


@pytest.fixture
def sample_discussion() -> dict:
    """Sample GitLab discussion response."""
    return {
        "id": "abc123",
        "individual_note": False,
        "notes": [
            {
                "id": 1,
                "body": "This looks good!",
                "author": {"username": "reviewer", "name": "Reviewer"},
                "created_at": "2024-01-15T10:00:00Z",
                "resolvable": True,
                "resolved": False,
            }
        ],
    }


@pytest.fixture
def sample_issue() -> dict:
    """Sample GitLab issue response."""
    return {
        "id": 999,
        "iid": 42,
        "project_id": 123,
        "title": "Bug in login",
        "description": "Users cannot log in",
        "state": "opened",
        "author": {"id": 1, "username": "testuser", "name": "Test User"},
        "web_url": "https://gitlab.example.com/group/test-project/-/issues/42",
        "labels": ["bug"],
        "created_at": "2024-01-15T10:00:00Z",
        "due_date": None,
        "weight": None,
    }


# Integration test fixtures


@pytest.fixture
def gitlab_token() -> str | None:
    """Get GitLab token from environment for integration tests."""
    return os.getenv("GITLAB_TOKEN")


@pytest.fixture
def gitlab_url() -> str:
    """Get GitLab URL from environment for integration tests."""
    return os.getenv("GITLAB_URL", "https://gitlab.com")


@pytest.fixture
def skip_without_token(gitlab_token: str | None) -> None:
    """Skip test if GITLAB_TOKEN is not set."""
    if not gitlab_token:
        pytest.skip("GITLAB_TOKEN not set - skipping integration test")
