"""
Pytest fixtures and factories for StarRadar testing.

Provides GitHub-shaped payload builders, Repository factories and fixtures
that wire a StarRadarClient to the in-memory FakeGitHub.
"""

from collections.abc import AsyncIterator
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
import pytest_asyncio

from starradar.client import StarRadarClient
from starradar.testing.fake import FakeGitHub, iso_timestamp
from starradar.types.repos import Owner, Repository

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def repo_payload(
    repo_id: int,
    name: str | None = None,
    owner: str = "octo",
    stars: int = 0,
    forks: int = 0,
    description: str | None = None,
    language: str | None = None,
    topics: list[str] | None = None,
    updated_at: datetime | None = None,
    pushed_at: datetime | None = None,
    created_at: datetime | None = None,
) -> dict[str, Any]:
    """A repository object as the GitHub REST API returns it."""
    name = name or f"repo-{repo_id}"
    updated_at = updated_at or BASE_TIME + timedelta(hours=repo_id)
    return {
        "id": repo_id,
        "name": name,
        "full_name": f"{owner}/{name}",
        "owner": {"login": owner, "avatar_url": f"https://avatars.test/{owner}"},
        "description": description,
        "html_url": f"https://github.com/{owner}/{name}",
        "language": language,
        "topics": topics or [],
        "license": {"spdx_id": "MIT", "name": "MIT License"},
        "stargazers_count": stars,
        "forks_count": forks,
        "watchers_count": stars,
        "open_issues_count": 0,
        "created_at": iso_timestamp(created_at or BASE_TIME - timedelta(days=365)),
        "pushed_at": iso_timestamp(pushed_at or updated_at),
        "updated_at": iso_timestamp(updated_at),
    }


def starred_entry(
    payload: dict[str, Any], starred_at: datetime | None = None
) -> dict[str, Any]:
    """Wrap a repository payload the way the star+json format does."""
    return {
        "starred_at": iso_timestamp(starred_at or BASE_TIME + timedelta(minutes=payload["id"])),
        "repo": payload,
    }


def make_starred_payloads(count: int, start_id: int = 1) -> list[dict[str, Any]]:
    """
    ``count`` starred entries with distinct ids and shuffled star counts.

    Star counts are a permutation of distinct values, so "highest starred"
    is unambiguous, and they are deliberately not in listing order.
    """
    entries = []
    for offset in range(count):
        repo_id = start_id + offset
        stars = (offset * 7919) % (count * 10 + 1)
        entries.append(starred_entry(repo_payload(repo_id, stars=stars)))
    return entries


def create_mock_repository(
    repo_id: int = 1,
    name: str | None = None,
    owner: str = "octo",
    stars: int = 0,
    description: str | None = None,
    language: str | None = None,
    topics: tuple[str, ...] = (),
    starred_at: datetime | None = None,
    updated_at: datetime | None = None,
    is_starred: bool = False,
) -> Repository:
    """Create a Repository directly, without going through a payload."""
    name = name or f"repo-{repo_id}"
    return Repository(
        id=repo_id,
        name=name,
        full_name=f"{owner}/{name}",
        owner=Owner(login=owner),
        description=description,
        language=language,
        topics=topics,
        stargazers_count=stars,
        updated_at=updated_at or BASE_TIME + timedelta(hours=repo_id),
        starred_at=starred_at,
        is_starred=is_starred,
    )


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fake_github() -> FakeGitHub:
    """A FakeGitHub with 45 starred repositories and nothing searchable."""
    return FakeGitHub(starred=make_starred_payloads(45))


@pytest_asyncio.fixture
async def starradar_client(fake_github: FakeGitHub) -> AsyncIterator[StarRadarClient]:
    """
    A StarRadarClient wired to ``fake_github``.

    Example:
        ```python
        async def test_corpus(starradar_client, fake_github):
            result = await starradar_client.load_starred()
            assert result.fetched_count == 45
        ```
    """
    client = fake_github.client()
    yield client
    await client.close()


@pytest.fixture
def sample_repository() -> Repository:
    return create_mock_repository(
        repo_id=9001,
        name="radar",
        stars=1234,
        description="Keep an eye on your stars",
        language="Python",
        topics=("github", "stars"),
    )
