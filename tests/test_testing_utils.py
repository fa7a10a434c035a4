"""
Tests for StarRadar testing utilities.

Verifies that FakeGitHub and the factories behave like the endpoints they stand in for.
"""

import pytest

from starradar.exceptions import NotFoundError, RateLimitedError, UpstreamError
from starradar.testing import (
    FakeGitHub,
    create_mock_repository,
    make_starred_payloads,
    repo_payload,
    starred_entry,
)


class TestFactories:
    def test_starred_payloads_have_distinct_ids_and_stars(self) -> None:
        entries = make_starred_payloads(200, start_id=10)

        ids = [e["repo"]["id"] for e in entries]
        stars = [e["repo"]["stargazers_count"] for e in entries]
        assert ids == list(range(10, 210))
        assert len(set(stars)) == 200
        assert stars != sorted(stars, reverse=True)

    def test_starred_entry_wraps_payload(self) -> None:
        entry = starred_entry(repo_payload(3))

        assert entry["repo"]["full_name"] == "octo/repo-3"
        assert entry["starred_at"] == "2024-01-01T00:03:00Z"

    def test_create_mock_repository_defaults(self) -> None:
        repo = create_mock_repository(repo_id=4, stars=10)

        assert repo.full_name == "octo/repo-4"
        assert repo.stargazers_count == 10
        assert repo.starred_at is None
        assert not repo.is_starred


class TestFakeGitHub:
    @pytest.mark.asyncio
    async def test_records_calls(self, starradar_client, fake_github: FakeGitHub) -> None:
        await starradar_client.starred.count()
        await starradar_client.rate_limit()

        assert [c.path for c in fake_github.calls] == ["/user/starred", "/rate_limit"]
        assert len(fake_github.count_probes) == 1
        assert fake_github.get_calls("GET", "/rate_limit")[0].params == {}

    @pytest.mark.asyncio
    async def test_injected_failures_can_expire(self, fake_github: FakeGitHub) -> None:
        fake_github.fail_path("/rate_limit", 502, times=1)

        async with fake_github.client() as client:
            with pytest.raises(UpstreamError):
                await client.rate_limit()
            status = await client.rate_limit()

        assert status.remaining == 4999

    @pytest.mark.asyncio
    async def test_injected_headers_reach_the_classifier(self, fake_github: FakeGitHub) -> None:
        fake_github.fail_path(
            "/user/starred",
            403,
            headers={"x-ratelimit-remaining": "0", "x-ratelimit-reset": "1700000000"},
        )

        async with fake_github.client() as client:
            with pytest.raises(RateLimitedError):
                await client.load_starred()

    @pytest.mark.asyncio
    async def test_reset_clears_calls_and_failures(self, fake_github: FakeGitHub) -> None:
        fake_github.fail_page(1)
        fake_github.delay_search("x", 1.0)

        async with fake_github.client() as client:
            await client.starred.count()
            fake_github.reset()
            assert fake_github.calls == []

            page = await client.starred.list_page(page=1, per_page=100)

        assert len(page) == 45

    @pytest.mark.asyncio
    async def test_plain_accept_returns_bare_repositories(self, fake_github: FakeGitHub) -> None:
        async with fake_github.client() as client:
            data = await client.transport.get_json("/user/starred", params={"per_page": 2})

        assert "repo" not in data[0]
        assert data[0]["id"] == 1

    @pytest.mark.asyncio
    async def test_unknown_path_is_not_found(self) -> None:
        async with FakeGitHub().client() as client:
            with pytest.raises(NotFoundError):
                await client.transport.request("GET", "/orgs/octo")
