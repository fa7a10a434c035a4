"""
Property-based tests for search routing and both search strategies.

Feature: starradar
"""

import asyncio

import httpx
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from starradar.client import StarRadarClient
from starradar.exceptions import InvalidQueryError
from starradar.search import SearchRouter, paginate, parse_query
from starradar.testing import (
    FakeGitHub,
    create_mock_repository,
    make_starred_payloads,
    repo_payload,
    starred_entry,
)
from starradar.transport import RetryConfig
from starradar.types.search import SearchMode, SortKey

STARRED = [
    starred_entry(repo_payload(1, "react", owner="facebook", stars=220000, description="UI library")),
    starred_entry(repo_payload(2, "vue", owner="vuejs", stars=205000, description="Progressive framework")),
    starred_entry(repo_payload(3, "preact", owner="preactjs", stars=36000, language="JavaScript")),
    starred_entry(
        repo_payload(4, "awesome-list", stars=900, description="Links about React and friends")
    ),
    starred_entry(repo_payload(5, "toolbox", stars=15, topics=["react", "cli"])),
]

PLATFORM = [
    repo_payload(101, "react", owner="facebook", stars=220000, description="UI library"),
    repo_payload(102, "vue", owner="vuejs", stars=205000),
    repo_payload(103, "awesome-react", stars=60000, description="react resources"),
    repo_payload(104, "preact", owner="preactjs", stars=36000),
    repo_payload(105, "unloved", stars=0),
]


# ============================================================================
# Query parsing
# ============================================================================


@given(term=st.text(alphabet="abcdefghijklmnopqrstuvwxyz-", min_size=1, max_size=20))
@settings(max_examples=100)
def test_quoted_queries_are_exact(term: str) -> None:
    """
    Property 10: Quoting marks an exact name query

    For any term T, '"T"' SHALL parse to T with exact=True, and T alone
    (with surrounding whitespace) SHALL parse to T with exact=False.
    """
    exact = parse_query(f'  "{term}" ')
    loose = parse_query(f"\t{term}  ")

    assert (exact.term, exact.exact) == (term, True)
    assert (loose.term, loose.exact) == (term, False)


class TestParsedQuery:
    def test_empty_and_whitespace_queries(self) -> None:
        assert parse_query("").is_empty
        assert parse_query("   ").is_empty
        assert parse_query('""').is_empty

    def test_lone_quote_is_not_exact(self) -> None:
        parsed = parse_query('"')

        assert parsed.term == '"'
        assert not parsed.exact

    def test_upstream_text(self) -> None:
        assert parse_query("").upstream_text() == "stars:>0"
        assert parse_query('"react"').upstream_text() == "react in:name"
        assert parse_query("react hooks").upstream_text() == "react hooks"

    def test_exact_match_only_looks_at_the_name(self) -> None:
        query = parse_query('"react"')

        assert query.matches(create_mock_repository(name="react"))
        assert query.matches(create_mock_repository(name="preact"))
        assert not query.matches(create_mock_repository(name="ui", description="React UI kit"))
        assert not query.matches(create_mock_repository(name="ui", topics=("react",)))

    def test_loose_match_looks_at_every_field(self) -> None:
        query = parse_query("ReAcT")

        assert query.matches(create_mock_repository(name="ui", description="React UI kit"))
        assert query.matches(create_mock_repository(name="ui", topics=("react",)))
        assert query.matches(create_mock_repository(name="ui", owner="reactjs"))
        assert query.matches(create_mock_repository(name="ui", language="React"))
        assert not query.matches(create_mock_repository(name="ui", description="Vue kit"))


def test_paginate_rejects_page_zero() -> None:
    with pytest.raises(ValueError):
        paginate([], 0, 30)


@pytest.mark.asyncio
async def test_router_without_strategy_for_mode() -> None:
    with pytest.raises(ValueError):
        await SearchRouter([]).search("react", mode=SearchMode.ALL)


# ============================================================================
# Search within starred
# ============================================================================


class TestStarredSearch:
    @pytest.mark.asyncio
    async def test_empty_query_returns_the_whole_corpus(self) -> None:
        fake = FakeGitHub(starred=STARRED)

        async with fake.client() as client:
            result = await client.search("", mode=SearchMode.STARRED)

        assert result.total_count == 5
        assert {r.id for r in result.repositories} == {1, 2, 3, 4, 5}

    @pytest.mark.asyncio
    async def test_exact_query_matches_names_only(self) -> None:
        fake = FakeGitHub(starred=STARRED)

        async with fake.client() as client:
            result = await client.search('"react"', mode=SearchMode.STARRED, sort=SortKey.STARS)

        assert [r.full_name for r in result.repositories] == ["facebook/react", "preactjs/preact"]
        assert result.total_count == 2

    @pytest.mark.asyncio
    async def test_loose_query_matches_descriptions_and_topics(self) -> None:
        fake = FakeGitHub(starred=STARRED)

        async with fake.client() as client:
            result = await client.search("react", mode=SearchMode.STARRED, sort=SortKey.STARS)

        assert [r.id for r in result.repositories] == [1, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_no_match_is_an_empty_page(self) -> None:
        fake = FakeGitHub(starred=STARRED)

        async with fake.client() as client:
            result = await client.search("svelte", mode=SearchMode.STARRED)

        assert result.repositories == ()
        assert result.total_count == 0
        assert result.total_pages == 0
        assert not result.has_next_page

    @pytest.mark.asyncio
    async def test_pages_and_sorts_without_refetching(self) -> None:
        fake = FakeGitHub(starred=make_starred_payloads(45))

        async with fake.client() as client:
            first = await client.search("", mode=SearchMode.STARRED, sort=SortKey.STARS)
            calls_after_load = len(fake.calls)
            second = await client.search("", mode=SearchMode.STARRED, sort=SortKey.STARS, page=2)
            by_update = await client.search("", mode=SearchMode.STARRED, sort=SortKey.UPDATED)

        assert len(fake.calls) == calls_after_load
        assert len(first.repositories) == 30
        assert len(second.repositories) == 15
        assert first.has_next_page
        assert not second.has_next_page
        stars = [r.stargazers_count for r in first.repositories + second.repositories]
        assert stars == sorted(stars, reverse=True)
        updated = [r.updated_at for r in by_update.repositories]
        assert updated == sorted(updated, reverse=True)

    @pytest.mark.asyncio
    async def test_recently_starred_sort(self) -> None:
        fake = FakeGitHub(starred=make_starred_payloads(10))

        async with fake.client() as client:
            result = await client.search("", mode=SearchMode.STARRED, sort=SortKey.STARRED)

        # starred_at grows with the id in the fixtures
        assert [r.id for r in result.repositories] == list(range(10, 0, -1))

    @pytest.mark.asyncio
    async def test_unsupported_local_sort_keeps_corpus_order(self) -> None:
        fake = FakeGitHub(starred=STARRED)

        async with fake.client() as client:
            corpus = await client.load_starred()
            result = await client.search("", mode=SearchMode.STARRED, sort=SortKey.HELP_WANTED)

        assert result.repositories == corpus.repositories


# ============================================================================
# Search all of GitHub
# ============================================================================


class TestPlatformSearch:
    @pytest.mark.asyncio
    async def test_empty_query_lists_popular_repositories(self) -> None:
        fake = FakeGitHub(search_items=PLATFORM)

        async with fake.client() as client:
            result = await client.search("  ", mode=SearchMode.ALL, sort=SortKey.STARS)

        assert fake.calls[-1].params["q"] == "stars:>0"
        assert [r.id for r in result.repositories] == [101, 102, 103, 104]

    @pytest.mark.asyncio
    async def test_exact_query_is_restricted_to_names(self) -> None:
        fake = FakeGitHub(search_items=PLATFORM)

        async with fake.client() as client:
            result = await client.search('"react"', mode=SearchMode.ALL)

        assert fake.calls[-1].params["q"] == "react in:name"
        assert {r.id for r in result.repositories} == {101, 103, 104}

    @pytest.mark.parametrize(
        ("sort", "expected"),
        [
            (SortKey.STARS, "stars"),
            (SortKey.FORKS, "forks"),
            (SortKey.UPDATED, "updated"),
            (SortKey.HELP_WANTED, "help-wanted-issues"),
            (SortKey.STARRED, "updated"),
        ],
    )
    @pytest.mark.asyncio
    async def test_sort_keys_map_to_github_sorts(self, sort: SortKey, expected: str) -> None:
        fake = FakeGitHub(search_items=PLATFORM)

        async with fake.client() as client:
            await client.search("react", mode=SearchMode.ALL, sort=sort)

        assert fake.calls[-1].params["sort"] == expected
        assert fake.calls[-1].params["order"] == "desc"

    @pytest.mark.asyncio
    async def test_best_match_sends_no_sort(self) -> None:
        fake = FakeGitHub(search_items=PLATFORM)

        async with fake.client() as client:
            await client.search("react", mode=SearchMode.ALL, sort=SortKey.BEST_MATCH)

        assert "sort" not in fake.calls[-1].params

    @pytest.mark.asyncio
    async def test_results_are_marked_from_the_loaded_corpus(self) -> None:
        fake = FakeGitHub(starred=[starred_entry(PLATFORM[0])], search_items=PLATFORM)

        async with fake.client() as client:
            await client.load_starred()
            result = await client.search("react", mode=SearchMode.ALL)

        flags = {r.id: r.is_starred for r in result.repositories}
        assert flags[101] is True
        assert flags[103] is False

    @pytest.mark.asyncio
    async def test_clamped_total_is_reported(self) -> None:
        fake = FakeGitHub(search_items=PLATFORM, search_total=250000)

        async with fake.client() as client:
            result = await client.search("", mode=SearchMode.ALL)

        assert result.total_count == 1000
        assert result.raw_total == 250000
        assert result.is_clamped
        assert result.total_pages == 34


# ============================================================================
# Overlapping searches
# ============================================================================


class TestOverlappingSearches:
    @pytest.mark.asyncio
    async def test_last_submitted_search_wins(self) -> None:
        fake = FakeGitHub(search_items=PLATFORM)
        fake.delay_search("vue", 0.2)

        async with fake.client() as client:
            slow = asyncio.ensure_future(client.search("vue", mode=SearchMode.ALL))
            await asyncio.sleep(0)
            fast = await client.search("react", mode=SearchMode.ALL)
            stale = await slow

        assert stale is None
        assert fast is not None
        assert client.cache.search is not None
        assert client.cache.search.query == "react"
        assert client.cache.search.result == fast

    @pytest.mark.asyncio
    async def test_sequential_searches_each_apply(self) -> None:
        fake = FakeGitHub(starred=STARRED)
        seen = []

        async with fake.client() as client:
            client.cache.subscribe(lambda state: seen.append(state.search))
            await client.search("vue", mode=SearchMode.STARRED)
            await client.search("react", mode=SearchMode.STARRED)

        queries = [view.query for view in seen if view is not None]
        assert queries == ["vue", "react"]

    @pytest.mark.asyncio
    async def test_superseded_failure_is_discarded(self) -> None:
        fake = FakeGitHub(search_items=PLATFORM)

        async def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params.get("q") == "vue":
                await asyncio.sleep(0.1)
                return httpx.Response(422, json={"message": "Validation Failed"})
            return await fake.handle(request)

        client = StarRadarClient(
            token="test-token",
            base_url="https://api.github.test",
            retry_config=RetryConfig(max_retries=0),
            transport=httpx.MockTransport(handler),
        )
        async with client:
            slow = asyncio.ensure_future(client.search("vue", mode=SearchMode.ALL))
            await asyncio.sleep(0)
            fast = await client.search("react", mode=SearchMode.ALL)
            stale = await slow

        assert stale is None
        assert fast is not None
        assert client.cache.search.query == "react"

    @pytest.mark.asyncio
    async def test_current_failure_is_raised(self) -> None:
        fake = FakeGitHub(search_items=PLATFORM)
        fake.fail_path("/search/repositories", 422, message="Validation Failed")

        async with fake.client() as client:
            with pytest.raises(InvalidQueryError):
                await client.search("react", mode=SearchMode.ALL)

        assert client.cache.search is None
