#!/usr/bin/env python3
"""
Basic StarRadar usage example.

Runs entirely offline against the in-memory FakeGitHub, so it needs the
test extra (pip install -e ".[test]") but no token.
Run with: python examples/basic_usage.py
"""

import asyncio
import logging

from starradar import SearchMode, SortKey, StarRadarError, configure_logging
from starradar.testing import FakeGitHub, make_starred_payloads, repo_payload


async def main() -> None:
    configure_logging(level=logging.INFO)
    print("=== StarRadar Basic Usage Example ===\n")

    fake = FakeGitHub(
        starred=make_starred_payloads(513),
        search_items=[
            repo_payload(10_001, "react", owner="facebook", stars=220_000, description="UI library"),
            repo_payload(10_002, "awesome-react", stars=60_000, description="react resources"),
        ],
        repositories=[repo_payload(20_000, "newcomer", stars=3)],
    )
    fake.fail_page(2)

    async with fake.client(max_repos=150) as client:
        # 1. Aggregate the starred corpus
        print("1. Loading starred repositories (capped at 150)...")
        corpus = await client.load_starred()
        print(f"   {corpus.fetched_count} of {corpus.total_starred} loaded")
        print(f"   capped={corpus.is_capped} has_more={corpus.has_more} failed_pages={corpus.failed_pages}")
        print(f"   requests: {len(fake.count_probes)} probe + {len(fake.page_requests)} pages\n")

        top = corpus.repositories[0]
        print(f"   Most starred: {top.full_name} ({top.stargazers_count} stars)\n")

        # 2. Search within starred (no upstream calls once loaded)
        print("2. Searching starred for 'repo-1'...")
        local = await client.search("repo-1", mode=SearchMode.STARRED, sort=SortKey.STARS)
        print(f"   {local.total_count} matches, page 1 has {len(local.repositories)}\n")

        # 3. Search all of GitHub
        print('3. Searching GitHub for "react" (name only)...')
        platform = await client.search('"react"', mode=SearchMode.ALL, sort=SortKey.STARS)
        for repo in platform.repositories:
            print(f"   {repo.full_name}: starred={repo.is_starred}")
        print()

        # 4. Star with an optimistic cache update
        print("4. Starring octo/newcomer...")
        newcomer = await client.get_repository(20_000)
        await client.star(newcomer)
        print(f"   total now {client.cache.collection.total_starred}\n")

        # 5. Failures surface as typed errors
        print("5. Forcing a rate limit...")
        fake.fail_path("/rate_limit", 429, headers={"retry-after": "60"})
        try:
            await client.rate_limit()
        except StarRadarError as e:
            print(f"   {e.kind.value}: {e.message}")

    print("\n=== Done ===")


if __name__ == "__main__":
    asyncio.run(main())
