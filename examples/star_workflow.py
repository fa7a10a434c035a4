#!/usr/bin/env python3
"""
StarRadar - Starred repository workflow against the real GitHub API

1. Check the rate limit budget
2. Load the starred corpus
3. Browse recently starred repositories
4. Search GitHub and star the top result
5. Undo the star

Requires GITHUB_TOKEN. Optional: STARRADAR_MAX_REPOS, STARRADAR_TIMEOUT.
"""

import asyncio
import sys

from starradar import (
    AuthExpiredError,
    BrowseSort,
    RateLimitedError,
    SearchMode,
    SortKey,
    StarRadarClient,
    StarRadarError,
)


def sign_out(error: AuthExpiredError) -> None:
    print(f"   Token rejected ({error.message}); please sign in again")


async def run(client: StarRadarClient, query: str) -> None:
    print("1. Checking rate limit...")
    status = await client.rate_limit()
    print(f"   {status.remaining}/{status.limit} requests left, resets {status.reset_at:%H:%M}")

    print("\n2. Loading starred repositories...")
    corpus = await client.load_starred()
    suffix = " (capped)" if corpus.is_capped else ""
    print(f"   {corpus.fetched_count} of {corpus.total_starred}{suffix}")
    if corpus.is_partial:
        print(f"   pages lost: {', '.join(map(str, corpus.failed_pages))}")

    print("\n3. Recently starred:")
    recent = await client.browse_starred(sort=BrowseSort.CREATED) or ()
    for repo in recent[:5]:
        print(f"   {repo.full_name}")

    print(f"\n4. Searching GitHub for {query!r}...")
    page = await client.search(query, mode=SearchMode.ALL, sort=SortKey.STARS)
    if page is None or not page.repositories:
        print("   No results")
        return
    print(f"   {page.total_count} results" + (f" (of {page.raw_total:,})" if page.is_clamped else ""))

    target = page.repositories[0]
    if target.is_starred:
        print(f"   {target.full_name} is already starred")
        return

    await client.star(target)
    print(f"   Starred {target.full_name}")

    print("\n5. Undoing...")
    await client.unstar(target)
    print(f"   Unstarred {target.full_name}")


async def main() -> int:
    query = sys.argv[1] if len(sys.argv) > 1 else '"httpx"'
    print("=== StarRadar Workflow ===\n")

    try:
        async with StarRadarClient.from_env(on_auth_expired=sign_out) as client:
            await run(client, query)
    except RateLimitedError as e:
        print(f"Rate limited until {e.reset_at:%H:%M:%S}")
        return 1
    except StarRadarError as e:
        print(f"Error: [{e.code}] {e.message}")
        return 1

    print("\n=== Done ===")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
