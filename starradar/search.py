"""
Search routing: platform-wide search vs. search within the starred corpus.

Both strategies return the same SearchPageResult shape, so callers never
branch on the mode themselves.

Query conventions shared by both strategies:
- Surrounding whitespace is ignored.
- A query wrapped in double quotes is an exact match restricted to the
  repository name ("react" matches facebook/react, not repos that only
  mention React in their description).
"""

import abc
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from starradar.logging import get_logger
from starradar.sorting import SortField, sort_repositories
from starradar.types.repos import Repository
from starradar.types.results import SearchPageResult
from starradar.types.search import SearchMode, SortKey

if TYPE_CHECKING:
    from starradar.cache import WorkingSetCache
    from starradar.clients.search import SearchClient

logger = get_logger("search")

NAME_QUALIFIER = "in:name"
# An empty platform query becomes "anything with at least one star"
POPULAR_QUERY = "stars:>0"

# GitHub search sort vocabulary; None means relevance ranking. GitHub has no
# "recently starred" order, so STARRED falls back to the closest one.
PLATFORM_SORTS: dict[SortKey, str | None] = {
    SortKey.BEST_MATCH: None,
    SortKey.STARS: "stars",
    SortKey.FORKS: "forks",
    SortKey.UPDATED: "updated",
    SortKey.HELP_WANTED: "help-wanted-issues",
    SortKey.STARRED: "updated",
}

# Local sorts over the corpus; keys absent here keep corpus order
LOCAL_SORTS: dict[SortKey, SortField] = {
    SortKey.STARS: SortField.STARS,
    SortKey.STARRED: SortField.STARRED,
    SortKey.UPDATED: SortField.UPDATED,
    SortKey.FORKS: SortField.FORKS,
}


@dataclass(frozen=True)
class ParsedQuery:
    term: str
    exact: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.term

    def upstream_text(self) -> str:
        """The query in GitHub search syntax."""
        if self.is_empty:
            return POPULAR_QUERY
        if self.exact:
            return f"{self.term} {NAME_QUALIFIER}"
        return self.term

    def matches(self, repo: Repository) -> bool:
        """Case-insensitive substring match over the searchable fields."""
        if self.is_empty:
            return True
        needle = self.term.lower()
        if self.exact:
            return needle in repo.name.lower()
        haystack = " ".join(
            [
                repo.name,
                repo.full_name,
                repo.description or "",
                repo.language or "",
                *repo.topics,
            ]
        ).lower()
        return needle in haystack


def parse_query(text: str) -> ParsedQuery:
    """Split raw query text into the search term and the exact-match flag."""
    stripped = text.strip()
    if len(stripped) >= 2 and stripped.startswith('"') and stripped.endswith('"'):
        return ParsedQuery(term=stripped[1:-1].strip(), exact=True)
    return ParsedQuery(term=stripped)


def paginate(
    items: Sequence[Repository], page: int, per_page: int
) -> tuple[Repository, ...]:
    """Slice one 1-indexed page out of a sorted list."""
    if page < 1 or per_page < 1:
        raise ValueError("page and per_page must be positive")
    start = (page - 1) * per_page
    return tuple(items[start:start + per_page])


class SearchStrategy(abc.ABC):
    """One way of producing a page of search results."""

    mode: SearchMode

    @abc.abstractmethod
    async def search(
        self, query: ParsedQuery, page: int, per_page: int, sort: SortKey
    ) -> SearchPageResult:
        """Produce one page of results."""


class PlatformSearchStrategy(SearchStrategy):
    """Server-side search over all of GitHub."""

    mode = SearchMode.ALL

    def __init__(
        self,
        client: "SearchClient",
        cache: "WorkingSetCache | None" = None,
    ) -> None:
        """
        Args:
            client: GitHub search client
            cache: Working set whose membership set marks starred results
        """
        self.client = client
        self.cache = cache

    async def search(
        self, query: ParsedQuery, page: int, per_page: int, sort: SortKey
    ) -> SearchPageResult:
        starred_ids = self.cache.starred_ids if self.cache else frozenset()
        return await self.client.repositories(
            query.upstream_text(),
            page=page,
            per_page=per_page,
            sort=PLATFORM_SORTS[sort],
            starred_ids=starred_ids,
        )


CorpusLoader = Callable[[], Awaitable[Sequence[Repository]]]


class StarredSearchStrategy(SearchStrategy):
    """Client-side filter, sort and paginate over the starred corpus.

    The corpus is loaded once through ``load_corpus`` (the working-set
    cache); page turns and sort changes make no upstream calls.
    """

    mode = SearchMode.STARRED

    def __init__(self, load_corpus: CorpusLoader) -> None:
        self.load_corpus = load_corpus

    async def search(
        self, query: ParsedQuery, page: int, per_page: int, sort: SortKey
    ) -> SearchPageResult:
        corpus = await self.load_corpus()

        matched = [repo for repo in corpus if query.matches(repo)]
        field = LOCAL_SORTS.get(sort)
        if field is not None:
            matched = sort_repositories(matched, field)

        total = len(matched)
        return SearchPageResult(
            repositories=paginate(matched, page, per_page),
            total_count=total,
            raw_total=total,
            page=page,
            per_page=per_page,
        )


class SearchRouter:
    """Dispatches a search to the strategy registered for its mode."""

    def __init__(self, strategies: Sequence[SearchStrategy]) -> None:
        self.strategies = {strategy.mode: strategy for strategy in strategies}

    async def search(
        self,
        query: str,
        mode: SearchMode = SearchMode.STARRED,
        sort: SortKey = SortKey.UPDATED,
        page: int = 1,
        per_page: int = 30,
    ) -> SearchPageResult:
        """
        Run a search.

        Args:
            query: Raw query text; wrap in double quotes for an exact name match
            mode: SearchMode.ALL (GitHub-wide) or SearchMode.STARRED (local)
            sort: Requested order; unsupported keys fall back silently
            page: Page number (1-indexed)
            per_page: Items per page

        Raises:
            ValueError: If no strategy handles the mode
        """
        mode = SearchMode(mode)
        strategy = self.strategies.get(mode)
        if strategy is None:
            raise ValueError(f"No search strategy registered for mode {mode.value!r}")

        parsed = parse_query(query)
        logger.debug(
            "Searching %s for %r (exact=%s, sort=%s, page=%d)",
            mode.value,
            parsed.term,
            parsed.exact,
            SortKey(sort).value,
            page,
        )
        return await strategy.search(parsed, page, per_page, SortKey(sort))
