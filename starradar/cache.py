"""
The working set: the cached starred corpus and the views derived from it.

Every write builds a new immutable snapshot and swaps it in with a single
assignment, then notifies subscribers. Readers therefore never see a
half-applied mutation, and no locks are needed on a single event loop.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from datetime import datetime, timezone

from starradar.logging import get_logger
from starradar.types.repos import Repository
from starradar.types.results import SearchPageResult, StarredCollectionResult
from starradar.types.search import BrowseSort, SearchMode, SortDirection

logger = get_logger("cache")


@dataclass(frozen=True)
class BrowseState:
    """Server-sorted starred pages loaded so far."""

    repositories: tuple[Repository, ...]
    sort: BrowseSort
    direction: SortDirection
    per_page: int
    next_page: int | None

    @property
    def has_more(self) -> bool:
        return self.next_page is not None


@dataclass(frozen=True)
class SearchView:
    """The search result currently on display."""

    mode: SearchMode
    query: str
    result: SearchPageResult


@dataclass(frozen=True)
class CacheSnapshot:
    collection: StarredCollectionResult | None = None
    starred_ids: frozenset[int] = frozenset()
    browse: BrowseState | None = None
    search: SearchView | None = None


Subscriber = Callable[[CacheSnapshot], None]


def _without(repos: Iterable[Repository], repo_id: int) -> tuple[Repository, ...]:
    return tuple(r for r in repos if r.id != repo_id)


def _with_starred_flag(
    repos: Iterable[Repository], repo_id: int, starred: bool
) -> tuple[Repository, ...]:
    return tuple(
        replace(r, is_starred=starred) if r.id == repo_id else r for r in repos
    )


class WorkingSetCache:
    """Single owned store for the starred corpus and its views."""

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        """
        Args:
            clock: Source of "now" for starred_at on optimistic stars
        """
        self._state = CacheSnapshot()
        self._subscribers: list[Subscriber] = []
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # Reads

    @property
    def snapshot(self) -> CacheSnapshot:
        return self._state

    @property
    def is_loaded(self) -> bool:
        return self._state.collection is not None

    @property
    def collection(self) -> StarredCollectionResult | None:
        return self._state.collection

    @property
    def repositories(self) -> tuple[Repository, ...]:
        collection = self._state.collection
        return collection.repositories if collection else ()

    @property
    def starred_ids(self) -> frozenset[int]:
        return self._state.starred_ids

    def is_starred(self, repo_id: int) -> bool:
        return repo_id in self._state.starred_ids

    @property
    def browse(self) -> BrowseState | None:
        return self._state.browse

    def browse_slice(self, page: int, per_page: int) -> tuple[Repository, ...]:
        """One page of the browse list (1-indexed)."""
        browse = self._state.browse
        if browse is None or page < 1:
            return ()
        start = (page - 1) * per_page
        return browse.repositories[start:start + per_page]

    @property
    def search(self) -> SearchView | None:
        return self._state.search

    # Subscription

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for every state replacement; returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _commit(self, state: CacheSnapshot) -> None:
        self._state = state
        for callback in list(self._subscribers):
            callback(state)

    # Writes

    def replace_collection(self, collection: StarredCollectionResult) -> None:
        """Install a fresh aggregation result."""
        self._commit(
            replace(
                self._state,
                collection=collection,
                starred_ids=frozenset(r.id for r in collection.repositories),
            )
        )

    def replace_browse(self, browse: BrowseState | None) -> None:
        self._commit(replace(self._state, browse=browse))

    def append_browse_page(
        self,
        page: int,
        repositories: Iterable[Repository],
        sort: BrowseSort,
        direction: SortDirection,
        per_page: int,
    ) -> BrowseState:
        """
        Add one server-sorted page to the browse list.

        Page 1, or a sort/direction change, starts a new list. The cursor
        stops once a page comes back short.
        """
        incoming = tuple(repositories)
        current = self._state.browse
        if (
            page == 1
            or current is None
            or current.sort != sort
            or current.direction != direction
        ):
            merged = incoming
        else:
            known = {r.id for r in current.repositories}
            merged = current.repositories + tuple(r for r in incoming if r.id not in known)

        browse = BrowseState(
            repositories=merged,
            sort=sort,
            direction=direction,
            per_page=per_page,
            next_page=page + 1 if len(incoming) == per_page else None,
        )
        self.replace_browse(browse)
        return browse

    def replace_search_result(
        self, mode: SearchMode, query: str, result: SearchPageResult
    ) -> None:
        self._commit(replace(self._state, search=SearchView(mode, query, result)))

    def clear_search(self) -> None:
        self._commit(replace(self._state, search=None))

    def invalidate(self) -> None:
        """Drop everything; the next read re-aggregates."""
        self._commit(CacheSnapshot())

    def mark_starred(self, repo: Repository) -> None:
        """
        Optimistically record that the user starred a repository.

        Prepends the record to a loaded corpus (starred now) and bumps the
        total. The corpus is left alone if it was never loaded or already
        holds the id. Displayed search results show the repo as starred.
        """
        state = self._state
        collection = state.collection
        starred_ids = state.starred_ids

        if collection is not None and repo.id not in starred_ids:
            starred = replace(repo, is_starred=True, starred_at=self._clock())
            repositories = (starred,) + collection.repositories
            total = collection.total_starred + 1
            collection = replace(
                collection,
                repositories=repositories,
                fetched_count=len(repositories),
                total_starred=total,
                has_more=total > len(repositories),
            )
            starred_ids = starred_ids | {repo.id}

        search = state.search
        if search is not None:
            search = replace(
                search,
                result=replace(
                    search.result,
                    repositories=_with_starred_flag(search.result.repositories, repo.id, True),
                ),
            )

        logger.debug("Marked %s as starred", repo.full_name)
        self._commit(
            replace(state, collection=collection, starred_ids=starred_ids, search=search)
        )

    def mark_unstarred(self, repo: Repository) -> None:
        """
        Optimistically record that the user unstarred a repository.

        Removes it from every view that could show it in one commit: the
        corpus (total decremented, floored at zero), the browse list and the
        displayed search result, so it disappears everywhere without a refetch.
        """
        state = self._state
        collection = state.collection

        if collection is not None:
            repositories = _without(collection.repositories, repo.id)
            total = max(0, collection.total_starred - 1)
            collection = replace(
                collection,
                repositories=repositories,
                fetched_count=len(repositories),
                total_starred=total,
                has_more=total > len(repositories),
            )

        browse = state.browse
        if browse is not None:
            browse = replace(browse, repositories=_without(browse.repositories, repo.id))

        search = state.search
        if search is not None:
            result = search.result
            if search.mode == SearchMode.STARRED:
                remaining = _without(result.repositories, repo.id)
                removed = len(result.repositories) - len(remaining)
                result = replace(
                    result,
                    repositories=remaining,
                    total_count=max(0, result.total_count - removed),
                    raw_total=max(0, result.raw_total - removed),
                )
            else:
                result = replace(
                    result,
                    repositories=_with_starred_flag(result.repositories, repo.id, False),
                )
            search = replace(search, result=result)

        logger.debug("Marked %s as unstarred", repo.full_name)
        self._commit(
            replace(
                state,
                collection=collection,
                starred_ids=state.starred_ids - {repo.id},
                browse=browse,
                search=search,
            )
        )

    def backfill_starred(self, repo: Repository) -> bool:
        """
        Add a repository found starred by a direct upstream check.

        Used by the detail view when the id was missing from the membership
        set (e.g. beyond the aggregation cap). Appends to a loaded corpus.

        Returns:
            True if the corpus changed
        """
        collection = self._state.collection
        if collection is None or repo.id in self._state.starred_ids:
            return False

        repositories = collection.repositories + (replace(repo, is_starred=True),)
        # The upstream count already includes it unless it was starred elsewhere
        total = max(collection.total_starred, len(repositories))
        self._commit(
            replace(
                self._state,
                collection=replace(
                    collection,
                    repositories=repositories,
                    fetched_count=len(repositories),
                    total_starred=total,
                    has_more=total > len(repositories),
                ),
                starred_ids=self._state.starred_ids | {repo.id},
            )
        )
        return True
