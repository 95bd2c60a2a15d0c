import asyncio
from abc import ABC, abstractmethod
from typing import Callable, Generic, List, Optional, TypeVar

from photo_search.errors import PhotoSearchError
from photo_search.logging_conf import logger
from photo_search.models import LoadInitialParams, LoadParams, PhotoItem, SearchPage
from photo_search.network_state import NetworkState, NetworkStateHolder, ValueHolder
from photo_search.unsplash_client import UnsplashClient

K = TypeVar("K")
V = TypeVar("V")

# callback(items, previous_key, next_key)
LoadInitialCallback = Callable[[List[V], Optional[K], Optional[K]], None]
# callback(items, next_key)
LoadCallback = Callable[[List[V], Optional[K]], None]


class PageKeyedDataSource(ABC, Generic[K, V]):
    """
    Source of pages where each page knows the key of its neighbours.

    Loads report their results through the callback they are given rather
    than a return value, since fetching is asynchronous.
    """

    def __init__(self):
        self._invalid = False
        self._invalidated_callbacks: List[Callable[[], None]] = []

    @abstractmethod
    def load_initial(self, params: LoadInitialParams, callback: LoadInitialCallback):
        ...

    @abstractmethod
    def load_after(self, params: LoadParams, callback: LoadCallback):
        ...

    @abstractmethod
    def load_before(self, params: LoadParams, callback: LoadCallback):
        ...

    @property
    def is_invalid(self) -> bool:
        return self._invalid

    def add_invalidated_callback(self, callback: Callable[[], None]) -> None:
        self._invalidated_callbacks.append(callback)

    def invalidate(self) -> None:
        """Mark the source stale. Later results are no longer delivered."""
        if self._invalid:
            return
        self._invalid = True
        for callback in list(self._invalidated_callbacks):
            callback()


class SearchPhotoDataSource(PageKeyedDataSource[int, PhotoItem]):
    """
    Loads the photos matching one search query, page after page.

    Every load posts LOADING to `network_state` before the request goes out
    and exactly one terminal state once it completes. Only forward paging is
    supported.
    """

    FIRST_PAGE = 1
    # Key handed out after the initial load; the initial load is always page 1
    SECOND_PAGE = 2

    def __init__(self, client: UnsplashClient, criteria: str):
        super().__init__()
        self.client = client
        self.criteria = criteria
        self.network_state = NetworkStateHolder()
        self.last_page: Optional[int] = None
        self._retry: Optional[Callable[[], asyncio.Task]] = None

    def load_initial(self, params: LoadInitialParams, callback: LoadInitialCallback) -> asyncio.Task:
        loop = asyncio.get_running_loop()
        self.network_state.post_value(NetworkState.LOADING)
        return loop.create_task(self._load_initial(params, callback))

    def load_after(self, params: LoadParams, callback: LoadCallback) -> asyncio.Task:
        loop = asyncio.get_running_loop()
        self.network_state.post_value(NetworkState.LOADING)
        return loop.create_task(self._load_after(params, callback))

    def load_before(self, params: LoadParams, callback: LoadCallback) -> None:
        # Search results are only ever paged forward
        return None

    def retry(self) -> Optional[asyncio.Task]:
        """Re-issue the last failed load, if any."""
        retry, self._retry = self._retry, None
        if retry is None:
            return None
        logger.info(f"Retrying failed load for '{self.criteria}'")
        return retry()

    async def _fetch(self, page: int, per_page: int, on_failure: Callable[[], asyncio.Task]) -> Optional[SearchPage]:
        logger.debug(f"Fetching page {page} of '{self.criteria}' (per_page={per_page})")
        try:
            result = await self.client.search_photos(self.criteria, page, per_page)
        except PhotoSearchError as e:
            logger.error(f"Failed to load page {page} of '{self.criteria}': {e.message}")
            self._retry = on_failure
            self.network_state.post_value(NetworkState.error(e.message))
            return None
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.exception(f"Unexpected error loading page {page} of '{self.criteria}': {message}")
            self._retry = on_failure
            self.network_state.post_value(NetworkState.error(message))
            return None
        self._retry = None
        return result

    async def _load_initial(self, params: LoadInitialParams, callback: LoadInitialCallback) -> None:
        page = await self._fetch(
            self.FIRST_PAGE,
            params.requested_load_size,
            lambda: self.load_initial(params, callback),
        )
        if page is None:
            return

        if page.total is not None:
            self.last_page = page.total // params.requested_load_size
        else:
            self.last_page = None
        logger.info(f"Search '{self.criteria}': {page.total} results, last page {self.last_page}")

        self._deliver(callback, page.results, None, self.SECOND_PAGE)
        if not page.results:
            self.network_state.post_value(NetworkState.EMPTY)
        else:
            self.network_state.post_value(NetworkState.SUCCESS)

    async def _load_after(self, params: LoadParams, callback: LoadCallback) -> None:
        page = await self._fetch(
            params.key,
            params.requested_load_size,
            lambda: self.load_after(params, callback),
        )
        if page is None:
            return

        next_key = None if params.key == self.last_page else params.key + 1
        self._deliver(callback, page.results, next_key)
        self.network_state.post_value(NetworkState.SUCCESS)

    def _deliver(self, callback, *args) -> None:
        if self.is_invalid:
            logger.debug(f"Dropping page for invalidated search '{self.criteria}'")
            return
        callback(*args)


class SearchPhotoDataSourceFactory:
    """Creates the data source of a search and publishes the current one."""

    def __init__(self, client: UnsplashClient, criteria: str):
        self.client = client
        self.criteria = criteria
        self.source_holder: ValueHolder[SearchPhotoDataSource] = ValueHolder()

    @property
    def source(self) -> Optional[SearchPhotoDataSource]:
        return self.source_holder.value

    def create(self) -> SearchPhotoDataSource:
        source = SearchPhotoDataSource(self.client, self.criteria)
        self.source_holder.post_value(source)
        return source

    def refresh(self) -> SearchPhotoDataSource:
        """Invalidate the current source and start a new one for the same query."""
        current = self.source
        if current is not None:
            current.invalidate()
        return self.create()

