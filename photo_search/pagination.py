import asyncio
from typing import List, Optional

from photo_search.data_source import SearchPhotoDataSource
from photo_search.logging_conf import logger
from photo_search.models import LoadInitialParams, LoadParams, PhotoItem


class SearchPager:
    """
    Drives a SearchPhotoDataSource forward and yields each page of photos.

    Plays the part of the paging controller: the initial load first, then
    one load_after at a time with the key handed back by the previous page.
    Iteration ends when the source reports no next key, when max_pages pages
    have been yielded, or when a load fails (see `failed`).
    """

    def __init__(self, source: SearchPhotoDataSource, page_size: int = 20, max_pages: Optional[int] = None):
        """
        Initialize the pager.

        Args:
            source: The data source to pull pages from
            page_size: Requested load size for every page
            max_pages: Stop after this many pages (default: no limit)
        """
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.source = source
        self.page_size = page_size
        self.max_pages = max_pages
        self.pages_loaded = 0
        self.next_key: Optional[int] = None
        self.failed = False
        self._started = False
        self._done = False
        logger.debug(f"SearchPager initialized with page_size={page_size}, max_pages={max_pages}")

    def __aiter__(self):
        return self

    async def __anext__(self) -> List[PhotoItem]:
        if self._done or (self.max_pages is not None and self.pages_loaded >= self.max_pages):
            raise StopAsyncIteration
        if self._started and self.next_key is None:
            logger.debug(f"SearchPager completed after {self.pages_loaded} pages")
            raise StopAsyncIteration

        delivered: "asyncio.Future" = asyncio.get_running_loop().create_future()
        if not self._started:
            task = self.source.load_initial(
                LoadInitialParams(self.page_size),
                lambda items, _previous, next_key: delivered.set_result((items, next_key)),
            )
        else:
            task = self.source.load_after(
                LoadParams(self.next_key, self.page_size),
                lambda items, next_key: delivered.set_result((items, next_key)),
            )
        await task

        if not delivered.done():
            if self.source.is_invalid:
                self._done = True
                logger.info("SearchPager stopped: search was invalidated")
                raise StopAsyncIteration
            self.failed = True
            self._done = True
            state = self.source.network_state.value
            logger.warning(f"SearchPager stopped: {state.msg if state and state.msg else 'no page delivered'}")
            raise StopAsyncIteration

        items, self.next_key = delivered.result()
        self._started = True
        self.pages_loaded += 1
        logger.debug(f"SearchPager yielding page {self.pages_loaded} ({len(items)} photos), next key {self.next_key}")
        return items

    def resume(self) -> None:
        """Allow iteration to continue after a failed load; the same page is requested again."""
        self.failed = False
        self._done = False
