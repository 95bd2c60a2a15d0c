import pytest
from unittest.mock import MagicMock, AsyncMock

from photo_search.data_source import SearchPhotoDataSource
from photo_search.errors import TransportFailure
from photo_search.models import SearchPage
from photo_search.network_state import Status
from photo_search.pagination import SearchPager


def make_source(*responses):
    client = MagicMock()
    client.search_photos = AsyncMock(side_effect=list(responses))
    return SearchPhotoDataSource(client, "city"), client


def page(n, total=None):
    return SearchPage([{"id": f"p{n}-{i}"} for i in range(2)], total=total)


async def collect(pager):
    return [items async for items in pager]


def test_page_size_must_be_positive():
    source, _ = make_source()
    with pytest.raises(ValueError):
        SearchPager(source, page_size=0)


@pytest.mark.asyncio
async def test_pages_until_last_page():
    # total=57, page size 20 -> pages 1, 2 and then stop
    source, client = make_source(page(1, total=57), page(2))
    pager = SearchPager(source, page_size=20)

    pages = await collect(pager)

    assert len(pages) == 2
    assert [c.args[1] for c in client.search_photos.await_args_list] == [1, 2]
    assert pager.next_key is None
    assert not pager.failed


@pytest.mark.asyncio
async def test_requests_are_serial_and_increasing():
    source, client = make_source(page(1, total=100), page(2), page(3), page(4), page(5))
    pager = SearchPager(source, page_size=20)

    pages = await collect(pager)

    assert len(pages) == 5
    assert [c.args[1] for c in client.search_photos.await_args_list] == [1, 2, 3, 4, 5]


@pytest.mark.asyncio
async def test_max_pages():
    source, client = make_source(page(1, total=1000), page(2), page(3))
    pager = SearchPager(source, page_size=10, max_pages=2)

    pages = await collect(pager)

    assert len(pages) == 2
    assert client.search_photos.await_count == 2
    assert pager.pages_loaded == 2


@pytest.mark.asyncio
async def test_failure_stops_iteration_and_resume_retries_same_page():
    source, client = make_source(
        page(1, total=60),
        TransportFailure("Connection refused"),
        page(2),
        page(3),
    )
    pager = SearchPager(source, page_size=20)

    first = await collect(pager)
    assert len(first) == 1
    assert pager.failed
    assert source.network_state.value.status is Status.FAILED
    assert source.network_state.value.msg == "Connection refused"

    pager.resume()
    rest = await collect(pager)

    assert len(rest) == 2
    assert [c.args[1] for c in client.search_photos.await_args_list] == [1, 2, 2, 3]
    assert not pager.failed


@pytest.mark.asyncio
async def test_failed_initial_load():
    source, client = make_source(TransportFailure("timeout"))
    pager = SearchPager(source, page_size=20)

    assert await collect(pager) == []
    assert pager.failed
    assert pager.pages_loaded == 0
    assert client.search_photos.await_count == 1


@pytest.mark.asyncio
async def test_invalidated_source_stops_without_failure():
    client = MagicMock()
    source = SearchPhotoDataSource(client, "city")

    async def search_and_invalidate(criteria, page_number, per_page):
        source.invalidate()
        return page(page_number, total=100)

    client.search_photos = AsyncMock(side_effect=search_and_invalidate)
    pager = SearchPager(source, page_size=20)

    assert await collect(pager) == []
    assert not pager.failed
    assert source.network_state.value.status is Status.SUCCESS
