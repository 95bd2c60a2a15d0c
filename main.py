#!/usr/bin/env python3
import sys
import argparse
import asyncio
import logging

from photo_search.config import load_settings
from photo_search.data_source import SearchPhotoDataSourceFactory
from photo_search.logging_conf import logger, setup_logging
from photo_search.pagination import SearchPager
from photo_search.unsplash_client import UnsplashClient


def parse_arguments(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Page through Unsplash photo search results"
    )
    parser.add_argument("--query", required=True, help="Search criteria")
    parser.add_argument(
        "--per-page",
        type=int,
        default=None,
        help="Photos per page (default: UNSPLASH_PAGE_SIZE or 20)"
    )
    parser.add_argument(
        "--pages",
        type=int,
        default=1,
        help="Maximum number of pages to fetch (default: 1)"
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def log_state(state):
    if state.msg:
        logger.info(f"Network state: {state.status.value} ({state.msg})")
    else:
        logger.info(f"Network state: {state.status.value}")


async def run(query: str, per_page: int, pages: int, client: UnsplashClient) -> bool:
    """
    Fetch up to `pages` pages for `query` and print one line per photo.

    Returns:
        True unless a page failed to load
    """
    factory = SearchPhotoDataSourceFactory(client, query)
    source = factory.create()
    source.network_state.observe(log_state)

    pager = SearchPager(source, page_size=per_page, max_pages=pages)
    async for photos in pager:
        for photo in photos:
            url = (photo.get("urls") or {}).get("regular", "")
            print(f"{photo.get('id')}\t{url}")

    return not pager.failed


def main(argv=None):
    """Main entry point for the script."""
    args = parse_arguments(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, stream=sys.stderr)

    try:
        settings = load_settings()
    except ValueError as e:
        logger.error(str(e))
        return 1

    if not settings.is_configured:
        logger.error("Missing required environment variable: UNSPLASH_ACCESS_KEY")
        logger.error("Please set it in your .env file or environment.")
        return 1

    per_page = args.per_page or settings.page_size
    if per_page <= 0 or args.pages <= 0:
        logger.error("--per-page and --pages must be positive")
        return 1
    logger.info(f"Searching photos for '{args.query}' (per_page={per_page}, pages={args.pages})")

    async def _main():
        async with UnsplashClient.from_settings(settings) as client:
            return await run(args.query, per_page, args.pages, client)

    try:
        ok = asyncio.run(_main())
    except KeyboardInterrupt:
        logger.info("Process interrupted by user.")
        return 0

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
