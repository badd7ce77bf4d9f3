"""Opt-in helpers for walking paginated list endpoints.

Endpoint calls return one page at a time. ``scan`` keeps calling a list
endpoint, following keyset pagination (``Response.next_link``) when the
server sends it and offset pagination (``Response.next_page``) otherwise::

    jobs = collect(lambda *opts: client.jobs.list_project_jobs("group/project", None, *opts))
"""

import logging
from collections.abc import Callable, Iterator
from typing import Any, TypeVar

from gitlab_client.request_options import (
    RequestOption,
    with_keyset_pagination_parameters,
    with_offset_pagination_parameters,
)
from gitlab_client.response import Response

logger = logging.getLogger(__name__)

T = TypeVar("T")

PageFetcher = Callable[..., tuple[list[T] | None, Response]]


def scan(fetch: PageFetcher[T], *options: RequestOption) -> Iterator[T]:
    """Yield every item of a paginated list.

    Args:
        fetch: Called as ``fetch(*options, page_option)`` for each page; the
            first call gets ``options`` only
        options: Request options applied to every page

    Raises:
        APIError: Or any other classified error of a failing page
    """
    extra: list[Any] = []
    while True:
        items, resp = fetch(*options, *extra)
        yield from items or []

        if resp.next_link:
            extra = [with_keyset_pagination_parameters(resp.next_link)]
        elif resp.next_page:
            extra = [with_offset_pagination_parameters(resp.next_page)]
        else:
            return
        logger.debug(f"Fetching next page of {resp.request.url.path}")


def collect(fetch: PageFetcher[T], *options: RequestOption) -> list[T]:
    """Fetch every page of a paginated list into one list."""
    return list(scan(fetch, *options))
