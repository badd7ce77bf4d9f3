"""Response metadata returned alongside every decoded result."""

import httpx

HEADER_TOTAL = "X-Total"
HEADER_TOTAL_PAGES = "X-Total-Pages"
HEADER_PER_PAGE = "X-Per-Page"
HEADER_PAGE = "X-Page"
HEADER_NEXT_PAGE = "X-Next-Page"
HEADER_PREV_PAGE = "X-Prev-Page"


def _header_int(headers: httpx.Headers, name: str) -> int:
    try:
        return int(headers.get(name, "") or 0)
    except ValueError:
        return 0


class Response:
    """Transport-level facts about one API call.

    Wraps the raw ``httpx.Response`` and exposes the pagination headers GitLab
    sends: offset pagination through ``X-*`` headers and keyset pagination
    through the ``Link`` header.
    """

    def __init__(self, raw: httpx.Response):
        self.raw = raw
        self.status_code = raw.status_code
        self.headers = raw.headers

        self.total_items = _header_int(raw.headers, HEADER_TOTAL)
        self.total_pages = _header_int(raw.headers, HEADER_TOTAL_PAGES)
        self.items_per_page = _header_int(raw.headers, HEADER_PER_PAGE)
        self.current_page = _header_int(raw.headers, HEADER_PAGE)
        self.next_page = _header_int(raw.headers, HEADER_NEXT_PAGE)
        self.previous_page = _header_int(raw.headers, HEADER_PREV_PAGE)

        links = raw.links if "link" in raw.headers else {}
        self.next_link = links.get("next", {}).get("url", "")
        self.previous_link = links.get("prev", {}).get("url", "")
        self.first_link = links.get("first", {}).get("url", "")
        self.last_link = links.get("last", {}).get("url", "")

    @property
    def request(self) -> httpx.Request:
        return self.raw.request

    @property
    def reason_phrase(self) -> str:
        return self.raw.reason_phrase

    @property
    def is_success(self) -> bool:
        return self.raw.is_success

    def __repr__(self) -> str:
        return f"<Response [{self.status_code}]>"
