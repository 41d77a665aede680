import pytest

from favhash.errors import FetchError
from favhash.site_crawler import FetchResult

ICO = b"\x00\x00\x01\x00\x01\x00\x10\x10"


class FakeSite:
    """以 dict 模擬 fetch(url)，未登記的網址回傳 404，並記錄呼叫順序"""

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.calls = []

    def add(self, url, body=b"", content_type="text/html", status=200, headers=None):
        hdrs = {"Content-Type": content_type} if content_type else {}
        hdrs.update(headers or {})
        self.pages[url] = FetchResult(status, hdrs, body)

    def add_icon(self, url, content_type="image/x-icon", body=ICO):
        self.add(url, body=body, content_type=content_type)

    def fail(self, url, reason="connection refused"):
        self.pages[url] = FetchError(url, reason)

    def __call__(self, url):
        self.calls.append(url)
        page = self.pages.get(url)
        if page is None:
            return FetchResult(404, {"Content-Type": "text/html"}, b"not found")
        if isinstance(page, Exception):
            raise page
        return page


@pytest.fixture
def site():
    return FakeSite()
