"""
Shared fakes for the scraper tests: pages and sessions that never open a browser.
"""
import pytest
from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeout

from rentscraper.browser import RenderResult
from rentscraper.errors import TargetFailure


def make_row(listing_id, title="近捷運溫馨套房", price_text="12,000元/月", **extra):
    row = {
        "title": title,
        "href": f"https://rent.591.com.tw/{listing_id}",
        "price_text": price_text,
        "info": ["中山區-長安東路一段", "距松江南京站350公尺", "1房1廳 10坪 3F/5F"],
        "tags": ["近捷運", "可開伙"],
        "images": [f"https://img.591.com.tw/house/{listing_id}.jpg"],
    }
    row.update(extra)
    return row


class FakeLocator:
    def __init__(self, page, selector):
        self.page = page
        self.selector = selector

    @property
    def first(self):
        return self

    async def is_visible(self):
        if self.page.locator_error:
            raise PlaywrightError("locator failed")
        return self.selector in self.page.visible

    async def click(self, timeout=None):
        self.page.clicked.append(self.selector)


class FakePage:
    """Stands in for a Playwright page; evaluate() returns canned fragments."""

    def __init__(self, rows=None, detail=None, evaluate_error=None, ready=True,
                 visible=(), locator_error=False, info=None):
        self.rows = rows or []
        self.detail = detail
        self.info = info
        self.evaluate_error = evaluate_error
        self.ready = ready
        self.visible = set(visible)
        self.locator_error = locator_error
        self.clicked = []

    async def evaluate(self, script, arg=None):
        if self.evaluate_error is not None:
            raise self.evaluate_error
        if "phones" in script:
            return self.detail
        if "equipment" in script:
            return self.info
        return self.rows

    async def wait_for_selector(self, selector, timeout=None):
        if not self.ready:
            raise PlaywrightTimeout("Timeout waiting for selector")

    async def wait_for_timeout(self, ms):
        return None

    def locator(self, selector):
        return FakeLocator(self, selector)

    def is_closed(self):
        return False


class FakeSession:
    """Renders one canned response per call, in order.

    A response is a list of raw rows, the string "empty", or an exception
    instance to raise.
    """

    def __init__(self, responses):
        self.responses = list(responses)
        self.urls = []

    async def render(self, url):
        self.urls.append(url)
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        if response == "empty":
            return RenderResult(url=url, empty=True)
        return RenderResult(url=url, page=FakePage(rows=response))


class FakeDetailSession:
    """Short-lived session used by the contact lookup tests."""

    instances = []

    def __init__(self, page=None, goto_error=None):
        self._page = page
        self.goto_error = goto_error
        self.started = False
        self.closed = False
        self.visited = []

    def __call__(self, cfg=None, logger=None):
        FakeDetailSession.instances.append(self)
        return self

    async def start(self):
        self.started = True

    async def goto(self, url, timeout_ms=None):
        self.visited.append(url)
        if self.goto_error is not None:
            raise self.goto_error
        return self._page

    async def close(self):
        self.closed = True


@pytest.fixture
def row_factory():
    return make_row


@pytest.fixture
def fake_page():
    return FakePage


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def fake_detail_session():
    return FakeDetailSession


@pytest.fixture
def target_failure():
    return TargetFailure
