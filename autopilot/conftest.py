"""Shared fixtures: an in-memory browser that records every interaction."""

from contextlib import asynccontextmanager

import pytest


class FakeHandle:
    def __init__(self, ref: str):
        self.ref = ref


class FakeBrowser:
    def __init__(self, page_texts=(), missing=(), broken=()):
        self.page_texts = list(page_texts)
        self.missing = set(missing)  # refs that never become visible
        self.broken = set(broken)  # refs whose click raises a driver error
        self.calls: list[tuple] = []
        self.timeouts: list = []  # timeout passed to each click/type

    async def navigate(self, url):
        self.calls.append(("navigate", url))

    async def wait_until_visible(self, ref, timeout_ms):
        self.calls.append(("wait", ref))
        if ref in self.missing:
            raise TimeoutError(f"{ref} not visible after {timeout_ms}ms")
        return FakeHandle(ref)

    async def scroll_into_view(self, handle, timeout_ms=None):
        self.calls.append(("scroll", handle.ref))

    async def click(self, handle, timeout_ms=None):
        self.timeouts.append(timeout_ms)
        if handle.ref in self.broken:
            raise RuntimeError("Target page, context or browser has been closed")
        self.calls.append(("click", handle.ref))

    async def type_text(self, handle, text, timeout_ms=None):
        self.timeouts.append(timeout_ms)
        self.calls.append(("type", handle.ref, text))

    async def page_contains_text(self, pattern):
        return any(pattern.lower() in text.lower() for text in self.page_texts)

    def actions(self):
        """Only the clicks and typing, in order."""
        return [c for c in self.calls if c[0] in ("click", "type")]


class BrowserPool:
    """open_browser replacement that counts live acquisitions."""

    def __init__(self, **browser_kwargs):
        self.browser_kwargs = browser_kwargs
        self.active = 0
        self.opened = 0
        self.closed = 0
        self.browsers: list[FakeBrowser] = []

    @asynccontextmanager
    async def open(self):
        browser = FakeBrowser(**self.browser_kwargs)
        self.browsers.append(browser)
        self.active += 1
        self.opened += 1
        try:
            yield browser
        finally:
            self.active -= 1
            self.closed += 1


@pytest.fixture
def fake_browser():
    return FakeBrowser()


@pytest.fixture
def pool():
    return BrowserPool(page_texts=["Your response has been recorded."])
