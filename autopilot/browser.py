from contextlib import asynccontextmanager
from typing import AsyncIterator

from playwright.async_api import async_playwright, Browser, Locator, Page
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from dom_parser import contains_text

# Raised by page.content() while the page is replaced after submit
NAVIGATION_IN_PROGRESS = (
    "Execution context was destroyed",
    "page is navigating",
)


class BrowserController:
    """One Playwright browser, owned by a single form session."""

    def __init__(self):
        self.browser: Browser | None = None
        self.context = None
        self.page: Page | None = None
        self.playwright = None

    async def start(self, headless: bool = False) -> None:
        """Launch browser and open a blank page."""
        self.playwright = await async_playwright().start()
        self.browser = await self.playwright.chromium.launch(headless=headless)
        self.context = await self.browser.new_context(viewport={"width": 1920, "height": 1080})
        self.page = await self.context.new_page()

    async def stop(self) -> None:
        """Close browser. Safe to call more than once."""
        browser, playwright = self.browser, self.playwright
        self.browser = self.context = self.page = self.playwright = None
        try:
            if browser:
                await browser.close()
        finally:
            if playwright:
                await playwright.stop()

    async def navigate(self, url: str) -> None:
        await self.page.goto(url)

    async def wait_until_visible(self, ref: str, timeout_ms: int) -> Locator:
        """Wait for element to be attached and visible. Raises TimeoutError."""
        locator = self.page.locator(ref).first
        try:
            await locator.wait_for(state="visible", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise TimeoutError(f"{ref} not visible after {timeout_ms}ms") from e
        return locator

    async def scroll_into_view(self, handle: Locator, timeout_ms: int = 5000) -> None:
        try:
            await handle.scroll_into_view_if_needed(timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise TimeoutError(f"could not scroll element into view after {timeout_ms}ms") from e

    async def click(self, handle: Locator, timeout_ms: int = 5000) -> None:
        """Click once the element is enabled and stable."""
        try:
            await handle.click(timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise TimeoutError(f"element not clickable after {timeout_ms}ms") from e

    async def type_text(self, handle: Locator, text: str, timeout_ms: int = 5000) -> None:
        """Type text into input field."""
        try:
            await handle.fill(text, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise TimeoutError(f"element not editable after {timeout_ms}ms") from e

    async def get_html(self) -> str:
        """Get page HTML."""
        return await self.page.content()

    async def page_contains_text(self, pattern: str) -> bool:
        """Check whether the visible page text contains pattern."""
        try:
            html = await self.get_html()
        except PlaywrightError as e:
            if any(marker in str(e) for marker in NAVIGATION_IN_PROGRESS):
                return False
            raise
        return contains_text(html, pattern)


@asynccontextmanager
async def open_browser(headless: bool = False) -> AsyncIterator[BrowserController]:
    """Yield a started browser and close it on every exit path."""
    controller = BrowserController()
    try:
        await controller.start(headless=headless)
        yield controller
    finally:
        await controller.stop()
