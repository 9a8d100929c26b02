import asyncio
from typing import Iterable, TYPE_CHECKING

from errors import DriverFailure, NotConfirmed

if TYPE_CHECKING:
    from browser import BrowserController


class ConfirmationDetector:
    """Waits for any accepted success text after the form is submitted."""

    def __init__(self, patterns: Iterable[str], timeout_ms: int = 15000, poll_interval: float = 0.5):
        self.patterns = tuple(patterns)
        if not self.patterns:
            raise ValueError("at least one confirmation pattern is required")
        self.timeout_ms = timeout_ms
        self.poll_interval = poll_interval

    async def check(self, browser: "BrowserController") -> bool:
        """Return True on the first matching pattern, raise NotConfirmed on timeout.

        A browser or page that dies while polling is a DriverFailure.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout_ms / 1000

        while True:
            for pattern in self.patterns:
                try:
                    found = await browser.page_contains_text(pattern)
                except Exception as e:
                    raise DriverFailure(None, f"confirmation check: {type(e).__name__}: {e}") from e
                if found:
                    print(f"    [confirm] matched: {pattern!r}", flush=True)
                    return True
            if loop.time() >= deadline:
                raise NotConfirmed(None, f"none of {list(self.patterns)} seen within {self.timeout_ms}ms")
            await asyncio.sleep(self.poll_interval)
