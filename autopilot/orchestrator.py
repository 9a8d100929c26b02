"""Outer submission loop.

Each iteration gets a brand-new FormSession, so a broken page or browser in
one iteration never leaks into the next. Failures are recorded and the loop
moves on; only cancellation stops it early.
"""
import asyncio
import random
import time
from typing import Awaitable, Callable, Optional

from errors import FailureReason
from metrics import RunSummary
from session import FormSession, SessionOutcome


class SubmissionOrchestrator:
    def __init__(
        self,
        session_factory: Callable[[], FormSession],
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.session_factory = session_factory
        self.rng = rng or random.Random()
        self.sleep = sleep
        self.summary = RunSummary()

    def sample_cooldown(self, min_ms: int, max_ms: int) -> int:
        """Uniform cooldown in milliseconds, both bounds inclusive."""
        return self.rng.randint(min_ms, max_ms)

    async def run(self, url: str, iterations: int, wait_range: tuple[int, int]) -> RunSummary:
        min_ms, max_ms = wait_range
        if iterations < 0:
            raise ValueError(f"iterations must be non-negative, got {iterations}")
        if min_ms < 0 or max_ms < min_ms:
            raise ValueError(f"invalid wait range [{min_ms}, {max_ms}]")

        self.summary = RunSummary(target_iterations=iterations)
        try:
            for num in range(1, iterations + 1):
                print(f"\n=== Starting submission {num}/{iterations} ===", flush=True)
                started = time.time()
                outcome = await self._run_iteration(url)
                elapsed = time.time() - started
                self.summary.record(num, outcome, elapsed)
                self._log_outcome(num, outcome, elapsed)

                if num < iterations:
                    delay_ms = self.sample_cooldown(min_ms, max_ms)
                    print(f"Waiting {delay_ms / 1000:.0f} seconds before next submission...", flush=True)
                    await self.sleep(delay_ms / 1000)
        except asyncio.CancelledError:
            self.summary.cancelled = True
            print(f"\nRun cancelled after {self.summary.attempted} iteration(s)", flush=True)
            raise
        finally:
            self.summary.finish()
            self.summary.print_summary()

        return self.summary

    async def _run_iteration(self, url: str) -> SessionOutcome:
        try:
            session = self.session_factory()
            return await session.run(url)
        except Exception as e:
            # Unexpected driver/launch errors end this iteration only
            return SessionOutcome.failed(FailureReason.DRIVER_FAILURE, None, f"{type(e).__name__}: {e}")

    @staticmethod
    def _log_outcome(num: int, outcome: SessionOutcome, elapsed: float) -> None:
        if outcome.ok:
            print(f"  [{elapsed:.1f}s] Submission {num} PASSED", flush=True)
            return
        where = f" at {outcome.question_id}" if outcome.question_id else ""
        print(f"  [{elapsed:.1f}s] Submission {num} FAILED ({outcome.reason.value}{where}): {outcome.detail}", flush=True)
