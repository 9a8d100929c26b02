import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from session import SessionOutcome


@dataclass
class IterationRecord:
    index: int
    outcome: SessionOutcome
    elapsed_seconds: float


@dataclass
class RunSummary:
    target_iterations: int = 0
    start_time: float = field(default_factory=time.time)
    end_time: Optional[float] = None
    iterations: list[IterationRecord] = field(default_factory=list)
    cancelled: bool = False

    @property
    def attempted(self) -> int:
        return len(self.iterations)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.iterations if r.outcome.ok)

    @property
    def failed(self) -> int:
        return self.attempted - self.succeeded

    def record(self, index: int, outcome: SessionOutcome, elapsed_seconds: float) -> None:
        self.iterations.append(IterationRecord(index, outcome, elapsed_seconds))

    def finish(self) -> None:
        self.end_time = time.time()

    def failure_counts(self) -> dict[str, int]:
        counts = Counter(r.outcome.reason.value for r in self.iterations if not r.outcome.ok)
        return dict(counts)

    def get_summary(self) -> dict:
        return {
            "target_iterations": self.target_iterations,
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "cancelled": self.cancelled,
            "total_time_seconds": round((self.end_time or time.time()) - self.start_time, 2),
            "failures_by_reason": self.failure_counts(),
            "per_iteration": [
                {
                    "num": r.index,
                    "status": r.outcome.status.value,
                    "reason": r.outcome.reason.value if r.outcome.reason else None,
                    "question_id": r.outcome.question_id,
                    "detail": r.outcome.detail or None,
                    "time_seconds": round(r.elapsed_seconds, 2),
                }
                for r in self.iterations
            ],
        }

    def print_summary(self) -> None:
        s = self.get_summary()
        print(f"\n{'='*50}")
        print(f"FORM AUTOPILOT - RUN SUMMARY")
        print(f"{'='*50}")
        print(f"Submissions: {s['succeeded']}/{s['attempted']} confirmed (target {s['target_iterations']})")
        print(f"Failed: {s['failed']}")
        for reason, count in sorted(s["failures_by_reason"].items()):
            print(f"  {reason}: {count}")
        if s["cancelled"]:
            print("Run was cancelled before completing")
        print(f"Total time: {s['total_time_seconds']:.1f}s")
        print(f"{'='*50}\n", flush=True)
