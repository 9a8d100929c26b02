import asyncio
import argparse
import json
import random
import signal
import sys
from datetime import datetime
from typing import Optional

from browser import open_browser
from confirmation import ConfirmationDetector
from interactor import QuestionInteractor
from orchestrator import SubmissionOrchestrator
from policy import AnswerPolicy
from questions import FormDefinition, check_form, load_form
from session import FormSession
from config import (
    ACTION_DELAY_MS,
    ACTION_TIMEOUT_MS,
    CONFIRMATION_TIMEOUT_MS,
    COOLDOWN_MAX_MS,
    COOLDOWN_MIN_MS,
    FORM_URL,
    HEADLESS,
    ITERATIONS,
    MAX_EXCLUSION_ATTEMPTS,
    MAX_TIME_SECONDS,
    QUESTIONS_FILE,
    SETUP_TIMEOUT_MS,
)

EXIT_OK = 0
EXIT_SETUP_FAILURE = 1
EXIT_TIME_LIMIT = 2
EXIT_INTERRUPTED = 130


def _load_checked_form(path: str) -> Optional[FormDefinition]:
    try:
        form = load_form(path)
    except (OSError, ValueError) as e:
        print(f"ERROR: cannot load form definition {path}: {e}", flush=True)
        return None

    problems = check_form(form)
    if problems:
        print(f"ERROR: form definition {path} is invalid:", flush=True)
        for problem in problems:
            print(f"  - {problem}", flush=True)
        return None
    return form


async def _browser_available(headless: bool) -> bool:
    try:
        async with open_browser(headless=headless):
            pass
    except Exception as e:
        print(f"ERROR: cannot launch browser: {type(e).__name__}: {e}", flush=True)
        print("  run `playwright install chromium` first", flush=True)
        return False
    return True


def _install_sigterm_handler() -> None:
    task = asyncio.current_task()
    try:
        asyncio.get_running_loop().add_signal_handler(signal.SIGTERM, task.cancel)
    except (NotImplementedError, RuntimeError):
        # Not supported on this platform (e.g. Windows)
        pass


async def main(args: argparse.Namespace) -> int:
    if not args.url:
        print("ERROR: Set FORM_URL environment variable or pass --url", flush=True)
        return EXIT_SETUP_FAILURE
    if args.min_wait_ms < 0 or args.max_wait_ms < args.min_wait_ms:
        print(f"ERROR: invalid cooldown range [{args.min_wait_ms}, {args.max_wait_ms}] ms", flush=True)
        return EXIT_SETUP_FAILURE
    if args.iterations < 0:
        print(f"ERROR: iterations must be non-negative, got {args.iterations}", flush=True)
        return EXIT_SETUP_FAILURE

    form = _load_checked_form(args.questions)
    if form is None:
        return EXIT_SETUP_FAILURE

    print(f"Starting Form Autopilot", flush=True)
    print(f"Target: {args.url}", flush=True)
    print(f"Questions: {len(form.questions)} ({args.questions})", flush=True)
    print(f"Iterations: {args.iterations}", flush=True)
    print(f"Cooldown: {args.min_wait_ms / 1000:.0f}-{args.max_wait_ms / 1000:.0f}s", flush=True)
    print(f"Headless: {args.headless}", flush=True)
    print("-" * 50, flush=True)

    if not await _browser_available(args.headless):
        return EXIT_SETUP_FAILURE

    _install_sigterm_handler()

    rng = random.Random(args.seed)
    policy = AnswerPolicy(rng, max_attempts=MAX_EXCLUSION_ATTEMPTS)
    interactor = QuestionInteractor(policy, timeout_ms=ACTION_TIMEOUT_MS, action_delay_ms=ACTION_DELAY_MS)
    detector = ConfirmationDetector(form.confirmation_texts, timeout_ms=CONFIRMATION_TIMEOUT_MS)

    def new_session() -> FormSession:
        return FormSession(
            form,
            interactor,
            detector,
            open_browser=lambda: open_browser(headless=args.headless),
            setup_timeout_ms=SETUP_TIMEOUT_MS,
        )

    orchestrator = SubmissionOrchestrator(new_session, rng=rng)
    run = orchestrator.run(args.url, args.iterations, (args.min_wait_ms, args.max_wait_ms))

    exit_code = EXIT_OK
    try:
        if args.max_runtime:
            await asyncio.wait_for(run, timeout=args.max_runtime)
        else:
            await run
    except asyncio.TimeoutError:
        print(f"\nTIMEOUT: Exceeded {args.max_runtime}s limit", flush=True)
        exit_code = EXIT_TIME_LIMIT

    if args.save_results:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        results_file = f"results_{timestamp}.json"
        with open(results_file, "w") as f:
            json.dump(orchestrator.summary.get_summary(), f, indent=2)
        print(f"\nResults saved to: {results_file}", flush=True)

    return exit_code


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Repeatedly fill out and submit a web form")
    parser.add_argument("--url", default=FORM_URL, help="Form URL (default: $FORM_URL)")
    parser.add_argument("--questions", default=QUESTIONS_FILE, help="Form definition JSON file")
    parser.add_argument("--iterations", type=int, default=ITERATIONS, help="Number of submissions")
    parser.add_argument("--min-wait-ms", type=int, default=COOLDOWN_MIN_MS, help="Minimum cooldown between submissions")
    parser.add_argument("--max-wait-ms", type=int, default=COOLDOWN_MAX_MS, help="Maximum cooldown between submissions")
    parser.add_argument("--headless", action=argparse.BooleanOptionalAction, default=HEADLESS,
                        help="Run browser in headless mode (default: $HEADLESS)")
    parser.add_argument("--seed", type=int, default=None, help="Seed answers and cooldowns for a reproducible run")
    parser.add_argument("--max-runtime", type=int, default=MAX_TIME_SECONDS, help="Stop the whole run after N seconds")
    parser.add_argument("--save-results", action="store_true", help="Write the run summary to results_<timestamp>.json")
    return parser.parse_args(argv)


def cli() -> None:
    # Force unbuffered output
    sys.stdout.reconfigure(line_buffering=True)
    sys.stderr.reconfigure(line_buffering=True)

    try:
        code = asyncio.run(main(parse_args()))
    except (KeyboardInterrupt, asyncio.CancelledError):
        print("\nInterrupted", flush=True)
        code = EXIT_INTERRUPTED
    sys.exit(code)


if __name__ == "__main__":
    cli()
