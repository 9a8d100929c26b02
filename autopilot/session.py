"""One complete form session: open, answer every question, submit, confirm."""

from dataclasses import dataclass
from enum import Enum
from typing import AsyncContextManager, Callable, Optional, TYPE_CHECKING

from confirmation import ConfirmationDetector
from errors import FailureReason, FormAutopilotError, SessionSetupFailure
from interactor import QuestionInteractor
from questions import FormDefinition

if TYPE_CHECKING:
    from browser import BrowserController


class OutcomeStatus(str, Enum):
    SUBMITTED = "submitted"
    FAILED = "failed"


@dataclass(frozen=True)
class SessionOutcome:
    status: OutcomeStatus
    reason: Optional[FailureReason] = None
    question_id: Optional[str] = None
    detail: str = ""

    @classmethod
    def submitted(cls) -> "SessionOutcome":
        return cls(OutcomeStatus.SUBMITTED)

    @classmethod
    def failed(cls, reason: FailureReason, question_id: Optional[str] = None, detail: str = "") -> "SessionOutcome":
        return cls(OutcomeStatus.FAILED, reason, question_id, detail)

    @classmethod
    def from_error(cls, error: FormAutopilotError) -> "SessionOutcome":
        return cls.failed(error.reason, error.question_id, error.detail)

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUBMITTED


class FormSession:
    def __init__(
        self,
        form: FormDefinition,
        interactor: QuestionInteractor,
        detector: ConfirmationDetector,
        open_browser: Callable[[], AsyncContextManager["BrowserController"]],
        setup_timeout_ms: int = 15000,
    ):
        self.form = form
        self.interactor = interactor
        self.detector = detector
        self.open_browser = open_browser
        self.setup_timeout_ms = setup_timeout_ms

    async def run(self, url: str) -> SessionOutcome:
        """Drive one browser through the whole form.

        Taxonomy failures become a FAILED outcome; anything else propagates.
        The browser is released on every path.
        """
        async with self.open_browser() as browser:
            try:
                await self._open_form(browser, url)
                for spec in self.form.questions:
                    await self.interactor.answer(browser, spec)
                await self.interactor.press(browser, self.form.submit_selector)
                print("    [session] submitted, waiting for confirmation", flush=True)
                if not await self.detector.check(browser):
                    return SessionOutcome.failed(FailureReason.NOT_CONFIRMED, None, "confirmation check returned False")
            except FormAutopilotError as e:
                return SessionOutcome.from_error(e)
        return SessionOutcome.submitted()

    async def _open_form(self, browser: "BrowserController", url: str) -> None:
        try:
            await browser.navigate(url)
            await browser.wait_until_visible(self.form.root_selector, self.setup_timeout_ms)
        except Exception as e:
            raise SessionSetupFailure(None, f"{url}: {type(e).__name__}: {e}") from e
        print(f"    [session] opened {url}", flush=True)
