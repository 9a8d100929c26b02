import asyncio
from typing import Optional, TYPE_CHECKING

from errors import DriverFailure, FormAutopilotError, InteractionTimeout, MalformedQuestion
from policy import Answer, AnswerPolicy
from questions import QuestionKind, QuestionSpec

if TYPE_CHECKING:
    from browser import BrowserController


class QuestionInteractor:
    """Answers one question at a time: locate, wait, scroll, act, pause."""

    def __init__(self, policy: AnswerPolicy, timeout_ms: int = 15000, action_delay_ms: int = 2000):
        self.policy = policy
        self.timeout_ms = timeout_ms
        self.action_delay_ms = action_delay_ms

    def resolve(self, spec: QuestionSpec) -> Answer:
        """Fixed value if the question has one, otherwise ask the policy."""
        if spec.randomized:
            return self.policy.choose(spec)
        if spec.kind == QuestionKind.FREE_TEXT:
            if not spec.options:
                raise MalformedQuestion(spec.id, "free_text question needs a text field in options")
            return Answer(targets=(spec.options[0],), text=spec.fixed)
        return Answer(targets=(spec.fixed,))

    async def answer(self, browser: "BrowserController", spec: QuestionSpec) -> None:
        answer = self.resolve(spec)
        for ref in answer.targets:
            await self._act(browser, ref, spec.id, answer.text)
            if answer.text is None:
                print(f"    [q:{spec.id}] clicked {ref}", flush=True)
            else:
                print(f"    [q:{spec.id}] typed {answer.text!r}", flush=True)

    async def press(self, browser: "BrowserController", ref: str, question_id: Optional[str] = None) -> None:
        """Single click with the same wait/pace protocol (used for submit)."""
        await self._act(browser, ref, question_id)

    async def _act(
        self,
        browser: "BrowserController",
        ref: str,
        question_id: Optional[str],
        text: Optional[str] = None,
    ) -> None:
        try:
            handle = await browser.wait_until_visible(ref, self.timeout_ms)
            await browser.scroll_into_view(handle, timeout_ms=self.timeout_ms)
            if text is None:
                await browser.click(handle, timeout_ms=self.timeout_ms)
            else:
                await browser.type_text(handle, text, timeout_ms=self.timeout_ms)
        except TimeoutError as e:
            raise InteractionTimeout(question_id, f"{ref}: {e}") from e
        except FormAutopilotError:
            raise
        except Exception as e:
            raise DriverFailure(question_id, f"{ref}: {type(e).__name__}: {e}") from e

        await asyncio.sleep(self.action_delay_ms / 1000)
