"""Failure taxonomy for a single form session."""

from enum import Enum
from typing import Optional


class FailureReason(str, Enum):
    POLICY_EXHAUSTED = "policy_exhausted"
    INTERACTION_TIMEOUT = "interaction_timeout"
    SESSION_SETUP_FAILURE = "session_setup_failure"
    NOT_CONFIRMED = "not_confirmed"
    DRIVER_FAILURE = "driver_failure"


class FormAutopilotError(Exception):
    """Base for every failure that ends a session without crashing the run."""

    reason = FailureReason.DRIVER_FAILURE

    def __init__(self, question_id: Optional[str], detail: str = ""):
        self.question_id = question_id
        self.detail = detail
        where = f" at {question_id}" if question_id else ""
        super().__init__(f"{self.reason.value}{where}: {detail}" if detail else f"{self.reason.value}{where}")


class PolicyExhausted(FormAutopilotError):
    reason = FailureReason.POLICY_EXHAUSTED


class InteractionError(FormAutopilotError):
    """A question could not be answered on the page."""


class InteractionTimeout(InteractionError):
    reason = FailureReason.INTERACTION_TIMEOUT


class DriverFailure(InteractionError):
    reason = FailureReason.DRIVER_FAILURE


class SessionSetupFailure(FormAutopilotError):
    reason = FailureReason.SESSION_SETUP_FAILURE


class NotConfirmed(FormAutopilotError):
    reason = FailureReason.NOT_CONFIRMED


class MalformedQuestion(ValueError):
    """Question table entry that no policy can answer."""

    def __init__(self, question_id: str, detail: str):
        self.question_id = question_id
        self.detail = detail
        super().__init__(f"question {question_id!r}: {detail}")
