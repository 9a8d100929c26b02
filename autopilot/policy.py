"""Answer randomization policy.

The policy turns a question's declared option space into a concrete selection.
It holds no state besides its random source, so a single instance is shared by
every session of a run.
"""

import random
from dataclasses import dataclass
from typing import Optional

from errors import MalformedQuestion, PolicyExhausted
from questions import QuestionKind, QuestionSpec

DEFAULT_MAX_ATTEMPTS = 10
INCLUSION_PROBABILITY = 0.5


@dataclass(frozen=True)
class Answer:
    targets: tuple[str, ...]
    text: Optional[str] = None  # only set for free_text


def validate_question(spec: QuestionSpec) -> None:
    """Raise MalformedQuestion if no answer can ever be produced for spec."""
    if spec.kind == QuestionKind.FREE_TEXT:
        if not spec.options:
            raise MalformedQuestion(spec.id, "free_text question needs a text field in options")
        if spec.fixed is None and not spec.corpus:
            raise MalformedQuestion(spec.id, "free_text question needs a corpus or a fixed value")
        return
    if spec.fixed is None and not spec.options:
        raise MalformedQuestion(spec.id, "empty option set")


class AnswerPolicy:
    def __init__(self, rng: Optional[random.Random] = None, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.rng = rng or random.Random()
        self.max_attempts = max_attempts

    def choose(self, spec: QuestionSpec) -> Answer:
        """Pick an answer for spec according to its kind."""
        validate_question(spec)

        if spec.kind == QuestionKind.FREE_TEXT:
            return Answer(targets=(spec.options[0],), text=self.rng.choice(spec.corpus))
        if spec.kind == QuestionKind.MULTI_SELECT:
            return Answer(targets=self._choose_subset(spec))
        return Answer(targets=(self._choose_one(spec),))

    def _choose_one(self, spec: QuestionSpec) -> str:
        if not spec.exclude:
            return self.rng.choice(spec.options)

        for _ in range(self.max_attempts):
            ref = self.rng.choice(spec.options)
            if not spec.is_excluded(ref):
                return ref
        raise PolicyExhausted(
            spec.id,
            f"no allowed option after {self.max_attempts} draws (exclude={list(spec.exclude)})",
        )

    def _choose_subset(self, spec: QuestionSpec) -> tuple[str, ...]:
        candidates = [ref for ref in spec.options if not spec.is_excluded(ref)]
        if not candidates:
            raise PolicyExhausted(spec.id, f"every option is excluded (exclude={list(spec.exclude)})")

        selected = [ref for ref in candidates if self.rng.random() < INCLUSION_PROBABILITY]
        if not selected:
            selected = [self.rng.choice(candidates)]
        return tuple(selected)
