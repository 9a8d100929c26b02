"""Question table: the static description of the target form."""

import json
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class QuestionKind(str, Enum):
    SINGLE_SELECT = "single_select"
    MULTI_SELECT = "multi_select"
    SCALE = "scale"
    FREE_TEXT = "free_text"


DEFAULT_CONFIRMATION_TEXTS = ("Your response has been recorded", "Thank you")


class QuestionSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    kind: QuestionKind
    options: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()  # case-insensitive substrings of option refs
    fixed: Optional[str] = None  # element ref, or literal text for free_text
    corpus: tuple[str, ...] = ()

    @field_validator("exclude")
    @classmethod
    def _drop_blank_exclusions(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(v for v in value if v.strip())

    @property
    def randomized(self) -> bool:
        return self.fixed is None

    def is_excluded(self, ref: str) -> bool:
        """True if the option reference matches the exclusion predicate."""
        lowered = ref.lower()
        return any(pattern.lower() in lowered for pattern in self.exclude)


class FormDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    root_selector: str = "form"
    submit_selector: str
    confirmation_texts: tuple[str, ...] = DEFAULT_CONFIRMATION_TEXTS
    questions: tuple[QuestionSpec, ...]


def load_form(path: str | Path) -> FormDefinition:
    """Load the form definition from a JSON file."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return FormDefinition.model_validate(data)


def check_form(form: FormDefinition) -> list[str]:
    """Return every problem found in the form definition (empty if valid)."""
    from policy import validate_question
    from errors import MalformedQuestion

    problems = []
    seen: set[str] = set()
    for spec in form.questions:
        if spec.id in seen:
            problems.append(f"duplicate question id {spec.id!r}")
        seen.add(spec.id)
        try:
            validate_question(spec)
        except MalformedQuestion as e:
            problems.append(str(e))
    if not form.confirmation_texts:
        problems.append("no confirmation texts configured")
    return problems
