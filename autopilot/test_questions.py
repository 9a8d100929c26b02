import json

import pytest
from pydantic import ValidationError
from questions import FormDefinition, QuestionKind, QuestionSpec, check_form, load_form


def _write_form(tmp_path, data):
    path = tmp_path / "questions.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_load_form_from_json(tmp_path):
    path = _write_form(tmp_path, {
        "submit_selector": "#submit",
        "questions": [
            {"id": "age", "kind": "single_select", "options": ["#a", "#b"]},
            {"id": "why", "kind": "free_text", "options": ["textarea"], "corpus": ["Because."]},
        ],
    })
    form = load_form(path)
    assert form.root_selector == "form"
    assert form.confirmation_texts == ("Your response has been recorded", "Thank you")
    assert [q.id for q in form.questions] == ["age", "why"]
    assert form.questions[0].kind == QuestionKind.SINGLE_SELECT
    assert form.questions[1].corpus == ("Because.",)


def test_unknown_kind_is_rejected(tmp_path):
    path = _write_form(tmp_path, {
        "submit_selector": "#submit",
        "questions": [{"id": "x", "kind": "dropdown", "options": ["#a"]}],
    })
    with pytest.raises(ValidationError):
        load_form(path)


def test_question_spec_is_frozen():
    spec = QuestionSpec(id="age", kind=QuestionKind.SCALE, options=("#1", "#2"))
    with pytest.raises(ValidationError):
        spec.id = "other"


def test_exclusion_is_case_insensitive_substring():
    spec = QuestionSpec(
        id="agree",
        kind=QuestionKind.SINGLE_SELECT,
        options=("div[aria-label='Neutral']", "div[aria-label='Agree']"),
        exclude=("neutral",),
    )
    assert spec.is_excluded("div[aria-label='Neutral']")
    assert not spec.is_excluded("div[aria-label='Agree']")


def test_blank_exclusions_are_ignored():
    spec = QuestionSpec(id="agree", kind=QuestionKind.SINGLE_SELECT, options=("#a",), exclude=("", "  "))
    assert spec.exclude == ()
    assert not spec.is_excluded("#a")


def test_check_form_reports_every_problem():
    form = FormDefinition(
        submit_selector="#submit",
        questions=(
            QuestionSpec(id="age", kind=QuestionKind.SINGLE_SELECT, options=("#a",)),
            QuestionSpec(id="age", kind=QuestionKind.SCALE, options=("#1",)),
            QuestionSpec(id="empty", kind=QuestionKind.MULTI_SELECT),
            QuestionSpec(id="why", kind=QuestionKind.FREE_TEXT, options=("textarea",)),
        ),
    )
    problems = check_form(form)
    assert len(problems) == 3
    assert any("duplicate" in p and "age" in p for p in problems)
    assert any("empty" in p for p in problems)
    assert any("why" in p for p in problems)


def test_example_form_is_valid():
    from pathlib import Path

    example = Path(__file__).parent.parent / "questions.example.json"
    form = load_form(example)
    assert check_form(form) == []
