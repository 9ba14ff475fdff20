from types import SimpleNamespace

from surveydesk.models.survey import QuestionType
from surveydesk.services.validation import (
    REQUIRED_MESSAGE,
    SELECT_OPTION_MESSAGE,
    build_answer,
    parse_number,
    validate_answers,
)

def q(id, type=QuestionType.short_text, required=True):
    return SimpleNamespace(id=id, question_type=type, required=required)

def a(text="", value=None):
    return SimpleNamespace(answer_text=text, answer_value=value)

def test_required_question_without_answer_is_flagged():
    errors = validate_answers([q("q1")], {})
    assert errors == {"q1": REQUIRED_MESSAGE}

def test_whitespace_only_counts_as_empty():
    assert validate_answers([q("q1")], {"q1": a("   \n")}) == {"q1": REQUIRED_MESSAGE}

def test_optional_questions_are_never_flagged():
    questions = [q("q1", required=False), q("q2", QuestionType.multi_choice, required=False)]
    assert validate_answers(questions, {"q2": a("", [])}) == {}

def test_multi_choice_needs_a_non_empty_list():
    question = q("q1", QuestionType.multi_choice)
    assert validate_answers([question], {"q1": a("Red", [])}) == {"q1": SELECT_OPTION_MESSAGE}
    assert validate_answers([question], {"q1": a("Red", "Red")}) == {"q1": SELECT_OPTION_MESSAGE}
    assert validate_answers([question], {"q1": a("Red", ["Red"])}) == {}

def test_validation_does_not_touch_the_answers():
    answers = {"q1": a("  ", None)}
    validate_answers([q("q1")], answers)
    validate_answers([q("q1")], answers)
    assert answers["q1"].answer_text == "  "
    assert list(answers) == ["q1"]

def test_build_answer_keeps_multi_choice_text_and_value_in_sync():
    question = q("q1", QuestionType.multi_choice)
    assert build_answer(question, "", ["Red", "Blue"]) == ("Red, Blue", ["Red", "Blue"])
    assert build_answer(question, "Red, Blue") == ("Red, Blue", ["Red", "Blue"])
    assert build_answer(question) == ("", [])

def test_build_answer_number_value():
    question = q("q1", QuestionType.number)
    assert build_answer(question, "42") == ("42", 42.0)
    assert build_answer(question, "abc") == ("abc", None)
    assert build_answer(question, "", 7) == ("7", 7.0)

def test_parse_number_rejects_non_finite():
    assert parse_number("3.5") == 3.5
    assert parse_number("nan") is None
    assert parse_number("inf") is None
    assert parse_number(None) is None
