"""Answer checks and construction for respondent submissions.

`validate_answers` works on anything shaped like a question (``id``,
``required``, ``question_type``) and a mapping of question id to anything
shaped like an answer (``answer_text``, ``answer_value``), so it serves both
ORM rows and request payloads.
"""
from collections.abc import Mapping, Sequence

from surveydesk.models.survey import QuestionType

REQUIRED_MESSAGE = "This question requires an answer"
SELECT_OPTION_MESSAGE = "Please select at least one option"

def _is_blank(answer) -> bool:
    if answer is None:
        return True
    text = getattr(answer, "answer_text", None) or ""
    return not text.strip()

def validate_answers(questions: Sequence, answers: Mapping) -> dict:
    errors = {}
    for question in questions:
        if not question.required:
            continue
        answer = answers.get(question.id)
        if _is_blank(answer):
            errors[question.id] = REQUIRED_MESSAGE
        elif question.question_type == QuestionType.multi_choice:
            value = answer.answer_value
            if not isinstance(value, list) or len(value) == 0:
                errors[question.id] = SELECT_OPTION_MESSAGE
    return errors

def parse_number(text) -> float | None:
    try:
        value = float(str(text).strip())
    except (TypeError, ValueError):
        return None
    if value != value or value in (float("inf"), float("-inf")):
        return None
    return value

def build_answer(question, answer_text: str = "", answer_value=None) -> tuple[str, object]:
    """Return the stored ``(answer_text, answer_value)`` pair for a question.

    Multi-choice answers keep the selected list as the value and a
    comma-joined rendering of it as the text; both come from the same list.
    """
    if question.question_type == QuestionType.multi_choice:
        if isinstance(answer_value, list):
            selected = [str(v) for v in answer_value]
        elif answer_text:
            selected = [part.strip() for part in answer_text.split(",") if part.strip()]
        else:
            selected = []
        return ", ".join(selected), selected

    text = answer_text if answer_text else ("" if answer_value is None else str(answer_value))
    if question.question_type == QuestionType.number:
        return text, parse_number(text)
    return text, text
