from collections.abc import Sequence

from surveydesk.models import SurveyQuestion
from surveydesk.schemas.survey import QuestionCreate

def build_questions(items: Sequence[QuestionCreate]) -> list[SurveyQuestion]:
    """New question rows for a survey, ordered 0..n-1 as given."""
    return [
        SurveyQuestion(
            question_text=item.question_text,
            question_type=item.question_type,
            options=list(item.options) if item.options is not None else None,
            required=item.required,
            order=index,
        )
        for index, item in enumerate(items)
    ]

def renumber(questions: Sequence[SurveyQuestion]) -> None:
    for index, q in enumerate(sorted(questions, key=lambda q: q.order)):
        q.order = index
