import logging
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from surveydesk.core.errors import DuplicateSubmission, ValidationFailed
from surveydesk.models import Survey, SurveyAnswer, SurveySubmission
from surveydesk.schemas.submission import AnswerCreate
from surveydesk.services.validation import build_answer, validate_answers
from surveydesk.utils.email import normalize_email
from surveydesk.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

def has_responded(db: Session, survey_id: int, email: str) -> bool:
    email = normalize_email(email)
    found = db.execute(
        select(SurveyAnswer.id)
        .where(SurveyAnswer.survey_id == survey_id, SurveyAnswer.email == email)
        .limit(1)
    ).first()
    if found:
        return True
    return db.execute(
        select(SurveySubmission.id)
        .where(SurveySubmission.survey_id == survey_id, SurveySubmission.email == email)
        .limit(1)
    ).first() is not None

def prepare_answers(survey: Survey, payload: Sequence[AnswerCreate]) -> dict[int, AnswerCreate]:
    """Map question id -> answer with text and value built together.

    Answers to questions that are not part of the survey are dropped.
    """
    by_id = {q.id: q for q in survey.questions}
    prepared = {}
    for item in payload:
        question = by_id.get(item.question_id)
        if question is None:
            continue
        text, value = build_answer(question, item.answer_text, item.answer_value)
        prepared[question.id] = AnswerCreate(question_id=question.id, answer_text=text, answer_value=value)
    return prepared

def submit_response(db: Session, survey: Survey, email: str, payload: Sequence[AnswerCreate]) -> SurveySubmission:
    email = normalize_email(email)
    answers = prepare_answers(survey, payload)

    errors = validate_answers(survey.questions, answers)
    if errors:
        raise ValidationFailed(errors)

    if has_responded(db, survey.id, email):
        logger.warning("duplicate submission blocked for survey %s by %s", survey.id, email)
        raise DuplicateSubmission(survey.id, email)

    now = utcnow()
    sub = SurveySubmission(survey_id=survey.id, email=email, submitted_at=now)
    for q in survey.questions:
        a = answers.get(q.id)
        if a is None or not (a.answer_text or "").strip():
            continue
        sub.answers.append(SurveyAnswer(
            survey_id=survey.id,
            question_id=q.id,
            email=email,
            answer_text=a.answer_text,
            answer_value=a.answer_value,
            created_at=now,
        ))
    if not sub.answers:
        raise ValidationFailed({}, "No answers to submit")

    db.add(sub)
    try:
        db.commit()
    except IntegrityError as e:
        # a concurrent submission for the same address won the insert
        db.rollback()
        logger.warning("duplicate submission rejected by constraint for survey %s by %s", survey.id, email)
        raise DuplicateSubmission(survey.id, email) from e
    db.refresh(sub)

    logger.info("stored %d answers for survey %s", len(sub.answers), survey.id)
    return sub
