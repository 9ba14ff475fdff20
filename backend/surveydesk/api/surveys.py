import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from surveydesk.api.deps import get_settings
from surveydesk.core.config import Settings
from surveydesk.core.db import get_db, get_session_factory
from surveydesk.models import Company, Survey
from surveydesk.schemas.survey import PublishWaitOut, QuestionCreate, SurveyCreate, SurveyOut, SurveyUpdate
from surveydesk.services.polling import PollOutcome, poll_until
from surveydesk.services.questions import build_questions, renumber

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/surveys", tags=["surveys"])

def get_survey_or_404(db: Session, survey_id: int) -> Survey:
    s = db.get(Survey, survey_id)
    if not s:
        raise HTTPException(404, "Survey not found")
    return s

@router.post("", response_model=SurveyOut)
def create_survey(payload: SurveyCreate, db: Session = Depends(get_db)):
    if not db.get(Company, payload.company_id):
        raise HTTPException(400, "Company information is missing")

    s = Survey(
        company_id=payload.company_id,
        title=payload.title,
        description=payload.description,
        is_published=payload.is_published,
        created_by=payload.created_by,
    )
    s.questions = build_questions(payload.questions)
    db.add(s)
    db.commit()
    db.refresh(s)
    logger.info("created survey %s with %d questions", s.id, len(s.questions))
    return s

@router.get("", response_model=list[SurveyOut])
def list_surveys(company_id: int, db: Session = Depends(get_db)):
    return db.execute(
        select(Survey)
        .where(Survey.company_id == company_id)
        .order_by(Survey.created_at.desc(), Survey.id.desc())
    ).scalars().all()

@router.get("/{survey_id}", response_model=SurveyOut)
def get_survey(survey_id: int, db: Session = Depends(get_db)):
    return get_survey_or_404(db, survey_id)

@router.put("/{survey_id}", response_model=SurveyOut)
def update_survey(survey_id: int, payload: SurveyUpdate, db: Session = Depends(get_db)):
    s = get_survey_or_404(db, survey_id)

    if payload.title is not None:
        s.title = payload.title
    if "description" in payload.model_fields_set:
        s.description = payload.description
    if payload.is_published is not None:
        s.is_published = payload.is_published

    if payload.questions is not None:
        # questions have no identity across edits: drop them all and reinsert
        s.questions.clear()
        db.flush()
        s.questions.extend(build_questions(payload.questions))

    db.commit()
    db.refresh(s)
    return s

@router.post("/{survey_id}/questions", response_model=SurveyOut)
def add_question(survey_id: int, payload: QuestionCreate, db: Session = Depends(get_db)):
    s = get_survey_or_404(db, survey_id)
    q = build_questions([payload])[0]
    q.order = len(s.questions)
    s.questions.append(q)
    db.commit()
    db.refresh(s)
    return s

@router.delete("/{survey_id}/questions/{question_id}", response_model=SurveyOut)
def remove_question(survey_id: int, question_id: int, db: Session = Depends(get_db)):
    s = get_survey_or_404(db, survey_id)
    q = next((q for q in s.questions if q.id == question_id), None)
    if not q:
        raise HTTPException(404, "Question not found")
    s.questions.remove(q)
    renumber(s.questions)
    db.commit()
    db.refresh(s)
    return s

@router.delete("/{survey_id}", status_code=204)
def delete_survey(survey_id: int, db: Session = Depends(get_db)):
    s = get_survey_or_404(db, survey_id)
    db.delete(s)
    db.commit()
    logger.info("deleted survey %s", survey_id)

def _set_published(db: Session, survey_id: int, published: bool) -> Survey:
    s = get_survey_or_404(db, survey_id)
    if published and not s.questions:
        raise HTTPException(400, "Survey must have at least one question to publish")
    s.is_published = published
    db.commit()
    db.refresh(s)
    return s

@router.post("/{survey_id}/publish", response_model=SurveyOut)
def publish_survey(survey_id: int, db: Session = Depends(get_db)):
    return _set_published(db, survey_id, True)

@router.post("/{survey_id}/unpublish", response_model=SurveyOut)
def unpublish_survey(survey_id: int, db: Session = Depends(get_db)):
    return _set_published(db, survey_id, False)

@router.get("/{survey_id}/wait-published", response_model=PublishWaitOut)
async def wait_until_published(
    survey_id: int,
    request: Request,
    session_factory=Depends(get_session_factory),
    cfg: Settings = Depends(get_settings),
):
    def published() -> bool:
        with session_factory() as db:
            s = db.get(Survey, survey_id)
            if not s:
                raise HTTPException(404, "Survey not found")
            return s.is_published

    outcome = await poll_until(
        published,
        interval=cfg.poll_interval_seconds,
        max_attempts=cfg.poll_max_attempts,
        should_stop=request.is_disconnected,
    )
    return PublishWaitOut(survey_id=survey_id, is_published=outcome == PollOutcome.satisfied, outcome=outcome.value)
