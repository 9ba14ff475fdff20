from datetime import timedelta, tzinfo

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy import select
from sqlalchemy.orm import Session

from surveydesk.api.deps import get_display_tz, get_settings
from surveydesk.api.surveys import get_survey_or_404
from surveydesk.core.config import Settings
from surveydesk.core.db import get_db
from surveydesk.models import SurveyAnswer
from surveydesk.schemas.stats import SurveyStatistics
from surveydesk.schemas.submission import AnswerOut
from surveydesk.services.export_csv import build_responses_csv, export_filename
from surveydesk.services.stats import aggregate
from surveydesk.utils.timeutils import utcnow

router = APIRouter(prefix="/api/surveys", tags=["statistics"])

def fetch_answers(db: Session, survey_id: int) -> list[SurveyAnswer]:
    return db.execute(
        select(SurveyAnswer)
        .where(SurveyAnswer.survey_id == survey_id)
        .order_by(SurveyAnswer.created_at.desc(), SurveyAnswer.id.desc())
    ).scalars().all()

@router.get("/{survey_id}/responses", response_model=list[AnswerOut])
def list_responses(survey_id: int, db: Session = Depends(get_db)):
    get_survey_or_404(db, survey_id)
    return fetch_answers(db, survey_id)

@router.get("/{survey_id}/stats", response_model=SurveyStatistics)
def survey_statistics(
    survey_id: int,
    db: Session = Depends(get_db),
    tz: tzinfo = Depends(get_display_tz),
    cfg: Settings = Depends(get_settings),
):
    s = get_survey_or_404(db, survey_id)
    return aggregate(
        s.questions,
        fetch_answers(db, survey_id),
        now=utcnow(),
        tz=tz,
        recent_window=timedelta(hours=cfg.recent_window_hours),
    )

@router.get("/{survey_id}/export.csv")
def export_responses(survey_id: int, db: Session = Depends(get_db), tz: tzinfo = Depends(get_display_tz)):
    s = get_survey_or_404(db, survey_id)
    body = build_responses_csv(s.questions, fetch_answers(db, survey_id), tz)
    return Response(
        content=body,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{export_filename(s.title)}"'},
    )
