from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from surveydesk.api.deps import get_settings
from surveydesk.core.config import Settings
from surveydesk.core.db import get_db
from surveydesk.core.errors import DuplicateSubmission, InvalidVerificationToken, ValidationFailed
from surveydesk.models import Survey
from surveydesk.schemas.submission import SubmissionOut, SubmitResponseIn
from surveydesk.schemas.company import CompanyOut
from surveydesk.schemas.survey import PublishedSurveyOut, SurveyOut
from surveydesk.services.submissions import submit_response
from surveydesk.services.tokens import read_verification
from surveydesk.utils.timeutils import utcnow

router = APIRouter(prefix="/api/public/surveys", tags=["responses"])

def get_published_or_404(db: Session, survey_id: int) -> Survey:
    s = db.get(Survey, survey_id)
    if not s or not s.is_published:
        raise HTTPException(404, "Survey not found or not published")
    return s

@router.get("/{survey_id}", response_model=PublishedSurveyOut)
def get_published_survey(survey_id: int, db: Session = Depends(get_db)):
    s = get_published_or_404(db, survey_id)
    return PublishedSurveyOut(survey=SurveyOut.model_validate(s), company=CompanyOut.model_validate(s.company))

@router.post("/{survey_id}/responses", response_model=SubmissionOut, status_code=201)
def submit_survey_response(
    survey_id: int,
    payload: SubmitResponseIn,
    db: Session = Depends(get_db),
    cfg: Settings = Depends(get_settings),
):
    s = get_published_or_404(db, survey_id)
    try:
        email = read_verification(payload.verification_token, cfg.secret_key, utcnow())
    except InvalidVerificationToken as e:
        raise HTTPException(401, str(e))

    try:
        sub = submit_response(db, s, email, payload.answers)
    except ValidationFailed as e:
        raise HTTPException(422, {"message": str(e), "errors": e.errors})
    except DuplicateSubmission as e:
        raise HTTPException(409, str(e))

    return SubmissionOut(submission_id=sub.id, survey_id=s.id, email=sub.email, answers_saved=len(sub.answers))
