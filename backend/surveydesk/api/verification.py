from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from surveydesk.api.deps import get_identity, get_settings
from surveydesk.core.config import Settings
from surveydesk.core.db import get_db
from surveydesk.core.errors import CodeRejected, InvalidCode, InvalidEmail, MailDeliveryError, ResendCooldownActive
from surveydesk.schemas.verification import CodeConfirmIn, CodeConfirmOut, CodeRequestIn, CodeRequestOut
from surveydesk.services.submissions import has_responded
from surveydesk.services.tokens import sign_verification
from surveydesk.services.verification import VerificationGate
from surveydesk.utils.timeutils import utcnow

router = APIRouter(prefix="/api/verifications", tags=["verification"])

def _gate(identity, email: str, cfg: Settings) -> VerificationGate:
    return VerificationGate.resume(
        identity,
        email,
        code_length=cfg.otp_length,
        cooldown_seconds=cfg.otp_resend_cooldown_seconds,
    )

@router.post("", response_model=CodeRequestOut)
def request_code(payload: CodeRequestIn, identity=Depends(get_identity), cfg: Settings = Depends(get_settings)):
    gate = _gate(identity, payload.email, cfg)
    try:
        gate.request_code(payload.email)
    except InvalidEmail as e:
        raise HTTPException(400, str(e))
    except ResendCooldownActive as e:
        raise HTTPException(429, str(e), headers={"Retry-After": str(e.remaining)})
    except MailDeliveryError as e:
        raise HTTPException(502, str(e))

    return CodeRequestOut(email=gate.email, state=gate.state.value, resend_available_in=gate.resend_available_in())

@router.post("/confirm", response_model=CodeConfirmOut)
def confirm_code(
    payload: CodeConfirmIn,
    identity=Depends(get_identity),
    db: Session = Depends(get_db),
    cfg: Settings = Depends(get_settings),
):
    gate = _gate(identity, payload.email, cfg)
    try:
        email = gate.verify(payload.code)
    except InvalidCode as e:
        raise HTTPException(400, str(e))
    except CodeRejected as e:
        raise HTTPException(401, str(e))

    token = sign_verification(email, cfg.secret_key, cfg.verification_token_ttl_seconds, utcnow())
    already = has_responded(db, payload.survey_id, email) if payload.survey_id is not None else None
    return CodeConfirmOut(email=email, verification_token=token, already_submitted=already)
