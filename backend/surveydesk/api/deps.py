from datetime import tzinfo
from zoneinfo import ZoneInfo

from fastapi import Depends
from sqlalchemy.orm import Session

from surveydesk.core.config import Settings, settings
from surveydesk.core.db import get_db
from surveydesk.services.mailer import build_mailer
from surveydesk.services.verification import OtpIdentityProvider

def get_settings() -> Settings:
    return settings

def get_mailer(cfg: Settings = Depends(get_settings)):
    return build_mailer(cfg)

def get_identity(
    db: Session = Depends(get_db),
    mailer=Depends(get_mailer),
    cfg: Settings = Depends(get_settings),
) -> OtpIdentityProvider:
    return OtpIdentityProvider(db, mailer, cfg)

def get_display_tz(cfg: Settings = Depends(get_settings)) -> tzinfo:
    return ZoneInfo(cfg.display_timezone)
