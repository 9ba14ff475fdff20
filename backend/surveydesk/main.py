import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from surveydesk.core.config import settings
from surveydesk.core.db import engine, Base
from surveydesk.core.logging import configure_logging
from surveydesk.api.companies import router as companies_router
from surveydesk.api.surveys import router as surveys_router
from surveydesk.api.stats import router as stats_router
from surveydesk.api.verification import router as verification_router
from surveydesk.api.submissions import router as submissions_router

configure_logging(settings)
logger = logging.getLogger(__name__)

app = FastAPI(title="SurveyDesk API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create tables on startup
Base.metadata.create_all(bind=engine)

app.include_router(companies_router)
app.include_router(surveys_router)
app.include_router(stats_router)
app.include_router(verification_router)
app.include_router(submissions_router)

@app.get("/health")
def health():
    return {"ok": True}
