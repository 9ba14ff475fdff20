import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from surveydesk.api.deps import get_mailer, get_settings
from surveydesk.core.config import Settings
from surveydesk.core.db import Base, get_db, get_session_factory
from surveydesk.main import app

class RecordingMailer:
    def __init__(self):
        self.sent = []

    def send_code(self, email, code):
        self.sent.append((email, code))

    def last_code(self, email):
        codes = [c for e, c in self.sent if e == email]
        return codes[-1] if codes else None

@pytest.fixture
def engine():
    eng = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()

@pytest.fixture
def session_factory(engine):
    return sessionmaker(autoflush=False, bind=engine)

@pytest.fixture
def db(session_factory):
    with session_factory() as session:
        yield session

@pytest.fixture
def cfg():
    return Settings(
        secret_key="test-secret",
        otp_resend_cooldown_seconds=60,
        poll_interval_seconds=0,
        poll_max_attempts=3,
    )

@pytest.fixture
def mailer():
    return RecordingMailer()

@pytest.fixture
def client(session_factory, mailer, cfg):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_settings] = lambda: cfg
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()

@pytest.fixture
def company(client):
    r = client.post("/api/companies", json={"name": "Acme", "domain": "Acme.com"})
    assert r.status_code == 200
    return r.json()

QUESTIONS = [
    {"question_text": "Your name", "question_type": "short_text", "required": True},
    {"question_text": "Do you like it?", "question_type": "single_choice", "options": ["Yes", "No"], "required": True},
    {"question_text": "Pick colours", "question_type": "multi_choice", "options": ["Red", "Green", "Blue"]},
    {"question_text": "How many?", "question_type": "number"},
]

@pytest.fixture
def published_survey(client, company):
    r = client.post("/api/surveys", json={
        "company_id": company["id"],
        "title": "Feedback",
        "is_published": True,
        "questions": QUESTIONS,
    })
    assert r.status_code == 200
    return r.json()

@pytest.fixture
def verify(client, mailer):
    """Run the code flow for an address and return the verification token."""
    def _verify(email, survey_id=None):
        r = client.post("/api/verifications", json={"email": email})
        assert r.status_code == 200, r.text
        code = mailer.last_code(r.json()["email"])
        body = {"email": email, "code": code}
        if survey_id is not None:
            body["survey_id"] = survey_id
        r = client.post("/api/verifications/confirm", json=body)
        assert r.status_code == 200, r.text
        return r.json()
    return _verify
