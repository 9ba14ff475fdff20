from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from surveydesk.core.config import settings

class Base(DeclarativeBase):
    pass

connect_args = {}
if settings.database_url.startswith("sqlite"):
    connect_args = {"check_same_thread": False}

engine = create_engine(settings.database_url, connect_args=connect_args)
SessionLocal = sessionmaker(autoflush=False, bind=engine)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_session_factory():
    """Sessions for handlers that outlive a single request-scoped session (long polls)."""
    return SessionLocal
