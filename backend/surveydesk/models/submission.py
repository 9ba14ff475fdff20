from sqlalchemy import JSON, DateTime, Integer, String, Text, UniqueConstraint, func, ForeignKey
from sqlalchemy.orm import relationship, Mapped, mapped_column
from surveydesk.core.db import Base

class SurveySubmission(Base):
    __tablename__ = "survey_submissions"
    # closes the race between the duplicate pre-check and the insert
    __table_args__ = (UniqueConstraint("survey_id", "email", name="uq_submission_survey_email"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    survey_id: Mapped[int] = mapped_column(ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    submitted_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), server_default=func.now())

    survey: Mapped["Survey"] = relationship("Survey", back_populates="submissions")
    answers: Mapped[list["SurveyAnswer"]] = relationship(
        "SurveyAnswer", back_populates="submission", cascade="all, delete-orphan"
    )

class SurveyAnswer(Base):
    __tablename__ = "survey_answers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    submission_id: Mapped[int] = mapped_column(ForeignKey("survey_submissions.id", ondelete="CASCADE"), nullable=False, index=True)
    survey_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    # questions are reinserted on every edit; answers to removed questions are kept but orphaned
    question_id: Mapped[int | None] = mapped_column(ForeignKey("survey_questions.id", ondelete="SET NULL"), nullable=True, index=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)

    answer_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    answer_value: Mapped[object | None] = mapped_column(JSON, nullable=True)  # str | list[str] | float
    created_at: Mapped["DateTime"] = mapped_column(DateTime(timezone=True), server_default=func.now())

    submission: Mapped["SurveySubmission"] = relationship("SurveySubmission", back_populates="answers")
