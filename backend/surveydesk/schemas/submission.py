from datetime import datetime
from typing import Union

from pydantic import BaseModel, Field

AnswerValue = Union[list[str], float, str, None]

class AnswerCreate(BaseModel):
    question_id: int
    answer_text: str = ""
    answer_value: AnswerValue = None

class SubmitResponseIn(BaseModel):
    verification_token: str
    answers: list[AnswerCreate] = Field(default_factory=list)

class SubmissionOut(BaseModel):
    submission_id: int
    survey_id: int
    email: str
    answers_saved: int

class AnswerOut(BaseModel):
    id: int
    survey_id: int
    question_id: int | None
    email: str
    answer_text: str
    answer_value: AnswerValue = None
    created_at: datetime

    class Config:
        from_attributes = True
