from datetime import datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from surveydesk.models.survey import CHOICE_TYPES, QuestionType
from surveydesk.schemas.company import CompanyOut

class QuestionCreate(BaseModel):
    question_text: str = Field(..., min_length=1)
    question_type: QuestionType = QuestionType.short_text
    options: list[str] | None = None
    required: bool = False

    @field_validator("question_text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Question text cannot be empty")
        return v

    @model_validator(mode="after")
    def options_match_type(self):
        if self.question_type in CHOICE_TYPES:
            cleaned = [o.strip() for o in (self.options or []) if o and o.strip()]
            if not cleaned:
                raise ValueError("Choice questions need at least one option")
            self.options = cleaned
        else:
            self.options = None
        return self

class SurveyCreate(BaseModel):
    company_id: int
    title: str
    description: str | None = None
    is_published: bool = False
    created_by: str | None = None
    questions: list[QuestionCreate] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please enter a survey title")
        return v

class SurveyUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    is_published: bool | None = None
    # None keeps the current questions, a list replaces them
    questions: list[QuestionCreate] | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Please enter a survey title")
        return v

class SurveyQuestionOut(BaseModel):
    id: int
    survey_id: int
    question_text: str
    question_type: QuestionType
    options: list[str] | None = None
    required: bool
    order: int

    class Config:
        from_attributes = True

class SurveyOut(BaseModel):
    id: int
    company_id: int
    title: str
    description: str | None = None
    is_published: bool
    created_by: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    questions: list[SurveyQuestionOut]

    class Config:
        from_attributes = True

class PublishedSurveyOut(BaseModel):
    survey: SurveyOut
    company: CompanyOut

class PublishWaitOut(BaseModel):
    survey_id: int
    is_published: bool
    outcome: str
