import datetime

from pydantic import BaseModel

from surveydesk.models.survey import QuestionType

class DailyCount(BaseModel):
    date: datetime.date
    count: int

class OptionCount(BaseModel):
    option: str
    count: int

class NumericSummary(BaseModel):
    average: float
    min: float
    max: float
    count: int

class QuestionStatistics(BaseModel):
    question_id: int | str
    question_text: str
    question_type: QuestionType
    responses: int
    response_rate: int
    tally: list[OptionCount] | None = None
    numeric: NumericSummary | None = None

class SurveyStatistics(BaseModel):
    total_questions: int
    total_respondents: int
    recent_respondents: int
    latest_response_at: datetime.datetime | None = None
    daily: list[DailyCount]
    questions: list[QuestionStatistics]
