"""Survey statistics derived from stored answers.

Every function here is pure over its inputs: questions and answers are only
read, and calling again with the same inputs gives an equal result. Answers
that drift from the question schema (an option that no longer exists, text in
a number field, malformed JSON in a multi-choice value) are left out of the
affected tally instead of raising.
"""
import json
from collections.abc import Iterable, Iterator, Sequence
from datetime import datetime, timedelta, timezone, tzinfo

from surveydesk.models.survey import QuestionType
from surveydesk.schemas.stats import (
    DailyCount,
    NumericSummary,
    OptionCount,
    QuestionStatistics,
    SurveyStatistics,
)
from surveydesk.services.validation import parse_number
from surveydesk.utils.timeutils import as_utc

def count_unique_respondents(answers: Iterable) -> int:
    return len({a.email for a in answers})

def latest_by_respondent(answers: Iterable) -> dict[str, datetime]:
    latest: dict[str, datetime] = {}
    for a in answers:
        ts = as_utc(a.created_at)
        if a.email not in latest or ts > latest[a.email]:
            latest[a.email] = ts
    return latest

def count_recent_respondents(answers: Iterable, now: datetime, window: timedelta = timedelta(hours=24)) -> int:
    cutoff = as_utc(now) - window
    return sum(1 for ts in latest_by_respondent(answers).values() if ts > cutoff)

class DailyRespondents:
    """Distinct respondents per calendar day, oldest day first.

    Iterating computes the buckets afresh, so the sequence can be walked any
    number of times.
    """

    def __init__(self, answers: Sequence, tz: tzinfo = timezone.utc):
        self._answers = answers
        self._tz = tz

    def __iter__(self) -> Iterator[DailyCount]:
        days: dict = {}
        for a in self._answers:
            day = as_utc(a.created_at).astimezone(self._tz).date()
            days.setdefault(day, set()).add(a.email)
        for day in sorted(days):
            yield DailyCount(date=day, count=len(days[day]))

def daily_respondents(answers: Sequence, tz: tzinfo = timezone.utc) -> DailyRespondents:
    return DailyRespondents(answers, tz)

def answers_for(question, answers: Iterable) -> list:
    return [a for a in answers if a.question_id == question.id]

def response_rate(question, answers: Iterable, total_respondents: int) -> int:
    if total_respondents <= 0:
        return 0
    count = len(answers_for(question, answers))
    return round(count / total_respondents * 100)

def single_choice_tally(question, answers: Iterable) -> dict[str, int]:
    counts = {option: 0 for option in (question.options or [])}
    for a in answers_for(question, answers):
        text = a.answer_text or ""
        if text in counts:
            counts[text] += 1
    return counts

def selected_options(value) -> list:
    if isinstance(value, list):
        return value
    if value is None or value == "":
        return []
    try:
        parsed = json.loads(value)
    except (TypeError, ValueError):
        return []
    return parsed if isinstance(parsed, list) else []

def multi_choice_tally(question, answers: Iterable) -> dict[str, int]:
    counts = {option: 0 for option in (question.options or [])}
    for a in answers_for(question, answers):
        for option in selected_options(a.answer_value):
            if isinstance(option, str) and option in counts:
                counts[option] += 1
    return counts

def numeric_summary(question, answers: Iterable) -> NumericSummary | None:
    values = [v for v in (parse_number(a.answer_text) for a in answers_for(question, answers)) if v is not None]
    if not values:
        return None
    return NumericSummary(
        average=sum(values) / len(values),
        min=min(values),
        max=max(values),
        count=len(values),
    )

def question_statistics(question, answers: Sequence, total_respondents: int) -> QuestionStatistics:
    tally = None
    numeric = None
    if question.question_type == QuestionType.single_choice:
        tally = single_choice_tally(question, answers)
    elif question.question_type == QuestionType.multi_choice:
        tally = multi_choice_tally(question, answers)
    elif question.question_type == QuestionType.number:
        numeric = numeric_summary(question, answers)

    return QuestionStatistics(
        question_id=question.id,
        question_text=question.question_text,
        question_type=question.question_type,
        responses=len(answers_for(question, answers)),
        response_rate=response_rate(question, answers, total_respondents),
        tally=[OptionCount(option=k, count=v) for k, v in tally.items()] if tally is not None else None,
        numeric=numeric,
    )

def aggregate(
    questions: Sequence,
    answers: Sequence,
    now: datetime,
    tz: tzinfo = timezone.utc,
    recent_window: timedelta = timedelta(hours=24),
) -> SurveyStatistics:
    total = count_unique_respondents(answers)
    latest = max((as_utc(a.created_at) for a in answers), default=None)
    return SurveyStatistics(
        total_questions=len(questions),
        total_respondents=total,
        recent_respondents=count_recent_respondents(answers, now, recent_window),
        latest_response_at=latest,
        daily=list(daily_respondents(answers, tz)),
        questions=[question_statistics(q, answers, total) for q in questions],
    )
