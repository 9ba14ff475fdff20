import csv
import io
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

from surveydesk.services.export_csv import build_responses_csv, export_filename

T0 = datetime(2024, 3, 1, 10, tzinfo=timezone.utc)

def question(id, text):
    return SimpleNamespace(id=id, question_text=text)

def answer(question_id, text, email, at=T0):
    return SimpleNamespace(question_id=question_id, answer_text=text, email=email, created_at=at)

QUESTIONS = [question(1, "Name"), question(2, 'Your "honest" view, please'), question(3, "Colours")]

def parse(text):
    return list(csv.reader(io.StringIO(text)))

def test_header_and_rows_round_trip():
    answers = [
        answer(1, "Ann", "ann@x.io"),
        answer(2, 'He said "hi", then left', "ann@x.io"),
        answer(3, "Red, Blue", "ann@x.io"),
        answer(1, "Bob", "bob@x.io", T0 + timedelta(days=1)),
    ]
    rows = parse(build_responses_csv(QUESTIONS, answers))
    assert rows[0] == ["Respondent", "Date", "Name", 'Your "honest" view, please', "Colours"]
    assert rows[1] == ["ann@x.io", "2024-03-01", "Ann", 'He said "hi", then left', "Red, Blue"]
    assert rows[2] == ["bob@x.io", "2024-03-02", "Bob", "", ""]
    assert len(rows) == 3

def test_quotes_are_doubled_inside_quoted_cell():
    body = build_responses_csv(QUESTIONS[:2], [answer(2, 'He said "hi", then left', "ann@x.io")])
    assert '"He said ""hi"", then left"' in body

def test_answers_for_removed_questions_are_dropped():
    answers = [answer(1, "Ann", "ann@x.io"), answer(None, "orphan", "ann@x.io"), answer(99, "gone", "ann@x.io")]
    rows = parse(build_responses_csv(QUESTIONS, answers))
    assert rows[1] == ["ann@x.io", "2024-03-01", "Ann", "", ""]

def test_no_answers_gives_header_only():
    assert parse(build_responses_csv(QUESTIONS, [])) == [["Respondent", "Date", "Name", 'Your "honest" view, please', "Colours"]]

def test_export_filename_strips_unsafe_characters():
    assert export_filename("Q3 / Team: pulse") == "Q3  Team pulse_responses.csv"
    assert export_filename("???") == "survey_responses.csv"
