import csv
import io
import re
from collections.abc import Sequence
from datetime import timezone, tzinfo

from surveydesk.utils.timeutils import as_utc

def _group_by_respondent(answers: Sequence) -> dict[str, dict]:
    """Respondent email -> first answer time and answer text per question id."""
    respondents: dict[str, dict] = {}
    for a in sorted(answers, key=lambda a: (as_utc(a.created_at), a.email)):
        entry = respondents.setdefault(a.email, {"first_at": as_utc(a.created_at), "answers": {}})
        if a.question_id is not None:
            entry["answers"][a.question_id] = a.answer_text or ""
    return respondents

def build_responses_csv(questions: Sequence, answers: Sequence, tz: tzinfo = timezone.utc) -> str:
    """
    One row per respondent, one column per question in survey order.
    Unanswered questions give an empty cell.
    """
    out = io.StringIO()
    writer = csv.writer(out)
    writer.writerow(["Respondent", "Date"] + [q.question_text for q in questions])

    for email, entry in _group_by_respondent(answers).items():
        row = [email, entry["first_at"].astimezone(tz).date().isoformat()]
        row += [entry["answers"].get(q.id, "") for q in questions]
        writer.writerow(row)

    return out.getvalue()

def export_filename(title: str) -> str:
    safe = re.sub(r"[^\w\- ]+", "", title, flags=re.ASCII).strip() or "survey"
    return f"{safe}_responses.csv"
