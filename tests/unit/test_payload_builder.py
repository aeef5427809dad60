from datetime import UTC, datetime

from winnow.core.submission import answers_from_legacy, build_application_payload
from winnow.types import ChecklistAnswer, ChecklistItem, Posting, SeekerIdentity

NOW = datetime(2026, 4, 2, 10, 30, tzinfo=UTC)


def _posting(**overrides) -> Posting:
    values = {
        "id": "job-1",
        "summary": "Data Engineer",
        "team": "Analytics",
        "creator_id": "acme",
        "created_at": "2026-04-01T00:00:00+00:00",
        "checklist": [
            ChecklistItem(id="sql", title="SQL", description="Window functions"),
            ChecklistItem(id="etl", title="ETL", description="Batch pipelines"),
        ],
    }
    values.update(overrides)
    return Posting(**values)


SEEKER = SeekerIdentity(seeker_id="s-9", seeker_email="lee@example.test", seeker_name="Lee")


def test_payload_reproduces_answers_and_projects_legacy_fields() -> None:
    answers = {
        "sql": ChecklistAnswer(checked=True, comment="5 years of reporting"),
        "etl": ChecklistAnswer(checked=True, comment="Airflow DAGs"),
    }
    payload = build_application_payload(_posting(), SEEKER, answers, now=NOW)

    assert list(payload.checklist_details) == ["sql", "etl"]
    for item_id, answer in answers.items():
        entry = payload.checklist_details[item_id]
        assert entry.checked is answer.checked
        assert entry.comment == answer.comment
    assert payload.checklist_details["sql"].title == "SQL"
    assert payload.checklist_details["etl"].description == "Batch pipelines"

    assert payload.checked_items == ["sql", "etl"]
    assert payload.comments == {"sql": "5 years of reporting", "etl": "Airflow DAGs"}


def test_payload_snapshots_posting_fields_and_stamps_time() -> None:
    payload = build_application_payload(_posting(), SEEKER, {}, now=NOW)

    assert payload.job_id == "job-1"
    assert payload.job_title == "Data Engineer"
    assert payload.job_creator_id == "acme"
    assert payload.team_name == "Analytics"
    assert payload.seeker_name == "Lee"
    assert payload.status == "received"
    assert payload.ai_summary == ""
    assert payload.applied_at == payload.applied_date == NOW.isoformat()


def test_unchecked_answers_are_not_projected_into_checked_items() -> None:
    answers = {"sql": ChecklistAnswer(checked=True, comment="yes"), "etl": ChecklistAnswer(checked=False)}
    payload = build_application_payload(_posting(), SEEKER, answers, now=NOW)
    assert payload.checked_items == ["sql"]
    assert payload.checklist_details["etl"].checked is False


def test_answers_for_unknown_items_are_ignored() -> None:
    answers = {"sql": ChecklistAnswer(checked=True, comment="x"), "ghost": ChecklistAnswer(checked=True, comment="y")}
    payload = build_application_payload(_posting(), SEEKER, answers, now=NOW)
    assert "ghost" not in payload.checklist_details
    assert "ghost" not in payload.checked_items


def test_legacy_answers_mark_every_listed_id_checked() -> None:
    answers = answers_from_legacy(["sql", "etl"], {"sql": "reports", "other": "ignored"})
    assert answers == {
        "sql": ChecklistAnswer(checked=True, comment="reports"),
        "etl": ChecklistAnswer(checked=True, comment=""),
    }


def test_legacy_answers_accept_map_of_flags() -> None:
    answers = answers_from_legacy({"sql": True, "etl": False}, None)
    assert list(answers) == ["sql"]
