import pytest

from winnow.core.errors import IncompleteChecklistError
from winnow.core.submission import check_eligibility, find_missing_items
from winnow.types import ChecklistAnswer, ChecklistItem

CHECKLIST = [
    ChecklistItem(id="a", title="X"),
    ChecklistItem(id="b", title="Y"),
    ChecklistItem(id="c", title="Z"),
]


def test_empty_checklist_is_vacuously_eligible() -> None:
    check_eligibility([], {})
    check_eligibility([], {"stray": ChecklistAnswer(checked=False, comment="")})
    assert find_missing_items([], {}) == []


def test_complete_answers_pass() -> None:
    answers = {item.id: ChecklistAnswer(checked=True, comment=f"did {item.title}") for item in CHECKLIST}
    check_eligibility(CHECKLIST, answers)


def test_unchecked_item_is_reported() -> None:
    answers = {
        "a": ChecklistAnswer(checked=True, comment="did X"),
        "b": ChecklistAnswer(checked=False, comment="did Y"),
        "c": ChecklistAnswer(checked=True, comment="did Z"),
    }
    with pytest.raises(IncompleteChecklistError) as excinfo:
        check_eligibility(CHECKLIST, answers)
    assert excinfo.value.missing_item_ids == ["b"]


def test_whitespace_comment_and_missing_answer_are_reported_in_checklist_order() -> None:
    answers = {
        "c": ChecklistAnswer(checked=True, comment="   \n\t"),
        "b": ChecklistAnswer(checked=True, comment="fine"),
    }
    assert find_missing_items(CHECKLIST, answers) == ["a", "c"]


def test_answers_may_be_plain_mappings() -> None:
    answers = {
        "a": {"checked": True, "comment": "did X"},
        "b": {"checked": True, "comment": "did Y"},
        "c": {"checked": True},
    }
    assert find_missing_items(CHECKLIST, answers) == ["c"]


def test_error_payload_lists_missing_items() -> None:
    error = IncompleteChecklistError(["a", "c"])
    payload = error.payload()
    assert payload["success"] is False
    assert payload["missingItems"] == ["a", "c"]
    assert error.status_code == 422
