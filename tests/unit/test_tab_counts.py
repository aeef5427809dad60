import pytest

from winnow.core.errors import InvalidStatusError
from winnow.core.review import compute_tab_counts
from winnow.core.statuses import StatusBucket, canonical_status, clean_status
from winnow.types import Application


def _app(app_id: str, status: str) -> Application:
    return Application(
        id=app_id,
        seeker_id="s",
        job_id="j",
        status=status,
        applied_at="2026-01-01T00:00:00+00:00",
        applied_date="2026-01-01T00:00:00+00:00",
    )


def test_default_buckets_partition_the_five_application_fixture() -> None:
    statuses = ["received", "received", "accepted", "rejected", "on_hold"]
    apps = [_app(str(index), status) for index, status in enumerate(statuses)]

    counts = compute_tab_counts(apps)

    assert counts["all"] == 5
    assert counts["pending"] == 2
    assert counts["accepted"] == 1
    assert counts["rejected"] == 1
    assert counts["hold"] == 1
    assert counts["interview"] == 0
    assert list(counts)[0] == "all"


def test_empty_set_still_produces_every_bucket() -> None:
    counts = compute_tab_counts([])
    assert counts == {"all": 0, "pending": 0, "interview": 0, "accepted": 0, "rejected": 0, "hold": 0}


def test_custom_buckets_may_overlap_and_ignore_unknown_statuses() -> None:
    apps = [_app("1", "interview_pending"), _app("2", "interview_scheduled"), _app("3", "shortlisted")]
    buckets = [
        StatusBucket("interviews", frozenset({"interview_pending", "interview_scheduled"})),
        StatusBucket("waiting", frozenset({"interview_pending"})),
    ]
    assert compute_tab_counts(apps, buckets) == {"all": 3, "interviews": 2, "waiting": 1}


def test_status_cleaning() -> None:
    assert clean_status("  accepted ") == "accepted"
    assert clean_status("면접 예정") == "interview_scheduled"
    assert canonical_status(None) == ""
    with pytest.raises(InvalidStatusError):
        clean_status("   ")
