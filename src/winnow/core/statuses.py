from __future__ import annotations

from dataclasses import dataclass

from winnow.core.errors import InvalidStatusError

RECEIVED = "received"
UNDER_REVIEW = "under_review"
INTERVIEW_PENDING = "interview_pending"
INTERVIEW_SCHEDULED = "interview_scheduled"
ACCEPTED = "accepted"
REJECTED = "rejected"
ON_HOLD = "on_hold"

CANONICAL_STATUSES = (
    RECEIVED,
    UNDER_REVIEW,
    INTERVIEW_PENDING,
    INTERVIEW_SCHEDULED,
    ACCEPTED,
    REJECTED,
    ON_HOLD,
)

# Display strings written by earlier generations of the dashboard.
LEGACY_STATUS_ALIASES = {
    "접수": RECEIVED,
    "검토 중": UNDER_REVIEW,
    "서류 검토중": UNDER_REVIEW,
    "면접 검토": UNDER_REVIEW,
    "면접 요청": INTERVIEW_PENDING,
    "면접 예정": INTERVIEW_SCHEDULED,
    "면접 진행중": INTERVIEW_SCHEDULED,
    "합격": ACCEPTED,
    "불합격": REJECTED,
    "보류": ON_HOLD,
}

ALL_BUCKET = "all"


@dataclass(slots=True, frozen=True)
class StatusBucket:
    name: str
    statuses: frozenset[str]

    def matches(self, status: str) -> bool:
        return status in self.statuses


DEFAULT_BUCKETS: tuple[StatusBucket, ...] = (
    StatusBucket("pending", frozenset({RECEIVED, UNDER_REVIEW, INTERVIEW_PENDING})),
    StatusBucket("interview", frozenset({INTERVIEW_SCHEDULED})),
    StatusBucket("accepted", frozenset({ACCEPTED})),
    StatusBucket("rejected", frozenset({REJECTED})),
    StatusBucket("hold", frozenset({ON_HOLD})),
)


def canonical_status(value: str | None) -> str:
    """Map a stored status onto its canonical code; unknown values pass through."""
    if value is None:
        return ""
    stripped = str(value).strip()
    return LEGACY_STATUS_ALIASES.get(stripped, stripped)


def clean_status(value: str) -> str:
    status = canonical_status(value)
    if not status:
        raise InvalidStatusError("status must not be empty")
    return status
