from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.orm import Session

from winnow.config import Settings, get_settings
from winnow.core.errors import DuplicateApplicationError, IncompleteChecklistError, NotFoundError
from winnow.core.normalize import project_checked_items, project_comments
from winnow.core.statuses import RECEIVED
from winnow.db.repositories import Repository
from winnow.types import (
    Application,
    ApplicationPayload,
    ChecklistAnswer,
    ChecklistItem,
    ChecklistResponse,
    Posting,
    SeekerIdentity,
)

logger = logging.getLogger(__name__)

Answers = Mapping[str, ChecklistAnswer | Mapping[str, Any]]


def _coerce_answer(value: ChecklistAnswer | Mapping[str, Any] | None) -> ChecklistAnswer | None:
    if value is None or isinstance(value, ChecklistAnswer):
        return value
    return ChecklistAnswer.model_validate(value)


def find_missing_items(checklist: Sequence[ChecklistItem], answers: Answers) -> list[str]:
    """Ids of checklist items that are unchecked or lack a comment, in checklist order."""
    missing: list[str] = []
    for item in checklist:
        answer = _coerce_answer(answers.get(item.id))
        if answer is None or not answer.checked or not answer.comment.strip():
            missing.append(item.id)
    return missing


def check_eligibility(checklist: Sequence[ChecklistItem], answers: Answers) -> None:
    missing = find_missing_items(checklist, answers)
    if missing:
        raise IncompleteChecklistError(missing)


def answers_from_legacy(
    checked_items: Iterable[str] | Mapping[str, bool] | None,
    comments: Mapping[str, str] | None,
) -> dict[str, ChecklistAnswer]:
    """Answers for submitters that only send checkedItems and a comments map."""
    if isinstance(checked_items, Mapping):
        checked_ids = [str(key) for key, value in checked_items.items() if value]
    else:
        checked_ids = [str(item) for item in checked_items or []]

    comment_map = {str(key): str(value) for key, value in (comments or {}).items()}
    return {
        item_id: ChecklistAnswer(checked=True, comment=comment_map.get(item_id, ""))
        for item_id in checked_ids
    }


def build_application_payload(
    posting: Posting,
    seeker: SeekerIdentity,
    answers: Answers,
    *,
    now: datetime | None = None,
    status: str = RECEIVED,
) -> ApplicationPayload:
    details: dict[str, ChecklistResponse] = {}
    for item in posting.checklist:
        answer = _coerce_answer(answers.get(item.id)) or ChecklistAnswer()
        details[item.id] = ChecklistResponse(
            title=item.title,
            description=item.description,
            checked=answer.checked,
            comment=answer.comment,
        )

    applied = (now or datetime.now(UTC)).isoformat()
    return ApplicationPayload(
        seeker_id=seeker.seeker_id,
        seeker_email=seeker.seeker_email,
        seeker_name=seeker.seeker_name,
        job_id=posting.id,
        job_title=posting.summary,
        job_creator_id=posting.creator_id,
        team_name=posting.team,
        status=status,
        checklist_details=details,
        checked_items=project_checked_items(details),
        comments=project_comments(details),
        ai_summary="",
        applied_at=applied,
        applied_date=applied,
    )


class SubmissionService:
    def __init__(self, session: Session, *, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.repo = Repository(session)

    def submit(
        self,
        *,
        posting_id: str,
        seeker: SeekerIdentity,
        answers: Answers,
        now: datetime | None = None,
    ) -> Application:
        posting = self.repo.get_posting(posting_id)
        if posting is None:
            raise NotFoundError("posting", posting_id)

        check_eligibility(posting.checklist, answers)

        if not self.settings.allow_duplicate_applications:
            existing = self.repo.find_applications(job_id=posting_id, seeker_id=seeker.seeker_id)
            if existing:
                raise DuplicateApplicationError(
                    f"seeker {seeker.seeker_id} already applied to posting {posting_id}"
                )

        payload = build_application_payload(
            posting,
            seeker,
            answers,
            now=now,
            status=self.settings.initial_application_status,
        )
        application = self.repo.add_application(payload)
        logger.info(
            "Application submitted id=%s posting=%s seeker=%s",
            application.id,
            posting_id,
            seeker.seeker_id,
        )
        return application
