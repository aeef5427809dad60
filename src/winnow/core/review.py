from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from winnow.core.errors import NotFoundError, PermissionDeniedError
from winnow.core.statuses import ALL_BUCKET, DEFAULT_BUCKETS, StatusBucket, clean_status
from winnow.db.repositories import Repository
from winnow.types import Application, Identity, Posting

logger = logging.getLogger(__name__)

_EPOCH = datetime.min.replace(tzinfo=UTC)


def _parse_timestamp(value: str) -> datetime:
    if not value:
        return _EPOCH
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def sort_by_applied_desc(applications: Iterable[Application]) -> list[Application]:
    return sorted(applications, key=lambda app: _parse_timestamp(app.applied_at), reverse=True)


def sort_postings_newest_first(postings: Iterable[Posting]) -> list[Posting]:
    return sorted(postings, key=lambda posting: _parse_timestamp(posting.created_at), reverse=True)


def compute_tab_counts(
    applications: Sequence[Application],
    buckets: Sequence[StatusBucket] = DEFAULT_BUCKETS,
) -> dict[str, int]:
    counts = {ALL_BUCKET: len(applications)}
    for bucket in buckets:
        counts[bucket.name] = sum(1 for app in applications if bucket.matches(app.status))
    return counts


def ensure_owner(identity: Identity, owner_id: str, *, what: str) -> None:
    if not identity.is_company or identity.user_id != owner_id:
        raise PermissionDeniedError(f"{identity.user_id} may not act on {what}")


def ensure_can_view(identity: Identity, application: Application) -> None:
    if identity.is_company:
        ensure_owner(identity, application.job_creator_id, what=f"application {application.id}")
    elif identity.user_id != application.seeker_id:
        raise PermissionDeniedError(f"{identity.user_id} may not view application {application.id}")


class ReviewAggregator:
    """Company-side reads and status changes over submitted applications."""

    def __init__(self, session: Session):
        self.repo = Repository(session)

    def list_applications_for_owner(self, owner_id: str) -> list[Application]:
        # The store cannot combine the ownership filter with an order-by.
        return sort_by_applied_desc(self.repo.find_applications(job_creator_id=owner_id))

    def list_applications_for_posting(self, posting_id: str) -> list[Application]:
        return sort_by_applied_desc(self.repo.find_applications(job_id=posting_id))

    def list_applications_for_seeker(self, seeker_id: str) -> list[Application]:
        return sort_by_applied_desc(self.repo.find_applications(seeker_id=seeker_id))

    def get_application(self, application_id: str, viewer: Identity | None = None) -> Application:
        application = self.repo.get_application(application_id)
        if application is None:
            raise NotFoundError("application", application_id)
        if viewer is not None:
            ensure_can_view(viewer, application)
        return application

    def require_reviewable(self, application_id: str, reviewer: Identity) -> Application:
        application = self.get_application(application_id)
        ensure_owner(reviewer, application.job_creator_id, what=f"application {application_id}")
        return application

    def set_status(
        self,
        application_id: str,
        new_status: str,
        *,
        reviewer: Identity | None = None,
    ) -> Application:
        status = clean_status(new_status)
        if reviewer is not None:
            self.require_reviewable(application_id, reviewer)

        # Last write wins; concurrent reviewers are not reconciled.
        application = self.repo.update_application(application_id, status=status)
        logger.info("Application status changed id=%s status=%s", application_id, status)
        return application
