from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from winnow.core.errors import NotFoundError
from winnow.core.normalize import normalize_application, normalize_posting
from winnow.db.models import ApplicationRecord, PostingRecord
from winnow.types import Application, ApplicationPayload, Posting, PostingInput

APPLICATION_MUTABLE_FIELDS = {"status", "ai_summary"}


def posting_document(row: PostingRecord) -> dict[str, Any]:
    return {
        "id": row.id,
        "summary": row.summary,
        "team": row.team,
        "company": row.company,
        "location": row.location,
        "deadline": row.deadline,
        "checklist": row.checklist_json or [],
        "creatorId": row.creator_id,
        "creatorEmail": row.creator_email,
        "createdAt": row.created_at,
    }


def application_document(row: ApplicationRecord) -> dict[str, Any]:
    return {
        "id": row.id,
        "seekerId": row.seeker_id,
        "seekerEmail": row.seeker_email,
        "seekerName": row.seeker_name,
        "jobId": row.job_id,
        "jobTitle": row.job_title,
        "jobCreatorId": row.job_creator_id,
        "teamName": row.team_name,
        "status": row.status,
        "checklistDetails": row.checklist_details_json,
        "checkedItems": row.checked_items_json,
        "comments": row.comments_json,
        "aiSummary": row.ai_summary,
        "appliedAt": row.applied_at,
        "appliedDate": row.applied_date,
    }


class Repository:
    """Document-style access to postings and applications.

    Queries are limited to what a managed document store offers: lookup by id,
    equality filters, and a single order-by without a filter. Anything read is
    returned in canonical form via :mod:`winnow.core.normalize`.
    """

    def __init__(self, session: Session):
        self.session = session

    def create_posting(
        self,
        data: PostingInput,
        *,
        creator_id: str,
        creator_email: str = "",
        created_at: str | None = None,
    ) -> Posting:
        row = PostingRecord(
            summary=data.summary,
            team=data.team,
            company=data.company,
            location=data.location,
            deadline=data.deadline,
            checklist_json=[item.model_dump() for item in data.checklist],
            creator_id=creator_id,
            creator_email=creator_email,
            created_at=created_at or datetime.now(UTC).isoformat(),
        )
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return normalize_posting(posting_document(row))

    def import_posting(self, posting: Posting) -> Posting:
        row = PostingRecord(
            id=posting.id or None,
            summary=posting.summary,
            team=posting.team,
            company=posting.company,
            location=posting.location,
            deadline=posting.deadline,
            checklist_json=[item.model_dump() for item in posting.checklist],
            creator_id=posting.creator_id,
            creator_email=posting.creator_email,
            created_at=posting.created_at or datetime.now(UTC).isoformat(),
        )
        merged = self.session.merge(row)
        self.session.commit()
        return normalize_posting(posting_document(merged))

    def get_posting(self, posting_id: str) -> Posting | None:
        row = self.session.get(PostingRecord, posting_id)
        if row is None:
            return None
        return normalize_posting(posting_document(row))

    def list_postings(self, limit: int = 50) -> list[Posting]:
        statement = select(PostingRecord).order_by(PostingRecord.created_at.desc()).limit(limit)
        return [normalize_posting(posting_document(row)) for row in self.session.scalars(statement).all()]

    def find_postings(self, *, creator_id: str) -> list[Posting]:
        statement = select(PostingRecord).where(PostingRecord.creator_id == creator_id)
        return [normalize_posting(posting_document(row)) for row in self.session.scalars(statement).all()]

    def delete_posting(self, posting_id: str) -> bool:
        result = self.session.execute(delete(PostingRecord).where(PostingRecord.id == posting_id))
        self.session.commit()
        return bool(result.rowcount)

    def add_application(self, payload: ApplicationPayload) -> Application:
        row = self._application_row(payload)
        self.session.add(row)
        self.session.commit()
        self.session.refresh(row)
        return normalize_application(application_document(row))

    def import_application(self, application: Application) -> Application:
        merged = self.session.merge(self._application_row(application, application_id=application.id))
        self.session.commit()
        return normalize_application(application_document(merged))

    @staticmethod
    def _application_row(payload: ApplicationPayload, *, application_id: str | None = None) -> ApplicationRecord:
        return ApplicationRecord(
            id=application_id or None,
            seeker_id=payload.seeker_id,
            seeker_email=payload.seeker_email,
            seeker_name=payload.seeker_name,
            job_id=payload.job_id,
            job_title=payload.job_title,
            job_creator_id=payload.job_creator_id,
            team_name=payload.team_name,
            status=payload.status,
            checklist_details_json={
                item_id: entry.model_dump() for item_id, entry in payload.checklist_details.items()
            },
            checked_items_json=list(payload.checked_items),
            comments_json=dict(payload.comments),
            ai_summary=payload.ai_summary,
            applied_at=payload.applied_at,
            applied_date=payload.applied_date,
        )

    def get_application(self, application_id: str) -> Application | None:
        row = self.session.get(ApplicationRecord, application_id)
        if row is None:
            return None
        return normalize_application(application_document(row))

    def find_applications(
        self,
        *,
        job_creator_id: str | None = None,
        job_id: str | None = None,
        seeker_id: str | None = None,
    ) -> list[Application]:
        """Equality-filtered query. Result order is unspecified."""
        statement = select(ApplicationRecord)
        if job_creator_id is not None:
            statement = statement.where(ApplicationRecord.job_creator_id == job_creator_id)
        if job_id is not None:
            statement = statement.where(ApplicationRecord.job_id == job_id)
        if seeker_id is not None:
            statement = statement.where(ApplicationRecord.seeker_id == seeker_id)
        rows = self.session.scalars(statement).all()
        return [normalize_application(application_document(row)) for row in rows]

    def list_application_ids(self, *, job_creator_id: str | None = None) -> list[str]:
        statement = select(ApplicationRecord.id)
        if job_creator_id is not None:
            statement = statement.where(ApplicationRecord.job_creator_id == job_creator_id)
        return list(self.session.scalars(statement).all())

    def update_application(self, application_id: str, **values: Any) -> Application:
        unknown = set(values) - APPLICATION_MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"fields {sorted(unknown)} cannot be updated")

        row = self.session.get(ApplicationRecord, application_id)
        if row is None:
            raise NotFoundError("application", application_id)

        for key, value in values.items():
            setattr(row, key, value)

        self.session.commit()
        self.session.refresh(row)
        return normalize_application(application_document(row))
