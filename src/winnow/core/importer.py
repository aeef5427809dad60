from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from winnow.core.errors import WinnowError
from winnow.core.normalize import normalize_application, normalize_posting
from winnow.db.repositories import Repository

logger = logging.getLogger(__name__)


class ImportReport(BaseModel):
    imported: list[str] = Field(default_factory=list)
    skipped: dict[str, str] = Field(default_factory=dict)


class DocumentImporter:
    """Loads exported postings and applications, whatever schema generation wrote them."""

    def __init__(self, session: Session):
        self.session = session
        self.repo = Repository(session)

    def import_postings(
        self,
        documents: Iterable[Mapping[str, Any]],
        *,
        assign_missing_ids: bool = False,
    ) -> ImportReport:
        report = ImportReport()
        for index, document in enumerate(documents):
            key = str(document.get("id") or f"#{index}")
            try:
                posting = normalize_posting(document, assign_missing_ids=assign_missing_ids)
                if not posting.creator_id:
                    raise WinnowError("posting has no creatorId")
                stored = self.repo.import_posting(posting)
            except (WinnowError, ValueError) as exc:
                self.session.rollback()
                logger.warning("Skipping posting %s: %s", key, exc)
                report.skipped[key] = str(exc)
                continue
            report.imported.append(stored.id)
        return report

    def import_applications(self, documents: Iterable[Mapping[str, Any]]) -> ImportReport:
        report = ImportReport()
        for index, document in enumerate(documents):
            key = str(document.get("id") or f"#{index}")
            try:
                application = normalize_application(document)
                if not application.seeker_id or not application.job_id:
                    raise WinnowError("application needs seekerId and jobId")
                stored = self.repo.import_application(application)
            except (WinnowError, ValueError) as exc:
                self.session.rollback()
                logger.warning("Skipping application %s: %s", key, exc)
                report.skipped[key] = str(exc)
                continue
            report.imported.append(stored.id)
        return report
