from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session

from winnow.core.review import ReviewAggregator
from winnow.db.repositories import Repository
from winnow.llm.prompts import (
    APPLICATION_SUMMARY_PROMPT,
    CHECKLIST_ENTRY_TEMPLATE,
    EMPTY_COMMENT_PLACEHOLDER,
)
from winnow.llm.router import LLMRouter
from winnow.types import Application, ChecklistResponse, Identity, ResetResult

logger = logging.getLogger(__name__)


def format_checklist_for_prompt(
    checklist_details: Mapping[str, ChecklistResponse | Mapping[str, Any]],
) -> str:
    """Render responses in mapping order, one block per item."""
    blocks = []
    for entry in checklist_details.values():
        if not isinstance(entry, ChecklistResponse):
            entry = ChecklistResponse.model_validate(entry)
        blocks.append(
            CHECKLIST_ENTRY_TEMPLATE.format(
                title=entry.title,
                description=entry.description,
                held="yes" if entry.checked else "no",
                comment=entry.comment.strip() or EMPTY_COMMENT_PLACEHOLDER,
            )
        )
    return "\n\n".join(blocks)


def build_summary_prompt(
    checklist_details: Mapping[str, ChecklistResponse | Mapping[str, Any]],
    *,
    seeker_name: str,
    job_title: str = "",
) -> str:
    return APPLICATION_SUMMARY_PROMPT.format(
        seeker_name=seeker_name.strip() or "the applicant",
        job_clause=f" for the position '{job_title.strip()}'" if job_title.strip() else "",
        checklist_text=format_checklist_for_prompt(checklist_details),
    )


class SummaryService:
    """Prompt formatting, text generation, and write-back of ``aiSummary``."""

    def __init__(self, session: Session, *, router: LLMRouter | None = None):
        self.session = session
        self.repo = Repository(session)
        self.review = ReviewAggregator(session)
        self.router = router or LLMRouter()

    def request_summary(self, prompt_text: str) -> str:
        return self.router.summarize(prompt_text)

    def persist_summary(
        self,
        application_id: str,
        summary_text: str,
        *,
        reviewer: Identity | None = None,
    ) -> Application:
        if reviewer is not None:
            self.review.require_reviewable(application_id, reviewer)
        return self.repo.update_application(application_id, ai_summary=summary_text)

    def generate_summary(self, application_id: str, *, reviewer: Identity | None = None) -> Application:
        if reviewer is not None:
            application = self.review.require_reviewable(application_id, reviewer)
        else:
            application = self.review.get_application(application_id)

        prompt = build_summary_prompt(
            application.checklist_details,
            seeker_name=application.seeker_name or application.seeker_email,
            job_title=application.job_title,
        )
        summary = self.request_summary(prompt)
        logger.info("Generated summary application=%s chars=%s", application_id, len(summary))
        return self.repo.update_application(application_id, ai_summary=summary)

    def reset_all_summaries(self, *, owner_id: str | None = None) -> ResetResult:
        """Clear ``aiSummary`` record by record; failures leave earlier updates in place."""
        result = ResetResult()
        for application_id in self.repo.list_application_ids(job_creator_id=owner_id):
            try:
                self.repo.update_application(application_id, ai_summary="")
            except Exception as exc:
                self.session.rollback()
                logger.warning("Failed to reset summary application=%s error=%s", application_id, exc)
                result.failed_ids.append(application_id)
                continue
            result.count += 1

        logger.info("Reset summaries count=%s failed=%s owner=%s", result.count, len(result.failed_ids), owner_id)
        return result
