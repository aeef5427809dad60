from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy.orm import Session

from winnow.core.errors import NotFoundError, PermissionDeniedError
from winnow.core.review import ensure_owner, sort_postings_newest_first
from winnow.db.repositories import Repository
from winnow.llm.router import LLMRouter
from winnow.types import ChecklistDraft, ConversationMessage, Identity, Posting, PostingInput

logger = logging.getLogger(__name__)


class PostingService:
    def __init__(self, session: Session, *, router: LLMRouter | None = None):
        self.repo = Repository(session)
        self._router = router

    @property
    def router(self) -> LLMRouter:
        if self._router is None:
            self._router = LLMRouter()
        return self._router

    def create(self, data: PostingInput, author: Identity) -> Posting:
        if not author.is_company:
            raise PermissionDeniedError("only company accounts can create postings")
        posting = self.repo.create_posting(data, creator_id=author.user_id, creator_email=author.email)
        logger.info("Posting created id=%s owner=%s items=%s", posting.id, author.user_id, len(posting.checklist))
        return posting

    def get(self, posting_id: str) -> Posting:
        posting = self.repo.get_posting(posting_id)
        if posting is None:
            raise NotFoundError("posting", posting_id)
        return posting

    def list_all(self, limit: int = 50) -> list[Posting]:
        return self.repo.list_postings(limit=limit)

    def list_for_owner(self, owner_id: str) -> list[Posting]:
        return sort_postings_newest_first(self.repo.find_postings(creator_id=owner_id))

    def require_owned(self, posting_id: str, requester: Identity) -> Posting:
        posting = self.get(posting_id)
        ensure_owner(requester, posting.creator_id, what=f"posting {posting_id}")
        return posting

    def delete(self, posting_id: str, requester: Identity) -> Posting:
        posting = self.require_owned(posting_id, requester)
        # Applications keep their snapshot of the posting.
        self.repo.delete_posting(posting_id)
        logger.info("Posting deleted id=%s owner=%s", posting_id, requester.user_id)
        return posting

    def draft_checklist(
        self,
        *,
        messages: Iterable[ConversationMessage],
        user_message: str,
        author: Identity,
    ) -> ChecklistDraft:
        if not author.is_company:
            raise PermissionDeniedError("only company accounts can draft postings")
        return self.router.draft_checklist(messages=messages, user_message=user_message)
