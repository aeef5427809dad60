from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from winnow.api.deps import get_db, get_identity, get_llm_router, require_company, require_seeker
from winnow.api.schemas import (
    ApplicationResponse,
    DeleteResponse,
    DraftRequest,
    DraftResponse,
    PostingCreateRequest,
    PostingResponse,
    ResetSummariesResponse,
    StatusUpdateRequest,
    SubmitApplicationRequest,
    SubmitApplicationResponse,
    SummarizeRequest,
    SummarizeResponse,
    SummaryPersistRequest,
)
from winnow.config import get_settings
from winnow.core.errors import PermissionDeniedError
from winnow.core.normalize import normalize_checklist, normalize_comments
from winnow.core.postings import PostingService
from winnow.core.review import ReviewAggregator, compute_tab_counts
from winnow.core.submission import SubmissionService, answers_from_legacy
from winnow.core.summary import SummaryService, build_summary_prompt
from winnow.llm.router import LLMRouter
from winnow.types import ChecklistAnswer, Identity, PostingInput, SeekerIdentity

router = APIRouter(prefix="/api", tags=["api"])


@router.post("/postings", response_model=PostingResponse)
def create_posting(
    payload: PostingCreateRequest,
    identity: Identity = Depends(require_company),
    db: Session = Depends(get_db),
) -> PostingResponse:
    data = PostingInput(
        summary=payload.summary,
        team=payload.team,
        company=payload.company,
        location=payload.location,
        deadline=payload.deadline,
        checklist=normalize_checklist(payload.checklist),
    )
    posting = PostingService(db).create(data, identity)
    return PostingResponse.from_posting(posting)


@router.get("/postings", response_model=list[PostingResponse])
def list_postings(limit: int = 50, db: Session = Depends(get_db)) -> list[PostingResponse]:
    return [PostingResponse.from_posting(row) for row in PostingService(db).list_all(limit=limit)]


@router.get("/postings/mine", response_model=list[PostingResponse])
def list_my_postings(
    identity: Identity = Depends(require_company),
    db: Session = Depends(get_db),
) -> list[PostingResponse]:
    rows = PostingService(db).list_for_owner(identity.user_id)
    return [PostingResponse.from_posting(row) for row in rows]


@router.post("/postings/draft", response_model=DraftResponse)
def draft_posting(
    payload: DraftRequest,
    identity: Identity = Depends(require_company),
    db: Session = Depends(get_db),
    llm: LLMRouter = Depends(get_llm_router),
) -> DraftResponse:
    draft = PostingService(db, router=llm).draft_checklist(
        messages=[message.to_conversation() for message in payload.messages],
        user_message=payload.user_msg,
        author=identity,
    )
    return DraftResponse.from_draft(draft)


@router.get("/postings/{posting_id}", response_model=PostingResponse)
def get_posting(posting_id: str, db: Session = Depends(get_db)) -> PostingResponse:
    return PostingResponse.from_posting(PostingService(db).get(posting_id))


@router.delete("/postings/{posting_id}", response_model=DeleteResponse)
def delete_posting(
    posting_id: str,
    identity: Identity = Depends(require_company),
    db: Session = Depends(get_db),
) -> DeleteResponse:
    PostingService(db).delete(posting_id, identity)
    return DeleteResponse(id=posting_id)


@router.get("/postings/{posting_id}/applications", response_model=list[ApplicationResponse])
def list_posting_applications(
    posting_id: str,
    identity: Identity = Depends(require_company),
    db: Session = Depends(get_db),
) -> list[ApplicationResponse]:
    PostingService(db).require_owned(posting_id, identity)
    rows = ReviewAggregator(db).list_applications_for_posting(posting_id)
    return [ApplicationResponse.from_application(row) for row in rows]


@router.post("/apply-job", response_model=SubmitApplicationResponse)
def apply_job(
    payload: SubmitApplicationRequest,
    identity: Identity = Depends(require_seeker),
    db: Session = Depends(get_db),
) -> SubmitApplicationResponse:
    if payload.seeker_id and payload.seeker_id != identity.user_id:
        raise PermissionDeniedError("seekerId does not match the signed-in user")

    if payload.checklist_details is not None:
        answers = {
            item_id: ChecklistAnswer(checked=entry.checked, comment=entry.comment)
            for item_id, entry in payload.checklist_details.items()
        }
    else:
        answers = answers_from_legacy(payload.checked_items, normalize_comments(payload.comments))

    seeker = SeekerIdentity(
        seeker_id=identity.user_id,
        seeker_email=identity.email or payload.seeker_email,
        seeker_name=identity.name or payload.seeker_name,
    )
    application = SubmissionService(db).submit(posting_id=payload.job_id, seeker=seeker, answers=answers)
    return SubmitApplicationResponse(id=application.id)


@router.get("/applications", response_model=list[ApplicationResponse])
def list_applications(
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> list[ApplicationResponse]:
    review = ReviewAggregator(db)
    if identity.is_company:
        rows = review.list_applications_for_owner(identity.user_id)
    else:
        rows = review.list_applications_for_seeker(identity.user_id)
    return [ApplicationResponse.from_application(row) for row in rows]


@router.get("/applications/counts")
def application_counts(
    identity: Identity = Depends(require_company),
    db: Session = Depends(get_db),
) -> dict[str, int]:
    return compute_tab_counts(ReviewAggregator(db).list_applications_for_owner(identity.user_id))


@router.get("/applications/{application_id}", response_model=ApplicationResponse)
def get_application(
    application_id: str,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> ApplicationResponse:
    application = ReviewAggregator(db).get_application(application_id, viewer=identity)
    return ApplicationResponse.from_application(application)


@router.patch("/applications/{application_id}/status", response_model=ApplicationResponse)
def update_application_status(
    application_id: str,
    payload: StatusUpdateRequest,
    identity: Identity = Depends(require_company),
    db: Session = Depends(get_db),
) -> ApplicationResponse:
    application = ReviewAggregator(db).set_status(application_id, payload.status, reviewer=identity)
    return ApplicationResponse.from_application(application)


@router.post("/applications/{application_id}/summary", response_model=ApplicationResponse)
def generate_application_summary(
    application_id: str,
    identity: Identity = Depends(require_company),
    db: Session = Depends(get_db),
    llm: LLMRouter = Depends(get_llm_router),
) -> ApplicationResponse:
    application = SummaryService(db, router=llm).generate_summary(application_id, reviewer=identity)
    return ApplicationResponse.from_application(application)


@router.put("/applications/{application_id}/summary", response_model=ApplicationResponse)
def persist_application_summary(
    application_id: str,
    payload: SummaryPersistRequest,
    identity: Identity = Depends(require_company),
    db: Session = Depends(get_db),
    llm: LLMRouter = Depends(get_llm_router),
) -> ApplicationResponse:
    application = SummaryService(db, router=llm).persist_summary(
        application_id,
        payload.summary,
        reviewer=identity,
    )
    return ApplicationResponse.from_application(application)


@router.post("/summarize-application", response_model=SummarizeResponse)
def summarize_application(
    payload: SummarizeRequest,
    identity: Identity = Depends(require_company),
    db: Session = Depends(get_db),
    llm: LLMRouter = Depends(get_llm_router),
) -> SummarizeResponse:
    prompt = build_summary_prompt(
        {item_id: entry.model_dump() for item_id, entry in payload.checklist_details.items()},
        seeker_name=payload.seeker_name,
        job_title=payload.job_title,
    )
    summary = SummaryService(db, router=llm).request_summary(prompt)
    return SummarizeResponse(summary=summary)


@router.post("/reset-summaries", response_model=ResetSummariesResponse)
def reset_summaries(
    identity: Identity = Depends(require_company),
    db: Session = Depends(get_db),
    llm: LLMRouter = Depends(get_llm_router),
) -> ResetSummariesResponse:
    owner_id = identity.user_id if get_settings().scope_summary_reset_to_owner else None
    result = SummaryService(db, router=llm).reset_all_summaries(owner_id=owner_id)
    message = f"Reset {result.count} AI summaries."
    if result.failed_ids:
        message += f" {len(result.failed_ids)} could not be reset; retry to finish."
    return ResetSummariesResponse(
        success=not result.failed_ids,
        message=message,
        count=result.count,
        failed=result.failed_ids,
    )
