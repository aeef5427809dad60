from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from winnow.types import Application, ChecklistDraft, ConversationMessage, Posting


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ChecklistItemPayload(CamelModel):
    id: str
    title: str = ""
    description: str = ""


class ChecklistResponsePayload(CamelModel):
    title: str = ""
    description: str = ""
    checked: bool = False
    comment: str = ""


class PostingCreateRequest(CamelModel):
    summary: str = ""
    team: str = ""
    company: str = ""
    location: str = ""
    deadline: str = ""
    # Raw items: older authoring clients send category/content instead of title/description.
    checklist: list[dict[str, Any]] = Field(default_factory=list)


class PostingResponse(CamelModel):
    id: str
    summary: str
    display_title: str
    team: str
    company: str
    location: str
    deadline: str
    checklist: list[ChecklistItemPayload]
    creator_id: str
    creator_email: str
    created_at: str

    @classmethod
    def from_posting(cls, posting: Posting) -> PostingResponse:
        return cls.model_validate({**posting.model_dump(), "display_title": posting.display_title})


class DeleteResponse(CamelModel):
    success: bool = True
    id: str


class DraftMessage(CamelModel):
    role: str = ""
    sender: str = ""
    content: str = ""
    text: str = ""
    message: str = ""

    def to_conversation(self) -> ConversationMessage:
        speaker = "user" if "user" in {self.role, self.sender} else "model"
        return ConversationMessage(role=speaker, content=self.content or self.text or self.message)


class DraftRequest(CamelModel):
    messages: list[DraftMessage] = Field(default_factory=list)
    user_msg: str


class DraftResponse(CamelModel):
    title: str
    progress: str
    checklist: list[ChecklistItemPayload]
    ai_response: str

    @classmethod
    def from_draft(cls, draft: ChecklistDraft) -> DraftResponse:
        return cls.model_validate(draft.model_dump())


class SubmitApplicationRequest(CamelModel):
    seeker_id: str = ""
    seeker_email: str = ""
    seeker_name: str = ""
    job_id: str
    # Snapshot fields are taken from the stored posting; these are accepted and ignored.
    job_title: str = ""
    job_creator_id: str = ""
    team: str = ""
    checked_items: list[str] | dict[str, bool] | None = None
    comments: dict[str, str] | str | None = None
    checklist_details: dict[str, ChecklistResponsePayload] | None = None


class SubmitApplicationResponse(CamelModel):
    success: bool = True
    id: str


class ApplicationResponse(CamelModel):
    id: str
    seeker_id: str
    seeker_email: str
    seeker_name: str
    job_id: str
    job_title: str
    job_creator_id: str
    team_name: str
    status: str
    checklist_details: dict[str, ChecklistResponsePayload]
    checked_items: list[str]
    comments: dict[str, str]
    ai_summary: str
    applied_at: str
    applied_date: str

    @classmethod
    def from_application(cls, application: Application) -> ApplicationResponse:
        return cls.model_validate(application.model_dump())


class StatusUpdateRequest(CamelModel):
    status: str


class SummaryPersistRequest(CamelModel):
    summary: str


class SummarizeRequest(CamelModel):
    checklist_details: dict[str, ChecklistResponsePayload] = Field(default_factory=dict)
    seeker_name: str = ""
    job_title: str = ""


class SummarizeResponse(CamelModel):
    success: bool = True
    summary: str


class ResetSummariesResponse(CamelModel):
    success: bool
    message: str
    count: int
    failed: list[str] = Field(default_factory=list)
