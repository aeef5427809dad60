from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

Role = Literal["company", "seeker"]

UNTITLED = "untitled"


class ChecklistItem(BaseModel):
    id: str
    title: str = ""
    description: str = ""

    @field_validator("id")
    @classmethod
    def validate_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("checklist item id must not be empty")
        return value


class ChecklistAnswer(BaseModel):
    checked: bool = False
    comment: str = ""


class ChecklistResponse(BaseModel):
    title: str = ""
    description: str = ""
    checked: bool = False
    comment: str = ""


class Identity(BaseModel):
    user_id: str
    email: str = ""
    name: str = ""
    role: Role

    @property
    def is_company(self) -> bool:
        return self.role == "company"


class SeekerIdentity(BaseModel):
    seeker_id: str
    seeker_email: str = ""
    seeker_name: str = ""

    @classmethod
    def from_identity(cls, identity: Identity) -> SeekerIdentity:
        return cls(seeker_id=identity.user_id, seeker_email=identity.email, seeker_name=identity.name)


class PostingInput(BaseModel):
    summary: str = ""
    team: str = ""
    company: str = ""
    location: str = ""
    deadline: str = ""
    checklist: list[ChecklistItem] = Field(default_factory=list)

    @field_validator("checklist")
    @classmethod
    def validate_unique_ids(cls, value: list[ChecklistItem]) -> list[ChecklistItem]:
        seen: set[str] = set()
        for item in value:
            if item.id in seen:
                raise ValueError(f"duplicate checklist item id '{item.id}'")
            seen.add(item.id)
        return value


class Posting(PostingInput):
    id: str
    creator_id: str
    creator_email: str = ""
    created_at: str = ""

    @property
    def display_title(self) -> str:
        return self.summary.strip() or UNTITLED


class ApplicationPayload(BaseModel):
    seeker_id: str
    seeker_email: str = ""
    seeker_name: str = ""
    job_id: str
    job_title: str = ""
    job_creator_id: str = ""
    team_name: str = ""
    status: str
    checklist_details: dict[str, ChecklistResponse] = Field(default_factory=dict)
    checked_items: list[str] = Field(default_factory=list)
    comments: dict[str, str] = Field(default_factory=dict)
    ai_summary: str = ""
    applied_at: str
    applied_date: str


class Application(ApplicationPayload):
    id: str


class ChecklistDraft(BaseModel):
    title: str = ""
    progress: str = ""
    checklist: list[ChecklistItem] = Field(default_factory=list)
    ai_response: str = ""


class ConversationMessage(BaseModel):
    role: Literal["user", "model"] = "user"
    content: str = ""


class ModelResponse(BaseModel):
    content: str
    raw: dict = Field(default_factory=dict)


class ResetResult(BaseModel):
    count: int = 0
    failed_ids: list[str] = Field(default_factory=list)
