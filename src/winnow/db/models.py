from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from winnow.db.base import Base, TimestampMixin, new_document_id


class PostingRecord(TimestampMixin, Base):
    __tablename__ = "postings"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_document_id)
    summary: Mapped[str] = mapped_column(Text, default="", nullable=False)
    team: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    company: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    location: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    deadline: Mapped[str] = mapped_column(String(64), default="", nullable=False)
    checklist_json: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
    creator_id: Mapped[str] = mapped_column(String(128), index=True, nullable=False)
    creator_email: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    created_at: Mapped[str] = mapped_column(String(64), default="", nullable=False)


class ApplicationRecord(TimestampMixin, Base):
    __tablename__ = "applications"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_document_id)
    seeker_id: Mapped[str] = mapped_column(String(128), index=True, nullable=False)
    seeker_email: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    seeker_name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    job_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    job_title: Mapped[str] = mapped_column(Text, default="", nullable=False)
    job_creator_id: Mapped[str] = mapped_column(String(128), index=True, default="", nullable=False)
    team_name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    status: Mapped[str] = mapped_column(String(64), default="", nullable=False)
    # Loosely typed: older documents carry legacy shapes here.
    checklist_details_json: Mapped[Any] = mapped_column(JSON, default=dict, nullable=True)
    checked_items_json: Mapped[Any] = mapped_column(JSON, default=list, nullable=True)
    comments_json: Mapped[Any] = mapped_column(JSON, default=dict, nullable=True)
    ai_summary: Mapped[str | None] = mapped_column(Text, default="", nullable=True)
    applied_at: Mapped[str] = mapped_column(String(64), default="", nullable=False)
    applied_date: Mapped[str] = mapped_column(String(64), default="", nullable=False)
