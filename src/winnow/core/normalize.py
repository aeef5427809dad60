"""Read-side normalization of stored documents.

Postings and applications have been written by two generations of clients
that disagree on field names and shapes. Everything read from the store, or
imported from an export, goes through this module exactly once and comes out
in the canonical shape from :mod:`winnow.types`.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from winnow.core.errors import InvalidChecklistError
from winnow.core.statuses import RECEIVED, canonical_status
from winnow.types import Application, ChecklistItem, ChecklistResponse, Posting

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _first(document: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = document.get(key)
        if value not in (None, ""):
            return value
    return None


def normalize_checklist_item(raw: Mapping[str, Any], *, fallback_id: str | None = None) -> ChecklistItem:
    item_id = _text(raw.get("id")).strip() or fallback_id
    if not item_id:
        raise InvalidChecklistError("checklist item is missing an id")
    return ChecklistItem(
        id=item_id,
        title=_text(_first(raw, "title", "category")),
        description=_text(_first(raw, "description", "content")),
    )


def normalize_checklist(
    raw_items: Iterable[Mapping[str, Any]] | None,
    *,
    assign_missing_ids: bool = False,
) -> list[ChecklistItem]:
    items: list[ChecklistItem] = []
    seen: set[str] = set()
    for index, raw in enumerate(raw_items or [], start=1):
        fallback = f"item-{index}" if assign_missing_ids else None
        item = normalize_checklist_item(raw, fallback_id=fallback)
        if item.id in seen:
            raise InvalidChecklistError(f"duplicate checklist item id '{item.id}'")
        seen.add(item.id)
        items.append(item)
    return items


def normalize_posting(document: Mapping[str, Any], *, assign_missing_ids: bool = False) -> Posting:
    return Posting(
        id=_text(document.get("id")),
        summary=_text(document.get("summary")),
        team=_text(document.get("team")),
        company=_text(document.get("company")),
        location=_text(document.get("location")),
        deadline=_text(document.get("deadline")),
        checklist=normalize_checklist(document.get("checklist"), assign_missing_ids=assign_missing_ids),
        creator_id=_text(document.get("creatorId")),
        creator_email=_text(document.get("creatorEmail")),
        created_at=_text(document.get("createdAt")),
    )


def normalize_checked_items(raw: Any) -> list[str]:
    if isinstance(raw, Mapping):
        return [str(key) for key, value in raw.items() if value]
    if isinstance(raw, (list, tuple)):
        return [str(item) for item in raw]
    return []


def normalize_comments(raw: Any) -> dict[str, str]:
    if isinstance(raw, str):
        if not raw.strip():
            return {}
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding unparsable legacy comments payload")
            return {}
    if not isinstance(raw, Mapping):
        return {}
    return {str(key): _text(value) for key, value in raw.items()}


def normalize_checklist_details(
    raw_details: Any,
    *,
    checked_items: list[str],
    comments: dict[str, str],
) -> dict[str, ChecklistResponse]:
    details: dict[str, ChecklistResponse] = {}

    if isinstance(raw_details, Mapping) and raw_details:
        for key, entry in raw_details.items():
            item_id = str(key)
            if isinstance(entry, Mapping):
                details[item_id] = ChecklistResponse(
                    title=_text(_first(entry, "title", "category")),
                    description=_text(_first(entry, "description", "content")),
                    checked=bool(entry.get("checked", False)),
                    comment=_text(entry.get("comment")) or comments.get(item_id, ""),
                )
            else:
                # legacy submitters stored a bare id -> bool map here
                details[item_id] = ChecklistResponse(
                    checked=bool(entry),
                    comment=comments.get(item_id, ""),
                )
        return details

    for item_id in checked_items:
        details[item_id] = ChecklistResponse(checked=True, comment=comments.get(item_id, ""))
    for item_id, comment in comments.items():
        if item_id not in details:
            details[item_id] = ChecklistResponse(checked=False, comment=comment)
    return details


def project_checked_items(details: Mapping[str, ChecklistResponse]) -> list[str]:
    return [item_id for item_id, entry in details.items() if entry.checked]


def project_comments(details: Mapping[str, ChecklistResponse]) -> dict[str, str]:
    return {item_id: entry.comment for item_id, entry in details.items()}


def normalize_application(document: Mapping[str, Any]) -> Application:
    checked_items = normalize_checked_items(document.get("checkedItems"))
    comments = normalize_comments(document.get("comments"))
    details = normalize_checklist_details(
        document.get("checklistDetails"),
        checked_items=checked_items,
        comments=comments,
    )

    applied_at = _text(_first(document, "appliedAt", "appliedDate"))
    applied_date = _text(_first(document, "appliedDate", "appliedAt"))

    return Application(
        id=_text(document.get("id")),
        seeker_id=_text(document.get("seekerId")),
        seeker_email=_text(document.get("seekerEmail")),
        seeker_name=_text(document.get("seekerName")),
        job_id=_text(document.get("jobId")),
        job_title=_text(document.get("jobTitle")),
        job_creator_id=_text(document.get("jobCreatorId")),
        team_name=_text(_first(document, "teamName", "team")),
        status=canonical_status(document.get("status")) or RECEIVED,
        checklist_details=details,
        checked_items=project_checked_items(details),
        comments=project_comments(details),
        ai_summary=_text(document.get("aiSummary")),
        applied_at=applied_at,
        applied_date=applied_date,
    )
