from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer
import uvicorn

from winnow.api.app import create_app
from winnow.config import get_settings
from winnow.core.errors import WinnowError
from winnow.core.importer import DocumentImporter
from winnow.core.postings import PostingService
from winnow.core.review import ReviewAggregator, compute_tab_counts
from winnow.core.summary import SummaryService
from winnow.db.init import init_database
from winnow.db.session import session_scope
from winnow.logging_config import configure_logging
from winnow.types import Application, Identity

app = typer.Typer(help="Winnow CLI")
postings_app = typer.Typer(help="Job postings")
applications_app = typer.Typer(help="Submitted applications")
summaries_app = typer.Typer(help="AI summaries of applications")

app.add_typer(postings_app, name="postings")
app.add_typer(applications_app, name="applications")
app.add_typer(summaries_app, name="summaries")

_INITIALIZED = False


def ensure_initialized() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return
    init_database()
    _INITIALIZED = True


def _echo(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _load_documents(file: Path) -> list[dict[str, Any]]:
    payload = json.loads(file.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        # exports keyed by document id
        if all(isinstance(value, dict) for value in payload.values()) and "id" not in payload:
            return [{"id": key, **value} for key, value in payload.items()]
        return [payload]
    if isinstance(payload, list):
        return [item for item in payload if isinstance(item, dict)]
    raise typer.BadParameter(f"{file} does not contain JSON documents")


def _application_row(application: Application) -> dict[str, Any]:
    return {
        "id": application.id,
        "seeker": application.seeker_name or application.seeker_email or application.seeker_id,
        "job_title": application.job_title,
        "status": application.status,
        "applied_at": application.applied_at,
        "has_summary": bool(application.ai_summary),
    }


def _reviewer(reviewer_id: str | None) -> Identity | None:
    if not reviewer_id:
        return None
    return Identity(user_id=reviewer_id, role="company")


@app.command("init")
def init_cmd() -> None:
    """Create the data directory and database tables."""
    configure_logging()
    result = init_database()
    _echo({"ok": True, **result})


@postings_app.command("import")
def postings_import(
    file: Path = typer.Option(..., "--file", exists=True, readable=True),
    assign_ids: bool = typer.Option(False, "--assign-ids", help="Number checklist items that have no id"),
) -> None:
    configure_logging()
    ensure_initialized()
    documents = _load_documents(file)
    with session_scope() as db:
        report = DocumentImporter(db).import_postings(documents, assign_missing_ids=assign_ids)
    _echo(report.model_dump())


@postings_app.command("list")
def postings_list(
    owner: str | None = typer.Option(None, "--owner"),
    limit: int = typer.Option(20, "--limit"),
) -> None:
    configure_logging()
    ensure_initialized()
    with session_scope() as db:
        service = PostingService(db)
        postings = service.list_for_owner(owner) if owner else service.list_all(limit=limit)
        _echo(
            [
                {
                    "id": posting.id,
                    "title": posting.display_title,
                    "team": posting.team,
                    "owner": posting.creator_id,
                    "items": len(posting.checklist),
                    "created_at": posting.created_at,
                }
                for posting in postings
            ]
        )


@applications_app.command("import")
def applications_import(file: Path = typer.Option(..., "--file", exists=True, readable=True)) -> None:
    configure_logging()
    ensure_initialized()
    documents = _load_documents(file)
    with session_scope() as db:
        report = DocumentImporter(db).import_applications(documents)
    _echo(report.model_dump())


@applications_app.command("list")
def applications_list(
    owner: str | None = typer.Option(None, "--owner"),
    posting: str | None = typer.Option(None, "--posting"),
    seeker: str | None = typer.Option(None, "--seeker"),
) -> None:
    configure_logging()
    ensure_initialized()
    if sum(value is not None for value in (owner, posting, seeker)) != 1:
        raise typer.BadParameter("pass exactly one of --owner, --posting, --seeker")

    with session_scope() as db:
        review = ReviewAggregator(db)
        if owner:
            rows = review.list_applications_for_owner(owner)
        elif posting:
            rows = review.list_applications_for_posting(posting)
        else:
            rows = review.list_applications_for_seeker(seeker or "")
        _echo([_application_row(row) for row in rows])


@applications_app.command("counts")
def applications_counts(owner: str = typer.Option(..., "--owner")) -> None:
    configure_logging()
    ensure_initialized()
    with session_scope() as db:
        _echo(compute_tab_counts(ReviewAggregator(db).list_applications_for_owner(owner)))


@applications_app.command("show")
def applications_show(application_id: str = typer.Option(..., "--application-id")) -> None:
    configure_logging()
    ensure_initialized()
    with session_scope() as db:
        try:
            application = ReviewAggregator(db).get_application(application_id)
        except WinnowError as exc:
            raise typer.BadParameter(str(exc)) from exc
        _echo(application.model_dump())


@applications_app.command("set-status")
def applications_set_status(
    application_id: str = typer.Option(..., "--application-id"),
    status: str = typer.Option(..., "--status"),
    reviewer: str | None = typer.Option(None, "--reviewer", help="Company id; enforces ownership"),
) -> None:
    configure_logging()
    ensure_initialized()
    with session_scope() as db:
        try:
            application = ReviewAggregator(db).set_status(
                application_id,
                status,
                reviewer=_reviewer(reviewer),
            )
        except WinnowError as exc:
            raise typer.BadParameter(str(exc)) from exc
        _echo(_application_row(application))


@summaries_app.command("generate")
def summaries_generate(
    application_id: str = typer.Option(..., "--application-id"),
    reviewer: str | None = typer.Option(None, "--reviewer", help="Company id; enforces ownership"),
) -> None:
    configure_logging()
    ensure_initialized()
    with session_scope() as db:
        try:
            application = SummaryService(db).generate_summary(application_id, reviewer=_reviewer(reviewer))
        except WinnowError as exc:
            typer.echo(f"error: {exc}", err=True)
            raise typer.Exit(code=1) from exc
        typer.echo(application.ai_summary)


@summaries_app.command("reset")
def summaries_reset(
    owner: str | None = typer.Option(None, "--owner", help="Only reset this company's applications"),
    yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt"),
) -> None:
    configure_logging()
    ensure_initialized()
    scope = f"owner {owner}" if owner else "ALL applications"
    if not yes:
        typer.confirm(f"Clear AI summaries for {scope}?", abort=True)

    with session_scope() as db:
        result = SummaryService(db).reset_all_summaries(owner_id=owner)
    _echo({"success": not result.failed_ids, "count": result.count, "failed": result.failed_ids})
    if result.failed_ids:
        raise typer.Exit(code=1)


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
) -> None:
    configure_logging()
    ensure_initialized()
    settings = get_settings()
    app_instance = create_app()
    uvicorn.run(app_instance, host=host or settings.app_host, port=port or settings.app_port)
