from __future__ import annotations

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./data/winnow-test.db")
os.environ.setdefault("APP_ENV", "test")
os.environ["GEMINI_API_KEY"] = ""
os.environ["LOCAL_LLM_ENABLED"] = "false"

from datetime import UTC, datetime, timedelta  # noqa: E402

import pytest  # noqa: E402

from winnow.core.submission import build_application_payload  # noqa: E402
from winnow.db.base import Base  # noqa: E402
from winnow.db.init import ensure_data_directories  # noqa: E402
from winnow.db.repositories import Repository  # noqa: E402
from winnow.db.session import SessionLocal, engine  # noqa: E402
from winnow.types import (  # noqa: E402
    Application,
    ChecklistAnswer,
    ChecklistItem,
    Identity,
    Posting,
    PostingInput,
    SeekerIdentity,
)

BASE_TIME = datetime(2026, 3, 1, 9, 0, tzinfo=UTC)


@pytest.fixture(autouse=True)
def reset_db() -> None:
    ensure_data_directories()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    with SessionLocal() as session:
        yield session


@pytest.fixture
def company() -> Identity:
    return Identity(user_id="acme", email="hr@acme.test", name="Acme", role="company")


@pytest.fixture
def other_company() -> Identity:
    return Identity(user_id="globex", email="hr@globex.test", name="Globex", role="company")


@pytest.fixture
def seeker() -> Identity:
    return Identity(user_id="seeker-1", email="kim@example.test", name="Kim", role="seeker")


def two_item_posting() -> PostingInput:
    return PostingInput(
        summary="Backend Engineer",
        team="Platform",
        checklist=[
            ChecklistItem(id="a", title="X", description="Ships X"),
            ChecklistItem(id="b", title="Y", description="Knows Y"),
        ],
    )


def complete_answers() -> dict[str, ChecklistAnswer]:
    return {
        "a": ChecklistAnswer(checked=True, comment="did X"),
        "b": ChecklistAnswer(checked=True, comment="did Y"),
    }


def seed_application(
    repo: Repository,
    posting: Posting,
    *,
    seeker_id: str,
    minutes: int,
    status: str = "received",
    ai_summary: str = "",
) -> Application:
    payload = build_application_payload(
        posting,
        SeekerIdentity(seeker_id=seeker_id, seeker_email=f"{seeker_id}@example.test"),
        complete_answers(),
        now=BASE_TIME + timedelta(minutes=minutes),
        status=status,
    )
    payload.ai_summary = ai_summary
    return repo.add_application(payload)
