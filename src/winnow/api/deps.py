from __future__ import annotations

from collections.abc import Generator
from functools import lru_cache

from fastapi import Depends, Header
from pydantic import ValidationError
from sqlalchemy.orm import Session

from winnow.core.errors import AuthenticationError, PermissionDeniedError
from winnow.db.session import get_db_session
from winnow.llm.router import LLMRouter
from winnow.types import Identity


def get_db() -> Generator[Session, None, None]:
    yield from get_db_session()


@lru_cache(maxsize=1)
def get_llm_router() -> LLMRouter:
    return LLMRouter()


def get_identity(
    x_user_id: str | None = Header(default=None),
    x_user_email: str = Header(default=""),
    x_user_name: str = Header(default=""),
    x_user_role: str | None = Header(default=None),
) -> Identity:
    """Caller identity as asserted by the upstream identity provider."""
    if not x_user_id or not x_user_role:
        raise AuthenticationError("missing X-User-Id or X-User-Role header")
    try:
        return Identity(user_id=x_user_id, email=x_user_email, name=x_user_name, role=x_user_role)
    except ValidationError as exc:
        raise AuthenticationError("invalid identity headers: role must be company or seeker") from exc


def require_company(identity: Identity = Depends(get_identity)) -> Identity:
    if identity.role != "company":
        raise PermissionDeniedError("company account required")
    return identity


def require_seeker(identity: Identity = Depends(get_identity)) -> Identity:
    if identity.role != "seeker":
        raise PermissionDeniedError("seeker account required")
    return identity
