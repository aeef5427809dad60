from __future__ import annotations

from winnow.config import get_settings
from winnow.db import models  # noqa: F401
from winnow.db.base import Base
from winnow.db.session import engine


def ensure_data_directories() -> None:
    settings = get_settings()
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def init_database() -> dict[str, list[str]]:
    ensure_data_directories()
    Base.metadata.create_all(bind=engine)
    return {"tables": sorted(Base.metadata.tables)}
