from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from corefive.core.config import settings
from corefive.db import get_db
from corefive.tracking.seen_store import JsonFileSeenStore, SeenStore, SqlSeenStore


def get_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    # No auth here: the caller (gateway or client) names the user
    return x_user_id or settings.default_user_id


def get_seen_store(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
) -> SeenStore:
    if settings.seen_store == "json":
        return JsonFileSeenStore(settings.seen_store_path, user_id)
    return SqlSeenStore(db, user_id)
