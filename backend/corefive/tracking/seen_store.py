"""Durable record of which milestones a user has already been shown.

Every backend fails open: if storage cannot be read the user is treated as
having seen nothing, and a failed write is logged and dropped. Losing a
celebration (or showing one twice) is cosmetic; crashing the caller is not.
"""
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from corefive.models.milestone_seen import MilestoneSeen

logger = logging.getLogger(__name__)

STORE_ERRORS = (OSError, ValueError, SQLAlchemyError)


class SeenStore(ABC):
    @abstractmethod
    def _load(self) -> set[str]:
        """Read the stored ids; may raise any of STORE_ERRORS."""

    @abstractmethod
    def _add(self, milestone_id: str, seen: set[str]) -> None:
        """Durably record `milestone_id`; `seen` is the current (fail-open) set."""

    def all_seen(self) -> set[str]:
        try:
            return set(self._load())
        except STORE_ERRORS as exc:
            logger.warning("Seen-store read failed, treating all milestones as unseen: %s", exc)
            return set()

    def is_seen(self, milestone_id: str) -> bool:
        return milestone_id in self.all_seen()

    def __contains__(self, milestone_id: str) -> bool:
        return self.is_seen(milestone_id)

    def mark_seen(self, milestone_id: str) -> bool:
        """Record `milestone_id` as shown. Returns False if the write was lost."""
        seen = self.all_seen()
        if milestone_id in seen:
            return True
        try:
            self._add(milestone_id, seen)
        except STORE_ERRORS as exc:
            logger.warning("Seen-store write failed for %s: %s", milestone_id, exc)
            return False
        logger.debug("Milestone %s marked seen", milestone_id)
        return True


class InMemorySeenStore(SeenStore):
    def __init__(self, seen=()):
        self._seen = set(seen)

    def _load(self) -> set[str]:
        return self._seen

    def _add(self, milestone_id: str, seen: set[str]) -> None:
        self._seen.add(milestone_id)


class JsonFileSeenStore(SeenStore):
    """Per-user id lists in one JSON file: {"<user_id>": ["first_five", ...]}.

    Writes go to a temp file that is fsynced and atomically swapped in, so a
    crash never leaves a half-written file behind.
    """

    def __init__(self, path, user_id: str):
        self.path = Path(path)
        self.user_id = user_id

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def _load(self) -> set[str]:
        return set(self._read_all().get(self.user_id, []))

    def _add(self, milestone_id: str, seen: set[str]) -> None:
        try:
            data = self._read_all()
        except ValueError:
            # Unreadable contents get replaced rather than blocking new writes
            data = {}
        data[self.user_id] = sorted(seen | {milestone_id})

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except OSError:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise


class SqlSeenStore(SeenStore):
    """Rows in `milestones_seen`; each write is committed before returning."""

    def __init__(self, db: Session, user_id: str):
        self.db = db
        self.user_id = user_id

    def _load(self) -> set[str]:
        try:
            rows = (
                self.db.query(MilestoneSeen.milestone_id)
                .filter(MilestoneSeen.user_id == self.user_id)
                .all()
            )
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return {r[0] for r in rows}

    def _add(self, milestone_id: str, seen: set[str]) -> None:
        try:
            self.db.merge(MilestoneSeen(user_id=self.user_id, milestone_id=milestone_id))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
