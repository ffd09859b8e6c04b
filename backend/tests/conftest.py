import itertools
import os
from datetime import date, datetime, timezone
from types import SimpleNamespace

import pytest

# Must be set before anything imports corefive.core.config
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("TIMEZONE", "UTC")

from corefive.core.pillars import PILLARS, Pillar, target  # noqa: E402

# A Monday; the tests' default "current week"
WEEK = date(2025, 1, 6)

_ids = itertools.count(1)


def entry(pillar, value, week_start=WEEK, logged_at=None):
    """Minimal stand-in for a stored log row."""
    if logged_at is None:
        logged_at = datetime.combine(week_start, datetime.min.time(), tzinfo=timezone.utc)
    return SimpleNamespace(
        id=next(_ids),
        pillar=Pillar(pillar),
        value=value,
        week_start=week_start,
        logged_at=logged_at,
    )


def met_logs(*pillars, week_start=WEEK):
    """One entry per pillar, each exactly at its weekly target."""
    return [entry(p, target(p), week_start=week_start) for p in pillars]


def all_met(week_start=WEEK):
    return met_logs(*PILLARS, week_start=week_start)


@pytest.fixture
def make_log():
    return entry


@pytest.fixture
def db_session():
    from corefive.db import Base, SessionLocal, engine
    from corefive.models.activity_log import ActivityLog  # noqa: F401
    from corefive.models.milestone_seen import MilestoneSeen  # noqa: F401

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
