from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from corefive.api.deps import get_seen_store, get_user_id
from corefive.api.logs import entries_for_week, history_by_offset
from corefive.core.config import settings
from corefive.core.time_utils import local_now, monday_of, to_local_datetime
from corefive.db import get_db
from corefive.schemas.progress import Nudge, StreakSummary, WeekProgress
from corefive.tracking.nudges import generate_nudge
from corefive.tracking.progress import coverage, weekly_pillar_states
from corefive.tracking.seen_store import SeenStore
from corefive.tracking.streak import (
    MILESTONES_BY_ID,
    best_streak,
    perfect_weeks,
    streak,
    unseen_milestone,
    week_coverages,
)

router = APIRouter(prefix="/progress", tags=["progress"])


def _current_week() -> date:
    return monday_of(local_now(settings.timezone).date())


@router.get("/week", response_model=WeekProgress)
def get_week_progress(
    week_start: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    wk = monday_of(week_start) if week_start is not None else _current_week()
    logs = entries_for_week(db, user_id, wk)
    return WeekProgress(
        week_start=wk,
        coverage=coverage(logs),
        pillars=weekly_pillar_states(logs),
    )


@router.get("/streak", response_model=StreakSummary)
def get_streak(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
    seen_store: SeenStore = Depends(get_seen_store),
):
    """Streak summary plus the milestone still waiting to be shown, if any.

    Reading does not mark the milestone seen; clients call
    POST /progress/milestones/{id}/seen once it has been displayed.
    """
    current_week = _current_week()
    threshold = settings.streak_threshold
    by_offset = history_by_offset(db, user_id, current_week, settings.history_weeks)
    weeks = week_coverages(by_offset, current_week)
    length = streak(by_offset, threshold)
    return StreakSummary(
        streak=length,
        best_streak=best_streak(by_offset, threshold),
        perfect_weeks=perfect_weeks(weeks),
        threshold=threshold,
        weeks=weeks,
        milestone=unseen_milestone(length, seen_store.all_seen()),
    )


@router.post("/milestones/{milestone_id}/seen")
def mark_milestone_seen(
    milestone_id: str,
    seen_store: SeenStore = Depends(get_seen_store),
):
    if milestone_id not in MILESTONES_BY_ID:
        raise HTTPException(status_code=404, detail="Unknown milestone")
    recorded = seen_store.mark_seen(milestone_id)
    return {"milestone_id": milestone_id, "recorded": recorded}


@router.get("/nudge", response_model=Optional[Nudge])
def get_nudge(
    at: Optional[datetime] = Query(None),
    dismissed: list[str] = Query([]),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """Top nudge for the week containing `at` (default: now).

    A naive `at` is taken as local wall-clock time. Dismissing the top nudge
    hides it; the runner-up is not promoted in its place.
    """
    if at is None:
        now = local_now(settings.timezone)
    elif at.tzinfo is not None:
        now = to_local_datetime(at, settings.timezone)
    else:
        now = at
    logs = entries_for_week(db, user_id, monday_of(now.date()))
    nudge = generate_nudge(logs, now)
    if nudge is not None and nudge.id in dismissed:
        return None
    return nudge
