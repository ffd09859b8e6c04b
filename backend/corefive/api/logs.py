import logging
from collections import OrderedDict
from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from corefive.api.deps import get_seen_store, get_user_id
from corefive.core.config import settings
from corefive.core.constants import MAX_CELEBRATION_LATCHES, MAX_HISTORY_WEEKS
from corefive.core.time_utils import local_now, monday_of, week_start_for, weeks_back
from corefive.db import get_db
from corefive.models.activity_log import ActivityLog
from corefive.schemas.log import LogCreate, LogRead, LogRecorded, LogUpdate
from corefive.tracking.celebration import CelebrationLatch, CelebrationTrigger
from corefive.tracking.progress import newly_met_pillar
from corefive.tracking.seen_store import SeenStore
from corefive.tracking.streak import logs_by_week_offset

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/logs", tags=["logs"])

# All-five latches, one per user, oldest-used first
_latches: "OrderedDict[str, CelebrationLatch]" = OrderedDict()


def _latch_for(user_id: str, current_week: date) -> CelebrationLatch:
    """The user's latch for `current_week`.

    Latches left on an earlier week are dropped first (a rolled latch would
    reset anyway), then the map is capped at MAX_CELEBRATION_LATCHES by
    evicting the least recently used.
    """
    stale = [
        uid for uid, latch in _latches.items()
        if latch.week_start is not None and latch.week_start < current_week
    ]
    for uid in stale:
        del _latches[uid]

    latch = _latches.pop(user_id, None)
    if latch is None:
        latch = CelebrationLatch()
    _latches[user_id] = latch
    while len(_latches) > MAX_CELEBRATION_LATCHES:
        _latches.popitem(last=False)
    return latch


def clamp_weeks(weeks: int) -> int:
    return min(max(weeks, 1), MAX_HISTORY_WEEKS)


def entries_for_week(db: Session, user_id: str, week_start: date) -> list[ActivityLog]:
    return (
        db.query(ActivityLog)
        .filter(ActivityLog.user_id == user_id)
        .filter(ActivityLog.week_start == week_start)
        .order_by(ActivityLog.logged_at.desc(), ActivityLog.id.desc())
        .all()
    )


def entries_since(db: Session, user_id: str, earliest_week: date) -> list[ActivityLog]:
    return (
        db.query(ActivityLog)
        .filter(ActivityLog.user_id == user_id)
        .filter(ActivityLog.week_start >= earliest_week)
        .order_by(ActivityLog.week_start.desc(), ActivityLog.logged_at.desc())
        .all()
    )


def history_by_offset(db: Session, user_id: str, current_week: date, weeks: int) -> list[list]:
    """Entries for the last `weeks` weeks bucketed by offset from `current_week`."""
    earliest = weeks_back(current_week, weeks - 1)
    return logs_by_week_offset(entries_since(db, user_id, earliest), current_week, weeks)


def _get_owned(db: Session, user_id: str, log_id: int) -> ActivityLog:
    row = (
        db.query(ActivityLog)
        .filter(ActivityLog.id == log_id)
        .filter(ActivityLog.user_id == user_id)
        .first()
    )
    if not row:
        raise HTTPException(status_code=404, detail="Log not found")
    return row


@router.post("/", response_model=LogRecorded)
def create_log(
    payload: LogCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
    seen_store: SeenStore = Depends(get_seen_store),
):
    logged_at = payload.logged_at or datetime.now(timezone.utc)
    if payload.week_start is not None:
        wk = monday_of(payload.week_start)
    else:
        wk = week_start_for(logged_at, settings.timezone)

    current_week = monday_of(local_now(settings.timezone).date())
    history = history_by_offset(db, user_id, current_week, settings.history_weeks)
    previous = history[0] if wk == current_week else entries_for_week(db, user_id, wk)

    row = ActivityLog(
        user_id=user_id,
        pillar=payload.pillar.value,
        value=payload.value,
        details=payload.details,
        logged_at=logged_at,
        week_start=wk,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.debug("Recorded %s=%s for %s (week %s)", row.pillar, row.value, user_id, wk)

    # Celebrations only follow the live week; backfilled weeks show up in
    # the streak summary instead.
    celebrations = []
    if wk == current_week:
        trigger = CelebrationTrigger(
            seen_store,
            latch=_latch_for(user_id, current_week),
            threshold=settings.streak_threshold,
        )
        celebrations = trigger.on_log_recorded(previous, row, earlier_weeks=history[1:])

    return LogRecorded(
        log=LogRead.model_validate(row),
        celebrations=celebrations,
        completed_pillar=newly_met_pillar(previous, row),
    )


@router.get("/", response_model=list[LogRead])
def list_logs(
    week_start: date = Query(...),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    """Entries counted toward the week containing `week_start`, newest first."""
    return entries_for_week(db, user_id, monday_of(week_start))


@router.get("/history", response_model=list[LogRead])
def list_history(
    weeks: int = Query(settings.history_weeks),
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    current_week = monday_of(local_now(settings.timezone).date())
    earliest = weeks_back(current_week, clamp_weeks(weeks) - 1)
    return entries_since(db, user_id, earliest)


@router.patch("/{log_id}", response_model=LogRead)
def update_log(
    log_id: int,
    payload: LogUpdate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    row = _get_owned(db, user_id, log_id)
    update_data = payload.model_dump(exclude_unset=True)

    changed = False
    if update_data.get("value") is not None:
        row.value = update_data["value"]
        changed = True
    if "details" in update_data:
        row.details = update_data["details"] or None
        changed = True
    if not changed:
        raise HTTPException(status_code=400, detail="No fields to update")

    db.commit()
    db.refresh(row)
    return row


@router.delete("/{log_id}")
def delete_log(
    log_id: int,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_user_id),
):
    row = _get_owned(db, user_id, log_id)
    db.delete(row)
    db.commit()
    return {"success": True}
