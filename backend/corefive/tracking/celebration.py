"""One-shot celebrations fired when a freshly recorded log changes state.

Two independent checks run on every write:

1. all-five: the log moved the week's coverage from below 5 to exactly 5.
   A per-week latch keeps this from re-firing on later logs that same week.
2. milestone: the streak (recomputed with the new log) qualifies for a
   milestone that the Seen-Store has no record of.

Both can fire for the same log; the caller decides how to sequence them.
"""
import logging
from datetime import date
from typing import Iterable, Optional, Sequence

from corefive.core.constants import NEAR_PERFECT_COVERAGE, PILLAR_COUNT
from corefive.schemas.progress import CelebrationEvent, CelebrationType
from corefive.tracking.progress import coverage
from corefive.tracking.seen_store import SeenStore
from corefive.tracking.streak import streak, unseen_milestone

logger = logging.getLogger(__name__)


class CelebrationLatch:
    """idle -> fired on the first all-five of a week; back to idle on a new week."""

    def __init__(self):
        self.week_start: Optional[date] = None
        self.fired = False

    def roll(self, week_start: date) -> None:
        if week_start != self.week_start:
            self.week_start = week_start
            self.fired = False

    def fire(self, week_start: date) -> None:
        self.roll(week_start)
        self.fired = True


class CelebrationTrigger:
    def __init__(
        self,
        seen_store: SeenStore,
        latch: Optional[CelebrationLatch] = None,
        threshold: int = NEAR_PERFECT_COVERAGE,
    ):
        self.seen_store = seen_store
        self.latch = latch if latch is not None else CelebrationLatch()
        self.threshold = threshold

    def on_log_recorded(
        self,
        previous_logs: Iterable,
        new_log,
        earlier_weeks: Sequence[Iterable] = (),
    ) -> list[CelebrationEvent]:
        """Events unlocked by `new_log`, all-five first.

        `previous_logs` is the week's entries before the write; `earlier_weeks`
        holds the fully elapsed weeks at offsets 1, 2, ... for the streak walk.
        """
        previous_logs = list(previous_logs)
        updated_logs = previous_logs + [new_log]
        week_start = new_log.week_start
        self.latch.roll(week_start)

        current_streak = streak([updated_logs, *earlier_weeks], self.threshold)
        events: list[CelebrationEvent] = []

        before, after = coverage(previous_logs), coverage(updated_logs)
        if before < PILLAR_COUNT and after == PILLAR_COUNT and not self.latch.fired:
            self.latch.fire(week_start)
            logger.info("All five pillars met for week %s", week_start)
            events.append(
                CelebrationEvent(
                    type=CelebrationType.all_five,
                    week_start=week_start,
                    streak=current_streak,
                )
            )

        milestone = unseen_milestone(current_streak, self.seen_store.all_seen())
        if milestone is not None:
            # Recorded before it is handed out so a retry cannot show it twice
            self.seen_store.mark_seen(milestone.id)
            logger.info("Milestone %s reached (streak %d)", milestone.id, current_streak)
            events.append(
                CelebrationEvent(
                    type=CelebrationType.milestone,
                    week_start=week_start,
                    streak=current_streak,
                    milestone=milestone,
                )
            )

        return events
