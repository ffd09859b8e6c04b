"""Consecutive-week streaks and the one-time milestones they unlock.

Week history is passed around as a list indexed by week offset: index 0 is
the current (still accruing) week, index 1 the week before, and so on.
"""
from datetime import date
from typing import Iterable, Optional, Sequence

from corefive.core.constants import NEAR_PERFECT_COVERAGE, PILLAR_COUNT
from corefive.core.time_utils import weeks_back
from corefive.schemas.progress import Milestone, WeekCoverage
from corefive.tracking.progress import coverage


MILESTONES: list[Milestone] = [
    Milestone(id="first_five", streak_threshold=1, text="First full week.", subtext="Every journey starts with one."),
    Milestone(id="streak_2", streak_threshold=2, text="Two weeks strong.", subtext="Consistency is forming."),
    Milestone(id="streak_4", streak_threshold=4, text="One month in your prime.", subtext="This is becoming a practice."),
    Milestone(id="streak_8", streak_threshold=8, text="Two months.", subtext="This is who you are now."),
    Milestone(id="streak_12", streak_threshold=12, text="Twelve weeks.", subtext="You've built a practice."),
]

MILESTONES_BY_ID: dict[str, Milestone] = {m.id: m for m in MILESTONES}


def logs_by_week_offset(entries: Iterable, current_week_start: date, weeks: int) -> list[list]:
    """Bucket entries by their stored `week_start` into `weeks` offsets.

    Entries outside the window are dropped.
    """
    index = {weeks_back(current_week_start, i): i for i in range(weeks)}
    buckets: list[list] = [[] for _ in range(weeks)]
    for entry in entries:
        offset = index.get(entry.week_start)
        if offset is not None:
            buckets[offset].append(entry)
    return buckets


def streak(weekly_logs_by_offset: Sequence[Iterable], threshold: int = NEAR_PERFECT_COVERAGE) -> int:
    """Consecutive qualifying weeks, walking back from the current week.

    A current week below `threshold` is skipped rather than breaking the walk
    since it is still in progress; any earlier week below it ends the walk.
    """
    count = 0
    for offset, logs in enumerate(weekly_logs_by_offset):
        if coverage(logs) >= threshold:
            count += 1
        elif offset == 0:
            continue
        else:
            break
    return count


def best_streak(weekly_logs_by_offset: Sequence[Iterable], threshold: int = NEAR_PERFECT_COVERAGE) -> int:
    """Longest run of qualifying weeks anywhere in the window."""
    best = current = 0
    for logs in reversed(weekly_logs_by_offset):
        if coverage(logs) >= threshold:
            current += 1
            best = max(best, current)
        else:
            current = 0
    return best


def week_coverages(weekly_logs_by_offset: Sequence[Iterable], current_week_start: date) -> list[WeekCoverage]:
    result = []
    for offset, logs in enumerate(weekly_logs_by_offset):
        logs = list(logs)
        result.append(
            WeekCoverage(
                week_start=weeks_back(current_week_start, offset),
                coverage=coverage(logs),
                has_data=bool(logs),
            )
        )
    return result


def perfect_weeks(coverages: Iterable[WeekCoverage]) -> int:
    return sum(1 for week in coverages if week.coverage == PILLAR_COUNT)


def unseen_milestone(streak_length: int, seen_ids: Iterable[str]) -> Optional[Milestone]:
    """Most advanced milestone the streak qualifies for that was never shown.

    A seen milestone supersedes every lower one: once streak_4 has been shown,
    an unseen streak_2 is not surfaced for the same run.

    The caller must mark the result seen before (or while) displaying it.
    """
    seen = set(seen_ids)
    qualifying = [m for m in MILESTONES if m.streak_threshold <= streak_length]
    floor = max((m.streak_threshold for m in qualifying if m.id in seen), default=0)
    eligible = [
        m for m in qualifying
        if m.id not in seen and m.streak_threshold > floor
    ]
    if not eligible:
        return None
    return max(eligible, key=lambda m: m.streak_threshold)
