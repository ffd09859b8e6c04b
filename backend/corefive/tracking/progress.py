"""Weekly pillar aggregation and coverage.

Every function here is a pure reducer over a set of log entries that the
caller has already narrowed to a single week. Entries are anything with
`pillar` and `value` attributes (ORM rows or `LogRead` schemas).
"""
from typing import Iterable, Optional

from corefive.core.pillars import PILLARS, Pillar, target
from corefive.schemas.progress import WeeklyPillarState


def progress(logs: Iterable, pillar: Pillar) -> float:
    """Sum of `value` over the entries for `pillar` (0 when there are none)."""
    return sum((log.value for log in logs if log.pillar == pillar), 0)


def met(logs: Iterable, pillar: Pillar) -> bool:
    return progress(logs, pillar) >= target(pillar)


def coverage(logs: Iterable) -> int:
    """Number of pillars (0-5) at or above their weekly target."""
    logs = list(logs)
    return sum(1 for pillar in PILLARS if met(logs, pillar))


def pillar_state(logs: Iterable, pillar: Pillar) -> WeeklyPillarState:
    current = progress(logs, pillar)
    goal = target(pillar)
    return WeeklyPillarState(
        pillar=pillar,
        current=current,
        target=goal,
        met=current >= goal,
        pct=min(round(current / goal * 100), 100) if goal > 0 else 0,
    )


def weekly_pillar_states(logs: Iterable) -> list[WeeklyPillarState]:
    logs = list(logs)
    return [pillar_state(logs, pillar) for pillar in PILLARS]


def unmet_pillars(logs: Iterable) -> list[Pillar]:
    logs = list(logs)
    return [pillar for pillar in PILLARS if not met(logs, pillar)]


def newly_met_pillar(previous_logs: Iterable, new_log) -> Optional[Pillar]:
    """Pillar that `new_log` pushed from under its target to at/over it."""
    previous_logs = list(previous_logs)
    pillar = Pillar(new_log.pillar)
    before = progress(previous_logs, pillar)
    after = before + new_log.value
    if before < target(pillar) <= after:
        return pillar
    return None
