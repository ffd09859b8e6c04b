"""Contextual nudge selection.

The catalog is a plain list of `NudgeRule`s. Each rule has a predicate and a
builder over a `NudgeContext` (the week's logs plus the caller's `now`), and
a fixed priority (lower = more urgent). Every matching rule produces a
candidate; the lowest priority wins and ties go to the rule declared first.

Nothing here reads the clock: the same (logs, now) always gives the same
nudge.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence

from corefive.core.constants import (
    CARDIO_GAP_MINUTES,
    DEADLINE_DAYS_LEFT,
    EVENING_HOURS,
    LUNCH_HOURS,
    MORNING_HOURS,
    PILLAR_COUNT,
    REVIEW_MONDAY_UNTIL_HOUR,
    REVIEW_SUNDAY_FROM_HOUR,
    STAGNATION_DAYS_LEFT,
)
from corefive.core.pillars import PILLAR_CONFIGS, PILLARS, Pillar, target
from corefive.core.time_utils import days_left_in_week, same_local_day
from corefive.schemas.progress import Nudge, NudgeAction
from corefive.tracking.progress import coverage, progress, unmet_pillars

MONDAY, SUNDAY = 0, 6


@dataclass(frozen=True)
class NudgeContext:
    logs: list
    now: datetime
    hour: int
    weekday: int  # Monday = 0
    days_left: int
    coverage: int
    progress: dict = field(default_factory=dict)

    @classmethod
    def build(cls, logs: Iterable, now: datetime) -> "NudgeContext":
        logs = list(logs)
        return cls(
            logs=logs,
            now=now,
            hour=now.hour,
            weekday=now.weekday(),
            days_left=days_left_in_week(now),
            coverage=coverage(logs),
            progress={p: progress(logs, p) for p in PILLARS},
        )

    def remaining(self, pillar: Pillar) -> float:
        return target(pillar) - self.progress[pillar]

    def in_hours(self, band: tuple[int, int]) -> bool:
        start, end = band
        return start <= self.hour < end


@dataclass(frozen=True)
class NudgeRule:
    id: str
    priority: int
    applies: Callable[[NudgeContext], bool]
    build: Callable[[NudgeContext], dict]

    def evaluate(self, ctx: NudgeContext) -> Optional[Nudge]:
        if not self.applies(ctx):
            return None
        fields = {"id": self.id, **self.build(ctx)}
        return Nudge(priority=self.priority, **fields)


def _amount(value: float) -> str:
    return f"{round(value, 1):g}"


# --------- Time-of-day reminders --------- #

def _sleep_logged_today(ctx: NudgeContext) -> bool:
    return any(
        log.pillar == Pillar.sleep and same_local_day(log.logged_at, ctx.now)
        for log in ctx.logs
    )


def _morning_sleep_applies(ctx: NudgeContext) -> bool:
    return (
        ctx.in_hours(MORNING_HOURS)
        and ctx.remaining(Pillar.sleep) > 0
        and not _sleep_logged_today(ctx)
    )


def _morning_sleep(ctx: NudgeContext) -> dict:
    return {
        "message": "Good morning. How did you sleep?",
        "pillar": Pillar.sleep,
        "action": NudgeAction.log,
        "action_label": "Log sleep",
    }


def _lunch_scan_applies(ctx: NudgeContext) -> bool:
    return ctx.in_hours(LUNCH_HOURS) and ctx.remaining(Pillar.clean_eating) > 0


def _lunch_scan(ctx: NudgeContext) -> dict:
    return {
        "message": "Lunchtime. Snap your plate to log clean eating.",
        "pillar": Pillar.clean_eating,
        "action": NudgeAction.scan,
        "action_label": "Scan meal",
    }


def _evening_breathwork_applies(ctx: NudgeContext) -> bool:
    return ctx.in_hours(EVENING_HOURS) and ctx.remaining(Pillar.mindfulness) > 0


def _evening_breathwork(ctx: NudgeContext) -> dict:
    return {
        "message": "Wind down with some breathwork before bed.",
        "pillar": Pillar.mindfulness,
        "action": NudgeAction.timer,
        "action_label": "Start breathwork",
    }


# --------- Progress-based nudges --------- #

def _almost_prime_applies(ctx: NudgeContext) -> bool:
    return ctx.coverage == PILLAR_COUNT - 1


def _almost_prime(ctx: NudgeContext) -> dict:
    pillar = unmet_pillars(ctx.logs)[0]
    config = PILLAR_CONFIGS[pillar]
    remaining = ctx.remaining(pillar)
    return {
        "message": (
            f"4/5 pillars hit! Just {_amount(remaining)} {config.unit} "
            f"of {config.name.lower()} to go."
        ),
        "pillar": pillar,
        "action": NudgeAction.chat,
        "action_label": "Help me plan",
        "remaining": remaining,
    }


def _zero_pillars(ctx: NudgeContext) -> list[Pillar]:
    return [p for p in PILLARS if ctx.progress[p] == 0]


def _zero_pillar_applies(ctx: NudgeContext) -> bool:
    low, high = STAGNATION_DAYS_LEFT
    return low <= ctx.days_left <= high and bool(_zero_pillars(ctx))


def _zero_pillar(ctx: NudgeContext) -> dict:
    # Only the first untouched pillar is mentioned
    pillar = _zero_pillars(ctx)[0]
    config = PILLAR_CONFIGS[pillar]
    return {
        "id": f"zero-{pillar.value}",
        "message": f"{config.name} is at 0 this week with {ctx.days_left} days left.",
        "pillar": pillar,
        "action": NudgeAction.chat,
        "action_label": f"Plan {config.name.lower()}",
        "remaining": config.weekly_target,
    }


def _cardio_gap_applies(ctx: NudgeContext) -> bool:
    return ctx.days_left <= DEADLINE_DAYS_LEFT and ctx.remaining(Pillar.cardio) > CARDIO_GAP_MINUTES


def _cardio_gap(ctx: NudgeContext) -> dict:
    remaining = ctx.remaining(Pillar.cardio)
    return {
        "message": (
            f"{_amount(remaining)} min of cardio left with {ctx.days_left} "
            f"{'day' if ctx.days_left == 1 else 'days'} to go. Want me to plan it out?"
        ),
        "pillar": Pillar.cardio,
        "action": NudgeAction.chat,
        "action_label": "Plan cardio",
        "remaining": remaining,
    }


def _all_met_applies(ctx: NudgeContext) -> bool:
    return ctx.coverage == PILLAR_COUNT


def _all_met(ctx: NudgeContext) -> dict:
    return {"message": "All 5 pillars hit this week. You're in prime."}


def _weekly_review_applies(ctx: NudgeContext) -> bool:
    return (
        (ctx.weekday == SUNDAY and ctx.hour >= REVIEW_SUNDAY_FROM_HOUR)
        or (ctx.weekday == MONDAY and ctx.hour < REVIEW_MONDAY_UNTIL_HOUR)
    )


def _weekly_review(ctx: NudgeContext) -> dict:
    if ctx.weekday == SUNDAY:
        message = f"Week wrapping up. {ctx.coverage}/5 pillars hit. Want a review?"
    else:
        message = "Week starting fresh. Want a review of last week?"
    return {
        "message": message,
        "action": NudgeAction.chat,
        "action_label": "How was my week?",
    }


# Declaration order breaks priority ties
NUDGE_RULES: list[NudgeRule] = [
    NudgeRule("morning-sleep", 1, _morning_sleep_applies, _morning_sleep),
    NudgeRule("lunch-scan", 3, _lunch_scan_applies, _lunch_scan),
    NudgeRule("evening-breathwork", 4, _evening_breathwork_applies, _evening_breathwork),
    NudgeRule("almost-prime", 0, _almost_prime_applies, _almost_prime),
    NudgeRule("zero-pillar", 2, _zero_pillar_applies, _zero_pillar),
    NudgeRule("cardio-gap", 2, _cardio_gap_applies, _cardio_gap),
    NudgeRule("all-met", 5, _all_met_applies, _all_met),
    NudgeRule("weekly-review", 1, _weekly_review_applies, _weekly_review),
]


def candidate_nudges(
    logs: Iterable, now: datetime, rules: Sequence[NudgeRule] = NUDGE_RULES
) -> list[Nudge]:
    """Every matching rule's nudge, in catalog order."""
    ctx = NudgeContext.build(logs, now)
    candidates = (rule.evaluate(ctx) for rule in rules)
    return [n for n in candidates if n is not None]


def generate_nudge(
    logs: Iterable, now: datetime, rules: Sequence[NudgeRule] = NUDGE_RULES
) -> Optional[Nudge]:
    """The single most urgent nudge for this week's logs at `now`, or None."""
    candidates = candidate_nudges(logs, now, rules)
    if not candidates:
        return None
    # min() keeps the first of equal priorities
    return min(candidates, key=lambda n: n.priority)
