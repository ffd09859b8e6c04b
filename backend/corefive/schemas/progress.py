from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict

from corefive.core.pillars import Pillar


class PillarConfigRead(BaseModel):
    id: Pillar
    name: str
    weekly_target: float
    unit: str
    unit_label: str
    description: str
    color: str
    icon: str

    model_config = ConfigDict(from_attributes=True)


class WeeklyPillarState(BaseModel):
    pillar: Pillar
    current: float
    target: float
    met: bool
    pct: int  # 0-100, capped


class WeekProgress(BaseModel):
    week_start: date
    coverage: int
    pillars: list[WeeklyPillarState]


class WeekCoverage(BaseModel):
    week_start: date
    coverage: int
    has_data: bool


class Milestone(BaseModel):
    id: str
    streak_threshold: int
    text: str
    subtext: str

    model_config = ConfigDict(frozen=True)


class StreakSummary(BaseModel):
    streak: int
    best_streak: int
    perfect_weeks: int
    threshold: int
    weeks: list[WeekCoverage]  # newest first
    milestone: Optional[Milestone] = None


class NudgeAction(str, Enum):
    timer = "timer"
    scan = "scan"
    log = "log"
    chat = "chat"


class Nudge(BaseModel):
    id: str
    message: str
    pillar: Optional[Pillar] = None
    action: Optional[NudgeAction] = None
    action_label: Optional[str] = None
    priority: int  # lower = more urgent
    # Amount still needed for `pillar` when the rule is about a gap
    remaining: Optional[float] = None


class CelebrationType(str, Enum):
    all_five = "all_five"
    milestone = "milestone"


class CelebrationEvent(BaseModel):
    type: CelebrationType
    week_start: date
    streak: int
    milestone: Optional[Milestone] = None
