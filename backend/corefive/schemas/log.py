from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from corefive.core.pillars import Pillar
from corefive.schemas.progress import CelebrationEvent


class LogBase(BaseModel):
    pillar: Pillar
    # In the pillar's unit, e.g. 30 (min) or 1 (session); finite and >= 0
    value: float = Field(ge=0, allow_inf_nan=False)
    details: Optional[dict[str, Any]] = None


class LogCreate(LogBase):
    """Schema for recording a new entry.

    `logged_at` defaults to now. `week_start` overrides which week the entry
    counts toward (normalized to its Monday); otherwise it is derived from
    `logged_at`.
    """

    logged_at: Optional[datetime] = None
    week_start: Optional[date] = None


class LogUpdate(BaseModel):
    """Only the value and details of an entry are editable."""

    value: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    details: Optional[dict[str, Any]] = None

    model_config = ConfigDict(extra="ignore")


class LogRead(LogBase):
    id: int
    user_id: str
    logged_at: datetime
    week_start: date
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class LogRecorded(BaseModel):
    """Returned from POST /logs: the stored entry plus anything it unlocked."""

    log: LogRead
    celebrations: list[CelebrationEvent] = []
    completed_pillar: Optional[Pillar] = None
