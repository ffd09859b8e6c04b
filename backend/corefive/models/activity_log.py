from sqlalchemy import Column, Integer, String, Date, DateTime, Float, JSON
from sqlalchemy.sql import func
from corefive.db import Base


class ActivityLog(Base):
    __tablename__ = "core_five_logs"

    id = Column(Integer, primary_key=True, index=True)

    # Owner; every query is scoped to it
    user_id = Column(String, nullable=False, index=True)

    # One of the Pillar enum values (cardio, strength, ...)
    pillar = Column(String(20), nullable=False)

    # Amount in the pillar's unit (minutes, sessions, hours, days)
    value = Column(Float, nullable=False)

    # Free-form per-pillar details (type, intensity, notes, ...)
    details = Column(JSON, nullable=True)

    logged_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # Monday of the week this entry counts toward; fixed at write time
    week_start = Column(Date, nullable=False, index=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
