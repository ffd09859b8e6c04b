from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from corefive.db import Base


class MilestoneSeen(Base):
    __tablename__ = "milestones_seen"

    user_id = Column(String, primary_key=True)
    milestone_id = Column(String(40), primary_key=True)

    seen_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
