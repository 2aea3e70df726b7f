from uuid import uuid4

from sqlalchemy import Column, String, Date, DateTime
from sqlalchemy.sql import func
from impactlog.db import Base


class ReflectionRecord(Base):
    __tablename__ = "reflections"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String, nullable=False, index=True)

    # First day of the reflected week (local)
    week_start_date = Column(Date, nullable=False, index=True)

    # Legacy prompts, kept so old entries still load
    went_well = Column(String, nullable=True)
    unblocked = Column(String, nullable=True)
    proud_of = Column(String, nullable=True)

    focused_on = Column(String, nullable=True)
    contributed = Column(String, nullable=True)
    impact = Column(String, nullable=True)
    learned = Column(String, nullable=True)
    carry_forward = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
