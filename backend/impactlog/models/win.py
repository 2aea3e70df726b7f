from uuid import uuid4

from sqlalchemy import Column, String, Date, DateTime
from sqlalchemy.sql import func
from impactlog.db import Base


class WinRecord(Base):
    __tablename__ = "wins"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))

    # Owner of the document; every query is scoped by it
    user_id = Column(String, nullable=False, index=True)

    date = Column(Date, nullable=False, index=True)

    category = Column(String(20), nullable=False)   # delivery, stakeholder, ...
    situation = Column(String, nullable=False)
    action = Column(String, nullable=False)
    impact = Column(String, nullable=False)
    impact_type = Column(String(32), nullable=False)  # time-saved, cost-avoided, ...

    # Added after launch; NULL on older rows means Medium
    impact_level = Column(String(10), nullable=True)

    evidence = Column(String, nullable=True)

    # Timestamps
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
