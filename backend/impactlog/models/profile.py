from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from impactlog.db import Base


class ProfileRecord(Base):
    __tablename__ = "profiles"

    # One profile document per user
    user_id = Column(String, primary_key=True)

    display_name = Column(String, nullable=False, server_default="")
    email = Column(String, nullable=False, server_default="")
    role = Column(String, nullable=True)
    bio = Column(String, nullable=True)
    status = Column(String(32), nullable=True)
    photo_url = Column(String, nullable=True)

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
