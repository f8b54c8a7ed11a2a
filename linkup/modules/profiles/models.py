from sqlalchemy import Column, String, DateTime, JSON

from linkup.core.db import Base, utcnow


class Profile(Base):
    __tablename__ = "profile"

    user_id = Column(String, primary_key=True)

    full_name = Column(String, nullable=False)
    bio = Column(String, nullable=False, default="")
    location = Column(String, nullable=False, default="")

    # interest tags like ["hiking","chess","jazz"]
    interests = Column(JSON, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
