from sqlalchemy import Column, Integer, String, Boolean, DateTime, CheckConstraint, Index

from linkup.core.db import Base, utcnow


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(String, nullable=False)
    receiver_id = Column(String, nullable=False)
    body = Column(String, nullable=False, default="")
    kind = Column(
        String,
        CheckConstraint("kind IN ('text','image','file')", name="messages_kind_check"),
        nullable=False,
        default="text",
    )
    media_ref = Column(String, nullable=True)
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        Index("idx_messages_pair_created", "sender_id", "receiver_id", "created_at"),
    )
