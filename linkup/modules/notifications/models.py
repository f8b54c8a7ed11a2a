from sqlalchemy import Column, Integer, String, Boolean, DateTime, Index

from linkup.core.db import Base, utcnow


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(String, nullable=False)
    kind = Column(String, nullable=False)  # connection_request | connection_accepted | connection_rejected
    related_user_id = Column(String, nullable=False)

    # plain reference, the request row may be withdrawn or disconnected later
    connection_request_id = Column(Integer, nullable=True)

    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index("idx_notifications_recipient_read", "recipient_id", "read", "created_at"),
    )
