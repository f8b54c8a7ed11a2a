from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint, Index, text

from linkup.core.db import Base, utcnow

ACTIVE_PAIR_WHERE = text("status IN ('pending','accepted')")


def pair_low_high(a, b) -> tuple[str, str]:
    a_str = str(a)
    b_str = str(b)
    return (a_str, b_str) if a_str < b_str else (b_str, a_str)


class ConnectionRequest(Base):
    __tablename__ = "connection_requests"

    id = Column(Integer, primary_key=True, index=True)
    sender_id = Column(String, nullable=False, index=True)
    receiver_id = Column(String, nullable=False, index=True)

    # unordered pair key, lets the database enforce one active row per pair
    pair_low = Column(String, nullable=False)
    pair_high = Column(String, nullable=False)

    status = Column(
        String,
        CheckConstraint(
            "status IN ('pending','accepted','rejected')",
            name="connection_requests_status_check",
        ),
        nullable=False,
        default="pending",
    )
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # rejected rows stay behind and fall outside the unique guard, so a new
    # request for the same pair is allowed afterwards
    __table_args__ = (
        Index("idx_connection_requests_pair", "sender_id", "receiver_id"),
        Index(
            "uq_connection_requests_active_pair",
            "pair_low",
            "pair_high",
            unique=True,
            sqlite_where=ACTIVE_PAIR_WHERE,
            postgresql_where=ACTIVE_PAIR_WHERE,
        ),
    )
