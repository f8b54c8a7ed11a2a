"""
Notification feed.

The feed merges two sources for a recipient:

* pending connection requests addressed to them (no read state of their
  own; they drop out once ``respond`` is called), and
* unread ``connection_accepted`` notifications.

Reading the feed never changes read flags. Acceptance notifications are
cleared explicitly with :func:`mark_notification_read` or
:func:`mark_all_read`.
"""
from typing import List

from loguru import logger
from sqlalchemy.orm import Session

from linkup.core import config
from linkup.core.errors import AuthorizationError, NotFoundError
from linkup.core.recency import as_utc
from linkup.modules.connections.models import ConnectionRequest
from linkup.schemas.enums import NotificationKind, RequestStatus

from .models import Notification


def feed(db: Session, recipient_id: str, limit: int | None = None) -> List[dict]:
    limit = config.FEED_LIMIT if limit is None else limit

    pending = (
        db.query(ConnectionRequest)
        .filter(
            ConnectionRequest.receiver_id == recipient_id,
            ConnectionRequest.status == RequestStatus.pending.value,
        )
        .order_by(ConnectionRequest.created_at.desc())
        .limit(limit)
        .all()
    )

    accepted = (
        db.query(Notification)
        .filter(
            Notification.recipient_id == recipient_id,
            Notification.kind == NotificationKind.connection_accepted.value,
            Notification.read.is_(False),
        )
        .order_by(Notification.created_at.desc())
        .limit(limit)
        .all()
    )

    entries = [
        {
            "kind": NotificationKind.connection_request,
            "counterpart_id": r.sender_id,
            "created_at": as_utc(r.created_at),
            "connection_request_id": r.id,
            "notification_id": None,
        }
        for r in pending
    ] + [
        {
            "kind": NotificationKind.connection_accepted,
            "counterpart_id": n.related_user_id,
            "created_at": as_utc(n.created_at),
            "connection_request_id": n.connection_request_id,
            "notification_id": n.id,
        }
        for n in accepted
    ]

    entries.sort(key=lambda e: e["created_at"], reverse=True)
    return entries[:limit]


def mark_notification_read(db: Session, recipient_id: str, notification_id: int) -> Notification:
    notif = db.get(Notification, notification_id)
    if notif is None:
        raise NotFoundError("Notification not found")

    if notif.recipient_id != recipient_id:
        raise AuthorizationError("Not authorized to update this notification")

    notif.read = True
    db.commit()
    db.refresh(notif)
    logger.debug(f"Notification {notification_id} marked read by {recipient_id}")
    return notif


def mark_all_read(db: Session, recipient_id: str) -> int:
    updated = (
        db.query(Notification)
        .filter(Notification.recipient_id == recipient_id, Notification.read.is_(False))
        .update({"read": True}, synchronize_session=False)
    )
    db.commit()
    logger.debug(f"Marked {updated} notifications read for {recipient_id}")
    return updated
