from typing import Dict, Iterable, Optional

from loguru import logger
from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from linkup.core.db import utcnow
from linkup.core.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from linkup.core.recency import group_by_recency
from linkup.modules.notifications.models import Notification
from linkup.modules.profiles.models import Profile
from linkup.modules.profiles.service import identity_exists
from linkup.schemas.enums import (
    NotificationKind,
    PairStatus,
    RequestStatus,
    RespondAction,
)

from .models import ConnectionRequest, pair_low_high

ACTIVE_STATUSES = (RequestStatus.pending.value, RequestStatus.accepted.value)


# ---------- HELPERS ----------

def _commit(db: Session) -> None:
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise


def _pair_filter(a: str, b: str):
    return or_(
        and_(
            ConnectionRequest.sender_id == a,
            ConnectionRequest.receiver_id == b,
        ),
        and_(
            ConnectionRequest.sender_id == b,
            ConnectionRequest.receiver_id == a,
        ),
    )


def _active_between(db: Session, a: str, b: str) -> Optional[ConnectionRequest]:
    return (
        db.query(ConnectionRequest)
        .filter(_pair_filter(a, b), ConnectionRequest.status.in_(ACTIVE_STATUSES))
        .first()
    )


def _get_request(db: Session, request_id: int) -> ConnectionRequest:
    req = db.get(ConnectionRequest, request_id)
    if req is None:
        raise NotFoundError("Request not found")
    return req


def _names(db: Session, user_ids: Iterable[str]) -> Dict[str, str]:
    ids = set(user_ids)
    if not ids:
        return {}
    rows = db.query(Profile.user_id, Profile.full_name).filter(Profile.user_id.in_(ids)).all()
    return {r.user_id: r.full_name for r in rows}


def _raise_conflict(existing: Optional[ConnectionRequest]) -> None:
    if existing is not None and existing.status == RequestStatus.accepted.value:
        raise ConflictError("Already connected")
    raise ConflictError("Request already sent")


def are_connected(db: Session, a: str, b: str) -> bool:
    return (
        db.query(ConnectionRequest.id)
        .filter(_pair_filter(a, b), ConnectionRequest.status == RequestStatus.accepted.value)
        .first()
        is not None
    )


# ---------- STATE TRANSITIONS ----------

def send_request(db: Session, sender_id: str, receiver_id: str) -> ConnectionRequest:
    if not receiver_id:
        raise ValidationError("Receiver ID is required")

    if sender_id == receiver_id:
        raise ValidationError("Cannot send request to yourself")

    if not identity_exists(db, receiver_id):
        raise NotFoundError("User not found")

    # checked in both directions
    existing = _active_between(db, sender_id, receiver_id)
    if existing:
        _raise_conflict(existing)

    low, high = pair_low_high(sender_id, receiver_id)
    req = ConnectionRequest(
        sender_id=sender_id,
        receiver_id=receiver_id,
        pair_low=low,
        pair_high=high,
        status=RequestStatus.pending.value,
    )
    db.add(req)
    try:
        db.flush()
    except IntegrityError:
        # a crossing request for the same pair committed after our check
        db.rollback()
        logger.info(f"Concurrent request for pair {low}/{high} lost the race")
        _raise_conflict(_active_between(db, sender_id, receiver_id))

    db.add(
        Notification(
            recipient_id=receiver_id,
            kind=NotificationKind.connection_request.value,
            related_user_id=sender_id,
            connection_request_id=req.id,
        )
    )
    _commit(db)
    db.refresh(req)

    logger.info(f"Connection request {req.id}: {sender_id} -> {receiver_id}")
    return req


def respond(db: Session, receiver_id: str, request_id: int, action) -> ConnectionRequest:
    try:
        action = RespondAction(action)
    except ValueError:
        raise ValidationError('Action must be either "accept" or "reject"')

    req = _get_request(db, request_id)

    if req.receiver_id != receiver_id:
        raise AuthorizationError("Not authorized to respond to this request")

    new_status = (
        RequestStatus.accepted if action == RespondAction.accept else RequestStatus.rejected
    )

    # compare-and-set on status: only the first responder sees 'pending'
    updated = (
        db.query(ConnectionRequest)
        .filter(
            ConnectionRequest.id == request_id,
            ConnectionRequest.status == RequestStatus.pending.value,
        )
        .update(
            {"status": new_status.value, "updated_at": utcnow()},
            synchronize_session=False,
        )
    )
    if updated != 1:
        db.rollback()
        raise ValidationError("Request has already been responded to")

    if new_status == RequestStatus.accepted:
        db.add(
            Notification(
                recipient_id=req.sender_id,
                kind=NotificationKind.connection_accepted.value,
                related_user_id=receiver_id,
                connection_request_id=req.id,
            )
        )

    _commit(db)
    db.refresh(req)

    logger.info(f"Connection request {req.id} {new_status.value} by {receiver_id}")
    return req


def withdraw(db: Session, sender_id: str, request_id: int) -> None:
    req = _get_request(db, request_id)

    if req.sender_id != sender_id:
        raise AuthorizationError("Not authorized to withdraw this request")

    deleted = (
        db.query(ConnectionRequest)
        .filter(
            ConnectionRequest.id == request_id,
            ConnectionRequest.status == RequestStatus.pending.value,
        )
        .delete(synchronize_session=False)
    )
    if deleted != 1:
        db.rollback()
        raise ValidationError("Can only withdraw pending requests")

    db.expunge(req)
    _commit(db)
    logger.info(f"Connection request {request_id} withdrawn by {sender_id}")


def disconnect(db: Session, caller_id: str, request_id: int) -> None:
    conn = _get_request(db, request_id)

    if caller_id not in (conn.sender_id, conn.receiver_id):
        raise AuthorizationError("Not authorized to disconnect this connection")

    deleted = (
        db.query(ConnectionRequest)
        .filter(
            ConnectionRequest.id == request_id,
            ConnectionRequest.status == RequestStatus.accepted.value,
        )
        .delete(synchronize_session=False)
    )
    if deleted != 1:
        db.rollback()
        raise ValidationError("Can only disconnect accepted connections")

    db.expunge(conn)
    _commit(db)
    logger.info(f"Connection {request_id} disconnected by {caller_id}")


# ---------- READS ----------

def check_status(db: Session, caller_id: str, other_id: str) -> PairStatus:
    if not other_id:
        raise ValidationError("Receiver ID is required")

    existing = _active_between(db, caller_id, other_id)
    if existing is None:
        return PairStatus.no_relation
    if existing.status == RequestStatus.accepted.value:
        return PairStatus.accepted
    if existing.sender_id == caller_id:
        return PairStatus.pending_outgoing
    return PairStatus.pending_incoming


def sent_requests(db: Session, user_id: str, now=None):
    rows = (
        db.query(ConnectionRequest)
        .filter(ConnectionRequest.sender_id == user_id)
        .order_by(ConnectionRequest.created_at.desc(), ConnectionRequest.id.desc())
        .all()
    )
    names = _names(db, (r.receiver_id for r in rows))
    items = [_request_item(r, r.receiver_id, names) for r in rows]
    return group_by_recency(items, key=lambda i: i["created_at"], now=now)


def incoming_requests(db: Session, user_id: str, now=None):
    rows = (
        db.query(ConnectionRequest)
        .filter(
            ConnectionRequest.receiver_id == user_id,
            ConnectionRequest.status == RequestStatus.pending.value,
        )
        .order_by(ConnectionRequest.created_at.desc(), ConnectionRequest.id.desc())
        .all()
    )
    names = _names(db, (r.sender_id for r in rows))
    items = [_request_item(r, r.sender_id, names) for r in rows]
    return group_by_recency(items, key=lambda i: i["created_at"], now=now)


def accepted_connections(db: Session, user_id: str, now=None):
    rows = (
        db.query(ConnectionRequest)
        .filter(
            ConnectionRequest.status == RequestStatus.accepted.value,
            or_(
                ConnectionRequest.sender_id == user_id,
                ConnectionRequest.receiver_id == user_id,
            ),
        )
        .order_by(ConnectionRequest.updated_at.desc(), ConnectionRequest.id.desc())
        .all()
    )

    def other(r: ConnectionRequest) -> str:
        return r.receiver_id if r.sender_id == user_id else r.sender_id

    names = _names(db, (other(r) for r in rows))
    items = [
        {
            "id": r.id,
            "counterpart_id": other(r),
            "counterpart_name": names.get(other(r)),
            # acceptance time
            "connected_at": r.updated_at,
            "created_at": r.created_at,
        }
        for r in rows
    ]
    return group_by_recency(items, key=lambda i: i["connected_at"], now=now)


def _request_item(r: ConnectionRequest, counterpart_id: str, names: Dict[str, str]) -> dict:
    return {
        "id": r.id,
        "counterpart_id": counterpart_id,
        "counterpart_name": names.get(counterpart_id),
        "status": r.status,
        "created_at": r.created_at,
        "updated_at": r.updated_at,
    }
