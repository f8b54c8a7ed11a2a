from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from linkup.core.auth import get_current_user_id
from linkup.core.db import get_db
from .schemas import FeedOut, NotificationOut
from .service import feed, mark_all_read, mark_notification_read

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=FeedOut)
def notification_feed(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    entries = feed(db, user_id)
    return {"count": len(entries), "notifications": entries}


@router.put("/read-all")
def notification_read_all(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return {"updated": mark_all_read(db, user_id)}


@router.put("/{notification_id}/read", response_model=NotificationOut)
def notification_read(
    notification_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return mark_notification_read(db, user_id, notification_id)
