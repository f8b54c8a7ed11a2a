from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from linkup.core.auth import get_current_user_id
from linkup.core.db import get_db
from .schemas import HistoryOut, MarkReadOut, MessageOut, SendMessageIn
from .service import get_history, mark_read, send_message, unread_count

router = APIRouter(prefix="/messages", tags=["messages"])


@router.post("", response_model=MessageOut, status_code=201)
def message_send(
    payload: SendMessageIn,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    # persisted only; the client emits `sendMessage` with the returned id
    # on its realtime channel to trigger the relay
    return send_message(
        db,
        user_id,
        payload.receiver_id,
        payload.body,
        kind=payload.kind,
        media_ref=payload.media_ref,
    )


@router.get("/unread/count")
def message_unread_count(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return {"unread": unread_count(db, user_id)}


@router.get("/{other_id}", response_model=HistoryOut)
def message_history(
    other_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    msgs = get_history(db, user_id, other_id)
    return {"count": len(msgs), "messages": msgs}


@router.put("/{other_id}/read", response_model=MarkReadOut)
def message_mark_read(
    other_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return {"updated": mark_read(db, user_id, other_id)}
