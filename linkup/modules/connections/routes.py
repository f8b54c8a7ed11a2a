from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from linkup.core.auth import get_current_user_id
from linkup.core.db import get_db
from .schemas import (
    ConnectionRequestOut,
    GroupedConnections,
    GroupedRequests,
    PairStatusOut,
    RespondIn,
    SendRequestIn,
)
from .service import (
    accepted_connections,
    check_status,
    disconnect,
    incoming_requests,
    respond,
    send_request,
    sent_requests,
    withdraw,
)
from linkup.schemas.enums import PairStatus

router = APIRouter(prefix="/connections", tags=["connections"])


# ------------------------------------------------------------------
# Requests
# ------------------------------------------------------------------

@router.post("/requests", response_model=ConnectionRequestOut, status_code=201)
def connect_request(
    payload: SendRequestIn,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return send_request(db, user_id, payload.receiver_id)


@router.get("/requests/incoming", response_model=GroupedRequests)
def requests_incoming(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return incoming_requests(db, user_id)


@router.get("/requests/sent", response_model=GroupedRequests)
def requests_sent(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return sent_requests(db, user_id)


@router.put("/requests/{request_id}", response_model=ConnectionRequestOut)
def request_respond(
    request_id: int,
    payload: RespondIn,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return respond(db, user_id, request_id, payload.action)


@router.delete("/requests/{request_id}")
def request_withdraw(
    request_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    withdraw(db, user_id, request_id)
    return {"status": "withdrawn", "id": request_id}


# ------------------------------------------------------------------
# Accepted connections
# ------------------------------------------------------------------

@router.get("", response_model=GroupedConnections)
def connections_list(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return accepted_connections(db, user_id)


@router.get("/status/{other_id}", response_model=PairStatusOut)
def connection_status(
    other_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    status = check_status(db, user_id, other_id)
    return {"status": status, "is_connected": status == PairStatus.accepted}


@router.delete("/{request_id}")
def connection_disconnect(
    request_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    disconnect(db, user_id, request_id)
    return {"status": "disconnected", "id": request_id}
