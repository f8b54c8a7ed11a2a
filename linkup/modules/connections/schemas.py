from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from linkup.schemas.base import BaseSchema, TimestampedSchema
from linkup.schemas.enums import PairStatus, RequestStatus, RespondAction


# ---------- requests ----------
class SendRequestIn(BaseModel):
    receiver_id: str


class RespondIn(BaseModel):
    action: RespondAction


# ---------- responses ----------
class ConnectionRequestOut(TimestampedSchema):
    id: int
    sender_id: str
    receiver_id: str
    status: RequestStatus


class RequestListItem(BaseSchema):
    id: int
    counterpart_id: str
    counterpart_name: Optional[str] = None
    status: RequestStatus
    created_at: datetime
    updated_at: datetime
    formatted_date: Optional[str] = None


class GroupedRequests(BaseModel):
    today: List[RequestListItem]
    yesterday: List[RequestListItem]
    older: List[RequestListItem]
    count: int


class ConnectionListItem(BaseSchema):
    id: int
    counterpart_id: str
    counterpart_name: Optional[str] = None
    connected_at: datetime
    created_at: datetime
    formatted_date: Optional[str] = None


class GroupedConnections(BaseModel):
    today: List[ConnectionListItem]
    yesterday: List[ConnectionListItem]
    older: List[ConnectionListItem]
    count: int


class PairStatusOut(BaseModel):
    status: PairStatus
    is_connected: bool
