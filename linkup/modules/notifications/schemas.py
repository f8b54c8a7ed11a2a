from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel

from linkup.schemas.base import BaseSchema
from linkup.schemas.enums import NotificationKind


class FeedEntry(BaseModel):
    kind: NotificationKind
    counterpart_id: str
    created_at: datetime
    connection_request_id: Optional[int] = None
    notification_id: Optional[int] = None


class FeedOut(BaseModel):
    count: int
    notifications: List[FeedEntry]


class NotificationOut(BaseSchema):
    id: int
    kind: NotificationKind
    related_user_id: str
    connection_request_id: Optional[int] = None
    read: bool
    created_at: datetime
