from typing import List, Optional

from pydantic import BaseModel, Field

from linkup.schemas.base import TimestampedSchema
from linkup.schemas.enums import MessageKind


class SendMessageIn(BaseModel):
    receiver_id: str
    body: str = ""
    kind: MessageKind = MessageKind.text
    media_ref: Optional[str] = Field(default=None, max_length=2048)


class MessageOut(TimestampedSchema):
    id: int
    sender_id: str
    receiver_id: str
    body: str
    kind: MessageKind
    media_ref: Optional[str] = None
    read: bool


class HistoryOut(BaseModel):
    count: int
    messages: List[MessageOut]


class MarkReadOut(BaseModel):
    updated: int
