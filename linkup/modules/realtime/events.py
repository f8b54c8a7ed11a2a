"""Realtime channel events, validated before they reach any handler."""
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from linkup.core.recency import as_utc


class _Inbound(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class IdentifyEvent(_Inbound):
    type: Literal["identify"]
    identity: str = Field(..., min_length=1)


class SendMessageEvent(_Inbound):
    type: Literal["sendMessage"]
    message_id: int = Field(..., alias="messageId")


class TypingEvent(_Inbound):
    type: Literal["typing"]
    receiver_id: str = Field(..., alias="receiverId", min_length=1)


class StopTypingEvent(_Inbound):
    type: Literal["stopTyping"]
    receiver_id: str = Field(..., alias="receiverId", min_length=1)


InboundEvent = Annotated[
    Union[IdentifyEvent, SendMessageEvent, TypingEvent, StopTypingEvent],
    Field(discriminator="type"),
]

inbound_adapter = TypeAdapter(InboundEvent)


def parse_event(raw) -> InboundEvent:
    """Raises ``pydantic.ValidationError`` for anything malformed."""
    return inbound_adapter.validate_python(raw)


# ---------- outbound ----------

def message_payload(msg) -> dict:
    return {
        "id": msg.id,
        "senderId": msg.sender_id,
        "receiverId": msg.receiver_id,
        "body": msg.body,
        "kind": msg.kind,
        "mediaRef": msg.media_ref,
        "read": msg.read,
        "createdAt": as_utc(msg.created_at).isoformat(),
    }


def receive_message(msg) -> dict:
    return {"type": "receiveMessage", "message": message_payload(msg)}


def message_sent(msg) -> dict:
    return {"type": "messageSent", "message": message_payload(msg)}


def typing(sender_id: str, is_typing: bool) -> dict:
    return {
        "type": "typing" if is_typing else "stopTyping",
        "senderId": sender_id,
        "isTyping": is_typing,
    }


def error(detail: str) -> dict:
    return {"type": "error", "detail": detail}
