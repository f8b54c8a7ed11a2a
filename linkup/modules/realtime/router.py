"""
Realtime event router.

Each inbound frame becomes a typed event (see ``events.py``) that is
dispatched to a plain handler function. Handlers get everything they
touch through a :class:`RouterContext` argument: the presence registry
and a session factory for reading persisted messages.

Channel lifecycle: ``connected`` (anonymous) -> ``identified`` -> ``closed``.
A channel may only identify as the identity its handshake credentials
were verified for; anonymous channels just receive the roster.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional

from loguru import logger
from pydantic import ValidationError as SchemaError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from linkup.core.errors import AuthorizationError, LinkupError, NotFoundError, ValidationError
from linkup.modules.messages.service import get_message
from linkup.modules.presence.registry import ChannelHandle, PresenceRegistry, deliver

from . import events


class ChannelState(str, Enum):
    connected = "connected"
    identified = "identified"
    closed = "closed"


@dataclass(eq=False)
class Channel:
    handle: ChannelHandle
    state: ChannelState = ChannelState.connected
    identity: Optional[str] = None
    # set from the handshake credentials, never from an event
    verified_identity: Optional[str] = None


@dataclass
class RouterContext:
    registry: PresenceRegistry
    session_factory: Callable[[], Session]


Handler = Callable[[RouterContext, Channel, object], Awaitable[None]]


# ------------------------------------------------------------------
# Handlers
# ------------------------------------------------------------------

def _require_identified(channel: Channel) -> str:
    if channel.state != ChannelState.identified or not channel.identity:
        raise ValidationError("Channel is not identified")
    return channel.identity


async def handle_identify(ctx: RouterContext, channel: Channel, event: events.IdentifyEvent) -> None:
    if channel.verified_identity is None:
        raise AuthorizationError("Channel is not authenticated")
    if event.identity != channel.verified_identity:
        raise AuthorizationError("Identity does not match channel credentials")

    channel.identity = event.identity
    channel.state = ChannelState.identified
    await ctx.registry.register(event.identity, channel.handle)


def _load_for_relay(session_factory, message_id: int, identity: str):
    db = session_factory()
    try:
        msg = get_message(db, message_id)
        if msg is None:
            raise NotFoundError("Message not found")
        if msg.sender_id != identity:
            raise AuthorizationError("Not the sender of this message")
        return events.receive_message(msg), events.message_sent(msg), msg.receiver_id
    finally:
        db.close()


async def handle_send_message(ctx: RouterContext, channel: Channel, event: events.SendMessageEvent) -> None:
    identity = _require_identified(channel)

    # relay only what is already committed; never trust client fields.
    # The load runs off the loop, registry lookups happen back on it.
    inbound, confirmation, receiver_id = await run_in_threadpool(
        _load_for_relay, ctx.session_factory, event.message_id, identity
    )

    receiver = ctx.registry.lookup(receiver_id)
    if receiver is not None:
        await deliver(receiver, inbound)
    else:
        logger.debug(f"[realtime] {receiver_id} offline, message {event.message_id} not relayed")

    # echo to the sender's registered handle when it is another tab
    own = ctx.registry.lookup(identity)
    if own is not None and own is not channel.handle:
        await deliver(own, confirmation)


async def _relay_typing(ctx: RouterContext, channel: Channel, receiver_id: str, is_typing: bool) -> None:
    identity = _require_identified(channel)
    receiver = ctx.registry.lookup(receiver_id)
    if receiver is not None:
        await deliver(receiver, events.typing(identity, is_typing))


async def handle_typing(ctx: RouterContext, channel: Channel, event: events.TypingEvent) -> None:
    await _relay_typing(ctx, channel, event.receiver_id, True)


async def handle_stop_typing(ctx: RouterContext, channel: Channel, event: events.StopTypingEvent) -> None:
    await _relay_typing(ctx, channel, event.receiver_id, False)


HANDLERS: Dict[str, Handler] = {
    "identify": handle_identify,
    "sendMessage": handle_send_message,
    "typing": handle_typing,
    "stopTyping": handle_stop_typing,
}


# ------------------------------------------------------------------
# Router
# ------------------------------------------------------------------

@dataclass
class EventRouter:
    registry: PresenceRegistry
    session_factory: Callable[[], Session]
    handlers: Dict[str, Handler] = field(default_factory=lambda: dict(HANDLERS))

    @property
    def context(self) -> RouterContext:
        return RouterContext(self.registry, self.session_factory)

    def open(self, handle: ChannelHandle, verified_identity: Optional[str] = None) -> Channel:
        self.registry.attach(handle)
        return Channel(handle=handle, verified_identity=verified_identity)

    async def dispatch(self, channel: Channel, raw) -> None:
        if channel.state == ChannelState.closed:
            logger.debug("[realtime] event on closed channel ignored")
            return

        try:
            event = events.parse_event(raw)
        except SchemaError as exc:
            await deliver(channel.handle, events.error(f"Invalid event: {exc.error_count()} error(s)"))
            return

        try:
            await self.handlers[event.type](self.context, channel, event)
        except LinkupError as exc:
            logger.debug(f"[realtime] {event.type} rejected: {exc.message}")
            await deliver(channel.handle, events.error(exc.message))

    async def close(self, channel: Channel) -> None:
        if channel.state == ChannelState.closed:
            return
        channel.state = ChannelState.closed
        self.registry.detach(channel.handle)
        await self.registry.unregister(channel.handle)
