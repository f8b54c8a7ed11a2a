"""
In-process presence registry.

Maps an identity to the single channel handle it is currently reachable
on. A later ``register`` for the same identity replaces the earlier
handle (latest session wins); the superseded channel stays open but is no
longer reachable by identity. State lives only as long as the process.

Every mutation updates the maps synchronously before the first ``await``,
so one event's update is never interleaved with another's on the loop.
"""
from typing import Dict, List, Optional, Protocol, Set

from loguru import logger


class ChannelHandle(Protocol):
    """Anything that can push a JSON-able event to one connected client."""

    async def send(self, event: dict) -> None:
        ...


class PresenceRegistry:
    def __init__(self) -> None:
        self._by_identity: Dict[str, ChannelHandle] = {}
        self._channels: Set[ChannelHandle] = set()
        self._closed = False

    # ------------------------------------------------------------
    # Channel bookkeeping
    # ------------------------------------------------------------
    def attach(self, handle: ChannelHandle) -> None:
        """Track an open (possibly anonymous) channel for roster broadcasts."""
        if self._closed:
            raise RuntimeError("Presence registry is closed")
        self._channels.add(handle)

    def detach(self, handle: ChannelHandle) -> None:
        self._channels.discard(handle)

    # ------------------------------------------------------------
    # Presence
    # ------------------------------------------------------------
    async def register(self, identity: str, handle: ChannelHandle) -> None:
        if self._closed:
            raise RuntimeError("Presence registry is closed")

        previous = self._by_identity.get(identity)
        self._by_identity[identity] = handle
        self._channels.add(handle)

        if previous is not None and previous is not handle:
            logger.info(f"[presence] {identity} re-registered, previous handle superseded")
        else:
            logger.debug(f"[presence] {identity} registered")

        await self.publish_roster()

    def lookup(self, identity: str) -> Optional[ChannelHandle]:
        return self._by_identity.get(identity)

    def identity_of(self, handle: ChannelHandle) -> Optional[str]:
        for identity, current in self._by_identity.items():
            if current is handle:
                return identity
        return None

    async def unregister(self, handle: ChannelHandle) -> None:
        identity = self.identity_of(handle)
        if identity is None:
            return

        del self._by_identity[identity]
        logger.debug(f"[presence] {identity} unregistered")
        await self.publish_roster()

    def online(self) -> List[str]:
        return sorted(self._by_identity)

    # ------------------------------------------------------------
    # Broadcast
    # ------------------------------------------------------------
    async def publish_roster(self) -> None:
        event = {"type": "onlineRoster", "identities": self.online()}
        # snapshot: a send may trigger a close that detaches a channel
        for handle in list(self._channels):
            await deliver(handle, event)

    async def close(self) -> None:
        self._closed = True
        self._by_identity.clear()
        self._channels.clear()
        logger.info("[presence] registry closed")


async def deliver(handle: ChannelHandle, event: dict) -> bool:
    """Fire-and-forget push; a dead channel is logged, never raised."""
    try:
        await handle.send(event)
        return True
    except Exception as exc:
        logger.warning(f"[presence] dropped {event.get('type')} event: {exc!r}")
        return False
