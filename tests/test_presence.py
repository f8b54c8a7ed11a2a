import asyncio

import pytest

from linkup.modules.presence.registry import PresenceRegistry


def test_register_lookup_unregister(make_handle) -> None:
    registry = PresenceRegistry()
    h = make_handle("alice")

    asyncio.run(registry.register("alice", h))
    assert registry.lookup("alice") is h

    asyncio.run(registry.unregister(h))
    assert registry.lookup("alice") is None
    assert registry.online() == []


def test_unregister_is_a_noop_when_already_removed(make_handle) -> None:
    registry = PresenceRegistry()
    h = make_handle()

    asyncio.run(registry.unregister(h))
    asyncio.run(registry.register("alice", h))
    asyncio.run(registry.unregister(h))
    asyncio.run(registry.unregister(h))

    assert registry.lookup("alice") is None


def test_latest_registration_wins(make_handle) -> None:
    registry = PresenceRegistry()
    old, new = make_handle("old"), make_handle("new")

    asyncio.run(registry.register("alice", old))
    asyncio.run(registry.register("alice", new))
    assert registry.lookup("alice") is new

    # closing the superseded handle must not evict the newer one
    asyncio.run(registry.unregister(old))
    assert registry.lookup("alice") is new


def test_roster_is_published_to_every_attached_channel(make_handle) -> None:
    registry = PresenceRegistry()
    anon, a, b = make_handle("anon"), make_handle("a"), make_handle("b")
    registry.attach(anon)

    asyncio.run(registry.register("alice", a))
    asyncio.run(registry.register("bob", b))

    assert anon.of_type("onlineRoster")[-1]["identities"] == ["alice", "bob"]
    assert a.of_type("onlineRoster")[-1]["identities"] == ["alice", "bob"]
    assert b.of_type("onlineRoster") == [{"type": "onlineRoster", "identities": ["alice", "bob"]}]

    registry.detach(b)
    asyncio.run(registry.unregister(b))
    assert anon.of_type("onlineRoster")[-1]["identities"] == ["alice"]
    assert len(b.events) == 1


def test_broken_channel_does_not_stop_the_broadcast(make_handle) -> None:
    registry = PresenceRegistry()
    broken, ok = make_handle("broken"), make_handle("ok")
    broken.broken = True
    registry.attach(broken)
    registry.attach(ok)

    asyncio.run(registry.register("alice", ok))

    assert ok.of_type("onlineRoster")[-1]["identities"] == ["alice"]


def test_closed_registry_refuses_new_entries(make_handle) -> None:
    registry = PresenceRegistry()
    asyncio.run(registry.register("alice", make_handle()))
    asyncio.run(registry.close())

    assert registry.online() == []
    with pytest.raises(RuntimeError):
        asyncio.run(registry.register("bob", make_handle()))
