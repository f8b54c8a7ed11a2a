import pytest

from linkup.core.errors import NotFoundError, ValidationError
from linkup.modules.profiles.service import (
    discover,
    get_profile,
    identity_exists,
    normalize_interests,
    upsert_profile,
)


def test_normalize_interests_trims_lowercases_and_dedupes() -> None:
    assert normalize_interests([" Chess", "chess", "", "Jazz ", None]) == ["chess", "jazz"]


def test_upsert_creates_then_updates(db) -> None:
    upsert_profile(db, "erin", "Erin", ["Running"])
    updated = upsert_profile(db, "erin", "Erin K", ["running", "Books"], location="Lisbon")

    assert updated.full_name == "Erin K"
    assert updated.interests == ["running", "books"]
    assert get_profile(db, "erin").location == "Lisbon"


def test_upsert_requires_a_name(db) -> None:
    with pytest.raises(ValidationError):
        upsert_profile(db, "erin", "   ", [])


def test_unknown_profile(db) -> None:
    assert identity_exists(db, "nobody") is False
    with pytest.raises(NotFoundError):
        get_profile(db, "nobody")


def test_discover_ranks_by_shared_interest_count(db, users) -> None:
    found = discover(db, "dave", ["jazz", "chess", "hiking"])

    # ties fall back to name order
    assert [u["user_id"] for u in found] == ["carol", "alice", "bob"]
    assert found[0]["shared_interests"] == ["hiking", "chess", "jazz"]


def test_discover_excludes_caller_and_non_matches(db, users) -> None:
    found = discover(db, "carol", ["hiking"])
    assert [u["user_id"] for u in found] == ["alice"]


def test_discover_requires_interest(db, users) -> None:
    with pytest.raises(ValidationError):
        discover(db, "alice", [" ", ""])


def test_profile_routes(client, auth_headers) -> None:
    resp = client.put(
        "/v1/profiles/me",
        json={"full_name": "Frank", "interests": ["Chess"]},
        headers=auth_headers("frank"),
    )
    assert resp.status_code == 200
    assert resp.json()["interests"] == ["chess"]

    client.put(
        "/v1/profiles/me",
        json={"full_name": "Gina", "interests": ["chess", "tennis"]},
        headers=auth_headers("gina"),
    )

    resp = client.get("/v1/discover", params={"interests": "chess,tennis"}, headers=auth_headers("frank"))
    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == 1
    assert body["users"][0]["user_id"] == "gina"

    assert client.get("/v1/profiles/nobody", headers=auth_headers("frank")).status_code == 404
