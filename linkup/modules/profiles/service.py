from typing import Iterable, List

from loguru import logger
from sqlalchemy.orm import Session

from linkup.core.errors import NotFoundError, ValidationError
from .models import Profile


def normalize_interests(interests: Iterable[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for raw in interests:
        tag = (raw or "").strip().lower()
        if tag and tag not in seen:
            seen.add(tag)
            out.append(tag)
    return out


# ---------- PROFILE ----------

def upsert_profile(
    db: Session,
    user_id: str,
    full_name: str,
    interests: Iterable[str],
    bio: str = "",
    location: str = "",
) -> Profile:
    if not full_name or not full_name.strip():
        raise ValidationError("full_name is required")

    profile = db.get(Profile, user_id)
    if profile is None:
        profile = Profile(user_id=user_id)
        db.add(profile)
        logger.info(f"Creating profile for {user_id}")

    profile.full_name = full_name.strip()
    profile.interests = normalize_interests(interests)
    profile.bio = bio
    profile.location = location

    db.commit()
    db.refresh(profile)
    return profile


def get_profile(db: Session, user_id: str) -> Profile:
    profile = db.get(Profile, user_id)
    if profile is None:
        raise NotFoundError("User not found")
    return profile


def identity_exists(db: Session, user_id: str) -> bool:
    return db.get(Profile, user_id) is not None


# ---------- DISCOVERY ----------

def discover(db: Session, caller_id: str, interests: Iterable[str], limit: int = 50):
    wanted = normalize_interests(interests)
    if not wanted:
        raise ValidationError("At least one interest is required")

    wanted_set = set(wanted)

    # JSON columns are not portably queryable, so filter in Python
    rows = db.query(Profile).filter(Profile.user_id != caller_id).all()

    matches = []
    for p in rows:
        shared = [tag for tag in (p.interests or []) if tag in wanted_set]
        if shared:
            matches.append((p, shared))

    matches.sort(key=lambda m: (-len(m[1]), m[0].full_name.lower()))
    logger.debug(f"Discover for {caller_id}: interests={wanted} hits={len(matches)}")

    return [
        {
            "user_id": p.user_id,
            "full_name": p.full_name,
            "location": p.location,
            "interests": p.interests or [],
            "shared_interests": shared,
        }
        for p, shared in matches[:limit]
    ]
