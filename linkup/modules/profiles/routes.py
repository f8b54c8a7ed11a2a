from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from linkup.core.auth import get_current_user_id
from linkup.core.db import get_db
from .schemas import DiscoverResponse, ProfileOut, ProfileUpdateRequest
from .service import discover, get_profile, upsert_profile

router = APIRouter(tags=["profiles"])


@router.put("/profiles/me", response_model=ProfileOut)
def profile_update(
    payload: ProfileUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return upsert_profile(
        db,
        user_id,
        payload.full_name,
        payload.interests,
        bio=payload.bio,
        location=payload.location,
    )


@router.get("/profiles/me", response_model=ProfileOut)
def profile_me(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return get_profile(db, user_id)


@router.get("/profiles/{other_id}", response_model=ProfileOut)
def profile_get(
    other_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    return get_profile(db, other_id)


@router.get("/discover", response_model=DiscoverResponse)
def discover_users(
    interests: str = Query(..., description="comma separated interest tags"),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    users = discover(db, user_id, interests.split(","))
    return {"count": len(users), "users": users}
