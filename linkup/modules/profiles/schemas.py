from typing import List
from pydantic import BaseModel, Field

from linkup.schemas.base import TimestampedSchema


class ProfileUpdateRequest(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=120)
    interests: List[str] = Field(default_factory=list)
    bio: str = ""
    location: str = ""


class ProfileOut(TimestampedSchema):
    user_id: str
    full_name: str
    interests: List[str]
    bio: str
    location: str


class DiscoverItem(BaseModel):
    user_id: str
    full_name: str
    location: str
    interests: List[str]
    shared_interests: List[str]


class DiscoverResponse(BaseModel):
    count: int
    users: List[DiscoverItem]
