# microblog/profile/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import date


class ProfilePatch(BaseModel):
    """Solo se aplican los campos enviados (exclude_unset)."""
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = None
    location: Optional[str] = Field(default=None, max_length=100)
    website: Optional[str] = Field(default=None, max_length=255)
    avatar: Optional[str] = None
    cover: Optional[str] = None
    dob: Optional[date] = None


class _ProfileFields(BaseModel):
    user_id: int
    name: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    avatar: Optional[str] = None
    cover: Optional[str] = None


class DisplayProfile(_ProfileFields):
    created_at: str                 # "March 2023"
    dob: Optional[str] = None       # "July 4, 1990"


class EditableProfile(_ProfileFields):
    created_at: Optional[str] = None
    dob: Optional[str] = None       # "1990-07-04"


class UserMini(BaseModel):
    id: int
    username: str


class UserProfileOut(UserMini):
    profile: Optional[DisplayProfile] = None


class EditableProfileOut(EditableProfile):
    user: UserMini


class PostsCountOut(BaseModel):
    count: int


class FollowCountOut(BaseModel):
    followers: int
    following: int
