from typing import Optional

from pydantic import BaseModel, field_validator

MAX_BIO_LENGTH = 500


class ProfileResponse(BaseModel):
    id: int
    username: str
    email: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    role: str
    is_admin: bool
    involio_profile_url: Optional[str] = None
    twitter_url: Optional[str] = None
    instagram_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    youtube_url: Optional[str] = None
    discord_tag: Optional[str] = None
    tiktok_url: Optional[str] = None
    website_url: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ProfileUpdate(BaseModel):
    bio: Optional[str] = None
    involio_profile_url: Optional[str] = None
    twitter_url: Optional[str] = None
    instagram_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    youtube_url: Optional[str] = None
    discord_tag: Optional[str] = None
    tiktok_url: Optional[str] = None
    website_url: Optional[str] = None

    @field_validator('bio')
    def validate_bio(cls, v):
        if v is not None and len(v) > MAX_BIO_LENGTH:
            raise ValueError(f'Bio must be at most {MAX_BIO_LENGTH} characters long')
        return v


class ProfileSearchResult(BaseModel):
    id: int
    username: str
    bio: Optional[str] = None
    avatar_url: Optional[str] = None


class AvatarResponse(BaseModel):
    avatar_url: str
