import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from file_utils import AVATARS_BUCKET, generate_avatar_path, get_public_url, upload
from repositories import SqliteProfileRepository
from repositories.profiles import SEARCH_LIMIT
from schemas.profile import AvatarResponse, ProfileResponse, ProfileSearchResult, ProfileUpdate
from utils.route_helpers import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["profiles"])
profiles = SqliteProfileRepository()


@router.get("/search", response_model=List[ProfileSearchResult])
def search_profiles(q: str = Query(..., min_length=1), current_user_id: int = Depends(get_current_user_id)):
    """Case-insensitive substring match on username, capped at 20 results"""
    query = q.strip()
    if not query:
        return []
    return profiles.search(query, SEARCH_LIMIT)


@router.get("/me/profile", response_model=ProfileResponse)
def get_my_profile(current_user_id: int = Depends(get_current_user_id)):
    profile = profiles.get_by_id(current_user_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.put("/me/profile", response_model=ProfileResponse)
def update_my_profile(profile_update: ProfileUpdate, current_user_id: int = Depends(get_current_user_id)):
    fields = profile_update.model_dump(exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No profile fields to update")
    updated = profiles.update(current_user_id, fields)
    if not updated:
        raise HTTPException(status_code=404, detail="Profile not found")
    return updated


@router.post("/me/avatar", response_model=AvatarResponse)
async def upload_avatar(file: UploadFile = File(...), current_user_id: int = Depends(get_current_user_id)):
    content = await file.read()
    path = generate_avatar_path(current_user_id, file.filename)
    upload(AVATARS_BUCKET, path, content, upsert=True)
    avatar_url = get_public_url(AVATARS_BUCKET, path)
    profiles.update(current_user_id, {"avatar_url": avatar_url})
    logger.info("User %s uploaded avatar %s", current_user_id, path)
    return {"avatar_url": avatar_url}


@router.get("/{username}/profile", response_model=ProfileResponse)
def get_profile(username: str, current_user_id: int = Depends(get_current_user_id)):
    """Get a member's profile by username (case-insensitive)"""
    profile = profiles.get_by_username(username)
    if not profile:
        raise HTTPException(status_code=404, detail="User not found")
    return profile
