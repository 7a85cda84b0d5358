import logging

from fastapi import APIRouter, Depends, HTTPException

import auth
from permissions import is_owner
from repositories import SqliteProfileRepository
from schemas.auth import LoginRequest, MeResponse, RegisterRequest, Token
from utils.route_helpers import get_current_user_id, oauth2_scheme

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])
profiles = SqliteProfileRepository()


@router.post("/register", response_model=Token, status_code=201)
def register(user: RegisterRequest):
    auth.sign_up(user.username, user.email, user.password)
    return auth.sign_in_with_password(user.email.strip(), user.password)


@router.post("/login", response_model=Token)
def login(login_data: LoginRequest):
    return auth.sign_in(login_data.email_or_username, login_data.password)


@router.post("/logout", status_code=204)
def logout(token: str = Depends(oauth2_scheme)):
    auth.sign_out(token)


@router.get("/me", response_model=MeResponse)
def get_current_user(token: str = Depends(oauth2_scheme), user_id: int = Depends(get_current_user_id)):
    """Get current user information from token"""
    user = auth.get_user(token)
    profile = profiles.get_by_id(user_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return MeResponse(
        id=user["id"],
        email=user["email"],
        username=profile["username"],
        role=profile["role"],
        is_admin=profile["is_admin"],
        is_owner=is_owner(profile),
        avatar_url=profile["avatar_url"],
    )
