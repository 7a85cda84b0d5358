from typing import List, Optional

from fastapi import APIRouter, Depends, Header

import accounts
from repositories import SqliteProfileRepository
from schemas.admin import (
    AdminFlagUpdate,
    AdminUserResponse,
    ChangePasswordRequest,
    LogoutAllResponse,
    RoleUpdate,
    SuccessResponse,
)
from schemas.profile import ProfileResponse
from utils.route_helpers import get_optional_token, oauth2_scheme

router = APIRouter(prefix="/api/admin", tags=["admin"])
profiles = SqliteProfileRepository()


@router.get("/users", response_model=List[AdminUserResponse])
def list_users(token: str = Depends(oauth2_scheme)):
    """Every profile, ordered by username. Admins only."""
    accounts.require_admin(token, profiles)
    return profiles.list_all()


@router.put("/users/{user_id}/role", response_model=ProfileResponse)
def update_role(user_id: int, role_update: RoleUpdate, token: str = Depends(oauth2_scheme)):
    return accounts.set_role(token, user_id, role_update.role, profiles)


@router.put("/users/{user_id}/admin", response_model=ProfileResponse)
def update_admin_flag(user_id: int, flag: AdminFlagUpdate, token: str = Depends(oauth2_scheme)):
    return accounts.set_admin_flag(token, user_id, flag.is_admin, profiles)


@router.post("/change-password", response_model=SuccessResponse)
def change_password(request: ChangePasswordRequest, token: Optional[str] = Depends(get_optional_token)):
    accounts.change_user_password(token, request.user_id, request.new_password, profiles)
    return {"success": True}


@router.post("/logout-all", response_model=LogoutAllResponse)
def logout_all(x_service_role_key: Optional[str] = Header(None)):
    """Revoke every session. Authenticated with the service role key, not a user token."""
    return {"success": True, "sessions_revoked": accounts.sign_out_everyone(x_service_role_key)}
