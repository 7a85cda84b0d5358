from typing import Optional

from fastapi import APIRouter, Depends

import accounts
from schemas.admin import SuccessResponse, UpdateEmailRequest, UpdatePasswordRequest
from utils.route_helpers import get_optional_token

router = APIRouter(prefix="/api/user", tags=["account"])


@router.post("/update-email", response_model=SuccessResponse)
def update_email(request: UpdateEmailRequest, token: Optional[str] = Depends(get_optional_token)):
    accounts.update_own_email(token, request.new_email)
    return {"success": True}


@router.post("/update-password", response_model=SuccessResponse)
def update_password(request: UpdatePasswordRequest, token: Optional[str] = Depends(get_optional_token)):
    accounts.update_own_password(token, request.current_password, request.new_password)
    return {"success": True}
