from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer

from auth import verify_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")
# Privileged endpoints report a missing header themselves
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_current_user_id(token: str = Depends(oauth2_scheme)) -> int:
    """Get current user ID from token"""
    payload = verify_token(token)
    if not payload:
        raise HTTPException(status_code=401, detail="Invalid token")
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token payload")


def get_optional_token(token: Optional[str] = Depends(optional_oauth2_scheme)) -> Optional[str]:
    return token
