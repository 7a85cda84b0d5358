from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from repositories import ROLES


class AdminUserResponse(BaseModel):
    id: int
    username: str
    email: Optional[str] = None
    role: str
    avatar_url: Optional[str] = None
    is_admin: bool


class RoleUpdate(BaseModel):
    role: str

    @field_validator('role')
    def validate_role(cls, v):
        if v not in ROLES:
            raise ValueError(f"Role must be one of: {', '.join(ROLES)}")
        return v


class AdminFlagUpdate(BaseModel):
    is_admin: bool


# The privileged endpoints keep their camelCase wire names
class ChangePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[int] = Field(None, alias="userId")
    new_password: Optional[str] = Field(None, alias="newPassword")


class UpdateEmailRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_email: Optional[str] = Field(None, alias="newEmail")


class UpdatePasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_password: Optional[str] = Field(None, alias="currentPassword")
    new_password: Optional[str] = Field(None, alias="newPassword")


class SuccessResponse(BaseModel):
    success: bool = True


class LogoutAllResponse(SuccessResponse):
    sessions_revoked: int
