from typing import Optional

from pydantic import BaseModel, field_validator


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str
    confirm_password: Optional[str] = None

    @field_validator('username')
    def validate_username(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Username is required')
        if len(v) > 50:
            raise ValueError('Username must be at most 50 characters long')
        return v

    @field_validator('confirm_password')
    def passwords_match(cls, v, info):
        if v is not None and v != info.data.get('password'):
            raise ValueError('Passwords do not match')
        return v


class LoginRequest(BaseModel):
    email_or_username: str
    password: str


class UserResponse(BaseModel):
    id: int
    email: str


class Token(BaseModel):
    access_token: str
    token_type: str
    user: UserResponse


class MeResponse(UserResponse):
    username: str
    role: str
    is_admin: bool
    is_owner: bool
    avatar_url: Optional[str] = None
