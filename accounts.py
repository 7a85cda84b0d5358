"""Privileged account operations.

Each function takes the caller's bearer token and re-derives who the caller is
(and whether they are an admin or the owner) from the store, never from
anything the client claims about itself.
"""
import hmac
import logging
import sqlite3
from typing import Optional

import auth
import config
from exceptions import AppError, AuthError, InvalidInputError, NotFoundError, PermissionDeniedError
from permissions import is_admin, is_owner
from repositories import ROLES, ProfileRepository, SqliteProfileRepository

logger = logging.getLogger(__name__)


def _profiles(profiles: Optional[ProfileRepository]) -> ProfileRepository:
    return profiles if profiles is not None else SqliteProfileRepository()


def require_admin(token: str, profiles: ProfileRepository) -> dict:
    user = auth.get_user(token)
    profile = profiles.get_by_id(user["id"])
    if not is_admin(profile):
        raise PermissionDeniedError("Admin access required")
    return profile


def _require_target(user_id: int, profiles: ProfileRepository) -> dict:
    target = profiles.get_by_id(user_id)
    if not target:
        raise NotFoundError("User not found")
    return target


def change_user_password(token: str, user_id: Optional[int], new_password: Optional[str],
                         profiles: ProfileRepository = None):
    """Owner-only: set another account's password."""
    profiles = _profiles(profiles)
    if not user_id or not new_password:
        raise InvalidInputError("Missing userId or newPassword")
    auth.validate_new_password(new_password)
    if not token:
        raise AuthError("No authorization header")

    caller = require_admin(token, profiles)
    if not is_owner(caller):
        raise PermissionDeniedError("Only the owner can change other users' passwords")

    _require_target(user_id, profiles)
    auth.update_user_by_id(user_id, password=new_password)
    logger.info("Owner %s changed the password of user %s", caller["id"], user_id)


def update_own_email(token: str, new_email: Optional[str], profiles: ProfileRepository = None):
    profiles = _profiles(profiles)
    if not new_email:
        raise InvalidInputError("Missing newEmail")
    if not token:
        raise AuthError("No authorization header")

    user = auth.get_user(token)
    auth.update_user_by_id(user["id"], email=new_email)
    # The identity record is authoritative; a stale profile copy is only logged
    try:
        profiles.update(user["id"], {"email": new_email.strip()})
    except (AppError, sqlite3.Error) as e:
        logger.error("Profile email update failed for user %s: %s", user["id"], e)


def update_own_password(token: str, current_password: Optional[str], new_password: Optional[str]):
    if not current_password or not new_password:
        raise InvalidInputError("Missing currentPassword or newPassword")
    auth.validate_new_password(new_password, label="New password")
    if not token:
        raise AuthError("No authorization header")

    user = auth.get_user(token)
    if not auth.check_password(user["id"], current_password):
        raise PermissionDeniedError("Current password is incorrect")
    auth.update_user_by_id(user["id"], password=new_password)


def set_role(token: str, user_id: int, role: str, profiles: ProfileRepository = None) -> dict:
    """Any admin may move a user between user/member/head."""
    profiles = _profiles(profiles)
    if role not in ROLES:
        raise InvalidInputError(f"Role must be one of: {', '.join(ROLES)}")
    caller = require_admin(token, profiles)
    _require_target(user_id, profiles)
    updated = profiles.update(user_id, {"role": role})
    logger.info("Admin %s set role of user %s to %s", caller["id"], user_id, role)
    return updated


def set_admin_flag(token: str, user_id: int, value: bool, profiles: ProfileRepository = None) -> dict:
    """Owner-only: grant or revoke admin."""
    profiles = _profiles(profiles)
    caller = require_admin(token, profiles)
    if not is_owner(caller):
        raise PermissionDeniedError("Only the owner can modify admin permissions")
    _require_target(user_id, profiles)
    updated = profiles.update(user_id, {"is_admin": bool(value)})
    logger.info("Owner %s set is_admin=%s for user %s", caller["id"], bool(value), user_id)
    return updated


def sign_out_everyone(service_key: Optional[str]) -> int:
    if not config.SERVICE_ROLE_KEY or not service_key or not hmac.compare_digest(service_key, config.SERVICE_ROLE_KEY):
        raise PermissionDeniedError("Service role key required")
    return auth.sign_out_all()
