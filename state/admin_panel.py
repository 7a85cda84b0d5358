import asyncio
import logging
import sqlite3
from typing import List, Optional

import accounts
import auth
from exceptions import AppError, AuthError, InvalidInputError, PermissionDeniedError
from permissions import ControlState, PermissionGate
from state.banner import Banner, SUCCESS_MESSAGE_SECONDS
from state.client import AppClient
from state.identity import IdentityCache

logger = logging.getLogger(__name__)


class AdminPanel:
    """User management for admins. Admin toggles and password resets are owner-only."""

    def __init__(self, client: AppClient, identity: IdentityCache):
        self.client = client
        self.identity = identity
        self.gate = PermissionGate(identity)
        self.banner = Banner()
        self.users: List[dict] = []
        self.loading = False
        self.updating_user_id: Optional[int] = None
        self.managing_user_id: Optional[int] = None

    @property
    def visible(self) -> bool:
        return self.gate.can_view_admin_panel()

    async def load(self) -> bool:
        if not self.visible:
            self.users = []
            return False
        self.loading = True
        try:
            self.users = await asyncio.to_thread(self.client.profiles.list_all)
            return True
        except (AppError, sqlite3.Error) as e:
            logger.error("Error fetching users: %s", e)
            self.banner.show_error("Failed to load users")
            return False
        finally:
            self.loading = False

    def filtered_users(self, query: str = "") -> List[dict]:
        q = query.strip().lower()
        if not q:
            return list(self.users)
        return [
            u for u in self.users
            if q in (u.get("username") or "").lower() or q in (u.get("email") or "").lower()
        ]

    def admin_control(self, user: dict) -> ControlState:
        return self.gate.admin_toggle_control(bool(user.get("is_admin")))

    def _patch(self, updated: Optional[dict]):
        if not updated:
            return
        for i, user in enumerate(self.users):
            if user["id"] == updated["id"]:
                self.users[i] = {**user, "role": updated["role"], "is_admin": updated["is_admin"]}

    async def _privileged(self, user_id: int, call, *args):
        token = self.client.auth.access_token
        if not token:
            raise AuthError("Not authenticated")
        self.updating_user_id = user_id
        try:
            return await asyncio.to_thread(call, token, user_id, *args)
        finally:
            self.updating_user_id = None

    async def update_role(self, user_id: int, role: str) -> bool:
        try:
            updated = await self._privileged(user_id, accounts.set_role, role, self.client.profiles)
        except AppError as e:
            logger.error("Error updating role for user %s: %s", user_id, e)
            self.banner.show_error(e.message)
            return False
        self._patch(updated)
        self.banner.show_success("Role updated successfully!")
        return True

    async def update_admin(self, user_id: int, value: bool) -> bool:
        if not self.gate.can_toggle_admin():
            self.banner.show_error("Only the owner can modify admin permissions", seconds=SUCCESS_MESSAGE_SECONDS)
            return False
        try:
            updated = await self._privileged(user_id, accounts.set_admin_flag, value, self.client.profiles)
        except AppError as e:
            logger.error("Error updating admin flag for user %s: %s", user_id, e)
            self.banner.show_error(e.message)
            return False
        self._patch(updated)
        self.banner.show_success("Admin status updated successfully!")
        return True

    async def change_password(self, user_id: int, new_password: str) -> bool:
        try:
            if not self.gate.can_reset_passwords():
                raise PermissionDeniedError("Only the owner can change other users' passwords")
            if not new_password or len(new_password) < auth.MIN_PASSWORD_LENGTH:
                raise InvalidInputError(f"Password must be at least {auth.MIN_PASSWORD_LENGTH} characters long")
            await self._privileged(user_id, accounts.change_user_password, new_password, self.client.profiles)
        except AppError as e:
            logger.error("Error changing password for user %s: %s", user_id, e)
            self.banner.show_error(e.message)
            return False
        self.managing_user_id = None
        self.banner.show_success("Password changed successfully!")
        return True
