import asyncio
import logging
from typing import Optional

import accounts
from exceptions import AppError, AuthError, InvalidInputError
from permissions import PermissionGate
from state.banner import Banner
from state.client import AppClient
from state.identity import IdentityCache

logger = logging.getLogger(__name__)


class AccountSettings:
    """Own email and password changes, plus whether the admin tab is offered."""

    def __init__(self, client: AppClient, identity: IdentityCache):
        self.client = client
        self.identity = identity
        self.gate = PermissionGate(identity)
        self.banner = Banner()
        self.email: Optional[str] = None
        self.username: Optional[str] = None
        self.saving = False

    @property
    def show_admin_tab(self) -> bool:
        return self.gate.can_view_admin_panel()

    async def load(self) -> bool:
        try:
            user = await self.client.auth.require_user()
            profile = await asyncio.to_thread(self.client.profiles.get_by_id, user["id"])
        except AppError as e:
            self.banner.show_error(e.message)
            return False
        self.email = user["email"]
        self.username = profile["username"] if profile else None
        return True

    def _token(self) -> str:
        token = self.client.auth.access_token
        if not token:
            raise AuthError("Not authenticated")
        return token

    async def update_email(self, new_email: str) -> bool:
        self.banner.clear()
        self.saving = True
        try:
            await asyncio.to_thread(accounts.update_own_email, self._token(), new_email, self.client.profiles)
        except AppError as e:
            logger.error("Error updating email: %s", e)
            self.banner.show_error(e.message)
            return False
        finally:
            self.saving = False
        self.email = new_email.strip()
        self.client.auth.notify_user_updated()
        self.banner.show_success("Email updated successfully!")
        return True

    async def update_password(self, current_password: str, new_password: str, confirm_password: str) -> bool:
        self.banner.clear()
        self.saving = True
        try:
            if new_password != confirm_password:
                raise InvalidInputError("Passwords do not match")
            await asyncio.to_thread(accounts.update_own_password, self._token(), current_password, new_password)
        except AppError as e:
            logger.error("Error updating password: %s", e)
            self.banner.show_error(e.message)
            return False
        finally:
            self.saving = False
        self.banner.show_success("Password updated successfully!")
        return True
