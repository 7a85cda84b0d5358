import logging
from typing import Optional

from exceptions import AppError
from state.client import AppClient

logger = logging.getLogger(__name__)


class RegisterForm:
    def __init__(self, client: AppClient):
        self.client = client
        self.error: Optional[str] = None
        self.loading = False

    async def submit(self, username: str, email: str, password: str, confirm_password: str) -> bool:
        self.error = None
        if password != confirm_password:
            self.error = "Passwords do not match"
            return False

        self.loading = True
        try:
            await self.client.auth.sign_up(username, email, password)
            return True
        except AppError as e:
            logger.info("Registration rejected for %s: %s", username, e)
            self.error = e.message or "Registration failed. Please try again."
            return False
        finally:
            self.loading = False


class LoginForm:
    """Accepts an email address or a username in the same field."""

    def __init__(self, client: AppClient):
        self.client = client
        self.error: Optional[str] = None
        self.loading = False

    async def submit(self, email_or_username: str, password: str) -> bool:
        self.error = None
        self.loading = True
        try:
            await self.client.auth.sign_in(email_or_username, password)
            return True
        except AppError as e:
            logger.info("Login rejected for %s: %s", email_or_username, e)
            self.error = e.message or "Login failed. Please try again."
            return False
        finally:
            self.loading = False
