import time
from typing import Callable, Optional

SUCCESS_MESSAGE_SECONDS = 3.0


class Banner:
    """Dismissible error/success messages. Messages given a lifetime disappear on their own."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._error: Optional[str] = None
        self._error_expires: Optional[float] = None
        self._success: Optional[str] = None
        self._success_expires: Optional[float] = None

    def _expiry(self, seconds: Optional[float]) -> Optional[float]:
        return None if seconds is None else self._clock() + seconds

    def show_error(self, message: str, seconds: Optional[float] = None):
        self._error = message
        self._error_expires = self._expiry(seconds)

    def show_success(self, message: str, seconds: Optional[float] = SUCCESS_MESSAGE_SECONDS):
        self._success = message
        self._success_expires = self._expiry(seconds)

    @property
    def error(self) -> Optional[str]:
        if self._error_expires is not None and self._clock() >= self._error_expires:
            self._error = self._error_expires = None
        return self._error

    @property
    def success(self) -> Optional[str]:
        if self._success_expires is not None and self._clock() >= self._success_expires:
            self._success = self._success_expires = None
        return self._success

    def dismiss(self):
        self._error = self._error_expires = None

    def clear(self):
        self.dismiss()
        self._success = self._success_expires = None
