"""Role/permission predicates.

Everything here is a pure function of a profile dict (``None`` for an anonymous
viewer). The client-side gate uses them to decide which admin controls are
enabled, and the privileged endpoints call the same functions on a profile
re-read from the caller's token.
"""
from typing import NamedTuple, Optional

import config


class ControlState(NamedTuple):
    enabled: bool
    label: str


def is_admin(profile: Optional[dict]) -> bool:
    return bool(profile and profile.get("is_admin"))


def is_owner(profile: Optional[dict]) -> bool:
    if not profile:
        return False
    username = profile.get("username") or ""
    return username.lower() == config.OWNER_USERNAME.lower()


def can_view_admin_panel(profile: Optional[dict]) -> bool:
    return is_admin(profile)


def can_edit_roles(profile: Optional[dict]) -> bool:
    return is_admin(profile)


def can_toggle_admin(profile: Optional[dict]) -> bool:
    return is_owner(profile)


def can_reset_passwords(profile: Optional[dict]) -> bool:
    return is_owner(profile)


def admin_toggle_control(profile: Optional[dict], target_is_admin: bool) -> ControlState:
    label = "Admin" if target_is_admin else "Not Admin"
    if not can_toggle_admin(profile):
        return ControlState(False, label + " (Owner only)")
    return ControlState(True, label)


class PermissionGate:
    """Binds the predicates to whatever profile an identity source currently holds."""

    def __init__(self, identity):
        self._identity = identity

    @property
    def _profile(self) -> Optional[dict]:
        return self._identity.profile

    def is_admin(self) -> bool:
        return is_admin(self._profile)

    def is_owner(self) -> bool:
        return is_owner(self._profile)

    def can_view_admin_panel(self) -> bool:
        return can_view_admin_panel(self._profile)

    def can_edit_roles(self) -> bool:
        return can_edit_roles(self._profile)

    def can_toggle_admin(self) -> bool:
        return can_toggle_admin(self._profile)

    def can_reset_passwords(self) -> bool:
        return can_reset_passwords(self._profile)

    def admin_toggle_control(self, target_is_admin: bool) -> ControlState:
        return admin_toggle_control(self._profile, target_is_admin)
