"""Top-level navigation state: active tab, dark mode, search and the viewed profile."""
import asyncio
import logging
from typing import List, Optional

import content
from repositories.profiles import SEARCH_LIMIT
from state.client import AppClient
from state.identity import IdentityCache
from state.storage import KeyValueStore

logger = logging.getLogger(__name__)

DARK_MODE_KEY = "darkMode"
ACTIVE_TAB_KEY = "activeTab"

ROUTES = {
    "/": "home",
    "/members": "members",
    "/education": "education",
    "/search": "search",
    "/profile": "profile",
    "/settings": "settings",
    "/edit-profile": "edit-profile",
    "/login": "login",
    "/register": "register",
}
TABS = tuple(ROUTES.values())
MEMBERS_ONLY_TABS = {"profile", "settings", "edit-profile"}

ACCESS_DENIED = {
    "view": "access_denied",
    "title": "Access Denied",
    "message": "You need to be logged in to view this page.",
    "login_href": "/login",
}


def tab_for_path(path: str) -> str:
    path = "/" + path.strip("/") if path else "/"
    return ROUTES.get(path, "home")


class AppShell:
    def __init__(self, client: AppClient, identity: IdentityCache, storage: KeyValueStore,
                 restore_tab: bool = False):
        self.client = client
        self.identity = identity
        self.storage = storage
        self.dark_mode = storage.get(DARK_MODE_KEY) == "true"
        self.active_tab = "home"
        if restore_tab and storage.get(ACTIVE_TAB_KEY) in TABS:
            self.active_tab = storage.get(ACTIVE_TAB_KEY)
        self.search_query = ""
        self.viewing_username: Optional[str] = None

    def set_tab(self, tab: str):
        if tab not in TABS:
            raise ValueError(f"Unknown tab: {tab}")
        self.active_tab = tab
        self.storage.set(ACTIVE_TAB_KEY, tab)

    def navigate(self, path: str) -> str:
        self.set_tab(tab_for_path(path))
        return self.active_tab

    def toggle_dark_mode(self) -> bool:
        self.dark_mode = not self.dark_mode
        self.storage.set(DARK_MODE_KEY, "true" if self.dark_mode else "false")
        return self.dark_mode

    def search(self, query: str):
        self.search_query = query
        self.set_tab("search")

    async def search_results(self) -> List[dict]:
        query = self.search_query.strip()
        if not query:
            return []
        results = await asyncio.to_thread(self.client.profiles.search, query, SEARCH_LIMIT)
        return [{**r, "action": {"label": "View Profile", "username": r["username"]}} for r in results]

    def view_profile(self, username: str):
        self.viewing_username = username
        self.set_tab("profile")

    def open_own_profile(self):
        self.viewing_username = None
        self.set_tab("profile")

    def current_view(self) -> dict:
        if self.active_tab in MEMBERS_ONLY_TABS and not self.identity.is_authenticated:
            return dict(ACCESS_DENIED)
        view = {"view": self.active_tab}
        if self.active_tab == "members":
            view.update(content.members_page())
        elif self.active_tab == "education":
            view.update(content.education_page())
        elif self.active_tab == "search":
            view["query"] = self.search_query
        elif self.active_tab == "profile":
            view["viewing_username"] = self.viewing_username
        elif self.active_tab == "home":
            view["is_logged_in"] = self.identity.is_authenticated
        return view

    async def on_login(self):
        await self.identity.refresh()
        self.set_tab("home")

    async def logout(self):
        try:
            await self.identity.logout()
        finally:
            self.viewing_username = None
            self.set_tab("home")
