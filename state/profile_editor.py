import asyncio
import logging
from typing import Dict, Optional

from exceptions import AppError, InvalidInputError
from file_utils import AVATARS_BUCKET, generate_avatar_path
from repositories import SOCIAL_LINK_FIELDS
from state.banner import Banner
from state.client import AppClient
from state.models import MediaFile

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("bio",) + SOCIAL_LINK_FIELDS


class ProfileEditor:
    def __init__(self, client: AppClient):
        self.client = client
        self.banner = Banner()
        self.fields: Dict[str, str] = {name: "" for name in EDITABLE_FIELDS}
        self.avatar_url: Optional[str] = None
        self.saving = False
        self.uploading = False

    async def load(self) -> bool:
        try:
            user = await self.client.auth.require_user()
            profile = await asyncio.to_thread(self.client.profiles.get_by_id, user["id"])
        except AppError as e:
            self.banner.show_error(e.message)
            return False
        if profile:
            self.fields = {name: profile.get(name) or "" for name in EDITABLE_FIELDS}
            self.avatar_url = profile.get("avatar_url")
        return True

    async def save(self, **changes) -> bool:
        unknown = set(changes) - set(EDITABLE_FIELDS)
        self.saving = True
        try:
            if unknown:
                raise InvalidInputError(f"Unknown profile fields: {', '.join(sorted(unknown))}")
            user = await self.client.auth.require_user()
            fields = {**self.fields, **changes}
            await asyncio.to_thread(self.client.profiles.update, user["id"], fields)
        except AppError as e:
            logger.error("Error updating profile: %s", e)
            self.banner.show_error(e.message)
            return False
        finally:
            self.saving = False
        self.fields = fields
        self.banner.show_success("Profile updated successfully!")
        return True

    async def upload_avatar(self, media: MediaFile) -> Optional[str]:
        self.uploading = True
        try:
            user = await self.client.auth.require_user()
            path = generate_avatar_path(user["id"], media.filename)
            await asyncio.to_thread(self.client.storage.upload, AVATARS_BUCKET, path, media.content, True)
            url = self.client.storage.get_public_url(AVATARS_BUCKET, path)
            await asyncio.to_thread(self.client.profiles.update, user["id"], {"avatar_url": url})
        except AppError as e:
            logger.error("Error uploading avatar: %s", e)
            self.banner.show_error(e.message)
            return None
        finally:
            self.uploading = False
        self.avatar_url = url
        self.banner.show_success("Avatar updated successfully!")
        return url
