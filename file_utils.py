import logging
import os
import uuid
from pathlib import Path
from typing import List, Optional

import config
from exceptions import NotFoundError, UploadError

logger = logging.getLogger(__name__)

# Configuration
UPLOAD_FOLDER = config.UPLOAD_FOLDER
AVATARS_BUCKET = "avatars"
POSTS_BUCKET = "posts"
BUCKETS = {AVATARS_BUCKET, POSTS_BUCKET}

ALLOWED_IMAGE_EXTENSIONS = {'.png', '.jpg', '.jpeg', '.webp', '.gif'}
MAX_FILE_SIZE = {
    AVATARS_BUCKET: 5 * 1024 * 1024,  # 5MB
    POSTS_BUCKET: 10 * 1024 * 1024,  # 10MB
}

def _bucket_dir(bucket: str) -> Path:
    if bucket not in BUCKETS:
        raise NotFoundError("Bucket not found")
    return Path(UPLOAD_FOLDER) / bucket

def _object_path(bucket: str, path: str) -> Path:
    base = _bucket_dir(bucket).resolve()
    target = (base / path).resolve()
    # Object keys must stay inside their bucket
    if base != target and base not in target.parents:
        raise UploadError("Invalid object path")
    return target

def file_extension(filename: str) -> str:
    """Lower-cased extension, falling back to .png for anything not allowed"""
    ext = Path(filename or "").suffix.lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        ext = '.png'
    return ext

def generate_avatar_path(user_id: int, original_filename: str) -> str:
    return f"{user_id}-{uuid.uuid4().hex}{file_extension(original_filename)}"

def generate_post_media_path(user_id: int, original_filename: str) -> str:
    return f"post-images/{user_id}-{uuid.uuid4().hex}{file_extension(original_filename)}"

def upload(bucket: str, path: str, content: bytes, upsert: bool = False) -> str:
    """Store an object and return its key. Raises UploadError before anything is written."""
    if not content:
        raise UploadError("File is empty")
    limit = MAX_FILE_SIZE.get(bucket)
    if limit is not None and len(content) > limit:
        raise UploadError(f"File exceeds {limit // (1024 * 1024)}MB limit.")
    target = _object_path(bucket, path)
    if target.exists() and not upsert:
        raise UploadError("The resource already exists", 409)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, 'wb') as f:
            f.write(content)
    except OSError as e:
        logger.error("Upload to %s/%s failed: %s", bucket, path, e)
        raise UploadError("Failed to save file", 500) from e
    return path

def get_public_url(bucket: str, path: str) -> str:
    return f"{config.PUBLIC_BASE_URL}/storage/{bucket}/{path}"

def path_from_public_url(url: Optional[str], bucket: str) -> Optional[str]:
    """Recover an object key from its public URL, or None if the URL does not point into the bucket"""
    if not url:
        return None
    parts = url.split(f"/{bucket}/", 1)
    if len(parts) != 2 or not parts[1]:
        return None
    return parts[1]

def remove(bucket: str, paths: List[str]) -> List[str]:
    """Delete objects; missing ones are skipped. Returns the keys actually removed"""
    removed = []
    for path in paths:
        try:
            target = _object_path(bucket, path)
            if target.is_file():
                os.remove(target)
                removed.append(path)
        except (OSError, UploadError) as e:
            logger.warning("Could not remove %s/%s: %s", bucket, path, e)
    return removed

def resolve_object(bucket: str, path: str) -> Optional[Path]:
    try:
        target = _object_path(bucket, path)
    except UploadError:
        return None
    return target if target.is_file() else None
