import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from exceptions import AppError
from file_utils import POSTS_BUCKET, generate_post_media_path, get_public_url, path_from_public_url, remove, upload
from repositories import SqlitePostRepository
from schemas.posts import LikeResponse, PostResponse, PostUpdate
from utils.route_helpers import get_current_user_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])
posts = SqlitePostRepository()


def get_post_or_404(post_id: int) -> dict:
    post = posts.get(post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


def require_author(post: dict, user_id: int, action: str):
    if post["user_id"] != user_id:
        raise HTTPException(status_code=403, detail=f"You can only {action} your own posts")


@router.get("", response_model=List[PostResponse])
def list_posts(user_id: int, current_user_id: int = Depends(get_current_user_id)):
    """A member's posts, newest first, flagged with the caller's likes"""
    rows = posts.list_by_author(user_id)
    liked = posts.liked_post_ids(current_user_id, [r["id"] for r in rows]) if rows else set()
    return [PostResponse(**row, user_liked=row["id"] in liked) for row in rows]


@router.post("", response_model=PostResponse, status_code=201)
async def create_post(
    content: str = Form(""),
    image: Optional[UploadFile] = File(None),
    current_user_id: int = Depends(get_current_user_id)
):
    if not content.strip() and image is None:
        raise HTTPException(status_code=400, detail="Post must have content or an image")

    image_url = None
    if image is not None:
        path = generate_post_media_path(current_user_id, image.filename)
        upload(POSTS_BUCKET, path, await image.read())
        image_url = get_public_url(POSTS_BUCKET, path)

    row = posts.create(current_user_id, content, image_url)
    return PostResponse(**row, user_liked=False)


@router.get("/{post_id}", response_model=PostResponse)
def get_post(post_id: int, current_user_id: int = Depends(get_current_user_id)):
    post = get_post_or_404(post_id)
    return PostResponse(**post, user_liked=post_id in posts.liked_post_ids(current_user_id, [post_id]))


@router.put("/{post_id}", response_model=PostResponse)
def update_post(post_id: int, post_update: PostUpdate, current_user_id: int = Depends(get_current_user_id)):
    require_author(get_post_or_404(post_id), current_user_id, "edit")
    row = posts.update_content(post_id, post_update.content)
    return PostResponse(**row, user_liked=post_id in posts.liked_post_ids(current_user_id, [post_id]))


@router.delete("/{post_id}", status_code=204)
def delete_post(post_id: int, current_user_id: int = Depends(get_current_user_id)):
    post = get_post_or_404(post_id)
    require_author(post, current_user_id, "delete")
    media_path = path_from_public_url(post["image_url"], POSTS_BUCKET)
    if media_path:
        try:
            remove(POSTS_BUCKET, [media_path])
        except (AppError, OSError) as e:
            logger.warning("Could not remove media %s of post %s: %s", media_path, post_id, e)
    posts.delete(post_id)


@router.post("/{post_id}/like", response_model=LikeResponse)
def like_post(post_id: int, current_user_id: int = Depends(get_current_user_id)):
    get_post_or_404(post_id)
    return {"liked": True, "likes_count": posts.add_like(post_id, current_user_id)}


@router.delete("/{post_id}/like", response_model=LikeResponse)
def unlike_post(post_id: int, current_user_id: int = Depends(get_current_user_id)):
    get_post_or_404(post_id)
    return {"liked": False, "likes_count": posts.remove_like(post_id, current_user_id)}
