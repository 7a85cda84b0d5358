from typing import List

from fastapi import APIRouter, Depends, HTTPException

from repositories import SqliteCommentRepository, SqlitePostRepository, SqliteProfileRepository
from schemas.posts import CommentCreate, CommentDeleteResponse, CommentResponse, LikeResponse
from utils.route_helpers import get_current_user_id

router = APIRouter(tags=["comments"])
comments = SqliteCommentRepository()
posts = SqlitePostRepository()
profiles = SqliteProfileRepository()


def get_comment_responses(rows: List[dict], viewer_id: int) -> List[CommentResponse]:
    """Attach author summaries and the viewer's like flags to comment rows"""
    if not rows:
        return []
    summaries = profiles.get_summaries({r["user_id"] for r in rows})
    liked = comments.liked_comment_ids(viewer_id, [r["id"] for r in rows])
    result = []
    for row in rows:
        summary = summaries.get(row["user_id"])
        author = {"username": summary["username"], "avatar_url": summary["avatar_url"]} if summary else None
        result.append(CommentResponse(**row, author=author, user_liked=row["id"] in liked))
    return result


def get_comment_or_404(comment_id: int) -> dict:
    comment = comments.get(comment_id)
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    return comment


@router.get("/posts/{post_id}/comments", response_model=List[CommentResponse])
def list_comments(post_id: int, current_user_id: int = Depends(get_current_user_id)):
    """Top-level comments of a post, oldest first"""
    if not posts.get(post_id):
        raise HTTPException(status_code=404, detail="Post not found")
    return get_comment_responses(comments.list_top_level(post_id), current_user_id)


@router.post("/posts/{post_id}/comments", response_model=CommentResponse, status_code=201)
def create_comment(post_id: int, comment: CommentCreate, current_user_id: int = Depends(get_current_user_id)):
    row = comments.create(post_id, current_user_id, comment.content, comment.parent_comment_id)
    return get_comment_responses([row], current_user_id)[0]


@router.get("/comments/{comment_id}/replies", response_model=List[CommentResponse])
def list_replies(comment_id: int, current_user_id: int = Depends(get_current_user_id)):
    get_comment_or_404(comment_id)
    return get_comment_responses(comments.list_replies(comment_id), current_user_id)


@router.delete("/comments/{comment_id}", response_model=CommentDeleteResponse)
def delete_comment(comment_id: int, current_user_id: int = Depends(get_current_user_id)):
    comment = get_comment_or_404(comment_id)
    if comment["user_id"] != current_user_id:
        raise HTTPException(status_code=403, detail="You can only delete your own comments")
    return {"removed": comments.delete(comment_id)}


@router.post("/comments/{comment_id}/like", response_model=LikeResponse)
def like_comment(comment_id: int, current_user_id: int = Depends(get_current_user_id)):
    get_comment_or_404(comment_id)
    return {"liked": True, "likes_count": comments.add_like(comment_id, current_user_id)}


@router.delete("/comments/{comment_id}/like", response_model=LikeResponse)
def unlike_comment(comment_id: int, current_user_id: int = Depends(get_current_user_id)):
    get_comment_or_404(comment_id)
    return {"liked": False, "likes_count": comments.remove_like(comment_id, current_user_id)}
