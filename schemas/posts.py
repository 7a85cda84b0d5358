from typing import Optional

from pydantic import BaseModel, field_validator


class PostUpdate(BaseModel):
    content: str

    @field_validator('content')
    def validate_content(cls, v):
        if not v or not v.strip():
            raise ValueError('Content cannot be empty')
        return v


class PostResponse(BaseModel):
    id: int
    user_id: int
    content: str
    image_url: Optional[str] = None
    likes_count: int
    comments_count: int
    created_at: str
    updated_at: Optional[str] = None
    user_liked: bool = False


class LikeResponse(BaseModel):
    liked: bool
    likes_count: int


class CommentCreate(BaseModel):
    content: str
    parent_comment_id: Optional[int] = None

    @field_validator('content')
    def validate_content(cls, v):
        if not v or not v.strip():
            raise ValueError('Comment cannot be empty')
        return v


class CommentAuthor(BaseModel):
    username: str
    avatar_url: Optional[str] = None


class CommentResponse(BaseModel):
    id: int
    post_id: int
    user_id: int
    content: str
    parent_comment_id: Optional[int] = None
    created_at: str
    likes_count: int = 0
    author: Optional[CommentAuthor] = None
    user_liked: bool = False


class CommentDeleteResponse(BaseModel):
    removed: int
