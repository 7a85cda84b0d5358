from typing import List, Optional

from pydantic import BaseModel

from exceptions import InvalidInputError


class AuthorSummary(BaseModel):
    username: str
    avatar_url: Optional[str] = None


class MediaFile(BaseModel):
    filename: str
    content: bytes
    content_type: Optional[str] = None


class FeedPost(BaseModel):
    id: int
    user_id: int
    content: str
    image_url: Optional[str] = None
    created_at: str
    updated_at: Optional[str] = None
    likes_count: int = 0
    comments_count: int = 0
    user_liked: bool = False


class CommentNode(BaseModel):
    """A comment and, for top-level comments only, its replies.

    Depth is capped at one level: a node with a parent can never hold replies,
    and a reply must point at the node it is attached to.
    """

    id: int
    post_id: int
    user_id: int
    content: str
    parent_comment_id: Optional[int] = None
    created_at: str
    likes_count: int = 0
    author: Optional[AuthorSummary] = None
    replies: List["CommentNode"] = []
    replies_loaded: bool = False

    @property
    def is_reply(self) -> bool:
        return self.parent_comment_id is not None

    def _check_reply(self, reply: "CommentNode"):
        if self.is_reply:
            raise InvalidInputError("Replies cannot be nested more than one level deep")
        if reply.parent_comment_id != self.id:
            raise InvalidInputError("Reply does not belong to this comment")
        if reply.replies:
            raise InvalidInputError("Replies cannot have replies of their own")

    def attach_replies(self, replies: List["CommentNode"]):
        for reply in replies:
            self._check_reply(reply)
        self.replies = list(replies)
        self.replies_loaded = True

    def add_reply(self, reply: "CommentNode"):
        self._check_reply(reply)
        self.replies.append(reply)

    def remove_reply(self, reply_id: int) -> bool:
        before = len(self.replies)
        self.replies = [r for r in self.replies if r.id != reply_id]
        return len(self.replies) != before

    def find(self, comment_id: int) -> Optional["CommentNode"]:
        if self.id == comment_id:
            return self
        for reply in self.replies:
            if reply.id == comment_id:
                return reply
        return None


CommentNode.model_rebuild()
