# Typed access to the relational store
from .profiles import ProfileRepository, SqliteProfileRepository, ROLES, SOCIAL_LINK_FIELDS
from .posts import PostRepository, SqlitePostRepository
from .comments import CommentRepository, SqliteCommentRepository
