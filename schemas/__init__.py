# Schemas package
from .auth import RegisterRequest, LoginRequest, Token, UserResponse, MeResponse
from .profile import ProfileResponse, ProfileUpdate, ProfileSearchResult, AvatarResponse
from .posts import PostUpdate, PostResponse, LikeResponse, CommentCreate, CommentAuthor, CommentResponse, CommentDeleteResponse
from .admin import AdminUserResponse, RoleUpdate, AdminFlagUpdate, ChangePasswordRequest, UpdateEmailRequest, UpdatePasswordRequest, SuccessResponse, LogoutAllResponse
