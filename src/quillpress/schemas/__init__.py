"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .comment import CommentCreate, CommentResponse
from .post import PostCreate, PostDetail, PostResponse, PostUpdate, ReactionResponse
from .user import (
    AccountResponse,
    AccountSummary,
    FollowResponse,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    TokenResponse,
)

__all__ = [
    "CommentCreate", "CommentResponse",
    "PostCreate", "PostDetail", "PostResponse", "PostUpdate", "ReactionResponse",
    "AccountResponse", "AccountSummary", "FollowResponse", "LoginRequest",
    "ProfileUpdateRequest", "RegisterRequest", "TokenResponse",
]
