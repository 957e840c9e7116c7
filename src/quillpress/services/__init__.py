# src/quillpress/services/__init__.py
"""Business logic services for the QuillPress application."""

from .credentials import CredentialStore
from .posts import PostService
from .social import SocialService

__all__ = [
    "CredentialStore",
    "PostService",
    "SocialService",
]
