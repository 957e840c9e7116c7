# src/quillpress/api/v1/endpoints/posts.py
"""Post-related endpoints for the QuillPress API."""

from __future__ import annotations

from fastapi import APIRouter, Query, status

from quillpress.api.v1.dependencies import (
    CurrentIdentityDep,
    PostServiceDep,
    SocialServiceDep,
)
from quillpress.models import PostStatus
from quillpress.schemas.comment import CommentCreate, CommentResponse
from quillpress.schemas.post import (
    PostCreate,
    PostDetail,
    PostResponse,
    PostUpdate,
    ReactionResponse,
)
from quillpress.services.social import ReactionState

router = APIRouter(prefix="/posts", tags=["posts"])


def _reaction_response(state: ReactionState) -> ReactionResponse:
    return ReactionResponse(
        likes=state.likes,
        dislikes=state.dislikes,
        is_liked=state.is_liked,
        is_disliked=state.is_disliked,
    )


@router.get("/", response_model=list[PostResponse])
async def list_posts(
    posts: PostServiceDep,
    status_filter: PostStatus | None = Query(None, alias="status", description="draft or published"),
    user: str | None = Query(None, description="Filter by owning account id"),
) -> list[PostResponse]:
    """List posts newest first, optionally filtered by status and owner.

    Without filters every post is returned, drafts included.
    """
    owner_id = None
    if user:
        if not user.strip().isdigit():
            # No account has a malformed id, so nothing can match.
            return []
        owner_id = int(user)
    return [
        PostResponse.model_validate(post)
        for post in posts.list_posts(status=status_filter, owner_id=owner_id)
    ]


@router.get("/{post_id}", response_model=PostDetail)
async def get_post(post_id: str, posts: PostServiceDep) -> PostDetail:
    """Return a post with its comments; each call counts one view."""
    view = posts.read(post_id)
    detail = PostDetail.model_validate(view.post)
    detail.comments = [CommentResponse.model_validate(c) for c in view.comments]
    return detail


@router.post("/", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    payload: PostCreate,
    identity: CurrentIdentityDep,
    posts: PostServiceDep,
) -> PostResponse:
    """Create a post owned by the caller (draft unless a status is given)."""
    post = posts.create(identity.account_id, payload.model_dump())
    return PostResponse.model_validate(post)


@router.patch("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    payload: PostUpdate,
    identity: CurrentIdentityDep,
    posts: PostServiceDep,
) -> PostResponse:
    """Apply a sparse update to a post owned by the caller."""
    post = posts.update(post_id, identity.account_id, payload.model_dump(exclude_unset=True))
    return PostResponse.model_validate(post)


@router.post("/{post_id}/publish", response_model=PostResponse)
async def publish_post(
    post_id: str,
    identity: CurrentIdentityDep,
    posts: PostServiceDep,
    payload: PostUpdate | None = None,
) -> PostResponse:
    """Publish a post, optionally saving pending edits in the same write."""
    changes = payload.model_dump(exclude_unset=True) if payload else {}
    changes.pop("status", None)
    post = posts.publish(post_id, identity.account_id, changes)
    return PostResponse.model_validate(post)


@router.delete("/{post_id}")
async def delete_post(
    post_id: str,
    identity: CurrentIdentityDep,
    posts: PostServiceDep,
) -> dict[str, str]:
    """Delete a post owned by the caller, with its comments and reactions."""
    posts.delete(post_id, identity.account_id)
    return {"message": "Post deleted successfully"}


@router.post("/{post_id}/like", response_model=ReactionResponse)
async def like_post(
    post_id: str,
    identity: CurrentIdentityDep,
    social: SocialServiceDep,
) -> ReactionResponse:
    """Toggle the caller's like; a like replaces an existing dislike."""
    return _reaction_response(social.toggle_like(identity.account_id, post_id))


@router.post("/{post_id}/dislike", response_model=ReactionResponse)
async def dislike_post(
    post_id: str,
    identity: CurrentIdentityDep,
    social: SocialServiceDep,
) -> ReactionResponse:
    """Toggle the caller's dislike; a dislike replaces an existing like."""
    return _reaction_response(social.toggle_dislike(identity.account_id, post_id))


@router.get("/{post_id}/comments", response_model=list[CommentResponse])
async def list_comments(post_id: str, social: SocialServiceDep) -> list[CommentResponse]:
    """Return the post's comments, newest first."""
    return [CommentResponse.model_validate(c) for c in social.list_comments(post_id)]


@router.post(
    "/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_comment(
    post_id: str,
    payload: CommentCreate,
    identity: CurrentIdentityDep,
    social: SocialServiceDep,
) -> CommentResponse:
    """Attach a comment from the caller to an existing post."""
    comment = social.add_comment(identity.account_id, post_id, payload.content)
    return CommentResponse.model_validate(comment)
