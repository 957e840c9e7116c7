"""Account profile and follow-graph endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query
from pydantic import Field

from quillpress.api.v1.dependencies import (
    CredentialStoreDep,
    CurrentIdentityDep,
    OptionalIdentityDep,
    PostServiceDep,
    SocialServiceDep,
)
from quillpress.core.settings import settings
from quillpress.schemas.post import PostResponse
from quillpress.schemas.user import (
    AccountResponse,
    AccountSummary,
    FollowResponse,
    ProfileUpdateRequest,
)
from quillpress.services.posts import parse_id

router = APIRouter(prefix="/users", tags=["users"])


class ProfileResponse(AccountSummary):
    """Public profile with the follow graph and recent published posts."""

    followers: list[AccountSummary]
    following: list[AccountSummary]
    posts: list[PostResponse] = Field(default_factory=list)
    is_following: bool | None = None


@router.get("/search", response_model=list[AccountSummary])
async def search_users(
    store: CredentialStoreDep,
    q: str | None = Query(None, description="Matches username, first or last name"),
) -> list[AccountSummary]:
    """Search accounts; an empty query lists everyone."""
    return [AccountSummary.model_validate(a) for a in store.search(q)]


@router.patch("/me", response_model=AccountResponse)
async def update_me(
    payload: ProfileUpdateRequest,
    identity: CurrentIdentityDep,
    store: CredentialStoreDep,
) -> AccountResponse:
    """Update the caller's own profile; a new password is re-hashed."""
    account = store.get(identity.account_id)
    account = store.update_profile(account, payload.model_dump(exclude_unset=True))
    return AccountResponse.model_validate(account)


@router.get("/{user_id}/followers", response_model=list[AccountSummary])
async def list_followers(user_id: str, social: SocialServiceDep) -> list[AccountSummary]:
    """Accounts following `user_id`."""
    return [AccountSummary.model_validate(a) for a in social.followers(user_id)]


@router.get("/{user_id}/following", response_model=list[AccountSummary])
async def list_following(user_id: str, social: SocialServiceDep) -> list[AccountSummary]:
    """Accounts `user_id` follows."""
    return [AccountSummary.model_validate(a) for a in social.following(user_id)]


@router.post("/{user_id}/follow", response_model=FollowResponse)
async def toggle_follow(
    user_id: str,
    identity: CurrentIdentityDep,
    social: SocialServiceDep,
) -> FollowResponse:
    """Follow the account, or unfollow it if the caller already follows it."""
    state = social.toggle_follow(identity.account_id, user_id)
    return FollowResponse(
        message="Followed successfully" if state.is_following else "Unfollowed successfully",
        is_following=state.is_following,
        followers=state.followers,
        following=state.following,
    )


@router.get("/{user_id}", response_model=ProfileResponse)
async def get_profile(
    user_id: str,
    viewer: OptionalIdentityDep,
    store: CredentialStoreDep,
    posts: PostServiceDep,
    social: SocialServiceDep,
) -> ProfileResponse:
    """Return a profile with its latest published posts."""
    account = store.get(parse_id(user_id, detail="User not found"))
    recent = posts.recent_published(account.id, settings.recent_posts_limit)
    is_following = None
    if viewer is not None and viewer.account_id != account.id:
        is_following = social.is_following(viewer.account_id, account.id)
    return ProfileResponse(
        id=account.id,
        username=account.username,
        first_name=account.first_name,
        last_name=account.last_name,
        followers=[AccountSummary.model_validate(a) for a in account.followers],
        following=[AccountSummary.model_validate(a) for a in account.following],
        posts=[PostResponse.model_validate(p) for p in recent],
        is_following=is_following,
    )
