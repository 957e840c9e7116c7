"""Account and authentication Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class RegisterRequest(BaseModel):
    """Schema for account registration."""

    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1, max_length=72)

    @field_validator("username", "first_name", "last_name")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        """Trim identity fields and reject blank values."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field must not be blank")
        return stripped


class LoginRequest(BaseModel):
    """Schema for login submissions."""

    username: str
    password: str


class TokenResponse(BaseModel):
    """Session token returned after register or login."""

    token: str = Field(..., description="Signed session token")
    message: str | None = None


class AccountSummary(BaseModel):
    """Public fields of an account as shown in lists."""

    id: int
    username: str
    first_name: str
    last_name: str

    model_config = ConfigDict(from_attributes=True)


class AccountResponse(AccountSummary):
    """Account details without the password hash."""

    email: str
    followers: list[int] = Field(default_factory=list, validation_alias="follower_ids")
    following: list[int] = Field(default_factory=list, validation_alias="following_ids")


class ProfileUpdateRequest(BaseModel):
    """Schema for updating the caller's own profile."""

    email: EmailStr | None = None
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    password: str | None = Field(None, min_length=1, max_length=72)


class FollowResponse(BaseModel):
    """Result of a follow/unfollow toggle."""

    message: str
    is_following: bool
    followers: list[int]
    following: list[int]
