"""Request/response schemas for auth endpoints, plus the Principal and Role types."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Role(str, Enum):
    """Closed set of roles. ADMIN may do anything the owner of a resource may do."""

    USER = "USER"
    ADMIN = "ADMIN"


class Principal(BaseModel):
    """
    Who is making a request: a username with its granted roles, or anonymous.

    Built fresh per request and passed explicitly into every service call.
    Anonymous has no username and no roles, so it never equals a real user.
    """

    model_config = ConfigDict(frozen=True)

    username: str | None = Field(default=None, min_length=1)
    roles: frozenset[Role] = frozenset()

    @model_validator(mode="after")
    def anonymous_has_no_roles(self) -> "Principal":
        if self.username is None and self.roles:
            raise ValueError("anonymous principal cannot carry roles")
        return self

    @property
    def is_anonymous(self) -> bool:
        return self.username is None

    def has_role(self, role: Role) -> bool:
        """Exact membership test; no role implies another here."""
        return role in self.roles


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")


class SignupRequest(BaseModel):
    """Public self-registration. Always creates a USER account."""

    model_config = ConfigDict(extra="forbid")

    username: str = Field(..., max_length=255, description="Case-sensitive, unique")
    password: str = Field(..., max_length=128, description="Stored only as a bcrypt hash")
