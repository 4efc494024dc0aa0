"""Request DTOs for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Request DTO for POST /auth/."""

    username: str = Field(..., description="User name", min_length=1)
    password: str = Field(..., description="Plain text password", min_length=1)


class CreateUserRequest(BaseModel):
    """Request DTO for POST /users/.

    Unknown fields are kept and stored with the user document.
    """

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., description="Unique user name", min_length=1)
    password: str = Field(..., description="Plain text password, stored hashed", min_length=1)
    email: str = Field("", description="Contact address")
    language: str = Field("en-GB", description="UI language")
    roles: list[str] = Field(default_factory=list, description="Role identifiers")
