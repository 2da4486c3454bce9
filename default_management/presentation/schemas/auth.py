"""User and authentication Pydantic schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from default_management.domain.entities import UserRole


class RegisterRequestSchema(BaseModel):
    """Schema for POST /api/v1/register request body."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "username": "alice",
                    "password": "secret123",
                    "role": "Applicant",
                }
            ]
        }
    )

    username: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="Unique login name",
        examples=["alice"],
    )
    password: str = Field(
        ...,
        min_length=6,
        max_length=72,
        description="Plain-text password, stored hashed",
    )
    role: UserRole = Field(
        ...,
        description="Role granted to the user",
        examples=["Applicant"],
    )

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("username cannot be empty or whitespace")
        return v.strip()


class LoginRequestSchema(BaseModel):
    """Schema for POST /api/v1/login request body."""

    username: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=72)


class LoginResponseSchema(BaseModel):
    token: str = Field(..., description="Bearer access token")


class UserResponseSchema(BaseModel):
    """Public view of a user. The password hash is never exposed."""

    id: str
    username: str
    role: UserRole
    created_at: datetime | None = None
