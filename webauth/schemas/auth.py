"""
Authentication schemas.

Response models never declare salt or hash, so they cannot leak even when
built from a full ORM row.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CreateUserRequest(BaseModel):
    """Simple account registration request."""

    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., max_length=255)
    password: str = Field(..., max_length=128)
    two_fa_key: Optional[str] = Field(None, max_length=255)
    two_fa_uri: Optional[str] = Field(None, max_length=1024)


class UpdateUserRequest(BaseModel):
    """Partial update of a simple account; omitted fields stay unchanged."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=255)
    last_name: Optional[str] = Field(None, min_length=1, max_length=255)
    password: Optional[str] = Field(None, max_length=128)
    two_fa_key: Optional[str] = Field(None, max_length=255)
    two_fa_uri: Optional[str] = Field(None, max_length=1024)


class LoginRequest(BaseModel):
    """Simple account login request."""

    email: str
    password: str


class CreateJwtUserRequest(BaseModel):
    """Token-bearing account registration request."""

    name: str = Field(..., max_length=255)
    password: str = Field(..., max_length=128)


class GetJwtRequest(BaseModel):
    """Token-bearing account login request."""

    name: str
    password: str


class UserResponse(BaseModel):
    """Simple account projection."""

    id: int
    first_name: str
    last_name: str
    email: str
    two_fa_key: Optional[str] = None
    two_fa_uri: Optional[str] = None

    class Config:
        from_attributes = True


class JwtUserResponse(BaseModel):
    """Token-bearing account projection."""

    id: int
    name: str

    class Config:
        from_attributes = True


class CreatedUserResponse(BaseModel):
    id: int
    email: str


class CreatedJwtUserResponse(BaseModel):
    id: int
    name: str


class TokenResponse(BaseModel):
    """Bearer token issued on login."""

    token: str
    token_type: str = "bearer"
    expires_at: datetime


class TokenSubjectResponse(BaseModel):
    """Claims of the presented bearer token."""

    subject: str
    issuer: str
    audience: str
    expires_at: datetime
