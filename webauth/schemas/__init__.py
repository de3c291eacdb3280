"""
Pydantic schemas for the HTTP layer.
"""

from webauth.schemas.auth import (
    CreateUserRequest,
    UpdateUserRequest,
    LoginRequest,
    CreateJwtUserRequest,
    GetJwtRequest,
    UserResponse,
    JwtUserResponse,
    CreatedUserResponse,
    CreatedJwtUserResponse,
    TokenResponse,
    TokenSubjectResponse,
)
from webauth.schemas.common import ErrorResponse, SuccessResponse, HealthResponse

__all__ = [
    "CreateUserRequest",
    "UpdateUserRequest",
    "LoginRequest",
    "CreateJwtUserRequest",
    "GetJwtRequest",
    "UserResponse",
    "JwtUserResponse",
    "CreatedUserResponse",
    "CreatedJwtUserResponse",
    "TokenResponse",
    "TokenSubjectResponse",
    "ErrorResponse",
    "SuccessResponse",
    "HealthResponse",
]
