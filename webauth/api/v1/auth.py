"""
Authentication endpoints.

Handlers only translate between HTTP and IdentityService; every error the
service raises is mapped to a status code by the handlers in main.py.
"""

from typing import List

from fastapi import APIRouter, Request, Response, status

from webauth.api.deps import CurrentClaims, JwtUserService, UserService
from webauth.schemas.auth import (
    CreateJwtUserRequest,
    CreateUserRequest,
    CreatedJwtUserResponse,
    CreatedUserResponse,
    GetJwtRequest,
    JwtUserResponse,
    LoginRequest,
    TokenResponse,
    TokenSubjectResponse,
    UpdateUserRequest,
    UserResponse,
)
from webauth.schemas.common import SuccessResponse

router = APIRouter()


# --- Token-bearing accounts ---


@router.get("/jwt_user/{account_id}", response_model=JwtUserResponse)
async def get_jwt_user(account_id: int, service: JwtUserService):
    """Get a token-bearing account by id."""
    account = await service.get(account_id)
    return JwtUserResponse.model_validate(account)


@router.post(
    "/jwt_user",
    response_model=CreatedJwtUserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_jwt_user(
    request: Request,
    data: CreateJwtUserRequest,
    service: JwtUserService,
    response: Response,
):
    """Register a token-bearing account."""
    account = await service.register(data.name, data.password)
    response.headers["Location"] = str(request.url_for("get_jwt_user", account_id=account.id))
    return CreatedJwtUserResponse(id=account.id, name=account.name)


@router.post("/get_jwt", response_model=TokenResponse)
async def get_jwt(data: GetJwtRequest, service: JwtUserService):
    """Exchange name and password for a bearer token."""
    result = await service.authenticate(data.name, data.password)
    return TokenResponse(
        token=result.token.token,
        token_type=result.token.token_type,
        expires_at=result.token.expires_at,
    )


@router.get("/me", response_model=TokenSubjectResponse)
async def get_token_subject(claims: CurrentClaims):
    """Return the subject of the presented bearer token."""
    return TokenSubjectResponse(
        subject=claims.sub,
        issuer=claims.iss,
        audience=claims.aud,
        expires_at=claims.exp,
    )


# --- Simple accounts ---


@router.get("/user/{account_id}", response_model=UserResponse)
async def get_user(account_id: int, service: UserService):
    """Get a simple account by id."""
    account = await service.get(account_id)
    return UserResponse.model_validate(account)


@router.get("/users", response_model=List[UserResponse])
async def list_users(service: UserService):
    """List all simple accounts (salt and hash are never included)."""
    return [UserResponse.model_validate(row) for row in await service.list_accounts()]


@router.post(
    "/user",
    response_model=CreatedUserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_user(data: CreateUserRequest, service: UserService):
    """Register a simple account."""
    account = await service.register(
        data.email,
        data.password,
        first_name=data.first_name,
        last_name=data.last_name,
        two_fa_key=data.two_fa_key,
        two_fa_uri=data.two_fa_uri,
    )
    return CreatedUserResponse(id=account.id, email=account.email)


@router.patch("/user/{account_id}", response_model=UserResponse)
async def update_user(
    account_id: int,
    data: UpdateUserRequest,
    service: UserService,
):
    """Update the supplied fields of a simple account."""
    account = await service.update_credentials(
        account_id,
        **data.model_dump(exclude_unset=True),
    )
    return UserResponse.model_validate(account)


@router.delete("/user/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(account_id: int, service: UserService):
    """Delete a simple account."""
    await service.delete(account_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/login", response_model=SuccessResponse)
async def login(data: LoginRequest, service: UserService):
    """Verify email and password of a simple account."""
    await service.authenticate(data.email, data.password)
    return SuccessResponse(message="Login successful.")
