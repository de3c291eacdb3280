"""
FastAPI dependencies for database sessions, identity services and bearer
token validation.
"""

from typing import Annotated, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from webauth.database import get_db
from webauth.exceptions import InvalidToken
from webauth.kernel.identity.account_kinds import JWT_ACCOUNT, SIMPLE_ACCOUNT
from webauth.kernel.identity.identity_service import IdentityService
from webauth.kernel.identity.jwt import TokenClaims, TokenService, get_token_service


# Security scheme
security = HTTPBearer(auto_error=False)

DbSession = Annotated[AsyncSession, Depends(get_db)]
Tokens = Annotated[TokenService, Depends(get_token_service)]


def get_user_service(db: DbSession, tokens: Tokens) -> IdentityService:
    """Lifecycle operations for simple (email) accounts."""
    return IdentityService(db, SIMPLE_ACCOUNT, token_service=tokens)


def get_jwt_user_service(db: DbSession, tokens: Tokens) -> IdentityService:
    """Lifecycle operations for token-bearing (name) accounts."""
    return IdentityService(db, JWT_ACCOUNT, token_service=tokens)


UserService = Annotated[IdentityService, Depends(get_user_service)]
JwtUserService = Annotated[IdentityService, Depends(get_jwt_user_service)]


async def get_current_claims(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    tokens: Tokens,
) -> TokenClaims:
    """Validate the bearer token or raise InvalidToken (mapped to 401)."""
    if not credentials:
        raise InvalidToken("Not authenticated.")
    return tokens.validate(credentials.credentials)


CurrentClaims = Annotated[TokenClaims, Depends(get_current_claims)]

