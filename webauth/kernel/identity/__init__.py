"""
Identity Core - Credential hashing, identifiers, tokens and account lifecycle.
"""

from webauth.kernel.identity.password import (
    PasswordHasher,
    generate_salt,
    compute_hash,
    hashes_match,
)
from webauth.kernel.identity.id_allocator import IdAllocator
from webauth.kernel.identity.jwt import (
    TokenService,
    TokenClaims,
    IssuedToken,
    get_token_service,
)
from webauth.kernel.identity.account_kinds import (
    AccountKind,
    SIMPLE_ACCOUNT,
    JWT_ACCOUNT,
    normalize_key,
)
from webauth.kernel.identity.identity_service import IdentityService, AuthResult

__all__ = [
    "PasswordHasher",
    "generate_salt",
    "compute_hash",
    "hashes_match",
    "IdAllocator",
    "TokenService",
    "TokenClaims",
    "IssuedToken",
    "get_token_service",
    "AccountKind",
    "SIMPLE_ACCOUNT",
    "JWT_ACCOUNT",
    "normalize_key",
    "IdentityService",
    "AuthResult",
]
